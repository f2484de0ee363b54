"""Tests for timestamp conversion, SQL type extraction and SQL cleaning."""

import pytest

from slowlog_converter.deriver import (
    clean_sql,
    derive_fields,
    extract_sql_type,
    parse_timestamp,
)
from slowlog_converter.errors import TimeParseError
from slowlog_converter.parser import parse_record


class TestParseTimestamp:
    def test_reference_value_is_utc(self):
        assert parse_timestamp("2023-05-01 10:00:00") == 1682935200.0

    def test_epoch(self):
        assert parse_timestamp("1970-01-01 00:00:00") == 0.0

    def test_leap_day(self):
        assert parse_timestamp("2024-02-29 23:59:59") == 1709251199.0

    def test_result_is_float(self):
        assert isinstance(parse_timestamp("2023-05-01 10:00:00"), float)

    @pytest.mark.parametrize("text, nanos", [
        ("2023-05-01 10:00:00.5", 500_000_000),
        ("2023-05-01 10:00:00,25", 250_000_000),
        ("2023-05-01 10:00:00.000001", 1_000),
        ("2023-05-01 10:00:00.123456789", 123_456_789),
        ("2023-05-01 10:00:00.1234567899", 123_456_789),
    ])
    def test_fractional_seconds(self, text, nanos):
        assert parse_timestamp(text) == float(1682935200) + nanos / 1e9

    @pytest.mark.parametrize("text", [
        "",
        "2023/05/01 10:00:00",
        "2023-5-01 10:00:00",
        "2023-05-1 10:00:00",
        "23-05-01 10:00:00",
        "2023-05-01T10:00:00",
        "2023-05-01  10:00:00",
        "2023-05-01 10:00",
        "2023-05-01 10:00:00 ",
        " 2023-05-01 10:00:00",
        "2023-05-01 10:00:00\n",
        "2023-05-01 10:00:00Z",
        "2023-05-01 10:00:00.",
        "2023-05-01 10:00:00 +0800",
        "\uff12\uff10\uff12\uff13-05-01 10:00:00",
    ])
    def test_layout_mismatch(self, text):
        with pytest.raises(TimeParseError) as exc_info:
            parse_timestamp(text)
        assert exc_info.value.text == text
        assert exc_info.value.stage == "derive"

    @pytest.mark.parametrize("text", [
        "2023-00-01 00:00:00",
        "2023-13-01 00:00:00",
        "2023-04-31 00:00:00",
        "2023-02-29 00:00:00",
        "2023-05-00 00:00:00",
        "2023-05-01 24:00:00",
        "2023-05-01 10:60:00",
        "2023-05-01 10:00:60",
        "0000-01-01 00:00:00",
    ])
    def test_out_of_range(self, text):
        with pytest.raises(TimeParseError):
            parse_timestamp(text)


class TestExtractSqlType:
    @pytest.mark.parametrize("sql, expected", [
        ('"SELECT * FROM t"', "select"),
        ("SELECT * FROM t", "select"),
        ("insert into t values (1)", "insert"),
        ('  "  Update t SET a = 1"  ', "update"),
        ("\tDELETE\nFROM t", "delete"),
        ('""BEGIN""', "begin"),
        ("select\u3000x", "select"),
        ("  ( SELECT 1 )", "("),
    ])
    def test_first_token_lowercased(self, sql, expected):
        assert extract_sql_type(sql) == expected

    @pytest.mark.parametrize("sql", ["", " ", "\t\n ", '""', '  "  "  '])
    def test_blank_sql_yields_empty_type(self, sql):
        assert extract_sql_type(sql) == ""

    def test_ascii_separators_are_not_whitespace(self):
        assert extract_sql_type("SELECT\x1f1") == "select\x1f1"

    @pytest.mark.parametrize("sql, expected", [
        ("\u039f\u0394\u039f\u03a3 x", "\u03bf\u03b4\u03bf\u03c3"),
        ("\u0130NSERT x", "insert"),
        ("S\u00c9LECT x", "s\u00e9lect"),
    ])
    def test_lowercases_one_character_at_a_time(self, sql, expected):
        assert extract_sql_type(sql) == expected


class TestCleanSql:
    def test_strips_surrounding_quotes(self):
        assert clean_sql('"SELECT * FROM t"') == "SELECT * FROM t"

    def test_strips_repeated_quotes(self):
        assert clean_sql('""SELECT 1""') == "SELECT 1"

    def test_keeps_whitespace(self):
        assert clean_sql('  "SELECT 1"  ') == '  "SELECT 1"  '
        assert clean_sql('" SELECT 1 "') == " SELECT 1 "

    def test_keeps_inner_quotes(self):
        assert clean_sql('SELECT "a" FROM t') == 'SELECT "a" FROM t'

    def test_empty(self):
        assert clean_sql("") == ""


def test_derive_fields(row_factory):
    record = parse_record(row_factory(sql_text='"SELECT * FROM t"'))
    derived = derive_fields(record)
    assert derived.timestamp == 1682935200.0
    assert derived.sql_type == "select"
    assert derived.sql == "SELECT * FROM t"


def test_derive_fields_bad_timestamp(row_factory):
    record = parse_record(row_factory(timestamp="yesterday"))
    with pytest.raises(TimeParseError):
        derive_fields(record)
