"""Positional CSV row parser producing TypedRecord instances.

Column layout of the slow-log export:

    0 timestamp       4 execution_time   8 source_ip    12 tags
    1 sql_id          5 lock_wait_time   9 username
    2 sql_text        6 return_rows     10 thread_id
    3 db_name         7 scan_rows       11 table_names

Numeric columns may be empty (the attribute keeps its zero value). A
non-empty numeric column that does not parse rejects the whole record.
"""

import math
import re
from typing import Callable

from slowlog_converter.errors import FieldParseError
from slowlog_converter.models import TypedRecord

# ---------------------------------------------------------------------------
# Numeric grammar
# ---------------------------------------------------------------------------

_DEC = r"[0-9](?:_?[0-9])*"
_HEX = r"[0-9a-fA-F](?:_?[0-9a-fA-F])*"

_DECIMAL_FLOAT_RE = re.compile(
    rf"[+-]?(?:{_DEC}(?:\.(?:{_DEC})?)?|\.{_DEC})(?:[eE][+-]?{_DEC})?"
)
_HEX_FLOAT_RE = re.compile(
    rf"[+-]?0[xX](?:{_HEX}(?:\.(?:{_HEX})?)?|\.{_HEX})[pP][+-]?{_DEC}"
)
_SPECIAL_FLOAT_RE = re.compile(r"(?i:[+-]?inf(?:inity)?|nan)")
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


def _to_float(text: str) -> float | None:
    """Parse a finite float, returning None when *text* is not one."""
    if _DECIMAL_FLOAT_RE.fullmatch(text):
        value = float(text)
    elif _HEX_FLOAT_RE.fullmatch(text):
        try:
            value = float.fromhex(text.replace("_", ""))
        except OverflowError:
            return None
    else:
        return None
    return value if math.isfinite(value) else None


def _to_float_or_special(text: str) -> float | None:
    """Like _to_float, but also accept the inf, infinity and nan spellings."""
    if _SPECIAL_FLOAT_RE.fullmatch(text):
        return float(text)
    return _to_float(text)


def _to_int64(text: str) -> int | None:
    """Parse a base-10 signed 64-bit integer, returning None when invalid."""
    if not _INTEGER_RE.fullmatch(text):
        return None
    # int64 has at most 19 significant digits; longer input is out of range
    if len(text.lstrip("+-").lstrip("0")) > 19:
        return None
    value = int(text)
    if value < _INT64_MIN or value > _INT64_MAX:
        return None
    return value


def _parse_optional(text: str, field: str, convert: Callable[[str], float | int | None],
                    zero: float | int) -> float | int:
    if text == "":
        return zero
    value = convert(text)
    if value is None:
        raise FieldParseError(field, text)
    return value


# ---------------------------------------------------------------------------
# Record parser
# ---------------------------------------------------------------------------


def parse_record(row: list[str]) -> TypedRecord:
    """Build a TypedRecord from a validated row of at least 13 fields.

    Numeric fields are parsed in column order, so the FieldParseError
    names the first failing one.
    """
    execution_time = _parse_optional(row[4], "execution time", _to_float, 0.0)
    lock_wait_time = _parse_optional(row[5], "lock wait time", _to_float_or_special, 0.0)
    return_rows = _parse_optional(row[6], "return rows", _to_int64, 0)
    scan_rows = _parse_optional(row[7], "scan rows", _to_int64, 0)

    return TypedRecord(
        timestamp=row[0],
        sql_id=row[1],
        sql_text=row[2],
        db_name=row[3],
        source_ip=row[8],
        username=row[9],
        thread_id=row[10],
        table_names=row[11],
        tags=row[12],
        execution_time=execution_time,
        lock_wait_time=lock_wait_time,
        return_rows=return_rows,
        scan_rows=scan_rows,
    )
