"""Per-row pipeline: validate, parse, derive, assemble, encode.

Every stage is a pure function of one row. Failures come back as a
RowResult carrying the ConversionError; nothing here logs or touches
files.
"""

from typing import Iterable, Iterator

from slowlog_converter.assembler import assemble
from slowlog_converter.deriver import derive_fields
from slowlog_converter.errors import ConversionError
from slowlog_converter.models import OutputRecord, RowResult
from slowlog_converter.parser import parse_record
from slowlog_converter.serializer import encode_record
from slowlog_converter.validator import MIN_FIELDS, validate_row


def convert_row(row: list[str], min_fields: int = MIN_FIELDS) -> OutputRecord:
    """Run one row through the core stages, raising on the first failure."""
    validate_row(row, min_fields)
    record = parse_record(row)
    derived = derive_fields(record)
    return assemble(record, derived)


def process_row(row: list[str], line_number: int = 0,
                min_fields: int = MIN_FIELDS) -> RowResult:
    try:
        record = convert_row(row, min_fields)
        line = encode_record(record)
    except ConversionError as exc:
        return RowResult(line_number=line_number, error=exc)
    return RowResult(line_number=line_number, record=record, line=line)


def process_rows(rows: Iterable[tuple[int, list[str] | ConversionError]],
                 min_fields: int = MIN_FIELDS) -> Iterator[RowResult]:
    """Yield a RowResult per (line_number, row) pair, in input order.

    A ConversionError in place of a row (a record the CSV reader rejected)
    is passed through as a failed result.
    """
    for line_number, row in rows:
        if isinstance(row, ConversionError):
            yield RowResult(line_number=line_number, error=row)
            continue
        yield process_row(row, line_number, min_fields)
