"""Maps a parsed record and its derived values to the emitted shape."""

from slowlog_converter.models import DerivedFields, OutputRecord, TypedRecord

MICROS_PER_SECOND = 1_000_000


def assemble(record: TypedRecord, derived: DerivedFields) -> OutputRecord:
    """Build the OutputRecord. Query time is truncated to whole microseconds."""
    return OutputRecord(
        connection_id=record.thread_id,
        query_time=int(record.execution_time * MICROS_PER_SECOND),
        sql=derived.sql,
        rows_sent=record.return_rows,
        username=record.username,
        sql_type=derived.sql_type,
        db_name=record.db_name,
        timestamp=derived.timestamp,
        digest=record.sql_id,
    )
