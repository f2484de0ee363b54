"""Positional row validation ahead of parsing."""

from slowlog_converter.errors import ShortRowError

# timestamp, sql_id, sql_text, db_name, execution_time, lock_wait_time,
# return_rows, scan_rows, source_ip, username, thread_id, table_names, tags
MIN_FIELDS = 13


def validate_row(row: list[str], min_fields: int = MIN_FIELDS) -> list[str]:
    """Return *row* unchanged if it carries at least *min_fields* fields.

    Raises ShortRowError otherwise. Extra trailing fields are allowed.
    """
    if len(row) < min_fields:
        raise ShortRowError(row, min_fields)
    return row
