"""Record types flowing through the conversion pipeline."""

from dataclasses import dataclass

from slowlog_converter.errors import ConversionError


@dataclass(frozen=True)
class TypedRecord:
    """One CSV slow-log row with its numeric columns parsed.

    Empty numeric columns are kept at their zero value.
    """

    timestamp: str
    sql_id: str
    sql_text: str
    db_name: str
    source_ip: str
    username: str
    thread_id: str
    table_names: str
    tags: str
    execution_time: float = 0.0
    lock_wait_time: float = 0.0
    return_rows: int = 0
    scan_rows: int = 0


@dataclass(frozen=True)
class DerivedFields:
    timestamp: float
    sql_type: str
    sql: str


@dataclass(frozen=True)
class OutputRecord:
    connection_id: str
    query_time: int  # microseconds
    sql: str
    rows_sent: int
    username: str
    sql_type: str
    db_name: str
    timestamp: float  # Unix seconds
    digest: str


# Output key order and names consumed by the replay tooling.
OUTPUT_KEYS = (
    ("ConnectionID", "connection_id"),
    ("QueryTime", "query_time"),
    ("SQL", "sql"),
    ("RowsSent", "rows_sent"),
    ("Username", "username"),
    ("SQLType", "sql_type"),
    ("DBName", "db_name"),
    ("Timestamp", "timestamp"),
    ("Digest", "digest"),
)


def record_to_dict(record: OutputRecord) -> dict:
    """Convert an OutputRecord to a dict keyed by the external field names."""
    return {key: getattr(record, attr) for key, attr in OUTPUT_KEYS}


@dataclass(frozen=True)
class RowResult:
    """Outcome of pushing one CSV row through the pipeline."""

    line_number: int
    record: OutputRecord | None = None
    line: str | None = None
    error: ConversionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
