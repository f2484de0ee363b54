import csv

import pytest

HEADER = [
    "Time", "SQL ID", "SQL Text", "Database", "Execution Time(s)",
    "Lock Wait Time(s)", "Return Rows", "Scan Rows", "Source IP", "User",
    "Thread ID", "Table Names", "Tags",
]


def make_row(
    timestamp="2023-05-01 10:00:00",
    sql_id="9f8e7d6c5b4a",
    sql_text="SELECT * FROM orders WHERE id = 1",
    db_name="shop",
    execution_time="1.5",
    lock_wait_time="0.001",
    return_rows="10",
    scan_rows="2048",
    source_ip="10.0.0.7",
    username="app_user",
    thread_id="12345",
    table_names="orders",
    tags="",
) -> list[str]:
    """Helper to build a 13-field slow-log row."""
    return [
        timestamp, sql_id, sql_text, db_name, execution_time, lock_wait_time,
        return_rows, scan_rows, source_ip, username, thread_id, table_names, tags,
    ]


def write_csv(path, rows, header=HEADER):
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        if header is not None:
            writer.writerow(header)
        writer.writerows(rows)
    return path


@pytest.fixture
def sample_row():
    return make_row()


@pytest.fixture
def sample_csv(tmp_path):
    """A CSV export with four good rows and three bad ones."""
    rows = [
        make_row(),
        make_row(sql_text="insert into t values (1)", execution_time="0.25", thread_id="7"),
        ["2023-05-01 10:00:01", "short", "SELECT 1"],
        make_row(execution_time="abc"),
        make_row(timestamp="2023/05/01 10:00:00"),
        make_row(sql_text="  ", execution_time="", return_rows="", scan_rows=""),
        make_row(sql_text="UPDATE t SET a = 1", timestamp="2023-05-01 10:00:02.5"),
    ]
    return write_csv(tmp_path / "slow.csv", rows)


@pytest.fixture
def row_factory():
    return make_row


@pytest.fixture
def csv_factory(tmp_path):
    """Write rows (plus the standard header) to a CSV file under tmp_path."""
    def _write(rows, name="input.csv", header=HEADER):
        return write_csv(tmp_path / name, rows, header)
    return _write
