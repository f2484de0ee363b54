"""CSV row source for slow-log exports."""

import csv
from typing import Iterator, TextIO

from slowlog_converter.errors import CsvReadError, InputError

DEFAULT_FIELD_SIZE_LIMIT = 128 * 1024 * 1024


class CsvRowReader:
    """Iterates over the data rows of a slow-log CSV export.

    Quoting is lenient and rows may have any number of fields; blank lines
    are skipped. The first row is the header: call read_header() before
    iterating. Iteration yields ``(line_number, row)`` pairs, where *row*
    is a CsvReadError instead of a list when the csv module rejected the
    record. *line_number* is the physical line on which the record ends.
    """

    def __init__(self, stream: TextIO, delimiter: str = ",",
                 field_size_limit: int = DEFAULT_FIELD_SIZE_LIMIT):
        csv.field_size_limit(field_size_limit)
        self._reader = csv.reader(stream, delimiter=delimiter, strict=False)
        self._header: list[str] | None = None

    @property
    def header(self) -> list[str] | None:
        return self._header

    def read_header(self) -> list[str]:
        """Consume and return the header row. Raises InputError if absent."""
        try:
            for row in self._reader:
                if row:
                    self._header = row
                    return row
        except csv.Error as exc:
            raise InputError(f"read CSV header failed: {exc}") from exc
        raise InputError("read CSV header failed: input is empty")

    def __iter__(self) -> Iterator[tuple[int, list[str] | CsvReadError]]:
        if self._header is None:
            self.read_header()
        while True:
            try:
                row = next(self._reader)
            except StopIteration:
                return
            except csv.Error as exc:
                yield self._reader.line_num, CsvReadError(f"read CSV record failed: {exc}")
                continue
            if not row:
                continue
            # CRLF inside quoted multi-line fields is normalised to LF
            yield self._reader.line_num, [field.replace("\r\n", "\n") for field in row]
