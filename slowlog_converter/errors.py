"""Exceptions raised by the row pipeline and the file-level converter."""


class ConversionError(Exception):
    """Base class for failures that discard a single row."""

    stage = "convert"


class ShortRowError(ConversionError):
    """Raised when a row has fewer fields than the converter requires."""

    stage = "validate"

    def __init__(self, row: list[str], min_fields: int):
        self.row = row
        self.min_fields = min_fields
        super().__init__(
            f"record has {len(row)} fields, expected at least {min_fields}: {row!r}"
        )


class FieldParseError(ConversionError):
    """Raised when a non-empty numeric field cannot be parsed."""

    stage = "parse"

    def __init__(self, field: str, text: str):
        self.field = field
        self.text = text
        super().__init__(f"parse {field} failed: invalid value {text!r}")


class TimeParseError(ConversionError):
    """Raised when the timestamp does not match YYYY-MM-DD HH:MM:SS."""

    stage = "derive"

    def __init__(self, text: str, reason: str = "does not match YYYY-MM-DD HH:MM:SS"):
        self.text = text
        self.reason = reason
        super().__init__(f"parse time failed: {text!r} {reason}")


class SerializationError(ConversionError):
    """Raised when an output record cannot be encoded as JSON."""

    stage = "serialize"


class CsvReadError(ConversionError):
    """Raised when the CSV reader rejects a malformed record."""

    stage = "read"


class InputError(Exception):
    """Raised when the input file cannot be opened or has no header row."""
