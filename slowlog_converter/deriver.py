"""Secondary attributes computed from a TypedRecord.

Timestamps are read as UTC. The layout carries no zone, and the replay
tooling compares them against other UTC epoch values.
"""

import calendar
import re
from datetime import datetime

from slowlog_converter.errors import TimeParseError
from slowlog_converter.models import DerivedFields, TypedRecord

TIMESTAMP_LAYOUT = "YYYY-MM-DD HH:MM:SS"

# A fractional second may follow the seconds even though the layout does
# not name one; only the first nine digits are significant.
_TIMESTAMP_RE = re.compile(
    r"(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2}) "
    r"(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})"
    r"(?:[.,](?P<fraction>[0-9]+))?"
)

# Unicode White_Space, without the ASCII separators U+001C..U+001F that
# str.split() would also treat as whitespace.
_WHITESPACE = (
    "\t\n\v\f\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)
_WHITESPACE_RE = re.compile(f"[{_WHITESPACE}]+")


def _lower(word: str) -> str:
    # One character at a time: no final-sigma context, and U+0130 lowers
    # to a single "i" rather than "i" plus a combining dot.
    if word.isascii():
        return word.lower()
    return "".join(ch.lower()[0] for ch in word)


def parse_timestamp(text: str) -> float:
    """Convert 'YYYY-MM-DD HH:MM:SS[.fff]' to float seconds since the epoch."""
    m = _TIMESTAMP_RE.fullmatch(text)
    if not m:
        raise TimeParseError(text)

    try:
        dt = datetime(
            int(m.group("year")), int(m.group("month")), int(m.group("day")),
            int(m.group("hour")), int(m.group("minute")), int(m.group("second")),
        )
    except ValueError as exc:
        raise TimeParseError(text, str(exc)) from exc

    nanoseconds = 0
    fraction = m.group("fraction")
    if fraction:
        nanoseconds = int(fraction[:9].ljust(9, "0"))

    return float(calendar.timegm(dt.timetuple())) + nanoseconds / 1e9


def extract_sql_type(sql_text: str) -> str:
    """Return the lowercased first word of the statement, or '' if none."""
    if sql_text == "":
        return ""
    cleaned = sql_text.strip(_WHITESPACE)
    cleaned = cleaned.strip('"')
    cleaned = cleaned.strip(_WHITESPACE)
    words = _WHITESPACE_RE.split(cleaned)
    if not words[0]:
        return ""
    return _lower(words[0])


def clean_sql(sql_text: str) -> str:
    """Strip surrounding double quotes, leaving whitespace untouched."""
    return sql_text.strip('"')


def derive_fields(record: TypedRecord) -> DerivedFields:
    return DerivedFields(
        timestamp=parse_timestamp(record.timestamp),
        sql_type=extract_sql_type(record.sql_text),
        sql=clean_sql(record.sql_text),
    )
