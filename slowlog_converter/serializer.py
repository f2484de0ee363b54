"""NDJSON encoding of output records.

The replay tooling was written against a marshaller with slightly
different conventions from ``json.dumps``, and it compares output files
byte for byte, so this module reproduces them:

  * floats use the shortest round-trip form with no trailing ``.0``
    (``1682935200``), switching to exponent form only below 1e-6 or from
    1e21 upwards (``1e-7``, ``1e+21``);
  * ``<``, ``>``, ``&``, U+2028 and U+2029 are escaped inside strings;
  * non-ASCII text is written as UTF-8, separators are compact.
"""

import json
import math
import re
from decimal import Decimal

from slowlog_converter.errors import SerializationError
from slowlog_converter.models import OutputRecord, record_to_dict

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}
_HTML_ESCAPE_RE = re.compile("[<>&\u2028\u2029]")

# e-07 -> e-7
_SHORT_NEGATIVE_EXPONENT_RE = re.compile(r"e-0(\d)$")


def _format_float(value: float) -> str:
    if not math.isfinite(value):
        raise SerializationError(f"unsupported float value: {value!r}")

    text = repr(value)
    magnitude = abs(value)
    if magnitude != 0 and (magnitude < 1e-6 or magnitude >= 1e21):
        return _SHORT_NEGATIVE_EXPONENT_RE.sub(r"e-\1", text)

    if "e" in text:
        text = format(Decimal(text), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text


def _format_string(value: str) -> str:
    encoded = json.dumps(value, ensure_ascii=False)
    return _HTML_ESCAPE_RE.sub(lambda m: _HTML_ESCAPES[m.group()], encoded)


def encode_value(value) -> str:
    """Encode a single scalar field value."""
    if isinstance(value, str):
        return _format_string(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        if value < _INT64_MIN or value > _INT64_MAX:
            raise SerializationError(f"integer out of 64-bit range: {value}")
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    raise SerializationError(f"unsupported value type: {type(value).__name__}")


def encode_record(record: OutputRecord) -> str:
    """Encode an OutputRecord as one JSON object, without a trailing newline.

    Raises:
        SerializationError: If a field value cannot be represented.
    """
    parts = []
    for key, value in record_to_dict(record).items():
        parts.append(f"{_format_string(key)}:{encode_value(value)}")
    return "{" + ",".join(parts) + "}"
