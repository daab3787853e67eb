"""
JSON record encoders.

Two interchangeable strategies produce one JSON object per record:

- ``OrjsonEncoder`` escapes every string with orjson.
- ``FallbackEncoder`` formats the object by hand. In its default ``quotes``
  mode only double quotes in the message and data values are escaped, so
  newlines, control characters and backslashes pass through verbatim and
  the line may not parse. ``full`` mode escapes everything.

The strategy is picked once by :func:`select_encoder`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import orjson

from .config import FallbackEscaping
from .records import DataPairs, LogRecord


class JsonEncoder(ABC):
    """Serializes a record to a single-line JSON object."""

    name: str = "json"

    @abstractmethod
    def encode(self, record: LogRecord) -> str: ...


def orjson_dumps(v: object) -> str:
    return orjson.dumps(v).decode()


class OrjsonEncoder(JsonEncoder):
    """Library strategy.

    The data object is assembled from individually escaped keys and values
    so repeated keys survive in call order.
    """

    name = "orjson"

    def encode(self, record: LogRecord) -> str:
        base = orjson_dumps(
            {
                "timestamp": str(record.timestamp),
                "timestamp_epoch": int(record.timestamp_epoch),
                "level": str(record.level),
                "message": str(record.message),
                "pid": int(record.pid),
                "application": str(record.application),
            }
        )
        if record.data is None:
            return base
        return f'{base[:-1]},"data":{self._encode_data(record.data)}}}'

    @staticmethod
    def _encode_data(data: DataPairs) -> str:
        members = ",".join(f"{orjson_dumps(str(k))}:{orjson_dumps(str(v))}" for k, v in data)
        return "{" + members + "}"


_CONTROL_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def escape_quotes(text: str) -> str:
    return text.replace('"', '\\"')


def escape_full(text: str) -> str:
    out = []
    for ch in text:
        if ch in _CONTROL_ESCAPES:
            out.append(_CONTROL_ESCAPES[ch])
        elif ord(ch) < 0x20:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    return "".join(out)


class FallbackEncoder(JsonEncoder):
    """Manual strategy, used when the library strategy is switched off."""

    name = "fallback"

    def __init__(self, escaping: FallbackEscaping = FallbackEscaping.QUOTES):
        self.escaping = FallbackEscaping(escaping)

    def _value(self, text: object) -> str:
        if self.escaping == FallbackEscaping.FULL:
            return escape_full(str(text))
        return escape_quotes(str(text))

    def _plain(self, text: object) -> str:
        # Quote mode leaves keys, level, timestamp and application untouched.
        if self.escaping == FallbackEscaping.FULL:
            return escape_full(str(text))
        return str(text)

    def encode(self, record: LogRecord) -> str:
        head = (
            f'{{"timestamp":"{self._plain(record.timestamp)}",'
            f'"timestamp_epoch":{record.timestamp_epoch},'
            f'"level":"{self._plain(record.level)}",'
            f'"message":"{self._value(record.message)}",'
            f'"pid":{record.pid},'
            f'"application":"{self._plain(record.application)}"'
        )
        if record.data is None:
            return head + "}"
        members = ",".join(f'"{self._plain(k)}":"{self._value(v)}"' for k, v in record.data)
        return f'{head},"data":{{{members}}}}}'


def select_encoder(
    json_library: bool,
    fallback_escaping: FallbackEscaping | None = None,
) -> JsonEncoder:
    """Pick the JSON strategy from the capability flag."""
    if json_library:
        return OrjsonEncoder()
    return FallbackEncoder(fallback_escaping or FallbackEscaping.QUOTES)
