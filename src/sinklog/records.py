"""
The record built once per log call and handed to every sink.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from .severity import Severity

DataPairs = tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class LogRecord:
    """A single log event.

    Never persisted as an object; sinks serialize it to a text line,
    a JSON line or a syslog message.
    """

    timestamp: str
    # Wall-clock time rendered with the configured date format.

    timestamp_epoch: int
    # Same instant in whole seconds since the epoch.

    level: str
    # Canonical upper-case level name (EMERG .. DEBUG).

    severity: Severity

    message: str

    pid: int

    application: str

    data: DataPairs | None = None
    # Caller supplied key/value pairs in call order. Keys may repeat.
    # Only the JSON representation carries them.

    def line(self) -> str:
        return f"{self.timestamp} [{self.level}] {self.message}"

    def syslog_message(self) -> str:
        return f"{self.level}: {self.message}"


def pairs_to_data(pairs: Sequence[Any]) -> tuple[DataPairs, str | None]:
    """Fold flat ``k1, v1, k2, v2`` arguments into ordered pairs.

    Returns the pairs and the dangling key, if the argument count was odd.
    """
    data = tuple((str(pairs[i]), str(pairs[i + 1])) for i in range(0, len(pairs) - 1, 2))
    dangling = str(pairs[-1]) if len(pairs) % 2 else None
    return data, dangling
