"""
Log sink abstractions and concrete implementations.

Sinks never swallow failures: anything that goes wrong while writing is
raised as ``SinkWriteError`` for the dispatcher to report.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Protocol

from .config import ColorMode
from .encoders import JsonEncoder
from .exceptions import SinkWriteError
from .formatters import render, render_level, use_color
from .records import LogRecord
from .severity import Severity

# RFC 5424 facility codes.
FACILITIES = {
    "kern": 0,
    "user": 1,
    "mail": 2,
    "daemon": 3,
    "auth": 4,
    "syslog": 5,
    "lpr": 6,
    "news": 7,
    "uucp": 8,
    "cron": 9,
    "authpriv": 10,
    "ftp": 11,
    "local0": 16,
    "local1": 17,
    "local2": 18,
    "local3": 19,
    "local4": 20,
    "local5": 21,
    "local6": 22,
    "local7": 23,
}


def facility_code(name: str) -> int:
    """Facility bits (already shifted) for a facility name such as ``local0``."""
    try:
        return FACILITIES[name.lower()] << 3
    except KeyError:
        raise SinkWriteError(f"Unknown syslog facility: {name}", sink="syslog", details={"facility": name}) from None


def syslog_priority(facility: str, severity: Severity) -> int:
    return facility_code(facility) | int(severity)


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks."""

    name: str = "sink"

    @abstractmethod
    def emit(self, record: LogRecord) -> None:
        """Write a record to the sink."""
        ...

    def close(self) -> None:
        """Release any resources held by the sink."""


class ConsoleSink(BaseSink):
    """Colored console output.

    ERROR and more severe records go to stderr, the rest to stdout. Streams
    default to whatever ``sys.stdout``/``sys.stderr`` are at write time.
    """

    name = "console"

    def __init__(
        self,
        *,
        color: ColorMode = ColorMode.AUTO,
        stdout: Any = None,
        stderr: Any = None,
    ):
        self._color = ColorMode(color)
        self._stdout = stdout
        self._stderr = stderr

    @property
    def stdout(self) -> Any:
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def stderr(self) -> Any:
        return self._stderr if self._stderr is not None else sys.stderr

    def stream_for(self, severity: Severity) -> Any:
        return self.stderr if severity <= Severity.ERROR else self.stdout

    def emit(self, record: LogRecord) -> None:
        stream = self.stream_for(record.severity)
        text = render_level(record.line(), record.level, color=use_color(self._color, stream))
        self._write(stream, text)

    def exception(self, text: str, timestamp: str) -> None:
        """Forced logging-exception notice, written regardless of sink flags."""
        stream = self.stderr
        line = f"{timestamp} [ERROR] Logging Exception: {text}"
        self._write(stream, render(line, "red", color=use_color(self._color, stream)))

    def warning(self, text: str) -> None:
        self._write(self.stderr, f"Warning: {text}")

    def _write(self, stream: Any, text: str) -> None:
        try:
            stream.write(text + "\n")
            stream.flush()
        except (OSError, ValueError) as exc:
            raise SinkWriteError(f"Failed to write to console: {exc}", sink=self.name) from exc


class _AppendSink(BaseSink):
    """Appends one line per record, reopening the file on every write."""

    kind = "log"

    def __init__(self, path: str | Path):
        self.path = Path(path)

    @abstractmethod
    def format(self, record: LogRecord) -> str: ...

    def emit(self, record: LogRecord) -> None:
        try:
            line = self.format(record)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except (OSError, TypeError, ValueError) as exc:
            raise SinkWriteError(
                f"Failed to write to {self.kind} file: {self.path} ({exc})",
                sink=self.name,
                details={"path": str(self.path)},
            ) from exc


class FileSink(_AppendSink):
    """Plain-text file sink: ``<timestamp> [<LEVEL>] <message>``."""

    name = "file"
    kind = "log"

    def format(self, record: LogRecord) -> str:
        return record.line()


class JsonFileSink(_AppendSink):
    """JSON lines file sink."""

    name = "json"
    kind = "JSON log"

    def __init__(self, path: str | Path, encoder: JsonEncoder):
        super().__init__(path)
        self.encoder = encoder

    def format(self, record: LogRecord) -> str:
        return self.encoder.encode(record)


# =============================================================================
# Syslog
# =============================================================================


class SyslogTransport(Protocol):
    """Anything that can deliver a message to the system log."""

    def send(self, priority: int, tag: str, message: str) -> None: ...

    def close(self) -> None: ...


class StdlibSyslogTransport:
    """Delivers through the stdlib ``syslog`` module (POSIX only)."""

    def __init__(self) -> None:
        self._opened: tuple[str, int] | None = None

    def send(self, priority: int, tag: str, message: str) -> None:
        import syslog

        facility = priority & ~0x07
        if self._opened != (tag, facility):
            syslog.openlog(ident=tag, logoption=syslog.LOG_PID, facility=facility)
            self._opened = (tag, facility)
        syslog.syslog(priority, message)

    def close(self) -> None:
        if self._opened is None:
            return
        import syslog

        syslog.closelog()
        self._opened = None


class SyslogSink(BaseSink):
    """Forwards ``<LEVEL>: <message>`` at ``facility.severity``."""

    name = "syslog"

    def __init__(
        self,
        *,
        tag: str,
        facility: str = "local0",
        transport: SyslogTransport | None = None,
    ):
        self.tag = tag
        self.facility = facility
        self.transport = transport if transport is not None else StdlibSyslogTransport()

    def emit(self, record: LogRecord) -> None:
        priority = syslog_priority(self.facility, record.severity)
        try:
            self.transport.send(priority, self.tag, record.syslog_message())
        except (ImportError, OSError, ValueError) as exc:
            raise SinkWriteError(f"Failed to write to syslog: {exc}", sink=self.name) from exc

    def close(self) -> None:
        self.transport.close()
