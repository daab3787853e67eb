"""
Logger: the per-call dispatcher.

Each call runs once through a private structlog pipeline. The processors
resolve the level, stamp the time and process info, and then fan the
finished record out to the configured sinks. Nothing is configured
globally, so independently configured loggers can coexist.
"""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

import structlog
from structlog.typing import EventDict, WrappedLogger

from .config import LoggingSettings
from .encoders import JsonEncoder, select_encoder
from .exceptions import InvalidLevelError, InvalidUsageError, RotationError, SinklogError, SinkWriteError
from .records import LogRecord, pairs_to_data
from .rotation import Rotator
from .sinks import BaseSink, ConsoleSink, FileSink, JsonFileSink, StdlibSyslogTransport, SyslogSink, SyslogTransport
from .severity import Severity, resolve_level, threshold_of

FatalHook = Callable[[LogRecord], None]


def _ignore_fatal(record: LogRecord) -> None:
    pass


class _NopFile:
    def write(self, s: str) -> None:
        pass

    def flush(self) -> None:
        pass


_NOP_FILE = _NopFile()

_JSON_SETTINGS = ("json_library", "json_fallback_escaping")


class Logger:
    """Fans log records out to console, file, JSON file and syslog sinks.

    Args:
        settings: Sink configuration; read from the environment when omitted.
        syslog_transport: Delivery for the syslog sink (stdlib ``syslog`` by default).
        on_fatal: Called with the record after an ERROR line reaches the
            console while the debug flag is set. Exceptions it raises propagate.
        clock: Source of record timestamps.
        stdout: Console stream for records less severe than ERROR.
        stderr: Console stream for ERROR and more severe, and for exception notices.
    """

    def __init__(
        self,
        settings: LoggingSettings | None = None,
        *,
        syslog_transport: SyslogTransport | None = None,
        on_fatal: FatalHook | None = None,
        clock: Callable[[], datetime] | None = None,
        stdout: Any = None,
        stderr: Any = None,
    ):
        self._settings = settings if settings is not None else LoggingSettings()
        self._syslog_transport = syslog_transport if syslog_transport is not None else StdlibSyslogTransport()
        self._on_fatal = on_fatal or _ignore_fatal
        self._clock = clock or datetime.now
        self._stdout = stdout
        self._stderr = stderr

        self._encoder = self._select_encoder()
        self._apply_settings()

        self._pipeline = structlog.wrap_logger(
            structlog.PrintLogger(file=_NOP_FILE),
            processors=[
                self._add_level,
                self._add_timestamp,
                self._add_process_info,
                self._fan_out,
            ],
            wrapper_class=structlog.BoundLogger,
            context_class=dict,
            cache_logger_on_first_use=False,
        )

    # =========================================================================
    # Configuration
    # =========================================================================

    @property
    def settings(self) -> LoggingSettings:
        return self._settings

    @property
    def encoder(self) -> JsonEncoder:
        return self._encoder

    @property
    def console(self) -> ConsoleSink:
        return self._console

    def configure(self, **overrides: Any) -> LoggingSettings:
        """Replace individual settings; the new values are validated."""
        unknown = set(overrides) - set(type(self._settings).model_fields)
        if unknown:
            raise TypeError(f"Unknown logging settings: {', '.join(sorted(unknown))}")

        previous = self._settings
        self._settings = type(previous)(**{**previous.model_dump(), **overrides})
        if any(getattr(previous, name) != getattr(self._settings, name) for name in _JSON_SETTINGS):
            self._encoder = self._select_encoder()
        self._apply_settings()
        return self._settings

    def set_destinations(
        self,
        console: bool = True,
        file: bool = False,
        json: bool = False,
        syslog: bool = False,
    ) -> None:
        """Switch the four sinks on or off in one call."""
        self.configure(
            console_enabled=bool(console),
            file_enabled=bool(file),
            json_enabled=bool(json),
            syslog_enabled=bool(syslog),
        )

    def close(self) -> None:
        for sink in self._backends:
            sink.close()
        self._syslog_transport.close()

    def _select_encoder(self) -> JsonEncoder:
        return select_encoder(self._settings.json_library, self._settings.json_fallback_escaping)

    def _apply_settings(self) -> None:
        s = self._settings
        self._console = ConsoleSink(color=s.console_color, stdout=self._stdout, stderr=self._stderr)
        self._console_threshold = threshold_of(s.console_level)
        self._rotator = Rotator(s.rotation_size, clock=self._clock, on_rotate=self._announce_rotation)

        backends: list[BaseSink] = []
        if s.syslog_enabled:
            backends.append(SyslogSink(tag=s.syslog_tag, facility=s.syslog_facility, transport=self._syslog_transport))
        if s.file_enabled:
            backends.append(FileSink(s.file_path))
        if s.json_enabled:
            backends.append(JsonFileSink(s.json_path, self._encoder))
        self._backends = backends

    # =========================================================================
    # Public API
    # =========================================================================

    def log(self, level: str, message: Any | None = None, *pairs: Any) -> bool:
        """Log ``message`` at ``level``.

        Trailing ``key, value`` arguments are attached to the JSON record as
        its ``data`` object. Returns False, without touching any sink, when
        the message is missing.
        """
        if message is None:
            self._report(InvalidUsageError())
            return False

        data = None
        if pairs:
            data, dangling = pairs_to_data(pairs)
            if dangling is not None:
                self._report(InvalidUsageError(f"Missing value for data key: {dangling}"))
            data = data or None

        self._pipeline.msg(str(message), level=level, data=data)
        return True

    def log_data(self, level: str, message: Any | None = None, *pairs: Any) -> bool:
        return self.log(level, message, *pairs)

    def debug(self, message: Any = None, *pairs: Any) -> bool:
        return self.log("debug", message, *pairs)

    def info(self, message: Any = None, *pairs: Any) -> bool:
        return self.log("info", message, *pairs)

    def notice(self, message: Any = None, *pairs: Any) -> bool:
        return self.log("notice", message, *pairs)

    def warn(self, message: Any = None, *pairs: Any) -> bool:
        return self.log("warn", message, *pairs)

    def error(self, message: Any = None, *pairs: Any) -> bool:
        return self.log("error", message, *pairs)

    def crit(self, message: Any = None, *pairs: Any) -> bool:
        return self.log("crit", message, *pairs)

    def alert(self, message: Any = None, *pairs: Any) -> bool:
        return self.log("alert", message, *pairs)

    def emerg(self, message: Any = None, *pairs: Any) -> bool:
        return self.log("emerg", message, *pairs)

    def debug_data(self, message: Any = None, *pairs: Any) -> bool:
        return self.log_data("debug", message, *pairs)

    def info_data(self, message: Any = None, *pairs: Any) -> bool:
        return self.log_data("info", message, *pairs)

    def notice_data(self, message: Any = None, *pairs: Any) -> bool:
        return self.log_data("notice", message, *pairs)

    def warn_data(self, message: Any = None, *pairs: Any) -> bool:
        return self.log_data("warn", message, *pairs)

    def error_data(self, message: Any = None, *pairs: Any) -> bool:
        return self.log_data("error", message, *pairs)

    def crit_data(self, message: Any = None, *pairs: Any) -> bool:
        return self.log_data("crit", message, *pairs)

    def alert_data(self, message: Any = None, *pairs: Any) -> bool:
        return self.log_data("alert", message, *pairs)

    def emerg_data(self, message: Any = None, *pairs: Any) -> bool:
        return self.log_data("emerg", message, *pairs)

    # =========================================================================
    # Structlog Processors
    # =========================================================================

    def _add_level(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        """Resolve the level name, degrading unknown names to ERROR."""
        requested = event_dict.pop("level")
        resolved = resolve_level(requested)
        if not resolved.valid:
            self._report(InvalidLevelError(str(requested).upper()))
        event_dict["level"] = resolved.name
        event_dict["severity"] = resolved.severity
        return event_dict

    def _add_timestamp(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        now = self._clock()
        event_dict["timestamp"] = now.strftime(self._settings.date_format)
        event_dict["timestamp_epoch"] = int(now.timestamp())
        return event_dict

    def _add_process_info(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict["pid"] = os.getpid()
        event_dict["application"] = self._settings.application
        return event_dict

    def _fan_out(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        """Render to every configured sink. Returns empty to suppress default output."""
        record = LogRecord(
            timestamp=event_dict["timestamp"],
            timestamp_epoch=event_dict["timestamp_epoch"],
            level=event_dict["level"],
            severity=event_dict["severity"],
            message=event_dict["event"],
            pid=event_dict["pid"],
            application=event_dict["application"],
            data=event_dict.get("data"),
        )
        debug = self._settings.debug

        # DEBUG records only reach the backends while the debug flag is set.
        if debug > 0 or record.severity < Severity.DEBUG:
            for sink in self._backends:
                self._write(sink, record)

        if self._settings.console_enabled and self._wants_console(record):
            self._write(self._console, record)
            if record.severity == Severity.ERROR and debug > 0:
                self._on_fatal(record)
        return ""

    # =========================================================================
    # Helpers
    # =========================================================================

    def _wants_console(self, record: LogRecord) -> bool:
        if record.severity <= self._console_threshold:
            return True
        return self._settings.debug > 0 and record.severity == Severity.DEBUG

    def _write(self, sink: BaseSink, record: LogRecord) -> None:
        if isinstance(sink, (FileSink, JsonFileSink)):
            self._rotate(sink.path)
        try:
            sink.emit(record)
        except SinklogError as exc:
            self._report(exc)

    def _rotate(self, path: Path) -> None:
        try:
            self._rotator.maybe_rotate(path)
        except RotationError as exc:
            self._report(exc)

    def _announce_rotation(self, backup: Path) -> None:
        self.info(f"Rotated log file to {backup}")

    def _report(self, error: SinklogError) -> None:
        """Forced console notice for failures inside the logging system."""
        timestamp = self._clock().strftime(self._settings.date_format)
        try:
            self._console.exception(str(error), timestamp)
        except SinkWriteError:
            # stderr itself is unusable.
            pass

    def _warn(self, text: str) -> None:
        try:
            self._console.warning(text)
        except SinkWriteError:
            pass


def create_logger(settings: LoggingSettings | None = None, **kwargs: Any) -> Logger:
    """Build a logger and announce it.

    Warns on stderr when JSON output is enabled without the orjson
    strategy, then logs an INFO initialization record.
    """
    logger = Logger(settings, **kwargs)
    s = logger.settings
    if s.json_enabled and not s.json_library:
        logger._warn("JSON library support disabled, falling back to basic JSON formatting")
    logger.info(f"sinklog initialized with json library support: {int(s.json_library)} (PID: {os.getpid()})")
    return logger
