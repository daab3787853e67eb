"""
Error taxonomy for the sinklog dispatcher.

Only ``InvalidUsageError`` is ever surfaced to callers, and then only as a
``False`` return value from ``Logger.log``. Every other error is caught at the
sink boundary and reported through the console exception notice.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class SinklogError(Exception):
    """Base class for every failure raised inside the logging pipeline."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class InvalidUsageError(SinklogError):
    """A log call was made without a message."""

    def __init__(self, message: str = "Usage: log <level> <message> [key value ...]") -> None:
        super().__init__(message, code="INVALID_USAGE")


class InvalidLevelError(SinklogError):
    """A level name outside the eight RFC 5424 names was supplied."""

    def __init__(self, level: str) -> None:
        super().__init__(f"Invalid log level: {level}", code="INVALID_LEVEL", details={"level": level})
        self.level = level


class SinkWriteError(SinklogError):
    """A sink could not create its destination or write a record to it."""

    def __init__(self, message: str, *, sink: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, code="SINK_WRITE_FAILED", details={"sink": sink, **(details or {})})
        self.sink = sink


class RotationError(SinklogError):
    """An oversized log file could not be renamed aside."""

    def __init__(self, path: Path, backup: Path, reason: str) -> None:
        super().__init__(
            f"Failed to rotate log file {path}: {reason}",
            code="ROTATION_FAILED",
            details={"path": str(path), "backup": str(backup)},
        )
        self.path = path
        self.backup = backup
