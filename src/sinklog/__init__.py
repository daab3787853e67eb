"""
Structured logging for command-line programs.

Provides a leveled logger that fans each record out to multiple sinks:
- console: colored lines, ERROR and above on stderr
- file: plain-text lines with size based rotation
- json: one JSON object per line with size based rotation
- syslog: the local system log

Design Pattern: Strategy Pattern for sinks and JSON encoders.
Library: structlog for the per-call pipeline, orjson for JSON serialization.
"""

from .config import LoggingSettings
from .core import Logger, create_logger
from .exceptions import InvalidLevelError, InvalidUsageError, RotationError, SinklogError, SinkWriteError
from .records import LogRecord
from .severity import Severity, severity_of
from .tracing import CommandTracer

__all__ = [
    "CommandTracer",
    "InvalidLevelError",
    "InvalidUsageError",
    "LogRecord",
    "Logger",
    "LoggingSettings",
    "RotationError",
    "Severity",
    "SinkWriteError",
    "SinklogError",
    "create_logger",
    "severity_of",
]
