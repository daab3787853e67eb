"""
Logging Configuration.

Every setting can be supplied through a ``SINKLOG_``-prefixed environment
variable or a ``.env`` file. The global debug flag also honours the bare
``DEBUG`` variable.

Usage:
    from sinklog.config import LoggingSettings

    settings = LoggingSettings(file_enabled=True)
    settings.file_path  # "/tmp/<program>.log"
"""

from __future__ import annotations

import sys
import tempfile
from enum import Enum
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def program_name() -> str:
    """Basename of the invoking program, used for default paths and tags."""
    argv0 = sys.argv[0] if sys.argv else ""
    return Path(argv0).name or "python"


def _default_file_path() -> Path:
    return Path(tempfile.gettempdir()) / f"{program_name()}.log"


def _default_json_path() -> Path:
    return Path(tempfile.gettempdir()) / f"{program_name()}.log.json"


class ColorMode(str, Enum):
    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


class FallbackEscaping(str, Enum):
    # Only double quotes in the message and data values.
    QUOTES = "quotes"
    # Backslashes, quotes and control characters in every string field.
    FULL = "full"


class LoggingSettings(BaseSettings):
    """Sink selection and per-sink parameters."""

    model_config = SettingsConfigDict(
        env_prefix="SINKLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    date_format: str = Field(default="%Y-%m-%d %H:%M:%S", description="strftime format for record timestamps")

    console_enabled: bool = Field(default=True, description="Write records to stdout/stderr")
    console_level: str = Field(default="INFO", description="Least severe level shown on the console")
    console_color: ColorMode = Field(default=ColorMode.AUTO, description="ANSI color mode for the console")

    file_enabled: bool = Field(default=False, description="Append plain-text lines to file_path")
    file_path: Path = Field(default_factory=_default_file_path, description="Plain-text log file")

    json_enabled: bool = Field(default=False, description="Append JSON lines to json_path")
    json_path: Path = Field(default_factory=_default_json_path, description="JSON lines log file")
    json_library: bool = Field(default=True, description="Encode JSON with orjson instead of manual escaping")
    json_fallback_escaping: FallbackEscaping = Field(
        default=FallbackEscaping.QUOTES,
        description="Escaping applied by the manual JSON encoder",
    )

    syslog_enabled: bool = Field(default=False, description="Forward records to the system log")
    syslog_tag: str = Field(default_factory=program_name, description="Syslog identifier")
    syslog_facility: str = Field(default="local0", description="Syslog facility name")

    rotation_size: int = Field(default=5 * 1024 * 1024, ge=0, description="Rotate files larger than this many bytes")

    debug: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("debug", "SINKLOG_DEBUG", "DEBUG"),
        description="0 normal, 1 debug records reach every sink, 2 also trace calls",
    )

    application: str = Field(default_factory=program_name, description="Application name in JSON records")
