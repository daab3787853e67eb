from __future__ import annotations

import sys
import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from sinklog import LoggingSettings
from sinklog.config import ColorMode, FallbackEscaping, program_name


def test_defaults(monkeypatch) -> None:
    monkeypatch.setattr(sys, "argv", ["/usr/local/bin/backup.sh"])
    settings = LoggingSettings()

    assert settings.date_format == "%Y-%m-%d %H:%M:%S"
    assert settings.console_enabled is True
    assert settings.file_enabled is False
    assert settings.json_enabled is False
    assert settings.syslog_enabled is False
    assert settings.console_level == "INFO"
    assert settings.console_color == ColorMode.AUTO
    assert settings.file_path == Path(tempfile.gettempdir()) / "backup.sh.log"
    assert settings.json_path == Path(tempfile.gettempdir()) / "backup.sh.log.json"
    assert settings.json_library is True
    assert settings.json_fallback_escaping == FallbackEscaping.QUOTES
    assert settings.syslog_tag == "backup.sh"
    assert settings.syslog_facility == "local0"
    assert settings.rotation_size == 5242880
    assert settings.debug == 0
    assert settings.application == "backup.sh"


def test_environment_overrides(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("SINKLOG_FILE_ENABLED", "1")
    monkeypatch.setenv("SINKLOG_CONSOLE_ENABLED", "0")
    monkeypatch.setenv("SINKLOG_FILE_PATH", str(tmp_path / "custom.log"))
    monkeypatch.setenv("SINKLOG_ROTATION_SIZE", "1024")
    monkeypatch.setenv("SINKLOG_SYSLOG_FACILITY", "local5")
    monkeypatch.setenv("SINKLOG_JSON_FALLBACK_ESCAPING", "full")

    settings = LoggingSettings()

    assert settings.file_enabled is True
    assert settings.console_enabled is False
    assert settings.file_path == tmp_path / "custom.log"
    assert settings.rotation_size == 1024
    assert settings.syslog_facility == "local5"
    assert settings.json_fallback_escaping == FallbackEscaping.FULL


@pytest.mark.parametrize("variable", ["DEBUG", "SINKLOG_DEBUG"])
def test_debug_flag_from_environment(monkeypatch, variable: str) -> None:
    monkeypatch.setenv(variable, "2")
    assert LoggingSettings().debug == 2


def test_dotenv_file_is_read(tmp_path) -> None:
    (tmp_path / ".env").write_text("SINKLOG_CONSOLE_LEVEL=warn\n", encoding="utf-8")
    assert LoggingSettings().console_level == "warn"


def test_settings_are_frozen() -> None:
    settings = LoggingSettings()
    with pytest.raises(ValidationError):
        settings.debug = 1


@pytest.mark.parametrize("field", ["rotation_size", "debug"])
def test_negative_values_rejected(field: str) -> None:
    with pytest.raises(ValidationError):
        LoggingSettings(**{field: -1})


def test_program_name_falls_back_to_python(monkeypatch) -> None:
    monkeypatch.setattr(sys, "argv", [""])
    assert program_name() == "python"
