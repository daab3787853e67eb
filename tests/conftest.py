import os
import typing as t
from datetime import datetime

import pytest

from sinklog import Logger, LoggingSettings

FROZEN_NOW = datetime(2024, 5, 1, 12, 30, 45)
FROZEN_TIMESTAMP = "2024-05-01 12:30:45"


class RecordingTransport:
    """Syslog transport that keeps every message in memory."""

    def __init__(self, fail: bool = False):
        self.sent: list[tuple[int, str, str]] = []
        self.closed = False
        self.fail = fail

    def send(self, priority: int, tag: str, message: str) -> None:
        if self.fail:
            raise OSError("syslog socket unavailable")
        self.sent.append((priority, tag, message))

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """
    Keep host configuration out of the tests.
    Removes SINKLOG_* and DEBUG variables and runs each test from an empty
    directory so no stray .env file is picked up.
    """
    for name in list(os.environ):
        if name.upper().startswith("SINKLOG_") or name.upper() == "DEBUG":
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture
def clock() -> t.Callable[[], datetime]:
    return lambda: FROZEN_NOW


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def make_settings(tmp_path) -> t.Callable[..., LoggingSettings]:
    def factory(**overrides: t.Any) -> LoggingSettings:
        values: dict[str, t.Any] = {
            "file_path": tmp_path / "logs" / "app.log",
            "json_path": tmp_path / "logs" / "app.log.json",
            "console_color": "never",
            "application": "app",
            "syslog_tag": "app",
        }
        values.update(overrides)
        return LoggingSettings(**values)

    return factory


@pytest.fixture
def make_logger(make_settings, transport, clock) -> t.Callable[..., Logger]:
    def factory(**overrides: t.Any) -> Logger:
        on_fatal = overrides.pop("on_fatal", None)
        return Logger(make_settings(**overrides), syslog_transport=transport, clock=clock, on_fatal=on_fatal)

    return factory
