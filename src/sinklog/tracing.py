"""
Optional call tracing driven by the debug flag.

The host program installs a :class:`CommandTracer` around the code it wants
traced; the dispatcher knows nothing about it. With ``debug >= 1`` the tracer
remembers the current and previous traced call, and with ``debug >= 2`` every
call is also logged at DEBUG as ``EXEC: <command>``.
"""

from __future__ import annotations

import sys
from types import FrameType, TracebackType
from typing import Any

from .core import Logger

_IGNORED_PACKAGES = (__name__.split(".")[0], "structlog")


def _inside_logging(frame: FrameType | None) -> bool:
    while frame is not None:
        module = frame.f_globals.get("__name__", "")
        if module.split(".")[0] in _IGNORED_PACKAGES:
            return True
        frame = frame.f_back
    return False


class CommandTracer:
    def __init__(self, logger: Logger):
        self.logger = logger
        self.previous_command: str | None = None
        self.current_command: str | None = None
        self._installed = False

    @property
    def installed(self) -> bool:
        return self._installed

    @staticmethod
    def describe(frame: FrameType) -> str:
        module = frame.f_globals.get("__name__", "?")
        qualname = getattr(frame.f_code, "co_qualname", frame.f_code.co_name)
        return f"{module}.{qualname}"

    def _trace(self, frame: FrameType, event: str, arg: Any) -> None:
        if event != "call":
            return None
        if _inside_logging(frame):
            return None

        self.previous_command = self.current_command
        self.current_command = self.describe(frame)
        if self.logger.settings.debug > 1:
            self.logger.debug(f"EXEC: {self.current_command}")
        return None

    def install(self) -> bool:
        """Start tracing. Returns False when the debug flag is off or another tracer owns the hook."""
        if self.logger.settings.debug <= 0:
            return False
        if self._installed:
            return True
        if sys.gettrace() is not None:
            self.logger.error("Command trace hook failed to set")
            return False
        sys.settrace(self._trace)
        self._installed = True
        self.logger.debug("Command trace hook set")
        return True

    def uninstall(self) -> None:
        if self._installed and sys.gettrace() == self._trace:
            sys.settrace(None)
        self._installed = False

    def __enter__(self) -> "CommandTracer":
        self.install()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.uninstall()
