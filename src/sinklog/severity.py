"""
RFC 5424 severity table.
"""

from __future__ import annotations

from enum import IntEnum
from typing import NamedTuple

from .exceptions import InvalidLevelError


class Severity(IntEnum):
    """Numeric syslog severity. Lower is more severe."""

    EMERG = 0
    ALERT = 1
    CRIT = 2
    ERROR = 3
    WARN = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7


class ResolvedLevel(NamedTuple):
    severity: Severity
    name: str
    valid: bool


def severity_of(level: str) -> tuple[Severity, str]:
    """Look up a level name case-insensitively.

    Returns the severity and the canonical upper-case name.

    Raises:
        InvalidLevelError: if the name is not one of the eight levels.
    """
    upper = str(level).upper()
    try:
        severity = Severity[upper]
    except KeyError:
        raise InvalidLevelError(upper) from None
    return severity, severity.name


def resolve_level(level: str) -> ResolvedLevel:
    """Like :func:`severity_of` but degrades unknown names to ERROR."""
    try:
        severity, name = severity_of(level)
    except InvalidLevelError:
        return ResolvedLevel(Severity.ERROR, Severity.ERROR.name, False)
    return ResolvedLevel(severity, name, True)


def threshold_of(level: str, default: Severity = Severity.INFO) -> Severity:
    """Severity for a configured threshold name; unknown names use ``default``."""
    try:
        return severity_of(level)[0]
    except InvalidLevelError:
        return default
