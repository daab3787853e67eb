"""
Console color rendering.
"""

from __future__ import annotations

from typing import Any

from .config import ColorMode

# =============================================================================
# ANSI Color Codes
# =============================================================================

COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "black": "\033[30m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "magenta": "\033[35m",
    "cyan": "\033[36m",
    "white": "\033[37m",
}

# Inherited mapping; CRIT/ALERT/EMERG are kept as they have always been.
LEVEL_COLORS = {
    "DEBUG": "blue",
    "INFO": "green",
    "NOTICE": "cyan",
    "WARN": "yellow",
    "ERROR": "red",
    "CRIT": "white",
    "ALERT": "magenta",
    "EMERG": "black",
}


def colorize(text: str, color: str, *, bold: bool = False) -> str:
    """Apply ANSI color to text."""
    prefix = COLORS["bold"] if bold else ""
    return f"{prefix}{COLORS.get(color, '')}{text}{COLORS['reset']}"


def use_color(mode: ColorMode, stream: Any) -> bool:
    if mode == ColorMode.ALWAYS:
        return True
    if mode == ColorMode.NEVER:
        return False
    return bool(getattr(stream, "isatty", lambda: False)())


def render(text: str, style: str, *, color: bool = True) -> str:
    """Render ``text`` bold in ``style`` or return it untouched."""
    if not color:
        return text
    return colorize(text, style, bold=True)


def render_level(text: str, level: str, *, color: bool = True) -> str:
    return render(text, LEVEL_COLORS.get(level, "black"), color=color)
