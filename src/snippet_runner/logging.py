# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers with optional colour and emoji support."""

from __future__ import annotations

import sys
from functools import cache
from typing import Literal, TextIO

from rich.console import Console
from rich.text import Text

StreamName = Literal["stdout", "stderr"]


def _stream(name: StreamName) -> TextIO:
    return sys.stderr if name == "stderr" else sys.stdout


def detect_tty(stream: StreamName = "stdout") -> bool:
    """Return ``True`` when the named stream appears to be backed by a terminal.

    Args:
        stream: Which standard stream to check.

    Returns:
        bool: ``True`` when the stream reports TTY support, ``False`` otherwise.
    """

    try:
        return _stream(stream).isatty()
    except (AttributeError, ValueError):
        return False


class RichConsoleManager:
    """Provision Rich :class:`Console` instances keyed by presentation flags."""

    def __init__(self) -> None:
        self._cache: dict[tuple[bool, bool, StreamName, bool], Console] = {}

    def get(self, *, color: bool, emoji: bool, stream: StreamName = "stdout") -> Console:
        """Return a Rich console configured for ``color`` and ``emoji`` preferences.

        Args:
            color: ``True`` when ANSI colour output should be enabled.
            emoji: ``True`` when Rich should render emoji glyphs.
            stream: Standard stream the console writes to.

        Returns:
            Console: Cached or newly constructed console matching the preferences.
        """

        tty = detect_tty(stream)
        key = (color, emoji, stream, tty)
        if key not in self._cache:
            self._cache[key] = Console(
                color_system="auto" if color and tty else None,
                force_terminal=tty,
                no_color=not (color and tty),
                emoji=emoji,
                soft_wrap=True,
                stderr=stream == "stderr",
                highlight=False,
            )
        return self._cache[key]


@cache
def get_console_manager() -> RichConsoleManager:
    """Return the process-wide :class:`RichConsoleManager` instance."""

    return RichConsoleManager()


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(
    msg: str,
    *,
    style: str | None,
    use_emoji: bool,
    use_color: bool | None = None,
    stream: StreamName = "stderr",
) -> None:
    """Render ``msg`` to the console using shared styling helpers.

    Args:
        msg: Message text to print to the console.
        style: Rich style name to apply when colour output is active.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
        stream: Standard stream receiving the message.
    """

    color_enabled = detect_tty(stream) if use_color is None else use_color
    console = get_console_manager().get(color=color_enabled, emoji=use_emoji, stream=stream)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an informational message."""

    prefix = emoji("ℹ️ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="cyan", use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a warning message."""

    prefix = emoji("⚠️ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="yellow", use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message on standard error."""

    prefix = emoji("❌ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="red", use_emoji=use_emoji, use_color=use_color)


__all__ = [
    "RichConsoleManager",
    "detect_tty",
    "emoji",
    "fail",
    "get_console_manager",
    "info",
    "warn",
]
