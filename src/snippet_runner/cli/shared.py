# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors)."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass

import typer
from rich.console import Console
from rich.text import Text

from ..constants import TOOL_NAME
from ..errors import CompileError, RunnerError
from ..logging import fail as core_fail
from ..logging import info as core_info
from ..logging import warn as core_warn


@dataclass(slots=True)
class CLILogger:
    """Adapter around project logging helpers respecting CLI presentation flags.

    Diagnostics are written to standard error so they never interleave with
    the output of the program being run.
    """

    console: Console
    use_emoji: bool
    use_color: bool = True
    debug_enabled: bool = False
    _key_value_re: re.Pattern[str] = re.compile(r"([\w-]+)=(\".*?\"|\S+)")

    def error(self, message: str) -> None:
        """Print the one-line ``<tool> error: <message>`` diagnostic.

        Args:
            message: Text describing the failure.
        """

        core_fail(f"{TOOL_NAME} error: {message}", use_emoji=False, use_color=self.use_color)

    def warn(self, message: str) -> None:
        """Log a warning message honouring emoji preferences."""

        core_warn(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def info(self, message: str) -> None:
        """Log an informational message honouring emoji preferences."""

        core_info(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def echo(self, message: str) -> None:
        """Write ``message`` to stdout using Typer's echo helper."""

        typer.echo(message)

    def raw(self, payload: str) -> None:
        """Write ``payload`` to stderr byte-for-byte, without styling."""

        sys.stderr.write(payload)
        sys.stderr.flush()

    def debug(self, message: str) -> None:
        """Emit a debug message when debug logging is enabled.

        Args:
            message: Debug payload rendered with simple ``key=value`` highlighting.
        """

        if not self.debug_enabled:
            return
        text = Text("[debug] ", style="bold cyan")
        cursor = 0
        for match in self._key_value_re.finditer(message):
            start, end = match.span()
            if start > cursor:
                text.append(message[cursor:start], style="dim")
            key, raw_value = match.group(1), match.group(2)
            text.append(key, style="bold magenta")
            text.append("=", style="dim")
            text.append(raw_value, style="bold blue" if key in {"command", "cmd"} else "bold green")
            cursor = end
        if cursor < len(message):
            text.append(message[cursor:], style="dim")
        self.console.print(text)


def build_cli_logger(*, emoji: bool, debug: bool = False, no_color: bool = False) -> CLILogger:
    """Return a ``CLILogger`` bound to a dedicated stderr Rich console.

    Args:
        emoji: Whether log output may include emoji glyphs.
        debug: Whether debug logging should be enabled.
        no_color: Whether terminal colour output should be disabled.

    Returns:
        CLILogger: Configured logger instance.
    """

    console = Console(stderr=True, no_color=no_color, highlight=False, soft_wrap=True)
    return CLILogger(console=console, use_emoji=emoji, use_color=not no_color, debug_enabled=debug)


def exit_for_error(exc: RunnerError, *, logger: CLILogger, raise_errors: bool = False) -> typer.Exit:
    """Report ``exc`` and return the :class:`typer.Exit` the command should raise.

    Compiler failures are reported by replaying the compiler's own output;
    every other failure becomes a single error line.

    Raises:
        RunnerError: ``exc`` itself when ``raise_errors`` is set.
    """

    if raise_errors:
        raise exc
    if isinstance(exc, CompileError):
        logger.raw(exc.stderr)
    else:
        logger.error(str(exc))
    logger.debug(f"failure: kind={exc.kind} exit={exc.exit_code}")
    return typer.Exit(code=exc.exit_code)


__all__ = ["CLILogger", "build_cli_logger", "exit_for_error"]
