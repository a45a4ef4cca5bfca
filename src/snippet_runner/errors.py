# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by every stage of the snippet pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from .constants import FAILURE_EXIT_CODE


class RunnerError(RuntimeError):
    """Base error raised when a pipeline stage fails and the run must abort."""

    kind = "error"

    def __init__(self, message: str, *, exit_code: int = FAILURE_EXIT_CODE) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


class UsageError(RunnerError):
    """Raised for missing arguments or a script path with the wrong extension."""

    kind = "usage"


class ConfigError(RunnerError):
    """Raised when configuration input is invalid."""

    kind = "config"


class FileSystemError(RunnerError):
    """Raised when cache or scratch files cannot be created or read."""

    kind = "filesystem"

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class ParseError(RunnerError):
    """Raised when a dependency declaration is not followed by an identifier."""

    kind = "parse"

    def __init__(self, message: str, *, offset: int) -> None:
        super().__init__(message)
        self.offset = offset


class CompileError(RunnerError):
    """Raised when the compiler rejects the synthesized program.

    The compiler's standard error is kept verbatim in :attr:`stderr`; callers
    surface it unchanged instead of the one-line error message.
    """

    kind = "compile"

    def __init__(self, stderr: str, *, returncode: int) -> None:
        super().__init__(f"compiler exited with status {returncode}")
        self.stderr = stderr
        self.returncode = returncode


class LaunchError(RunnerError):
    """Raised when an executable (compiler or artifact) cannot be spawned."""

    kind = "launch"

    def __init__(self, message: str, *, command: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.command = tuple(command)


__all__ = [
    "CompileError",
    "ConfigError",
    "FileSystemError",
    "LaunchError",
    "ParseError",
    "RunnerError",
    "UsageError",
]
