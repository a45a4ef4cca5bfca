# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import shutil

# Bandit: subprocess usage is intentional; the wrapper passes argument lists
# directly and never enables ``shell=True``.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from pathlib import Path
from subprocess import CompletedProcess


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Resolve the executable of ``args`` against ``PATH``.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If a bare executable name is not on ``PATH``.
    """

    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    env: Mapping[str, str] | None = None,
    capture_output: bool = False,
) -> CompletedProcess[str]:
    """Execute ``args`` after normalising the executable path.

    The exit status is returned, never raised; callers decide what a
    non-zero status means.

    Args:
        args: Command and argument sequence to execute.
        env: Complete environment for the child, or ``None`` to inherit.
        capture_output: Capture stdout and stderr as text instead of
            inheriting the parent's streams.

    Returns:
        CompletedProcess: Subprocess execution metadata.

    Raises:
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
        OSError: If the operating system refuses to spawn the process.
    """

    normalized = _normalize_args(args)

    # Bandit: arguments are passed as a list without shell expansion.
    return subprocess.run(  # nosec B603
        normalized,
        env=dict(env) if env is not None else None,
        check=False,
        capture_output=capture_output,
        text=True,
    )


__all__ = ["run_command"]
