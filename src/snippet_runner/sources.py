# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Loading and validation of snippet source files."""

from __future__ import annotations

from pathlib import Path

from .constants import DEFAULT_SOURCE_EXTENSION
from .errors import FileSystemError, UsageError


def validate_script_path(path: Path, *, extension: str = DEFAULT_SOURCE_EXTENSION) -> Path:
    """Return ``path`` when it carries the toolchain's source extension.

    Args:
        path: Script path supplied on the command line.
        extension: Required suffix, including the leading dot.

    Returns:
        Path: The unchanged path.

    Raises:
        UsageError: If the path has any other (or no) extension.
    """

    if path.suffix != extension:
        raise UsageError(f"{path}: must have extension {extension}")
    return path


def load_snippet(path: Path) -> str:
    """Read the snippet stored at ``path`` as UTF-8 text.

    Raises:
        FileSystemError: If the file cannot be read or decoded.
    """

    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileSystemError(f"cannot read {path}: {exc}", path=path) from exc


__all__ = ["load_snippet", "validate_script_path"]
