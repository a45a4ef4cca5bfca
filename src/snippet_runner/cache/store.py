# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Persistent prelude and shared-library cache under the user's config area.

The cache lives at ``<config-root>/runner`` and holds two children:

* ``prelude``: boilerplate prepended to every wrapped snippet. It is written
  once, on first use, and is read-only afterwards.
* ``dy-cache/``: shared libraries built by tooling outside this package and
  linked into snippets that declare ``extern crate`` dependencies.

First-time initialisation builds the whole directory in a hidden staging
directory next to it and renames it into place, so the cache never becomes
visible without its prelude. When two first runs race, one rename wins and
the other discards its staging copy and reads back the winner's prelude.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from ..constants import (
    ARTIFACTS_DIR_NAME,
    CACHE_DIR_NAME,
    DEFAULT_PRELUDE,
    HOME_ENV_VAR,
    PRELUDE_FILENAME,
    XDG_CONFIG_ENV_VAR,
)
from ..errors import FileSystemError


@dataclass(frozen=True, slots=True)
class CacheHandle:
    """Immutable view of an initialised cache directory.

    Attributes:
        root: Cache directory (``<config-root>/runner``).
        prelude_path: Location of the cached prelude file.
        artifacts_dir: Directory searched for dependency shared libraries.
        prelude: Prelude text read from ``prelude_path``.
    """

    root: Path
    prelude_path: Path
    artifacts_dir: Path
    prelude: str


def config_root(env: Mapping[str, str] | None = None) -> Path:
    """Return the configuration root that hosts the cache directory.

    ``SNIPPET_RUNNER_HOME`` wins, then ``XDG_CONFIG_HOME``, then ``~/.config``.
    """

    environment = os.environ if env is None else env
    for variable in (HOME_ENV_VAR, XDG_CONFIG_ENV_VAR):
        value = environment.get(variable)
        if value:
            return Path(value).expanduser()
    return Path.home() / ".config"


def default_cache_root(env: Mapping[str, str] | None = None) -> Path:
    """Return ``<config-root>/runner``."""

    return config_root(env) / CACHE_DIR_NAME


def _make_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FileSystemError(f"cannot create cache directory {path}: {exc}", path=path) from exc


def _write_default_prelude(path: Path) -> None:
    try:
        with path.open("x", encoding="utf-8") as handle:
            handle.write(DEFAULT_PRELUDE)
    except OSError as exc:
        raise FileSystemError(f"cannot write prelude {path}: {exc}", path=path) from exc


def _read_prelude(path: Path) -> str:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileSystemError(f"cannot read prelude {path}: {exc}", path=path) from exc
    if not text.strip():
        raise FileSystemError(f"prelude {path} is empty; remove {path.parent} to regenerate it", path=path)
    return text


def _publish_new_cache(cache_root: Path) -> None:
    """Create ``cache_root`` with its prelude and artifacts directory in one rename."""

    _make_dir(cache_root.parent)
    try:
        staging = Path(tempfile.mkdtemp(prefix=f".{cache_root.name}-", dir=cache_root.parent))
    except OSError as exc:
        raise FileSystemError(f"cannot create cache directory {cache_root}: {exc}", path=cache_root) from exc

    try:
        _write_default_prelude(staging / PRELUDE_FILENAME)
        _make_dir(staging / ARTIFACTS_DIR_NAME)
        staging.rename(cache_root)
    except FileSystemError:
        shutil.rmtree(staging, ignore_errors=True)
        raise
    except OSError as exc:
        shutil.rmtree(staging, ignore_errors=True)
        if cache_root.is_dir():
            # Another process published the cache first.
            return
        raise FileSystemError(f"cannot create cache directory {cache_root}: {exc}", path=cache_root) from exc


def ensure_cache(root: Path | None = None) -> CacheHandle:
    """Create the cache on first use and return a handle to it.

    Args:
        root: Cache directory override; defaults to :func:`default_cache_root`.

    Returns:
        CacheHandle: Paths and prelude text of the initialised cache.

    Raises:
        FileSystemError: If the directory cannot be created, or it exists but
            the prelude is missing, unreadable or empty.
    """

    cache_root = default_cache_root() if root is None else root
    prelude_path = cache_root / PRELUDE_FILENAME
    artifacts_dir = cache_root / ARTIFACTS_DIR_NAME

    if not cache_root.is_dir():
        _publish_new_cache(cache_root)
    _make_dir(artifacts_dir)

    return CacheHandle(
        root=cache_root,
        prelude_path=prelude_path,
        artifacts_dir=artifacts_dir,
        prelude=_read_prelude(prelude_path),
    )


__all__ = ["CacheHandle", "config_root", "default_cache_root", "ensure_cache"]
