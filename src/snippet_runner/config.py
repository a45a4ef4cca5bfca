# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loading helpers for the snippet runner.

Configuration is layered: built-in defaults, then an optional
``config.toml`` stored next to the cached prelude, then environment
overrides. The heuristics used by :mod:`snippet_runner.analysis` are
expressed as a :class:`SnippetPolicy` table so that individual rules
(which entry-point marker counts, whether ``extern crate`` lines are passed
through) can be switched without touching the analyzer.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .constants import (
    COMPILER_ENV_VAR,
    CONFIG_FILENAME,
    DEFAULT_COMPILER,
    DEFAULT_INDENT,
    DEFAULT_SCRATCH_DIR,
    RAISE_ENV_VAR,
)
from .errors import ConfigError

_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


def _default_std_triggers() -> dict[str, list[str]]:
    return {
        "File::": ["use std::fs::File;", "use std::io::prelude::*;"],
        "env::": ["use std::env;"],
        "PathBuf::": ["use std::path::PathBuf;"],
        "HashMap::": ["use std::collections::HashMap;"],
    }


class SnippetPolicy(BaseModel):
    """Heuristic rules used to analyse and wrap snippets."""

    model_config = ConfigDict(validate_assignment=True)

    entry_markers: list[str] = Field(default_factory=lambda: ["fn main"], min_length=1)
    std_triggers: dict[str, list[str]] = Field(default_factory=_default_std_triggers)
    declaration_keyword: str = Field(default="extern crate", min_length=1)
    comment_prefixes: list[str] = Field(default_factory=lambda: ["//"])
    import_prefixes: list[str] = Field(default_factory=lambda: ["use "])
    declarations_pass_through: bool = True
    indent: str = DEFAULT_INDENT


class ToolchainConfig(BaseModel):
    """Compiler invocation settings."""

    model_config = ConfigDict(validate_assignment=True)

    compiler: str = DEFAULT_COMPILER
    scratch_dir: Path = Path(DEFAULT_SCRATCH_DIR)
    codegen_flags: list[str] = Field(default_factory=lambda: ["prefer-dynamic", "debuginfo=0"])


class OutputConfig(BaseModel):
    """Configuration for console output produced by the runner itself."""

    model_config = ConfigDict(validate_assignment=True)

    verbose: bool = False
    emoji: bool = True
    color: bool = True
    compiler_color: Literal["auto", "always", "never"] = "auto"
    show_expanded: bool = False


class RunnerConfig(BaseModel):
    """Top-level configuration bundle consumed by the pipeline."""

    model_config = ConfigDict(validate_assignment=True)

    policy: SnippetPolicy = Field(default_factory=SnippetPolicy)
    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    raise_errors: bool = False


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(current, value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> dict[str, Any]:
    """Return the TOML document stored at ``path`` or an empty mapping.

    Raises:
        ConfigError: If the file exists but cannot be read or parsed.
    """

    if not path.is_file():
        return {}
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"cannot load configuration at {path}: {exc}") from exc


def _settings_from_environment(env: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    compiler = env.get(COMPILER_ENV_VAR, "").strip()
    if compiler:
        overrides["toolchain"] = {"compiler": compiler}
    raise_flag = env.get(RAISE_ENV_VAR)
    if raise_flag is not None:
        overrides["raise_errors"] = raise_flag.strip().lower() in _TRUTHY
    return overrides


def load_config(cache_root: Path | None, *, env: Mapping[str, str] | None = None) -> RunnerConfig:
    """Return the effective configuration for one invocation.

    Args:
        cache_root: Cache directory that may hold ``config.toml``. ``None``
            skips the file layer.
        env: Optional environment mapping used instead of :mod:`os.environ`.

    Returns:
        RunnerConfig: Defaults merged with the file and environment layers.

    Raises:
        ConfigError: If the file is unreadable or fails validation.
    """

    environment = os.environ if env is None else env
    payload: dict[str, Any] = {}
    if cache_root is not None:
        payload = _deep_merge(payload, _read_toml(cache_root / CONFIG_FILENAME))
    payload = _deep_merge(payload, _settings_from_environment(environment))
    try:
        return RunnerConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration: {exc}") from exc


__all__ = [
    "OutputConfig",
    "RunnerConfig",
    "SnippetPolicy",
    "ToolchainConfig",
    "load_config",
]
