# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from snippet_runner.cache import CacheHandle, ensure_cache
from snippet_runner.config import RunnerConfig


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the cache at a per-test config root and clear runner overrides."""

    home = tmp_path / "config-home"
    monkeypatch.setenv("SNIPPET_RUNNER_HOME", str(home))
    monkeypatch.delenv("SNIPPET_RUNNER_COMPILER", raising=False)
    monkeypatch.delenv("SNIPPET_RUNNER_RAISE", raising=False)
    return home


@pytest.fixture
def cache(tmp_path: Path) -> CacheHandle:
    """Return a freshly initialised cache under ``tmp_path``."""

    return ensure_cache(tmp_path / "cache" / "runner")


@pytest.fixture
def config() -> RunnerConfig:
    """Return default configuration with compiler colour disabled."""

    runner_config = RunnerConfig()
    runner_config.output.compiler_color = "never"
    return runner_config


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Change into an empty working directory for scratch output."""

    path = tmp_path / "work"
    path.mkdir()
    monkeypatch.chdir(path)
    return path
