# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for layered configuration loading."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from snippet_runner.config import RunnerConfig, load_config
from snippet_runner.errors import ConfigError


def _write_config(root: Path, body: str) -> None:
    root.mkdir(parents=True, exist_ok=True)
    (root / "config.toml").write_text(textwrap.dedent(body), encoding="utf-8")


def test_defaults_without_file_or_environment(tmp_path: Path) -> None:
    config = load_config(tmp_path, env={})

    assert config == RunnerConfig()
    assert config.toolchain.compiler == "rustc"
    assert config.toolchain.codegen_flags == ["prefer-dynamic", "debuginfo=0"]
    assert config.policy.entry_markers == ["fn main"]
    assert "File::" in config.policy.std_triggers


def test_file_layer_merges_nested_tables(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
        [policy]
        entry_markers = ["fn main(", "#[tokio::main]"]

        [policy.std_triggers]
        "Instant::" = ["use std::time::Instant;"]

        [output]
        compiler_color = "never"
        """,
    )

    config = load_config(tmp_path, env={})

    assert config.policy.entry_markers == ["fn main(", "#[tokio::main]"]
    assert config.policy.std_triggers == {"Instant::": ["use std::time::Instant;"]}
    assert config.output.compiler_color == "never"
    assert config.toolchain.compiler == "rustc"


def test_environment_overrides_file(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
        raise_errors = false

        [toolchain]
        compiler = "rustc-from-file"
        """,
    )

    config = load_config(
        tmp_path,
        env={"SNIPPET_RUNNER_COMPILER": "/opt/rust/bin/rustc", "SNIPPET_RUNNER_RAISE": "yes"},
    )

    assert config.toolchain.compiler == "/opt/rust/bin/rustc"
    assert config.raise_errors is True


@pytest.mark.parametrize("value", ["0", "off", ""])
def test_raise_flag_falsey_values(tmp_path: Path, value: str) -> None:
    assert load_config(tmp_path, env={"SNIPPET_RUNNER_RAISE": value}).raise_errors is False


def test_none_root_skips_file_layer() -> None:
    assert load_config(None, env={}).toolchain.compiler == "rustc"


def test_malformed_toml_raises_config_error(tmp_path: Path) -> None:
    _write_config(tmp_path, "[toolchain\ncompiler = 1\n")

    with pytest.raises(ConfigError, match="cannot load configuration"):
        load_config(tmp_path, env={})


def test_invalid_values_raise_config_error(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
        [output]
        compiler_color = "sometimes"
        """,
    )

    with pytest.raises(ConfigError, match="invalid configuration"):
        load_config(tmp_path, env={})


def test_empty_entry_marker_list_is_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "[policy]\nentry_markers = []\n")

    with pytest.raises(ConfigError):
        load_config(tmp_path, env={})
