# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI tests for the ``run``, ``expand`` and ``cache`` commands."""

from __future__ import annotations

from pathlib import Path
from subprocess import CompletedProcess

import pytest
from typer.testing import CliRunner

from snippet_runner.cli.app import app
from snippet_runner.errors import CompileError


def _completed(args: list[str], *, stderr: str = "", returncode: int = 0) -> CompletedProcess[str]:
    return CompletedProcess(args=args, returncode=returncode, stdout="", stderr=stderr)


@pytest.fixture
def hello(workdir: Path) -> Path:
    path = workdir / "hello.rs"
    path.write_text('println!("hi")\n', encoding="utf-8")
    return path


def test_run_without_script_reports_usage() -> None:
    result = CliRunner().invoke(app, ["run"])

    assert result.exit_code == 1
    assert "snippet-runner error: please supply a source file" in result.output


def test_run_rejects_wrong_extension_before_reading(workdir: Path, isolated_config_home: Path) -> None:
    result = CliRunner().invoke(app, ["run", "notes.txt"])

    assert result.exit_code == 1
    assert "notes.txt: must have extension .rs" in result.output
    assert not (isolated_config_home / "runner").exists()


@pytest.mark.parametrize("command", ["run", "expand"])
def test_wrong_extension_reported_even_with_broken_config(
    workdir: Path,
    isolated_config_home: Path,
    command: str,
) -> None:
    root = isolated_config_home / "runner"
    root.mkdir(parents=True)
    (root / "config.toml").write_text("[toolchain\ncompiler = \n", encoding="utf-8")

    result = CliRunner().invoke(app, [command, "notes.txt"])

    assert result.exit_code == 1
    assert "notes.txt: must have extension .rs" in result.output
    assert "configuration" not in result.output


def test_broken_config_reported_for_valid_script(workdir: Path, isolated_config_home: Path, hello: Path) -> None:
    root = isolated_config_home / "runner"
    root.mkdir(parents=True)
    (root / "config.toml").write_text("[toolchain\n", encoding="utf-8")

    result = CliRunner().invoke(app, ["run", "hello.rs"])

    assert result.exit_code == 1
    assert "snippet-runner error: cannot load configuration" in result.output


def test_run_missing_script_is_an_error(workdir: Path) -> None:
    result = CliRunner().invoke(app, ["run", "absent.rs"])

    assert result.exit_code == 1
    assert "snippet-runner error: cannot read absent.rs" in result.output


def test_run_forwards_arguments_and_exit_code(monkeypatch: pytest.MonkeyPatch, hello: Path) -> None:
    forwarded: list[list[str]] = []

    def fake_run_artifact(artifact, args, **kwargs):  # noqa: ANN001
        forwarded.append(list(args))
        return 3

    monkeypatch.setattr("snippet_runner.toolchain.run_command", lambda args, **kwargs: _completed(list(args)))
    monkeypatch.setattr("snippet_runner.pipeline.run_artifact", fake_run_artifact)

    result = CliRunner().invoke(app, ["run", "hello.rs", "-v", "--flag", "value", "x y"])

    assert result.exit_code == 3
    assert forwarded == [["-v", "--flag", "value", "x y"]]
    assert (hello.parent / "temp" / "hello.rs").is_file()


def test_run_replays_compiler_output_verbatim(monkeypatch: pytest.MonkeyPatch, hello: Path) -> None:
    diagnostics = "error: expected `;`, found `}`\n --> temp/hello.rs:14:20\n"

    monkeypatch.setattr(
        "snippet_runner.toolchain.run_command",
        lambda args, **kwargs: _completed(list(args), stderr=diagnostics, returncode=1),
    )

    result = CliRunner().invoke(app, ["run", "hello.rs"])

    assert result.exit_code == 1
    assert diagnostics in result.output
    assert "snippet-runner error" not in result.output


def test_run_verbose_reports_stages(monkeypatch: pytest.MonkeyPatch, hello: Path) -> None:
    monkeypatch.setattr("snippet_runner.toolchain.run_command", lambda args, **kwargs: _completed(list(args)))
    monkeypatch.setattr("snippet_runner.pipeline.run_artifact", lambda artifact, args, **kwargs: 0)

    result = CliRunner().invoke(app, ["run", "--verbose", "--no-color", "--show-expanded", "hello.rs"])

    assert result.exit_code == 0
    assert "[debug] compile: command=" in result.output
    assert "expanded code is in" in result.output


def test_run_raise_flag_reraises(monkeypatch: pytest.MonkeyPatch, hello: Path) -> None:
    monkeypatch.setenv("SNIPPET_RUNNER_RAISE", "1")
    monkeypatch.setattr(
        "snippet_runner.toolchain.run_command",
        lambda args, **kwargs: _completed(list(args), stderr="boom\n", returncode=1),
    )

    result = CliRunner().invoke(app, ["run", "hello.rs"])

    assert isinstance(result.exception, CompileError)


def test_expand_prints_generated_program(hello: Path) -> None:
    result = CliRunner().invoke(app, ["expand", "hello.rs"])

    assert result.exit_code == 0
    assert "fn run() -> Result<(), Box<dyn std::error::Error>> {" in result.stdout
    assert 'println!("hi")' in result.stdout


def test_expand_body_prints_wrapped_lines_only(hello: Path) -> None:
    result = CliRunner().invoke(app, ["expand", "--body", "hello.rs"])

    assert result.exit_code == 0
    assert result.stdout == 'println!("hi")\n'


def test_expand_rejects_wrong_extension(workdir: Path) -> None:
    result = CliRunner().invoke(app, ["expand", "notes.txt"])

    assert result.exit_code == 1
    assert "must have extension .rs" in result.output


def test_cache_command_creates_and_lists_locations(isolated_config_home: Path) -> None:
    result = CliRunner().invoke(app, ["cache"])

    root = isolated_config_home / "runner"
    assert result.exit_code == 0
    assert f"root: {root}" in result.stdout
    assert f"artifacts: {root / 'dy-cache'}" in result.stdout
    assert (root / "prelude").is_file()


def test_run_warns_about_missing_dependency_library(monkeypatch: pytest.MonkeyPatch, workdir: Path) -> None:
    (workdir / "deps.rs").write_text("extern crate regex;\nlet x = 1;\n", encoding="utf-8")
    monkeypatch.setattr(
        "snippet_runner.toolchain.run_command",
        lambda args, **kwargs: _completed(list(args), stderr="error[E0463]: can't find crate\n", returncode=1),
    )

    result = CliRunner().invoke(app, ["run", "--no-emoji", "deps.rs"])

    assert result.exit_code == 1
    assert "no shared library for regex" in result.output
    assert "error[E0463]: can't find crate\n" in result.output


def test_help_lists_commands_and_options_alphabetically() -> None:
    runner = CliRunner()

    group_help = runner.invoke(app, ["--help"])
    run_help = runner.invoke(app, ["run", "--help"])

    assert group_help.exit_code == 0
    commands = [group_help.output.index(f"  {name} ") for name in ("cache", "expand", "run")]
    assert commands == sorted(commands)
    assert run_help.exit_code == 0
    options = [run_help.output.index(flag) for flag in ("--cache-dir", "--color", "--emoji", "--show-expanded", "--verbose")]
    assert options == sorted(options)
