# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""End-to-end runs against a real compiler, skipped when none is installed."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest
from typer.testing import CliRunner

from snippet_runner.cli.app import app
from snippet_runner.toolchain import runtime_library_dir

pytestmark = pytest.mark.skipif(shutil.which("rustc") is None, reason="rustc is not installed")


def _write(workdir: Path, name: str, body: str) -> Path:
    path = workdir / name
    path.write_text(body, encoding="utf-8")
    return path


def test_fragment_prints_output(workdir: Path, capfd: pytest.CaptureFixture[str]) -> None:
    _write(workdir, "hello.rs", 'println!("hi")\n')

    result = CliRunner().invoke(app, ["run", "hello.rs"])

    assert result.exit_code == 0
    assert capfd.readouterr().out == "hi\n"


def test_triggered_import_is_emitted_once(workdir: Path) -> None:
    _write(workdir, "files.rs", 'use std::fs::File;\nlet _f = File::create("out.txt")?;\n')

    result = CliRunner().invoke(app, ["run", "files.rs"])

    assert result.exit_code == 0
    generated = (workdir / "temp" / "files.rs").read_text(encoding="utf-8")
    assert generated.count("use std::fs::File;") == 1
    assert (workdir / "out.txt").is_file()


def test_complete_program_exit_status_and_args(workdir: Path, capfd: pytest.CaptureFixture[str]) -> None:
    _write(
        workdir,
        "args.rs",
        "fn main() {\n"
        "    let args: Vec<String> = std::env::args().skip(1).collect();\n"
        '    println!("{}", args.join("|"));\n'
        "    std::process::exit(5);\n"
        "}\n",
    )

    result = CliRunner().invoke(app, ["run", "args.rs", "--flag", "two words"])

    assert result.exit_code == 5
    assert capfd.readouterr().out == "--flag|two words\n"


def test_fallible_body_error_exits_with_failure(workdir: Path, capfd: pytest.CaptureFixture[str]) -> None:
    _write(workdir, "fail.rs", 'let _f = std::fs::File::open("does-not-exist")?;\n')

    result = CliRunner().invoke(app, ["run", "fail.rs"])

    assert result.exit_code == 1
    assert "error:" in capfd.readouterr().err


def test_pass_through_use_overlapping_prelude_compiles(workdir: Path, capfd: pytest.CaptureFixture[str]) -> None:
    _write(workdir, "write.rs", 'use std::io::Write;\nwriteln!(std::io::stdout(), "hi")?;\n')

    result = CliRunner().invoke(app, ["run", "write.rs"])

    assert result.exit_code == 0
    assert capfd.readouterr().out == "hi\n"


def test_runtime_library_dir_holds_the_standard_library() -> None:
    libdir = runtime_library_dir("rustc")

    assert libdir.is_dir()
    assert any(libdir.glob("*std-*"))
