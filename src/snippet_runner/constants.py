# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants used across snippet_runner modules."""

from __future__ import annotations

from typing import Final

TOOL_NAME: Final[str] = "snippet-runner"

HOME_ENV_VAR: Final[str] = "SNIPPET_RUNNER_HOME"
XDG_CONFIG_ENV_VAR: Final[str] = "XDG_CONFIG_HOME"
COMPILER_ENV_VAR: Final[str] = "SNIPPET_RUNNER_COMPILER"
RAISE_ENV_VAR: Final[str] = "SNIPPET_RUNNER_RAISE"

CACHE_DIR_NAME: Final[str] = "runner"
PRELUDE_FILENAME: Final[str] = "prelude"
ARTIFACTS_DIR_NAME: Final[str] = "dy-cache"
CONFIG_FILENAME: Final[str] = "config.toml"

DEFAULT_COMPILER: Final[str] = "rustc"
DEFAULT_SOURCE_EXTENSION: Final[str] = ".rs"
DEFAULT_SCRATCH_DIR: Final[str] = "temp"
DEFAULT_INDENT: Final[str] = "    "

DEFAULT_PRELUDE: Final[str] = """\
#[allow(unused_imports)]
use std::error::Error;
#[allow(unused_imports)]
use std::fmt::{Debug, Display};
#[allow(unused_imports)]
use std::io::Write;

#[allow(unused_macros)]
macro_rules! debug {
    ($x:expr) => {
        println!("{} = {:?}", stringify!($x), $x)
    };
}
"""

FALLIBLE_HEADER: Final[str] = "fn run() -> Result<(), Box<dyn std::error::Error>> {"
FALLIBLE_FOOTER: Final[tuple[str, ...]] = (
    ";",
    "Ok(())",
)
ENTRY_POINT: Final[str] = """\
fn main() {
    if let Err(err) = run() {
        eprintln!("error: {}", err);
        std::process::exit(1);
    }
}
"""

SIGNAL_EXIT_BASE: Final[int] = 128
FAILURE_EXIT_CODE: Final[int] = 1
