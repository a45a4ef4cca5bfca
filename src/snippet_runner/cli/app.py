# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared services."""

from __future__ import annotations

from .run import register
from .typer_ext import create_typer

app = create_typer(
    name="snippet-runner",
    help="Compile and run bare Rust snippets without a Cargo project.",
    no_args_is_help=True,
    add_completion=False,
)
register(app)

__all__ = ["app"]
