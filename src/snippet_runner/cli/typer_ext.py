# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer classes giving the runner stable, alphabetised help output."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Final, TypeVar

import typer
from click.core import Context, Parameter
from click.formatting import HelpFormatter
from typer.core import TyperCommand, TyperGroup

#: Context settings for commands whose trailing arguments belong to the snippet.
PASSTHROUGH_CONTEXT: Final[dict[str, Any]] = {
    "allow_interspersed_args": False,
    "ignore_unknown_options": True,
}

F = TypeVar("F", bound=Callable[..., Any])


def _sort_key(param: Parameter) -> str:
    """Return the long flag (or name) a parameter is listed under."""

    flags = [*getattr(param, "opts", ()), *getattr(param, "secondary_opts", ())]
    long_flags = [flag for flag in flags if flag.startswith("--")]
    if long_flags:
        return long_flags[0].lstrip("-").lower()
    return (flags[0] if flags else param.name or "").lstrip("-").lower()


class RunnerCommand(TyperCommand):
    """Command listing positional arguments first, then options by flag name."""

    def format_options(self, ctx: Context, formatter: HelpFormatter) -> None:
        arguments: list[tuple[str, str]] = []
        options: list[tuple[str, tuple[str, str]]] = []
        for param in self.get_params(ctx):
            record = param.get_help_record(ctx)
            if record is None:
                continue
            if param.param_type_name == "argument":
                arguments.append(record)
            else:
                options.append((_sort_key(param), record))

        if arguments:
            with formatter.section("Arguments"):
                formatter.write_dl(arguments)
        if options:
            options.sort(key=lambda item: item[0])
            with formatter.section("Options"):
                formatter.write_dl([record for _, record in options])


class RunnerGroup(TyperGroup):
    """Group whose subcommands use :class:`RunnerCommand` and list alphabetically."""

    command_class = RunnerCommand

    def list_commands(self, ctx: Context) -> list[str]:
        return sorted(super().list_commands(ctx))


class RunnerTyper(typer.Typer):
    """Typer application wired to :class:`RunnerGroup` and :class:`RunnerCommand`."""

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("cls", RunnerGroup)
        kwargs.setdefault("rich_markup_mode", None)
        super().__init__(**kwargs)

    def command(self, name: str | None = None, **kwargs: Any) -> Callable[[F], F]:
        kwargs.setdefault("cls", RunnerCommand)
        return super().command(name, **kwargs)


def create_typer(**kwargs: Any) -> RunnerTyper:
    """Return the application object used by ``snippet-runner``."""

    return RunnerTyper(**kwargs)


__all__ = ["PASSTHROUGH_CONTEXT", "RunnerCommand", "RunnerGroup", "RunnerTyper", "create_typer"]
