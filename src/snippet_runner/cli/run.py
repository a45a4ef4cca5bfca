# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI commands that compile, run and inspect snippets."""

from __future__ import annotations

from pathlib import Path

import typer

from ..cache import CacheHandle, default_cache_root, ensure_cache
from ..config import RunnerConfig, load_config
from ..errors import CompileError, LaunchError, RunnerError, UsageError
from ..pipeline import CompileFailed, LaunchFailed, RunOutcome, SnippetPipeline, StageCallback
from ..sources import validate_script_path
from ..synthesis import unwrap_body
from .shared import CLILogger, build_cli_logger, exit_for_error
from .typer_ext import PASSTHROUGH_CONTEXT, RunnerTyper

_MISSING_SCRIPT = "please supply a source file"
_CACHE_DIR_HELP = "Cache directory (defaults to <config-root>/runner)."


def _checked_script(script: Path | None) -> Path:
    """Return SCRIPT once it is present and carries the source extension.

    Runs before the configuration is read so a usage mistake is reported as
    such even when ``config.toml`` is broken.
    """

    if script is None:
        raise UsageError(_MISSING_SCRIPT)
    return validate_script_path(script)


def _apply_output_overrides(
    config: RunnerConfig,
    *,
    verbose: bool,
    emoji: bool | None,
    color: bool | None,
    show_expanded: bool,
) -> RunnerConfig:
    output = config.output
    if verbose:
        output.verbose = True
    if show_expanded:
        output.show_expanded = True
    if emoji is not None:
        output.emoji = emoji
    if color is not None:
        output.color = color
    return config


def _logger_for(config: RunnerConfig) -> CLILogger:
    output = config.output
    return build_cli_logger(emoji=output.emoji, debug=output.verbose, no_color=not output.color)


def _outcome_error(outcome: RunOutcome) -> RunnerError | None:
    if isinstance(outcome, CompileFailed):
        return CompileError(outcome.stderr, returncode=outcome.returncode)
    if isinstance(outcome, LaunchFailed):
        return LaunchError(outcome.message)
    return None


def _stage_reporter(logger: CLILogger, config: RunnerConfig) -> StageCallback:
    def _report(stage: str, detail: str) -> None:
        logger.debug(f"{stage}: {detail}")
        if stage == "missing-dep":
            logger.warn(f"no shared library for {detail}; build it into the artifact cache first")
        if stage == "scratch" and config.output.show_expanded:
            logger.info(f"***expanded code is in {detail}***")

    return _report


def _prepare_cache(cache_root: Path, logger: CLILogger) -> CacheHandle:
    cache = ensure_cache(cache_root)
    logger.debug(f"cache: root={cache.root} artifacts={cache.artifacts_dir}")
    return cache


def run_snippet(
    script: Path | None = typer.Argument(None, help="Snippet to run (.rs).", show_default=False),
    args: list[str] | None = typer.Argument(None, help="Arguments passed to the compiled program."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print debug details to stderr."),
    emoji: bool | None = typer.Option(None, "--emoji/--no-emoji", help="Toggle emoji output."),
    color: bool | None = typer.Option(None, "--color/--no-color", help="Toggle coloured output."),
    show_expanded: bool = typer.Option(
        False,
        "--show-expanded",
        help="Report where the generated program was written.",
    ),
    cache_dir: Path | None = typer.Option(None, "--cache-dir", help=_CACHE_DIR_HELP),
) -> None:
    """Compile SCRIPT and run it, forwarding ARGS verbatim.

    Runner options must precede SCRIPT; everything after it belongs to the
    compiled program. The exit status mirrors the program's own.
    """

    cache_root = cache_dir or default_cache_root()
    try:
        script = _checked_script(script)
        config = load_config(cache_root)
    except RunnerError as exc:
        raise exit_for_error(exc, logger=build_cli_logger(emoji=False)) from exc

    config = _apply_output_overrides(
        config,
        verbose=verbose,
        emoji=emoji,
        color=color,
        show_expanded=show_expanded,
    )
    logger = _logger_for(config)
    try:
        cache = _prepare_cache(cache_root, logger)
        pipeline = SnippetPipeline(cache=cache, config=config, on_stage=_stage_reporter(logger, config))
        outcome = pipeline.run(script, args or [])
    except RunnerError as exc:
        raise exit_for_error(exc, logger=logger, raise_errors=config.raise_errors) from exc

    error = _outcome_error(outcome)
    if error is not None:
        raise exit_for_error(error, logger=logger, raise_errors=config.raise_errors)
    raise typer.Exit(code=outcome.exit_code)


def expand_snippet(
    script: Path | None = typer.Argument(None, help="Snippet to expand (.rs).", show_default=False),
    body: bool = typer.Option(False, "--body", help="Print only the wrapped body lines."),
    cache_dir: Path | None = typer.Option(None, "--cache-dir", help=_CACHE_DIR_HELP),
) -> None:
    """Print the program generated for SCRIPT without compiling it."""

    cache_root = cache_dir or default_cache_root()
    logger = build_cli_logger(emoji=False)
    raise_errors = False
    try:
        script = _checked_script(script)
        config = load_config(cache_root)
        raise_errors = config.raise_errors
        cache = _prepare_cache(cache_root, logger)
        prepared = SnippetPipeline(cache=cache, config=config).prepare(script)
    except RunnerError as exc:
        raise exit_for_error(exc, logger=logger, raise_errors=raise_errors) from exc

    program = prepared.program
    if not body:
        logger.echo(program.text.rstrip("\n"))
        return
    lines = unwrap_body(program.text, config.policy) if program.wrapped else program.text.splitlines()
    for line in lines:
        logger.echo(line)


def show_cache(
    cache_dir: Path | None = typer.Option(None, "--cache-dir", help=_CACHE_DIR_HELP),
) -> None:
    """Create the cache if needed and print its locations."""

    logger = build_cli_logger(emoji=False)
    try:
        cache = ensure_cache(cache_dir or default_cache_root())
    except RunnerError as exc:
        raise exit_for_error(exc, logger=logger) from exc
    logger.echo(f"root: {cache.root}")
    logger.echo(f"prelude: {cache.prelude_path}")
    logger.echo(f"artifacts: {cache.artifacts_dir}")


def register(app: RunnerTyper) -> None:
    """Register the snippet commands on ``app``."""

    app.command("run", context_settings=PASSTHROUGH_CONTEXT)(run_snippet)
    app.command("expand")(expand_snippet)
    app.command("cache")(show_cache)


__all__ = ["expand_snippet", "register", "run_snippet", "show_cache"]
