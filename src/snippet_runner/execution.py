# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Execute compiled snippet artifacts."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from pathlib import Path

from .cache import CacheHandle
from .config import RunnerConfig
from .constants import SIGNAL_EXIT_BASE
from .errors import LaunchError
from .platform import PlatformConventions, current_platform
from .process_utils import run_command
from .toolchain import CompiledArtifact, runtime_library_dir, runtime_library_path


def exit_status(returncode: int) -> int:
    """Map a child return code to the runner's own exit status.

    Negative codes report death by signal and become ``128 + signal``.
    """

    if returncode < 0:
        return SIGNAL_EXIT_BASE - returncode
    return returncode


def build_run_environment(
    library_path: str,
    *,
    platform: PlatformConventions,
    base_env: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Return the child environment with the loader search path set.

    On Windows the search path is ``PATH`` itself, so the existing entries are
    kept after the runtime directories.
    """

    env = dict(os.environ if base_env is None else base_env)
    value = library_path
    if platform.library_path_var == "PATH" and env.get("PATH"):
        value = os.pathsep.join([library_path, env["PATH"]])
    env[platform.library_path_var] = value
    return env


def run_artifact(
    artifact: CompiledArtifact,
    forwarded_args: Sequence[str],
    *,
    cache: CacheHandle,
    config: RunnerConfig,
    platform: PlatformConventions | None = None,
    runtime_dir: Path | None = None,
) -> int:
    """Run ``artifact`` to completion and return its exit status.

    Standard streams are inherited and ``forwarded_args`` are passed through
    positionally without modification.

    Args:
        artifact: Paths produced by :func:`snippet_runner.toolchain.compile_program`.
        forwarded_args: Arguments given after the script path.
        cache: Initialised cache handle; its artifacts dir joins the search path.
        config: Effective runner configuration.
        platform: Host conventions; defaults to :func:`current_platform`.
        runtime_dir: Toolchain runtime library directory; queried from the
            compiler when omitted.

    Returns:
        int: The child's exit code, or ``128 + N`` when killed by signal ``N``.

    Raises:
        LaunchError: If the runtime directory cannot be queried or the
            artifact cannot be spawned.
    """

    conventions = platform or current_platform()
    if runtime_dir is None:
        runtime_dir = runtime_library_dir(config.toolchain.compiler, platform=conventions)
    env = build_run_environment(
        runtime_library_path(runtime_dir, cache),
        platform=conventions,
    )
    executable = artifact.executable_path.absolute()
    command = [str(executable), *forwarded_args]
    if not executable.is_file():
        raise LaunchError(f"cannot run {executable}: no such file", command=command)
    try:
        completed = run_command(command, env=env)
    except OSError as exc:
        raise LaunchError(f"cannot run {executable}: {exc}", command=command) from exc
    return exit_status(completed.returncode)


__all__ = ["build_run_environment", "exit_status", "run_artifact"]
