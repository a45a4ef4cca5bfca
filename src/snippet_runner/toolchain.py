# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Compiler invocation and toolchain discovery."""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .cache import CacheHandle
from .config import RunnerConfig, ToolchainConfig
from .errors import CompileError, FileSystemError, LaunchError
from .logging import detect_tty
from .platform import PlatformConventions, current_platform
from .process_utils import run_command


@dataclass(frozen=True, slots=True)
class CompiledArtifact:
    """Scratch source written for a snippet and the executable built from it."""

    source_path: Path
    executable_path: Path


def mirrored_path(source_identity: Path, *, cwd: Path) -> Path:
    """Return ``source_identity`` as a relative path safe to nest under a scratch dir.

    Relative paths are kept as-is. Absolute paths are made relative to
    ``cwd`` when they live inside it and otherwise lose their anchor. ``.``
    and ``..`` segments are dropped so the result never escapes the scratch
    directory.
    """

    path = source_identity
    if path.is_absolute():
        try:
            path = path.relative_to(cwd)
        except ValueError:
            path = path.relative_to(path.anchor)
    parts = [part for part in path.parts if part not in {".", ".."}]
    if not parts:
        raise FileSystemError(f"cannot derive a scratch path from {source_identity}", path=source_identity)
    return Path(*parts)


def scratch_paths(
    source_identity: Path,
    toolchain: ToolchainConfig,
    *,
    cwd: Path,
    platform: PlatformConventions,
) -> CompiledArtifact:
    """Return the scratch source and executable paths for ``source_identity``."""

    source_path = cwd / toolchain.scratch_dir / mirrored_path(source_identity, cwd=cwd)
    executable_path = source_path.with_suffix(platform.exe_suffix)
    return CompiledArtifact(source_path=source_path, executable_path=executable_path)


def _use_compiler_color(setting: str) -> bool:
    if setting == "always":
        return True
    if setting == "never":
        return False
    return detect_tty("stderr")


def build_compile_command(
    artifact: CompiledArtifact,
    deps: Sequence[str],
    *,
    cache: CacheHandle,
    config: RunnerConfig,
    platform: PlatformConventions,
) -> list[str]:
    """Return the compiler command line for ``artifact``.

    Every codegen flag is passed as ``-C <flag>``. The cache artifacts
    directory is added as a library search path and each declared
    dependency is linked against its shared library inside it.
    """

    toolchain = config.toolchain
    command = [toolchain.compiler]
    for flag in toolchain.codegen_flags:
        command.extend(["-C", flag])
    command.extend(["-L", str(cache.artifacts_dir)])
    for dep in deps:
        library = cache.artifacts_dir / platform.dylib_filename(dep)
        command.extend(["--extern", f"{dep}={library}"])
    if _use_compiler_color(config.output.compiler_color):
        command.extend(["--color", "always"])
    command.extend(["-o", str(artifact.executable_path), str(artifact.source_path)])
    return command


def _write_scratch_source(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise FileSystemError(f"cannot write scratch source {path}: {exc}", path=path) from exc


def compile_program(
    program_text: str,
    source_identity: Path,
    *,
    deps: Sequence[str],
    cache: CacheHandle,
    config: RunnerConfig,
    cwd: Path | None = None,
    platform: PlatformConventions | None = None,
) -> CompiledArtifact:
    """Write ``program_text`` to the scratch directory and compile it.

    The scratch source and any compiler byproducts are left on disk so the
    generated program can be inspected after the run.

    Args:
        program_text: Complete program produced by the synthesizer.
        source_identity: Script path as given on the command line.
        deps: Crate names to link from the cache artifacts directory.
        cache: Initialised cache handle.
        config: Effective runner configuration.
        cwd: Directory hosting the scratch directory; defaults to the
            process working directory.
        platform: Host conventions; defaults to :func:`current_platform`.

    Returns:
        CompiledArtifact: Paths of the scratch source and the executable.

    Raises:
        FileSystemError: If the scratch source cannot be written.
        LaunchError: If the compiler cannot be started.
        CompileError: If the compiler exits with a non-zero status.
    """

    base = Path.cwd() if cwd is None else cwd
    conventions = platform or current_platform()
    artifact = scratch_paths(source_identity, config.toolchain, cwd=base, platform=conventions)
    _write_scratch_source(artifact.source_path, program_text)

    command = build_compile_command(artifact, deps, cache=cache, config=config, platform=conventions)
    try:
        completed = run_command(command, capture_output=True)
    except FileNotFoundError as exc:
        raise LaunchError(f"compiler '{command[0]}' was not found on PATH", command=command) from exc
    except OSError as exc:
        raise LaunchError(f"cannot invoke compiler '{command[0]}': {exc}", command=command) from exc
    if completed.returncode != 0:
        raise CompileError(completed.stderr or "", returncode=completed.returncode)
    return artifact


def _print_query(compiler: str, item: str) -> Path:
    """Return the path printed by ``<compiler> --print <item>``.

    Raises:
        LaunchError: If the compiler cannot be started or the query fails.
    """

    command = [compiler, "--print", item]
    try:
        completed = run_command(command, capture_output=True)
    except OSError as exc:
        raise LaunchError(f"cannot query {item} from '{compiler}': {exc}", command=command) from exc
    value = (completed.stdout or "").strip()
    if completed.returncode != 0 or not value:
        detail = (completed.stderr or "").strip() or f"exit status {completed.returncode}"
        raise LaunchError(f"cannot query {item} from '{compiler}': {detail}", command=command)
    return Path(value)


def toolchain_sysroot(compiler: str) -> Path:
    """Return the sysroot reported by ``<compiler> --print sysroot``."""

    return _print_query(compiler, "sysroot")


def runtime_library_dir(compiler: str, *, platform: PlatformConventions | None = None) -> Path:
    """Return the directory holding the toolchain's runtime shared libraries.

    rustup installs ``libstd-*.so``/``.dylib`` under
    ``<sysroot>/lib/rustlib/<host>/lib``, which ``--print target-libdir``
    reports directly. Windows keeps the runtime DLLs in ``<sysroot>/bin``.

    Raises:
        LaunchError: If the compiler query fails.
    """

    conventions = platform or current_platform()
    if conventions.sysroot_lib_subdir is None:
        return _print_query(compiler, "target-libdir")
    return toolchain_sysroot(compiler) / conventions.sysroot_lib_subdir


def runtime_library_path(runtime_dir: Path, cache: CacheHandle) -> str:
    """Return the loader search path: the toolchain runtime libs, then the cache."""

    return os.pathsep.join([str(runtime_dir), str(cache.artifacts_dir)])


__all__ = [
    "CompiledArtifact",
    "build_compile_command",
    "compile_program",
    "mirrored_path",
    "runtime_library_dir",
    "runtime_library_path",
    "scratch_paths",
    "toolchain_sysroot",
]
