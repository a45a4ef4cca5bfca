# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Sequential load, analyse, synthesise, compile and run pipeline.

Preparation failures (usage, filesystem, parse) raise. Once a program has
been synthesised the compile/run stages end in exactly one of three terminal
states: :class:`CompileFailed`, :class:`LaunchFailed` or :class:`Completed`.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from .analysis import Analysis, analyze
from .cache import CacheHandle
from .config import RunnerConfig
from .constants import FAILURE_EXIT_CODE
from .errors import CompileError, LaunchError
from .execution import run_artifact
from .platform import PlatformConventions, current_platform
from .sources import load_snippet, validate_script_path
from .synthesis import SynthesizedProgram, synthesize
from .toolchain import CompiledArtifact, build_compile_command, compile_program, scratch_paths

LOGGER = logging.getLogger(__name__)

StageCallback = Callable[[str, str], None]


@dataclass(frozen=True, slots=True)
class CompileFailed:
    """The compiler rejected the program; ``stderr`` is its raw output."""

    stderr: str
    returncode: int

    @property
    def exit_code(self) -> int:
        return FAILURE_EXIT_CODE


@dataclass(frozen=True, slots=True)
class LaunchFailed:
    """The compiler or the artifact could not be spawned."""

    message: str

    @property
    def exit_code(self) -> int:
        return FAILURE_EXIT_CODE


@dataclass(frozen=True, slots=True)
class Completed:
    """The artifact ran; ``exit_code`` mirrors its status."""

    exit_code: int


RunOutcome = CompileFailed | LaunchFailed | Completed


@dataclass(frozen=True, slots=True)
class PreparedSnippet:
    """Snippet text together with its analysis and generated program."""

    script: Path
    text: str
    analysis: Analysis
    program: SynthesizedProgram


@dataclass(slots=True)
class SnippetPipeline:
    """Drive one snippet through every stage.

    Attributes:
        cache: Initialised cache handle shared by synthesis and linking.
        config: Effective runner configuration.
        cwd: Directory hosting the scratch directory; defaults to the
            process working directory at call time.
        platform: Host conventions; defaults to :func:`current_platform`.
        on_stage: Optional callback receiving ``(stage, detail)`` pairs as
            the pipeline advances.
    """

    cache: CacheHandle
    config: RunnerConfig
    cwd: Path | None = None
    platform: PlatformConventions | None = None
    on_stage: StageCallback | None = None

    def _notify(self, stage: str, detail: str) -> None:
        LOGGER.debug("stage=%s %s", stage, detail)
        if self.on_stage is not None:
            self.on_stage(stage, detail)

    def prepare(self, script: Path) -> PreparedSnippet:
        """Validate, load, analyse and synthesise ``script``.

        Raises:
            UsageError: If the script has the wrong extension.
            FileSystemError: If the script cannot be read.
            ParseError: If a dependency declaration is malformed.
        """

        validate_script_path(script)
        text = load_snippet(script)
        analysis = analyze(text, self.config.policy)
        self._notify(
            "analyze",
            f"entry_point={analysis.has_entry_point} "
            f"imports={len(analysis.import_lines)} deps={','.join(analysis.declared_external_deps) or '-'}",
        )
        program = synthesize(text, analysis, self.cache.prelude, self.config.policy)
        return PreparedSnippet(script=script, text=text, analysis=analysis, program=program)

    def build(self, prepared: PreparedSnippet) -> CompiledArtifact | CompileFailed | LaunchFailed:
        """Compile ``prepared`` and return the artifact or a failure state."""

        base = Path.cwd() if self.cwd is None else self.cwd
        conventions = self.platform or current_platform()
        deps = prepared.analysis.declared_external_deps
        planned = scratch_paths(prepared.script, self.config.toolchain, cwd=base, platform=conventions)
        command = build_compile_command(planned, deps, cache=self.cache, config=self.config, platform=conventions)
        for dep in dict.fromkeys(deps):
            library = self.cache.artifacts_dir / conventions.dylib_filename(dep)
            if not library.is_file():
                self._notify("missing-dep", f"{dep} ({library})")
        self._notify("scratch", str(planned.source_path))
        self._notify("compile", f"command={shlex.join(command)}")
        try:
            return compile_program(
                prepared.program.text,
                prepared.script,
                deps=deps,
                cache=self.cache,
                config=self.config,
                cwd=base,
                platform=conventions,
            )
        except CompileError as exc:
            return CompileFailed(stderr=exc.stderr, returncode=exc.returncode)
        except LaunchError as exc:
            return LaunchFailed(message=str(exc))

    def execute(self, artifact: CompiledArtifact, args: Sequence[str]) -> Completed | LaunchFailed:
        """Run ``artifact`` with ``args`` and return the terminal state."""

        self._notify("run", f"artifact={artifact.executable_path}")
        try:
            code = run_artifact(
                artifact,
                args,
                cache=self.cache,
                config=self.config,
                platform=self.platform,
            )
        except LaunchError as exc:
            return LaunchFailed(message=str(exc))
        return Completed(exit_code=code)

    def run(self, script: Path, args: Sequence[str] = ()) -> RunOutcome:
        """Run every stage for ``script`` and return the terminal state.

        Raises:
            UsageError: If the script has the wrong extension.
            FileSystemError: If the script or scratch files cannot be accessed.
            ParseError: If a dependency declaration is malformed.
        """

        prepared = self.prepare(script)
        built = self.build(prepared)
        if not isinstance(built, CompiledArtifact):
            self._notify("done", f"outcome={type(built).__name__}")
            return built
        outcome = self.execute(built, args)
        self._notify("done", f"outcome={type(outcome).__name__} exit={outcome.exit_code}")
        return outcome


__all__ = [
    "CompileFailed",
    "Completed",
    "LaunchFailed",
    "PreparedSnippet",
    "RunOutcome",
    "SnippetPipeline",
]
