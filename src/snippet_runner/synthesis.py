# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Turn a snippet into a complete, compilable program."""

from __future__ import annotations

from dataclasses import dataclass

from .analysis import Analysis, classify_lines
from .config import SnippetPolicy
from .constants import ENTRY_POINT, FALLIBLE_FOOTER, FALLIBLE_HEADER


@dataclass(frozen=True, slots=True)
class SynthesizedProgram:
    """Generated program text.

    Attributes:
        text: Complete source handed to the compiler.
        wrapped: ``False`` when the snippet already had an entry point and
            was passed through unchanged.
    """

    text: str
    wrapped: bool


def _use_items(line: str) -> tuple[str, list[str]] | None:
    """Split a one-line ``use`` declaration into its prefix and imported items.

    ``use a::b::C;`` yields ``("a::b::", ["C"])`` and ``use a::{B, C};`` yields
    ``("a::", ["B", "C"])``. Anything else, including nested groups, yields
    ``None`` and is left alone.
    """

    stripped = line.strip()
    if not stripped.startswith("use ") or not stripped.endswith(";"):
        return None
    tree = stripped[len("use ") : -1].strip()
    if "{" not in tree:
        if "}" in tree or not tree:
            return None
        prefix, sep, leaf = tree.rpartition("::")
        return (prefix + sep, [" ".join(leaf.split())])
    prefix, _, group = tree.partition("{")
    if not group.endswith("}") or "{" in group[:-1] or "}" in group[:-1]:
        return None
    items = [" ".join(item.split()) for item in group[:-1].split(",")]
    return (prefix.strip(), [item for item in items if item])


def _item_path(prefix: str, item: str) -> str:
    return prefix.removesuffix("::") if item == "self" else f"{prefix}{item}"


def _use_paths(lines: list[str] | tuple[str, ...]) -> set[str]:
    paths: set[str] = set()
    for line in lines:
        parsed = _use_items(line)
        if parsed is not None:
            prefix, items = parsed
            paths.update(_item_path(prefix, item) for item in items)
    return paths


def _without_prelude_imports(line: str, imported: set[str]) -> str | None:
    """Return ``line`` minus the items the prelude already imports.

    ``None`` means every item is already imported and the line is dropped.
    """

    parsed = _use_items(line)
    if parsed is None:
        return line
    prefix, items = parsed
    remaining = [item for item in items if _item_path(prefix, item) not in imported]
    if len(remaining) == len(items):
        return line
    if not remaining:
        return None
    return f"use {prefix}{{{', '.join(remaining)}}};"


def _missing_imports(analysis: Analysis, *, prelude: str, pass_through: list[str]) -> list[str]:
    present = {line.strip() for line in prelude.splitlines()}
    present.update(line.strip() for line in pass_through)
    imported = _use_paths(prelude.splitlines()) | _use_paths(pass_through)
    missing: list[str] = []
    for line in analysis.import_lines:
        paths = _use_paths([line])
        if line.strip() in present or (paths and paths <= imported):
            continue
        missing.append(line)
    return missing


def synthesize(
    text: str,
    analysis: Analysis,
    prelude: str,
    policy: SnippetPolicy | None = None,
) -> SynthesizedProgram:
    """Return the program compiled for ``text``.

    A snippet with an entry point is returned verbatim. Anything else is
    emitted as the prelude, the missing standard imports, the snippet's
    leading pass-through lines (minus any ``use`` items the prelude already
    imports), and then the body indented inside a fallible
    ``run`` function called from a generated ``main``.

    Args:
        text: Raw snippet text.
        analysis: Result of :func:`snippet_runner.analysis.analyze` for ``text``.
        prelude: Cached prelude text.
        policy: Heuristic policy; defaults to :class:`SnippetPolicy`.

    Returns:
        SynthesizedProgram: Program text and whether it was wrapped.
    """

    if analysis.has_entry_point:
        return SynthesizedProgram(text=text, wrapped=False)

    active = policy or SnippetPolicy()
    indent = active.indent
    split = classify_lines(text, active)

    prelude_lines = prelude.splitlines()
    prelude_imports = _use_paths(prelude_lines)
    pass_through = [
        kept
        for kept in (_without_prelude_imports(line, prelude_imports) for line in split.pass_through)
        if kept is not None
    ]

    lines: list[str] = list(prelude_lines)
    lines.extend(_missing_imports(analysis, prelude=prelude, pass_through=pass_through))
    lines.extend(pass_through)
    lines.append(FALLIBLE_HEADER)
    lines.extend(f"{indent}{line}" for line in split.body)
    lines.extend(f"{indent}{line}" for line in FALLIBLE_FOOTER)
    lines.append("}")
    lines.append("")
    program = "\n".join(lines) + "\n" + ENTRY_POINT
    return SynthesizedProgram(text=program, wrapped=True)


def unwrap_body(program: str, policy: SnippetPolicy | None = None) -> list[str]:
    """Return the snippet body embedded in a wrapped ``program``.

    This reverses the body step of :func:`synthesize`: the lines between the
    fallible function header and its forced success return, each with one
    indent unit removed.

    Raises:
        ValueError: If ``program`` does not contain the generated wrapper.
    """

    indent = (policy or SnippetPolicy()).indent
    lines = program.splitlines()
    footer = [f"{indent}{line}" for line in FALLIBLE_FOOTER]
    try:
        start = lines.index(FALLIBLE_HEADER) + 1
    except ValueError as exc:
        raise ValueError("program does not contain a generated run() wrapper") from exc
    for end in range(len(lines) - len(footer), start - 1, -1):
        if lines[end : end + len(footer)] == footer:
            return [line.removeprefix(indent) for line in lines[start:end]]
    raise ValueError("program does not contain a generated run() wrapper")


__all__ = ["SynthesizedProgram", "synthesize", "unwrap_body"]
