# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Heuristic analysis of snippet text.

Nothing here parses Rust. Every decision is a literal substring or
line-prefix check driven by :class:`~snippet_runner.config.SnippetPolicy`, so
a trigger inside a string literal or comment is still counted.
"""

from __future__ import annotations

from dataclasses import dataclass

from .config import SnippetPolicy
from .errors import ParseError


@dataclass(frozen=True, slots=True)
class ImportSpec:
    """Standard-library ``use`` lines implied by a trigger substring."""

    trigger: str
    lines: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Analysis:
    """Facts derived from one snippet.

    Attributes:
        has_entry_point: Whether the snippet already defines ``main``.
        needed_std_imports: Distinct imports whose trigger occurs in the text,
            in policy-table order.
        declared_external_deps: Crate names following each declaration
            keyword, in order of occurrence, duplicates kept.
    """

    has_entry_point: bool
    needed_std_imports: tuple[ImportSpec, ...]
    declared_external_deps: tuple[str, ...]

    @property
    def import_lines(self) -> tuple[str, ...]:
        """Return the import lines of every needed import, without repeats."""

        return tuple(dict.fromkeys(line for spec in self.needed_std_imports for line in spec.lines))


@dataclass(frozen=True, slots=True)
class LineClassification:
    """Split of a snippet into its leading pass-through block and the body."""

    pass_through: tuple[str, ...]
    body: tuple[str, ...]


def _is_ident_char(char: str) -> bool:
    return char.isalnum() or char == "_"


def has_entry_point(text: str, policy: SnippetPolicy) -> bool:
    """Return ``True`` when any entry-point marker occurs literally in ``text``."""

    return any(marker in text for marker in policy.entry_markers)


def needed_std_imports(text: str, policy: SnippetPolicy) -> tuple[ImportSpec, ...]:
    """Return the imports whose trigger substring occurs at least once."""

    return tuple(
        ImportSpec(trigger=trigger, lines=tuple(lines))
        for trigger, lines in policy.std_triggers.items()
        if trigger in text
    )


def declared_external_deps(text: str, policy: SnippetPolicy) -> tuple[str, ...]:
    """Return the identifier following every declaration keyword in ``text``.

    Whitespace after the keyword is skipped; the identifier is the run of
    alphanumeric or underscore characters that follows. A keyword preceded by
    an identifier character is part of a longer word and is ignored.

    Raises:
        ParseError: If a keyword is not followed by an identifier, or the
            identifier is not terminated before the end of the text.
    """

    keyword = policy.declaration_keyword
    deps: list[str] = []
    size = len(text)
    search_from = 0
    while (index := text.find(keyword, search_from)) >= 0:
        if index > 0 and _is_ident_char(text[index - 1]):
            search_from = index + 1
            continue
        start = index + len(keyword)
        while start < size and text[start].isspace():
            start += 1
        if start >= size or not _is_ident_char(text[start]):
            raise ParseError(f"'{keyword}' at offset {index} is not followed by a crate name", offset=index)
        end = start
        while end < size and _is_ident_char(text[end]):
            end += 1
        if end >= size:
            raise ParseError(f"'{keyword}' at offset {index}: crate name runs to end of input", offset=index)
        deps.append(text[start:end])
        search_from = end
    return tuple(deps)


def is_pass_through(line: str, policy: SnippetPolicy) -> bool:
    """Return ``True`` for blank, comment, import and (optionally) declaration lines."""

    stripped = line.strip()
    if not stripped:
        return True
    if any(stripped.startswith(prefix) for prefix in policy.comment_prefixes):
        return True
    if any(stripped.startswith(prefix) for prefix in policy.import_prefixes):
        return True
    return policy.declarations_pass_through and stripped.startswith(policy.declaration_keyword)


def classify_lines(text: str, policy: SnippetPolicy | None = None) -> LineClassification:
    """Split ``text`` at its first body line.

    Leading lines are consumed greedily while :func:`is_pass_through` holds.
    The first other line and every line after it form the body, whatever they
    contain.
    """

    active = policy or SnippetPolicy()
    lines = text.splitlines()
    split = len(lines)
    for index, line in enumerate(lines):
        if not is_pass_through(line, active):
            split = index
            break
    return LineClassification(pass_through=tuple(lines[:split]), body=tuple(lines[split:]))


def analyze(text: str, policy: SnippetPolicy | None = None) -> Analysis:
    """Return the :class:`Analysis` of ``text`` under ``policy``.

    Raises:
        ParseError: If a dependency declaration is malformed.
    """

    active = policy or SnippetPolicy()
    return Analysis(
        has_entry_point=has_entry_point(text, active),
        needed_std_imports=needed_std_imports(text, active),
        declared_external_deps=declared_external_deps(text, active),
    )


__all__ = [
    "Analysis",
    "ImportSpec",
    "LineClassification",
    "analyze",
    "classify_lines",
    "declared_external_deps",
    "has_entry_point",
    "is_pass_through",
    "needed_std_imports",
]
