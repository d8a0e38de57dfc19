"""Ignore patterns: decide which notes are out of scope for ID assignment.

Each pattern is a regular expression searched (not anchored) against the
note's vault-relative path:

    ^templates/     notes under templates/
    \\.excalidraw\\.md$
    foobar.*baz

An empty pattern matches every path.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


class InvalidPatternError(ValueError):
    """An ignore pattern is not a valid regular expression."""

    def __init__(self, pattern: str, index: int, reason: str) -> None:
        self.pattern = pattern
        self.index = index
        self.reason = reason
        super().__init__(f"invalid ignore pattern on line {index + 1}: {pattern!r} ({reason})")


@dataclass(frozen=True)
class IgnoreFilter:
    """A compiled, ordered list of ignore patterns."""

    patterns: tuple[re.Pattern[str], ...] = ()

    def first_match(self, path: str) -> str | None:
        """Return the source of the first pattern matching path, if any."""
        for rx in self.patterns:
            if rx.search(path):
                return rx.pattern
        return None

    def matches(self, path: str) -> bool:
        return any(rx.search(path) for rx in self.patterns)


def parse_patterns(text: str) -> list[str]:
    """Split the multi-line ignore setting into patterns, one per line.

    Any line ending is accepted. Empty lines are dropped; use ``.*`` to
    ignore every note.
    """
    return [line for line in text.splitlines() if line]


def compile_patterns(patterns: Iterable[str]) -> IgnoreFilter:
    """Compile patterns in order. Raises InvalidPatternError on the first bad one."""
    compiled: list[re.Pattern[str]] = []
    for i, pattern in enumerate(patterns):
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise InvalidPatternError(pattern, i, str(exc)) from exc
    return IgnoreFilter(tuple(compiled))


def is_ignored(path: str, patterns: Sequence[str]) -> bool:
    """True if any pattern matches path."""
    return compile_patterns(patterns).matches(path)
