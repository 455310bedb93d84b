"""Whitespace normalization shared by node text and queries."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")
_NON_WHITESPACE_RE = re.compile(r"\S+")


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace and trim boundaries.

    Whitespace is the Unicode ``\\s`` class, so NBSP and form feed collapse too.
    """

    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_with_positions(text: str) -> tuple[str, tuple[int, ...]]:
    """Normalize ``text`` and return the raw index of every normalized character.

    A collapsed whitespace run maps to its first raw character.
    """

    parts: list[str] = []
    positions: list[int] = []
    previous_end = 0

    for match in _NON_WHITESPACE_RE.finditer(text):
        if positions:
            parts.append(" ")
            positions.append(previous_end)
        parts.append(match.group())
        positions.extend(range(match.start(), match.end()))
        previous_end = match.end()

    return "".join(parts), tuple(positions)
