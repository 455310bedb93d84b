"""Leftmost whitespace-insensitive substring search over a flat index."""

from __future__ import annotations

from kobocfi.locator.errors import NotFoundError
from kobocfi.locator.models import BufferSpan, FlatIndex, MatchRange
from kobocfi.locator.normalize import normalize_whitespace
from kobocfi.locator.resolve import resolve_span


def find_span(index: FlatIndex, query: str) -> BufferSpan:
    """Return the buffer span of the first occurrence of the normalized query.

    The whole concatenated buffer is scanned once, so a match may cross any
    number of node boundaries. Recurring passages always resolve to their
    leftmost occurrence.
    """

    needle = normalize_whitespace(query)
    if not needle:
        raise NotFoundError(query)

    start = index.text.find(needle)
    if start == -1:
        raise NotFoundError(needle)
    return BufferSpan(start=start, end=start + len(needle))


def search(index: FlatIndex, query: str) -> MatchRange:
    """Locate ``query`` and resolve it to boundary nodes."""

    return resolve_span(index, find_span(index, query))
