"""Map global buffer spans back onto boundary nodes and node-local offsets."""

from __future__ import annotations

from bisect import bisect_left, bisect_right

from kobocfi.locator.errors import IllFormedIndexError
from kobocfi.locator.models import BufferSpan, FlatIndex, MatchRange


def resolve_span(index: FlatIndex, span: BufferSpan) -> MatchRange:
    """Resolve ``span`` to start/end locators with offsets into each node's raw text.

    The start node is the one whose ``[start, end)`` contains ``span.start``;
    the end node is the one with ``start < span.end <= end``. Zero-length
    entries never qualify for either boundary. The start offset is the raw
    position of the first matched character, the end offset one past the raw
    position of the last.
    """

    if span.length <= 0:
        raise IllFormedIndexError(f"Cannot resolve empty span [{span.start}, {span.end})")

    # Last entry starting at or before the first matched character.
    start_pos = bisect_right(index.starts, span.start) - 1
    if start_pos < 0 or not index.entries[start_pos].contains(span.start):
        raise IllFormedIndexError(f"No node covers buffer offset {span.start}")

    # Last entry starting strictly before one-past-the-last matched character.
    end_pos = bisect_left(index.starts, span.end) - 1
    if end_pos < 0 or not index.entries[end_pos].contains(span.end - 1):
        raise IllFormedIndexError(f"No node covers buffer offset {span.end - 1}")

    start_entry = index.entries[start_pos]
    end_entry = index.entries[end_pos]
    return MatchRange(
        start_locator=start_entry.locator,
        start_offset=start_entry.raw_offset(span.start - start_entry.start_offset),
        end_locator=end_entry.locator,
        end_offset=end_entry.raw_offset(span.end - 1 - end_entry.start_offset) + 1,
    )
