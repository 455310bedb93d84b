from __future__ import annotations

import pytest

from kobocfi.locator.errors import IllFormedIndexError
from kobocfi.locator.index import build_flat_index
from kobocfi.locator.models import BufferSpan, Document, FlatIndex, IndexEntry, Node, Section
from kobocfi.locator.resolve import resolve_span


def _index() -> FlatIndex:
    return build_flat_index(
        Document(
            sections=(
                Section(nodes=(Node("L1", "abcde"), Node("L2", "   "))),
                Section(nodes=(Node("L3", "fghij"),)),
            )
        )
    )


def test_span_inside_single_node() -> None:
    match = resolve_span(_index(), BufferSpan(start=1, end=4))

    assert (match.start_locator, match.start_offset) == ("L1", 1)
    assert (match.end_locator, match.end_offset) == ("L1", 4)


def test_span_ending_exactly_at_node_end_stays_in_that_node() -> None:
    match = resolve_span(_index(), BufferSpan(start=2, end=5))

    assert (match.end_locator, match.end_offset) == ("L1", 5)


def test_span_starting_at_boundary_skips_zero_length_nodes() -> None:
    match = resolve_span(_index(), BufferSpan(start=5, end=7))

    assert (match.start_locator, match.start_offset) == ("L3", 0)
    assert (match.end_locator, match.end_offset) == ("L3", 2)


def test_span_crossing_sections() -> None:
    match = resolve_span(_index(), BufferSpan(start=3, end=8))

    assert (match.start_locator, match.start_offset) == ("L1", 3)
    assert (match.end_locator, match.end_offset) == ("L3", 3)


def test_span_outside_buffer_is_ill_formed() -> None:
    with pytest.raises(IllFormedIndexError):
        resolve_span(_index(), BufferSpan(start=9, end=12))


def test_empty_span_is_ill_formed() -> None:
    with pytest.raises(IllFormedIndexError):
        resolve_span(_index(), BufferSpan(start=3, end=3))


def test_gap_in_entries_is_ill_formed() -> None:
    broken = FlatIndex(
        text="abcdefgh",
        entries=(IndexEntry("L1", "abc", 0, 3), IndexEntry("L2", "gh", 6, 8)),
        starts=(0, 6),
    )

    with pytest.raises(IllFormedIndexError):
        resolve_span(broken, BufferSpan(start=4, end=7))


def test_offsets_are_mapped_back_to_raw_node_text() -> None:
    raw = "\n    It was a bright\n  cold day\n  "
    index = build_flat_index(Document(sections=(Section(nodes=(Node("L1", raw),)),)))
    start = index.text.index("bright cold")

    match = resolve_span(index, BufferSpan(start=start, end=start + len("bright cold")))

    assert raw[match.start_offset : match.end_offset] == "bright\n  cold"
