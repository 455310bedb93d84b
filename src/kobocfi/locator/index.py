"""Flatten a Document into one searchable, offset-annotated buffer."""

from __future__ import annotations

from functools import lru_cache

from kobocfi.locator.models import Document, FlatIndex, IndexEntry
from kobocfi.locator.normalize import normalize_with_positions


def build_flat_index(document: Document) -> FlatIndex:
    """Concatenate normalized node text in document order, recording spans.

    Nodes are joined directly with no separator, so ``entries[k].end_offset``
    always equals ``entries[k + 1].start_offset``.
    """

    parts: list[str] = []
    entries: list[IndexEntry] = []
    offset = 0

    for node in document.iter_nodes():
        normalized, raw_positions = normalize_with_positions(node.text)
        end = offset + len(normalized)
        entries.append(
            IndexEntry(
                locator=node.locator,
                normalized_text=normalized,
                start_offset=offset,
                end_offset=end,
                raw_positions=raw_positions,
            )
        )
        parts.append(normalized)
        offset = end

    return FlatIndex(
        text="".join(parts),
        entries=tuple(entries),
        starts=tuple(entry.start_offset for entry in entries),
    )


@lru_cache(maxsize=16)
def flat_index_for(document: Document) -> FlatIndex:
    """Return the flat index for ``document``, built once per instance."""

    return build_flat_index(document)
