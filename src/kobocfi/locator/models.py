"""Document, flat index, and match structures used by the locator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator


@dataclass(frozen=True, slots=True)
class Node:
    """Smallest addressable text unit, tagged with its fragment locator."""

    locator: str
    text: str


@dataclass(frozen=True, slots=True)
class Section:
    """Ordered group of nodes (one generator heading)."""

    nodes: tuple[Node, ...] = ()
    label: str | None = None


@dataclass(frozen=True, eq=False)
class Document:
    """Immutable, ordered tree of sections and their text nodes.

    Equality and hashing are identity based, so a flat index can be cached
    per instance without re-hashing the whole text.
    """

    sections: tuple[Section, ...] = ()

    def iter_nodes(self) -> Iterator[Node]:
        for section in self.sections:
            yield from section.nodes

    @property
    def node_count(self) -> int:
        return sum(len(section.nodes) for section in self.sections)

    @classmethod
    def from_json(cls, data: Any) -> "Document":
        """Map generator output (headings with ``content`` lists) onto a Document.

        Each heading must be an object with a ``content`` array of
        ``{"node": str, "cfi": str}`` entries. Extra heading keys are ignored
        except ``idref``/``label``, which become the section label.
        """

        if not isinstance(data, list):
            raise ValueError("Document JSON must be an array of headings")

        sections: list[Section] = []
        for heading_no, heading in enumerate(data):
            if not isinstance(heading, dict) or not isinstance(heading.get("content"), list):
                raise ValueError(f"Heading {heading_no} has no content array")

            nodes: list[Node] = []
            for entry_no, entry in enumerate(heading["content"]):
                if not isinstance(entry, dict):
                    raise ValueError(f"Heading {heading_no} entry {entry_no} is not an object")
                text = entry.get("node")
                locator = entry.get("cfi")
                if not isinstance(text, str) or not isinstance(locator, str) or not locator:
                    raise ValueError(f"Heading {heading_no} entry {entry_no} needs string 'node' and 'cfi'")
                nodes.append(Node(locator=locator, text=text))

            label = heading.get("idref") or heading.get("label")
            sections.append(Section(nodes=tuple(nodes), label=label if isinstance(label, str) else None))

        return cls(sections=tuple(sections))


@dataclass(frozen=True, slots=True)
class IndexEntry:
    """One node's half-open span inside the flat index buffer."""

    locator: str
    normalized_text: str
    start_offset: int
    end_offset: int
    raw_positions: tuple[int, ...] = field(default=(), repr=False, compare=False)

    def contains(self, offset: int) -> bool:
        return self.start_offset <= offset < self.end_offset

    def raw_offset(self, local_offset: int) -> int:
        """Position in the node's raw text of normalized character ``local_offset``."""

        if not self.raw_positions:
            return local_offset
        return self.raw_positions[local_offset]


@dataclass(frozen=True, slots=True)
class FlatIndex:
    """Linearized view of a Document over one concatenated normalized buffer."""

    text: str
    entries: tuple[IndexEntry, ...]
    starts: tuple[int, ...] = field(repr=False)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True, slots=True)
class BufferSpan:
    """Half-open ``[start, end)`` range of global buffer offsets."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True, slots=True)
class MatchRange:
    """Boundary locators and offsets into each boundary node's raw text."""

    start_locator: str
    start_offset: int
    end_locator: str
    end_offset: int

    def to_dict(self) -> dict[str, str | int]:
        return {
            "start_locator": self.start_locator,
            "start_offset": self.start_offset,
            "end_locator": self.end_locator,
            "end_offset": self.end_offset,
        }
