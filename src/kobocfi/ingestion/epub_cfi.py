"""Built-in EPUB CFI generator emitting spine-ordered text nodes."""

from __future__ import annotations

from pathlib import Path
import re
from typing import Any

import ebooklib
from ebooklib import epub
from bs4 import BeautifulSoup, Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag

# Package document children are metadata (2), manifest (4), spine (6).
_SPINE_STEP = 6
_SKIPPED_ELEMENTS = {"head", "script", "style"}
_SKIPPED_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)
_ASSERTION_SPECIAL_RE = re.compile(r"([\^\[\](),;=])")


def _escape_assertion(value: str) -> str:
    return _ASSERTION_SPECIAL_RE.sub(r"^\1", value)


def _element_step(position: int, element: Tag) -> str:
    step = f"/{2 * position}"
    element_id = element.get("id")
    if element_id:
        step += f"[{_escape_assertion(str(element_id))}]"
    return step


def _collect_text_nodes(element: Tag, path: str, prefix: str, content: list[dict[str, str]]) -> None:
    """Append ``{node, cfi}`` entries for every text chunk below ``element``.

    Child elements take even steps in order; the text between them takes the
    odd step that follows the preceding element.
    """

    element_count = 0
    pending: list[str] = []

    def flush() -> None:
        text = "".join(pending)
        pending.clear()
        if text.strip():
            content.append({"node": text, "cfi": f"{prefix}{path}/{2 * element_count + 1}"})

    for child in element.children:
        if isinstance(child, Tag):
            flush()
            element_count += 1
            if child.name in _SKIPPED_ELEMENTS:
                continue
            _collect_text_nodes(child, path + _element_step(element_count, child), prefix, content)
        elif isinstance(child, NavigableString) and not isinstance(child, _SKIPPED_STRINGS):
            pending.append(str(child))

    flush()


def document_text_nodes(xhtml: bytes | str, prefix: str = "") -> list[dict[str, str]]:
    """Return the text nodes of one XHTML content document with their CFIs."""

    soup = BeautifulSoup(xhtml, "xml")
    root = next((child for child in soup.contents if isinstance(child, Tag)), None)
    if root is None:
        return []

    content: list[dict[str, str]] = []
    _collect_text_nodes(root, "", prefix, content)
    return content


def spine_prefix(spine_index: int, idref: str) -> str:
    return f"/{_SPINE_STEP}/{2 * (spine_index + 1)}[{_escape_assertion(idref)}]!"


def generate_cfi_data(path: str | Path) -> list[dict[str, Any]]:
    """Read an EPUB and return one heading per spine document.

    Each heading is ``{"idref", "href", "content": [{"node", "cfi"}]}``, the
    structure consumed by :meth:`kobocfi.locator.models.Document.from_json`.
    """

    book = epub.read_epub(str(path))
    headings: list[dict[str, Any]] = []

    for spine_index, spine_entry in enumerate(book.spine):
        idref = spine_entry[0] if isinstance(spine_entry, tuple) else spine_entry
        item = book.get_item_with_id(idref)
        if item is None or item.get_type() != ebooklib.ITEM_DOCUMENT:
            continue

        content = document_text_nodes(item.get_content(), spine_prefix(spine_index, idref))
        if not content:
            continue

        headings.append({"idref": idref, "href": item.get_name(), "content": content})

    return headings
