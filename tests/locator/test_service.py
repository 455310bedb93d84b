from __future__ import annotations

import logging

import pytest

from kobocfi.locator.errors import NotFoundError
from kobocfi.locator.index import build_flat_index
from kobocfi.locator.models import Document, Node, Section
from kobocfi.locator.normalize import normalize_whitespace
from kobocfi.locator.search import find_span
from kobocfi.locator.service import LocatorService


def _book() -> Document:
    return Document.from_json(
        [
            {
                "idref": "c1",
                "content": [
                    {"node": "Call me Ishmael.", "cfi": "/6/4[c1]!/4/2/1"},
                    {"node": " Some years ago, never mind how long\n precisely,", "cfi": "/6/4[c1]!/4/4/1"},
                    {"node": "having little or no money", "cfi": "/6/4[c1]!/4/4/2/1"},
                ],
            },
            {
                "idref": "c2",
                "content": [{"node": "Call me Ishmael again.", "cfi": "/6/6[c2]!/4/2/1"}],
            },
        ]
    )


def test_locate_returns_range_reference_for_single_node() -> None:
    cfi = LocatorService().locate(_book(), "never mind how long precisely")

    assert cfi == "epubcfi(6/4[c1]!/4/4,/1:17,/1:47)"


def test_locate_across_nested_nodes() -> None:
    cfi = LocatorService().locate(_book(), "precisely,having little")

    assert cfi == "epubcfi(6/4[c1]!/4/4,/1:38,/2/1:13)"


def test_whole_node_round_trip() -> None:
    document = _book()
    raw = " Some years ago, never mind how long\n precisely,"

    span = find_span(build_flat_index(document), raw)
    match = LocatorService().locate_match(document, raw)

    assert span.length == len(normalize_whitespace(raw))
    assert match.start_locator == match.end_locator == "/6/4[c1]!/4/4/1"
    assert (match.start_offset, match.end_offset) == (1, len(raw))


def test_offsets_point_into_raw_node_text() -> None:
    raw = " Some years ago, never mind how long\n precisely,"

    match = LocatorService().locate_match(_book(), "long precisely")

    assert raw[match.start_offset : match.end_offset] == "long\n precisely"


def test_recurring_text_resolves_to_first_occurrence() -> None:
    service = LocatorService()

    results = {service.locate(_book(), "Call me Ishmael") for _ in range(3)}

    assert results == {"epubcfi(6/4[c1]!/4/2,/1:0,/1:15)"}


def test_not_found_is_logged_and_raised(caplog: pytest.LogCaptureFixture) -> None:
    document = Document(sections=(Section(nodes=(Node("/4/2/1", "alpha"), Node("/4/4/1", "beta"))),))

    with caplog.at_level(logging.INFO, logger="kobocfi.locator.service"):
        with pytest.raises(NotFoundError):
            LocatorService().locate(document, "gamma")

    assert "Query not found" in caplog.text


def test_custom_index_builder_is_used() -> None:
    built: list[Document] = []

    def _builder(document: Document):
        built.append(document)
        return build_flat_index(document)

    document = _book()
    LocatorService(index_builder=_builder).locate(document, "Ishmael")

    assert built == [document]
