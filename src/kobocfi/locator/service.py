"""Entry point that turns a document and a query into a CFI range reference."""

from __future__ import annotations

import logging
from typing import Callable

from kobocfi.locator.errors import NotFoundError
from kobocfi.locator.formatter import format_cfi_range
from kobocfi.locator.index import flat_index_for
from kobocfi.locator.models import Document, FlatIndex, MatchRange
from kobocfi.locator.search import search

LOGGER = logging.getLogger(__name__)


class LocatorService:
    """Find passages in documents and encode them as CFI ranges."""

    def __init__(self, index_builder: Callable[[Document], FlatIndex] | None = None) -> None:
        self._index_builder = index_builder or flat_index_for

    def locate_match(self, document: Document, query: str) -> MatchRange:
        """Return the first match of ``query`` in ``document``."""

        index = self._index_builder(document)
        try:
            match = search(index, query)
        except NotFoundError as exc:
            LOGGER.info("Query not found in %d indexed nodes: %r", len(index), exc.query)
            raise
        LOGGER.debug("Matched %r at %s..%s", query, match.start_locator, match.end_locator)
        return match

    def locate(self, document: Document, query: str) -> str:
        """Return the range reference for the first match of ``query``."""

        return format_cfi_range(self.locate_match(document, query))
