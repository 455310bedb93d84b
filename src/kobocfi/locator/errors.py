"""Error kinds raised by the locator core."""

from __future__ import annotations

from dataclasses import dataclass


class LocatorError(Exception):
    """Base class for locator failures."""


@dataclass(slots=True)
class NotFoundError(LocatorError):
    """The query is absent from the document under whitespace normalization."""

    query: str

    def __str__(self) -> str:
        return f"Text not found in document (query={self.query!r})"


@dataclass(slots=True)
class IllFormedIndexError(LocatorError):
    """Flat index bookkeeping does not cover a matched offset."""

    message: str

    def __str__(self) -> str:
        return self.message
