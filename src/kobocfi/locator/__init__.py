"""Pure text-to-CFI locator: normalization, span search and range encoding."""

from .errors import IllFormedIndexError, LocatorError, NotFoundError
from .formatter import format_cfi_range
from .index import build_flat_index, flat_index_for
from .models import BufferSpan, Document, FlatIndex, IndexEntry, MatchRange, Node, Section
from .normalize import normalize_whitespace, normalize_with_positions
from .resolve import resolve_span
from .search import find_span, search
from .service import LocatorService

__all__ = [
    "BufferSpan",
    "Document",
    "FlatIndex",
    "IllFormedIndexError",
    "IndexEntry",
    "LocatorError",
    "LocatorService",
    "MatchRange",
    "Node",
    "NotFoundError",
    "Section",
    "build_flat_index",
    "find_span",
    "flat_index_for",
    "format_cfi_range",
    "normalize_whitespace",
    "normalize_with_positions",
    "resolve_span",
    "search",
]
