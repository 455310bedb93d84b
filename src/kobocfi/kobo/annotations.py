"""Turn Kobo bookmarks into CFI-anchored annotation records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import json
import logging
from pathlib import Path, PurePosixPath
from typing import Any, Iterable, Mapping

from kobocfi.ingestion.cache import CfiCache
from kobocfi.ingestion.generator import GeneratorError
from kobocfi.kobo.bookmarks import BookmarkRow
from kobocfi.locator.errors import LocatorError
from kobocfi.locator.models import Document
from kobocfi.locator.service import LocatorService

LOGGER = logging.getLogger(__name__)

DEFAULT_HIGHLIGHT_COLOR = "yellow"
_FILE_URI_PREFIX = "file://"


def load_volume_map(path: Path) -> dict[str, str]:
    """Read a ``{VolumeID: file path}`` JSON mapping."""

    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Volume map must be a JSON object: {path}")
    return {str(key): str(value) for key, value in data.items()}


class VolumeResolver:
    """Resolve Kobo ``VolumeID`` values to local book files."""

    def __init__(self, mapping: Mapping[str, str] | None = None, books_dir: Path | None = None) -> None:
        self._mapping = dict(mapping or {})
        self._books_dir = books_dir

    def resolve(self, volume_id: str) -> Path | None:
        mapped = self._mapping.get(volume_id)
        if mapped:
            return Path(mapped)

        if self._books_dir is None:
            return None

        device_path = volume_id.removeprefix(_FILE_URI_PREFIX)
        candidate = self._books_dir / PurePosixPath(device_path).name
        return candidate if candidate.is_file() else None


def build_annotation(bookmark: BookmarkRow, cfi: str, *, now: datetime | None = None) -> dict[str, str]:
    created = bookmark.date_created or (now or datetime.now(timezone.utc)).isoformat()
    return {
        "value": cfi,
        "color": DEFAULT_HIGHLIGHT_COLOR,
        "text": bookmark.text or "",
        "note": bookmark.annotation or "",
        "created": created,
        "modified": "",
    }


@dataclass(slots=True)
class ExportResult:
    annotations: dict[str, list[dict[str, str]]] = field(default_factory=dict)
    errors: list[dict[str, Any]] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return sum(len(items) for items in self.annotations.values())


def export_annotations(
    bookmarks: Iterable[BookmarkRow],
    *,
    resolver: VolumeResolver,
    cache: CfiCache,
    service: LocatorService | None = None,
) -> ExportResult:
    """Locate every bookmark in its book, collecting per-bookmark failures."""

    locator = service or LocatorService()
    documents: dict[Path, Document] = {}
    failed_sources: dict[Path, str] = {}
    result = ExportResult()

    def _fail(bookmark: BookmarkRow, message: str) -> None:
        LOGGER.warning("Bookmark %s skipped: %s", bookmark.bookmark_id, message)
        result.errors.append(
            {"bookmark_id": bookmark.bookmark_id, "volume_id": bookmark.volume_id, "error": message}
        )

    for bookmark in bookmarks:
        if not bookmark.text or not bookmark.text.strip():
            _fail(bookmark, "Bookmark has no highlighted text")
            continue

        source = resolver.resolve(bookmark.volume_id)
        if source is None:
            _fail(bookmark, "No local file for volume")
            continue

        if source in failed_sources:
            _fail(bookmark, failed_sources[source])
            continue

        document = documents.get(source)
        if document is None:
            try:
                document = cache.load_document(source)
            except (GeneratorError, FileNotFoundError, ValueError) as exc:
                failed_sources[source] = str(exc)
                _fail(bookmark, str(exc))
                continue
            documents[source] = document

        try:
            cfi = locator.locate(document, bookmark.text)
        except LocatorError as exc:
            _fail(bookmark, str(exc))
            continue

        LOGGER.info("Found CFI for bookmark %s: %s", bookmark.bookmark_id, cfi)
        result.annotations.setdefault(str(source), []).append(build_annotation(bookmark, cfi))

    return result
