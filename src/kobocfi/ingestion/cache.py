"""Content-addressed cache of generator output keyed by source SHA-256."""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
import re
from typing import Any, Callable

from kobocfi.ingestion.config import LocatorSettings
from kobocfi.ingestion.generator import GeneratorError, read_generator_output, run_generator
from kobocfi.locator.models import Document

LOGGER = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
_HASH_CHUNK_BYTES = 1 << 20

GeneratorFn = Callable[[Path, Path], None]


def file_sha256(path: Path) -> str:
    """Hex SHA-256 digest of the file's bytes."""

    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for block in iter(lambda: handle.read(_HASH_CHUNK_BYTES), b""):
            digest.update(block)
    return digest.hexdigest()


def book_name(path: Path) -> str:
    """File stem with whitespace runs replaced by underscores."""

    return _WHITESPACE_RE.sub("_", path.stem)


class CfiCache:
    """Load CFI data for a source file, regenerating it when the hash changes."""

    def __init__(self, settings: LocatorSettings, *, generator: GeneratorFn | None = None) -> None:
        self._settings = settings
        self._generator = generator or self._run_configured_generator

    @property
    def settings(self) -> LocatorSettings:
        return self._settings

    def record_path(self, source_hash: str) -> Path:
        return self._settings.databases_dir / f"database_{source_hash}.json"

    def output_path(self, source: Path) -> Path:
        return self._settings.generator_output_dir / f"{book_name(source)}_cfi_output.json"

    def load(self, source: str | Path) -> list[Any]:
        """Return the heading/content JSON for ``source``, generating it on a miss."""

        cfi_data, _document = self._load(source)
        return cfi_data

    def load_document(self, source: str | Path) -> Document:
        _cfi_data, document = self._load(source)
        return document

    def _load(self, source: str | Path) -> tuple[list[Any], Document]:
        source_path = Path(source)
        if not source_path.is_file():
            raise FileNotFoundError(f"File not found at {source_path}")

        source_hash = file_sha256(source_path)
        record_path = self.record_path(source_hash)

        cached = self._read_record(record_path, source_hash)
        if cached is not None:
            LOGGER.debug("CFI cache hit for %s", source_path)
            return cached

        LOGGER.info("No valid CFI cache for %s. Generating CFIs.", source_path)
        output_path = self.output_path(source_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self._generator(source_path, output_path)
        cfi_data = read_generator_output(source_path, output_path)
        try:
            document = Document.from_json(cfi_data)
        except ValueError as exc:
            raise GeneratorError(source_path, f"Generator output is not a valid document: {exc}") from exc

        record_path.parent.mkdir(parents=True, exist_ok=True)
        record = {"sourceHash": source_hash, "cfiData": cfi_data}
        record_path.write_text(json.dumps(record, ensure_ascii=False, indent=2), encoding="utf-8")
        output_path.unlink(missing_ok=True)
        return cfi_data, document

    def _read_record(self, record_path: Path, source_hash: str) -> tuple[list[Any], Document] | None:
        if not record_path.exists():
            return None

        try:
            data = json.loads(record_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            LOGGER.warning("Failed to load CFI cache %s: %s", record_path, exc)
            return None

        if not isinstance(data, dict):
            LOGGER.warning("Ignoring CFI cache %s: unexpected structure", record_path)
            return None

        stored_hash = data.get("sourceHash", data.get("epubHash"))
        cfi_data = data.get("cfiData")
        if stored_hash != source_hash or not isinstance(cfi_data, list):
            return None

        try:
            document = Document.from_json(cfi_data)
        except ValueError as exc:
            LOGGER.warning("Ignoring CFI cache %s: %s", record_path, exc)
            return None
        return cfi_data, document

    def _run_configured_generator(self, source: Path, output: Path) -> None:
        run_generator(
            self._settings.generator_command,
            source,
            output,
            timeout_seconds=self._settings.generator_timeout_seconds,
        )
