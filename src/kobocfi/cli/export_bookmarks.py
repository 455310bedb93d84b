"""CLI entrypoint exporting Kobo highlights as CFI annotations."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from kobocfi.ingestion.cache import CfiCache
from kobocfi.ingestion.config import LocatorSettings
from kobocfi.kobo.annotations import VolumeResolver, export_annotations, load_volume_map
from kobocfi.kobo.bookmarks import BookmarkDatabaseError, BookmarkRepository

LOGGER = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export Kobo bookmarks as EPUB CFI annotations")
    parser.add_argument("--db-path", required=True, help="Path to KoboReader.sqlite")
    parser.add_argument("--books-dir", default=None, help="Directory holding the books by file name")
    parser.add_argument("--volume-map", default=None, help="JSON object mapping VolumeID to a local file")
    parser.add_argument("--data-dir", default=None, help="Cache directory (overrides KOBOCFI_DATA_DIR)")
    parser.add_argument("--output", default=None, help="Also write the payload to this file")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = _parse_args(argv)

    try:
        settings = LocatorSettings.from_env()
    except ValueError as exc:
        LOGGER.error("Configuration error: %s", exc)
        return 2
    if args.data_dir:
        settings = settings.with_data_dir(args.data_dir)

    mapping: dict[str, str] = {}
    if args.volume_map:
        try:
            mapping = load_volume_map(Path(args.volume_map))
        except (OSError, ValueError) as exc:
            LOGGER.error("Failed to load volume map: %s", exc)
            return 2
    resolver = VolumeResolver(mapping, Path(args.books_dir) if args.books_dir else None)

    try:
        with BookmarkRepository(args.db_path) as repository:
            bookmarks = repository.fetch_bookmarks()
    except BookmarkDatabaseError as exc:
        LOGGER.error("%s", exc)
        return 2

    LOGGER.info("Read %d bookmarks from %s", len(bookmarks), args.db_path)
    result = export_annotations(bookmarks, resolver=resolver, cache=CfiCache(settings))

    payload = {
        "db_path": args.db_path,
        "processed": result.processed,
        "annotations": result.annotations,
        "errors": result.errors,
    }
    rendered = json.dumps(payload, ensure_ascii=True, indent=2)
    if args.output:
        Path(args.output).write_text(rendered, encoding="utf-8")
    print(rendered)
    return 0 if not result.errors else 1


if __name__ == "__main__":
    raise SystemExit(main())
