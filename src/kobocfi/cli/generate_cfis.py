"""CLI entrypoint for the built-in EPUB CFI generator."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import zipfile

from ebooklib.epub import EpubException

from kobocfi.ingestion.epub_cfi import generate_cfi_data

LOGGER = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    parser = argparse.ArgumentParser(description="Write spine-ordered text nodes with CFIs for an EPUB")
    parser.add_argument("epub", help="Source EPUB file")
    parser.add_argument("output", help="Destination JSON file")
    args = parser.parse_args(argv)

    source = Path(args.epub)
    output = Path(args.output)
    if not source.is_file():
        LOGGER.error("File not found at %s", source)
        return 1

    try:
        headings = generate_cfi_data(source)
    except (EpubException, KeyError, OSError, zipfile.BadZipFile) as exc:
        LOGGER.error("Failed to read EPUB %s: %s", source, exc)
        return 1

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(headings, ensure_ascii=False, indent=2), encoding="utf-8")
    LOGGER.info(
        "Wrote %d headings (%d nodes) to %s",
        len(headings),
        sum(len(heading["content"]) for heading in headings),
        output,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
