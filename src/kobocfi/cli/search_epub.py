"""CLI entrypoint locating a text passage in an EPUB as a CFI range."""

from __future__ import annotations

import argparse
import json
import logging

from dotenv import load_dotenv

from kobocfi.ingestion.cache import CfiCache
from kobocfi.ingestion.config import LocatorSettings
from kobocfi.ingestion.generator import GeneratorError
from kobocfi.locator.errors import LocatorError, NotFoundError
from kobocfi.locator.normalize import normalize_whitespace
from kobocfi.locator.service import LocatorService

LOGGER = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    parser = argparse.ArgumentParser(description="Find text in an EPUB and print its CFI range")
    parser.add_argument("--epub", required=True, help="Path to the EPUB file")
    parser.add_argument("--text", required=True, help="Passage to locate")
    parser.add_argument("--data-dir", default=None, help="Cache directory (overrides KOBOCFI_DATA_DIR)")
    args = parser.parse_args(argv)

    try:
        settings = LocatorSettings.from_env()
    except ValueError as exc:
        LOGGER.error("Configuration error: %s", exc)
        return 2
    if args.data_dir:
        settings = settings.with_data_dir(args.data_dir)

    payload: dict[str, str | None] = {"epub": args.epub, "query": args.text, "cfi": None}
    try:
        document = CfiCache(settings).load_document(args.epub)
        payload["cfi"] = LocatorService().locate(document, args.text)
    except (FileNotFoundError, GeneratorError, ValueError) as exc:
        LOGGER.error("Could not load CFI data: %s", exc)
        payload["error"] = str(exc)
    except NotFoundError as exc:
        LOGGER.error("Couldn't find the text below in the EPUB:\n%s", normalize_whitespace(args.text))
        payload["error"] = str(exc)
    except LocatorError as exc:
        LOGGER.error("Locator failed for %s: %s", args.epub, exc)
        payload["error"] = str(exc)

    print(json.dumps(payload, ensure_ascii=True, indent=2))
    return 0 if payload["cfi"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
