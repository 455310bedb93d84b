from __future__ import annotations

import json
from pathlib import Path
import sys

import pytest

from kobocfi.ingestion.generator import GeneratorError, read_generator_output, run_generator

_WRITE_OUTPUT = (
    "import json, sys; "
    "json.dump([{'content': [{'node': 'text', 'cfi': '/6/2!/4/2/1'}]}], open(sys.argv[2], 'w'))"
)


def test_run_generator_passes_source_and_output(tmp_path: Path) -> None:
    source = tmp_path / "book.epub"
    source.write_bytes(b"epub")
    output = tmp_path / "out.json"

    run_generator([sys.executable, "-c", _WRITE_OUTPUT], source, output, timeout_seconds=30)

    assert json.loads(output.read_text(encoding="utf-8"))[0]["content"][0]["node"] == "text"


def test_failing_generator_reports_stderr(tmp_path: Path) -> None:
    command = [sys.executable, "-c", "import sys; sys.stderr.write('broken epub'); sys.exit(3)"]

    with pytest.raises(GeneratorError, match="broken epub"):
        run_generator(command, tmp_path / "book.epub", tmp_path / "out.json", timeout_seconds=30)


def test_missing_generator_executable(tmp_path: Path) -> None:
    with pytest.raises(GeneratorError, match="could not be started"):
        run_generator(
            [str(tmp_path / "no-such-generator")],
            tmp_path / "book.epub",
            tmp_path / "out.json",
            timeout_seconds=30,
        )


def test_read_output_rejects_invalid_json(tmp_path: Path) -> None:
    output = tmp_path / "out.json"
    output.write_text("{not json", encoding="utf-8")

    with pytest.raises(GeneratorError, match="not valid JSON"):
        read_generator_output(tmp_path / "book.epub", output)


def test_read_output_rejects_non_array(tmp_path: Path) -> None:
    output = tmp_path / "out.json"
    output.write_text('{"content": []}', encoding="utf-8")

    with pytest.raises(GeneratorError, match="JSON array"):
        read_generator_output(tmp_path / "book.epub", output)


def test_read_output_missing_file(tmp_path: Path) -> None:
    with pytest.raises(GeneratorError, match="Error reading generator output"):
        read_generator_output(tmp_path / "book.epub", tmp_path / "missing.json")
