"""Out-of-process invocation of the EPUB CFI generator."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from pathlib import Path
import subprocess
from typing import Any, Sequence

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class GeneratorError(Exception):
    """Generator process or output failure for one source file."""

    source: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (source={self.source})"


def run_generator(
    command: Sequence[str],
    source: Path,
    output: Path,
    *,
    timeout_seconds: float,
) -> None:
    """Run ``command <source> <output>`` and wait for it to finish."""

    args = [*command, str(source), str(output)]
    LOGGER.info("Generating CFIs for %s", source)
    try:
        completed = subprocess.run(
            args,
            capture_output=True,
            text=True,
            timeout=timeout_seconds,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        raise GeneratorError(source, f"Generator timed out after {int(timeout_seconds)}s") from exc
    except OSError as exc:
        raise GeneratorError(source, f"Generator could not be started: {exc}") from exc

    if completed.returncode != 0:
        stderr_text = (completed.stderr or "").strip()
        message = stderr_text or (completed.stdout or "").strip() or f"exit code {completed.returncode}"
        raise GeneratorError(source, f"Error generating CFIs: {message}")


def read_generator_output(source: Path, output: Path) -> list[Any]:
    """Read the generator's JSON output for ``source``."""

    try:
        payload = json.loads(output.read_text(encoding="utf-8"))
    except OSError as exc:
        raise GeneratorError(source, f"Error reading generator output JSON: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise GeneratorError(source, f"Generator output is not valid JSON: {exc}") from exc

    if not isinstance(payload, list):
        raise GeneratorError(source, "Generator output must be a JSON array of headings")
    return payload
