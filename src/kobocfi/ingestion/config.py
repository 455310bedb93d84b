"""Runtime configuration for CFI generation and caching."""

from __future__ import annotations

from dataclasses import dataclass, replace
import os
from pathlib import Path
import shlex
import sys
from typing import Mapping


DEFAULT_DATA_DIR = ".kobocfi"
DEFAULT_GENERATOR_TIMEOUT_SECONDS = 300.0
BUILTIN_GENERATOR_COMMAND: tuple[str, ...] = (sys.executable, "-m", "kobocfi.cli.generate_cfis")


def _parse_positive_float(*, name: str, raw_value: str, minimum: float = 1.0) -> float:
    try:
        value = float(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class LocatorSettings:
    """Validated locations and generator settings for the CFI cache."""

    data_dir: Path = Path(DEFAULT_DATA_DIR)
    generator_command: tuple[str, ...] = BUILTIN_GENERATOR_COMMAND
    generator_timeout_seconds: float = DEFAULT_GENERATOR_TIMEOUT_SECONDS

    def with_data_dir(self, data_dir: str | Path) -> "LocatorSettings":
        return replace(self, data_dir=Path(data_dir))

    @property
    def databases_dir(self) -> Path:
        return self.data_dir / "databases"

    @property
    def generator_output_dir(self) -> Path:
        return self.data_dir / "cfis"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "LocatorSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        data_dir_raw = source.get("KOBOCFI_DATA_DIR", DEFAULT_DATA_DIR).strip()
        if not data_dir_raw:
            raise ValueError("KOBOCFI_DATA_DIR cannot be empty")

        generator_raw = source.get("KOBOCFI_GENERATOR")
        if generator_raw is None:
            generator_command = BUILTIN_GENERATOR_COMMAND
        else:
            generator_command = tuple(shlex.split(generator_raw))
            if not generator_command:
                raise ValueError("KOBOCFI_GENERATOR cannot be empty")

        timeout_raw = source.get("KOBOCFI_GENERATOR_TIMEOUT", str(DEFAULT_GENERATOR_TIMEOUT_SECONDS)).strip()
        if not timeout_raw:
            raise ValueError("KOBOCFI_GENERATOR_TIMEOUT cannot be empty")
        timeout = _parse_positive_float(name="KOBOCFI_GENERATOR_TIMEOUT", raw_value=timeout_raw)

        return cls(
            data_dir=Path(data_dir_raw),
            generator_command=generator_command,
            generator_timeout_seconds=timeout,
        )
