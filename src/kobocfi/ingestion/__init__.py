"""Document supply: generator invocation, built-in generator and hash cache."""

from .cache import CfiCache, book_name, file_sha256
from .config import LocatorSettings
from .generator import GeneratorError, read_generator_output, run_generator

__all__ = [
    "CfiCache",
    "GeneratorError",
    "LocatorSettings",
    "book_name",
    "file_sha256",
    "read_generator_output",
    "run_generator",
]
