"""Encode a MatchRange as a compact EPUB CFI range reference."""

from __future__ import annotations

import re

from kobocfi.locator.models import MatchRange

_OFFSET_SUFFIX_RE = re.compile(r":\d+$")


def _locator_steps(locator: str) -> list[str]:
    """Split a locator into ``/`` steps, ignoring any ``:<offset>`` suffix."""

    return _OFFSET_SUFFIX_RE.sub("", locator).split("/")


def common_step_prefix(first: list[str], second: list[str]) -> list[str]:
    """Longest shared leading run of steps, compared component-wise."""

    shared: list[str] = []
    for left, right in zip(first, second):
        if left != right:
            break
        shared.append(left)
    return shared


def format_cfi_range(match: MatchRange) -> str:
    """Return ``epubcfi(<common>,/<start>:<offset>,/<end>:<offset>)``.

    The trailing step of each locator identifies the node itself and is never
    folded into the common part. ``/4/2`` and ``/4/20`` share only ``/4``.
    An empty common part means the two locators have no structure in common.
    """

    start_steps = _locator_steps(match.start_locator)
    end_steps = _locator_steps(match.end_locator)

    shared = common_step_prefix(start_steps[:-1], end_steps[:-1])
    common = "/".join(shared).removeprefix("/")

    start_rest = "/".join(start_steps[len(shared):])
    end_rest = "/".join(end_steps[len(shared):])

    return f"epubcfi({common},/{start_rest}:{match.start_offset},/{end_rest}:{match.end_offset})"
