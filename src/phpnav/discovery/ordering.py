"""Case-insensitive natural ordering for discovered names."""

from __future__ import annotations

import re
from collections.abc import Iterable

_CHUNK_RE = re.compile(r"(\d+)")


def natural_key(name: str) -> tuple[tuple[tuple[int, int, str], ...], str]:
    """Sort key where digit runs compare numerically and text ignores case.

    ``Foo2`` sorts before ``foo10``; names equal under the key fall back to
    plain string order so the result is deterministic.
    """
    chunks = tuple(
        (0, int(chunk), "") if chunk.isdigit() else (1, 0, chunk.casefold())
        for chunk in _CHUNK_RE.split(name)
        if chunk
    )
    return chunks, name


def natural_sorted(names: Iterable[str]) -> list[str]:
    return sorted(names, key=natural_key)
