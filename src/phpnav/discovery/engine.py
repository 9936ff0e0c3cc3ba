"""Class discovery: one sorted, deduplicated set of every type a project can use.

Three naming authorities are merged on each refresh:

1. names the runtime already knows (built-ins, anything loaded outside the
   autoload rules), taken as a snapshot from an injected provider;
2. the explicit class map (file path -> name, no scanning);
3. the namespace-directory scan.

Class map and scan results are keyed by canonical file path, class map
first, so a file reached both ways keeps the scanned name. The union of all
names is deduplicated and sorted case-insensitively in natural order.

The name set starts empty and is only (re)built by ``refresh()``, which
builds a complete new snapshot before swapping it in with a single
assignment: a reader sees either the old set or the new one, never a
partial rebuild. ``find`` refreshes once when nothing matches, to pick up
files created since the last scan.
"""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from phpnav.autoload import AutoloadConfig, load_autoload
from phpnav.config.models import DEFAULT_FILE_PATTERN
from phpnav.core.errors import ConfigError
from phpnav.discovery.builtins import builtin_type_names
from phpnav.discovery.ordering import natural_sorted
from phpnav.discovery.scanner import NAMESPACE_SEPARATOR, scan_namespace_dirs

logger = structlog.get_logger()

Matcher = Callable[[str, str], bool]
LoadedNamesProvider = Callable[[], Iterable[str]]


def _lookup_key(name: str) -> str:
    return name.lstrip(NAMESPACE_SEPARATOR).lower()


@dataclass(frozen=True)
class _Snapshot:
    names: tuple[str, ...] = ()
    files: dict[str, str] = field(default_factory=dict)  # lookup key -> file path
    keys: frozenset[str] = frozenset()  # lookup keys of every name


class ClassDiscoveryEngine:
    """Finds the fully-qualified names of the types a project can reference.

    Usage::

        engine = ClassDiscoveryEngine.from_path("vendor/autoload.php")
        engine.find("Controller", ClassMatcher(HeadMatcher()))
    """

    def __init__(
        self,
        autoload: AutoloadConfig,
        *,
        loaded_names: LoadedNamesProvider | None = None,
        file_pattern: str | re.Pattern[str] | None = None,
        max_depth: int = 64,
        max_files: int = 200_000,
    ) -> None:
        self._autoload = autoload
        self._loaded_names = loaded_names or builtin_type_names
        if file_pattern is None:
            file_pattern = DEFAULT_FILE_PATTERN
        if isinstance(file_pattern, str):
            file_pattern = re.compile(file_pattern, re.IGNORECASE)
        self._file_pattern = file_pattern
        self._max_depth = max_depth
        self._max_files = max_files
        self._snapshot = _Snapshot()

    @classmethod
    def from_path(
        cls,
        autoload_path: Path | str,
        *,
        include_dev: bool = True,
        **kwargs: Any,
    ) -> ClassDiscoveryEngine:
        """Build an engine from a Composer autoload source.

        Raises:
            ConfigError: If the autoload source is missing, unreadable or invalid.
        """
        try:
            autoload = load_autoload(autoload_path, include_dev=include_dev)
        except ConfigError as e:
            logger.critical("autoload_load_failed", path=str(autoload_path), error=e.message)
            raise
        return cls(autoload, **kwargs)

    @property
    def autoload(self) -> AutoloadConfig:
        return self._autoload

    @property
    def names(self) -> tuple[str, ...]:
        """The current name set (empty until the first refresh)."""
        return self._snapshot.names

    def find(self, pattern: str, matcher: Matcher) -> list[str]:
        """Names accepted by ``matcher(name, pattern)``, in set order.

        When nothing matches, the set is refreshed exactly once and the
        filter re-applied. Matcher errors propagate unchanged.
        """
        results = self._find_matches(pattern, matcher)
        if not results:
            results = self.refresh()._find_matches(pattern, matcher)
        return results

    def _find_matches(self, pattern: str, matcher: Matcher) -> list[str]:
        return [name for name in self._snapshot.names if matcher(name, pattern)]

    def locate(self, name: str) -> Path | None:
        """File the class map or the scan associated with ``name``.

        Lookup ignores case and a leading separator. Names already in the set
        without a file (built-ins, preloaded types) give None straight away;
        any other miss refreshes once.
        """
        key = _lookup_key(name)
        file_path = self._snapshot.files.get(key)
        if file_path is None and key not in self._snapshot.keys:
            file_path = self.refresh()._snapshot.files.get(key)
        return Path(file_path) if file_path is not None else None

    def refresh(self) -> ClassDiscoveryEngine:
        """Rebuild the name set from all sources and swap it in."""
        by_path: dict[str, str] = {
            os.path.realpath(file_path): name
            for file_path, name in self._autoload.class_map.items()
        }

        scan = scan_namespace_dirs(
            self._autoload.namespace_mapping(),
            self._file_pattern,
            max_depth=self._max_depth,
            max_files=self._max_files,
        )
        by_path.update(scan.classes)

        loaded = list(self._loaded_names())
        names = natural_sorted(dict.fromkeys([*loaded, *by_path.values()]))
        files = {_lookup_key(name): file_path for file_path, name in by_path.items()}

        self._snapshot = _Snapshot(
            names=tuple(names),
            files=files,
            keys=frozenset(_lookup_key(name) for name in names),
        )
        logger.debug(
            "discovery_refreshed",
            names=len(names),
            loaded=len(loaded),
            class_map=len(self._autoload.class_map),
            scanned=len(scan.classes),
            unreadable=len(scan.unreadable),
        )
        return self
