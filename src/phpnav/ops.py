"""Project facade: configuration, discovery and introspection wired together.

One ``Project`` per PHP code base. It loads the layered configuration,
reads the Composer autoload rules, and answers the lookups an editor
integration needs: class search, member listing, header parsing, type
resolution, locations and documentation.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from phpnav import navigation
from phpnav.config import PhpNavConfig, load_config
from phpnav.core.errors import ClassNotFoundError
from phpnav.discovery import ClassDiscoveryEngine, LoadedNamesProvider
from phpnav.matching import ClassMatcher, PatternMatcher, get_matcher
from phpnav.reflection import (
    ClassDescriptor,
    ClassFilter,
    MemberDescriptor,
    MemberReflector,
    SourceIntrospector,
    matches_filter,
)
from phpnav.source import SourceHeader, parse_header, resolve_type

logger = structlog.get_logger()


class Project:
    """Lookups over one PHP project.

    Logging is left to the embedder; apply the loaded settings with
    ``configure_logging(config=project.config.logging)``.

    Args:
        root: Project root (the directory holding ``composer.json``).
        config: Resolved configuration; loaded from ``root`` when omitted.
        loaded_names: Provider of names known without autoloading
            (defaults to the PHP core and SPL types).

    Raises:
        ConfigError: If the configuration or the autoload source is invalid.
    """

    def __init__(
        self,
        root: Path | str,
        config: PhpNavConfig | None = None,
        loaded_names: LoadedNamesProvider | None = None,
    ) -> None:
        self._root = Path(root).resolve()
        self._config = config or load_config(self._root)

        discovery = self._config.discovery
        autoload_path = self._root
        if discovery.autoload_path:
            autoload_path = self._root / discovery.autoload_path

        self._engine = ClassDiscoveryEngine.from_path(
            autoload_path,
            include_dev=discovery.include_dev,
            loaded_names=loaded_names,
            file_pattern=discovery.file_pattern,
            max_depth=discovery.max_depth,
            max_files=discovery.max_files,
        )
        self._introspector = SourceIntrospector(self._engine.locate)
        self._matcher: PatternMatcher = get_matcher(
            self._config.matching.kind,
            case_sensitive=self._config.matching.case_sensitive,
        )
        logger.info(
            "project_opened",
            root=str(self._root),
            autoload=self._engine.autoload.source,
            matcher=self._config.matching.kind,
        )

    @property
    def root(self) -> Path:
        return self._root

    @property
    def config(self) -> PhpNavConfig:
        return self._config

    @property
    def engine(self) -> ClassDiscoveryEngine:
        return self._engine

    @property
    def introspector(self) -> SourceIntrospector:
        return self._introspector

    # -------------------------------------------------------------------------
    # Discovery
    # -------------------------------------------------------------------------

    def find_classes(
        self,
        pattern: str,
        *,
        matcher: PatternMatcher | None = None,
        class_filter: ClassFilter | None = None,
    ) -> list[str]:
        """Fully-qualified names matching ``pattern``, in natural order.

        With ``class_filter``, only types whose source can be introspected
        and whose flags satisfy the filter are kept.
        """
        names = self._engine.find(pattern, ClassMatcher(matcher or self._matcher))
        if class_filter is None:
            return names

        kept: list[str] = []
        for name in names:
            descriptor = self.class_descriptor(name)
            if descriptor is not None and matches_filter(descriptor, class_filter):
                kept.append(name)
        return kept

    def refresh(self) -> Project:
        self._engine.refresh()
        return self

    # -------------------------------------------------------------------------
    # Reflection
    # -------------------------------------------------------------------------

    def class_descriptor(self, class_name: str) -> ClassDescriptor | None:
        try:
            return self._introspector.get_class(class_name)
        except ClassNotFoundError:
            logger.debug("class_not_found", class_name=class_name)
            return None

    def reflect(self, class_name: str) -> MemberReflector | None:
        """Member reflector for ``class_name``, or None if it cannot be found."""
        descriptor = self.class_descriptor(class_name)
        if descriptor is None:
            return None
        return MemberReflector(descriptor, self._matcher)

    def members(
        self,
        class_name: str,
        *,
        static: bool | None = None,
        public_only: bool = False,
        pattern: str | None = None,
    ) -> list[MemberDescriptor]:
        """Constants, then methods, then properties available on a type."""
        reflector = self.reflect(class_name)
        if reflector is None:
            return []
        return [
            *reflector.get_constants(static, public_only, pattern),
            *reflector.get_methods(static, public_only, pattern),
            *reflector.get_properties(static, public_only, pattern),
        ]

    # -------------------------------------------------------------------------
    # Source headers
    # -------------------------------------------------------------------------

    def nsuse(self, path: Path | str) -> SourceHeader:
        """Namespace, imports and declared type of a file (relative to the root).

        Raises:
            OSError: If the file cannot be read.
        """
        return parse_header(self._root / path)

    def resolve(self, path: Path | str, annotation: str) -> list[str]:
        """Resolve a doc-annotation type as written in ``path``."""
        return resolve_type(self.nsuse(path), annotation)

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def location(self, class_name: str, member: str | None = None) -> tuple[str, int] | None:
        return navigation.location(self._introspector, class_name, member)

    def doc(self, class_name: str, member: str, *, clean: bool = True) -> tuple[str, str] | None:
        return navigation.doc(self._introspector, class_name, member, clean=clean)

    def functype(self, class_name: str, member: str) -> list[str]:
        return navigation.functype(self._introspector, class_name, member)
