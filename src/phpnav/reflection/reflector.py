"""Visibility-, static- and pattern-based member filtering for one type."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import NamedTuple

from phpnav.matching import HeadMatcher, PatternMatcher
from phpnav.reflection.models import ClassDescriptor, MemberDescriptor, Visibility


class MemberReflector:
    """Lists the members of a type that are reachable from a given context.

    Args:
        descriptor: The inspected type.
        pattern_matcher: Matcher applied to member names when a name
            pattern is given (prefix match by default).
    """

    def __init__(
        self,
        descriptor: ClassDescriptor,
        pattern_matcher: PatternMatcher | None = None,
    ) -> None:
        self._descriptor = descriptor
        self._pattern_matcher = pattern_matcher or HeadMatcher()

    @property
    def descriptor(self) -> ClassDescriptor:
        return self._descriptor

    def get_constants(
        self,
        static: bool | None = None,
        public_only: bool = False,
        name_pattern: str | None = None,
    ) -> list[MemberDescriptor]:
        """Constants; they are class-level, so ``static=False`` excludes them all."""
        return self._filter(self._descriptor.constants, static, public_only, name_pattern)

    def get_methods(
        self,
        static: bool | None = None,
        public_only: bool = False,
        name_pattern: str | None = None,
    ) -> list[MemberDescriptor]:
        """Methods available on the type, filtered by context.

        Args:
            static: True for static only, False for instance only, None for both.
            public_only: Restrict to public methods.
            name_pattern: Keep methods whose name matches this pattern.
        """
        return self._filter(self._descriptor.methods, static, public_only, name_pattern)

    def get_properties(
        self,
        static: bool | None = None,
        public_only: bool = False,
        name_pattern: str | None = None,
    ) -> list[MemberDescriptor]:
        """Properties available on the type; arguments as ``get_methods``."""
        return self._filter(self._descriptor.properties, static, public_only, name_pattern)

    def _filter(
        self,
        members: Iterable[MemberDescriptor],
        static: bool | None,
        public_only: bool,
        name_pattern: str | None,
    ) -> list[MemberDescriptor]:
        return [
            member
            for member in members
            if self._is_available(member, static, public_only, name_pattern)
        ]

    def _is_available(
        self,
        member: MemberDescriptor,
        static: bool | None,
        public_only: bool,
        name_pattern: str | None,
    ) -> bool:
        if name_pattern and not self._pattern_matcher.match(name_pattern, member.name):
            return False

        if static is not None and member.is_static != static:
            return False

        if member.visibility is Visibility.PUBLIC:
            return True

        if public_only:
            return False

        if member.visibility is Visibility.PROTECTED:
            return True

        # Private: only when declared on the inspected type itself
        return member.declaring_class == self._descriptor.name


# =============================================================================
# Type-level predicates
# =============================================================================


@dataclass(frozen=True)
class ClassFilter:
    """Expected type flags; ``None`` means "don't care"."""

    is_abstract: bool | None = None
    is_final: bool | None = None
    is_interface: bool | None = None
    is_trait: bool | None = None
    is_instantiable: bool | None = None


class _Predicate(NamedTuple):
    name: str
    expected: Callable[[ClassFilter], bool | None]
    actual: Callable[[ClassDescriptor], bool]


# One entry per ClassFilter field
FILTER_PREDICATES: tuple[_Predicate, ...] = (
    _Predicate("is_abstract", lambda f: f.is_abstract, lambda d: d.is_abstract),
    _Predicate("is_final", lambda f: f.is_final, lambda d: d.is_final),
    _Predicate("is_interface", lambda f: f.is_interface, lambda d: d.is_interface),
    _Predicate("is_trait", lambda f: f.is_trait, lambda d: d.is_trait),
    _Predicate("is_instantiable", lambda f: f.is_instantiable, lambda d: d.is_instantiable),
)


def matches_filter(descriptor: ClassDescriptor, class_filter: ClassFilter) -> bool:
    """True when every non-None expectation in ``class_filter`` holds."""
    for predicate in FILTER_PREDICATES:
        expected = predicate.expected(class_filter)
        if expected is not None and predicate.actual(descriptor) != expected:
            return False
    return True


def is_abstract_class(descriptor: ClassDescriptor) -> bool:
    """Abstract *and* instantiable.

    PHP never reports an abstract class as instantiable, so for parsed
    sources this is always False.
    """
    return descriptor.is_abstract and descriptor.is_instantiable
