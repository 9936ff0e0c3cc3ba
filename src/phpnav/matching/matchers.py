"""Name matchers used for class lookup and member filtering.

A ``PatternMatcher`` answers "does this name match what the user typed?".
The discovery engine wants the reverse argument order and the FQN-aware
behaviour of ``ClassMatcher``, which adapts any ``PatternMatcher``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Protocol

from phpnav.core.errors import MatchError

NAMESPACE_SEPARATOR = "\\"


class PatternMatcher(Protocol):
    """Tests one candidate name against a user-supplied pattern."""

    def match(self, pattern: str, name: str) -> bool: ...


@dataclass(frozen=True)
class HeadMatcher:
    """Name starts with the pattern."""

    case_sensitive: bool = False

    def match(self, pattern: str, name: str) -> bool:
        if self.case_sensitive:
            return name.startswith(pattern)
        return name.lower().startswith(pattern.lower())


@dataclass(frozen=True)
class SubsequenceMatcher:
    """Every pattern character appears in the name, in order (``gtNm`` ~ ``getName``)."""

    case_sensitive: bool = False

    def match(self, pattern: str, name: str) -> bool:
        if not self.case_sensitive:
            pattern = pattern.lower()
            name = name.lower()
        remaining = iter(name)
        return all(char in remaining for char in pattern)


@dataclass
class RegexMatcher:
    """Name matches the pattern as a regular expression (searched, not anchored).

    Raises:
        MatchError: When the pattern is not a valid regular expression.
    """

    case_sensitive: bool = False
    _compiled: dict[str, re.Pattern[str]] = field(default_factory=dict, repr=False)

    def match(self, pattern: str, name: str) -> bool:
        compiled = self._compiled.get(pattern)
        if compiled is None:
            flags = 0 if self.case_sensitive else re.IGNORECASE
            try:
                compiled = re.compile(pattern, flags)
            except re.error as e:
                raise MatchError.invalid_pattern(pattern, str(e)) from e
            self._compiled[pattern] = compiled
        return compiled.search(name) is not None


@dataclass(frozen=True)
class ClassMatcher:
    """Adapts a ``PatternMatcher`` to the engine's ``(name, pattern)`` capability.

    A pattern without a namespace separator is tested against the short
    class name; a qualified pattern against the whole name. Leading
    separators on either side are ignored.
    """

    matcher: PatternMatcher

    def __call__(self, name: str, pattern: str) -> bool:
        name = name.lstrip(NAMESPACE_SEPARATOR)
        pattern = pattern.lstrip(NAMESPACE_SEPARATOR)
        if NAMESPACE_SEPARATOR not in pattern:
            name = name.rsplit(NAMESPACE_SEPARATOR, 1)[-1]
        return self.matcher.match(pattern, name)


_MATCHERS: dict[str, type[HeadMatcher] | type[SubsequenceMatcher] | type[RegexMatcher]] = {
    "head": HeadMatcher,
    "subsequence": SubsequenceMatcher,
    "regex": RegexMatcher,
}


def get_matcher(kind: str = "head", *, case_sensitive: bool = False) -> PatternMatcher:
    """Build a matcher by configured name.

    Raises:
        ValueError: For an unknown matcher kind.
    """
    try:
        matcher_cls = _MATCHERS[kind]
    except KeyError:
        raise ValueError(f"Unknown matcher kind: {kind!r}") from None
    return matcher_cls(case_sensitive=case_sensitive)
