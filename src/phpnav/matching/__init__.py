"""Name matchers."""

from phpnav.matching.matchers import (
    ClassMatcher,
    HeadMatcher,
    PatternMatcher,
    RegexMatcher,
    SubsequenceMatcher,
    get_matcher,
)

__all__ = [
    "PatternMatcher",
    "HeadMatcher",
    "SubsequenceMatcher",
    "RegexMatcher",
    "ClassMatcher",
    "get_matcher",
]
