"""phpnav error types with typed error codes.

Error code ranges:
- 2xxx: Config (autoload sources, settings)
- 3xxx: Discovery / reflection lookups
- 4xxx: Pattern matching
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Discovery (3xxx)
    CLASS_NOT_FOUND = 3001

    # Matching (4xxx)
    MATCH_INVALID_PATTERN = 4001


@dataclass(frozen=True, slots=True)
class PhpNavError(Exception):
    """Base error with structured context for callers."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(PhpNavError):
    """Configuration and autoload source errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Unable to locate the autoload source at the location {path!r}",
            details={"path": path},
        )


class DiscoveryError(PhpNavError):
    """Type and member lookup failures."""


class ClassNotFoundError(DiscoveryError):
    """A type could not be located or is not declared where expected."""

    @classmethod
    def for_class(cls, name: str) -> "ClassNotFoundError":
        return cls(
            code=ErrorCode.CLASS_NOT_FOUND,
            message=f"Class {name!r} does not exist",
            details={"class": name},
        )


class MatchError(PhpNavError):
    """Pattern matcher failures (e.g. invalid pattern syntax)."""

    @classmethod
    def invalid_pattern(cls, pattern: str, reason: str) -> "MatchError":
        return cls(
            code=ErrorCode.MATCH_INVALID_PATTERN,
            message=f"Invalid pattern {pattern!r}: {reason}",
            details={"pattern": pattern, "reason": reason},
        )

