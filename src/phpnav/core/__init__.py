"""Core module exports."""

from phpnav.core.errors import (
    ClassNotFoundError,
    ConfigError,
    DiscoveryError,
    ErrorCode,
    MatchError,
    PhpNavError,
)
from phpnav.core.logging import configure_logging, get_logger

__all__ = [
    # Errors
    "PhpNavError",
    "ConfigError",
    "DiscoveryError",
    "ClassNotFoundError",
    "MatchError",
    "ErrorCode",
    # Logging
    "configure_logging",
    "get_logger",
]
