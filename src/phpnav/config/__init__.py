"""Config module exports."""

from phpnav.config.loader import load_config
from phpnav.config.models import (
    DEFAULT_FILE_PATTERN,
    DiscoveryConfig,
    LoggingConfig,
    MatchingConfig,
    PhpNavConfig,
)

__all__ = [
    "load_config",
    "PhpNavConfig",
    "DiscoveryConfig",
    "LoggingConfig",
    "MatchingConfig",
    "DEFAULT_FILE_PATTERN",
]
