"""Autoload configuration providers (namespace mapping + class map)."""

from phpnav.autoload.composer import (
    build_class_map,
    load_autoload,
    read_composer_json,
    read_generated_tables,
)
from phpnav.autoload.models import AutoloadConfig

__all__ = [
    "AutoloadConfig",
    "load_autoload",
    "read_composer_json",
    "read_generated_tables",
    "build_class_map",
]
