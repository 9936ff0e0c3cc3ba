"""Class discovery pipeline."""

from phpnav.discovery.builtins import BUILTIN_TYPES, builtin_type_names
from phpnav.discovery.engine import ClassDiscoveryEngine, LoadedNamesProvider, Matcher
from phpnav.discovery.ordering import natural_key, natural_sorted
from phpnav.discovery.scanner import ScanResult, path_to_class_name, scan_namespace_dirs

__all__ = [
    # Engine
    "ClassDiscoveryEngine",
    "LoadedNamesProvider",
    "Matcher",
    # Scanner
    "ScanResult",
    "scan_namespace_dirs",
    "path_to_class_name",
    # Ordering
    "natural_key",
    "natural_sorted",
    # Built-ins
    "BUILTIN_TYPES",
    "builtin_type_names",
]
