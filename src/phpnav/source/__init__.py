"""Source header parsing and doc-annotation type resolution."""

from phpnav.source.header import (
    NAMESPACE_SEPARATOR,
    SourceHeader,
    parse_header,
    parse_header_text,
)
from phpnav.source.types import PRIMITIVE_TYPES, SELF_REFERENCES, resolve_type

__all__ = [
    # Header
    "NAMESPACE_SEPARATOR",
    "SourceHeader",
    "parse_header",
    "parse_header_text",
    # Types
    "PRIMITIVE_TYPES",
    "SELF_REFERENCES",
    "resolve_type",
]
