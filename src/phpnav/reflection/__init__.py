"""Type descriptors, member filtering and source-based introspection."""

from phpnav.reflection.introspector import MAX_INHERITANCE_DEPTH, SourceIntrospector
from phpnav.reflection.models import (
    ClassDescriptor,
    ClassIntrospector,
    MemberDescriptor,
    MemberKind,
    TypeKind,
    Visibility,
)
from phpnav.reflection.reflector import (
    FILTER_PREDICATES,
    ClassFilter,
    MemberReflector,
    is_abstract_class,
    matches_filter,
)

__all__ = [
    # Models
    "ClassDescriptor",
    "ClassIntrospector",
    "MemberDescriptor",
    "MemberKind",
    "TypeKind",
    "Visibility",
    # Reflector
    "MemberReflector",
    "ClassFilter",
    "FILTER_PREDICATES",
    "matches_filter",
    "is_abstract_class",
    # Introspector
    "SourceIntrospector",
    "MAX_INHERITANCE_DEPTH",
]
