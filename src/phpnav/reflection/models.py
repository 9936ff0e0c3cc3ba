"""Descriptors for reflected types and their members."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class MemberKind(str, Enum):
    CONSTANT = "constant"
    METHOD = "method"
    PROPERTY = "property"


class Visibility(str, Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


class TypeKind(str, Enum):
    CLASS = "class"
    INTERFACE = "interface"
    TRAIT = "trait"


@dataclass(frozen=True)
class MemberDescriptor:
    """One constant, method or property as seen from the inspected type."""

    name: str
    kind: MemberKind
    visibility: Visibility
    is_static: bool
    declaring_class: str  # FQN without leading separator
    doc: str = ""
    file_path: str = ""
    line: int = 0
    is_abstract: bool = False
    is_final: bool = False
    parameters: tuple[str, ...] = ()  # Methods only, names without '$'
    value: str | None = None  # Constants only, initializer source text

    @property
    def is_public(self) -> bool:
        return self.visibility is Visibility.PUBLIC

    @property
    def is_protected(self) -> bool:
        return self.visibility is Visibility.PROTECTED

    @property
    def is_private(self) -> bool:
        return self.visibility is Visibility.PRIVATE


@dataclass(frozen=True)
class ClassDescriptor:
    """A type with its full member set, inherited members included.

    Member tuples list the type's own members first, then those it gets
    from traits, its parent chain and its interfaces.
    """

    name: str  # FQN without leading separator
    kind: TypeKind = TypeKind.CLASS
    file_path: str = ""
    line: int = 0
    doc: str = ""
    is_abstract: bool = False
    is_final: bool = False
    is_instantiable: bool = False
    parent: str | None = None
    interfaces: tuple[str, ...] = ()
    constants: tuple[MemberDescriptor, ...] = ()
    methods: tuple[MemberDescriptor, ...] = ()
    properties: tuple[MemberDescriptor, ...] = ()

    @property
    def is_interface(self) -> bool:
        return self.kind is TypeKind.INTERFACE

    @property
    def is_trait(self) -> bool:
        return self.kind is TypeKind.TRAIT

    def get_method(self, name: str) -> MemberDescriptor | None:
        """Method lookup, case-insensitive like PHP method names."""
        lowered = name.lower()
        return next((m for m in self.methods if m.name.lower() == lowered), None)

    def get_property(self, name: str) -> MemberDescriptor | None:
        name = name.lstrip("$")
        return next((p for p in self.properties if p.name == name), None)

    def get_constant(self, name: str) -> MemberDescriptor | None:
        return next((c for c in self.constants if c.name == name), None)


class ClassIntrospector(Protocol):
    """Introspection capability supplied by the host.

    ``get_class`` raises ``ClassNotFoundError`` when the type is unknown.
    """

    def get_class(self, name: str) -> ClassDescriptor: ...
