"""Source-based introspection of PHP types with Tree-sitter.

Plays the role of the runtime's reflection API for projects that are not
loaded into a live interpreter: the file holding a type is located through
the discovery engine, parsed with the tree-sitter PHP grammar, and its
declaration turned into a ``ClassDescriptor``.

Inheritance is merged the way PHP reflection reports it:
- own members first;
- members imported from used traits, reported as declared by the using type;
- the parent chain, keeping the ancestor as declaring type (so inherited
  privates stay recognisable);
- interfaces (constants and abstract methods).
A member name already present is not repeated (method names compare
case-insensitively). Ancestors that cannot be located are skipped.

Not modelled: trait conflict resolution (``insteadof``/``as`` blocks),
conditional declarations nested in statements, enums.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import structlog
import tree_sitter
import tree_sitter_php

from phpnav.core.errors import ClassNotFoundError
from phpnav.reflection.models import (
    ClassDescriptor,
    MemberDescriptor,
    MemberKind,
    TypeKind,
    Visibility,
)
from phpnav.source.header import NAMESPACE_SEPARATOR, SourceHeader
from phpnav.source.types import resolve_type

logger = structlog.get_logger()

Locator = Callable[[str], Path | None]

MAX_INHERITANCE_DEPTH = 32

_DECLARATION_KINDS: dict[str, TypeKind] = {
    "class_declaration": TypeKind.CLASS,
    "interface_declaration": TypeKind.INTERFACE,
    "trait_declaration": TypeKind.TRAIT,
}
_NAME_NODES = frozenset({"name", "qualified_name"})
_PARAMETER_NODES = frozenset(
    {"simple_parameter", "variadic_parameter", "property_promotion_parameter"}
)


@dataclass
class _DeclaredType:
    """One type declaration as written, before inheritance is applied."""

    name: str
    kind: TypeKind
    file_path: str
    line: int
    doc: str
    header: SourceHeader
    is_abstract: bool = False
    is_final: bool = False
    parent_ref: str | None = None
    interface_refs: list[str] = field(default_factory=list)
    trait_refs: list[str] = field(default_factory=list)
    constants: list[MemberDescriptor] = field(default_factory=list)
    methods: list[MemberDescriptor] = field(default_factory=list)
    properties: list[MemberDescriptor] = field(default_factory=list)

    def resolve(self, ref: str) -> str | None:
        resolved = resolve_type(self.header, ref)
        return resolved[0].lstrip(NAMESPACE_SEPARATOR) if resolved else None


class SourceIntrospector:
    """Builds ``ClassDescriptor`` objects by parsing the files that declare them.

    Usage::

        introspector = SourceIntrospector(engine.locate)
        descriptor = introspector.get_class("Acme\\\\Foo\\\\Bar")
    """

    def __init__(self, locate: Locator) -> None:
        self._locate = locate
        self._parser = tree_sitter.Parser(tree_sitter.Language(tree_sitter_php.language_php()))
        # path -> ((mtime_ns, size), declarations)
        self._file_cache: dict[str, tuple[tuple[int, int], list[_DeclaredType]]] = {}

    def get_class(self, name: str) -> ClassDescriptor:
        """Describe ``name`` with its inherited members.

        Raises:
            ClassNotFoundError: If the type cannot be located or is not
                declared in the located file.
        """
        return self._describe(name.lstrip(NAMESPACE_SEPARATOR), ())

    # -------------------------------------------------------------------------
    # Inheritance
    # -------------------------------------------------------------------------

    def _describe(self, name: str, lineage: tuple[str, ...]) -> ClassDescriptor:
        declared = self._find_declaration(name)
        lineage = (*lineage, declared.name.lower())

        constants = _MemberSet(case_insensitive=False)
        methods = _MemberSet(case_insensitive=True)
        properties = _MemberSet(case_insensitive=False)
        constants.extend(declared.constants)
        methods.extend(declared.methods)
        properties.extend(declared.properties)

        for trait in self._ancestors(declared, declared.trait_refs, lineage):
            # Trait members become members of the using type
            constants.extend(replace(m, declaring_class=declared.name) for m in trait.constants)
            methods.extend(replace(m, declaring_class=declared.name) for m in trait.methods)
            properties.extend(replace(m, declaring_class=declared.name) for m in trait.properties)

        parent_name: str | None = None
        interfaces: dict[str, str] = {}
        if declared.kind is TypeKind.CLASS and declared.parent_ref:
            parent_name = declared.resolve(declared.parent_ref)
            for parent in self._ancestors(declared, [declared.parent_ref], lineage):
                parent_name = parent.name
                constants.extend(parent.constants)
                methods.extend(parent.methods)
                properties.extend(parent.properties)
                interfaces.update((i.lower(), i) for i in parent.interfaces)

        for iface_ref in declared.interface_refs:
            iface_name = declared.resolve(iface_ref)
            if iface_name:
                interfaces.setdefault(iface_name.lower(), iface_name)
        for iface in self._ancestors(declared, declared.interface_refs, lineage):
            constants.extend(iface.constants)
            methods.extend(iface.methods)
            interfaces.setdefault(iface.name.lower(), iface.name)
            interfaces.update((i.lower(), i) for i in iface.interfaces)

        all_methods = methods.members()
        is_abstract = (
            declared.is_abstract
            or declared.kind is TypeKind.INTERFACE
            or any(m.is_abstract for m in declared.methods)
        )
        constructor = next((m for m in all_methods if m.name.lower() == "__construct"), None)
        is_instantiable = (
            declared.kind is TypeKind.CLASS
            and not is_abstract
            and (constructor is None or constructor.is_public)
        )

        return ClassDescriptor(
            name=declared.name,
            kind=declared.kind,
            file_path=declared.file_path,
            line=declared.line,
            doc=declared.doc,
            is_abstract=is_abstract,
            is_final=declared.is_final,
            is_instantiable=is_instantiable,
            parent=parent_name,
            interfaces=tuple(interfaces.values()),
            constants=tuple(constants.members()),
            methods=tuple(all_methods),
            properties=tuple(properties.members()),
        )

    def _ancestors(
        self,
        declared: _DeclaredType,
        refs: Iterable[str],
        lineage: tuple[str, ...],
    ) -> list[ClassDescriptor]:
        ancestors: list[ClassDescriptor] = []
        for ref in refs:
            name = declared.resolve(ref)
            if not name:
                continue
            if name.lower() in lineage or len(lineage) >= MAX_INHERITANCE_DEPTH:
                logger.debug("inheritance_cycle", type=declared.name, ancestor=name)
                continue
            try:
                ancestors.append(self._describe(name, lineage))
            except ClassNotFoundError:
                logger.debug("ancestor_not_found", type=declared.name, ancestor=name)
        return ancestors

    # -------------------------------------------------------------------------
    # Files
    # -------------------------------------------------------------------------

    def _find_declaration(self, name: str) -> _DeclaredType:
        path = self._locate(name)
        if path is None:
            raise ClassNotFoundError.for_class(name)

        wanted = name.lower()
        for declared in self._declarations(path):
            if declared.name.lower() == wanted:
                return declared
        raise ClassNotFoundError.for_class(name)

    def _declarations(self, path: Path) -> list[_DeclaredType]:
        key = os.path.realpath(path)
        try:
            stat = os.stat(key)
        except OSError:
            logger.debug("source_unreadable", path=key, exc_info=True)
            return []

        stamp = (stat.st_mtime_ns, stat.st_size)
        cached = self._file_cache.get(key)
        if cached is not None and cached[0] == stamp:
            return cached[1]

        try:
            content = Path(key).read_bytes()
        except OSError:
            logger.debug("source_unreadable", path=key, exc_info=True)
            return []

        tree = self._parser.parse(content)
        declarations = _FileWalker(key, content).walk(tree.root_node)
        self._file_cache[key] = (stamp, declarations)
        return declarations


class _MemberSet:
    """Ordered members where the first declaration of a name wins."""

    def __init__(self, *, case_insensitive: bool) -> None:
        self._case_insensitive = case_insensitive
        self._members: dict[str, MemberDescriptor] = {}

    def extend(self, members: Iterable[MemberDescriptor]) -> None:
        for member in members:
            key = member.name.lower() if self._case_insensitive else member.name
            self._members.setdefault(key, member)

    def members(self) -> list[MemberDescriptor]:
        return list(self._members.values())


# =============================================================================
# Syntax tree walking
# =============================================================================


class _FileWalker:
    """Collects type declarations, tracking namespace and imports as it goes."""

    def __init__(self, file_path: str, content: bytes) -> None:
        self._file_path = file_path
        self._content = content
        self._namespace = ""
        self._imports: dict[str, str] = {}
        self._declarations: list[_DeclaredType] = []

    def walk(self, root: Any) -> list[_DeclaredType]:
        self._walk_statements(root.named_children)
        return self._declarations

    def _text(self, node: Any) -> str:
        return self._content[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def _walk_statements(self, nodes: Iterable[Any]) -> None:
        for node in nodes:
            if node.type == "namespace_definition":
                name_node = node.child_by_field_name("name")
                body = node.child_by_field_name("body")
                self._namespace = self._text(name_node) if name_node is not None else ""
                self._imports = {}
                if body is not None:
                    self._walk_statements(body.named_children)
                    self._namespace = ""
                    self._imports = {}
            elif node.type == "namespace_use_declaration":
                self._imports.update(self._use_clauses(node))
            elif node.type in _DECLARATION_KINDS:
                self._declarations.append(self._declaration(node))

    def _use_clauses(self, node: Any) -> dict[str, str]:
        """Alias -> imported type for one ``use`` statement (type imports only)."""
        if any(child.type in ("function", "const") for child in node.children):
            return {}

        group_prefix = ""
        clauses: list[Any] = []
        for child in node.named_children:
            if child.type in ("namespace_name", "qualified_name", "name"):
                group_prefix = self._text(child)
            elif child.type == "namespace_use_clause":
                clauses.append(child)
                group_prefix = ""
            elif child.type == "namespace_use_group":
                clauses.extend(
                    c for c in child.named_children if c.type.startswith("namespace_use")
                )

        imports: dict[str, str] = {}
        for clause in clauses:
            imported, alias = self._use_clause(clause)
            if not imported:
                continue
            if group_prefix:
                imported = f"{group_prefix}{NAMESPACE_SEPARATOR}{imported}"
            imported = imported.lstrip(NAMESPACE_SEPARATOR)
            imports[alias or imported.rsplit(NAMESPACE_SEPARATOR, 1)[-1]] = imported
        return imports

    def _use_clause(self, clause: Any) -> tuple[str, str]:
        imported = ""
        alias = ""
        after_as = False
        for child in clause.children:
            if child.type == "as":
                after_as = True
            elif child.type == "namespace_aliasing_clause":
                names = [c for c in child.named_children if c.type == "name"]
                if names:
                    alias = self._text(names[-1])
            elif child.type in _NAME_NODES or child.type == "namespace_name":
                if after_as:
                    alias = self._text(child)
                elif not imported:
                    imported = self._text(child)
        return imported, alias

    def _declaration(self, node: Any) -> _DeclaredType:
        kind = _DECLARATION_KINDS[node.type]
        name_node = node.child_by_field_name("name")
        short_name = self._text(name_node) if name_node is not None else ""
        fqn = short_name
        if self._namespace:
            fqn = f"{self._namespace}{NAMESPACE_SEPARATOR}{short_name}"

        declared = _DeclaredType(
            name=fqn.lstrip(NAMESPACE_SEPARATOR),
            kind=kind,
            file_path=self._file_path,
            line=node.start_point[0] + 1,
            doc=self._doc_comment(node),
            header=SourceHeader(
                namespace=self._namespace,
                imports=dict(self._imports),
                declared_type=short_name,
            ),
        )

        for child in node.children:
            if child.type == "abstract_modifier":
                declared.is_abstract = True
            elif child.type == "final_modifier":
                declared.is_final = True
            elif child.type == "base_clause":
                refs = self._names(child)
                if kind is TypeKind.INTERFACE:
                    declared.interface_refs.extend(refs)
                elif refs:
                    declared.parent_ref = refs[0]
            elif child.type == "class_interface_clause":
                declared.interface_refs.extend(self._names(child))

        body = node.child_by_field_name("body")
        if body is not None:
            self._members(body, declared)
        return declared

    def _names(self, node: Any) -> list[str]:
        return [self._text(c) for c in node.named_children if c.type in _NAME_NODES]

    def _members(self, body: Any, declared: _DeclaredType) -> None:
        in_interface = declared.kind is TypeKind.INTERFACE
        for node in body.named_children:
            if node.type == "const_declaration":
                declared.constants.extend(self._constants(node, declared.name))
            elif node.type == "property_declaration":
                declared.properties.extend(self._properties(node, declared.name))
            elif node.type == "method_declaration":
                method = self._method(node, declared.name, in_interface)
                declared.methods.append(method)
                if method.name.lower() == "__construct":
                    declared.properties.extend(self._promoted_properties(node, declared.name))
            elif node.type == "use_declaration":
                declared.trait_refs.extend(self._names(node))

    def _constants(self, node: Any, declaring: str) -> list[MemberDescriptor]:
        visibility, _static, _abstract, final = self._modifiers(node)
        doc = self._doc_comment(node)
        constants: list[MemberDescriptor] = []
        for element in node.named_children:
            if element.type != "const_element":
                continue
            parts = element.named_children
            name_node = next((p for p in parts if p.type == "name"), None)
            if name_node is None:
                continue
            value = self._text(parts[-1]) if len(parts) > 1 else None
            constants.append(
                MemberDescriptor(
                    name=self._text(name_node),
                    kind=MemberKind.CONSTANT,
                    visibility=visibility,
                    is_static=True,
                    declaring_class=declaring,
                    doc=doc,
                    file_path=self._file_path,
                    line=element.start_point[0] + 1,
                    is_final=final,
                    value=value,
                )
            )
        return constants

    def _properties(self, node: Any, declaring: str) -> list[MemberDescriptor]:
        visibility, static, _abstract, _final = self._modifiers(node)
        doc = self._doc_comment(node)
        properties: list[MemberDescriptor] = []
        for element in node.named_children:
            if element.type != "property_element":
                continue
            variable = _first_descendant(element, "variable_name")
            if variable is None:
                continue
            properties.append(
                MemberDescriptor(
                    name=self._text(variable).lstrip("$"),
                    kind=MemberKind.PROPERTY,
                    visibility=visibility,
                    is_static=static,
                    declaring_class=declaring,
                    doc=doc,
                    file_path=self._file_path,
                    line=element.start_point[0] + 1,
                )
            )
        return properties

    def _method(self, node: Any, declaring: str, in_interface: bool) -> MemberDescriptor:
        visibility, static, abstract, final = self._modifiers(node)
        name_node = node.child_by_field_name("name")
        params_node = node.child_by_field_name("parameters")
        parameters: tuple[str, ...] = ()
        if params_node is not None:
            parameters = tuple(
                self._parameter_name(p)
                for p in params_node.named_children
                if p.type in _PARAMETER_NODES
            )
        return MemberDescriptor(
            name=self._text(name_node) if name_node is not None else "",
            kind=MemberKind.METHOD,
            visibility=Visibility.PUBLIC if in_interface else visibility,
            is_static=static,
            declaring_class=declaring,
            doc=self._doc_comment(node),
            file_path=self._file_path,
            line=node.start_point[0] + 1,
            is_abstract=abstract or in_interface,
            is_final=final,
            parameters=parameters,
        )

    def _promoted_properties(self, node: Any, declaring: str) -> list[MemberDescriptor]:
        params_node = node.child_by_field_name("parameters")
        if params_node is None:
            return []
        promoted: list[MemberDescriptor] = []
        for param in params_node.named_children:
            if param.type != "property_promotion_parameter":
                continue
            visibility, _static, _abstract, _final = self._modifiers(param)
            promoted.append(
                MemberDescriptor(
                    name=self._parameter_name(param),
                    kind=MemberKind.PROPERTY,
                    visibility=visibility,
                    is_static=False,
                    declaring_class=declaring,
                    file_path=self._file_path,
                    line=param.start_point[0] + 1,
                )
            )
        return promoted

    def _parameter_name(self, param: Any) -> str:
        name_node = param.child_by_field_name("name") or _first_descendant(param, "variable_name")
        return self._text(name_node).lstrip("&.$") if name_node is not None else ""

    def _modifiers(self, node: Any) -> tuple[Visibility, bool, bool, bool]:
        """(visibility, static, abstract, final); visibility defaults to public."""
        visibility = Visibility.PUBLIC
        static = abstract = final = False
        for child in node.children:
            if child.type == "visibility_modifier":
                text = self._text(child)
                # `private(set)` is the write side of asymmetric visibility
                if "(" in text:
                    continue
                visibility = _VISIBILITIES.get(text.strip().lower(), Visibility.PUBLIC)
            elif child.type == "static_modifier":
                static = True
            elif child.type == "abstract_modifier":
                abstract = True
            elif child.type == "final_modifier":
                final = True
        return visibility, static, abstract, final

    def _doc_comment(self, node: Any) -> str:
        """The ``/** ... */`` block right before ``node``, if any."""
        previous = node.prev_sibling
        if previous is not None and previous.type == "comment":
            text = self._text(previous)
            if text.startswith("/**"):
                return text
        return ""


_VISIBILITIES: dict[str, Visibility] = {v.value: v for v in Visibility}


def _first_descendant(node: Any, node_type: str) -> Any | None:
    stack = list(reversed(node.children))
    while stack:
        current = stack.pop()
        if current.type == node_type:
            return current
        stack.extend(reversed(current.children))
    return None
