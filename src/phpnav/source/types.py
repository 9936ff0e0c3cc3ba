"""Doc-annotation type resolution against a file header.

Turns the type part of a ``@return``/``@var`` annotation (``int|Foo\\Bar``)
into fully-qualified, root-anchored names using the namespace and ``use``
aliases of the file the annotation was written in.
"""

from __future__ import annotations

from phpnav.source.header import NAMESPACE_SEPARATOR, SourceHeader

UNION_SEPARATOR = "|"

# Matched case-sensitively, exactly as written in the annotation.
PRIMITIVE_TYPES: frozenset[str] = frozenset(
    {
        "array",
        "bool",
        "callable",
        "double",
        "float",
        "int",
        "mixed",
        "null",
        "object",
        "resource",
        "scalar",
        "string",
        "void",
    }
)

# Matched case-insensitively; all resolve to the file's declared type.
SELF_REFERENCES: frozenset[str] = frozenset({"static", "$this", "self"})


def resolve_type(header: SourceHeader, raw_annotation: str) -> list[str]:
    """Resolve every member of a union annotation, in order, keeping duplicates.

    Examples:
        With ``namespace Acme\\Pkg; use Foo\\Bar as FB; class C``:

        self          -> \\Acme\\Pkg\\C
        int|FB        -> \\Foo\\Bar
        Other\\Thing   -> \\Acme\\Pkg\\Other\\Thing
    """
    resolved: list[str] = []
    for token in raw_annotation.split(UNION_SEPARATOR):
        token = token.strip()
        if not token or token in PRIMITIVE_TYPES:
            continue

        name = _resolve_token(header, token)
        if name:
            resolved.append(NAMESPACE_SEPARATOR + name.lstrip(NAMESPACE_SEPARATOR))
    return resolved


def _resolve_token(header: SourceHeader, token: str) -> str:
    if token.lower() in SELF_REFERENCES:
        return _join(header.namespace, header.declared_type)

    if token.startswith(NAMESPACE_SEPARATOR):
        return token

    alias, _, remainder = token.partition(NAMESPACE_SEPARATOR)
    imported = header.imports.get(alias)
    if imported is not None:
        return _join(imported, remainder)
    return _join(header.namespace, token)


def _join(*parts: str) -> str:
    return NAMESPACE_SEPARATOR.join(part for part in parts if part)
