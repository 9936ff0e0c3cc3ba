"""Location, documentation and annotated-type lookups for types and members.

Each lookup composes the introspector with the member lists of the
reflected type. An unknown type or member gives an absent result
(``None`` or ``[]``); ``ClassNotFoundError`` never leaves this module.
"""

from __future__ import annotations

import re

import structlog

from phpnav.core.errors import ClassNotFoundError
from phpnav.reflection.models import ClassDescriptor, ClassIntrospector, MemberDescriptor
from phpnav.source.header import parse_header
from phpnav.source.types import resolve_type

logger = structlog.get_logger()

_DOC_DECORATION_RE = re.compile(r"[ \t]*\* ?")
_DOC_DELIMITER_RE = re.compile(r"\s*/|/\s*")
_TYPE_TAG_RE = re.compile(r"@(return|var)\s+(\S+)", re.MULTILINE)


def _describe(introspector: ClassIntrospector, class_name: str) -> ClassDescriptor | None:
    try:
        return introspector.get_class(class_name)
    except ClassNotFoundError:
        logger.debug("class_not_found", class_name=class_name)
        return None


def _documented_member(descriptor: ClassDescriptor, name: str) -> MemberDescriptor | None:
    # Properties shadow methods of the same name
    return descriptor.get_property(name) or descriptor.get_method(name)


def location(
    introspector: ClassIntrospector,
    class_name: str,
    member: str | None = None,
) -> tuple[str, int] | None:
    """``(file_path, start_line)`` of a type, or of one of its members.

    A member name is looked up as a method, then a property, then a constant.
    """
    descriptor = _describe(introspector, class_name)
    if descriptor is None:
        return None
    if not member:
        return descriptor.file_path, descriptor.line

    found = (
        descriptor.get_method(member)
        or descriptor.get_property(member)
        or descriptor.get_constant(member)
    )
    if found is None:
        logger.debug("member_not_found", class_name=class_name, member=member)
        return None
    return found.file_path, found.line


def doc(
    introspector: ClassIntrospector,
    class_name: str,
    member: str,
    *,
    clean: bool = False,
) -> tuple[str, str] | None:
    """``(file_path, doc)`` for a property or method, None when undocumented.

    The path is the file of the inspected type, as for runtime reflection.
    """
    descriptor = _describe(introspector, class_name)
    if descriptor is None:
        return None

    found = _documented_member(descriptor, member)
    if found is None or not found.doc:
        return None
    return descriptor.file_path, clear_doc(found.doc) if clean else found.doc


def clear_doc(text: str) -> str:
    """Strip the ``/** * */`` decoration from a doc comment."""
    text = _DOC_DECORATION_RE.sub("", text)
    return _DOC_DELIMITER_RE.sub("", text)


def functype(introspector: ClassIntrospector, class_name: str, member: str) -> list[str]:
    """Types named by the first ``@return``/``@var`` tag of a member's doc.

    Names are resolved against the header of the file the member is
    written in, so relative names and aliases follow that file's imports.
    """
    descriptor = _describe(introspector, class_name)
    if descriptor is None:
        return []

    found = _documented_member(descriptor, member)
    if found is None or not found.doc:
        return []

    tag = _TYPE_TAG_RE.search(found.doc)
    if tag is None:
        return []

    source_path = found.file_path or descriptor.file_path
    try:
        header = parse_header(source_path)
    except OSError:
        logger.debug("header_unreadable", path=source_path, exc_info=True)
        return []
    return resolve_type(header, tag.group(2))
