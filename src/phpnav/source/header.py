"""Line-oriented extraction of a PHP file's namespace/import header.

No syntactic parse: each line is tested against a handful of patterns and
scanning stops at the first class, interface or trait declaration. Anything
unrecognised is skipped.

Known limitations:
- Grouped imports (``use Foo\\{Bar, Baz};``) are not expanded.
- Statements spanning several lines are not joined.
- A declaration keyword inside a comment before the real declaration ends
  the scan early.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

NAMESPACE_SEPARATOR = "\\"

_DECLARATION_RE = re.compile(
    r"\b(class|interface|trait)\s+([A-Za-z_\x80-\uffff][A-Za-z0-9_\x80-\uffff]*)",
    re.IGNORECASE,
)
_NAMESPACE_RE = re.compile(r"^(?:<\?php)?\s*namespace\s+([^\s;{]+)\s*[;{]$")
_USE_RE = re.compile(r"^use\s+(.*)$", re.IGNORECASE)
_AS_RE = re.compile(r"\s+as\s+", re.IGNORECASE)
# `use function ...` / `use const ...` import functions and constants, not types
_NON_TYPE_USE_RE = re.compile(r"^(?:function|const)\s", re.IGNORECASE)


@dataclass(frozen=True)
class SourceHeader:
    """Namespace, import aliases and first declared type of one source file."""

    namespace: str = ""
    imports: dict[str, str] = field(default_factory=dict)
    declared_type: str = ""

    @property
    def declared_fqn(self) -> str:
        """Namespace-qualified declared type, without a leading separator."""
        if not self.declared_type:
            return ""
        if not self.namespace:
            return self.declared_type
        return f"{self.namespace}{NAMESPACE_SEPARATOR}{self.declared_type}"


def parse_header(path: Path | str) -> SourceHeader:
    """Read ``path`` and extract its header.

    Raises:
        OSError: If the file cannot be read.
    """
    text = Path(path).read_text(encoding="utf-8", errors="replace")
    return parse_header_text(text)


def parse_header_text(text: str) -> SourceHeader:
    namespace = ""
    imports: dict[str, str] = {}
    declared_type = ""

    for raw_line in text.splitlines():
        declaration = _DECLARATION_RE.search(raw_line)
        if declaration:
            declared_type = declaration.group(2)
            break

        line = raw_line.strip()
        if not line:
            continue

        ns_match = _NAMESPACE_RE.search(line)
        if ns_match:
            namespace = ns_match.group(1).strip(NAMESPACE_SEPARATOR)
            continue

        use_match = _USE_RE.match(line)
        if use_match:
            parsed = _parse_use(use_match.group(1))
            if parsed is not None:
                alias, imported = parsed
                imports[alias] = imported

    return SourceHeader(namespace=namespace, imports=imports, declared_type=declared_type)


def _parse_use(statement: str) -> tuple[str, str] | None:
    """Split the body of a ``use`` statement into ``(alias, imported name)``."""
    if _NON_TYPE_USE_RE.match(statement):
        return None

    body = statement.rstrip().rstrip(";").strip()
    if not body:
        return None

    parts = _AS_RE.split(body)
    if len(parts) > 1:
        imported = " as ".join(parts[:-1]).strip()
        alias = parts[-1].strip()
    else:
        imported = body
        alias = imported.rsplit(NAMESPACE_SEPARATOR, 1)[-1].strip()

    imported = imported.lstrip(NAMESPACE_SEPARATOR)
    if not alias or not imported:
        return None
    return alias, imported
