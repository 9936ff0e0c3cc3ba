"""Tests for the source header parser."""

from __future__ import annotations

from pathlib import Path

from phpnav.source import SourceHeader, parse_header, parse_header_text

SAMPLE = """<?php
namespace Acme\\Pkg;

use Foo\\Bar as FB;
use Foo\\Baz;

class C {}
"""


class TestParseHeaderText:
    """Line-oriented header extraction."""

    def test_namespace_imports_and_declared_type(self) -> None:
        """Namespace, aliased and plain imports, first declared type."""
        header = parse_header_text(SAMPLE)

        assert header.namespace == "Acme\\Pkg"
        assert header.imports == {"FB": "Foo\\Bar", "Baz": "Foo\\Baz"}
        assert header.declared_type == "C"
        assert header.declared_fqn == "Acme\\Pkg\\C"

    def test_namespace_on_opening_line(self) -> None:
        header = parse_header_text("<?php namespace App;\nfinal class Kernel\n{\n}\n")

        assert header.namespace == "App"
        assert header.declared_type == "Kernel"

    def test_braced_namespace(self) -> None:
        header = parse_header_text("<?php\nnamespace App\\Http {\n    interface Middleware {}\n}\n")

        assert header.namespace == "App\\Http"
        assert header.declared_type == "Middleware"

    def test_scan_stops_at_first_declaration(self) -> None:
        """Imports after the declaration are not part of the header."""
        text = "<?php\nnamespace A;\ntrait T {\n    use Other;\n}\nuse Late;\n"

        header = parse_header_text(text)

        assert header.declared_type == "T"
        assert header.imports == {}

    def test_declaration_name_stops_at_non_identifier(self) -> None:
        header = parse_header_text("<?php\nabstract class Base{\n")

        assert header.declared_type == "Base"

    def test_function_and_const_imports_are_skipped(self) -> None:
        text = "<?php\nuse function Foo\\bar;\nuse const Foo\\BAZ;\nuse Foo\\Qux;\n"

        header = parse_header_text(text)

        assert header.imports == {"Qux": "Foo\\Qux"}

    def test_leading_separator_on_import_is_dropped(self) -> None:
        header = parse_header_text("<?php\nuse \\Vendor\\Lib;\n")

        assert header.imports == {"Lib": "Vendor\\Lib"}

    def test_case_insensitive_alias_keyword(self) -> None:
        header = parse_header_text("<?php\nuse Vendor\\Lib AS L;\n")

        assert header.imports == {"L": "Vendor\\Lib"}

    def test_unqualified_import(self) -> None:
        header = parse_header_text("<?php\nuse Exception;\n")

        assert header.imports == {"Exception": "Exception"}

    def test_grouped_imports_are_not_expanded(self) -> None:
        """Grouped imports are a known limitation: no usable alias comes out."""
        header = parse_header_text("<?php\nuse Foo\\{Bar, Baz};\nclass C {}\n")

        assert "Bar" not in header.imports
        assert "Baz" not in header.imports

    def test_malformed_lines_are_skipped(self) -> None:
        """Garbage never aborts the parse."""
        text = "<?php\n@@@ ???\nnamespace\nuse ;\nnamespace Ok;\nclass C {}\n"

        header = parse_header_text(text)

        assert header.namespace == "Ok"
        assert header.imports == {}
        assert header.declared_type == "C"

    def test_empty_text(self) -> None:
        assert parse_header_text("") == SourceHeader()


class TestParseHeader:
    """File-based parsing."""

    def test_reads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "C.php"
        path.write_text(SAMPLE)

        assert parse_header(path) == parse_header_text(SAMPLE)

    def test_invalid_utf8_is_tolerated(self, tmp_path: Path) -> None:
        path = tmp_path / "Latin.php"
        path.write_bytes(b"<?php\n// caf\xe9\nnamespace L;\nclass K {}\n")

        header = parse_header(path)

        assert header.namespace == "L"
        assert header.declared_type == "K"
