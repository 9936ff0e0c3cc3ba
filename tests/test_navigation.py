"""Tests for location / doc / functype lookups."""

from __future__ import annotations

from pathlib import Path

import pytest

from phpnav.core.errors import ClassNotFoundError
from phpnav.navigation import clear_doc, doc, functype, location
from phpnav.reflection import ClassDescriptor, MemberDescriptor, MemberKind, Visibility


class FakeIntrospector:
    """In-memory introspector keyed by class name."""

    def __init__(self, *descriptors: ClassDescriptor) -> None:
        self._classes = {d.name: d for d in descriptors}

    def get_class(self, name: str) -> ClassDescriptor:
        try:
            return self._classes[name.lstrip("\\")]
        except KeyError:
            raise ClassNotFoundError.for_class(name) from None


def _member(
    name: str,
    kind: MemberKind,
    file_path: str,
    line: int,
    *,
    doc_text: str = "",
) -> MemberDescriptor:
    return MemberDescriptor(
        name=name,
        kind=kind,
        visibility=Visibility.PUBLIC,
        is_static=False,
        declaring_class="App\\Repo",
        doc=doc_text,
        file_path=file_path,
        line=line,
    )


@pytest.fixture
def repo_file(tmp_path: Path) -> Path:
    path = tmp_path / "Repo.php"
    path.write_text(
        "<?php\nnamespace App;\n\nuse App\\Models\\User;\nuse Vendor\\Lib\\Cache as C;\n\n"
        "class Repo\n{\n}\n"
    )
    return path


@pytest.fixture
def introspector(repo_file: Path) -> FakeIntrospector:
    source = str(repo_file)
    return FakeIntrospector(
        ClassDescriptor(
            name="App\\Repo",
            file_path=source,
            line=7,
            constants=(_member("LIMIT", MemberKind.CONSTANT, source, 9),),
            methods=(
                _member("find", MemberKind.METHOD, source, 12, doc_text="/** @return User|null */"),
                _member("cache", MemberKind.METHOD, source, 20, doc_text="/** @return self */"),
                _member("plain", MemberKind.METHOD, source, 25, doc_text="/** Just words. */"),
                _member("bare", MemberKind.METHOD, source, 30),
            ),
            properties=(
                _member("cache", MemberKind.PROPERTY, source, 10, doc_text="/** @var C */"),
            ),
        )
    )


class TestLocation:
    """(file, line) lookups."""

    def test_class(self, introspector: FakeIntrospector, repo_file: Path) -> None:
        assert location(introspector, "App\\Repo") == (str(repo_file), 7)

    def test_method(self, introspector: FakeIntrospector, repo_file: Path) -> None:
        assert location(introspector, "\\App\\Repo", "FIND") == (str(repo_file), 12)

    def test_method_before_property(self, introspector: FakeIntrospector) -> None:
        """A name used for both a method and a property locates the method."""
        result = location(introspector, "App\\Repo", "cache")

        assert result is not None
        assert result[1] == 20

    def test_constant(self, introspector: FakeIntrospector) -> None:
        result = location(introspector, "App\\Repo", "LIMIT")

        assert result is not None
        assert result[1] == 9

    def test_unknown_class_or_member(self, introspector: FakeIntrospector) -> None:
        """Misses are None, never exceptions."""
        assert location(introspector, "App\\Missing") is None
        assert location(introspector, "App\\Repo", "nothing") is None


class TestDoc:
    """Doc comment lookups."""

    def test_property_before_method(self, introspector: FakeIntrospector, repo_file: Path) -> None:
        """A property shadows a method of the same name."""
        assert doc(introspector, "App\\Repo", "cache") == (str(repo_file), "/** @var C */")

    def test_clean(self, introspector: FakeIntrospector) -> None:
        result = doc(introspector, "App\\Repo", "plain", clean=True)

        assert result is not None
        assert result[1] == "Just words."

    def test_undocumented_or_unknown(self, introspector: FakeIntrospector) -> None:
        assert doc(introspector, "App\\Repo", "bare") is None
        assert doc(introspector, "App\\Repo", "nothing") is None
        assert doc(introspector, "App\\Missing", "find") is None


class TestClearDoc:
    """Comment decoration stripping."""

    def test_single_line(self) -> None:
        assert clear_doc("/** @var T */") == "@var T"

    def test_multi_line(self) -> None:
        text = "/**\n     * Say hello.\n     *\n     * @return static\n     */"

        assert clear_doc(text).strip() == "Say hello.\n\n@return static"


class TestFunctype:
    """Annotated type resolution."""

    def test_imported_return_type(self, introspector: FakeIntrospector) -> None:
        """Aliases come from the declaring file; primitives are dropped."""
        assert functype(introspector, "App\\Repo", "find") == ["\\App\\Models\\User"]

    def test_property_var_with_alias(self, introspector: FakeIntrospector) -> None:
        assert functype(introspector, "App\\Repo", "cache") == ["\\Vendor\\Lib\\Cache"]

    def test_no_type_tag(self, introspector: FakeIntrospector) -> None:
        assert functype(introspector, "App\\Repo", "plain") == []
        assert functype(introspector, "App\\Repo", "bare") == []

    def test_unknown(self, introspector: FakeIntrospector) -> None:
        assert functype(introspector, "App\\Missing", "find") == []
        assert functype(introspector, "App\\Repo", "nothing") == []

    def test_self_reference_resolves_to_declaring_type(
        self, introspector: FakeIntrospector
    ) -> None:
        """A self annotation needs the method, which the property shadows here."""
        descriptor = introspector.get_class("App\\Repo")
        method_only = FakeIntrospector(
            ClassDescriptor(
                name=descriptor.name,
                file_path=descriptor.file_path,
                methods=descriptor.methods,
            )
        )

        assert functype(method_only, "App\\Repo", "cache") == ["\\App\\Repo"]
