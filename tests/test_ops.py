"""Tests for the Project facade over a small Composer project."""

from __future__ import annotations

import json
import os
from collections.abc import Callable
from pathlib import Path

import pytest

from phpnav.config import PhpNavConfig
from phpnav.config.models import DiscoveryConfig
from phpnav.core.errors import ConfigError, ErrorCode
from phpnav.ops import Project
from phpnav.reflection import ClassFilter

SHAPE = """<?php
namespace Acme;

abstract class Shape
{
    public const SIDES = 0;

    protected $name;

    /**
     * Scale the shape.
     *
     * @return static
     */
    public function scale($factor) {}

    abstract public function area();
}
"""

SQUARE = """<?php
namespace Acme;

use Acme\\Util\\Meter as M;

final class Square extends Shape
{
    /** @var M */
    public $unit;

    public function area() {}

    private static function cache() {}
}
"""

METER = """<?php
namespace Acme\\Util;

class Meter {}
"""


def _no_loaded_names() -> list[str]:
    return []


@pytest.fixture
def project_root(write_files: Callable[[dict[str, str]], Path]) -> Path:
    return write_files(
        {
            "composer.json": json.dumps({"autoload": {"psr-4": {"Acme\\": "src/"}}}),
            "src/Shape.php": SHAPE,
            "src/Square.php": SQUARE,
            "src/Util/Meter.php": METER,
        }
    )


@pytest.fixture
def project(project_root: Path) -> Project:
    return Project(project_root, config=PhpNavConfig(), loaded_names=_no_loaded_names)


class TestOpen:
    """Project construction."""

    def test_missing_autoload_source(self, tmp_path: Path) -> None:
        """A directory without Composer files cannot be opened."""
        with pytest.raises(ConfigError) as exc_info:
            Project(tmp_path, config=PhpNavConfig(), loaded_names=_no_loaded_names)
        assert exc_info.value.code == ErrorCode.CONFIG_FILE_NOT_FOUND

    def test_configured_autoload_path_is_relative_to_root(self, project_root: Path) -> None:
        config = PhpNavConfig(discovery=DiscoveryConfig(autoload_path="vendor/autoload.php"))

        with pytest.raises(ConfigError) as exc_info:
            Project(project_root, config=config, loaded_names=_no_loaded_names)
        assert str(project_root.resolve() / "vendor" / "autoload.php") in exc_info.value.message

    @pytest.mark.usefixtures("no_global_config")
    def test_project_yaml_selects_matcher(self, project_root: Path) -> None:
        """Without an explicit config, <root>/.phpnav/config.yaml is read."""
        config_dir = project_root / ".phpnav"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("matching:\n  kind: subsequence\n")

        project = Project(project_root, loaded_names=_no_loaded_names)

        assert project.config.matching.kind == "subsequence"
        assert project.find_classes("Sqr") == ["Acme\\Square"]

    def test_root_is_resolved(self, project: Project, project_root: Path) -> None:
        assert project.root == project_root.resolve()


class TestFindClasses:
    """Class search."""

    def test_qualified_prefix(self, project: Project) -> None:
        assert project.find_classes("Acme\\") == [
            "Acme\\Shape",
            "Acme\\Square",
            "Acme\\Util\\Meter",
        ]

    def test_short_name_prefix(self, project: Project) -> None:
        """An unqualified pattern is tested against the short class name."""
        assert project.find_classes("sq") == ["Acme\\Square"]

    def test_class_filter(self, project: Project) -> None:
        pytest.importorskip("tree_sitter_php")

        instantiable = project.find_classes(
            "Acme\\", class_filter=ClassFilter(is_instantiable=True)
        )
        abstract = project.find_classes("Acme\\", class_filter=ClassFilter(is_abstract=True))

        assert instantiable == ["Acme\\Square", "Acme\\Util\\Meter"]
        assert abstract == ["Acme\\Shape"]

    def test_refresh_sees_new_files(self, project: Project, project_root: Path) -> None:
        project.find_classes("Acme\\")
        circle = project_root / "src" / "Circle.php"
        circle.write_text("<?php\nnamespace Acme;\nclass Circle {}\n")

        assert project.refresh() is project
        assert "Acme\\Circle" in project.engine.names


class TestMembers:
    """Reflection through the project."""

    @pytest.fixture(autouse=True)
    def _needs_parser(self) -> None:
        pytest.importorskip("tree_sitter_php")

    def test_public_members_in_order(self, project: Project) -> None:
        """Constants, then methods, then properties; own members before inherited."""
        members = project.members("Acme\\Square", public_only=True)

        assert [m.name for m in members] == ["SIDES", "area", "scale", "unit"]

    def test_static_only(self, project: Project) -> None:
        members = project.members("Acme\\Square", static=True)

        assert [m.name for m in members] == ["SIDES", "cache"]

    def test_name_pattern(self, project: Project) -> None:
        assert [m.name for m in project.members("Acme\\Square", pattern="sc")] == ["scale"]

    def test_unknown_class(self, project: Project) -> None:
        """Unknown types yield nothing rather than raising."""
        assert project.class_descriptor("Acme\\Nope") is None
        assert project.reflect("Acme\\Nope") is None
        assert project.members("Acme\\Nope") == []

    def test_reflect_exposes_descriptor(self, project: Project) -> None:
        reflector = project.reflect("\\Acme\\Square")

        assert reflector is not None
        assert reflector.descriptor.parent == "Acme\\Shape"
        assert reflector.descriptor.is_final


class TestHeaders:
    """nsuse and type resolution."""

    def test_nsuse(self, project: Project) -> None:
        header = project.nsuse("src/Square.php")

        assert header.namespace == "Acme"
        assert header.imports == {"M": "Acme\\Util\\Meter"}
        assert header.declared_type == "Square"

    def test_resolve(self, project: Project) -> None:
        assert project.resolve("src/Square.php", "M|null|Shape") == [
            "\\Acme\\Util\\Meter",
            "\\Acme\\Shape",
        ]

    def test_nsuse_missing_file(self, project: Project) -> None:
        with pytest.raises(OSError):
            project.nsuse("src/Nope.php")


class TestNavigation:
    """location, doc and functype through the project."""

    @pytest.fixture(autouse=True)
    def _needs_parser(self) -> None:
        pytest.importorskip("tree_sitter_php")

    def test_class_location(self, project: Project, project_root: Path) -> None:
        assert project.location("Acme\\Square") == (
            os.path.realpath(project_root / "src" / "Square.php"),
            6,
        )

    def test_inherited_method_location(self, project: Project, project_root: Path) -> None:
        """Inherited members point into the file that declares them."""
        assert project.location("Acme\\Square", "scale") == (
            os.path.realpath(project_root / "src" / "Shape.php"),
            15,
        )

    def test_doc_is_cleaned(self, project: Project) -> None:
        result = project.doc("Acme\\Square", "scale")

        assert result is not None
        assert result[1].strip() == "Scale the shape.\n\n@return static"

    def test_doc_raw(self, project: Project) -> None:
        result = project.doc("Acme\\Square", "unit", clean=False)

        assert result is not None
        assert result[1] == "/** @var M */"

    def test_functype_uses_file_imports(self, project: Project) -> None:
        assert project.functype("Acme\\Square", "unit") == ["\\Acme\\Util\\Meter"]

    def test_functype_self_reference(self, project: Project) -> None:
        """static resolves against the file that declares the method."""
        assert project.functype("Acme\\Square", "scale") == ["\\Acme\\Shape"]

    def test_misses(self, project: Project) -> None:
        assert project.location("Acme\\Nope") is None
        assert project.doc("Acme\\Square", "area") is None
        assert project.functype("Acme\\Square", "nothing") == []
