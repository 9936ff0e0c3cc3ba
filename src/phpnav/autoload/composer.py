"""Composer autoload readers.

Two sources describe the same rules:

- ``composer.json`` (plus ``vendor/composer/installed.json`` for
  dependencies): the declared ``psr-4`` / ``classmap`` sections.
- The tables Composer generates under ``vendor/composer``
  (``autoload_psr4.php``, ``autoload_classmap.php``): already merged and
  resolved for the root package and every installed dependency.

PSR-0 sections are ignored. Translating a path back to a class name is
ambiguous under PSR-0 (``Vendor/Pkg/Class/Name.php`` is both
``Vendor\\Pkg\\Class\\Name`` and ``Vendor\\Pkg\\Class_Name``).
"""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any

import structlog

from phpnav.autoload.models import AutoloadConfig
from phpnav.core.errors import ConfigError
from phpnav.source.header import parse_header

logger = structlog.get_logger()

COMPOSER_JSON = "composer.json"
GENERATED_DIR = Path("vendor") / "composer"
PSR4_TABLE = "autoload_psr4.php"
CLASSMAP_TABLE = "autoload_classmap.php"
INSTALLED_JSON = "installed.json"

# Files Composer's classmap generator reads
_CLASSMAP_SUFFIXES = frozenset({".php", ".inc", ".hh"})

# 'Key\\Name\\' => <value>,
_TABLE_ENTRY_RE = re.compile(r"^\s*'((?:[^'\\]|\\.)*)'\s*=>\s*(.+?),?\s*$")
# $vendorDir . '/path'  |  $baseDir . '/path'  |  '/literal/path'
_TABLE_PATH_RE = re.compile(r"(?:\$(vendorDir|baseDir)\s*\.\s*)?'((?:[^'\\]|\\.)*)'")
_PHP_ESCAPE_RE = re.compile(r"\\([\\'])")


def load_autoload(path: Path | str, *, include_dev: bool = True) -> AutoloadConfig:
    """Read the autoload configuration from ``path``.

    ``path`` may be a ``composer.json``, ``vendor/autoload.php``, one of the
    generated ``vendor/composer/autoload_*.php`` tables, or a project
    directory (generated tables are preferred over ``composer.json``).

    Raises:
        ConfigError: If the source is missing, unreadable or malformed.
    """
    source = Path(path)
    if not source.exists() or not os.access(source, os.R_OK):
        raise ConfigError.file_not_found(str(source))

    if source.is_dir():
        if (source / GENERATED_DIR / PSR4_TABLE).is_file():
            return read_generated_tables(source / GENERATED_DIR)
        if (source / COMPOSER_JSON).is_file():
            return read_composer_json(source / COMPOSER_JSON, include_dev=include_dev)
        raise ConfigError.file_not_found(str(source / COMPOSER_JSON))

    if source.suffix == ".json":
        return read_composer_json(source, include_dev=include_dev)
    if source.name == "autoload.php":
        return read_generated_tables(source.parent / "composer")
    if source.parent.name == "composer" and source.name.startswith("autoload_"):
        return read_generated_tables(source.parent)

    raise ConfigError.invalid_value(
        "autoload_path", str(source), "expected composer.json or a Composer autoload file"
    )


# =============================================================================
# composer.json
# =============================================================================


def read_composer_json(path: Path, *, include_dev: bool = True) -> AutoloadConfig:
    """Build the configuration from ``composer.json`` and installed packages."""
    root = path.parent
    data = _read_json(path)
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top-level value must be an object")

    psr4: dict[str, list[str]] = {}
    fallback_dirs: list[str] = []
    class_map: dict[str, str] = {}

    sections = ["autoload", "autoload-dev"] if include_dev else ["autoload"]
    for section in sections:
        _merge_package_autoload(
            data.get(section), root, psr4=psr4, fallback_dirs=fallback_dirs, class_map=class_map
        )

    vendor_dir = root / _vendor_dir_name(data)
    for package, install_path in _installed_packages(vendor_dir / "composer"):
        _merge_package_autoload(
            package.get("autoload"),
            install_path,
            psr4=psr4,
            fallback_dirs=fallback_dirs,
            class_map=class_map,
        )

    logger.debug(
        "autoload_loaded",
        source=str(path),
        prefixes=len(psr4),
        fallback_dirs=len(fallback_dirs),
        class_map=len(class_map),
    )
    return AutoloadConfig(
        psr4=psr4, fallback_dirs=fallback_dirs, class_map=class_map, source=str(path)
    )


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError.file_not_found(str(path)) from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigError.parse_error(str(path), str(e)) from e


def _vendor_dir_name(data: dict[str, Any]) -> str:
    config = data.get("config")
    if isinstance(config, dict) and isinstance(config.get("vendor-dir"), str):
        return str(config["vendor-dir"])
    return "vendor"


def _merge_package_autoload(
    autoload: Any,
    base: Path,
    *,
    psr4: dict[str, list[str]],
    fallback_dirs: list[str],
    class_map: dict[str, str],
) -> None:
    if not isinstance(autoload, dict):
        return

    rules = autoload.get("psr-4")
    if isinstance(rules, dict):
        for prefix, dirs in rules.items():
            paths = [_join(base, d) for d in _as_list(dirs)]
            if prefix:
                psr4.setdefault(prefix, []).extend(paths)
            else:
                fallback_dirs.extend(paths)

    entries = autoload.get("classmap")
    if isinstance(entries, list):
        for entry in entries:
            if isinstance(entry, str):
                class_map.update(build_class_map(Path(_join(base, entry))))


def _installed_packages(composer_dir: Path) -> list[tuple[dict[str, Any], Path]]:
    """Installed dependencies with their install directory.

    Handles both the Composer 1 (list) and Composer 2 (``{"packages": [...]}``)
    layouts of ``installed.json``.
    """
    installed = composer_dir / INSTALLED_JSON
    if not installed.is_file():
        return []

    data = _read_json(installed)
    packages = data.get("packages", []) if isinstance(data, dict) else data
    if not isinstance(packages, list):
        raise ConfigError.parse_error(str(installed), "expected a list of packages")

    vendor_dir = composer_dir.parent
    result: list[tuple[dict[str, Any], Path]] = []
    for package in packages:
        if not isinstance(package, dict):
            continue
        install_path = package.get("install-path")
        if isinstance(install_path, str):
            target = Path(_join(composer_dir, install_path))
        elif isinstance(package.get("name"), str):
            target = vendor_dir / package["name"]
        else:
            continue
        result.append((package, target))
    return result


def build_class_map(location: Path) -> dict[str, str]:
    """Map every class declared under ``location`` (file or directory) to its file.

    The declared type and namespace come from each file's header; files
    declaring nothing are left out.
    """
    if location.is_file():
        files = [location]
    elif location.is_dir():
        files = [
            Path(dirpath) / name
            for dirpath, _dirnames, filenames in os.walk(location)
            for name in filenames
            if Path(name).suffix.lower() in _CLASSMAP_SUFFIXES
        ]
    else:
        logger.warning("classmap_path_missing", path=str(location))
        return {}

    class_map: dict[str, str] = {}
    for file_path in files:
        try:
            header = parse_header(file_path)
        except OSError:
            logger.debug("classmap_file_unreadable", path=str(file_path), exc_info=True)
            continue
        if header.declared_type:
            class_map[os.path.realpath(file_path)] = header.declared_fqn
    return class_map


def _as_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [v for v in value if isinstance(v, str)]
    return []


def _join(base: Path, relative: str) -> str:
    return os.path.normpath(os.path.join(base, relative))


# =============================================================================
# Generated tables (vendor/composer/autoload_*.php)
# =============================================================================


def read_generated_tables(composer_dir: Path) -> AutoloadConfig:
    """Build the configuration from Composer's generated autoload tables."""
    psr4_table = composer_dir / PSR4_TABLE
    if not psr4_table.is_file() or not os.access(psr4_table, os.R_OK):
        raise ConfigError.file_not_found(str(psr4_table))

    vendor_dir = composer_dir.parent
    base_dir = vendor_dir.parent

    psr4: dict[str, list[str]] = {}
    fallback_dirs: list[str] = []
    for prefix, paths in _read_table(psr4_table, vendor_dir, base_dir):
        if prefix:
            psr4.setdefault(prefix, []).extend(paths)
        else:
            fallback_dirs.extend(paths)

    class_map: dict[str, str] = {}
    classmap_table = composer_dir / CLASSMAP_TABLE
    if classmap_table.is_file():
        for class_name, paths in _read_table(classmap_table, vendor_dir, base_dir):
            for file_path in paths:
                class_map[file_path] = class_name

    logger.debug(
        "autoload_loaded",
        source=str(composer_dir),
        prefixes=len(psr4),
        fallback_dirs=len(fallback_dirs),
        class_map=len(class_map),
    )
    return AutoloadConfig(
        psr4=psr4, fallback_dirs=fallback_dirs, class_map=class_map, source=str(composer_dir)
    )


def _read_table(path: Path, vendor_dir: Path, base_dir: Path) -> list[tuple[str, list[str]]]:
    """Parse the ``'key' => value`` lines of a generated ``return array(...)`` table."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError.parse_error(str(path), str(e)) from e

    roots = {"vendorDir": str(vendor_dir), "baseDir": str(base_dir)}
    entries: list[tuple[str, list[str]]] = []
    for line in text.splitlines():
        match = _TABLE_ENTRY_RE.match(line)
        if not match:
            continue
        key = _unescape(match.group(1))
        paths = [
            os.path.normpath(roots[var] + _unescape(literal) if var else _unescape(literal))
            for var, literal in _TABLE_PATH_RE.findall(match.group(2))
        ]
        entries.append((key, paths))
    return entries


def _unescape(literal: str) -> str:
    """Decode a PHP single-quoted string body."""
    return _PHP_ESCAPE_RE.sub(r"\1", literal)
