"""Directory-convention (PSR-4) scan: file paths -> fully-qualified names.

For a mapping ``{"Acme\\": ["/proj/src"]}`` the file
``/proj/src/Foo/Bar.php`` becomes ``Acme\\Foo\\Bar``: strip the base
directory, strip the extension, turn path separators into namespace
separators, prepend the prefix.

Directory symlinks are not followed, so symlink loops are never walked but a
symlinked sub-tree is not scanned either.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

import structlog

logger = structlog.get_logger()

NAMESPACE_SEPARATOR = "\\"


@dataclass
class ScanResult:
    """Names found by one scan, keyed by absolute file path."""

    classes: dict[str, str] = field(default_factory=dict)
    unreadable: list[str] = field(default_factory=list)
    files_visited: int = 0
    truncated: bool = False


def path_to_class_name(file_path: str, base_dir: str, prefix: str) -> str:
    """Translate a file below ``base_dir`` into its class name under ``prefix``."""
    relative = file_path[len(base_dir) :].lstrip(os.sep)
    dot = relative.rfind(".")
    if dot > 0:
        relative = relative[:dot]
    if os.sep != NAMESPACE_SEPARATOR:
        relative = relative.replace(os.sep, NAMESPACE_SEPARATOR)
    return prefix + relative


def scan_namespace_dirs(
    mapping: Mapping[str, Sequence[str]],
    file_pattern: re.Pattern[str],
    *,
    max_depth: int = 64,
    max_files: int = 200_000,
) -> ScanResult:
    """Walk every mapped directory and derive a class name for each source file.

    A missing or unreadable base directory is logged once and skipped; the
    remaining mappings are still scanned. When the same file is reached
    through two mappings the later mapping's name wins.
    """
    result = ScanResult()

    for prefix, directories in mapping.items():
        for directory in directories:
            base_dir = os.path.realpath(directory)
            if not os.path.isdir(base_dir) or not os.access(base_dir, os.R_OK | os.X_OK):
                logger.warning(
                    "autoload_dir_unreadable",
                    path=base_dir,
                    prefix=prefix,
                    hint="check the project's autoload configuration",
                )
                result.unreadable.append(base_dir)
                continue

            _scan_dir(base_dir, prefix, file_pattern, result, max_depth, max_files)
            if result.truncated:
                return result

    return result


def _scan_dir(
    base_dir: str,
    prefix: str,
    file_pattern: re.Pattern[str],
    result: ScanResult,
    max_depth: int,
    max_files: int,
) -> None:
    def on_error(error: OSError) -> None:
        logger.debug("autoload_subdir_unreadable", path=error.filename, prefix=prefix)

    base_depth = base_dir.rstrip(os.sep).count(os.sep)
    for dirpath, dirnames, filenames in os.walk(base_dir, onerror=on_error):
        if dirpath.count(os.sep) - base_depth >= max_depth:
            dirnames[:] = []
        else:
            dirnames.sort()

        for filename in sorted(filenames):
            result.files_visited += 1
            if result.files_visited > max_files:
                logger.warning(
                    "autoload_scan_truncated",
                    max_files=max_files,
                    path=dirpath,
                    prefix=prefix,
                )
                result.truncated = True
                return

            file_path = os.path.join(dirpath, filename)
            if file_pattern.search(file_path):
                result.classes[file_path] = path_to_class_name(file_path, base_dir, prefix)
