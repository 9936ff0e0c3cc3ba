"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides helpers for laying out small PHP projects on disk.
"""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of phpnav modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("phpnav"):
        del sys.modules[module_name]


WriteFiles = Callable[[dict[str, str]], Path]


@pytest.fixture
def write_files(tmp_path: Path) -> WriteFiles:
    """Write ``{relative path: content}`` under tmp_path and return tmp_path."""

    def _write(files: dict[str, str]) -> Path:
        for relative, content in files.items():
            target = tmp_path / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        return tmp_path

    return _write


@pytest.fixture
def no_global_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point the global config file somewhere that does not exist."""
    monkeypatch.setattr("phpnav.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml")
