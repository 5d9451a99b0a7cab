"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from diskclean.filesystem.models import DirectoryEntry, EntryKind
from diskclean.utils.formatting import console, err_console


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path) -> Iterator[Path]:
    """Point XDG_CONFIG_HOME at an empty directory so user settings never leak in."""
    config_home = tmp_path / "xdg-config"
    with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(config_home)}):
        yield config_home


@pytest.fixture(autouse=True)
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep long temporary paths from wrapping console output."""
    monkeypatch.setattr(console, "width", 200)
    monkeypatch.setattr(err_console, "width", 200)


def _write(path: Path, size: int) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create a small project tree with known sizes.

    Layout (bytes)::

        project/
            README.md                  10
            node_modules/
                index.js                5
                pkg/lib.js             20
            src/
                main.py                15
                __pycache__/main.pyc    7

    Expected entries: project (5 files, 57), node_modules (2, 25, temp),
    src (2, 22), src/__pycache__ (1, 7, temp).
    """
    root = tmp_path / "project"
    _write(root / "README.md", 10)
    _write(root / "node_modules" / "index.js", 5)
    _write(root / "node_modules" / "pkg" / "lib.js", 20)
    _write(root / "src" / "main.py", 15)
    _write(root / "src" / "__pycache__" / "main.pyc", 7)
    return root


@pytest.fixture
def sample_entries() -> list[DirectoryEntry]:
    """Entries as a scan of /work would report them."""
    return [
        DirectoryEntry("/work", 12, 6_000_000, EntryKind.NORMAL),
        DirectoryEntry("/work/app", 9, 3_500_000, EntryKind.NORMAL),
        DirectoryEntry("/work/app/node_modules", 8, 3_000_000, EntryKind.TEMPORARY),
        DirectoryEntry("/work/docs", 2, 500, EntryKind.NORMAL),
        DirectoryEntry("/work/target", 1, 2_000_000, EntryKind.TEMPORARY),
    ]
