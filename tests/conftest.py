"""Shared test fixtures."""

from __future__ import annotations

from io import StringIO
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from ofile.filesystem import RealFileSystem


@pytest.fixture
def make_tree(tmp_path: Path):
    """Build a directory tree from a mapping of relative paths to file contents.

    Keys ending in "/" create empty directories.
    """

    def _make(root: str, files: dict[str, str]) -> Path:
        base = tmp_path / root
        base.mkdir(parents=True, exist_ok=True)
        for relative, content in files.items():
            target = base / relative
            if relative.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        return base

    return _make


# ============================================================================
# Filesystem Doubles
# ============================================================================


class SelectiveFailureFileSystem(RealFileSystem):
    """Real filesystem that refuses chosen operations on chosen names."""

    def __init__(self) -> None:
        self.refuse_unlink: set[str] = set()
        self.refuse_copy: set[str] = set()
        self.refuse_rename = False

    def unlink(self, path: Path) -> None:
        if path.name in self.refuse_unlink:
            raise PermissionError(f"Permission denied: '{path}'")
        super().unlink(path)

    def copy_file(self, src: Path, dst: Path) -> None:
        if src.name in self.refuse_copy:
            raise PermissionError(f"Permission denied: '{src}'")
        super().copy_file(src, dst)

    def rename(self, src: Path, dst: Path) -> None:
        if self.refuse_rename:
            raise PermissionError(f"Permission denied: '{src}'")
        super().rename(src, dst)


@pytest.fixture
def failing_fs() -> SelectiveFailureFileSystem:
    """Create a filesystem that fails selected operations."""
    return SelectiveFailureFileSystem()


@pytest.fixture
def mock_filesystem() -> MagicMock:
    """Create a mock FileSystem for testing.

    The mock tracks all filesystem operations without touching real files.
    """
    fs = MagicMock()
    fs.exists.return_value = True
    fs.is_dir.return_value = False
    fs.is_symlink.return_value = False
    return fs


# ============================================================================
# Output Fixtures
# ============================================================================


@pytest.fixture
def console_output() -> tuple[Console, StringIO]:
    """Create a rich console that records to a buffer."""
    buffer = StringIO()
    console = Console(file=buffer, width=200, color_system=None, highlight=False)
    return console, buffer
