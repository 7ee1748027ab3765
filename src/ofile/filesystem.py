"""Filesystem abstraction for testability.

This module provides the production implementation of the FileSystem
protocol. RealFileSystem wraps standard library operations; tests swap in
doubles to simulate failures that are hard to provoke on a real disk.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import IO


class RealFileSystem:
    """Production filesystem implementation.

    Wraps standard library Path, os and shutil operations.
    Satisfies the FileSystem protocol structurally.
    """

    def exists(self, path: Path) -> bool:
        """Check if a path exists."""
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        return path.is_dir()

    def is_file(self, path: Path) -> bool:
        """Check if a path is a regular file."""
        return path.is_file()

    def is_symlink(self, path: Path) -> bool:
        """Check if a path is a symbolic link."""
        return path.is_symlink()

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        """Create a directory."""
        path.mkdir(parents=parents, exist_ok=exist_ok)

    def touch(self, path: Path) -> None:
        """Create an empty file if it does not exist."""
        path.touch(exist_ok=True)

    def open(
        self,
        path: Path,
        mode: str = "r",
        encoding: str | None = None,
        newline: str | None = None,
    ) -> IO:
        """Open a file stream."""
        if "b" in mode:
            return path.open(mode)
        return path.open(mode, encoding=encoding, newline=newline)

    def stat(self, path: Path) -> os.stat_result:
        """Stat a path."""
        return path.stat()

    def list_dir(self, path: Path) -> list[Path]:
        """List the entries of a directory."""
        return list(path.iterdir())

    def unlink(self, path: Path) -> None:
        """Remove a file."""
        path.unlink()

    def rmdir(self, path: Path) -> None:
        """Remove an empty directory."""
        path.rmdir()

    def rename(self, src: Path, dst: Path) -> None:
        """Rename a file or directory."""
        os.rename(src, dst)

    def copy_file(self, src: Path, dst: Path) -> None:
        """Copy a regular file, overwriting the destination."""
        shutil.copy(src, dst)

    def read_link(self, path: Path) -> str:
        """Read the target of a symbolic link."""
        return os.readlink(path)

    def symlink(self, target: str, path: Path) -> None:
        """Create a symbolic link."""
        os.symlink(target, path)
