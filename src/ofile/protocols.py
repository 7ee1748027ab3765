"""Protocol definitions for core abstractions.

This module defines the abstract interface (Protocol) that every ofile
operation goes through to reach the operating system. Designing to an
interface enables:
- Loose coupling between handles and the host filesystem
- Easy substitution of test doubles (e.g. a filesystem that refuses deletes)
- A clear contract for implementations

Concrete implementations satisfy the protocol structurally (duck typing).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import IO, Protocol, runtime_checkable


@runtime_checkable
class FileSystem(Protocol):
    """Protocol for filesystem operations.

    Abstracts filesystem access to enable testing without real I/O.
    Every method raises ``OSError`` (or a subclass) on failure; translating
    those errors into result values is the caller's job.
    """

    def exists(self, path: Path) -> bool:
        """Check if a path exists.

        Args:
            path: Path to check.

        Returns:
            True if path exists, False otherwise.
        """
        ...

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory.

        Args:
            path: Path to check.

        Returns:
            True if path is a directory, False otherwise.
        """
        ...

    def is_file(self, path: Path) -> bool:
        """Check if a path is a regular file.

        Args:
            path: Path to check.

        Returns:
            True if path is a regular file, False otherwise.
        """
        ...

    def is_symlink(self, path: Path) -> bool:
        """Check if a path is a symbolic link.

        Args:
            path: Path to check.

        Returns:
            True if path is a symbolic link, False otherwise.
        """
        ...

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        """Create a directory.

        Args:
            path: Path to create.
            parents: Create parent directories if needed.
            exist_ok: Don't raise if directory exists.
        """
        ...

    def touch(self, path: Path) -> None:
        """Create an empty file if it does not exist.

        Args:
            path: Path of the file.
        """
        ...

    def open(
        self,
        path: Path,
        mode: str = "r",
        encoding: str | None = None,
        newline: str | None = None,
    ) -> IO:
        """Open a file stream.

        Args:
            path: Path to the file.
            mode: Mode as accepted by the builtin ``open``.
            encoding: Text encoding; must be None for binary modes.
            newline: Newline translation mode for text streams.

        Returns:
            The open stream.

        Raises:
            FileNotFoundError: If file does not exist and mode reads.
        """
        ...

    def stat(self, path: Path) -> os.stat_result:
        """Stat a path.

        Args:
            path: Path to stat.

        Returns:
            The stat result.
        """
        ...

    def list_dir(self, path: Path) -> list[Path]:
        """List the entries of a directory.

        Args:
            path: Directory to list.

        Returns:
            Child paths in the order the platform enumerates them.
        """
        ...

    def unlink(self, path: Path) -> None:
        """Remove a file.

        Args:
            path: Path to remove.
        """
        ...

    def rmdir(self, path: Path) -> None:
        """Remove an empty directory.

        Args:
            path: Path to remove.
        """
        ...

    def rename(self, src: Path, dst: Path) -> None:
        """Rename a file or directory.

        Args:
            src: Existing path.
            dst: New path.
        """
        ...

    def copy_file(self, src: Path, dst: Path) -> None:
        """Copy a regular file's bytes and permission bits, overwriting dst.

        Args:
            src: Source file.
            dst: Destination file.
        """
        ...

    def read_link(self, path: Path) -> str:
        """Read the target of a symbolic link without following it.

        Args:
            path: Symbolic link.

        Returns:
            The link target exactly as stored.
        """
        ...

    def symlink(self, target: str, path: Path) -> None:
        """Create a symbolic link at path pointing to target.

        Args:
            target: Link target, stored verbatim.
            path: Path of the new link; must not exist.
        """
        ...
