"""OFile: a handle that opens a file to read or write efficiently and intuitively.

A handle wraps one filesystem entry. Streams are opened lazily on the first
read or write and a handle holds at most one of them at a time: reading
closes the writer and writing closes the reader. I/O errors never escape a
method; they are returned as Failure sentinels.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import IO, Callable

from ofile import tree
from ofile.checksum import create_checksum
from ofile.filesystem import RealFileSystem
from ofile.protocols import FileSystem
from ofile.settings import DEFAULT_SETTINGS, OFileSettings
from ofile.types import DeleteResult, ErrorKind, Failure

logger = logging.getLogger(__name__)

__all__ = ["OFile"]

_DIRECTORY_SUFFIXES = tuple({"/", os.sep})


class OFile:
    """Handle on a file or directory.

    Constructing a handle on a path that does not exist creates it: a path
    ending in a separator becomes a directory chain, anything else an empty
    file (parent directories included).

    Attributes:
        path: Path of the entry.
        fs: Filesystem used for every operation.
        settings: Encoding, chunk size and digest algorithm.
        appending: Whether the writer opens in append mode.
    """

    def __init__(
        self,
        path: str | os.PathLike,
        *,
        filesystem: FileSystem | None = None,
        settings: OFileSettings | None = None,
        create: bool = True,
    ) -> None:
        """Open a handle, creating the entry if it does not exist.

        Args:
            path: Path to the entry. A trailing separator asks for a directory.
            filesystem: Filesystem implementation. Defaults to the real one.
            settings: Handle settings. Defaults to DEFAULT_SETTINGS.
            create: Create a missing entry. Traversals pass False so that
                walking a tree never writes to it.

        Raises:
            TypeError: If path is not a str or path-like producing a str.
        """
        raw = os.fspath(path)
        if not isinstance(raw, str):
            raise TypeError(f"OFile paths must be str, got {type(raw).__name__}")

        self.path = Path(raw)
        self.fs = filesystem or RealFileSystem()
        self.settings = settings or DEFAULT_SETTINGS
        self.appending = False

        self._writer: IO | None = None
        self._reader: IO | None = None
        self._checksum: bytes | None = None
        self._checksum_stamp: tuple[int, int] | None = None

        if create and not self.fs.exists(self.path):
            if raw.endswith(_DIRECTORY_SUFFIXES):
                self.mkdirs()
            else:
                self.create_new_file()

    def derive(
        self, path: str | os.PathLike, directory: bool = False, create: bool = True
    ) -> OFile:
        """Create a handle on another path sharing this handle's filesystem and settings.

        Args:
            path: Path of the new handle.
            directory: Treat path as a directory if it has to be created.
            create: Create the entry if it is missing.

        Returns:
            The new handle.
        """
        raw = os.fspath(path)
        if directory and not raw.endswith(_DIRECTORY_SUFFIXES):
            raw += os.sep
        return OFile(raw, filesystem=self.fs, settings=self.settings, create=create)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_new_file(self) -> bool:
        """Create this entry as an empty file along with its parent directories.

        Returns:
            True if the file was created, False if it existed or creation failed.
        """
        # A dangling link reports exists() == False; touching it would create its target
        if self.fs.exists(self.path) or self.fs.is_symlink(self.path):
            return False
        try:
            self.fs.mkdir(self.path.parent, parents=True, exist_ok=True)
            self.fs.touch(self.path)
        except OSError as e:
            logger.warning("Could not create file %s: %s", self.path, e)
            return False
        return True

    def mkdirs(self) -> bool:
        """Create this entry as a directory chain.

        Returns:
            True if the directory was created, False if it existed or creation failed.
        """
        if self.fs.exists(self.path) or self.fs.is_symlink(self.path):
            return False
        try:
            self.fs.mkdir(self.path, parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Could not create directory %s: %s", self.path, e)
            return False
        return True

    # ------------------------------------------------------------------
    # Streams
    # ------------------------------------------------------------------

    @property
    def writer_open(self) -> bool:
        """Whether the writer stream is open."""
        return self._writer is not None

    @property
    def reader_open(self) -> bool:
        """Whether the reader stream is open."""
        return self._reader is not None

    def write(self, text: str, append: bool | None = None) -> OFile | Failure:
        """Write text to the file.

        The writer is opened on first use. Passing ``append`` switches the
        mode, and the new mode is remembered for subsequent calls.

        Args:
            text: Text to write.
            append: True to append, False to overwrite, None to keep the mode.

        Returns:
            This handle, or a Failure.
        """
        if append is not None and append != self.appending:
            self.appending = append
            if self._writer is not None:
                closed = self.close_writer()
                if isinstance(closed, Failure):
                    return closed
            opened = self.open_writer()
        elif self._writer is None:
            opened = self.open_writer()
        else:
            opened = self
        if isinstance(opened, Failure):
            return opened

        try:
            self._writer.write(text)
        except OSError as e:
            logger.debug("Write to %s failed: %s", self.path, e)
            return Failure.from_exception(e, self.path)
        self.invalidate_checksum()
        return self

    def flush(self) -> OFile | Failure:
        """Flush the writer if it is open."""
        if self._writer is None:
            return self
        try:
            self._writer.flush()
        except OSError as e:
            return Failure.from_exception(e, self.path)
        return self

    def read(self) -> str | None | Failure:
        """Read the next line, without its line terminator.

        Returns:
            The line, None at end of file, or a Failure.
        """
        if self._reader is None:
            opened = self.open_reader()
            if isinstance(opened, Failure):
                return opened
        try:
            line = self._reader.readline()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Read from %s failed: %s", self.path, e)
            return Failure.from_exception(e, self.path)

        if not line:
            return None
        if line.endswith("\n"):
            line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
        return line

    def read_file(self) -> str | Failure:
        """Read the whole file as a string, closing any open stream first."""
        closed = self.close()
        if isinstance(closed, Failure):
            return closed
        try:
            with self._open_text("r") as stream:
                return stream.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Reading %s failed: %s", self.path, e)
            return Failure.from_exception(e, self.path)

    def open_writer(self) -> OFile | Failure:
        """Open the writer in the current mode, closing the reader if necessary.

        Opening in overwrite mode truncates the file.
        """
        if self._reader is not None:
            closed = self.close_reader()
            if isinstance(closed, Failure):
                return closed
        if self._writer is not None:
            closed = self.close_writer()
            if isinstance(closed, Failure):
                return closed
        try:
            self._writer = self._open_text("a" if self.appending else "w")
        except OSError as e:
            logger.debug("Could not open writer on %s: %s", self.path, e)
            return Failure.from_exception(e, self.path)
        self.invalidate_checksum()
        logger.debug("Opened writer on %s (appending=%s)", self.path, self.appending)
        return self

    def open_reader(self) -> OFile | Failure:
        """Open the reader at the start of the file, closing the writer if necessary."""
        if self._writer is not None:
            closed = self.close_writer()
            if isinstance(closed, Failure):
                return closed
        if self._reader is not None:
            closed = self.close_reader()
            if isinstance(closed, Failure):
                return closed
        try:
            self._reader = self._open_text("r")
        except OSError as e:
            logger.debug("Could not open reader on %s: %s", self.path, e)
            return Failure.from_exception(e, self.path)
        logger.debug("Opened reader on %s", self.path)
        return self

    def close_writer(self) -> OFile | Failure:
        """Close the writer if it is open."""
        writer, self._writer = self._writer, None
        if writer is None:
            return self
        try:
            writer.close()
        except OSError as e:
            return Failure.from_exception(e, self.path)
        return self

    def close_reader(self) -> OFile | Failure:
        """Close the reader if it is open."""
        reader, self._reader = self._reader, None
        if reader is None:
            return self
        try:
            reader.close()
        except OSError as e:
            return Failure.from_exception(e, self.path)
        return self

    def close(self) -> OFile | Failure:
        """Close whichever stream is open."""
        closed = self.close_writer()
        if isinstance(closed, Failure):
            self.close_reader()
            return closed
        return self.close_reader()

    def clear(self) -> OFile | Failure:
        """Empty the file."""
        for step in (self.close, lambda: self.write("", False), self.close):
            result = step()
            if isinstance(result, Failure):
                return result
        return self

    def get_writer(self) -> IO | Failure:
        """Get the writer stream, opening it if needed."""
        if self._writer is None:
            opened = self.open_writer()
            if isinstance(opened, Failure):
                return opened
        return self._writer

    def get_reader(self) -> IO | Failure:
        """Get the reader stream, opening it if needed."""
        if self._reader is None:
            opened = self.open_reader()
            if isinstance(opened, Failure):
                return opened
        return self._reader

    def count_lines(self) -> int | Failure:
        """Count the lines in the file.

        A non-empty file with no newline counts as one line.

        Returns:
            Number of lines, or a Failure.
        """
        closed = self.close()
        if isinstance(closed, Failure):
            return closed

        count = 0
        empty = True
        try:
            with self.fs.open(self.path, "rb") as stream:
                while True:
                    chunk = stream.read(self.settings.chunk_size)
                    if not chunk:
                        break
                    empty = False
                    count += chunk.count(b"\n")
        except OSError as e:
            return Failure.from_exception(e, self.path)

        if count == 0 and not empty:
            return 1
        return count

    def _open_text(self, mode: str) -> IO:
        return self.fs.open(
            self.path,
            mode,
            encoding=self.settings.encoding,
            newline=self.settings.newline,
        )

    # ------------------------------------------------------------------
    # Checksums and equality
    # ------------------------------------------------------------------

    def get_checksum(self) -> bytes | Failure:
        """Get this file's checksum, reusing the cached one while still valid.

        A pending writer is flushed first so the digest covers everything
        written through this handle.

        Returns:
            Digest bytes, or a Failure (always for directories).
        """
        if self.is_dir():
            return Failure(
                ErrorKind.IO_ERROR, self.path, f"Directories have no checksum: {self.path}"
            )

        flushed = self.flush()
        if isinstance(flushed, Failure):
            return flushed

        try:
            info = self.fs.stat(self.path)
        except OSError as e:
            self.invalidate_checksum()
            return Failure.from_exception(e, self.path)
        stamp = (info.st_size, info.st_mtime_ns)

        if self._checksum is not None and self._checksum_stamp == stamp:
            return self._checksum

        checksum = create_checksum(
            self.path,
            chunk_size=self.settings.chunk_size,
            algorithm=self.settings.algorithm,
            filesystem=self.fs,
        )
        if isinstance(checksum, Failure):
            self.invalidate_checksum()
            return checksum

        self._checksum = checksum
        self._checksum_stamp = stamp
        return checksum

    def invalidate_checksum(self) -> None:
        """Forget the cached checksum."""
        self._checksum = None
        self._checksum_stamp = None

    @property
    def has_cached_checksum(self) -> bool:
        """Whether a checksum is currently cached."""
        return self._checksum is not None

    def equals(self, other: OFile, name_sensitive: bool = True) -> bool:
        """Check equality by checksum (recursively for directories).

        Args:
            other: Entry to compare with.
            name_sensitive: Also require matching names.

        Returns:
            True if equal, False otherwise.
        """
        return tree.files_equal(self, other, name_sensitive)

    def equals_ignore_name(self, other: OFile) -> bool:
        """Check equality by checksum, disregarding names."""
        return tree.files_equal(self, other, name_sensitive=False)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        """Final path component."""
        return self.path.name

    def exists(self) -> bool:
        """Check whether the entry exists."""
        return self.fs.exists(self.path)

    def is_dir(self) -> bool:
        """Check whether the entry is a directory."""
        return self.fs.is_dir(self.path)

    def is_file(self) -> bool:
        """Check whether the entry is a regular file."""
        return self.fs.is_file(self.path)

    def is_symlink(self) -> bool:
        """Check whether the entry is a symbolic link, dangling or not."""
        return self.fs.is_symlink(self.path)

    @staticmethod
    def file_exists(path: str | os.PathLike) -> bool:
        """Check whether anything exists at path."""
        return Path(path).exists()

    def get_parent_path(self) -> str:
        """Get the parent directory as a string ending in a separator.

        Returns:
            The parent prefix, or "" if the path has no directory part.
        """
        if os.sep not in str(self.path):
            return ""
        parent = str(self.path.parent)
        return parent if parent.endswith(os.sep) else parent + os.sep

    def get_parent_file(self) -> OFile | None:
        """Get a handle on the parent directory, or None at the filesystem root."""
        parent = self.path.parent
        if parent == self.path:
            return None
        return self.derive(parent, directory=True)

    def get_absolute_file(self) -> OFile:
        """Get a handle on the absolute form of this path."""
        return self.derive(self.path.absolute(), directory=self.is_dir())

    def get_canonical_file(self) -> OFile | Failure:
        """Get a handle on the canonical path, with symlinks resolved."""
        try:
            resolved = self.path.resolve()
        except (OSError, RuntimeError) as e:
            return Failure(ErrorKind.IO_ERROR, self.path, f"Cannot resolve {self.path}: {e}")
        return self.derive(resolved, directory=self.is_dir())

    def list_files(
        self, predicate: Callable[[OFile], bool] | None = None
    ) -> list[OFile] | Failure:
        """List the entries of this directory, sorted by name.

        Args:
            predicate: Keep only entries for which it returns True.

        Returns:
            Handles on the entries, or a Failure if this is not a listable directory.
        """
        if not self.is_dir():
            return Failure(ErrorKind.IO_ERROR, self.path, f"Not a directory: {self.path}")
        try:
            paths = self.fs.list_dir(self.path)
        except OSError as e:
            return Failure.from_exception(e, self.path)

        children = [
            self.derive(path, create=False) for path in sorted(paths, key=lambda p: p.name)
        ]
        if predicate is None:
            return children
        return [child for child in children if predicate(child)]

    # ------------------------------------------------------------------
    # Copy, rename, delete
    # ------------------------------------------------------------------

    def copy(self, destination: str | os.PathLike, replace: bool = False) -> OFile | Failure:
        """Copy this entry (recursively for directories) to destination.

        Args:
            destination: Path of the copy.
            replace: Overwrite existing files at the destination.

        Returns:
            Handle to the copy, or a Failure.
        """
        return tree.copy_entry(self, destination, replace)

    def copy_replace(self, destination: str | os.PathLike) -> OFile | Failure:
        """Copy this entry to destination, replacing existing files."""
        return tree.copy_replace(self, destination)

    def rename_to(self, new_name: str) -> OFile | Failure:
        """Rename this entry within its parent directory.

        Args:
            new_name: New bare name.

        Returns:
            Handle on the renamed entry, or a Failure leaving this one untouched.
        """
        return tree.rename_entry(self, new_name)

    def rename_to_file(self, target: str | os.PathLike) -> OFile | Failure:
        """Move this entry to another path."""
        return tree.rename_entry_to_path(self, target)

    def delete(self) -> DeleteResult:
        """Delete this entry, recursively for directories."""
        self.invalidate_checksum()
        return tree.delete_entry(self)

    # ------------------------------------------------------------------
    # Protocols
    # ------------------------------------------------------------------

    def __fspath__(self) -> str:
        return str(self.path)

    def __str__(self) -> str:
        return str(self.path)

    def __repr__(self) -> str:
        return f"OFile({str(self.path)!r})"

    def __enter__(self) -> OFile:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
