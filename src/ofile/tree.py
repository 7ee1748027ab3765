"""Recursive equality, copy, delete and rename over file trees.

All functions are state-free and work on OFile handles; the handle methods
of the same names delegate here. Failures never raise: they come back as
Failure sentinels or inside a DeleteResult.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from ofile.types import DeleteResult, ErrorKind, Failure

if TYPE_CHECKING:
    from ofile.handle import OFile

logger = logging.getLogger(__name__)

__all__ = [
    "copy_entry",
    "copy_replace",
    "delete_entry",
    "directories_equal",
    "files_equal",
    "files_equal_ignore_name",
    "rename_entry",
    "rename_entry_to_path",
]


# ============================================================================
# Equality
# ============================================================================


def files_equal(a: OFile, b: OFile, name_sensitive: bool = True) -> bool:
    """Check whether two entries have equal structure and content.

    Files are compared by checksum, directories recursively. A checksum
    that cannot be computed makes the entries unequal.

    Args:
        a: First entry.
        b: Second entry.
        name_sensitive: Also require equal basenames, at every level.

    Returns:
        True if equal, False otherwise.
    """
    if a.is_dir() != b.is_dir():
        return False

    if name_sensitive and a.name != b.name:
        return False

    if a.is_dir():
        return directories_equal(a, b, name_sensitive)

    a_checksum = a.get_checksum()
    if isinstance(a_checksum, Failure):
        logger.warning("Error getting %s checksum: %s", a.path, a_checksum)
        return False

    b_checksum = b.get_checksum()
    if isinstance(b_checksum, Failure):
        logger.warning("Error getting %s checksum: %s", b.path, b_checksum)
        return False

    return a_checksum == b_checksum


def files_equal_ignore_name(a: OFile, b: OFile) -> bool:
    """Check equality by structure and content only."""
    return files_equal(a, b, name_sensitive=False)


def directories_equal(a: OFile, b: OFile, name_sensitive: bool) -> bool:
    """Check whether two directories hold equal entries.

    Children are matched by name when ``name_sensitive`` is set. Otherwise
    each child of ``a`` must pair with a distinct child of ``b`` having the
    same structure and content, whatever either is called.

    Args:
        a: First directory.
        b: Second directory.
        name_sensitive: Whether names take part in the comparison.

    Returns:
        True if equal, False otherwise.
    """
    a_children = a.list_files()
    b_children = b.list_files()
    for listing, entry in ((a_children, a), (b_children, b)):
        if isinstance(listing, Failure):
            logger.warning("Error listing %s: %s", entry.path, listing)
            return False

    if len(a_children) != len(b_children):
        return False

    if name_sensitive:
        by_name = {child.name: child for child in b_children}
        for child in a_children:
            other = by_name.get(child.name)
            if other is None or not _children_equal(child, other, True):
                return False
        return True

    unmatched = list(b_children)
    for child in a_children:
        for index, candidate in enumerate(unmatched):
            if _children_equal(child, candidate, False):
                del unmatched[index]
                break
        else:
            return False
    return True


def _children_equal(a: OFile, b: OFile, name_sensitive: bool) -> bool:
    """Compare two directory children, treating symbolic links as links.

    Links are never followed while walking a tree: two links are equal when
    they store the same target, and a link never equals a file or directory.
    """
    a_link = a.is_symlink()
    b_link = b.is_symlink()
    if not a_link and not b_link:
        return files_equal(a, b, name_sensitive)
    if a_link != b_link:
        return False
    if name_sensitive and a.name != b.name:
        return False

    try:
        return a.fs.read_link(a.path) == b.fs.read_link(b.path)
    except OSError as e:
        logger.warning("Error reading links %s and %s: %s", a.path, b.path, e)
        return False


# ============================================================================
# Copy
# ============================================================================


def _is_within(path: Path, ancestor: Path) -> bool:
    """Check whether path lies inside ancestor (or is ancestor)."""
    try:
        path.resolve().relative_to(ancestor.resolve())
    except ValueError:
        return False
    return True


def copy_entry(
    src: OFile, destination: str | os.PathLike, replace: bool = True
) -> OFile | Failure:
    """Copy a file or directory tree to a new location.

    Directories are copied child by child; a failing child does not stop its
    siblings. Symbolic links found inside a directory are recreated as links,
    not followed. Parent directories of the destination are created as needed.

    Args:
        src: Entry to copy.
        destination: Path of the copy.
        replace: Overwrite existing files at the destination.

    Returns:
        Handle to the copy, or a Failure. A directory copy in which some
        children failed returns a Failure whose causes list them.
    """
    src.close()
    fs = src.fs
    dest = Path(destination)

    if not src.exists():
        return Failure(ErrorKind.NOT_FOUND, src.path, f"Source not found: {src.path}")

    if src.is_dir():
        return _copy_directory(src, dest, replace)

    if fs.is_dir(dest):
        return Failure(
            ErrorKind.IO_ERROR, dest, f"Cannot replace directory {dest} with a file"
        )
    if not replace and fs.exists(dest):
        return Failure(ErrorKind.IO_ERROR, dest, f"Destination already exists: {dest}")

    try:
        fs.mkdir(dest.parent, parents=True, exist_ok=True)
        fs.copy_file(src.path, dest)
    except OSError as e:
        logger.debug("Copy of %s to %s failed: %s", src.path, dest, e)
        return Failure.from_exception(e, dest)

    logger.debug("Copied %s to %s", src.path, dest)
    return src.derive(dest)


def _copy_directory(src: OFile, dest: Path, replace: bool) -> OFile | Failure:
    """Copy a directory's children into dest, creating it first."""
    if _is_within(dest, src.path):
        return Failure(
            ErrorKind.IO_ERROR, dest, f"Cannot copy {src.path} into itself ({dest})"
        )

    children = src.list_files()
    if isinstance(children, Failure):
        return children

    try:
        src.fs.mkdir(dest, parents=True, exist_ok=True)
    except OSError as e:
        logger.debug("Could not create directory %s: %s", dest, e)
        return Failure.from_exception(e, dest)

    failures: list[Failure] = []
    for child in children:
        if child.is_symlink():
            result = _copy_link(child, dest / child.name, replace)
        else:
            result = copy_entry(child, dest / child.name, replace)
        if isinstance(result, Failure):
            logger.warning("Failed to copy %s: %s", child.path, result)
            failures.append(result)

    if failures:
        return Failure(
            ErrorKind.IO_ERROR,
            dest,
            f"{len(failures)} of {len(children)} entries in {src.path} failed to copy",
            causes=tuple(failures),
        )
    return src.derive(dest, directory=True)


def _copy_link(link: OFile, dest: Path, replace: bool) -> OFile | Failure:
    """Recreate a symbolic link at dest with the same stored target."""
    fs = link.fs
    occupied = fs.is_symlink(dest) or fs.exists(dest)
    if occupied and not replace:
        return Failure(ErrorKind.IO_ERROR, dest, f"Destination already exists: {dest}")
    if occupied and fs.is_dir(dest) and not fs.is_symlink(dest):
        return Failure(
            ErrorKind.IO_ERROR, dest, f"Cannot replace directory {dest} with a link"
        )

    try:
        target = fs.read_link(link.path)
        if occupied:
            fs.unlink(dest)
        fs.symlink(target, dest)
    except OSError as e:
        logger.debug("Copy of link %s to %s failed: %s", link.path, dest, e)
        return Failure.from_exception(e, dest)

    logger.debug("Copied link %s to %s", link.path, dest)
    return link.derive(dest, create=False)


def copy_replace(src: OFile, destination: str | os.PathLike) -> OFile | Failure:
    """Copy an entry, overwriting whatever exists at the destination."""
    return copy_entry(src, destination, replace=True)


# ============================================================================
# Delete
# ============================================================================


def delete_entry(entry: OFile) -> DeleteResult:
    """Delete a file, or a directory and everything below it.

    Deletion of children is best-effort: every child is attempted and the
    directory itself is removed last. Only that final removal decides
    ``success``; child failures are reported in ``failures``.

    Args:
        entry: Entry to delete.

    Returns:
        DeleteResult describing the outcome.
    """
    entry.close()
    fs = entry.fs
    path = entry.path

    if not fs.exists(path) and not fs.is_symlink(path):
        return DeleteResult(
            path=path,
            success=False,
            error=Failure(ErrorKind.NOT_FOUND, path, f"Nothing to delete at {path}"),
        )

    if fs.is_symlink(path) or not fs.is_dir(path):
        try:
            fs.unlink(path)
        except OSError as e:
            return DeleteResult(path=path, success=False, error=Failure.from_exception(e, path))
        logger.debug("Deleted %s", path)
        return DeleteResult(path=path, success=True)

    failures: list[Failure] = []
    children = entry.list_files()
    if isinstance(children, Failure):
        failures.append(children)
    else:
        for child in children:
            result = delete_entry(child)
            if not result.success:
                logger.warning("Failed to delete %s: %s", child.path, result.error)
                failures.extend(result.failures)
                failures.append(result.error)

    try:
        fs.rmdir(path)
    except OSError as e:
        kind = ErrorKind.PARTIAL_DELETE_FAILURE if failures else ErrorKind.IO_ERROR
        error = Failure(kind, path, f"Could not remove directory {path}: {e}")
        return DeleteResult(path=path, success=False, error=error, failures=failures)

    logger.debug("Deleted directory %s", path)
    return DeleteResult(path=path, success=True, failures=failures)


# ============================================================================
# Rename
# ============================================================================


def _invalid_name(new_name: str) -> bool:
    """Check whether new_name is not a bare entry name."""
    if new_name in ("", ".", ".."):
        return True
    separators = [os.sep] + ([os.altsep] if os.altsep else [])
    return any(sep in new_name for sep in separators)


def rename_entry(entry: OFile, new_name: str) -> OFile | Failure:
    """Rename an entry within its parent directory.

    Args:
        entry: Entry to rename.
        new_name: New bare name (no directory part).

    Returns:
        Handle to the renamed entry, or a Failure leaving entry untouched.
    """
    entry.close()
    if _invalid_name(new_name):
        return Failure(
            ErrorKind.RENAME_ERROR,
            entry.path,
            f"'{new_name}' is not a valid name to rename {entry.path} to",
        )
    return rename_entry_to_path(entry, entry.path.parent / new_name)


def rename_entry_to_path(entry: OFile, target: str | os.PathLike) -> OFile | Failure:
    """Move an entry to an arbitrary path.

    Args:
        entry: Entry to rename.
        target: New path.

    Returns:
        Handle to the renamed entry, or a Failure leaving entry untouched.
    """
    entry.close()
    target_path = Path(target)
    is_dir = entry.is_dir()

    try:
        entry.fs.rename(entry.path, target_path)
    except OSError as e:
        logger.debug("Rename of %s to %s failed: %s", entry.path, target_path, e)
        return Failure.from_exception(e, entry.path, kind=ErrorKind.RENAME_ERROR)

    logger.debug("Renamed %s to %s", entry.path, target_path)
    return entry.derive(target_path, directory=is_dir)
