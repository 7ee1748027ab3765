"""Content digests for file identity checks.

Digests detect accidental differences between files. They are not a
security boundary.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from ofile.filesystem import RealFileSystem
from ofile.protocols import FileSystem
from ofile.settings import DEFAULT_ALGORITHM, DEFAULT_CHUNK_SIZE
from ofile.types import ErrorKind, Failure

logger = logging.getLogger(__name__)

__all__ = ["create_checksum", "hex_checksum", "new_hasher"]


def new_hasher(algorithm: str = DEFAULT_ALGORITHM):
    """Create an incremental hash accumulator.

    Args:
        algorithm: hashlib algorithm name.

    Returns:
        A hashlib object, or a Failure if the algorithm is unavailable.
    """
    try:
        return hashlib.new(algorithm, usedforsecurity=False)
    except (ValueError, TypeError) as e:
        # Unknown names and FIPS-disabled algorithms both land here
        return Failure(
            kind=ErrorKind.ALGORITHM_UNAVAILABLE,
            path=None,
            message=f"Digest algorithm '{algorithm}' unavailable: {e}",
        )


def create_checksum(
    path: Path,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    algorithm: str = DEFAULT_ALGORITHM,
    filesystem: FileSystem | None = None,
) -> bytes | Failure:
    """Compute the digest of a regular file.

    The file is streamed in ``chunk_size`` blocks through the accumulator.

    Args:
        path: Path to the file.
        chunk_size: Bytes read per block.
        algorithm: hashlib algorithm name.
        filesystem: Filesystem to read through.

    Returns:
        The raw digest bytes, or a Failure.
    """
    fs = filesystem or RealFileSystem()
    path = Path(path)

    if not fs.exists(path):
        return Failure(ErrorKind.NOT_FOUND, path, f"File not found: {path}")
    if fs.is_dir(path):
        return Failure(ErrorKind.IO_ERROR, path, f"Cannot checksum a directory: {path}")

    hasher = new_hasher(algorithm)
    if isinstance(hasher, Failure):
        return Failure(hasher.kind, path, hasher.message)

    try:
        with fs.open(path, "rb") as stream:
            while True:
                chunk = stream.read(chunk_size)
                if not chunk:
                    break
                hasher.update(chunk)
    except OSError as e:
        logger.debug("Checksum of %s failed: %s", path, e)
        return Failure.from_exception(e, path)

    logger.debug("Computed %s checksum of %s", algorithm, path)
    return hasher.digest()


def hex_checksum(
    path: Path,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    algorithm: str = DEFAULT_ALGORITHM,
    filesystem: FileSystem | None = None,
) -> str | Failure:
    """Compute the digest of a file as a lowercase hex string."""
    digest = create_checksum(path, chunk_size, algorithm, filesystem)
    if isinstance(digest, Failure):
        return digest
    return digest.hex()
