"""Tests for the checksum engine."""

from __future__ import annotations

import hashlib
from pathlib import Path
from unittest.mock import MagicMock

from ofile.checksum import create_checksum, hex_checksum, new_hasher
from ofile.types import ErrorKind, Failure


class TestCreateChecksum:
    """Tests for create_checksum."""

    def test_md5_of_file(self, tmp_path: Path) -> None:
        """Test the digest matches hashlib's MD5."""
        test_file = tmp_path / "data.txt"
        test_file.write_bytes(b"hello")

        digest = create_checksum(test_file)

        assert digest == hashlib.md5(b"hello").digest()
        assert len(digest) == 16

    def test_deterministic(self, tmp_path: Path) -> None:
        """Test computing twice on unchanged content gives the same digest."""
        test_file = tmp_path / "data.txt"
        test_file.write_text("same content")

        assert create_checksum(test_file) == create_checksum(test_file)

    def test_content_sensitive(self, tmp_path: Path) -> None:
        """Test appending content changes the digest."""
        test_file = tmp_path / "data.txt"
        test_file.write_text("first")
        before = create_checksum(test_file)

        with test_file.open("a") as stream:
            stream.write("second")

        assert create_checksum(test_file) != before

    def test_chunk_size_does_not_change_digest(self, tmp_path: Path) -> None:
        """Test the block size only affects how the file is read."""
        test_file = tmp_path / "data.bin"
        test_file.write_bytes(bytes(range(256)) * 20)

        assert create_checksum(test_file, chunk_size=7) == create_checksum(
            test_file, chunk_size=4096
        )

    def test_empty_file(self, tmp_path: Path) -> None:
        """Test an empty file has the digest of no bytes."""
        test_file = tmp_path / "empty"
        test_file.touch()

        assert create_checksum(test_file) == hashlib.md5(b"").digest()

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file is NOT_FOUND."""
        result = create_checksum(tmp_path / "missing")

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.NOT_FOUND

    def test_directory(self, tmp_path: Path) -> None:
        """Test directories have no digest."""
        result = create_checksum(tmp_path)

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.IO_ERROR

    def test_unknown_algorithm(self, tmp_path: Path) -> None:
        """Test an unavailable algorithm is reported, not raised."""
        test_file = tmp_path / "data.txt"
        test_file.write_text("x")

        result = create_checksum(test_file, algorithm="no-such-digest")

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.ALGORITHM_UNAVAILABLE
        assert result.path == test_file

    def test_read_error(self, mock_filesystem: MagicMock) -> None:
        """Test an I/O error mid-read becomes IO_ERROR."""
        stream = MagicMock()
        stream.read.side_effect = OSError("device went away")
        mock_filesystem.open.return_value.__enter__.return_value = stream

        result = create_checksum(Path("/fake/file"), filesystem=mock_filesystem)

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.IO_ERROR
        assert "device went away" in result.message


class TestHexChecksum:
    """Tests for hex_checksum."""

    def test_hex(self, tmp_path: Path) -> None:
        """Test the hex form matches hashlib's hexdigest."""
        test_file = tmp_path / "data.txt"
        test_file.write_bytes(b"abc")

        assert hex_checksum(test_file) == hashlib.md5(b"abc").hexdigest()

    def test_passes_failure_through(self, tmp_path: Path) -> None:
        """Test failures are returned unchanged."""
        assert isinstance(hex_checksum(tmp_path / "missing"), Failure)


class TestNewHasher:
    """Tests for new_hasher."""

    def test_known_algorithm(self) -> None:
        """Test a known algorithm yields an accumulator."""
        hasher = new_hasher("sha256")

        hasher.update(b"x")
        assert hasher.hexdigest() == hashlib.sha256(b"x").hexdigest()

    def test_unknown_algorithm(self) -> None:
        """Test an unknown algorithm yields a Failure."""
        result = new_hasher("nope")

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.ALGORITHM_UNAVAILABLE
