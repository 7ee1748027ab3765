"""Tests for result types."""

from __future__ import annotations

from pathlib import Path

import pytest

from ofile.types import DeleteResult, ErrorKind, Failure


class TestFailure:
    """Tests for the Failure sentinel."""

    def test_is_falsy(self) -> None:
        """Test failures are falsy so they can be checked like missing results."""
        failure = Failure(ErrorKind.IO_ERROR, Path("x"), "boom")

        assert not failure

    def test_str_includes_kind(self) -> None:
        """Test string form names the kind and the message."""
        failure = Failure(ErrorKind.RENAME_ERROR, None, "bad name")

        assert str(failure) == "rename-error: bad name"

    def test_empty_message_rejected(self) -> None:
        """Test a failure must explain itself."""
        with pytest.raises(ValueError, match="message"):
            Failure(ErrorKind.IO_ERROR, None, "")

    def test_from_exception_maps_missing_to_not_found(self) -> None:
        """Test FileNotFoundError becomes NOT_FOUND."""
        failure = Failure.from_exception(FileNotFoundError("gone"), Path("x"))

        assert failure.kind == ErrorKind.NOT_FOUND
        assert failure.path == Path("x")

    def test_from_exception_keeps_explicit_kind(self) -> None:
        """Test an explicit kind wins over the NOT_FOUND mapping."""
        failure = Failure.from_exception(
            FileNotFoundError("gone"), Path("x"), kind=ErrorKind.RENAME_ERROR
        )

        assert failure.kind == ErrorKind.RENAME_ERROR

    def test_from_exception_without_message(self) -> None:
        """Test an exception with no text still yields a message."""
        failure = Failure.from_exception(PermissionError(), None)

        assert failure.kind == ErrorKind.IO_ERROR
        assert failure.message == "PermissionError"


class TestDeleteResult:
    """Tests for DeleteResult invariants."""

    def test_success(self) -> None:
        """Test a successful result is truthy and has no failures."""
        result = DeleteResult(path=Path("x"), success=True)

        assert result
        assert result.failed_count == 0

    def test_failure_requires_error(self) -> None:
        """Test success=False without an error is rejected."""
        with pytest.raises(ValueError, match="requires error"):
            DeleteResult(path=Path("x"), success=False)

    def test_success_rejects_error(self) -> None:
        """Test success=True with an error is rejected."""
        error = Failure(ErrorKind.IO_ERROR, Path("x"), "boom")

        with pytest.raises(ValueError, match="error is set"):
            DeleteResult(path=Path("x"), success=True, error=error)

    def test_failed_count(self) -> None:
        """Test failed_count counts child failures."""
        error = Failure(ErrorKind.PARTIAL_DELETE_FAILURE, Path("d"), "not empty")
        children = [
            Failure(ErrorKind.IO_ERROR, Path("d/a"), "denied"),
            Failure(ErrorKind.IO_ERROR, Path("d/b"), "denied"),
        ]

        result = DeleteResult(path=Path("d"), success=False, error=error, failures=children)

        assert not result
        assert result.failed_count == 2
