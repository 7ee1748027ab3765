"""Shared result types for ofile operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

__all__ = ["DeleteResult", "ErrorKind", "Failure"]


class ErrorKind(str, Enum):
    """Kinds of failure an operation can report."""

    NOT_FOUND = "not-found"
    IO_ERROR = "io-error"
    ALGORITHM_UNAVAILABLE = "algorithm-unavailable"
    RENAME_ERROR = "rename-error"
    PARTIAL_DELETE_FAILURE = "partial-delete-failure"


@dataclass(frozen=True)
class Failure:
    """Sentinel returned in place of a result when an operation fails.

    Failures are falsy, so ``if not handle.read_file():`` style checks work.
    Use ``isinstance(result, Failure)`` where an empty result is also falsy.

    Attributes:
        kind: What went wrong.
        path: Path the operation was acting on, if any.
        message: Human readable description.
        causes: Child-level failures of a recursive operation.
    """

    kind: ErrorKind
    path: Path | None
    message: str
    causes: tuple[Failure, ...] = ()

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.message:
            raise ValueError("message cannot be empty")

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"

    @classmethod
    def from_exception(
        cls,
        error: OSError | ValueError,
        path: Path | None,
        kind: ErrorKind = ErrorKind.IO_ERROR,
    ) -> Failure:
        """Build a failure from a caught error, mapping missing paths to NOT_FOUND."""
        if isinstance(error, FileNotFoundError) and kind == ErrorKind.IO_ERROR:
            kind = ErrorKind.NOT_FOUND
        return cls(kind=kind, path=path, message=str(error) or type(error).__name__)


@dataclass
class DeleteResult:
    """Result of a (possibly recursive) delete.

    Attributes:
        path: Path that was deleted.
        success: True if the entry itself was removed.
        error: Why the entry itself could not be removed (None on success).
        failures: Failures of descendants met during best-effort cleanup.
    """

    path: Path
    success: bool
    error: Failure | None = None
    failures: list[Failure] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.success and self.error is not None:
            raise ValueError("success=True but error is set")
        if not self.success and self.error is None:
            raise ValueError("success=False requires error")

    def __bool__(self) -> bool:
        return self.success

    @property
    def failed_count(self) -> int:
        """Number of descendants that could not be deleted."""
        return len(self.failures)
