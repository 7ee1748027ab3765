"""Application context for dependency injection.

This module separates object creation from object use, enabling testability
of the CLI commands. Dependencies are typed using Protocols rather than
concrete implementations so test doubles can be injected without inheritance.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from ofile.handle import OFile
from ofile.protocols import FileSystem
from ofile.settings import DEFAULT_SETTINGS, OFileSettings


def _default_filesystem() -> FileSystem:
    """Create the default filesystem implementation."""
    from ofile.filesystem import RealFileSystem
    return RealFileSystem()


@dataclass
class AppContext:
    """Container for application dependencies.

    Provides a single injection point for the filesystem and settings used
    by CLI commands.
    """

    filesystem: FileSystem = field(default_factory=_default_filesystem)
    settings: OFileSettings = field(default_factory=lambda: DEFAULT_SETTINGS)

    def open(self, path: str | os.PathLike) -> OFile:
        """Open a handle wired to this context's filesystem and settings."""
        return OFile(path, filesystem=self.filesystem, settings=self.settings)


def create_context(settings_file: Path | None = None) -> AppContext:
    """Factory for application dependencies.

    Creates all services with proper wiring. Use this in production code.
    For tests, construct AppContext directly with test doubles.

    Args:
        settings_file: Optional JSON settings file.

    Returns:
        Configured AppContext.

    Raises:
        FileNotFoundError: If settings_file does not exist.
        ValueError: If settings_file is invalid.
    """
    from ofile.filesystem import RealFileSystem

    settings = OFileSettings.from_file(settings_file) if settings_file else DEFAULT_SETTINGS
    return AppContext(filesystem=RealFileSystem(), settings=settings)
