"""Tests for context and settings modules."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from ofile.context import AppContext, create_context
from ofile.filesystem import RealFileSystem
from ofile.settings import DEFAULT_CHUNK_SIZE, DEFAULT_SETTINGS, OFileSettings


class TestAppContext:
    """Tests for AppContext dataclass."""

    def test_defaults(self) -> None:
        """Test context creates the real filesystem and default settings."""
        ctx = AppContext()

        assert isinstance(ctx.filesystem, RealFileSystem)
        assert ctx.settings == DEFAULT_SETTINGS

    def test_open_wires_dependencies(self, tmp_path: Path) -> None:
        """Test handles opened through the context share its dependencies."""
        settings = OFileSettings(chunk_size=16)
        filesystem = RealFileSystem()
        ctx = AppContext(filesystem=filesystem, settings=settings)

        handle = ctx.open(tmp_path / "f.txt")

        assert handle.fs is filesystem
        assert handle.settings is settings
        assert (tmp_path / "f.txt").exists()

    def test_open_with_mock_filesystem(self) -> None:
        """Test a mock filesystem sees the creation calls."""
        filesystem = MagicMock()
        filesystem.exists.return_value = False
        filesystem.is_symlink.return_value = False
        ctx = AppContext(filesystem=filesystem)

        ctx.open("/fake/dir/file.txt")

        filesystem.mkdir.assert_called_once_with(Path("/fake/dir"), parents=True, exist_ok=True)
        filesystem.touch.assert_called_once_with(Path("/fake/dir/file.txt"))


class TestCreateContext:
    """Tests for create_context factory function."""

    def test_default(self) -> None:
        """Test creating context without a settings file."""
        ctx = create_context()

        assert isinstance(ctx.filesystem, RealFileSystem)
        assert ctx.settings == DEFAULT_SETTINGS

    def test_with_settings_file(self, tmp_path: Path) -> None:
        """Test settings are loaded from a file."""
        settings_file = tmp_path / "settings.json"
        settings_file.write_text(json.dumps({"chunkSize": 4096, "algorithm": "sha1"}))

        ctx = create_context(settings_file)

        assert ctx.settings.chunk_size == 4096
        assert ctx.settings.algorithm == "sha1"

    def test_missing_settings_file(self, tmp_path: Path) -> None:
        """Test a missing settings file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            create_context(tmp_path / "missing.json")


class TestOFileSettings:
    """Tests for OFileSettings."""

    def test_defaults(self) -> None:
        """Test default values."""
        settings = OFileSettings()

        assert settings.encoding == "utf-8"
        assert settings.chunk_size == DEFAULT_CHUNK_SIZE
        assert settings.algorithm == "md5"
        assert settings.newline is None

    def test_alias_and_field_name(self) -> None:
        """Test chunk size accepts both its alias and field name."""
        assert OFileSettings(chunkSize=10).chunk_size == 10
        assert OFileSettings(chunk_size=20).chunk_size == 20

    def test_chunk_size_must_be_positive(self) -> None:
        """Test a zero chunk size is rejected."""
        with pytest.raises(ValidationError):
            OFileSettings(chunk_size=0)

    def test_frozen(self) -> None:
        """Test settings cannot be mutated."""
        with pytest.raises(ValidationError):
            DEFAULT_SETTINGS.encoding = "latin-1"

    def test_from_file_invalid_json(self, tmp_path: Path) -> None:
        """Test malformed JSON raises ValueError."""
        settings_file = tmp_path / "settings.json"
        settings_file.write_text("{not json")

        with pytest.raises(ValueError, match="Invalid settings file"):
            OFileSettings.from_file(settings_file)

    def test_from_file_invalid_value(self, tmp_path: Path) -> None:
        """Test values failing validation raise ValueError."""
        settings_file = tmp_path / "settings.json"
        settings_file.write_text(json.dumps({"chunkSize": -1}))

        with pytest.raises(ValueError, match="Invalid settings file"):
            OFileSettings.from_file(settings_file)
