"""Settings shared by handles, the checksum engine and the CLI."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

# Block size used when streaming files through a digest or line counter
DEFAULT_CHUNK_SIZE = 1024

DEFAULT_ALGORITHM = "md5"


class OFileSettings(BaseModel):
    """Tunable behaviour of file handles."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    encoding: str = "utf-8"
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, gt=0, alias="chunkSize")
    algorithm: str = DEFAULT_ALGORITHM
    newline: str | None = None

    @classmethod
    def from_file(cls, path: Path) -> OFileSettings:
        """Load settings from a JSON file.

        Args:
            path: Path to the settings file.

        Returns:
            Parsed OFileSettings.

        Raises:
            FileNotFoundError: If file doesn't exist.
            ValueError: If the file is not valid JSON or fails validation.
        """
        if not path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")

        try:
            data = json.loads(path.read_text())
            return cls.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise ValueError(f"Invalid settings file {path}: {e}") from e


DEFAULT_SETTINGS = OFileSettings()
