"""Port: model file location."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class ModelLocator(Protocol):
    """Maps a model identifier to an existing local model file."""

    @property
    def storage_dir(self) -> Path:
        """Writable directory that acquisitions download into."""
        ...

    def locate(self, model_name: str) -> Path | None:
        """Return the first existing model file (bundled, then storage), or None."""
        ...
