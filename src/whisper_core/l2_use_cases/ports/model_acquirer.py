"""Port: model acquisition (download)."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class ModelAcquirer(Protocol):
    """Fetches a model file that is not available locally."""

    def acquire(self, model_name: str, dest_dir: Path) -> Path:
        """Populate *dest_dir* with the model file and return its path. Raises on failure."""
        ...
