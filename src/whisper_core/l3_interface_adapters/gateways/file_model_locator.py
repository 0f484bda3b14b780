"""Gateway: on-disk model locator — implements ModelLocator port."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from whisper_core.l3_interface_adapters.gateways.paths import MODELS_DIR


def ggml_file_name(model_name: str) -> str:
    return f'ggml-{model_name}.bin'


class FileModelLocator:
    """Looks in the bundled directory first, then the writable storage directory.

    An absolute path to an existing file is accepted as-is.
    """

    def __init__(
        self,
        bundled_dir: Path | None = None,
        storage_dir: Path | None = None,
        file_name: Callable[[str], str] = ggml_file_name,
    ) -> None:
        self._bundled_dir = bundled_dir
        self._storage_dir = storage_dir or MODELS_DIR
        self._file_name = file_name

    @property
    def storage_dir(self) -> Path:
        return self._storage_dir

    def candidates(self, model_name: str) -> list[Path]:
        """Paths checked for *model_name*, in resolution order."""
        as_path = Path(model_name)
        if as_path.is_absolute():
            return [as_path]

        filename = self._file_name(model_name)
        dirs = [d for d in (self._bundled_dir, self._storage_dir) if d is not None]
        return [d / filename for d in dirs]

    def locate(self, model_name: str) -> Path | None:
        for candidate in self.candidates(model_name):
            if candidate.is_file():
                return candidate
        return None
