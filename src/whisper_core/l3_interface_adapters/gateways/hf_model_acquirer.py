"""Gateway: HuggingFace model acquirer — implements ModelAcquirer port."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from huggingface_hub import hf_hub_download

from whisper_core.l1_entities.errors import ModelNotFoundError
from whisper_core.l3_interface_adapters.gateways.file_model_locator import ggml_file_name

log = logging.getLogger('wcore.acquire')

WHISPER_CPP_REPO = 'ggerganov/whisper.cpp'

KNOWN_MODELS = frozenset(
    {
        'tiny',
        'tiny.en',
        'base',
        'base.en',
        'small',
        'small.en',
        'medium',
        'medium.en',
        'large-v1',
        'large-v2',
        'large-v3',
        'large-v3-turbo',
        'tiny-q5_1',
        'base-q5_1',
        'small-q5_1',
        'medium-q5_0',
        'medium-q8_0',
        'large-v2-q5_0',
        'large-v2-q8_0',
        'large-v3-q5_0',
        'large-v3-turbo-q5_0',
        'large-v3-turbo-q8_0',
    }
)


class _DownloadProgress:
    """Stand-in for the tqdm bar hf_hub_download drives.

    Only ``update`` does anything: it forwards whole-percent changes to
    ``report``. Every other tqdm method is accepted and ignored.
    """

    report: Callable[[int], None]

    def __init__(self, *_args, total: int | None = None, initial: int = 0, **_kwargs) -> None:
        self.total = total or 0
        self.n = initial
        self._percent = -1
        self._emit()

    def update(self, n: int = 1) -> None:
        self.n += n
        self._emit()

    def _emit(self) -> None:
        if self.total <= 0:
            return
        percent = min(int(self.n * 100 // self.total), 100)
        if percent != self._percent:
            self._percent = percent
            self.report(percent)

    def __getattr__(self, name: str) -> Callable[..., None]:
        return lambda *_a, **_kw: None

    def __enter__(self) -> _DownloadProgress:
        return self

    def __exit__(self, *exc_info) -> None:
        pass


def progress_bar_for(report: Callable[[int], None]) -> type[_DownloadProgress]:
    """Bind *report* into a class hf_hub_download can take as ``tqdm_class``."""
    return type('DownloadProgress', (_DownloadProgress,), {'report': staticmethod(report)})


class HfModelAcquirer:
    """Downloads ggml model files from the whisper.cpp HuggingFace repo."""

    def __init__(
        self,
        repo_id: str = WHISPER_CPP_REPO,
        on_progress: Callable[[int], None] | None = None,
        file_name: Callable[[str], str] = ggml_file_name,
    ) -> None:
        self._repo_id = repo_id
        self._on_progress = on_progress
        self._file_name = file_name

    def acquire(self, model_name: str, dest_dir: Path) -> Path:
        if model_name not in KNOWN_MODELS:
            raise ModelNotFoundError(f'Model {model_name} is not a known whisper.cpp model and cannot be downloaded.')

        filename = self._file_name(model_name)
        dest_dir.mkdir(parents=True, exist_ok=True)
        local_path = dest_dir / filename
        if local_path.exists():
            return local_path

        kwargs: dict = dict(repo_id=self._repo_id, filename=filename, local_dir=dest_dir)
        if self._on_progress is not None:
            kwargs['tqdm_class'] = progress_bar_for(self._on_progress)

        log.info('Downloading %s from %s into %s', filename, self._repo_id, dest_dir)
        return Path(hf_hub_download(**kwargs))
