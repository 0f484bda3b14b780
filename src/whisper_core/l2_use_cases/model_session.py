"""ModelSession — owns the lifecycle of one loaded engine context."""

from __future__ import annotations

import contextlib
import logging
import threading
from collections.abc import Iterator
from pathlib import Path

from whisper_core.l1_entities.errors import ModelLoadFailedError, ModelNotFoundError, NotReadyError
from whisper_core.l1_entities.model_info import ModelInfo, SupportInfo
from whisper_core.l2_use_cases.ports.inference_engine import EngineContext, InferenceEngine
from whisper_core.l2_use_cases.ports.model_acquirer import ModelAcquirer
from whisper_core.l2_use_cases.ports.model_locator import ModelLocator

log = logging.getLogger('wcore.session')


class ModelSession:
    """Holds at most one live engine context.

    The context is non-None iff ``is_loaded``. ``load`` always releases any
    previous context first and ``unload`` is safe to call at any time. All
    mutating operations, and whole transcription calls made through
    ``operation()``, are serialized by a re-entrant lock: the engine context
    does not support concurrent calls.
    """

    def __init__(
        self,
        engine: InferenceEngine,
        locator: ModelLocator,
        acquirer: ModelAcquirer | None = None,
    ) -> None:
        self._engine = engine
        self._locator = locator
        self._acquirer = acquirer
        self._lock = threading.RLock()

        self._context: EngineContext | None = None
        self.model_name: str = ''
        self.model_path: Path | None = None
        self.is_loaded: bool = False
        self.using_acceleration: bool = False

    def __enter__(self) -> ModelSession:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def engine(self) -> InferenceEngine:
        return self._engine

    @contextlib.contextmanager
    def operation(self) -> Iterator[ModelSession]:
        """Hold the session exclusively for the duration of the block."""
        with self._lock:
            yield self

    def require_context(self) -> EngineContext:
        """Return the live context or raise NotReadyError."""
        if not self.is_loaded or self._context is None:
            raise NotReadyError()
        return self._context

    def load(self, model_name: str, use_acceleration: bool = True, allow_acquisition: bool = True) -> None:
        with self._lock:
            self.unload()

            model_path = self._resolve(model_name, allow_acquisition)
            log.info('Loading model %s from %s (acceleration=%s)', model_name, model_path, use_acceleration)
            try:
                context = self._engine.init_context(str(model_path), use_acceleration)
            except Exception as exc:
                raise ModelLoadFailedError(f'Failed to load model from: {model_path} ({exc})') from exc
            if context is None:
                raise ModelLoadFailedError(f'Failed to load model from: {model_path}')

            self._context = context
            self.model_name = model_name
            self.model_path = model_path
            self.is_loaded = True
            self.using_acceleration = use_acceleration
            log.info('Model loaded: %s', model_name)

    def unload(self) -> None:
        with self._lock:
            context, self._context = self._context, None
            if context is not None:
                self._engine.free_context(context)
                log.info('Model unloaded: %s', self.model_name)
            self.model_name = ''
            self.model_path = None
            self.is_loaded = False
            self.using_acceleration = False

    def close(self) -> None:
        self.unload()

    def info(self) -> ModelInfo:
        with self._lock:
            if not self.is_loaded:
                return ModelInfo()
            return ModelInfo(
                model_name=self.model_name,
                is_loaded=True,
                using_acceleration=self.using_acceleration,
                model_size=_file_size(self.model_path),
                supported_languages=self._supported_languages(),
            )

    def is_supported(self) -> SupportInfo:
        return SupportInfo(supported=True, acceleration_supported=self._engine.acceleration_available())

    def _resolve(self, model_name: str, allow_acquisition: bool) -> Path:
        found = self._locator.locate(model_name)
        if found is not None:
            return found

        if not allow_acquisition:
            raise ModelNotFoundError(f'Model {model_name} not found and acquisition is disabled.')
        if self._acquirer is None:
            raise ModelNotFoundError(f'Model {model_name} not found and no acquirer is configured.')

        log.info('Model %s not found locally; acquiring into %s', model_name, self._locator.storage_dir)
        try:
            return self._acquirer.acquire(model_name, self._locator.storage_dir)
        except ModelNotFoundError:
            raise
        except Exception as exc:
            raise ModelNotFoundError(f'Model {model_name} could not be acquired: {exc}') from exc

    def _supported_languages(self) -> list[str]:
        codes = (self._engine.lang_str(i) for i in range(self._engine.lang_max_id() + 1))
        return [code for code in codes if code]


def _file_size(path: Path | None) -> int:
    if path is None:
        return 0
    try:
        return path.stat().st_size
    except OSError:
        return 0
