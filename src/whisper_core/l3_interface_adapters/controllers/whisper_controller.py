"""WhisperController — the operations a host bridge calls into."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from whisper_core.l1_entities.errors import InvalidOptionsError
from whisper_core.l1_entities.model_info import ModelInfo, SupportInfo
from whisper_core.l1_entities.options import LoadModelOptions, TranscribeFileOptions
from whisper_core.l1_entities.transcript import ProgressCallback, TranscriptionResult
from whisper_core.l2_use_cases.model_session import ModelSession
from whisper_core.l2_use_cases.transcribe_file_use_case import TranscribeFileUseCase

log = logging.getLogger('wcore.controller')

_OptionsT = TypeVar('_OptionsT', bound=BaseModel)


def parse_options(model: type[_OptionsT], payload: _OptionsT | Mapping[str, Any]) -> _OptionsT:
    """Accept an options object or a camelCase/snake_case dict from the bridge."""
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(dict(payload))
    except (ValidationError, TypeError, ValueError) as exc:
        raise InvalidOptionsError(f'Invalid {model.__name__}: {exc}') from exc


class WhisperController:
    """Thin façade over ModelSession and the transcription use case.

    Every method is blocking. Callers that must stay responsive hand
    ``transcribe_file`` to a worker (see ``TranscriptionWorker``).
    """

    def __init__(
        self,
        session: ModelSession,
        transcribe: TranscribeFileUseCase,
        option_defaults: Mapping[str, Any] | None = None,
    ) -> None:
        self._session = session
        self._transcribe = transcribe
        self._option_defaults = dict(option_defaults or {})

    @property
    def session(self) -> ModelSession:
        return self._session

    def transcribe_file(
        self,
        options: TranscribeFileOptions | Mapping[str, Any],
        on_progress: ProgressCallback | None = None,
    ) -> TranscriptionResult:
        opts = self._with_defaults(parse_options(TranscribeFileOptions, options))
        return self._transcribe.execute(opts, self._session, on_progress)

    def load_model(self, options: LoadModelOptions | Mapping[str, Any]) -> None:
        opts = parse_options(LoadModelOptions, options)
        self._session.load(
            opts.model_name,
            use_acceleration=opts.use_acceleration,
            allow_acquisition=opts.allow_acquisition,
        )

    def unload_model(self) -> None:
        self._session.unload()

    def get_model_info(self) -> ModelInfo:
        return self._session.info()

    def is_supported(self) -> SupportInfo:
        return self._session.is_supported()

    def _with_defaults(self, opts: TranscribeFileOptions) -> TranscribeFileOptions:
        """Fill fields the caller left unset from configured defaults."""
        missing = {k: v for k, v in self._option_defaults.items() if k not in opts.model_fields_set}
        if not missing:
            return opts
        return opts.model_copy(update=missing)
