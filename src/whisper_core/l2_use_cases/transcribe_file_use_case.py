"""Use case: transcribe an audio file end to end — prepare, invoke, decode."""

from __future__ import annotations

import logging
import time

from whisper_core.l1_entities.options import TranscribeFileOptions
from whisper_core.l1_entities.transcript import ProgressCallback, TranscriptionResult
from whisper_core.l2_use_cases.decode_result_use_case import DecodeResultUseCase
from whisper_core.l2_use_cases.model_session import ModelSession
from whisper_core.l2_use_cases.prepare_audio_use_case import PrepareAudioUseCase
from whisper_core.l2_use_cases.run_inference_use_case import RunInferenceUseCase

log = logging.getLogger('wcore.transcribe')


class TranscribeFileUseCase:
    """One blocking transcription against a ModelSession.

    Holds the session for the whole call so load/unload cannot interleave with
    inference. Either returns a complete result or raises; nothing partial.
    ``on_progress`` receives interim reports during inference and a final
    ``(1.0, text)`` once the result is ready.
    """

    def __init__(
        self,
        prepare: PrepareAudioUseCase,
        invoke: RunInferenceUseCase,
    ) -> None:
        self._prepare = prepare
        self._invoke = invoke

    def execute(
        self,
        options: TranscribeFileOptions,
        session: ModelSession,
        on_progress: ProgressCallback | None = None,
    ) -> TranscriptionResult:
        with session.operation():
            session.require_context()

            started = time.perf_counter()
            audio = self._prepare.execute(options.file_path)
            ctx = self._invoke.execute(audio, options, session, on_progress)
            result = DecodeResultUseCase(session.engine).execute(ctx, options.word_timestamps)
            elapsed_ms = (time.perf_counter() - started) * 1000.0

        log.info(
            'Transcribed %s: %d segments, language=%s, %.0f ms',
            options.file_path,
            len(result.segments),
            result.language,
            elapsed_ms,
        )
        if on_progress is not None:
            on_progress(1.0, result.text)
        return result.model_copy(update={'processing_time': elapsed_ms})
