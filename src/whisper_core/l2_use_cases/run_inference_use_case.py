"""Use case: configure and drive one full-inference call."""

from __future__ import annotations

import logging

import numpy as np

from whisper_core.l1_entities.audio_constants import SAMPLE_RATE
from whisper_core.l1_entities.decoding_strategy import DecodingStrategy
from whisper_core.l1_entities.engine_params import EngineParams
from whisper_core.l1_entities.errors import InferenceFailedError, WhisperError
from whisper_core.l1_entities.options import TranscriptionParameters
from whisper_core.l1_entities.transcript import ProgressCallback
from whisper_core.l2_use_cases.decode_result_use_case import ticks_to_seconds
from whisper_core.l2_use_cases.model_session import ModelSession
from whisper_core.l2_use_cases.ports.inference_engine import EngineContext, InferenceEngine

log = logging.getLogger('wcore.invoke')

BEAM_SIZE = 5
BEAM_PATIENCE = -1.0
GREEDY_BEST_OF = 5


def build_engine_params(
    options: TranscriptionParameters,
    *,
    greedy_best_of: int = GREEDY_BEST_OF,
    beam_size: int = BEAM_SIZE,
    beam_patience: float = BEAM_PATIENCE,
) -> EngineParams:
    """Map caller options onto the engine parameter block.

    The engine's console side channels (progress, realtime, timestamps,
    special tokens) are always off.
    """
    fields: dict = dict(
        strategy=options.strategy,
        n_threads=options.thread_count or 0,
        n_max_text_ctx=options.max_context,
        translate=options.translate,
        language=options.language,
        token_timestamps=options.word_timestamps,
        suppress_non_speech_tokens=options.suppress_non_speech_tokens,
        print_progress=False,
        print_realtime=False,
        print_timestamps=False,
        print_special=False,
    )
    if options.strategy == DecodingStrategy.BEAM_SEARCH:
        fields.update(beam_size=beam_size, beam_patience=beam_patience)
    else:
        fields.update(greedy_best_of=greedy_best_of)
    return EngineParams(**fields)


class SegmentProgress:
    """Turns new-segment notifications into (progress, partial text) reports.

    Progress is the end time of the latest segment over the audio duration,
    never decreasing and capped at 1.0.
    """

    def __init__(
        self,
        engine: InferenceEngine,
        ctx: EngineContext,
        duration: float,
        on_progress: ProgressCallback,
    ) -> None:
        self._engine = engine
        self._ctx = ctx
        self._duration = duration
        self._on_progress = on_progress
        self._parts: list[str] = []
        self._seen = 0
        self._progress = 0.0

    def __call__(self, _n_new: int) -> None:
        n = self._engine.n_segments(self._ctx)
        for i in range(self._seen, n):
            self._parts.append(self._engine.segment_text(self._ctx, i))
        self._seen = max(self._seen, n)
        if n > 0 and self._duration > 0:
            end = ticks_to_seconds(self._engine.segment_t1(self._ctx, n - 1))
            self._progress = max(self._progress, min(end / self._duration, 1.0))
        self._on_progress(self._progress, ''.join(self._parts))


class RunInferenceUseCase:
    """Runs the engine over a prepared buffer. Blocking; may take a long time."""

    def __init__(
        self,
        *,
        greedy_best_of: int = GREEDY_BEST_OF,
        beam_size: int = BEAM_SIZE,
        beam_patience: float = BEAM_PATIENCE,
    ) -> None:
        self._greedy_best_of = greedy_best_of
        self._beam_size = beam_size
        self._beam_patience = beam_patience

    def execute(
        self,
        samples: np.ndarray,
        options: TranscriptionParameters,
        session: ModelSession,
        on_progress: ProgressCallback | None = None,
    ) -> EngineContext:
        """Return the session context holding the engine's output for this call."""
        ctx = session.require_context()
        if len(samples) == 0:
            raise InferenceFailedError('Cannot transcribe an empty audio buffer')

        listener = None
        if on_progress is not None:
            listener = SegmentProgress(session.engine, ctx, len(samples) / SAMPLE_RATE, on_progress)

        params = build_engine_params(
            options,
            greedy_best_of=self._greedy_best_of,
            beam_size=self._beam_size,
            beam_patience=self._beam_patience,
        )
        log.info(
            'Inference: %d samples, strategy=%s, language=%s, threads=%d',
            len(samples),
            params.strategy.name,
            params.language or 'auto',
            params.n_threads,
        )

        try:
            status = session.engine.full(
                ctx,
                params,
                np.ascontiguousarray(samples, dtype=np.float32),
                on_new_segments=listener,
            )
        except WhisperError:
            raise
        except Exception as exc:
            raise InferenceFailedError(f'Whisper transcription raised: {exc}') from exc

        if status != 0:
            raise InferenceFailedError(f'Whisper transcription failed with code: {status}', status=status)
        return ctx
