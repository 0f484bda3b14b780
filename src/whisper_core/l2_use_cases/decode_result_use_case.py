"""Use case: walk the engine's segment/token output into a TranscriptionResult."""

from __future__ import annotations

from whisper_core.l1_entities.transcript import Segment, TokenData, TranscriptionResult, Word
from whisper_core.l2_use_cases.ports.inference_engine import EngineContext, InferenceEngine

_TICKS_PER_SECOND = 100.0  # whisper timestamps are centiseconds
_SPECIAL_PREFIXES = ('[', '<')


def ticks_to_seconds(ticks: int) -> float:
    return ticks / _TICKS_PER_SECOND


def is_special_token(text: str) -> bool:
    """Control markers like ``[_BEGIN_]`` / ``<|endoftext|>`` and blank tokens are not words."""
    stripped = text.strip()
    return not stripped or stripped.startswith(_SPECIAL_PREFIXES)


def token_to_word(token: TokenData) -> Word:
    return Word(
        word=token.text.strip(),
        start_time=ticks_to_seconds(token.t0),
        end_time=ticks_to_seconds(token.t1),
        confidence=min(max(token.p, 0.0), 1.0),
    )


class DecodeResultUseCase:
    """Reads segments, optional per-token words and the detected language."""

    def __init__(self, engine: InferenceEngine) -> None:
        self._engine = engine

    def execute(self, ctx: EngineContext, word_timestamps: bool) -> TranscriptionResult:
        """Decode the last full() output. processing_time is left for the caller to attach."""
        segments: list[Segment] = []
        text_parts: list[str] = []

        for i in range(self._engine.n_segments(ctx)):
            text = self._engine.segment_text(ctx, i)
            segments.append(
                Segment(
                    start_time=ticks_to_seconds(self._engine.segment_t0(ctx, i)),
                    end_time=ticks_to_seconds(self._engine.segment_t1(ctx, i)),
                    text=text,
                    words=self._words(ctx, i) if word_timestamps else None,
                )
            )
            # segment text already carries its own leading space
            text_parts.append(text)

        return TranscriptionResult(
            text=''.join(text_parts),
            segments=segments,
            language=self._engine.lang_str(self._engine.lang_id(ctx)),
        )

    def _words(self, ctx: EngineContext, i_segment: int) -> list[Word]:
        words: list[Word] = []
        for j in range(self._engine.n_tokens(ctx, i_segment)):
            token = self._engine.token_data(ctx, i_segment, j)
            if not is_special_token(token.text):
                words.append(token_to_word(token))
        return words
