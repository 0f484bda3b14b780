"""Engine-native parameter block for a single full-inference call."""

from __future__ import annotations

from pydantic import BaseModel, model_validator

from whisper_core.l1_entities.decoding_strategy import DecodingStrategy


class EngineParams(BaseModel):
    """Mirror of the whisper_full_params fields this package drives.

    Exactly one sampling sub-parameter set is populated: ``greedy_best_of``
    for greedy decoding, ``beam_size``/``beam_patience`` for beam search.
    """

    model_config = {'frozen': True}

    strategy: DecodingStrategy = DecodingStrategy.GREEDY
    n_threads: int = 0  # 0 → engine picks
    n_max_text_ctx: int = 224
    translate: bool = False
    language: str | None = None  # None → auto-detect
    token_timestamps: bool = False
    suppress_non_speech_tokens: bool = True

    print_progress: bool = False
    print_realtime: bool = False
    print_timestamps: bool = False
    print_special: bool = False

    greedy_best_of: int | None = None
    beam_size: int | None = None
    beam_patience: float | None = None

    @model_validator(mode='after')
    def _one_sampling_set(self) -> EngineParams:
        if self.strategy == DecodingStrategy.GREEDY:
            if self.beam_size is not None or self.beam_patience is not None:
                raise ValueError('greedy decoding does not take beam-search parameters')
        elif self.greedy_best_of is not None:
            raise ValueError('beam-search decoding does not take greedy parameters')
        elif self.beam_size is None:
            raise ValueError('beam-search decoding requires beam_size')
        return self
