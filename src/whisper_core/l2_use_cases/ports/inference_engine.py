"""Port: neural speech-recognition engine (whisper.cpp C API surface)."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

import numpy as np

from whisper_core.l1_entities.engine_params import EngineParams
from whisper_core.l1_entities.transcript import TokenData

EngineContext = Any  # opaque, engine-owned handle


class InferenceEngine(Protocol):
    """Black-box inference engine. Zero binding types leak through except the opaque context."""

    def init_context(self, model_path: str, use_acceleration: bool, device_index: int = 0) -> EngineContext | None:
        """Create a context from a model file. Returns None when the engine refuses the file."""
        ...

    def free_context(self, ctx: EngineContext) -> None:
        """Release a context created by init_context()."""
        ...

    def full(
        self,
        ctx: EngineContext,
        params: EngineParams,
        samples: np.ndarray,
        on_new_segments: Callable[[int], None] | None = None,
    ) -> int:
        """Run full inference over 16 kHz mono float32 samples. Returns 0 on success.

        *on_new_segments* is called from inside the run with the number of
        segments just appended; the segment accessors already see them.
        """
        ...

    def n_segments(self, ctx: EngineContext) -> int: ...

    def segment_text(self, ctx: EngineContext, i_segment: int) -> str: ...

    def segment_t0(self, ctx: EngineContext, i_segment: int) -> int: ...

    def segment_t1(self, ctx: EngineContext, i_segment: int) -> int: ...

    def n_tokens(self, ctx: EngineContext, i_segment: int) -> int: ...

    def token_data(self, ctx: EngineContext, i_segment: int, i_token: int) -> TokenData: ...

    def lang_id(self, ctx: EngineContext) -> int:
        """Id of the language detected (or forced) during the last full() call."""
        ...

    def lang_str(self, lang_id: int) -> str:
        """Map a language id to its short code. Empty string for unknown ids."""
        ...

    def lang_max_id(self) -> int: ...

    def acceleration_available(self) -> bool:
        """Whether the engine build can use a hardware accelerator."""
        ...
