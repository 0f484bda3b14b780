"""Decoded audio entity — raw decoder output before normalization."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class DecodedAudio:
    """Interleaved float32 PCM at the source's native rate and channel count."""

    samples: np.ndarray
    sample_rate: int
    channels: int

    @property
    def frames(self) -> int:
        if self.channels <= 0:
            return 0
        return len(self.samples) // self.channels
