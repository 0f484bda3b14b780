"""L1 entity: decoding strategy."""

from __future__ import annotations

import enum


class DecodingStrategy(enum.IntEnum):
    # values match whisper.cpp's whisper_sampling_strategy
    GREEDY = 0
    BEAM_SEARCH = 1
