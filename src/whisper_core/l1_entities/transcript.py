"""Transcription result entities."""

from __future__ import annotations

from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)

# (progress in [0, 1], text transcribed so far)
ProgressCallback = Callable[[float, str], None]


class TokenData(BaseModel):
    """Per-token output read from the engine. Times are centisecond ticks."""

    text: str
    t0: int
    t1: int
    p: float = 0.0


class Word(BaseModel):
    model_config = _CAMEL

    word: str
    start_time: float
    end_time: float
    confidence: float = Field(ge=0.0, le=1.0)


class Segment(BaseModel):
    """A contiguous span of transcribed speech."""

    model_config = _CAMEL

    start_time: float = Field(description='Offset in seconds from the start of the audio')
    end_time: float = Field(description='Offset in seconds from the start of the audio')
    text: str
    words: list[Word] | None = None


class TranscriptionResult(BaseModel):
    model_config = _CAMEL

    text: str
    segments: list[Segment] = Field(default_factory=list)
    language: str = ''
    processing_time: float = Field(default=0.0, description='Milliseconds spent in prepare + invoke + decode')
