"""Caller-facing option models for transcription and model loading."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator
from pydantic.alias_generators import to_camel

from whisper_core.l1_entities.decoding_strategy import DecodingStrategy

AUTO_LANGUAGE = 'auto'

_BRIDGE_MODEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra='ignore',
    protected_namespaces=(),
)


class TranscriptionParameters(BaseModel):
    """Recognized knobs for one inference call."""

    model_config = _BRIDGE_MODEL_CONFIG

    language: str | None = Field(default=None, description="Language code, or None / 'auto' to auto-detect")
    word_timestamps: bool = False
    translate: bool = Field(default=False, description='Translate the transcription to English')
    thread_count: PositiveInt | None = None
    max_context: PositiveInt = 224
    beam_search: bool = False
    suppress_non_speech_tokens: bool = True

    @field_validator('language')
    @classmethod
    def _normalize_language(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip().lower()
        if not value or value == AUTO_LANGUAGE:
            return None
        return value

    @property
    def strategy(self) -> DecodingStrategy:
        return DecodingStrategy.BEAM_SEARCH if self.beam_search else DecodingStrategy.GREEDY


class TranscribeFileOptions(TranscriptionParameters):
    file_path: str


class LoadModelOptions(BaseModel):
    model_config = _BRIDGE_MODEL_CONFIG

    model_name: str = Field(min_length=1)
    use_acceleration: bool = True
    allow_acquisition: bool = True
