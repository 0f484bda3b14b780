"""Configuration Pydantic models — pure schema, no infrastructure defaults."""

from __future__ import annotations

from pydantic import BaseModel, PositiveInt


class ModelsConfig(BaseModel):
    default: str
    bundled_dir: str | None = None  # read-only, shipped alongside the host app
    storage_dir: str | None = None  # writable; None → platformdirs user data dir
    file_prefix: str
    file_suffix: str

    def file_name(self, model_name: str) -> str:
        """Conventional on-disk name for a model identifier, e.g. ``ggml-base.en.bin``."""
        return f'{self.file_prefix}{model_name}{self.file_suffix}'


class TranscriptionConfig(BaseModel):
    max_context: PositiveInt
    thread_count: PositiveInt | None = None
    suppress_non_speech_tokens: bool
    greedy_best_of: PositiveInt
    beam_size: PositiveInt
    beam_patience: float


class AcquisitionConfig(BaseModel):
    repo_id: str


class LoggingConfig(BaseModel):
    directory: str | None = None  # None → no debug log file


class AppConfig(BaseModel):
    models: ModelsConfig
    transcription: TranscriptionConfig
    acquisition: AcquisitionConfig
    logging: LoggingConfig
