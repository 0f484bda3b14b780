"""Dependency container — composition root for wiring all layers together."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from whisper_core.l1_entities.config import AppConfig
from whisper_core.l2_use_cases.model_session import ModelSession
from whisper_core.l2_use_cases.ports.audio_decoder import AudioDecoder
from whisper_core.l2_use_cases.ports.config_loader import ConfigLoader
from whisper_core.l2_use_cases.ports.inference_engine import InferenceEngine
from whisper_core.l2_use_cases.ports.model_acquirer import ModelAcquirer
from whisper_core.l2_use_cases.ports.model_locator import ModelLocator
from whisper_core.l2_use_cases.prepare_audio_use_case import PrepareAudioUseCase
from whisper_core.l2_use_cases.run_inference_use_case import RunInferenceUseCase
from whisper_core.l2_use_cases.transcribe_file_use_case import TranscribeFileUseCase
from whisper_core.l3_interface_adapters.controllers.whisper_controller import WhisperController
from whisper_core.l3_interface_adapters.gateways.ffmpeg_audio_decoder import FfmpegAudioDecoder
from whisper_core.l3_interface_adapters.gateways.file_model_locator import FileModelLocator
from whisper_core.l3_interface_adapters.gateways.hf_model_acquirer import HfModelAcquirer
from whisper_core.l3_interface_adapters.gateways.whispercpp_engine import WhisperCppEngine
from whisper_core.l3_interface_adapters.gateways.yaml_config_loader import YamlConfigLoader
from whisper_core.l4_frameworks_and_drivers.config import build_app_config
from whisper_core.l4_frameworks_and_drivers.logging_setup import setup_file_logging


class DependencyContainer:
    """Creates and wires all concrete instances. Easy to override for testing."""

    def __init__(
        self,
        config: AppConfig,
        on_download_progress: Callable[[int], None] | None = None,
    ) -> None:
        self.config = config
        models = config.models

        self.engine: InferenceEngine = WhisperCppEngine()
        self.audio_decoder: AudioDecoder = FfmpegAudioDecoder()
        self.model_locator: ModelLocator = FileModelLocator(
            bundled_dir=Path(models.bundled_dir) if models.bundled_dir else None,
            storage_dir=Path(models.storage_dir) if models.storage_dir else None,
            file_name=models.file_name,
        )
        self.model_acquirer: ModelAcquirer = HfModelAcquirer(
            repo_id=config.acquisition.repo_id,
            on_progress=on_download_progress,
            file_name=models.file_name,
        )
        self.session = ModelSession(self.engine, self.model_locator, self.model_acquirer)

        tc = config.transcription
        transcribe = TranscribeFileUseCase(
            prepare=PrepareAudioUseCase(self.audio_decoder),
            invoke=RunInferenceUseCase(
                greedy_best_of=tc.greedy_best_of,
                beam_size=tc.beam_size,
                beam_patience=tc.beam_patience,
            ),
        )
        self.controller = WhisperController(
            self.session,
            transcribe,
            option_defaults={
                'max_context': tc.max_context,
                'thread_count': tc.thread_count,
                'suppress_non_speech_tokens': tc.suppress_non_speech_tokens,
            },
        )

    @staticmethod
    def config_loader() -> ConfigLoader:
        return YamlConfigLoader()


def build_container(
    config_path: str | None = None,
    overrides: dict | None = None,
    on_download_progress: Callable[[int], None] | None = None,
) -> DependencyContainer:
    """Load YAML config (explicit path or platform default), set up logging, wire everything."""
    raw = DependencyContainer.config_loader().load_raw(config_path, overrides=overrides)
    config = build_app_config(raw)
    if config.logging.directory:
        setup_file_logging(Path(config.logging.directory))
    return DependencyContainer(config, on_download_progress=on_download_progress)
