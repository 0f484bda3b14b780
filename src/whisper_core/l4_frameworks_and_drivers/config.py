"""Infrastructure config defaults — lives in L4, not domain."""

from __future__ import annotations

from whisper_core.l1_entities.config import AppConfig
from whisper_core.l3_interface_adapters.gateways.hf_model_acquirer import WHISPER_CPP_REPO
from whisper_core.l3_interface_adapters.gateways.yaml_config_loader import deep_merge

APP_CONFIG_DEFAULTS: dict = {
    'models': {
        'default': 'base',
        'bundled_dir': None,
        'storage_dir': None,
        'file_prefix': 'ggml-',
        'file_suffix': '.bin',
    },
    'transcription': {
        'max_context': 224,
        'thread_count': None,
        'suppress_non_speech_tokens': True,
        'greedy_best_of': 5,
        'beam_size': 5,
        'beam_patience': -1.0,
    },
    'acquisition': {
        'repo_id': WHISPER_CPP_REPO,
    },
    'logging': {
        'directory': None,
    },
}


def build_app_config(raw: dict) -> AppConfig:
    """Merge *raw* user overrides on top of defaults, then validate."""
    return AppConfig.model_validate(deep_merge(APP_CONFIG_DEFAULTS, raw))
