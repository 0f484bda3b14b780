"""Tests for shared path constants."""

from __future__ import annotations

from pathlib import Path

from whisper_core.l3_interface_adapters.gateways.paths import (
    APP_NAME,
    CONFIG_DIR,
    DEFAULT_CONFIG_PATHS,
    MODELS_DIR,
)


class TestPaths:
    def test_config_dir_is_path(self):
        assert isinstance(CONFIG_DIR, Path)

    def test_config_dir_name(self):
        assert CONFIG_DIR.name == APP_NAME == 'whisper-core'

    def test_models_dir_under_app_data(self):
        assert MODELS_DIR.name == 'models'
        assert MODELS_DIR.parent.name == 'whisper-core'

    def test_default_config_paths_has_two_entries(self):
        assert [p.name for p in DEFAULT_CONFIG_PATHS] == ['config.yaml', 'config.yml']

    def test_default_config_paths_are_under_config_dir(self):
        for p in DEFAULT_CONFIG_PATHS:
            assert p.parent == CONFIG_DIR
