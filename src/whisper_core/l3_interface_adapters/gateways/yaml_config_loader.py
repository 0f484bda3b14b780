"""Gateway: YAML configuration loader — implements ConfigLoader port."""

from __future__ import annotations

from pathlib import Path

import yaml

from whisper_core.l3_interface_adapters.gateways.paths import DEFAULT_CONFIG_PATHS


class YamlConfigLoader:
    """Reads user YAML config with merge and override support."""

    def load_raw(
        self,
        config_path: str | None = None,
        overrides: dict | None = None,
    ) -> dict:
        """Return the merged YAML data as a raw dict (before Pydantic validation)."""
        data: dict = {}
        if config_path is not None:
            path = Path(config_path)
            if not path.exists():
                raise FileNotFoundError(f'Config file not found: {path}')
            data = yaml.safe_load(path.read_text(encoding='utf-8')) or {}
        else:
            for default_path in DEFAULT_CONFIG_PATHS:
                if default_path.exists():
                    data = yaml.safe_load(default_path.read_text(encoding='utf-8')) or {}
                    break
        if overrides:
            data = deep_merge(data, overrides)
        return data


def deep_merge(base: dict, override: dict) -> dict:
    """Return a new dict with *override* layered over *base*.

    Nested dicts merge key by key; any other value in *override* replaces.
    Neither argument is modified.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = deep_merge(current, value)
        merged[key] = value
    return merged
