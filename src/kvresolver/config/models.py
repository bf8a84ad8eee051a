"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, kvresolver.toml only contains
overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, field_validator

from kvresolver.registry import DEFAULT_PRESET, PRESETS


class RegistryConfig(BaseModel):
    """[registry] section."""

    model_config = {"frozen": True}

    preset: str = DEFAULT_PRESET
    load_plugins: bool = False

    @field_validator("preset")
    @classmethod
    def known_preset(cls, value: str) -> str:
        if value not in PRESETS:
            msg = f"Unknown registry preset {value!r}; expected one of {sorted(PRESETS)}"
            raise ValueError(msg)
        return value
