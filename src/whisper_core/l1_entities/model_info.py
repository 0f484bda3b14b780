"""Model snapshot and capability entities."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True, protected_namespaces=())


class ModelInfo(BaseModel):
    """Point-in-time view of a ModelSession. Not persisted."""

    model_config = _CAMEL

    model_name: str = ''
    is_loaded: bool = False
    using_acceleration: bool = False
    model_size: int = Field(default=0, description='Model file size in bytes')
    supported_languages: list[str] = Field(default_factory=list)


class SupportInfo(BaseModel):
    model_config = _CAMEL

    supported: bool
    acceleration_supported: bool = False
