"""Registration-time configuration."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError


class PaginationConfig(BaseModel):
    """Default page window applied when a call omits ``page``."""

    model_config = ConfigDict(frozen=True)

    limit: int = Field(ge=1)
    offset: int = Field(default=0, ge=0)


class JsonApiConfig(BaseModel):
    """Plugin configuration, fixed once the plugin is registered."""

    model_config = ConfigDict(frozen=True)

    pagination: PaginationConfig | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> JsonApiConfig:
        """Validate the plain shape ``{"pagination": {"limit": .., "offset": ..}}``."""
        try:
            return cls.model_validate(dict(data or {}))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid JSON:API configuration: {e}") from e
