"""
JsonApiParams: registration-time entry point.

Configuration is validated once, here, and is read-only afterwards::

    jsonapi = JsonApiParams.register(pagination={"limit": 25})
    people = jsonapi.for_model(Person, naming=SnakeCaseNaming())
    page = await people.fetch(session, {"sort": ["-age"]})
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .config import JsonApiConfig, PaginationConfig
from .naming import IDENTITY_NAMING
from .pipeline import JsonApiQuery

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from .params import ParameterSet
    from .ports import IAttributeNaming
    from .sqlalchemy.operators import FilterOperatorRegistry

logger = logging.getLogger(__name__)


class JsonApiParams:
    """Holds the plugin configuration and hands out per-model queries."""

    def __init__(
        self,
        config: JsonApiConfig | Mapping[str, Any] | None = None,
        *,
        naming: IAttributeNaming | None = None,
        registry: FilterOperatorRegistry | None = None,
    ) -> None:
        if config is None or isinstance(config, Mapping):
            config = JsonApiConfig.from_mapping(config)
        self._config = config
        self._naming = naming or IDENTITY_NAMING
        self._registry = registry

    @classmethod
    def register(
        cls,
        *,
        pagination: PaginationConfig | Mapping[str, Any] | None = None,
        naming: IAttributeNaming | None = None,
        registry: FilterOperatorRegistry | None = None,
    ) -> JsonApiParams:
        """
        Build the plugin from keyword configuration.

        Raises:
            ConfigurationError: If ``pagination`` is invalid.
        """
        if isinstance(pagination, PaginationConfig):
            config = JsonApiConfig(pagination=pagination)
        else:
            config = JsonApiConfig.from_mapping({"pagination": pagination})
        logger.debug("Registered JSON:API params with %r", config)
        return cls(config, naming=naming, registry=registry)

    @property
    def config(self) -> JsonApiConfig:
        return self._config

    def for_model(
        self,
        model: type[Any],
        *,
        naming: IAttributeNaming | None = None,
        resource_type: str | None = None,
    ) -> JsonApiQuery:
        """A query bound to *model*; *naming* overrides the plugin default."""
        return JsonApiQuery(
            model,
            naming=naming or self._naming,
            pagination=self._config.pagination,
            registry=self._registry,
            resource_type=resource_type,
        )

    async def fetch(
        self,
        session: AsyncSession,
        model: type[Any],
        params: Mapping[str, Any] | ParameterSet | None = None,
        **kwargs: Any,
    ) -> Any:
        """Shortcut for ``for_model(model).fetch(session, params, **kwargs)``."""
        return await self.for_model(model).fetch(session, params, **kwargs)
