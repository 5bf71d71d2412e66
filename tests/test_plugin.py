"""Tests for JsonApiParams registration."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from cqrs_ddd_jsonapi import (
    ConfigurationError,
    JsonApiConfig,
    JsonApiParams,
    PaginationConfig,
    SnakeCaseNaming,
)

from .models import Person


def test_register_with_mapping() -> None:
    plugin = JsonApiParams.register(pagination={"limit": 1})
    assert plugin.config.pagination == PaginationConfig(limit=1)


def test_register_with_model() -> None:
    pagination = PaginationConfig(limit=5, offset=10)
    plugin = JsonApiParams.register(pagination=pagination)
    assert plugin.config.pagination is pagination


def test_register_without_pagination() -> None:
    assert JsonApiParams.register().config == JsonApiConfig()


def test_invalid_configuration() -> None:
    with pytest.raises(ConfigurationError):
        JsonApiParams.register(pagination={"limit": "many"})
    with pytest.raises(ConfigurationError):
        JsonApiParams({"pagination": {"offset": -1, "limit": 1}})


def test_config_is_frozen() -> None:
    plugin = JsonApiParams.register(pagination={"limit": 1})
    with pytest.raises(ValidationError):
        plugin.config.pagination = None  # type: ignore[misc]


def test_for_model() -> None:
    plugin = JsonApiParams.register(pagination={"limit": 2})
    query = plugin.for_model(Person, resource_type="people")
    assert query.model is Person
    assert query.resource_type == "people"
    compiled = query.compile()
    assert compiled.window is not None
    assert compiled.window.limit == 2


@pytest.mark.asyncio
async def test_fetch_shortcut(session) -> None:
    plugin = JsonApiParams.register(
        pagination={"limit": 1}, naming=SnakeCaseNaming()
    )
    result = await plugin.fetch(session, Person, {"sort": ["-age"]})
    assert [p.first_name for p in result] == ["Cookie Monster"]
    assert result.pagination.page_count == 5
    assert result.to_dict()["meta"]["pagination"]["rowCount"] == 5


@pytest.mark.asyncio
async def test_naming_override(session) -> None:
    plugin = JsonApiParams()
    query = plugin.for_model(Person, naming=SnakeCaseNaming())
    result = await query.fetch(session, {"filter": {"firstName": "Elmo"}})
    assert [p.id for p in result] == [5]
