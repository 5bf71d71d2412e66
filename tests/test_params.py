"""Tests for ParameterSet parsing and registration config."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from cqrs_ddd_jsonapi.config import JsonApiConfig, PaginationConfig
from cqrs_ddd_jsonapi.exceptions import ConfigurationError, ParameterShapeError
from cqrs_ddd_jsonapi.params import PageParams, ParameterSet


def test_none_equals_empty_mapping() -> None:
    assert ParameterSet.parse(None) == ParameterSet.parse({})


def test_parse_full_set() -> None:
    params = ParameterSet.parse(
        {
            "filter": {"like": {"first_name": "Ba"}},
            "sort": "-age,first_name",
            "fields": {"person": "firstName,age"},
            "include": ["pets"],
            "group": ["gender"],
            "page": {"limit": "10", "offset": "0"},
        }
    )
    assert params.sort == ["-age", "first_name"]
    assert params.fields == {"person": ["firstName", "age"]}
    assert params.group == ["gender"]
    assert params.page == PageParams(limit=10, offset=0)


def test_unknown_top_level_key_rejected() -> None:
    with pytest.raises(ParameterShapeError) as exc_info:
        ParameterSet.parse({"filters": {"first_name": "Barney"}})
    assert exc_info.value.path == "filters"


def test_unknown_page_key_rejected() -> None:
    with pytest.raises(ParameterShapeError) as exc_info:
        ParameterSet.parse({"page": {"size": 10}})
    assert exc_info.value.path == "page.size"


def test_parse_is_idempotent() -> None:
    params = ParameterSet.parse({"sort": ["age"]})
    assert ParameterSet.parse(params) is params


def test_parameter_set_is_frozen() -> None:
    params = ParameterSet.parse({"sort": ["age"]})
    with pytest.raises(ValidationError):
        params.sort = ["name"]  # type: ignore[misc]


def test_non_mapping_rejected() -> None:
    with pytest.raises(ParameterShapeError):
        ParameterSet.parse(["filter"])  # type: ignore[arg-type]


def test_negative_page_rejected() -> None:
    with pytest.raises(ParameterShapeError) as exc_info:
        ParameterSet.parse({"page": {"offset": -1}})
    assert exc_info.value.path == "page.offset"


def test_filter_must_be_mapping() -> None:
    with pytest.raises(ParameterShapeError) as exc_info:
        ParameterSet.parse({"filter": "age:1"})
    assert exc_info.value.path == "filter"


def test_config_from_mapping() -> None:
    config = JsonApiConfig.from_mapping({"pagination": {"limit": 1}})
    assert config.pagination == PaginationConfig(limit=1, offset=0)


def test_config_defaults_to_no_pagination() -> None:
    assert JsonApiConfig.from_mapping(None).pagination is None


def test_invalid_config_rejected() -> None:
    with pytest.raises(ConfigurationError):
        JsonApiConfig.from_mapping({"pagination": {"limit": 0}})


def test_error_to_dict() -> None:
    error = ParameterShapeError("Expected a mapping", "filter.like")
    assert error.to_dict() == {
        "error": "INVALID_PARAMETER",
        "message": "Expected a mapping",
        "path": "filter.like",
    }
    assert str(error) == "filter.like: Expected a mapping"
