"""Tests for FieldProjector."""

from __future__ import annotations

import pytest

from cqrs_ddd_jsonapi.exceptions import ParameterShapeError
from cqrs_ddd_jsonapi.projection import AggregateFunction, FieldProjector, parse_field


def test_plain_field() -> None:
    field = parse_field("firstName")
    assert not field.is_aggregate
    assert field.label == "firstName"


@pytest.mark.parametrize("function", ["count", "sum", "avg", "max", "min"])
def test_aggregate_field(function: str) -> None:
    field = parse_field(f"{function}(age)")
    assert field.function is AggregateFunction(function)
    assert field.argument == "age"
    assert field.label == function


def test_unknown_function_is_plain() -> None:
    field = parse_field("median(age)")
    assert not field.is_aggregate


def test_compile_per_resource_type() -> None:
    projections = FieldProjector().compile(
        {"person": ["avg(age)", "gender"], "pet": "name,id"}
    )
    assert [f.label for f in projections["person"]] == ["avg", "gender"]
    assert [f.name for f in projections["pet"]] == ["name", "id"]


def test_compile_group() -> None:
    group = FieldProjector().compile_group(["gender"])
    assert [f.name for f in group] == ["gender"]


def test_fields_must_be_mapping() -> None:
    with pytest.raises(ParameterShapeError):
        FieldProjector().compile(["age"])  # type: ignore[arg-type]


def test_empty_field_name_rejected() -> None:
    with pytest.raises(ParameterShapeError) as exc_info:
        FieldProjector().compile({"person": ["age", ""]})
    assert exc_info.value.path == "fields.person.1"
