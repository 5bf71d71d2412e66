"""Tests for SortCompiler."""

from __future__ import annotations

import pytest

from cqrs_ddd_jsonapi.exceptions import ParameterShapeError
from cqrs_ddd_jsonapi.sorting import SortCompiler, SortDirection


def test_empty_sort() -> None:
    assert SortCompiler().compile(None) == []
    assert SortCompiler().compile([]) == []


def test_direction_and_order() -> None:
    keys = SortCompiler().compile(["-petOwner.age", "name"])
    assert [k.path.dotted for k in keys] == ["petOwner.age", "name"]
    assert [k.direction for k in keys] == [SortDirection.DESC, SortDirection.ASC]
    assert keys[0].descending
    assert keys[0].path.relations == ("petOwner",)


def test_comma_string() -> None:
    keys = SortCompiler().compile("-age,first_name")
    assert [k.path.attribute for k in keys] == ["age", "first_name"]


def test_non_string_item_rejected() -> None:
    with pytest.raises(ParameterShapeError) as exc_info:
        SortCompiler().compile(["age", 1])  # type: ignore[list-item]
    assert exc_info.value.path == "sort.1"


def test_mapping_rejected() -> None:
    with pytest.raises(ParameterShapeError):
        SortCompiler().compile({"age": "asc"})  # type: ignore[arg-type]
