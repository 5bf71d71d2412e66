"""Tests for FilterCompiler."""

from __future__ import annotations

import pytest

from cqrs_ddd_jsonapi.exceptions import ParameterShapeError, UnsupportedFilterValueError
from cqrs_ddd_jsonapi.filters import (
    RESERVED_OPERATORS,
    FilterClause,
    FilterCompiler,
    FilterOperator,
)
from cqrs_ddd_jsonapi.paths import resolve_path


def test_empty_filter() -> None:
    assert FilterCompiler().compile(None) == []
    assert FilterCompiler().compile({}) == []


def test_bare_key_is_equality() -> None:
    (clause,) = FilterCompiler().compile({"first_name": "Barney,Baby Bop"})
    assert clause.operator is FilterOperator.EQ
    assert clause.path == resolve_path("first_name")
    assert clause.values == ("Barney", "Baby Bop")


def test_null_text_and_none_are_the_same() -> None:
    compiler = FilterCompiler()
    (from_text,) = compiler.compile({"type": "null"})
    (from_none,) = compiler.compile({"type": None})
    assert from_text.values == (None,) == from_none.values
    assert from_text.has_null


def test_null_mixed_with_values() -> None:
    (clause,) = FilterCompiler().compile({"not": {"type": "null,t-rex"}})
    assert clause.operator is FilterOperator.NOT
    assert clause.values == (None, "t-rex")
    assert clause.non_null_values == ("t-rex",)


def test_operator_keys() -> None:
    clauses = FilterCompiler().compile(
        {
            "like": {"first_name": "Ba"},
            "gte": {"age": "25"},
            "pets.name": "Big Bird",
        }
    )
    assert [c.operator for c in clauses] == [
        FilterOperator.LIKE,
        FilterOperator.GTE,
        FilterOperator.EQ,
    ]
    assert clauses[2].path.relations == ("pets",)


def test_escaped_comma_value() -> None:
    (clause,) = FilterCompiler().compile({"type": "nothing\\, here"})
    assert clause.values == ("nothing, here",)


def test_numeric_values_pass_through() -> None:
    (clause,) = FilterCompiler().compile({"lt": {"age": 25}})
    assert clause.values == (25,)


def test_reserved_operator_needs_mapping() -> None:
    with pytest.raises(ParameterShapeError) as exc_info:
        FilterCompiler().compile({"like": "Ba"})
    assert exc_info.value.path == "filter.like"


def test_unknown_operator_mapping_rejected() -> None:
    with pytest.raises(ParameterShapeError, match="Unknown filter operator"):
        FilterCompiler().compile({"between": {"age": "1,2"}})


def test_non_scalar_value_rejected() -> None:
    with pytest.raises(ParameterShapeError):
        FilterCompiler().compile({"age": [[1, 2]]})


def test_empty_value_list_rejected() -> None:
    with pytest.raises(ParameterShapeError):
        FilterCompiler().compile({"age": []})


def test_ordering_operator_rejects_value_list() -> None:
    with pytest.raises(UnsupportedFilterValueError) as exc_info:
        FilterCompiler().compile({"gt": {"age": "1,2"}})
    assert exc_info.value.to_dict()["error"] == "UNSUPPORTED_FILTER_VALUE"


def test_reserved_operators_exclude_eq() -> None:
    assert set(RESERVED_OPERATORS) == {"like", "not", "lt", "lte", "gt", "gte"}


def test_clause_requires_values() -> None:
    with pytest.raises(ParameterShapeError):
        FilterClause(FilterOperator.EQ, resolve_path("age"), ())
