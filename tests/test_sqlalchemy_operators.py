"""Tests for the SQLAlchemy filter operator strategies."""

from __future__ import annotations

import pytest

from cqrs_ddd_jsonapi.filters import FilterOperator
from cqrs_ddd_jsonapi.sqlalchemy.operators import (
    DEFAULT_FILTER_REGISTRY,
    EqualOperator,
    FilterOperatorRegistry,
    build_default_filter_registry,
)

from .models import Person


def _sql(op: FilterOperator, column, values) -> str:
    return str(DEFAULT_FILTER_REGISTRY.apply(op, column, values).compile())


def test_default_registry_covers_every_operator() -> None:
    assert build_default_filter_registry().supported_operators == set(FilterOperator)


def test_eq_single_value() -> None:
    assert _sql(FilterOperator.EQ, Person.first_name, ("Barney",)) == (
        "person.first_name = :first_name_1"
    )


def test_eq_values_are_or_ed_with_null() -> None:
    assert _sql(FilterOperator.EQ, Person.type, ("t-rex", None)) == (
        "person.type = :type_1 OR person.type IS NULL"
    )


def test_not_without_null_keeps_null_rows() -> None:
    assert _sql(FilterOperator.NOT, Person.type, ("t-rex",)) == (
        "person.type IS NULL OR person.type != :type_1"
    )


def test_not_null_only() -> None:
    assert _sql(FilterOperator.NOT, Person.type, (None,)) == "person.type IS NOT NULL"


def test_not_with_null_and_values() -> None:
    assert _sql(FilterOperator.NOT, Person.type, (None, "t-rex")) == (
        "person.type IS NOT NULL AND person.type != :type_1"
    )


def test_like_on_text_column() -> None:
    compiled = DEFAULT_FILTER_REGISTRY.apply(
        FilterOperator.LIKE, Person.first_name, ("50%",)
    ).compile()
    sql = str(compiled)
    assert "person.first_name LIKE" in sql
    assert "ESCAPE '/'" in sql
    assert "50/%" in compiled.params.values()


def test_like_casts_non_text_column() -> None:
    sql = _sql(FilterOperator.LIKE, Person.age, ("2",))
    assert "CAST(person.age AS VARCHAR) LIKE" in sql


def test_like_null_is_null_check() -> None:
    assert _sql(FilterOperator.LIKE, Person.type, (None,)) == "person.type IS NULL"


@pytest.mark.parametrize(
    ("op", "symbol"),
    [
        (FilterOperator.LT, "<"),
        (FilterOperator.LTE, "<="),
        (FilterOperator.GT, ">"),
        (FilterOperator.GTE, ">="),
    ],
)
def test_ordering_operators(op: FilterOperator, symbol: str) -> None:
    assert _sql(op, Person.age, (25,)) == f"person.age {symbol} :age_1"


def test_unregistered_operator() -> None:
    registry = FilterOperatorRegistry()
    registry.register(EqualOperator())
    with pytest.raises(ValueError, match="Unsupported filter operator"):
        registry.apply(FilterOperator.LIKE, Person.age, ("1",))
