"""
SQLAlchemy filter operator strategies.

Each ``FilterOperator`` is compiled by an isolated strategy class,
registered in a ``FilterOperatorRegistry``. A strategy receives the
resolved column and the whole value tuple of one clause, so the
per-value OR / AND composition lives with the operator.

Usage::

    expr = DEFAULT_FILTER_REGISTRY.apply(FilterOperator.EQ, column, ("a", None))
"""

from __future__ import annotations

import operator as op_module
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import String, and_, or_
from sqlalchemy import cast as sql_cast

from ..filters import FilterOperator
from .resolution import python_type

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from sqlalchemy import ColumnElement


def _combine_or(predicates: Sequence[Any]) -> ColumnElement[bool]:
    if len(predicates) == 1:
        return cast("ColumnElement[bool]", predicates[0])
    return or_(*predicates)


def _combine_and(predicates: Sequence[Any]) -> ColumnElement[bool]:
    if len(predicates) == 1:
        return cast("ColumnElement[bool]", predicates[0])
    return and_(*predicates)


class SQLAlchemyFilterOperator(ABC):
    """Strategy compiling one filter operator into a boolean expression."""

    @property
    @abstractmethod
    def name(self) -> FilterOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def apply(self, column: Any, values: tuple[Any, ...]) -> ColumnElement[bool]:
        """
        Build the predicate for one clause.

        Args:
            column: Mapped attribute or aliased column.
            values: Non-empty value tuple; ``None`` is the null sentinel.
        """
        ...


class EqualOperator(SQLAlchemyFilterOperator):
    """``col = v`` / ``col IS NULL``, OR-ed across values."""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.EQ

    def apply(self, column: Any, values: tuple[Any, ...]) -> ColumnElement[bool]:
        return _combine_or(
            [column.is_(None) if v is None else column == v for v in values]
        )


class NotEqualOperator(SQLAlchemyFilterOperator):
    """
    Keeps a row only if its value matches none of the values.

    A NULL column value matches none of a null-free value list, so it is
    kept unless the null sentinel is part of the list.
    """

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NOT

    def apply(self, column: Any, values: tuple[Any, ...]) -> ColumnElement[bool]:
        inequalities = [column != v for v in values if v is not None]
        if any(v is None for v in values):
            return _combine_and([column.is_not(None), *inequalities])
        return or_(column.is_(None), _combine_and(inequalities))


class LikeOperator(SQLAlchemyFilterOperator):
    """Substring match on the value's text form, OR-ed across values.

    Non-text columns are cast to text first, so ``like[age]=2`` matches
    ``12`` and ``25``. ``%`` and ``_`` in the value match literally.
    """

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LIKE

    def apply(self, column: Any, values: tuple[Any, ...]) -> ColumnElement[bool]:
        text = column if python_type(column) is str else sql_cast(column, String)
        return _combine_or(
            [
                column.is_(None)
                if v is None
                else text.contains(str(v), autoescape=True)
                for v in values
            ]
        )


class _ComparisonOperator(SQLAlchemyFilterOperator):
    _compare: Callable[[Any, Any], Any]

    def apply(self, column: Any, values: tuple[Any, ...]) -> ColumnElement[bool]:
        return _combine_and([type(self)._compare(column, v) for v in values])


class LessThanOperator(_ComparisonOperator):
    _compare = op_module.lt

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LT


class LessEqualOperator(_ComparisonOperator):
    _compare = op_module.le

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LTE


class GreaterThanOperator(_ComparisonOperator):
    _compare = op_module.gt

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.GT


class GreaterEqualOperator(_ComparisonOperator):
    _compare = op_module.ge

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.GTE


class FilterOperatorRegistry:
    """Registry of ``SQLAlchemyFilterOperator`` keyed by ``FilterOperator``."""

    def __init__(self) -> None:
        self._operators: dict[FilterOperator, SQLAlchemyFilterOperator] = {}

    def register(self, operator: SQLAlchemyFilterOperator) -> None:
        self._operators[operator.name] = operator

    def register_all(self, *operators: SQLAlchemyFilterOperator) -> None:
        for op in operators:
            self.register(op)

    def get(self, name: FilterOperator) -> SQLAlchemyFilterOperator | None:
        return self._operators.get(name)

    @property
    def supported_operators(self) -> set[FilterOperator]:
        return set(self._operators.keys())

    def apply(
        self, name: FilterOperator, column: Any, values: tuple[Any, ...]
    ) -> ColumnElement[bool]:
        """
        Look up the operator and apply.

        Raises:
            ValueError: If the operator is not registered.
        """
        op = self.get(name)
        if op is None:
            raise ValueError(f"Unsupported filter operator for SQLAlchemy: {name}")
        return op.apply(column, values)


def build_default_filter_registry() -> FilterOperatorRegistry:
    """Create a registry with every built-in filter operator."""
    registry = FilterOperatorRegistry()
    registry.register_all(
        EqualOperator(),
        NotEqualOperator(),
        LikeOperator(),
        LessThanOperator(),
        LessEqualOperator(),
        GreaterThanOperator(),
        GreaterEqualOperator(),
    )
    return registry


DEFAULT_FILTER_REGISTRY: FilterOperatorRegistry = build_default_filter_registry()
