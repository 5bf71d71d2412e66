"""
FilterCompiler: ``filter`` parameter -> ordered ``FilterClause`` list.

Grammar::

    filter[<field>]=<values>            -> eq
    filter[<op>][<field>]=<values>      -> op in {like, not, lt, lte, gt, gte}

``<values>`` is a comma list (``\\,`` escapes a literal comma). The exact
text ``"null"`` and a real ``None`` both become the null sentinel, so a
caller cannot ask for the literal string ``"null"``.

Composition: values of one clause combine with OR (``not``: AND of the
negations); clauses combine with AND.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .exceptions import ParameterShapeError, UnsupportedFilterValueError
from .paths import FieldPath, resolve_path
from .tokenizer import split_values

logger = logging.getLogger(__name__)

NULL_TEXT = "null"


class FilterOperator(str, Enum):
    """Closed set of filter operators."""

    EQ = "eq"
    LIKE = "like"
    NOT = "not"
    LT = "lt"
    LTE = "lte"
    GT = "gt"
    GTE = "gte"

    @property
    def is_ordering(self) -> bool:
        return self in _ORDERING_OPERATORS


_ORDERING_OPERATORS = frozenset(
    {FilterOperator.LT, FilterOperator.LTE, FilterOperator.GT, FilterOperator.GTE}
)

# Top-level filter keys that name an operator instead of a field.
RESERVED_OPERATORS: dict[str, FilterOperator] = {
    op.value: op for op in FilterOperator if op is not FilterOperator.EQ
}


@dataclass(frozen=True)
class FilterClause:
    """One predicate: operator + field path + non-empty value tuple.

    ``None`` in ``values`` is the null sentinel.
    """

    operator: FilterOperator
    path: FieldPath
    values: tuple[Any, ...]

    def __post_init__(self) -> None:
        if not self.values:
            raise ParameterShapeError(
                "A filter clause needs at least one value", str(self.path)
            )

    @property
    def has_null(self) -> bool:
        return any(v is None for v in self.values)

    @property
    def non_null_values(self) -> tuple[Any, ...]:
        return tuple(v for v in self.values if v is not None)


def _interpret(value: Any) -> Any:
    if isinstance(value, str) and value == NULL_TEXT:
        return None
    return value


def _check_scalar(value: Any, source: str) -> None:
    if value is None or isinstance(value, (str, int, float, bool)):
        return
    raise ParameterShapeError(
        f"Expected a scalar filter value, got {type(value).__name__}", source
    )


class FilterCompiler:
    """Compile a filter mapping into ``FilterClause`` objects (input order)."""

    def compile(self, filter_spec: Mapping[str, Any] | None) -> list[FilterClause]:
        if not filter_spec:
            return []
        if not isinstance(filter_spec, Mapping):
            raise ParameterShapeError(
                f"Expected a mapping, got {type(filter_spec).__name__}", "filter"
            )

        clauses: list[FilterClause] = []
        for key, raw in filter_spec.items():
            operator = RESERVED_OPERATORS.get(key)
            if operator is None:
                clauses.append(self._clause(FilterOperator.EQ, key, raw, "filter"))
                continue
            source = f"filter.{key}"
            if not isinstance(raw, Mapping):
                raise ParameterShapeError(
                    f"Operator {key!r} expects a mapping of field -> value, "
                    f"got {type(raw).__name__}",
                    source,
                )
            for field_key, field_raw in raw.items():
                clauses.append(self._clause(operator, field_key, field_raw, source))

        logger.debug("Compiled %d filter clause(s)", len(clauses))
        return clauses

    def _clause(
        self, operator: FilterOperator, key: str, raw: Any, source: str
    ) -> FilterClause:
        path = resolve_path(key, source=source)
        field_source = f"{source}.{key}"
        if isinstance(raw, Mapping):
            raise ParameterShapeError(
                f"Unknown filter operator {key!r}; expected one of "
                f"{', '.join(sorted(RESERVED_OPERATORS))}",
                field_source,
            )

        tokens = split_values(raw)
        for token in tokens:
            _check_scalar(token, field_source)
        values = tuple(_interpret(t) for t in tokens)
        if not values:
            raise ParameterShapeError("Empty value list", field_source)
        if operator.is_ordering and len(values) > 1:
            raise UnsupportedFilterValueError(
                f"Operator {operator.value!r} takes a single value, "
                f"got {len(values)}",
                field_source,
            )
        return FilterClause(operator=operator, path=path, values=values)
