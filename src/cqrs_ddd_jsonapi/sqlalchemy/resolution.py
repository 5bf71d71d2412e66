"""
Attribute / relationship resolution against SQLAlchemy mapped classes.

Nothing here validates a schema up front: an unknown attribute or
relationship raises ``AttributeError`` at the point it is looked up, and
that error propagates to the caller unchanged.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect
from sqlalchemy.orm import RelationshipProperty, aliased

if TYPE_CHECKING:
    from sqlalchemy import Select

    from ..ports import IAttributeNaming

_TRUE_TEXT = frozenset({"true", "1", "yes"})
_FALSE_TEXT = frozenset({"false", "0", "no"})


def _model_name(model: Any) -> str:
    return getattr(model, "__name__", None) or type(model).__name__


def resolve_attribute(model: Any, name: str) -> Any:
    """Return the mapped attribute *name* of *model* (class or alias)."""
    attr = getattr(model, name, None)
    if attr is None:
        raise AttributeError(f"Model {_model_name(model)} has no attribute {name}")
    return attr


def resolve_relationship(model: Any, name: str) -> tuple[Any, type[Any]]:
    """Return ``(relationship attribute, target class)``."""
    attr = getattr(model, name, None)
    prop = getattr(attr, "property", None)
    if not isinstance(prop, RelationshipProperty):
        raise AttributeError(
            f"Model {_model_name(model)} has no relationship {name}"
        )
    return attr, prop.mapper.class_


def is_relationship(model: Any, name: str) -> bool:
    return isinstance(
        getattr(getattr(model, name, None), "property", None), RelationshipProperty
    )


def primary_key_names(model: type[Any]) -> list[str]:
    mapper = inspect(model)
    return [mapper.get_property_by_column(col).key for col in mapper.primary_key]


def column_attributes(model: type[Any], columns: Any) -> list[Any]:
    """Map table columns of *model* back to its mapped attributes.

    Columns the mapper does not own (e.g. an association table's) are
    skipped.
    """
    mapper = inspect(model)
    return [
        getattr(model, mapper.get_property_by_column(col).key)
        for col in columns
        if mapper.columns.contains_column(col)
    ]


def python_type(column: Any) -> type[Any] | None:
    col_type = getattr(column, "type", None)
    if col_type is None:
        return None
    try:
        return col_type.python_type  # type: ignore[no-any-return]
    except NotImplementedError:
        return None


def coerce_value(column: Any, value: Any) -> Any:
    """
    Convert a string token to the column's Python type where that is
    unambiguous (``"25"`` -> ``25`` for an ``Integer`` column).

    Values that do not convert are passed through; the store decides.
    """
    if not isinstance(value, str):
        return value
    target = python_type(column)
    if target is None or target is str:
        return value
    try:
        if target is bool:
            lowered = value.lower()
            if lowered in _TRUE_TEXT:
                return True
            if lowered in _FALSE_TEXT:
                return False
            return value
        if target in (int, float, Decimal):
            return target(value)
        if target in (dt.datetime, dt.date, dt.time):
            return target.fromisoformat(value)
    except (ValueError, InvalidOperation):
        return value
    return value


class JoinCache:
    """
    Outer joins keyed by dotted relation path.

    Every relation path is joined once, through its own alias, no matter how
    many sort keys reference it.
    """

    def __init__(self, model: type[Any], naming: IAttributeNaming) -> None:
        self._model = model
        self._naming = naming
        self._aliases: dict[str, Any] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._aliases

    def __len__(self) -> int:
        return len(self._aliases)

    def join(
        self, stmt: Select[Any], relations: tuple[str, ...]
    ) -> tuple[Select[Any], Any]:
        """Join *relations* (if not already joined); return ``(stmt, alias)``."""
        current: Any = self._model
        for depth, name in enumerate(relations):
            key = ".".join(relations[: depth + 1])
            cached = self._aliases.get(key)
            if cached is not None:
                current = cached
                continue
            rel_attr, target = resolve_relationship(
                current, self._naming.to_storage_name(name)
            )
            alias = aliased(target)
            stmt = stmt.outerjoin(rel_attr.of_type(alias))
            self._aliases[key] = alias
            current = alias
        return stmt, current
