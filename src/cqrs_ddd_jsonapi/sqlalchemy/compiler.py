"""
Apply compiled JSON:API parameters to a SQLAlchemy ``Select``.

Each stage is a plain function taking and returning a ``Select``; the
pipeline calls them in a fixed order.

Filters
-------
Local clauses compile through the operator registry. Relation-qualified
clauses are grouped by their first relation segment and compiled against
the related model inside one correlated ``EXISTS`` (``any()`` for
collections, ``has()`` for scalars), recursively for deeper paths. Base
rows are never multiplied by a filter.

Sorting
-------
Sort keys through to-one relations outer-join each distinct relation path
once, through an alias (see :class:`~.resolution.JoinCache`). A path that
crosses a to-many relation sorts by a correlated scalar subquery instead:
``min()`` of the related values for ascending keys, ``max()`` for
descending ones. Ascending keys put NULLs first, descending keys put them
last.

Projection
----------
Plain fields without grouping keep ORM entities (``load_only``). Any
aggregate, or a ``group``, switches to row mode: the statement selects
labelled columns only.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, func, inspect, select
from sqlalchemy.orm import aliased, load_only

from ..exceptions import ParameterShapeError
from ..filters import FilterOperator
from ..projection import parse_field
from .operators import DEFAULT_FILTER_REGISTRY
from .resolution import (
    JoinCache,
    coerce_value,
    is_relationship,
    primary_key_names,
    resolve_attribute,
    resolve_relationship,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy import ColumnElement, Select

    from ..filters import FilterClause
    from ..includes import IncludeSpec
    from ..pagination import PageWindow
    from ..ports import IAttributeNaming
    from ..projection import ProjectionField
    from ..sorting import SortKey
    from .loading import IncludeLoader
    from .operators import FilterOperatorRegistry

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Base criteria / includes
# ---------------------------------------------------------------------------


def apply_where(
    stmt: Select[Any],
    model: type[Any],
    where: Mapping[str, Any] | None,
    naming: IAttributeNaming,
) -> Select[Any]:
    """Apply base equality criteria (``{"id": 1}``)."""
    if not where:
        return stmt
    criteria = []
    for name, value in where.items():
        column = resolve_attribute(model, naming.to_storage_name(name))
        if value is None:
            criteria.append(column.is_(None))
        else:
            criteria.append(column == coerce_value(column, value))
    return stmt.where(*criteria)


def apply_includes(
    stmt: Select[Any], loader: IncludeLoader, includes: Sequence[IncludeSpec]
) -> Select[Any]:
    if not includes:
        return stmt
    return stmt.options(*loader.options(includes))


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


def build_filter(
    model: type[Any],
    clauses: Sequence[FilterClause],
    naming: IAttributeNaming,
    *,
    registry: FilterOperatorRegistry | None = None,
) -> ColumnElement[bool] | None:
    """AND of every clause, or ``None`` when there are no clauses."""
    if not clauses:
        return None
    reg = registry or DEFAULT_FILTER_REGISTRY
    predicates = _compile_clauses(
        model, [(c.path.relations, c) for c in clauses], naming, reg
    )
    return predicates[0] if len(predicates) == 1 else and_(*predicates)


def apply_filters(
    stmt: Select[Any],
    model: type[Any],
    clauses: Sequence[FilterClause],
    naming: IAttributeNaming,
    *,
    registry: FilterOperatorRegistry | None = None,
) -> Select[Any]:
    expr = build_filter(model, clauses, naming, registry=registry)
    if expr is None:
        return stmt
    return stmt.where(expr)


def _compile_clauses(
    model: type[Any],
    entries: list[tuple[tuple[str, ...], FilterClause]],
    naming: IAttributeNaming,
    registry: FilterOperatorRegistry,
) -> list[ColumnElement[bool]]:
    # Relation groups keep the position of their first clause.
    slots: list[Any] = []
    nested: dict[str, list[tuple[tuple[str, ...], FilterClause]]] = {}
    for relations, clause in entries:
        if not relations:
            column = resolve_attribute(
                model, naming.to_storage_name(clause.path.attribute)
            )
            values = clause.values
            if clause.operator is not FilterOperator.LIKE:
                values = tuple(coerce_value(column, v) for v in values)
            slots.append(registry.apply(clause.operator, column, values))
            continue
        head, rest = relations[0], relations[1:]
        if head not in nested:
            nested[head] = []
            slots.append(head)
        nested[head].append((rest, clause))

    predicates: list[ColumnElement[bool]] = []
    for slot in slots:
        if not isinstance(slot, str):
            predicates.append(slot)
            continue
        rel_attr, target = resolve_relationship(model, naming.to_storage_name(slot))
        inner = _compile_clauses(target, nested[slot], naming, registry)
        criterion = inner[0] if len(inner) == 1 else and_(*inner)
        if rel_attr.property.uselist:
            predicates.append(rel_attr.any(criterion))
        else:
            predicates.append(rel_attr.has(criterion))
    return predicates


# ---------------------------------------------------------------------------
# Group / sort
# ---------------------------------------------------------------------------


def aggregate_expression(model: Any, field: ProjectionField) -> Any:
    """``avg(age)`` -> ``func.avg(Model.age)``; ``count(*)`` -> ``count(*)``."""
    if field.function is None:
        raise ParameterShapeError(f"Not an aggregate: {field.name!r}", "fields")
    if field.argument == "*":
        return func.count()
    column = resolve_attribute(model, field.argument or "")
    return getattr(func, field.function.value)(column)


def apply_group(
    stmt: Select[Any],
    model: type[Any],
    group: Sequence[ProjectionField],
    naming: IAttributeNaming,
) -> Select[Any]:
    if not group:
        return stmt
    columns = []
    for field in group:
        if field.is_aggregate:
            raise ParameterShapeError(
                f"Cannot group by an aggregate: {field.name!r}", "group"
            )
        columns.append(resolve_attribute(model, naming.to_storage_name(field.name)))
    return stmt.group_by(*columns)


def _crosses_collection(
    model: type[Any], relations: Sequence[str], naming: IAttributeNaming
) -> bool:
    current: Any = model
    for name in relations:
        rel_attr, current = resolve_relationship(current, naming.to_storage_name(name))
        if rel_attr.property.uselist:
            return True
    return False


def _collection_sort_expression(
    model: type[Any], key: SortKey, naming: IAttributeNaming
) -> Any:
    """
    Correlated ``min()`` (ascending) or ``max()`` (descending) of the sort
    attribute over each base row's related rows.

    Parents without related rows sort as NULL.
    """
    inner = aliased(model)
    current: Any = inner
    hops = []
    for name in key.path.relations:
        rel_attr, target = resolve_relationship(
            current, naming.to_storage_name(name)
        )
        current = aliased(target)
        hops.append(rel_attr.of_type(current))
    column = resolve_attribute(current, naming.to_storage_name(key.path.attribute))
    reduce = func.max if key.descending else func.min
    sub = select(reduce(column)).select_from(inner)
    for hop in hops:
        sub = sub.join(hop)
    correlation = [
        getattr(inner, name) == getattr(model, name)
        for name in primary_key_names(model)
    ]
    return sub.where(*correlation).scalar_subquery()


def apply_sort(
    stmt: Select[Any],
    model: type[Any],
    keys: Sequence[SortKey],
    naming: IAttributeNaming,
) -> Select[Any]:
    """
    Order *stmt* by *keys*.

    Paths through to-one relations are outer-joined. Paths crossing a
    to-many relation sort by a correlated subquery and never repeat a base
    row.
    """
    if not keys:
        return stmt
    joins = JoinCache(model, naming)
    order_clauses: list[Any] = []
    for key in keys:
        path = key.path
        if path.is_local:
            field = parse_field(path.attribute)
            if field.is_aggregate:
                expr = aggregate_expression(model, field)
            else:
                expr = resolve_attribute(model, naming.to_storage_name(path.attribute))
        elif _crosses_collection(model, path.relations, naming):
            expr = _collection_sort_expression(model, key, naming)
        else:
            stmt, alias = joins.join(stmt, path.relations)
            expr = resolve_attribute(alias, naming.to_storage_name(path.attribute))
        if key.descending:
            order_clauses.append(expr.desc().nulls_last())
        else:
            order_clauses.append(expr.asc().nulls_first())
    if len(joins):
        logger.debug("Sort joined %d relation path(s)", len(joins))
    return stmt.order_by(*order_clauses)


# ---------------------------------------------------------------------------
# Projection
# ---------------------------------------------------------------------------


def is_row_mode(
    fields: Sequence[ProjectionField], group: Sequence[ProjectionField]
) -> bool:
    """Whether the result is plain rows rather than ORM entities."""
    return bool(group) or any(f.is_aggregate for f in fields)


def apply_projection(
    stmt: Select[Any],
    model: type[Any],
    fields: Sequence[ProjectionField],
    group: Sequence[ProjectionField],
    naming: IAttributeNaming,
    *,
    keep: Sequence[Any] = (),
) -> tuple[Select[Any], frozenset[str]]:
    """
    Restrict the selected columns.

    Args:
        fields: Projection for the primary resource type.
        group: Compiled ``group`` parameter.
        keep: Extra attributes entity mode must still load (join columns
            of included relations).

    Returns:
        The statement and the result keys produced by aggregates.
    """
    if is_row_mode(fields, group):
        selected = fields or group
        columns = []
        for field in selected:
            if field.is_aggregate:
                columns.append(aggregate_expression(model, field).label(field.label))
                continue
            storage = naming.to_storage_name(field.name)
            columns.append(resolve_attribute(model, storage).label(storage))
        labels = frozenset(f.label for f in selected if f.is_aggregate)
        return stmt.with_only_columns(*columns), labels

    if not fields:
        return stmt, frozenset()
    attrs = []
    for field in fields:
        storage = naming.to_storage_name(field.name)
        if is_relationship(model, storage):
            continue
        attrs.append(resolve_attribute(model, storage))
    attrs.extend(keep)
    if not attrs:
        return stmt, frozenset()
    return stmt.options(load_only(*attrs)), frozenset()


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


def build_count_statement(
    stmt: Select[Any], model: type[Any], *, entity: bool
) -> Select[Any]:
    """
    ``SELECT count(*)`` over *stmt* without ordering.

    Entity statements count distinct primary keys of *model*.
    """
    base = stmt.order_by(None)
    if entity:
        sub = base.subquery()
        base = select(*[sub.c[col.key] for col in inspect(model).primary_key])
        base = base.distinct()
    return select(func.count()).select_from(base.subquery())


def apply_page(stmt: Select[Any], window: PageWindow | None) -> Select[Any]:
    """Apply limit and offset."""
    if window is None:
        return stmt
    if window.limit is not None:
        stmt = stmt.limit(window.limit)
    if window.offset:
        stmt = stmt.offset(window.offset)
    return stmt
