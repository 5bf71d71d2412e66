"""
Relationship loading for ``include``.

Includes become ``selectinload`` options. Paths sharing a prefix are merged
into one option tree, so ``pets`` and ``pets.toy`` load ``pets`` once and
a refinement given for ``pets`` is not lost to the longer path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from sqlalchemy.orm import load_only, selectinload

from ..naming import IDENTITY_NAMING
from .resolution import (
    coerce_value,
    column_attributes,
    is_relationship,
    resolve_attribute,
    resolve_relationship,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from ..includes import IncludeSpec
    from ..ports import IAttributeNaming, IRelationRefinement
    from ..projection import ProjectionField

logger = logging.getLogger(__name__)


class RelationQuery:
    """
    Criteria collector handed to an include refinement.

    Scoped to the relation's target model; everything collected is attached
    to the relationship load with ``.and_()``::

        def only_barney(query: RelationQuery) -> None:
            query.filter_by(name="Barney")
    """

    def __init__(
        self, model: type[Any], naming: IAttributeNaming = IDENTITY_NAMING
    ) -> None:
        self.model = model
        self._naming = naming
        self._criteria: list[Any] = []

    @property
    def criteria(self) -> tuple[Any, ...]:
        return tuple(self._criteria)

    def where(self, *criteria: Any) -> RelationQuery:
        """Add SQLAlchemy boolean expressions against ``self.model``."""
        self._criteria.extend(criteria)
        return self

    def filter_by(self, **values: Any) -> RelationQuery:
        """Add equality criteria by attribute name (``None`` means IS NULL)."""
        for name, value in values.items():
            column = resolve_attribute(self.model, self._naming.to_storage_name(name))
            self._criteria.append(
                column.is_(None)
                if value is None
                else column == coerce_value(column, value)
            )
        return self


@dataclass
class _IncludeNode:
    refinement: IRelationRefinement | None = None
    children: dict[str, _IncludeNode] = field(default_factory=dict)


def _build_tree(includes: Sequence[IncludeSpec]) -> dict[str, _IncludeNode]:
    roots: dict[str, _IncludeNode] = {}
    for spec in includes:
        level = roots
        node: _IncludeNode | None = None
        for name in spec.relations:
            node = level.setdefault(name, _IncludeNode())
            level = node.children
        if node is not None and spec.refinement is not None:
            node.refinement = spec.refinement
    return roots


def join_columns(prop: Any, *, remote: bool) -> list[Any]:
    """Table columns a relationship join reads on one side."""
    return [
        remote_col if remote else local_col
        for local_col, remote_col in prop.local_remote_pairs
    ]


class IncludeLoader:
    """Turn ``IncludeSpec`` objects into loader options for *model*."""

    def __init__(
        self,
        model: type[Any],
        naming: IAttributeNaming,
        projections: Mapping[str, Sequence[ProjectionField]] | None = None,
    ) -> None:
        self._model = model
        self._naming = naming
        self._projections = projections or {}

    def options(self, includes: Sequence[IncludeSpec]) -> list[Any]:
        tree = _build_tree(includes)
        return [self._option(self._model, name, node) for name, node in tree.items()]

    def parent_columns(self, includes: Sequence[IncludeSpec]) -> list[Any]:
        """Attributes of *model* that its first-level includes join on."""
        attrs: list[Any] = []
        for name in _build_tree(includes):
            rel_attr, _ = resolve_relationship(
                self._model, self._naming.to_storage_name(name)
            )
            attrs.extend(
                column_attributes(
                    self._model, join_columns(rel_attr.property, remote=False)
                )
            )
        return attrs

    def _option(self, model: type[Any], name: str, node: _IncludeNode) -> Any:
        rel_attr, target = resolve_relationship(
            model, self._naming.to_storage_name(name)
        )
        prop = rel_attr.property
        if node.refinement is not None:
            query = RelationQuery(target, self._naming)
            node.refinement.refine(query)
            if query.criteria:
                rel_attr = rel_attr.and_(*query.criteria)

        loader = selectinload(rel_attr)
        sub_options = [
            self._option(target, child_name, child)
            for child_name, child in node.children.items()
        ]
        restricted = self._restrict(target, prop, node)
        if restricted is not None:
            sub_options.append(restricted)
        if sub_options:
            loader = loader.options(*sub_options)
        return loader

    def _restrict(self, target: type[Any], prop: Any, node: _IncludeNode) -> Any:
        """``load_only`` for a relation whose resource type has ``fields``."""
        fields = self._projections.get(getattr(target, "__tablename__", ""))
        if not fields:
            return None
        attrs: list[Any] = []
        for f in fields:
            if f.is_aggregate:
                continue
            storage = self._naming.to_storage_name(f.name)
            if is_relationship(target, storage):
                continue
            attrs.append(resolve_attribute(target, storage))
        attrs.extend(column_attributes(target, join_columns(prop, remote=True)))
        for child_name in node.children:
            child_attr, _ = resolve_relationship(
                target, self._naming.to_storage_name(child_name)
            )
            attrs.extend(
                column_attributes(
                    target, join_columns(child_attr.property, remote=False)
                )
            )
        if not attrs:
            return None
        logger.debug("Restricting %s to %d column(s)", target.__name__, len(attrs))
        return load_only(*attrs)
