"""Capability protocols injected by the caller."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable


@runtime_checkable
class IAttributeNaming(Protocol):
    """Translate attribute names between the API and the storage layer.

    Applied to plain fields and relation names only; aggregate
    expressions such as ``avg(age)`` never pass through it.
    """

    def to_storage_name(self, name: str) -> str:
        """API name -> mapped attribute name (e.g. ``firstName`` -> ``first_name``)."""
        ...

    def to_domain_name(self, name: str) -> str:
        """Mapped attribute / result key -> API name."""
        ...


@runtime_checkable
class IRelationRefinement(Protocol):
    """Narrow the rows loaded for one included relation.

    ``query`` is a :class:`~cqrs_ddd_jsonapi.sqlalchemy.loading.RelationQuery`
    scoped to the relation's target model.
    """

    def refine(self, query: Any) -> None:
        ...


@runtime_checkable
class IStatementRefinement(Protocol):
    """Last-chance modification of the compiled statement before execution.

    Statements are immutable, so the refined statement must be returned.
    """

    def refine(self, stmt: Any) -> Any:
        ...


class _CallableRelationRefinement:
    __slots__ = ("_fn",)

    def __init__(self, fn: Callable[[Any], Any]) -> None:
        self._fn = fn

    def refine(self, query: Any) -> None:
        self._fn(query)


class _CallableStatementRefinement:
    __slots__ = ("_fn",)

    def __init__(self, fn: Callable[[Any], Any]) -> None:
        self._fn = fn

    def refine(self, stmt: Any) -> Any:
        refined = self._fn(stmt)
        if refined is None:
            raise TypeError(
                "Statement refinement returned None; return the refined statement"
            )
        return refined


def as_relation_refinement(value: Any) -> IRelationRefinement:
    """Accept an ``IRelationRefinement`` or a plain ``callable(query)``."""
    if isinstance(value, IRelationRefinement):
        return value
    if callable(value):
        return _CallableRelationRefinement(value)
    raise TypeError(f"Expected a relation refinement, got {type(value).__name__}")


def as_statement_refinement(value: Any) -> IStatementRefinement:
    """Accept an ``IStatementRefinement`` or a plain ``callable(stmt) -> stmt``."""
    if isinstance(value, IStatementRefinement):
        return value
    if callable(value):
        return _CallableStatementRefinement(value)
    raise TypeError(f"Expected a statement refinement, got {type(value).__name__}")
