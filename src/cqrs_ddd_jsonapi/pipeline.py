"""
JsonApiQuery: compile a parameter set against one model and execute it.

Stage order is fixed::

    base criteria -> include -> filter -> group -> sort -> projection
        -> pagination -> statement refinement -> execute

Every parameter is compiled before the statement is built, so a shape
error raises before the session is touched. Store errors (unknown
attributes, driver failures) propagate unmodified.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import select

from .filters import FilterCompiler
from .includes import IncludeResolver
from .naming import IDENTITY_NAMING
from .pagination import PaginationCalculator
from .params import ParameterSet
from .ports import as_statement_refinement
from .projection import FieldProjector
from .results import JsonApiCollection
from .sorting import SortCompiler
from .sqlalchemy.compiler import (
    apply_filters,
    apply_group,
    apply_includes,
    apply_page,
    apply_projection,
    apply_sort,
    apply_where,
    build_count_statement,
    is_row_mode,
)
from .sqlalchemy.loading import IncludeLoader
from .sqlalchemy.resolution import primary_key_names

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from sqlalchemy import Result, Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from .config import PaginationConfig
    from .pagination import PageWindow
    from .ports import IAttributeNaming, IStatementRefinement
    from .sqlalchemy.operators import FilterOperatorRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledQuery:
    """Statements and metadata for one call, ready to execute."""

    statement: Select[Any]
    count_statement: Select[Any] | None
    window: PageWindow | None
    single: bool
    row_mode: bool
    aggregate_labels: frozenset[str]


class JsonApiQuery:
    """
    JSON:API parameter translation for one SQLAlchemy model.

    Usage::

        query = JsonApiQuery(Person, naming=SnakeCaseNaming())
        people = await query.fetch(
            session,
            {"filter": {"like": {"firstName": "Ba"}}, "sort": ["-age"]},
        )
        barney = await query.fetch(session, {"include": ["pets"]}, where={"id": 1})

    Holds no per-call state; one instance may serve concurrent calls.
    """

    def __init__(
        self,
        model: type[Any],
        *,
        naming: IAttributeNaming | None = None,
        pagination: PaginationConfig | None = None,
        registry: FilterOperatorRegistry | None = None,
        resource_type: str | None = None,
    ) -> None:
        self._model = model
        self._naming = naming or IDENTITY_NAMING
        self._registry = registry
        self._resource_type = resource_type or getattr(
            model, "__tablename__", model.__name__
        )
        self._filters = FilterCompiler()
        self._sorts = SortCompiler()
        self._projector = FieldProjector()
        self._includes = IncludeResolver()
        self._pagination = PaginationCalculator(pagination)

    @property
    def model(self) -> type[Any]:
        return self._model

    @property
    def resource_type(self) -> str:
        """Key of the primary resource in ``fields`` (the table name by default)."""
        return self._resource_type

    def resolve_single(
        self, single: bool | None, where: Mapping[str, Any] | None
    ) -> bool:
        """Single-record mode unless told otherwise when *where* pins the key."""
        if single is not None:
            return single
        if not where:
            return False
        keys = {self._naming.to_storage_name(k) for k in where}
        return set(primary_key_names(self._model)) <= keys

    # -- compilation --------------------------------------------------------

    def compile(
        self,
        params: Mapping[str, Any] | ParameterSet | None = None,
        *,
        single: bool | None = None,
        where: Mapping[str, Any] | None = None,
        resource_type: str | None = None,
    ) -> CompiledQuery:
        """
        Build the statements for one call without executing anything.

        Raises:
            ParameterShapeError: If a parameter has the wrong shape.
            AttributeError: If a field or relation does not exist on the model.
        """
        parameters = ParameterSet.parse(params)
        clauses = self._filters.compile(parameters.filter)
        sort_keys = self._sorts.compile(parameters.sort)
        projections = self._projector.compile(parameters.fields)
        group = self._projector.compile_group(parameters.group)
        includes = self._includes.compile(parameters.include)

        single_mode = self.resolve_single(single, where)
        window = None if single_mode else self._pagination.compile(parameters.page)
        fields = projections.get(resource_type or self._resource_type, [])
        row_mode = is_row_mode(fields, group)
        loader = IncludeLoader(self._model, self._naming, projections)

        model, naming = self._model, self._naming
        stmt: Select[Any] = select(model)
        stmt = apply_where(stmt, model, where, naming)
        if row_mode:
            if includes:
                logger.debug("Row mode: %d include(s) skipped", len(includes))
        else:
            stmt = apply_includes(stmt, loader, includes)
        stmt = apply_filters(stmt, model, clauses, naming, registry=self._registry)
        stmt = apply_group(stmt, model, group, naming)
        stmt = apply_sort(stmt, model, sort_keys, naming)
        keep = loader.parent_columns(includes) if fields and not row_mode else []
        stmt, aggregate_labels = apply_projection(
            stmt, model, fields, group, naming, keep=keep
        )

        count_stmt = None
        if single_mode:
            stmt = stmt.limit(1)
        else:
            if window is not None and window.limit is not None:
                count_stmt = build_count_statement(stmt, model, entity=not row_mode)
            stmt = apply_page(stmt, window)

        logger.debug(
            "Compiled %s query for %s (row_mode=%s, filters=%d, sort=%d, includes=%d)",
            "single" if single_mode else "collection",
            model.__name__,
            row_mode,
            len(clauses),
            len(sort_keys),
            len(includes),
        )
        return CompiledQuery(
            statement=stmt,
            count_statement=count_stmt,
            window=window,
            single=single_mode,
            row_mode=row_mode,
            aggregate_labels=aggregate_labels,
        )

    # -- execution ----------------------------------------------------------

    async def fetch(
        self,
        session: AsyncSession,
        params: Mapping[str, Any] | ParameterSet | None = None,
        *,
        single: bool | None = None,
        where: Mapping[str, Any] | None = None,
        resource_type: str | None = None,
        transform: Callable[[Any], Any] | None = None,
        refine: IStatementRefinement | Callable[[Any], Any] | None = None,
    ) -> Any:
        """
        Compile and execute one call.

        Args:
            session: Async session the statements run on.
            params: ``filter`` / ``sort`` / ``fields`` / ``include`` /
                ``group`` / ``page`` mapping.
            single: Force single-record (``True``) or collection (``False``)
                mode; ``None`` picks single mode when *where* pins the
                primary key.
            where: Base equality criteria.
            resource_type: Key of the primary resource in ``fields``.
            transform: Applied to every materialized record.
            refine: Receives the final ``Select`` and returns the one to
                execute; it does not affect the pagination count.

        Returns:
            ``JsonApiCollection`` in collection mode; the record or ``None``
            in single mode.
        """
        statement_refinement = (
            as_statement_refinement(refine) if refine is not None else None
        )
        compiled = self.compile(
            params, single=single, where=where, resource_type=resource_type
        )

        pagination = None
        if compiled.count_statement is not None and compiled.window is not None:
            row_count = (await session.execute(compiled.count_statement)).scalar_one()
            pagination = PaginationCalculator.paginate(compiled.window, row_count)

        stmt = compiled.statement
        if statement_refinement is not None:
            stmt = statement_refinement.refine(stmt)

        result = await session.execute(stmt)
        records = self._materialize(stmt, result, compiled.aggregate_labels)
        if transform is not None:
            records = [transform(r) for r in records]

        if compiled.single:
            return records[0] if records else None
        return JsonApiCollection(records, pagination)

    def _is_entity_statement(self, stmt: Select[Any]) -> bool:
        descriptions = stmt.column_descriptions
        return len(descriptions) == 1 and descriptions[0].get("expr") is self._model

    def _materialize(
        self, stmt: Select[Any], result: Result[Any], aggregate_labels: frozenset[str]
    ) -> list[Any]:
        if self._is_entity_statement(stmt):
            return list(result.scalars().unique().all())
        return [
            {self._domain_key(k, aggregate_labels): v for k, v in row.items()}
            for row in result.mappings().all()
        ]

    def _domain_key(self, key: str, aggregate_labels: frozenset[str]) -> str:
        if key in aggregate_labels:
            return key
        return self._naming.to_domain_name(key)
