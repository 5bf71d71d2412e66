"""JSON:API query parameters translated into SQLAlchemy statements."""

from __future__ import annotations

from .config import JsonApiConfig, PaginationConfig
from .exceptions import (
    ConfigurationError,
    JsonApiError,
    ParameterShapeError,
    UnsupportedFilterValueError,
)
from .filters import FilterClause, FilterCompiler, FilterOperator
from .includes import IncludeResolver, IncludeSpec
from .naming import IDENTITY_NAMING, IdentityNaming, SnakeCaseNaming
from .pagination import PageWindow, PaginationCalculator, PaginationResult
from .params import PageParams, ParameterSet
from .paths import FieldPath, resolve_path, resolve_relation
from .pipeline import CompiledQuery, JsonApiQuery
from .plugin import JsonApiParams
from .ports import IAttributeNaming, IRelationRefinement, IStatementRefinement
from .projection import AggregateFunction, FieldProjector, ProjectionField
from .results import JsonApiCollection
from .sorting import SortCompiler, SortDirection, SortKey
from .sqlalchemy.loading import RelationQuery
from .tokenizer import split_values

__all__ = [
    "IDENTITY_NAMING",
    "AggregateFunction",
    "CompiledQuery",
    "ConfigurationError",
    "FieldPath",
    "FieldProjector",
    "FilterClause",
    "FilterCompiler",
    "FilterOperator",
    "IAttributeNaming",
    "IRelationRefinement",
    "IStatementRefinement",
    "IdentityNaming",
    "IncludeResolver",
    "IncludeSpec",
    "JsonApiCollection",
    "JsonApiConfig",
    "JsonApiError",
    "JsonApiParams",
    "JsonApiQuery",
    "PageParams",
    "PageWindow",
    "PaginationCalculator",
    "PaginationConfig",
    "PaginationResult",
    "ParameterSet",
    "ParameterShapeError",
    "ProjectionField",
    "RelationQuery",
    "SnakeCaseNaming",
    "SortCompiler",
    "SortDirection",
    "SortKey",
    "UnsupportedFilterValueError",
    "resolve_path",
    "resolve_relation",
    "split_values",
]
