"""SQLAlchemy store adapter for the JSON:API parameter translator."""

from .compiler import (
    aggregate_expression,
    apply_filters,
    apply_group,
    apply_includes,
    apply_page,
    apply_projection,
    apply_sort,
    apply_where,
    build_count_statement,
    build_filter,
    is_row_mode,
)
from .loading import IncludeLoader, RelationQuery
from .operators import (
    DEFAULT_FILTER_REGISTRY,
    FilterOperatorRegistry,
    SQLAlchemyFilterOperator,
    build_default_filter_registry,
)
from .resolution import JoinCache

__all__ = [
    "DEFAULT_FILTER_REGISTRY",
    "FilterOperatorRegistry",
    "IncludeLoader",
    "JoinCache",
    "RelationQuery",
    "SQLAlchemyFilterOperator",
    "aggregate_expression",
    "apply_filters",
    "apply_group",
    "apply_includes",
    "apply_page",
    "apply_projection",
    "apply_sort",
    "apply_where",
    "build_count_statement",
    "build_default_filter_registry",
    "build_filter",
    "is_row_mode",
]
