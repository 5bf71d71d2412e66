"""SortCompiler: ``sort`` parameter -> ordered ``SortKey`` list."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .exceptions import ParameterShapeError
from .paths import FieldPath, resolve_path

logger = logging.getLogger(__name__)

DESC_PREFIX = "-"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortKey:
    path: FieldPath
    direction: SortDirection = SortDirection.ASC

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESC


class SortCompiler:
    """
    Compile sort tokens into ``SortKey`` objects.

    Input order is ORDER BY precedence; keys are never re-ranked.
    A leading ``-`` selects descending order.
    """

    def compile(self, sort_spec: Sequence[str] | str | None) -> list[SortKey]:
        if not sort_spec:
            return []
        if isinstance(sort_spec, str):
            sort_spec = sort_spec.split(",")
        elif not isinstance(sort_spec, Sequence):
            raise ParameterShapeError(
                f"Expected a list of field names, got {type(sort_spec).__name__}",
                "sort",
            )

        keys = [self._parse_item(item, index) for index, item in enumerate(sort_spec)]
        logger.debug("Compiled %d sort key(s)", len(keys))
        return keys

    def _parse_item(self, item: Any, index: int) -> SortKey:
        source = f"sort.{index}"
        if not isinstance(item, str):
            raise ParameterShapeError(
                f"Expected a field name, got {type(item).__name__}", source
            )
        if item.startswith(DESC_PREFIX):
            return SortKey(
                resolve_path(item[len(DESC_PREFIX) :], source=source),
                SortDirection.DESC,
            )
        return SortKey(resolve_path(item, source=source), SortDirection.ASC)
