"""IncludeResolver: ``include`` parameter -> relation inclusion list.

Entries are relation paths (``"pets"``, ``"pets.toy"``) or single-key
mappings ``{"pets": refinement}``. Nested paths are kept whole; the
store loads every intermediate relation along them.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .exceptions import ParameterShapeError
from .paths import PATH_SEPARATOR, resolve_relation
from .ports import IRelationRefinement, as_relation_refinement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IncludeSpec:
    relations: tuple[str, ...]
    refinement: IRelationRefinement | None = None

    @property
    def dotted(self) -> str:
        return PATH_SEPARATOR.join(self.relations)


class IncludeResolver:
    def compile(self, include_spec: Sequence[Any] | str | None) -> list[IncludeSpec]:
        if not include_spec:
            return []
        if isinstance(include_spec, str):
            include_spec = include_spec.split(",")
        elif not isinstance(include_spec, Sequence):
            raise ParameterShapeError(
                f"Expected a list of relations, got {type(include_spec).__name__}",
                "include",
            )

        specs = [
            self._parse_entry(entry, f"include.{index}")
            for index, entry in enumerate(include_spec)
        ]
        logger.debug("Compiled %d include(s)", len(specs))
        return specs

    def _parse_entry(self, entry: Any, source: str) -> IncludeSpec:
        if isinstance(entry, str):
            return IncludeSpec(resolve_relation(entry, source=source))
        if isinstance(entry, Mapping):
            if len(entry) != 1:
                raise ParameterShapeError(
                    f"Expected a single relation -> refinement pair, "
                    f"got {len(entry)} keys",
                    source,
                )
            ((path, refinement),) = entry.items()
            try:
                adapted = as_relation_refinement(refinement)
            except TypeError as e:
                raise ParameterShapeError(str(e), f"{source}.{path}") from e
            return IncludeSpec(resolve_relation(path, source=source), adapted)
        raise ParameterShapeError(
            f"Expected a relation name or mapping, got {type(entry).__name__}",
            source,
        )
