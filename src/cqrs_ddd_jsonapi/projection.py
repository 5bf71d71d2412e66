"""
FieldProjector: ``fields`` / ``group`` parameters -> projection fields.

A field written as ``function(argument)`` with a whitelisted function
(``count``, ``sum``, ``avg``, ``max``, ``min``) is an aggregate reference:
it is passed through verbatim, is exempt from attribute naming, and its
result is keyed by the function name (``avg(age)`` -> ``avg``).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .exceptions import ParameterShapeError

logger = logging.getLogger(__name__)


class AggregateFunction(str, Enum):
    COUNT = "count"
    SUM = "sum"
    AVG = "avg"
    MAX = "max"
    MIN = "min"


_AGGREGATE_RE = re.compile(
    r"^(?P<function>" + "|".join(f.value for f in AggregateFunction) + r")"
    r"\((?P<argument>.+)\)$"
)


@dataclass(frozen=True)
class ProjectionField:
    """A plain attribute reference or an aggregate reference."""

    name: str
    function: AggregateFunction | None = None
    argument: str | None = None

    @property
    def is_aggregate(self) -> bool:
        return self.function is not None

    @property
    def label(self) -> str:
        """Result key: the function name for aggregates, else the field name."""
        return self.function.value if self.function is not None else self.name


def parse_field(name: str) -> ProjectionField:
    """Classify one field name as plain or aggregate."""
    match = _AGGREGATE_RE.match(name)
    if match is None:
        return ProjectionField(name=name)
    return ProjectionField(
        name=name,
        function=AggregateFunction(match.group("function")),
        argument=match.group("argument"),
    )


def _field_list(raw: Any, source: str) -> list[str]:
    if isinstance(raw, str):
        raw = [part for part in raw.split(",") if part]
    elif not isinstance(raw, Sequence):
        raise ParameterShapeError(
            f"Expected a list of field names, got {type(raw).__name__}", source
        )
    names = list(raw)
    for index, name in enumerate(names):
        if not isinstance(name, str) or not name:
            raise ParameterShapeError(
                f"Expected a non-empty field name, got {name!r}", f"{source}.{index}"
            )
    return names


class FieldProjector:
    """Compile ``fields`` (per resource type) and ``group`` parameters."""

    def compile(
        self, fields_spec: Mapping[str, Any] | None
    ) -> dict[str, list[ProjectionField]]:
        if not fields_spec:
            return {}
        if not isinstance(fields_spec, Mapping):
            raise ParameterShapeError(
                f"Expected a mapping of type -> fields, "
                f"got {type(fields_spec).__name__}",
                "fields",
            )
        projections = {
            resource_type: [
                parse_field(name)
                for name in _field_list(raw, f"fields.{resource_type}")
            ]
            for resource_type, raw in fields_spec.items()
        }
        logger.debug(
            "Compiled projections for resource type(s): %s", ", ".join(projections)
        )
        return projections

    def compile_group(
        self, group_spec: Sequence[str] | str | None
    ) -> list[ProjectionField]:
        if not group_spec:
            return []
        return [parse_field(name) for name in _field_list(group_spec, "group")]
