"""ParameterSet: the validated, immutable per-call parameter object."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ParameterShapeError


def _split_csv(value: Any) -> Any:
    """Accept the query-string form ``"a,b"`` for list parameters."""
    if isinstance(value, str):
        return [part for part in value.split(",") if part]
    return value


class PageParams(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    limit: int | None = Field(default=None, ge=0)
    offset: int | None = Field(default=None, ge=0)


class ParameterSet(BaseModel):
    """
    Parsed request parameters.

    Built once per query call and read-only afterwards. Only the outer
    shape is validated here (unknown top-level keys are rejected); each
    compiler checks its own sub-grammar.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    filter: dict[str, Any] = Field(default_factory=dict)
    sort: list[str] = Field(default_factory=list)
    fields: dict[str, list[str]] = Field(default_factory=dict)
    include: list[Any] = Field(default_factory=list)
    group: list[str] = Field(default_factory=list)
    page: PageParams | None = None

    @field_validator("sort", "group", "include", mode="before")
    @classmethod
    def _split_list(cls, value: Any) -> Any:
        return _split_csv(value) if value is not None else []

    @field_validator("fields", mode="before")
    @classmethod
    def _split_fields(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, Mapping):
            return {k: _split_csv(v) for k, v in value.items()}
        return value

    @field_validator("filter", mode="before")
    @classmethod
    def _default_filter(cls, value: Any) -> Any:
        return {} if value is None else value

    @classmethod
    def parse(cls, raw: Mapping[str, Any] | ParameterSet | None) -> ParameterSet:
        """Validate *raw*; ``None`` means "no parameters"."""
        if isinstance(raw, ParameterSet):
            return raw
        if raw is None:
            return cls()
        if not isinstance(raw, Mapping):
            raise ParameterShapeError(
                f"Expected a mapping of parameters, got {type(raw).__name__}"
            )
        try:
            return cls.model_validate(dict(raw))
        except ValidationError as e:
            first = e.errors()[0]
            path = ".".join(str(p) for p in first["loc"])
            raise ParameterShapeError(first["msg"], path or None) from e
