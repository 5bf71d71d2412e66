"""Dotted field keys -> relation path + terminal attribute."""

from __future__ import annotations

from dataclasses import dataclass

from .exceptions import ParameterShapeError

PATH_SEPARATOR = "."


@dataclass(frozen=True)
class FieldPath:
    """
    A field reference, possibly reached through relations.

    ``pets.toy.type`` -> ``relations=("pets", "toy")``, ``attribute="type"``.
    A local field has an empty ``relations`` tuple.
    """

    relations: tuple[str, ...]
    attribute: str

    @property
    def is_local(self) -> bool:
        return not self.relations

    @property
    def relation_key(self) -> str:
        """Dotted relation path (``""`` for a local field)."""
        return PATH_SEPARATOR.join(self.relations)

    @property
    def dotted(self) -> str:
        return PATH_SEPARATOR.join((*self.relations, self.attribute))

    def __str__(self) -> str:
        return self.dotted


def _segments(key: str, source: str | None) -> list[str]:
    if not isinstance(key, str) or not key:
        raise ParameterShapeError(
            f"Expected a non-empty field name, got {key!r}", source
        )
    parts = key.split(PATH_SEPARATOR)
    if any(not p for p in parts):
        raise ParameterShapeError(f"Empty segment in field path {key!r}", source)
    return parts


def resolve_path(key: str, *, source: str | None = None) -> FieldPath:
    """Split *key* on ``.``; the last segment is the attribute."""
    parts = _segments(key, source)
    return FieldPath(relations=tuple(parts[:-1]), attribute=parts[-1])


def resolve_relation(key: str, *, source: str | None = None) -> tuple[str, ...]:
    """Split a relation-only path (used by includes); every segment is a relation."""
    return tuple(_segments(key, source))
