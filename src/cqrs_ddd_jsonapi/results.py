"""JsonApiCollection: records of one collection fetch plus page metadata."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar, overload

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .pagination import PaginationResult

T = TypeVar("T")


class JsonApiCollection(Generic[T]):
    """
    Ordered records of a collection fetch.

    ``pagination`` is set only when a page limit was in effect for the
    call; otherwise it is ``None``.

    Usage::

        people = await query.fetch(session, {"page": {"limit": 10}})
        for person in people:
            ...
        people.pagination.page_count
    """

    __slots__ = ("_records", "pagination")

    def __init__(
        self, records: list[T], pagination: PaginationResult | None = None
    ) -> None:
        self._records = records
        self.pagination = pagination

    @property
    def records(self) -> list[T]:
        return list(self._records)

    def __iter__(self) -> Iterator[T]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> list[T]: ...

    def __getitem__(self, index: int | slice) -> T | list[T]:
        return self._records[index]

    def first(self) -> T | None:
        """Return the first record, or ``None`` if the collection is empty."""
        return self._records[0] if self._records else None

    def to_dict(self) -> dict[str, Any]:
        """Envelope form: ``{"data": [...], "meta": {"pagination": {...}}}``."""
        meta: dict[str, Any] = {}
        if self.pagination is not None:
            meta["pagination"] = self.pagination.to_dict()
        return {"data": list(self._records), "meta": meta}

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(records={len(self._records)}, "
            f"pagination={self.pagination!r})"
        )
