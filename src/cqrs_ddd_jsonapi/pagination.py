"""PaginationCalculator: page parameters / configured default -> limit/offset."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from .config import PaginationConfig
    from .params import PageParams


class PageWindow(NamedTuple):
    limit: int | None
    offset: int


class PaginationResult(NamedTuple):
    limit: int | None
    offset: int
    row_count: int
    page_count: int | None

    def to_dict(self) -> dict[str, int | None]:
        return {
            "limit": self.limit,
            "offset": self.offset,
            "rowCount": self.row_count,
            "pageCount": self.page_count,
        }


class PaginationCalculator:
    """
    Resolve the page window for one call.

    Explicit ``page`` values override the registration-time default field by
    field. With neither present no window applies and no page count is
    computed.
    """

    def __init__(self, default: PaginationConfig | None = None) -> None:
        self._default = default

    def compile(self, page: PageParams | None) -> PageWindow | None:
        limit = page.limit if page is not None else None
        offset = page.offset if page is not None else None
        if self._default is not None:
            limit = limit if limit is not None else self._default.limit
            offset = offset if offset is not None else self._default.offset
        if limit is None and offset is None:
            return None
        return PageWindow(limit=limit, offset=offset or 0)

    @staticmethod
    def paginate(window: PageWindow, row_count: int) -> PaginationResult:
        """Build the result metadata; ``page_count`` needs a positive limit."""
        page_count = (
            math.ceil(row_count / window.limit)
            if window.limit is not None and window.limit > 0
            else None
        )
        return PaginationResult(
            limit=window.limit,
            offset=window.offset,
            row_count=row_count,
            page_count=page_count,
        )
