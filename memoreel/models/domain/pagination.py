"""
Cursor pagination contract.

Queries fetch pageable.limit() rows (one more than a page) ordered by id
descending and restricted to ids below the cursor. paginate() then trims the
lookahead row and reports whether it existed, so no COUNT query is needed.
"""

from collections.abc import Callable, Sequence
from typing import TypeVar

from pydantic import BaseModel, Field

from memoreel.utils.ids import FIRST_PAGE_CURSOR

T = TypeVar("T")


class Pageable(BaseModel):
    """Request side of a page: how many rows, starting below which id."""

    per_page: int = Field(default=20, ge=1)
    cursor: str = FIRST_PAGE_CURSOR

    def limit(self) -> int:
        return self.per_page + 1


class PaginationData(BaseModel):
    """Response side of a page."""

    per_page: int
    cursor: str = ""
    has_more_pages: bool = False

    @classmethod
    def build(cls, pageable: Pageable, ids: Sequence[str]) -> "PaginationData":
        """
        Build pagination data from the ids of the rows actually fetched.

        Args:
            pageable: The request that produced the rows
            ids: Ids of the fetched rows, lookahead row included
        """
        has_more_pages = len(ids) > pageable.per_page
        page_ids = ids[: pageable.per_page]

        return cls(
            per_page=pageable.per_page,
            cursor=page_ids[-1] if page_ids else "",
            has_more_pages=has_more_pages,
        )


def paginate(
    rows: Sequence[T], pageable: Pageable, key: Callable[[T], str]
) -> tuple[list[T], PaginationData]:
    """Drop the lookahead row, if any, and compute the next cursor."""
    pagination = PaginationData.build(pageable, [key(row) for row in rows])
    return list(rows[: pageable.per_page]), pagination
