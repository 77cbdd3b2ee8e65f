"""
Page/limit handling shared by every paginated listing.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from fastapi import Query

from .schemas import PaginationBlock

DEFAULT_LIMIT = 10
MAX_LIMIT = 50
# Keeps OFFSET inside bigint range.
MAX_PAGE = 2**31 - 1


@dataclass(frozen=True)
class PageParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def page_params(
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
) -> PageParams:
    return PageParams(page=page, limit=limit)


def pagination_block(params: PageParams, total: int) -> PaginationBlock:
    pages = math.ceil(total / params.limit)
    return PaginationBlock(
        current=params.page,
        pages=pages,
        total=total,
        has_next=params.page < pages,
        has_prev=params.page > 1,
    )
