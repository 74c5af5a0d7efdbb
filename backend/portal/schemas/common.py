# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Shared pagination and response schemas
"""
import math
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel

from portal.core.config import settings

T = TypeVar("T")


@dataclass(frozen=True)
class PageParams:
    """Validated page/limit pair with derived offset"""

    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def clamp(cls, page: Optional[int], limit: Optional[int]) -> "PageParams":
        page = max(1, 1 if page is None else page)
        if limit is None:
            limit = settings.DEFAULT_PAGE_SIZE
        limit = min(settings.MAX_PAGE_SIZE, max(1, limit))
        return cls(page=page, limit=limit)


class Page(BaseModel, Generic[T]):
    """List response envelope"""

    items: List[T]
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def build(cls, items: List[T], total: int, params: PageParams) -> "Page[T]":
        return cls(
            items=items,
            total=total,
            page=params.page,
            limit=params.limit,
            total_pages=math.ceil(total / params.limit) if params.limit else 0,
        )


class MessageResponse(BaseModel):
    """Plain acknowledgement response"""

    message: str
