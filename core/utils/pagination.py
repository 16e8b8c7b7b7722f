"""
페이지네이션 유틸리티
"""

import math
from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class PaginationMeta:
    """페이지 메타데이터"""

    total: int
    page: int
    limit: int
    total_pages: int
    has_next: bool
    has_prev: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def build_pagination_meta(total: int, page: int, limit: int) -> PaginationMeta:
    """페이지 메타데이터 생성

    Args:
        total: 전체 건수
        page: 현재 페이지 (1부터)
        limit: 페이지 크기

    Returns:
        PaginationMeta (total_pages = ceil(total / limit))
    """
    total_pages = math.ceil(total / limit) if limit > 0 else 0
    return PaginationMeta(
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )
