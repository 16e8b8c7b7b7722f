"""
유틸리티 패키지

날짜/타임존 처리, 페이지네이션 등 공통 유틸리티
"""

from core.utils.pagination import PaginationMeta, build_pagination_meta
from core.utils.timezone import (
    day_bounds,
    get_zone,
    iter_recent_months,
    month_bounds,
    month_label,
    now_utc,
    parse_iso_date,
    shift_months,
    today_in,
)

__all__ = [
    "PaginationMeta",
    "build_pagination_meta",
    "day_bounds",
    "get_zone",
    "iter_recent_months",
    "month_bounds",
    "month_label",
    "now_utc",
    "parse_iso_date",
    "shift_months",
    "today_in",
]
