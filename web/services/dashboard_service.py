"""
Dashboard 서비스 (집계 엔진)

원장에서 일/월 요약, 누적 잔액, 월별 시계열, 카테고리 분포 계산.

집계 규칙:
- 모든 집계는 무효(is_voided) 거래 제외
- 누적 잔액 = 최근 기초 잔액 + Σ INCOME - Σ EXPENSE
- 금액 합계는 저장소의 정수 minor unit SUM으로 계산 (float 미사용)
"""

import logging
from collections.abc import AsyncIterator
from datetime import date, tzinfo
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import Defaults
from core.errors import ValidationError
from core.ledger.store import LedgerStore
from core.money import Money
from core.types import CategoryType
from core.utils.timezone import (
    day_bounds,
    get_zone,
    iter_recent_months,
    month_bounds,
    month_label,
    today_in,
)

logger = logging.getLogger(__name__)

UNKNOWN_CATEGORY_NAME = "Unknown"


def _summary(totals: dict[str, Money]) -> dict[str, Money]:
    income = totals["INCOME"]
    expense = totals["EXPENSE"]
    return {"income": income, "expense": expense, "net": income - expense}


def _resolve_category(row: dict[str, Any]) -> dict[str, Any]:
    """카테고리 행이 없는 합계는 Unknown / EXPENSE로 표시"""
    return {
        "category_id": row["category_id"],
        "name": row["name"] if row["name"] is not None else UNKNOWN_CATEGORY_NAME,
        "type": row["type"] if row["type"] is not None else CategoryType.EXPENSE.value,
        "amount": row["amount"],
    }


class MonthlySeries:
    """월별 수입/지출 시계열 (지연 평가, 재시작 가능)

    anchor가 속한 월로 끝나는 최근 count개월을 오래된 순으로 생성.
    각 항목은 monthly_summary와 동일한 월 범위 집계.

    사용 예시:
    ```python
    series = service.monthly_series(6)
    async for item in series:
        ...
    items = await series.collect()
    ```
    """

    def __init__(self, store: LedgerStore, anchor: date, count: int):
        self._store = store
        self._anchor = anchor
        self._count = count

    def __len__(self) -> int:
        return self._count

    def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        return self._generate()

    async def _generate(self) -> AsyncIterator[dict[str, Any]]:
        for month_start in iter_recent_months(self._anchor, self._count):
            start, end = month_bounds(month_start)
            totals = await self._store.sum_by_type(date_from=start, date_to=end)
            yield {
                "month": month_label(month_start),
                "income": totals["INCOME"],
                "expense": totals["EXPENSE"],
            }

    async def collect(self) -> list[dict[str, Any]]:
        """전체 항목 수집"""
        return [item async for item in self]


class DashboardService:
    """Dashboard 서비스

    날짜 인자를 생략하면 설정된 로컬 타임존 기준 오늘 사용.
    조회 전용이므로 caller를 받지 않음 (인증은 Web 계층에서 확인).

    Args:
        db: SQLite 어댑터
        tz: 로컬 타임존 (None이면 기본 타임존)
    """

    def __init__(self, db: SQLiteAdapter, tz: tzinfo | None = None):
        self.db = db
        self.store = LedgerStore(db)
        self.tz = tz or get_zone(Defaults.TIMEZONE)

    def today(self) -> date:
        """로컬 타임존 기준 오늘"""
        return today_in(self.tz)

    async def daily_summary(self, day: date | None = None) -> dict[str, Any]:
        """일 요약

        Args:
            day: 대상 날짜 (None이면 오늘)

        Returns:
            {"date", "income", "expense", "net"}
        """
        day = day or self.today()
        start, end = day_bounds(day)
        totals = await self.store.sum_by_type(date_from=start, date_to=end)
        return {"date": day.isoformat(), **_summary(totals)}

    async def monthly_summary(self, day: date | None = None) -> dict[str, Any]:
        """월 요약 (day가 속한 달력 월)

        Returns:
            {"month", "date_from", "date_to", "income", "expense", "net"}
        """
        day = day or self.today()
        start, end = month_bounds(day)
        totals = await self.store.sum_by_type(date_from=start, date_to=end)
        return {
            "month": month_label(start),
            "date_from": start.isoformat(),
            "date_to": end.isoformat(),
            **_summary(totals),
        }

    async def running_balance(self, as_of: date | None = None) -> Money:
        """누적 잔액

        Args:
            as_of: 기준일 (None이면 날짜 무관 전체 거래, 지정 시 as_of 이전 거래만).
                기초 잔액은 as_of와 무관하게 항상 가장 최근 기록을 사용하므로
                두 기준일의 잔액 차이는 그 사이 거래의 순액과 같음.

        Returns:
            최근 기초 잔액(없으면 0) + Σ INCOME - Σ EXPENSE
        """
        opening = await self.store.latest_opening_balance()
        base = opening["amount"] if opening else Money.zero()
        totals = await self.store.sum_by_type(date_to=as_of)
        return base + totals["INCOME"] - totals["EXPENSE"]

    def monthly_series(
        self,
        count: int = Defaults.DASHBOARD_MONTHS,
        anchor: date | None = None,
    ) -> MonthlySeries:
        """월별 시계열

        Args:
            count: 개월 수 (1 이상)
            anchor: 마지막 월 기준일 (None이면 오늘)

        Raises:
            ValidationError: count < 1
        """
        if count < 1:
            raise ValidationError("Number of months must be at least 1")
        return MonthlySeries(self.store, anchor or self.today(), count)

    async def category_breakdown(self, day: date | None = None) -> list[dict[str, Any]]:
        """월별 카테고리 분포 (거래 없는 카테고리 제외)

        Returns:
            [{"category_id", "name", "type", "amount"}] 금액 내림차순, 이름 오름차순
        """
        day = day or self.today()
        start, end = month_bounds(day)
        rows = await self.store.sum_by_category(date_from=start, date_to=end)
        return [_resolve_category(row) for row in rows]

    async def recent_activity(self, limit: int = Defaults.RECENT_LIMIT) -> list[dict[str, Any]]:
        """최근 생성된 거래 (생성 시각 내림차순)"""
        if limit < 1:
            raise ValidationError(f"Limit must be between 1 and {Defaults.MAX_PAGE_SIZE}")
        return await self.store.recent_transactions(min(limit, Defaults.MAX_PAGE_SIZE))

    async def top_categories(self, count: int = Defaults.TOP_CATEGORIES) -> list[dict[str, Any]]:
        """전체 기간 상위 카테고리 (금액 내림차순, 동률이면 이름 오름차순)"""
        if count < 1:
            raise ValidationError("Number of categories must be at least 1")
        rows = await self.store.sum_by_category(limit=count)
        return [_resolve_category(row) for row in rows]

    async def overview(self) -> dict[str, Any]:
        """대시보드 전체 데이터

        오늘/이번 달 요약, 누적 잔액, 6개월 시계열, 이번 달 카테고리 분포, 최근 거래.
        """
        today = self.today()
        return {
            "today": await self.daily_summary(today),
            "month": await self.monthly_summary(today),
            "balance": await self.running_balance(),
            "series": await self.monthly_series(Defaults.DASHBOARD_MONTHS, today).collect(),
            "categories": await self.category_breakdown(today),
            "recent": await self.recent_activity(),
        }
