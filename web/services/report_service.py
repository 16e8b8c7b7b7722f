"""
Report 서비스

전체 기간 수입/지출 합계, 12개월 시계열, 상위 카테고리.
"""

import logging
from datetime import tzinfo
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import Defaults
from core.ledger.store import LedgerStore
from web.services.dashboard_service import DashboardService

logger = logging.getLogger(__name__)


class ReportService:
    """Report 서비스

    Args:
        db: SQLite 어댑터
        tz: 로컬 타임존
    """

    def __init__(self, db: SQLiteAdapter, tz: tzinfo | None = None):
        self.db = db
        self.store = LedgerStore(db)
        self.dashboard = DashboardService(db, tz)

    async def summary(
        self,
        months: int = Defaults.REPORT_MONTHS,
        top: int = Defaults.TOP_CATEGORIES,
    ) -> dict[str, Any]:
        """전체 기간 요약 리포트

        Returns:
            {"income", "expense", "net", "series", "top_categories"}
        """
        totals = await self.store.sum_by_type()
        income = totals["INCOME"]
        expense = totals["EXPENSE"]

        return {
            "income": income,
            "expense": expense,
            "net": income - expense,
            "series": await self.dashboard.monthly_series(months).collect(),
            "top_categories": await self.dashboard.top_categories(top),
        }
