"""
Dashboard API 라우트

일/월 요약, 누적 잔액, 월별 시계열, 카테고리 분포, 최근 거래.
날짜 파라미터를 생략하면 로컬 타임존 기준 오늘.
"""

from datetime import tzinfo

from fastapi import APIRouter, Depends, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import Defaults
from core.types import Caller
from core.utils.timezone import parse_iso_date
from core.config.loader import Settings
from core.money import to_display
from web.dependencies import get_app_settings, get_caller, get_db, get_tz
from web.models.responses import (
    BalanceResponse,
    CategoryAmountResponse,
    DashboardResponse,
    MonthlySummaryResponse,
    SeriesItemResponse,
    SummaryResponse,
    TransactionResponse,
)
from web.services.dashboard_service import DashboardService

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


def _optional_date(value: str | None):
    return parse_iso_date(value) if value else None


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    db: SQLiteAdapter = Depends(get_db),
    tz: tzinfo = Depends(get_tz),
    caller: Caller = Depends(get_caller),
):
    """대시보드 전체 데이터"""
    service = DashboardService(db, tz)
    return await service.overview()


@router.get("/daily", response_model=SummaryResponse)
async def get_daily_summary(
    date: str | None = Query(default=None, description="YYYY-MM-DD (기본: 오늘)"),
    db: SQLiteAdapter = Depends(get_db),
    tz: tzinfo = Depends(get_tz),
    caller: Caller = Depends(get_caller),
):
    """일 요약"""
    service = DashboardService(db, tz)
    return await service.daily_summary(_optional_date(date))


@router.get("/monthly", response_model=MonthlySummaryResponse)
async def get_monthly_summary(
    date: str | None = Query(default=None, description="YYYY-MM-DD (기본: 오늘)"),
    db: SQLiteAdapter = Depends(get_db),
    tz: tzinfo = Depends(get_tz),
    caller: Caller = Depends(get_caller),
):
    """월 요약"""
    service = DashboardService(db, tz)
    return await service.monthly_summary(_optional_date(date))


@router.get("/balance", response_model=BalanceResponse)
async def get_running_balance(
    as_of: str | None = Query(default=None, description="기준일 YYYY-MM-DD (기본: 전체)"),
    db: SQLiteAdapter = Depends(get_db),
    tz: tzinfo = Depends(get_tz),
    settings: Settings = Depends(get_app_settings),
    caller: Caller = Depends(get_caller),
):
    """누적 잔액"""
    service = DashboardService(db, tz)
    as_of_date = _optional_date(as_of)
    balance = await service.running_balance(as_of_date)
    return {
        "balance": balance,
        "display": to_display(balance, settings.currency_symbol),
        "as_of": as_of_date.isoformat() if as_of_date else None,
    }


@router.get("/series", response_model=list[SeriesItemResponse])
async def get_monthly_series(
    months: int = Query(default=Defaults.DASHBOARD_MONTHS, ge=1, le=120),
    db: SQLiteAdapter = Depends(get_db),
    tz: tzinfo = Depends(get_tz),
    caller: Caller = Depends(get_caller),
):
    """최근 N개월 수입/지출 (오래된 순)"""
    service = DashboardService(db, tz)
    return await service.monthly_series(months).collect()


@router.get("/categories", response_model=list[CategoryAmountResponse])
async def get_category_breakdown(
    date: str | None = Query(default=None, description="해당 월의 임의 날짜 (기본: 오늘)"),
    db: SQLiteAdapter = Depends(get_db),
    tz: tzinfo = Depends(get_tz),
    caller: Caller = Depends(get_caller),
):
    """월별 카테고리 분포"""
    service = DashboardService(db, tz)
    return await service.category_breakdown(_optional_date(date))


@router.get("/recent", response_model=list[TransactionResponse])
async def get_recent_activity(
    limit: int = Query(default=Defaults.RECENT_LIMIT, ge=1, le=Defaults.MAX_PAGE_SIZE),
    db: SQLiteAdapter = Depends(get_db),
    tz: tzinfo = Depends(get_tz),
    caller: Caller = Depends(get_caller),
):
    """최근 생성 거래"""
    service = DashboardService(db, tz)
    return await service.recent_activity(limit)
