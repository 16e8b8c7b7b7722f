"""
리포트 API 라우트
"""

from datetime import tzinfo

from fastapi import APIRouter, Depends, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import Defaults
from core.types import Caller
from web.dependencies import get_caller, get_db, get_tz
from web.models.responses import ReportSummaryResponse
from web.services.report_service import ReportService

router = APIRouter(prefix="/api/reports", tags=["Reports"])


@router.get("/summary", response_model=ReportSummaryResponse)
async def get_report_summary(
    months: int = Query(default=Defaults.REPORT_MONTHS, ge=1, le=120),
    top: int = Query(default=Defaults.TOP_CATEGORIES, ge=1, le=50),
    db: SQLiteAdapter = Depends(get_db),
    tz: tzinfo = Depends(get_tz),
    caller: Caller = Depends(get_caller),
):
    """전체 기간 합계 + 월별 시계열 + 상위 카테고리"""
    service = ReportService(db, tz)
    return await service.summary(months=months, top=top)
