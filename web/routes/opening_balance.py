"""
기초 잔액 API 라우트
"""

from fastapi import APIRouter, Depends

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.types import Caller
from web.dependencies import get_caller, get_db
from web.models.requests import OpeningBalanceRequest
from web.models.responses import OpeningBalanceResponse
from web.services.opening_balance_service import OpeningBalanceService

router = APIRouter(prefix="/api/opening-balance", tags=["Opening Balance"])


@router.get("", response_model=OpeningBalanceResponse | None)
async def get_opening_balance(
    db: SQLiteAdapter = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """현재 기준 기초 잔액 (없으면 null)"""
    service = OpeningBalanceService(db)
    return await service.current(caller)


@router.put("", response_model=OpeningBalanceResponse)
async def set_opening_balance(
    body: OpeningBalanceRequest,
    db: SQLiteAdapter = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """기초 잔액 설정 (ADMIN 전용)"""
    service = OpeningBalanceService(db)
    return await service.set(body.model_dump(), caller)
