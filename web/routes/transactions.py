"""
거래 API 라우트

생성/수정/무효 처리/조회. 물리 삭제 엔드포인트 없음.
"""

from fastapi import APIRouter, Depends, Query, status

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import Defaults
from core.types import Caller
from web.dependencies import get_caller, get_db
from web.models.requests import TransactionRequest
from web.models.responses import (
    CreatedResponse,
    TransactionListResponse,
    TransactionResponse,
)
from web.services.transaction_service import TransactionService

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])


@router.get("", response_model=TransactionListResponse)
async def list_transactions(
    date_from: str | None = Query(default=None, alias="dateFrom"),
    date_to: str | None = Query(default=None, alias="dateTo"),
    type: str | None = Query(default=None),
    category_id: str | None = Query(default=None, alias="categoryId"),
    payment_method: str | None = Query(default=None, alias="paymentMethod"),
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    db: SQLiteAdapter = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """거래 목록 (필터 + 페이지)"""
    service = TransactionService(db)
    return await service.list(
        {
            "date_from": date_from,
            "date_to": date_to,
            "type": type,
            "category_id": category_id,
            "payment_method": payment_method,
            "page": page,
            "limit": limit,
        },
        caller,
    )


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    body: TransactionRequest,
    db: SQLiteAdapter = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """거래 생성 (ADMIN, ACCOUNTANT)"""
    service = TransactionService(db)
    transaction_id = await service.create(body.model_dump(), caller)
    return {"id": transaction_id}


@router.get("/voided", response_model=TransactionListResponse)
async def list_voided_transactions(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=Defaults.PAGE_SIZE, ge=1, le=Defaults.MAX_PAGE_SIZE),
    db: SQLiteAdapter = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """무효 처리된 거래 목록 (ADMIN 감사용)"""
    service = TransactionService(db)
    return await service.list_voided(page=page, limit=limit, caller=caller)


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: str,
    db: SQLiteAdapter = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """거래 단건 조회 (무효 거래 포함)"""
    service = TransactionService(db)
    return await service.get(transaction_id, caller)


@router.put("/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    transaction_id: str,
    body: TransactionRequest,
    db: SQLiteAdapter = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """거래 수정 (ADMIN 전용)"""
    service = TransactionService(db)
    return await service.update(transaction_id, body.model_dump(), caller)


@router.post("/{transaction_id}/void", response_model=TransactionResponse)
async def void_transaction(
    transaction_id: str,
    db: SQLiteAdapter = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """거래 무효 처리 (ADMIN 전용, 멱등)"""
    service = TransactionService(db)
    return await service.void(transaction_id, caller)
