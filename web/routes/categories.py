"""
카테고리 API 라우트
"""

from fastapi import APIRouter, Depends, Query, Response, status

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.types import Caller
from web.dependencies import get_caller, get_db
from web.models.requests import CategoryRequest
from web.models.responses import CategoryResponse
from web.services.category_service import CategoryService

router = APIRouter(prefix="/api/categories", tags=["Categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories(
    type: str | None = Query(default=None, description="INCOME / EXPENSE"),
    db: SQLiteAdapter = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """카테고리 목록 (유형, 이름 순)"""
    service = CategoryService(db)
    return await service.list(caller, type)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    body: CategoryRequest,
    db: SQLiteAdapter = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """카테고리 생성 (ADMIN, ACCOUNTANT)"""
    service = CategoryService(db)
    return await service.create(body.model_dump(), caller)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    body: CategoryRequest,
    db: SQLiteAdapter = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """카테고리 수정 (ADMIN 전용)"""
    service = CategoryService(db)
    return await service.update(category_id, body.model_dump(), caller)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str,
    db: SQLiteAdapter = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> Response:
    """카테고리 삭제 (ADMIN 전용, 참조 거래가 있으면 409)"""
    service = CategoryService(db)
    await service.delete(category_id, caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
