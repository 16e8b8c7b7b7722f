"""
학생 API 라우트

삭제 엔드포인트 없음 (상태 전환만).
"""

from fastapi import APIRouter, Depends, Query, status

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import Defaults
from core.types import Caller
from web.dependencies import get_caller, get_db
from web.models.requests import StudentRequest
from web.models.responses import StudentResponse, StudentStatementResponse
from web.services.student_service import StudentService

router = APIRouter(prefix="/api/students", tags=["Students"])


@router.get("", response_model=list[StudentResponse])
async def list_students(
    status_filter: str | None = Query(default=None, alias="status", description="ACTIVE / INACTIVE"),
    db: SQLiteAdapter = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """학생 목록"""
    service = StudentService(db)
    return await service.list(caller, status_filter)


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
    body: StudentRequest,
    db: SQLiteAdapter = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """학생 등록 (ADMIN, ACCOUNTANT)"""
    service = StudentService(db)
    return await service.create(body.model_dump(), caller)


@router.get("/{student_id}", response_model=StudentStatementResponse)
async def get_student_statement(
    student_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=Defaults.MAX_PAGE_SIZE, ge=1, le=Defaults.MAX_PAGE_SIZE),
    db: SQLiteAdapter = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """학생 상세 + 거래 내역서"""
    service = StudentService(db)
    return await service.statement(student_id, caller, page=page, limit=limit)


@router.put("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: str,
    body: StudentRequest,
    db: SQLiteAdapter = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """학생 정보 수정 / 상태 전환 (ADMIN, ACCOUNTANT)"""
    service = StudentService(db)
    return await service.update(student_id, body.model_dump(), caller)
