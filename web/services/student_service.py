"""
Student 서비스

학생 등록/수정/목록/거래 내역서.
학생은 삭제하지 않고 상태(ACTIVE/INACTIVE)만 전환.
"""

import logging
from typing import Any
from uuid import uuid4

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import Defaults
from core.domain.inputs import StudentInput, validate_input
from core.domain.policy import Operation, authorize
from core.errors import NotFoundError, TransientStoreError, ValidationError
from core.ledger.store import LedgerStore
from core.types import Caller, StudentStatus
from core.utils.pagination import build_pagination_meta
from core.utils.timezone import now_utc

logger = logging.getLogger(__name__)

STUDENT_NOT_FOUND = "Student not found"


class StudentService:
    """Student 서비스

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.store = LedgerStore(db)

    async def create(self, payload: dict[str, Any] | StudentInput, caller: Caller | None) -> dict[str, Any]:
        """학생 등록 (ADMIN, ACCOUNTANT)

        Raises:
            ConflictError: 같은 학급에 같은 번호 존재
        """
        authorize(caller, Operation.STUDENT_CREATE)
        data = validate_input(StudentInput, payload)

        student_id = str(uuid4())
        await self.store.insert_student({
            "id": student_id,
            **data.to_record(),
            "created_at": now_utc().isoformat(),
        })

        logger.info(
            f"학생 등록: id={student_id}, class={data.class_name}, roll_no={data.roll_no}"
        )

        student = await self.store.get_student(student_id)
        if student is None:
            raise TransientStoreError()
        return student

    async def update(
        self,
        student_id: str,
        payload: dict[str, Any] | StudentInput,
        caller: Caller | None,
    ) -> dict[str, Any]:
        """학생 정보 수정 / 상태 전환 (ADMIN, ACCOUNTANT)

        Raises:
            NotFoundError: 학생 없음
            ConflictError: 같은 학급에 같은 번호 존재
        """
        authorize(caller, Operation.STUDENT_UPDATE)
        data = validate_input(StudentInput, payload)

        updated = await self.store.update_student(
            student_id,
            data.to_record(),
            updated_at=now_utc().isoformat(),
        )
        if not updated:
            raise NotFoundError(STUDENT_NOT_FOUND)

        logger.info(f"학생 수정: id={student_id}, status={data.status.value}")

        student = await self.store.get_student(student_id)
        if student is None:
            raise NotFoundError(STUDENT_NOT_FOUND)
        return student

    async def get(self, student_id: str, caller: Caller | None) -> dict[str, Any]:
        """학생 조회

        Raises:
            NotFoundError: 학생 없음
        """
        authorize(caller, Operation.VIEW)

        student = await self.store.get_student(student_id)
        if student is None:
            raise NotFoundError(STUDENT_NOT_FOUND)
        return student

    async def list(
        self,
        caller: Caller | None,
        status: str | None = None,
    ) -> list[dict[str, Any]]:
        """학생 목록 (학급, 번호 순, 유효 거래 수 포함)"""
        authorize(caller, Operation.VIEW)

        if status:
            try:
                status = StudentStatus(status.upper()).value
            except ValueError as e:
                raise ValidationError("Invalid student status") from e

        return await self.store.list_students(status)

    async def statement(
        self,
        student_id: str,
        caller: Caller | None,
        page: int = 1,
        limit: int = Defaults.MAX_PAGE_SIZE,
    ) -> dict[str, Any]:
        """학생별 거래 내역서

        무효 거래 제외, 날짜 내림차순.

        Returns:
            {"student", "totals": {"income", "expense", "net"}, "data", "pagination"}

        Raises:
            NotFoundError: 학생 없음
        """
        student = await self.get(student_id, caller)

        if page < 1:
            raise ValidationError("Page must be at least 1")
        if not 1 <= limit <= Defaults.MAX_PAGE_SIZE:
            raise ValidationError(f"Limit must be between 1 and {Defaults.MAX_PAGE_SIZE}")

        totals = await self.store.sum_by_type(student_id=student_id)
        total = await self.store.count_transactions(student_id=student_id)
        meta = build_pagination_meta(total, page, limit)
        rows = await self.store.list_transactions(
            limit=limit,
            offset=meta.offset,
            student_id=student_id,
        )

        return {
            "student": student,
            "totals": {
                "income": totals["INCOME"],
                "expense": totals["EXPENSE"],
                "net": totals["INCOME"] - totals["EXPENSE"],
            },
            "data": rows,
            "pagination": meta.to_dict(),
        }
