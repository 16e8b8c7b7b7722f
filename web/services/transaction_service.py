"""
Transaction 서비스 (거래 생명주기 관리)

거래 생성/수정/무효 처리/조회.

상태 전이: CREATED → EDITED* → VOIDED (종료)
- 물리 삭제 없음
- 권한/입력 검증 실패 시 저장소에 도달하지 않음
"""

import logging
from typing import Any
from uuid import uuid4

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.inputs import TransactionFilter, TransactionInput, validate_input
from core.domain.policy import Operation, authorize
from core.domain.state_machines import TransactionState, TransactionStateMachine
from core.errors import ConflictError, NotFoundError, ValidationError
from core.ledger.store import LedgerStore
from core.types import Caller
from core.utils.pagination import build_pagination_meta
from core.utils.timezone import now_utc

logger = logging.getLogger(__name__)

TRANSACTION_NOT_FOUND = "Transaction not found"
VOIDED_EDIT_CONFLICT = "Voided transactions cannot be edited"


def _editable_machine(record: dict[str, Any]) -> TransactionStateMachine:
    """수정 가능한 거래의 상태 머신

    Raises:
        ConflictError: 무효 처리된 거래
    """
    machine = TransactionStateMachine.from_record(record)
    if not machine.is_editable:
        raise ConflictError(VOIDED_EDIT_CONFLICT)
    return machine


class TransactionService:
    """Transaction 서비스

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.store = LedgerStore(db)

    async def _load(self, transaction_id: str) -> dict[str, Any]:
        record = await self.store.get_transaction(transaction_id)
        if record is None:
            raise NotFoundError(TRANSACTION_NOT_FOUND)
        return record

    async def _check_references(self, data: TransactionInput) -> None:
        """카테고리/학생 존재 확인

        Raises:
            ValidationError: 존재하지 않는 카테고리 또는 학생
        """
        if await self.store.get_category(data.category_id) is None:
            raise ValidationError("Invalid category")
        if data.student_id and await self.store.get_student(data.student_id) is None:
            raise ValidationError("Invalid student")

    async def create(self, payload: dict[str, Any] | TransactionInput, caller: Caller | None) -> str:
        """거래 생성

        Args:
            payload: 입력 (type, date, amount, category_id, student_id,
                payment_method, reference_number, description)
            caller: 요청 주체 (VIEWER 불가)

        Returns:
            생성된 거래 ID

        Raises:
            AuthorizationError: caller 없음 또는 VIEWER
            ValidationError: 입력 검증 실패
        """
        caller = authorize(caller, Operation.TRANSACTION_CREATE)
        data = validate_input(TransactionInput, payload)
        await self._check_references(data)

        transaction_id = str(uuid4())
        record = {
            "id": transaction_id,
            **data.to_record(),
            "created_by": caller.id,
            "created_at": now_utc().isoformat(),
        }
        await self.store.insert_transaction(record)

        logger.info(
            f"거래 생성: id={transaction_id}, type={record['type']}, "
            f"amount={record['amount']}, by={caller.id}"
        )
        return transaction_id

    async def update(
        self,
        transaction_id: str,
        payload: dict[str, Any] | TransactionInput,
        caller: Caller | None,
    ) -> dict[str, Any]:
        """거래 수정 (ADMIN 전용)

        is_voided, created_by, id, created_at은 변경하지 않음.

        Returns:
            수정된 거래

        Raises:
            AuthorizationError: ADMIN 아님
            ValidationError: 입력 검증 실패
            NotFoundError: 거래 없음
            ConflictError: 무효 처리된 거래
        """
        authorize(caller, Operation.TRANSACTION_UPDATE)
        data = validate_input(TransactionInput, payload)

        machine = _editable_machine(await self._load(transaction_id))

        await self._check_references(data)

        updated = await self.store.update_transaction(
            transaction_id,
            data.to_record(),
            updated_at=now_utc().isoformat(),
        )
        if not updated:
            # 조회 이후 무효 처리 또는 삭제된 경우
            _editable_machine(await self._load(transaction_id))
            raise NotFoundError(TRANSACTION_NOT_FOUND)

        machine.transition(TransactionState.EDITED)
        logger.info(f"거래 수정: id={transaction_id}, by={caller.id}")

        return await self._load(transaction_id)

    async def void(self, transaction_id: str, caller: Caller | None) -> dict[str, Any]:
        """거래 무효 처리 (ADMIN 전용, 멱등)

        이미 무효인 거래는 변경 없이 그대로 반환.

        Raises:
            AuthorizationError: ADMIN 아님
            NotFoundError: 거래 없음
        """
        authorize(caller, Operation.TRANSACTION_VOID)

        existing = await self._load(transaction_id)

        machine = TransactionStateMachine.from_record(existing)
        if machine.is_terminal:
            logger.debug(f"이미 무효 처리된 거래: id={transaction_id}")
            return existing

        if not await self.store.mark_voided(transaction_id, updated_at=now_utc().isoformat()):
            raise NotFoundError(TRANSACTION_NOT_FOUND)

        machine.transition(TransactionState.VOIDED)
        logger.info(
            f"거래 무효 처리: id={transaction_id}, amount={existing['amount']}, by={caller.id}"
        )

        return await self._load(transaction_id)

    async def get(self, transaction_id: str, caller: Caller | None) -> dict[str, Any]:
        """거래 단건 조회 (무효 거래 포함, 감사용)

        Raises:
            NotFoundError: 거래 없음
        """
        authorize(caller, Operation.VIEW)
        return await self._load(transaction_id)

    async def list(
        self,
        filters: dict[str, Any] | TransactionFilter | None,
        caller: Caller | None,
    ) -> dict[str, Any]:
        """거래 목록 (무효 제외, 날짜 내림차순 → 생성 시각 내림차순)

        Args:
            filters: date_from, date_to, type, category_id, payment_method, page, limit
            caller: 요청 주체 (모든 역할)

        Returns:
            {"data": [...], "pagination": {...}}
        """
        authorize(caller, Operation.VIEW)
        query = validate_input(TransactionFilter, filters or {})
        store_filters = query.store_filters()

        total = await self.store.count_transactions(**store_filters)
        meta = build_pagination_meta(total, query.page, query.limit)
        rows = await self.store.list_transactions(
            limit=query.limit,
            offset=meta.offset,
            **store_filters,
        )

        return {"data": rows, "pagination": meta.to_dict()}

    async def list_voided(
        self,
        page: int = 1,
        limit: int = 20,
        caller: Caller | None = None,
    ) -> dict[str, Any]:
        """무효 처리된 거래 목록 (ADMIN 감사용)"""
        authorize(caller, Operation.TRANSACTION_AUDIT)
        query = validate_input(TransactionFilter, {"page": page, "limit": limit})

        total = await self.store.count_transactions(voided=True)
        meta = build_pagination_meta(total, query.page, query.limit)
        rows = await self.store.list_transactions(
            limit=query.limit,
            offset=meta.offset,
            voided=True,
        )

        return {"data": rows, "pagination": meta.to_dict()}
