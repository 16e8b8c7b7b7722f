"""
OpeningBalance 서비스

기초 잔액 설정/조회. 가장 최근 날짜의 기록이 누적 잔액의 기준.
"""

import logging
from typing import Any
from uuid import uuid4

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.inputs import OpeningBalanceInput, validate_input
from core.domain.policy import Operation, authorize
from core.errors import TransientStoreError
from core.ledger.store import LedgerStore
from core.types import Caller
from core.utils.timezone import now_utc

logger = logging.getLogger(__name__)


class OpeningBalanceService:
    """OpeningBalance 서비스

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.store = LedgerStore(db)

    async def set(self, payload: dict[str, Any] | OpeningBalanceInput, caller: Caller | None) -> dict[str, Any]:
        """기초 잔액 기록 (ADMIN 전용)

        기존 기록은 유지하고 새 기록을 추가. 0 허용.

        Returns:
            현재 기준 기초 잔액
        """
        authorize(caller, Operation.OPENING_BALANCE_SET)
        data = validate_input(OpeningBalanceInput, payload)

        balance_id = str(uuid4())
        await self.store.insert_opening_balance(
            balance_id,
            data.amount,
            data.date,
            created_at=now_utc().isoformat(),
        )

        logger.info(f"기초 잔액 설정: amount={data.amount}, date={data.date}, by={caller.id}")

        current = await self.store.latest_opening_balance()
        if current is None:
            raise TransientStoreError()
        return current

    async def current(self, caller: Caller | None) -> dict[str, Any] | None:
        """현재 기준 기초 잔액 (없으면 None)"""
        authorize(caller, Operation.VIEW)
        return await self.store.latest_opening_balance()
