"""
TransactionService 테스트

생성/수정/무효 처리/조회 및 역할별 권한 검증.
"""

from typing import Any

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from core.types import Caller
from web.services.transaction_service import (
    TRANSACTION_NOT_FOUND,
    VOIDED_EDIT_CONFLICT,
    TransactionService,
)

pytestmark = pytest.mark.asyncio


@pytest.fixture
def service(db: SQLiteAdapter) -> TransactionService:
    return TransactionService(db)


def _payload(category_id: str, **overrides: Any) -> dict[str, Any]:
    payload = {
        "type": "INCOME",
        "date": "2026-02-21",
        "amount": "15000.00",
        "category_id": category_id,
        "payment_method": "CASH",
    }
    payload.update(overrides)
    return payload


class TestCreate:
    """거래 생성"""

    async def test_accountant_creates(
        self, service: TransactionService, accountant: Caller, income_category: str, student: str
    ) -> None:
        transaction_id = await service.create(
            _payload(income_category, student_id=student, description="Feb fee"),
            accountant,
        )

        record = await service.get(transaction_id, accountant)

        assert str(record["amount"]) == "15000.00"
        assert record["created_by"] == "user-accountant"
        assert record["student_name"] == "Sita Sharma"
        assert record["created_at"] == record["updated_at"]

    async def test_viewer_denied(
        self, db: SQLiteAdapter, service: TransactionService, viewer: Caller, income_category: str
    ) -> None:
        with pytest.raises(AuthorizationError) as exc_info:
            await service.create(_payload(income_category), viewer)

        assert exc_info.value.message == "Access denied"
        row = await db.fetchone("SELECT COUNT(*) FROM transactions")
        assert row[0] == 0

    async def test_no_caller(self, service: TransactionService, income_category: str) -> None:
        with pytest.raises(AuthorizationError) as exc_info:
            await service.create(_payload(income_category), None)

        assert exc_info.value.message == "Unauthorized"

    async def test_unknown_category(self, service: TransactionService, admin: Caller) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await service.create(_payload("missing"), admin)

        assert exc_info.value.message == "Invalid category"

    async def test_unknown_student(
        self, service: TransactionService, admin: Caller, income_category: str
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await service.create(_payload(income_category, student_id="missing"), admin)

        assert exc_info.value.message == "Invalid student"

    async def test_validation_before_store(
        self, db: SQLiteAdapter, service: TransactionService, admin: Caller, income_category: str
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await service.create(_payload(income_category, amount="0"), admin)

        assert exc_info.value.message == "Amount must be a positive number"
        row = await db.fetchone("SELECT COUNT(*) FROM transactions")
        assert row[0] == 0


class TestUpdate:
    """거래 수정"""

    async def test_admin_updates(
        self, service: TransactionService, admin: Caller, accountant: Caller,
        income_category: str, expense_category: str,
    ) -> None:
        transaction_id = await service.create(_payload(income_category), accountant)

        record = await service.update(
            transaction_id,
            _payload(expense_category, type="EXPENSE", amount="20.5"),
            admin,
        )

        assert record["type"] == "EXPENSE"
        assert str(record["amount"]) == "20.50"
        assert record["category_name"] == "Salary"
        assert record["created_by"] == "user-accountant"
        assert record["is_voided"] is False

    async def test_accountant_denied(
        self, service: TransactionService, accountant: Caller, income_category: str
    ) -> None:
        transaction_id = await service.create(_payload(income_category), accountant)

        with pytest.raises(AuthorizationError):
            await service.update(transaction_id, _payload(income_category), accountant)

    async def test_missing(self, service: TransactionService, admin: Caller, income_category: str) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            await service.update("missing", _payload(income_category), admin)

        assert exc_info.value.message == TRANSACTION_NOT_FOUND

    async def test_voided_conflict(
        self, service: TransactionService, admin: Caller, income_category: str
    ) -> None:
        transaction_id = await service.create(_payload(income_category), admin)
        await service.void(transaction_id, admin)

        with pytest.raises(ConflictError) as exc_info:
            await service.update(transaction_id, _payload(income_category, amount="1"), admin)

        assert exc_info.value.message == VOIDED_EDIT_CONFLICT
        record = await service.get(transaction_id, admin)
        assert str(record["amount"]) == "15000.00"

    async def test_voided_after_state_check(
        self, db: SQLiteAdapter, service: TransactionService, admin: Caller, income_category: str
    ) -> None:
        """상태 확인 이후 쓰기 전에 무효 처리되면 수정하지 않음"""
        transaction_id = await service.create(_payload(income_category), admin)
        original_get_category = service.store.get_category

        async def void_then_get_category(category_id: str) -> dict[str, Any] | None:
            await TransactionService(db).void(transaction_id, admin)
            return await original_get_category(category_id)

        service.store.get_category = void_then_get_category  # type: ignore[method-assign]

        with pytest.raises(ConflictError) as exc_info:
            await service.update(transaction_id, _payload(income_category, amount="999.00"), admin)

        assert exc_info.value.message == VOIDED_EDIT_CONFLICT
        record = await TransactionService(db).get(transaction_id, admin)
        assert record["is_voided"] is True
        assert str(record["amount"]) == "15000.00"


class TestVoid:
    """거래 무효 처리"""

    async def test_idempotent(
        self, service: TransactionService, admin: Caller, income_category: str
    ) -> None:
        transaction_id = await service.create(_payload(income_category), admin)

        first = await service.void(transaction_id, admin)
        second = await service.void(transaction_id, admin)

        assert first["is_voided"] is True
        assert second == first

    async def test_get_still_returns_voided(
        self, service: TransactionService, admin: Caller, viewer: Caller, income_category: str
    ) -> None:
        transaction_id = await service.create(_payload(income_category), admin)
        await service.void(transaction_id, admin)

        record = await service.get(transaction_id, viewer)

        assert record["is_voided"] is True

    async def test_accountant_denied(
        self, service: TransactionService, admin: Caller, accountant: Caller, income_category: str
    ) -> None:
        transaction_id = await service.create(_payload(income_category), admin)

        with pytest.raises(AuthorizationError):
            await service.void(transaction_id, accountant)

    async def test_missing(self, service: TransactionService, admin: Caller) -> None:
        with pytest.raises(NotFoundError):
            await service.void("missing", admin)


class TestList:
    """거래 목록"""

    async def test_excludes_voided_and_paginates(
        self, service: TransactionService, admin: Caller, viewer: Caller, income_category: str
    ) -> None:
        ids = [
            await service.create(_payload(income_category, date=f"2026-02-{day:02d}"), admin)
            for day in range(1, 6)
        ]
        await service.void(ids[0], admin)

        result = await service.list({"page": 2, "limit": 3}, viewer)

        assert result["pagination"]["total"] == 4
        assert result["pagination"]["total_pages"] == 2
        assert result["pagination"]["has_next"] is False
        assert [row["id"] for row in result["data"]] == [ids[1]]

    async def test_filters(
        self, service: TransactionService, admin: Caller,
        income_category: str, expense_category: str,
    ) -> None:
        await service.create(_payload(income_category, date="2026-01-15"), admin)
        expense_id = await service.create(
            _payload(expense_category, type="EXPENSE", date="2026-02-10", payment_method="BANK"),
            admin,
        )

        by_type = await service.list({"type": "EXPENSE"}, admin)
        by_range = await service.list({"date_from": "2026-02-01", "date_to": "2026-02-28"}, admin)
        by_method = await service.list({"payment_method": "BANK"}, admin)

        assert [row["id"] for row in by_type["data"]] == [expense_id]
        assert [row["id"] for row in by_range["data"]] == [expense_id]
        assert [row["id"] for row in by_method["data"]] == [expense_id]

    async def test_requires_caller(self, service: TransactionService) -> None:
        with pytest.raises(AuthorizationError):
            await service.list({}, None)

    async def test_voided_audit_admin_only(
        self, service: TransactionService, admin: Caller, accountant: Caller, income_category: str
    ) -> None:
        transaction_id = await service.create(_payload(income_category), admin)
        await service.void(transaction_id, admin)

        result = await service.list_voided(caller=admin)

        assert [row["id"] for row in result["data"]] == [transaction_id]
        assert result["pagination"]["total"] == 1
        with pytest.raises(AuthorizationError):
            await service.list_voided(caller=accountant)
