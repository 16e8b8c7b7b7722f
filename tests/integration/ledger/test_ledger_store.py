"""LedgerStore 통합 테스트"""

from datetime import date
from uuid import uuid4

import aiosqlite
import pytest

from core.errors import ConflictError, TransientStoreError
from core.ledger.store import (
    CATEGORY_NAME_CONFLICT,
    STUDENT_ROLL_CONFLICT,
    LedgerStore,
    store_operation,
)
from core.money import Money, parse_input
from core.utils.timezone import now_utc


async def _add(
    store: LedgerStore,
    category_id: str,
    amount: str,
    day: str,
    type: str = "INCOME",
    voided: bool = False,
    student_id: str | None = None,
    payment_method: str = "CASH",
) -> str:
    transaction_id = str(uuid4())
    await store.insert_transaction({
        "id": transaction_id,
        "type": type,
        "date": day,
        "amount": parse_input(amount),
        "category_id": category_id,
        "student_id": student_id,
        "payment_method": payment_method,
        "created_by": "user-admin",
        "created_at": now_utc().isoformat(),
    })
    if voided:
        await store.mark_voided(transaction_id, now_utc().isoformat())
    return transaction_id


class TestSums:
    """합계 쿼리 테스트"""

    @pytest.mark.asyncio
    async def test_sum_by_type_empty(self, store: LedgerStore) -> None:
        totals = await store.sum_by_type()

        assert totals == {"INCOME": Money.zero(), "EXPENSE": Money.zero()}

    @pytest.mark.asyncio
    async def test_sum_by_type_exact(
        self, store: LedgerStore, income_category: str, expense_category: str
    ) -> None:
        """정수 minor unit 합계는 정확"""
        for _ in range(10):
            await _add(store, income_category, "0.10", "2026-02-01")
        await _add(store, expense_category, "0.30", "2026-02-01", type="EXPENSE")

        totals = await store.sum_by_type()

        assert str(totals["INCOME"]) == "1.00"
        assert str(totals["EXPENSE"]) == "0.30"

    @pytest.mark.asyncio
    async def test_voided_excluded(self, store: LedgerStore, income_category: str) -> None:
        await _add(store, income_category, "100", "2026-02-01")
        await _add(store, income_category, "999", "2026-02-01", voided=True)

        totals = await store.sum_by_type()

        assert str(totals["INCOME"]) == "100.00"

    @pytest.mark.asyncio
    async def test_date_range_inclusive(self, store: LedgerStore, income_category: str) -> None:
        await _add(store, income_category, "1", "2026-01-31")
        await _add(store, income_category, "2", "2026-02-01")
        await _add(store, income_category, "3", "2026-02-28")
        await _add(store, income_category, "4", "2026-03-01")

        totals = await store.sum_by_type(date_from=date(2026, 2, 1), date_to=date(2026, 2, 28))

        assert str(totals["INCOME"]) == "5.00"

    @pytest.mark.asyncio
    async def test_filters(self, store: LedgerStore, income_category: str, student: str) -> None:
        await _add(store, income_category, "10", "2026-02-01", student_id=student)
        await _add(store, income_category, "20", "2026-02-01", payment_method="BANK")

        assert str((await store.sum_by_type(student_id=student))["INCOME"]) == "10.00"
        assert str((await store.sum_by_type(payment_method="BANK"))["INCOME"]) == "20.00"
        assert str((await store.sum_by_type(student_id=student))["EXPENSE"]) == "0.00"


class TestSumByCategory:
    """카테고리별 합계 테스트"""

    @pytest.mark.asyncio
    async def test_ordered_by_amount_then_name(
        self, store: LedgerStore, income_category: str, expense_category: str
    ) -> None:
        exam_id = str(uuid4())
        await store.insert_category(exam_id, "Exam Fee", "INCOME", now_utc().isoformat())

        await _add(store, income_category, "500", "2026-02-01")
        await _add(store, expense_category, "500", "2026-02-02", type="EXPENSE")
        await _add(store, exam_id, "900", "2026-02-03")

        rows = await store.sum_by_category()

        assert [row["name"] for row in rows] == ["Exam Fee", "Salary", "Tuition Fee"]
        assert str(rows[0]["amount"]) == "900.00"

    @pytest.mark.asyncio
    async def test_limit(self, store: LedgerStore, income_category: str, expense_category: str) -> None:
        await _add(store, income_category, "1", "2026-02-01")
        await _add(store, expense_category, "2", "2026-02-01", type="EXPENSE")

        rows = await store.sum_by_category(limit=1)

        assert len(rows) == 1
        assert rows[0]["name"] == "Salary"

    @pytest.mark.asyncio
    async def test_missing_category_row(self, db, store: LedgerStore) -> None:
        """카테고리 행이 없으면 name/type None"""
        await db.execute("PRAGMA foreign_keys=OFF")
        await _add(store, "ghost-category", "5", "2026-02-01")
        await db.execute("PRAGMA foreign_keys=ON")

        rows = await store.sum_by_category()

        assert rows[0]["name"] is None
        assert rows[0]["type"] is None


class TestTransactions:
    """거래 저장/조회 테스트"""

    @pytest.mark.asyncio
    async def test_get_with_joins(
        self, store: LedgerStore, income_category: str, student: str
    ) -> None:
        transaction_id = await _add(store, income_category, "15000", "2026-02-21", student_id=student)

        record = await store.get_transaction(transaction_id)

        assert record["amount"] == parse_input("15000")
        assert record["category_name"] == "Tuition Fee"
        assert record["student_name"] == "Sita Sharma"
        assert record["student_class"] == "Grade 5"
        assert record["created_by_name"] == "Admin"
        assert record["is_voided"] is False

    @pytest.mark.asyncio
    async def test_get_missing(self, store: LedgerStore) -> None:
        assert await store.get_transaction("nope") is None

    @pytest.mark.asyncio
    async def test_mark_voided_idempotent(self, store: LedgerStore, income_category: str) -> None:
        transaction_id = await _add(store, income_category, "1", "2026-02-21")

        assert await store.mark_voided(transaction_id, now_utc().isoformat()) is True
        assert await store.mark_voided(transaction_id, now_utc().isoformat()) is True
        assert await store.mark_voided("missing", now_utc().isoformat()) is False

        record = await store.get_transaction(transaction_id)
        assert record["is_voided"] is True

    @pytest.mark.asyncio
    async def test_list_order_and_count(self, store: LedgerStore, income_category: str) -> None:
        older = await _add(store, income_category, "1", "2026-02-01")
        newer = await _add(store, income_category, "2", "2026-02-05")
        same_day_later = await _add(store, income_category, "3", "2026-02-05")
        await _add(store, income_category, "4", "2026-02-06", voided=True)

        rows = await store.list_transactions(limit=10, offset=0)

        assert [row["id"] for row in rows] == [same_day_later, newer, older]
        assert await store.count_transactions() == 3
        assert await store.count_transactions(voided=True) == 1
        assert await store.count_transactions(voided=None) == 4

    @pytest.mark.asyncio
    async def test_recent_by_created_at(self, store: LedgerStore, income_category: str) -> None:
        """최근 활동은 거래 날짜가 아닌 생성 순서"""
        first = await _add(store, income_category, "1", "2026-03-01")
        second = await _add(store, income_category, "2", "2025-01-01")

        rows = await store.recent_transactions(limit=10)

        assert [row["id"] for row in rows] == [second, first]


class TestCategories:
    """카테고리 저장 테스트"""

    @pytest.mark.asyncio
    async def test_duplicate_name_conflict(self, store: LedgerStore, income_category: str) -> None:
        with pytest.raises(ConflictError) as exc_info:
            await store.insert_category(str(uuid4()), "Tuition Fee", "INCOME", now_utc().isoformat())

        assert exc_info.value.message == CATEGORY_NAME_CONFLICT

    @pytest.mark.asyncio
    async def test_list_with_counts(
        self, store: LedgerStore, income_category: str, expense_category: str
    ) -> None:
        await _add(store, income_category, "1", "2026-02-01")
        await _add(store, income_category, "1", "2026-02-01", voided=True)

        rows = await store.list_categories()

        assert [(row["type"], row["name"]) for row in rows] == [
            ("EXPENSE", "Salary"),
            ("INCOME", "Tuition Fee"),
        ]
        assert rows[1]["transaction_count"] == 2
        assert await store.count_category_references(income_category) == 2

    @pytest.mark.asyncio
    async def test_delete_unreferenced(self, store: LedgerStore, expense_category: str) -> None:
        assert await store.delete_category(expense_category) is True
        assert await store.get_category(expense_category) is None


class TestStudents:
    """학생 저장 테스트"""

    @pytest.mark.asyncio
    async def test_duplicate_roll_no(self, store: LedgerStore, student: str) -> None:
        with pytest.raises(ConflictError) as exc_info:
            await store.insert_student({
                "id": str(uuid4()),
                "name": "Another",
                "class_name": "Grade 5",
                "roll_no": "12",
                "status": "ACTIVE",
                "created_at": now_utc().isoformat(),
            })

        assert exc_info.value.message == STUDENT_ROLL_CONFLICT

    @pytest.mark.asyncio
    async def test_status_toggle(self, store: LedgerStore, student: str) -> None:
        updated = await store.update_student(
            student,
            {"name": "Sita Sharma", "class_name": "Grade 5", "roll_no": "12", "status": "INACTIVE"},
            now_utc().isoformat(),
        )

        assert updated is True
        assert (await store.get_student(student))["status"] == "INACTIVE"
        assert await store.list_students("ACTIVE") == []


class TestOpeningBalance:
    """기초 잔액 테스트"""

    @pytest.mark.asyncio
    async def test_latest_by_date(self, store: LedgerStore) -> None:
        await store.insert_opening_balance("b2", parse_input("70000"), "2026-04-01", now_utc().isoformat())
        await store.insert_opening_balance("b1", parse_input("50000"), "2026-01-01", now_utc().isoformat())

        latest = await store.latest_opening_balance()

        assert latest["id"] == "b2"
        assert str(latest["amount"]) == "70000.00"

    @pytest.mark.asyncio
    async def test_none_when_empty(self, store: LedgerStore) -> None:
        assert await store.latest_opening_balance() is None


class TestStoreOperation:
    """저장소 예외 변환 테스트"""

    @pytest.mark.asyncio
    async def test_unexpected_integrity_error(self) -> None:
        @store_operation()
        async def failing() -> None:
            raise aiosqlite.IntegrityError("boom")

        with pytest.raises(TransientStoreError) as exc_info:
            await failing()

        assert exc_info.value.message == "Operation failed. Please try again."

    @pytest.mark.asyncio
    async def test_operational_error(self) -> None:
        @store_operation(conflict_message="dup")
        async def failing() -> None:
            raise aiosqlite.OperationalError("database is locked")

        with pytest.raises(TransientStoreError):
            await failing()

    @pytest.mark.asyncio
    async def test_closed_connection(self, store: LedgerStore, db) -> None:
        """연결이 끊기면 저장소 오류로 변환되지 않고 RuntimeError 전파"""
        await db.close()

        with pytest.raises(RuntimeError):
            await store.sum_by_type()
