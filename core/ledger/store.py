"""
Ledger 저장소

거래/카테고리/학생/기초잔액 저장 및 조회.
집계는 INTEGER minor unit 합계로 수행하여 float를 거치지 않음.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable
from datetime import date
from typing import TYPE_CHECKING, Any, TypeVar

import aiosqlite

from core.errors import ConflictError, TransientStoreError
from core.money import Money

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)

T = TypeVar("T")

CATEGORY_NAME_CONFLICT = "A category with this name already exists."
STUDENT_ROLL_CONFLICT = "A student with this roll number already exists in this class."

# 거래 조회 공통 SELECT (카테고리/학생/작성자 이름 조인)
_TRANSACTION_SELECT = """
    SELECT
        t.id, t.type, t.date, t.amount_minor,
        t.category_id, c.name, c.type,
        t.student_id, s.name, s.class_name,
        t.payment_method, t.reference_number, t.description,
        t.is_voided, t.created_by, u.name,
        t.created_at, t.updated_at
    FROM transactions t
    LEFT JOIN categories c ON c.id = t.category_id
    LEFT JOIN students s ON s.id = t.student_id
    LEFT JOIN users u ON u.id = t.created_by
"""


def store_operation(
    conflict_message: str | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """저장소 예외 변환 데코레이터

    - 유니크/외래키 제약 위반 → ConflictError (conflict_message 지정 시)
    - 그 외 SQLite 오류 → TransientStoreError (로그 기록)
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return await func(*args, **kwargs)
            except aiosqlite.IntegrityError as e:
                if conflict_message is not None:
                    logger.info(f"{func.__name__}: 제약 위반 ({e})")
                    raise ConflictError(conflict_message) from e
                logger.exception(f"{func.__name__}: 예상하지 못한 제약 위반")
                raise TransientStoreError() from e
            except aiosqlite.Error as e:
                logger.exception(f"{func.__name__}: 저장소 오류")
                raise TransientStoreError() from e

        return wrapper

    return decorator


def _iso(value: date | str | None) -> str | None:
    if value is None:
        return None
    return value.isoformat() if isinstance(value, date) else value


def _build_transaction_where(
    *,
    voided: bool | None = False,
    type: str | None = None,
    date_from: date | str | None = None,
    date_to: date | str | None = None,
    category_id: str | None = None,
    student_id: str | None = None,
    payment_method: str | None = None,
) -> tuple[str, list[Any]]:
    """거래 필터 WHERE 절 생성

    voided=None이면 무효 여부와 무관하게 조회 (감사용).
    날짜 범위는 양 끝 포함.
    """
    clauses: list[str] = []
    params: list[Any] = []

    if voided is not None:
        clauses.append("t.is_voided = ?")
        params.append(1 if voided else 0)
    if type:
        clauses.append("t.type = ?")
        params.append(type)
    if date_from:
        clauses.append("t.date >= ?")
        params.append(_iso(date_from))
    if date_to:
        clauses.append("t.date <= ?")
        params.append(_iso(date_to))
    if category_id:
        clauses.append("t.category_id = ?")
        params.append(category_id)
    if student_id:
        clauses.append("t.student_id = ?")
        params.append(student_id)
    if payment_method:
        clauses.append("t.payment_method = ?")
        params.append(payment_method)

    where = " WHERE " + " AND ".join(clauses) if clauses else ""
    return where, params


def _row_to_transaction(row: tuple[Any, ...]) -> dict[str, Any]:
    return {
        "id": row[0],
        "type": row[1],
        "date": row[2],
        "amount": Money.from_minor(row[3]),
        "category_id": row[4],
        "category_name": row[5],
        "category_type": row[6],
        "student_id": row[7],
        "student_name": row[8],
        "student_class": row[9],
        "payment_method": row[10],
        "reference_number": row[11],
        "description": row[12],
        "is_voided": bool(row[13]),
        "created_by": row[14],
        "created_by_name": row[15],
        "created_at": row[16],
        "updated_at": row[17],
    }


class LedgerStore:
    """Ledger 저장소

    Aggregation/Lifecycle 서비스가 요구하는 쿼리 인터페이스.
    - 조건별 정확한 합계 (minor unit SUM)
    - 카테고리별 GROUP BY 합계
    - 정렬/페이지 조회 + 전체 건수
    - 유니크 제약 (카테고리 이름, 학급+번호)
    - ID 조회 (없으면 None)

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # =====================================
    # 집계
    # =====================================

    @store_operation()
    async def sum_by_type(
        self,
        date_from: date | str | None = None,
        date_to: date | str | None = None,
        **filters: Any,
    ) -> dict[str, Money]:
        """거래 유형별 합계 (INCOME/EXPENSE 모두 포함, 없으면 0)"""
        where, params = _build_transaction_where(
            date_from=date_from, date_to=date_to, **filters
        )
        rows = await self.db.fetchall(
            f"""
            SELECT t.type, SUM(t.amount_minor)
            FROM transactions t{where}
            GROUP BY t.type
            """,
            tuple(params),
        )

        totals = {"INCOME": Money.zero(), "EXPENSE": Money.zero()}
        for row in rows:
            totals[row[0]] = Money.from_minor(row[1])
        return totals

    @store_operation()
    async def sum_by_category(
        self,
        date_from: date | str | None = None,
        date_to: date | str | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """카테고리별 합계 (무효 거래 제외)

        카테고리 행이 없으면 name/type이 None으로 반환됨.
        합계 내림차순, 동률이면 카테고리 이름 오름차순.
        """
        where, params = _build_transaction_where(date_from=date_from, date_to=date_to)
        sql = f"""
            SELECT t.category_id, c.name, c.type, SUM(t.amount_minor) AS total_minor
            FROM transactions t
            LEFT JOIN categories c ON c.id = t.category_id
            {where}
            GROUP BY t.category_id
            ORDER BY total_minor DESC, c.name ASC, t.category_id ASC
        """
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)

        rows = await self.db.fetchall(sql, tuple(params))

        return [
            {
                "category_id": row[0],
                "name": row[1],
                "type": row[2],
                "amount": Money.from_minor(row[3]),
            }
            for row in rows
        ]

    # =====================================
    # 거래
    # =====================================

    @store_operation()
    async def insert_transaction(self, record: dict[str, Any]) -> str:
        """거래 저장

        Args:
            record: id, type, date, amount(Money), category_id, student_id,
                payment_method, reference_number, description, created_by,
                created_at

        Returns:
            저장된 거래 ID
        """
        async with self.db.transaction():
            await self.db.execute(
                """
                INSERT INTO transactions (
                    id, type, date, amount_minor, category_id, student_id,
                    payment_method, reference_number, description,
                    is_voided, created_by, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, 0, ?, ?, ?)
                """,
                (
                    record["id"],
                    record["type"],
                    _iso(record["date"]),
                    record["amount"].to_minor(),
                    record["category_id"],
                    record.get("student_id"),
                    record["payment_method"],
                    record.get("reference_number"),
                    record.get("description"),
                    record["created_by"],
                    record["created_at"],
                    record["created_at"],
                ),
            )

        logger.debug(f"Saved transaction: {record['id']}")
        return record["id"]

    @store_operation()
    async def update_transaction(
        self,
        transaction_id: str,
        fields: dict[str, Any],
        updated_at: str,
    ) -> bool:
        """거래 수정 가능 필드 덮어쓰기

        is_voided, created_by, id, created_at은 변경하지 않음.

        Returns:
            수정 여부 (ID 없거나 이미 무효 처리된 거래면 False)
        """
        async with self.db.transaction():
            cursor = await self.db.execute(
                """
                UPDATE transactions SET
                    type = ?, date = ?, amount_minor = ?, category_id = ?,
                    student_id = ?, payment_method = ?, reference_number = ?,
                    description = ?, updated_at = ?
                WHERE id = ? AND is_voided = 0
                """,
                (
                    fields["type"],
                    _iso(fields["date"]),
                    fields["amount"].to_minor(),
                    fields["category_id"],
                    fields.get("student_id"),
                    fields["payment_method"],
                    fields.get("reference_number"),
                    fields.get("description"),
                    updated_at,
                    transaction_id,
                ),
            )
        return cursor.rowcount > 0

    @store_operation()
    async def mark_voided(self, transaction_id: str, updated_at: str) -> bool:
        """거래 무효 처리 (이미 무효면 변경 없음)

        Returns:
            거래 존재 여부
        """
        async with self.db.transaction():
            cursor = await self.db.execute(
                """
                UPDATE transactions SET is_voided = 1, updated_at = ?
                WHERE id = ? AND is_voided = 0
                """,
                (updated_at, transaction_id),
            )
        if cursor.rowcount > 0:
            return True
        return await self.transaction_exists(transaction_id)

    @store_operation()
    async def transaction_exists(self, transaction_id: str) -> bool:
        found = await self.db.fetchvalue(
            "SELECT 1 FROM transactions WHERE id = ?",
            (transaction_id,),
        )
        return found is not None

    @store_operation()
    async def get_transaction(self, transaction_id: str) -> dict[str, Any] | None:
        """거래 단건 조회 (무효 거래 포함)"""
        row = await self.db.fetchone(
            _TRANSACTION_SELECT + " WHERE t.id = ?",
            (transaction_id,),
        )
        return _row_to_transaction(row) if row else None

    @store_operation()
    async def list_transactions(
        self,
        limit: int = 20,
        offset: int = 0,
        **filters: Any,
    ) -> list[dict[str, Any]]:
        """거래 목록 조회 (날짜 내림차순)

        Args:
            limit: 조회 개수 제한
            offset: 시작 위치
            **filters: _build_transaction_where 필터
        """
        where, params = _build_transaction_where(**filters)
        rows = await self.db.fetchall(
            _TRANSACTION_SELECT
            + where
            + " ORDER BY t.date DESC, t.created_at DESC LIMIT ? OFFSET ?",
            tuple(params) + (limit, offset),
        )
        return [_row_to_transaction(row) for row in rows]

    @store_operation()
    async def count_transactions(self, **filters: Any) -> int:
        """조건별 거래 건수"""
        where, params = _build_transaction_where(**filters)
        return await self.db.fetchvalue(
            f"SELECT COUNT(*) FROM transactions t{where}",
            params,
            default=0,
        )

    @store_operation()
    async def recent_transactions(self, limit: int = 10) -> list[dict[str, Any]]:
        """최근 생성 거래 (생성 시각 내림차순, 무효 제외)"""
        rows = await self.db.fetchall(
            _TRANSACTION_SELECT
            + " WHERE t.is_voided = 0"
            + " ORDER BY t.created_at DESC, t.rowid DESC LIMIT ?",
            (limit,),
        )
        return [_row_to_transaction(row) for row in rows]

    # =====================================
    # 카테고리
    # =====================================

    @store_operation(conflict_message=CATEGORY_NAME_CONFLICT)
    async def insert_category(
        self,
        category_id: str,
        name: str,
        category_type: str,
        created_at: str,
    ) -> str:
        async with self.db.transaction():
            await self.db.execute(
                """
                INSERT INTO categories (id, name, type, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (category_id, name, category_type, created_at, created_at),
            )
        return category_id

    @store_operation(conflict_message=CATEGORY_NAME_CONFLICT)
    async def update_category(
        self,
        category_id: str,
        name: str,
        category_type: str,
        updated_at: str,
    ) -> bool:
        async with self.db.transaction():
            cursor = await self.db.execute(
                "UPDATE categories SET name = ?, type = ?, updated_at = ? WHERE id = ?",
                (name, category_type, updated_at, category_id),
            )
        return cursor.rowcount > 0

    @store_operation(conflict_message="Cannot delete: this category is in use.")
    async def delete_category(self, category_id: str) -> bool:
        """카테고리 삭제 (참조 중이면 외래키 제약으로 ConflictError)"""
        async with self.db.transaction():
            cursor = await self.db.execute(
                "DELETE FROM categories WHERE id = ?",
                (category_id,),
            )
        return cursor.rowcount > 0

    @store_operation()
    async def count_category_references(self, category_id: str) -> int:
        """카테고리를 참조하는 거래 수 (무효 거래 포함)"""
        return await self.count_transactions(category_id=category_id, voided=None)

    @store_operation()
    async def get_category(self, category_id: str) -> dict[str, Any] | None:
        row = await self.db.fetchone(
            "SELECT id, name, type, created_at, updated_at FROM categories WHERE id = ?",
            (category_id,),
        )
        if not row:
            return None
        return {
            "id": row[0],
            "name": row[1],
            "type": row[2],
            "created_at": row[3],
            "updated_at": row[4],
        }

    @store_operation()
    async def list_categories(self, category_type: str | None = None) -> list[dict[str, Any]]:
        """카테고리 목록 (유형, 이름 순, 참조 거래 수 포함)"""
        sql = """
            SELECT c.id, c.name, c.type, c.created_at, COUNT(t.id)
            FROM categories c
            LEFT JOIN transactions t ON t.category_id = c.id
        """
        params: list[Any] = []

        if category_type:
            sql += " WHERE c.type = ?"
            params.append(category_type)

        sql += " GROUP BY c.id ORDER BY c.type ASC, c.name ASC"

        rows = await self.db.fetchall(sql, tuple(params))

        return [
            {
                "id": row[0],
                "name": row[1],
                "type": row[2],
                "created_at": row[3],
                "transaction_count": row[4],
            }
            for row in rows
        ]

    # =====================================
    # 학생
    # =====================================

    @store_operation(conflict_message=STUDENT_ROLL_CONFLICT)
    async def insert_student(self, record: dict[str, Any]) -> str:
        async with self.db.transaction():
            await self.db.execute(
                """
                INSERT INTO students (id, name, class_name, roll_no, status, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record["id"],
                    record["name"],
                    record["class_name"],
                    record["roll_no"],
                    record["status"],
                    record["created_at"],
                    record["created_at"],
                ),
            )
        return record["id"]

    @store_operation(conflict_message=STUDENT_ROLL_CONFLICT)
    async def update_student(
        self,
        student_id: str,
        fields: dict[str, Any],
        updated_at: str,
    ) -> bool:
        async with self.db.transaction():
            cursor = await self.db.execute(
                """
                UPDATE students SET
                    name = ?, class_name = ?, roll_no = ?, status = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    fields["name"],
                    fields["class_name"],
                    fields["roll_no"],
                    fields["status"],
                    updated_at,
                    student_id,
                ),
            )
        return cursor.rowcount > 0

    @store_operation()
    async def get_student(self, student_id: str) -> dict[str, Any] | None:
        row = await self.db.fetchone(
            """
            SELECT id, name, class_name, roll_no, status, created_at, updated_at
            FROM students WHERE id = ?
            """,
            (student_id,),
        )
        if not row:
            return None
        return {
            "id": row[0],
            "name": row[1],
            "class_name": row[2],
            "roll_no": row[3],
            "status": row[4],
            "created_at": row[5],
            "updated_at": row[6],
        }

    @store_operation()
    async def list_students(self, status: str | None = None) -> list[dict[str, Any]]:
        """학생 목록 (학급, 번호 순, 무효 제외 거래 수 포함)"""
        sql = """
            SELECT s.id, s.name, s.class_name, s.roll_no, s.status, s.created_at,
                   COUNT(t.id)
            FROM students s
            LEFT JOIN transactions t ON t.student_id = s.id AND t.is_voided = 0
        """
        params: list[Any] = []

        if status:
            sql += " WHERE s.status = ?"
            params.append(status)

        sql += " GROUP BY s.id ORDER BY s.class_name ASC, s.roll_no ASC"

        rows = await self.db.fetchall(sql, tuple(params))

        return [
            {
                "id": row[0],
                "name": row[1],
                "class_name": row[2],
                "roll_no": row[3],
                "status": row[4],
                "created_at": row[5],
                "transaction_count": row[6],
            }
            for row in rows
        ]

    # =====================================
    # 기초 잔액
    # =====================================

    @store_operation()
    async def insert_opening_balance(
        self,
        balance_id: str,
        amount: Money,
        as_of: date | str,
        created_at: str,
    ) -> str:
        async with self.db.transaction():
            await self.db.execute(
                """
                INSERT INTO opening_balance (id, amount_minor, date, created_at)
                VALUES (?, ?, ?, ?)
                """,
                (balance_id, amount.to_minor(), _iso(as_of), created_at),
            )
        return balance_id

    @store_operation()
    async def latest_opening_balance(self) -> dict[str, Any] | None:
        """가장 최근 날짜의 기초 잔액 (같은 날짜면 최근 생성)"""
        row = await self.db.fetchone(
            """
            SELECT id, amount_minor, date, created_at
            FROM opening_balance
            ORDER BY date DESC, created_at DESC
            LIMIT 1
            """
        )
        if not row:
            return None
        return {
            "id": row[0],
            "amount": Money.from_minor(row[1]),
            "date": row[2],
            "created_at": row[3],
        }

    # =====================================
    # 사용자
    # =====================================

    @store_operation()
    async def upsert_user(
        self,
        user_id: str,
        name: str,
        role: str,
        email: str | None = None,
    ) -> str:
        """사용자 저장 (있으면 이름/역할 갱신)"""
        async with self.db.transaction():
            await self.db.execute(
                """
                INSERT INTO users (id, name, email, role)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    email = excluded.email,
                    role = excluded.role
                """,
                (user_id, name, email, role),
            )
        return user_id
