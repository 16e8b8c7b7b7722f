"""
Ledger 스키마 초기화

Web 시작 시 자동으로 Ledger 테이블과 인덱스 생성.
CREATE IF NOT EXISTS 패턴으로 안전하게 동작.

금액은 INTEGER minor unit(1/100)으로 저장하여 SQL SUM이 정확하도록 함.
"""

import logging
from typing import TYPE_CHECKING
from uuid import uuid4

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


# 기본 카테고리 (name, type) - 초기 설치 시 선택적으로 삽입
DEFAULT_CATEGORIES: list[tuple[str, str]] = [
    ("Tuition Fee", "INCOME"),
    ("Admission Fee", "INCOME"),
    ("Exam Fee", "INCOME"),
    ("Donation", "INCOME"),
    ("Salary", "EXPENSE"),
    ("Utilities", "EXPENSE"),
    ("Maintenance", "EXPENSE"),
    ("Stationery", "EXPENSE"),
]


async def init_ledger_schema(db: "SQLiteAdapter", seed_categories: bool = False) -> None:
    """Ledger 스키마 초기화 (테이블 + 인덱스)

    이미 존재하는 경우 안전하게 건너뜀 (IF NOT EXISTS).

    Args:
        db: SQLiteAdapter 인스턴스
        seed_categories: 기본 카테고리 삽입 여부
    """
    await _create_ledger_tables(db)
    await _create_ledger_indexes(db)
    if seed_categories:
        await _insert_default_categories(db)
    await db.commit()
    logger.info("Ledger 스키마 초기화 완료")


async def _create_ledger_tables(db: "SQLiteAdapter") -> None:
    """Ledger 테이블 생성"""

    # users 테이블 (작성자 이름 조회용, 인증은 외부)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id               TEXT PRIMARY KEY,
            name             TEXT NOT NULL,
            email            TEXT UNIQUE,
            role             TEXT NOT NULL
                             CHECK (role IN ('ADMIN', 'ACCOUNTANT', 'VIEWER')),
            created_at       TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
        )
    """)

    # categories 테이블
    await db.execute("""
        CREATE TABLE IF NOT EXISTS categories (
            id               TEXT PRIMARY KEY,
            name             TEXT NOT NULL UNIQUE,
            type             TEXT NOT NULL CHECK (type IN ('INCOME', 'EXPENSE')),
            created_at       TEXT NOT NULL,
            updated_at       TEXT NOT NULL
        )
    """)

    # students 테이블 (삭제 없음, 상태 토글만)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS students (
            id               TEXT PRIMARY KEY,
            name             TEXT NOT NULL,
            class_name       TEXT NOT NULL,
            roll_no          TEXT NOT NULL,
            status           TEXT NOT NULL DEFAULT 'ACTIVE'
                             CHECK (status IN ('ACTIVE', 'INACTIVE')),
            created_at       TEXT NOT NULL,
            updated_at       TEXT NOT NULL,
            UNIQUE(class_name, roll_no)
        )
    """)

    # opening_balance 테이블 (가장 최근 날짜가 기준)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS opening_balance (
            id               TEXT PRIMARY KEY,
            amount_minor     INTEGER NOT NULL CHECK (amount_minor >= 0),
            date             TEXT NOT NULL,
            created_at       TEXT NOT NULL
        )
    """)

    # transactions 테이블 (물리 삭제 없음, is_voided만 변경)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS transactions (
            id               TEXT PRIMARY KEY,
            type             TEXT NOT NULL CHECK (type IN ('INCOME', 'EXPENSE')),
            date             TEXT NOT NULL,
            amount_minor     INTEGER NOT NULL CHECK (amount_minor > 0),
            category_id      TEXT NOT NULL,
            student_id       TEXT,
            payment_method   TEXT NOT NULL
                             CHECK (payment_method IN ('CASH', 'BANK', 'ESEWA', 'KHALTI')),
            reference_number TEXT,
            description      TEXT,
            is_voided        INTEGER NOT NULL DEFAULT 0,
            created_by       TEXT NOT NULL,
            created_at       TEXT NOT NULL,
            updated_at       TEXT NOT NULL,
            FOREIGN KEY (category_id) REFERENCES categories(id) ON DELETE RESTRICT,
            FOREIGN KEY (student_id) REFERENCES students(id) ON DELETE RESTRICT
        )
    """)


async def _create_ledger_indexes(db: "SQLiteAdapter") -> None:
    """Ledger 인덱스 생성"""

    # 집계 조회용 (type + voided + 날짜 범위)
    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_type_date
        ON transactions(is_voided, type, date)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_date
        ON transactions(date)
    """)

    # 최근 활동 조회용
    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_created_at
        ON transactions(created_at)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_category
        ON transactions(category_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_student
        ON transactions(student_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_opening_balance_date
        ON opening_balance(date)
    """)


async def _insert_default_categories(db: "SQLiteAdapter") -> None:
    """기본 카테고리 삽입

    이미 존재하는 이름은 무시 (INSERT OR IGNORE).
    """
    from core.utils.timezone import now_utc

    now = now_utc().isoformat()
    await db.executemany(
        """
        INSERT OR IGNORE INTO categories (id, name, type, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?)
        """,
        [
            (str(uuid4()), name, category_type, now, now)
            for name, category_type in DEFAULT_CATEGORIES
        ],
    )

    logger.debug("기본 카테고리 삽입 완료")
