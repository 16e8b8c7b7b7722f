"""
학교 현금 원장 (Ledger)

거래/카테고리/학생/기초잔액 저장소와 스키마.
물리 삭제 없이 is_voided 플래그로만 거래를 종료.

사용 예시:
```python
from core.ledger import LedgerStore, init_ledger_schema

await init_ledger_schema(db, seed_categories=True)
store = LedgerStore(db)

totals = await store.sum_by_type(date_from="2026-02-01", date_to="2026-02-28")
# {"INCOME": Money("15000.00"), "EXPENSE": Money("5000.00")}
```
"""

from core.ledger.schema import DEFAULT_CATEGORIES, init_ledger_schema
from core.ledger.store import (
    CATEGORY_NAME_CONFLICT,
    STUDENT_ROLL_CONFLICT,
    LedgerStore,
    store_operation,
)

__all__ = [
    "LedgerStore",
    "store_operation",
    "init_ledger_schema",
    "DEFAULT_CATEGORIES",
    "CATEGORY_NAME_CONFLICT",
    "STUDENT_ROLL_CONFLICT",
]
