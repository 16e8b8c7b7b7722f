"""
Category 서비스

카테고리 생성/수정/삭제/목록.
거래가 참조 중인 카테고리는 삭제 불가 (무효 거래 포함).
"""

import logging
from typing import Any
from uuid import uuid4

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.inputs import CategoryInput, validate_input
from core.domain.policy import Operation, authorize
from core.errors import ConflictError, NotFoundError, TransientStoreError, ValidationError
from core.ledger.store import LedgerStore
from core.types import Caller, CategoryType
from core.utils.timezone import now_utc

logger = logging.getLogger(__name__)

CATEGORY_NOT_FOUND = "Category not found"


def _delete_conflict_message(count: int) -> str:
    return (
        f"Cannot delete: {count} transaction(s) use this category. "
        "Consider renaming it instead."
    )


class CategoryService:
    """Category 서비스

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.store = LedgerStore(db)

    async def create(self, payload: dict[str, Any] | CategoryInput, caller: Caller | None) -> dict[str, Any]:
        """카테고리 생성 (ADMIN, ACCOUNTANT)

        Raises:
            ConflictError: 같은 이름의 카테고리 존재
        """
        authorize(caller, Operation.CATEGORY_CREATE)
        data = validate_input(CategoryInput, payload)

        category_id = str(uuid4())
        await self.store.insert_category(
            category_id,
            data.name,
            data.type.value,
            created_at=now_utc().isoformat(),
        )

        logger.info(f"카테고리 생성: id={category_id}, name={data.name}, type={data.type.value}")

        category = await self.store.get_category(category_id)
        if category is None:
            raise TransientStoreError()
        return category

    async def update(
        self,
        category_id: str,
        payload: dict[str, Any] | CategoryInput,
        caller: Caller | None,
    ) -> dict[str, Any]:
        """카테고리 수정 (ADMIN 전용)

        Raises:
            NotFoundError: 카테고리 없음
            ConflictError: 같은 이름의 카테고리 존재
        """
        authorize(caller, Operation.CATEGORY_UPDATE)
        data = validate_input(CategoryInput, payload)

        updated = await self.store.update_category(
            category_id,
            data.name,
            data.type.value,
            updated_at=now_utc().isoformat(),
        )
        if not updated:
            raise NotFoundError(CATEGORY_NOT_FOUND)

        logger.info(f"카테고리 수정: id={category_id}, name={data.name}")

        category = await self.store.get_category(category_id)
        if category is None:
            raise NotFoundError(CATEGORY_NOT_FOUND)
        return category

    async def delete(self, category_id: str, caller: Caller | None) -> None:
        """카테고리 삭제 (ADMIN 전용)

        Raises:
            NotFoundError: 카테고리 없음
            ConflictError: 참조하는 거래 존재 (카테고리 유지)
        """
        authorize(caller, Operation.CATEGORY_DELETE)

        if await self.store.get_category(category_id) is None:
            raise NotFoundError(CATEGORY_NOT_FOUND)

        references = await self.store.count_category_references(category_id)
        if references > 0:
            raise ConflictError(_delete_conflict_message(references))

        if not await self.store.delete_category(category_id):
            raise NotFoundError(CATEGORY_NOT_FOUND)

        logger.info(f"카테고리 삭제: id={category_id}")

    async def list(
        self,
        caller: Caller | None,
        category_type: str | None = None,
    ) -> list[dict[str, Any]]:
        """카테고리 목록 (유형, 이름 순, 거래 수 포함)"""
        authorize(caller, Operation.VIEW)

        if category_type:
            try:
                category_type = CategoryType(category_type.upper()).value
            except ValueError as e:
                raise ValidationError("Invalid category type") from e

        return await self.store.list_categories(category_type)
