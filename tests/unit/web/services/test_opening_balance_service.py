"""OpeningBalanceService 테스트"""

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import AuthorizationError, ValidationError
from core.types import Caller
from web.services.opening_balance_service import OpeningBalanceService

pytestmark = pytest.mark.asyncio


@pytest.fixture
def service(db: SQLiteAdapter) -> OpeningBalanceService:
    return OpeningBalanceService(db)


class TestOpeningBalance:
    async def test_none_before_set(self, service: OpeningBalanceService, viewer: Caller) -> None:
        assert await service.current(viewer) is None

    async def test_set_and_read(self, service: OpeningBalanceService, admin: Caller, viewer: Caller) -> None:
        result = await service.set({"amount": "50000", "date": "2026-01-01"}, admin)

        assert str(result["amount"]) == "50000.00"
        assert (await service.current(viewer))["id"] == result["id"]

    async def test_zero_allowed(self, service: OpeningBalanceService, admin: Caller) -> None:
        result = await service.set({"amount": "0", "date": "2026-01-01"}, admin)

        assert str(result["amount"]) == "0.00"

    async def test_history_kept(self, db: SQLiteAdapter, service: OpeningBalanceService, admin: Caller) -> None:
        await service.set({"amount": "100", "date": "2026-01-01"}, admin)
        await service.set({"amount": "200", "date": "2026-03-01"}, admin)

        row = await db.fetchone("SELECT COUNT(*) FROM opening_balance")
        assert row[0] == 2

    async def test_accountant_denied(self, service: OpeningBalanceService, accountant: Caller) -> None:
        with pytest.raises(AuthorizationError):
            await service.set({"amount": "100", "date": "2026-01-01"}, accountant)

    async def test_negative_rejected(self, service: OpeningBalanceService, admin: Caller) -> None:
        with pytest.raises(ValidationError):
            await service.set({"amount": "-1", "date": "2026-01-01"}, admin)
