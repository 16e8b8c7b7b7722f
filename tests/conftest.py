"""
pytest 공통 fixture 정의

임시 설정 파일, 인메모리 원장 DB, 역할별 Caller
"""

import tempfile
from datetime import tzinfo
from pathlib import Path
from uuid import uuid4

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from core.ledger.schema import init_ledger_schema
from core.ledger.store import LedgerStore
from core.types import Caller, Role
from core.utils.timezone import get_zone, now_utc

TEST_SECRET_KEY = "test_jwt_secret_key_xyz"


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성"""
    settings_content = f"""# 테스트용 settings.yaml
database:
  path: ":memory:"

locale:
  timezone: Asia/Kathmandu
  currency_symbol: NPR

web:
  secret_key: "{TEST_SECRET_KEY}"
  host: 127.0.0.1
  port: 8123
"""
    settings_path = temp_dir / "settings.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture
def settings(temp_settings_file: Path) -> Settings:
    """임시 settings.yaml로 로드한 Settings 싱글턴"""
    Settings.reset()
    instance = Settings(temp_settings_file)
    yield instance
    Settings.reset()


@pytest.fixture
def tz() -> tzinfo:
    """로컬 타임존 (Asia/Kathmandu)"""
    return get_zone("Asia/Kathmandu")


@pytest.fixture
def admin() -> Caller:
    return Caller.create("user-admin", Role.ADMIN)


@pytest.fixture
def accountant() -> Caller:
    return Caller.create("user-accountant", Role.ACCOUNTANT)


@pytest.fixture
def viewer() -> Caller:
    return Caller.create("user-viewer", Role.VIEWER)


@pytest_asyncio.fixture
async def db() -> SQLiteAdapter:
    """스키마가 초기화된 인메모리 DB (사용자 3명 등록)"""
    adapter = SQLiteAdapter(":memory:")
    await adapter.connect()
    await init_ledger_schema(adapter)

    store = LedgerStore(adapter)
    await store.upsert_user("user-admin", "Admin", Role.ADMIN.value)
    await store.upsert_user("user-accountant", "Accountant", Role.ACCOUNTANT.value)
    await store.upsert_user("user-viewer", "Viewer", Role.VIEWER.value)

    yield adapter

    await adapter.close()


@pytest.fixture
def store(db: SQLiteAdapter) -> LedgerStore:
    return LedgerStore(db)


@pytest_asyncio.fixture
async def income_category(store: LedgerStore) -> str:
    """수입 카테고리 ID (Tuition Fee)"""
    category_id = str(uuid4())
    await store.insert_category(category_id, "Tuition Fee", "INCOME", now_utc().isoformat())
    return category_id


@pytest_asyncio.fixture
async def expense_category(store: LedgerStore) -> str:
    """지출 카테고리 ID (Salary)"""
    category_id = str(uuid4())
    await store.insert_category(category_id, "Salary", "EXPENSE", now_utc().isoformat())
    return category_id


@pytest_asyncio.fixture
async def student(store: LedgerStore) -> str:
    """학생 ID (Grade 5, roll 12)"""
    student_id = str(uuid4())
    await store.insert_student({
        "id": student_id,
        "name": "Sita Sharma",
        "class_name": "Grade 5",
        "roll_no": "12",
        "status": "ACTIVE",
        "created_at": now_utc().isoformat(),
    })
    return student_id
