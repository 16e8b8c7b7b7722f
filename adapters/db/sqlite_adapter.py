"""
SQLite 어댑터

원장 DB 연결 관리. Web 프로세스당 하나의 연결을 생성하여 서비스가 공유.

- 파일 DB: WAL 모드 + synchronous=NORMAL
- 외래 키 제약 항상 활성화
- 쓰기 트랜잭션은 연결 단위 Lock으로 직렬화
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Iterable, Sequence

import aiosqlite

logger = logging.getLogger(__name__)

IN_MEMORY = ":memory:"

# 잠금 대기 (ms)
BUSY_TIMEOUT_MS = 30000

Params = Sequence[Any] | None


async def create_connection(db_path: Path | str) -> aiosqlite.Connection:
    """원장 DB 연결 생성

    Args:
        db_path: DB 파일 경로 (":memory:" 허용, 부모 디렉토리 자동 생성)

    Returns:
        PRAGMA가 적용된 aiosqlite 연결
    """
    target = str(db_path)
    in_memory = target == IN_MEMORY

    if not in_memory:
        Path(target).parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(target)

    pragmas = [f"busy_timeout={BUSY_TIMEOUT_MS}", "foreign_keys=ON"]
    if not in_memory:
        pragmas += ["journal_mode=WAL", "synchronous=NORMAL"]
    for pragma in pragmas:
        await conn.execute(f"PRAGMA {pragma}")

    logger.info(f"SQLite 연결: {target} (wal={not in_memory})")
    return conn


class SQLiteAdapter:
    """원장 DB 어댑터

    조회는 공유 연결에서 바로 실행하고, 변경은 transaction()으로 묶어
    성공 시 커밋 / 예외 시 롤백.

    Args:
        db_path: DB 파일 경로 또는 ":memory:"

    사용 예시:
    ```python
    async with SQLiteAdapter(settings.db_path) as db:
        async with db.transaction():
            await db.execute("UPDATE transactions SET ...", (...))
    ```
    """

    def __init__(self, db_path: Path | str):
        self.db_path = db_path if str(db_path) == IN_MEMORY else Path(db_path)
        self._conn: aiosqlite.Connection | None = None
        self._write_lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    @property
    def conn(self) -> aiosqlite.Connection:
        """활성 연결

        Raises:
            RuntimeError: connect() 이전 또는 close() 이후
        """
        if self._conn is None:
            raise RuntimeError("Not connected to database")
        return self._conn

    async def connect(self) -> None:
        if self._conn is None:
            self._conn = await create_connection(self.db_path)

    async def close(self) -> None:
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        await conn.close()
        logger.info(f"SQLite 연결 종료: {self.db_path}")

    # -------------------------------------------------------------------------
    # 실행 / 조회
    # -------------------------------------------------------------------------

    async def execute(self, sql: str, parameters: Params = None) -> aiosqlite.Cursor:
        return await self.conn.execute(sql, tuple(parameters or ()))

    async def executemany(self, sql: str, rows: Iterable[Sequence[Any]]) -> aiosqlite.Cursor:
        return await self.conn.executemany(sql, [tuple(row) for row in rows])

    async def fetchone(self, sql: str, parameters: Params = None) -> tuple[Any, ...] | None:
        async with self.conn.execute(sql, tuple(parameters or ())) as cursor:
            return await cursor.fetchone()

    async def fetchall(self, sql: str, parameters: Params = None) -> list[tuple[Any, ...]]:
        async with self.conn.execute(sql, tuple(parameters or ())) as cursor:
            return list(await cursor.fetchall())

    async def fetchvalue(self, sql: str, parameters: Params = None, default: Any = None) -> Any:
        """첫 행 첫 컬럼 (SUM/COUNT 등 단일 값)

        행이 없거나 값이 NULL이면 default.
        """
        row = await self.fetchone(sql, parameters)
        if row is None or row[0] is None:
            return default
        return row[0]

    async def commit(self) -> None:
        await self.conn.commit()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """쓰기 트랜잭션

        동시 요청의 변경이 같은 연결에서 섞이지 않도록 Lock 보유 중 실행.
        성공 시 커밋, 예외 시 롤백 후 재발생.
        """
        conn = self.conn
        async with self._write_lock:
            try:
                yield conn
            except BaseException:
                await conn.rollback()
                raise
            await conn.commit()

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
