"""
원장 DB 초기화 및 사용자 토큰 발급

사용법:
    python -m scripts.init_db --seed-categories
    python -m scripts.init_db --opening-balance 50000.00 --opening-date 2026-01-01
    python -m scripts.init_db --user-id admin --user-name "Admin" --role ADMIN
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from uuid import uuid4

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import get_settings
from core.ledger.schema import init_ledger_schema
from core.ledger.store import LedgerStore
from core.logging import setup_logging
from core.money import parse_amount
from core.types import Role
from core.utils.timezone import now_utc, parse_iso_date
from web.auth import issue_token

logger = logging.getLogger(__name__)


async def run(args: argparse.Namespace) -> None:
    """스키마 생성 → 기초 잔액 → 사용자 등록 순서로 실행"""
    settings = get_settings(Path(args.settings) if args.settings else None)
    setup_logging("init_db", level=settings.log_level, to_file=False)
    db_path = Path(args.db) if args.db else settings.db_path

    async with SQLiteAdapter(db_path) as db:
        await init_ledger_schema(db, seed_categories=args.seed_categories)
        store = LedgerStore(db)

        if args.opening_balance is not None:
            amount = parse_amount(args.opening_balance, allow_zero=True)
            as_of = parse_iso_date(args.opening_date)
            await store.insert_opening_balance(
                str(uuid4()), amount, as_of, created_at=now_utc().isoformat()
            )
            logger.info(f"기초 잔액 등록: {amount} ({as_of})")

        if args.user_id:
            await store.upsert_user(
                args.user_id,
                args.user_name or args.user_id,
                args.role,
                email=args.email,
            )
            token = issue_token(args.user_id, args.role, settings.web_secret_key)
            logger.info(f"사용자 등록: {args.user_id} ({args.role})")
            print(token)

    logger.info(f"DB 초기화 완료: {db_path}")


def main() -> None:
    parser = argparse.ArgumentParser(description="School Accounts DB 초기화")
    parser.add_argument("--settings", help="settings.yaml 경로 (기본: config/settings.yaml)")
    parser.add_argument("--db", help="DB 경로 (기본: settings.yaml database.path)")
    parser.add_argument("--seed-categories", action="store_true", help="기본 카테고리 삽입")
    parser.add_argument("--opening-balance", help="기초 잔액 (예: 50000.00)")
    parser.add_argument("--opening-date", help="기초 잔액 기준일 (YYYY-MM-DD)")
    parser.add_argument("--user-id", help="등록할 사용자 ID (토큰 출력)")
    parser.add_argument("--user-name", help="사용자 이름")
    parser.add_argument("--email", help="사용자 이메일")
    parser.add_argument(
        "--role",
        choices=[role.value for role in Role],
        default=Role.VIEWER.value,
        help="사용자 역할",
    )
    args = parser.parse_args()

    if args.opening_balance is not None and not args.opening_date:
        parser.error("--opening-balance 사용 시 --opening-date 필요")

    asyncio.run(run(args))


if __name__ == "__main__":
    main()
