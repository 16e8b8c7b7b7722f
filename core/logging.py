"""
로깅 설정 유틸리티

Web 프로세스와 관리 스크립트 공통 로깅 설정.
- 콘솔: settings.yaml logging.level
- 파일: logs/<process>/<process>.log, 매일 자정 롤링

사용법:
    from core.logging import setup_logging
    setup_logging("web", level=settings.log_level, log_dir=settings.log_dir)
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from core.constants import Defaults, Paths

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# 요청/쿼리마다 로그를 남기는 라이브러리
QUIET_LOGGERS = ("aiosqlite", "httpcore", "httpx", "asyncio", "uvicorn.access")


def resolve_level(level: str | int) -> int:
    """"INFO" / "debug" / 20 → logging 레벨 값

    Raises:
        ValueError: 알 수 없는 레벨 이름
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def setup_logging(
    process_name: str,
    level: str | int = Defaults.LOG_LEVEL,
    log_dir: Path | None = None,
    retention_days: int = Defaults.LOG_RETENTION_DAYS,
    to_file: bool = True,
) -> logging.Logger:
    """루트 로거 초기화

    기존 핸들러는 제거 후 다시 등록 (재호출해도 중복 출력 없음).

    Args:
        process_name: 프로세스 이름 ("web", "init_db")
        level: 콘솔/파일 공통 레벨
        log_dir: 로그 루트 (None이면 프로젝트 logs/)
        retention_days: 보관할 일별 백업 파일 수
        to_file: 파일 핸들러 사용 여부

    Returns:
        루트 Logger
    """
    level_value = resolve_level(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level_value)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    log_file: Path | None = None
    if to_file:
        target_dir = (log_dir or Paths.LOGS_DIR) / process_name
        target_dir.mkdir(parents=True, exist_ok=True)
        log_file = target_dir / f"{process_name}.log"

        file_handler = TimedRotatingFileHandler(
            filename=log_file,
            when="midnight",
            backupCount=retention_days,
            encoding="utf-8",
        )
        file_handler.suffix = "%Y-%m-%d"  # web.log.2026-02-21
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for logger_name in QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(max(level_value, logging.WARNING))

    root_logger.info(
        f"로깅 초기화: {process_name} (level={logging.getLevelName(level_value)}, file={log_file})"
    )
    return root_logger
