"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수"""

    TIMEZONE: str = "Asia/Kathmandu"
    CURRENCY_SYMBOL: str = "NPR"

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    LOG_LEVEL: str = "INFO"
    LOG_RETENTION_DAYS: int = 7

    # 대시보드/목록 기본값
    PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100
    RECENT_LIMIT: int = 10
    DASHBOARD_MONTHS: int = 6
    REPORT_MONTHS: int = 12
    TOP_CATEGORIES: int = 5


class Limits:
    """입력 길이/금액 제한"""

    CATEGORY_NAME_MAX: int = 100
    STUDENT_NAME_MAX: int = 150
    STUDENT_CLASS_MAX: int = 50
    STUDENT_ROLL_NO_MAX: int = 20
    REFERENCE_NUMBER_MAX: int = 100
    DESCRIPTION_MAX: int = 500

    # 정수부 최대 자릿수 (minor unit 변환 시 INTEGER 범위 보장)
    AMOUNT_INTEGER_DIGITS: int = 12


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    DEFAULT_DB: Path = DATA_DIR / "school_accounts.db"
