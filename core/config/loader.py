"""
설정 로더

settings.yaml 로드 및 애플리케이션 설정 생성
"""

from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from typing import Any

import yaml

from core.constants import Defaults, Paths, PROJECT_ROOT
from core.logging import resolve_level
from core.utils.timezone import get_zone


@dataclass(frozen=True)
class AppConfig:
    """애플리케이션 설정 (settings.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    db_path: Path
    timezone: str
    currency_symbol: str
    web_secret_key: str
    web_host: str = Defaults.WEB_HOST
    web_port: int = Defaults.WEB_PORT
    log_level: str = Defaults.LOG_LEVEL
    log_dir: Path = Paths.LOGS_DIR
    log_retention_days: int = Defaults.LOG_RETENTION_DAYS


class SettingsLoadError(Exception):
    """Settings 로드 실패 예외"""

    pass


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise SettingsLoadError(f"settings.yaml의 '{name}' 섹션 형식이 잘못되었습니다")
    return section


def load_config(path: Path | None = None) -> AppConfig:
    """settings.yaml 파일 로드

    Args:
        path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        AppConfig 인스턴스

    Raises:
        SettingsLoadError: 파일이 없거나 형식이 잘못된 경우, secret_key 누락
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        raise SettingsLoadError(f"settings.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        raise SettingsLoadError("settings.yaml이 비어 있습니다")
    if not isinstance(data, dict):
        raise SettingsLoadError("settings.yaml 최상위는 매핑이어야 합니다")

    database = _section(data, "database")
    locale = _section(data, "locale")
    web = _section(data, "web")
    log = _section(data, "logging")

    # DB 경로 (상대 경로는 프로젝트 루트 기준, ':memory:'는 그대로)
    raw_db_path = database.get("path")
    if not raw_db_path:
        db_path = Paths.DEFAULT_DB
    elif raw_db_path == ":memory:":
        db_path = Path(raw_db_path)
    else:
        db_path = Path(raw_db_path)
        if not db_path.is_absolute():
            db_path = PROJECT_ROOT / db_path

    # 타임존 검증
    tz_name = locale.get("timezone") or Defaults.TIMEZONE
    try:
        get_zone(tz_name)
    except ValueError as e:
        raise SettingsLoadError(f"유효하지 않은 timezone입니다: '{tz_name}'") from e

    web_secret_key = web.get("secret_key", "")
    if not web_secret_key:
        raise SettingsLoadError(
            "settings.yaml의 web 섹션에 'secret_key'가 없습니다"
        )

    try:
        web_port = int(web.get("port", Defaults.WEB_PORT))
    except (TypeError, ValueError) as e:
        raise SettingsLoadError("settings.yaml의 web.port는 정수여야 합니다") from e

    log_level = str(log.get("level") or Defaults.LOG_LEVEL).upper()
    try:
        resolve_level(log_level)
    except ValueError as e:
        raise SettingsLoadError(f"유효하지 않은 logging.level입니다: '{log_level}'") from e

    log_dir = Path(log.get("dir") or Paths.LOGS_DIR)
    if not log_dir.is_absolute():
        log_dir = PROJECT_ROOT / log_dir

    try:
        log_retention_days = int(log.get("retention_days", Defaults.LOG_RETENTION_DAYS))
    except (TypeError, ValueError) as e:
        raise SettingsLoadError("settings.yaml의 logging.retention_days는 정수여야 합니다") from e

    return AppConfig(
        db_path=db_path,
        timezone=tz_name,
        currency_symbol=locale.get("currency_symbol") or Defaults.CURRENCY_SYMBOL,
        web_secret_key=web_secret_key,
        web_host=web.get("host") or Defaults.WEB_HOST,
        web_port=web_port,
        log_level=log_level,
        log_dir=log_dir,
        log_retention_days=log_retention_days,
    )


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _config: AppConfig | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._config is None:
            type(self)._config = load_config(settings_path)

    @property
    def config(self) -> AppConfig:
        assert self._config is not None
        return self._config

    @property
    def db_path(self) -> Path:
        """DB 경로"""
        return self.config.db_path

    @property
    def timezone_name(self) -> str:
        """로컬 타임존 이름"""
        return self.config.timezone

    @property
    def tz(self) -> tzinfo:
        """로컬 타임존"""
        return get_zone(self.config.timezone)

    @property
    def currency_symbol(self) -> str:
        """통화 기호"""
        return self.config.currency_symbol

    @property
    def log_level(self) -> str:
        """로그 레벨"""
        return self.config.log_level

    @property
    def log_dir(self) -> Path:
        """로그 루트 디렉토리"""
        return self.config.log_dir

    @property
    def web_secret_key(self) -> str:
        """Web JWT Secret Key"""
        return self.config.web_secret_key

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(settings_path)
