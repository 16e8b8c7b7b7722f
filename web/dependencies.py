"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
DB 어댑터는 앱 lifespan에서 프로세스당 하나 생성하여 app.state에 보관.
"""

from datetime import tzinfo

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings, get_settings
from core.types import Caller
from web.auth import TokenError, decode_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings() -> Settings:
    """애플리케이션 설정 반환"""
    return get_settings()


def get_db(request: Request) -> SQLiteAdapter:
    """공유 DB 어댑터 반환

    Raises:
        HTTPException: 503 (lifespan에서 초기화되지 않은 경우)
    """
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not initialized",
        )
    return db


def get_tz(settings: Settings = Depends(get_app_settings)) -> tzinfo:
    """로컬 타임존"""
    return settings.tz


def get_caller(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
) -> Caller:
    """Bearer 토큰에서 요청 주체 추출

    Raises:
        HTTPException: 401 (토큰 없음 또는 검증 실패)
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return decode_token(credentials.credentials, settings.web_secret_key)
    except TokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
