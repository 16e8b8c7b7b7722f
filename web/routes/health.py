"""
헬스 체크 엔드포인트

GET /api/health - 서버 상태 확인 (인증 불필요)
"""

from fastapi import APIRouter, Depends

from core.config.loader import Settings
from web.dependencies import get_app_settings
from web.models.responses import HealthResponse

router = APIRouter(prefix="/api", tags=["Health"])

API_VERSION = "1.0.0"


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_app_settings),
) -> HealthResponse:
    """서버 상태 확인

    Returns:
        HealthResponse: status, version, timezone 정보
    """
    return HealthResponse(
        status="ok",
        version=API_VERSION,
        timezone=settings.timezone_name,
    )
