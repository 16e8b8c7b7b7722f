"""
FastAPI 애플리케이션

라우터 등록, 도메인 에러 → HTTP 상태 변환, DB 생명주기 관리.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import get_settings
from core.errors import (
    AuthorizationError,
    ConflictError,
    LedgerError,
    NotFoundError,
    TransientStoreError,
    ValidationError,
)
from core.ledger.schema import init_ledger_schema
from core.logging import setup_logging
from web.routes import (
    categories,
    dashboard,
    health,
    opening_balance,
    reports,
    students,
    transactions,
)

logger = logging.getLogger(__name__)

# 도메인 에러 → HTTP 상태 코드
ERROR_STATUS: dict[type[LedgerError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    TransientStoreError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리

    시작 시 DB 연결 + 스키마 초기화, 종료 시 연결 정리.
    """
    settings = get_settings()
    setup_logging(
        "web",
        level=settings.log_level,
        log_dir=settings.log_dir,
        retention_days=settings.config.log_retention_days,
    )

    db = SQLiteAdapter(settings.db_path)
    await db.connect()
    await init_ledger_schema(db, seed_categories=True)
    app.state.db = db
    logger.info(f"Web: DB 초기화 완료 ({settings.db_path})")

    try:
        yield
    finally:
        app.state.db = None
        await db.close()
        logger.info("Web: DB 연결 종료 완료")


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """도메인 에러 응답 ({"detail": message})"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            status_code = code
            break

    if status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} → {status_code}: {exc.message}")

    return JSONResponse(status_code=status_code, content={"detail": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 형식 오류 → 400 (첫 번째 오류 필드)"""
    errors = exc.errors()
    if errors:
        location = [str(part) for part in errors[0].get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(location) or "request"
        message = f"Invalid value for '{field}'"
    else:
        message = ValidationError.default_message
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": message})


def create_app() -> FastAPI:
    """FastAPI 앱 생성"""
    application = FastAPI(
        title="School Accounts API",
        description="학교 현금 원장 (수입/지출 기록, 요약, 리포트) API",
        version=health.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS 설정 (개발용)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(LedgerError, ledger_error_handler)
    application.add_exception_handler(RequestValidationError, request_validation_handler)

    # =========================================================================
    # API 라우터 등록
    # =========================================================================

    application.include_router(health.router)
    application.include_router(dashboard.router)
    application.include_router(transactions.router)
    application.include_router(categories.router)
    application.include_router(students.router)
    application.include_router(opening_balance.router)
    application.include_router(reports.router)

    return application


app = create_app()
