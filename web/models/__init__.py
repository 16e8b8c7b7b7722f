"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    CategoryRequest,
    OpeningBalanceRequest,
    StudentRequest,
    TransactionRequest,
)
from web.models.responses import (
    BalanceResponse,
    CategoryAmountResponse,
    CategoryResponse,
    CreatedResponse,
    DashboardResponse,
    HealthResponse,
    MonthlySummaryResponse,
    OpeningBalanceResponse,
    PaginationResponse,
    ReportSummaryResponse,
    SeriesItemResponse,
    StudentResponse,
    StudentStatementResponse,
    SummaryResponse,
    TransactionListResponse,
    TransactionResponse,
)

__all__ = [
    # Requests
    "TransactionRequest",
    "CategoryRequest",
    "StudentRequest",
    "OpeningBalanceRequest",
    # Responses
    "HealthResponse",
    "SummaryResponse",
    "MonthlySummaryResponse",
    "BalanceResponse",
    "SeriesItemResponse",
    "CategoryAmountResponse",
    "TransactionResponse",
    "TransactionListResponse",
    "PaginationResponse",
    "CreatedResponse",
    "DashboardResponse",
    "CategoryResponse",
    "StudentResponse",
    "StudentStatementResponse",
    "OpeningBalanceResponse",
    "ReportSummaryResponse",
]
