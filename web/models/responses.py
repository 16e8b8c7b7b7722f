"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화.
금액은 소수점 2자리 문자열 ("15000.00"), 날짜는 YYYY-MM-DD.
"""

from typing import Annotated

from pydantic import BaseModel, BeforeValidator, Field

# Money → "15000.00"
MoneyStr = Annotated[str, BeforeValidator(lambda value: str(value))]


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    version: str = Field(..., description="API 버전")
    timezone: str = Field(..., description="로컬 타임존")


class SummaryResponse(BaseModel):
    """일 요약 응답"""

    date: str = Field(..., description="대상 날짜")
    income: MoneyStr = Field(..., description="수입 합계")
    expense: MoneyStr = Field(..., description="지출 합계")
    net: MoneyStr = Field(..., description="순액 (수입 - 지출)")


class MonthlySummaryResponse(BaseModel):
    """월 요약 응답"""

    month: str = Field(..., description="월 라벨 (예: 'Aug 2025')")
    date_from: str = Field(..., description="월 시작일")
    date_to: str = Field(..., description="월 종료일")
    income: MoneyStr
    expense: MoneyStr
    net: MoneyStr


class BalanceResponse(BaseModel):
    """누적 잔액 응답"""

    balance: MoneyStr = Field(..., description="기초 잔액 + 수입 - 지출")
    display: str = Field(..., description="통화 기호 포함 표시 문자열 (예: 'NPR 15,000.00')")
    as_of: str | None = Field(default=None, description="기준일 (없으면 전체)")


class SeriesItemResponse(BaseModel):
    """월별 시계열 항목"""

    month: str
    income: MoneyStr
    expense: MoneyStr


class CategoryAmountResponse(BaseModel):
    """카테고리별 합계"""

    category_id: str | None = None
    name: str
    type: str
    amount: MoneyStr


class TransactionResponse(BaseModel):
    """거래 응답"""

    id: str
    type: str
    date: str
    amount: MoneyStr
    category_id: str
    category_name: str | None = None
    category_type: str | None = None
    student_id: str | None = None
    student_name: str | None = None
    student_class: str | None = None
    payment_method: str
    reference_number: str | None = None
    description: str | None = None
    is_voided: bool
    created_by: str
    created_by_name: str | None = None
    created_at: str
    updated_at: str


class PaginationResponse(BaseModel):
    """페이지 메타데이터"""

    total: int
    page: int
    limit: int
    total_pages: int
    has_next: bool
    has_prev: bool


class TransactionListResponse(BaseModel):
    """거래 목록 응답"""

    data: list[TransactionResponse]
    pagination: PaginationResponse


class CreatedResponse(BaseModel):
    """생성 결과 (ID)"""

    id: str


class DashboardResponse(BaseModel):
    """대시보드 전체 응답"""

    today: SummaryResponse
    month: MonthlySummaryResponse
    balance: MoneyStr
    series: list[SeriesItemResponse]
    categories: list[CategoryAmountResponse]
    recent: list[TransactionResponse]


class CategoryResponse(BaseModel):
    """카테고리 응답"""

    id: str
    name: str
    type: str
    created_at: str
    transaction_count: int | None = None


class StudentResponse(BaseModel):
    """학생 응답"""

    id: str
    name: str
    class_name: str
    roll_no: str
    status: str
    created_at: str
    transaction_count: int | None = None


class StudentTotalsResponse(BaseModel):
    income: MoneyStr
    expense: MoneyStr
    net: MoneyStr


class StudentStatementResponse(BaseModel):
    """학생별 거래 내역서"""

    student: StudentResponse
    totals: StudentTotalsResponse
    data: list[TransactionResponse]
    pagination: PaginationResponse


class OpeningBalanceResponse(BaseModel):
    """기초 잔액 응답"""

    id: str
    amount: MoneyStr
    date: str
    created_at: str


class ReportSummaryResponse(BaseModel):
    """전체 기간 리포트 응답"""

    income: MoneyStr
    expense: MoneyStr
    net: MoneyStr
    series: list[SeriesItemResponse]
    top_categories: list[CategoryAmountResponse]

