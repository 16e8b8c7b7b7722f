"""
요청 스키마 (Pydantic)

Web API 요청 본문 형태 정의 (문서화용).
필드 값 검증은 서비스 계층(core.domain.inputs)에서 수행하므로
여기서는 모든 필드를 선택 문자열로 받음.
"""

from pydantic import BaseModel, ConfigDict, Field


class _RequestModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TransactionRequest(_RequestModel):
    """거래 생성/수정 요청"""

    type: str | None = Field(default=None, description="INCOME / EXPENSE")
    date: str | None = Field(default=None, description="거래 날짜 (YYYY-MM-DD)")
    amount: str | float | None = Field(default=None, description="금액 문자열 (예: '15000.00', 숫자는 거부)")
    category_id: str | None = Field(default=None, alias="categoryId", description="카테고리 ID")
    student_id: str | None = Field(default=None, alias="studentId", description="학생 ID (선택)")
    payment_method: str | None = Field(
        default=None,
        alias="paymentMethod",
        description="CASH / BANK / ESEWA / KHALTI",
    )
    reference_number: str | None = Field(
        default=None, alias="referenceNumber", description="참조 번호 (최대 100자)"
    )
    description: str | None = Field(default=None, description="설명 (최대 500자)")

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "type": "INCOME",
                    "date": "2026-02-21",
                    "amount": "15000.00",
                    "category_id": "3f2b8c1e-5d4a-4b9e-9c7f-2a1d6e8b0c45",
                    "payment_method": "CASH",
                    "description": "Tuition fee - Grade 5",
                }
            ]
        },
    )


class CategoryRequest(_RequestModel):
    """카테고리 생성/수정 요청"""

    name: str | None = Field(default=None, description="카테고리 이름 (최대 100자)")
    type: str | None = Field(default=None, description="INCOME / EXPENSE")


class StudentRequest(_RequestModel):
    """학생 등록/수정 요청"""

    name: str | None = Field(default=None, description="학생 이름 (최대 150자)")
    class_name: str | None = Field(default=None, alias="class", description="학급 (최대 50자)")
    roll_no: str | None = Field(default=None, alias="rollNo", description="번호 (최대 20자)")
    status: str | None = Field(default=None, description="ACTIVE / INACTIVE")


class OpeningBalanceRequest(_RequestModel):
    """기초 잔액 설정 요청"""

    amount: str | float | None = Field(default=None, description="금액 문자열 (0 허용, 숫자는 거부)")
    date: str | None = Field(default=None, description="기준 날짜 (YYYY-MM-DD)")
