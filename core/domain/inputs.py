"""
입력 스키마 (Pydantic)

경계 입력 검증. 실패 시 첫 번째 실패 필드의 메시지를
core.errors.ValidationError로 변환.

필드 정의 순서가 곧 검증 순서이므로 순서 변경 시 주의.
"""

import datetime as dt
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.constants import Defaults, Limits
from core.errors import LedgerError, ValidationError
from core.money import Money, parse_amount
from core.types import CategoryType, PaymentMethod, StudentStatus, TransactionType
from core.utils.timezone import parse_iso_date

ModelT = TypeVar("ModelT", bound=BaseModel)


def _blank_to_none(value: Any) -> Any:
    """빈 문자열 → None (선택 필드용)"""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _required_text(value: Any, required_message: str, max_length: int, too_long_message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(required_message)
    value = value.strip()
    if len(value) > max_length:
        raise ValueError(too_long_message)
    return value


def _optional_text(value: Any, max_length: int, too_long_message: str) -> str | None:
    value = _blank_to_none(value)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(too_long_message)
    value = value.strip()
    if len(value) > max_length:
        raise ValueError(too_long_message)
    return value


def _enum_value(enum_cls: type, value: Any, message: str) -> Any:
    try:
        return enum_cls(value.upper() if isinstance(value, str) else value)
    except ValueError as e:
        raise ValueError(message) from e


def _as_ledger_error(e: LedgerError) -> ValueError:
    return ValueError(e.message)


class _InputModel(BaseModel):
    """입력 모델 공통 설정"""

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        arbitrary_types_allowed=True,
        validate_default=True,
        populate_by_name=True,
    )


class TransactionInput(_InputModel):
    """거래 생성/수정 입력"""

    type: TransactionType | None = None
    date: dt.date | None = None
    amount: Money | None = None
    category_id: str | None = Field(default=None, alias="categoryId")
    student_id: str | None = Field(default=None, alias="studentId")
    payment_method: PaymentMethod | None = Field(default=None, alias="paymentMethod")
    reference_number: str | None = Field(default=None, alias="referenceNumber")
    description: str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _check_type(cls, value: Any) -> TransactionType:
        return _enum_value(TransactionType, value, "Invalid transaction type")

    @field_validator("date", mode="before")
    @classmethod
    def _check_date(cls, value: Any) -> dt.date:
        try:
            return parse_iso_date(value)
        except LedgerError as e:
            raise _as_ledger_error(e) from e

    @field_validator("amount", mode="before")
    @classmethod
    def _check_amount(cls, value: Any) -> Money:
        if value is None or value == "":
            raise ValueError("Amount is required")
        try:
            return parse_amount(value)
        except LedgerError as e:
            raise _as_ledger_error(e) from e

    @field_validator("category_id", mode="before")
    @classmethod
    def _check_category(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Invalid category")
        return value.strip()

    @field_validator("student_id", mode="before")
    @classmethod
    def _check_student(cls, value: Any) -> str | None:
        value = _blank_to_none(value)
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError("Invalid student")
        return value.strip()

    @field_validator("payment_method", mode="before")
    @classmethod
    def _check_payment_method(cls, value: Any) -> PaymentMethod:
        return _enum_value(PaymentMethod, value, "Invalid payment method")

    @field_validator("reference_number", mode="before")
    @classmethod
    def _check_reference(cls, value: Any) -> str | None:
        return _optional_text(value, Limits.REFERENCE_NUMBER_MAX, "Reference number is too long")

    @field_validator("description", mode="before")
    @classmethod
    def _check_description(cls, value: Any) -> str | None:
        return _optional_text(value, Limits.DESCRIPTION_MAX, "Description is too long")

    def to_record(self) -> dict[str, Any]:
        """저장소 기록용 dict"""
        return {
            "type": self.type.value,
            "date": self.date,
            "amount": self.amount,
            "category_id": self.category_id,
            "student_id": self.student_id,
            "payment_method": self.payment_method.value,
            "reference_number": self.reference_number,
            "description": self.description,
        }


class TransactionFilter(_InputModel):
    """거래 목록 필터 (모든 필드 선택)"""

    date_from: dt.date | None = Field(default=None, alias="dateFrom")
    date_to: dt.date | None = Field(default=None, alias="dateTo")
    type: TransactionType | None = None
    category_id: str | None = Field(default=None, alias="categoryId")
    payment_method: PaymentMethod | None = Field(default=None, alias="paymentMethod")
    page: int = 1
    limit: int = Defaults.PAGE_SIZE

    @field_validator("date_from", "date_to", mode="before")
    @classmethod
    def _check_dates(cls, value: Any) -> dt.date | None:
        value = _blank_to_none(value)
        if value is None:
            return None
        try:
            return parse_iso_date(value)
        except LedgerError as e:
            raise _as_ledger_error(e) from e

    @field_validator("type", mode="before")
    @classmethod
    def _check_type(cls, value: Any) -> TransactionType | None:
        value = _blank_to_none(value)
        if value is None:
            return None
        return _enum_value(TransactionType, value, "Invalid transaction type")

    @field_validator("category_id", mode="before")
    @classmethod
    def _check_category(cls, value: Any) -> str | None:
        return _blank_to_none(value)

    @field_validator("payment_method", mode="before")
    @classmethod
    def _check_payment_method(cls, value: Any) -> PaymentMethod | None:
        value = _blank_to_none(value)
        if value is None:
            return None
        return _enum_value(PaymentMethod, value, "Invalid payment method")

    @field_validator("page", mode="before")
    @classmethod
    def _check_page(cls, value: Any) -> int:
        value = 1 if _blank_to_none(value) is None else value
        try:
            page = int(value)
        except (TypeError, ValueError) as e:
            raise ValueError("Page must be at least 1") from e
        if page < 1:
            raise ValueError("Page must be at least 1")
        return page

    @field_validator("limit", mode="before")
    @classmethod
    def _check_limit(cls, value: Any) -> int:
        value = Defaults.PAGE_SIZE if _blank_to_none(value) is None else value
        message = f"Limit must be between 1 and {Defaults.MAX_PAGE_SIZE}"
        try:
            limit = int(value)
        except (TypeError, ValueError) as e:
            raise ValueError(message) from e
        if not 1 <= limit <= Defaults.MAX_PAGE_SIZE:
            raise ValueError(message)
        return limit

    def store_filters(self) -> dict[str, Any]:
        """LedgerStore 필터 kwargs"""
        return {
            "date_from": self.date_from,
            "date_to": self.date_to,
            "type": self.type.value if self.type else None,
            "category_id": self.category_id,
            "payment_method": self.payment_method.value if self.payment_method else None,
        }


class CategoryInput(_InputModel):
    """카테고리 생성/수정 입력"""

    name: str | None = None
    type: CategoryType | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value: Any) -> str:
        return _required_text(
            value,
            "Category name is required",
            Limits.CATEGORY_NAME_MAX,
            "Category name is too long",
        )

    @field_validator("type", mode="before")
    @classmethod
    def _check_type(cls, value: Any) -> CategoryType:
        return _enum_value(CategoryType, value, "Invalid category type")


class StudentInput(_InputModel):
    """학생 생성/수정 입력 (status 기본값 ACTIVE)"""

    name: str | None = None
    class_name: str | None = Field(default=None, alias="class")
    roll_no: str | None = Field(default=None, alias="rollNo")
    status: StudentStatus = StudentStatus.ACTIVE

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value: Any) -> str:
        return _required_text(
            value, "Student name is required", Limits.STUDENT_NAME_MAX, "Name is too long"
        )

    @field_validator("class_name", mode="before")
    @classmethod
    def _check_class(cls, value: Any) -> str:
        return _required_text(
            value, "Class is required", Limits.STUDENT_CLASS_MAX, "Class is too long"
        )

    @field_validator("roll_no", mode="before")
    @classmethod
    def _check_roll_no(cls, value: Any) -> str:
        return _required_text(
            value,
            "Roll number is required",
            Limits.STUDENT_ROLL_NO_MAX,
            "Roll number is too long",
        )

    @field_validator("status", mode="before")
    @classmethod
    def _check_status(cls, value: Any) -> StudentStatus:
        if _blank_to_none(value) is None:
            return StudentStatus.ACTIVE
        return _enum_value(StudentStatus, value, "Invalid student status")

    def to_record(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "class_name": self.class_name,
            "roll_no": self.roll_no,
            "status": self.status.value,
        }


class OpeningBalanceInput(_InputModel):
    """기초 잔액 입력 (0 허용)"""

    amount: Money | None = None
    date: dt.date | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def _check_amount(cls, value: Any) -> Money:
        if value is None or value == "":
            raise ValueError("Amount is required")
        try:
            return parse_amount(value, allow_zero=True)
        except LedgerError as e:
            raise ValueError("Amount must be zero or a positive number") from e

    @field_validator("date", mode="before")
    @classmethod
    def _check_date(cls, value: Any) -> dt.date:
        try:
            return parse_iso_date(value)
        except LedgerError as e:
            raise _as_ledger_error(e) from e


def _first_error_message(error: pydantic.ValidationError) -> str:
    errors = error.errors()
    if not errors:
        return ValidationError.default_message
    first = errors[0]
    ctx_error = (first.get("ctx") or {}).get("error")
    if ctx_error is not None:
        return str(ctx_error)
    return first.get("msg") or ValidationError.default_message


def validate_input(model: type[ModelT], payload: Any) -> ModelT:
    """입력 검증

    Args:
        model: 입력 모델 클래스
        payload: dict 또는 이미 검증된 모델 인스턴스

    Returns:
        검증된 모델 인스턴스

    Raises:
        ValidationError: 첫 번째 실패 필드 메시지
    """
    if isinstance(payload, model):
        return payload
    if not isinstance(payload, dict):
        raise ValidationError("Invalid input.")
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as e:
        raise ValidationError(_first_error_message(e)) from e
