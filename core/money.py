"""
금액 타입

고정 소수점(Decimal) 기반 금액 값 객체.
금액은 어떤 단계에서도 float를 거치지 않음.

- 경계 입력: ASCII 숫자 문자열만 허용 (^[0-9]+(\\.[0-9]{1,2})?$)
- 저장: 정수 minor unit (1/100 단위, paisa)
- 표시: 소수점 2자리 + 천 단위 구분 + 통화 기호
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from core.constants import Defaults, Limits
from core.errors import ValidationError

# 소수점 2자리 단위
CENT = Decimal("0.01")

AMOUNT_PATTERN = re.compile(
    rf"^[0-9]{{1,{Limits.AMOUNT_INTEGER_DIGITS}}}(\.[0-9]{{1,2}})?$"
)

AMOUNT_ERROR_MESSAGE = "Amount must be a positive number"


@dataclass(frozen=True, order=True)
class Money:
    """금액 값 객체 (불변)

    항상 소수점 2자리로 정규화된 Decimal을 보유.
    덧셈/뺄셈은 정확하며 평가 순서와 무관.

    Args:
        amount: Decimal 금액 (생성 시 0.01 단위로 정규화)
    """

    amount: Decimal

    def __post_init__(self) -> None:
        if isinstance(self.amount, float):
            raise TypeError("Money does not accept float values")
        object.__setattr__(self, "amount", Decimal(self.amount).quantize(CENT))

    @classmethod
    def zero(cls) -> "Money":
        """0원"""
        return cls(Decimal("0"))

    @classmethod
    def from_minor(cls, minor: int | None) -> "Money":
        """minor unit 정수에서 생성

        SQL SUM 결과(None 포함)를 그대로 받을 수 있음.
        """
        if minor is None:
            return cls.zero()
        return cls(Decimal(int(minor)) * CENT)

    def to_minor(self) -> int:
        """minor unit 정수로 변환 (저장용)"""
        return int((self.amount * 100).to_integral_value())

    def __add__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.amount + other.amount)

    def __sub__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.amount - other.amount)

    def __neg__(self) -> "Money":
        return Money(-self.amount)

    def __bool__(self) -> bool:
        return self.amount != 0

    def __str__(self) -> str:
        return format(self.amount, "f")

    @property
    def is_positive(self) -> bool:
        return self.amount > 0


def add(a: Money, b: Money) -> Money:
    """금액 덧셈"""
    return a + b


def subtract(a: Money, b: Money) -> Money:
    """금액 뺄셈"""
    return a - b


def to_display(amount: Money, symbol: str = Defaults.CURRENCY_SYMBOL) -> str:
    """표시용 문자열

    Example:
        >>> to_display(Money(Decimal("15000")))
        'NPR 15,000.00'
        >>> to_display(Money(Decimal("-5")))
        '-NPR 5.00'
    """
    sign = "-" if amount.amount < 0 else ""
    return f"{sign}{symbol} {abs(amount.amount):,.2f}"


def parse_amount(raw: object, allow_zero: bool = False) -> Money:
    """경계 입력 문자열을 Money로 변환

    Args:
        raw: 금액 문자열 (float/int 등 다른 타입은 거부)
        allow_zero: 0 허용 여부 (기초 잔액용)

    Returns:
        Money

    Raises:
        ValidationError: 패턴 불일치, 0 또는 음수

    Note:
        폼 입력 특성상 앞뒤 공백은 제거한 뒤 패턴을 검사.
        숫자 사이 공백은 허용하지 않음.
    """
    if not isinstance(raw, str):
        raise ValidationError(AMOUNT_ERROR_MESSAGE)

    text = raw.strip()
    if not AMOUNT_PATTERN.match(text):
        raise ValidationError(AMOUNT_ERROR_MESSAGE)

    try:
        money = Money(Decimal(text))
    except InvalidOperation as e:
        raise ValidationError(AMOUNT_ERROR_MESSAGE) from e

    if not allow_zero and not money.is_positive:
        raise ValidationError(AMOUNT_ERROR_MESSAGE)

    return money


def parse_input(raw: object) -> Money:
    """양수 금액 입력 파싱 (거래 금액용)"""
    return parse_amount(raw, allow_zero=False)
