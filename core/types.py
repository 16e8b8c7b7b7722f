"""
타입 정의 모듈

Enum, Dataclass 등 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from dataclasses import dataclass
from enum import Enum


class TransactionType(str, Enum):
    """거래 유형 (수입 / 지출)"""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class CategoryType(str, Enum):
    """카테고리 유형

    거래 유형과 동일한 값 집합 사용
    """

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class PaymentMethod(str, Enum):
    """결제 수단"""

    CASH = "CASH"
    BANK = "BANK"
    ESEWA = "ESEWA"  # 전자지갑
    KHALTI = "KHALTI"  # 전자지갑


class StudentStatus(str, Enum):
    """학생 상태"""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class Role(str, Enum):
    """사용자 역할

    ADMIN: 모든 작업
    ACCOUNTANT: 생성 + 조회
    VIEWER: 조회 전용
    """

    ADMIN = "ADMIN"
    ACCOUNTANT = "ACCOUNTANT"
    VIEWER = "VIEWER"


@dataclass(frozen=True)
class Caller:
    """요청 주체 (불변)

    인증 계층이 제공하는 사용자 식별자와 역할.
    모든 변경 작업과 일부 조회 작업에 필요.
    """

    id: str
    role: str

    @classmethod
    def create(cls, user_id: str, role: str | Role) -> "Caller":
        """Caller 생성 헬퍼

        Enum 또는 문자열 모두 허용
        """
        return cls(
            id=user_id,
            role=role.value if isinstance(role, Enum) else role.upper(),
        )
