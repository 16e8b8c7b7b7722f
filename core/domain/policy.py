"""
권한 정책

{작업, 역할} → 허용 여부 단일 테이블.
모든 서비스는 저장소 접근 전에 authorize()를 호출.
"""

import logging
from enum import Enum

from core.errors import AuthorizationError
from core.types import Caller, Role

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "Unauthorized"
ACCESS_DENIED_MESSAGE = "Access denied"


class Operation(str, Enum):
    """권한 검사 대상 작업"""

    VIEW = "VIEW"
    TRANSACTION_CREATE = "TRANSACTION_CREATE"
    TRANSACTION_UPDATE = "TRANSACTION_UPDATE"
    TRANSACTION_VOID = "TRANSACTION_VOID"
    TRANSACTION_AUDIT = "TRANSACTION_AUDIT"
    CATEGORY_CREATE = "CATEGORY_CREATE"
    CATEGORY_UPDATE = "CATEGORY_UPDATE"
    CATEGORY_DELETE = "CATEGORY_DELETE"
    STUDENT_CREATE = "STUDENT_CREATE"
    STUDENT_UPDATE = "STUDENT_UPDATE"
    OPENING_BALANCE_SET = "OPENING_BALANCE_SET"


_ALL = frozenset({Role.ADMIN, Role.ACCOUNTANT, Role.VIEWER})
_WRITERS = frozenset({Role.ADMIN, Role.ACCOUNTANT})
_ADMIN = frozenset({Role.ADMIN})

POLICY: dict[Operation, frozenset[Role]] = {
    Operation.VIEW: _ALL,
    Operation.TRANSACTION_CREATE: _WRITERS,
    Operation.TRANSACTION_UPDATE: _ADMIN,
    Operation.TRANSACTION_VOID: _ADMIN,
    Operation.TRANSACTION_AUDIT: _ADMIN,
    Operation.CATEGORY_CREATE: _WRITERS,
    Operation.CATEGORY_UPDATE: _ADMIN,
    Operation.CATEGORY_DELETE: _ADMIN,
    Operation.STUDENT_CREATE: _WRITERS,
    Operation.STUDENT_UPDATE: _WRITERS,
    Operation.OPENING_BALANCE_SET: _ADMIN,
}


def is_allowed(role: str | Role, operation: Operation) -> bool:
    """역할이 작업을 수행할 수 있는지 여부 (알 수 없는 역할은 거부)"""
    try:
        role = Role(role)
    except ValueError:
        return False
    return role in POLICY.get(operation, frozenset())


def authorize(caller: Caller | None, operation: Operation) -> Caller:
    """권한 검사

    Args:
        caller: 요청 주체 (None이면 인증 없음)
        operation: 수행할 작업

    Returns:
        검사를 통과한 caller

    Raises:
        AuthorizationError: caller 없음("Unauthorized") 또는 역할 부족("Access denied")
    """
    if caller is None:
        raise AuthorizationError(UNAUTHORIZED_MESSAGE)

    if not is_allowed(caller.role, operation):
        logger.info(f"권한 거부: user={caller.id}, role={caller.role}, op={operation.value}")
        raise AuthorizationError(ACCESS_DENIED_MESSAGE)

    return caller
