"""
도메인 에러 정의

서비스 계층이 발생시키는 타입별 실패.
Web 계층에서 HTTP 상태 코드로 변환.

- ValidationError: 입력 필드 오류 (첫 번째 실패 필드 메시지)
- AuthorizationError: 역할/세션 부족 (상세 정보 노출 금지)
- NotFoundError: 참조 ID 없음
- ConflictError: 유니크 제약 위반, 참조 무결성 위반
- TransientStoreError: 저장소 I/O 실패 (재시도 안내)
"""


class LedgerError(Exception):
    """도메인 에러 기본 클래스

    message는 사용자에게 그대로 표시 가능한 문자열.
    """

    default_message: str = "Operation failed."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(LedgerError):
    """입력 검증 실패"""

    default_message = "Invalid input."


class AuthorizationError(LedgerError):
    """권한 없음

    역할 부족 시 "Access denied", 인증 정보 없음 시 "Unauthorized".
    """

    default_message = "Access denied"


class NotFoundError(LedgerError):
    """엔티티 없음"""

    default_message = "Not found."


class ConflictError(LedgerError):
    """유니크 제약 또는 참조 무결성 충돌"""

    default_message = "Conflict."


class TransientStoreError(LedgerError):
    """저장소 일시 오류

    내부 상세는 로그로만 남기고 사용자에게는 일반 메시지만 전달.
    """

    default_message = "Operation failed. Please try again."
