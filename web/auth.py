"""
요청 주체 인증 (JWT)

Authorization: Bearer <token> 헤더의 HS256 JWT를 검증하여 Caller 생성.
비밀번호/로그인 처리는 범위 밖이며 토큰 발급은 관리 스크립트에서 수행.

Claims:
- sub: 사용자 ID
- role: ADMIN / ACCOUNTANT / VIEWER
- iat, exp: 발급/만료 시각 (exp는 선택)
"""

import logging
from datetime import timedelta
from typing import Any

import jwt

from core.types import Caller, Role
from core.utils.timezone import now_utc

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"


class TokenError(Exception):
    """토큰 검증 실패"""
    pass


def issue_token(
    user_id: str,
    role: str | Role,
    secret_key: str,
    expires_in: timedelta | None = None,
) -> str:
    """JWT 발급

    Args:
        user_id: 사용자 ID (sub)
        role: 역할
        secret_key: 서명 키 (settings.yaml web.secret_key)
        expires_in: 유효 기간 (None이면 만료 없음)

    Returns:
        서명된 JWT 문자열
    """
    caller = Caller.create(user_id, role)
    issued_at = now_utc()
    payload: dict[str, Any] = {
        "sub": caller.id,
        "role": caller.role,
        "iat": int(issued_at.timestamp()),
    }
    if expires_in is not None:
        payload["exp"] = int((issued_at + expires_in).timestamp())

    return jwt.encode(payload, secret_key, algorithm=JWT_ALGORITHM)


def decode_token(token: str, secret_key: str) -> Caller:
    """JWT 검증 후 Caller 반환

    Raises:
        TokenError: 서명/만료/클레임 오류
    """
    try:
        payload = jwt.decode(token, secret_key, algorithms=[JWT_ALGORITHM])
    except jwt.PyJWTError as e:
        logger.info(f"JWT 검증 실패: {e}")
        raise TokenError("Invalid token") from e

    user_id = payload.get("sub")
    role = payload.get("role")
    if not user_id or not isinstance(user_id, str) or not isinstance(role, str):
        raise TokenError("Invalid token claims")

    try:
        return Caller.create(user_id, Role(role.upper()))
    except ValueError as e:
        raise TokenError("Invalid role claim") from e
