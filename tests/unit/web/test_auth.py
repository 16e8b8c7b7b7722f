"""web/auth.py 테스트"""

from datetime import timedelta

import jwt
import pytest

from core.types import Role
from web.auth import JWT_ALGORITHM, TokenError, decode_token, issue_token

SECRET = "unit-test-secret"


class TestToken:
    def test_round_trip(self) -> None:
        token = issue_token("user-1", Role.ACCOUNTANT, SECRET)

        caller = decode_token(token, SECRET)

        assert caller.id == "user-1"
        assert caller.role == "ACCOUNTANT"

    def test_wrong_secret(self) -> None:
        token = issue_token("user-1", Role.ADMIN, SECRET)

        with pytest.raises(TokenError):
            decode_token(token, "other-secret")

    def test_expired(self) -> None:
        token = issue_token("user-1", Role.ADMIN, SECRET, expires_in=timedelta(seconds=-10))

        with pytest.raises(TokenError):
            decode_token(token, SECRET)

    def test_unknown_role(self) -> None:
        token = jwt.encode({"sub": "user-1", "role": "OWNER"}, SECRET, algorithm=JWT_ALGORITHM)

        with pytest.raises(TokenError):
            decode_token(token, SECRET)

    def test_missing_subject(self) -> None:
        token = jwt.encode({"role": "ADMIN"}, SECRET, algorithm=JWT_ALGORITHM)

        with pytest.raises(TokenError):
            decode_token(token, SECRET)
