"""Tests for JWTValidator"""
import pytest

from irequest.domain.errors import AuthenticationError
from irequest.utils.jwt import JWTValidator

SECRET = "unit-test-signing-key-0123456789abcdef"


def test_issue_and_validate():
    validator = JWTValidator(secret=SECRET)
    token = validator.issue_token("user-1", "alice")
    claims = validator.validate_token(f"Bearer {token}")
    assert claims["userId"] == "user-1"
    assert claims["userName"] == "alice"
    assert validator.get_user_id(token) == "user-1"


def test_expired_token():
    validator = JWTValidator(secret=SECRET)
    token = validator.issue_token("user-1", "alice", expires_minutes=-1)
    with pytest.raises(AuthenticationError) as exc_info:
        validator.validate_token(token)
    assert exc_info.value.message == "Token đã hết hạn"


def test_wrong_secret():
    token = JWTValidator(secret=SECRET).issue_token("user-1", "alice")
    with pytest.raises(AuthenticationError) as exc_info:
        JWTValidator(secret=SECRET[::-1]).validate_token(token)
    assert exc_info.value.message == "Token không hợp lệ"


def test_missing_token():
    with pytest.raises(AuthenticationError) as exc_info:
        JWTValidator(secret=SECRET).validate_token("")
    assert exc_info.value.message == "Token không tồn tại"
