"""Tests for backend.auth.tokens."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from backend.auth.tokens import TokenService
from backend.errors import InvalidToken

SECRET = "unit-test-signing-secret-0123456789"
T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(T0)


@pytest.fixture
def tokens(clock) -> TokenService:
    return TokenService(SECRET, clock=clock)


class TestIssue:
    def test_claims(self, tokens):
        claims = jwt.decode(
            tokens.issue("admin"),
            SECRET,
            algorithms=["HS256"],
            options={"verify_exp": False, "verify_iat": False},
        )
        assert claims["username"] == "admin"
        assert claims["exp"] - claims["iat"] == 24 * 3600
        assert claims["iat"] == int(T0.timestamp())


class TestLifetime:
    def test_valid_just_before_expiry(self, tokens, clock):
        token = tokens.issue("admin")
        clock.now = T0 + timedelta(hours=23, minutes=59)
        assert tokens.verify(token).username == "admin"

    def test_invalid_just_after_expiry(self, tokens, clock):
        token = tokens.issue("admin")
        clock.now = T0 + timedelta(hours=24, minutes=1)
        with pytest.raises(InvalidToken):
            tokens.verify(token)

    def test_invalid_at_exact_expiry(self, tokens, clock):
        token = tokens.issue("admin")
        clock.now = T0 + timedelta(hours=24)
        with pytest.raises(InvalidToken):
            tokens.verify(token)

    def test_custom_ttl(self, clock):
        tokens = TokenService(SECRET, ttl=timedelta(minutes=5), clock=clock)
        token = tokens.issue("admin")
        clock.now = T0 + timedelta(minutes=6)
        with pytest.raises(InvalidToken):
            tokens.verify(token)


class TestTampering:
    def test_wrong_secret(self, tokens, clock):
        other = TokenService("another-signing-secret-0123456789", clock=clock)
        with pytest.raises(InvalidToken):
            tokens.verify(other.issue("admin"))

    def test_garbage(self, tokens):
        with pytest.raises(InvalidToken):
            tokens.verify("not-a-jwt")

    def test_missing_username_claim(self, tokens):
        token = jwt.encode({"exp": int((T0 + timedelta(hours=1)).timestamp())}, SECRET, algorithm="HS256")
        with pytest.raises(InvalidToken):
            tokens.verify(token)

    def test_unsigned_token_rejected(self, tokens):
        token = jwt.encode(
            {"username": "admin", "exp": int((T0 + timedelta(hours=1)).timestamp())},
            None,
            algorithm="none",
        )
        with pytest.raises(InvalidToken):
            tokens.verify(token)

    def test_error_status(self):
        assert InvalidToken.status_code == 403
