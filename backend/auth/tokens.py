from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt
from pydantic import BaseModel

from backend.errors import InvalidToken


class Identity(BaseModel):
    """Decoded bearer token subject."""

    username: str


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Issues and verifies HS256 JWTs that expire ``ttl`` after issuance.

    Expiry is checked against the injected clock rather than PyJWT's wall
    clock so the lifetime is testable without sleeping.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self.ttl = ttl
        self._clock = clock

    def issue(self, username: str) -> str:
        issued_at = self._clock()
        payload = {
            "username": username,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Identity:
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": ["exp", "username"],
                },
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidToken() from exc
        if claims["exp"] <= self._clock().timestamp():
            raise InvalidToken()
        return Identity(username=claims["username"])
