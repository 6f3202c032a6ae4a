from __future__ import annotations

import asyncio
import logging

import bcrypt

from backend.auth.login_path import LoginPathStore
from backend.auth.tokens import Identity, TokenService
from backend.errors import InvalidCredentials, Unauthenticated, ValidationError
from backend.models import LoginResponse
from backend.models.responses import UserPublic

logger = logging.getLogger(__name__)


class AccessGate:
    """Single-admin authentication: login path, credentials and tokens.

    The login path is read (or generated) once at construction and stays
    bound for the lifetime of the process. ``rotate_login_path`` only
    rewrites the persisted value, which takes effect on the next boot.
    """

    def __init__(
        self,
        store: LoginPathStore,
        tokens: TokenService,
        username: str,
        password_hash: str,
    ) -> None:
        self._store = store
        self._tokens = tokens
        self._username = username
        self._password_hash = password_hash.encode()
        self.login_path: str = store.load_or_create()

    async def login(self, username: str | None, password: str | None) -> LoginResponse:
        if not username or not password:
            raise ValidationError()

        # Always hash, so a wrong username costs the same as a wrong password.
        password_ok = await asyncio.to_thread(self._check_password, password)
        if username != self._username or not password_ok:
            logger.info("Failed login attempt for user %r", username)
            raise InvalidCredentials()

        logger.info("User %s logged in", self._username)
        return LoginResponse(
            token=self._tokens.issue(self._username),
            user=UserPublic(username=self._username),
        )

    def authorize(self, token: str | None) -> Identity:
        if not token:
            raise Unauthenticated()
        return self._tokens.verify(token)

    def rotate_login_path(self) -> str:
        new_path = self._store.rotate()
        logger.info("Login path reset to %s (active after restart)", new_path)
        return new_path

    def _check_password(self, password: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode(), self._password_hash)
        except ValueError:
            # bcrypt rejects over-long passwords and malformed hashes
            logger.warning("Password check rejected by bcrypt", exc_info=True)
            return False
