from __future__ import annotations

import logging
import secrets
from pathlib import Path

logger = logging.getLogger(__name__)


def generate_login_path() -> str:
    """Random path segment with 64 bits of entropy, e.g. ``/3f9a0c1d2b7e4a55``."""
    return "/" + secrets.token_hex(8)


def normalize_login_path(value: str) -> str:
    value = value.strip()
    return value if value.startswith("/") else "/" + value


class LoginPathStore:
    """Single plain-text file holding the secret login path."""

    def __init__(self, path: str | Path, override: str | None = None) -> None:
        self._path = Path(path)
        self._override = override

    def load_or_create(self) -> str:
        """Return the persisted path, creating and persisting one if absent.

        ``override`` only seeds the file on first boot; once a value is
        persisted it always wins.
        """
        if self._path.exists():
            value = self._path.read_text().strip()
            if value:
                return normalize_login_path(value)
            logger.warning("Login path file %s is empty, regenerating", self._path)
        value = normalize_login_path(self._override) if self._override else generate_login_path()
        self.save(value)
        return value

    def save(self, value: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(value)

    def rotate(self) -> str:
        value = generate_login_path()
        self.save(value)
        return value
