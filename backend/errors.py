from __future__ import annotations


class DashboardError(Exception):
    """Base error rendered as ``{"error": message}`` with ``status_code``."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DashboardError):
    status_code = 400
    default_message = "Username and password are required"


class InvalidCredentials(DashboardError):
    status_code = 401
    default_message = "Invalid username or password"


class Unauthenticated(DashboardError):
    status_code = 401
    default_message = "Unauthorized, please log in"


class InvalidToken(DashboardError):
    status_code = 403
    default_message = "Token is invalid or expired"


class NotFound(DashboardError):
    status_code = 404
    default_message = "Not found"


class ProviderError(DashboardError):
    """An OS metric query failed. The message is the provider's own."""

    status_code = 500
    default_message = "Metrics provider failure"
