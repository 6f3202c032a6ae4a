from __future__ import annotations

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from backend.auth import AccessGate, Identity
from backend.engine import SnapshotComposer

bearer_scheme = HTTPBearer(auto_error=False)


def get_access_gate(request: Request) -> AccessGate:
    return request.app.state.access_gate


def get_composer(request: Request) -> SnapshotComposer:
    return request.app.state.composer


async def require_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    gate: AccessGate = Depends(get_access_gate),
) -> Identity:
    """Reject the request unless it carries a valid bearer token."""
    identity = gate.authorize(credentials.credentials if credentials else None)
    request.state.user = identity
    return identity
