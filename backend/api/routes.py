from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, FastAPI

from backend.api.deps import get_access_gate, get_composer, require_user
from backend.auth import AccessGate
from backend.engine import SnapshotComposer
from backend.models import (
    ConnectionStats,
    CpuLoadResponse,
    DashboardResponse,
    DiskIoReading,
    DiskResponse,
    LoginRequest,
    LoginResponse,
    NetworkRate,
    NetworkResponse,
    ProcessesResponse,
    SystemInfoResponse,
    SystemStatusResponse,
)
from backend.models.responses import (
    HealthResponse,
    LoginPathResponse,
    ResetLoginPathResponse,
)

router = APIRouter()

PROTECTED = [Depends(require_user)]


# ── auth ──────────────────────────────────────────────


async def login(
    body: LoginRequest | None = None,
    gate: AccessGate = Depends(get_access_gate),
) -> LoginResponse:
    body = body or LoginRequest()
    return await gate.login(body.username, body.password)


def bind_login_route(app: FastAPI, path: str) -> None:
    """Attach the login handler at the secret path. Done once, at boot."""
    app.add_api_route(path, login, methods=["POST"], response_model=LoginResponse)


@router.get("/api/login-path")
async def get_login_path(gate: AccessGate = Depends(get_access_gate)) -> LoginPathResponse:
    # Public on purpose: the frontend discovers the login endpoint here.
    return LoginPathResponse(login_path=gate.login_path)


@router.post("/api/reset-login-path", dependencies=PROTECTED)
async def reset_login_path(gate: AccessGate = Depends(get_access_gate)) -> ResetLoginPathResponse:
    new_path = gate.rotate_login_path()
    return ResetLoginPathResponse(
        login_path=new_path,
        message="Login path reset; use the new path after the server restarts",
    )


# ── metrics ───────────────────────────────────────────


@router.get("/api/system-info", dependencies=PROTECTED)
async def get_system_info(composer: SnapshotComposer = Depends(get_composer)) -> SystemInfoResponse:
    return await composer.system_info()


@router.get("/api/cpu-load", dependencies=PROTECTED)
async def get_cpu_load(composer: SnapshotComposer = Depends(get_composer)) -> CpuLoadResponse:
    return await composer.cpu_load()


@router.get("/api/network", dependencies=PROTECTED)
async def get_network(composer: SnapshotComposer = Depends(get_composer)) -> NetworkResponse:
    return await composer.network()


@router.get("/api/disk", dependencies=PROTECTED)
async def get_disk(composer: SnapshotComposer = Depends(get_composer)) -> DiskResponse:
    return await composer.disk()


@router.get("/api/processes", dependencies=PROTECTED)
async def get_processes(composer: SnapshotComposer = Depends(get_composer)) -> ProcessesResponse:
    return await composer.processes()


@router.get("/api/system-status", dependencies=PROTECTED)
async def get_system_status(composer: SnapshotComposer = Depends(get_composer)) -> SystemStatusResponse:
    return await composer.system_status()


@router.get("/api/network-speed", dependencies=PROTECTED)
async def get_network_speed(composer: SnapshotComposer = Depends(get_composer)) -> NetworkRate:
    return await composer.network_speed()


@router.get("/api/network-connections", dependencies=PROTECTED)
async def get_network_connections(composer: SnapshotComposer = Depends(get_composer)) -> ConnectionStats:
    return await composer.network_connections()


@router.get("/api/disk-io", dependencies=PROTECTED)
async def get_disk_io(composer: SnapshotComposer = Depends(get_composer)) -> DiskIoReading:
    return await composer.disk_io()


@router.get("/api/dashboard", dependencies=PROTECTED)
async def get_dashboard(composer: SnapshotComposer = Depends(get_composer)) -> DashboardResponse:
    return await composer.dashboard()


@router.get("/api/health")
async def health() -> HealthResponse:
    return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc).isoformat())
