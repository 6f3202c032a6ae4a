"""JSON documents returned by the dashboard API.

Field names are snake_case in Python and camelCase on the wire, except for
the per-interface network counters which the frontend reads as
``rx_bytes`` etc.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from backend.models.readings import (
    CpuTemperature,
    DiskReading,
    LoadAverage,
    PhysicalInterface,
    ProcessReading,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── system-info ─────────────────────────────────────────


class CpuSummary(CamelModel):
    manufacturer: str
    brand: str
    cores: int
    physical_cores: int
    speed: float
    current_speed: float


class MemorySummary(CamelModel):
    total: int
    used: int
    available: int
    free: int


class OsSummary(CamelModel):
    platform: str
    distro: str
    release: str
    kernel: str
    arch: str
    hostname: str
    uptime: float


class SystemInfoResponse(CamelModel):
    cpu: CpuSummary
    memory: MemorySummary
    os: OsSummary


# ── cpu-load ────────────────────────────────────────────


class CpuLoadResponse(CamelModel):
    load: float
    load_per_cpu: list[float]
    temps: CpuTemperature


# ── network / disk / processes ──────────────────────────


class InterfaceCounters(BaseModel):
    iface: str
    rx_bytes: int
    rx_dropped: int
    rx_errors: int
    tx_bytes: int
    tx_dropped: int
    tx_errors: int


class NetworkResponse(CamelModel):
    interfaces: list[InterfaceCounters]
    physical_interfaces: list[PhysicalInterface]


class DiskResponse(CamelModel):
    disks: list[DiskReading]


class ProcessesResponse(CamelModel):
    processes: list[ProcessReading]
    timestamp: int


class NetworkRate(CamelModel):
    """Aggregate throughput in bytes per second."""

    rx: int = 0
    tx: int = 0


class ConnectionStats(CamelModel):
    total: int = 0
    established: int = 0
    listen: int = 0
    close_wait: int = 0
    time_wait: int = 0


# ── system-status ───────────────────────────────────────


class StatusCpu(CamelModel):
    load: float
    load_per_cpu: list[float]
    temp: float


class SwapSummary(CamelModel):
    total: int
    used: int
    free: int


class StatusMemory(CamelModel):
    total: int
    used: int
    available: int
    usage_percent: float
    free: int
    cached: int
    buffers: int
    swap: SwapSummary


class ProcessCounts(CamelModel):
    total: int
    running: int
    sleeping: int
    zombie: int


class SystemUptime(CamelModel):
    uptime: float
    uptime_formatted: str
    load_average: LoadAverage


class SystemStatusResponse(CamelModel):
    cpu: StatusCpu
    memory: StatusMemory
    processes: ProcessCounts
    system: SystemUptime
    timestamp: int


# ── dashboard ───────────────────────────────────────────


class DashboardSystem(CamelModel):
    hostname: str
    platform: str
    distro: str
    kernel: str
    arch: str
    uptime: float
    uptime_formatted: str


class DashboardCpu(CamelModel):
    usage: float
    usage_per_core: list[float]
    temp: float
    cores: int


class DashboardMemory(CamelModel):
    total: int
    used: int
    free: int
    available: int
    usage: float
    cached: int
    buffers: int
    swap_total: int
    swap_used: int
    swap_free: int


class DashboardConnections(CamelModel):
    total: int = 0
    established: int = 0


class DashboardNetwork(CamelModel):
    total_rx: int
    total_tx: int
    connections: DashboardConnections = Field(default_factory=DashboardConnections)


class DashboardDiskIo(CamelModel):
    read_rate: int
    write_rate: int


class DashboardDisk(CamelModel):
    total: int
    used: int
    free: int
    usage: float
    devices: int
    io: DashboardDiskIo


class DashboardResponse(CamelModel):
    system: DashboardSystem
    cpu: DashboardCpu
    memory: DashboardMemory
    network: DashboardNetwork
    disk: DashboardDisk
    processes: ProcessCounts
    load: LoadAverage
    timestamp: int


# ── auth / misc ─────────────────────────────────────────


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None


class UserPublic(BaseModel):
    username: str


class LoginResponse(BaseModel):
    token: str
    user: UserPublic


class LoginPathResponse(CamelModel):
    login_path: str


class ResetLoginPathResponse(CamelModel):
    login_path: str
    message: str


class HealthResponse(BaseModel):
    status: str = "ok"
    timestamp: str
