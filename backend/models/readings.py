from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CpuInfo(BaseModel):
    """Static CPU identity."""

    manufacturer: str = ""
    brand: str = ""
    cores: int = 0
    physical_cores: int = 0
    speed: float = 0.0  # GHz


class CpuSpeed(BaseModel):
    avg: float = 0.0
    min: float = 0.0
    max: float = 0.0


class CpuTemperature(BaseModel):
    main: float | None = None
    cores: list[float] = Field(default_factory=list)
    max: float | None = None


class CpuLoad(BaseModel):
    """Instantaneous CPU utilisation.

    Per-core values may briefly exceed 100 due to measurement jitter and are
    kept as reported.
    """

    current_load: float = 0.0
    cpus: list[float] = Field(default_factory=list)
    temperature: CpuTemperature = Field(default_factory=CpuTemperature)


class MemoryReading(BaseModel):
    total: int = 0
    used: int = 0
    available: int = 0
    free: int = 0
    cached: int = 0
    buffers: int = 0
    swap_total: int = 0
    swap_used: int = 0


class DiskReading(BaseModel):
    """One mounted filesystem."""

    fs: str
    type: str = ""
    size: int = 0
    used: int = 0
    available: int = 0
    use: float = 0.0
    mount: str = ""
    rw: bool | None = None


class DiskIoReading(BaseModel):
    """Cumulative block device I/O operation and byte counters."""

    read: int = 0
    write: int = 0
    read_bytes: int = 0
    write_bytes: int = 0

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NetworkInterfaceReading(BaseModel):
    """Cumulative counters for one interface as reported by the OS."""

    iface: str
    rx_bytes: int = 0
    tx_bytes: int = 0
    rx_packets: int = 0
    tx_packets: int = 0
    rx_dropped: int = 0
    tx_dropped: int = 0
    rx_errors: int = 0
    tx_errors: int = 0


class PhysicalInterface(BaseModel):
    iface: str
    ip4: str = ""
    ip6: str = ""
    mac: str = ""
    internal: bool = False
    operstate: str = "unknown"
    mtu: int | None = None
    speed: int | None = None  # Mbit/s


class ConnectionReading(BaseModel):
    protocol: str = ""
    local_address: str = ""
    local_port: int | None = None
    peer_address: str = ""
    peer_port: int | None = None
    state: str = ""
    pid: int | None = None


class ProcessReading(BaseModel):
    pid: int
    name: str = ""
    cpu: float = 0.0
    mem: float = 0.0  # percent of physical memory
    user: str = "unknown"
    command: str = ""
    state: str = Field(default="", exclude=True)


class ProcessTable(BaseModel):
    """Full process table plus state counts."""

    total: int = 0
    running: int = 0
    sleeping: int = 0
    zombie: int = 0
    processes: list[ProcessReading] = Field(default_factory=list)


class OsIdentity(BaseModel):
    platform: str = ""
    distro: str = ""
    release: str = ""
    kernel: str = ""
    arch: str = ""
    hostname: str = ""


class LoadAverage(BaseModel):
    one: float = 0.0
    five: float = 0.0
    fifteen: float = 0.0
