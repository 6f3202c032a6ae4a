from __future__ import annotations

from abc import ABC, abstractmethod

from backend.models import (
    ConnectionReading,
    CpuInfo,
    CpuLoad,
    CpuSpeed,
    DiskIoReading,
    DiskReading,
    LoadAverage,
    MemoryReading,
    NetworkInterfaceReading,
    OsIdentity,
    PhysicalInterface,
    ProcessTable,
)


class MetricsProvider(ABC):
    """Async source of raw OS readings.

    Every query may be slow (syscalls, ``/proc`` reads) and may fail on its
    own. Implementations raise ``backend.errors.ProviderError`` on failure
    and must not block the event loop.
    """

    name: str = "base"

    @abstractmethod
    async def cpu(self) -> CpuInfo: ...

    @abstractmethod
    async def cpu_current_speed(self) -> CpuSpeed: ...

    @abstractmethod
    async def current_load(self) -> CpuLoad: ...

    @abstractmethod
    async def mem(self) -> MemoryReading: ...

    @abstractmethod
    async def os_info(self) -> OsIdentity: ...

    @abstractmethod
    async def fs_size(self) -> list[DiskReading]: ...

    @abstractmethod
    async def disks_io(self) -> DiskIoReading: ...

    @abstractmethod
    async def network_stats(self) -> list[NetworkInterfaceReading]: ...

    @abstractmethod
    async def network_interfaces(self) -> list[PhysicalInterface]: ...

    @abstractmethod
    async def network_connections(self) -> list[ConnectionReading]: ...

    @abstractmethod
    async def processes(self) -> ProcessTable: ...

    @abstractmethod
    async def load_average(self) -> LoadAverage: ...

    @abstractmethod
    async def uptime(self) -> float:
        """Seconds since boot."""
        ...
