from .readings import (
    ConnectionReading,
    CpuInfo,
    CpuLoad,
    CpuSpeed,
    CpuTemperature,
    DiskIoReading,
    DiskReading,
    LoadAverage,
    MemoryReading,
    NetworkInterfaceReading,
    OsIdentity,
    PhysicalInterface,
    ProcessReading,
    ProcessTable,
)
from .responses import (
    ConnectionStats,
    CpuLoadResponse,
    DashboardResponse,
    DiskResponse,
    LoginRequest,
    LoginResponse,
    NetworkRate,
    NetworkResponse,
    ProcessesResponse,
    SystemInfoResponse,
    SystemStatusResponse,
)

__all__ = [
    "ConnectionReading",
    "CpuInfo",
    "CpuLoad",
    "CpuSpeed",
    "CpuTemperature",
    "DiskIoReading",
    "DiskReading",
    "LoadAverage",
    "MemoryReading",
    "NetworkInterfaceReading",
    "OsIdentity",
    "PhysicalInterface",
    "ProcessReading",
    "ProcessTable",
    "ConnectionStats",
    "CpuLoadResponse",
    "DashboardResponse",
    "DiskResponse",
    "LoginRequest",
    "LoginResponse",
    "NetworkRate",
    "NetworkResponse",
    "ProcessesResponse",
    "SystemInfoResponse",
    "SystemStatusResponse",
]
