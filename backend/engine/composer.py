from __future__ import annotations

import asyncio
import logging
from enum import StrEnum
from typing import Any, Callable, Iterable

from backend.collectors.base import MetricsProvider
from backend.engine.process_cache import Clock, ProcessCache, now_ms
from backend.engine.rate_engine import NetworkRateEngine
from backend.errors import ProviderError
from backend.models import (
    ConnectionStats,
    CpuLoadResponse,
    DashboardResponse,
    DiskIoReading,
    DiskResponse,
    NetworkRate,
    NetworkResponse,
    ProcessesResponse,
    ProcessTable,
    SystemInfoResponse,
    SystemStatusResponse,
)
from backend.models.responses import (
    CpuSummary,
    DashboardCpu,
    DashboardDisk,
    DashboardDiskIo,
    DashboardMemory,
    DashboardNetwork,
    DashboardSystem,
    InterfaceCounters,
    MemorySummary,
    OsSummary,
    ProcessCounts,
    StatusCpu,
    StatusMemory,
    SwapSummary,
    SystemUptime,
)

logger = logging.getLogger(__name__)


# Provider queries allowed to fail per endpoint, with the zero-valued
# stand-in served instead. Anything not listed fails the whole response.
LENIENT_QUERIES: dict[str, dict[str, Callable[[], Any]]] = {
    "network-connections": {"network_connections": list},
    "disk-io": {"disks_io": DiskIoReading},
    "dashboard": {"disks_io": DiskIoReading},
}


class ConnectionBucket(StrEnum):
    ESTABLISHED = "established"
    LISTEN = "listen"
    CLOSE_WAIT = "close_wait"
    TIME_WAIT = "time_wait"
    OTHER = "other"


# Insertion order is the match precedence for decorated state names.
_STATE_BUCKETS: dict[str, ConnectionBucket] = {
    "established": ConnectionBucket.ESTABLISHED,
    "listen": ConnectionBucket.LISTEN,
    "close_wait": ConnectionBucket.CLOSE_WAIT,
    "time_wait": ConnectionBucket.TIME_WAIT,
}


def classify_state(state: str | None) -> ConnectionBucket:
    """Map a provider connection state onto a bucket.

    Exact (case-insensitive) names are looked up first; otherwise the first
    known name contained in the state wins.
    """
    normalized = (state or "").strip().lower()
    bucket = _STATE_BUCKETS.get(normalized)
    if bucket is not None:
        return bucket
    for name, candidate in _STATE_BUCKETS.items():
        if name in normalized:
            return candidate
    return ConnectionBucket.OTHER


def bucket_connections(states: Iterable[str | None]) -> ConnectionStats:
    stats = ConnectionStats()
    for state in states:
        stats.total += 1
        bucket = classify_state(state)
        if bucket is ConnectionBucket.ESTABLISHED:
            stats.established += 1
        elif bucket is ConnectionBucket.LISTEN:
            stats.listen += 1
        elif bucket is ConnectionBucket.CLOSE_WAIT:
            stats.close_wait += 1
        elif bucket is ConnectionBucket.TIME_WAIT:
            stats.time_wait += 1
    return stats


def percent(part: float, whole: float) -> float:
    """``part / whole * 100`` with the denominator floored at one unit."""
    return part / max(whole, 1) * 100


def format_uptime(seconds: float) -> str:
    seconds = int(seconds)
    days, rest = divmod(seconds, 86400)
    hours, rest = divmod(rest, 3600)
    return f"{days}d {hours}h {rest // 60}m"


class SnapshotComposer:
    """Builds one response document per dashboard endpoint.

    Each operation fans out its provider queries concurrently and joins
    them. Failure handling follows ``LENIENT_QUERIES``.
    """

    def __init__(
        self,
        provider: MetricsProvider,
        process_cache: ProcessCache,
        rate_engine: NetworkRateEngine,
        clock: Clock = now_ms,
    ) -> None:
        self._provider = provider
        self._process_cache = process_cache
        self._rate_engine = rate_engine
        self._clock = clock

    # ── endpoints ───────────────────────────────────────

    async def system_info(self) -> SystemInfoResponse:
        cpu, mem, os_info, speed, uptime = await self._gather(
            "system-info", "cpu", "mem", "os_info", "cpu_current_speed", "uptime"
        )
        return SystemInfoResponse(
            cpu=CpuSummary(
                manufacturer=cpu.manufacturer,
                brand=cpu.brand,
                cores=cpu.cores,
                physical_cores=cpu.physical_cores,
                speed=cpu.speed,
                current_speed=speed.avg,
            ),
            memory=MemorySummary(
                total=mem.total,
                used=mem.used,
                available=mem.available,
                free=mem.free,
            ),
            os=OsSummary(
                platform=os_info.platform,
                distro=os_info.distro,
                release=os_info.release,
                kernel=os_info.kernel,
                arch=os_info.arch,
                hostname=os_info.hostname,
                uptime=uptime,
            ),
        )

    async def cpu_load(self) -> CpuLoadResponse:
        (load,) = await self._gather("cpu-load", "current_load")
        return CpuLoadResponse(
            load=load.current_load,
            load_per_cpu=load.cpus,
            temps=load.temperature,
        )

    async def network(self) -> NetworkResponse:
        stats, interfaces = await self._gather("network", "network_stats", "network_interfaces")
        return NetworkResponse(
            interfaces=[
                InterfaceCounters(
                    iface=s.iface,
                    rx_bytes=s.rx_bytes,
                    rx_dropped=s.rx_dropped,
                    rx_errors=s.rx_errors,
                    tx_bytes=s.tx_bytes,
                    tx_dropped=s.tx_dropped,
                    tx_errors=s.tx_errors,
                )
                for s in stats
            ],
            physical_interfaces=interfaces,
        )

    async def disk(self) -> DiskResponse:
        (disks,) = await self._gather("disk", "fs_size")
        return DiskResponse(disks=disks)

    async def processes(self) -> ProcessesResponse:
        snapshot = await self._process_cache.get_processes()
        return ProcessesResponse(processes=snapshot.entries, timestamp=snapshot.captured_at)

    async def system_status(self) -> SystemStatusResponse:
        load, mem, table, load_avg, uptime = await self._gather(
            "system-status", "current_load", "mem", "processes", "load_average", "uptime"
        )
        return SystemStatusResponse(
            cpu=StatusCpu(
                load=load.current_load,
                load_per_cpu=load.cpus,
                temp=load.temperature.main or 0,
            ),
            memory=StatusMemory(
                total=mem.total,
                used=mem.used,
                available=mem.available,
                usage_percent=percent(mem.used, mem.total),
                free=mem.free,
                cached=mem.cached,
                buffers=mem.buffers,
                swap=SwapSummary(
                    total=mem.swap_total,
                    used=mem.swap_used,
                    free=mem.swap_total - mem.swap_used,
                ),
            ),
            processes=_process_counts(table),
            system=SystemUptime(
                uptime=uptime,
                uptime_formatted=format_uptime(uptime),
                load_average=load_avg,
            ),
            timestamp=self._clock(),
        )

    async def network_speed(self) -> NetworkRate:
        now = self._clock()
        (stats,) = await self._gather("network-speed", "network_stats")
        return self._rate_engine.compute(stats, now)

    async def network_connections(self) -> ConnectionStats:
        (connections,) = await self._gather("network-connections", "network_connections")
        return bucket_connections(c.state for c in connections)

    async def disk_io(self) -> DiskIoReading:
        (io,) = await self._gather("disk-io", "disks_io")
        return io

    async def dashboard(self) -> DashboardResponse:
        load, mem, table, net_stats, disks, os_info, io, uptime, load_avg = await self._gather(
            "dashboard",
            "current_load",
            "mem",
            "processes",
            "network_stats",
            "fs_size",
            "os_info",
            "disks_io",
            "uptime",
            "load_average",
        )
        disk_total = sum(d.size for d in disks)
        disk_used = sum(d.used for d in disks)
        return DashboardResponse(
            system=DashboardSystem(
                hostname=os_info.hostname,
                platform=os_info.platform,
                distro=os_info.distro,
                kernel=os_info.kernel,
                arch=os_info.arch,
                uptime=uptime,
                uptime_formatted=format_uptime(uptime),
            ),
            cpu=DashboardCpu(
                usage=load.current_load,
                usage_per_core=load.cpus,
                temp=load.temperature.main or 0,
                cores=len(load.cpus),
            ),
            memory=DashboardMemory(
                total=mem.total,
                used=mem.used,
                free=mem.free,
                available=mem.available,
                usage=percent(mem.used, mem.total),
                cached=mem.cached,
                buffers=mem.buffers,
                swap_total=mem.swap_total,
                swap_used=mem.swap_used,
                swap_free=mem.swap_total - mem.swap_used,
            ),
            network=DashboardNetwork(
                total_rx=sum(s.rx_bytes for s in net_stats),
                total_tx=sum(s.tx_bytes for s in net_stats),
            ),
            disk=DashboardDisk(
                total=disk_total,
                used=disk_used,
                free=disk_total - disk_used,
                usage=percent(disk_used, disk_total),
                devices=len(disks),
                io=DashboardDiskIo(read_rate=io.read, write_rate=io.write),
            ),
            processes=_process_counts(table),
            load=load_avg,
            timestamp=self._clock(),
        )

    # ── internals ───────────────────────────────────────

    async def _gather(self, endpoint: str, *queries: str) -> list[Any]:
        return await asyncio.gather(*(self._query(endpoint, q) for q in queries))

    async def _query(self, endpoint: str, query: str) -> Any:
        fallback = LENIENT_QUERIES.get(endpoint, {}).get(query)
        if fallback is None:
            return await getattr(self._provider, query)()
        try:
            return await getattr(self._provider, query)()
        except ProviderError as exc:
            logger.warning("[%s] %s failed, serving zero values: %s", endpoint, query, exc)
            return fallback()


def _process_counts(table: ProcessTable) -> ProcessCounts:
    return ProcessCounts(
        total=table.total,
        running=table.running,
        sleeping=table.sleeping,
        zombie=table.zombie,
    )
