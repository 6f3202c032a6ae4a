from __future__ import annotations

import asyncio
import logging
import platform
import socket
import time
from collections import Counter
from pathlib import Path
from typing import Any, Callable, TypeVar

import psutil

from backend.collectors.base import MetricsProvider
from backend.errors import ProviderError
from backend.models import (
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

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CPUINFO = Path("/proc/cpuinfo")
_VENDORS = {"GenuineIntel": "Intel", "AuthenticAMD": "AMD"}
_TEMP_SENSORS = ("coretemp", "k10temp", "zenpower", "cpu_thermal", "acpitz")
_PROCESS_ATTRS = ["pid", "name", "cpu_percent", "memory_percent", "username", "cmdline", "status"]


class PsutilProvider(MetricsProvider):
    """Metrics provider backed by psutil.

    psutil calls are synchronous, so each query runs in a worker thread and
    any psutil/OS failure surfaces as ``ProviderError``.
    """

    name = "psutil"

    def __init__(self) -> None:
        # First cpu_percent(interval=None) call only primes the counters.
        psutil.cpu_percent(interval=None, percpu=True)

    # ── cpu ─────────────────────────────────────────────

    async def cpu(self) -> CpuInfo:
        return await self._run(self._read_cpu)

    async def cpu_current_speed(self) -> CpuSpeed:
        return await self._run(self._read_cpu_speed)

    async def current_load(self) -> CpuLoad:
        return await self._run(self._read_current_load)

    # ── memory / os ─────────────────────────────────────

    async def mem(self) -> MemoryReading:
        return await self._run(self._read_mem)

    async def os_info(self) -> OsIdentity:
        return await self._run(self._read_os_info)

    async def load_average(self) -> LoadAverage:
        one, five, fifteen = await self._run(psutil.getloadavg)
        return LoadAverage(one=one, five=five, fifteen=fifteen)

    async def uptime(self) -> float:
        boot_time = await self._run(psutil.boot_time)
        return time.time() - boot_time

    # ── disk ────────────────────────────────────────────

    async def fs_size(self) -> list[DiskReading]:
        return await self._run(self._read_fs_size)

    async def disks_io(self) -> DiskIoReading:
        return await self._run(self._read_disks_io)

    # ── network ─────────────────────────────────────────

    async def network_stats(self) -> list[NetworkInterfaceReading]:
        return await self._run(self._read_network_stats)

    async def network_interfaces(self) -> list[PhysicalInterface]:
        return await self._run(self._read_network_interfaces)

    async def network_connections(self) -> list[ConnectionReading]:
        return await self._run(self._read_network_connections)

    # ── processes ───────────────────────────────────────

    async def processes(self) -> ProcessTable:
        return await self._run(self._read_processes)

    # ── internals ───────────────────────────────────────

    @staticmethod
    async def _run(fn: Callable[..., T], *args: Any) -> T:
        try:
            return await asyncio.to_thread(fn, *args)
        except ProviderError:
            raise
        except (psutil.Error, OSError, RuntimeError) as exc:
            logger.debug("Provider query %s failed", getattr(fn, "__name__", fn), exc_info=True)
            raise ProviderError(str(exc) or type(exc).__name__) from exc

    @staticmethod
    def _read_cpu() -> CpuInfo:
        manufacturer, brand = _cpu_identity()
        freq = psutil.cpu_freq()
        speed = _ghz((freq.max or freq.current) if freq else 0.0)
        return CpuInfo(
            manufacturer=manufacturer,
            brand=brand,
            cores=psutil.cpu_count(logical=True) or 0,
            physical_cores=psutil.cpu_count(logical=False) or 0,
            speed=speed,
        )

    @staticmethod
    def _read_cpu_speed() -> CpuSpeed:
        freqs = psutil.cpu_freq(percpu=True) or []
        current = [f.current for f in freqs if f.current]
        if not current:
            return CpuSpeed()
        return CpuSpeed(
            avg=_ghz(sum(current) / len(current)),
            min=_ghz(min(current)),
            max=_ghz(max(current)),
        )

    @staticmethod
    def _read_current_load() -> CpuLoad:
        per_cpu = psutil.cpu_percent(interval=None, percpu=True)
        overall = sum(per_cpu) / len(per_cpu) if per_cpu else 0.0
        return CpuLoad(
            current_load=overall,
            cpus=list(per_cpu),
            temperature=_read_temperature(),
        )

    @staticmethod
    def _read_mem() -> MemoryReading:
        vm = psutil.virtual_memory()
        swap = psutil.swap_memory()
        return MemoryReading(
            total=vm.total,
            used=vm.used,
            available=vm.available,
            free=vm.free,
            cached=getattr(vm, "cached", 0),
            buffers=getattr(vm, "buffers", 0),
            swap_total=swap.total,
            swap_used=swap.used,
        )

    @staticmethod
    def _read_os_info() -> OsIdentity:
        system = platform.system()
        distro, release = system, platform.release()
        try:
            os_release = platform.freedesktop_os_release()
        except OSError:
            os_release = {}
        if os_release:
            distro = os_release.get("PRETTY_NAME") or os_release.get("NAME") or distro
            release = os_release.get("VERSION_ID", release)
        return OsIdentity(
            platform=system.lower(),
            distro=distro,
            release=release,
            kernel=platform.release(),
            arch=platform.machine(),
            hostname=socket.gethostname(),
        )

    @staticmethod
    def _read_fs_size() -> list[DiskReading]:
        disks: list[DiskReading] = []
        for part in psutil.disk_partitions(all=False):
            try:
                usage = psutil.disk_usage(part.mountpoint)
            except OSError:
                # unreadable mounts (e.g. empty optical drives) are skipped
                continue
            disks.append(
                DiskReading(
                    fs=part.device,
                    type=part.fstype,
                    size=usage.total,
                    used=usage.used,
                    available=usage.free,
                    use=usage.percent,
                    mount=part.mountpoint,
                    rw="rw" in part.opts.split(","),
                )
            )
        return disks

    @staticmethod
    def _read_disks_io() -> DiskIoReading:
        counters = psutil.disk_io_counters()
        if counters is None:
            raise ProviderError("disk I/O counters unavailable")
        return DiskIoReading(
            read=counters.read_count,
            write=counters.write_count,
            read_bytes=counters.read_bytes,
            write_bytes=counters.write_bytes,
        )

    @staticmethod
    def _read_network_stats() -> list[NetworkInterfaceReading]:
        return [
            NetworkInterfaceReading(
                iface=iface,
                rx_bytes=c.bytes_recv,
                tx_bytes=c.bytes_sent,
                rx_packets=c.packets_recv,
                tx_packets=c.packets_sent,
                rx_dropped=c.dropin,
                tx_dropped=c.dropout,
                rx_errors=c.errin,
                tx_errors=c.errout,
            )
            for iface, c in psutil.net_io_counters(pernic=True).items()
        ]

    @staticmethod
    def _read_network_interfaces() -> list[PhysicalInterface]:
        addrs = psutil.net_if_addrs()
        stats = psutil.net_if_stats()
        interfaces: list[PhysicalInterface] = []
        for iface, addr_list in addrs.items():
            ip4 = next((a.address for a in addr_list if a.family == socket.AF_INET), "")
            ip6 = next((a.address for a in addr_list if a.family == socket.AF_INET6), "")
            mac = next((a.address for a in addr_list if a.family == psutil.AF_LINK), "")
            st = stats.get(iface)
            interfaces.append(
                PhysicalInterface(
                    iface=iface,
                    ip4=ip4,
                    ip6=ip6,
                    mac=mac,
                    internal=iface == "lo" or ip4.startswith("127."),
                    operstate=("up" if st.isup else "down") if st else "unknown",
                    mtu=st.mtu if st else None,
                    speed=st.speed if st else None,
                )
            )
        return interfaces

    @staticmethod
    def _read_network_connections() -> list[ConnectionReading]:
        readings: list[ConnectionReading] = []
        for conn in psutil.net_connections(kind="inet"):
            readings.append(
                ConnectionReading(
                    protocol="tcp" if conn.type == socket.SOCK_STREAM else "udp",
                    local_address=conn.laddr.ip if conn.laddr else "",
                    local_port=conn.laddr.port if conn.laddr else None,
                    peer_address=conn.raddr.ip if conn.raddr else "",
                    peer_port=conn.raddr.port if conn.raddr else None,
                    state=conn.status,
                    pid=conn.pid,
                )
            )
        return readings

    @staticmethod
    def _read_processes() -> ProcessTable:
        entries: list[ProcessReading] = []
        states: Counter[str] = Counter()
        for proc in psutil.process_iter(_PROCESS_ATTRS):
            try:
                info = proc.info
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue
            name = info.get("name") or ""
            status = info.get("status") or ""
            states[status] += 1
            entries.append(
                ProcessReading(
                    pid=info["pid"],
                    name=name,
                    cpu=info.get("cpu_percent") or 0.0,
                    mem=round(info.get("memory_percent") or 0.0, 2),
                    user=info.get("username") or "unknown",
                    command=" ".join(info.get("cmdline") or []) or name,
                    state=status,
                )
            )
        return ProcessTable(
            total=len(entries),
            running=states[psutil.STATUS_RUNNING],
            sleeping=states[psutil.STATUS_SLEEPING],
            zombie=states[psutil.STATUS_ZOMBIE],
            processes=entries,
        )


def _ghz(mhz: float) -> float:
    return round(mhz / 1000, 2)


def _cpu_identity() -> tuple[str, str]:
    """Return (manufacturer, brand) from /proc/cpuinfo, else platform."""
    vendor = brand = ""
    if _CPUINFO.exists():
        for line in _CPUINFO.read_text(errors="replace").splitlines():
            key, _, value = line.partition(":")
            key = key.strip()
            if key == "vendor_id" and not vendor:
                vendor = value.strip()
            elif key == "model name" and not brand:
                brand = value.strip()
            if vendor and brand:
                break
    fallback = platform.processor()
    return _VENDORS.get(vendor, vendor or fallback), brand or fallback


def _read_temperature() -> CpuTemperature:
    if not hasattr(psutil, "sensors_temperatures"):
        return CpuTemperature()
    try:
        sensors = psutil.sensors_temperatures()
    except (OSError, RuntimeError):
        logger.debug("Temperature sensors unreadable", exc_info=True)
        return CpuTemperature()
    entries = next((sensors[name] for name in _TEMP_SENSORS if name in sensors), None)
    if not entries:
        return CpuTemperature()
    cores = [e.current for e in entries if e.label.lower().startswith("core")]
    return CpuTemperature(
        main=entries[0].current,
        cores=cores,
        max=max(e.current for e in entries),
    )
