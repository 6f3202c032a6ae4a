"""Shared fixtures: an in-memory provider and a manual clock."""

from __future__ import annotations

import bcrypt
import pytest

from backend.collectors.base import MetricsProvider
from backend.config import Settings
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

GiB = 1024**3
TEST_PASSWORD = "s3cret-pass"


class FakeProvider(MetricsProvider):
    """Returns canned readings; queries named in ``failing`` raise ProviderError."""

    name = "fake"

    def __init__(self) -> None:
        self.failing: set[str] = set()
        self.calls: dict[str, int] = {}
        self.cpu_info = CpuInfo(manufacturer="Intel", brand="Core i7-8700", cores=12, physical_cores=6, speed=3.2)
        self.speed = CpuSpeed(avg=2.9, min=0.8, max=4.6)
        self.load = CpuLoad(
            current_load=37.5,
            cpus=[20.0, 55.0, 100.4, 0.0],
            temperature=CpuTemperature(main=48.0, cores=[47.0, 49.0], max=49.0),
        )
        self.memory = MemoryReading(
            total=16 * GiB,
            used=4 * GiB,
            available=12 * GiB,
            free=8 * GiB,
            cached=3 * GiB,
            buffers=GiB,
            swap_total=2 * GiB,
            swap_used=GiB // 2,
        )
        self.os = OsIdentity(
            platform="linux",
            distro="Ubuntu 22.04.4 LTS",
            release="22.04",
            kernel="6.5.0-27-generic",
            arch="x86_64",
            hostname="web-01",
        )
        self.disks = [
            DiskReading(fs="/dev/sda1", type="ext4", size=100 * GiB, used=40 * GiB, available=60 * GiB, use=40.0, mount="/", rw=True),
            DiskReading(fs="/dev/sdb1", type="xfs", size=300 * GiB, used=60 * GiB, available=240 * GiB, use=20.0, mount="/data", rw=True),
        ]
        self.io = DiskIoReading(read=1200, write=800, read_bytes=5_000_000, write_bytes=2_500_000)
        self.net_stats = [
            NetworkInterfaceReading(iface="eth0", rx_bytes=10_000, tx_bytes=4_000, rx_dropped=1, tx_errors=2),
            NetworkInterfaceReading(iface="lo", rx_bytes=500, tx_bytes=500),
        ]
        self.interfaces = [
            PhysicalInterface(iface="eth0", ip4="10.0.0.5", mac="00:11:22:33:44:55", operstate="up", mtu=1500, speed=1000),
            PhysicalInterface(iface="lo", ip4="127.0.0.1", internal=True, operstate="up", mtu=65536),
        ]
        self.connections = [
            ConnectionReading(protocol="tcp", state="ESTABLISHED"),
            ConnectionReading(protocol="tcp", state="LISTEN"),
            ConnectionReading(protocol="tcp", state="TIME_WAIT"),
            ConnectionReading(protocol="udp", state="NONE"),
        ]
        self.process_table = ProcessTable(
            total=3,
            running=1,
            sleeping=1,
            zombie=1,
            processes=[
                ProcessReading(pid=1, name="systemd", mem=0.5, user="root", command="/sbin/init", state="sleeping"),
                ProcessReading(pid=200, name="postgres", cpu=3.0, mem=12.5, user="postgres", command="postgres -D /data", state="running"),
                ProcessReading(pid=300, name="defunct", mem=0.0, state="zombie"),
            ],
        )
        self.loadavg = LoadAverage(one=0.5, five=0.75, fifteen=1.25)
        self.uptime_seconds = 2 * 86400 + 3 * 3600 + 4 * 60 + 5

    async def _answer(self, query: str, value):
        self.calls[query] = self.calls.get(query, 0) + 1
        if query in self.failing:
            raise ProviderError(f"{query} unavailable")
        return value

    async def cpu(self):
        return await self._answer("cpu", self.cpu_info)

    async def cpu_current_speed(self):
        return await self._answer("cpu_current_speed", self.speed)

    async def current_load(self):
        return await self._answer("current_load", self.load)

    async def mem(self):
        return await self._answer("mem", self.memory)

    async def os_info(self):
        return await self._answer("os_info", self.os)

    async def fs_size(self):
        return await self._answer("fs_size", self.disks)

    async def disks_io(self):
        return await self._answer("disks_io", self.io)

    async def network_stats(self):
        return await self._answer("network_stats", self.net_stats)

    async def network_interfaces(self):
        return await self._answer("network_interfaces", self.interfaces)

    async def network_connections(self):
        return await self._answer("network_connections", self.connections)

    async def processes(self):
        return await self._answer("processes", self.process_table)

    async def load_average(self):
        return await self._answer("load_average", self.loadavg)

    async def uptime(self):
        return await self._answer("uptime", float(self.uptime_seconds))


class ManualClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture(scope="session")
def password_hash() -> str:
    return bcrypt.hashpw(TEST_PASSWORD.encode(), bcrypt.gensalt(rounds=4)).decode()


@pytest.fixture
def test_settings(tmp_path, password_hash) -> Settings:
    return Settings(
        _env_file=None,
        jwt_secret="api-test-signing-secret-0123456789",
        login_path_file=str(tmp_path / ".login-path"),
        admin_password_hash=password_hash,
        frontend_dist=str(tmp_path / "no-dist"),
    )


@pytest.fixture
def admin_password() -> str:
    return TEST_PASSWORD
