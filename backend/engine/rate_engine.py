from __future__ import annotations

import math
from dataclasses import dataclass, field

from backend.models import NetworkInterfaceReading, NetworkRate


@dataclass
class RateSample:
    timestamp_ms: int
    per_interface: dict[str, tuple[int, int]] = field(default_factory=dict)  # iface -> (rx, tx)


class NetworkRateEngine:
    """Derives aggregate rx/tx throughput from consecutive counter samples.

    Interfaces are matched by name; interfaces present in only one sample are
    ignored and a counter that went backwards (interface restart) contributes
    zero. The stored sample is replaced on every call.
    """

    def __init__(self) -> None:
        self._previous: RateSample | None = None

    def compute(self, current: list[NetworkInterfaceReading], now_ms: int) -> NetworkRate:
        previous = self._previous
        self._previous = RateSample(
            timestamp_ms=now_ms,
            per_interface={r.iface: (r.rx_bytes, r.tx_bytes) for r in current},
        )

        if previous is None or now_ms - previous.timestamp_ms <= 0:
            return NetworkRate(rx=0, tx=0)

        total_rx = total_tx = 0
        for reading in current:
            last = previous.per_interface.get(reading.iface)
            if last is None:
                continue
            total_rx += max(0, reading.rx_bytes - last[0])
            total_tx += max(0, reading.tx_bytes - last[1])

        elapsed = (now_ms - previous.timestamp_ms) / 1000
        return NetworkRate(rx=_round_half_up(total_rx / elapsed), tx=_round_half_up(total_tx / elapsed))

    @property
    def previous(self) -> RateSample | None:
        return self._previous


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
