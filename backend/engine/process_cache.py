from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from backend.collectors.base import MetricsProvider
from backend.models import ProcessReading

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class ProcessSnapshot:
    captured_at: int = 0  # epoch milliseconds
    entries: list[ProcessReading] = field(default_factory=list)


class ProcessCache:
    """Time-windowed cache over the provider's process table.

    Holds the top ``limit`` processes by memory. Within ``window_ms`` of the
    last capture the same snapshot is returned; after that (or while it is
    empty) the table is re-read synchronously. Concurrent stale readers may
    both refresh; the last one to finish wins.
    """

    def __init__(
        self,
        provider: MetricsProvider,
        window_ms: int = 2000,
        limit: int = 100,
        clock: Clock = now_ms,
    ) -> None:
        self._provider = provider
        self.window_ms = window_ms
        self.limit = limit
        self._clock = clock
        self._snapshot = ProcessSnapshot()

    async def get_processes(self) -> ProcessSnapshot:
        now = self._clock()
        if now - self._snapshot.captured_at > self.window_ms or not self._snapshot.entries:
            table = await self._provider.processes()
            entries = sorted(table.processes, key=lambda p: p.mem, reverse=True)[: self.limit]
            self._snapshot = ProcessSnapshot(captured_at=now, entries=entries)
            logger.debug("Process cache refreshed (%d of %d processes)", len(entries), table.total)
        return self._snapshot
