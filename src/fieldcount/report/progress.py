from __future__ import annotations

import sys
import time
from dataclasses import dataclass
from typing import Callable, TextIO

import psutil

PROGRESS_INTERVAL_SEC = 5.0


def resident_memory_bytes() -> int | None:
    """Resident set size of this process, or None when the platform won't say."""
    try:
        return int(psutil.Process().memory_info().rss)
    except (psutil.Error, OSError):
        return None


@dataclass
class ProgressState:
    start_time: float
    last_time: float
    last_values_seen: int = 0


class ProgressReporter:
    """Rate-limited, overwritten status line on stderr.

    Emissions are skipped silently when memory statistics are unavailable.
    """

    def __init__(
        self,
        total_bytes: int = 0,
        interval: float = PROGRESS_INTERVAL_SEC,
        *,
        stream: TextIO | None = None,
        clock: Callable[[], float] = time.time,
        memory_probe: Callable[[], int | None] = resident_memory_bytes,
        label: str = "models",
    ) -> None:
        self.total_bytes = total_bytes
        self.interval = interval
        self._stream = stream
        self._clock = clock
        self._memory_probe = memory_probe
        self._label = label
        now = clock()
        self.state = ProgressState(start_time=now, last_time=now)
        self.emitted = 0

    def due(self) -> bool:
        return self._clock() - self.state.last_time >= self.interval

    def maybe_report(self, position: int, values_seen: int, unique: int) -> bool:
        if not self.due():
            return False
        return self.report(position, values_seen, unique)

    def report(self, position: int, values_seen: int, unique: int) -> bool:
        pct = 0.0
        if self.total_bytes > 0 and position >= 0:
            pct = min(100.0, 100.0 * position / self.total_bytes)
        rss = self._memory_probe()
        if rss is None:
            return False
        now = self._clock()
        elapsed = now - self.state.last_time
        speed = (values_seen - self.state.last_values_seen) / elapsed if elapsed > 0 else 0.0
        rss_mb = rss / (1024.0 * 1024.0)
        out = self._stream or sys.stderr
        out.write(
            f"\r{pct:.2f}% processed, {values_seen} {self._label}, unique {unique}, "
            f"RSS {rss_mb:.2f} MB, speed {speed:.0f} {self._label}/s"
        )
        out.flush()
        self.state.last_time = now
        self.state.last_values_seen = values_seen
        self.emitted += 1
        return True

    def finish(self) -> None:
        if self.emitted:
            out = self._stream or sys.stderr
            out.write("\n")
            out.flush()
