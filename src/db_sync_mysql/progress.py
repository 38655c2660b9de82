"""
Run-wide row counters and the progress/ETA line built from them.
"""

import asyncio
import time
from typing import Callable, NamedTuple, Optional


class ProgressSnapshot(NamedTuple):
    processed: int
    total: int
    percentage: float
    elapsed: float
    remaining: Optional[float]  # None while the ETA is unknown
    rows_per_second: float

    @property
    def eta(self) -> str:
        if self.remaining is None:
            return "--:--"
        minutes, seconds = divmod(int(self.remaining), 60)
        return f"{minutes}:{seconds:02d}"

    def __str__(self) -> str:
        return (f"Progress {self.percentage:.2f}% | ETA: {self.eta} | "
                f"Rows/sec: {self.rows_per_second:.2f}")


def get_progress(start_time: float, processed: int, total: int,
                 now: Optional[float] = None) -> ProgressSnapshot:
    """Percentage, remaining time and throughput for ``processed`` of ``total`` rows

    ``start_time`` and ``now`` come from ``time.monotonic()``. The ETA is
    unknown (``remaining is None``) until at least one row has been processed
    and some time has passed. If the source grew after the catalog was built,
    ``processed`` can exceed ``total``; the remaining time then stays at zero.
    """
    if now is None:
        now = time.monotonic()
    elapsed = max(now - start_time, 0.0)
    percentage = round(processed / total * 100, 2) if total else 100.0

    if processed > 0 and elapsed > 0:
        estimated_total = elapsed / processed * total
        remaining: Optional[float] = max(estimated_total - elapsed, 0.0)
        rows_per_second = processed / elapsed
    else:
        remaining = None
        rows_per_second = 0.0

    return ProgressSnapshot(processed, total, percentage, elapsed, remaining, rows_per_second)


class RunProgress:
    """Rows copied so far across every table of a run

    One instance is shared by all table pipelines; ``advance`` serializes the
    increments.
    """

    def __init__(self, total_rows: int, clock: Callable[[], float] = time.monotonic):
        self.total_rows = total_rows
        self.rows_processed = 0
        self._clock = clock
        self.start_time = clock()
        self._lock = asyncio.Lock()

    async def advance(self, rows: int) -> ProgressSnapshot:
        """Count ``rows`` more committed rows and return the resulting progress"""
        async with self._lock:
            self.rows_processed += rows
            return get_progress(self.start_time, self.rows_processed, self.total_rows,
                                self._clock())

    def snapshot(self) -> ProgressSnapshot:
        return get_progress(self.start_time, self.rows_processed, self.total_rows, self._clock())
