from __future__ import annotations

from typing import List, Optional

from .models import ScheduledSlice


class TimelineBuilder:
    """
    Accumulate contiguous CPU-ownership intervals as a simulation advances.

    At most one slice is open at a time. Closing a slice at the tick it was
    opened drops it, so every emitted slice has ``end_time > start_time``.
    """

    def __init__(self) -> None:
        self.slices: List[ScheduledSlice] = []
        self._pid: Optional[int] = None
        self._start = 0

    @property
    def is_open(self) -> bool:
        return self._pid is not None

    def open(self, pid: int, at: int) -> None:
        if self.is_open:
            raise RuntimeError(f"slice for process {self._pid} is still open")
        self._pid = pid
        self._start = at

    def close(self, at: int) -> None:
        if self._pid is None:
            return
        if at > self._start:
            self.slices.append(ScheduledSlice(pid=self._pid, start_time=self._start, end_time=at))
        self._pid = None
