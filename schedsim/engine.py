"""
Discrete-time simulation core shared by every scheduling discipline.

Each run works on its own list of ``Task`` objects (lifecycle state plus
remaining burst) built from the read-only input processes. A selection policy
decides, at every tick, which task owns the CPU for the next time unit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .metrics import MetricsAccumulator
from .models import Process, ProcessMetrics, ProcessState, ScheduledSlice
from .timeline import TimelineBuilder

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2


@dataclass
class Task:
    index: int
    process: Process
    remaining: int
    state: ProcessState = ProcessState.NOT_ARRIVED

    @property
    def pid(self) -> int:
        return self.process.pid


class SelectionPolicy:
    """
    Decide which task runs next.

    ``select`` is called once per tick after arrivals are admitted and returns
    the task that should hold the CPU (``current`` to keep it) or ``None`` to
    leave the CPU idle until the next arrival.
    """

    def select(self, tasks: Sequence[Task], current: Optional[Task]) -> Optional[Task]:
        raise NotImplementedError

    def on_dispatch(self, task: Task) -> None:
        pass

    def on_tick(self, task: Task) -> None:
        pass


def _waiting(tasks: Sequence[Task]) -> List[Task]:
    return [t for t in tasks if t.state is ProcessState.WAITING]


class FirstComeFirstServed(SelectionPolicy):
    """Run processes to completion strictly in input order."""

    def select(self, tasks, current):
        if current is not None:
            return current
        for task in tasks:
            if task.state is ProcessState.FINISHED:
                continue
            # The head of the line has not arrived yet: idle rather than skip it.
            return task if task.state is ProcessState.WAITING else None
        return None


class ShortestJobFirst(SelectionPolicy):
    """
    Non-preemptive shortest job first. Ties go to the earlier input row.
    """

    def select(self, tasks, current):
        if current is not None:
            return current
        ready = _waiting(tasks)
        if not ready:
            return None
        return min(ready, key=lambda t: (t.remaining, t.index))


class PriorityFirst(SelectionPolicy):
    """
    Preemptive priority scheduling; a lower value is more urgent.

    A waiting task only takes the CPU away from the running one when its
    priority value is strictly smaller.
    """

    def select(self, tasks, current):
        ready = _waiting(tasks)
        if not ready:
            return current
        best = min(ready, key=lambda t: (t.process.priority, t.index))
        if current is not None and best.process.priority >= current.process.priority:
            return current
        return best


class RoundRobin(SelectionPolicy):
    """
    Preemptive round robin with a fixed quantum.

    Candidates are scanned circularly in input order starting after the
    running (or just finished) task.
    """

    def __init__(self, quantum: int = DEFAULT_QUANTUM) -> None:
        if quantum <= 0:
            raise ValueError("Round Robin requires a positive quantum")
        self.quantum = quantum
        self.used = 0
        self.last_index = -1

    def _next_after(self, tasks: Sequence[Task], index: int) -> Optional[Task]:
        n = len(tasks)
        for offset in range(1, n + 1):
            task = tasks[(index + offset) % n]
            if task.state is ProcessState.WAITING:
                return task
        return None

    def select(self, tasks, current):
        if current is None:
            return self._next_after(tasks, self.last_index)
        if self.used < self.quantum:
            return current

        nxt = self._next_after(tasks, current.index)
        if nxt is None:
            # Sole runnable task: it keeps the CPU and starts a fresh quantum.
            self.used = 0
            return current
        return nxt

    def on_dispatch(self, task):
        self.used = 0
        self.last_index = task.index

    def on_tick(self, task):
        self.used += 1


def simulate(
    processes: Sequence[Process], policy: SelectionPolicy
) -> Tuple[List[ScheduledSlice], List[ProcessMetrics]]:
    """
    Run ``processes`` under ``policy`` and return the Gantt timeline and the
    completion records (in completion order).

    The clock advances one tick at a time while a task is running and jumps
    straight to the next arrival when nothing is runnable.
    """
    tasks = [Task(index=i, process=p, remaining=p.burst_time) for i, p in enumerate(processes)]
    timeline = TimelineBuilder()
    accumulator = MetricsAccumulator()

    clock = 0
    current: Optional[Task] = None
    finished = 0

    while finished < len(tasks):
        for task in tasks:
            if task.state is ProcessState.NOT_ARRIVED and task.process.arrival_time <= clock:
                task.state = ProcessState.WAITING

        chosen = policy.select(tasks, current)
        if chosen is None:
            next_arrival = min(
                t.process.arrival_time for t in tasks if t.state is ProcessState.NOT_ARRIVED
            )
            logger.debug("t=%d: CPU idle until t=%d", clock, next_arrival)
            clock = next_arrival
            continue

        if chosen is not current:
            if current is not None:
                logger.debug("t=%d: process %s preempted by %s", clock, current.pid, chosen.pid)
                current.state = ProcessState.WAITING
                timeline.close(clock)
            else:
                logger.debug("t=%d: dispatch process %s", clock, chosen.pid)
            chosen.state = ProcessState.RUNNING
            timeline.open(chosen.pid, clock)
            policy.on_dispatch(chosen)
            current = chosen

        current.remaining -= 1
        policy.on_tick(current)
        clock += 1

        if current.remaining == 0:
            current.state = ProcessState.FINISHED
            timeline.close(clock)
            accumulator.record(current.process, clock)
            finished += 1
            current = None

    return timeline.slices, accumulator.records
