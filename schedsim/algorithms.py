from __future__ import annotations

import logging
from typing import List, Optional

from .engine import (
    DEFAULT_QUANTUM,
    FirstComeFirstServed,
    PriorityFirst,
    RoundRobin,
    SelectionPolicy,
    ShortestJobFirst,
    simulate,
)
from .metrics import compute_run_summary
from .models import Process, ScheduleResult

logger = logging.getLogger(__name__)


def _run(
    algorithm: str,
    title: str,
    processes: List[Process],
    policy: SelectionPolicy,
    quantum: Optional[int] = None,
) -> ScheduleResult:
    timeline, metrics = simulate(processes, policy)
    result = ScheduleResult(
        algorithm=algorithm,
        title=title,
        quantum=quantum,
        processes=metrics,
        timeline=timeline,
    )
    summary = compute_run_summary(result)
    logger.info("%s: %d slices, makespan %d", title, len(timeline), summary.makespan)
    return result


def schedule_fcfs(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive).

    Processes run in input order, not sorted by arrival time.
    """
    return _run("fcfs", "First-come, first-serve", processes, FirstComeFirstServed())


def schedule_sjf(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    Whenever the CPU is free, among processes that have arrived and are not
    yet completed, choose the one with the smallest burst time.
    """
    return _run("sjf", "Shortest-job-first", processes, ShortestJobFirst())


def schedule_priority(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Preemptive priority scheduling. Lower numeric priority means higher
    priority; an arrival with a strictly higher priority preempts at once.
    """
    return _run("priority", "Priority", processes, PriorityFirst())


def schedule_rr(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum (default 2).
    """
    if quantum is None:
        quantum = DEFAULT_QUANTUM
    return _run("rr", "Round-robin", processes, RoundRobin(quantum), quantum=quantum)


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "priority": schedule_priority,
    "rr": schedule_rr,
}


def run_algorithm(name: str, processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}'")

    func = ALGORITHMS[name]
    return func(processes, quantum=quantum)


def run_all(processes: List[Process], quantum: int = DEFAULT_QUANTUM) -> List[ScheduleResult]:
    """
    Run every algorithm, in report order, against the same process list.
    """
    return [run_algorithm(name, processes, quantum=quantum) for name in ALGORITHMS]
