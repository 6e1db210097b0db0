from __future__ import annotations

from typing import List

from .models import Process, ProcessMetrics, RunSummary, ScheduleResult


class MetricsAccumulator:
    """
    Collect one completion record per process, in completion order.
    """

    def __init__(self) -> None:
        self.records: List[ProcessMetrics] = []

    def record(self, process: Process, completion_time: int) -> ProcessMetrics:
        turnaround_time = completion_time - process.arrival_time
        metrics = ProcessMetrics(
            pid=process.pid,
            priority=process.priority,
            burst_time=process.burst_time,
            arrival_time=process.arrival_time,
            waiting_time=turnaround_time - process.burst_time,
            turnaround_time=turnaround_time,
            completion_time=completion_time,
        )
        self.records.append(metrics)
        return metrics


def compute_run_summary(result: ScheduleResult) -> RunSummary:
    """
    Compute averages, throughput and CPU utilization given populated
    per-process metrics and timeline slices.

    An empty run has no meaningful averages; every field is reported as zero.
    """
    if not result.processes:
        summary = RunSummary(avg_waiting=0.0, avg_turnaround=0.0, throughput=0.0)
        result.summary = summary
        return summary

    n = len(result.processes)
    makespan = max(p.completion_time for p in result.processes)
    cpu_busy_time = sum(slice_.duration for slice_ in result.timeline)

    summary = RunSummary(
        avg_waiting=sum(p.waiting_time for p in result.processes) / n,
        avg_turnaround=sum(p.turnaround_time for p in result.processes) / n,
        throughput=n / makespan if makespan > 0 else 0.0,
        makespan=makespan,
        cpu_busy_time=cpu_busy_time,
        cpu_utilization=cpu_busy_time / makespan if makespan > 0 else 0.0,
    )
    result.summary = summary
    return summary
