"""
Scheduling simulator package.

Simulates how a fixed batch of CPU-bound processes would run under FCFS,
SJF, preemptive Priority and Round-robin scheduling, and reports per-process
timing metrics with a Gantt timeline.
"""

__all__ = ["algorithms", "cli"]
