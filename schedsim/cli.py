from __future__ import annotations

import argparse
import logging
from typing import List

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import run_all
from .engine import DEFAULT_QUANTUM
from .errors import WorkloadError
from .gantt import build_rich_gantt, render_gantt
from .models import ScheduleResult
from .workload_io import load_workload

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description=(
            "Simulate FCFS, SJF, Priority and Round-robin scheduling of a batch "
            "of CPU-bound processes and report a Gantt chart and timing table for each."
        ),
    )
    parser.add_argument(
        "workload",
        help="Path to a CSV (id,burst,arrival[,priority] per row) or JSON workload file.",
    )
    parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round-robin (default: {DEFAULT_QUANTUM}).",
    )
    parser.add_argument(
        "--compare",
        action="store_true",
        help="Print a table comparing average metrics across the algorithms.",
    )
    parser.add_argument(
        "--plain",
        action="store_true",
        help="Plain-text Gantt chart and ASCII tables, no colors.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug).",
    )
    return parser


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _banner(title: str) -> str:
    rule = "-" * (len(title) * 2)
    return "\n".join([rule, " " * (len(title) // 2) + " " + title, rule])


def _print_result(result: ScheduleResult, console: Console, plain: bool = False) -> None:
    table_box = box.ASCII if plain else box.SIMPLE_HEAVY

    console.print(_banner(result.title), markup=False, highlight=False)
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    if plain:
        console.print(render_gantt(result.timeline), markup=False, highlight=False)
    else:
        console.print(build_rich_gantt(result.timeline))

    console.print()

    summary = result.summary
    proc_table = Table(title="Schedule table", box=table_box, show_footer=True)
    footers = {
        "Wait": f"Average\n{summary.avg_waiting:.2f}",
        "Turnaround": f"Average\n{summary.avg_turnaround:.2f}",
        "Exit": f"Throughput\n{summary.throughput:.2f}/t",
    }
    for h in ["ID", "Priority", "Burst", "Arrival", "Wait", "Turnaround", "Exit"]:
        justify = "center" if h in {"ID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify, footer=footers.get(h, ""))

    for p in result.processes:
        proc_table.add_row(
            str(p.pid),
            str(p.priority),
            str(p.burst_time),
            str(p.arrival_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.completion_time),
        )

    console.print(proc_table)

    sys_table = Table(title="System metrics", box=table_box)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")
    sys_table.add_row("Makespan", str(summary.makespan))
    sys_table.add_row("CPU busy time", str(summary.cpu_busy_time))
    sys_table.add_row("CPU utilization", f"{summary.cpu_utilization * 100:.1f}%")

    console.print(sys_table)
    console.print()


def _print_comparison(results: List[ScheduleResult], console: Console, plain: bool = False) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.ASCII if plain else box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Throughput", justify="right")

    for result in results:
        summary = result.summary
        summary_table.add_row(
            result.title,
            "" if result.quantum is None else str(result.quantum),
            f"{summary.avg_waiting:.2f}",
            f"{summary.avg_turnaround:.2f}",
            f"{summary.throughput:.3f}",
        )

    console.print(summary_table)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.quantum <= 0:
        parser.error("--quantum must be a positive integer")

    configure_logging(args.verbose)
    logger.debug("Workload %s, quantum %d", args.workload, args.quantum)

    console = Console(no_color=args.plain)
    err_console = Console(stderr=True)

    try:
        processes = load_workload(args.workload)
    except WorkloadError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}", highlight=False)
        return 1

    results = run_all(processes, quantum=args.quantum)
    for result in results:
        _print_result(result, console, plain=args.plain)

    if args.compare:
        _print_comparison(results, console, plain=args.plain)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
