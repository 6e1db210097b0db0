from __future__ import annotations

from typing import Dict, List

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice

CELL_WIDTH = 8
PALETTE = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def time_marks(slices: List[ScheduledSlice]) -> List[int]:
    """Start time of every slice, then the stop time of the last one."""
    if not slices:
        return []
    return [sl.start_time for sl in slices] + [slices[-1].end_time]


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart: one ``|  pid  |`` cell per slice, then the time
    marks tab separated.
    """
    if not slices:
        return "Gantt schedule\n(no execution)"

    line = "|"
    for sl in slices:
        pid = str(sl.pid)
        padding = " " * ((CELL_WIDTH - len(pid)) // 2)
        line += f"{padding}{pid}{padding}|"

    return "\n".join(["Gantt schedule", line, "\t".join(str(t) for t in time_marks(slices))])


def build_rich_gantt(slices: List[ScheduledSlice], scale: int = 2) -> Panel:
    """
    Build a Rich Panel with a time-proportional Gantt chart.

    Each tick takes ``scale`` columns. Idle periods are drawn as dots, and the
    bottom row places every time mark under the column where it occurs.
    """
    if not slices:
        return Panel("No execution", title="Gantt schedule")

    pid_colors: Dict[int, str] = {}
    bars = Text()
    labels = Text()
    clock = 0

    for sl in slices:
        if sl.start_time > clock:
            idle = (sl.start_time - clock) * scale
            bars.append("." * idle, style="dim")
            labels.append(" " * idle)

        if sl.pid not in pid_colors:
            pid_colors[sl.pid] = PALETTE[len(pid_colors) % len(PALETTE)]

        width = sl.duration * scale
        bars.append(" " * width, style=f"on {pid_colors[sl.pid]}")
        labels.append(str(sl.pid)[:width].center(width), style="bold")
        clock = sl.end_time

    ruler = Text(style="dim")
    for t in time_marks(slices):
        gap = t * scale - len(ruler)
        if len(ruler) and gap < 1:
            gap = 1
        ruler.append(" " * gap + str(t))

    grid = Table.grid(padding=(0, 0))
    grid.add_row(bars)
    grid.add_row(labels)
    grid.add_row(ruler)

    return Panel.fit(grid, title="Gantt schedule")
