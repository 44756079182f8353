from __future__ import annotations

from typing import Dict, List, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def _cells(length: float) -> int:
    # Fractional spans still get at least one character.
    return max(1, round(length))


def _ordered(slices: List[ScheduledSlice]) -> List[ScheduledSlice]:
    return sorted(slices, key=lambda s: (s.start_time, s.end_time))


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart of an execution trace. Idle time is drawn as dots.
    """
    if not slices:
        return "(no execution)"

    slices = _ordered(slices)

    line = "|"
    labels = ""
    time_marks = f"{slices[0].start_time:g}"
    last_time = slices[0].start_time

    for sl in slices:
        if sl.start_time > last_time:
            gap = _cells(sl.start_time - last_time)
            line += "." * gap
            labels += " " * gap
            last_time = sl.start_time
            time_marks += f"{last_time:>4g}"

        width = _cells(sl.end_time - sl.start_time)
        line += "=" * width
        labels += sl.name[:width].ljust(width)
        last_time = sl.end_time
        time_marks += f"{last_time:>4g}"

    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            labels,
            time_marks,
        ]
    )


def build_rich_gantt(slices: List[ScheduledSlice]) -> Tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not slices:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    slices = _ordered(slices)

    pid_to_color: Dict[int, str] = {}

    def pid_color(pid: int) -> str:
        if pid not in pid_to_color:
            pid_to_color[pid] = COLORS[len(pid_to_color) % len(COLORS)]
        return pid_to_color[pid]

    timeline = Text()
    labels = Text()
    time_marks = f"{slices[0].start_time:g}"
    last_time = slices[0].start_time

    for sl in slices:
        if sl.start_time > last_time:
            gap = _cells(sl.start_time - last_time)
            timeline.append(" " * gap)
            labels.append(" " * gap)
            last_time = sl.start_time
            time_marks += f"{last_time:>4g}"

        width = _cells(sl.end_time - sl.start_time)
        timeline.append(" " * width, style=f"on {pid_color(sl.pid)}")
        labels.append(sl.name[:width].ljust(width), style="bold")

        last_time = sl.end_time
        time_marks += f"{last_time:>4g}"

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks
