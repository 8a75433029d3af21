from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice, TickEvent

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def build_timeline(events: List[TickEvent]) -> List[ScheduledSlice]:
    """
    Merge runs of consecutive ticks by the same process into slices.
    """
    slices: List[ScheduledSlice] = []
    for event in events:
        last = slices[-1] if slices else None
        if last is not None and last.pid == event.pid and last.end_time == event.tick:
            last.end_time = event.tick + 1
        else:
            slices.append(ScheduledSlice(pid=event.pid, start_time=event.tick, end_time=event.tick + 1))
    return slices


def _segments(slices: List[ScheduledSlice]) -> Iterator[Tuple[Optional[ScheduledSlice], int, int]]:
    """
    Walk the chart left to right, yielding ``(slice, width, end_time)``.
    Idle stretches are yielded with ``slice`` set to None.
    """
    last_time = 0
    for sl in sorted(slices, key=lambda s: (s.start_time, s.end_time)):
        if sl.start_time > last_time:
            yield None, sl.start_time - last_time, sl.start_time
        yield sl, max(1, sl.end_time - sl.start_time), sl.end_time
        last_time = sl.end_time


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart; idle ticks are drawn as dots.
    """
    if not slices:
        return "(no execution)"

    bar = ""
    labels = ""
    time_marks = "0"
    for sl, width, end_time in _segments(slices):
        if sl is None:
            bar += "." * width
            labels += " " * width
        else:
            bar += "=" * width
            labels += sl.label[:width].ljust(width)
        time_marks += f"{end_time:>3}"

    return "\n".join(["Gantt Chart:", f"|{bar}|", labels, time_marks])


def build_rich_gantt(slices: List[ScheduledSlice]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not slices:
        return Panel("No execution", title="Gantt Chart"), ""

    pid_to_color: Dict[int, str] = {}
    bar = Text()
    labels = Text()
    time_marks = "0"

    for sl, width, end_time in _segments(slices):
        if sl is None:
            bar.append("·" * width, style="dim")
            labels.append(" " * width)
        else:
            color = pid_to_color.setdefault(sl.pid, COLORS[len(pid_to_color) % len(COLORS)])
            bar.append(" " * width, style=f"on {color}")
            labels.append(sl.label[:width].ljust(width), style="bold")
        time_marks += f"{end_time:>3}"

    grid = Table.grid(padding=(0, 0))
    grid.add_row(bar)
    grid.add_row(labels)

    return Panel.fit(grid, title="Gantt Chart"), time_marks
