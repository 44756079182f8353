from rich.panel import Panel

from schedsim.algorithms import schedule_fcfs, schedule_rr
from schedsim.gantt import build_rich_gantt, render_gantt
from schedsim.models import make_processes


def test_render_empty():
    assert render_gantt([]) == "(no execution)"


def test_render_fcfs():
    res = schedule_fcfs(make_processes([5, 3, 8]))
    lines = render_gantt(res.timeline).splitlines()
    assert lines[0] == "Gantt Chart:"
    assert lines[1] == "|" + "=" * 16 + "|"
    assert lines[2].split() == ["P1", "P2", "P3"]
    assert lines[3] == "0   5   8  16"


def test_render_idle_gap():
    res = schedule_rr(make_processes([2, 1], arrivals=[0, 5]), quantum=2)
    lines = render_gantt(res.timeline).splitlines()
    assert lines[1] == "|==...=|"
    assert lines[3] == "0   2   5   6"


def test_rich_gantt():
    res = schedule_fcfs(make_processes([2, 2]))
    panel, marks = build_rich_gantt(res.timeline)
    assert isinstance(panel, Panel)
    assert marks == "0   2   4"

    panel, marks = build_rich_gantt([])
    assert marks == ""
