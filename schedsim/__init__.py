"""
CPU scheduling simulation engine.

Computes execution order, per-process waiting and turnaround times, and
aggregate metrics for FCFS, SJF, Priority, Round Robin, SRTF, and HRRN.
"""

from .algorithms import ALGORITHMS, compare_algorithms, run_algorithm
from .metrics import compute_metrics, format_metrics, format_waiting_times
from .models import Metrics, Process, ScheduleResult, ScheduledSlice, ValidationError, make_processes

__all__ = [
    "ALGORITHMS",
    "Metrics",
    "Process",
    "ScheduleResult",
    "ScheduledSlice",
    "ValidationError",
    "compare_algorithms",
    "compute_metrics",
    "format_metrics",
    "format_waiting_times",
    "make_processes",
    "run_algorithm",
]
