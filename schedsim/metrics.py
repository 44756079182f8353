from __future__ import annotations

import logging
from typing import List, Sequence

from .models import Metrics, ScheduleResult, ValidationError

logger = logging.getLogger(__name__)


def compute_metrics(
    arrivals: Sequence[float],
    bursts: Sequence[float],
    waiting: Sequence[float],
    end_time: float,
) -> Metrics:
    """
    Derive the summary statistics of one simulation run.

    Utilization and throughput are measured over the active span, from the
    earliest arrival to the end of the schedule. A span that is zero or
    negative (every process finished at the instant it arrived) is clamped
    to 1.
    """
    n = len(bursts)
    if n == 0:
        raise ValidationError("Cannot compute metrics for an empty workload")
    if len(arrivals) != n or len(waiting) != n:
        raise ValidationError(
            f"Length mismatch: {len(arrivals)} arrivals, {n} bursts, {len(waiting)} waiting times"
        )

    busy = sum(bursts)
    span = end_time - min(arrivals)
    if span <= 0:
        logger.debug(f"Degenerate span {span}; clamping to 1")
        span = 1

    return Metrics(
        average_waiting_time=sum(waiting) / n,
        average_turnaround_time=sum(w + b for w, b in zip(waiting, bursts)) / n,
        cpu_utilization=busy / span * 100.0,
        throughput=n / span,
        busy_time=busy,
        span=span,
    )


def format_metrics(metrics: Metrics) -> str:
    """
    Render metrics in the fixed text layout used by presentation layers.
    """
    return "\n".join(
        [
            f"Average Waiting Time   : {metrics.average_waiting_time:.2f} sec",
            f"Average Turnaround Time: {metrics.average_turnaround_time:.2f} sec",
            f"CPU Utilisation        : {metrics.cpu_utilization:.1f} %",
            f"Throughput             : {metrics.throughput:.3f} proc/sec",
        ]
    )


def format_waiting_times(result: ScheduleResult) -> List[str]:
    return [f"Waiting time for P{p.pid + 1} = {p.waiting_time:g}" for p in result.processes]
