from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence


class ValidationError(ValueError):
    """
    Raised when process records or scheduling parameters are invalid.

    Nothing is simulated once this is raised; callers collecting input
    interactively are expected to ask again.
    """


@dataclass
class Process:
    pid: int
    burst_time: float
    arrival_time: float = 0
    priority: Optional[int] = None
    remaining_time: float = field(init=False)

    def __post_init__(self) -> None:
        self.remaining_time = self.burst_time

    @property
    def name(self) -> str:
        return f"P{self.pid + 1}"

    def copy(self) -> "Process":
        """
        Return an independent record with its working time reset.
        """
        return replace(self)


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the trace.
    """

    pid: int
    start_time: float
    end_time: float

    @property
    def name(self) -> str:
        return f"P{self.pid + 1}"


@dataclass
class ProcessMetrics:
    pid: int
    arrival_time: float
    burst_time: float
    waiting_time: float
    turnaround_time: float
    completion_time: float
    priority: Optional[int] = None


@dataclass
class Metrics:
    average_waiting_time: float
    average_turnaround_time: float
    cpu_utilization: float
    throughput: float
    busy_time: float = 0
    span: float = 1


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[float]
    start_time: float = 0
    end_time: float = 0
    processes: List[ProcessMetrics] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    metrics: Optional[Metrics] = None

    @property
    def waiting_times(self) -> List[float]:
        return [p.waiting_time for p in self.processes]

    @property
    def turnaround_times(self) -> List[float]:
        return [p.turnaround_time for p in self.processes]


def _is_real(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite(value) -> bool:
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints beyond float range
        return False


def validate_count(n) -> int:
    if not isinstance(n, int) or isinstance(n, bool) or n <= 0:
        raise ValidationError(f"Invalid number of processes: {n!r} (must be a positive integer)")
    return n


def validate_time(value, label: str = "time") -> float:
    if not _is_real(value) or not _is_finite(value) or value < 0:
        raise ValidationError(f"Invalid {label}: {value!r} (must be a non-negative number)")
    return value


def validate_priority(value) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValidationError(f"Invalid priority: {value!r} (must be a non-negative integer)")
    return value


def validate_quantum(quantum) -> float:
    if quantum is None:
        raise ValidationError("Round Robin requires a time quantum")
    if not _is_real(quantum) or not _is_finite(quantum) or quantum <= 0:
        raise ValidationError(f"Invalid time quantum: {quantum!r} (must be a positive number)")
    return quantum


def validate_processes(processes: Sequence[Process], require_priority: bool = False) -> None:
    """
    Check a complete process list before a simulation run.

    pids must match input positions (0..n-1) since results are reported in
    that order.
    """
    validate_count(len(processes))

    for index, p in enumerate(processes):
        if p.pid != index:
            raise ValidationError(f"Process at position {index} has pid {p.pid!r}; expected {index}")
        validate_time(p.burst_time, f"burst time for {p.name}")
        validate_time(p.arrival_time, f"arrival time for {p.name}")
        if p.priority is not None:
            validate_priority(p.priority)
        elif require_priority:
            raise ValidationError(f"Priority is required for {p.name}")


def make_processes(
    bursts: Sequence[float],
    arrivals: Optional[Sequence[float]] = None,
    priorities: Optional[Sequence[int]] = None,
) -> List[Process]:
    """
    Build a validated process list from parallel sequences of field values.
    """
    n = validate_count(len(bursts))
    if arrivals is None:
        arrivals = [0] * n
    if len(arrivals) != n:
        raise ValidationError(f"Expected {n} arrival times, got {len(arrivals)}")
    if priorities is not None and len(priorities) != n:
        raise ValidationError(f"Expected {n} priorities, got {len(priorities)}")

    processes = [
        Process(
            pid=i,
            burst_time=bursts[i],
            arrival_time=arrivals[i],
            priority=None if priorities is None else priorities[i],
        )
        for i in range(n)
    ]
    validate_processes(processes)
    return processes
