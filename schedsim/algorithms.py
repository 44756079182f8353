from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Optional, Sequence

from .metrics import compute_metrics
from .models import (
    Process,
    ProcessMetrics,
    ScheduledSlice,
    ScheduleResult,
    validate_processes,
    validate_quantum,
)

logger = logging.getLogger(__name__)

# Time advanced by Round Robin and SRTF when no process is eligible.
IDLE_STEP = 1


def _working_copies(processes: Sequence[Process], require_priority: bool = False) -> List[Process]:
    validate_processes(processes, require_priority=require_priority)
    return [p.copy() for p in processes]


def _simultaneous_copies(processes: Sequence[Process], algorithm: str, require_priority: bool = False) -> List[Process]:
    """
    Working copies for the batch policies, which treat every process as
    arriving at time 0.
    """
    procs = _working_copies(processes, require_priority=require_priority)
    if any(p.arrival_time != 0 for p in procs):
        logger.warning(f"{algorithm} assumes simultaneous arrival; ignoring non-zero arrival times")
    for p in procs:
        p.arrival_time = 0
    return procs


def _is_whole(value: float) -> bool:
    return float(value).is_integer()


def _waited(time: float, p: Process) -> float:
    # Fractional clocks drift; a finished process never waits less than 0.
    return max(0, time - p.arrival_time - p.burst_time)


def _append_slice(timeline: List[ScheduledSlice], pid: int, start: float, end: float, merge: bool = False) -> None:
    if end <= start:
        return
    if merge and timeline and timeline[-1].pid == pid and timeline[-1].end_time == start:
        timeline[-1].end_time = end
        return
    timeline.append(ScheduledSlice(pid=pid, start_time=start, end_time=end))


def _build_result(
    algorithm: str,
    quantum: Optional[float],
    procs: List[Process],
    waiting: List[float],
    end_time: float,
    timeline: List[ScheduledSlice],
) -> ScheduleResult:
    arrivals = [p.arrival_time for p in procs]
    bursts = [p.burst_time for p in procs]

    processes = [
        ProcessMetrics(
            pid=p.pid,
            arrival_time=p.arrival_time,
            burst_time=p.burst_time,
            waiting_time=waiting[p.pid],
            turnaround_time=waiting[p.pid] + p.burst_time,
            completion_time=p.arrival_time + waiting[p.pid] + p.burst_time,
            priority=p.priority,
        )
        for p in procs
    ]

    result = ScheduleResult(
        algorithm=algorithm,
        quantum=quantum,
        start_time=min(arrivals),
        end_time=end_time,
        processes=processes,
        timeline=timeline,
        metrics=compute_metrics(arrivals, bursts, waiting, end_time),
    )
    logger.info(f"{algorithm}: {len(procs)} processes completed at t={end_time:g}")
    return result


def _run_in_order(procs: List[Process], order: Iterable[Process]):
    """
    Run processes back to back, each to completion, starting at time 0.
    """
    waiting = [0.0] * len(procs)
    timeline: List[ScheduledSlice] = []
    elapsed = 0

    for p in order:
        waiting[p.pid] = elapsed
        _append_slice(timeline, p.pid, elapsed, elapsed + p.burst_time)
        elapsed += p.burst_time
        p.remaining_time = 0
        logger.debug(f"{p.name} waited {waiting[p.pid]:g}")

    return waiting, elapsed, timeline


def schedule_fcfs(processes: Sequence[Process], quantum: Optional[float] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive).

    All processes arrive together, so execution follows input order.
    """
    procs = _simultaneous_copies(processes, "FCFS")
    waiting, end_time, timeline = _run_in_order(procs, procs)
    return _build_result("FCFS", None, procs, waiting, end_time, timeline)


def schedule_sjf(processes: Sequence[Process], quantum: Optional[float] = None) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    Processes run in ascending burst time; equal bursts keep input order.
    """
    procs = _simultaneous_copies(processes, "SJF")
    order = sorted(procs, key=lambda p: p.burst_time)
    waiting, end_time, timeline = _run_in_order(procs, order)
    return _build_result("SJF (non-preemptive)", None, procs, waiting, end_time, timeline)


def schedule_priority(processes: Sequence[Process], quantum: Optional[float] = None) -> ScheduleResult:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority. Equal priorities
    keep input order.
    """
    procs = _simultaneous_copies(processes, "Priority", require_priority=True)
    order = sorted(procs, key=lambda p: p.priority)
    waiting, end_time, timeline = _run_in_order(procs, order)
    return _build_result("Priority (non-preemptive)", None, procs, waiting, end_time, timeline)


def schedule_rr(processes: Sequence[Process], quantum: Optional[float] = None) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    Each round scans the unfinished processes in input order and gives every
    arrived one a slice of up to `quantum`. Eligibility is re-checked against
    the advancing clock during the scan, so lower indices are favoured when
    several processes are ready at once. A round in which nothing runs moves
    the clock forward by IDLE_STEP.
    """
    quantum = validate_quantum(quantum)
    procs = _working_copies(processes)

    if not _is_whole(quantum) or any(not _is_whole(p.arrival_time) for p in procs):
        logger.warning(
            f"Round Robin idle gaps advance in steps of {IDLE_STEP}; "
            "fractional arrival times or quantum may leave the CPU idle past an arrival"
        )

    n = len(procs)
    waiting = [0.0] * n
    done = [False] * n
    timeline: List[ScheduledSlice] = []

    time = min(p.arrival_time for p in procs)
    complete = 0

    while complete < n:
        did_work = False
        for p in procs:
            if done[p.pid] or p.arrival_time > time:
                continue

            run_time = min(quantum, p.remaining_time)
            _append_slice(timeline, p.pid, time, time + run_time)
            p.remaining_time -= run_time
            time += run_time
            did_work = True

            if p.remaining_time == 0:
                waiting[p.pid] = _waited(time, p)
                done[p.pid] = True
                complete += 1
                logger.debug(f"{p.name} completed at t={time:g}, waited {waiting[p.pid]:g}")

        if not did_work:
            time += IDLE_STEP

    return _build_result("Round Robin", quantum, procs, waiting, time, timeline)


def schedule_srtf(processes: Sequence[Process], quantum: Optional[float] = None) -> ScheduleResult:
    """
    Shortest Remaining Time First (preemptive SJF).

    The choice is re-made every time unit: the arrived process with the
    strictly smallest remaining time runs for one unit, and the first one in
    input order wins a tie.
    """
    procs = _working_copies(processes)

    n = len(procs)
    waiting = [0.0] * n
    done = [False] * n
    timeline: List[ScheduledSlice] = []

    time = min(p.arrival_time for p in procs)
    finished = 0

    while finished < n:
        current: Optional[Process] = None
        for p in procs:
            if done[p.pid] or p.arrival_time > time:
                continue
            if current is None or p.remaining_time < current.remaining_time:
                current = p

        if current is None:
            time += IDLE_STEP
            continue

        step = min(1, current.remaining_time)
        _append_slice(timeline, current.pid, time, time + step, merge=True)
        current.remaining_time -= step
        time += step

        if current.remaining_time == 0:
            waiting[current.pid] = _waited(time, current)
            done[current.pid] = True
            finished += 1
            logger.debug(f"{current.name} completed at t={time:g}, waited {waiting[current.pid]:g}")

    return _build_result("SRTF", None, procs, waiting, time, timeline)


def response_ratio(current_time: float, arrival_time: float, burst_time: float) -> float:
    """
    HRRN priority of a ready process: (waiting + burst) / burst.

    A zero-length job has an infinite ratio and is always taken first.
    """
    if burst_time == 0:
        return math.inf
    return (current_time - arrival_time + burst_time) / burst_time


def schedule_hrrn(processes: Sequence[Process], quantum: Optional[float] = None) -> ScheduleResult:
    """
    Highest Response Ratio Next (non-preemptive).

    Among the ready processes the one with the strictly greatest response
    ratio runs to completion; on a tie the lowest index wins. When nothing is
    ready the clock jumps straight to the next arrival.
    """
    procs = _working_copies(processes)

    n = len(procs)
    waiting = [0.0] * n
    done = [False] * n
    timeline: List[ScheduledSlice] = []

    time = min(p.arrival_time for p in procs)
    completed = 0

    while completed < n:
        ready = [p for p in procs if not done[p.pid] and p.arrival_time <= time]

        if not ready:
            time = min(p.arrival_time for p in procs if not done[p.pid])
            continue

        chosen = ready[0]
        best_ratio = -1.0
        for p in ready:
            ratio = response_ratio(time, p.arrival_time, p.burst_time)
            if ratio > best_ratio:
                best_ratio = ratio
                chosen = p

        waiting[chosen.pid] = time - chosen.arrival_time
        _append_slice(timeline, chosen.pid, time, time + chosen.burst_time)
        logger.debug(f"{chosen.name} selected at t={time:g} with ratio {best_ratio:.3f}")
        time += chosen.burst_time
        chosen.remaining_time = 0
        done[chosen.pid] = True
        completed += 1

    return _build_result("HRRN", None, procs, waiting, time, timeline)


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "priority": schedule_priority,
    "rr": schedule_rr,
    "srtf": schedule_srtf,
    "hrrn": schedule_hrrn,
}


def run_algorithm(name: str, processes: Sequence[Process], quantum: Optional[float] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    key = name.lower()
    if key not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    func = ALGORITHMS[key]
    return func(processes, quantum=quantum)


def compare_algorithms(
    processes: Sequence[Process],
    names: Optional[Iterable[str]] = None,
    quantum: Optional[float] = None,
) -> Dict[str, ScheduleResult]:
    """
    Run several algorithms over the same workload.

    Every run works on its own copies of the records, so results do not
    depend on the order in which the algorithms are listed.
    """
    results: Dict[str, ScheduleResult] = {}
    for name in names if names is not None else ALGORITHMS:
        q = quantum if name.lower() == "rr" else None
        results[name] = run_algorithm(name, processes, quantum=q)
    return results
