from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich import box
from rich.console import Console
from rich.table import Table

from .algorithms import ALGORITHMS, compare_algorithms, run_algorithm
from .gantt import build_rich_gantt
from .metrics import format_metrics, format_waiting_times
from .models import ScheduleResult
from .workload_io import load_workload

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, Priority, RR, SRTF, HRRN).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every scheduling decision.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        choices=list(ALGORITHMS),
        type=str.lower,
        help="Algorithm to use.",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=float,
        default=None,
        help="Time quantum for round-robin (ignored by the other algorithms).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        choices=list(ALGORITHMS),
        type=str.lower,
        default=list(ALGORITHMS),
        help=f"Algorithms to compare (default: {' '.join(ALGORITHMS)}).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=float,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR when included (default: {DEFAULT_QUANTUM}).",
    )

    return parser


def _fmt(value: float) -> str:
    return f"{value:g}"


def _print_result(result: ScheduleResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {_fmt(result.quantum)}")

    console.print()

    panel, time_marks = build_rich_gantt(result.timeline)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = ["PID", "Arrive", "Burst", "Priority", "Wait", "Turnaround", "Complete"]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.processes:
        proc_table.add_row(
            f"P{p.pid + 1}",
            _fmt(p.arrival_time),
            _fmt(p.burst_time),
            "" if p.priority is None else str(p.priority),
            _fmt(p.waiting_time),
            _fmt(p.turnaround_time),
            _fmt(p.completion_time),
        )

    console.print(proc_table)
    console.print()

    for line in format_waiting_times(result):
        console.print(line, markup=False, highlight=False)
    console.print()

    # Plain text so the reference layout is printed verbatim.
    console.print(format_metrics(result.metrics), markup=False, highlight=False)


def _print_comparison(results: dict, console: Console) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("CPU utilisation", justify="right")
    summary_table.add_column("Throughput", justify="right")

    for result in results.values():
        m = result.metrics
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else _fmt(result.quantum),
            f"{m.average_waiting_time:.2f}",
            f"{m.average_turnaround_time:.2f}",
            f"{m.cpu_utilization:.1f}%",
            f"{m.throughput:.3f}",
        )

    console.print(summary_table)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
    )

    console = Console()
    err_console = Console(stderr=True)

    try:
        processes = load_workload(Path(args.workload))

        if args.command == "run":
            result = run_algorithm(args.algorithm, processes, quantum=args.quantum)
            _print_result(result, console)
            return 0

        if args.command == "compare":
            results = compare_algorithms(processes, args.algorithms, quantum=args.quantum)
            _print_comparison(results, console)
            return 0
    except (OSError, ValueError) as exc:
        logger.debug("Run aborted", exc_info=True)
        err_console.print(f"Error: {exc}", style="red", markup=False)
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
