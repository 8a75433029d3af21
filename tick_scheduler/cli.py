from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import List

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS, check_config, run_algorithm
from .errors import SchedulerError
from .gantt import build_rich_gantt, render_gantt
from .metrics import summarize_process_metrics
from .models import ProcessTable, ScheduleResult, TickEvent
from .workload_io import load_workload

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tick-scheduler",
        description="Tick-by-tick CPU scheduling simulator (FCFS, SJF, RR).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase log output (-v info, -vv debug).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help="Algorithm to use (fcfs, sjf, rr).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to a JSON, CSV or P<id>,<burst> text workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin (ignored by FCFS and SJF).",
    )
    run_parser.add_argument(
        "--trace",
        action="store_true",
        help="Print one line per executed tick.",
    )
    run_parser.add_argument(
        "--trace-delay",
        type=float,
        default=0.0,
        help="Seconds to wait between trace lines (default: 0).",
    )
    run_parser.add_argument(
        "--arrival-from-id",
        action="store_true",
        help="Use each process id as its arrival time (legacy input files).",
    )
    run_parser.add_argument(
        "--plain-gantt",
        action="store_true",
        help="Draw the Gantt chart as plain ASCII instead of colored blocks.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to a JSON, CSV or P<id>,<burst> text workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(ALGORITHMS),
        help="Algorithms to compare (default: fcfs sjf rr).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=2,
        help="Time quantum used for RR when included (default: 2).",
    )
    compare_parser.add_argument(
        "--arrival-from-id",
        action="store_true",
        help="Use each process id as its arrival time (legacy input files).",
    )

    return parser


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
    )


def format_event(event: TickEvent) -> str:
    return (
        f"T{event.tick} : {event.label} - Burst left {event.remaining_burst}, "
        f"Wait time {event.wait_time}, Turnaround time {event.turnaround_time}"
    )


def _print_trace(events: List[TickEvent], console: Console, delay: float) -> None:
    for event in events:
        console.print(format_event(event), highlight=False)
        if delay > 0:
            time.sleep(delay)


def _print_result(result: ScheduleResult, console: Console, plain_gantt: bool = False) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    if not result.processes:
        console.print("No processes in workload.")
        return

    if plain_gantt:
        console.print(render_gantt(result.timeline), markup=False, highlight=False)
    else:
        panel, time_marks = build_rich_gantt(result.timeline)
        console.print(panel)
        if time_marks:
            console.print(time_marks)

    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Start",
        "Complete",
        "Wait",
        "Turnaround",
        "Response",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h == "PID" else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.processes:
        proc_table.add_row(
            p.label,
            str(p.arrival_time),
            str(p.burst_time),
            "" if p.start_time is None else str(p.start_time),
            "" if p.completion_time is None else str(p.completion_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.response_time),
        )

    console.print(proc_table)
    console.print()

    summary = summarize_process_metrics(result.processes)
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", f"{summary['avg_waiting']:.2f}")
    sys_table.add_row("Avg turnaround", f"{summary['avg_turnaround']:.2f}")
    sys_table.add_row("Avg response", f"{summary['avg_response']:.2f}")
    if result.system:
        sys = result.system
        sys_table.add_row("Makespan", str(sys.makespan))
        sys_table.add_row("Idle ticks", str(sys.idle_ticks))
        sys_table.add_row("Throughput (proc/tick)", f"{sys.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.1f}%")

    console.print(sys_table)


def _run(args: argparse.Namespace, console: Console) -> int:
    algorithm = check_config(args.algorithm, args.quantum)
    processes = load_workload(Path(args.workload), arrival_from_id=args.arrival_from_id)
    quantum = args.quantum if algorithm == "rr" else None

    result = run_algorithm(algorithm, processes, quantum=quantum)
    if args.trace:
        console.print(f"[bold]{result.algorithm}[/bold]")
        try:
            _print_trace(result.events, console, delay=args.trace_delay)
        except KeyboardInterrupt:
            console.print("[yellow]Trace skipped.[/yellow]")
    _print_result(result, console, plain_gantt=args.plain_gantt)
    return 0


def _compare(args: argparse.Namespace, console: Console) -> int:
    algorithms = [check_config(alg, args.quantum) for alg in args.algorithms]
    table = ProcessTable(load_workload(Path(args.workload), arrival_from_id=args.arrival_from_id))

    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")

    # Every run resets the same table before simulating.
    for alg in algorithms:
        q = args.quantum if alg == "rr" else None
        result = run_algorithm(alg, table, quantum=q)
        summary = summarize_process_metrics(result.processes)
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_response']:.2f}",
        )

    console.print(summary_table)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    console = Console()

    try:
        if args.command == "run":
            return _run(args, console)
        if args.command == "compare":
            return _compare(args, console)
    except SchedulerError as exc:
        logger.debug("Run aborted", exc_info=True)
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
