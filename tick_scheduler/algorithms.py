from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Union

from .errors import ConfigurationError
from .gantt import build_timeline
from .metrics import build_process_metrics, compute_system_metrics
from .models import Process, ProcessState, ProcessTable, ScheduleResult, TickEvent
from .ready_queue import ReadyQueue

logger = logging.getLogger(__name__)

Workload = Union[ProcessTable, Iterable[Process]]


class SelectionPolicy(ABC):
    """
    Chooses which process runs for a single tick.

    ``select`` is called once per tick and may return None to leave the CPU
    idle. ``after_run`` is called after the chosen process has executed and
    been charged for the tick.
    """

    name = ""

    def start(self, table: ProcessTable) -> None:
        pass

    @abstractmethod
    def select(self, table: ProcessTable, tick: int) -> Optional[ProcessState]:
        ...

    def after_run(self, state: ProcessState) -> None:
        pass


class FcfsPolicy(SelectionPolicy):
    """
    First eligible process in load order. An earlier process keeps winning
    until it completes, so no explicit run-to-completion rule is needed.
    """

    name = "FCFS"

    def select(self, table: ProcessTable, tick: int) -> Optional[ProcessState]:
        for state in table:
            if state.is_eligible(tick):
                return state
        return None


class SjfPolicy(SelectionPolicy):
    """
    Smallest remaining burst among eligible processes, re-evaluated every
    tick, ties going to the earlier process in load order.

    This is shortest-remaining-time-first: a job arriving with less work
    left than the running one takes the CPU on its arrival tick.
    """

    name = "SJF (preemptive)"

    def select(self, table: ProcessTable, tick: int) -> Optional[ProcessState]:
        # min() keeps the first of equal keys, which is the load-order tie-break.
        return min(table.eligible(tick), key=lambda s: s.remaining_burst, default=None)


class RoundRobinPolicy(SelectionPolicy):
    name = "Round Robin"

    def __init__(self, quantum: int):
        self.quantum = quantum
        self.queue = ReadyQueue(0)
        self.current: Optional[ProcessState] = None
        self.time_in_quantum = 0

    def start(self, table: ProcessTable) -> None:
        self.queue = ReadyQueue(len(table))
        self.current = None
        self.time_in_quantum = 0

    def select(self, table: ProcessTable, tick: int) -> Optional[ProcessState]:
        for state in table.arrivals_at(tick):
            self.queue.enqueue(state)

        current = self.current
        if current is None or self.time_in_quantum == self.quantum or current.is_complete:
            if current is not None and not current.is_complete:
                logger.debug(
                    "t=%d: quantum expired for %s, queue: %s",
                    tick,
                    current.label,
                    [s.label for s in self.queue.snapshot()],
                )
                # Back of the line, behind anything that arrived this tick.
                self.queue.enqueue(current)
            self.current = self.queue.dequeue()
            self.time_in_quantum = 0

        return self.current

    def after_run(self, state: ProcessState) -> None:
        self.time_in_quantum += 1
        if state.is_complete:
            self.current = None


def _as_table(processes: Workload) -> ProcessTable:
    if isinstance(processes, ProcessTable):
        return processes
    return ProcessTable(processes)


def validate_quantum(quantum: Optional[int]) -> int:
    if quantum is None:
        raise ConfigurationError("Round Robin requires a positive quantum (use --quantum)")
    if isinstance(quantum, bool) or not isinstance(quantum, int):
        raise ConfigurationError(f"Quantum must be an integer (got {quantum!r})")
    if quantum <= 0:
        raise ConfigurationError(f"Quantum must be positive (got {quantum})")
    return quantum


def simulate(table: ProcessTable, policy: SelectionPolicy, quantum: Optional[int] = None) -> ScheduleResult:
    """
    Run ``policy`` over ``table`` one tick at a time until every process is
    complete.

    The table is reset first, so the same table can be simulated repeatedly.
    Each tick at most one process runs for exactly one unit. Ticks where no
    process is eligible still advance the clock.
    """
    table.reset_all()
    policy.start(table)

    events: List[TickEvent] = []
    previous: Optional[ProcessState] = None
    tick = 0

    while not table.all_complete():
        state = policy.select(table, tick)

        if state is None:
            logger.debug("t=%d: idle", tick)
        else:
            if previous is not None and previous is not state and not previous.is_complete:
                logger.debug("t=%d: %s preempted by %s", tick, previous.label, state.label)
            if state.start_time is None:
                state.start_time = tick

            state.remaining_burst -= 1
            table.charge_tick(tick, state)
            policy.after_run(state)

            if state.is_complete:
                state.completion_time = tick + 1

            events.append(
                TickEvent(
                    tick=tick,
                    pid=state.pid,
                    remaining_burst=state.remaining_burst,
                    wait_time=state.wait_time,
                    turnaround_time=state.turnaround_time,
                )
            )
            previous = state

        tick += 1

    logger.info("%s finished %d processes in %d ticks", policy.name, len(table), tick)

    result = ScheduleResult(
        algorithm=policy.name,
        quantum=quantum,
        processes=build_process_metrics(table),
        events=events,
        timeline=build_timeline(events),
    )
    compute_system_metrics(result, makespan=tick)
    return result


def schedule_fcfs(processes: Workload, quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve, one tick at a time. Quantum is ignored.
    """
    return simulate(_as_table(processes), FcfsPolicy())


def schedule_sjf(processes: Workload, quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First, recomputed every tick (preemptive). Quantum is ignored.
    """
    return simulate(_as_table(processes), SjfPolicy())


def schedule_rr(processes: Workload, quantum: Optional[int] = None) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.
    """
    quantum = validate_quantum(quantum)
    return simulate(_as_table(processes), RoundRobinPolicy(quantum), quantum=quantum)


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "rr": schedule_rr,
}


def check_config(name: str, quantum: Optional[int] = None) -> str:
    """
    Validate an algorithm selector and its quantum without running anything.
    Returns the normalized algorithm name.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ConfigurationError(
            f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})"
        )
    if name == "rr":
        validate_quantum(quantum)
    return name


def run_algorithm(name: str, processes: Workload, quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    func = ALGORITHMS[check_config(name, quantum)]
    return func(processes, quantum=quantum)
