from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional

from .errors import WorkloadError


@dataclass
class Process:
    """
    Immutable description of one process as loaded from a workload.
    """

    pid: int
    burst_time: int
    arrival_time: int = 0

    @property
    def label(self) -> str:
        return f"P{self.pid}"


@dataclass
class ProcessState:
    """
    Mutable per-process simulation state.

    ``remaining_burst`` drops by exactly one for every tick the process runs.
    ``wait_time`` and ``turnaround_time`` only ever grow while the process is
    eligible (arrived and not complete).
    """

    pid: int
    arrival_time: int
    burst_time: int
    remaining_burst: int = 0
    wait_time: int = 0
    turnaround_time: int = 0
    in_queue: bool = False
    start_time: Optional[int] = None
    completion_time: Optional[int] = None

    @classmethod
    def from_process(cls, process: Process) -> "ProcessState":
        state = cls(pid=process.pid, arrival_time=process.arrival_time, burst_time=process.burst_time)
        state.reset()
        return state

    @property
    def label(self) -> str:
        return f"P{self.pid}"

    @property
    def is_complete(self) -> bool:
        return self.remaining_burst == 0

    def is_eligible(self, tick: int) -> bool:
        return self.arrival_time <= tick and self.remaining_burst > 0

    def reset(self) -> None:
        self.remaining_burst = self.burst_time
        self.wait_time = 0
        self.turnaround_time = 0
        self.in_queue = False
        self.start_time = None
        # A zero-length job is finished the moment it is loaded.
        self.completion_time = self.arrival_time if self.burst_time == 0 else None


class ProcessTable:
    """
    Owns the ProcessState of every loaded process, in load order.

    Load order is significant: FCFS picks the first eligible entry and SJF
    breaks ties in favour of the earlier entry. The table is mutated in place
    by a running simulation and is not safe for concurrent access while a run
    is in progress.
    """

    def __init__(self, processes: Iterable[Process]):
        self.states: List[ProcessState] = []
        seen: set[int] = set()
        for p in processes:
            if p.burst_time < 0:
                raise WorkloadError(f"{p.label}: burst time must be >= 0 (got {p.burst_time})")
            if p.arrival_time < 0:
                raise WorkloadError(f"{p.label}: arrival time must be >= 0 (got {p.arrival_time})")
            if p.pid in seen:
                raise WorkloadError(f"Duplicate process id {p.label}")
            seen.add(p.pid)
            self.states.append(ProcessState.from_process(p))

    def __len__(self) -> int:
        return len(self.states)

    def __iter__(self) -> Iterator[ProcessState]:
        return iter(self.states)

    def reset_all(self) -> None:
        """
        Restore every process to its freshly loaded state so another
        algorithm can run over the same input.
        """
        for state in self.states:
            state.reset()

    def all_complete(self) -> bool:
        # Vacuously true for an empty table.
        return all(state.is_complete for state in self.states)

    def eligible(self, tick: int) -> List[ProcessState]:
        return [state for state in self.states if state.is_eligible(tick)]

    def arrivals_at(self, tick: int) -> List[ProcessState]:
        return [state for state in self.states if state.arrival_time == tick]

    def charge_tick(self, tick: int, running: ProcessState) -> None:
        """
        Apply one tick of timer accounting after ``running`` has executed.

        The running process is charged turnaround even on the tick it
        completes; every other eligible process is charged both wait and
        turnaround.
        """
        for state in self.states:
            if state is running:
                state.turnaround_time += 1
            elif state.is_eligible(tick):
                state.wait_time += 1
                state.turnaround_time += 1


@dataclass(frozen=True)
class TickEvent:
    """
    One executed tick. Counters are the values after the tick was applied.
    """

    tick: int
    pid: int
    remaining_burst: int
    wait_time: int
    turnaround_time: int

    @property
    def label(self) -> str:
        return f"P{self.pid}"


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: int
    start_time: int
    end_time: int

    @property
    def label(self) -> str:
        return f"P{self.pid}"


@dataclass
class ProcessMetrics:
    pid: int
    arrival_time: int
    burst_time: int
    start_time: Optional[int]
    completion_time: Optional[int]
    waiting_time: int
    turnaround_time: int
    response_time: int

    @property
    def label(self) -> str:
        return f"P{self.pid}"


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    idle_ticks: int
    makespan: int
    throughput: float
    cpu_utilization: float


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    processes: List[ProcessMetrics] = field(default_factory=list)
    events: List[TickEvent] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    system: Optional[SystemMetrics] = None
