"""
Tick scheduler package.

Discrete-time simulation of FCFS, SJF (shortest remaining time, recomputed
every tick) and Round Robin CPU scheduling, with per-process and aggregate
wait/turnaround statistics.
"""

from .algorithms import ALGORITHMS, run_algorithm, schedule_fcfs, schedule_rr, schedule_sjf
from .models import Process, ProcessState, ProcessTable, ScheduleResult, TickEvent

__all__ = [
    "ALGORITHMS",
    "Process",
    "ProcessState",
    "ProcessTable",
    "ScheduleResult",
    "TickEvent",
    "run_algorithm",
    "schedule_fcfs",
    "schedule_rr",
    "schedule_sjf",
]
