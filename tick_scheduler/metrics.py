from __future__ import annotations

from typing import List, Optional

from .errors import SimulationError
from .models import ProcessMetrics, ProcessTable, ScheduleResult, SystemMetrics


def build_process_metrics(table: ProcessTable) -> List[ProcessMetrics]:
    """
    Derive final per-process metrics from a finished table, in load order.

    Reported turnaround is ``wait_time + burst_time``. The turnaround counted
    tick by tick during the run must agree with it; a mismatch means the
    engine's accounting is broken and is raised as SimulationError.
    """
    metrics: List[ProcessMetrics] = []
    for state in table:
        if not state.is_complete:
            raise SimulationError(f"{state.label} still has {state.remaining_burst} ticks of burst left")

        turnaround_time = state.wait_time + state.burst_time
        if state.turnaround_time != turnaround_time:
            raise SimulationError(
                f"{state.label}: counted turnaround {state.turnaround_time} != "
                f"wait {state.wait_time} + burst {state.burst_time}"
            )

        response_time = 0 if state.start_time is None else state.start_time - state.arrival_time
        metrics.append(
            ProcessMetrics(
                pid=state.pid,
                arrival_time=state.arrival_time,
                burst_time=state.burst_time,
                start_time=state.start_time,
                completion_time=state.completion_time,
                waiting_time=state.wait_time,
                turnaround_time=turnaround_time,
                response_time=response_time,
            )
        )
    return metrics


def compute_system_metrics(result: ScheduleResult, makespan: Optional[int] = None) -> SystemMetrics:
    """
    Compute throughput and CPU utilization from a result's events.

    ``makespan`` is the clock value when the run stopped; it defaults to the
    tick after the last executed one.
    """
    cpu_busy_time = len(result.events)
    if makespan is None:
        makespan = result.events[-1].tick + 1 if result.events else 0

    throughput = len(result.processes) / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        idle_ticks=makespan - cpu_busy_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
    )
    result.system = system
    return system


def summarize_process_metrics(processes: List[ProcessMetrics]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    An empty list averages to zero rather than dividing by zero.
    """
    if not processes:
        return {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}

    n = len(processes)
    return {
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
        "avg_response": sum(p.response_time for p in processes) / n,
    }
