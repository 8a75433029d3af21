from __future__ import annotations


class SchedulerError(Exception):
    """Base class for every error raised by tick_scheduler."""


class ConfigurationError(SchedulerError, ValueError):
    """
    Invalid run configuration (unknown algorithm, missing or non-positive
    quantum). Raised before the simulation starts.
    """


class WorkloadError(SchedulerError, ValueError):
    """Malformed or degenerate workload input, rejected at load time."""


class SimulationError(SchedulerError):
    """An engine invariant did not hold after a run."""
