from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from .errors import WorkloadError
from .models import Process

logger = logging.getLogger(__name__)


def load_workload(path: str | Path, arrival_from_id: bool = False) -> List[Process]:
    """
    Load a workload into a list of Process objects, in file order.

    ``.json`` and ``.csv`` files carry ``pid``, ``burst_time`` and an optional
    ``arrival_time``. Any other file is read as lines of
    ``P<id>,<burst>[,<arrival>]``.

    With ``arrival_from_id`` every arrival time is replaced by the process id,
    reproducing older inputs that had no arrival column.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    try:
        if suffix == ".json":
            processes = _load_json(path)
        elif suffix == ".csv":
            processes = _load_csv(path)
        else:
            processes = _load_lines(path)
    except OSError as exc:
        raise WorkloadError(f"Cannot read workload {path}: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise WorkloadError(f"Cannot decode workload {path}: {exc}") from exc

    if arrival_from_id:
        processes = [Process(pid=p.pid, burst_time=p.burst_time, arrival_time=p.pid) for p in processes]

    _check_unique(processes)
    logger.info("Loaded %d processes from %s", len(processes), path)
    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise WorkloadError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(raw, list):
        raise WorkloadError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row))
    return processes


def _load_lines(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            fields = [part.strip() for part in line.split(",")]
            if fields[0][:1] not in {"P", "p"}:
                continue
            if len(fields) < 2 or len(fields) > 3:
                raise WorkloadError(f"{path}:{lineno}: expected P<id>,<burst>[,<arrival>]")
            try:
                processes.append(
                    _build_process(
                        fields[0],
                        fields[1],
                        fields[2] if len(fields) == 3 else None,
                    )
                )
            except WorkloadError as exc:
                raise WorkloadError(f"{path}:{lineno}: {exc}") from exc
    return processes


def _process_from_mapping(mapping) -> Process:
    try:
        pid = mapping["pid"]
        burst_time = mapping["burst_time"]
        arrival_time = mapping.get("arrival_time")
    except (KeyError, TypeError, AttributeError) as exc:
        raise WorkloadError(f"Invalid process entry: {mapping!r}") from exc

    try:
        return _build_process(pid, burst_time, arrival_time)
    except WorkloadError as exc:
        raise WorkloadError(f"Invalid process entry {mapping!r}: {exc}") from exc


def _build_process(pid, burst_time, arrival_time: Optional[object]) -> Process:
    process = Process(
        pid=_parse_pid(pid),
        burst_time=_parse_int(burst_time, "burst_time"),
        arrival_time=0 if arrival_time in (None, "") else _parse_int(arrival_time, "arrival_time"),
    )
    if process.burst_time < 0:
        raise WorkloadError(f"burst_time must be >= 0 (got {process.burst_time})")
    if process.arrival_time < 0:
        raise WorkloadError(f"arrival_time must be >= 0 (got {process.arrival_time})")
    return process


def _parse_pid(value) -> int:
    text = str(value).strip()
    if text[:1] in {"P", "p"}:
        text = text[1:]
    return _parse_int(text, "pid")


def _parse_int(value, name: str) -> int:
    if isinstance(value, bool):
        raise WorkloadError(f"{name} must be an integer (got {value!r})")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise WorkloadError(f"{name} must be an integer (got {value!r})") from exc


def _check_unique(processes: Iterable[Process]) -> None:
    seen: set[int] = set()
    for p in processes:
        if p.pid in seen:
            raise WorkloadError(f"Duplicate process id {p.label}")
        seen.add(p.pid)
