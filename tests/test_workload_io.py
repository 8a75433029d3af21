from pathlib import Path

import pytest

from tick_scheduler.errors import WorkloadError
from tick_scheduler.models import Process
from tick_scheduler.workload_io import load_workload


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":"P1","arrival_time":0,"burst_time":3},'
                 '{"pid":2,"burst_time":2}]')
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert procs[0].pid == 1
    assert procs[1].arrival_time == 0
    assert procs[1].burst_time == 2


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time\nP1,0,3\nP2,,2\n")
    procs = load_workload(p)
    assert [q.pid for q in procs] == [1, 2]
    assert procs[1].arrival_time == 0


def test_load_legacy_lines(tmp_path: Path):
    p = tmp_path / "input.txt"
    p.write_text("P1,5\n\nP2,3,4\nheader line\n")
    procs = load_workload(p)
    assert procs == [Process(1, burst_time=5, arrival_time=0), Process(2, burst_time=3, arrival_time=4)]


def test_arrival_from_id(tmp_path: Path):
    p = tmp_path / "input.txt"
    p.write_text("P1,5\nP2,3\n")
    procs = load_workload(p, arrival_from_id=True)
    assert [(q.pid, q.arrival_time) for q in procs] == [(1, 1), (2, 2)]


@pytest.mark.parametrize(
    "name, text",
    [
        ("w.txt", "P1,-2\n"),
        ("w.txt", "P1,abc\n"),
        ("w.txt", "P1\n"),
        ("w.txt", "P1,2\nP1,3\n"),
        ("w.json", '[{"pid": 1}]'),
        ("w.json", '{"pid": 1, "burst_time": 2}'),
        ("w.json", "[not json"),
        ("w.csv", "pid,arrival_time,burst_time\n1,-1,2\n"),
    ],
)
def test_invalid_workloads(tmp_path: Path, name, text):
    p = tmp_path / name
    p.write_text(text)
    with pytest.raises(WorkloadError):
        load_workload(p)


def test_missing_file(tmp_path: Path):
    with pytest.raises(WorkloadError):
        load_workload(tmp_path / "nope.json")


@pytest.mark.parametrize(
    "name, data",
    [
        ("w.json", b"\xff\xfe[]"),
        ("w.txt", b"P1,\xff\xfe3\n"),
        ("w.csv", b"pid,burst_time\n\xff,1\n"),
    ],
)
def test_undecodable_file(tmp_path: Path, name, data):
    p = tmp_path / name
    p.write_bytes(data)
    with pytest.raises(WorkloadError, match="Cannot decode"):
        load_workload(p)


def test_lowercase_pid_lines_are_loaded(tmp_path: Path):
    p = tmp_path / "input.txt"
    p.write_text("p3,4\nP4,1,2\n")
    procs = load_workload(p)
    assert procs == [Process(3, burst_time=4), Process(4, burst_time=1, arrival_time=2)]
