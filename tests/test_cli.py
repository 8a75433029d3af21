from pathlib import Path

import pytest

from tick_scheduler.cli import main


@pytest.fixture
def workload(tmp_path: Path) -> Path:
    p = tmp_path / "input.txt"
    p.write_text("P1,5,1\nP2,3,2\n")
    return p


def test_run_with_trace(workload, capsys):
    assert main(["run", "-a", "fcfs", "-w", str(workload), "--trace"]) == 0
    out = capsys.readouterr().out
    assert "T1 : P1 - Burst left 4, Wait time 0, Turnaround time 1" in out
    assert "T8 : P2 - Burst left 0, Wait time 4, Turnaround time 7" in out
    assert "Per-process metrics" in out


def test_run_rr(workload, capsys):
    assert main(["run", "-a", "rr", "-q", "2", "-w", str(workload)]) == 0
    out = capsys.readouterr().out
    assert "Quantum: 2" in out


def test_run_arrival_from_id(tmp_path: Path, capsys):
    p = tmp_path / "input.txt"
    p.write_text("P1,2\n")
    assert main(["run", "-a", "sjf", "-w", str(p), "--trace", "--arrival-from-id"]) == 0
    assert "T1 : P1 - Burst left 1" in capsys.readouterr().out


def test_run_empty_workload(tmp_path: Path, capsys):
    p = tmp_path / "empty.json"
    p.write_text("[]")
    assert main(["run", "-a", "sjf", "-w", str(p)]) == 0
    assert "No processes" in capsys.readouterr().out


@pytest.mark.parametrize(
    "extra",
    [
        ["-a", "rr"],
        ["-a", "rr", "-q", "0"],
        ["-a", "lottery"],
    ],
)
def test_configuration_errors(workload, capsys, extra):
    assert main(["run", "-w", str(workload)] + extra) == 2
    assert "Error:" in capsys.readouterr().out


def test_missing_workload(tmp_path: Path, capsys):
    assert main(["run", "-a", "fcfs", "-w", str(tmp_path / "missing.txt")]) == 2
    assert "Error:" in capsys.readouterr().out


def test_usage_error_exits():
    with pytest.raises(SystemExit) as excinfo:
        main(["run"])
    assert excinfo.value.code == 2


def test_compare(workload, capsys):
    assert main(["compare", "-w", str(workload)]) == 0
    out = capsys.readouterr().out
    assert "Algorithm comparison" in out
    assert "FCFS" in out


def test_compare_rejects_bad_quantum(workload, capsys):
    assert main(["compare", "-w", str(workload), "-q", "-1"]) == 2


def test_undecodable_workload(tmp_path: Path, capsys):
    p = tmp_path / "bad.json"
    p.write_bytes(b"\xff\xfe[]")
    assert main(["run", "-a", "fcfs", "-w", str(p)]) == 2
    assert "Error:" in capsys.readouterr().out


def test_run_plain_gantt(workload, capsys):
    assert main(["run", "-a", "fcfs", "-w", str(workload), "--plain-gantt"]) == 0
    out = capsys.readouterr().out
    assert "|.========|" in out
    assert "0  1  6  9" in out
