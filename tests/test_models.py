import pytest

from tick_scheduler.errors import WorkloadError
from tick_scheduler.models import Process, ProcessTable


def _table():
    return ProcessTable(
        [
            Process(1, arrival_time=0, burst_time=2),
            Process(2, arrival_time=3, burst_time=1),
            Process(3, arrival_time=1, burst_time=0),
        ]
    )


def test_initial_state():
    table = _table()
    p1, p2, p3 = table.states
    assert p1.remaining_burst == 2
    assert (p1.wait_time, p1.turnaround_time, p1.in_queue) == (0, 0, False)
    assert p3.is_complete
    assert p3.completion_time == 1
    assert len(table) == 3


def test_empty_table_is_complete():
    assert ProcessTable([]).all_complete()


def test_all_complete():
    table = _table()
    assert not table.all_complete()
    for state in table:
        state.remaining_burst = 0
    assert table.all_complete()


def test_eligible_requires_arrival_and_remaining_burst():
    table = _table()
    assert [s.pid for s in table.eligible(0)] == [1]
    assert [s.pid for s in table.eligible(1)] == [1]
    assert [s.pid for s in table.eligible(3)] == [1, 2]


def test_charge_tick():
    table = _table()
    p1, p2, _ = table.states
    p2.remaining_burst -= 1
    table.charge_tick(3, p2)

    assert (p2.wait_time, p2.turnaround_time) == (0, 1)
    assert (p1.wait_time, p1.turnaround_time) == (1, 1)


def test_reset_all_restores_initial_state():
    table = _table()
    p1 = table.states[0]
    p1.remaining_burst = 0
    p1.wait_time = 4
    p1.turnaround_time = 6
    p1.in_queue = True
    p1.start_time = 0
    p1.completion_time = 6

    table.reset_all()

    assert p1.remaining_burst == 2
    assert (p1.wait_time, p1.turnaround_time, p1.in_queue) == (0, 0, False)
    assert p1.start_time is None
    assert p1.completion_time is None


@pytest.mark.parametrize(
    "process",
    [
        Process(1, burst_time=-1),
        Process(1, burst_time=2, arrival_time=-3),
    ],
)
def test_rejects_negative_times(process):
    with pytest.raises(WorkloadError):
        ProcessTable([process])


def test_rejects_duplicate_pid():
    with pytest.raises(WorkloadError):
        ProcessTable([Process(1, burst_time=1), Process(1, burst_time=2)])
