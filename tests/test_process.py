import pytest

from tilixi.process import (
    ProcessLimitError,
    ProcessPriority,
    ProcessState,
    ProcessTable,
)


def noop(_args):
    pass


def test_pids_start_at_one_and_increase():
    table = ProcessTable()
    first = table.create("a", noop)
    second = table.create("b", noop)
    assert first == 1
    assert second == first + 1


def test_new_process_is_ready_with_given_fields():
    table = ProcessTable()
    pid = table.create("worker", noop, "payload", ProcessPriority.HIGH)
    pcb = table.get(pid)
    assert pcb.name == "worker"
    assert pcb.args == "payload"
    assert pcb.priority is ProcessPriority.HIGH
    assert pcb.state is ProcessState.READY
    assert pcb.runtime == 0


def test_capacity_limit_raises():
    table = ProcessTable()
    for index in range(16):
        table.create(f"p{index}", noop)
    assert len(table) == 16
    with pytest.raises(ProcessLimitError):
        table.create("extra", noop)


def test_small_capacity():
    table = ProcessTable(capacity=2)
    table.create("a", noop)
    table.create("b", noop)
    with pytest.raises(ProcessLimitError):
        table.create("c", noop)


def test_invalid_capacity():
    with pytest.raises(ValueError):
        ProcessTable(capacity=0)


def test_terminate_removes_process():
    table = ProcessTable()
    pid = table.create("a", noop)
    assert table.terminate(pid) is True
    assert len(table) == 0
    assert table.get(pid) is None
    assert table.get_state(pid) is ProcessState.TERMINATED


def test_terminate_unknown_pid_returns_false():
    table = ProcessTable()
    table.create("a", noop)
    assert table.terminate(99) is False
    assert len(table) == 1


def test_terminate_runs_cleanup_with_args():
    released = []
    table = ProcessTable()
    pid = table.create("a", noop, {"x": 1}, cleanup=released.append)
    table.terminate(pid)
    assert released == [{"x": 1}]


def test_cleanup_skipped_without_args():
    released = []
    table = ProcessTable()
    pid = table.create("a", noop, None, cleanup=released.append)
    table.terminate(pid)
    assert released == []


def test_freed_slot_is_reused_but_pid_is_not():
    table = ProcessTable(capacity=2)
    a = table.create("a", noop)
    b = table.create("b", noop)
    table.terminate(a)
    c = table.create("c", noop)
    assert c not in (a, b)
    assert [pcb.name for pcb in table] == ["c", "b"]


def test_set_and_get_state():
    table = ProcessTable()
    pid = table.create("a", noop)
    table.set_state(pid, ProcessState.RUNNING)
    assert table.get_state(pid) is ProcessState.RUNNING


def test_set_state_unknown_pid_is_ignored():
    table = ProcessTable()
    pid = table.create("a", noop)
    table.set_state(pid + 5, ProcessState.RUNNING)
    assert table.get_state(pid) is ProcessState.READY


def test_iteration_follows_slot_order():
    table = ProcessTable()
    names = ["x", "y", "z"]
    for name in names:
        table.create(name, noop)
    assert [pcb.name for pcb in table] == names


def test_reset_clears_and_restarts_numbering():
    table = ProcessTable()
    table.create("a", noop)
    table.create("b", noop)
    table.reset()
    assert len(table) == 0
    assert list(table) == []
    assert table.create("c", noop) == 1