import pytest

from tilixi.process import ProcessTable
from tilixi.scripts import ScriptCommand, ScriptContext, ScriptSystem


def test_unknown_script_raises():
    system = ScriptSystem(ProcessTable())
    with pytest.raises(LookupError):
        system.execute_script("nope")


def test_find_handler():
    system = ScriptSystem(ProcessTable())
    handler = lambda cmd: cmd.command
    system.register_handler("hello", handler)
    assert system.find_handler("hello") is handler
    assert system.find_handler("other") is None


def test_register_limit():
    system = ScriptSystem(ProcessTable())
    for i in range(16):
        system.register_handler(f"h{i}", lambda cmd: None)
    with pytest.raises(OverflowError):
        system.register_handler("extra", lambda cmd: None)


def test_execute_script_creates_process_and_runs():
    table = ProcessTable()
    system = ScriptSystem(table)
    system.register_handler("greet", lambda cmd: (cmd.command, cmd.args))
    pid = system.execute_script("greet", ["a", "b"])
    pcb = table.get(pid)
    assert pcb.name == "greet"
    assert pcb.entry_point(pcb.args) == ("greet", ["a", "b"])
    ctx = pcb.args
    assert table.terminate(pid)
    assert ctx.released


def test_pipeline_reference_counting():
    table = ProcessTable()
    system = ScriptSystem(table)
    cmds = [ScriptCommand("one"), ScriptCommand("two"), ScriptCommand("three")]
    first = system.execute_pipeline(cmds)
    ctx = table.get(first).args
    assert ctx.ref_count == 3
    assert len(table) == 3
    for pid in list(ctx.process_ids):
        table.terminate(pid)
    assert ctx.released
    assert ctx.ref_count == 0


def test_pipeline_partial_creation():
    table = ProcessTable(capacity=2)
    system = ScriptSystem(table)
    first = system.execute_pipeline([ScriptCommand(n) for n in ("a", "b", "c")])
    ctx = table.get(first).args
    assert ctx.process_ids[2] is None
    assert ctx.ref_count == 2


def test_empty_pipeline_rejected():
    with pytest.raises(ValueError):
        ScriptSystem(ProcessTable()).execute_pipeline([])


def test_release_defers_until_last():
    ctx = ScriptContext([ScriptCommand("x")], ref_count=2)
    assert ctx.release() is False
    assert ctx.release() is True