from __future__ import annotations

import hashlib
import json

import pytest

from dotstate.adapters.memory import MemoryFile, MemorySystem
from dotstate.domain import (
    SCRIPT_ONCE_STATE_BUCKET,
    LazyContents,
    ScriptError,
    ScriptOnceState,
    TargetStateScript,
)
from tests.helpers.entries import DEST_PATH, FIXED_NOW, script_target


def _setup_key() -> bytes:
    return ("setup:" + hashlib.sha256(b"echo hi").hexdigest()).encode()


def test_equal_is_always_true(memory_system: MemorySystem) -> None:
    memory_system.nodes[DEST_PATH] = MemoryFile(b"anything", 0o644)

    assert script_target().equal(memory_system.dest_state(DEST_PATH))
    assert script_target().equal(memory_system.dest_state(DEST_PATH / "missing"))


def test_script_without_once_runs_every_time(memory_system: MemorySystem) -> None:
    dest = memory_system.dest_state(DEST_PATH)
    target = script_target()

    target.apply(memory_system, dest)
    target.apply(memory_system, dest)

    assert memory_system.scripts_run == [("setup", b"echo hi"), ("setup", b"echo hi")]
    assert memory_system.calls_to("get") == []
    assert memory_system.calls_to("set") == []


def test_once_script_runs_then_is_recorded(memory_system: MemorySystem) -> None:
    dest = memory_system.dest_state(DEST_PATH)
    target = script_target(once=True, clock=lambda: FIXED_NOW)

    target.apply(memory_system, dest)

    assert memory_system.scripts_run == [("setup", b"echo hi")]
    value = memory_system.persistent_state.get(SCRIPT_ONCE_STATE_BUCKET, _setup_key())
    assert value is not None
    assert set(json.loads(value)) == {"name", "executedAt"}
    record = ScriptOnceState.from_json(value)
    assert record.name == "setup"
    assert record.executed_at == FIXED_NOW


def test_once_script_is_skipped_on_second_apply(memory_system: MemorySystem) -> None:
    dest = memory_system.dest_state(DEST_PATH)
    script_target(once=True).apply(memory_system, dest)
    memory_system.reset_calls()

    script_target(once=True).apply(memory_system, dest)

    assert memory_system.scripts_run == []
    assert memory_system.calls_to("set") == []
    assert [call.method for call in memory_system.calls] == ["get"]


def test_changed_contents_run_again(memory_system: MemorySystem) -> None:
    dest = memory_system.dest_state(DEST_PATH)
    script_target(once=True).apply(memory_system, dest)

    script_target(contents=b"echo hello", once=True).apply(memory_system, dest)

    assert memory_system.scripts_run == [("setup", b"echo hi"), ("setup", b"echo hello")]
    assert len(memory_system.persistent_state.buckets[SCRIPT_ONCE_STATE_BUCKET]) == 2


def test_same_contents_under_other_name_run_again(memory_system: MemorySystem) -> None:
    dest = memory_system.dest_state(DEST_PATH)
    script_target(once=True).apply(memory_system, dest)

    script_target(name="bootstrap", once=True).apply(memory_system, dest)

    assert [name for name, _ in memory_system.scripts_run] == ["setup", "bootstrap"]


@pytest.mark.parametrize("once", [False, True])
def test_whitespace_only_script_is_skipped(memory_system: MemorySystem, once: bool) -> None:
    dest = memory_system.dest_state(DEST_PATH)

    script_target(contents=b"   \n\t", once=once).apply(memory_system, dest)

    assert memory_system.scripts_run == []
    assert memory_system.calls_to("set") == []


def test_failed_once_script_is_not_recorded(memory_system: MemorySystem) -> None:
    memory_system.failing_scripts.add("setup")
    dest = memory_system.dest_state(DEST_PATH)
    target = script_target(once=True)

    with pytest.raises(ScriptError) as exc:
        target.apply(memory_system, dest)

    assert exc.value.name == "setup"
    assert memory_system.calls_to("set") == []

    memory_system.failing_scripts.clear()
    target.apply(memory_system, dest)

    assert len(memory_system.scripts_run) == 2
    assert len(memory_system.calls_to("set")) == 1


def test_record_failure_surfaces_after_script_ran(memory_system: MemorySystem) -> None:
    memory_system.failures["set"] = OSError("state store unavailable")
    dest = memory_system.dest_state(DEST_PATH)

    with pytest.raises(OSError, match="state store unavailable"):
        script_target(once=True).apply(memory_system, dest)

    assert memory_system.scripts_run == [("setup", b"echo hi")]


def test_ledger_lookup_failure_prevents_run(memory_system: MemorySystem) -> None:
    memory_system.failures["get"] = OSError("state store unavailable")
    dest = memory_system.dest_state(DEST_PATH)

    with pytest.raises(OSError, match="state store unavailable"):
        script_target(once=True).apply(memory_system, dest)

    assert memory_system.scripts_run == []


def test_evaluate_surfaces_read_errors() -> None:
    def unreadable() -> bytes:
        raise FileNotFoundError("script source missing")

    target = TargetStateScript(name="setup", lazy_contents=LazyContents(unreadable))

    with pytest.raises(FileNotFoundError):
        target.evaluate()
