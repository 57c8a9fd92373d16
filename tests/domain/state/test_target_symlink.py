from __future__ import annotations

import pytest

from dotstate.adapters.memory import MemoryDir, MemoryFile, MemorySystem, MemorySymlink
from dotstate.domain import LazyLinkname, TargetStateSymlink
from tests.helpers.entries import DEST_PATH, symlink_target


def test_same_linkname_is_noop(memory_system: MemorySystem) -> None:
    memory_system.nodes[DEST_PATH] = MemorySymlink("/etc/passwd")
    dest = memory_system.dest_state(DEST_PATH)
    target = symlink_target("/etc/passwd")

    assert target.equal(dest)
    target.apply(memory_system, dest)

    assert memory_system.calls == []


def test_other_linkname_is_replaced_then_equal(memory_system: MemorySystem) -> None:
    memory_system.nodes[DEST_PATH] = MemorySymlink("/old/target")
    dest = memory_system.dest_state(DEST_PATH)
    target = symlink_target("/etc/passwd")

    assert not target.equal(dest)
    target.apply(memory_system, dest)

    assert [call.method for call in memory_system.calls] == ["remove_all", "write_symlink"]
    assert memory_system.calls_to("write_symlink")[0].args == ("/etc/passwd", DEST_PATH)
    assert target.equal(memory_system.dest_state(DEST_PATH))


def test_linkname_comparison_is_not_normalised(memory_system: MemorySystem) -> None:
    memory_system.nodes[DEST_PATH] = MemorySymlink("/etc//passwd")
    dest = memory_system.dest_state(DEST_PATH)

    assert not symlink_target("/etc/passwd").equal(dest)


def test_symlink_created_when_absent(memory_system: MemorySystem) -> None:
    dest = memory_system.dest_state(DEST_PATH)

    symlink_target("../dotfiles/vimrc").apply(memory_system, dest)

    assert [call.method for call in memory_system.calls] == ["write_symlink"]
    assert memory_system.nodes[DEST_PATH] == MemorySymlink("../dotfiles/vimrc")


@pytest.mark.parametrize("node", [MemoryDir(0o755), MemoryFile(b"/etc/passwd", 0o644)])
def test_other_kinds_are_replaced(
    memory_system: MemorySystem, node: MemoryDir | MemoryFile
) -> None:
    memory_system.nodes[DEST_PATH] = node
    dest = memory_system.dest_state(DEST_PATH)
    target = symlink_target("/etc/passwd")

    assert not target.equal(dest)
    target.apply(memory_system, dest)

    assert [call.method for call in memory_system.calls] == ["remove_all", "write_symlink"]


def test_linkname_error_surfaces_and_leaves_destination(memory_system: MemorySystem) -> None:
    def broken() -> str:
        raise ValueError("template failed")

    memory_system.nodes[DEST_PATH] = MemorySymlink("/old/target")
    dest = memory_system.dest_state(DEST_PATH)
    target = TargetStateSymlink(lazy_linkname=LazyLinkname(broken))

    with pytest.raises(ValueError, match="template failed"):
        target.evaluate()
    with pytest.raises(ValueError, match="template failed"):
        target.equal(dest)
    with pytest.raises(ValueError, match="template failed"):
        target.apply(memory_system, dest)
    assert memory_system.calls == []
    assert memory_system.nodes[DEST_PATH] == MemorySymlink("/old/target")
