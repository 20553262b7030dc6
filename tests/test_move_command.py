import pytest

from tilixi.move_command import cmd_mv
from tilixi.shell import BuiltinRegistry, ExitStatus, FileSystem, NodeType, Terminal


@pytest.fixture
def term():
    fs = FileSystem()
    fs.add_file("/a.txt", "alpha")
    fs.add_file("/b.txt", "beta")
    fs.create(fs.root, "dir", NodeType.DIR)
    return Terminal(fs, BuiltinRegistry())


def test_missing_operand(term):
    assert cmd_mv(term, ["mv", "a.txt"]) == ExitStatus.EINVAL
    assert "mv: missing file operand" in term.output()


def test_rename_file(term):
    assert cmd_mv(term, ["mv", "a.txt", "c.txt"]) == ExitStatus.OK
    assert term.fs.resolve("/a.txt") is None
    moved = term.fs.resolve("/c.txt")
    assert moved is not None
    assert term.fs.read_file(moved) == "alpha"


def test_move_into_directory(term):
    assert cmd_mv(term, ["mv", "a.txt", "dir"]) == ExitStatus.OK
    moved = term.fs.resolve("/dir/a.txt")
    assert moved is not None
    assert term.fs.read_file(moved) == "alpha"
    assert term.fs.resolve("/a.txt") is None


def test_move_several_into_directory(term):
    assert cmd_mv(term, ["mv", "a.txt", "b.txt", "dir"]) == ExitStatus.OK
    assert sorted(term.fs.resolve("/dir").children) == ["a.txt", "b.txt"]


def test_several_sources_need_directory_target(term):
    assert cmd_mv(term, ["mv", "a.txt", "b.txt", "c.txt"]) == ExitStatus.ENOTDIR
    assert "mv: c.txt: not a directory" in term.output()
    assert term.fs.resolve("/a.txt") is not None


def test_trailing_slash_on_missing_target(term):
    assert cmd_mv(term, ["mv", "a.txt", "nowhere/"]) == ExitStatus.ENOTDIR
    assert term.fs.resolve("/a.txt") is not None


def test_missing_source(term):
    assert cmd_mv(term, ["mv", "ghost", "x"]) == ExitStatus.ENOENT
    assert "mv: ghost: no such file or directory" in term.output()


def test_missing_destination_parent(term):
    assert cmd_mv(term, ["mv", "a.txt", "/no/such"]) == ExitStatus.ENOENT
    assert term.fs.resolve("/a.txt") is not None


def test_overwrites_existing_file(term):
    assert cmd_mv(term, ["mv", "a.txt", "b.txt"]) == ExitStatus.OK
    assert term.fs.resolve("/a.txt") is None
    assert term.fs.read_file(term.fs.resolve("/b.txt")) == "alpha"


def test_same_node_is_noop(term):
    assert cmd_mv(term, ["mv", "a.txt", "a.txt"]) == ExitStatus.OK
    assert term.fs.read_file(term.fs.resolve("/a.txt")) == "alpha"


def test_directory_with_extension_rejected(term):
    assert cmd_mv(term, ["mv", "dir", "dir.d"]) == ExitStatus.EINVAL
    assert "mv: dir.d: invalid directory name" in term.output()
    assert term.fs.resolve("/dir") is not None


def test_rename_directory(term):
    term.fs.add_file("/dir/inner", "x")
    assert cmd_mv(term, ["mv", "dir", "other"]) == ExitStatus.OK
    assert term.fs.resolve("/dir") is None
    assert term.fs.read_file(term.fs.resolve("/other/inner")) == "x"


def test_destination_entry_is_directory(term):
    term.fs.create(term.fs.resolve("/dir"), "a.txt", NodeType.DIR)
    assert cmd_mv(term, ["mv", "a.txt", "dir"]) == ExitStatus.ENOTDIR
    assert "mv: a.txt: is a directory" in term.output()
    assert term.fs.resolve("/a.txt") is not None


def test_dot_source_is_invalid(term):
    assert cmd_mv(term, ["mv", ".", "x"]) == ExitStatus.EINVAL
    assert "mv: .: invalid path" in term.output()