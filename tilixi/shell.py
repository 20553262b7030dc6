"""In-memory file system, builtin registry and terminal state for the shell."""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Callable, Optional, Sequence

from .process import ProcessTable

MAX_BUILTINS = 32
MAX_HISTORY = 32


class ExitStatus(IntEnum):
    """Result codes returned by builtin commands."""

    OK = 0
    ERR = 1
    EINVAL = 2
    ENOENT = 3
    ENOTDIR = 4


class NodeType(Enum):
    FILE = "file"
    DIR = "dir"


@dataclass(eq=False)
class Node:
    """A file or directory in the in-memory file system."""

    name: str
    type: NodeType
    parent: Optional["Node"] = None
    children: dict[str, "Node"] = field(default_factory=dict)
    data: str = ""

    @property
    def is_dir(self) -> bool:
        return self.type is NodeType.DIR


class FileSystem:
    """A simple hierarchical in-memory file system."""

    def __init__(self) -> None:
        self.root = Node("", NodeType.DIR)
        self.root.parent = self.root

    def resolve(self, path: str, cwd: Optional[Node] = None) -> Optional[Node]:
        """Resolve a path relative to cwd (or root); None if it does not exist."""
        node = self.root if path.startswith("/") or cwd is None else cwd
        for part in path.split("/"):
            if part in ("", "."):
                continue
            if part == "..":
                node = node.parent or self.root
                continue
            if not node.is_dir or part not in node.children:
                return None
            node = node.children[part]
        return node

    def create(self, parent: Node, name: str, node_type: NodeType) -> Node:
        """Create a child node, raising if it exists or parent is no directory."""
        if not parent.is_dir:
            raise NotADirectoryError(parent.name)
        if not name or "/" in name or name in (".", ".."):
            raise ValueError(f"invalid name: {name!r}")
        if name in parent.children:
            raise FileExistsError(name)
        node = Node(name, node_type, parent)
        parent.children[name] = node
        return node

    def remove(self, parent: Node, name: str) -> None:
        """Remove a child; raise FileNotFoundError if it is absent."""
        if name not in parent.children:
            raise FileNotFoundError(name)
        del parent.children[name].parent
        del parent.children[name]

    def rename(self, src_parent: Node, src_name: str,
               dst_parent: Node, dst_name: str) -> None:
        """Move a child to a new parent and name."""
        if src_name not in src_parent.children:
            raise FileNotFoundError(src_name)
        if not dst_parent.is_dir:
            raise NotADirectoryError(dst_parent.name)
        if dst_name in dst_parent.children:
            raise FileExistsError(dst_name)
        node = src_parent.children.pop(src_name)
        node.name = dst_name
        node.parent = dst_parent
        dst_parent.children[dst_name] = node

    def read_file(self, node: Node) -> str:
        if node.is_dir:
            raise IsADirectoryError(node.name)
        return node.data

    def write_file(self, node: Node, data: str) -> None:
        if node.is_dir:
            raise IsADirectoryError(node.name)
        node.data = data

    def add_file(self, path: str, content: str) -> Node:
        """Create or overwrite a file, creating missing parent directories."""
        parts = [p for p in path.split("/") if p]
        if not parts:
            raise ValueError("path names no file")
        node = self.root
        for part in parts[:-1]:
            child = node.children.get(part)
            node = child if child is not None else self.create(node, part, NodeType.DIR)
        target = node.children.get(parts[-1])
        if target is None:
            target = self.create(node, parts[-1], NodeType.FILE)
        self.write_file(target, content)
        return target


@dataclass
class CommandTokens:
    tokens: list[str]
    has_pipe: bool = False
    pipe_pos: int = 0


def parse_command(line: str) -> CommandTokens:
    """Split a command line into tokens, noting the first pipe."""
    try:
        tokens = shlex.split(line)
    except ValueError:
        tokens = line.split()
    if "|" in tokens:
        return CommandTokens(tokens, True, tokens.index("|"))
    return CommandTokens(tokens)


Handler = Callable[["Terminal", list[str]], ExitStatus]


@dataclass
class BuiltinCommand:
    name: str
    handler: Handler
    help: str = ""


class BuiltinRegistry:
    """Named builtin commands, first registration wins."""

    def __init__(self) -> None:
        self._commands: list[BuiltinCommand] = []

    def register(self, name: str, handler: Handler, help: str = "") -> None:
        if len(self._commands) >= MAX_BUILTINS:
            raise OverflowError(f"builtin limit of {MAX_BUILTINS} reached")
        self._commands.append(BuiltinCommand(name, handler, help))

    def find(self, name: str) -> Optional[BuiltinCommand]:
        return next((c for c in self._commands if c.name == name), None)

    def __iter__(self):
        return iter(list(self._commands))


def read_username(fs: FileSystem) -> Optional[str]:
    """The user name from the first line of /etc/passwd, or None."""
    node = fs.resolve("/etc/passwd")
    if node is None or node.is_dir:
        return None
    text = fs.read_file(node)[:127]
    name = text.split("\n", 1)[0].split(":", 1)[0]
    return name or None


class Terminal:
    """One shell session: output buffer, cwd, history and pipe input."""

    def __init__(self, fs: FileSystem, registry: BuiltinRegistry) -> None:
        self.fs = fs
        self.registry = registry
        self.cwd: Optional[Node] = fs.root
        self.active = True
        self.capturing = False
        self.pipe_input: Optional[str] = None
        self.history: list[str] = []
        self.processes = ProcessTable()
        self.cursor_row = 0
        self.cursor_col = 0
        self._out: list[str] = []

    def write(self, text: str) -> None:
        self._out.append(text)
        for ch in text:
            if ch == "\n":
                self.cursor_row += 1
                self.cursor_col = 0
            else:
                self.cursor_col += 1

    def newline(self) -> None:
        self.write("\n")

    def error(self, message: str) -> None:
        self.write(message + "\n")

    def clear(self) -> None:
        self._out.clear()
        self.cursor_row = 0
        self.cursor_col = 0

    def output(self) -> str:
        return "".join(self._out)

    def _run_stage(self, argv: Sequence[str]) -> ExitStatus:
        if not argv:
            self.error("damocles: syntax error near '|'")
            return ExitStatus.EINVAL
        cmd = self.registry.find(argv[0])
        if cmd is None:
            self.write(f"damocles: unknown command: {argv[0]}\n")
            return ExitStatus.ERR
        return ExitStatus(cmd.handler(self, list(argv)))

    def execute(self, tokens: CommandTokens) -> ExitStatus:
        """Run a parsed command, feeding each pipe stage's output to the next."""
        if not tokens.tokens:
            return ExitStatus.OK
        stages: list[list[str]] = [[]]
        for tok in tokens.tokens:
            if tok == "|":
                stages.append([])
            else:
                stages[-1].append(tok)
        status = ExitStatus.OK
        try:
            for stage in stages[:-1]:
                saved, self._out = self._out, []
                self.capturing = True
                try:
                    status = self._run_stage(stage)
                    captured = "".join(self._out)
                finally:
                    self._out = saved
                    self.capturing = False
                self.pipe_input = captured
            status = self._run_stage(stages[-1])
        finally:
            self.pipe_input = None
        return status

    def run_line(self, line: str) -> ExitStatus:
        """Record a line in history and execute it."""
        if line.strip():
            self.history.append(line)
            del self.history[:-MAX_HISTORY]
        return self.execute(parse_command(line))