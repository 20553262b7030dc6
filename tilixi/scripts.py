"""Script handlers and script processes backed by the process table."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

from .process import ProcessLimitError, ProcessPriority, ProcessTable

MAX_HANDLERS = 16

ScriptHandler = Callable[["ScriptCommand"], Any]


@dataclass
class ScriptCommand:
    """One command of a script or pipeline."""

    command: str
    args: list[str] = field(default_factory=list)
    input_fd: int = -1
    output_fd: int = -1


@dataclass(eq=False)
class ScriptContext:
    """State shared by the processes that execute one script or pipeline."""

    commands: list[ScriptCommand]
    handler: Optional[ScriptHandler] = None
    process_ids: list[Optional[int]] = field(default_factory=list)
    ref_count: int = 1
    released: bool = False

    def run(self) -> Any:
        """Execute the first command through the handler, if there is one."""
        if not self.commands or self.handler is None:
            return None
        return self.handler(self.commands[0])

    def release(self) -> bool:
        """Drop one reference; return True once the last one is gone."""
        if self.ref_count > 0:
            self.ref_count -= 1
        if self.ref_count > 0:
            return False
        self.released = True
        return True


class ScriptSystem:
    """A registry of named script handlers that run as processes."""

    def __init__(self, table: ProcessTable) -> None:
        self.table = table
        self._handlers: dict[str, ScriptHandler] = {}

    def register_handler(self, name: str, handler: ScriptHandler) -> None:
        """Register a handler; raise OverflowError when the registry is full."""
        if len(self._handlers) >= MAX_HANDLERS:
            raise OverflowError(f"script handler limit of {MAX_HANDLERS} reached")
        self._handlers.setdefault(name, handler)

    def find_handler(self, name: str) -> Optional[ScriptHandler]:
        """The handler registered under name, or None."""
        return self._handlers.get(name)

    def execute_script(self, name: str, args: Sequence[str] = ()) -> int:
        """Start a process running the named script and return its PID."""
        handler = self.find_handler(name)
        if handler is None:
            raise LookupError(f"unknown script: {name}")
        ctx = ScriptContext([ScriptCommand(name, list(args))], handler)
        return self.table.create(
            name, ScriptContext.run, ctx, ProcessPriority.NORMAL,
            ScriptContext.release,
        )

    def execute_pipeline(self, commands: Sequence[ScriptCommand]) -> Optional[int]:
        """Start one process per command sharing a context; return the first PID."""
        if not commands:
            raise ValueError("pipeline has no commands")
        ctx = ScriptContext(
            list(commands), self.find_handler(commands[0].command), ref_count=0
        )
        for cmd in commands:
            try:
                pid: Optional[int] = self.table.create(
                    cmd.command, ScriptContext.run, ctx,
                    ProcessPriority.NORMAL, ScriptContext.release,
                )
            except ProcessLimitError:
                pid = None
            ctx.process_ids.append(pid)
        ctx.ref_count = sum(pid is not None for pid in ctx.process_ids)
        return ctx.process_ids[0]