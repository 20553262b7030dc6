"""Fixed-size process table holding process control blocks."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Callable, Iterator, Optional

DEFAULT_CAPACITY = 16

EntryPoint = Callable[[Any], None]
Cleanup = Callable[[Any], None]


class ProcessState(Enum):
    """Lifecycle state of a process."""

    READY = "ready"
    RUNNING = "running"
    TERMINATED = "terminated"


class ProcessPriority(IntEnum):
    """Scheduling priority; a larger value is scheduled first."""

    LOW = 0
    NORMAL = 1
    HIGH = 2


class ProcessLimitError(RuntimeError):
    """Raised when the process table has no free slot."""


@dataclass
class ProcessControlBlock:
    """Bookkeeping for one process."""

    pid: int
    name: str
    entry_point: Optional[EntryPoint]
    args: Any = None
    priority: ProcessPriority = ProcessPriority.NORMAL
    state: ProcessState = ProcessState.READY
    runtime: int = 0
    cwd: Any = None
    cleanup: Optional[Cleanup] = None


class ProcessTable:
    """A bounded table of processes with monotonically increasing PIDs."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._slots: list[Optional[ProcessControlBlock]] = []
        self._next_pid = 1
        self.reset()

    def reset(self) -> None:
        """Drop every process and restart PID numbering at 1."""
        self._slots = [None] * self.capacity
        self._next_pid = 1

    def create(
        self,
        name: str,
        entry_point: Optional[EntryPoint],
        args: Any = None,
        priority: ProcessPriority = ProcessPriority.NORMAL,
        cleanup: Optional[Cleanup] = None,
    ) -> int:
        """Add a ready process to the first free slot and return its PID."""
        try:
            slot = self._slots.index(None)
        except ValueError:
            raise ProcessLimitError(
                f"process limit of {self.capacity} reached"
            ) from None
        pid = self._next_pid
        self._next_pid += 1
        self._slots[slot] = ProcessControlBlock(
            pid=pid,
            name=name,
            entry_point=entry_point,
            args=args,
            priority=ProcessPriority(priority),
            cleanup=cleanup,
        )
        return pid

    def _slot_of(self, pid: int) -> Optional[int]:
        for slot, pcb in enumerate(self._slots):
            if pcb is not None and pcb.pid == pid:
                return slot
        return None

    def terminate(self, pid: int) -> bool:
        """Remove a process, running its cleanup; return whether it existed."""
        slot = self._slot_of(pid)
        if slot is None:
            return False
        pcb = self._slots[slot]
        self._slots[slot] = None
        assert pcb is not None
        args, cleanup = pcb.args, pcb.cleanup
        pcb.state = ProcessState.TERMINATED
        pcb.entry_point = None
        pcb.args = None
        if cleanup is not None and args is not None:
            cleanup(args)
        return True

    def set_state(self, pid: int, state: ProcessState) -> None:
        """Change the state of a live process; unknown PIDs are ignored."""
        pcb = self.get(pid)
        if pcb is not None:
            pcb.state = state

    def get_state(self, pid: int) -> ProcessState:
        """State of a process, or TERMINATED if it does not exist."""
        pcb = self.get(pid)
        return pcb.state if pcb is not None else ProcessState.TERMINATED

    def get(self, pid: int) -> Optional[ProcessControlBlock]:
        """The control block of a live process, or None."""
        slot = self._slot_of(pid)
        return None if slot is None else self._slots[slot]

    def __len__(self) -> int:
        return sum(pcb is not None for pcb in self._slots)

    def __iter__(self) -> Iterator[ProcessControlBlock]:
        return (pcb for pcb in list(self._slots) if pcb is not None)