"""Cooperative priority scheduler over a process table."""

from __future__ import annotations

import time
from typing import Callable, Optional

from .process import (
    ProcessControlBlock,
    ProcessPriority,
    ProcessState,
    ProcessTable,
)

QUANTUM_MS = 10


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class Scheduler:
    """Runs the highest-priority ready process, one time slice at a time."""

    def __init__(
        self,
        table: ProcessTable,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.table = table
        self._clock = clock if clock is not None else _monotonic_ms
        self._current: Optional[int] = None
        self._last_schedule = self._clock()

    def _next_ready(self) -> Optional[ProcessControlBlock]:
        best: Optional[ProcessControlBlock] = None
        for pcb in self.table:
            if pcb.state is ProcessState.READY and (
                best is None or pcb.priority > best.priority
            ):
                best = pcb
        return best

    def run(self) -> None:
        """Perform one scheduling step."""
        if self._current is not None:
            pcb = self.table.get(self._current)
            if pcb is not None and pcb.state is ProcessState.RUNNING:
                if self._clock() - self._last_schedule < QUANTUM_MS:
                    return
                self.table.set_state(self._current, ProcessState.READY)

        chosen = self._next_ready()
        if chosen is None:
            self._current = None
            return

        if self._current != chosen.pid:
            self.table.set_state(chosen.pid, ProcessState.RUNNING)
            self._current = chosen.pid
            self._last_schedule = self._clock()
            if chosen.entry_point is not None:
                chosen.entry_point(chosen.args)

    def tick(self) -> None:
        """Timer hook; equivalent to one scheduling step."""
        self.run()

    def current(self) -> Optional[int]:
        """PID of the process holding the CPU, or None."""
        return self._current

    def yield_current(self) -> None:
        """Hand the CPU back; the process stays ready for a later step."""
        if self._current is not None:
            self.table.set_state(self._current, ProcessState.READY)
            self._current = None


def spawn_example_process(scheduler: Scheduler) -> int:
    """Create a demonstration process that yields as soon as it runs."""

    def example_task(_name: object) -> None:
        scheduler.yield_current()

    return scheduler.table.create(
        "example_task", example_task, "example_task", ProcessPriority.NORMAL
    )


def describe_processes(table: ProcessTable) -> list[str]:
    """A header line with the process count, then one line per process."""
    lines = [f"Active processes: {len(table)}"]
    lines.extend(
        f"PID={pcb.pid}, name={pcb.name}, state={pcb.state.value}, "
        f"priority={pcb.priority.name.lower()}"
        for pcb in table
    )
    return lines