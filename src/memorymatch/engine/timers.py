from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable


@dataclass
class ScheduledTask:
    due: float
    generation: int
    callback: Callable[[], None]
    seq: int = 0
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class DeferredScheduler:
    """One-shot delayed callbacks on a logical clock.

    Nothing runs on its own: the owner calls `advance(dt)` (the pygame
    client does so once per frame) and due tasks fire in due order.
    """

    now: float = 0.0
    _tasks: list[ScheduledTask] = field(default_factory=list)
    _seq: int = 0

    def schedule(self, delay: float, generation: int, callback: Callable[[], None]) -> ScheduledTask:
        if delay < 0:
            raise ValueError("delay must be non-negative.")
        self._seq += 1
        task = ScheduledTask(due=self.now + delay, generation=generation, callback=callback, seq=self._seq)
        self._tasks.append(task)
        return task

    def cancel_stale(self, generation: int) -> int:
        """Cancel every task tagged with a generation older than `generation`."""
        cancelled = 0
        for task in self._tasks:
            if not task.cancelled and task.generation < generation:
                task.cancel()
                cancelled += 1
        self._tasks = [t for t in self._tasks if not t.cancelled]
        return cancelled

    @property
    def pending(self) -> list[ScheduledTask]:
        return [t for t in self._tasks if not t.cancelled]

    def advance(self, dt: float) -> int:
        """Move the clock forward by `dt` seconds; returns how many tasks fired."""
        self.now += max(0.0, dt)
        fired = 0
        while True:
            due = [t for t in self._tasks if not t.cancelled and t.due <= self.now]
            if not due:
                break
            task = min(due, key=lambda t: (t.due, t.seq))
            self._tasks.remove(task)
            task.callback()
            fired += 1
        self._tasks = [t for t in self._tasks if not t.cancelled]
        return fired
