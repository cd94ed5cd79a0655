from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List


logger = logging.getLogger(__name__)


@dataclass
class ScheduledTask:
    due_at_ms: float
    callback: Callable[[], None]
    label: str = ""
    order: int = 0
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)


@dataclass
class DeferredTaskScheduler:
    """Runs callbacks once enough frame time has elapsed.

    Time only moves through ``advance``, so the owner's tick loop stays the
    single source of elapsed milliseconds.
    """

    now_ms: float = 0.0
    _tasks: List[ScheduledTask] = field(default_factory=list)
    _next_order: int = 0

    def schedule(self, delay_ms: float, callback: Callable[[], None], *, label: str = "") -> ScheduledTask:
        task = ScheduledTask(
            due_at_ms=self.now_ms + max(0.0, float(delay_ms)),
            callback=callback,
            label=label,
            order=self._next_order,
        )
        self._next_order += 1
        self._tasks.append(task)
        return task

    def advance(self, delta_ms: float) -> int:
        if delta_ms > 0:
            self.now_ms += float(delta_ms)
        fired = 0
        while True:
            due = [task for task in self._tasks if task.pending and task.due_at_ms <= self.now_ms]
            if not due:
                break
            task = min(due, key=lambda row: (row.due_at_ms, row.order))
            task.fired = True
            try:
                task.callback()
            except Exception:
                logger.exception("Deferred task failed", extra={"task": task.label})
            fired += 1
        self._tasks = [task for task in self._tasks if task.pending]
        return fired

    def pending(self) -> List[ScheduledTask]:
        return [task for task in self._tasks if task.pending]

    def cancel_all(self) -> None:
        for task in self._tasks:
            task.cancel()
        self._tasks = []
