"""
Frame-driven task scheduler.

Runs fire-once callbacks after a delay measured in game time. The clock
only advances when update(dt) is called from the game loop, so there is
no background thread and every callback runs on the caller's thread.

Usage:
    scheduler = Scheduler()
    task = scheduler.call_later(0.15, trigger_event, "shop:open")

    # In game loop:
    scheduler.update(dt)

    # Changed our mind before it fired
    task.cancel()
"""

from __future__ import annotations

import heapq
import itertools
import logging
from typing import Any, Callable


logger = logging.getLogger(__name__)


class ScheduledTask:
    """
    Handle for a pending callback.

    Attributes:
        due: Scheduler time at which the callback fires
        name: Label used in logs
    """

    def __init__(
        self,
        due: float,
        callback: Callable[..., Any],
        args: tuple[Any, ...],
        name: str = "",
    ):
        self.due = due
        self.name = name or getattr(callback, "__name__", "task")
        self._callback = callback
        self._args = args
        self._cancelled = False
        self._fired = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def pending(self) -> bool:
        """True until the task fires or is cancelled."""
        return not (self._cancelled or self._fired)

    def cancel(self) -> bool:
        """
        Cancel the task.

        Returns:
            True if the task was still pending
        """
        if not self.pending:
            return False
        self._cancelled = True
        return True

    def _run(self) -> None:
        self._fired = True
        self._callback(*self._args)

    def __repr__(self) -> str:
        state = "pending" if self.pending else ("fired" if self._fired else "cancelled")
        return f"ScheduledTask({self.name}, due={self.due:.3f}, {state})"


class Scheduler:
    """
    Cooperative scheduler for delayed one-shot callbacks.

    Tasks due at the same time fire in the order they were scheduled.
    A callback that raises is logged and does not stop the others.
    """

    def __init__(self, start_time: float = 0.0):
        self._now = start_time
        self._queue: list[tuple[float, int, ScheduledTask]] = []
        self._sequence = itertools.count()

    @property
    def now(self) -> float:
        """Current scheduler time in seconds."""
        return self._now

    @property
    def pending(self) -> list[ScheduledTask]:
        """Tasks that have neither fired nor been cancelled, in due order."""
        return [task for _, _, task in sorted(self._queue) if task.pending]

    def call_later(
        self,
        delay: float,
        callback: Callable[..., Any],
        *args: Any,
        name: str = "",
    ) -> ScheduledTask:
        """
        Schedule a callback.

        Args:
            delay: Seconds from now (negative values are treated as 0)
            callback: Function to call
            *args: Positional arguments for the callback
            name: Optional label for logging

        Returns:
            Cancellable task handle
        """
        task = ScheduledTask(self._now + max(0.0, delay), callback, args, name)
        heapq.heappush(self._queue, (task.due, next(self._sequence), task))
        return task

    def update(self, dt: float) -> int:
        """
        Advance the clock and run every task that became due.

        Args:
            dt: Delta time in seconds

        Returns:
            Number of callbacks that ran
        """
        self._now += dt
        ran = 0

        while self._queue and self._queue[0][0] <= self._now:
            _, _, task = heapq.heappop(self._queue)
            if not task.pending:
                continue

            try:
                task._run()
            except Exception:
                logger.exception("Scheduled task %s failed", task.name)
            ran += 1

        return ran

    def cancel_all(self) -> int:
        """Cancel every pending task. Returns how many were cancelled."""
        count = sum(1 for _, _, task in self._queue if task.cancel())
        self._queue.clear()
        return count
