from __future__ import annotations

import heapq
import itertools
import threading
from typing import Callable, Protocol

Callback = Callable[[], None]


class ScheduledTask(Protocol):
    @property
    def cancelled(self) -> bool:
        ...

    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    def call_later(self, delay_seconds: float, callback: Callback) -> ScheduledTask:
        ...


class ThreadTask:
    def __init__(self, timer: threading.Timer):
        self._timer = timer
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        self._timer.cancel()


class ThreadScheduler:
    """Runs each callback on its own daemon timer thread."""

    def call_later(self, delay_seconds: float, callback: Callback) -> ThreadTask:
        timer = threading.Timer(max(0.0, float(delay_seconds)), callback)
        timer.name = "freewrite-scheduler"
        timer.daemon = True
        task = ThreadTask(timer)
        timer.start()
        return task


class ManualTask:
    def __init__(self, due: float, callback: Callback):
        self.due = due
        self.callback = callback
        self._cancelled = False
        self.fired = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class ManualScheduler:
    """Virtual clock. Nothing runs until ``advance`` moves time forward.

    Callbacks run in due-time order, ties in scheduling order. A callback
    scheduled while advancing runs in the same call when its due time falls
    inside the advanced window.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, ManualTask]] = []
        self._counter = itertools.count()

    @property
    def pending(self) -> int:
        return sum(1 for _, _, task in self._queue if not task.cancelled)

    def call_later(self, delay_seconds: float, callback: Callback) -> ManualTask:
        task = ManualTask(self.now + max(0.0, float(delay_seconds)), callback)
        heapq.heappush(self._queue, (task.due, next(self._counter), task))
        return task

    def advance(self, seconds: float) -> None:
        target = self.now + max(0.0, float(seconds))
        while self._queue and self._queue[0][0] <= target:
            due, _, task = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            if task.cancelled:
                continue
            task.fired = True
            task.callback()
        self.now = target
