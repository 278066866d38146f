from __future__ import annotations

from typing import Callable

from .models import TimerState

PRESET_MINUTES = (5, 10, 15, 20, 30)

ExpireCallback = Callable[[], None]


class CountdownTimer:
    """Minute/second countdown advanced by an external one-second tick."""

    def __init__(self, on_expire: ExpireCallback | None = None):
        self.minutes_remaining = 0
        self.seconds_remaining = 0
        self.is_running = False
        self._on_expire = on_expire

    @property
    def state(self) -> TimerState:
        return TimerState(
            minutes=self.minutes_remaining,
            seconds=self.seconds_remaining,
            is_running=self.is_running,
        )

    @property
    def label(self) -> str:
        return f"{self.minutes_remaining:02d}:{self.seconds_remaining:02d}"

    def start(self, minutes: int) -> None:
        if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes <= 0:
            raise ValueError(f"timer minutes must be a positive integer, got {minutes!r}")
        self.minutes_remaining = minutes
        self.seconds_remaining = 0
        self.is_running = True

    def clear(self) -> None:
        self.minutes_remaining = 0
        self.seconds_remaining = 0
        self.is_running = False

    def tick(self) -> None:
        if not self.is_running:
            return

        if self.seconds_remaining > 0:
            self.seconds_remaining -= 1
        elif self.minutes_remaining > 0:
            self.minutes_remaining -= 1
            self.seconds_remaining = 59

        # Reaching 0:00 ends the countdown on the same tick.
        if self.minutes_remaining == 0 and self.seconds_remaining == 0:
            self._expire()

    def _expire(self) -> None:
        self.clear()
        callback = self._on_expire
        if callback is not None:
            callback()
