"""A pausable frame timer."""

from __future__ import annotations

import time
from typing import Callable


class GameTimer:
    """Measures per-frame delta and total running time, excluding paused spans.

    ``clock`` returns the current time in seconds; it defaults to a
    high-resolution monotonic counter.
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._delta = -1.0
        self._base = 0.0
        self._paused = 0.0
        self._stop_time = 0.0
        self._prev = 0.0
        self._curr = 0.0
        self._stopped = False

    def reset(self) -> None:
        """Restart measuring from now."""
        now = self._clock()
        self._base = now
        self._prev = now
        self._stop_time = 0.0
        self._stopped = False

    def start(self) -> None:
        """Resume after a stop, adding the stopped span to the paused time."""
        if self._stopped:
            now = self._clock()
            self._paused += now - self._stop_time
            self._prev = now
            self._stop_time = 0.0
            self._stopped = False

    def stop(self) -> None:
        """Pause the timer; a second stop has no effect."""
        if not self._stopped:
            self._stop_time = self._clock()
            self._stopped = True

    def tick(self) -> None:
        """Advance one frame and compute the time since the previous tick."""
        if self._stopped:
            self._delta = 0.0
            return
        self._curr = self._clock()
        self._delta = max(self._curr - self._prev, 0.0)
        self._prev = self._curr

    def total_time(self) -> float:
        """Seconds since reset, not counting time spent stopped."""
        end = self._stop_time if self._stopped else self._curr
        return (end - self._paused) - self._base

    def delta_time(self) -> float:
        """Seconds between the last two ticks."""
        return self._delta

    def delta_time_ms(self) -> float:
        """Milliseconds between the last two ticks."""
        return self._delta * 1000.0