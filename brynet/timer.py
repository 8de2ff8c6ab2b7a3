"""One-shot and repeating timers driven by an explicit schedule call."""

from __future__ import annotations

import functools
import heapq
import itertools
import threading
import time
from datetime import timedelta
from typing import Any, Callable

Clock = Callable[[], float]


def _seconds(value: float | timedelta) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


class Timer:
    """A callback due ``duration`` seconds after ``start_time``; it runs at most once."""

    def __init__(
        self,
        start_time: float,
        duration: float | timedelta,
        callback: Callable[[], Any] | None,
        *,
        clock: Clock = time.monotonic,
    ) -> None:
        self.start_time = float(start_time)
        self.duration = _seconds(duration)
        self._callback = callback
        self._clock = clock
        self._lock = threading.Lock()
        self._done = False

    @property
    def deadline(self) -> float:
        """Clock time at which the timer becomes due."""
        return self.start_time + self.duration

    def left_time(self) -> float:
        """Seconds until the timer is due; negative once it is overdue."""
        return self.duration - (self._clock() - self.start_time)

    def _claim(self) -> Callable[[], Any] | None:
        with self._lock:
            if self._done:
                return None
            self._done = True
            callback, self._callback = self._callback, None
            return callback

    def cancel(self) -> None:
        """Prevent the callback from running, unless it already ran."""
        self._claim()

    def __call__(self) -> None:
        callback = self._claim()
        if callback is not None:
            callback()


class RepeatTimer:
    """Handle for an interval timer; cancelling it stops further repeats."""

    def __init__(self) -> None:
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()


class TimerManager:
    """Keeps timers ordered by deadline and runs the due ones on ``schedule``."""

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self._clock = clock
        self._heap: list[tuple[float, int, Timer]] = []
        self._sequence = itertools.count()

    def add_timer(
        self, timeout: float | timedelta, callback: Callable[..., Any], *args: Any
    ) -> Timer:
        """Schedule ``callback(*args)`` to run after ``timeout`` seconds."""
        timer = Timer(
            self._clock(),
            timeout,
            functools.partial(callback, *args),
            clock=self._clock,
        )
        self.push(timer)
        return timer

    def add_interval_timer(
        self, interval: float | timedelta, callback: Callable[..., Any], *args: Any
    ) -> RepeatTimer:
        """Run ``callback(*args)`` every ``interval`` seconds until cancelled."""
        repeat_timer = RepeatTimer()
        self.add_interval_timer_with(repeat_timer, interval, callback, *args)
        return repeat_timer

    def add_interval_timer_with(
        self,
        repeat_timer: RepeatTimer,
        interval: float | timedelta,
        callback: Callable[..., Any],
        *args: Any,
    ) -> None:
        """Like ``add_interval_timer`` but controlled by an existing handle."""
        bound = functools.partial(callback, *args)
        self.add_timer(interval, self._repeat, interval, bound, repeat_timer)

    def _repeat(
        self,
        interval: float | timedelta,
        callback: Callable[[], Any],
        repeat_timer: RepeatTimer,
    ) -> None:
        if repeat_timer.is_cancelled():
            return
        callback()
        self.add_timer(interval, self._repeat, interval, callback, repeat_timer)

    def push(self, timer: Timer) -> None:
        """Add an already constructed timer."""
        heapq.heappush(self._heap, (timer.deadline, next(self._sequence), timer))

    def schedule(self) -> None:
        """Run every timer whose time has come, earliest first."""
        while self._heap:
            timer = self._heap[0][2]
            if timer.left_time() > 0:
                break
            heapq.heappop(self._heap)
            timer()

    def is_empty(self) -> bool:
        return not self._heap

    def near_left_time(self) -> float:
        """Seconds until the earliest timer is due; zero when empty or overdue."""
        if not self._heap:
            return 0.0
        return max(0.0, self._heap[0][2].left_time())

    def clear(self) -> None:
        self._heap.clear()