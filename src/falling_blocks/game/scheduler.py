"""Cancellable one-shot timers for driving the game clock.

The session only depends on the `Scheduler` protocol. `TimerScheduler` is a
single-threaded implementation: the host loop calls `run_due()` from the
same thread that handles input, so ticks and commands never interleave.
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, List, Protocol


Callback = Callable[[], None]


@dataclass(order=True)
class TimerHandle:
    due_ms: int
    seq: int
    callback: Callback = field(compare=False)
    cancelled: bool = field(default=False, compare=False)
    fired: bool = field(default=False, compare=False)

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callback) -> TimerHandle: ...

    def cancel(self, handle: TimerHandle) -> None: ...


class ManualClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start_ms: int = 0) -> None:
        self.now_ms = int(start_ms)

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        if ms < 0:
            raise ValueError("Cannot move the clock backwards")
        self.now_ms += int(ms)


class TimerScheduler:
    def __init__(self, clock: Callable[[], int]) -> None:
        self.clock = clock
        self._queue: List[TimerHandle] = []
        self._seq = itertools.count()

    def call_later(self, delay_ms: int, callback: Callback) -> TimerHandle:
        handle = TimerHandle(self.clock() + max(0, int(delay_ms)), next(self._seq), callback)
        heapq.heappush(self._queue, handle)
        return handle

    def cancel(self, handle: TimerHandle) -> None:
        # Lazy removal; run_due skips cancelled entries
        handle.cancelled = True

    def pending(self) -> int:
        return sum(1 for h in self._queue if h.active)

    def run_due(self) -> int:
        """Fire every timer whose deadline has passed, in deadline order."""
        fired = 0
        now = self.clock()
        while self._queue and self._queue[0].due_ms <= now:
            handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            handle.fired = True
            handle.callback()
            fired += 1
        return fired

    def advance(self, clock: ManualClock, ms: int) -> int:
        """Step a manual clock forward, firing timers at their own deadlines."""
        target = clock.now_ms + int(ms)
        fired = 0
        while True:
            live = [h for h in self._queue if h.active]
            if not live:
                break
            next_due = min(h.due_ms for h in live)
            if next_due > target:
                break
            clock.now_ms = max(clock.now_ms, next_due)
            fired += self.run_due()
        clock.now_ms = target
        return fired
