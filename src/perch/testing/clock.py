"""Virtual clock for notification tests."""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass(order=True, slots=True)
class ManualTimer:
    """A callback scheduled on a ``ManualClock``."""

    when: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualClock:
    """Clock whose time only moves when a test calls ``advance()``.

    Usage::

        clock = ManualClock()
        notifications = Notifications(clock, ttl_ms=3000)
        notifications.notify("saved")
        clock.advance_ms(3000)       # eviction timer fires here
        assert len(notifications) == 0

    Due timers fire in order of due time, then scheduling order. A timer
    scheduled by a firing callback runs in the same ``advance()`` if it
    falls due before the target time.
    """

    __slots__ = ("_now", "_seq", "_timers")

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._timers: list[ManualTimer] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self._now + max(delay, 0.0), next(self._seq), callback)
        heapq.heappush(self._timers, timer)
        return timer

    @property
    def pending(self) -> list[ManualTimer]:
        """Scheduled timers that have neither fired nor been cancelled."""
        return sorted(t for t in self._timers if not t.cancelled)

    def advance(self, seconds: float) -> int:
        """Move time forward, firing due timers. Returns how many fired."""
        if seconds < 0:
            msg = "Cannot move a ManualClock backwards."
            raise ValueError(msg)
        target = self._now + seconds
        fired = 0
        while self._timers and self._timers[0].when <= target:
            timer = heapq.heappop(self._timers)
            if timer.cancelled:
                continue
            self._now = timer.when
            timer.callback()
            fired += 1
        self._now = target
        return fired

    def advance_ms(self, ms: float) -> int:
        return self.advance(ms / 1000)
