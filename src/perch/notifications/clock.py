"""Clocks that schedule notification timers.

The collection never touches the event loop directly; it asks a ``Clock``
for one-shot callbacks. ``LoopClock`` runs them on the asyncio loop, and
``perch.testing.ManualClock`` runs them when a test advances virtual time.
"""

import asyncio
from collections.abc import Callable
from typing import Protocol


class TimerHandle(Protocol):
    """A scheduled callback that can be cancelled."""

    def cancel(self) -> None: ...


class Clock(Protocol):
    """Time source plus one-shot scheduling. All times are in seconds."""

    def now(self) -> float: ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class LoopClock:
    """Clock backed by the running asyncio event loop.

    ``call_later`` must be called from inside the loop, which is where
    ``notify()`` runs in an async client.
    """

    __slots__ = ()

    def now(self) -> float:
        return asyncio.get_running_loop().time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)
