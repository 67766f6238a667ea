"""Time-evicted notification collection.

Any caller may ``notify()``; only the collection removes. Each notification
gets one eviction timer when it is inserted, and leaves the collection
exactly once: when that timer fires or when it is dismissed, whichever
comes first.

Removal is by identity. Two notifications with identical body and severity
are distinct entries, and evicting one never touches the other.

Concurrency:
    The collection lives on one event loop. ``notify()``, ``dismiss()``
    and the timer callbacks all run there; ``LoopClock`` and the feed
    queues are loop-bound and not safe to call from another thread. The
    lock guards the entry table; changes are published after it is
    released, so a timer callback may dismiss other entries.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import AsyncIterator, Iterator, Sequence
from dataclasses import dataclass
from typing import overload

from perch.notifications.clock import Clock, LoopClock, TimerHandle
from perch.notifications.model import Notification, Phase, Severity

logger = logging.getLogger("perch.notifications")


@dataclass(frozen=True, slots=True)
class NotificationChange:
    """One change to the collection, delivered to subscribers.

    ``kind`` is ``"added"``, ``"activated"``, or ``"removed"``.
    """

    kind: str
    notification: Notification


@dataclass(slots=True)
class _Timers:
    evict: TimerHandle
    enter: TimerHandle | None = None

    def cancel(self) -> None:
        self.evict.cancel()
        if self.enter is not None:
            self.enter.cancel()


class Notifications:
    """Ordered, shared collection of ephemeral notifications.

    Usage::

        notifications = Notifications()          # LoopClock: needs a running loop
        handle = notifications.notify("Channel created", "success")
        notifications.dismiss(handle)            # optional; the timer would evict it

    Display order is insertion order. ``view()`` hands list consumers a
    live read-only sequence; ``subscribe()`` streams changes.
    """

    __slots__ = (
        "_clock",
        "_enter_ms",
        "_feed_size",
        "_items",
        "_lock",
        "_subscribers",
        "_ttl_ms",
    )

    def __init__(
        self,
        clock: Clock | None = None,
        *,
        ttl_ms: int = 3000,
        enter_ms: int = 150,
        feed_size: int = 256,
    ) -> None:
        if ttl_ms <= 0:
            msg = f"ttl_ms must be positive, got {ttl_ms}"
            raise ValueError(msg)
        self._clock: Clock = clock or LoopClock()
        self._ttl_ms = ttl_ms
        self._enter_ms = enter_ms
        self._feed_size = feed_size
        # dict keyed by identity (Notification has eq=False): ordered, O(1) removal
        self._items: dict[Notification, _Timers] = {}
        self._lock = threading.Lock()
        self._subscribers: set[asyncio.Queue[NotificationChange | None]] = set()

    # -- Mutation --

    def notify(
        self,
        body: str,
        severity: Severity | str = Severity.INFO,
        *,
        ttl_ms: int | None = None,
    ) -> Notification:
        """Append a notification and schedule its eviction.

        Raises ``ValueError`` for an unknown severity or a non-positive ttl.
        """
        severity = Severity(severity)
        ttl = self._ttl_ms if ttl_ms is None else ttl_ms
        if ttl <= 0:
            msg = f"ttl_ms must be positive, got {ttl}"
            raise ValueError(msg)

        notification = Notification(
            body=body,
            severity=severity,
            created_at=self._clock.now(),
            ttl_ms=ttl,
        )
        with self._lock:
            timers = _Timers(
                evict=self._clock.call_later(ttl / 1000, lambda: self._remove(notification)),
            )
            if 0 < self._enter_ms < ttl:
                timers.enter = self._clock.call_later(
                    self._enter_ms / 1000, lambda: self._activate(notification),
                )
            else:
                notification.phase = Phase.ACTIVE
            self._items[notification] = timers

        logger.debug(
            "Notification %s (%s) added, evicting in %dms",
            notification.id, severity.value, ttl,
        )
        self._publish(NotificationChange("added", notification))
        return notification

    def dismiss(self, notification: Notification) -> bool:
        """Remove *notification* now and cancel its timer.

        Idempotent: returns ``False`` if it was already removed.
        """
        return self._remove(notification)

    def clear(self) -> int:
        """Dismiss every notification. Returns how many were removed."""
        with self._lock:
            current = list(self._items)
        return sum(self._remove(notification) for notification in current)

    def _activate(self, notification: Notification) -> None:
        with self._lock:
            timers = self._items.get(notification)
            if timers is None or notification.phase is not Phase.ENTERING:
                return
            timers.enter = None
            notification.phase = Phase.ACTIVE
        self._publish(NotificationChange("activated", notification))

    def _remove(self, notification: Notification) -> bool:
        with self._lock:
            timers = self._items.pop(notification, None)
            if timers is None:
                return False
            notification.phase = Phase.LEAVING
        # Cancelling the timer that is currently firing is a no-op
        timers.cancel()
        logger.debug("Notification %s removed", notification.id)
        self._publish(NotificationChange("removed", notification))
        notification.phase = Phase.REMOVED
        return True

    # -- Read access --

    @property
    def items(self) -> tuple[Notification, ...]:
        """Snapshot of the current notifications, in display order."""
        with self._lock:
            return tuple(self._items)

    def view(self) -> NotificationsView:
        """Live, read-only sequence over this collection."""
        return NotificationsView(self)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Notification]:
        return iter(self.items)

    def __contains__(self, notification: object) -> bool:
        return notification in self._items

    # -- Change feed --

    def _publish(self, change: NotificationChange) -> None:
        with self._lock:
            listeners = tuple(self._subscribers)
        for queue in listeners:
            try:
                queue.put_nowait(change)
            except asyncio.QueueFull:
                # A listener that fell feed_size changes behind misses this one
                logger.debug(
                    "Feed listener full; dropped %s for %s",
                    change.kind, change.notification.id,
                )

    async def subscribe(self) -> AsyncIterator[NotificationChange]:
        """Stream added/activated/removed changes until ``close()``.

        ::

            async for change in notifications.subscribe():
                toast_area.apply(change.kind, change.notification)

        Each listener has its own queue of at most ``feed_size`` changes;
        a listener that falls further behind loses the newest changes but
        always receives the stop signal.
        """
        queue: asyncio.Queue[NotificationChange | None] = asyncio.Queue(maxsize=self._feed_size)
        with self._lock:
            self._subscribers.add(queue)
        try:
            while (change := await queue.get()) is not None:
                yield change
        finally:
            with self._lock:
                self._subscribers.discard(queue)

    def close(self) -> None:
        """End every ``subscribe()`` stream. Pending notifications stay put."""
        with self._lock:
            listeners = tuple(self._subscribers)
            self._subscribers.clear()
        for queue in listeners:
            if queue.full():
                # Make room for the stop signal: the oldest pending change goes
                queue.get_nowait()
            queue.put_nowait(None)


class NotificationsView(Sequence[Notification]):
    """Read-only, live sequence over a ``Notifications`` collection.

    Reflects inserts and evictions as they happen; offers no mutation.
    """

    __slots__ = ("_collection",)

    def __init__(self, collection: Notifications) -> None:
        self._collection = collection

    @overload
    def __getitem__(self, index: int) -> Notification: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Notification, ...]: ...

    def __getitem__(self, index: int | slice) -> Notification | tuple[Notification, ...]:
        return self._collection.items[index]

    def __len__(self) -> int:
        return len(self._collection)

    def __iter__(self) -> Iterator[Notification]:
        return iter(self._collection)

    def __contains__(self, notification: object) -> bool:
        return notification in self._collection

    def __repr__(self) -> str:
        return f"NotificationsView({list(self)!r})"
