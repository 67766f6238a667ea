"""Tests for the time-evicted notification collection."""

import anyio
import pytest

from perch.notifications import (
    LoopClock,
    Notification,
    NotificationChange,
    Notifications,
    Phase,
    Severity,
)
from perch.testing import ManualClock


def _collection(**kwargs: int) -> tuple[Notifications, ManualClock]:
    clock = ManualClock()
    return Notifications(clock, **kwargs), clock


class TestEviction:
    def test_staggered_expiry(self) -> None:
        notifications, clock = _collection(ttl_ms=3000)
        first = notifications.notify("one")
        clock.advance_ms(1000)
        notifications.notify("two")
        clock.advance_ms(1000)
        notifications.notify("three")

        clock.advance_ms(500)  # t=2500
        assert len(notifications) == 3

        clock.advance_ms(600)  # t=3100
        assert len(notifications) == 2
        assert first not in notifications
        assert [n.body for n in notifications] == ["two", "three"]

        clock.advance_ms(2000)  # t=5100
        assert len(notifications) == 0

    def test_not_evicted_before_ttl(self) -> None:
        notifications, clock = _collection(ttl_ms=3000)
        notifications.notify("saved")
        clock.advance_ms(2999)
        assert len(notifications) == 1
        clock.advance_ms(1)
        assert len(notifications) == 0

    def test_duplicates_evicted_by_identity(self) -> None:
        notifications, clock = _collection(ttl_ms=3000)
        first = notifications.notify("msg", "error")
        clock.advance_ms(1000)
        second = notifications.notify("msg", "error")

        clock.advance_ms(2000)  # first expires
        assert notifications.items == (second,)
        assert first.phase is Phase.REMOVED
        assert second.phase is Phase.ACTIVE

    def test_every_entry_has_pending_eviction(self) -> None:
        notifications, clock = _collection(ttl_ms=3000, enter_ms=0)
        for body in ("a", "b", "c"):
            notifications.notify(body)
            clock.advance_ms(400)
        due = sorted(timer.when for timer in clock.pending)
        assert due == sorted(n.expires_at for n in notifications)

    def test_per_call_ttl(self) -> None:
        notifications, clock = _collection(ttl_ms=3000)
        short = notifications.notify("quick", ttl_ms=500)
        notifications.notify("slow")
        assert short.expires_at == 0.5
        clock.advance_ms(500)
        assert [n.body for n in notifications] == ["slow"]


class TestRemoval:
    def test_dismiss(self) -> None:
        notifications, clock = _collection(ttl_ms=3000)
        notification = notifications.notify("saved")
        assert notifications.dismiss(notification) is True
        assert len(notifications) == 0
        assert clock.pending == []

    def test_dismiss_twice(self) -> None:
        notifications, _clock = _collection()
        notification = notifications.notify("saved")
        assert notifications.dismiss(notification) is True
        assert notifications.dismiss(notification) is False

    def test_repeated_eviction_is_noop(self) -> None:
        notifications, clock = _collection(ttl_ms=3000, enter_ms=0)
        notification = notifications.notify("saved")
        notifications.notify("saved")
        (evict, _other) = clock.pending
        evict.callback()
        evict.callback()
        assert len(notifications) == 1
        assert notification not in notifications

    def test_dismiss_foreign_notification(self) -> None:
        notifications, _clock = _collection()
        stranger = Notification("hi", Severity.INFO, 0.0, 3000)
        assert notifications.dismiss(stranger) is False

    def test_clear(self) -> None:
        notifications, clock = _collection()
        notifications.notify("a")
        notifications.notify("b")
        assert notifications.clear() == 2
        assert len(notifications) == 0
        assert clock.pending == []


class TestPhases:
    def test_entering_then_active(self) -> None:
        notifications, clock = _collection(ttl_ms=3000, enter_ms=150)
        notification = notifications.notify("saved")
        assert notification.phase is Phase.ENTERING
        clock.advance_ms(150)
        assert notification.phase is Phase.ACTIVE

    def test_zero_enter_is_active_immediately(self) -> None:
        notifications, _clock = _collection(ttl_ms=3000, enter_ms=0)
        assert notifications.notify("saved").phase is Phase.ACTIVE

    def test_enter_not_shorter_than_ttl(self) -> None:
        notifications, _clock = _collection(ttl_ms=100, enter_ms=150)
        assert notifications.notify("saved").phase is Phase.ACTIVE

    def test_dismiss_while_entering(self) -> None:
        notifications, clock = _collection(ttl_ms=3000, enter_ms=150)
        notification = notifications.notify("saved")
        notifications.dismiss(notification)
        assert clock.advance_ms(200) == 0
        assert notification.phase is Phase.REMOVED


class TestValidation:
    @pytest.mark.parametrize("severity", ["info", "success", "warning", "error"])
    def test_known_severities(self, severity: str) -> None:
        notifications, _clock = _collection()
        assert notifications.notify("x", severity).severity is Severity(severity)

    def test_enum_severity(self) -> None:
        notifications, _clock = _collection()
        assert notifications.notify("x", Severity.WARNING).severity is Severity.WARNING

    def test_unknown_severity(self) -> None:
        notifications, _clock = _collection()
        with pytest.raises(ValueError):
            notifications.notify("x", "fatal")
        assert len(notifications) == 0

    def test_non_positive_ttl(self) -> None:
        notifications, _clock = _collection()
        with pytest.raises(ValueError, match="ttl_ms"):
            notifications.notify("x", ttl_ms=0)

    def test_collection_ttl(self) -> None:
        with pytest.raises(ValueError):
            Notifications(ManualClock(), ttl_ms=0)

    def test_identity_semantics(self) -> None:
        a = Notification("x", Severity.INFO, 0.0, 3000)
        b = Notification("x", Severity.INFO, 0.0, 3000)
        assert a != b
        assert len({a, b}) == 2
        assert a.id != b.id


class TestView:
    def test_view_is_live(self) -> None:
        notifications, clock = _collection(ttl_ms=3000)
        view = notifications.view()
        assert len(view) == 0
        first = notifications.notify("one")
        notifications.notify("two")
        assert view[0] is first
        assert [n.body for n in view[1:]] == ["two"]
        assert first in view
        clock.advance_ms(3000)
        assert len(view) == 0

    def test_view_is_read_only(self) -> None:
        notifications, _clock = _collection()
        view = notifications.view()
        assert not hasattr(view, "append")
        with pytest.raises(TypeError):
            view[0] = notifications.notify("x")  # type: ignore[index]

    def test_items_is_snapshot(self) -> None:
        notifications, _clock = _collection()
        notification = notifications.notify("x")
        snapshot = notifications.items
        notifications.dismiss(notification)
        assert snapshot == (notification,)


class TestChangeFeed:
    @pytest.mark.anyio
    async def test_subscribe_sees_lifecycle(self) -> None:
        notifications, clock = _collection(ttl_ms=3000, enter_ms=150)
        changes: list[NotificationChange] = []

        async def consume() -> None:
            async for change in notifications.subscribe():
                changes.append(change)

        async with anyio.create_task_group() as tg:
            tg.start_soon(consume)
            await anyio.sleep(0.01)
            notification = notifications.notify("saved")
            clock.advance_ms(3000)
            notifications.close()

        assert [c.kind for c in changes] == ["added", "activated", "removed"]
        assert all(c.notification is notification for c in changes)

    @pytest.mark.anyio
    async def test_full_queue_drops_changes(self) -> None:
        notifications, _clock = _collection(enter_ms=0, feed_size=1)
        changes: list[str] = []

        async def consume() -> None:
            async for change in notifications.subscribe():
                changes.append(change.notification.body)

        async with anyio.create_task_group() as tg:
            tg.start_soon(consume)
            await anyio.sleep(0.01)
            notifications.notify("kept")
            notifications.notify("dropped")
            await anyio.sleep(0.01)
            notifications.close()

        assert changes == ["kept"]

    @pytest.mark.anyio
    async def test_close_ends_stream_with_full_queue(self) -> None:
        notifications, _clock = _collection(enter_ms=0, feed_size=1)
        finished = anyio.Event()

        async def consume() -> None:
            async for _change in notifications.subscribe():
                pass
            finished.set()

        async with anyio.create_task_group() as tg:
            tg.start_soon(consume)
            await anyio.sleep(0.01)
            notifications.notify("first")
            notifications.notify("second")
            notifications.close()
            with anyio.fail_after(1):
                await finished.wait()


class TestLoopClock:
    @pytest.mark.anyio
    async def test_real_time_eviction(self) -> None:
        notifications = Notifications(LoopClock(), ttl_ms=50, enter_ms=0)
        notifications.notify("saved")
        assert len(notifications) == 1
        await anyio.sleep(0.2)
        assert len(notifications) == 0
