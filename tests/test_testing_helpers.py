"""Tests for perch.testing: ManualClock and the in-memory fakes."""

import pytest

from perch.errors import HttpStatusError
from perch.testing import ManualClock, RecordingRenderer, StaticAuth, StaticDataSource


class TestManualClock:
    def test_starts_at_given_time(self) -> None:
        assert ManualClock().now() == 0.0
        assert ManualClock(start=10.0).now() == 10.0

    def test_fires_due_timers_in_order(self) -> None:
        clock = ManualClock()
        fired: list[str] = []
        clock.call_later(2.0, lambda: fired.append("late"))
        clock.call_later(1.0, lambda: fired.append("early"))
        clock.call_later(1.0, lambda: fired.append("early-second"))
        assert clock.advance(1.5) == 2
        assert fired == ["early", "early-second"]
        assert clock.now() == 1.5
        assert clock.advance(1.0) == 1
        assert fired[-1] == "late"

    def test_time_visible_to_callback(self) -> None:
        clock = ManualClock()
        seen: list[float] = []
        clock.call_later(1.0, lambda: seen.append(clock.now()))
        clock.advance(5.0)
        assert seen == [1.0]
        assert clock.now() == 5.0

    def test_cancelled_timer_skipped(self) -> None:
        clock = ManualClock()
        fired: list[int] = []
        timer = clock.call_later(1.0, lambda: fired.append(1))
        timer.cancel()
        assert clock.pending == []
        assert clock.advance(2.0) == 0
        assert fired == []

    def test_timer_scheduled_by_callback(self) -> None:
        clock = ManualClock()
        fired: list[str] = []

        def first() -> None:
            fired.append("first")
            clock.call_later(0.5, lambda: fired.append("chained"))

        clock.call_later(1.0, first)
        assert clock.advance(2.0) == 2
        assert fired == ["first", "chained"]

    def test_advance_ms(self) -> None:
        clock = ManualClock()
        clock.advance_ms(250)
        assert clock.now() == 0.25

    def test_cannot_go_backwards(self) -> None:
        with pytest.raises(ValueError):
            ManualClock().advance(-1)


class TestFakes:
    def test_recording_renderer(self) -> None:
        renderer = RecordingRenderer()
        error = RuntimeError("boom")
        renderer.commit(("teams",))
        renderer.fail(error)
        assert renderer.events == [("commit", ("teams",)), ("fail", error)]
        assert renderer.commits == [("teams",)]
        assert renderer.failures == [error]

    @pytest.mark.anyio
    async def test_static_data_source(self) -> None:
        data = StaticDataSource({"/api/teams": ["gh"]})
        assert await data.fetch_json("/api/teams") == ["gh"]
        with pytest.raises(HttpStatusError) as exc_info:
            await data.fetch_json("/api/teams/nope")
        assert exc_info.value.status == 404
        assert data.requests == ["/api/teams", "/api/teams/nope"]

    @pytest.mark.anyio
    async def test_static_auth(self) -> None:
        auth = StaticAuth("u-1")
        assert auth.is_authenticated
        assert auth.current_user_id == "u-1"
        assert await auth.load_current_user() is None
        assert auth.loads == 1
        assert not StaticAuth().is_authenticated
