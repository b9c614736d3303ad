"""Unit tests for the console countdown screen."""

import pytest
from datetime import datetime, timedelta, timezone

from rich.console import Console

from manas360.live import GoingLiveIndicator
from manas360.models import Role, Tier
from manas360.scheduling import ManualClock, ManualScheduler
from manas360.services import LifecycleController
from manas360.ui import CountdownScreen, render_snapshot

T0 = datetime(2025, 3, 14, 18, 0, tzinfo=timezone.utc)


def rendered_text(renderable) -> str:
    console = Console(record=True, width=80, color_system=None)
    console.print(renderable)
    return console.export_text()


@pytest.fixture
def live_scheduler():
    return ManualScheduler(ManualClock(T0))


@pytest.mark.unit
class TestRenderSnapshot:

    def test_open_room_card(self, live_scheduler):
        indicator = GoingLiveIndicator("g-1", T0 + timedelta(seconds=300), live_scheduler)
        text = rendered_text(render_snapshot(indicator.tick(), "Student Stress Circle", "📚"))

        assert "Student Stress Circle" in text
        assert "05:00" in text
        assert "TAP TO JOIN" in text
        assert "PEOPLE WAITING TO JOIN" in text

    def test_closed_room_card(self, live_scheduler):
        indicator = GoingLiveIndicator("g-1", T0 - timedelta(seconds=10), live_scheduler)
        snapshot = indicator.tick()
        assert snapshot.tier is Tier.ROOM_CLOSED

        text = rendered_text(render_snapshot(snapshot, "Student Stress Circle"))

        assert "00:00" in text
        assert "SESSION COMPLETED" in text
        assert "WAS RECENTLY JOINED" in text


@pytest.mark.unit
class TestCountdownScreen:

    def test_follows_published_events(self, live_scheduler):
        screen = CountdownScreen("Student Stress Circle", console=Console(record=True, width=80))
        indicator = GoingLiveIndicator("g-1", T0 + timedelta(seconds=300), live_scheduler)
        controller = LifecycleController(Role.PATIENT)

        indicator.start()
        assert screen.latest is indicator.snapshot

        indicator.join()
        assert "Confirming" in screen.status_line
        live_scheduler.advance(2)
        assert screen.status_line == "✅ JOINED!"

        controller.switch_role(Role.THERAPIST)
        assert screen.context == controller.context

        text = rendered_text(screen.render())
        assert "View: DASHBOARD" in text
        screen.close()

    def test_close_stops_updates(self, live_scheduler):
        screen = CountdownScreen("Student Stress Circle", console=Console(record=True, width=80))
        screen.close()

        GoingLiveIndicator("g-1", T0 + timedelta(seconds=300), live_scheduler).tick()

        assert screen.latest is None
