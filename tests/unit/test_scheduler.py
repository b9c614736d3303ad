"""Unit tests for clocks and schedulers."""

import threading
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from manas360.scheduling import ManualClock, ManualScheduler, SystemClock, ThreadingScheduler

T0 = datetime(2025, 3, 14, 18, 0, tzinfo=timezone.utc)


@pytest.mark.unit
class TestClocks:

    def test_system_clock_is_aware(self):
        assert SystemClock().now().tzinfo is not None

    def test_manual_clock_moves_only_when_told(self):
        clock = ManualClock(T0)
        assert clock.now() == T0
        assert clock.advance(90) == T0 + timedelta(seconds=90)
        clock.set(T0 - timedelta(minutes=1))
        assert clock.now() == T0 - timedelta(minutes=1)

    def test_manual_clock_rejects_naive_time(self):
        with pytest.raises(ValueError):
            ManualClock(T0).set(datetime(2025, 3, 14, 18, 0))


@pytest.mark.unit
class TestManualScheduler:

    def test_call_later_runs_once_when_due(self):
        scheduler = ManualScheduler(ManualClock(T0))
        callback = MagicMock()
        scheduler.call_later(2, callback)

        assert scheduler.advance(1) == 0
        callback.assert_not_called()
        assert scheduler.advance(1) == 1
        callback.assert_called_once_with()
        assert scheduler.advance(10) == 0

    def test_call_every_first_run_after_one_interval(self):
        scheduler = ManualScheduler(ManualClock(T0))
        callback = MagicMock()
        scheduler.call_every(1, callback)

        callback.assert_not_called()
        scheduler.advance(5)
        assert callback.call_count == 5

    def test_tasks_run_in_due_order(self):
        scheduler = ManualScheduler(ManualClock(T0))
        order = []
        scheduler.call_later(3, lambda: order.append("c"))
        scheduler.call_later(1, lambda: order.append("a"))
        scheduler.call_later(2, lambda: order.append("b"))
        scheduler.advance(5)
        assert order == ["a", "b", "c"]

    def test_same_due_time_keeps_registration_order(self):
        scheduler = ManualScheduler(ManualClock(T0))
        order = []
        scheduler.call_later(1, lambda: order.append(1))
        scheduler.call_later(1, lambda: order.append(2))
        scheduler.advance(1)
        assert order == [1, 2]

    def test_clock_is_at_due_time_when_task_runs(self):
        clock = ManualClock(T0)
        scheduler = ManualScheduler(clock)
        seen = []
        scheduler.call_every(1, lambda: seen.append(clock.now()))
        scheduler.advance(3.5)

        assert seen == [T0 + timedelta(seconds=s) for s in (1, 2, 3)]
        assert clock.now() == T0 + timedelta(seconds=3.5)

    def test_cancel(self):
        scheduler = ManualScheduler(ManualClock(T0))
        callback = MagicMock()
        task = scheduler.call_every(1, callback)
        scheduler.advance(2)
        task.cancel()
        scheduler.advance(5)

        assert callback.call_count == 2
        assert task.cancelled
        assert scheduler.pending_count() == 0

    def test_task_cancelled_by_earlier_task_does_not_run(self):
        scheduler = ManualScheduler(ManualClock(T0))
        later = MagicMock()
        task = scheduler.call_later(2, later)
        scheduler.call_later(1, task.cancel)
        scheduler.advance(3)
        later.assert_not_called()

    def test_failing_callback_does_not_stop_others(self):
        scheduler = ManualScheduler(ManualClock(T0))
        callback = MagicMock()
        scheduler.call_later(1, MagicMock(side_effect=RuntimeError("boom")))
        scheduler.call_later(1, callback)
        scheduler.advance(1)
        callback.assert_called_once_with()

    def test_rejects_bad_arguments(self):
        scheduler = ManualScheduler(ManualClock(T0))
        with pytest.raises(ValueError):
            scheduler.call_later(-1, MagicMock())
        with pytest.raises(ValueError):
            scheduler.call_every(0, MagicMock())
        with pytest.raises(ValueError):
            scheduler.advance(-1)


class TestThreadingScheduler:

    def test_runs_callbacks_on_dispatcher_thread(self):
        scheduler = ThreadingScheduler(name="test")
        scheduler.start()
        fired = threading.Event()
        names = []

        def callback():
            names.append(threading.current_thread().name)
            fired.set()

        try:
            scheduler.call_later(0.05, callback)
            assert fired.wait(2.0)
        finally:
            assert scheduler.shutdown(timeout=2.0)

        assert names == ["test_dispatcher"]

    def test_cancelled_task_never_fires(self):
        scheduler = ThreadingScheduler(name="test")
        scheduler.start()
        callback = MagicMock()
        done = threading.Event()

        try:
            task = scheduler.call_later(0.1, callback)
            task.cancel()
            scheduler.call_later(0.3, done.set)
            assert done.wait(2.0)
        finally:
            scheduler.shutdown(timeout=2.0)

        callback.assert_not_called()

    def test_periodic_task(self):
        scheduler = ThreadingScheduler(name="test")
        scheduler.start()
        count = []
        enough = threading.Event()

        def callback():
            count.append(1)
            if len(count) >= 3:
                enough.set()

        try:
            scheduler.call_every(0.02, callback)
            assert enough.wait(2.0)
        finally:
            scheduler.shutdown(timeout=2.0)

    def test_shutdown_without_start(self):
        assert ThreadingScheduler().shutdown() is True
