"""
Scheduler tests.
"""

import threading

import pytest

from glitched_sense.timers import ManualScheduler, ThreadScheduler


class TestManualScheduler:
    """Test the deterministic scheduler."""

    def test_repeating_poll(self):
        sched = ManualScheduler()
        ticks = []
        sched.call_every(2.0, lambda: ticks.append(sched.now()))

        assert sched.advance(1.0) == 0
        assert sched.advance(5.0) == 3
        assert ticks == [2.0, 4.0, 6.0]

    def test_one_shot(self):
        sched = ManualScheduler()
        fired = []
        sched.call_later(1.0, lambda: fired.append(True))
        sched.advance(5.0)
        assert fired == [True]
        assert sched.pending() == 0

    def test_fired_one_shot_reports_cancelled(self):
        sched = ManualScheduler()
        handle = sched.call_later(1.0, lambda: None)
        assert not handle.cancelled
        sched.advance(1.0)
        assert handle.cancelled

    def test_cancel(self):
        sched = ManualScheduler()
        fired = []
        handle = sched.call_every(0.1, lambda: fired.append(True))
        handle.cancel()
        assert handle.cancelled
        assert sched.advance(1.0) == 0
        assert fired == []

    def test_time_order_across_timers(self):
        sched = ManualScheduler()
        order = []
        sched.call_later(0.3, lambda: order.append("b"))
        sched.call_later(0.1, lambda: order.append("a"))
        sched.advance(1.0)
        assert order == ["a", "b"]

    def test_callback_errors_do_not_stop_the_clock(self, caplog):
        sched = ManualScheduler()
        ok = []

        def broken():
            raise RuntimeError("boom")

        sched.call_later(0.1, broken)
        sched.call_later(0.2, lambda: ok.append(True))
        sched.advance(1.0)

        assert ok == [True]
        assert "Timer callback failed" in caplog.text

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            ManualScheduler().call_every(0, lambda: None)

    def test_now_moves_with_advance(self):
        sched = ManualScheduler(start=10.0)
        sched.advance(2.5)
        assert sched.now() == pytest.approx(12.5)


@pytest.mark.threads
class TestThreadScheduler:
    """Test the thread-backed scheduler."""

    def test_call_later_runs_on_timer_thread(self):
        sched = ThreadScheduler()
        done = threading.Event()
        threads = []

        def fire():
            threads.append(threading.current_thread())
            done.set()

        sched.call_later(0.01, fire)
        try:
            assert done.wait(2.0)
            assert threads[0] is not threading.current_thread()
        finally:
            sched.shutdown()

    def test_shutdown_cancels(self):
        sched = ThreadScheduler()
        handle = sched.call_every(10.0, lambda: None)
        sched.shutdown()
        assert handle.cancelled
        assert not handle.thread.is_alive()
