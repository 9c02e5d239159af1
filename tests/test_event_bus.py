"""
Event bus tests: ordering, fan-out, and the thread hop to the consumer.
"""

import logging
import threading
import time

import pytest

from glitched_sense.events import (
    BrightnessChanged,
    JumpPressed,
    MicLevelChanged,
    ScreenshotTaken,
    ShakeDetected,
)


def post_from_thread(bus, *events):
    """Post events from a worker thread and wait for it to finish."""
    worker = threading.Thread(target=lambda: [bus.post(e) for e in events])
    worker.start()
    worker.join()


class TestDelivery:
    """Test delivery on the consumer thread."""

    def test_consumer_post_is_immediate(self, bus, events):
        bus.post(JumpPressed())
        bus.post(ShakeDetected())
        assert events.drain() == [JumpPressed(), ShakeDetected()]

    def test_post_from_handler_keeps_acceptance_order(self, bus):
        def react(event):
            if isinstance(event, ShakeDetected):
                bus.post(ScreenshotTaken())

        bus.subscribe(react)
        seen = bus.subscribe()

        bus.post(ShakeDetected())
        assert seen.drain() == [ShakeDetected(), ScreenshotTaken()]
        assert bus.stats()["pending"] == 0

    def test_pump_from_handler_is_a_no_op(self, bus):
        pumped = []
        bus.subscribe(lambda event: pumped.append(bus.pump()))
        seen = bus.subscribe()

        bus.post(JumpPressed())
        assert pumped == [0]
        assert seen.drain() == [JumpPressed()]

    def test_fan_out_with_independent_buffers(self, bus):
        first = bus.subscribe()
        second = bus.subscribe()

        bus.post(MicLevelChanged(power=0.1))
        assert first.drain() == [MicLevelChanged(power=0.1)]

        bus.post(MicLevelChanged(power=0.2))
        assert second.drain() == [MicLevelChanged(power=0.1), MicLevelChanged(power=0.2)]
        assert first.drain() == [MicLevelChanged(power=0.2)]

    def test_iteration_is_restartable(self, bus, events):
        bus.post(JumpPressed())
        assert list(events) == [JumpPressed()]
        assert list(events) == []

        bus.post(ShakeDetected())
        assert list(events) == [ShakeDetected()]

    def test_subscriber_only_sees_later_events(self, bus):
        bus.post(JumpPressed())
        late = bus.subscribe()
        bus.post(ShakeDetected())
        assert late.drain() == [ShakeDetected()]

    def test_no_subscribers_drops(self, bus):
        bus.post(JumpPressed())
        stats = bus.stats()
        assert stats["accepted"] == 1
        assert stats["dropped"] == 1
        assert stats["delivered"] == 0

    def test_close_unsubscribes(self, bus):
        with bus.subscribe() as sub:
            bus.post(JumpPressed())
            assert len(sub) == 1
        assert sub.closed
        assert bus.subscriber_count == 0
        bus.post(ShakeDetected())
        assert len(sub) == 0

    def test_handler_subscription(self, bus):
        seen = []
        bus.subscribe(seen.append)
        bus.post(BrightnessChanged(level=0.7))
        assert seen == [BrightnessChanged(level=0.7)]

    def test_handler_exception_is_logged(self, bus, events, caplog):
        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe(broken)
        with caplog.at_level(logging.ERROR):
            bus.post(JumpPressed())

        assert events.drain() == [JumpPressed()]
        assert "Subscriber handler failed" in caplog.text


@pytest.mark.threads
class TestMarshaling:
    """Test events posted off the consumer thread."""

    def test_foreign_post_waits_for_pump(self, bus, events):
        post_from_thread(bus, ShakeDetected())
        assert events.drain() == []
        assert bus.stats()["pending"] == 1

        assert bus.pump() == 1
        assert events.drain() == [ShakeDetected()]

    def test_acceptance_order_is_delivery_order(self, bus, events):
        post_from_thread(bus, MicLevelChanged(power=0.1), MicLevelChanged(power=0.2))
        # A consumer-side post flushes what was accepted before it.
        bus.post(MicLevelChanged(power=0.3))

        assert [e.power for e in events.drain()] == [0.1, 0.2, 0.3]

    def test_pump_waits_for_timeout(self, bus, events):
        def later():
            time.sleep(0.05)
            bus.post(JumpPressed())

        worker = threading.Thread(target=later)
        worker.start()
        delivered = bus.pump(timeout=2.0)
        worker.join()

        assert delivered == 1
        assert events.drain() == [JumpPressed()]

    def test_pump_timeout_with_nothing_pending(self, bus):
        assert bus.pump(timeout=0.01) == 0

    def test_pump_off_consumer_thread_raises(self, bus):
        errors = []

        def pump():
            try:
                bus.pump()
            except RuntimeError as e:
                errors.append(e)

        worker = threading.Thread(target=pump)
        worker.start()
        worker.join()
        assert len(errors) == 1

    def test_post_never_blocks_under_contention(self, bus, events):
        workers = [
            threading.Thread(target=lambda: [bus.post(JumpPressed()) for _ in range(200)])
            for _ in range(4)
        ]
        for w in workers:
            w.start()
        for w in workers:
            w.join()

        assert bus.pump() == 800
        assert len(events.drain()) == 800
