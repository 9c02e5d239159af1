"""
Provider lifecycle tests: idempotence, quiescence after deactivate, and
callbacks that land after the session they belong to has ended.
"""

import threading

import pytest

from glitched_sense.errors import SourceStartError
from glitched_sense.events import ClipboardUpdated, FaceIdResult, MicLevelChanged, ShakeDetected
from glitched_sense.mechanics import Mechanic
from glitched_sense.provider import DeviceProvider, ProviderBase
from glitched_sense.providers import (
    AuthenticationProvider,
    ClipboardProvider,
    MicrophoneProvider,
    MotionProvider,
    VoiceCommandProvider,
)
from glitched_sense.timers import ThreadScheduler


class CountingSourceProvider(ProviderBase):
    """Minimal subclass that counts session starts and stops."""

    mechanics = frozenset({Mechanic.SCREENSHOT})

    def __init__(self, *args, fail=False, **kwargs):
        super().__init__(*args, **kwargs)
        self.starts = 0
        self.stops = 0
        self.fail = fail

    def _start_session(self, session):
        self.starts += 1
        if self.fail:
            raise SourceStartError("no source")

    def _stop_session(self):
        self.stops += 1


class TestContract:
    """Test activate / deactivate idempotence."""

    def test_is_a_device_provider(self, common):
        assert isinstance(CountingSourceProvider(**common), DeviceProvider)

    def test_activate_twice_starts_once(self, common):
        provider = CountingSourceProvider(**common)
        provider.activate()
        provider.activate()
        assert provider.is_active
        assert provider.starts == 1

    def test_deactivate_twice_stops_once(self, common):
        provider = CountingSourceProvider(**common)
        provider.activate()
        provider.deactivate()
        provider.deactivate()
        assert not provider.is_active
        assert provider.stops == 1

    def test_deactivate_when_inactive_is_noop(self, common):
        provider = CountingSourceProvider(**common)
        provider.deactivate()
        assert provider.stops == 0

    def test_start_exception_forces_fallback(self, common, policy):
        provider = CountingSourceProvider(fail=True, **common)
        provider.activate()

        assert not provider.is_active
        assert not policy.uses_hardware(Mechanic.SCREENSHOT)

    def test_describe(self, common):
        provider = CountingSourceProvider(**common)
        provider.activate()
        row = provider.describe()
        assert row["name"] == "CountingSourceProvider"
        assert row["active"] is True
        assert row["uses_hardware"] == {"screenshot": True}


class TestQuiescence:
    """No event from a provider reaches the bus after deactivate()."""

    def test_motion_samples_after_deactivate(self, platform, common, events):
        provider = MotionProvider(platform.accelerometer, **common)
        provider.activate()
        provider.deactivate()

        platform.accelerometer.push(0.0, 0.0, 4.0)
        assert events.drain() == []
        assert platform.accelerometer.listener_count == 0

    def test_clipboard_timer_after_deactivate(self, platform, common, scheduler, events):
        provider = ClipboardProvider(platform.pasteboard, **common)
        provider.activate()
        platform.pasteboard.copy("secret")
        provider.deactivate()

        scheduler.advance(2.0)
        assert events.drain() == []
        assert scheduler.pending() == 0

    def test_stale_callback_after_reactivation(self, platform, common, events):
        """A callback captured in an old session stays silent in the new one."""
        provider = MotionProvider(platform.accelerometer, **common)
        provider.activate()
        stale_session = provider._session
        provider.deactivate()
        provider.activate()

        provider._on_sample(stale_session, 0.0, 0.0, 4.0)
        assert ShakeDetected() not in events.drain()


class TestLateCallbacks:
    """Permission and authorization answers that arrive after deactivate()."""

    def test_late_microphone_grant(self, platform, common, policy, events):
        platform.audio.auto_grant = None
        provider = MicrophoneProvider(platform.audio, **common)
        provider.activate()
        provider.deactivate()

        assert platform.audio.grant() == 1
        assert not platform.audio.capturing
        platform.audio.feed_tone(0.05)
        assert events.drain() == []
        assert policy.uses_hardware(Mechanic.MICROPHONE)

    def test_late_microphone_denial_does_not_force_fallback(self, platform, common, policy):
        platform.audio.auto_grant = None
        provider = MicrophoneProvider(platform.audio, **common)
        provider.activate()
        provider.deactivate()

        platform.audio.deny()
        assert policy.uses_hardware(Mechanic.MICROPHONE)

    def test_late_speech_authorization(self, platform, common):
        platform.speech.auto_authorize = None
        provider = VoiceCommandProvider(platform.speech, **common)
        provider.activate()
        provider.deactivate()

        platform.speech.authorize()
        assert not platform.speech.listening
        assert platform.speech.tasks_started == 0

    def test_late_biometric_result(self, platform, common, events):
        platform.biometrics.auto_result = None
        provider = AuthenticationProvider(platform.biometrics, **common)
        provider.activate()
        assert provider.request_authentication("Unlock the vault")
        provider.deactivate()

        platform.biometrics.succeed()
        assert FaceIdResult(recognized=True) not in events.drain()
        assert not provider.is_authenticating

    def test_grant_for_old_session_after_reactivation(self, platform, common, events):
        platform.audio.auto_grant = None
        provider = MicrophoneProvider(platform.audio, **common)
        provider.activate()
        provider.deactivate()
        provider.activate()

        # Both requests resolve; only the live session starts capture.
        assert platform.audio.grant() == 2
        platform.audio.feed_tone(0.05)
        levels = [e for e in events.drain() if isinstance(e, MicLevelChanged)]
        assert len(levels) == 1


@pytest.mark.threads
class TestCrossThread:
    """Sensor callbacks on another thread reach subscribers via pump()."""

    def test_push_from_sensor_thread(self, platform, common, bus, events):
        provider = MotionProvider(platform.accelerometer, **common)
        provider.activate()

        worker = threading.Thread(target=platform.accelerometer.push, args=(0.0, 0.0, 4.0))
        worker.start()
        worker.join()

        assert events.drain() == []
        bus.pump()
        assert ShakeDetected() in events.drain()

    def test_text_from_timer_thread(self, platform, bus, policy, config, events):
        sched = ThreadScheduler()
        provider = ClipboardProvider(platform.pasteboard, bus, policy, sched, config)
        provider.activate()
        platform.pasteboard.copy("GLITCHED")
        try:
            assert bus.pump(timeout=3.0) >= 1
            assert ClipboardUpdated(value="GLITCHED") in events.drain()
        finally:
            provider.deactivate()
            sched.shutdown()
