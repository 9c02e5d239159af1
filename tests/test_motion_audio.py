"""
Accelerometer, microphone and speech provider tests.
"""

import numpy as np
import pytest

from glitched_sense.events import (
    GyroChanged,
    MicLevelChanged,
    ShakeDetected,
    ShakeUndoTriggered,
    VoiceCommandRecognized,
)
from glitched_sense.mechanics import Mechanic
from glitched_sense.providers import (
    MicrophoneProvider,
    MotionProvider,
    ShakeUndoProvider,
    VoiceCommandProvider,
)
from glitched_sense.providers.audio import normalized_level
from glitched_sense.providers.motion import gravity_delta


def only(events, cls):
    return [e for e in events if isinstance(e, cls)]


# =============================================================================
# Motion
# =============================================================================

class TestMotion:
    """Test shake and tilt detection."""

    def test_gravity_delta(self):
        assert gravity_delta(0.0, 0.0, -1.0) == pytest.approx(0.0)
        assert gravity_delta(0.0, 0.0, 3.6) == pytest.approx(2.6)

    def test_shake_threshold(self, platform, common, events):
        provider = MotionProvider(platform.accelerometer, **common)
        provider.activate()

        platform.accelerometer.push(0.0, 0.0, 3.4)
        assert only(events.drain(), ShakeDetected) == []

        platform.accelerometer.push(0.0, 0.0, 3.6)
        assert only(events.drain(), ShakeDetected) == [ShakeDetected()]

    def test_shake_cooldown(self, platform, common, scheduler, events):
        provider = MotionProvider(platform.accelerometer, **common)
        provider.activate()

        platform.accelerometer.push(0.0, 0.0, 4.0)
        scheduler.advance(0.1)
        platform.accelerometer.push(0.0, 0.0, 4.0)
        assert len(only(events.drain(), ShakeDetected)) == 1

        scheduler.advance(0.3)
        platform.accelerometer.push(0.0, 0.0, 4.0)
        assert len(only(events.drain(), ShakeDetected)) == 1

    def test_tilt_reports_changes_only(self, platform, common, events):
        provider = MotionProvider(platform.accelerometer, **common)
        provider.activate()

        platform.accelerometer.push(0.1, 0.2, -1.0)
        platform.accelerometer.push(0.12, 0.2, -1.0)
        platform.accelerometer.push(0.3, 0.2, -1.0)

        tilts = only(events.drain(), GyroChanged)
        assert [(t.tilt_x, t.tilt_y) for t in tilts] == [(0.1, 0.2), (0.3, 0.2)]

    def test_unavailable_accelerometer_forces_fallback(self, platform, common, policy):
        platform.accelerometer.available = False
        provider = MotionProvider(platform.accelerometer, **common)
        provider.activate()

        assert not provider.is_active
        assert not policy.uses_hardware(Mechanic.SHAKE)
        assert not policy.uses_hardware(Mechanic.GYRO_SHADOW)


class TestShakeUndo:
    """Test the sustained-shake moving average."""

    def test_single_spike_is_not_enough(self, platform, common, events):
        provider = ShakeUndoProvider(platform.accelerometer, **common)
        provider.activate()

        for _ in range(9):
            platform.accelerometer.rest()
        platform.accelerometer.push(0.0, 0.0, 21.0)
        assert events.drain() == []

        # A second spike pushes the window average to 4.0.
        platform.accelerometer.push(0.0, 0.0, 21.0)
        assert events.drain() == [ShakeUndoTriggered()]
        assert provider.history == ()

    def test_debounce(self, platform, common, scheduler, events):
        provider = ShakeUndoProvider(platform.accelerometer, **common)
        provider.activate()

        platform.accelerometer.push(0.0, 0.0, 5.0)
        scheduler.advance(0.2)
        platform.accelerometer.push(0.0, 0.0, 5.0)
        assert len(events.drain()) == 1

        scheduler.advance(0.5)
        platform.accelerometer.push(0.0, 0.0, 5.0)
        assert len(events.drain()) == 1

    def test_history_cleared_on_deactivate(self, platform, common):
        provider = ShakeUndoProvider(platform.accelerometer, **common)
        provider.activate()
        platform.accelerometer.rest()
        assert len(provider.history) == 1
        provider.deactivate()
        assert provider.history == ()


# =============================================================================
# Audio
# =============================================================================

class TestMicrophone:
    """Test permission handling and level reporting."""

    def test_normalized_level(self):
        assert normalized_level(np.array([]), 15.0) is None
        assert normalized_level(np.full(8, 0.5), 15.0) == 1.0
        assert normalized_level(np.full(8, 0.01), 15.0) == pytest.approx(0.15)

    def test_grant_starts_capture(self, platform, common, events):
        provider = MicrophoneProvider(platform.audio, **common)
        provider.activate()
        assert platform.audio.capturing

        platform.audio.feed_tone(0.05)
        levels = only(events.drain(), MicLevelChanged)
        assert len(levels) == 1
        assert levels[0].power == pytest.approx(0.53, abs=0.02)

    def test_small_changes_are_suppressed(self, platform, common, events):
        provider = MicrophoneProvider(platform.audio, **common)
        provider.activate()

        platform.audio.feed(np.full(16, 0.01))
        platform.audio.feed(np.full(16, 0.0105))
        platform.audio.feed(np.full(16, 0.02))

        powers = [e.power for e in only(events.drain(), MicLevelChanged)]
        assert powers == pytest.approx([0.15, 0.30])

    def test_restart_mid_report_resets_level(self, platform, common, bus, events):
        provider = MicrophoneProvider(platform.audio, **common)
        restarted = []

        def restart(event):
            if isinstance(event, MicLevelChanged) and not restarted:
                restarted.append(True)
                provider.deactivate()
                provider.activate()

        bus.subscribe(restart)
        provider.activate()
        platform.audio.feed(np.full(16, 0.01))
        platform.audio.feed(np.full(16, 0.01))

        powers = [e.power for e in only(events.drain(), MicLevelChanged)]
        assert powers == pytest.approx([0.15, 0.15])

    def test_denial_forces_fallback(self, platform, common, policy):
        platform.audio.auto_grant = False
        provider = MicrophoneProvider(platform.audio, **common)
        provider.activate()

        assert not provider.is_active
        assert not policy.uses_hardware(Mechanic.MICROPHONE)

    def test_invalid_format_forces_fallback(self, platform, common, policy):
        platform.audio.sample_rate = 0
        provider = MicrophoneProvider(platform.audio, **common)
        provider.activate()

        assert not provider.is_active
        assert not policy.needs_fallback_ui(Mechanic.MICROPHONE)
        policy.register_mechanics({Mechanic.MICROPHONE})
        assert policy.needs_fallback_ui(Mechanic.MICROPHONE)

    def test_pending_permission_then_grant(self, platform, common, events):
        platform.audio.auto_grant = None
        provider = MicrophoneProvider(platform.audio, **common)
        provider.activate()
        assert provider.is_active
        assert not platform.audio.capturing

        platform.audio.grant()
        assert platform.audio.capturing


class TestVoiceCommands:
    """Test recognition sessions and command matching."""

    def test_match_last_word(self, platform, common):
        provider = VoiceCommandProvider(platform.speech, **common)
        assert provider.match_command("please jump") == "JUMP"
        assert provider.match_command("jump please") is None
        assert provider.match_command("") is None

    def test_partial_results_emit(self, platform, common, events):
        provider = VoiceCommandProvider(platform.speech, **common)
        provider.activate()
        assert provider.is_listening

        platform.speech.speak("open")
        platform.speech.speak("open the bridge")
        assert events.drain() == [
            VoiceCommandRecognized(command="OPEN"),
            VoiceCommandRecognized(command="BRIDGE"),
        ]

    def test_restart_after_final(self, platform, common, scheduler):
        provider = VoiceCommandProvider(platform.speech, **common)
        provider.activate()

        platform.speech.speak("fly", final=True)
        assert not provider.is_listening

        scheduler.advance(0.5)
        assert provider.is_listening
        assert platform.speech.tasks_started == 2

    def test_restart_after_error(self, platform, common, scheduler):
        provider = VoiceCommandProvider(platform.speech, **common)
        provider.activate()

        platform.speech.fail(RuntimeError("audio interrupted"))
        scheduler.advance(0.5)
        assert platform.speech.tasks_started == 2

    def test_restarts_do_not_accumulate_timers(self, platform, common, scheduler):
        provider = VoiceCommandProvider(platform.speech, **common)
        provider.activate()

        for _ in range(10):
            platform.speech.speak("fly", final=True)
            scheduler.advance(0.5)

        assert platform.speech.tasks_started == 11
        assert len(provider._timers) <= 1

    def test_no_restart_after_deactivate(self, platform, common, scheduler):
        provider = VoiceCommandProvider(platform.speech, **common)
        provider.activate()
        platform.speech.speak("go", final=True)
        provider.deactivate()

        scheduler.advance(2.0)
        assert platform.speech.tasks_started == 1
        assert not platform.speech.listening

    def test_unavailable_recognizer_forces_fallback(self, platform, common, scheduler, policy):
        platform.speech.available = False
        provider = VoiceCommandProvider(platform.speech, **common)
        provider.activate()

        assert not provider.is_active
        assert not policy.uses_hardware(Mechanic.VOICE_COMMAND)
        assert scheduler.pending() == 0

        platform.speech.available = True
        scheduler.advance(5.0)
        assert platform.speech.tasks_started == 0

    def test_failed_restart_is_not_retried(self, platform, common, scheduler, policy):
        provider = VoiceCommandProvider(platform.speech, **common)
        provider.activate()
        platform.speech.speak("fly", final=True)

        platform.speech.available = False
        scheduler.advance(0.5)
        assert not provider.is_active
        assert not policy.uses_hardware(Mechanic.VOICE_COMMAND)

        platform.speech.available = True
        scheduler.advance(5.0)
        assert platform.speech.tasks_started == 1
        assert scheduler.pending() == 0

    def test_refusal_forces_fallback(self, platform, common, policy):
        platform.speech.auto_authorize = False
        provider = VoiceCommandProvider(platform.speech, **common)
        provider.activate()

        assert not provider.is_active
        assert not policy.uses_hardware(Mechanic.VOICE_COMMAND)
