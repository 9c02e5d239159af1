"""
Audio Providers - microphone level and voice commands
=====================================================

MicrophoneProvider
    Asks for record permission on activation. Once granted it taps the
    input at `audio.buffer_size` frames and reports the buffer's RMS,
    scaled by `audio.gain` and clamped to [0, 1]. A level is reported only
    when it differs from the last report by more than `audio.min_change`.
    Denial, an invalid input format, or an engine start error forces the
    microphone to fallback.

VoiceCommandProvider
    Asks for speech authorization, then runs back-to-back recognition
    sessions. A transcript whose last word (uppercased) is in the command
    vocabulary emits VoiceCommandRecognized. When a session ends with a
    final result or an error, a new one starts `voice.restart_delay`
    seconds later as long as the provider is still active. Denial, an
    unavailable recognizer, or a failure to start a session forces voice
    commands to fallback; failed starts are not retried.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from ..events import MicLevelChanged, VoiceCommandRecognized
from ..mechanics import Mechanic
from ..platform import AudioInput, SpeechRecognizer
from ..provider import ProviderBase

logger = logging.getLogger(__name__)


def normalized_level(samples: np.ndarray, gain: float) -> Optional[float]:
    """RMS of a buffer scaled by `gain`, clamped to [0, 1]. None for empty buffers."""
    if samples.size == 0:
        return None
    rms = float(np.sqrt(np.mean(np.square(samples, dtype=np.float64))))
    return float(np.clip(rms * gain, 0.0, 1.0))


class MicrophoneProvider(ProviderBase):
    mechanics = frozenset({Mechanic.MICROPHONE})

    def __init__(self, audio: AudioInput, bus, policy, scheduler=None, config=None):
        super().__init__(bus, policy, scheduler, config)
        self.audio = audio
        self._last_level: Optional[float] = None

    def _start_session(self, session: int) -> None:
        self._last_level = None
        self.audio.request_permission(lambda granted: self._on_permission(session, granted))

    def _stop_session(self) -> None:
        with self._lock:
            self._last_level = None

    def _on_permission(self, session: int, granted: bool) -> None:
        with self._lock:
            if not self._current(session):
                return
            if not granted:
                self._fail("Microphone permission denied")
                return
            try:
                stop = self.audio.start_capture(
                    self.config.audio.buffer_size,
                    lambda buffer: self._on_buffer(session, buffer),
                )
            except Exception as e:
                self._fail("Audio capture failed", e)
                return
            self._on_stop(stop)
            logger.debug(f"{self.name}: Capturing")

    def _on_buffer(self, session: int, buffer: np.ndarray) -> None:
        level = normalized_level(np.asarray(buffer), self.config.audio.gain)
        if level is None:
            return
        with self._lock:
            if not self._current(session):
                return
            last = self._last_level
            if last is not None and abs(level - last) <= self.config.audio.min_change:
                return
            self._last_level = level
            self._emit(MicLevelChanged(power=level), session)


class VoiceCommandProvider(ProviderBase):
    mechanics = frozenset({Mechanic.VOICE_COMMAND})

    def __init__(self, speech: SpeechRecognizer, bus, policy, scheduler=None, config=None):
        super().__init__(bus, policy, scheduler, config)
        self.speech = speech
        self._cancel_task = None

    @property
    def commands(self):
        return tuple(c.upper() for c in self.config.voice.commands)

    @property
    def is_listening(self) -> bool:
        return self._cancel_task is not None

    def _start_session(self, session: int) -> None:
        self.speech.request_authorization(
            lambda authorized: self._on_authorization(session, authorized)
        )

    def _stop_session(self) -> None:
        with self._lock:
            self._stop_listening()

    def _on_authorization(self, session: int, authorized: bool) -> None:
        with self._lock:
            if not self._current(session):
                return
            if not authorized:
                self._fail("Speech recognition not authorized")
                return
            self._start_listening(session)

    def _start_listening(self, session: int) -> None:
        with self._lock:
            if not self._current(session) or self._cancel_task is not None:
                return
            if not self.speech.available:
                self._fail("Recognizer unavailable")
                return
            try:
                self._cancel_task = self.speech.start_task(
                    lambda text, final: self._on_result(session, text, final),
                    lambda error: self._on_error(session, error),
                )
            except Exception as e:
                self._fail("Failed to start recognition", e)

    def _stop_listening(self) -> None:
        cancel, self._cancel_task = self._cancel_task, None
        if cancel is not None:
            cancel()

    def _schedule_restart(self, session: int) -> None:
        self._later(self.config.voice.restart_delay, lambda: self._start_listening(session))

    def match_command(self, transcript: str) -> Optional[str]:
        """The command named by the transcript's last word, if any."""
        words = transcript.upper().split()
        if words and words[-1] in self.commands:
            return words[-1]
        return None

    def _on_result(self, session: int, text: str, final: bool) -> None:
        command = self.match_command(text)
        if command is not None:
            self._emit(VoiceCommandRecognized(command=command), session)
        if final:
            self._end_task(session)

    def _on_error(self, session: int, error: Exception) -> None:
        logger.debug(f"{self.name}: Recognition ended with error: {error}")
        self._end_task(session)

    def _end_task(self, session: int) -> None:
        with self._lock:
            if not self._current(session):
                return
            self._stop_listening()
            self._schedule_restart(session)


__all__ = [
    "normalized_level",
    "MicrophoneProvider",
    "VoiceCommandProvider",
]
