"""
Motion Providers - accelerometer-driven mechanics
=================================================

MotionProvider
    Shake: |a| is the acceleration magnitude in g; a sample whose
    deviation from gravity, abs(|a| - 1), exceeds `shake_threshold` is a
    shake unless the previous one was less than `shake_cooldown` ago.
    Gyro shadow: tilt (x, y) is reported when either axis moved more than
    `tilt_min_change` since the last report.

ShakeUndoProvider
    Sustained shaking: the moving average of abs(|a| - 1) over the last
    `undo_window` samples must exceed `undo_threshold`. Debounced by
    `undo_debounce`; the history is cleared after each trigger so one
    gesture cannot fire twice.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Optional, Tuple

import numpy as np

from ..events import GyroChanged, ShakeDetected, ShakeUndoTriggered
from ..mechanics import Mechanic
from ..platform import Accelerometer
from ..provider import ProviderBase

logger = logging.getLogger(__name__)


def gravity_delta(x: float, y: float, z: float) -> float:
    """Deviation of the acceleration magnitude from 1 g."""
    return float(abs(np.linalg.norm((x, y, z)) - 1.0))


class MotionProvider(ProviderBase):
    """Shake and tilt from the accelerometer."""

    mechanics = frozenset({Mechanic.SHAKE, Mechanic.GYRO_SHADOW})

    def __init__(self, accelerometer: Accelerometer, bus, policy, scheduler=None, config=None):
        super().__init__(bus, policy, scheduler, config)
        self.accelerometer = accelerometer
        self._last_shake: Optional[float] = None
        self._last_tilt: Optional[Tuple[float, float]] = None

    def _start_session(self, session: int) -> None:
        if not self.accelerometer.available:
            self._fail("Accelerometer not available")
            return

        self._last_shake = None
        self._last_tilt = None
        stop = self.accelerometer.start_updates(
            self.config.motion.update_interval,
            lambda x, y, z: self._on_sample(session, x, y, z),
        )
        self._on_stop(stop)

    def _stop_session(self) -> None:
        self._last_shake = None
        self._last_tilt = None

    def _on_sample(self, session: int, x: float, y: float, z: float) -> None:
        if not self._current(session):
            return
        motion = self.config.motion

        if gravity_delta(x, y, z) > motion.shake_threshold:
            now = self._now()
            if self._last_shake is None or now - self._last_shake >= motion.shake_cooldown:
                self._last_shake = now
                self._emit(ShakeDetected(), session)

        tilt = (float(x), float(y))
        last = self._last_tilt
        if last is None or max(abs(tilt[0] - last[0]), abs(tilt[1] - last[1])) > motion.tilt_min_change:
            self._last_tilt = tilt
            self._emit(GyroChanged(tilt_x=tilt[0], tilt_y=tilt[1]), session)


class ShakeUndoProvider(ProviderBase):
    """Sustained shake gesture for undo."""

    mechanics = frozenset({Mechanic.SHAKE_UNDO})

    def __init__(self, accelerometer: Accelerometer, bus, policy, scheduler=None, config=None):
        super().__init__(bus, policy, scheduler, config)
        self.accelerometer = accelerometer
        self._history: Deque[float] = deque(maxlen=self.config.motion.undo_window)
        self._last_trigger: Optional[float] = None

    def _start_session(self, session: int) -> None:
        if not self.accelerometer.available:
            self._fail("Accelerometer not available")
            return

        self._history.clear()
        self._last_trigger = None
        stop = self.accelerometer.start_updates(
            self.config.motion.undo_update_interval,
            lambda x, y, z: self._on_sample(session, x, y, z),
        )
        self._on_stop(stop)

    def _stop_session(self) -> None:
        self._history.clear()

    @property
    def history(self) -> Tuple[float, ...]:
        return tuple(self._history)

    def _on_sample(self, session: int, x: float, y: float, z: float) -> None:
        if not self._current(session):
            return
        motion = self.config.motion

        self._history.append(gravity_delta(x, y, z))
        average = float(np.mean(self._history))
        if average <= motion.undo_threshold:
            return

        now = self._now()
        if self._last_trigger is not None and now - self._last_trigger < motion.undo_debounce:
            return

        self._last_trigger = now
        self._history.clear()
        self._emit(ShakeUndoTriggered(), session)


__all__ = [
    "gravity_delta",
    "MotionProvider",
    "ShakeUndoProvider",
]
