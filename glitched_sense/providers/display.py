"""
Display Providers
=================

BrightnessProvider   - samples screen brightness at ~15 Hz, reports the
                       initial level and any move larger than
                       `display.brightness_min_change`
ScreenshotProvider   - one ScreenshotTaken per platform screenshot notice
AppearanceProvider   - dark mode; initial state plus transitions
OrientationProvider  - landscape/portrait; initial state plus transitions,
                       ignoring unknown, face-up and face-down readings
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..events import BrightnessChanged, DarkModeChanged, OrientationChanged, ScreenshotTaken
from ..mechanics import Mechanic
from ..platform import Device, NotificationCenter, PlatformNotification, Screen
from ..provider import ProviderBase

logger = logging.getLogger(__name__)


class BrightnessProvider(ProviderBase):
    mechanics = frozenset({Mechanic.BRIGHTNESS})

    def __init__(self, screen: Screen, bus, policy, scheduler=None, config=None):
        super().__init__(bus, policy, scheduler, config)
        self.screen = screen
        self._last_level = 0.0

    def _start_session(self, session: int) -> None:
        self._last_level = float(self.screen.brightness)
        self._emit(BrightnessChanged(level=self._last_level), session)
        self._every(self.config.display.brightness_interval, lambda: self._sample(session))

    def _sample(self, session: int) -> None:
        level = float(self.screen.brightness)
        with self._lock:
            if not self._current(session):
                return
            if abs(level - self._last_level) <= self.config.display.brightness_min_change:
                return
            self._last_level = level
            self._emit(BrightnessChanged(level=level), session)


class ScreenshotProvider(ProviderBase):
    mechanics = frozenset({Mechanic.SCREENSHOT})

    def __init__(self, notifications: NotificationCenter, bus, policy, scheduler=None, config=None):
        super().__init__(bus, policy, scheduler, config)
        self.notifications = notifications

    def _start_session(self, session: int) -> None:
        self._observe(
            self.notifications,
            PlatformNotification.SCREENSHOT_TAKEN,
            lambda _info: self._emit(ScreenshotTaken(), session),
        )


class AppearanceProvider(ProviderBase):
    """
    Dark mode.

    The platform trait notification and `handle_trait_change()` (for hosts
    that observe trait changes themselves) feed the same transition check.
    """

    mechanics = frozenset({Mechanic.DARK_MODE})

    def __init__(
        self,
        screen: Screen,
        notifications: NotificationCenter,
        bus,
        policy,
        scheduler=None,
        config=None,
    ):
        super().__init__(bus, policy, scheduler, config)
        self.screen = screen
        self.notifications = notifications
        self._is_dark: Optional[bool] = None
        self._session_id = 0

    def _start_session(self, session: int) -> None:
        self._session_id = session
        self._observe(
            self.notifications,
            PlatformNotification.TRAIT_COLLECTION_DID_CHANGE,
            lambda info: self._on_trait(session, info),
        )
        self._is_dark = bool(self.screen.is_dark)
        self._emit(DarkModeChanged(is_dark=self._is_dark), session)

    def _stop_session(self) -> None:
        self._is_dark = None

    def _on_trait(self, session: int, info: Dict[str, Any]) -> None:
        is_dark = info.get("is_dark")
        if is_dark is None:
            is_dark = self.screen.is_dark
        self._transition(session, bool(is_dark))

    def handle_trait_change(self, is_dark: bool) -> None:
        """Report an appearance change observed by the host UI."""
        self._transition(self._session_id, bool(is_dark))

    def _transition(self, session: int, is_dark: bool) -> None:
        with self._lock:
            if not self._current(session) or is_dark == self._is_dark:
                return
            self._is_dark = is_dark
            self._emit(DarkModeChanged(is_dark=is_dark), session)


class OrientationProvider(ProviderBase):
    mechanics = frozenset({Mechanic.ORIENTATION})

    def __init__(
        self,
        device: Device,
        notifications: NotificationCenter,
        bus,
        policy,
        scheduler=None,
        config=None,
    ):
        super().__init__(bus, policy, scheduler, config)
        self.device = device
        self.notifications = notifications
        self._is_landscape: Optional[bool] = None

    def _start_session(self, session: int) -> None:
        self.device.begin_orientation_notifications()
        self._on_stop(self.device.end_orientation_notifications)
        self._observe(
            self.notifications,
            PlatformNotification.ORIENTATION_DID_CHANGE,
            lambda _info: self._check(session),
        )
        self._is_landscape = None
        self._check(session)

    def _stop_session(self) -> None:
        self._is_landscape = None

    def _check(self, session: int) -> None:
        orientation = self.device.orientation
        if not orientation.is_valid_interface:
            return
        is_landscape = orientation.is_landscape
        if is_landscape == self._is_landscape:
            return
        if self._emit(OrientationChanged(is_landscape=is_landscape), session):
            self._is_landscape = is_landscape


__all__ = [
    "BrightnessProvider",
    "ScreenshotProvider",
    "AppearanceProvider",
    "OrientationProvider",
]
