"""
System Providers - device data and OS settings
==============================================

ClipboardProvider     - polls the pasteboard change count
DeviceNameProvider    - owner name derived from the device name, once
StorageSpaceProvider  - a cache file the player must clear from Settings
TimeOfDayProvider     - wall-clock hour, polled
LocaleProvider        - language code, initial plus change notices
VoiceOverProvider     - screen reader state, initial plus transitions
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

from ..events import (
    ClipboardImageDetected,
    ClipboardUpdated,
    ClockTimeUpdate,
    DeviceNameRead,
    LocaleChanged,
    StorageCacheCleared,
    VoiceOverStateChanged,
)
from ..mechanics import Mechanic
from ..platform import Device, NotificationCenter, Pasteboard, PlatformNotification, WallClock
from ..provider import ProviderBase

logger = logging.getLogger(__name__)


# =============================================================================
# Clipboard
# =============================================================================

class ClipboardProvider(ProviderBase):
    """
    Clipboard contents.

    There is no change notification for the pasteboard, so the change count
    is polled every `polling.clipboard_interval` seconds. The count at
    activation is the baseline; nothing is reported for it. On a change,
    text yields ClipboardUpdated and images yield ClipboardImageDetected.
    Image analysis is not performed, so matches_pattern is always False.
    """

    mechanics = frozenset({Mechanic.CLIPBOARD})

    def __init__(self, pasteboard: Pasteboard, bus, policy, scheduler=None, config=None):
        super().__init__(bus, policy, scheduler, config)
        self.pasteboard = pasteboard
        self._last_count = 0
        self.expected_password: Optional[str] = None

    def set_expected_password(self, password: str) -> None:
        self.expected_password = password

    def matches_expected(self, value: Optional[str]) -> bool:
        return value is not None and value == self.expected_password

    def _start_session(self, session: int) -> None:
        self._last_count = self.pasteboard.change_count
        self._every(self.config.polling.clipboard_interval, lambda: self._poll(session))

    def _stop_session(self) -> None:
        self.expected_password = None

    def _poll(self, session: int) -> None:
        count = self.pasteboard.change_count
        if count == self._last_count:
            return
        self._last_count = count

        text = self.pasteboard.string
        if text is not None:
            self._emit(ClipboardUpdated(value=text), session)
        if self.pasteboard.has_images:
            self._emit(ClipboardImageDetected(matches_pattern=False), session)


# =============================================================================
# Device name
# =============================================================================

_OWNER_PATTERN = re.compile(r"'s ", re.IGNORECASE)


def extract_owner_name(device_name: str) -> str:
    """
    "Sam's iPhone" -> "Sam". An unpersonalized model name ("iPhone",
    "iPad Pro") -> "PLAYER". Anything else is returned as-is.
    """
    match = _OWNER_PATTERN.search(device_name)
    if match:
        return device_name[:match.start()]
    lowered = device_name.lower()
    if "iphone" in lowered or "ipad" in lowered:
        return "PLAYER"
    return device_name


class DeviceNameProvider(ProviderBase):
    mechanics = frozenset({Mechanic.DEVICE_NAME})

    def __init__(self, device: Device, bus, policy, scheduler=None, config=None):
        super().__init__(bus, policy, scheduler, config)
        self.device = device
        self.owner_name: Optional[str] = None

    def _start_session(self, session: int) -> None:
        self.owner_name = extract_owner_name(self.device.name)
        logger.info(f"{self.name}: Name: {self.owner_name}")
        self._emit(DeviceNameRead(name=self.owner_name), session)


# =============================================================================
# Storage space
# =============================================================================

class StorageSpaceProvider(ProviderBase):
    """
    Cache-clearing puzzle.

    Writes `storage.cache_size_bytes` of filler to the cache directory on
    activation (if not already present) and polls for the file's
    existence. StorageCacheCleared is emitted once per session, the first
    time the file is found missing. If the file cannot be written the
    mechanic falls back to the manual control.
    """

    mechanics = frozenset({Mechanic.STORAGE_SPACE})

    def __init__(self, cache_dir: Path, bus, policy, scheduler=None, config=None):
        super().__init__(bus, policy, scheduler, config)
        self.cache_dir = Path(cache_dir)
        self._cleared_reported = False

    @property
    def cache_file(self) -> Path:
        return self.cache_dir / self.config.storage.cache_file_name

    def _start_session(self, session: int) -> None:
        self._cleared_reported = False
        try:
            self._create_cache_file()
        except OSError as e:
            self._fail("Could not create cache file", e)
            return
        self._every(self.config.polling.storage_interval, lambda: self._check(session))

    def _create_cache_file(self) -> None:
        path = self.cache_file
        if path.exists():
            return
        storage = self.config.storage
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(bytes([storage.fill_byte]) * storage.cache_size_bytes)

    def _check(self, session: int) -> None:
        with self._lock:
            if not self._current(session) or self._cleared_reported:
                return
            if self.cache_file.exists():
                return
            self._cleared_reported = True
            self._emit(StorageCacheCleared(), session)

    def cache_size_mb(self) -> float:
        """Size of the cache file in MiB, 0 if missing."""
        try:
            return self.cache_file.stat().st_size / (1024 * 1024)
        except OSError:
            return 0.0

    def clear_cache(self) -> None:
        """Delete the cache file in-app (simulator and accessibility path)."""
        try:
            self.cache_file.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"{self.name}: Could not clear cache: {e}")
            return
        with self._lock:
            session = self._session
        self._check(session)


# =============================================================================
# Time of day
# =============================================================================

def is_night(hour: int) -> bool:
    """21:00 through 05:59."""
    return hour >= 21 or hour < 6


class TimeOfDayProvider(ProviderBase):
    """Wall-clock hour; ClockTimeUpdate on activation and whenever the hour changes."""

    mechanics = frozenset({Mechanic.TIME_OF_DAY})

    def __init__(self, clock: WallClock, bus, policy, scheduler=None, config=None):
        super().__init__(bus, policy, scheduler, config)
        self.clock = clock
        self._last_hour: Optional[int] = None

    @property
    def current_hour(self) -> int:
        return self.clock.now().hour

    def is_night(self) -> bool:
        return is_night(self.current_hour)

    def is_secret_hour(self) -> bool:
        now = self.clock.now()
        return now.hour == 3 and now.minute == 33

    def _start_session(self, session: int) -> None:
        self._last_hour = None
        self._poll(session)
        self._every(self.config.polling.time_of_day_interval, lambda: self._poll(session))

    def _stop_session(self) -> None:
        self._last_hour = None

    def _poll(self, session: int) -> None:
        hour = self.current_hour
        if hour == self._last_hour:
            return
        if self._emit(ClockTimeUpdate(hour=hour), session):
            self._last_hour = hour


# =============================================================================
# Locale
# =============================================================================

class LocaleProvider(ProviderBase):
    mechanics = frozenset({Mechanic.LOCALE})

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
        self._last_language = ""

    @property
    def language_code(self) -> str:
        return self.device.language_code or "en"

    @property
    def is_non_english(self) -> bool:
        return self.language_code != "en"

    def _start_session(self, session: int) -> None:
        self._observe(
            self.notifications,
            PlatformNotification.LOCALE_DID_CHANGE,
            lambda _info: self._on_change(session),
        )
        self._last_language = self.language_code
        logger.info(f"{self.name}: Language: {self._last_language}")
        self._emit(LocaleChanged(language=self._last_language), session)

    def _on_change(self, session: int) -> None:
        language = self.language_code
        if language == self._last_language:
            return
        if self._emit(LocaleChanged(language=language), session):
            self._last_language = language


# =============================================================================
# VoiceOver
# =============================================================================

class VoiceOverProvider(ProviderBase):
    mechanics = frozenset({Mechanic.VOICE_OVER})

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
        self._last: Optional[bool] = None

    def _start_session(self, session: int) -> None:
        self._observe(
            self.notifications,
            PlatformNotification.VOICE_OVER_STATUS_DID_CHANGE,
            lambda _info: self._check(session),
        )
        self._last = None
        self._check(session)

    def _stop_session(self) -> None:
        self._last = None

    def _check(self, session: int) -> None:
        running = bool(self.device.voice_over_running)
        if running == self._last:
            return
        if self._emit(VoiceOverStateChanged(is_enabled=running), session):
            self._last = running

    def announce(self, message: str) -> None:
        """Post an announcement for the screen reader to speak."""
        self.device.announce(message)


__all__ = [
    "ClipboardProvider",
    "extract_owner_name",
    "DeviceNameProvider",
    "StorageSpaceProvider",
    "is_night",
    "TimeOfDayProvider",
    "LocaleProvider",
    "VoiceOverProvider",
]
