"""
Platform Sources - Hardware Abstraction
=======================================

Every provider observes exactly one platform source. This module defines
the protocol each source implements and a simulated implementation of
each that tests, the CLI, and desktop builds drive by hand.

Sources come in two shapes:

    push   - the source calls back (accelerometer, audio taps, path
             monitor, notification center); registering returns a
             callable that unregisters
    polled - the provider reads a value on a timer (pasteboard change
             count, battery level, notification settings, cache file)

Permission-gated sources (audio, speech, user notifications, biometrics)
complete their requests through callbacks. The simulated versions can
leave a request pending so tests can race the grant against deactivate().

Usage:
    platform = SimulatedPlatform.create(cache_dir=tmp_path)
    platform.accelerometer.push(0.0, 0.0, 4.0)     # a hard shake
    platform.pasteboard.copy("hunter2")             # bumps change count
    platform.audio.auto_grant = None                # leave permission pending
"""

from __future__ import annotations

import logging
import tempfile
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol

import numpy as np

from .errors import HardwareUnavailableError, SourceStartError

logger = logging.getLogger(__name__)


Unsubscribe = Callable[[], None]
PermissionCallback = Callable[[bool], None]


# =============================================================================
# Shared value types
# =============================================================================

class PlatformNotification(str, Enum):
    """System broadcasts providers listen for."""
    BATTERY_STATE_DID_CHANGE = "battery_state_did_change"
    SCREENSHOT_TAKEN = "user_did_take_screenshot"
    TRAIT_COLLECTION_DID_CHANGE = "trait_collection_did_change"
    ORIENTATION_DID_CHANGE = "orientation_did_change"
    DID_ENTER_BACKGROUND = "did_enter_background"
    WILL_ENTER_FOREGROUND = "will_enter_foreground"
    WILL_RESIGN_ACTIVE = "will_resign_active"
    DID_BECOME_ACTIVE = "did_become_active"
    POWER_STATE_DID_CHANGE = "power_state_did_change"
    LOCALE_DID_CHANGE = "current_locale_did_change"
    VOICE_OVER_STATUS_DID_CHANGE = "voice_over_status_did_change"
    NOTIFICATION_TAPPED = "notification_tapped"


class BatteryState(str, Enum):
    UNKNOWN = "unknown"
    UNPLUGGED = "unplugged"
    CHARGING = "charging"
    FULL = "full"


class DeviceOrientation(str, Enum):
    UNKNOWN = "unknown"
    PORTRAIT = "portrait"
    PORTRAIT_UPSIDE_DOWN = "portrait_upside_down"
    LANDSCAPE_LEFT = "landscape_left"
    LANDSCAPE_RIGHT = "landscape_right"
    FACE_UP = "face_up"
    FACE_DOWN = "face_down"

    @property
    def is_landscape(self) -> bool:
        return self in (DeviceOrientation.LANDSCAPE_LEFT, DeviceOrientation.LANDSCAPE_RIGHT)

    @property
    def is_valid_interface(self) -> bool:
        return self not in (
            DeviceOrientation.UNKNOWN,
            DeviceOrientation.FACE_UP,
            DeviceOrientation.FACE_DOWN,
        )


@dataclass(frozen=True)
class NetworkPath:
    """Snapshot of the current network route."""
    uses_wifi: bool = True
    uses_cellular: bool = False
    satisfied: bool = True


@dataclass(frozen=True)
class NotificationSettings:
    """User notification settings as reported by the OS."""
    authorized: bool = True
    notification_center_enabled: bool = True
    alerts_enabled: bool = True


@dataclass(frozen=True)
class NotificationRequest:
    """A local notification scheduled by the game."""
    identifier: str
    title: str
    body: str
    delay: float
    user_info: Dict[str, Any] = field(default_factory=dict)


# =============================================================================
# Source protocols
# =============================================================================

class NotificationCenter(Protocol):
    def add_observer(
        self, name: PlatformNotification, callback: Callable[[Dict[str, Any]], None]
    ) -> Unsubscribe:
        ...

    def post(self, name: PlatformNotification, **info: Any) -> None:
        ...


class Accelerometer(Protocol):
    @property
    def available(self) -> bool:
        ...

    def start_updates(
        self, interval: float, callback: Callable[[float, float, float], None]
    ) -> Unsubscribe:
        """Stream (x, y, z) samples in g. Raises HardwareUnavailableError."""
        ...


class AudioInput(Protocol):
    def request_permission(self, callback: PermissionCallback) -> None:
        ...

    def start_capture(
        self, buffer_size: int, callback: Callable[[np.ndarray], None]
    ) -> Unsubscribe:
        """Deliver float32 sample buffers. Raises SourceStartError."""
        ...


class SpeechRecognizer(Protocol):
    @property
    def available(self) -> bool:
        ...

    def request_authorization(self, callback: PermissionCallback) -> None:
        ...

    def start_task(
        self,
        on_result: Callable[[str, bool], None],
        on_error: Callable[[Exception], None],
    ) -> Unsubscribe:
        """Begin a recognition session; returns a cancel callable."""
        ...


class Battery(Protocol):
    monitoring_enabled: bool

    @property
    def state(self) -> BatteryState:
        ...

    @property
    def level(self) -> float:
        """0..1, or -1 when unknown or monitoring is off."""
        ...


class Screen(Protocol):
    @property
    def brightness(self) -> float:
        ...

    @property
    def is_dark(self) -> bool:
        ...


class Device(Protocol):
    @property
    def name(self) -> str:
        ...

    @property
    def orientation(self) -> DeviceOrientation:
        ...

    @property
    def low_power_mode(self) -> bool:
        ...

    @property
    def language_code(self) -> str:
        ...

    @property
    def voice_over_running(self) -> bool:
        ...

    def begin_orientation_notifications(self) -> None:
        ...

    def end_orientation_notifications(self) -> None:
        ...

    def announce(self, message: str) -> None:
        ...


class Pasteboard(Protocol):
    @property
    def change_count(self) -> int:
        ...

    @property
    def string(self) -> Optional[str]:
        ...

    @property
    def has_images(self) -> bool:
        ...


class PathMonitor(Protocol):
    def start(self, callback: Callable[[NetworkPath], None]) -> Unsubscribe:
        ...


class UserNotificationCenter(Protocol):
    def request_authorization(self, callback: PermissionCallback) -> None:
        ...

    def get_settings(self, callback: Callable[[NotificationSettings], None]) -> None:
        ...

    def add(
        self,
        request: NotificationRequest,
        completion: Callable[[Optional[Exception]], None],
    ) -> None:
        ...

    def remove_all_pending(self) -> None:
        ...


class BiometricContext(Protocol):
    def can_evaluate(self) -> bool:
        ...

    @property
    def biometry_type(self) -> str:
        ...

    def evaluate(self, reason: str, callback: Callable[[bool], None]) -> None:
        ...

    def invalidate(self) -> None:
        ...


class Biometrics(Protocol):
    def create_context(self) -> BiometricContext:
        ...


class KeyValueStore(Protocol):
    def get_bool(self, key: str) -> bool:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def remove(self, key: str) -> None:
        ...

    def synchronize(self) -> None:
        ...


class WallClock(Protocol):
    def now(self) -> datetime:
        ...


# =============================================================================
# Simulated implementations
# =============================================================================

class SimulatedNotificationCenter:
    """In-process broadcast center. Callbacks run on the posting thread."""

    def __init__(self):
        self._lock = threading.Lock()
        self._observers: Dict[PlatformNotification, List[Callable]] = {}

    def add_observer(
        self, name: PlatformNotification, callback: Callable[[Dict[str, Any]], None]
    ) -> Unsubscribe:
        with self._lock:
            self._observers.setdefault(name, []).append(callback)

        def remove() -> None:
            with self._lock:
                callbacks = self._observers.get(name, [])
                if callback in callbacks:
                    callbacks.remove(callback)

        return remove

    def post(self, name: PlatformNotification, **info: Any) -> None:
        with self._lock:
            callbacks = list(self._observers.get(name, []))
        for callback in callbacks:
            callback(dict(info))


class SimulatedAccelerometer:
    """Accelerometer fed by push(x, y, z)."""

    def __init__(self, available: bool = True):
        self._available = available
        self._lock = threading.Lock()
        self._listeners: List[Callable[[float, float, float], None]] = []

    @property
    def available(self) -> bool:
        return self._available

    @available.setter
    def available(self, value: bool) -> None:
        self._available = value

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def start_updates(
        self, interval: float, callback: Callable[[float, float, float], None]
    ) -> Unsubscribe:
        if not self._available:
            raise HardwareUnavailableError("Accelerometer not available")
        with self._lock:
            self._listeners.append(callback)

        def stop() -> None:
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return stop

    def push(self, x: float, y: float, z: float) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(x, y, z)

    def rest(self) -> None:
        """Device lying still: gravity only."""
        self.push(0.0, 0.0, -1.0)


class _PermissionGate:
    """
    Pending permission requests.

    auto_grant True/False answers immediately; None leaves requests
    pending until grant() or deny().
    """

    def __init__(self, auto_grant: Optional[bool] = True):
        self.auto_grant = auto_grant
        self._lock = threading.Lock()
        self._pending: List[PermissionCallback] = []

    def request(self, callback: PermissionCallback) -> None:
        with self._lock:
            if self.auto_grant is None:
                self._pending.append(callback)
                return
            answer = self.auto_grant
        callback(answer)

    def resolve(self, granted: bool) -> int:
        with self._lock:
            callbacks, self._pending = self._pending, []
        for callback in callbacks:
            callback(granted)
        return len(callbacks)


class SimulatedAudioInput:
    """Microphone whose buffers come from feed()."""

    def __init__(self, auto_grant: Optional[bool] = True, sample_rate: float = 44100.0):
        self._gate = _PermissionGate(auto_grant)
        self.sample_rate = sample_rate
        self.fail_start = False
        self._lock = threading.Lock()
        self._taps: List[Callable[[np.ndarray], None]] = []

    @property
    def auto_grant(self) -> Optional[bool]:
        return self._gate.auto_grant

    @auto_grant.setter
    def auto_grant(self, value: Optional[bool]) -> None:
        self._gate.auto_grant = value

    @property
    def capturing(self) -> bool:
        with self._lock:
            return bool(self._taps)

    def request_permission(self, callback: PermissionCallback) -> None:
        self._gate.request(callback)

    def grant(self) -> int:
        return self._gate.resolve(True)

    def deny(self) -> int:
        return self._gate.resolve(False)

    def start_capture(
        self, buffer_size: int, callback: Callable[[np.ndarray], None]
    ) -> Unsubscribe:
        if self.sample_rate <= 0:
            raise SourceStartError("Invalid audio format")
        if self.fail_start:
            raise SourceStartError("Audio engine failed to start")
        with self._lock:
            self._taps.append(callback)

        def stop() -> None:
            with self._lock:
                if callback in self._taps:
                    self._taps.remove(callback)

        return stop

    def feed(self, samples) -> None:
        buffer = np.asarray(samples, dtype=np.float32)
        with self._lock:
            taps = list(self._taps)
        for tap in taps:
            tap(buffer)

    def feed_tone(self, amplitude: float, frames: int = 1024) -> None:
        """Feed a sine buffer whose RMS is amplitude / sqrt(2)."""
        t = np.arange(frames, dtype=np.float32)
        self.feed(amplitude * np.sin(2 * np.pi * 440.0 * t / self.sample_rate))


class SimulatedSpeechRecognizer:
    """Speech recognizer whose transcripts come from speak()."""

    def __init__(self, auto_authorize: Optional[bool] = True, available: bool = True):
        self._gate = _PermissionGate(auto_authorize)
        self._available = available
        self._lock = threading.Lock()
        self._task: Optional[tuple] = None
        self.tasks_started = 0

    @property
    def available(self) -> bool:
        return self._available

    @available.setter
    def available(self, value: bool) -> None:
        self._available = value

    @property
    def auto_authorize(self) -> Optional[bool]:
        return self._gate.auto_grant

    @auto_authorize.setter
    def auto_authorize(self, value: Optional[bool]) -> None:
        self._gate.auto_grant = value

    @property
    def listening(self) -> bool:
        with self._lock:
            return self._task is not None

    def request_authorization(self, callback: PermissionCallback) -> None:
        self._gate.request(callback)

    def authorize(self) -> int:
        return self._gate.resolve(True)

    def start_task(
        self,
        on_result: Callable[[str, bool], None],
        on_error: Callable[[Exception], None],
    ) -> Unsubscribe:
        if not self._available:
            raise HardwareUnavailableError("Speech recognizer not available")
        task = (on_result, on_error)
        with self._lock:
            self._task = task
            self.tasks_started += 1

        def cancel() -> None:
            with self._lock:
                if self._task is task:
                    self._task = None

        return cancel

    def speak(self, text: str, final: bool = False) -> None:
        """Deliver a (partial or final) transcript to the running task."""
        with self._lock:
            task = self._task
        if task is not None:
            task[0](text, final)

    def fail(self, error: Exception) -> None:
        with self._lock:
            task = self._task
        if task is not None:
            task[1](error)


class SimulatedBattery:
    def __init__(
        self,
        center: SimulatedNotificationCenter,
        state: BatteryState = BatteryState.UNPLUGGED,
        level: float = 0.8,
    ):
        self._center = center
        self._state = state
        self._level = level
        self.monitoring_enabled = False

    @property
    def state(self) -> BatteryState:
        return self._state if self.monitoring_enabled else BatteryState.UNKNOWN

    @property
    def level(self) -> float:
        return self._level if self.monitoring_enabled else -1.0

    def set_state(self, state: BatteryState) -> None:
        self._state = state
        self._center.post(PlatformNotification.BATTERY_STATE_DID_CHANGE)

    def set_level(self, level: float) -> None:
        self._level = level


class SimulatedScreen:
    def __init__(self, center: SimulatedNotificationCenter, brightness: float = 0.5, is_dark: bool = False):
        self._center = center
        self.brightness = brightness
        self._is_dark = is_dark

    @property
    def is_dark(self) -> bool:
        return self._is_dark

    def set_dark(self, is_dark: bool) -> None:
        self._is_dark = is_dark
        self._center.post(PlatformNotification.TRAIT_COLLECTION_DID_CHANGE, is_dark=is_dark)


class SimulatedDevice:
    def __init__(
        self,
        center: SimulatedNotificationCenter,
        name: str = "iPhone",
        orientation: DeviceOrientation = DeviceOrientation.PORTRAIT,
        language_code: str = "en",
    ):
        self._center = center
        self.name = name
        self._orientation = orientation
        self._low_power = False
        self._language = language_code
        self._voice_over = False
        self.orientation_observers = 0
        self.announcements: List[str] = []

    @property
    def orientation(self) -> DeviceOrientation:
        return self._orientation

    @property
    def low_power_mode(self) -> bool:
        return self._low_power

    @property
    def language_code(self) -> str:
        return self._language

    @property
    def voice_over_running(self) -> bool:
        return self._voice_over

    def begin_orientation_notifications(self) -> None:
        self.orientation_observers += 1

    def end_orientation_notifications(self) -> None:
        self.orientation_observers = max(0, self.orientation_observers - 1)

    def announce(self, message: str) -> None:
        self.announcements.append(message)

    def rotate(self, orientation: DeviceOrientation) -> None:
        self._orientation = orientation
        self._center.post(PlatformNotification.ORIENTATION_DID_CHANGE)

    def set_low_power(self, enabled: bool) -> None:
        self._low_power = enabled
        self._center.post(PlatformNotification.POWER_STATE_DID_CHANGE)

    def set_language(self, code: str) -> None:
        self._language = code
        self._center.post(PlatformNotification.LOCALE_DID_CHANGE)

    def set_voice_over(self, running: bool) -> None:
        self._voice_over = running
        self._center.post(PlatformNotification.VOICE_OVER_STATUS_DID_CHANGE)


class SimulatedPasteboard:
    def __init__(self):
        self._lock = threading.Lock()
        self._change_count = 0
        self._string: Optional[str] = None
        self._has_images = False

    @property
    def change_count(self) -> int:
        with self._lock:
            return self._change_count

    @property
    def string(self) -> Optional[str]:
        with self._lock:
            return self._string

    @property
    def has_images(self) -> bool:
        with self._lock:
            return self._has_images

    def copy(self, text: str) -> None:
        with self._lock:
            self._string = text
            self._has_images = False
            self._change_count += 1

    def copy_image(self) -> None:
        with self._lock:
            self._string = None
            self._has_images = True
            self._change_count += 1


class SimulatedPathMonitor:
    """Path monitor; start() delivers the current path immediately."""

    def __init__(self, path: Optional[NetworkPath] = None):
        self._lock = threading.Lock()
        self._path = path or NetworkPath()
        self._callbacks: List[Callable[[NetworkPath], None]] = []

    @property
    def monitoring(self) -> bool:
        with self._lock:
            return bool(self._callbacks)

    def start(self, callback: Callable[[NetworkPath], None]) -> Unsubscribe:
        with self._lock:
            self._callbacks.append(callback)
            current = self._path
        callback(current)

        def cancel() -> None:
            with self._lock:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)

        return cancel

    def update(self, path: NetworkPath) -> None:
        with self._lock:
            self._path = path
            callbacks = list(self._callbacks)
        for callback in callbacks:
            callback(path)

    def airplane_mode(self) -> None:
        self.update(NetworkPath(uses_wifi=False, uses_cellular=False, satisfied=False))


class SimulatedUserNotificationCenter:
    """Local notifications; tap() simulates the player opening one."""

    def __init__(self, center: SimulatedNotificationCenter, auto_grant: Optional[bool] = True):
        self._center = center
        self._gate = _PermissionGate(auto_grant)
        self.settings = NotificationSettings()
        self.fail_add = False
        self._lock = threading.Lock()
        self.pending: Dict[str, NotificationRequest] = {}

    @property
    def auto_grant(self) -> Optional[bool]:
        return self._gate.auto_grant

    @auto_grant.setter
    def auto_grant(self, value: Optional[bool]) -> None:
        self._gate.auto_grant = value

    def request_authorization(self, callback: PermissionCallback) -> None:
        self._gate.request(callback)

    def grant(self) -> int:
        return self._gate.resolve(True)

    def deny(self) -> int:
        return self._gate.resolve(False)

    def get_settings(self, callback: Callable[[NotificationSettings], None]) -> None:
        callback(self.settings)

    def add(
        self,
        request: NotificationRequest,
        completion: Callable[[Optional[Exception]], None],
    ) -> None:
        if self.fail_add:
            completion(RuntimeError("Notification scheduling failed"))
            return
        with self._lock:
            self.pending[request.identifier] = request
        completion(None)

    def remove_all_pending(self) -> None:
        with self._lock:
            self.pending.clear()

    def tap(self, identifier: str) -> None:
        with self._lock:
            self.pending.pop(identifier, None)
        self._center.post(PlatformNotification.NOTIFICATION_TAPPED, notification_id=identifier)


class SimulatedBiometricContext:
    def __init__(self, owner: "SimulatedBiometrics"):
        self._owner = owner
        self.invalidated = False

    def can_evaluate(self) -> bool:
        return self._owner.available and not self.invalidated

    @property
    def biometry_type(self) -> str:
        return self._owner.biometry_type if self._owner.available else "none"

    def evaluate(self, reason: str, callback: Callable[[bool], None]) -> None:
        self._owner._evaluate(self, reason, callback)

    def invalidate(self) -> None:
        self.invalidated = True


class SimulatedBiometrics:
    """
    Face ID stand-in.

    auto_result True/False answers immediately; None leaves the
    evaluation pending until succeed() or fail().
    """

    def __init__(self, available: bool = True, auto_result: Optional[bool] = True):
        self.available = available
        self.auto_result = auto_result
        self.biometry_type = "face_id"
        self.reasons: List[str] = []
        self._lock = threading.Lock()
        self._pending: List[tuple] = []

    def create_context(self) -> SimulatedBiometricContext:
        return SimulatedBiometricContext(self)

    def _evaluate(self, context, reason: str, callback: Callable[[bool], None]) -> None:
        with self._lock:
            self.reasons.append(reason)
            if self.auto_result is None:
                self._pending.append((context, callback))
                return
        callback(bool(self.auto_result) and not context.invalidated)

    def _resolve(self, success: bool) -> int:
        with self._lock:
            pending, self._pending = self._pending, []
        for context, callback in pending:
            callback(success and not context.invalidated)
        return len(pending)

    def succeed(self) -> int:
        return self._resolve(True)

    def fail(self) -> int:
        return self._resolve(False)


class MemoryKeyValueStore:
    """Dictionary-backed durable store (local defaults or cloud key-value)."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._lock = threading.Lock()
        self._data: Dict[str, Any] = dict(initial or {})
        self.sync_count = 0

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._data.get(key, default)

    def get_bool(self, key: str) -> bool:
        return bool(self.get(key, False))

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def synchronize(self) -> None:
        self.sync_count += 1

    def clear(self) -> None:
        """Wipe everything (what deleting the app does to local storage)."""
        with self._lock:
            self._data.clear()


class FixedClock:
    """Wall clock that only changes when told to."""

    def __init__(self, when: Optional[datetime] = None):
        self.current = when or datetime(2025, 1, 1, 12, 0)

    def now(self) -> datetime:
        return self.current

    def set(self, when: datetime) -> None:
        self.current = when


class SystemClock:
    def now(self) -> datetime:
        return datetime.now()


# =============================================================================
# Platform bundle
# =============================================================================

@dataclass
class SimulatedPlatform:
    """All simulated sources wired to one notification center."""

    notifications: SimulatedNotificationCenter
    accelerometer: SimulatedAccelerometer
    audio: SimulatedAudioInput
    speech: SimulatedSpeechRecognizer
    battery: SimulatedBattery
    screen: SimulatedScreen
    device: SimulatedDevice
    pasteboard: SimulatedPasteboard
    network: SimulatedPathMonitor
    user_notifications: SimulatedUserNotificationCenter
    biometrics: SimulatedBiometrics
    cloud_store: MemoryKeyValueStore
    local_store: MemoryKeyValueStore
    clock: FixedClock
    cache_dir: Path

    @classmethod
    def create(cls, cache_dir: Optional[Path] = None) -> "SimulatedPlatform":
        center = SimulatedNotificationCenter()
        if cache_dir is None:
            cache_dir = Path(tempfile.mkdtemp(prefix="glitched-cache-"))
        return cls(
            notifications=center,
            accelerometer=SimulatedAccelerometer(),
            audio=SimulatedAudioInput(),
            speech=SimulatedSpeechRecognizer(),
            battery=SimulatedBattery(center),
            screen=SimulatedScreen(center),
            device=SimulatedDevice(center),
            pasteboard=SimulatedPasteboard(),
            network=SimulatedPathMonitor(),
            user_notifications=SimulatedUserNotificationCenter(center),
            biometrics=SimulatedBiometrics(),
            cloud_store=MemoryKeyValueStore(),
            local_store=MemoryKeyValueStore(),
            clock=FixedClock(),
            cache_dir=Path(cache_dir),
        )

    # Lifecycle broadcasts, in the order the OS sends them

    def enter_background(self) -> None:
        self.notifications.post(PlatformNotification.WILL_RESIGN_ACTIVE)
        self.notifications.post(PlatformNotification.DID_ENTER_BACKGROUND)

    def enter_foreground(self) -> None:
        self.notifications.post(PlatformNotification.WILL_ENTER_FOREGROUND)
        self.notifications.post(PlatformNotification.DID_BECOME_ACTIVE)

    def resign_active(self) -> None:
        self.notifications.post(PlatformNotification.WILL_RESIGN_ACTIVE)

    def become_active(self) -> None:
        self.notifications.post(PlatformNotification.DID_BECOME_ACTIVE)

    def take_screenshot(self) -> None:
        self.notifications.post(PlatformNotification.SCREENSHOT_TAKEN)

    def reinstall(self) -> None:
        """Delete and reinstall: local storage is wiped, the cloud store survives."""
        self.local_store.clear()


__all__ = [
    "Unsubscribe",
    "PermissionCallback",
    "PlatformNotification",
    "BatteryState",
    "DeviceOrientation",
    "NetworkPath",
    "NotificationSettings",
    "NotificationRequest",
    "NotificationCenter",
    "Accelerometer",
    "AudioInput",
    "SpeechRecognizer",
    "Battery",
    "Screen",
    "Device",
    "Pasteboard",
    "PathMonitor",
    "UserNotificationCenter",
    "BiometricContext",
    "Biometrics",
    "KeyValueStore",
    "WallClock",
    "SimulatedNotificationCenter",
    "SimulatedAccelerometer",
    "SimulatedAudioInput",
    "SimulatedSpeechRecognizer",
    "SimulatedBattery",
    "SimulatedScreen",
    "SimulatedDevice",
    "SimulatedPasteboard",
    "SimulatedPathMonitor",
    "SimulatedUserNotificationCenter",
    "SimulatedBiometricContext",
    "SimulatedBiometrics",
    "MemoryKeyValueStore",
    "FixedClock",
    "SystemClock",
    "SimulatedPlatform",
]
