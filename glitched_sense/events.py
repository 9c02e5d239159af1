"""
Input Event Model
=================

Every signal that reaches gameplay code is one of the immutable event
classes below. Each class carries:

    kind     - the tag (EventKind), one per semantic signal
    mechanic - the mechanic the signal belongs to (None for standard inputs)
    payload  - plain value fields (bools, floats, strings, counts, points)

Events never carry provider identity. A shake posted by MotionProvider and
a shake posted by an on-screen fallback button are the same value.

Usage:
    from glitched_sense.events import MicLevelChanged

    event = MicLevelChanged(power=0.42)
    event.kind       # EventKind.MIC_LEVEL_CHANGED
    event.mechanic   # Mechanic.MICROPHONE
    event.to_dict()  # {"kind": "mic_level_changed", "power": 0.42}
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple, Type

from .mechanics import Mechanic


Point = Tuple[float, float]


class EventKind(str, Enum):
    """Tags for the closed set of input events."""

    # Standard inputs
    JUMP_PRESSED = "jump_pressed"
    MOVE_DIRECTION = "move_direction"

    # Hardware/OS inputs
    SHAKE_DETECTED = "shake_detected"
    MIC_LEVEL_CHANGED = "mic_level_changed"
    VOLUME_CHANGED = "volume_changed"
    BRIGHTNESS_CHANGED = "brightness_changed"
    DEVICE_CHARGING = "device_charging"
    SCREENSHOT_TAKEN = "screenshot_taken"
    DARK_MODE_CHANGED = "dark_mode_changed"
    ORIENTATION_CHANGED = "orientation_changed"
    APP_BACKGROUNDED = "app_backgrounded"
    APP_FOREGROUNDED = "app_foregrounded"
    TIME_PASSAGE_SIMULATED = "time_passage_simulated"
    CLIPBOARD_UPDATED = "clipboard_updated"
    CLIPBOARD_IMAGE_DETECTED = "clipboard_image_detected"
    NOTIFICATION_RECEIVED = "notification_received"
    NOTIFICATION_TAPPED = "notification_tapped"
    PROXIMITY_FLIPPED = "proximity_flipped"
    TIMED_PRESS_BEGAN = "timed_press_began"
    TIMED_PRESS_ENDED = "timed_press_ended"
    HAPTIC_PATTERN_MATCHED = "haptic_pattern_matched"
    CLOCK_TIME_UPDATE = "clock_time_update"
    GYRO_CHANGED = "gyro_changed"
    SPEECH_RECOGNIZED = "speech_recognized"
    MULTI_TOUCH = "multi_touch"
    WIFI_STATE_CHANGED = "wifi_state_changed"
    AIRPLANE_MODE_CHANGED = "airplane_mode_changed"
    FOCUS_MODE_CHANGED = "focus_mode_changed"
    LOW_POWER_MODE_CHANGED = "low_power_mode_changed"
    SHAKE_UNDO_TRIGGERED = "shake_undo_triggered"
    APP_SWITCHER_PEEKED = "app_switcher_peeked"
    FACE_ID_RESULT = "face_id_result"
    APP_REINSTALL_DETECTED = "app_reinstall_detected"
    VOICE_COMMAND_RECOGNIZED = "voice_command_recognized"
    BATTERY_LEVEL_CHANGED = "battery_level_changed"
    DEVICE_NAME_READ = "device_name_read"
    STORAGE_CACHE_CLEARED = "storage_cache_cleared"
    LOCALE_CHANGED = "locale_changed"
    VOICE_OVER_STATE_CHANGED = "voice_over_state_changed"
    AIRDROP_RECEIVED = "airdrop_received"

    # HUD interaction
    HUD_DRAG_COMPLETED = "hud_drag_completed"


_REGISTRY: Dict[EventKind, Type["InputEvent"]] = {}


@dataclass(frozen=True)
class InputEvent:
    """Base class for all input events."""

    kind: ClassVar[EventKind]
    mechanic: ClassVar[Optional[Mechanic]] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        kind = cls.__dict__.get("kind")
        if kind is not None:
            _REGISTRY[kind] = cls

    def payload(self) -> Dict[str, Any]:
        return asdict(self)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, **self.payload()}


# =============================================================================
# Standard inputs
# =============================================================================

@dataclass(frozen=True)
class JumpPressed(InputEvent):
    kind: ClassVar[EventKind] = EventKind.JUMP_PRESSED


@dataclass(frozen=True)
class MoveDirection(InputEvent):
    kind: ClassVar[EventKind] = EventKind.MOVE_DIRECTION
    dx: float = 0.0                    # -1 (left) .. 1 (right)


@dataclass(frozen=True)
class HudDragCompleted(InputEvent):
    kind: ClassVar[EventKind] = EventKind.HUD_DRAG_COMPLETED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.DRAG_HUD
    element_id: str = ""
    screen_position: Point = (0.0, 0.0)


# =============================================================================
# World 1: Hardware Awakening
# =============================================================================

@dataclass(frozen=True)
class ShakeDetected(InputEvent):
    kind: ClassVar[EventKind] = EventKind.SHAKE_DETECTED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.SHAKE


@dataclass(frozen=True)
class GyroChanged(InputEvent):
    kind: ClassVar[EventKind] = EventKind.GYRO_CHANGED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.GYRO_SHADOW
    tilt_x: float = 0.0
    tilt_y: float = 0.0


@dataclass(frozen=True)
class MicLevelChanged(InputEvent):
    kind: ClassVar[EventKind] = EventKind.MIC_LEVEL_CHANGED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.MICROPHONE
    power: float = 0.0                 # Normalized 0..1


@dataclass(frozen=True)
class VolumeChanged(InputEvent):
    kind: ClassVar[EventKind] = EventKind.VOLUME_CHANGED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.VOLUME
    level: float = 0.0


@dataclass(frozen=True)
class BrightnessChanged(InputEvent):
    kind: ClassVar[EventKind] = EventKind.BRIGHTNESS_CHANGED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.BRIGHTNESS
    level: float = 0.0


@dataclass(frozen=True)
class DeviceCharging(InputEvent):
    kind: ClassVar[EventKind] = EventKind.DEVICE_CHARGING
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.CHARGING
    is_plugged: bool = False


@dataclass(frozen=True)
class ScreenshotTaken(InputEvent):
    kind: ClassVar[EventKind] = EventKind.SCREENSHOT_TAKEN
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.SCREENSHOT


@dataclass(frozen=True)
class DarkModeChanged(InputEvent):
    kind: ClassVar[EventKind] = EventKind.DARK_MODE_CHANGED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.DARK_MODE
    is_dark: bool = False


@dataclass(frozen=True)
class OrientationChanged(InputEvent):
    kind: ClassVar[EventKind] = EventKind.ORIENTATION_CHANGED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.ORIENTATION
    is_landscape: bool = False


@dataclass(frozen=True)
class AppBackgrounded(InputEvent):
    kind: ClassVar[EventKind] = EventKind.APP_BACKGROUNDED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.APP_BACKGROUNDING
    delta_time: float = 0.0            # Seconds spent in background


@dataclass(frozen=True)
class AppForegrounded(InputEvent):
    kind: ClassVar[EventKind] = EventKind.APP_FOREGROUNDED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.APP_BACKGROUNDING


@dataclass(frozen=True)
class TimePassageSimulated(InputEvent):
    kind: ClassVar[EventKind] = EventKind.TIME_PASSAGE_SIMULATED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.APP_BACKGROUNDING
    years: float = 0.0


# =============================================================================
# World 2: Control Surface
# =============================================================================

@dataclass(frozen=True)
class NotificationReceived(InputEvent):
    kind: ClassVar[EventKind] = EventKind.NOTIFICATION_RECEIVED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.NOTIFICATION
    notification_id: str = ""


@dataclass(frozen=True)
class NotificationTapped(InputEvent):
    kind: ClassVar[EventKind] = EventKind.NOTIFICATION_TAPPED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.NOTIFICATION
    notification_id: str = ""
    is_correct: bool = False


@dataclass(frozen=True)
class ClipboardUpdated(InputEvent):
    kind: ClassVar[EventKind] = EventKind.CLIPBOARD_UPDATED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.CLIPBOARD
    value: Optional[str] = None


@dataclass(frozen=True)
class ClipboardImageDetected(InputEvent):
    kind: ClassVar[EventKind] = EventKind.CLIPBOARD_IMAGE_DETECTED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.CLIPBOARD
    matches_pattern: bool = False


@dataclass(frozen=True)
class WifiStateChanged(InputEvent):
    kind: ClassVar[EventKind] = EventKind.WIFI_STATE_CHANGED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.WIFI
    is_enabled: bool = False


@dataclass(frozen=True)
class AirplaneModeChanged(InputEvent):
    kind: ClassVar[EventKind] = EventKind.AIRPLANE_MODE_CHANGED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.AIRPLANE_MODE
    is_enabled: bool = False


@dataclass(frozen=True)
class FocusModeChanged(InputEvent):
    kind: ClassVar[EventKind] = EventKind.FOCUS_MODE_CHANGED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.FOCUS_MODE
    is_enabled: bool = False


@dataclass(frozen=True)
class LowPowerModeChanged(InputEvent):
    kind: ClassVar[EventKind] = EventKind.LOW_POWER_MODE_CHANGED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.LOW_POWER_MODE
    is_enabled: bool = False


@dataclass(frozen=True)
class ShakeUndoTriggered(InputEvent):
    kind: ClassVar[EventKind] = EventKind.SHAKE_UNDO_TRIGGERED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.SHAKE_UNDO


@dataclass(frozen=True)
class AppSwitcherPeeked(InputEvent):
    kind: ClassVar[EventKind] = EventKind.APP_SWITCHER_PEEKED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.APP_SWITCHER
    duration: float = 0.0


@dataclass(frozen=True)
class FaceIdResult(InputEvent):
    kind: ClassVar[EventKind] = EventKind.FACE_ID_RESULT
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.FACE_ID
    recognized: bool = False


@dataclass(frozen=True)
class AppReinstallDetected(InputEvent):
    kind: ClassVar[EventKind] = EventKind.APP_REINSTALL_DETECTED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.APP_DELETION


# =============================================================================
# World 3: Data Corruption
# =============================================================================

@dataclass(frozen=True)
class VoiceCommandRecognized(InputEvent):
    kind: ClassVar[EventKind] = EventKind.VOICE_COMMAND_RECOGNIZED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.VOICE_COMMAND
    command: str = ""


@dataclass(frozen=True)
class BatteryLevelChanged(InputEvent):
    kind: ClassVar[EventKind] = EventKind.BATTERY_LEVEL_CHANGED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.BATTERY_LEVEL
    percentage: float = 0.0            # 0..100


@dataclass(frozen=True)
class DeviceNameRead(InputEvent):
    kind: ClassVar[EventKind] = EventKind.DEVICE_NAME_READ
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.DEVICE_NAME
    name: str = ""


@dataclass(frozen=True)
class StorageCacheCleared(InputEvent):
    kind: ClassVar[EventKind] = EventKind.STORAGE_CACHE_CLEARED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.STORAGE_SPACE


@dataclass(frozen=True)
class ClockTimeUpdate(InputEvent):
    kind: ClassVar[EventKind] = EventKind.CLOCK_TIME_UPDATE
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.TIME_OF_DAY
    hour: int = 0                      # 0..23


# =============================================================================
# World 4: Reality Break
# =============================================================================

@dataclass(frozen=True)
class LocaleChanged(InputEvent):
    kind: ClassVar[EventKind] = EventKind.LOCALE_CHANGED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.LOCALE
    language: str = "en"


@dataclass(frozen=True)
class VoiceOverStateChanged(InputEvent):
    kind: ClassVar[EventKind] = EventKind.VOICE_OVER_STATE_CHANGED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.VOICE_OVER
    is_enabled: bool = False


@dataclass(frozen=True)
class AirdropReceived(InputEvent):
    kind: ClassVar[EventKind] = EventKind.AIRDROP_RECEIVED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.AIRDROP
    code: str = ""


# =============================================================================
# Utility
# =============================================================================

@dataclass(frozen=True)
class ProximityFlipped(InputEvent):
    kind: ClassVar[EventKind] = EventKind.PROXIMITY_FLIPPED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.PROXIMITY
    is_covered: bool = False


@dataclass(frozen=True)
class TimedPressBegan(InputEvent):
    kind: ClassVar[EventKind] = EventKind.TIMED_PRESS_BEGAN
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.TIMED_PRESS


@dataclass(frozen=True)
class TimedPressEnded(InputEvent):
    kind: ClassVar[EventKind] = EventKind.TIMED_PRESS_ENDED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.TIMED_PRESS
    duration: float = 0.0


@dataclass(frozen=True)
class HapticPatternMatched(InputEvent):
    kind: ClassVar[EventKind] = EventKind.HAPTIC_PATTERN_MATCHED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.HAPTIC_PATTERN
    pattern_id: str = ""


@dataclass(frozen=True)
class SpeechRecognized(InputEvent):
    kind: ClassVar[EventKind] = EventKind.SPEECH_RECOGNIZED
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.SPEECH
    text: str = ""


@dataclass(frozen=True)
class MultiTouch(InputEvent):
    kind: ClassVar[EventKind] = EventKind.MULTI_TOUCH
    mechanic: ClassVar[Optional[Mechanic]] = Mechanic.MULTI_TOUCH
    count: int = 0
    locations: Tuple[Point, ...] = ()


# =============================================================================
# Helpers
# =============================================================================

def _freeze(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def event_class(kind: EventKind) -> Type[InputEvent]:
    """Look up the event class for a tag."""
    return _REGISTRY[EventKind(kind)]


def event_from_dict(data: Dict[str, Any]) -> InputEvent:
    """Rebuild an event from InputEvent.to_dict() output."""
    fields = dict(data)
    cls = event_class(EventKind(fields.pop("kind")))
    return cls(**{k: _freeze(v) for k, v in fields.items()})


def events_for(mechanic: Mechanic) -> Tuple[Type[InputEvent], ...]:
    """All event classes attributed to a mechanic."""
    return tuple(cls for cls in _REGISTRY.values() if cls.mechanic == mechanic)


__all__ = [
    "EventKind",
    "InputEvent",
    "Point",
    "JumpPressed",
    "MoveDirection",
    "HudDragCompleted",
    "ShakeDetected",
    "GyroChanged",
    "MicLevelChanged",
    "VolumeChanged",
    "BrightnessChanged",
    "DeviceCharging",
    "ScreenshotTaken",
    "DarkModeChanged",
    "OrientationChanged",
    "AppBackgrounded",
    "AppForegrounded",
    "TimePassageSimulated",
    "NotificationReceived",
    "NotificationTapped",
    "ClipboardUpdated",
    "ClipboardImageDetected",
    "WifiStateChanged",
    "AirplaneModeChanged",
    "FocusModeChanged",
    "LowPowerModeChanged",
    "ShakeUndoTriggered",
    "AppSwitcherPeeked",
    "FaceIdResult",
    "AppReinstallDetected",
    "VoiceCommandRecognized",
    "BatteryLevelChanged",
    "DeviceNameRead",
    "StorageCacheCleared",
    "ClockTimeUpdate",
    "LocaleChanged",
    "VoiceOverStateChanged",
    "AirdropReceived",
    "ProximityFlipped",
    "TimedPressBegan",
    "TimedPressEnded",
    "HapticPatternMatched",
    "SpeechRecognized",
    "MultiTouch",
    "event_class",
    "event_from_dict",
    "events_for",
]
