"""
Manual Input - the fallback path
================================

When `FallbackPolicy.needs_fallback_ui(m)` is true, the UI shows a manual
control for `m`. Pressing it goes through ManualInput.trigger(), which posts
the same event type the hardware provider would have posted. Consumers
cannot tell the two apart.

    manual = ManualInput(bus, policy)
    for mechanic in manual.affordances():
        ...                                   # render a button per mechanic
    manual.trigger(Mechanic.SHAKE)            # -> ShakeDetected()
    manual.trigger(Mechanic.MICROPHONE, power=0.8)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Type

from .event_bus import InputEventBus
from .events import (
    AirdropReceived,
    AirplaneModeChanged,
    AppSwitcherPeeked,
    BatteryLevelChanged,
    BrightnessChanged,
    ClipboardUpdated,
    ClockTimeUpdate,
    DarkModeChanged,
    DeviceCharging,
    DeviceNameRead,
    FaceIdResult,
    FocusModeChanged,
    GyroChanged,
    HapticPatternMatched,
    HudDragCompleted,
    InputEvent,
    LocaleChanged,
    LowPowerModeChanged,
    MicLevelChanged,
    MultiTouch,
    NotificationTapped,
    OrientationChanged,
    ProximityFlipped,
    ScreenshotTaken,
    ShakeDetected,
    ShakeUndoTriggered,
    SpeechRecognized,
    StorageCacheCleared,
    TimedPressEnded,
    TimePassageSimulated,
    VoiceCommandRecognized,
    VoiceOverStateChanged,
    VolumeChanged,
    WifiStateChanged,
)
from .fallback import FallbackPolicy
from .mechanics import Mechanic

logger = logging.getLogger(__name__)


# Event posted by each mechanic's on-screen substitute. app_deletion has no
# substitute: a reinstall cannot be faked from inside the app.
MANUAL_EVENTS: Dict[Mechanic, Type[InputEvent]] = {
    Mechanic.DRAG_HUD: HudDragCompleted,
    Mechanic.MICROPHONE: MicLevelChanged,
    Mechanic.SHAKE: ShakeDetected,
    Mechanic.VOLUME: VolumeChanged,
    Mechanic.BRIGHTNESS: BrightnessChanged,
    Mechanic.CHARGING: DeviceCharging,
    Mechanic.SCREENSHOT: ScreenshotTaken,
    Mechanic.DARK_MODE: DarkModeChanged,
    Mechanic.ORIENTATION: OrientationChanged,
    Mechanic.APP_BACKGROUNDING: TimePassageSimulated,
    Mechanic.NOTIFICATION: NotificationTapped,
    Mechanic.CLIPBOARD: ClipboardUpdated,
    Mechanic.WIFI: WifiStateChanged,
    Mechanic.FOCUS_MODE: FocusModeChanged,
    Mechanic.LOW_POWER_MODE: LowPowerModeChanged,
    Mechanic.SHAKE_UNDO: ShakeUndoTriggered,
    Mechanic.APP_SWITCHER: AppSwitcherPeeked,
    Mechanic.FACE_ID: FaceIdResult,
    Mechanic.AIRPLANE_MODE: AirplaneModeChanged,
    Mechanic.VOICE_COMMAND: VoiceCommandRecognized,
    Mechanic.BATTERY_LEVEL: BatteryLevelChanged,
    Mechanic.DEVICE_NAME: DeviceNameRead,
    Mechanic.STORAGE_SPACE: StorageCacheCleared,
    Mechanic.TIME_OF_DAY: ClockTimeUpdate,
    Mechanic.LOCALE: LocaleChanged,
    Mechanic.VOICE_OVER: VoiceOverStateChanged,
    Mechanic.AIRDROP: AirdropReceived,
    Mechanic.PROXIMITY: ProximityFlipped,
    Mechanic.TIMED_PRESS: TimedPressEnded,
    Mechanic.HAPTIC_PATTERN: HapticPatternMatched,
    Mechanic.CLOCK_TIME: ClockTimeUpdate,
    Mechanic.GYRO_SHADOW: GyroChanged,
    Mechanic.SPEECH: SpeechRecognized,
    Mechanic.MULTI_TOUCH: MultiTouch,
}


class ManualInput:
    """UI-side substitute for hardware providers."""

    def __init__(self, bus: InputEventBus, policy: FallbackPolicy):
        self.bus = bus
        self.policy = policy

    def affordances(self) -> List[Mechanic]:
        """Active mechanics that need a manual control, in declaration order."""
        needed = self.policy.fallback_mechanics()
        return [m for m in Mechanic if m in needed]

    def has_manual_control(self, mechanic: Mechanic) -> bool:
        return mechanic in MANUAL_EVENTS

    def build(self, mechanic: Mechanic, **payload: Any) -> InputEvent:
        """Construct the event a manual control for `mechanic` posts."""
        mechanic = Mechanic(mechanic)
        cls = MANUAL_EVENTS.get(mechanic)
        if cls is None:
            raise ValueError(f"No manual control for mechanic: {mechanic.value}")
        try:
            return cls(**payload)
        except TypeError as e:
            raise ValueError(f"Bad payload for {cls.__name__}: {e}") from e

    def trigger(self, mechanic: Mechanic, **payload: Any) -> InputEvent:
        """Post the substitute event for `mechanic` and return it."""
        event = self.build(mechanic, **payload)
        logger.debug(f"Manual {Mechanic(mechanic).value}: {event.to_dict()}")
        self.bus.post(event)
        return event


__all__ = [
    "MANUAL_EVENTS",
    "ManualInput",
]
