"""
Concrete device providers, one per platform source.

    from glitched_sense.providers import MotionProvider, ClipboardProvider
"""

from .audio import MicrophoneProvider, VoiceCommandProvider
from .auth import AuthenticationProvider
from .display import AppearanceProvider, BrightnessProvider, OrientationProvider, ScreenshotProvider
from .lifecycle import AppSwitcherProvider, BackgroundTimeProvider, ReinstallProvider
from .motion import MotionProvider, ShakeUndoProvider
from .network import NetworkProvider
from .notifications import FocusModeProvider, NotificationProvider
from .power import BatteryLevelProvider, BatteryProvider, PowerModeProvider
from .sharing import AirDropProvider
from .system import (
    ClipboardProvider,
    DeviceNameProvider,
    LocaleProvider,
    StorageSpaceProvider,
    TimeOfDayProvider,
    VoiceOverProvider,
)

__all__ = [
    "MicrophoneProvider",
    "MotionProvider",
    "ShakeUndoProvider",
    "BatteryProvider",
    "BatteryLevelProvider",
    "BrightnessProvider",
    "ScreenshotProvider",
    "AppearanceProvider",
    "OrientationProvider",
    "BackgroundTimeProvider",
    "AppSwitcherProvider",
    "NotificationProvider",
    "ClipboardProvider",
    "NetworkProvider",
    "FocusModeProvider",
    "PowerModeProvider",
    "AuthenticationProvider",
    "ReinstallProvider",
    "VoiceCommandProvider",
    "DeviceNameProvider",
    "StorageSpaceProvider",
    "TimeOfDayProvider",
    "LocaleProvider",
    "VoiceOverProvider",
    "AirDropProvider",
]
