"""
Glitched Sense: hardware signal layer for a device-puzzle game

Turns phone hardware and OS state (motion, microphone, battery, clipboard,
network, notifications, biometrics, ...) into one ordered stream of
gameplay events, and decides per mechanic whether the hardware path or an
on-screen substitute is used.

Components:
- mechanics: closed taxonomy of gameplay capabilities
- events: immutable input events
- event_bus: thread-marshaling publish/subscribe relay
- provider / providers: one provider per hardware source
- fallback: hardware vs. manual decision engine
- coordinator: activates exactly the providers a level needs
- runtime: the explicitly constructed context owning all of the above

Example usage:

    from glitched_sense import SignalRuntime, Mechanic

    with SignalRuntime.create() as runtime:
        sub = runtime.subscribe()
        runtime.configure({Mechanic.SHAKE})
        runtime.pump()
        for event in sub:
            print(event.to_dict())

CLI:
    glitched-sense --list
    glitched-sense --mechanics shake microphone
"""

__version__ = "0.1.0"
__author__ = "Glitched Team"

from .config import SignalConfig, get_config, load_config, set_config
from .coordinator import DeviceCoordinator, LifecycleHooks
from .errors import HardwareUnavailableError, PermissionDeniedError, SignalError, SourceStartError
from .event_bus import InputEventBus, Subscription
from .events import EventKind, InputEvent, event_from_dict
from .fallback import FallbackPolicy
from .manual import ManualInput
from .mechanics import Mechanic, MechanicGroup, parse_mechanics
from .platform import SimulatedPlatform
from .provider import DeviceProvider, ProviderBase
from .runtime import SignalRuntime, build_providers
from .settings import PlayerSettings, SettingsStore
from .timers import ManualScheduler, ThreadScheduler

__all__ = [
    "__version__",
    "SignalConfig",
    "get_config",
    "load_config",
    "set_config",
    "DeviceCoordinator",
    "LifecycleHooks",
    "SignalError",
    "HardwareUnavailableError",
    "PermissionDeniedError",
    "SourceStartError",
    "InputEventBus",
    "Subscription",
    "EventKind",
    "InputEvent",
    "event_from_dict",
    "FallbackPolicy",
    "ManualInput",
    "Mechanic",
    "MechanicGroup",
    "parse_mechanics",
    "SimulatedPlatform",
    "DeviceProvider",
    "ProviderBase",
    "SignalRuntime",
    "build_providers",
    "PlayerSettings",
    "SettingsStore",
    "ManualScheduler",
    "ThreadScheduler",
]
