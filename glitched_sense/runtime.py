"""
Signal Runtime
==============

One explicitly constructed context that owns everything the signal layer
needs: config, event bus, fallback policy, scheduler, platform sources,
the provider registry and the coordinator. Built once at process start,
passed to whatever needs it, torn down at exit.

Usage:
    with SignalRuntime.create() as runtime:
        sub = runtime.subscribe()
        runtime.configure({Mechanic.SHAKE, Mechanic.MICROPHONE})
        ...
        runtime.pump()
        for event in sub:
            handle(event)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from .config import SignalConfig, get_config
from .coordinator import DeviceCoordinator
from .event_bus import EventHandler, InputEventBus, Subscription
from .fallback import FallbackPolicy
from .manual import ManualInput
from .mechanics import Mechanic
from .platform import SimulatedPlatform
from .provider import ProviderBase
from .providers import (
    AirDropProvider,
    AppearanceProvider,
    AppSwitcherProvider,
    AuthenticationProvider,
    BackgroundTimeProvider,
    BatteryLevelProvider,
    BatteryProvider,
    BrightnessProvider,
    ClipboardProvider,
    DeviceNameProvider,
    FocusModeProvider,
    LocaleProvider,
    MicrophoneProvider,
    MotionProvider,
    NetworkProvider,
    NotificationProvider,
    OrientationProvider,
    PowerModeProvider,
    ReinstallProvider,
    ScreenshotProvider,
    ShakeUndoProvider,
    StorageSpaceProvider,
    TimeOfDayProvider,
    VoiceCommandProvider,
    VoiceOverProvider,
)
from .settings import SettingsStore
from .timers import Scheduler, ThreadScheduler

logger = logging.getLogger(__name__)


def build_providers(
    platform,
    bus: InputEventBus,
    policy: FallbackPolicy,
    scheduler: Scheduler,
    config: SignalConfig,
) -> List[ProviderBase]:
    """Instantiate every provider against `platform`, in registry order."""
    common = dict(bus=bus, policy=policy, scheduler=scheduler, config=config)
    center = platform.notifications

    return [
        # Hardware awakening
        MicrophoneProvider(platform.audio, **common),
        MotionProvider(platform.accelerometer, **common),
        ShakeUndoProvider(platform.accelerometer, **common),
        BatteryProvider(platform.battery, center, **common),
        BatteryLevelProvider(platform.battery, **common),
        BrightnessProvider(platform.screen, **common),
        ScreenshotProvider(center, **common),
        AppearanceProvider(platform.screen, center, **common),
        OrientationProvider(platform.device, center, **common),
        BackgroundTimeProvider(center, **common),
        AppSwitcherProvider(center, **common),
        # Control surface
        NotificationProvider(platform.user_notifications, center, **common),
        ClipboardProvider(platform.pasteboard, **common),
        NetworkProvider(platform.network, **common),
        FocusModeProvider(platform.user_notifications, **common),
        PowerModeProvider(platform.device, center, **common),
        AuthenticationProvider(platform.biometrics, **common),
        ReinstallProvider(platform.cloud_store, platform.local_store, platform.clock, **common),
        # Data corruption
        VoiceCommandProvider(platform.speech, **common),
        DeviceNameProvider(platform.device, **common),
        StorageSpaceProvider(platform.cache_dir, **common),
        TimeOfDayProvider(platform.clock, **common),
        # Reality break
        LocaleProvider(platform.device, center, **common),
        VoiceOverProvider(platform.device, center, **common),
        AirDropProvider(**common),
    ]


class SignalRuntime:
    """Owner of the signal layer for one process."""

    def __init__(
        self,
        config: SignalConfig,
        bus: InputEventBus,
        policy: FallbackPolicy,
        scheduler: Scheduler,
        platform,
        providers: List[ProviderBase],
    ):
        self.config = config
        self.bus = bus
        self.policy = policy
        self.scheduler = scheduler
        self.platform = platform
        self.providers = providers
        self.coordinator = DeviceCoordinator(providers, policy)
        self.manual = ManualInput(bus, policy)
        self._closed = False

    @classmethod
    def create(
        cls,
        config: Optional[SignalConfig] = None,
        platform=None,
        scheduler: Optional[Scheduler] = None,
        settings_store: Optional[SettingsStore] = None,
        bus: Optional[InputEventBus] = None,
    ) -> "SignalRuntime":
        """
        Build the whole layer.

        The hardware-free flag is read once from the settings store;
        `config.hardware_free_override` (e.g. GLITCHED_HARDWARE_FREE) wins
        over the stored value without being written back.
        """
        config = config or get_config()
        store = settings_store or SettingsStore(config.get_settings_path())

        if config.hardware_free_override is not None:
            policy = FallbackPolicy(
                hardware_free_mode=config.hardware_free_override,
                settings_store=store,
            )
        else:
            policy = FallbackPolicy.from_settings(store)

        bus = bus or InputEventBus()
        scheduler = scheduler or ThreadScheduler()
        platform = platform or SimulatedPlatform.create()
        providers = build_providers(platform, bus, policy, scheduler, config)

        logger.info(
            f"Signal runtime ready: {len(providers)} providers, "
            f"hardware_free_mode={policy.hardware_free_mode}"
        )
        return cls(config, bus, policy, scheduler, platform, providers)

    # =========================================================================
    # Delegation
    # =========================================================================

    def configure(self, mechanics: Iterable[Mechanic]) -> None:
        self.coordinator.configure(mechanics)

    def on_suspend(self) -> None:
        self.coordinator.on_suspend()

    def on_resume(self) -> None:
        self.coordinator.on_resume()

    def subscribe(self, handler: Optional[EventHandler] = None) -> Subscription:
        return self.bus.subscribe(handler)

    def pump(self, timeout: float = 0.0) -> int:
        return self.bus.pump(timeout)

    def provider(self, key):
        return self.coordinator.provider(key)

    def status(self) -> Dict[str, Any]:
        return {
            "policy": self.policy.snapshot(),
            "providers": self.coordinator.status(),
            "bus": self.bus.stats(),
        }

    # =========================================================================
    # Teardown
    # =========================================================================

    def shutdown(self) -> None:
        """Deactivate every provider and stop all timers. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self.coordinator.deactivate_all()
        self.scheduler.shutdown()
        logger.info("Signal runtime shut down")

    def __enter__(self) -> "SignalRuntime":
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()


__all__ = [
    "build_providers",
    "SignalRuntime",
]
