"""
Power, display, lifecycle and network provider tests.
"""

import pytest

from glitched_sense.events import (
    AirplaneModeChanged,
    AppBackgrounded,
    AppForegrounded,
    AppReinstallDetected,
    AppSwitcherPeeked,
    BatteryLevelChanged,
    BrightnessChanged,
    DarkModeChanged,
    DeviceCharging,
    LowPowerModeChanged,
    OrientationChanged,
    ScreenshotTaken,
    WifiStateChanged,
)
from glitched_sense.platform import BatteryState, DeviceOrientation, NetworkPath
from glitched_sense.providers import (
    AppSwitcherProvider,
    AppearanceProvider,
    BackgroundTimeProvider,
    BatteryLevelProvider,
    BatteryProvider,
    BrightnessProvider,
    NetworkProvider,
    OrientationProvider,
    PowerModeProvider,
    ReinstallProvider,
    ScreenshotProvider,
)
from glitched_sense.providers.network import is_airplane_mode


# =============================================================================
# Power
# =============================================================================

class TestBattery:
    """Test charging state and battery level."""

    def test_initial_then_transitions(self, platform, common, events):
        provider = BatteryProvider(platform.battery, platform.notifications, **common)
        provider.activate()
        assert platform.battery.monitoring_enabled

        platform.battery.set_state(BatteryState.CHARGING)
        platform.battery.set_state(BatteryState.FULL)
        platform.battery.set_state(BatteryState.UNPLUGGED)

        assert events.drain() == [
            DeviceCharging(is_plugged=False),
            DeviceCharging(is_plugged=True),
            DeviceCharging(is_plugged=False),
        ]

    def test_initial_plugged(self, platform, common, events):
        platform.battery.set_state(BatteryState.FULL)
        provider = BatteryProvider(platform.battery, platform.notifications, **common)
        provider.activate()
        assert events.drain() == [DeviceCharging(is_plugged=True)]

    def test_level_polled(self, platform, common, scheduler, events):
        provider = BatteryLevelProvider(platform.battery, **common)
        provider.activate()

        platform.battery.set_level(0.5)
        scheduler.advance(4.0)
        assert events.drain() == [BatteryLevelChanged(percentage=80.0)]

        scheduler.advance(1.0)
        assert events.drain() == [BatteryLevelChanged(percentage=50.0)]

        scheduler.advance(5.0)
        assert events.drain() == []

    def test_unknown_level_uses_default(self, platform, common):
        provider = BatteryLevelProvider(platform.battery, **common)
        provider.activate()
        platform.battery.set_level(-1.0)
        assert provider.percentage == 75.0

    def test_battery_deactivate_keeps_level_readable(self, platform, common):
        charging = BatteryProvider(platform.battery, platform.notifications, **common)
        level = BatteryLevelProvider(platform.battery, **common)
        charging.activate()
        level.activate()
        charging.deactivate()
        assert level.percentage == 80.0


class TestPowerMode:
    """Test low power mode."""

    def test_initial_then_transitions(self, platform, common, events):
        provider = PowerModeProvider(platform.device, platform.notifications, **common)
        provider.activate()
        platform.device.set_low_power(True)
        platform.device.set_low_power(True)

        assert events.drain() == [
            LowPowerModeChanged(is_enabled=False),
            LowPowerModeChanged(is_enabled=True),
        ]


# =============================================================================
# Display
# =============================================================================

class TestDisplay:
    """Test brightness, screenshots, appearance and orientation."""

    def test_brightness(self, platform, common, scheduler, events):
        provider = BrightnessProvider(platform.screen, **common)
        provider.activate()
        assert events.drain() == [BrightnessChanged(level=0.5)]

        platform.screen.brightness = 0.51
        scheduler.advance(0.1)
        assert events.drain() == []

        platform.screen.brightness = 0.9
        scheduler.advance(0.1)
        assert events.drain() == [BrightnessChanged(level=0.9)]

    def test_screenshot(self, platform, common, events):
        provider = ScreenshotProvider(platform.notifications, **common)
        provider.activate()
        platform.take_screenshot()
        platform.take_screenshot()
        provider.deactivate()
        platform.take_screenshot()

        assert events.drain() == [ScreenshotTaken(), ScreenshotTaken()]

    def test_dark_mode(self, platform, common, events):
        provider = AppearanceProvider(platform.screen, platform.notifications, **common)
        provider.activate()
        platform.screen.set_dark(True)
        provider.handle_trait_change(True)
        provider.handle_trait_change(False)

        assert events.drain() == [
            DarkModeChanged(is_dark=False),
            DarkModeChanged(is_dark=True),
            DarkModeChanged(is_dark=False),
        ]

    def test_trait_change_ignored_when_inactive(self, platform, common, events):
        provider = AppearanceProvider(platform.screen, platform.notifications, **common)
        provider.activate()
        provider.deactivate()
        provider.handle_trait_change(True)
        assert events.drain() == [DarkModeChanged(is_dark=False)]

    def test_orientation(self, platform, common, events):
        provider = OrientationProvider(platform.device, platform.notifications, **common)
        provider.activate()
        assert platform.device.orientation_observers == 1

        platform.device.rotate(DeviceOrientation.LANDSCAPE_LEFT)
        platform.device.rotate(DeviceOrientation.FACE_UP)
        platform.device.rotate(DeviceOrientation.LANDSCAPE_RIGHT)
        platform.device.rotate(DeviceOrientation.PORTRAIT_UPSIDE_DOWN)

        assert events.drain() == [
            OrientationChanged(is_landscape=False),
            OrientationChanged(is_landscape=True),
            OrientationChanged(is_landscape=False),
        ]

        provider.deactivate()
        assert platform.device.orientation_observers == 0

    def test_orientation_starting_face_up(self, platform, common, events):
        platform.device.rotate(DeviceOrientation.FACE_UP)
        provider = OrientationProvider(platform.device, platform.notifications, **common)
        provider.activate()
        assert events.drain() == []


# =============================================================================
# Lifecycle
# =============================================================================

class TestBackgroundTime:
    """Test time spent in the background."""

    def test_round_trip(self, platform, common, scheduler, events):
        provider = BackgroundTimeProvider(platform.notifications, **common)
        provider.activate()

        platform.enter_background()
        scheduler.advance(30.0)
        platform.enter_foreground()

        assert events.drain() == [AppBackgrounded(delta_time=30.0), AppForegrounded()]

    def test_foreground_without_background(self, platform, common, events):
        provider = BackgroundTimeProvider(platform.notifications, **common)
        provider.activate()
        platform.enter_foreground()
        assert events.drain() == [AppForegrounded()]

    def test_timestamp_survives_suspend(self, platform, common, scheduler, events):
        provider = BackgroundTimeProvider(platform.notifications, **common)
        provider.activate()

        platform.enter_background()
        provider.deactivate()
        scheduler.advance(12.0)
        provider.activate()
        platform.enter_foreground()

        assert events.drain() == [AppBackgrounded(delta_time=12.0), AppForegrounded()]


class TestAppSwitcher:
    """Test the peek heuristic."""

    def test_short_resign_is_a_peek(self, platform, common, scheduler, events):
        provider = AppSwitcherProvider(platform.notifications, **common)
        provider.activate()

        platform.resign_active()
        scheduler.advance(1.0)
        platform.become_active()

        assert events.drain() == [AppSwitcherPeeked(duration=1.0)]

    def test_long_resign_is_not(self, platform, common, scheduler, events):
        provider = AppSwitcherProvider(platform.notifications, **common)
        provider.activate()

        platform.resign_active()
        scheduler.advance(3.0)
        platform.become_active()
        assert events.drain() == []

    def test_become_active_alone(self, platform, common, events):
        provider = AppSwitcherProvider(platform.notifications, **common)
        provider.activate()
        platform.become_active()
        assert events.drain() == []


class TestReinstall:
    """Test the durable-flag reinstall protocol."""

    def make(self, platform, common):
        return ReinstallProvider(
            platform.cloud_store, platform.local_store, platform.clock, **common
        )

    def test_full_cycle(self, platform, common, config, events):
        first = self.make(platform, common)
        first.activate()
        assert events.drain() == []

        first.start_deletion_phase()
        assert first.deletion_phase_started
        assert platform.cloud_store.get_bool(config.reinstall.cloud_key)
        first.deactivate()

        platform.reinstall()
        second = self.make(platform, common)
        second.activate()

        assert events.drain() == [AppReinstallDetected()]
        assert not platform.cloud_store.get_bool(config.reinstall.cloud_key)
        assert not second.deletion_phase_started

    def test_flag_without_reinstall(self, platform, common, events):
        provider = self.make(platform, common)
        provider.activate()
        provider.start_deletion_phase()
        provider.deactivate()

        provider.activate()
        assert events.drain() == []

    def test_detected_once(self, platform, common, config, events):
        platform.cloud_store.set(config.reinstall.cloud_key, True)
        provider = self.make(platform, common)
        provider.activate()
        provider.deactivate()
        provider.activate()
        assert events.drain() == [AppReinstallDetected()]


# =============================================================================
# Network
# =============================================================================

class TestNetwork:
    """Test wifi and airplane mode detection."""

    def test_is_airplane_mode(self):
        assert is_airplane_mode(NetworkPath(False, False, False))
        assert not is_airplane_mode(NetworkPath(False, True, True))
        assert not is_airplane_mode(NetworkPath(True, False, False))

    def test_initial_state(self, platform, common, events):
        provider = NetworkProvider(platform.network, **common)
        provider.activate()
        assert events.drain() == [
            WifiStateChanged(is_enabled=True),
            AirplaneModeChanged(is_enabled=False),
        ]

    def test_airplane_transition(self, platform, common, events):
        provider = NetworkProvider(platform.network, **common)
        provider.activate()
        events.drain()

        platform.network.airplane_mode()
        platform.network.airplane_mode()
        assert events.drain() == [
            WifiStateChanged(is_enabled=False),
            AirplaneModeChanged(is_enabled=True),
        ]

    def test_cellular_only(self, platform, common, events):
        provider = NetworkProvider(platform.network, **common)
        provider.activate()
        events.drain()

        platform.network.update(NetworkPath(uses_wifi=False, uses_cellular=True, satisfied=True))
        assert events.drain() == [WifiStateChanged(is_enabled=False)]

    def test_monitor_stopped(self, platform, common):
        provider = NetworkProvider(platform.network, **common)
        provider.activate()
        assert platform.network.monitoring
        provider.deactivate()
        assert not platform.network.monitoring
