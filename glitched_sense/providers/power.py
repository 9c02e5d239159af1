"""Power providers: charging state, battery percentage, low power mode."""

from __future__ import annotations

import logging
from typing import Optional

from ..events import BatteryLevelChanged, DeviceCharging, LowPowerModeChanged
from ..mechanics import Mechanic
from ..platform import Battery, BatteryState, Device, NotificationCenter, PlatformNotification
from ..provider import ProviderBase

logger = logging.getLogger(__name__)


PLUGGED_STATES = (BatteryState.CHARGING, BatteryState.FULL)


class BatteryProvider(ProviderBase):
    """
    Charging state.

    Emits DeviceCharging once on activation and again on every battery
    state notification whose plugged-ness differs from the last report.
    Charging and full both count as plugged.
    """

    mechanics = frozenset({Mechanic.CHARGING})

    def __init__(
        self,
        battery: Battery,
        notifications: NotificationCenter,
        bus,
        policy,
        scheduler=None,
        config=None,
    ):
        super().__init__(bus, policy, scheduler, config)
        self.battery = battery
        self.notifications = notifications
        self._last_plugged: Optional[bool] = None

    def _start_session(self, session: int) -> None:
        self.battery.monitoring_enabled = True
        self._observe(
            self.notifications,
            PlatformNotification.BATTERY_STATE_DID_CHANGE,
            lambda _info: self._check(session),
        )
        self._last_plugged = None
        self._check(session)

    def _stop_session(self) -> None:
        self._last_plugged = None

    def _check(self, session: int) -> None:
        plugged = self.battery.state in PLUGGED_STATES
        if plugged == self._last_plugged:
            return
        if self._emit(DeviceCharging(is_plugged=plugged), session):
            self._last_plugged = plugged


class BatteryLevelProvider(ProviderBase):
    """
    Battery percentage, polled.

    An unknown level (the platform reports -1) is replaced with
    `polling.battery_level_default`. Emits on activation and whenever the
    rounded percentage changes.
    """

    mechanics = frozenset({Mechanic.BATTERY_LEVEL})

    def __init__(self, battery: Battery, bus, policy, scheduler=None, config=None):
        super().__init__(bus, policy, scheduler, config)
        self.battery = battery
        self._last_percentage: Optional[float] = None

    @property
    def percentage(self) -> float:
        level = self.battery.level
        if level < 0:
            return float(self.config.polling.battery_level_default)
        return float(round(level * 100))

    def _start_session(self, session: int) -> None:
        self.battery.monitoring_enabled = True
        self._last_percentage = None
        self._poll(session)
        self._every(self.config.polling.battery_level_interval, lambda: self._poll(session))

    def _stop_session(self) -> None:
        self._last_percentage = None

    def _poll(self, session: int) -> None:
        percentage = self.percentage
        if percentage == self._last_percentage:
            return
        if self._emit(BatteryLevelChanged(percentage=percentage), session):
            self._last_percentage = percentage


class PowerModeProvider(ProviderBase):
    """Low power mode: initial state, then transitions."""

    mechanics = frozenset({Mechanic.LOW_POWER_MODE})

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
            PlatformNotification.POWER_STATE_DID_CHANGE,
            lambda _info: self._check(session),
        )
        self._last = None
        self._check(session)

    def _stop_session(self) -> None:
        self._last = None

    def _check(self, session: int) -> None:
        enabled = self.device.low_power_mode
        if enabled == self._last:
            return
        if self._emit(LowPowerModeChanged(is_enabled=enabled), session):
            self._last = enabled


__all__ = [
    "BatteryProvider",
    "BatteryLevelProvider",
    "PowerModeProvider",
]
