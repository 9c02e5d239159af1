"""
Lifecycle Providers
===================

Signals derived from the app moving in and out of the foreground, and from
the app being deleted and reinstalled.

BackgroundTimeProvider
    Remembers when the app entered the background. On return it emits
    AppBackgrounded(delta_time) followed by AppForegrounded; with no
    recorded timestamp only AppForegrounded is emitted.

AppSwitcherProvider
    A resign-active followed by become-active within
    `lifecycle.peek_threshold` seconds is a peek at the app switcher.

ReinstallProvider
    Durable flag protocol across two stores: the cloud store survives app
    deletion, the local store does not. On activation, a set cloud flag on
    a launch the local store has never seen is a reinstall: emit
    AppReinstallDetected once and clear the cloud flag.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..events import AppBackgrounded, AppForegrounded, AppReinstallDetected, AppSwitcherPeeked
from ..mechanics import Mechanic
from ..platform import KeyValueStore, NotificationCenter, PlatformNotification, WallClock
from ..provider import ProviderBase

logger = logging.getLogger(__name__)


class BackgroundTimeProvider(ProviderBase):
    mechanics = frozenset({Mechanic.APP_BACKGROUNDING})

    def __init__(self, notifications: NotificationCenter, bus, policy, scheduler=None, config=None):
        super().__init__(bus, policy, scheduler, config)
        self.notifications = notifications
        self._backgrounded_at: Optional[float] = None

    def _start_session(self, session: int) -> None:
        # The timestamp survives deactivation: the coordinator suspends every
        # provider while the app is in the background.
        self._observe(
            self.notifications,
            PlatformNotification.DID_ENTER_BACKGROUND,
            lambda _info: self._on_background(session),
        )
        self._observe(
            self.notifications,
            PlatformNotification.WILL_ENTER_FOREGROUND,
            lambda _info: self._on_foreground(session),
        )

    def _on_background(self, session: int) -> None:
        if self._current(session):
            self._backgrounded_at = self._now()

    def _on_foreground(self, session: int) -> None:
        with self._lock:
            if not self._current(session):
                return
            started, self._backgrounded_at = self._backgrounded_at, None
            if started is not None:
                self._emit(AppBackgrounded(delta_time=self._now() - started), session)
            self._emit(AppForegrounded(), session)


class AppSwitcherProvider(ProviderBase):
    mechanics = frozenset({Mechanic.APP_SWITCHER})

    def __init__(self, notifications: NotificationCenter, bus, policy, scheduler=None, config=None):
        super().__init__(bus, policy, scheduler, config)
        self.notifications = notifications
        self._resigned_at: Optional[float] = None

    def _start_session(self, session: int) -> None:
        self._resigned_at = None
        self._observe(
            self.notifications,
            PlatformNotification.WILL_RESIGN_ACTIVE,
            lambda _info: self._on_resign(session),
        )
        self._observe(
            self.notifications,
            PlatformNotification.DID_BECOME_ACTIVE,
            lambda _info: self._on_become_active(session),
        )

    def _stop_session(self) -> None:
        self._resigned_at = None

    def _on_resign(self, session: int) -> None:
        if self._current(session):
            self._resigned_at = self._now()

    def _on_become_active(self, session: int) -> None:
        with self._lock:
            if not self._current(session):
                return
            started, self._resigned_at = self._resigned_at, None
            if started is None:
                return
            duration = self._now() - started
            if duration < self.config.lifecycle.peek_threshold:
                self._emit(AppSwitcherPeeked(duration=duration), session)


class ReinstallProvider(ProviderBase):
    mechanics = frozenset({Mechanic.APP_DELETION})

    def __init__(
        self,
        cloud_store: KeyValueStore,
        local_store: KeyValueStore,
        clock: WallClock,
        bus,
        policy,
        scheduler=None,
        config=None,
    ):
        super().__init__(bus, policy, scheduler, config)
        self.cloud_store = cloud_store
        self.local_store = local_store
        self.clock = clock

    def _start_session(self, session: int) -> None:
        keys = self.config.reinstall
        self.cloud_store.synchronize()

        cloud_flag = self.cloud_store.get_bool(keys.cloud_key)
        first_launch = not self.local_store.get_bool(keys.launched_key)
        self.local_store.set(keys.launched_key, True)

        if cloud_flag and first_launch:
            logger.info(f"{self.name}: Reinstall detected")
            self.cloud_store.remove(keys.cloud_key)
            self.cloud_store.synchronize()
            self._emit(AppReinstallDetected(), session)

    def start_deletion_phase(self) -> None:
        """Arm the flag the player's next fresh install will look for."""
        keys = self.config.reinstall
        self.cloud_store.set(keys.cloud_key, True)
        self.cloud_store.set(keys.timestamp_key, self.clock.now().timestamp())
        self.cloud_store.synchronize()
        self.local_store.set(keys.local_key, True)
        logger.info(f"{self.name}: Deletion phase started")

    @property
    def deletion_phase_started(self) -> bool:
        return self.local_store.get_bool(self.config.reinstall.local_key)


__all__ = [
    "BackgroundTimeProvider",
    "AppSwitcherProvider",
    "ReinstallProvider",
]
