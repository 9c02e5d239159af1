"""Network provider: wifi and airplane mode from the path monitor."""

from __future__ import annotations

import logging
from typing import Optional

from ..events import AirplaneModeChanged, WifiStateChanged
from ..mechanics import Mechanic
from ..platform import NetworkPath, PathMonitor
from ..provider import ProviderBase

logger = logging.getLogger(__name__)


def is_airplane_mode(path: NetworkPath) -> bool:
    """No wifi, no cellular, and no usable route."""
    return not path.uses_wifi and not path.uses_cellular and not path.satisfied


class NetworkProvider(ProviderBase):
    """
    Wifi and airplane mode.

    Each path update is checked for both signals independently; a signal is
    emitted on the first update of a session and then on every transition.
    """

    mechanics = frozenset({Mechanic.WIFI, Mechanic.AIRPLANE_MODE})

    def __init__(self, monitor: PathMonitor, bus, policy, scheduler=None, config=None):
        super().__init__(bus, policy, scheduler, config)
        self.monitor = monitor
        self._wifi: Optional[bool] = None
        self._airplane: Optional[bool] = None

    def _start_session(self, session: int) -> None:
        self._wifi = None
        self._airplane = None
        self._on_stop(self.monitor.start(lambda path: self._on_path(session, path)))

    def _stop_session(self) -> None:
        self._wifi = None
        self._airplane = None

    def _on_path(self, session: int, path: NetworkPath) -> None:
        with self._lock:
            if not self._current(session):
                return

            wifi = bool(path.uses_wifi)
            if wifi != self._wifi:
                self._wifi = wifi
                self._emit(WifiStateChanged(is_enabled=wifi), session)

            airplane = is_airplane_mode(path)
            if airplane != self._airplane:
                self._airplane = airplane
                self._emit(AirplaneModeChanged(is_enabled=airplane), session)


__all__ = [
    "is_airplane_mode",
    "NetworkProvider",
]
