"""
Device Provider Contract
========================

A provider owns exactly one platform source, turns its raw readings into
InputEvents, and posts them on the bus while active.

    supported_mechanics - fixed set of mechanics the provider serves
    is_active           - whether it is currently observing its source
    activate()          - idempotent; starts observing
    deactivate()        - idempotent; stops observing and emits nothing after

ProviderBase implements the lifecycle once so each concrete provider only
writes `_start_session()` / `_stop_session()` and its detection logic.

Sessions:
    Every activation opens a new session number. Callbacks capture the
    number they were registered under and post through `_emit(event,
    session)`, which discards anything from a session that has ended. A
    permission grant or a timer tick that lands after deactivate() is
    therefore a no-op.

Failures:
    `_fail()` logs, forces fallback for the provider's mechanics, tears the
    session down and leaves the provider inactive. Source exceptions never
    escape activate().
"""

from __future__ import annotations

import logging
import threading
from typing import (
    Any,
    Callable,
    ClassVar,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Optional,
    Protocol,
    runtime_checkable,
)

from .config import SignalConfig, get_config
from .event_bus import InputEventBus
from .events import InputEvent
from .fallback import FallbackPolicy
from .mechanics import Mechanic
from .platform import NotificationCenter, PlatformNotification
from .timers import Scheduler, ThreadScheduler, TimerHandle

logger = logging.getLogger(__name__)


@runtime_checkable
class DeviceProvider(Protocol):
    """What the coordinator needs from a provider."""

    @property
    def supported_mechanics(self) -> FrozenSet[Mechanic]:
        ...

    @property
    def is_active(self) -> bool:
        ...

    def activate(self) -> None:
        ...

    def deactivate(self) -> None:
        ...


class ProviderBase:
    """
    Shared lifecycle for concrete providers.

    Subclasses set `mechanics` and implement `_start_session(session)`;
    `_stop_session()` is optional. Registrations made through `_every`,
    `_later`, `_observe` and `_on_stop` are undone automatically when the
    session ends.
    """

    mechanics: ClassVar[FrozenSet[Mechanic]] = frozenset()

    def __init__(
        self,
        bus: InputEventBus,
        policy: FallbackPolicy,
        scheduler: Optional[Scheduler] = None,
        config: Optional[SignalConfig] = None,
    ):
        self.bus = bus
        self.policy = policy
        self.scheduler = scheduler or ThreadScheduler()
        self.config = config or get_config()

        self._lock = threading.RLock()
        self._active = False
        self._session = 0
        self._timers: List[TimerHandle] = []
        self._cleanups: List[Callable[[], None]] = []

    # =========================================================================
    # Contract
    # =========================================================================

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def supported_mechanics(self) -> FrozenSet[Mechanic]:
        return type(self).mechanics

    @property
    def is_active(self) -> bool:
        with self._lock:
            return self._active

    def activate(self) -> None:
        with self._lock:
            if self._active:
                return
            self._active = True
            self._session += 1
            session = self._session

            try:
                self._start_session(session)
            except Exception as e:
                self._fail("Failed to start", e)
                return

            if self._active:
                logger.info(f"{self.name}: Activated")

    def deactivate(self) -> None:
        with self._lock:
            if not self._active:
                return
            timers, cleanups = self._end_session()
        self._teardown(timers, cleanups)
        logger.info(f"{self.name}: Deactivated")

    def describe(self) -> Dict[str, Any]:
        """Status row for the CLI and diagnostics."""
        return {
            "name": self.name,
            "active": self.is_active,
            "mechanics": sorted(m.value for m in self.supported_mechanics),
            "uses_hardware": {
                m.value: self.policy.uses_hardware(m)
                for m in sorted(self.supported_mechanics, key=lambda m: m.value)
            },
        }

    def __repr__(self) -> str:
        state = "active" if self.is_active else "inactive"
        return f"<{self.name} {state}>"

    # =========================================================================
    # Hooks
    # =========================================================================

    def _start_session(self, session: int) -> None:
        raise NotImplementedError

    def _stop_session(self) -> None:
        """Reset per-session detection state. Called outside the lock."""
        pass

    # =========================================================================
    # Helpers for subclasses
    # =========================================================================

    def _current(self, session: int) -> bool:
        with self._lock:
            return self._active and session == self._session

    def _emit(self, event: InputEvent, session: Optional[int] = None) -> bool:
        """Post `event` if the session is still live. Returns whether it was posted."""
        with self._lock:
            if not self._active:
                return False
            if session is not None and session != self._session:
                return False
            self.bus.post(event)
        return True

    def _fail(
        self,
        reason: str,
        exc: Optional[BaseException] = None,
        mechanics: Optional[Iterable[Mechanic]] = None,
    ) -> None:
        """Degrade to fallback and end the session."""
        if exc is not None:
            logger.warning(f"{self.name}: {reason}: {exc}")
        else:
            logger.warning(f"{self.name}: {reason}")

        for mechanic in (mechanics if mechanics is not None else self.supported_mechanics):
            self.policy.force_hardware_fallback(mechanic)

        with self._lock:
            if not self._active:
                return
            timers, cleanups = self._end_session()
        self._teardown(timers, cleanups)

    def _every(self, interval: float, fn: Callable[[], None]) -> TimerHandle:
        return self._track(self.scheduler.call_every(interval, fn))

    def _later(self, delay: float, fn: Callable[[], None]) -> TimerHandle:
        return self._track(self.scheduler.call_later(delay, fn))

    def _track(self, handle: TimerHandle) -> TimerHandle:
        with self._lock:
            # Fired one-shots and cancelled timers need no teardown.
            self._timers = [t for t in self._timers if not t.cancelled]
            self._timers.append(handle)
        return handle

    def _on_stop(self, cleanup: Callable[[], None]) -> None:
        with self._lock:
            self._cleanups.append(cleanup)

    def _observe(
        self,
        center: NotificationCenter,
        name: PlatformNotification,
        callback: Callable[[Dict[str, Any]], None],
    ) -> None:
        self._on_stop(center.add_observer(name, callback))

    def _now(self) -> float:
        return self.scheduler.now()

    # =========================================================================
    # Internals
    # =========================================================================

    def _end_session(self):
        # Caller holds the lock.
        self._active = False
        self._session += 1
        timers, self._timers = self._timers, []
        cleanups, self._cleanups = self._cleanups, []
        return timers, cleanups

    def _teardown(self, timers, cleanups) -> None:
        for handle in timers:
            handle.cancel()
        for cleanup in reversed(cleanups):
            try:
                cleanup()
            except Exception:
                logger.exception(f"{self.name}: Source cleanup failed")
        try:
            self._stop_session()
        except Exception:
            logger.exception(f"{self.name}: Stop hook failed")


__all__ = [
    "DeviceProvider",
    "ProviderBase",
]
