"""
Fallback / Accessibility Policy
===============================

Decides, per mechanic, whether the hardware path is used or a manual
substitute is shown.

State:
    hardware_free_mode - global override from the settings screen
    active_mechanics   - what the current gameplay context needs
    forced_fallbacks   - mechanics whose hardware proved unusable this
                         session; only ever grows

Decisions:
    uses_hardware(m)     = not hardware_free_mode and m not in forced_fallbacks
    needs_fallback_ui(m) = m in active_mechanics and not uses_hardware(m)

Providers call force_hardware_fallback() from permission callbacks on
arbitrary threads, so all state sits behind one lock.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Set

from .mechanics import Mechanic
from .settings import SettingsStore

logger = logging.getLogger(__name__)


PolicyListener = Callable[["FallbackPolicy"], None]


class FallbackPolicy:
    """Process-wide hardware/fallback decision engine."""

    def __init__(
        self,
        hardware_free_mode: bool = False,
        settings_store: Optional[SettingsStore] = None,
    ):
        self._lock = threading.RLock()
        self._hardware_free_mode = hardware_free_mode
        self._active: FrozenSet[Mechanic] = frozenset()
        self._forced: Set[Mechanic] = set()
        self._store = settings_store
        self._listeners: List[PolicyListener] = []

    @classmethod
    def from_settings(cls, store: SettingsStore) -> "FallbackPolicy":
        """Read the persisted hardware-free flag once and keep the store for writes."""
        settings = store.load()
        return cls(hardware_free_mode=settings.hardware_free_mode, settings_store=store)

    # =========================================================================
    # Mutations
    # =========================================================================

    @property
    def hardware_free_mode(self) -> bool:
        with self._lock:
            return self._hardware_free_mode

    def set_hardware_free_mode(self, enabled: bool) -> None:
        with self._lock:
            changed = self._hardware_free_mode != enabled
            self._hardware_free_mode = enabled

        if self._store is not None:
            try:
                self._store.update(hardware_free_mode=enabled)
            except OSError as e:
                logger.warning(f"Could not persist hardware-free mode: {e}")

        if changed:
            logger.info(f"Hardware-free mode {'enabled' if enabled else 'disabled'}")
            self._notify()

    def register_mechanics(self, mechanics: Iterable[Mechanic]) -> None:
        """Replace the set of mechanics the current context cares about."""
        new = frozenset(mechanics)
        with self._lock:
            changed = new != self._active
            self._active = new
        if changed:
            self._notify()

    def force_hardware_fallback(self, mechanic: Mechanic) -> None:
        """Mark a mechanic's hardware as unusable for the rest of the session."""
        with self._lock:
            if mechanic in self._forced:
                return
            self._forced.add(mechanic)
        logger.warning(f"Forced fallback for {mechanic.value}")
        self._notify()

    # =========================================================================
    # Decisions
    # =========================================================================

    @property
    def active_mechanics(self) -> FrozenSet[Mechanic]:
        with self._lock:
            return self._active

    @property
    def forced_fallbacks(self) -> FrozenSet[Mechanic]:
        with self._lock:
            return frozenset(self._forced)

    def uses_hardware(self, mechanic: Mechanic) -> bool:
        with self._lock:
            if self._hardware_free_mode:
                return False
            return mechanic not in self._forced

    def needs_fallback_ui(self, mechanic: Mechanic) -> bool:
        with self._lock:
            if mechanic not in self._active:
                return False
            return not self.uses_hardware(mechanic)

    def fallback_mechanics(self) -> FrozenSet[Mechanic]:
        """Active mechanics that currently need a manual control."""
        with self._lock:
            return frozenset(m for m in self._active if self.needs_fallback_ui(m))

    # =========================================================================
    # Observation
    # =========================================================================

    def add_listener(self, listener: PolicyListener) -> Callable[[], None]:
        """
        Call `listener(policy)` whenever a decision may have changed.

        Returns a callable that removes the listener.
        """
        with self._lock:
            self._listeners.append(listener)

        def remove() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return remove

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(self)
            except Exception:
                logger.exception("Fallback policy listener failed")

    def snapshot(self) -> Dict[str, object]:
        with self._lock:
            return {
                "hardware_free_mode": self._hardware_free_mode,
                "active_mechanics": sorted(m.value for m in self._active),
                "forced_fallbacks": sorted(m.value for m in self._forced),
                "needs_fallback_ui": sorted(
                    m.value for m in self._active if self.needs_fallback_ui(m)
                ),
            }


__all__ = [
    "FallbackPolicy",
    "PolicyListener",
]
