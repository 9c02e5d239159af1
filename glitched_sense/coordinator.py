"""
Device Coordinator
==================

Owns the ordered provider registry and keeps exactly the providers the
current gameplay context needs active.

    configure(required)  - activate providers serving any required mechanic,
                           deactivate the rest
    on_suspend()         - app entering background: deactivate everything
    on_resume()          - app returning: configure() with the stored set

The coordinator remembers what it last asked of each provider and only
calls a provider when that changes, so repeating configure() with the same
set reaches no provider at all. A provider that failed (forced fallback,
inactive) is not retried until the requested set changes or the app
resumes.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, FrozenSet, Iterable, List, Optional, Protocol, Sequence, Type, Union

from .fallback import FallbackPolicy
from .mechanics import Mechanic
from .provider import DeviceProvider

logger = logging.getLogger(__name__)


class LifecycleHooks(Protocol):
    """Called by whatever owns the process lifecycle."""

    def on_suspend(self) -> None:
        ...

    def on_resume(self) -> None:
        ...


class DeviceCoordinator:
    """Flat registry of providers driven by the required mechanic set."""

    def __init__(self, providers: Sequence[DeviceProvider], policy: FallbackPolicy):
        self._providers: List[DeviceProvider] = list(providers)
        self.policy = policy
        self._lock = threading.RLock()
        self._active_mechanics: FrozenSet[Mechanic] = frozenset()
        # id(provider) -> last requested state (True = activate)
        self._requested: Dict[int, bool] = {}
        self._suspended = False

    # =========================================================================
    # Configuration
    # =========================================================================

    def configure(self, required: Iterable[Mechanic]) -> None:
        required = frozenset(required)
        with self._lock:
            self._active_mechanics = required
            self._suspended = False
            self.policy.register_mechanics(required)

            activated = []
            for provider in self._providers:
                wanted = not provider.supported_mechanics.isdisjoint(required)
                if self._requested.get(id(provider)) == wanted:
                    continue
                self._requested[id(provider)] = wanted
                if wanted:
                    provider.activate()
                    activated.append(_provider_name(provider))
                else:
                    provider.deactivate()

        logger.info(
            f"Configured for {sorted(m.value for m in required)}: "
            f"{len(self.active_providers())} active"
        )
        if activated:
            logger.debug(f"Activated: {', '.join(activated)}")

    def deactivate_all(self) -> None:
        with self._lock:
            for provider in self._providers:
                provider.deactivate()
                self._requested[id(provider)] = False

    # =========================================================================
    # LifecycleHooks
    # =========================================================================

    def on_suspend(self) -> None:
        """Entering background: stop every source."""
        with self._lock:
            self.deactivate_all()
            self._suspended = True
        logger.info("Suspended all providers")

    def on_resume(self) -> None:
        """Returning to foreground: restore the last configuration."""
        with self._lock:
            mechanics = self._active_mechanics
        self.configure(mechanics)

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def providers(self) -> List[DeviceProvider]:
        return list(self._providers)

    @property
    def active_mechanics(self) -> FrozenSet[Mechanic]:
        with self._lock:
            return self._active_mechanics

    @property
    def suspended(self) -> bool:
        return self._suspended

    def active_providers(self) -> List[DeviceProvider]:
        return [p for p in self._providers if p.is_active]

    def providers_for(self, mechanic: Mechanic) -> List[DeviceProvider]:
        return [p for p in self._providers if mechanic in p.supported_mechanics]

    def provider(self, key: Union[str, Type]) -> Optional[DeviceProvider]:
        """Look up a provider by class or class name."""
        for p in self._providers:
            if isinstance(key, str):
                if type(p).__name__ == key:
                    return p
            elif isinstance(p, key):
                return p
        return None

    def status(self) -> List[dict]:
        rows = []
        for p in self._providers:
            describe = getattr(p, "describe", None)
            if describe is not None:
                rows.append(describe())
            else:
                rows.append({
                    "name": _provider_name(p),
                    "active": p.is_active,
                    "mechanics": sorted(m.value for m in p.supported_mechanics),
                })
        return rows


def _provider_name(provider: DeviceProvider) -> str:
    return getattr(provider, "name", type(provider).__name__)


__all__ = [
    "LifecycleHooks",
    "DeviceCoordinator",
]
