"""Face ID provider."""

from __future__ import annotations

import logging
from typing import Optional

from ..events import FaceIdResult
from ..mechanics import Mechanic
from ..platform import BiometricContext, Biometrics
from ..provider import ProviderBase

logger = logging.getLogger(__name__)


class AuthenticationProvider(ProviderBase):
    """
    Biometric authentication puzzles.

    Activation creates an evaluation context; if the device cannot evaluate
    biometrics, face_id is forced to fallback. `request_authentication()`
    starts one evaluation at a time and emits FaceIdResult with its
    outcome; failure and cancellation both report recognized=False.
    """

    mechanics = frozenset({Mechanic.FACE_ID})

    def __init__(self, biometrics: Biometrics, bus, policy, scheduler=None, config=None):
        super().__init__(bus, policy, scheduler, config)
        self.biometrics = biometrics
        self._context: Optional[BiometricContext] = None
        self._authenticating = False
        self._session_id = 0

    @property
    def is_biometric_available(self) -> bool:
        context = self._context
        return context is not None and context.can_evaluate()

    @property
    def biometry_type(self) -> str:
        context = self._context
        return context.biometry_type if context is not None else "none"

    @property
    def is_authenticating(self) -> bool:
        with self._lock:
            return self._authenticating

    def _start_session(self, session: int) -> None:
        self._session_id = session
        self._authenticating = False
        context = self.biometrics.create_context()
        if not context.can_evaluate():
            self._fail("Biometrics not available")
            return
        self._context = context

    def _stop_session(self) -> None:
        with self._lock:
            context, self._context = self._context, None
            self._authenticating = False
        if context is not None:
            context.invalidate()

    def request_authentication(self, reason: str) -> bool:
        """Start an evaluation. Returns False if one is in flight or inactive."""
        with self._lock:
            session = self._session_id
            context = self._context
            if self._authenticating or context is None or not self._current(session):
                return False
            self._authenticating = True

        context.evaluate(reason, lambda success: self._on_result(session, success))
        return True

    def _on_result(self, session: int, success: bool) -> None:
        with self._lock:
            if not self._current(session):
                return
            self._authenticating = False
            self._emit(FaceIdResult(recognized=bool(success)), session)

    def simulate_not_recognized(self) -> None:
        """Report a failed match without touching the sensor."""
        self._emit(FaceIdResult(recognized=False))


__all__ = [
    "AuthenticationProvider",
]
