"""AirDrop code exchange for multi-device puzzles."""

from __future__ import annotations

import logging
import secrets

from ..events import AirdropReceived
from ..mechanics import Mechanic
from ..provider import ProviderBase

logger = logging.getLogger(__name__)


CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 6


def generate_code(length: int = CODE_LENGTH) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


class AirDropProvider(ProviderBase):
    """
    Session code shared between devices.

    A fresh code is generated on each activation. `validate_code()` emits
    AirdropReceived when a received code matches it, ignoring case.
    """

    mechanics = frozenset({Mechanic.AIRDROP})

    def __init__(self, bus, policy, scheduler=None, config=None):
        super().__init__(bus, policy, scheduler, config)
        self.expected_code = ""

    def _start_session(self, session: int) -> None:
        self.expected_code = generate_code()
        logger.info(f"{self.name}: Code: {self.expected_code}")

    def validate_code(self, code: str) -> bool:
        if not self.expected_code or code.upper() != self.expected_code:
            return False
        return self._emit(AirdropReceived(code=code))

    def share_text(self) -> str:
        return f"GLITCHED CODE: {self.expected_code}\nSend this back via AirDrop to unlock the door!"


__all__ = [
    "CODE_ALPHABET",
    "CODE_LENGTH",
    "generate_code",
    "AirDropProvider",
]
