"""Persisted player settings.

Pydantic model for the settings the signal layer reads at startup.
Only `hardware_free_mode` matters to this package; the other fields ride
along so saving never drops what the settings screen wrote.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class PlayerSettings(BaseModel):
    """Player-facing accessibility and audio settings."""

    model_config = ConfigDict(extra="ignore")

    hardware_free_mode: bool = False
    high_contrast_mode: bool = False
    extended_hint_timers: bool = False
    music_volume: float = Field(default=1.0, ge=0.0, le=1.0)
    sfx_volume: float = Field(default=1.0, ge=0.0, le=1.0)


class SettingsStore:
    """
    JSON file store for PlayerSettings.

    A missing, unreadable, or undecodable file yields fresh defaults.
    Decode failures are logged and never raised.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def load(self) -> PlayerSettings:
        if not self.path.exists():
            return PlayerSettings()

        try:
            raw = self.path.read_text(encoding="utf-8")
            settings = PlayerSettings.model_validate_json(raw)
        except (OSError, ValidationError, ValueError) as e:
            logger.warning(f"Settings at {self.path} unreadable, using defaults: {e}")
            return PlayerSettings()

        return settings

    def save(self, settings: PlayerSettings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(settings.model_dump_json(indent=2), encoding="utf-8")

    def update(self, **changes) -> PlayerSettings:
        """Load, apply field changes, save, and return the new settings."""
        current = self.load()
        updated = current.model_copy(update=changes)
        self.save(updated)
        return updated


__all__ = [
    "PlayerSettings",
    "SettingsStore",
]
