"""
Mechanic Taxonomy
=================

Closed set of abstract gameplay capabilities. A mechanic says nothing
about which hardware source satisfies it; several providers may support
the same mechanic, and the coordinator decides which ones run.

Mechanics are grouped the same way the game's worlds introduce them:

    HARDWARE_AWAKENING - sensors and display state (world 1)
    CONTROL_SURFACE    - OS control-center features (world 2)
    DATA_CORRUPTION    - device data the game reads (world 3)
    REALITY_BREAK      - system-wide settings and sharing (world 4)
    UTILITY            - reserved inputs with no dedicated level yet
"""

from __future__ import annotations

from enum import Enum
from typing import FrozenSet, Iterable


class MechanicGroup(str, Enum):
    """World grouping for mechanics."""
    HARDWARE_AWAKENING = "hardware_awakening"
    CONTROL_SURFACE = "control_surface"
    DATA_CORRUPTION = "data_corruption"
    REALITY_BREAK = "reality_break"
    UTILITY = "utility"


class Mechanic(str, Enum):
    """Abstract capabilities a level can require."""

    # World 1: Hardware Awakening
    DRAG_HUD = "drag_hud"
    MICROPHONE = "microphone"
    SHAKE = "shake"
    VOLUME = "volume"
    BRIGHTNESS = "brightness"
    CHARGING = "charging"
    SCREENSHOT = "screenshot"
    DARK_MODE = "dark_mode"
    ORIENTATION = "orientation"
    APP_BACKGROUNDING = "app_backgrounding"

    # World 2: Control Surface
    NOTIFICATION = "notification"
    CLIPBOARD = "clipboard"
    WIFI = "wifi"
    FOCUS_MODE = "focus_mode"            # Do Not Disturb
    LOW_POWER_MODE = "low_power_mode"
    SHAKE_UNDO = "shake_undo"
    APP_SWITCHER = "app_switcher"
    FACE_ID = "face_id"
    APP_DELETION = "app_deletion"        # Meta finale
    AIRPLANE_MODE = "airplane_mode"

    # World 3: Data Corruption
    VOICE_COMMAND = "voice_command"
    BATTERY_LEVEL = "battery_level"
    DEVICE_NAME = "device_name"
    STORAGE_SPACE = "storage_space"
    TIME_OF_DAY = "time_of_day"

    # World 4: Reality Break
    LOCALE = "locale"
    VOICE_OVER = "voice_over"
    AIRDROP = "airdrop"

    # Utility
    PROXIMITY = "proximity"
    TIMED_PRESS = "timed_press"
    HAPTIC_PATTERN = "haptic_pattern"
    CLOCK_TIME = "clock_time"
    GYRO_SHADOW = "gyro_shadow"
    SPEECH = "speech"
    MULTI_TOUCH = "multi_touch"

    @property
    def group(self) -> MechanicGroup:
        return _GROUPS[self]


_GROUPS = {
    **{m: MechanicGroup.HARDWARE_AWAKENING for m in (
        Mechanic.DRAG_HUD, Mechanic.MICROPHONE, Mechanic.SHAKE,
        Mechanic.VOLUME, Mechanic.BRIGHTNESS, Mechanic.CHARGING,
        Mechanic.SCREENSHOT, Mechanic.DARK_MODE, Mechanic.ORIENTATION,
        Mechanic.APP_BACKGROUNDING,
    )},
    **{m: MechanicGroup.CONTROL_SURFACE for m in (
        Mechanic.NOTIFICATION, Mechanic.CLIPBOARD, Mechanic.WIFI,
        Mechanic.FOCUS_MODE, Mechanic.LOW_POWER_MODE, Mechanic.SHAKE_UNDO,
        Mechanic.APP_SWITCHER, Mechanic.FACE_ID, Mechanic.APP_DELETION,
        Mechanic.AIRPLANE_MODE,
    )},
    **{m: MechanicGroup.DATA_CORRUPTION for m in (
        Mechanic.VOICE_COMMAND, Mechanic.BATTERY_LEVEL, Mechanic.DEVICE_NAME,
        Mechanic.STORAGE_SPACE, Mechanic.TIME_OF_DAY,
    )},
    **{m: MechanicGroup.REALITY_BREAK for m in (
        Mechanic.LOCALE, Mechanic.VOICE_OVER, Mechanic.AIRDROP,
    )},
    **{m: MechanicGroup.UTILITY for m in (
        Mechanic.PROXIMITY, Mechanic.TIMED_PRESS, Mechanic.HAPTIC_PATTERN,
        Mechanic.CLOCK_TIME, Mechanic.GYRO_SHADOW, Mechanic.SPEECH,
        Mechanic.MULTI_TOUCH,
    )},
}


def mechanics_in(group: MechanicGroup) -> FrozenSet[Mechanic]:
    """All mechanics belonging to a world group."""
    return frozenset(m for m, g in _GROUPS.items() if g == group)


def parse_mechanics(names: Iterable[str]) -> FrozenSet[Mechanic]:
    """
    Convert mechanic names to a frozenset.

    Accepts enum values ("dark_mode") or member names ("DARK_MODE").
    Raises ValueError naming the first unknown entry.
    """
    parsed = set()
    for name in names:
        key = name.strip()
        if not key:
            continue
        try:
            parsed.add(Mechanic(key.lower()))
        except ValueError:
            try:
                parsed.add(Mechanic[key.upper()])
            except KeyError:
                raise ValueError(f"Unknown mechanic: {name!r}") from None
    return frozenset(parsed)


__all__ = [
    "Mechanic",
    "MechanicGroup",
    "mechanics_in",
    "parse_mechanics",
]
