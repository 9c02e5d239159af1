#!/usr/bin/env python3
"""
Glitched Sense CLI - drive the signal layer against simulated hardware

Usage:
    glitched-sense --list                            # Mechanics and providers
    glitched-sense --mechanics shake microphone      # Simulate and print events
    glitched-sense --mechanics clipboard --hardware-free
    glitched-sense --mechanics shake --status        # Status table as JSON

Examples:
    $ glitched-sense --mechanics shake clipboard --duration 2
    {"kind": "shake_detected"}
    {"kind": "clipboard_updated", "value": "GLITCHED"}
    ...
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .config import load_config, setup_logging
from .events import InputEvent
from .mechanics import Mechanic, MechanicGroup, mechanics_in, parse_mechanics
from .platform import BatteryState, DeviceOrientation, SimulatedPlatform
from .providers import AirDropProvider, AuthenticationProvider, NotificationProvider
from .runtime import SignalRuntime
from .settings import SettingsStore
from .timers import ManualScheduler

logger = logging.getLogger(__name__)


STEP = 0.1


# =============================================================================
# Simulated stimuli
# =============================================================================

def _notify(runtime: SignalRuntime) -> None:
    provider = runtime.provider(NotificationProvider)
    provider.schedule_notification("cli-1", "GLITCHED", "Tap me", 1.0, is_correct=True)
    runtime.platform.user_notifications.tap("cli-1")


def _face_id(runtime: SignalRuntime) -> None:
    runtime.provider(AuthenticationProvider).request_authentication("Look at the door")


def _airdrop(runtime: SignalRuntime) -> None:
    provider = runtime.provider(AirDropProvider)
    provider.validate_code(provider.expected_code.lower())


def _app_switcher(runtime: SignalRuntime) -> None:
    runtime.platform.resign_active()
    runtime.scheduler.advance(0.5)
    runtime.platform.become_active()


def _background(runtime: SignalRuntime) -> None:
    runtime.platform.enter_background()
    runtime.on_suspend()
    runtime.scheduler.advance(3.0)
    runtime.on_resume()
    runtime.platform.enter_foreground()


def _storage(runtime: SignalRuntime) -> None:
    runtime.provider("StorageSpaceProvider").clear_cache()


STIMULI: Dict[Mechanic, Callable[[SignalRuntime], None]] = {
    Mechanic.SHAKE: lambda r: r.platform.accelerometer.push(0.0, 0.0, 4.0),
    Mechanic.GYRO_SHADOW: lambda r: r.platform.accelerometer.push(0.4, -0.3, -0.9),
    Mechanic.SHAKE_UNDO: lambda r: [r.platform.accelerometer.push(0.0, 0.0, 4.0) for _ in range(10)],
    Mechanic.MICROPHONE: lambda r: r.platform.audio.feed_tone(0.05),
    Mechanic.CHARGING: lambda r: r.platform.battery.set_state(BatteryState.CHARGING),
    Mechanic.BATTERY_LEVEL: lambda r: r.platform.battery.set_level(0.2),
    Mechanic.BRIGHTNESS: lambda r: setattr(r.platform.screen, "brightness", 0.9),
    Mechanic.SCREENSHOT: lambda r: r.platform.take_screenshot(),
    Mechanic.DARK_MODE: lambda r: r.platform.screen.set_dark(True),
    Mechanic.ORIENTATION: lambda r: r.platform.device.rotate(DeviceOrientation.LANDSCAPE_LEFT),
    Mechanic.APP_BACKGROUNDING: _background,
    Mechanic.APP_SWITCHER: _app_switcher,
    Mechanic.NOTIFICATION: _notify,
    Mechanic.CLIPBOARD: lambda r: r.platform.pasteboard.copy("GLITCHED"),
    Mechanic.WIFI: lambda r: r.platform.network.airplane_mode(),
    Mechanic.AIRPLANE_MODE: lambda r: r.platform.network.airplane_mode(),
    Mechanic.LOW_POWER_MODE: lambda r: r.platform.device.set_low_power(True),
    Mechanic.FACE_ID: _face_id,
    Mechanic.VOICE_COMMAND: lambda r: r.platform.speech.speak("please JUMP", final=True),
    Mechanic.STORAGE_SPACE: _storage,
    Mechanic.LOCALE: lambda r: r.platform.device.set_language("fr"),
    Mechanic.VOICE_OVER: lambda r: r.platform.device.set_voice_over(True),
    Mechanic.AIRDROP: _airdrop,
}


# =============================================================================
# Commands
# =============================================================================

def list_mechanics(runtime: SignalRuntime) -> str:
    lines = []
    for group in MechanicGroup:
        lines.append(f"=== {group.value} ===")
        for mechanic in sorted(mechanics_in(group), key=lambda m: m.value):
            names = [p.name for p in runtime.coordinator.providers_for(mechanic)]
            served = ", ".join(names) if names else "(manual only)"
            lines.append(f"  {mechanic.value:<20} {served}")
    return "\n".join(lines)


def fallback_table(runtime: SignalRuntime) -> str:
    policy = runtime.policy
    lines = [f"{'mechanic':<20} {'hardware':<9} {'fallback ui':<11}"]
    for mechanic in sorted(policy.active_mechanics, key=lambda m: m.value):
        lines.append(
            f"{mechanic.value:<20} "
            f"{'yes' if policy.uses_hardware(mechanic) else 'no':<9} "
            f"{'yes' if policy.needs_fallback_ui(mechanic) else 'no':<11}"
        )
    return "\n".join(lines)


def simulate(runtime: SignalRuntime, mechanics, duration: float) -> List[InputEvent]:
    """Configure, poke each simulated source once, run the clock, collect events."""
    with runtime.subscribe() as sub:
        runtime.configure(mechanics)

        for mechanic in sorted(mechanics, key=lambda m: m.value):
            if not runtime.policy.uses_hardware(mechanic):
                if runtime.manual.has_manual_control(mechanic):
                    runtime.manual.trigger(mechanic)
                continue
            stimulus = STIMULI.get(mechanic)
            if stimulus is not None:
                stimulus(runtime)

        elapsed = 0.0
        while elapsed < duration:
            runtime.scheduler.advance(STEP)
            runtime.pump()
            elapsed += STEP

        runtime.pump()
        return sub.drain()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Glitched Sense - hardware signal layer simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    glitched-sense --list
    glitched-sense --mechanics shake microphone clipboard
    glitched-sense --mechanics charging --hardware-free --status
        """
    )

    parser.add_argument(
        "--mechanics", "-m",
        nargs="*",
        default=[],
        help="Mechanics the simulated level requires (names or values)"
    )

    parser.add_argument(
        "--hardware-free",
        action="store_true",
        help="Force every mechanic to its manual fallback"
    )

    parser.add_argument(
        "--list", "-l",
        action="store_true",
        help="List mechanics and the providers that serve them"
    )

    parser.add_argument(
        "--status", "-s",
        action="store_true",
        help="Print runtime status as JSON after simulating"
    )

    parser.add_argument(
        "--duration", "-d",
        type=float,
        default=1.0,
        help="Simulated seconds to run (default: 1.0)"
    )

    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="YAML config file"
    )

    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="Player settings JSON (default: from config)"
    )

    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: from config)"
    )

    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.hardware_free:
        config.hardware_free_override = True
    setup_logging(args.log_level or config.log_level)

    try:
        mechanics = parse_mechanics(
            name for arg in args.mechanics for name in arg.split(",") if name
        )
    except ValueError as e:
        parser.error(str(e))

    store = SettingsStore(args.settings or config.get_settings_path())
    platform = SimulatedPlatform.create()
    scheduler = ManualScheduler()

    with SignalRuntime.create(
        config=config,
        platform=platform,
        scheduler=scheduler,
        settings_store=store,
    ) as runtime:
        if args.list:
            print(list_mechanics(runtime))
            return 0

        events = simulate(runtime, mechanics, args.duration)
        for event in events:
            print(json.dumps(event.to_dict()))

        if mechanics:
            print()
            print(fallback_table(runtime))

        if args.status:
            print()
            print(json.dumps(runtime.status(), indent=2))

    return 0


if __name__ == "__main__":
    sys.exit(main())
