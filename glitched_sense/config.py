"""Signal Configuration - thresholds and intervals for every provider.

Handles loading and accessing configuration for:
- Motion and shake detection thresholds
- Level sampling minimum-change deltas
- Poll intervals for sources with no change notification
- Lifecycle heuristics (peek threshold, recognition restarts)
- Runtime settings (log level, settings file path)

Precedence: defaults -> YAML file -> environment variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)


@dataclass
class MotionConfig:
    """Accelerometer-driven detection."""

    update_interval: float = 0.02        # 50 Hz
    shake_threshold: float = 2.5         # G-force above gravity
    shake_cooldown: float = 0.3          # Seconds between shakes
    tilt_min_change: float = 0.05        # Gyro shadow tilt delta
    undo_update_interval: float = 0.05
    undo_threshold: float = 2.5          # Sustained average G-force
    undo_window: int = 10                # Samples in the moving average
    undo_debounce: float = 0.5


@dataclass
class AudioConfig:
    """Microphone level sampling."""

    buffer_size: int = 1024
    gain: float = 15.0                   # RMS multiplier before clamping
    min_change: float = 0.01


@dataclass
class DisplayConfig:
    """Screen-derived signals."""

    brightness_interval: float = 1.0 / 15.0
    brightness_min_change: float = 0.02


@dataclass
class PollingConfig:
    """Intervals for sources with no change notification."""

    clipboard_interval: float = 0.5
    focus_interval: float = 0.5
    battery_level_interval: float = 5.0
    battery_level_default: float = 75.0  # Used when the level is unknown
    storage_interval: float = 2.0
    time_of_day_interval: float = 30.0


@dataclass
class LifecycleConfig:
    """App lifecycle heuristics."""

    peek_threshold: float = 2.0          # Under this many seconds = peek


@dataclass
class VoiceConfig:
    """Speech recognition."""

    locale: str = "en-US"
    restart_delay: float = 0.5
    commands: List[str] = field(default_factory=lambda: [
        "OPEN", "FLY", "JUMP", "HELP", "STOP", "GO", "BRIDGE", "UNLOCK",
    ])


@dataclass
class StorageConfig:
    """Cache file the storage puzzle asks the player to clear."""

    cache_file_name: str = "glitched_data_mass.cache"
    cache_size_bytes: int = 5 * 1024 * 1024
    fill_byte: int = 0x47


@dataclass
class ReinstallConfig:
    """Durable keys used for reinstall detection."""

    local_key: str = "glitched_deletion_phase"
    cloud_key: str = "DeletionPhaseStarted"
    launched_key: str = "has_launched_before"
    timestamp_key: str = "deletion_timestamp"


@dataclass
class SignalConfig:
    """Complete signal layer configuration."""

    motion: MotionConfig = field(default_factory=MotionConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    polling: PollingConfig = field(default_factory=PollingConfig)
    lifecycle: LifecycleConfig = field(default_factory=LifecycleConfig)
    voice: VoiceConfig = field(default_factory=VoiceConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    reinstall: ReinstallConfig = field(default_factory=ReinstallConfig)

    # Runtime
    settings_path: str = "~/.glitched/settings.json"
    hardware_free_override: Optional[bool] = None
    log_level: str = "INFO"
    debug: bool = False

    _SECTIONS = (
        "motion", "audio", "display", "polling",
        "lifecycle", "voice", "storage", "reinstall",
    )

    def get_settings_path(self) -> Path:
        """Get expanded settings file path."""
        return Path(os.path.expanduser(self.settings_path))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data: Dict[str, Any] = {}
        for name in self._SECTIONS:
            section = getattr(self, name)
            data[name] = {f.name: getattr(section, f.name) for f in fields(section)}
            if name == "voice":
                data[name]["commands"] = list(section.commands)
        data["settings_path"] = self.settings_path
        data["hardware_free_override"] = self.hardware_free_override
        data["log_level"] = self.log_level
        data["debug"] = self.debug
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SignalConfig":
        """Create from dictionary. Unknown keys are ignored with a warning."""
        config = cls()

        for name in cls._SECTIONS:
            section_data = data.get(name)
            if not section_data:
                continue
            section = getattr(config, name)
            known = {f.name for f in fields(section)}
            for key, value in section_data.items():
                if key not in known:
                    logger.warning(f"Ignoring unknown config key: {name}.{key}")
                    continue
                setattr(section, key, value)

        config.settings_path = data.get("settings_path", config.settings_path)
        config.hardware_free_override = data.get("hardware_free_override")
        config.log_level = data.get("log_level", config.log_level)
        config.debug = bool(data.get("debug", False))

        return config

    def apply_env(self) -> "SignalConfig":
        """Apply environment variable overrides in place."""
        if level := os.getenv("GLITCHED_LOG_LEVEL"):
            self.log_level = level.upper()
        if path := os.getenv("GLITCHED_SETTINGS_PATH"):
            self.settings_path = path
        if hw_free := os.getenv("GLITCHED_HARDWARE_FREE"):
            self.hardware_free_override = hw_free.lower() in ("1", "true", "yes")
        if os.getenv("GLITCHED_DEBUG", "").lower() in ("1", "true", "yes"):
            self.debug = True
        return self


# =============================================================================
# Loading Functions
# =============================================================================

_default_config: Optional[SignalConfig] = None
_config_search_paths: List[Path] = [
    Path.home() / ".glitched" / "config.yaml",
    Path.home() / ".config" / "glitched" / "config.yaml",
    Path("glitched_config.yaml"),
]


def load_config(path: Optional[Path] = None) -> SignalConfig:
    """Load signal configuration from file.

    Args:
        path: Explicit config path (optional)

    Returns:
        Loaded configuration with environment overrides applied
    """
    global _default_config

    config_path = path
    if not config_path:
        for search_path in _config_search_paths:
            if search_path.exists():
                config_path = search_path
                break

    config = SignalConfig()
    if config_path and Path(config_path).exists():
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
            config = SignalConfig.from_dict(data)
            logger.info(f"Loaded signal config from {config_path}")
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config from {config_path}: {e}")

    config.apply_env()
    _default_config = config
    return config


def save_config(config: SignalConfig, path: Path) -> None:
    """Save configuration to a YAML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.safe_dump(config.to_dict(), f, sort_keys=False)


def get_config() -> SignalConfig:
    """Get the global configuration instance."""
    global _default_config
    if _default_config is None:
        _default_config = load_config()
    return _default_config


def set_config(config: SignalConfig) -> None:
    """Set the global configuration instance."""
    global _default_config
    _default_config = config


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging for command-line use."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


__all__ = [
    "MotionConfig",
    "AudioConfig",
    "DisplayConfig",
    "PollingConfig",
    "LifecycleConfig",
    "VoiceConfig",
    "StorageConfig",
    "ReinstallConfig",
    "SignalConfig",
    "load_config",
    "save_config",
    "get_config",
    "set_config",
    "setup_logging",
]
