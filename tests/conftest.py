"""
Glitched Sense Test Configuration
=================================

Shared fixtures. Everything runs against simulated platform sources and a
ManualScheduler, so no test touches real hardware or sleeps for timers.
"""

import logging

import pytest

from glitched_sense.config import SignalConfig
from glitched_sense.event_bus import InputEventBus
from glitched_sense.fallback import FallbackPolicy
from glitched_sense.platform import SimulatedPlatform
from glitched_sense.runtime import SignalRuntime
from glitched_sense.settings import SettingsStore
from glitched_sense.timers import ManualScheduler

logger = logging.getLogger(__name__)


# =============================================================================
# Pytest Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "threads: tests that start real threads")


# =============================================================================
# Core Fixtures
# =============================================================================

@pytest.fixture
def config():
    """Default configuration, no file or environment overrides."""
    return SignalConfig()


@pytest.fixture
def scheduler():
    """Deterministic clock; advance() drives polls and delays."""
    sched = ManualScheduler()
    yield sched
    sched.shutdown()


@pytest.fixture
def platform(tmp_path):
    """Simulated hardware with the cache directory under tmp_path."""
    return SimulatedPlatform.create(cache_dir=tmp_path / "cache")


@pytest.fixture
def bus():
    """Event bus whose consumer thread is the test thread."""
    return InputEventBus()


@pytest.fixture
def policy():
    return FallbackPolicy()


@pytest.fixture
def events(bus):
    """Buffered subscription on the bus."""
    sub = bus.subscribe()
    yield sub
    sub.close()


@pytest.fixture
def common(bus, policy, scheduler, config):
    """Keyword arguments every provider constructor takes."""
    return dict(bus=bus, policy=policy, scheduler=scheduler, config=config)


@pytest.fixture
def settings_store(tmp_path):
    return SettingsStore(tmp_path / "settings.json")


@pytest.fixture
def runtime(config, platform, scheduler, settings_store, bus):
    """Full runtime over simulated sources."""
    rt = SignalRuntime.create(
        config=config,
        platform=platform,
        scheduler=scheduler,
        settings_store=settings_store,
        bus=bus,
    )
    yield rt
    rt.shutdown()
