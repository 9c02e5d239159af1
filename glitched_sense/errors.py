"""
Signal source errors.

Raised by hardware/platform sources only. Providers absorb every one of
these at their boundary and degrade the owning mechanic to fallback;
nothing here ever reaches gameplay code.
"""

from __future__ import annotations


class SignalError(Exception):
    """Base exception for hardware source errors."""
    pass


class HardwareUnavailableError(SignalError):
    """The sensor or platform service does not exist on this device."""
    pass


class PermissionDeniedError(SignalError):
    """The user or the OS refused access to the source."""
    pass


class SourceStartError(SignalError):
    """The source exists but failed to start (engine/session error)."""
    pass
