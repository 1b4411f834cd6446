"""Error hierarchy shared by the engine subsystems.

Only parameter and configuration problems surface to callers. Numeric edge
cases (NaN inputs, zero denominators, partially filled windows) are resolved
inside each algorithm and never raise.
"""
from __future__ import annotations


class CoreError(Exception):
    """Base class for all custom exceptions in the package."""


class ConfigurationError(CoreError):
    """Raised when configuration files are missing or invalid."""


class InvalidParameterError(CoreError, ValueError):
    """Raised when an indicator or model is constructed with bad parameters."""


class HistoryNotEnabledError(CoreError):
    """Raised when previous values are requested from a context without history."""


class PositionStateError(CoreError):
    """Raised when a trade is applied to a position in the wrong state."""


def require_positive(name: str, value: int) -> int:
    """Return ``value`` or raise :class:`InvalidParameterError` if it is not > 0."""

    if value <= 0:
        raise InvalidParameterError(f"{name} must be positive, got {value}")
    return value
