from __future__ import annotations


class ConfigError(ValueError):
    """Raised when a SwarmConfig option is out of range."""


class InvariantViolation(AssertionError):
    """Internal consistency failure, e.g. lookup of an agent or beacon that does not exist.

    Entities are created once and never removed, so this should never be raised
    by a correct host. It is deliberately not a recoverable error.
    """
