"""Beacon relay swarm: agents pass beacon signals to neighbours and migrate between two beacons."""
from __future__ import annotations

from .api import SimController
from .config import SwarmConfig, DEFAULT_CONFIG
from .errors import ConfigError, InvariantViolation

__all__ = ["SimController", "SwarmConfig", "DEFAULT_CONFIG", "ConfigError", "InvariantViolation"]
__version__ = "0.1.0"
