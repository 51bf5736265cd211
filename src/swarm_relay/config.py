from __future__ import annotations
from dataclasses import dataclass, replace, fields
from typing import Any, Dict, Tuple
import math

from swarm_relay.errors import ConfigError

RGBA = Tuple[float, float, float, float]

YELLOW: RGBA = (1.0, 1.0, 0.0, 1.0)
GREEN: RGBA = (0.0, 1.0, 0.0, 1.0)


@dataclass(frozen=True)
class SwarmConfig:
    """All tunables of the relay swarm. Defaults reproduce the reference layout."""
    # Spawn grid: columns/rows centered on the origin
    grid_cols: int = 7
    grid_rows: int = 7
    grid_spacing_x: float = 90.0
    grid_spacing_y: float = 40.0
    spawn_jitter: float = 15.0
    speed_min: float = 200.0
    speed_max: float = 297.0

    # Beacons
    beacon_a: Tuple[float, float] = (-700.0, 0.0)
    beacon_b: Tuple[float, float] = (700.0, 0.0)
    beacon_radius: float = 30.0
    color_a: RGBA = YELLOW
    color_b: RGBA = GREEN

    # Bounding rectangle (half extents around the origin)
    half_width: float = 700.0
    half_height: float = 300.0
    turn_noise: float = 0.02

    # Relay
    relay_radius: float = 350.0
    relay_offset: int = 350
    trigger_cooldown: float = 0.5
    ring_fade: float = 0.1

    # Render hints only
    agent_radius: float = 2.0
    ring_radius: float = 15.0

    seed: int | None = None

    @property
    def agent_count(self) -> int:
        return self.grid_cols * self.grid_rows

    @property
    def beacon_radius_sq(self) -> float:
        return self.beacon_radius * self.beacon_radius

    @property
    def relay_radius_sq(self) -> float:
        return self.relay_radius * self.relay_radius

    _FLOAT_OPTIONS = ("grid_spacing_x", "grid_spacing_y", "spawn_jitter", "speed_min", "speed_max",
                      "beacon_radius", "half_width", "half_height", "turn_noise", "relay_radius",
                      "trigger_cooldown", "ring_fade", "agent_radius", "ring_radius")

    def validate(self) -> "SwarmConfig":
        for name in self._FLOAT_OPTIONS:
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, (int, float)) or not math.isfinite(v):
                raise ConfigError(f"{name} must be a finite number, got {v!r}")
        for name in ("grid_cols", "grid_rows", "relay_offset"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, int):
                raise ConfigError(f"{name} must be an integer, got {v!r}")
        for name in ("beacon_a", "beacon_b"):
            p = getattr(self, name)
            if (not isinstance(p, (tuple, list)) or len(p) != 2
                    or any(isinstance(v, bool) or not isinstance(v, (int, float)) or not math.isfinite(v) for v in p)):
                raise ConfigError(f"{name} must be an (x, y) pair of finite numbers, got {p!r}")
        if self.grid_cols < 1 or self.grid_rows < 1:
            raise ConfigError(f"grid must be at least 1x1, got {self.grid_cols}x{self.grid_rows}")
        if self.grid_spacing_x < 0 or self.grid_spacing_y < 0:
            raise ConfigError("grid spacing must be >= 0")
        if self.spawn_jitter < 0:
            raise ConfigError(f"spawn_jitter must be >= 0, got {self.spawn_jitter}")
        if self.speed_min < 0:
            raise ConfigError(f"speed_min must be >= 0, got {self.speed_min}")
        if self.speed_max < self.speed_min:
            raise ConfigError(f"speed range is inverted: [{self.speed_min}, {self.speed_max}]")
        for name in ("beacon_radius", "relay_radius", "half_width", "half_height"):
            v = getattr(self, name)
            if not v > 0:
                raise ConfigError(f"{name} must be > 0, got {v}")
        if tuple(self.beacon_a) == tuple(self.beacon_b):
            raise ConfigError("beacon_a and beacon_b must not share a position")
        if self.relay_offset < 0:
            raise ConfigError(f"relay_offset must be >= 0, got {self.relay_offset}")
        if self.trigger_cooldown < 0:
            raise ConfigError(f"trigger_cooldown must be >= 0, got {self.trigger_cooldown}")
        if self.turn_noise < 0:
            raise ConfigError(f"turn_noise must be >= 0, got {self.turn_noise}")
        if not (0.0 < self.ring_fade <= 1.0):
            raise ConfigError(f"ring_fade must be in (0, 1], got {self.ring_fade}")
        for name in ("color_a", "color_b"):
            c = getattr(self, name)
            if len(c) != 4 or any(not (0.0 <= v <= 1.0) for v in c):
                raise ConfigError(f"{name} must be an RGBA tuple in [0, 1], got {c!r}")
        return self

    def with_overrides(self, **overrides: Any) -> "SwarmConfig":
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigError(f"unknown option(s): {', '.join(unknown)}")
        return replace(self, **overrides).validate()

    def snapshot(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


DEFAULT_CONFIG = SwarmConfig()
