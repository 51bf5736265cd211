# src/swarm_relay/domain/agents/__init__.py
from __future__ import annotations
import math, random

from swarm_relay.config import SwarmConfig
from swarm_relay.domain.environment.beacons import BEACON_A, BEACON_B
from .agent import Agent
from .motion import MotionModel
from .store import AgentStore

__all__ = ["Agent", "AgentStore", "MotionModel", "create_agent", "spawn_grid"]


def create_agent(id: int, base_x: float, base_y: float, rng: random.Random, cfg: SwarmConfig) -> Agent:
    """Place one agent near (base_x, base_y). Draw order: jitter x, jitter y, heading, speed, destination."""
    x = base_x + rng.uniform(-cfg.spawn_jitter, cfg.spawn_jitter)
    y = base_y + rng.uniform(-cfg.spawn_jitter, cfg.spawn_jitter)
    heading = rng.uniform(0.0, 2.0 * math.pi)
    speed = rng.uniform(cfg.speed_min, cfg.speed_max)
    destination = BEACON_A if rng.random() < 0.5 else BEACON_B
    return Agent(id=id, x=x, y=y, heading=heading, speed=speed, destination=destination)


def spawn_grid(cfg: SwarmConfig, rng: random.Random) -> AgentStore:
    """Jittered grid centered on the origin, column-major like the reference layout."""
    store = AgentStore()
    x0 = -(cfg.grid_cols - 1) / 2.0
    y0 = -(cfg.grid_rows - 1) / 2.0
    for i in range(cfg.grid_cols):
        for j in range(cfg.grid_rows):
            bx = (x0 + i) * cfg.grid_spacing_x
            by = (y0 + j) * cfg.grid_spacing_y
            store.add(create_agent(len(store), bx, by, rng, cfg))
    return store.seal()
