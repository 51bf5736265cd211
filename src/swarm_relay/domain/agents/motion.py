from __future__ import annotations
from typing import Iterable
import math, random

from swarm_relay.config import SwarmConfig
from .agent import Agent


class MotionModel:
    """Constant-speed drift with mirror reflection at the box edges.

    There is no clamping: an agent may sit past an edge for a few frames
    until its reflected heading carries it back inside.
    """
    def __init__(self, half_width: float = 700.0, half_height: float = 300.0, turn_noise: float = 0.02):
        self.half_width = float(half_width)
        self.half_height = float(half_height)
        self.turn_noise = float(turn_noise)

    @classmethod
    def from_config(cls, cfg: SwarmConfig) -> "MotionModel":
        return cls(cfg.half_width, cfg.half_height, cfg.turn_noise)

    def move(self, agent: Agent, dt: float, rng: random.Random) -> None:
        agent.x += math.cos(agent.heading) * agent.speed * dt
        agent.y += math.sin(agent.heading) * agent.speed * dt

        # x-bound before y-bound; replay under a fixed seed depends on it
        if agent.x > self.half_width or agent.x < -self.half_width:
            agent.heading = math.pi - agent.heading
        if agent.y > self.half_height or agent.y < -self.half_height:
            agent.heading = -agent.heading

        agent.heading += rng.uniform(-self.turn_noise, self.turn_noise)

    def step(self, agents: Iterable[Agent], dt: float, rng: random.Random) -> None:
        for a in agents:
            self.move(a, dt, rng)
