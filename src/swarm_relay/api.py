from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
import random

from collections import Counter
from swarm_relay.config import DEFAULT_CONFIG, SwarmConfig
from swarm_relay.domain.agents import MotionModel, spawn_grid
from swarm_relay.domain.communication import RelayEngine, TickReport
from swarm_relay.domain.environment.beacons import BeaconRegistry, BEACON_A, BEACON_B
from swarm_relay.presentation import NullPresenter, Presenter

@dataclass
class AgentView:
    id: int
    x: float
    y: float
    heading: float
    destination: str
    counter_a: int
    counter_b: int
    ring: list

class SimController:
    """Frame-clock facing API: the host calls ``step(dt)`` once per frame and reads ``get_view()``."""
    def __init__(self, config: Optional[SwarmConfig] = None, seed: int | None = None,
                 presenter: Optional[Presenter] = None):
        self.config = (config or DEFAULT_CONFIG).validate()
        if seed is None:
            seed = self.config.seed
        self.seed = seed
        self.rng = random.Random(seed)
        self._t = 0.0; self._tick = 0; self._paused = False; self._speed = 1.0
        self.presenter: Presenter = presenter if presenter is not None else NullPresenter()

        self.beacons = BeaconRegistry.from_config(self.config)
        self.agents = spawn_grid(self.config, self.rng)
        self.motion = MotionModel.from_config(self.config)
        self.relay = RelayEngine(self.beacons, self.config, self.presenter)

        self.total_arrivals = 0
        self.last_report: TickReport = TickReport(tick=0)

    # --- runtime controls ---------------------------------------------------
    def set_paused(self, paused: bool) -> None: self._paused = paused
    def toggle_paused(self) -> bool: self._paused = not self._paused; return self._paused
    def set_speed(self, speed: float) -> None: self._speed = max(0.0, min(4.0, float(speed)))

    @property
    def paused(self) -> bool: return self._paused

    @property
    def tick_count(self) -> int: return self._tick

    @property
    def time(self) -> float: return self._t

    # --- step & stats -------------------------------------------------------
    def step(self, dt: float) -> Optional[TickReport]:
        """Advance one frame. Returns None when paused or dt <= 0."""
        if self._paused or dt <= 0.0: return None
        dt *= self._speed
        if dt <= 0.0: return None
        self._t += dt; self._tick += 1

        index = self.agents.proximity_index()
        report = self.relay.step(self.agents, dt, tick=self._tick, index=index)
        self.motion.step(self.agents, dt, self.rng)
        for a in self.agents:
            self.presenter.update_agent(self._tick, a.id, a.x, a.y, a.heading)

        self.total_arrivals += report.arrivals
        self.last_report = report
        return report

    def run(self, ticks: int, dt: float) -> None:
        for _ in range(int(ticks)):
            self.step(dt)

    def _destination_counts(self) -> Dict[str, int]:
        c = Counter({BEACON_A: 0, BEACON_B: 0})
        for a in self.agents:
            c[a.destination] += 1
        return dict(c)

    def stats(self) -> Dict[str, Any]:
        n = max(1, len(self.agents))
        r = self.last_report
        return {
            "destinations": self._destination_counts(),
            "broadcasts": r.broadcasts,
            "relays": {BEACON_A: r.relay_count(BEACON_A), BEACON_B: r.relay_count(BEACON_B)},
            "mean_counter": {
                BEACON_A: sum(a.counter_a for a in self.agents) / n,
                BEACON_B: sum(a.counter_b for a in self.agents) / n,
            },
            "lit_rings": sum(1 for a in self.agents if a.intensity > 0.0),
            "arrivals": self.total_arrivals,
        }

    def get_view(self) -> dict:
        agents_view = [AgentView(**a.snapshot()) for a in self.agents]
        cfg = self.config
        return {
            "t": self._t, "tick": self._tick, "paused": self._paused, "speed": self._speed,
            "bounds": {"w": cfg.half_width, "h": cfg.half_height},
            "render": {"agent_r": cfg.agent_radius, "ring_r": cfg.ring_radius},
            "beacons": self.beacons.snapshot(),
            "agents": [av.__dict__ for av in agents_view],
            "stats": self.stats(),
        }
