from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterator, Literal

from swarm_relay.config import RGBA, SwarmConfig
from swarm_relay.errors import InvariantViolation

BeaconId = Literal["A", "B"]

BEACON_A: BeaconId = "A"
BEACON_B: BeaconId = "B"


def other(beacon_id: BeaconId) -> BeaconId:
    return BEACON_B if beacon_id == BEACON_A else BEACON_A


@dataclass(frozen=True)
class Beacon:
    """A fixed signal origin. Touching it resets that beacon's counter."""
    id: BeaconId
    x: float
    y: float
    radius: float = 30.0
    color: RGBA = (1.0, 1.0, 1.0, 1.0)

    def dist_sq(self, x: float, y: float) -> float:
        dx = x - self.x; dy = y - self.y
        return dx*dx + dy*dy

    def touches(self, x: float, y: float) -> bool:
        return self.dist_sq(x, y) <= self.radius * self.radius

    def snapshot(self) -> dict:
        return {"id": self.id, "x": self.x, "y": self.y, "r": self.radius, "color": list(self.color)}


class BeaconRegistry:
    """The two beacons, read-only for the lifetime of a simulation."""
    def __init__(self, a: Beacon, b: Beacon):
        if a.id != BEACON_A or b.id != BEACON_B:
            raise InvariantViolation(f"expected beacons A and B, got {a.id} and {b.id}")
        self._by_id: Dict[str, Beacon] = {BEACON_A: a, BEACON_B: b}

    @classmethod
    def from_config(cls, cfg: SwarmConfig) -> "BeaconRegistry":
        ax, ay = cfg.beacon_a; bx, by = cfg.beacon_b
        return cls(
            Beacon(BEACON_A, float(ax), float(ay), cfg.beacon_radius, cfg.color_a),
            Beacon(BEACON_B, float(bx), float(by), cfg.beacon_radius, cfg.color_b),
        )

    @property
    def a(self) -> Beacon:
        return self._by_id[BEACON_A]

    @property
    def b(self) -> Beacon:
        return self._by_id[BEACON_B]

    def __getitem__(self, beacon_id: str) -> Beacon:
        try:
            return self._by_id[beacon_id]
        except KeyError:
            raise InvariantViolation(f"no such beacon: {beacon_id!r}") from None

    def __iter__(self) -> Iterator[Beacon]:
        return iter((self.a, self.b))

    def __len__(self) -> int:
        return 2

    def snapshot(self) -> list[dict]:
        return [b.snapshot() for b in self]
