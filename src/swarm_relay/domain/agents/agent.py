from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Union

from swarm_relay.config import RGBA
from swarm_relay.domain.environment.beacons import BeaconId, BEACON_A, other

CLEAR: RGBA = (0.0, 0.0, 0.0, 0.0)


@dataclass
class Agent:
    """One relay agent.

    ``counter_a`` / ``counter_b`` count ticks since the agent last heard from
    each beacon (directly or by relay); smaller means fresher. The ring is the
    agent's pulse indicator and its alpha is the visual intensity.
    """
    id: int
    x: float
    y: float
    heading: float
    speed: float
    destination: BeaconId = BEACON_A
    counter_a: int = 0
    counter_b: int = 0
    pending_trigger: bool = False
    trigger_cooldown: float = 0.0
    ring: RGBA = field(default=CLEAR)

    # --- counters by beacon id ---
    def counter(self, beacon_id: BeaconId) -> int:
        return self.counter_a if beacon_id == BEACON_A else self.counter_b

    def set_counter(self, beacon_id: BeaconId, value: int) -> None:
        if beacon_id == BEACON_A:
            self.counter_a = int(value)
        else:
            self.counter_b = int(value)

    # --- trigger helpers ---
    @property
    def can_trigger(self) -> bool:
        return self.trigger_cooldown <= 0.0

    def arm(self, cooldown: float) -> None:
        self.pending_trigger = True
        self.trigger_cooldown = cooldown

    def arrive(self, beacon_id: BeaconId) -> bool:
        """Flip destination if we just reached it. Returns True on a flip."""
        if self.destination == beacon_id:
            self.destination = other(beacon_id)
            return True
        return False

    @property
    def intensity(self) -> float:
        return self.ring[3]

    # --- view ---
    def snapshot(self) -> Dict[str, Union[int, float, str, list]]:
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "heading": self.heading,
            "destination": self.destination,
            "counter_a": self.counter_a,
            "counter_b": self.counter_b,
            "ring": list(self.ring),
        }
