from __future__ import annotations
from dataclasses import dataclass

from swarm_relay.domain.environment.beacons import BeaconId, BEACON_A


@dataclass(frozen=True)
class BroadcastEvent:
    """A harvested trigger: where the agent was and what it knew at that moment."""
    source_id: int
    x: float
    y: float
    counter_a: int
    counter_b: int

    def counter(self, beacon_id: BeaconId) -> int:
        return self.counter_a if beacon_id == BEACON_A else self.counter_b


@dataclass(frozen=True)
class RelayRecord:
    """One counter overwrite performed during the relay pass."""
    source_id: int
    receiver_id: int
    beacon: BeaconId
    old_counter: int
    new_counter: int
    triggered: bool
    reoriented: bool
