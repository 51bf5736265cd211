from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional
import math

from swarm_relay.config import SwarmConfig
from swarm_relay.domain.agents.store import AgentStore
from swarm_relay.domain.environment.beacons import BeaconRegistry
from swarm_relay.domain.environment.proximity import ProximityIndex
from swarm_relay.presentation import NullPresenter, Presenter
from .events import BroadcastEvent, RelayRecord


@dataclass
class TickReport:
    """What the propagation passes did during one tick."""
    tick: int
    arrivals: int = 0
    contacts: int = 0
    events: List[BroadcastEvent] = field(default_factory=list)
    relays: List[RelayRecord] = field(default_factory=list)

    @property
    def broadcasts(self) -> int:
        return len(self.events)

    def relay_count(self, beacon: str) -> int:
        return sum(1 for r in self.relays if r.beacon == beacon)


class RelayEngine:
    """Beacon contact, trigger harvesting, neighbour relay and counter aging.

    The four passes run in order and each consumes what the previous one left
    behind. Relay decisions use the positions frozen in the ProximityIndex, never
    the live ones.
    """
    def __init__(self, beacons: BeaconRegistry, cfg: SwarmConfig, presenter: Optional[Presenter] = None):
        self.beacons = beacons
        self.cfg = cfg
        self.presenter: Presenter = presenter if presenter is not None else NullPresenter()

    # --- pass 1 ---
    def contact(self, agents: AgentStore, dt: float, report: Optional[TickReport] = None) -> int:
        """Count cooldowns down and fire agents touching a beacon. Returns destination flips."""
        cooldown = self.cfg.trigger_cooldown
        arrivals = 0
        for agent in agents:
            agent.trigger_cooldown = max(0.0, agent.trigger_cooldown - dt)
            if agent.trigger_cooldown > 0.0:
                continue
            for beacon in self.beacons:
                if not beacon.touches(agent.x, agent.y):
                    continue
                agent.set_counter(beacon.id, 0)
                agent.arm(cooldown)
                if agent.arrive(beacon.id):
                    arrivals += 1
                if report is not None:
                    report.contacts += 1
        if report is not None:
            report.arrivals += arrivals
        return arrivals

    # --- pass 2 ---
    def harvest(self, agents: AgentStore, index: ProximityIndex) -> List[BroadcastEvent]:
        events: List[BroadcastEvent] = []
        for agent in agents:
            if not agent.pending_trigger:
                continue
            x, y = index.position(agent.id)
            events.append(BroadcastEvent(agent.id, x, y, agent.counter_a, agent.counter_b))
            agent.pending_trigger = False
        return events

    # --- pass 3 ---
    def relay(self, agents: AgentStore, index: ProximityIndex, events: List[BroadcastEvent]) -> List[RelayRecord]:
        cfg = self.cfg
        records: List[RelayRecord] = []
        for ev in events:
            for rid in index.within(ev.x, ev.y, cfg.relay_radius_sq, exclude=ev.source_id):
                receiver = agents.get(rid)
                qx, qy = index.position(rid)
                for beacon in self.beacons:
                    src = ev.counter(beacon.id)
                    old = receiver.counter(beacon.id)
                    if old <= src:
                        continue
                    receiver.set_counter(beacon.id, src + cfg.relay_offset)

                    triggered = receiver.can_trigger
                    if triggered:
                        receiver.arm(cfg.trigger_cooldown)

                    # only agents already bound for this beacon chase the signal
                    reoriented = receiver.destination == beacon.id
                    if reoriented:
                        receiver.heading = math.atan2(ev.y - qy, ev.x - qx)

                    r, g, b, _ = beacon.color
                    receiver.ring = (r, g, b, 1.0)
                    records.append(RelayRecord(ev.source_id, rid, beacon.id, old, receiver.counter(beacon.id),
                                               triggered, reoriented))
        return records

    # --- pass 4 ---
    def age(self, agents: AgentStore, tick: int = 0) -> None:
        fade = self.cfg.ring_fade
        for agent in agents:
            agent.counter_a += 1
            agent.counter_b += 1
            r, g, b, a = agent.ring
            agent.ring = (r, g, b, max(0.0, a - fade))
            self.presenter.update_ring(tick, agent.id, agent.ring)

    def step(self, agents: AgentStore, dt: float, tick: int = 0, index: Optional[ProximityIndex] = None) -> TickReport:
        """Run all four passes. ``index`` must be a pre-motion snapshot of ``agents``."""
        if index is None:
            index = agents.proximity_index()
        report = TickReport(tick=tick)
        self.contact(agents, dt, report)
        report.events = self.harvest(agents, index)
        report.relays = self.relay(agents, index, report.events)
        self.age(agents, tick)
        return report

