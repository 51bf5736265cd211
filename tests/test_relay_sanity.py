# tests/test_relay_sanity.py
"""
Relay sanity tests:
- Beacon contact resets the counter and arms a trigger
- Cooldown gates both contact detection and relay triggering
- Relay writes source + offset, only when the receiver's counter is staler
- Receivers bound for the relayed beacon turn toward the source
- Counters age by one per tick; ring alpha fades and floors at zero
"""

from __future__ import annotations
import math
import unittest

from swarm_relay.config import SwarmConfig, YELLOW, GREEN
from swarm_relay.domain.agents import Agent, AgentStore
from swarm_relay.domain.communication import RelayEngine
from swarm_relay.domain.environment import BeaconRegistry, BEACON_A, BEACON_B
from swarm_relay.presentation import FrameRecorder


def _store(*agents: Agent) -> AgentStore:
    return AgentStore(agents).seal()


class TestRelaySanity(unittest.TestCase):

    def setUp(self):
        self.cfg = SwarmConfig()
        self.beacons = BeaconRegistry.from_config(self.cfg)
        self.engine = RelayEngine(self.beacons, self.cfg)

    # --- Pass 1: contact ---------------------------------------------------
    def test_contact_resets_counter_and_arms_trigger(self):
        a = Agent(id=0, x=-700.0, y=0.0, heading=0.0, speed=0.0, destination=BEACON_A, counter_a=42, counter_b=7)
        agents = _store(a)
        flips = self.engine.contact(agents, dt=1 / 60)
        self.assertEqual(a.counter_a, 0)
        self.assertEqual(a.counter_b, 7)
        self.assertTrue(a.pending_trigger)
        self.assertAlmostEqual(a.trigger_cooldown, 0.5)
        self.assertEqual(a.destination, BEACON_B)
        self.assertEqual(flips, 1)

    def test_contact_keeps_destination_when_heading_elsewhere(self):
        a = Agent(id=0, x=701.0, y=-10.0, heading=0.0, speed=0.0, destination=BEACON_A, counter_b=9)
        flips = self.engine.contact(_store(a), dt=0.01)
        self.assertEqual(a.counter_b, 0)
        self.assertEqual(a.destination, BEACON_A)
        self.assertEqual(flips, 0)

    def test_contact_radius_is_inclusive(self):
        a = Agent(id=0, x=-670.0, y=0.0, heading=0.0, speed=0.0, counter_a=5)     # exactly 30 away
        b = Agent(id=1, x=-669.9, y=0.0, heading=0.0, speed=0.0, counter_a=5)
        self.engine.contact(_store(a, b), dt=0.01)
        self.assertEqual(a.counter_a, 0)
        self.assertEqual(b.counter_a, 5)
        self.assertFalse(b.pending_trigger)

    def test_contact_skipped_while_cooling_down(self):
        a = Agent(id=0, x=-700.0, y=0.0, heading=0.0, speed=0.0, counter_a=12, trigger_cooldown=0.4)
        self.engine.contact(_store(a), dt=0.1)
        self.assertEqual(a.counter_a, 12)
        self.assertFalse(a.pending_trigger)
        self.assertAlmostEqual(a.trigger_cooldown, 0.3)

    def test_cooldown_never_goes_negative(self):
        a = Agent(id=0, x=0.0, y=0.0, heading=0.0, speed=0.0, trigger_cooldown=0.05)
        self.engine.contact(_store(a), dt=0.5)
        self.assertEqual(a.trigger_cooldown, 0.0)

    def test_agent_touching_both_beacons_processes_a_then_b(self):
        cfg = SwarmConfig(beacon_a=(-10.0, 0.0), beacon_b=(10.0, 0.0)).validate()
        engine = RelayEngine(BeaconRegistry.from_config(cfg), cfg)
        a = Agent(id=0, x=0.0, y=0.0, heading=0.0, speed=0.0, destination=BEACON_A, counter_a=5, counter_b=6)
        flips = engine.contact(_store(a), dt=1 / 60)
        self.assertEqual((a.counter_a, a.counter_b), (0, 0))
        self.assertEqual(a.destination, BEACON_A)  # A -> B at beacon A, then B -> A at beacon B
        self.assertEqual(flips, 2)
        self.assertTrue(a.pending_trigger)
        self.assertAlmostEqual(a.trigger_cooldown, 0.5)

    def test_cooldown_expiring_this_tick_allows_contact(self):
        a = Agent(id=0, x=-700.0, y=0.0, heading=0.0, speed=0.0, counter_a=40, trigger_cooldown=0.25)
        self.engine.contact(_store(a), dt=0.25)
        self.assertEqual(a.counter_a, 0)
        self.assertTrue(a.pending_trigger)
        self.assertAlmostEqual(a.trigger_cooldown, 0.5)

    # --- Pass 2: harvest ---------------------------------------------------
    def test_harvest_clears_pending_and_uses_snapshot_position(self):
        a = Agent(id=0, x=10.0, y=20.0, heading=0.0, speed=0.0, counter_a=3, counter_b=4, pending_trigger=True)
        b = Agent(id=1, x=50.0, y=50.0, heading=0.0, speed=0.0)
        agents = _store(a, b)
        index = agents.proximity_index()
        a.x, a.y = 999.0, 999.0  # moved after the snapshot
        events = self.engine.harvest(agents, index)
        self.assertEqual(len(events), 1)
        ev = events[0]
        self.assertEqual((ev.source_id, ev.x, ev.y, ev.counter_a, ev.counter_b), (0, 10.0, 20.0, 3, 4))
        self.assertFalse(a.pending_trigger)

    # --- Pass 3: relay -----------------------------------------------------
    def test_two_agent_scenario(self):
        src = Agent(id=0, x=-700.0, y=0.0, heading=0.0, speed=0.0, destination=BEACON_B, counter_a=80)
        rcv = Agent(id=1, x=-400.0, y=0.0, heading=1.0, speed=0.0, destination=BEACON_A, counter_a=1000)
        agents = _store(src, rcv)
        index = agents.proximity_index()

        self.engine.contact(agents, dt=1 / 60)
        events = self.engine.harvest(agents, index)
        records = self.engine.relay(agents, index, events)

        self.assertEqual(src.counter_a, 0)
        self.assertEqual(rcv.counter_a, 350)
        self.assertAlmostEqual(rcv.heading, math.atan2(0.0 - 0.0, -700.0 - -400.0))
        self.assertTrue(rcv.pending_trigger)
        self.assertAlmostEqual(rcv.trigger_cooldown, 0.5)
        self.assertEqual(rcv.ring, (YELLOW[0], YELLOW[1], YELLOW[2], 1.0))
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].beacon, BEACON_A)
        self.assertEqual((records[0].old_counter, records[0].new_counter), (1000, 350))

        # aging completes the tick
        self.engine.age(agents)
        self.assertEqual(src.counter_a, 1)
        self.assertEqual(rcv.counter_a, 351)
        self.assertAlmostEqual(rcv.ring[3], 0.9)

    def test_full_step_matches_scenario(self):
        src = Agent(id=0, x=-700.0, y=0.0, heading=0.0, speed=0.0, destination=BEACON_B, counter_a=80)
        rcv = Agent(id=1, x=-400.0, y=0.0, heading=1.0, speed=0.0, destination=BEACON_A, counter_a=1000)
        report = self.engine.step(_store(src, rcv), dt=1 / 60, tick=1)
        self.assertEqual(src.counter_a, 1)
        self.assertEqual(rcv.counter_a, 351)
        self.assertEqual(report.broadcasts, 1)
        self.assertEqual(report.relay_count(BEACON_A), 1)
        self.assertEqual(report.relay_count(BEACON_B), 0)

    def test_custom_relay_offset(self):
        cfg = SwarmConfig(relay_offset=100).validate()
        engine = RelayEngine(BeaconRegistry.from_config(cfg), cfg)
        ev_src = Agent(id=0, x=0.0, y=0.0, heading=0.0, speed=0.0, counter_a=10, pending_trigger=True)
        rcv = Agent(id=1, x=50.0, y=0.0, heading=0.0, speed=0.0, counter_a=500)
        agents = _store(ev_src, rcv)
        index = agents.proximity_index()
        records = engine.relay(agents, index, engine.harvest(agents, index))
        self.assertEqual(rcv.counter_a, 110)
        self.assertIsInstance(rcv.counter_a, int)
        self.assertEqual(records[0].new_counter, 110)

    def test_cooldown_blocks_relay_trigger(self):
        ev_src = Agent(id=0, x=0.0, y=0.0, heading=0.0, speed=0.0, counter_a=5, pending_trigger=True)
        rcv = Agent(id=1, x=100.0, y=0.0, heading=0.0, speed=0.0, counter_a=900, trigger_cooldown=0.2)
        agents = _store(ev_src, rcv)
        index = agents.proximity_index()
        records = self.engine.relay(agents, index, self.engine.harvest(agents, index))
        self.assertEqual(rcv.counter_a, 355)
        self.assertFalse(rcv.pending_trigger)
        self.assertAlmostEqual(rcv.trigger_cooldown, 0.2)
        self.assertFalse(records[0].triggered)

    def test_no_relay_when_receiver_is_fresher(self):
        ev_src = Agent(id=0, x=0.0, y=0.0, heading=0.0, speed=0.0, counter_a=50, counter_b=50, pending_trigger=True)
        rcv = Agent(id=1, x=10.0, y=0.0, heading=0.25, speed=0.0, counter_a=50, counter_b=10)
        agents = _store(ev_src, rcv)
        index = agents.proximity_index()
        records = self.engine.relay(agents, index, self.engine.harvest(agents, index))
        self.assertEqual(records, [])
        self.assertEqual((rcv.counter_a, rcv.counter_b), (50, 10))
        self.assertFalse(rcv.pending_trigger)
        self.assertEqual(rcv.heading, 0.25)

    def test_relay_radius_is_inclusive_and_bounded(self):
        ev_src = Agent(id=0, x=0.0, y=0.0, heading=0.0, speed=0.0, pending_trigger=True)
        edge = Agent(id=1, x=0.0, y=350.0, heading=0.0, speed=0.0, counter_a=999)
        far = Agent(id=2, x=0.0, y=350.01, heading=0.0, speed=0.0, counter_a=999)
        agents = _store(ev_src, edge, far)
        index = agents.proximity_index()
        self.engine.relay(agents, index, self.engine.harvest(agents, index))
        self.assertEqual(edge.counter_a, 350)
        self.assertEqual(far.counter_a, 999)

    def test_only_agents_bound_for_beacon_turn(self):
        ev_src = Agent(id=0, x=0.0, y=100.0, heading=0.0, speed=0.0, counter_b=0, pending_trigger=True)
        chaser = Agent(id=1, x=0.0, y=0.0, heading=0.0, speed=0.0, destination=BEACON_B, counter_b=500)
        other = Agent(id=2, x=0.0, y=-50.0, heading=0.7, speed=0.0, destination=BEACON_A, counter_b=500)
        agents = _store(ev_src, chaser, other)
        index = agents.proximity_index()
        self.engine.relay(agents, index, self.engine.harvest(agents, index))
        self.assertAlmostEqual(chaser.heading, math.pi / 2)
        self.assertEqual(other.heading, 0.7)
        self.assertEqual(chaser.counter_b, 350)
        self.assertEqual(other.counter_b, 350)
        self.assertEqual(other.ring, (GREEN[0], GREEN[1], GREEN[2], 1.0))

    def test_both_channels_relay_independently_b_color_wins(self):
        ev_src = Agent(id=0, x=0.0, y=0.0, heading=0.0, speed=0.0, counter_a=1, counter_b=2, pending_trigger=True)
        rcv = Agent(id=1, x=30.0, y=40.0, heading=0.0, speed=0.0, destination=BEACON_B, counter_a=700, counter_b=800)
        agents = _store(ev_src, rcv)
        index = agents.proximity_index()
        records = self.engine.relay(agents, index, self.engine.harvest(agents, index))
        self.assertEqual([r.beacon for r in records], [BEACON_A, BEACON_B])
        self.assertEqual((rcv.counter_a, rcv.counter_b), (351, 352))
        self.assertEqual(rcv.ring[:3], GREEN[:3])
        # first relay armed the trigger; the second saw the cooldown already set
        self.assertEqual([r.triggered for r in records], [True, False])

    def test_source_never_relays_to_itself(self):
        a = Agent(id=0, x=0.0, y=0.0, heading=0.0, speed=0.0, counter_a=10, pending_trigger=True)
        agents = _store(a)
        index = agents.proximity_index()
        records = self.engine.relay(agents, index, self.engine.harvest(agents, index))
        self.assertEqual(records, [])
        self.assertEqual(a.counter_a, 10)

    def test_colocated_agents_still_receive(self):
        a = Agent(id=0, x=5.0, y=5.0, heading=0.0, speed=0.0, counter_a=10, pending_trigger=True)
        b = Agent(id=1, x=5.0, y=5.0, heading=0.0, speed=0.0, counter_a=400)
        agents = _store(a, b)
        index = agents.proximity_index()
        self.engine.relay(agents, index, self.engine.harvest(agents, index))
        self.assertEqual(b.counter_a, 360)

    def test_later_events_see_earlier_relays(self):
        # receiver hears the fresher event first; the staler second event must not overwrite it
        e1 = Agent(id=0, x=0.0, y=0.0, heading=0.0, speed=0.0, counter_a=10, pending_trigger=True)
        e2 = Agent(id=1, x=20.0, y=0.0, heading=0.0, speed=0.0, counter_a=400, pending_trigger=True)
        rcv = Agent(id=2, x=10.0, y=10.0, heading=0.0, speed=0.0, counter_a=1000)
        agents = _store(e1, e2, rcv)
        index = agents.proximity_index()
        self.engine.relay(agents, index, self.engine.harvest(agents, index))
        self.assertEqual(rcv.counter_a, 360)

    # --- Pass 4: aging -----------------------------------------------------
    def test_age_increments_and_fades(self):
        rec = FrameRecorder()
        engine = RelayEngine(self.beacons, self.cfg, presenter=rec)
        a = Agent(id=0, x=0.0, y=0.0, heading=0.0, speed=0.0, counter_a=3, counter_b=9, ring=(1.0, 1.0, 0.0, 0.15))
        agents = _store(a)
        engine.age(agents, tick=1)
        self.assertEqual((a.counter_a, a.counter_b), (4, 10))
        self.assertAlmostEqual(a.ring[3], 0.05)
        engine.age(agents, tick=2)
        self.assertEqual(a.ring[3], 0.0)
        df = rec.to_frame()
        self.assertEqual(list(df["tick"]), [1, 2])
        self.assertEqual(float(df["a"].iloc[-1]), 0.0)

    def test_counters_monotone_without_events(self):
        agents = _store(*[Agent(id=i, x=i * 10.0, y=0.0, heading=0.0, speed=0.0, counter_a=i, counter_b=2 * i)
                          for i in range(5)])
        for _ in range(25):
            before = [(a.counter_a, a.counter_b) for a in agents]
            self.engine.step(agents, dt=1 / 60)
            after = [(a.counter_a, a.counter_b) for a in agents]
            for (ba, bb), (aa, ab) in zip(before, after):
                self.assertEqual((aa, ab), (ba + 1, bb + 1))


if __name__ == "__main__":
    unittest.main()
