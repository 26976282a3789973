"""
Tests for agent motion, rescue resolution and the tick function.
"""

from datetime import datetime, timezone
import unittest

import numpy as np

from floodsim.config import SimulationConfig
from floodsim.geo import GeoPoint
from floodsim.mission import Victim
from floodsim.simulator import (
    LogLine,
    Notify,
    ReportSummary,
    RouteRescue,
    SimulationState,
    advance_agents,
    resolve_rescues,
    step,
)
from floodsim.unit import Degree, Meter
from floodsim.vehicles import Agent, AgentState

CENTER = GeoPoint.from_deg(13.0827, 80.2707)
NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_state(agents, positions, **config):
    victims = [Victim(id=i, position=p) for i, p in enumerate(positions)]
    cfg = SimulationConfig(flood_center=CENTER, **config)
    return SimulationState(config=cfg, agents=agents, victims=victims)


class TestAdvanceAgents(unittest.TestCase):
    """Test the movement step."""

    def setUp(self):
        self.rng = np.random.default_rng(0)
        self.agent = Agent(0, "Alpha", CENTER, Meter(15))

    def test_pursuing_agent_steps_towards_target(self):
        """Test a pursuing agent covers exactly one step."""
        target = CENTER.forward(Degree(60), Meter(100))
        state = make_state([self.agent], [target])
        self.agent.assign(0)
        advance_agents(state, self.rng)
        self.assertAlmostEqual(float(CENTER.distance_to(self.agent.position)), 15.0, places=4)
        self.assertAlmostEqual(float(self.agent.position.distance_to(target)), 85.0, places=2)

    def test_snaps_when_step_would_overshoot(self):
        """Test the agent lands exactly on a target closer than one step."""
        target = CENTER.forward(Degree(200), Meter(10))
        state = make_state([self.agent], [target])
        self.agent.assign(0)
        advance_agents(state, self.rng)
        self.assertEqual(self.agent.position, target)

    def test_snaps_within_epsilon(self):
        """Test the agent snaps when less than epsilon would remain."""
        target = CENTER.forward(Degree(10), Meter(15.3))
        state = make_state([self.agent], [target], snap_epsilon=Meter(0.5))
        self.agent.assign(0)
        advance_agents(state, self.rng)
        self.assertEqual(self.agent.position, target)

    def test_idle_agent_jitters_within_bound(self):
        """Test idle drift never exceeds the patrol jitter."""
        state = make_state([self.agent], [], patrol_jitter=Meter(3))
        for _ in range(50):
            before = self.agent.position
            advance_agents(state, self.rng)
            self.assertLessEqual(float(before.distance_to(self.agent.position)), 3.0 + 1e-6)
        self.assertNotEqual(self.agent.position, CENTER)
        self.assertEqual(self.agent.seed, CENTER)

    def test_zero_jitter_keeps_idle_agent_still(self):
        """Test idle agents stay put when jitter is zero."""
        state = make_state([self.agent], [], patrol_jitter=Meter(0))
        advance_agents(state, self.rng)
        self.assertAlmostEqual(float(CENTER.distance_to(self.agent.position)), 0.0, places=6)


class TestResolveRescues(unittest.TestCase):
    """Test the rescue check."""

    def test_rescue_within_trigger_range(self):
        """Test a pursuing agent in range rescues its target."""
        agent = Agent(0, "Bravo", CENTER, Meter(15))
        victim_pos = CENTER.forward(Degree(90), Meter(20))
        state = make_state([agent], [victim_pos], trigger_range=Meter(30))
        state.tick = 4
        agent.assign(0)
        events, commands = resolve_rescues(state, NOW)
        self.assertEqual(len(events), 1)
        self.assertTrue(state.victims[0].rescued)
        self.assertEqual(agent.rescued_count, 1)
        self.assertIsNone(agent.target_id)
        self.assertEqual(agent.current_state, AgentState.IDLE)
        event = events[0]
        self.assertEqual((event.agent_id, event.team, event.victim_id, event.tick), (0, "Bravo", 0, 4))
        self.assertAlmostEqual(float(event.distance), 20.0, places=3)
        kinds = [type(c) for c in commands]
        self.assertIn(Notify, kinds)
        self.assertIn(LogLine, kinds)
        self.assertEqual(kinds.count(RouteRescue), 1)

    def test_out_of_range_keeps_pursuing(self):
        """Test nothing happens beyond the trigger range."""
        agent = Agent(0, "Alpha", CENTER, Meter(15))
        state = make_state([agent], [CENTER.forward(Degree(0), Meter(31))], trigger_range=Meter(30))
        agent.assign(0)
        events, commands = resolve_rescues(state, NOW)
        self.assertEqual(events, [])
        self.assertEqual(commands, [])
        self.assertEqual(agent.target_id, 0)

    def test_idle_agent_never_rescues(self):
        """Test only pursuing agents trigger rescues."""
        agent = Agent(0, "Alpha", CENTER, Meter(15))
        state = make_state([agent], [CENTER])
        events, _ = resolve_rescues(state, NOW)
        self.assertEqual(events, [])
        self.assertFalse(state.victims[0].rescued)

    def test_rescue_at_most_once_under_race(self):
        """Test two agents on one victim produce a single rescue."""
        a = Agent(0, "Alpha", CENTER, Meter(15))
        b = Agent(1, "Bravo", CENTER.forward(Degree(90), Meter(5)), Meter(15))
        state = make_state([a, b], [CENTER])
        a.assign(0)
        b.assign(0)
        events, _ = resolve_rescues(state, NOW)
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0].agent_id, 0)
        self.assertEqual(a.rescued_count + b.rescued_count, 1)
        self.assertIsNone(b.target_id)


class TestStep(unittest.TestCase):
    """Test the tick function."""

    def test_agent_on_victim_finishes_first_tick(self):
        """Test one agent launched on its only victim finishes on tick 1."""
        agent = Agent(0, "Alpha", CENTER, Meter(15))
        state = make_state([agent], [CENTER], agent_count=1)
        outcome = step(state, NOW, np.random.default_rng(0))
        self.assertEqual(outcome.state.tick, 1)
        self.assertTrue(outcome.state.finished)
        self.assertEqual(outcome.state.agents[0].rescued_count, 1)
        self.assertEqual(outcome.state.total_rescued, 1)
        summaries = [c.summary for c in outcome.commands if isinstance(c, ReportSummary)]
        self.assertEqual(len(summaries), 1)
        self.assertEqual(summaries[0].rescued_by_agent, {0: 1})
        self.assertEqual(summaries[0].ticks, 1)

    def test_step_leaves_input_untouched(self):
        """Test the tick works on a copy."""
        agent = Agent(0, "Alpha", CENTER, Meter(15))
        state = make_state([agent], [CENTER.forward(Degree(0), Meter(200))])
        outcome = step(state, NOW, np.random.default_rng(0))
        self.assertEqual(state.tick, 0)
        self.assertIsNone(agent.target_id)
        self.assertEqual(agent.position, CENTER)
        self.assertEqual(outcome.state.agents[0].target_id, 0)
        self.assertNotEqual(outcome.state.agents[0].position, CENTER)

    def test_finished_state_is_not_advanced(self):
        """Test a finished run is returned unchanged."""
        agent = Agent(0, "Alpha", CENTER, Meter(15))
        state = make_state([agent], [CENTER])
        done = step(state, NOW, np.random.default_rng(0)).state
        again = step(done, NOW, np.random.default_rng(0))
        self.assertIs(again.state, done)
        self.assertEqual(again.commands, [])

    def test_no_victims_never_finishes(self):
        """Test termination requires at least one detected victim."""
        agent = Agent(0, "Alpha", CENTER, Meter(15))
        state = make_state([agent], [])
        outcome = step(state, NOW, np.random.default_rng(0))
        self.assertFalse(outcome.state.finished)


if __name__ == '__main__':
    unittest.main()
