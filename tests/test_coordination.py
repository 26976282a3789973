"""
Tests for region partitioning and target allocation.
"""

import unittest

from shapely.ops import unary_union

from floodsim.config import SimulationConfig
from floodsim.coordination import AllocationScope, allocate_targets, partition_regions
from floodsim.geo import GeoPoint, point_in_polygon
from floodsim.mission import Victim
from floodsim.simulator import SimulationState
from floodsim.unit import Degree, Meter
from floodsim.vehicles import Agent, AgentState, place_agents

CENTER = GeoPoint.from_deg(13.0827, 80.2707)
RADIUS = Meter(800)


def make_agents(count, ring=0.5):
    return place_agents(CENTER, RADIUS, count, ring, Meter(15), ("Alpha", "Bravo", "Charlie"))


def make_state(agents, positions):
    victims = [Victim(id=i, position=p) for i, p in enumerate(positions)]
    return SimulationState(config=SimulationConfig(flood_center=CENTER), agents=agents, victims=victims)


class TestPlacement(unittest.TestCase):
    """Test launch-ring placement."""

    def test_ring_and_teams(self):
        """Test seeds sit on the ring and teams rotate."""
        agents = make_agents(4)
        self.assertEqual([a.team for a in agents], ["Alpha", "Bravo", "Charlie", "Alpha"])
        for agent in agents:
            self.assertAlmostEqual(float(CENTER.distance_to(agent.seed)), 400.0, places=3)
            self.assertEqual(agent.position, agent.seed)
            self.assertEqual(agent.current_state, AgentState.IDLE)


class TestPartition(unittest.TestCase):
    """Test the region partitioner."""

    def test_each_agent_gets_region_containing_its_seed(self):
        """Test cells are matched back to the right agents."""
        agents = make_agents(5)
        result = partition_regions(agents, CENTER, RADIUS, 1.5)
        self.assertTrue(result.ok)
        self.assertEqual(set(result.regions), {a.id for a in agents})
        for agent in agents:
            self.assertIsNotNone(agent.region)
            self.assertTrue(point_in_polygon(agent.seed, agent.region))

    def test_regions_cover_extent(self):
        """Test regions tile the working extent."""
        agents = make_agents(3)
        result = partition_regions(agents, CENTER, RADIUS, 1.5)
        total = sum(a.region.area for a in agents)
        self.assertAlmostEqual(total / result.extent.area, 1.0, places=3)

    def test_every_swarm_size_tiles_extent(self):
        """Test one region per agent for every allowed swarm size on the launch ring."""
        for count in range(2, 11):
            with self.subTest(agents=count):
                agents = make_agents(count)
                result = partition_regions(agents, CENTER, RADIUS, 1.5)
                self.assertTrue(result.ok)
                self.assertEqual(set(result.regions), {a.id for a in agents})
                for agent in agents:
                    self.assertIsNotNone(agent.region)
                    self.assertTrue(point_in_polygon(agent.seed, agent.region))
                    others = [b for b in agents if b is not agent]
                    self.assertFalse(any(point_in_polygon(b.seed, agent.region) for b in others))
                total = sum(a.region.area for a in agents)
                self.assertAlmostEqual(total / result.extent.area, 1.0, places=3)
                union = unary_union([a.region for a in agents])
                self.assertAlmostEqual(union.area / result.extent.area, 1.0, places=3)

    def test_single_agent_falls_back(self):
        """Test one seed yields failure and an unrestricted region."""
        agents = make_agents(1)
        result = partition_regions(agents, CENTER, RADIUS, 1.5)
        self.assertFalse(result.ok)
        self.assertIsNone(agents[0].region)
        self.assertEqual(len(result.describe(agents)), 1)

    def test_coincident_seeds_fall_back(self):
        """Test agents launched from one point cannot be partitioned."""
        agents = [Agent(i, "Alpha", CENTER, Meter(15)) for i in range(3)]
        with self.assertLogs("floodsim.coordination.partition", level="WARNING"):
            result = partition_regions(agents, CENTER, RADIUS, 1.5)
        self.assertFalse(result.ok)
        self.assertTrue(all(a.region is None for a in agents))

    def test_rerun_replaces_regions(self):
        """Test regions are overwritten on each partition run."""
        agents = make_agents(3)
        partition_regions(agents, CENTER, RADIUS, 1.5)
        first = [a.region for a in agents]
        partition_regions(agents, CENTER, RADIUS, 1.0)
        for old, agent in zip(first, agents):
            self.assertLess(agent.region.area, old.area)


class TestAllocation(unittest.TestCase):
    """Test the task allocator."""

    def setUp(self):
        self.agents = make_agents(2)
        partition_regions(self.agents, CENTER, RADIUS, 1.5)
        # agent 0 seed is north of center, agent 1 south
        self.north_near = CENTER.forward(Degree(0), Meter(500))
        self.north_far = CENTER.forward(Degree(0), Meter(700))
        self.south = CENTER.forward(Degree(180), Meter(300))

    def test_nearest_to_seed_within_region(self):
        """Test each agent picks the closest victim in its own region."""
        state = make_state(self.agents, [self.north_far, self.south, self.north_near])
        changes = allocate_targets(state)
        self.assertEqual(self.agents[0].target_id, 2)
        self.assertEqual(self.agents[1].target_id, 1)
        self.assertEqual({c.scope for c in changes}, {AllocationScope.REGION})

    def test_distance_measured_from_seed(self):
        """Test the reference point is the seed, not the current position."""
        state = make_state(self.agents, [self.north_far, self.north_near])
        self.agents[0].position = self.north_far
        allocate_targets(state)
        self.assertEqual(self.agents[0].target_id, 1)

    def test_sticky_target(self):
        """Test a live target is kept even when a closer victim appears."""
        state = make_state(self.agents, [self.north_far, self.north_near])
        self.agents[0].assign(0)
        changes = allocate_targets(state)
        self.assertEqual(self.agents[0].target_id, 0)
        self.assertNotIn(0, [c.agent_id for c in changes])

    def test_target_rescued_elsewhere_is_replaced(self):
        """Test a target rescued by another agent is dropped."""
        state = make_state(self.agents, [self.north_near, self.north_far])
        self.agents[0].assign(0)
        state.victims[0].mark_rescued()
        allocate_targets(state)
        self.assertEqual(self.agents[0].target_id, 1)

    def test_global_fallback_when_region_empty(self):
        """Test an agent with an empty region takes victims elsewhere."""
        state = make_state(self.agents, [self.north_near])
        changes = allocate_targets(state)
        self.assertEqual(self.agents[1].target_id, 0)
        scopes = {c.agent_id: c.scope for c in changes}
        self.assertEqual(scopes[0], AllocationScope.REGION)
        self.assertEqual(scopes[1], AllocationScope.GLOBAL)

    def test_race_allows_shared_target(self):
        """Test two agents may chase the same victim by default."""
        state = make_state(self.agents, [self.north_near])
        allocate_targets(state)
        self.assertEqual(self.agents[0].target_id, self.agents[1].target_id)

    def test_exclusive_mode_reserves_victims(self):
        """Test exclusive allocation keeps agents on different victims."""
        state = make_state(self.agents, [self.north_near])
        allocate_targets(state, exclusive=True)
        self.assertEqual(self.agents[0].target_id, 0)
        self.assertIsNone(self.agents[1].target_id)
        self.assertEqual(self.agents[1].current_state, AgentState.IDLE)

    def test_exclusive_mode_respects_later_agents_targets(self):
        """Test an earlier agent does not take a victim a later agent already holds."""
        state = make_state(self.agents, [self.north_near, self.north_far])
        self.agents[1].assign(0)
        allocate_targets(state, exclusive=True)
        self.assertEqual(self.agents[1].target_id, 0)
        self.assertEqual(self.agents[0].target_id, 1)

    def test_tie_goes_to_first_in_registry(self):
        """Test equal distances resolve to the lower victim id."""
        seed = self.agents[0].seed
        east = seed.forward(Degree(90), Meter(50))
        state = make_state(self.agents, [east, east])
        allocate_targets(state)
        self.assertEqual(self.agents[0].target_id, 0)

    def test_no_victims_left_clears_target(self):
        """Test agents go idle when everyone has been rescued."""
        state = make_state(self.agents, [self.north_near])
        self.agents[0].assign(0)
        state.victims[0].mark_rescued()
        changes = allocate_targets(state)
        self.assertIsNone(self.agents[0].target_id)
        self.assertEqual([c.scope for c in changes], [AllocationScope.IDLE])

    def test_unrestricted_agent_searches_everything(self):
        """Test an agent without a region uses every unrescued victim."""
        agent = Agent(0, "Alpha", CENTER, Meter(15))
        state = make_state([agent], [self.north_far, self.south])
        allocate_targets(state)
        self.assertEqual(agent.target_id, 1)

    def test_target_never_rescued_after_allocation(self):
        """Test no agent holds a rescued target after a pass."""
        state = make_state(self.agents, [self.north_near, self.south, self.north_far])
        allocate_targets(state)
        state.victims[self.agents[0].target_id].mark_rescued()
        allocate_targets(state)
        for agent in self.agents:
            if agent.target_id is not None:
                self.assertFalse(state.victims[agent.target_id].rescued)


if __name__ == '__main__':
    unittest.main()
