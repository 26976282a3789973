"""Per-tick target allocation.

Each agent keeps a live target (sticky assignment). An agent without one
takes the unrescued victim nearest to its *seed* among those inside its
region, falling back to all unrescued victims when the region holds none or
the agent has no region. Agents are served independently, so two agents may
pick the same victim in one pass; the rescue is idempotent and the slower
agent is re-targeted on the next pass. ``exclusive=True`` instead reserves
every live target up front and each new choice as it is made.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from floodsim.geo import point_in_polygon
from floodsim.mission import Victim
from floodsim.unit import Meter
from floodsim.vehicles import Agent

if TYPE_CHECKING:
    from floodsim.simulator.state import SimulationState


class AllocationScope(Enum):
    REGION = "region"
    GLOBAL = "global"
    IDLE = "idle"


@dataclass(frozen=True)
class Allocation:
    """A change of target made during an allocation pass.

    Attributes:
        agent_id (int): Agent whose target changed.
        victim_id (int | None): New target, ``None`` when the agent went idle.
        previous_id (int | None): Target held before the pass.
        scope (AllocationScope): Candidate set the choice came from.
        distance (Meter | None): Seed-to-victim distance of the choice.
    """

    agent_id: int
    victim_id: int | None
    previous_id: int | None
    scope: AllocationScope
    distance: Meter | None = None

    def describe(self) -> str:
        if self.victim_id is None:
            return f"Agent D{self.agent_id} idle: no unrescued victims left"
        return (
            f"Agent D{self.agent_id} allocated V{self.victim_id} "
            f"({self.scope.value}, {float(self.distance):.0f} m from seed)"
        )


def candidate_victims(agent: Agent, unrescued: Iterable[Victim]) -> tuple[list[Victim], AllocationScope]:
    """Victims an agent may choose from and which set they came from."""
    pool = list(unrescued)
    if agent.region is not None:
        in_region = [v for v in pool if point_in_polygon(v.position, agent.region)]
        if in_region:
            return in_region, AllocationScope.REGION
    return pool, AllocationScope.GLOBAL


def nearest_to_seed(agent: Agent, candidates: Iterable[Victim]) -> tuple[Victim | None, Meter | None]:
    """Candidate closest to the agent's seed; ties keep the first one seen."""
    best: Victim | None = None
    best_distance: Meter | None = None
    for victim in candidates:
        d = agent.seed.distance_to(victim.position)
        if best_distance is None or d < best_distance:
            best = victim
            best_distance = d
    return best, best_distance


def allocate_targets(state: SimulationState, exclusive: bool = False) -> list[Allocation]:
    """Refresh every agent's target in place.

    Args:
        state (SimulationState): State to mutate.
        exclusive (bool): Never hand out a victim that another agent already
            holds or picked earlier in the same pass.

    Returns:
        list[Allocation]: One entry per agent whose target changed.
    """
    changes: list[Allocation] = []
    unrescued = state.unrescued()
    # live targets are reserved before anyone re-targets
    held = {a.target_id for a in state.agents}
    reserved = {v.id for v in unrescued if v.id in held}

    for agent in state.agents:
        current = state.victim(agent.target_id)
        if current is not None and not current.rescued:
            continue

        previous = agent.target_id
        agent.release_target()

        pool = [v for v in unrescued if not (exclusive and v.id in reserved)]
        candidates, scope = candidate_victims(agent, pool)
        choice, distance = nearest_to_seed(agent, candidates)
        if choice is None:
            if previous is not None:
                changes.append(Allocation(agent.id, None, previous, AllocationScope.IDLE))
            continue

        agent.assign(choice.id)
        reserved.add(choice.id)
        changes.append(Allocation(agent.id, choice.id, previous, scope, distance))

    return changes
