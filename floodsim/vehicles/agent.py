"""Rescue drones and their Idle/Pursuing state machine.

An :class:`Agent` carries the per-drone bookkeeping the coordination engine
needs: a fixed seed (launch point) used as the allocation reference, a live
position advanced every tick, the Voronoi region it owns, the id of the
victim it is pursuing and the number of rescues it has completed.

State Transitions:
    IDLE ──assign──▶ PURSUING ──release / complete_rescue──▶ IDLE

The target is held as a victim id into the run's registry rather than as a
reference to the victim object, so "my target was rescued by someone else"
is a lookup on the registry.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum, auto

from shapely.geometry import Polygon

from floodsim.geo import GeoPoint
from floodsim.state import Action, StateMachine
from floodsim.unit import Degree, Length, Meter


class AgentState(Enum):
    """Operational states of a rescue drone.

    States:
        IDLE: No target; the drone patrols with a small random drift.
        PURSUING: Flying straight towards its assigned victim.
    """

    IDLE = auto()
    PURSUING = auto()


class Agent:
    """A simulated rescue drone.

    Attributes:
        id (int): Index of the agent within its run.
        team (str): Team label shown on the map and in rescue events.
        seed (GeoPoint): Launch point; immutable for the run.
        position (GeoPoint): Current position.
        region (Polygon | None): Owned Voronoi cell, ``None`` when the agent
            may search the whole flood area.
        target_id (int | None): Victim currently pursued.
        rescued_count (int): Completed rescues; never decreases.
        speed (Meter): Step length per tick while pursuing.
    """

    def __init__(
        self,
        agent_id: int,
        team: str,
        seed: GeoPoint,
        speed: Length,
        *,
        position: GeoPoint | None = None,
        region: Polygon | None = None,
        target_id: int | None = None,
        rescued_count: int = 0,
    ):
        self.id = agent_id
        self.team = team
        self.seed = seed
        self.speed = Meter(float(speed))
        self.position = position if position is not None else seed
        self.region = region
        self.rescued_count = rescued_count
        self._target_id: int | None = None

        initial = AgentState.IDLE if target_id is None else AgentState.PURSUING
        self._state_machine = StateMachine(
            initial,
            {
                AgentState.IDLE: [Action(AgentState.PURSUING, self._enter_pursuing)],
                AgentState.PURSUING: [Action(AgentState.IDLE, self._enter_idle)],
            },
        )
        self._target_id = target_id

    @property
    def current_state(self) -> AgentState:
        return self._state_machine.current

    @property
    def is_pursuing(self) -> bool:
        return self.current_state == AgentState.PURSUING

    @property
    def target_id(self) -> int | None:
        return self._target_id

    def _enter_pursuing(self, victim_id: int) -> None:
        self._target_id = victim_id

    def _enter_idle(self) -> None:
        self._target_id = None

    def assign(self, victim_id: int) -> None:
        """Start pursuing ``victim_id``.

        Raises:
            ValueError: If the agent is already pursuing a target.
        """
        self._state_machine.request_transition(AgentState.PURSUING, victim_id)

    def release_target(self) -> None:
        """Drop the current target and return to patrol. No-op when idle."""
        if self.is_pursuing:
            self._state_machine.request_transition(AgentState.IDLE)

    def complete_rescue(self) -> None:
        """Count a rescue of the current target and return to patrol."""
        self.rescued_count += 1
        self.release_target()

    def copy(self) -> Agent:
        """Independent copy sharing only immutable members (points, polygon)."""
        return Agent(
            self.id,
            self.team,
            self.seed,
            self.speed,
            position=self.position,
            region=self.region,
            target_id=self._target_id,
            rescued_count=self.rescued_count,
        )

    def __repr__(self) -> str:
        return (
            f"Agent(id={self.id}, team={self.team!r}, state={self.current_state.name}, "
            f"target={self._target_id}, rescued={self.rescued_count})"
        )


def place_agents(
    center: GeoPoint,
    radius: Length,
    count: int,
    ring_ratio: float,
    speed: Length,
    teams: Sequence[str],
) -> list[Agent]:
    """Create ``count`` agents evenly spaced on a ring around ``center``.

    Agent ``i`` is launched at bearing ``360 * i / count`` and distance
    ``radius * ring_ratio``; teams are handed out round-robin.
    """
    ring = Meter(float(radius) * ring_ratio)
    agents: list[Agent] = []
    for i in range(count):
        seed = center.forward(Degree(360.0 * i / count), ring)
        agents.append(Agent(i, teams[i % len(teams)], seed, speed))
    return agents
