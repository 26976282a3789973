"""Explicit simulation state owned by the clock.

A :class:`SimulationState` holds everything a tick reads or mutates. Launch
and reset build new instances; a tick works on :meth:`SimulationState.copy`
and the clock swaps the copy in only once the whole tick has succeeded.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from shapely.geometry import Polygon

from floodsim.config import SimulationConfig
from floodsim.mission import Victim
from floodsim.unit import ClockTime
from floodsim.vehicles import Agent


@dataclass
class SimulationState:
    """Agents, victim registry and run bookkeeping for one launch.

    Attributes:
        config (SimulationConfig): Configuration the run was launched with.
        agents (list[Agent]): Swarm, ordered by agent id.
        victims (list[Victim]): Victim registry; ``victims[i].id == i``.
        extent (Polygon | None): Working extent used for partitioning.
        partition_ok (bool): ``False`` when every agent fell back to an
            unrestricted region.
        tick (int): Number of ticks committed so far.
        finished (bool): Set on the tick where the last victim is rescued.
    """

    config: SimulationConfig
    agents: list[Agent] = field(default_factory=list)
    victims: list[Victim] = field(default_factory=list)
    extent: Polygon | None = None
    partition_ok: bool = False
    tick: int = 0
    finished: bool = False

    def victim(self, victim_id: int | None) -> Victim | None:
        """Look up a victim by id; ``None`` for a missing or stale id."""
        if victim_id is None or not 0 <= victim_id < len(self.victims):
            return None
        return self.victims[victim_id]

    def unrescued(self) -> list[Victim]:
        return [v for v in self.victims if not v.rescued]

    @property
    def total_detected(self) -> int:
        return len(self.victims)

    @property
    def total_rescued(self) -> int:
        return sum(1 for v in self.victims if v.rescued)

    @property
    def remaining(self) -> int:
        return self.total_detected - self.total_rescued

    @property
    def all_rescued(self) -> bool:
        return bool(self.victims) and self.remaining == 0

    @property
    def elapsed(self) -> ClockTime:
        return ClockTime(self.tick * float(self.config.tick_interval))

    def copy(self) -> SimulationState:
        return SimulationState(
            config=self.config,
            agents=[a.copy() for a in self.agents],
            victims=[v.copy() for v in self.victims],
            extent=self.extent,
            partition_ok=self.partition_ok,
            tick=self.tick,
            finished=self.finished,
        )


@dataclass(frozen=True)
class RunSummary:
    """Final report delivered when every victim has been rescued.

    Attributes:
        total_detected (int): Victims generated at launch.
        total_rescued (int): Victims rescued.
        rescued_by_agent (dict[int, int]): Rescue count per agent id.
        ticks (int): Ticks executed.
        elapsed (ClockTime): Simulated time at termination.
    """

    total_detected: int
    total_rescued: int
    rescued_by_agent: dict[int, int]
    ticks: int
    elapsed: ClockTime

    @classmethod
    def from_state(cls, state: SimulationState) -> RunSummary:
        return cls(
            total_detected=state.total_detected,
            total_rescued=state.total_rescued,
            rescued_by_agent={a.id: a.rescued_count for a in state.agents},
            ticks=state.tick,
            elapsed=state.elapsed,
        )

    def to_dict(self) -> dict:
        return {
            "total_detected": self.total_detected,
            "total_rescued": self.total_rescued,
            "rescued_by_agent": dict(self.rescued_by_agent),
            "ticks": self.ticks,
            "elapsed": str(self.elapsed),
        }
