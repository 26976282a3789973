"""Side-effect commands produced by launch and by every tick.

Simulation logic never talks to sinks directly: it returns a list of these
records and :class:`floodsim.simulator.sinks.CommandDispatcher` applies them
after the tick has been committed.
"""

from __future__ import annotations

from dataclasses import dataclass

from shapely.geometry import Polygon

from floodsim.geo import GeoPoint
from floodsim.unit import Length
from floodsim.vehicles import Agent, AgentState

from .events import RescueEvent
from .state import RunSummary


@dataclass(frozen=True)
class RenderAgent:
    agent_id: int
    team: str
    position: GeoPoint
    state: AgentState
    rescued_count: int

    @classmethod
    def of(cls, agent: Agent) -> RenderAgent:
        return cls(agent.id, agent.team, agent.position, agent.current_state, agent.rescued_count)


@dataclass(frozen=True)
class RenderVictim:
    victim_id: int
    position: GeoPoint
    rescued: bool


@dataclass(frozen=True)
class RenderRegion:
    """Region outline of one agent; ``polygon`` is ``None`` for unrestricted."""

    agent_id: int
    team: str
    polygon: Polygon | None


@dataclass(frozen=True)
class RenderFlood:
    center: GeoPoint
    radius: Length


@dataclass(frozen=True)
class ClearMap:
    pass


@dataclass(frozen=True)
class LogLine:
    text: str


@dataclass(frozen=True)
class Notify:
    """Guidance message spoken or shown when a rescue triggers."""

    message: str


@dataclass(frozen=True)
class RouteRescue:
    event: RescueEvent


@dataclass(frozen=True)
class ReportSummary:
    summary: RunSummary


Command = (
    RenderAgent
    | RenderVictim
    | RenderRegion
    | RenderFlood
    | ClearMap
    | LogLine
    | Notify
    | RouteRescue
    | ReportSummary
)
