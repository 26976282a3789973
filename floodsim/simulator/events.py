"""Rescue events and their routing to the reporting surface.

A :class:`RescueEvent` is a closed record built once per rescue inside the
tick. It is converted to a plain dictionary only when it reaches the report
sink. Delivery is synchronous and at-most-once: the router neither retries
nor buffers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from floodsim.geo import GeoPoint
from floodsim.mission import Victim
from floodsim.unit import Meter
from floodsim.vehicles import Agent

if TYPE_CHECKING:
    from .sinks import EventLogSink, ReportSink


@dataclass(frozen=True)
class RescueEvent:
    """A completed rescue.

    Attributes:
        agent_id (int): Rescuing agent.
        team (str): Team label of the rescuing agent.
        victim_id (int): Rescued victim.
        victim_position (GeoPoint): Where the victim was.
        distance (Meter): Agent-to-victim distance when the rescue triggered.
        timestamp (datetime): Wall-clock time of the tick.
        tick (int): Tick number (1-based) in which the rescue happened.
    """

    agent_id: int
    team: str
    victim_id: int
    victim_position: GeoPoint
    distance: Meter
    timestamp: datetime
    tick: int

    def to_dict(self) -> dict:
        return {
            "agent_id": self.agent_id,
            "team": self.team,
            "victim_id": self.victim_id,
            "victim_lat": self.victim_position.lat_deg,
            "victim_lon": self.victim_position.lon_deg,
            "distance_m": round(float(self.distance), 3),
            "timestamp": self.timestamp.isoformat(),
            "tick": self.tick,
        }

    def describe(self) -> str:
        return (
            f"Agent D{self.agent_id} ({self.team}) rescued V{self.victim_id} "
            f"at {self.victim_position} ({float(self.distance):.1f} m)"
        )


def build_rescue_event(agent: Agent, victim: Victim, distance: Meter, now: datetime, tick: int) -> RescueEvent:
    return RescueEvent(
        agent_id=agent.id,
        team=agent.team,
        victim_id=victim.id,
        victim_position=victim.position,
        distance=Meter(float(distance)),
        timestamp=now,
        tick=tick,
    )


class EventRouter:
    """Forwards rescue events to the report sink.

    Args:
        report_sink (ReportSink): Receives the serialised event.
        event_log (EventLogSink | None): Receives one routing line per event.
    """

    def __init__(self, report_sink: ReportSink, event_log: EventLogSink | None = None):
        self.report_sink = report_sink
        self.event_log = event_log
        self.forwarded = 0

    def forward(self, event: RescueEvent) -> None:
        """Serialise ``event`` and hand it to the report sink exactly once.

        Exceptions raised by the sink propagate to the caller.
        """
        self.report_sink.report(event.to_dict())
        self.forwarded += 1
        if self.event_log is not None:
            self.event_log.append(f"Routed rescue of V{event.victim_id} by D{event.agent_id} to report sink")
