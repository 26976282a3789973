"""Agent movement and rescue resolution for a single tick.

Both functions mutate the :class:`SimulationState` they are given (the
clock only ever passes its working copy) and return the side-effect
commands the caller should dispatch once the tick is committed.
"""

from __future__ import annotations

from datetime import datetime
import logging

import numpy as np

from floodsim.unit import Degree, Meter

from .commands import Command, LogLine, Notify, RenderAgent, RenderVictim, RouteRescue
from .events import RescueEvent, build_rescue_event
from .state import SimulationState

logger = logging.getLogger(__name__)


def advance_agents(state: SimulationState, rng: np.random.Generator) -> list[Command]:
    """Move every agent one step.

    Pursuing agents fly ``speed`` metres along the geodesic bearing towards
    their target and land exactly on it when the step would reach it or leave
    less than ``snap_epsilon`` to go. Idle agents drift by a random bearing
    and a distance drawn from ``[0, patrol_jitter]``; the drift is not
    clamped to the agent's region.
    """
    snap = float(state.config.snap_epsilon)
    jitter = float(state.config.patrol_jitter)
    commands: list[Command] = []

    for agent in state.agents:
        target = state.victim(agent.target_id)
        if agent.is_pursuing and target is not None:
            remaining = agent.position.distance_to(target.position)
            if float(remaining) <= float(agent.speed) or float(remaining) - float(agent.speed) < snap:
                agent.position = target.position
            else:
                heading = agent.position.heading_to(target.position)
                agent.position = agent.position.forward(heading, agent.speed)
        else:
            drift_bearing = Degree(rng.uniform(0.0, 360.0))
            drift = Meter(rng.uniform(0.0, jitter))
            agent.position = agent.position.forward(drift_bearing, drift)
        commands.append(RenderAgent.of(agent))

    return commands


def resolve_rescues(state: SimulationState, now: datetime) -> tuple[list[RescueEvent], list[Command]]:
    """Rescue every target that a pursuing agent has come within trigger range of.

    The victim flag flips at most once. When two agents reach the same victim
    in one tick only the first is credited; the other just drops its target.

    Args:
        state (SimulationState): Working state; ``state.tick`` must already
            hold the number of the tick being executed.
        now (datetime): Timestamp stamped on the rescue events.

    Returns:
        tuple[list[RescueEvent], list[Command]]: Events in rescue order and
        the commands announcing them.
    """
    trigger = float(state.config.trigger_range)
    events: list[RescueEvent] = []
    commands: list[Command] = []

    for agent in state.agents:
        if not agent.is_pursuing:
            continue
        victim = state.victim(agent.target_id)
        if victim is None:
            agent.release_target()
            continue
        gap = agent.position.distance_to(victim.position)
        if float(gap) > trigger:
            continue

        if not victim.mark_rescued():
            logger.debug("Agent D%d reached V%d after it was already rescued", agent.id, victim.id)
            agent.release_target()
            continue

        agent.complete_rescue()
        event = build_rescue_event(agent, victim, gap, now, state.tick)
        events.append(event)
        commands += [
            Notify(f"Team {agent.team}, drone {agent.id}: victim {victim.id} rescued"),
            LogLine(event.describe()),
            RenderVictim(victim.id, victim.position, True),
            RenderAgent.of(agent),
            RouteRescue(event),
        ]

    return events, commands
