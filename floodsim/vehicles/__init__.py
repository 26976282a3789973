"""Rescue drones.

Exports:
    Agent: Drone with seed, position, region, target and rescue count
    AgentState: IDLE / PURSUING
    place_agents: Launch-ring placement of a new swarm
"""

from .agent import Agent, AgentState, place_agents

__all__ = ["Agent", "AgentState", "place_agents"]
