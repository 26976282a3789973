"""Coordination and simulation engine for a flood-rescue drone swarm.

FloodSim simulates a swarm of autonomous drones searching a user-selected
flood area for victims and rescuing them. Victims are detected at random
inside the flood disc, the area is partitioned among the drones, every drone
repeatedly picks a victim to fly to, and a rescue is completed whenever a
drone comes within trigger range of its target. Every rescue is reported as
a structured event and the run ends with a summary once nobody is left
waiting.

Framework Components:
    Geographic Systems (floodsim.geo):
        • GeoPoint: Immutable WGS84 coordinate with geodesic distance,
          bearing and forward projection (pyproj)
        • voronoi, point_in_polygon, bounding_extent: Planar geometry on
          shapely polygons in (longitude, latitude) order

    Mission (floodsim.mission):
        • Victim: Fixed position, rescued at most once
        • generate_victims: Uniform-by-area placement inside the flood disc

    Vehicles (floodsim.vehicles):
        • Agent: Drone with launch seed, region, target id and rescue count,
          driven by an Idle/Pursuing state machine
        • place_agents: Launch-ring placement with team labels

    Coordination (floodsim.coordination):
        • partition_regions: One Voronoi region per drone, computed at launch
        • allocate_targets: Sticky nearest-to-seed target allocation

    Simulation Engine (floodsim.simulator):
        • SimulationClock: Launch, pause, reset and atomic tick commits on a
          pluggable scheduler
        • step: One tick as a function of the state, returning the new state
          and the side-effect commands for the sinks
        • Sinks for map rendering, guidance, event log, reports and summary
        • analyze_rescue_timeline: pandas/matplotlib analysis of rescue events

    Measurement Framework (floodsim.unit):
        • Type-safe Meter, Kilometer, Degree, Radian, Second, Millisecond

Usage Patterns:
    Deterministic run:
        >>> from floodsim import GeoPoint, SimulationClock, SimulationConfig
        >>> from floodsim.simulator import ManualScheduler
        >>> cfg = SimulationConfig(flood_center=GeoPoint.from_deg(13.0827, 80.2707), seed=1)
        >>> clock = SimulationClock(cfg, scheduler=ManualScheduler())
        >>> clock.launch()
        True
        >>> summary = clock.run()
        >>> summary.total_rescued == summary.total_detected
        True

    Command line:
        $ python -m floodsim --lat 13.0827 --lon 80.2707 --agents 3 --fast
"""

from .config import SimulationConfig
from .errors import ConfigError, FloodSimError, GeometryError, PreconditionError
from .geo import GeoPoint
from .simulator import RescueEvent, RunSummary, SimulationClock, SimulationState

__all__ = [
    "SimulationConfig",
    "SimulationClock",
    "SimulationState",
    "RunSummary",
    "RescueEvent",
    "GeoPoint",
    "FloodSimError",
    "ConfigError",
    "PreconditionError",
    "GeometryError",
]
