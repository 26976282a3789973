"""Simulation defaults, input bounds and the validated launch configuration.

Module-level constants hold the defaults used by the command-line runner and
by :class:`SimulationConfig`; every user-facing input has an inclusive
``(low, high)`` range checked by :meth:`SimulationConfig.validate`.

Example:
    >>> from floodsim.config import SimulationConfig
    >>> from floodsim.geo import GeoPoint
    >>> cfg = SimulationConfig(flood_center=GeoPoint.from_deg(13.08, 80.27), agent_count=4)
    >>> cfg.validate().agent_count
    4
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from floodsim.errors import ConfigError
from floodsim.geo import GeoPoint
from floodsim.unit import Meter, Millisecond, Time, Length

# Swarm
AGENT_COUNT = 3
AGENT_COUNT_RANGE = (1, 10)
AGENT_SPEED = Meter(15)  # per tick
PATROL_JITTER = Meter(3)  # per tick, idle agents
TEAM_NAMES = ("Alpha", "Bravo", "Charlie")
LAUNCH_RING_RATIO = 0.5  # seeds sit on a ring at this fraction of the flood radius

# Detection
DETECTION_DENSITY = 12
DETECTION_DENSITY_RANGE = (1, 50)

# Flood area
FLOOD_RADIUS = Meter(800)
FLOOD_RADIUS_RANGE = (Meter(100), Meter(5000))
EXTENT_MARGIN = 1.5  # working extent half-size, as a multiple of the flood radius

# Rescue
TRIGGER_RANGE = Meter(30)
TRIGGER_RANGE_RANGE = (Meter(5), Meter(200))
SNAP_EPSILON = Meter(0.5)

# Clock
TICK_INTERVAL = Millisecond(50)
TICK_INTERVAL_RANGE = (Millisecond(10), Millisecond(2000))

# Event log
EVENT_LOG_CAPACITY = 500


def _check_range(name: str, value, bounds) -> None:
    low, high = bounds
    if not low <= value <= high:
        msg = f"{name}={value} outside allowed range [{low}, {high}]"
        raise ConfigError(msg)


@dataclass(frozen=True)
class SimulationConfig:
    """Inputs read at launch and kept static for the whole run.

    Attributes:
        flood_center (GeoPoint | None): User-chosen center of the flood disc.
            Launch is refused while this is unset.
        flood_radius (Length): Radius of the flood disc.
        agent_count (int): Number of drones launched.
        detection_density (int): Target victim count hint.
        trigger_range (Length): Distance at which a pursuing agent rescues.
        tick_interval (Time): Period between ticks.
        agent_speed (Length): Step length per tick while pursuing.
        patrol_jitter (Length): Maximum idle drift per tick.
        extent_margin (float): Working extent scale relative to the radius.
        launch_ring_ratio (float): Seed ring radius relative to the flood radius.
        snap_epsilon (Length): Remaining distance below which an agent snaps
            onto its target.
        seed (int | None): Seed for the random generator; ``None`` for entropy.
    """

    flood_center: GeoPoint | None = None
    flood_radius: Length = FLOOD_RADIUS
    agent_count: int = AGENT_COUNT
    detection_density: int = DETECTION_DENSITY
    trigger_range: Length = TRIGGER_RANGE
    tick_interval: Time = TICK_INTERVAL
    agent_speed: Length = AGENT_SPEED
    patrol_jitter: Length = PATROL_JITTER
    extent_margin: float = EXTENT_MARGIN
    launch_ring_ratio: float = LAUNCH_RING_RATIO
    snap_epsilon: Length = SNAP_EPSILON
    seed: int | None = None

    def validate(self) -> SimulationConfig:
        """Check every bounded input.

        Returns:
            SimulationConfig: ``self``, to allow chaining.

        Raises:
            ConfigError: If a value falls outside its range.
        """
        _check_range("agent_count", self.agent_count, AGENT_COUNT_RANGE)
        _check_range("detection_density", self.detection_density, DETECTION_DENSITY_RANGE)
        _check_range("flood_radius", self.flood_radius, FLOOD_RADIUS_RANGE)
        _check_range("trigger_range", self.trigger_range, TRIGGER_RANGE_RANGE)
        _check_range("tick_interval", self.tick_interval, TICK_INTERVAL_RANGE)
        if self.agent_speed <= 0:
            raise ConfigError(f"agent_speed must be positive, got {self.agent_speed}")
        if self.patrol_jitter < 0:
            raise ConfigError(f"patrol_jitter must not be negative, got {self.patrol_jitter}")
        if self.extent_margin < 1.0:
            raise ConfigError(f"extent_margin must be >= 1, got {self.extent_margin}")
        if not 0.0 <= self.launch_ring_ratio <= 1.0:
            raise ConfigError(f"launch_ring_ratio must be within [0, 1], got {self.launch_ring_ratio}")
        return self

    def with_center(self, center: GeoPoint) -> SimulationConfig:
        """Return a copy with the flood center set."""
        return replace(self, flood_center=center)

    def with_overrides(self, **changes) -> SimulationConfig:
        """Return a validated copy with ``changes`` applied."""
        return replace(self, **changes).validate()
