"""Exception types raised by the flood rescue simulation.

Hierarchy:
    FloodSimError
    ├── ConfigError        (also a ValueError) configuration out of bounds
    ├── PreconditionError  command issued before its inputs exist
    └── GeometryError      partition could not be computed

Only ``ConfigError`` and ``PreconditionError`` reach callers of the public
API. ``GeometryError`` is converted into a failure result by
:func:`floodsim.geo.voronoi` and handled by the region partitioner.
"""


class FloodSimError(Exception):
    """Base class for all simulation errors."""


class ConfigError(FloodSimError, ValueError):
    """A configuration value is missing or outside its allowed range."""


class PreconditionError(FloodSimError):
    """A command was issued before the state it depends on was set up.

    Example: launching before a flood center has been chosen.
    """


class GeometryError(FloodSimError):
    """A geometric construction (Voronoi partition) could not be computed."""
