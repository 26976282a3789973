"""Geographic coordinates and geometry for the flood rescue swarm.

Components:
    GeoPoint: Immutable WGS84 latitude/longitude point.
    Latitude, Longitude: Coordinate units.
    destination, distance, bearing: Geodesic helpers.
    bounding_extent, voronoi, point_in_polygon, project: Planar geometry.

Typical Usage:
    >>> from floodsim.geo import GeoPoint, bounding_extent, voronoi
    >>> from floodsim.unit import Degree, Meter
    >>> center = GeoPoint.from_deg(13.0827, 80.2707)
    >>> seeds = [center.forward(Degree(b), Meter(400)) for b in (0, 120, 240)]
    >>> cells = voronoi(seeds, bounding_extent(center, Meter(800), 1.5))
    >>> len(cells)
    3
"""

from .geo_point import GeoPoint, Latitude, Longitude
from .geometry import (
    bearing,
    bounding_extent,
    destination,
    distance,
    point_in_polygon,
    project,
    voronoi,
)

__all__ = [
    "GeoPoint",
    "Latitude",
    "Longitude",
    "bearing",
    "bounding_extent",
    "destination",
    "distance",
    "point_in_polygon",
    "project",
    "voronoi",
]
