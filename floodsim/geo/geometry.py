"""Geometry provider for the coordination engine.

Pure functions over :class:`GeoPoint` and shapely polygons. Polygons are kept
in ``(lon, lat)`` degree coordinates so they can be handed to a map sink
unchanged; Voronoi cells are computed in a local equirectangular frame in
meters (see :func:`project`) so that "closest seed" means closest on the
ground rather than closest in raw degrees.

Functions:
    destination: Point reached from an origin along a bearing.
    distance: Geodesic distance in meters.
    bearing: Initial bearing between two points.
    bounding_extent: Axis-aligned working box around a disc.
    voronoi: Voronoi cells of a site set clipped to an extent.
    point_in_polygon: Containment test, boundary inclusive.
    project: Points to local planar meters around an origin.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging
from math import cos, radians

import numpy as np
from shapely import affinity
from shapely.errors import GEOSException
from shapely.geometry import Point, Polygon, box
from shapely.geometry.base import BaseGeometry

from floodsim.errors import GeometryError
from floodsim.unit import Angle, Degree, Length, Meter

from .geo_point import GeoPoint

logger = logging.getLogger(__name__)

# Mean Earth radius; only used for the local planar frame.
EARTH_RADIUS = Meter(6_371_008.8)


def destination(origin: GeoPoint, bearing: Angle, distance: Length) -> GeoPoint:
    return origin.forward(bearing, distance)


def distance(a: GeoPoint, b: GeoPoint) -> Meter:
    return a.distance_to(b)


def bearing(a: GeoPoint, b: GeoPoint) -> Degree:
    return a.heading_to(b)


def bounding_extent(center: GeoPoint, radius: Length, margin: float) -> Polygon:
    """Box reaching ``radius * margin`` from ``center`` in each cardinal direction."""
    reach = Meter(float(radius) * margin)
    north = center.forward(Degree(0), reach)
    east = center.forward(Degree(90), reach)
    south = center.forward(Degree(180), reach)
    west = center.forward(Degree(270), reach)
    return box(west.lon_deg, south.lat_deg, east.lon_deg, north.lat_deg)


def _frame_scales(origin: GeoPoint) -> tuple[float, float, float, float]:
    lon0, lat0 = origin.as_lonlat()
    kx = float(EARTH_RADIUS) * cos(radians(lat0)) * radians(1.0)
    ky = float(EARTH_RADIUS) * radians(1.0)
    return lon0, lat0, kx, ky


def project(points: Sequence[GeoPoint | tuple[float, float]], origin: GeoPoint) -> np.ndarray:
    """Map points to ``(x, y)`` meters east/north of ``origin``.

    Accepts :class:`GeoPoint` instances or ``(lon, lat)`` tuples. The
    equirectangular approximation is exact enough at flood-area scale.
    """
    lon0, lat0, kx, ky = _frame_scales(origin)
    coords = np.asarray(
        [p.as_lonlat() if isinstance(p, GeoPoint) else p for p in points], dtype=float
    ).reshape(-1, 2)
    return np.column_stack(((coords[:, 0] - lon0) * kx, (coords[:, 1] - lat0) * ky))


def _to_local(geom: BaseGeometry, origin: GeoPoint) -> BaseGeometry:
    lon0, lat0, kx, ky = _frame_scales(origin)
    return affinity.affine_transform(geom, [kx, 0.0, 0.0, ky, -lon0 * kx, -lat0 * ky])


def _to_lonlat(geom: BaseGeometry, origin: GeoPoint) -> BaseGeometry:
    lon0, lat0, kx, ky = _frame_scales(origin)
    return affinity.affine_transform(geom, [1.0 / kx, 0.0, 0.0, 1.0 / ky, lon0, lat0])


def _largest_polygon(geom: BaseGeometry) -> Polygon | None:
    if geom.is_empty:
        return None
    if isinstance(geom, Polygon):
        return geom
    polygons = [g for g in getattr(geom, "geoms", []) if isinstance(g, Polygon) and not g.is_empty]
    if not polygons:
        return None
    return max(polygons, key=lambda g: g.area)


def _distinct_sites(sites: Sequence[GeoPoint]) -> list[GeoPoint]:
    seen: set[tuple[float, float]] = set()
    distinct: list[GeoPoint] = []
    for site in sites:
        key = site.as_lonlat()
        if key in seen:
            continue
        seen.add(key)
        distinct.append(site)
    return distinct


def _half_plane(own: np.ndarray, other: np.ndarray, reach: float) -> Polygon:
    """Square of side ``2 * reach`` covering the side of the bisector nearer ``own``."""
    d = other - own
    d = d / np.hypot(d[0], d[1])
    n = np.array([-d[1], d[0]])
    mid = (own + other) / 2.0
    corners = [mid + n * reach, mid + n * reach - d * 2 * reach, mid - n * reach - d * 2 * reach, mid - n * reach]
    return Polygon([tuple(c) for c in corners])


def _voronoi_cells(sites: Sequence[GeoPoint], extent: Polygon) -> list[Polygon]:
    distinct = _distinct_sites(sites)
    if len(distinct) < 2:
        msg = f"Voronoi partition needs at least 2 distinct sites, got {len(distinct)}"
        raise GeometryError(msg)

    origin = GeoPoint.from_lonlat((extent.centroid.x, extent.centroid.y))
    local_extent = _to_local(extent, origin)
    local_sites = project(distinct, origin)
    minx, miny, maxx, maxy = local_extent.bounds
    reach = 4.0 * max(maxx - minx, maxy - miny, *np.abs(local_sites).ravel())

    local_cells: list[Polygon] = []
    try:
        for i, own in enumerate(local_sites):
            cell: BaseGeometry = local_extent
            for j, other in enumerate(local_sites):
                if i != j:
                    cell = cell.intersection(_half_plane(own, other, reach))
            clipped = _largest_polygon(cell)
            if clipped is None:
                raise GeometryError(f"Voronoi cell of site {i} is empty")
            local_cells.append(clipped)
    except GEOSException as e:
        raise GeometryError(f"Voronoi construction failed: {e}") from e

    points = [Point(xy) for xy in local_sites]
    for i, cell in enumerate(local_cells):
        owners = [k for k, p in enumerate(points) if cell.covers(p)]
        if owners != [i]:
            msg = f"Voronoi cell {i} covers sites {owners}"
            raise GeometryError(msg)

    return [_to_lonlat(cell, origin) for cell in local_cells]


def voronoi(sites: Sequence[GeoPoint], extent: Polygon) -> list[Polygon] | None:
    """Compute Voronoi cells of ``sites`` clipped to ``extent``.

    Each cell is the extent clipped by the half-planes of the perpendicular
    bisectors between its site and every other site, built in the local
    metric frame. Cells come back in the order of the distinct sites, and
    each one is checked to cover its own site and no other.

    Args:
        sites (Sequence[GeoPoint]): Generating points.
        extent (Polygon): Bounding polygon in ``(lon, lat)`` degrees.

    Returns:
        list[Polygon] | None: One polygon per distinct site, or ``None`` when
        the partition cannot be computed (fewer than 2 distinct sites, a site
        outside the extent or a degenerate cell).
    """
    try:
        return _voronoi_cells(sites, extent)
    except GeometryError as e:
        logger.debug("voronoi: %s", e)
        return None


def point_in_polygon(point: GeoPoint, polygon: Polygon) -> bool:
    """True when ``point`` lies inside ``polygon`` or on its boundary."""
    return polygon.covers(Point(point.as_lonlat()))
