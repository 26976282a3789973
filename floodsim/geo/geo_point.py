"""Geographic points on the WGS84 ellipsoid.

``GeoPoint`` is the coordinate type shared by agents, victims and the flood
center. It is immutable: moving an agent produces a new point, which lets a
tick work on a copied simulation state without aliasing positions.

Geodesic forward/inverse problems are solved with :class:`pyproj.Geod` so
distances and bearings are accurate in meters regardless of latitude.
"""

from __future__ import annotations

from dataclasses import dataclass

from pyproj import Geod

from floodsim.unit import Angle, Degree, Length, Meter, Radian

# WGS84 geodesic calculator for accurate Earth surface calculations
_WGS84 = Geod(ellps="WGS84")


class Latitude(Degree):
    """Latitude in degrees (-90 to +90)."""

    IS_FAMILY_ROOT = True
    SYMBOL = "°N/S"


class Longitude(Degree):
    """Longitude in degrees (-180 to +180)."""

    IS_FAMILY_ROOT = True
    SYMBOL = "°E/W"


@dataclass(frozen=True)
class GeoPoint:
    """Immutable latitude/longitude pair.

    Attributes:
        latitude (Latitude): North/south coordinate.
        longitude (Longitude): East/west coordinate.

    Example:
        >>> center = GeoPoint.from_deg(13.0827, 80.2707)
        >>> north = center.forward(Degree(0), Meter(800))
        >>> round(float(center.distance_to(north)), 3)
        800.0
    """

    latitude: Latitude
    longitude: Longitude

    @classmethod
    def from_deg(cls, lat: float, lon: float) -> GeoPoint:
        """Create a point from decimal degrees."""
        return cls(Latitude(lat), Longitude(lon))

    @classmethod
    def from_rad(cls, lat: float, lon: float) -> GeoPoint:
        """Create a point from radians."""
        return cls(Latitude.from_si(lat), Longitude.from_si(lon))

    @classmethod
    def from_lonlat(cls, coords: tuple[float, float]) -> GeoPoint:
        """Create a point from a ``(lon, lat)`` pair in degrees, shapely order."""
        lon, lat = coords
        return cls.from_deg(lat, lon)

    @property
    def lat_deg(self) -> float:
        return self.latitude.to(Latitude)

    @property
    def lon_deg(self) -> float:
        return self.longitude.to(Longitude)

    def as_lonlat(self) -> tuple[float, float]:
        """Return ``(lon, lat)`` in degrees, the axis order used by shapely."""
        return (self.lon_deg, self.lat_deg)

    def distance_to(self, other: GeoPoint) -> Meter:
        """Geodesic distance to ``other``."""
        _, _, dist = _WGS84.inv(
            float(self.longitude),
            float(self.latitude),
            float(other.longitude),
            float(other.latitude),
            radians=True,
        )
        return Meter(dist)

    def heading_to(self, other: GeoPoint) -> Degree:
        """Initial bearing towards ``other``, clockwise from north in [0, 360).

        The bearing to a coincident point is reported as 0.
        """
        az12, _, dist = _WGS84.inv(
            float(self.longitude),
            float(self.latitude),
            float(other.longitude),
            float(other.latitude),
            radians=True,
        )
        if dist == 0.0:
            return Degree(0.0)
        return Degree(Radian.from_si(az12).to(Degree) % 360.0)

    def forward(self, azimuth: Angle, distance: Length) -> GeoPoint:
        """Return the point reached by travelling ``distance`` along ``azimuth``.

        Args:
            azimuth (Angle): Bearing clockwise from north.
            distance (Length): Distance to travel.

        Returns:
            GeoPoint: Destination of the geodesic forward problem.
        """
        lon, lat, _ = _WGS84.fwd(
            float(self.longitude),
            float(self.latitude),
            float(azimuth),
            float(distance),
            radians=True,
        )
        return GeoPoint.from_rad(lat, lon)

    def __str__(self) -> str:
        return f"({self.lat_deg:.6f}, {self.lon_deg:.6f})"
