"""Randomised victim detection inside the flood disc.

Victims are spread uniformly *by area*: the radial offset is
``radius * sqrt(u)`` with ``u ~ U(0, 1)``. Sampling the offset uniformly
instead would crowd victims around the center, because the ring at distance
``r`` has circumference proportional to ``r``.
"""

from __future__ import annotations

import logging
from math import floor

import numpy as np

from floodsim.geo import GeoPoint
from floodsim.unit import Degree, Length, Meter

from .victim import DetectionRecord, Victim

logger = logging.getLogger(__name__)

COUNT_JITTER = (0.8, 1.2)


def sample_victim_count(density: float, rng: np.random.Generator) -> int:
    """Draw ``round(density * U(0.8, 1.2))``, rounding halves up, floored at 1."""
    scaled = density * rng.uniform(*COUNT_JITTER)
    return max(1, int(floor(scaled + 0.5)))


def generate_victims(
    center: GeoPoint,
    radius: Length,
    density: float,
    rng: np.random.Generator,
) -> tuple[list[Victim], list[DetectionRecord]]:
    """Generate a fresh victim set inside the disc around ``center``.

    The returned list replaces any previous set; ids restart at 0 and match
    list positions so they can be used as registry indices.

    Args:
        center (GeoPoint): Flood center.
        radius (Length): Flood radius.
        density (float): Target count hint.
        rng (np.random.Generator): Source of randomness.

    Returns:
        tuple[list[Victim], list[DetectionRecord]]: Victims and one detection
        record per victim.
    """
    count = sample_victim_count(density, rng)
    bearings = rng.uniform(0.0, 360.0, size=count)
    offsets = float(radius) * np.sqrt(rng.random(size=count))

    victims: list[Victim] = []
    records: list[DetectionRecord] = []
    for victim_id, (bearing_deg, offset_m) in enumerate(zip(bearings, offsets)):
        bearing = Degree(float(bearing_deg))
        offset = Meter(float(offset_m))
        position = center.forward(bearing, offset)
        victims.append(Victim(id=victim_id, position=position))
        record = DetectionRecord(victim_id=victim_id, position=position, offset=offset, bearing=bearing)
        records.append(record)
        logger.debug(record.describe())

    logger.debug("Detection complete: %d victims within %.0f m of %s", count, float(radius), center)
    return victims, records

