"""Length units used for flood radii, trigger ranges and per-tick steps.

All lengths are stored in meters.

Classes:
    Meter: SI base unit for length.
    Kilometer: 1000 meters.

Example:
    >>> radius = Kilometer(0.8)
    >>> float(radius)
    800.0
    >>> radius.to(Meter)
    800.0
"""

from __future__ import annotations

from .unit_float import UnitFloat


class Meter(UnitFloat):
    """Length in meters (family root)."""

    IS_FAMILY_ROOT = True
    SCALE_TO_SI = 1.0
    SYMBOL = "m"


class Kilometer(Meter):
    """Length in kilometers, stored as meters."""

    SCALE_TO_SI = 1000.0
    SYMBOL = "km"


Length = Meter | Kilometer
