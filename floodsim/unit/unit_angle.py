"""Angular units for bearings and geographic coordinates.

Angles are stored in radians. Bearings follow the geodesic convention used
by :mod:`floodsim.geo`: clockwise from true north, so ``Degree(90)`` is due
east.

Classes:
    Radian: SI base unit for angles.
    Degree: 1/360 of a turn.
"""

from __future__ import annotations

from math import pi

from .unit_float import UnitFloat


class Radian(UnitFloat):
    """Angle in radians (family root)."""

    IS_FAMILY_ROOT = True
    SCALE_TO_SI = 1.0
    SYMBOL = "rad"


class Degree(Radian):
    """Angle in degrees, stored as radians.

    Example:
        >>> east = Degree(90)
        >>> round(float(east), 4)
        1.5708
        >>> east.to(Degree)
        90.0
    """

    SCALE_TO_SI = pi / 180
    SYMBOL = "°"


Angle = Radian | Degree
