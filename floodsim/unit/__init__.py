"""Type-safe measurement units for the flood rescue simulation.

Distances (flood radius, trigger range, per-tick step), angles (bearings,
coordinates) and times (tick interval, elapsed run time) are carried as unit
instances so that a radius in kilometers cannot silently be mixed with a
tick interval in milliseconds. Values are stored in SI and compare equal to
plain floats holding the same SI amount.

Unit Families:
    - Length: Meter (root), Kilometer
    - Angle: Radian (root), Degree
    - Time: Second (root), Millisecond, ClockTime

Example:
    >>> from floodsim.unit import Kilometer, Meter, Millisecond
    >>> Kilometer(0.8) == Meter(800)
    True
    >>> Meter(12) * 3
    Meter(36)
    >>> Millisecond(50) + Millisecond(25)
    Millisecond(75)
"""

from .unit_angle import Angle, Degree, Radian
from .unit_distance import Kilometer, Length, Meter
from .unit_float import Unit, UnitFloat
from .unit_time import ClockTime, Millisecond, Second, Time

__all__ = [
    "Unit",
    "UnitFloat",
    "Radian",
    "Degree",
    "Angle",
    "Meter",
    "Kilometer",
    "Length",
    "Second",
    "Millisecond",
    "ClockTime",
    "Time",
]
