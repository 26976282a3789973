"""Time units for tick intervals and elapsed simulation time.

Classes:
    Second: SI base unit for time.
    Millisecond: 1/1000 second; the natural scale for tick intervals.
    ClockTime: Seconds displayed as ``HH:MM:SS.mmm``.

Example:
    >>> interval = Millisecond(50)
    >>> float(interval)
    0.05
    >>> str(ClockTime(3725.5))
    '01:02:05.500'
"""

from __future__ import annotations

from math import isfinite

from .unit_float import UnitFloat


class Second(UnitFloat):
    """Time in seconds (family root)."""

    IS_FAMILY_ROOT = True
    SCALE_TO_SI = 1.0
    SYMBOL = "s"


class Millisecond(Second):
    """Time in milliseconds, stored as seconds."""

    SCALE_TO_SI = 0.001
    SYMBOL = "ms"


class ClockTime(Second):
    """Elapsed time rendered on a 24-hour style clock."""

    SCALE_TO_SI = 1.0

    def __str__(self) -> str:
        if not isfinite(float(self)):
            return "--:--:--"
        h, r = divmod(float(self), 3600)
        m, s = divmod(r, 60)
        return f"{int(h):02d}:{int(m):02d}:{s:06.3f}"

    def __repr__(self) -> str:
        return f"ClockTime({str(self)})"


Time = Second | Millisecond | ClockTime
