"""Victims detected in the flood area and their audit records."""

from __future__ import annotations

from dataclasses import dataclass, replace

from floodsim.geo import GeoPoint
from floodsim.unit import Degree, Meter


@dataclass
class Victim:
    """A person awaiting rescue.

    The position never changes after detection and ``rescued`` flips from
    ``False`` to ``True`` at most once.

    Attributes:
        id (int): Index of the victim in the registry of its run.
        position (GeoPoint): Fixed location.
        rescued (bool): Whether an agent has completed the rescue.
    """

    id: int
    position: GeoPoint
    rescued: bool = False

    def mark_rescued(self) -> bool:
        """Flag the victim as rescued.

        Returns:
            bool: ``True`` if this call performed the rescue, ``False`` if the
            victim had already been rescued (no change).
        """
        if self.rescued:
            return False
        self.rescued = True
        return True

    def copy(self) -> Victim:
        return replace(self)


@dataclass(frozen=True)
class DetectionRecord:
    """One line of the detection audit trail.

    Attributes:
        victim_id (int): Victim the record describes.
        position (GeoPoint): Where it was detected.
        offset (Meter): Distance from the flood center.
        bearing (Degree): Bearing from the flood center.
    """

    victim_id: int
    position: GeoPoint
    offset: Meter
    bearing: Degree

    def describe(self) -> str:
        return (
            f"Detected victim V{self.victim_id} at {self.position} "
            f"({float(self.offset):.0f} m @ {self.bearing.to(Degree):.0f}° from center)"
        )
