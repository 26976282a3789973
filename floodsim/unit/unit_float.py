"""Float-backed measurement units with unit-family checking.

Every unit stores its value in SI (meters, radians, seconds) and keeps the
scale of the unit it was created with only for display. Units belong to a
family rooted at the class flagged with ``IS_FAMILY_ROOT``; arithmetic and
comparison across families raises ``TypeError`` while plain numbers are
accepted and interpreted as SI values.

Classes:
    Unit: Family bookkeeping shared by every unit class.
    UnitFloat: ``float`` subclass implementing the arithmetic.

Example:
    >>> class Meter(UnitFloat):
    ...     IS_FAMILY_ROOT = True
    ...     SYMBOL = "m"
    >>> class Kilometer(Meter):
    ...     SCALE_TO_SI = 1000.0
    ...     SYMBOL = "km"
    >>> float(Kilometer(0.8))
    800.0
    >>> str(Kilometer(0.8))
    '0.8 km'
"""

from __future__ import annotations

from typing import ClassVar

Number = int | float


class Unit:
    """Base class assigning each unit class to its family root.

    Attributes:
        ROOT (ClassVar[type[Unit]]): First ancestor flagged ``IS_FAMILY_ROOT``.
        SYMBOL (ClassVar[str]): Display symbol.
        IS_FAMILY_ROOT (ClassVar[bool]): Marks the root class of a family.
    """

    __slots__ = ()

    ROOT: ClassVar[type[Unit]]
    SYMBOL: ClassVar[str] = ""
    IS_FAMILY_ROOT: ClassVar[bool] = False

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.__dict__.get("IS_FAMILY_ROOT", False):
            cls.ROOT = cls
            return
        for base in cls.mro()[1:]:
            if base.__dict__.get("IS_FAMILY_ROOT", False):
                cls.ROOT = base
                return
        cls.ROOT = cls

    @classmethod
    def _check_same_root(cls, other: object) -> None:
        """Reject operands from another unit family.

        Plain ``int``/``float`` operands are allowed and treated as SI values.

        Raises:
            TypeError: If ``other`` is a unit of a different family or not a number.
        """
        if isinstance(other, Unit):
            if cls.ROOT is not type(other).ROOT:
                msg = f"Incompatible units: {cls.ROOT.__name__} and {type(other).ROOT.__name__}"
                raise TypeError(msg)
            return
        if not isinstance(other, Number):
            msg = f"Unsupported operand for {cls.__name__}: {type(other).__name__}"
            raise TypeError(msg)


class UnitFloat(float, Unit):
    """Float holding an SI value, tagged with a unit family.

    Attributes:
        SCALE_TO_SI (ClassVar[float]): Factor converting the native scale to SI.
    """

    SCALE_TO_SI: ClassVar[float] = 1.0
    IS_FAMILY_ROOT: ClassVar[bool] = True

    def __new__(cls, value: Number):
        return float.__new__(cls, float(value) * cls.SCALE_TO_SI)

    @classmethod
    def from_si(cls, si_value: float) -> UnitFloat:
        """Build an instance from a value that is already in SI."""
        return float.__new__(cls, si_value)

    def to(self, unit_type: type[UnitFloat]) -> float:
        """Return the value expressed in ``unit_type``'s native scale."""
        self._check_same_root(unit_type.from_si(0.0))
        return float(self) / unit_type.SCALE_TO_SI

    def as_unit(self, unit_type: type[UnitFloat]) -> UnitFloat:
        """Re-tag the value as ``unit_type`` without changing the SI amount."""
        self._check_same_root(unit_type.from_si(0.0))
        return unit_type.from_si(float(self))

    def __add__(self, other: UnitFloat | Number) -> UnitFloat:
        self._check_same_root(other)
        return type(self).from_si(float(self) + float(other))

    def __radd__(self, other: UnitFloat | Number) -> UnitFloat:
        return self.__add__(other)

    def __sub__(self, other: UnitFloat | Number) -> UnitFloat:
        self._check_same_root(other)
        return type(self).from_si(float(self) - float(other))

    def __rsub__(self, other: UnitFloat | Number) -> UnitFloat:
        self._check_same_root(other)
        return type(self).from_si(float(other) - float(self))

    def __mul__(self, k: Number) -> UnitFloat:
        if isinstance(k, Unit) or not isinstance(k, Number):
            return NotImplemented
        return type(self).from_si(float(self) * float(k))

    def __rmul__(self, k: Number) -> UnitFloat:
        return self.__mul__(k)

    def __truediv__(self, k: Number) -> UnitFloat | float:
        # Same-family division gives a plain ratio.
        if isinstance(k, Unit):
            self._check_same_root(k)
            return float(self) / float(k)
        if not isinstance(k, Number):
            return NotImplemented
        return type(self).from_si(float(self) / float(k))

    def __neg__(self) -> UnitFloat:
        return type(self).from_si(-float(self))

    def __abs__(self) -> UnitFloat:
        return type(self).from_si(abs(float(self)))

    def __lt__(self, other: UnitFloat | Number) -> bool:
        self._check_same_root(other)
        return float(self) < float(other)

    def __le__(self, other: UnitFloat | Number) -> bool:
        self._check_same_root(other)
        return float(self) <= float(other)

    def __gt__(self, other: UnitFloat | Number) -> bool:
        self._check_same_root(other)
        return float(self) > float(other)

    def __ge__(self, other: UnitFloat | Number) -> bool:
        self._check_same_root(other)
        return float(self) >= float(other)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Unit) and type(self).ROOT is not type(other).ROOT:
            return False
        if not isinstance(other, Number):
            return NotImplemented
        return float(self) == float(other)

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = float.__hash__

    def __str__(self) -> str:
        return f"{self.to(type(self)):g} {type(self).SYMBOL}".strip()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to(type(self)):g})"
