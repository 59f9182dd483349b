import numbers
import typing

from measurement.core import entities
from measurement.core import errors
from measurement.core import iterables


Signature = typing.Dict[typing.Any, int]
"""Non-derived dimension definitions (or bare units) mapped to powers."""

_COMPOUND = ('/', '*', '·', ' ')
"""Characters that mark a symbol as a combination of units."""


class Dimension(iterables.ReprStrMixin):
    """One occurrence of a unit, with optional prefix, raised to a power.

    Parameters
    ----------
    unit : `~entities.Unit`
        The unit of measure.

    power : integral, default=1
        The exponent of `unit`. It may be negative or zero.

    prefix : `~entities.Prefix`, optional
        A prefix that scales `unit`.

    Notes
    -----
    Two instances are dimension-equal (see `same_unit`) when they refer to the
    same unit and prefix. Equality also compares powers.
    """

    _display = iterables.Display('{format}', "'{format}'")

    def __init__(
        self,
        unit: entities.Unit,
        power: numbers.Integral=1,
        prefix: entities.Prefix=None,
    ) -> None:
        if not isinstance(unit, entities.Unit):
            raise errors.InvalidArgumentError(
                f"Expected a unit, not {unit!r}"
            ) from None
        if prefix is not None and not isinstance(prefix, entities.Prefix):
            raise errors.InvalidArgumentError(
                f"Expected a prefix, not {prefix!r}"
            ) from None
        if isinstance(power, float) and power.is_integer():
            power = int(power)
        if not isinstance(power, numbers.Integral):
            raise errors.InvalidArgumentError(
                f"Dimension powers must be integral, not {power!r}"
            ) from None
        self._unit = unit
        self._power = int(power)
        self._prefix = prefix

    @property
    def unit(self) -> entities.Unit:
        """The unit of measure."""
        return self._unit

    @property
    def power(self) -> int:
        """The integral exponent."""
        return self._power

    @property
    def prefix(self) -> typing.Optional[entities.Prefix]:
        """The scaling prefix, if any."""
        return self._prefix

    @property
    def definition(self) -> typing.Optional[entities.DimensionDefinition]:
        """The dimension definition of the unit."""
        return self._unit.dimension

    @property
    def factor(self) -> float:
        """The base-unit value of one prefixed unit."""
        if self._prefix is None:
            return self._unit.factor
        return self._unit.factor * self._prefix.factor

    @property
    def scale(self) -> float:
        """The base-unit value of this dimension at its power."""
        return self.factor ** self._power

    def same_unit(self, other: 'Dimension') -> bool:
        """True if `other` has the same unit and prefix."""
        return (
            isinstance(other, Dimension)
            and other._unit is self._unit
            and other._prefix is self._prefix
        )

    def with_power(self, power: numbers.Integral) -> 'Dimension':
        """A copy of this dimension with a new power."""
        return type(self)(self._unit, power, self._prefix)

    def signature(self) -> Signature:
        """The non-derived definitions and powers of this dimension."""
        definition = self.definition
        if definition is None:
            return {self._unit: self._power}
        return {
            base: power * self._power
            for base, power in definition.signature().items()
        }

    def format(self) -> str:
        """A compact symbolic representation, such as ``'km^2'``."""
        symbol = self._unit.symbol or self._unit.key
        if self._prefix is not None:
            symbol = f"{self._prefix.symbol or self._prefix.key}{symbol}"
        if self._power == 1:
            return symbol
        if any(c in symbol for c in _COMPOUND):
            symbol = f"({symbol})"
        return f"{symbol}^{self._power}"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Dimension):
            return NotImplemented
        return self.same_unit(other) and other._power == self._power

    def __hash__(self) -> int:
        return hash((id(self._unit), id(self._prefix), self._power))


def combine(dimensions: typing.Iterable[Dimension]) -> typing.List[Dimension]:
    """Merge dimensions with the same unit and prefix by summing powers.

    The result keeps the order of first appearance and omits any dimension
    whose powers cancel.
    """
    merged: typing.List[Dimension] = []
    for dimension in dimensions:
        for i, existing in enumerate(merged):
            if existing.same_unit(dimension):
                power = existing.power + dimension.power
                merged[i] = existing.with_power(power)
                break
        else:
            merged.append(dimension)
    return [d for d in merged if d.power != 0]


def signature(dimensions: typing.Iterable[Dimension]) -> Signature:
    """The combined non-derived signature of `dimensions`."""
    pairs = (
        pair
        for dimension in dimensions
        for pair in dimension.signature().items()
    )
    return iterables.merge_powers(pairs)


def scale(dimensions: typing.Iterable[Dimension]) -> float:
    """The product of the base-unit scales of `dimensions`."""
    result = 1.0
    for dimension in dimensions:
        result *= dimension.scale
    return result
