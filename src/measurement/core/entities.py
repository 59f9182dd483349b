"""
Catalog entries: dimension definitions, units, prefixes and measurement systems.

These are plain mutable records. A `~corpus.Corpus` owns the entries that it
registers and is responsible for cross-entry invariants, such as the
resolvability of derived dimensions and the acyclicity of system parents.
"""

import enum
import numbers
import re
import typing

from measurement.core import errors
from measurement.core import iterables


class PrefixType(enum.IntEnum):
    """The classification of a metric prefix."""

    SI = 0
    SI_BINARY = 1
    SI_UNOFFICIAL = 2


class UnitType(enum.Enum):
    """The scale on which a unit is usually expressed."""

    SI = 'si'
    CUSTOMARY = 'customary'
    RANGE = 'range'
    BINARY = 'binary'
    FRACTIONAL = 'fractional'
    WHOLE = 'whole'


def _as_tuple(these: typing.Optional[typing.Iterable[str]]) -> typing.Tuple[str, ...]:
    """Normalize an optional collection of strings."""
    if these is None:
        return ()
    if isinstance(these, str):
        return (these,)
    return tuple(these)


class Entity(iterables.ReprStrMixin):
    """Base class for named catalog entries."""

    _display = iterables.Display('{key}', "'{key}'")

    def __init__(
        self,
        key: str,
        name: str=None,
        symbol: str=None,
        other_names: typing.Iterable[str]=None,
        other_symbols: typing.Iterable[str]=None,
    ) -> None:
        self.key = errors.require_text(key, name='key')
        self.name = name or key
        self.symbol = symbol
        self.other_names = _as_tuple(other_names)
        self.other_symbols = _as_tuple(other_symbols)

    def searchable(self) -> typing.List[str]:
        """All strings that may identify this entry."""
        fields = [self.key, self.name, self.symbol]
        fields.extend(self.other_names)
        fields.extend(self.other_symbols)
        return [field for field in fields if field]


_DERIVED_TERM = r"\s*(?P<operator>[*/]?)\s*(?P<name>\w+)(?:\^(?P<power>[-+]?\d+))?"
_DERIVED = re.compile(
    r"^\s*\w+(?:\^[-+]?\d+)?(?:\s*[*/]\s*\w+(?:\^[-+]?\d+)?)*\s*$"
)


def parse_derived(string: str) -> typing.Tuple[typing.Tuple[str, int], ...]:
    """Parse a derived-dimension expression into (key, power) pairs.

    Parameters
    ----------
    string : str
        An expression of dimension keys joined by ``'*'`` or ``'/'``, such as
        ``'length/time'`` or ``'mass*length/time^2'``. Each key may carry an
        integral exponent. The key ``'1'`` is a placeholder numerator, as in
        ``'1/time'``.

    Returns
    -------
    tuple of 2-tuples
        The key and net power of each distinct component, in order of first
        appearance. Repeated components are merged, so ``'time*time'`` becomes
        ``(('time', 2),)``.

    Raises
    ------
    `~errors.InvalidArgumentError`
        The string is not a well-formed expression.
    """
    if not _DERIVED.match(string):
        raise errors.InvalidArgumentError(
            f"Can't parse derived expression {string!r}"
        ) from None
    pairs = []
    for match in re.finditer(_DERIVED_TERM, string):
        name = match['name']
        if name == '1':
            continue
        power = int(match['power'] or 1)
        sign = -1 if match['operator'] == '/' else 1
        pairs.append((name, sign * power))
    return tuple(iterables.merge_powers(pairs).items())


class DimensionDefinition(Entity):
    """A named kind of physical dimension, such as time or length.

    Assigning a new `derived_string` immediately re-parses the derived
    components. Parsing the same string again always produces the same result.
    """

    def __init__(
        self,
        key: str,
        name: str=None,
        symbol: str=None,
        other_names: typing.Iterable[str]=None,
        other_symbols: typing.Iterable[str]=None,
        base_unit_key: str=None,
        vector: bool=False,
        dimensionless: bool=False,
        derived_string: str=None,
    ) -> None:
        super().__init__(key, name, symbol, other_names, other_symbols)
        self.base_unit_key = base_unit_key
        self.vector = vector
        self.is_dimensionless = dimensionless
        self.units: typing.Dict[str, 'Unit'] = {}
        """The units of this dimension, keyed by unit key."""
        self.resolved: typing.Optional[typing.Dict['DimensionDefinition', int]] = None
        """The base definitions and powers of a derived definition.

        This is `None` until a corpus resolves the derived components.
        """
        self._derived_string = None
        self._derived = ()
        self.derived_string = derived_string

    @property
    def derived_string(self) -> typing.Optional[str]:
        """The expression that defines this dimension, if derived."""
        return self._derived_string

    @derived_string.setter
    def derived_string(self, string: typing.Optional[str]):
        self._derived_string = string or None
        self.update_derived()

    def update_derived(self) -> None:
        """Parse the current derived string into components."""
        self.resolved = None
        if self._derived_string is None:
            self._derived = ()
        else:
            self._derived = parse_derived(self._derived_string)

    @property
    def derived(self) -> typing.Tuple[typing.Tuple[str, int], ...]:
        """The (key, power) components of a derived definition."""
        return self._derived

    @property
    def is_derived(self) -> bool:
        """True if this definition depends on other definitions."""
        return bool(self._derived)

    @property
    def base_unit(self) -> typing.Optional['Unit']:
        """The unit relative to which all units of this dimension scale."""
        if self.base_unit_key in self.units:
            return self.units[self.base_unit_key]
        return next(iter(self.units.values()), None)

    def signature(self) -> typing.Dict['DimensionDefinition', int]:
        """The non-derived definitions and powers equivalent to this one.

        An unresolved definition is its own signature.
        """
        if self.resolved is not None:
            return dict(self.resolved)
        return {self: 1}


class Unit(Entity):
    """A concrete unit of measure.

    The conversion of a value `v` in this unit to the base unit of its
    dimension is ``v * factor + offset``.
    """

    def __init__(
        self,
        key: str,
        name: str=None,
        plural: str=None,
        symbol: str=None,
        other_names: typing.Iterable[str]=None,
        other_symbols: typing.Iterable[str]=None,
        unit_type: UnitType=UnitType.SI,
        systems: typing.Iterable[str]=None,
        factor: numbers.Real=1.0,
        offset: numbers.Real=0.0,
        rare: bool=False,
        estimation: bool=False,
        dimension: DimensionDefinition=None,
        prefix_name: str=None,
    ) -> None:
        super().__init__(key, name, symbol, other_names, other_symbols)
        if not factor > 0:
            raise errors.InvalidArgumentError(
                f"Unit {key!r} must have a positive factor, not {factor!r}"
            ) from None
        self.plural = plural
        self.unit_type = UnitType(unit_type)
        self.systems = _as_tuple(systems)
        """Keys of the measurement systems that include this unit."""
        self.factor = float(factor)
        self.offset = float(offset)
        self.is_rare = rare
        self.is_estimation = estimation
        self.dimension = dimension
        self.prefix_name = prefix_name
        """The name of a prefix built into this unit, as in kilogram."""

    def searchable(self) -> typing.List[str]:
        fields = super().searchable()
        if self.plural:
            fields.insert(2, self.plural)
        return fields

    @property
    def is_base_unit(self) -> bool:
        """True if this is the base unit of its dimension."""
        return (
            self.dimension is not None
            and self.dimension.base_unit is self
        )

    def to_base(self, value: numbers.Real) -> float:
        """Convert `value` in this unit to the base unit."""
        return value * self.factor + self.offset

    def from_base(self, value: numbers.Real) -> float:
        """Convert `value` in the base unit to this unit."""
        return (value - self.offset) / self.factor


class Prefix(Entity):
    """A multiplicative scale that combines with a unit.

    The numerical factor is ``base ** power`` when both are given; otherwise,
    it is `multiplier`.
    """

    def __init__(
        self,
        key: str,
        symbol: str=None,
        prefix_type: PrefixType=PrefixType.SI,
        multiplier: numbers.Real=None,
        power: numbers.Real=None,
        base: numbers.Real=None,
        rare: bool=False,
        other_names: typing.Iterable[str]=None,
    ) -> None:
        super().__init__(key, key, symbol, other_names)
        self.prefix_type = PrefixType(prefix_type)
        self.multiplier = multiplier
        self.power = power
        self.base = base
        self.is_rare = rare
        if not self.factor > 0:
            raise errors.InvalidArgumentError(
                f"Prefix {key!r} must have a positive factor"
            ) from None

    @property
    def factor(self) -> float:
        """The numerical scale of this prefix."""
        if self.base is not None and self.power is not None:
            return float(self.base ** self.power)
        if self.multiplier is None:
            return 0.0
        return float(self.multiplier)

    def apply(self, value: numbers.Real) -> float:
        """Express `value` in prefixed units."""
        return value / self.factor

    def remove(self, value: numbers.Real) -> float:
        """Express a prefixed `value` in unprefixed units."""
        return value * self.factor


class MeasurementSystem(Entity):
    """A named system of units.

    The parent relation is a key into the system table of the owning corpus.
    The corpus assigns `depth` when it registers the system.
    """

    def __init__(
        self,
        key: str,
        name: str=None,
        parent_key: str=None,
        historical: bool=False,
    ) -> None:
        super().__init__(key, name)
        self._parent_key = parent_key
        self.is_historical = historical
        self.depth = 0
        """The number of ancestors of this system."""

    @property
    def parent_key(self) -> typing.Optional[str]:
        """The key of the parent system, if any."""
        return self._parent_key

    @property
    def is_root(self) -> bool:
        """True if this system has no parent."""
        return self._parent_key is None
