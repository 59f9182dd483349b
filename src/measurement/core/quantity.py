"""
Numerical values paired with units.

A `~quantity.Quantity` is immutable. Every arithmetic operation returns a new
instance and leaves its operands unchanged. Operations that need to consult
the catalog (parsing unit identifiers and simplifying products) use the
`~corpus.Corpus` that created the quantity.
"""

import numbers
import operator as standard
import typing

import numpy

from measurement.core import dimension as _dimension
from measurement.core import entities
from measurement.core import errors
from measurement.core import iterables
from measurement.core import simplify as _simplify


if typing.TYPE_CHECKING:
    from measurement.core.corpus import Corpus


UnitLike = typing.Union[str, entities.Unit, _dimension.Dimension]


class Quantity(iterables.ReprStrMixin):
    """A numerical value with an ordered collection of dimensions.

    Parameters
    ----------
    value : real
        The numerical value.

    *units : string, `~entities.Unit`, or `~dimension.Dimension`
        Zero or more units. A string is a unit identifier that the corpus
        resolves, as in ``'km'`` or ``'second^-1'``. A single list or tuple
        of units is also accepted.

    corpus : `~corpus.Corpus`, optional
        The registry that resolves unit identifiers and provides derived units
        for simplification. It is required if any unit is a string.

    Notes
    -----
    The constructor keeps the given dimensions as they are. Use `simplify` to
    merge and rewrite them.

    Examples
    --------
    >>> corpus = Corpus.default()
    >>> q = corpus.quantity(2, 'minute') * corpus.quantity(3.4, 'minute')
    >>> q.value, str(q.dimensions[0])
    (6.8, 'min^2')
    """

    _display = iterables.Display('{format}', '{value}, {dimensions_string}')

    def __init__(
        self,
        value: numbers.Real,
        *units: UnitLike,
        corpus: 'Corpus'=None,
    ) -> None:
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise errors.InvalidArgumentError(
                f"A quantity requires a real value, not {value!r}"
            ) from None
        if len(units) == 1 and isinstance(units[0], (list, tuple)):
            units = tuple(units[0])
        self._value = float(value)
        self._corpus = corpus
        self._dimensions = tuple(self._resolve(u) for u in units)

    def _resolve(self, unit: UnitLike) -> _dimension.Dimension:
        """Convert a unit-like object to a dimension."""
        if isinstance(unit, _dimension.Dimension):
            return unit
        if isinstance(unit, entities.Unit):
            return _dimension.Dimension(unit)
        if isinstance(unit, str):
            if self._corpus is None:
                raise errors.InvalidArgumentError(
                    f"Can't resolve unit {unit!r} without a corpus"
                ) from None
            return self._corpus.parse_dimension(unit)
        raise errors.InvalidArgumentError(
            f"Can't interpret {unit!r} as a unit"
        ) from None

    def _new(
        self,
        value: numbers.Real,
        dimensions: typing.Iterable[_dimension.Dimension],
    ) -> 'Quantity':
        """Create a quantity that shares this instance's corpus."""
        return type(self)(value, *dimensions, corpus=self._corpus)

    @property
    def value(self) -> float:
        """The numerical value."""
        return self._value

    @property
    def dimensions(self) -> typing.Tuple[_dimension.Dimension, ...]:
        """The dimensions, in canonical order."""
        return self._dimensions

    @property
    def corpus(self) -> typing.Optional['Corpus']:
        """The registry that created this quantity, if any."""
        return self._corpus

    @property
    def is_dimensionless(self) -> bool:
        """True if this quantity has no dimensions."""
        return not self._dimensions

    @property
    def dimensions_string(self) -> str:
        """The dimensions as a space-separated string."""
        return ' '.join(d.format() for d in self._dimensions)

    def format(self) -> str:
        """A plain-text representation, such as ``'3.7 min'``."""
        if self.is_dimensionless:
            return str(self._value)
        return f"{self._value} {self.dimensions_string}"

    def signature(self) -> _dimension.Signature:
        """The non-derived dimension definitions and powers of this quantity."""
        return _dimension.signature(self._dimensions)

    def is_commensurable(self, other: typing.Union['Quantity', numbers.Real]) -> bool:
        """True if `other` shares a dimensional basis with this quantity.

        A plain number is commensurable only with a dimensionless quantity.
        """
        if isinstance(other, Quantity):
            return self.signature() == other.signature()
        if isinstance(other, numbers.Real):
            return self.is_dimensionless
        return False

    def _require_commensurable(self, other: 'Quantity') -> None:
        if not self.is_commensurable(other):
            raise errors.IncommensurableError(
                self.dimensions_string or 'dimensionless',
                other.dimensions_string or 'dimensionless',
            )

    # Conversion

    def convert(
        self,
        *targets: UnitLike,
        strict: bool=True,
    ) -> typing.Optional['Quantity']:
        """Express this quantity in different units.

        Parameters
        ----------
        *targets : string, `~entities.Unit`, or `~dimension.Dimension`
            The units of the result. A unit or an identifier without an
            explicit power takes the total power of the matching dimension
            definition in this quantity, or 1 if there is no match.

        strict : bool, default=True
            If true, raise `~errors.IncommensurableError` when the conversion
            is not possible. Otherwise, return ``None``.

        Notes
        -----
        The conversion ratio is the product of ``(factor ** power)`` over the
        current dimensions divided by the same product over the targets. An
        additive offset (as for degrees Celsius) applies only when both sides
        consist of a single dimension with power 1.
        """
        if len(targets) == 1 and isinstance(targets[0], (list, tuple)):
            targets = tuple(targets[0])
        dimensions = [self._target(t) for t in targets]
        if self.signature() != _dimension.signature(dimensions):
            if not strict:
                return None
            raise errors.IncommensurableError(
                self.dimensions_string or 'dimensionless',
                ' '.join(d.format() for d in dimensions) or 'dimensionless',
            )
        return self._new(convert_value(self._value, self._dimensions, dimensions), dimensions)

    def _target(self, target: UnitLike) -> _dimension.Dimension:
        """Create a target dimension for conversion."""
        if isinstance(target, _dimension.Dimension):
            return target
        explicit = isinstance(target, str) and '^' in target
        resolved = self._resolve(target)
        if explicit:
            return resolved
        definition = resolved.definition
        powers = [
            d.power for d in self._dimensions
            if definition is not None and d.definition is definition
        ]
        power = sum(powers) if powers else 1
        return resolved.with_power(power or 1)

    def simplify(self) -> 'Quantity':
        """Merge like dimensions, then rewrite them with derived units.

        Dimensions of the same definition are expressed in the unit of the
        first such dimension before any derived unit replaces them.
        """
        merged, factor = _simplify.merge_definitions(self._dimensions)
        if self._corpus is None:
            return self._new(self._value * factor, merged)
        dimensions, scale = _simplify.simplify(merged, self._corpus)
        return self._new(self._value * factor * scale, dimensions)

    def _reduced(
        self,
        value: float,
        dimensions: typing.Iterable[_dimension.Dimension],
    ) -> 'Quantity':
        """Combine like units and apply derived-unit rewrites."""
        combined = _dimension.combine(dimensions)
        if self._corpus is None:
            return self._new(value, combined)
        simplified, scale = _simplify.simplify(combined, self._corpus)
        return self._new(value * scale, simplified)

    def tidy_prefixes(self) -> 'Quantity':
        """Absorb the prefix of any dimension whose power is not 1.

        A prefix on a squared or inverse unit is ambiguous, so this moves its
        scale into the value and leaves the bare unit.
        """
        value = self._value
        dimensions = []
        for d in self._dimensions:
            if d.prefix is not None and d.power != 1:
                value *= d.prefix.factor ** d.power
                d = _dimension.Dimension(d.unit, d.power)
            dimensions.append(d)
        return self._new(value, dimensions)

    # Arithmetic

    def _addition(operator):
        """Implement addition or subtraction."""
        def forward(self: 'Quantity', other):
            if isinstance(other, Quantity):
                that = self._aligned(other)
                return self._new(operator(self._value, that), self._dimensions)
            if isinstance(other, numbers.Real):
                return self._new(operator(self._value, other), self._dimensions)
            return NotImplemented
        def reverse(self: 'Quantity', other):
            if isinstance(other, numbers.Real):
                return self._new(operator(other, self._value), self._dimensions)
            return NotImplemented
        return forward, reverse

    def _aligned(self, other: 'Quantity') -> float:
        """The value of `other` in the dimensions of this quantity."""
        if self.is_dimensionless and other.is_dimensionless:
            return other._value
        if self.is_dimensionless or other.is_dimensionless:
            raise errors.IncommensurableError(
                self.dimensions_string or 'dimensionless',
                other.dimensions_string or 'dimensionless',
            )
        if _same_dimensions(self._dimensions, other._dimensions):
            return other._value
        self._require_commensurable(other)
        return convert_value(other._value, other._dimensions, self._dimensions)

    __add__, __radd__ = _addition(standard.add)
    __sub__, __rsub__ = _addition(standard.sub)

    def __mul__(self, other):
        if isinstance(other, Quantity):
            return self._reduced(
                self._value * other._value,
                self._dimensions + other._dimensions,
            )
        if isinstance(other, numbers.Real):
            return self._new(self._value * other, self._dimensions)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other):
        if isinstance(other, Quantity):
            if other._value == 0:
                raise errors.DivideByZeroError(
                    f"Can't divide {self} by {other}"
                ) from None
            inverted = tuple(d.with_power(-d.power) for d in other._dimensions)
            return self._reduced(
                self._value / other._value,
                self._dimensions + inverted,
            )
        if isinstance(other, numbers.Real):
            if other == 0:
                raise errors.DivideByZeroError(
                    f"Can't divide {self} by zero"
                ) from None
            return self._new(self._value / other, self._dimensions)
        return NotImplemented

    def __rtruediv__(self, other):
        if isinstance(other, numbers.Real):
            if self._value == 0:
                raise errors.DivideByZeroError(
                    f"Can't divide {other} by {self}"
                ) from None
            inverted = [d.with_power(-d.power) for d in self._dimensions]
            return self._new(other / self._value, inverted)
        return NotImplemented

    def __pow__(self, power):
        """Raise to a plain number or a dimensionless quantity."""
        if isinstance(power, Quantity):
            if not power.is_dimensionless:
                raise errors.IncommensurableError(power.dimensions_string)
            power = power._value
        if not isinstance(power, numbers.Real):
            return NotImplemented
        dimensions = []
        for d in self._dimensions:
            exponent = d.power * power
            if not float(exponent).is_integer():
                raise errors.InvalidOperationError(
                    f"Can't raise {d} to power {power}:"
                    f" the result would have a non-integral power"
                ) from None
            dimensions.append(d.with_power(int(exponent)))
        return self._new(float(numpy.power(self._value, power)), dimensions)

    def __rpow__(self, base):
        if not isinstance(base, numbers.Real):
            return NotImplemented
        if not self.is_dimensionless:
            raise errors.IncommensurableError(self.dimensions_string)
        return base ** self._value

    def __neg__(self) -> 'Quantity':
        return self._new(-self._value, self._dimensions)

    def __pos__(self) -> 'Quantity':
        return self

    def __abs__(self) -> 'Quantity':
        return self._new(abs(self._value), self._dimensions)

    def __round__(self, ndigits: int=None) -> 'Quantity':
        from measurement.core import functions
        return functions.round_half_even(self, ndigits or 0)

    def __floor__(self) -> 'Quantity':
        from measurement.core import functions
        return functions.floor(self)

    def __ceil__(self) -> 'Quantity':
        from measurement.core import functions
        return functions.ceiling(self)

    def __float__(self) -> float:
        if not self.is_dimensionless:
            raise errors.InvalidOperationError(
                f"Can't convert {self} to a plain number"
            ) from None
        return self._value

    # Comparison

    def _comparison(operator):
        """Implement an ordering operator via converted values."""
        def method(self: 'Quantity', other) -> bool:
            if isinstance(other, Quantity):
                return operator(self._value, self._aligned(other))
            if isinstance(other, numbers.Real):
                if not self.is_dimensionless:
                    raise errors.IncommensurableError(
                        self.dimensions_string, 'dimensionless',
                    )
                return operator(self._value, other)
            return NotImplemented
        return method

    __lt__ = _comparison(standard.lt)
    __le__ = _comparison(standard.le)
    __gt__ = _comparison(standard.gt)
    __ge__ = _comparison(standard.ge)

    def __eq__(self, other) -> bool:
        """True if `other` has the same magnitude in commensurable units."""
        if isinstance(other, Quantity):
            if not self.is_commensurable(other):
                return False
            return self._value == self._aligned(other)
        if isinstance(other, numbers.Real):
            return self.is_dimensionless and self._value == other
        return NotImplemented

    __hash__ = None


def _same_dimensions(
    a: typing.Sequence[_dimension.Dimension],
    b: typing.Sequence[_dimension.Dimension],
) -> bool:
    """True if `a` and `b` contain the same dimensions in any order."""
    return (
        len(a) == len(b)
        and all(a.count(d) == b.count(d) for d in a)
    )


def convert_value(
    value: float,
    source: typing.Sequence[_dimension.Dimension],
    target: typing.Sequence[_dimension.Dimension],
) -> float:
    """Convert `value` in `source` dimensions to `target` dimensions.

    The caller is responsible for checking that the dimensions are
    commensurable.
    """
    if _is_affine(source) and _is_affine(target):
        (s,), (t,) = source, target
        base = s.unit.to_base(value * (s.factor / s.unit.factor))
        return t.unit.from_base(base) / (t.factor / t.unit.factor)
    return value * _dimension.scale(source) / _dimension.scale(target)


def _is_affine(dimensions: typing.Sequence[_dimension.Dimension]) -> bool:
    """True if `dimensions` is a single dimension with power 1."""
    return len(dimensions) == 1 and dimensions[0].power == 1


def maximum(*quantities: typing.Union[Quantity, numbers.Real]):
    """The greatest operand, compared in commensurable units.

    The result is the original operand, not a converted copy.
    """
    return _extremum(quantities, standard.gt)


def minimum(*quantities: typing.Union[Quantity, numbers.Real]):
    """The least operand, compared in commensurable units.

    The result is the original operand, not a converted copy.
    """
    return _extremum(quantities, standard.lt)


def _extremum(quantities, operator):
    if not quantities:
        raise errors.InvalidArgumentError("Expected at least one operand") from None
    if len(quantities) == 1 and isinstance(quantities[0], (list, tuple)):
        quantities = tuple(quantities[0])
    reference = next(
        (q for q in quantities if isinstance(q, Quantity)),
        Quantity(0),
    )
    best = quantities[0]
    best_value = _compared(reference, best)
    for this in quantities[1:]:
        value = _compared(reference, this)
        if operator(value, best_value):
            best, best_value = this, value
    return best


def _compared(reference: Quantity, this) -> float:
    """The value of `this` in the dimensions of `reference`."""
    if isinstance(this, Quantity):
        return reference._aligned(this)
    if isinstance(this, numbers.Real):
        if not reference.is_dimensionless:
            raise errors.IncommensurableError(
                reference.dimensions_string, 'dimensionless',
            )
        return this
    raise errors.InvalidArgumentError(
        f"Can't compare {this!r} to a quantity"
    ) from None
