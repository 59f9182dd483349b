"""
Values with asymmetric error bounds.

Propagation uses a linear, worst-case error model. Sums and differences add
absolute magnitudes; products, quotients, and powers add (or scale) relative
magnitudes. The relative sums are evaluated as absolute magnitudes, such as
|b|·a.lower + |a|·b.lower for a product, so they stay finite when a central
value is zero. No quadrature is involved anywhere.
"""

import math
import numbers
import operator as standard
import typing

import numpy

from measurement.core import errors
from measurement.core import iterables


EPSILON = 1e-15
"""The tolerance for deciding that two magnitudes are equal."""


class Uncertainty(iterables.ReprStrMixin):
    """A central value with separate lower and upper uncertainties.

    Parameters
    ----------
    value : real
        The central value.

    lower : real, default=0.0
        The absolute magnitude of the uncertainty below `value`.

    upper : real, optional
        The absolute magnitude of the uncertainty above `value`. The default is
        equal to `lower`.

    relative : bool, default=False
        If true, arithmetic and display should treat the uncertainties as
        fractions of `value`. The stored magnitudes are always absolute.

    Raises
    ------
    `~errors.InvalidArgumentError`
        Either magnitude is negative.

    Examples
    --------
    >>> u = Uncertainty(7.6, 1.1, 0.4)
    >>> u.minimum, u.maximum
    (6.5, 8.0)
    >>> u.is_symmetric()
    False
    """

    _display = iterables.Display('{describe}', '{value}, {lower}, {upper}')

    def __init__(
        self,
        value: numbers.Real,
        lower: numbers.Real=0.0,
        upper: numbers.Real=None,
        relative: bool=False,
    ) -> None:
        if upper is None:
            upper = lower
        if lower < 0 or upper < 0:
            raise errors.InvalidArgumentError(
                f"Uncertainty magnitudes must be non-negative,"
                f" not {lower!r} and {upper!r}"
            ) from None
        self._value = float(value)
        self._lower = float(lower)
        self._upper = float(upper)
        self._relative = bool(relative)

    @classmethod
    def from_range(
        cls,
        value: numbers.Real,
        minimum: numbers.Real,
        maximum: numbers.Real,
    ) -> 'Uncertainty':
        """Create an instance from the extremes of a range about `value`."""
        return cls(value, value - minimum, maximum - value)

    @classmethod
    def from_percentage(
        cls,
        value: numbers.Real,
        lower: numbers.Real,
        upper: numbers.Real=None,
    ) -> 'Uncertainty':
        """Create a relative instance from fractions of `value`.

        Parameters
        ----------
        value : real
            The central value.

        lower, upper : real
            The uncertainties, as fractions of `value` (e.g., 0.2 for 20%). The
            default value of `upper` is equal to `lower`.
        """
        if upper is None:
            upper = lower
        scale = abs(value)
        return cls(value, lower * scale, upper * scale, relative=True)

    @property
    def value(self) -> float:
        """The central value."""
        return self._value

    @property
    def lower(self) -> float:
        """The absolute magnitude of the lower uncertainty."""
        return self._lower

    @property
    def upper(self) -> float:
        """The absolute magnitude of the upper uncertainty."""
        return self._upper

    @property
    def is_relative(self) -> bool:
        """True if this instance represents its uncertainties as fractions."""
        return self._relative

    @property
    def minimum(self) -> float:
        """The least value consistent with this uncertainty."""
        return self._value - self._lower

    @property
    def maximum(self) -> float:
        """The greatest value consistent with this uncertainty."""
        return self._value + self._upper

    @property
    def total_uncertainty(self) -> float:
        """The width of the range of consistent values."""
        return self._lower + self._upper

    @property
    def lower_percentage(self) -> float:
        """The lower uncertainty as a fraction of the central value."""
        return self._fraction_of_value(self._lower)

    @property
    def upper_percentage(self) -> float:
        """The upper uncertainty as a fraction of the central value."""
        return self._fraction_of_value(self._upper)

    def _fraction_of_value(self, magnitude: float) -> float:
        if self._value == 0:
            if magnitude == 0:
                return 0.0
            raise errors.DivideByZeroError(
                "Can't express uncertainty relative to a zero value"
            ) from None
        return magnitude / abs(self._value)

    def to_relative(self) -> 'Uncertainty':
        """The same uncertainty in relative representation."""
        return type(self)(self._value, self._lower, self._upper, True)

    def to_absolute(self) -> 'Uncertainty':
        """The same uncertainty in absolute representation."""
        return type(self)(self._value, self._lower, self._upper, False)

    def is_symmetric(self) -> bool:
        """True if the lower and upper uncertainties are equal."""
        return abs(self._lower - self._upper) < EPSILON

    def is_consistent(self, other: 'Uncertainty') -> bool:
        """True if the ranges of `self` and `other` overlap."""
        if not isinstance(other, Uncertainty):
            other = type(self)(other)
        return (
            self.minimum <= other.maximum
            and other.minimum <= self.maximum
        )

    def max(self, *others):
        """The operand with the greatest central value."""
        return maximum(self, *others)

    def min(self, *others):
        """The operand with the least central value."""
        return minimum(self, *others)

    def describe(self) -> str:
        """A plain-text summary, such as ``'3.2 (±0.5)'`` or ``'2 (+10%, -5%)'``."""
        if self._relative:
            lower = f"{100 * self.lower_percentage:g}%"
            upper = f"{100 * self.upper_percentage:g}%"
        else:
            lower, upper = f"{self._lower:g}", f"{self._upper:g}"
        if self.is_symmetric():
            return f"{self._value:g} (±{upper})"
        return f"{self._value:g} (+{upper}, -{lower})"

    def _with(self, value: float, lower: float, upper: float, relative: bool):
        """Create a new instance from precomputed components."""
        return type(self)(value, lower, upper, relative)

    def _propagated(
        self,
        value: float,
        lower: float,
        upper: float,
    ) -> 'Uncertainty':
        """Create the result of a product, quotient, or power.

        The result uses relative representation unless its value is zero, in
        which case no relative magnitude exists.
        """
        return type(self)(value, lower, upper, relative=value != 0)

    def __neg__(self) -> 'Uncertainty':
        """Negate the value and keep both magnitudes."""
        return self._with(-self._value, self._lower, self._upper, self._relative)

    def __pos__(self) -> 'Uncertainty':
        return self

    def __abs__(self) -> 'Uncertainty':
        return -self if self._value < 0 else self

    def __add__(self, other):
        if isinstance(other, Uncertainty):
            return self._with(
                self._value + other._value,
                self._lower + other._lower,
                self._upper + other._upper,
                False,
            )
        if isinstance(other, numbers.Real):
            return self._with(
                self._value + other, self._lower, self._upper, False,
            )
        return NotImplemented

    __radd__ = __add__

    def __sub__(self, other):
        if isinstance(other, Uncertainty):
            return self._with(
                self._value - other._value,
                self._lower + other._lower,
                self._upper + other._upper,
                False,
            )
        if isinstance(other, numbers.Real):
            return self._with(
                self._value - other, self._lower, self._upper, False,
            )
        return NotImplemented

    def __rsub__(self, other):
        if isinstance(other, numbers.Real):
            return (-self) + other
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, Uncertainty):
            a, b = abs(self._value), abs(other._value)
            return self._propagated(
                self._value * other._value,
                b * self._lower + a * other._lower,
                b * self._upper + a * other._upper,
            )
        if isinstance(other, numbers.Real):
            return self._scale(other)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other):
        if isinstance(other, Uncertainty):
            if other._value == 0:
                raise errors.DivideByZeroError(
                    "Can't divide by an uncertain zero"
                ) from None
            value = self._value / other._value
            a, b = abs(value), abs(other._value)
            return self._propagated(
                value,
                (self._lower + a * other._lower) / b,
                (self._upper + a * other._upper) / b,
            )
        if isinstance(other, numbers.Real):
            if other == 0:
                raise errors.DivideByZeroError(
                    f"Can't divide {self} by zero"
                ) from None
            return self._scale(1 / other)
        return NotImplemented

    def __rtruediv__(self, other):
        if isinstance(other, numbers.Real):
            return (self ** -1)._scale(other)
        return NotImplemented

    def _scale(self, factor: numbers.Real) -> 'Uncertainty':
        """Multiply by a plain number, keeping the representation."""
        k = abs(factor)
        scaled = self._with(
            self._value * k, self._lower * k, self._upper * k, self._relative,
        )
        return -scaled if factor < 0 else scaled

    def __pow__(self, power: numbers.Real) -> 'Uncertainty':
        """Raise to a numerical power, scaling the relative uncertainty."""
        if not isinstance(power, numbers.Real):
            return NotImplemented
        if self._value == 0 and power < 0:
            raise errors.DivideByZeroError(
                f"Can't raise an uncertain zero to power {power}"
            ) from None
        value = float(numpy.power(self._value, power))
        slope = self._slope(value, power)
        return self._propagated(value, self._lower * slope, self._upper * slope)

    def _slope(self, value: float, power: numbers.Real) -> float:
        """The magnitude of the derivative of x**power at the central value."""
        if power == 0:
            return 0.0
        if self._value != 0:
            return abs(power * value / self._value)
        if power >= 1:
            return 1.0 if power == 1 else 0.0
        if self._lower == 0 and self._upper == 0:
            return 0.0
        raise errors.DivideByZeroError(
            f"Can't propagate an uncertain zero through power {power}"
        ) from None

    def sqrt(self) -> 'Uncertainty':
        """The square root, with propagated uncertainty."""
        return self ** 0.5

    def _ordering(operator):
        """Implement an ordering operator via central values."""
        def method(self: 'Uncertainty', other) -> bool:
            if isinstance(other, Uncertainty):
                return operator(self._value, other._value)
            if isinstance(other, numbers.Real):
                return operator(self._value, other)
            return NotImplemented
        return method

    __lt__ = _ordering(standard.lt)
    __le__ = _ordering(standard.le)
    __gt__ = _ordering(standard.gt)
    __ge__ = _ordering(standard.ge)

    def __eq__(self, other) -> bool:
        """True if all components are equal within a small tolerance."""
        if not isinstance(other, Uncertainty):
            return NotImplemented
        pairs = (
            (self._value, other._value),
            (self._lower, other._lower),
            (self._upper, other._upper),
        )
        return all(
            math.isclose(a, b, rel_tol=1e-9, abs_tol=EPSILON)
            for a, b in pairs
        )

    __hash__ = None


Comparable = typing.Union[Uncertainty, numbers.Real]


def _central(this: Comparable) -> float:
    return this.value if isinstance(this, Uncertainty) else this


def maximum(*values: Comparable) -> Comparable:
    """The operand with the greatest central value, unchanged."""
    if not values:
        raise errors.InvalidArgumentError("maximum requires operands") from None
    return max(values, key=_central)


def minimum(*values: Comparable) -> Comparable:
    """The operand with the least central value, unchanged."""
    if not values:
        raise errors.InvalidArgumentError("minimum requires operands") from None
    return min(values, key=_central)
