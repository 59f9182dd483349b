"""
Exact rational numbers with explicit indeterminate values.

Instances of `~fraction.Fraction` always hold their numerator and denominator
in lowest terms, with the sign carried by the numerator. A denominator of zero
encodes one of three indeterminate values: `NaN` (numerator 0), positive
infinity (numerator 1) and negative infinity (numerator -1). Arithmetic with an
indeterminate operand follows IEEE floating-point rules, so that, for example,
infinity plus a finite value is infinity and infinity minus infinity is `NaN`.
"""

import fractions
import math
import numbers
import operator as standard
import re
import typing

from measurement.core import errors
from measurement.core import iterables


MAX_DENOMINATOR = 10**12
"""The largest denominator tried when approximating a float."""

_MIXED = re.compile(
    r"""
    ^\s*
    (?:(?P<whole>[-+]?\d+)\s+)?     # optional whole part of a mixed fraction
    (?P<numerator>[-+]?\d+)
    \s*[/:]\s*                      # general ('n/d') or ratio ('n:d') form
    (?P<denominator>[-+]?\d+)
    \s*$
    """, re.VERBOSE
)

_INDETERMINATE = {
    'nan': (0, 0),
    'infinity': (1, 0),
    '+infinity': (1, 0),
    'inf': (1, 0),
    '-infinity': (-1, 0),
    '-inf': (-1, 0),
}

Styles = typing.Literal['general', 'mixed', 'ratio']


def _sign(n: int) -> int:
    """The sign of `n` as -1, 0, or +1."""
    return (n > 0) - (n < 0)


class Fraction(iterables.ReprStrMixin):
    """An exact rational number.

    Parameters
    ----------
    numerator : integral, default=0
        The numerator.

    denominator : integral, default=1
        The denominator. A value of 0 produces an indeterminate fraction whose
        kind depends on the sign of `numerator`.

    Examples
    --------
    Fractions always reduce on construction:

    >>> str(Fraction(-78, 24))
    '-13/4'

    A zero denominator produces an indeterminate value rather than an error:

    >>> Fraction(3, 0) == Fraction.POSITIVE_INFINITY
    True
    >>> Fraction(0, 0).is_nan
    True
    """

    _display = iterables.Display('{format}', '{numerator}, {denominator}')

    NaN: 'Fraction'
    POSITIVE_INFINITY: 'Fraction'
    NEGATIVE_INFINITY: 'Fraction'
    ZERO: 'Fraction'
    ONE: 'Fraction'

    def __init__(
        self,
        numerator: numbers.Integral=0,
        denominator: numbers.Integral=1,
    ) -> None:
        for value in (numerator, denominator):
            if not isinstance(value, numbers.Integral):
                raise errors.InvalidArgumentError(
                    f"Fraction components must be integral, not {value!r}"
                ) from None
        n, d = int(numerator), int(denominator)
        if d == 0:
            n = _sign(n)
        else:
            if d < 0:
                n, d = -n, -d
            g = math.gcd(n, d)
            n, d = n // g, d // g
        self._numerator = n
        self._denominator = d

    @property
    def numerator(self) -> int:
        """The reduced numerator, carrying the sign."""
        return self._numerator

    @property
    def denominator(self) -> int:
        """The reduced, non-negative denominator."""
        return self._denominator

    @classmethod
    def from_float(cls, value: numbers.Real) -> 'Fraction':
        """Create the simplest fraction that reproduces `value`.

        This method tries the best rational approximation with a denominator no
        larger than `MAX_DENOMINATOR` and falls back to the exact binary value
        if that approximation does not convert back to `value`.

        Examples
        --------
        >>> str(Fraction.from_float(0.6))
        '3/5'
        >>> str(Fraction.from_float(1 / 3))
        '1/3'
        """
        if isinstance(value, Fraction):
            return value
        if isinstance(value, numbers.Integral):
            return cls(int(value), 1)
        x = float(value)
        if math.isnan(x):
            return cls(0, 0)
        if math.isinf(x):
            return cls(1 if x > 0 else -1, 0)
        exact = fractions.Fraction(x)
        approximate = exact.limit_denominator(MAX_DENOMINATOR)
        best = approximate if float(approximate) == x else exact
        return cls(best.numerator, best.denominator)

    @classmethod
    def parse(cls, text: str) -> 'Fraction':
        """Create a fraction from its string representation.

        Accepted forms are general (``'n/d'``), ratio (``'n:d'``), mixed
        (``'w n/d'``), integer and decimal numbers, and the names of the
        indeterminate values (``'NaN'``, ``'Infinity'``, ``'-Infinity'``).
        Parsing is the inverse of `~fraction.Fraction.format`.
        """
        errors.require_text(text)
        string = text.strip()
        key = string.lower()
        if key in _INDETERMINATE:
            return cls(*_INDETERMINATE[key])
        match = _MIXED.match(string)
        if match:
            parsed = {k: v for k, v in match.groupdict().items() if v}
            n = int(parsed['numerator'])
            d = int(parsed['denominator'])
            if 'whole' not in parsed:
                return cls(n, d)
            whole = int(parsed['whole'])
            sign = -1 if parsed['whole'].startswith('-') else 1
            return cls(whole * d + sign * n, d)
        try:
            return cls(int(string), 1)
        except ValueError:
            pass
        try:
            return cls.from_float(float(string))
        except ValueError:
            raise errors.InvalidArgumentError(
                f"Can't parse {text!r} as a fraction"
            ) from None

    @property
    def is_indeterminate(self) -> bool:
        """True if this is `NaN` or an infinity."""
        return self._denominator == 0

    @property
    def is_nan(self) -> bool:
        """True if this is the undefined value."""
        return self._denominator == 0 and self._numerator == 0

    @property
    def is_infinity(self) -> bool:
        """True if this is positive or negative infinity."""
        return self._denominator == 0 and self._numerator != 0

    @property
    def is_unit_fraction(self) -> bool:
        """True if this has the form 1/d for a positive integer d."""
        return self._numerator == 1 and self._denominator > 0

    @property
    def is_proper_fraction(self) -> bool:
        """True if the magnitude of this fraction is less than one."""
        if self.is_indeterminate:
            return False
        return abs(self._numerator) < self._denominator

    def inverse(self) -> 'Fraction':
        """The reciprocal of this fraction.

        Indeterminate values are their own inverse. The inverse of zero is
        positive infinity.
        """
        if self.is_indeterminate:
            return self
        return type(self)(self._denominator, self._numerator)

    def negate(self) -> 'Fraction':
        """The additive inverse of this fraction."""
        return type(self)(-self._numerator, self._denominator)

    def sqrt(self) -> 'Fraction':
        """The exact square root of this fraction.

        The result is `NaN` when this fraction is negative or is not the square
        of another rational number.
        """
        if self.is_nan or self._numerator < 0:
            return type(self).NaN
        if self.is_infinity:
            return self
        n = math.isqrt(self._numerator)
        d = math.isqrt(self._denominator)
        if n * n == self._numerator and d * d == self._denominator:
            return type(self)(n, d)
        return type(self).NaN

    def compare(self, other: typing.Union['Fraction', numbers.Real, str]) -> int:
        """Compare this fraction to `other`, returning -1, 0, or +1.

        Comparisons are exact. Indeterminate values have a total order in which
        negative infinity is least, followed by `NaN`, all finite values, and
        positive infinity. Two `NaN` values compare equal.
        """
        that = self._coerce(other)
        if that is None:
            raise errors.InvalidArgumentError(
                f"Can't compare a fraction to {other!r}"
            ) from None
        a, b = self._order(), that._order()
        return (a > b) - (a < b)

    def _order(self) -> typing.Tuple[int, int]:
        """A key that sorts fractions exactly."""
        if self.is_indeterminate:
            rank = {-1: 0, 0: 1, 1: 3}[self._numerator]
            return (rank, fractions.Fraction(0))
        return (2, fractions.Fraction(self._numerator, self._denominator))

    @classmethod
    def _coerce(cls, other) -> typing.Optional['Fraction']:
        """Convert `other` to a fraction, if possible."""
        if isinstance(other, Fraction):
            return other
        if isinstance(other, numbers.Integral):
            return cls(int(other), 1)
        if isinstance(other, numbers.Real):
            x = float(other)
            if math.isnan(x) or math.isinf(x):
                return cls.from_float(x)
            exact = fractions.Fraction(x)
            return cls(exact.numerator, exact.denominator)
        if isinstance(other, str):
            return cls.parse(other)

    def __float__(self) -> float:
        if self.is_nan:
            return math.nan
        if self.is_infinity:
            return math.inf * self._numerator
        return self._numerator / self._denominator

    def __int__(self) -> int:
        if self.is_indeterminate:
            raise errors.InvalidOperationError(
                f"Can't convert {self} to an integer"
            ) from None
        whole = abs(self._numerator) // self._denominator
        return _sign(self._numerator) * whole

    def __hash__(self) -> int:
        return hash((self._numerator, self._denominator))

    def __bool__(self) -> bool:
        return self._numerator != 0

    def __abs__(self) -> 'Fraction':
        return type(self)(abs(self._numerator), self._denominator)

    def __neg__(self) -> 'Fraction':
        return self.negate()

    def __pos__(self) -> 'Fraction':
        return self

    def _comparison(operator):
        """Implement a comparison operator via `compare`."""
        def method(self: 'Fraction', other) -> bool:
            if isinstance(other, str) or self._coerce(other) is None:
                return NotImplemented
            return operator(self.compare(other), 0)
        return method

    __eq__ = _comparison(standard.eq)
    __ne__ = _comparison(standard.ne)
    __lt__ = _comparison(standard.lt)
    __le__ = _comparison(standard.le)
    __gt__ = _comparison(standard.gt)
    __ge__ = _comparison(standard.ge)

    def _indeterminate_sum(self, other: 'Fraction') -> 'Fraction':
        """Add with IEEE rules when an operand is indeterminate."""
        if self.is_nan or other.is_nan:
            return type(self).NaN
        if self.is_infinity and other.is_infinity:
            if self._numerator == other._numerator:
                return self
            return type(self).NaN
        return self if self.is_infinity else other

    def _indeterminate_product(self, other: 'Fraction') -> 'Fraction':
        """Multiply with IEEE rules when an operand is indeterminate."""
        if self.is_nan or other.is_nan:
            return type(self).NaN
        sign = _sign(self._numerator) * _sign(other._numerator)
        if sign == 0:
            return type(self).NaN
        return type(self)(sign, 0)

    def _arithmetic(operator, exact):
        """Implement a binary operator with exact finite arithmetic."""
        def forward(self: 'Fraction', other):
            that = self._operand(other)
            if that is None:
                return NotImplemented
            return exact(self, that, operator)
        def reverse(self: 'Fraction', other):
            that = self._operand(other)
            if that is None:
                return NotImplemented
            return exact(that, self, operator)
        return forward, reverse

    @classmethod
    def _operand(cls, other) -> typing.Optional['Fraction']:
        """Convert a numeric operand to a fraction."""
        if isinstance(other, Fraction):
            return other
        if isinstance(other, numbers.Integral):
            return cls(int(other), 1)
        if isinstance(other, numbers.Real):
            return cls.from_float(other)

    def _add(a: 'Fraction', b: 'Fraction', operator) -> 'Fraction':
        sign = 1 if operator is standard.add else -1
        if a.is_indeterminate or b.is_indeterminate:
            return a._indeterminate_sum(b if sign > 0 else -b)
        return type(a)(
            a._numerator * b._denominator + sign * b._numerator * a._denominator,
            a._denominator * b._denominator,
        )

    def _mul(a: 'Fraction', b: 'Fraction', operator) -> 'Fraction':
        if operator is standard.truediv:
            if b.is_nan or (b.is_infinity and a.is_indeterminate):
                return type(a).NaN
            if b.is_infinity:
                return type(a).ZERO
            # Dividing by zero multiplies by positive infinity.
            b = b.inverse()
        if a.is_indeterminate or b.is_indeterminate:
            return a._indeterminate_product(b)
        return type(a)(
            a._numerator * b._numerator,
            a._denominator * b._denominator,
        )

    def _mod(a: 'Fraction', b: 'Fraction', operator) -> 'Fraction':
        if a.is_indeterminate or b.is_indeterminate or not b:
            return type(a).NaN
        dividend = a._numerator * b._denominator
        divisor = b._numerator * a._denominator
        return type(a)(dividend % divisor, a._denominator * b._denominator)

    __add__, __radd__ = _arithmetic(standard.add, _add)
    __sub__, __rsub__ = _arithmetic(standard.sub, _add)
    __mul__, __rmul__ = _arithmetic(standard.mul, _mul)
    __truediv__, __rtruediv__ = _arithmetic(standard.truediv, _mul)
    __mod__, __rmod__ = _arithmetic(standard.mod, _mod)

    def __pow__(self, power: numbers.Integral) -> 'Fraction':
        """Raise this fraction to an integral power."""
        if not isinstance(power, numbers.Integral):
            if isinstance(power, Fraction) and power._denominator == 1:
                power = power._numerator
            else:
                raise errors.InvalidArgumentError(
                    f"Can't raise a fraction to non-integral power {power!r}"
                ) from None
        p = int(power)
        if self.is_indeterminate:
            return type(self).from_float(float(self) ** p)
        if p < 0:
            return self.inverse() ** -p
        return type(self)(self._numerator ** p, self._denominator ** p)

    def format(self, style: Styles='general') -> str:
        """Format this fraction as a string.

        Parameters
        ----------
        style : {'general', 'mixed', 'ratio'}
            The layout to use. The general form is ``'n/d'``, or ``'n'`` when
            the denominator is 1. The mixed form separates the whole part, as in
            ``'7 1/3'``. The ratio form is ``'n:d'``. Indeterminate values
            always appear as ``'NaN'``, ``'Infinity'`` or ``'-Infinity'``.
        """
        if style not in typing.get_args(Styles):
            raise errors.InvalidArgumentError(
                f"Unknown fraction style {style!r}"
            ) from None
        if self.is_nan:
            return 'NaN'
        if self.is_infinity:
            return 'Infinity' if self._numerator > 0 else '-Infinity'
        n, d = self._numerator, self._denominator
        if style == 'ratio':
            return f"{n}:{d}"
        if d == 1:
            return str(n)
        if style == 'mixed' and abs(n) > d:
            whole, rest = divmod(abs(n), d)
            sign = '-' if n < 0 else ''
            return f"{sign}{whole} {rest}/{d}"
        return f"{n}/{d}"


Fraction.NaN = Fraction(0, 0)
Fraction.POSITIVE_INFINITY = Fraction(1, 0)
Fraction.NEGATIVE_INFINITY = Fraction(-1, 0)
Fraction.ZERO = Fraction(0, 1)
Fraction.ONE = Fraction(1, 1)
