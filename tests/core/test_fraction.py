import math

import pytest

from measurement.core import errors
from measurement.core.fraction import Fraction


def test_reduction():
    """A fraction should reduce to lowest terms with the sign on top."""
    f = Fraction(-78, 24)
    assert (f.numerator, f.denominator) == (-13, 4)
    f = Fraction(6, -8)
    assert (f.numerator, f.denominator) == (-3, 4)
    assert Fraction(0, 7) == Fraction.ZERO


def test_inverse_and_negate():
    """Test the reciprocal and additive inverse."""
    f = Fraction(-78, 24)
    assert f.inverse() == Fraction(-4, 13)
    assert f.negate() == Fraction(13, 4)
    assert -f == Fraction(13, 4)
    assert Fraction.ZERO.inverse() == Fraction.POSITIVE_INFINITY
    assert Fraction.NaN.inverse().is_nan


def test_indeterminate_values():
    """A zero denominator should encode an indeterminate value."""
    assert Fraction(1, 0) == Fraction.POSITIVE_INFINITY
    assert Fraction(5, 0) == Fraction.POSITIVE_INFINITY
    assert Fraction(-3, 0) == Fraction.NEGATIVE_INFINITY
    assert Fraction(0, 0) == Fraction.NaN
    assert Fraction(0, 0).is_nan
    assert not Fraction.NaN.is_unit_fraction
    assert Fraction.POSITIVE_INFINITY.is_infinity
    assert Fraction.NEGATIVE_INFINITY.is_indeterminate
    assert not Fraction(1, 2).is_indeterminate


def test_predicates():
    """Test unit and proper fractions."""
    assert Fraction(1, 3).is_unit_fraction
    assert not Fraction(2, 3).is_unit_fraction
    assert Fraction(-2, 3).is_proper_fraction
    assert not Fraction(7, 3).is_proper_fraction
    assert not Fraction.POSITIVE_INFINITY.is_proper_fraction


@pytest.fixture
def arithmetic():
    """Cases of binary operations and their expected results."""
    return [
        (Fraction(1, 2), '+', Fraction(1, 3), Fraction(5, 6)),
        (Fraction(1, 2), '-', Fraction(1, 3), Fraction(1, 6)),
        (Fraction(2, 3), '*', Fraction(3, 4), Fraction(1, 2)),
        (Fraction(2, 3), '/', Fraction(4, 9), Fraction(3, 2)),
        (Fraction(1, 2), '+', 1, Fraction(3, 2)),
        (2, '*', Fraction(1, 4), Fraction(1, 2)),
        (Fraction(1, 2), '+', 0.25, Fraction(3, 4)),
        (Fraction.POSITIVE_INFINITY, '+', Fraction(7, 2), Fraction.POSITIVE_INFINITY),
        (Fraction(7, 2), '-', Fraction.POSITIVE_INFINITY, Fraction.NEGATIVE_INFINITY),
        (Fraction.POSITIVE_INFINITY, '-', Fraction.POSITIVE_INFINITY, Fraction.NaN),
        (Fraction.POSITIVE_INFINITY, '+', Fraction.POSITIVE_INFINITY, Fraction.POSITIVE_INFINITY),
        (Fraction.NaN, '+', Fraction(1, 2), Fraction.NaN),
        (Fraction.POSITIVE_INFINITY, '*', Fraction(-2, 1), Fraction.NEGATIVE_INFINITY),
        (Fraction.POSITIVE_INFINITY, '*', Fraction.ZERO, Fraction.NaN),
        (Fraction(3, 4), '/', Fraction.ZERO, Fraction.POSITIVE_INFINITY),
        (Fraction(-3, 4), '/', Fraction.ZERO, Fraction.NEGATIVE_INFINITY),
        (Fraction.ZERO, '/', Fraction.ZERO, Fraction.NaN),
        (Fraction(3, 4), '/', Fraction.POSITIVE_INFINITY, Fraction.ZERO),
        (Fraction.POSITIVE_INFINITY, '/', Fraction.NEGATIVE_INFINITY, Fraction.NaN),
    ]


OPERATORS = {
    '+': lambda a, b: a + b,
    '-': lambda a, b: a - b,
    '*': lambda a, b: a * b,
    '/': lambda a, b: a / b,
}


def test_arithmetic(arithmetic):
    """Test exact arithmetic, including indeterminate operands."""
    for a, op, b, expected in arithmetic:
        result = OPERATORS[op](a, b)
        assert isinstance(result, Fraction)
        assert result == expected, f"{a} {op} {b}"


def test_indeterminate_with_large_values():
    """Indeterminate results do not depend on the size of finite operands."""
    huge = Fraction(10**400)
    tiny = Fraction(1, 10**400)
    assert Fraction.POSITIVE_INFINITY + huge == Fraction.POSITIVE_INFINITY
    assert huge + Fraction.NEGATIVE_INFINITY == Fraction.NEGATIVE_INFINITY
    assert huge - Fraction.POSITIVE_INFINITY == Fraction.NEGATIVE_INFINITY
    assert Fraction.NEGATIVE_INFINITY - huge == Fraction.NEGATIVE_INFINITY
    assert Fraction.NEGATIVE_INFINITY * -huge == Fraction.POSITIVE_INFINITY
    assert tiny * Fraction.NEGATIVE_INFINITY == Fraction.NEGATIVE_INFINITY
    assert (Fraction.POSITIVE_INFINITY * Fraction.ZERO).is_nan
    assert (Fraction.NaN + huge).is_nan
    assert (huge * Fraction.NaN).is_nan
    assert huge / Fraction.NEGATIVE_INFINITY == Fraction.ZERO
    assert -huge / Fraction.ZERO == Fraction.NEGATIVE_INFINITY
    assert Fraction.POSITIVE_INFINITY / -tiny == Fraction.NEGATIVE_INFINITY
    assert 10**400 + Fraction.POSITIVE_INFINITY == Fraction.POSITIVE_INFINITY


def test_modulus():
    """Modulus should follow the sign of the divisor."""
    assert Fraction(-13, 4) % 1 == Fraction(3, 4)
    assert Fraction(13, 4) % 1 == Fraction(1, 4)
    assert Fraction(7, 2) % Fraction(-1, 1) == Fraction(-1, 2)
    assert Fraction(5, 3) % Fraction(1, 2) == Fraction(1, 6)
    assert (Fraction(1, 2) % 0).is_nan
    assert (Fraction.POSITIVE_INFINITY % 2).is_nan


def test_power():
    """Test integral powers, including negative powers."""
    assert Fraction(2, 3) ** 2 == Fraction(4, 9)
    assert Fraction(2, 3) ** -2 == Fraction(9, 4)
    assert Fraction(2, 3) ** 0 == Fraction.ONE
    assert Fraction(-1, 2) ** 3 == Fraction(-1, 8)
    assert Fraction(2, 3) ** Fraction(2) == Fraction(4, 9)
    with pytest.raises(errors.InvalidArgumentError):
        Fraction(2, 3) ** 0.5


def test_sqrt():
    """The square root should be exact or NaN."""
    assert Fraction(4, 9).sqrt() == Fraction(2, 3)
    assert Fraction(0).sqrt() == Fraction.ZERO
    assert Fraction(2, 1).sqrt().is_nan
    assert Fraction(-4, 9).sqrt().is_nan
    assert Fraction.POSITIVE_INFINITY.sqrt() == Fraction.POSITIVE_INFINITY


def test_comparison():
    """Test comparisons with fractions and plain numbers."""
    assert Fraction(1, 3) < Fraction(1, 2)
    assert Fraction(1, 2) == 0.5
    assert Fraction(1, 2) > 0.49
    assert Fraction(3, 1) == 3
    assert Fraction(1, 3).compare(Fraction(2, 6)) == 0
    assert Fraction(1, 3).compare(1) == -1
    assert Fraction(1, 3).compare('1/4') == 1
    assert Fraction.NEGATIVE_INFINITY < Fraction.NaN < Fraction(-10**9)
    assert Fraction(10**9) < Fraction.POSITIVE_INFINITY
    assert Fraction.NaN == Fraction(0, 0)


def test_conversion():
    """Test conversion to built-in numbers."""
    assert float(Fraction(3, 4)) == 0.75
    assert math.isnan(float(Fraction.NaN))
    assert float(Fraction.NEGATIVE_INFINITY) == -math.inf
    assert int(Fraction(7, 2)) == 3
    assert int(Fraction(-7, 2)) == -3
    with pytest.raises(errors.InvalidOperationError):
        int(Fraction.POSITIVE_INFINITY)
    assert abs(Fraction(-3, 4)) == Fraction(3, 4)


def test_from_float():
    """A float should become its simplest exact fraction."""
    assert Fraction.from_float(0.6) == Fraction(3, 5)
    assert Fraction.from_float(1 / 3) == Fraction(1, 3)
    assert Fraction.from_float(-2.25) == Fraction(-9, 4)
    assert Fraction.from_float(4) == Fraction(4)
    assert Fraction.from_float(math.nan).is_nan
    assert Fraction.from_float(-math.inf) == Fraction.NEGATIVE_INFINITY


@pytest.fixture
def strings():
    """Strings and the fractions they represent."""
    return {
        '1/2': Fraction(1, 2),
        ' -3/4 ': Fraction(-3, 4),
        '6/-8': Fraction(-3, 4),
        '2:3': Fraction(2, 3),
        '7 1/3': Fraction(22, 3),
        '-7 1/3': Fraction(-22, 3),
        '5': Fraction(5),
        '0.75': Fraction(3, 4),
        'NaN': Fraction.NaN,
        'Infinity': Fraction.POSITIVE_INFINITY,
        '-Infinity': Fraction.NEGATIVE_INFINITY,
    }


def test_parse(strings):
    """Test parsing of all accepted forms."""
    for string, expected in strings.items():
        assert Fraction.parse(string) == expected, string


def test_parse_invalid():
    """Malformed strings should not parse."""
    for string in ('', '   ', 'one half', '1/2/3'):
        with pytest.raises(errors.InvalidArgumentError):
            Fraction.parse(string)


def test_format():
    """Test the general, mixed, and ratio forms."""
    assert str(Fraction(-13, 4)) == '-13/4'
    assert Fraction(22, 3).format('mixed') == '7 1/3'
    assert Fraction(-22, 3).format('mixed') == '-7 1/3'
    assert Fraction(1, 3).format('mixed') == '1/3'
    assert Fraction(-2, 3).format('ratio') == '-2:3'
    assert Fraction(4).format() == '4'
    assert Fraction.NaN.format() == 'NaN'
    assert Fraction.NEGATIVE_INFINITY.format('ratio') == '-Infinity'
    with pytest.raises(errors.InvalidArgumentError):
        Fraction(1, 2).format('roman')


def test_string_round_trip():
    """Parsing a formatted fraction should recover it."""
    values = [
        Fraction(-13, 4),
        Fraction(22, 3),
        Fraction(0),
        Fraction(1, 10**6),
        Fraction(-5),
    ]
    for f in values:
        for style in ('general', 'mixed', 'ratio'):
            assert Fraction.parse(f.format(style)) == f


def test_invalid_components():
    """Components must be integers."""
    with pytest.raises(errors.InvalidArgumentError):
        Fraction(1.5, 2)
    with pytest.raises(ValueError):
        Fraction(1, '2')


def test_hashable():
    """Equal fractions should hash equally."""
    assert len({Fraction(1, 2), Fraction(2, 4), Fraction(-1, -2)}) == 1
