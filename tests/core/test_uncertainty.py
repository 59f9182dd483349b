import pytest

from measurement.core import errors
from measurement.core import uncertainty
from measurement.core.uncertainty import Uncertainty


def test_construction():
    """Test the basic constructor and its factories."""
    u = Uncertainty(4.5, 1.2)
    assert u.lower == 1.2 and u.upper == 1.2
    assert not u.is_relative
    u = Uncertainty.from_range(2, 1, 4)
    assert (u.value, u.lower, u.upper) == (2, 1, 2)
    assert not u.is_relative
    u = Uncertainty.from_percentage(2, 0, 1.25)
    assert (u.value, u.lower, u.upper) == (2, 0, 2.5)
    assert u.is_relative


def test_negative_magnitudes():
    """Negative uncertainties are invalid."""
    with pytest.raises(errors.InvalidArgumentError):
        Uncertainty(1, -0.1, 0.1)
    with pytest.raises(errors.InvalidArgumentError):
        Uncertainty(1, 0.1, -0.1)
    with pytest.raises(ValueError):
        Uncertainty.from_range(2, 3, 4)


def test_properties():
    """Test derived magnitudes."""
    u = Uncertainty(7.6, 1.1, 0.4)
    assert u.total_uncertainty == pytest.approx(1.5)
    assert u.minimum == pytest.approx(6.5)
    assert u.maximum == pytest.approx(8.0)
    assert u.lower_percentage == pytest.approx(0.1447368, abs=1e-5)
    assert u.upper_percentage == pytest.approx(0.0526316, abs=1e-5)
    assert not u.is_symmetric()


def test_symmetric():
    """Equal magnitudes are symmetric in either representation."""
    u1 = Uncertainty(6, 0.5)
    u2 = Uncertainty.from_percentage(7, 0.10, 0.10)
    assert u1.is_symmetric()
    assert u1.lower_percentage == u1.upper_percentage
    assert u2.is_symmetric()
    assert u2.lower == u2.upper


def test_percentage_of_zero():
    """A nonzero uncertainty has no percentage of a zero value."""
    assert Uncertainty(0).lower_percentage == 0.0
    with pytest.raises(errors.DivideByZeroError):
        Uncertainty(0, 0.1).upper_percentage


def test_consistent():
    """Ranges that overlap or touch are consistent."""
    u1 = Uncertainty(7, 0.6)
    u2 = Uncertainty(6, 0.5)
    u3 = Uncertainty(5, 0.5)
    assert u1.is_consistent(u2)
    assert not u1.is_consistent(u3)
    assert u2.is_consistent(u3)
    assert u3.is_consistent(5.4)


def test_representation():
    """Switching representation keeps the magnitudes."""
    u = Uncertainty(2, 0.1, 0.2)
    r = u.to_relative()
    assert r.is_relative
    assert (r.lower, r.upper) == (0.1, 0.2)
    assert not r.to_absolute().is_relative
    assert r == u


def test_pow():
    """Powers scale the relative uncertainty."""
    u1 = Uncertainty(2, 0.2)
    assert u1.upper_percentage == pytest.approx(0.1)
    u2 = u1 ** 2
    assert u2.value == pytest.approx(4)
    assert u2.upper_percentage == pytest.approx(0.2)
    assert u2.upper == pytest.approx(0.8)
    assert u2.is_relative
    u3 = u1 ** -1
    assert u3.value == pytest.approx(0.5)
    assert u3.upper_percentage == pytest.approx(0.1)
    with pytest.raises(errors.DivideByZeroError):
        Uncertainty(0, 0.1) ** -1


def test_sqrt():
    """The square root halves the relative uncertainty."""
    u = Uncertainty(9, 0.4).sqrt()
    assert u.value == pytest.approx(3)
    assert u.upper == pytest.approx(0.0666667, abs=1e-6)
    assert u.is_relative


def test_zero_value():
    """Products, quotients, and powers stay defined at a zero value."""
    u = Uncertainty(0.0, 1.0) * Uncertainty(2.0, 0.1)
    assert (u.value, u.lower, u.upper) == pytest.approx((0.0, 2.0, 2.0))
    assert not u.is_relative
    u = Uncertainty(2.0, 0.1, 0.3) * Uncertainty(0.0, 1.0, 0.5)
    assert (u.value, u.lower, u.upper) == pytest.approx((0.0, 2.0, 1.0))
    u = Uncertainty(0.0, 0.3, 0.6) / Uncertainty(3.0, 0.1)
    assert (u.value, u.lower, u.upper) == pytest.approx((0.0, 0.1, 0.2))
    assert not u.is_relative
    u = Uncertainty(0.0, 0.2) ** 1
    assert (u.value, u.lower, u.upper) == pytest.approx((0.0, 0.2, 0.2))
    u = Uncertainty(0.0, 0.2) ** 2
    assert (u.value, u.lower, u.upper) == pytest.approx((0.0, 0.0, 0.0))
    assert Uncertainty(0.0).sqrt() == Uncertainty(0.0)
    with pytest.raises(errors.DivideByZeroError):
        Uncertainty(0.0, 0.1).sqrt()
    u = Uncertainty(0.0, 1.0) * Uncertainty(2.0, 0.1) + 1.5
    assert (u.minimum, u.maximum) == pytest.approx((-0.5, 3.5))


def test_max_min():
    """The extremal operand is returned unchanged."""
    u1 = Uncertainty(2, 1, 0.5)
    u2 = Uncertainty(3, 0.5, 1)
    assert u1.max(u2) is u2
    u1 = Uncertainty(4, 1, 0.5)
    u2 = Uncertainty(4, 0.5, 1)
    assert u1.min(u2) is u1
    u3 = Uncertainty(2, 3, 3)
    assert u2.min(u3) is u3
    assert uncertainty.maximum(u1, 5.0, u3) == 5.0
    assert uncertainty.minimum(u1, 5.0, u3) is u3
    with pytest.raises(errors.InvalidArgumentError):
        uncertainty.maximum()


@pytest.fixture
def binary():
    """Binary operations between uncertain values."""
    return [
        {
            'operands': (Uncertainty(6, 0.5, 0.2), Uncertainty(2.1, 0.1, 0.3)),
            'operation': lambda a, b: a + b,
            'expected': (8.1, 0.6, 0.5),
            'relative': False,
        },
        {
            'operands': (Uncertainty(12, 1.1, 0.8), Uncertainty(4.3, 1, 0.2)),
            'operation': lambda a, b: a - b,
            'expected': (7.7, 2.1, 1.0),
            'relative': False,
        },
        {
            'operands': (Uncertainty(5, 0.5, 1.0), Uncertainty(2.2, 0.1, 0.1)),
            'operation': lambda a, b: a * b,
            'expected': (11, 1.6, 2.7),
            'relative': True,
        },
        {
            'operands': (Uncertainty(12, 0.2, 1.0), Uncertainty(3, 0.1, 0.1)),
            'operation': lambda a, b: a / b,
            'expected': (4, 0.2, 0.466667),
            'relative': True,
        },
    ]


def test_binary(binary):
    """Test propagation through arithmetic between uncertain values."""
    for case in binary:
        result = case['operation'](*case['operands'])
        value, lower, upper = case['expected']
        assert result.value == pytest.approx(value)
        assert result.lower == pytest.approx(lower, abs=1e-5)
        assert result.upper == pytest.approx(upper, abs=1e-5)
        assert result.is_relative == case['relative']


def test_constant_addition():
    """Adding a constant shifts the value only."""
    u1 = Uncertainty(7.6, 0.2, 0.3)
    u2 = u1 + 7
    assert u2 == 7.0 + u1
    assert u2.value == pytest.approx(14.6)
    assert (u2.lower, u2.upper) == (0.2, 0.3)
    u3 = u1 - 7
    assert u3.value == pytest.approx(0.6)
    assert (7.0 - u1).value == pytest.approx(-0.6)
    assert not u3.is_relative


def test_constant_scaling():
    """Scaling keeps the representation."""
    u1 = Uncertainty(7, 0.2, 0.7)
    u2 = u1 * 3
    assert u2 == 3 * u1
    assert u2.value == pytest.approx(21)
    assert u2.lower == pytest.approx(0.6)
    assert u2.upper == pytest.approx(2.1)
    assert not u2.is_relative
    u1 = Uncertainty.from_percentage(8, 0.2, 0.3)
    u2 = u1 * 2
    assert u2.lower_percentage == pytest.approx(0.2)
    assert u2.upper == pytest.approx(4.8)
    assert u2.is_relative


def test_constant_division():
    """Dividing by, or into, a constant."""
    u1 = Uncertainty(6, 0.3, 0.2)
    u2 = u1 / 3
    assert u2.value == pytest.approx(2)
    assert u2.lower == pytest.approx(0.1)
    assert u2.upper == pytest.approx(0.0666667, abs=1e-6)
    assert (3 / u1).value == pytest.approx(0.5)
    u1 = Uncertainty.from_percentage(8, 0.1, 0.2)
    u2 = u1 / 2
    assert u2.value == pytest.approx(4)
    assert (u2.lower, u2.upper) == pytest.approx((0.4, 0.8))
    assert (2 / u1).value == pytest.approx(0.25)
    with pytest.raises(errors.DivideByZeroError):
        u1 / 0


def test_negate():
    """Negation changes the sign of the value only."""
    u1 = Uncertainty(6.2, 0.9, 0.1)
    u2 = -u1
    assert u2 == u1 * -1
    assert u2.value == -6.2
    assert (u2.lower, u2.upper) == (0.9, 0.1)
    assert abs(u2) == u1


def test_comparison():
    """Ordering uses central values; equality uses every component."""
    u1 = Uncertainty(3, 0.1)
    u2 = Uncertainty(4, 0.1)
    u3 = Uncertainty(5, 0.3)
    u4 = Uncertainty(3, 0.2)
    assert u2 > u1
    assert u3 >= u2
    assert not u1 > u4
    assert u2 < u3
    assert u4 <= u3
    assert u4 != u1
    assert u3 != u2
    assert u3 == Uncertainty(5, 0.3)
    assert Uncertainty(0.1 + 0.2, 0.1) == Uncertainty(0.3, 0.1)


def test_unhashable():
    """Instances use tolerant equality, so they are not hashable."""
    with pytest.raises(TypeError):
        hash(Uncertainty(1, 0.1))


def test_describe():
    """Test the plain-text summary."""
    assert str(Uncertainty(3.2, 0.5)) == '3.2 (±0.5)'
    assert str(Uncertainty(3.2, 0.5).to_relative()) == '3.2 (±15.625%)'
    assert str(Uncertainty(7.6, 1.1, 0.4)) == '7.6 (+0.4, -1.1)'
    assert str(Uncertainty.from_percentage(2, 0.05, 0.1)) == '2 (+10%, -5%)'
