"""
Elementary functions of quantities.

Each function in `registry` acts on the numerical value of a quantity. Unless
noted otherwise, the result keeps the dimensions of its argument. Plain real
numbers are also accepted, in which case the result is a plain float.
"""

import numbers
import typing

import numpy

from measurement.core import errors
from measurement.core import iterables
from measurement.core import quantity as _quantity


registry = iterables.ObjectRegistry(object_key='method')


Q = typing.TypeVar('Q', _quantity.Quantity, numbers.Real)


def _on_value(method: typing.Callable[[float], typing.Any]):
    """Create a function that applies `method` to a value."""
    def function(x: Q) -> Q:
        if isinstance(x, _quantity.Quantity):
            return x._new(float(method(x.value)), x.dimensions)
        if isinstance(x, numbers.Real):
            return float(method(x))
        raise errors.InvalidArgumentError(
            f"Can't apply {method.__name__} to {x!r}"
        ) from None
    function.__name__ = method.__name__
    function.__doc__ = f"Apply `numpy.{method.__name__}` to the value."
    return function


absolute = registry.register(_on_value(numpy.absolute), name='abs')
ceiling = registry.register(_on_value(numpy.ceil), name='ceiling')
floor = registry.register(_on_value(numpy.floor), name='floor')
sin = registry.register(_on_value(numpy.sin), name='sin')
cos = registry.register(_on_value(numpy.cos), name='cos')
tan = registry.register(_on_value(numpy.tan), name='tan')
asin = registry.register(_on_value(numpy.arcsin), name='asin')
acos = registry.register(_on_value(numpy.arccos), name='acos')
atan = registry.register(_on_value(numpy.arctan), name='atan')
sinh = registry.register(_on_value(numpy.sinh), name='sinh')
cosh = registry.register(_on_value(numpy.cosh), name='cosh')
tanh = registry.register(_on_value(numpy.tanh), name='tanh')
exp = registry.register(_on_value(numpy.exp), name='exp')
log = registry.register(_on_value(numpy.log), name='log')
log10 = registry.register(_on_value(numpy.log10), name='log10')


@registry.register(name='round')
def round_half_even(x: Q, ndigits: int=0) -> Q:
    """Round the value to `ndigits` decimals, with ties to even.

    >>> round_half_even(2.5), round_half_even(3.5)
    (2.0, 4.0)
    """
    return _on_value(lambda v: numpy.round(v, ndigits))(x)


@registry.register
def atan2(y: Q, x: Q) -> Q:
    """The angle whose tangent is ``y / x``, in the correct quadrant.

    The operands must be commensurable. The result is dimensionless.
    """
    if isinstance(y, _quantity.Quantity):
        if isinstance(x, _quantity.Quantity):
            that = y._aligned(x)
        elif isinstance(x, numbers.Real) and y.is_dimensionless:
            that = x
        else:
            raise errors.IncommensurableError(
                y.dimensions_string, 'dimensionless',
            )
        return y._new(float(numpy.arctan2(y.value, that)), ())
    if isinstance(x, _quantity.Quantity):
        return atan2(x._new(y, ()), x)
    return float(numpy.arctan2(y, x))


@registry.register(name='pow')
def power(x: Q, exponent: typing.Union[_quantity.Quantity, numbers.Real]) -> Q:
    """Raise `x` to `exponent`.

    Every power of `x` is multiplied by `exponent`. The exponent must be a
    plain number or a dimensionless quantity.

    Raises
    ------
    `~errors.IncommensurableError`
        The exponent has dimensions.

    `~errors.InvalidOperationError`
        A resulting power would not be an integer.
    """
    if isinstance(x, _quantity.Quantity):
        return x ** exponent
    if isinstance(exponent, _quantity.Quantity):
        if not exponent.is_dimensionless:
            raise errors.IncommensurableError(exponent.dimensions_string)
        exponent = exponent.value
    return float(numpy.power(float(x), exponent))


@registry.register
def sqrt(x: Q) -> Q:
    """The square root of `x`.

    Every power of a quantity must be even.
    """
    if isinstance(x, _quantity.Quantity):
        odd = [d for d in x.dimensions if d.power % 2]
        if odd:
            raise errors.InvalidOperationError(
                f"Can't take the square root of {x}:"
                f" {odd[0]} has an odd power"
            ) from None
        dimensions = [d.with_power(d.power // 2) for d in x.dimensions]
        return x._new(float(numpy.sqrt(x.value)), dimensions)
    return float(numpy.sqrt(x))


maximum = registry.register(_quantity.maximum, name='maximum')
minimum = registry.register(_quantity.minimum, name='minimum')
