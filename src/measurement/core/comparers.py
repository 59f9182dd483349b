"""
Deterministic orderings of catalog entries.

Each comparer ranks entries from least to most preferred. Lookups list their
results in descending order, so the most preferred entry comes first. Every
comparer places `None` below any entry, and falls back to ordinal key order
(later keys rank higher) when all other criteria are equal.
"""

import abc
import functools
import typing

from measurement.core import entities


E = typing.TypeVar('E', bound=entities.Entity)


class Comparer(abc.ABC, typing.Generic[E]):
    """Base class for ordering catalog entries."""

    def __call__(self, x: typing.Optional[E], y: typing.Optional[E]) -> int:
        """Alias for `compare`."""
        return self.compare(x, y)

    def compare(self, x: typing.Optional[E], y: typing.Optional[E]) -> int:
        """Return -1, 0, or +1 as `x` is less, equally, or more preferred."""
        if x is None:
            return 0 if y is None else -1
        if y is None:
            return 1
        a, b = self.rank(x), self.rank(y)
        if a != b:
            return 1 if a > b else -1
        return (x.key > y.key) - (x.key < y.key)

    @abc.abstractmethod
    def rank(self, entry: E) -> typing.Tuple:
        """Criteria that order `entry`, most significant first."""
        raise NotImplementedError

    def sort(self, entries: typing.Iterable[E]) -> typing.List[E]:
        """Order `entries` from most to least preferred."""
        key = functools.cmp_to_key(self.compare)
        return sorted(entries, key=key, reverse=True)


class DimensionDefinitionComparer(Comparer[entities.DimensionDefinition]):
    """Prefer dimensioned, then scalar, then non-derived definitions."""

    def rank(self, entry):
        return (
            not entry.is_dimensionless,
            not entry.vector,
            not entry.is_derived,
        )


class UnitComparer(Comparer[entities.Unit]):
    """Prefer common, then exact units."""

    def rank(self, entry):
        return (
            not entry.is_rare,
            not entry.is_estimation,
        )


class MeasurementSystemComparer(Comparer[entities.MeasurementSystem]):
    """Prefer systems with fewer ancestors."""

    def rank(self, entry):
        return (-entry.depth,)


class PrefixComparer(Comparer[entities.Prefix]):
    """Prefer common prefixes, then official SI over binary or unofficial."""

    def rank(self, entry):
        return (
            not entry.is_rare,
            -int(entry.prefix_type),
        )


DIMENSIONS = DimensionDefinitionComparer()
UNITS = UnitComparer()
SYSTEMS = MeasurementSystemComparer()
PREFIXES = PrefixComparer()
