"""
Rewrite products of units in terms of known derived units.

The simplifier looks for groups of atomic dimensions (those whose definition is
not derived) that together match the signature of a visible derived dimension,
such as length / time for speed, and replaces each group with the base unit of
the derived dimension. A rewrite happens only if it reduces the number of
dimensions, so the process always terminates and a simplified list does not
change when simplified again.
"""

import logging
import typing

from measurement.core import dimension as _dimension
from measurement.core import entities


if typing.TYPE_CHECKING:
    from measurement.core.corpus import Corpus


logger = logging.getLogger(__name__)


Dimensions = typing.List[_dimension.Dimension]


class Rewrite(typing.NamedTuple):
    """The outcome of replacing atomic dimensions with a derived unit."""

    dimensions: Dimensions
    factor: float
    unit: entities.Unit
    power: int
    consumed: int


def derived_units(corpus: 'Corpus') -> typing.List[entities.Unit]:
    """The units available for simplification, most preferred first.

    These are the base units of derived definitions that pass the dimension
    filter, provided that the units themselves pass the unit filter.
    """
    units = []
    for definition in corpus.dimensions.values():
        if not definition.is_derived:
            continue
        if not corpus.dimension_filter(definition):
            continue
        if definition.resolved is None:
            corpus.resolve(definition)
        unit = definition.base_unit
        if unit is not None and corpus.unit_filter(unit):
            units.append(unit)
    return corpus.unit_finder.comparer.sort(units)


def _available(
    dimensions: Dimensions,
    base: entities.DimensionDefinition,
    sign: int,
) -> int:
    """The total power of `base` with the given sign among `dimensions`."""
    return sum(
        abs(d.power) for d in dimensions
        if d.definition is base and d.power * sign > 0
    )


def _multiplicities(
    dimensions: Dimensions,
    signature: _dimension.Signature,
) -> typing.List[int]:
    """The largest positive and negative powers of `signature` that fit."""
    found = []
    for direction in (1, -1):
        counts = [
            _available(dimensions, base, direction * power) // abs(power)
            for base, power in signature.items()
        ]
        k = min(counts) if counts else 0
        if k > 0:
            found.append(direction * k)
    return found


def _rewrite(
    dimensions: Dimensions,
    unit: entities.Unit,
    k: int,
) -> Rewrite:
    """Replace `k` copies of the signature of `unit` within `dimensions`."""
    remaining: typing.List[typing.Optional[_dimension.Dimension]] = list(dimensions)
    factor = 1.0
    consumed = 0
    first = len(remaining)
    for base, power in unit.dimension.signature().items():
        need = power * k
        for i, d in enumerate(remaining):
            if need == 0:
                break
            if d is None or d.definition is not base or d.power * need <= 0:
                continue
            take = min(abs(d.power), abs(need)) * (1 if need > 0 else -1)
            factor *= d.factor ** take
            consumed += abs(take)
            first = min(first, i)
            rest = d.power - take
            remaining[i] = d.with_power(rest) if rest else None
            need -= take
    position = sum(1 for d in remaining[:first] if d is not None)
    survivors = [d for d in remaining if d is not None]
    survivors.insert(position, _dimension.Dimension(unit, k))
    factor /= unit.factor ** k
    return Rewrite(
        dimensions=_dimension.combine(survivors),
        factor=factor,
        unit=unit,
        power=k,
        consumed=consumed,
    )


def simplify(
    dimensions: typing.Iterable[_dimension.Dimension],
    corpus: 'Corpus',
) -> typing.Tuple[Dimensions, float]:
    """Rewrite atomic dimensions in terms of derived units.

    Parameters
    ----------
    dimensions : iterable of `~dimension.Dimension`
        The dimensions to simplify.

    corpus : `~corpus.Corpus`
        The registry that provides derived units and visibility options.

    Returns
    -------
    tuple
        The simplified dimensions and the factor by which to multiply a value
        expressed in the original dimensions.

    Notes
    -----
    Each pass considers every visible derived unit and every power of its
    signature that fits within the current atomic dimensions. The pass keeps
    the rewrite that leaves the fewest dimensions, preferring rewrites that
    consume more atomic power and then units that rank higher under the unit
    comparer. Passes repeat until no rewrite reduces the number of dimensions.
    """
    current = _dimension.combine(dimensions)
    total = 1.0
    units = derived_units(corpus)
    while True:
        best = None
        for rank, unit in enumerate(units):
            signature = unit.dimension.signature()
            for k in _multiplicities(current, signature):
                rewrite = _rewrite(current, unit, k)
                if len(rewrite.dimensions) >= len(current):
                    continue
                score = (len(rewrite.dimensions), -rewrite.consumed, rank)
                if best is None or score < best[0]:
                    best = (score, rewrite)
        if best is None:
            return current, total
        rewrite = best[1]
        logger.debug(
            "Rewrote %s as %s^%d",
            [str(d) for d in current], rewrite.unit.key, rewrite.power,
        )
        current = rewrite.dimensions
        total *= rewrite.factor


def merge_definitions(
    dimensions: typing.Iterable[_dimension.Dimension],
) -> typing.Tuple[Dimensions, float]:
    """Express all dimensions of a definition in its first unit.

    Returns the merged dimensions and the factor by which to multiply a value
    expressed in the original dimensions. Dimensions without a definition are
    merged only with identical units.
    """
    merged: Dimensions = []
    factor = 1.0
    for d in dimensions:
        for i, existing in enumerate(merged):
            same = (
                existing.same_unit(d)
                or (
                    d.definition is not None
                    and existing.definition is d.definition
                )
            )
            if same:
                factor *= (d.factor / existing.factor) ** d.power
                merged[i] = existing.with_power(existing.power + d.power)
                break
        else:
            merged.append(d)
    return [d for d in merged if d.power != 0], factor
