import pytest

from measurement.core import corpus as _corpus
from measurement.core import dimension
from measurement.core import simplify


def build(corpus: _corpus.Corpus, *pairs):
    """Create dimensions from (identifier, power) pairs."""
    return [
        corpus.parse_dimension(name).with_power(power)
        for name, power in pairs
    ]


def keys(dimensions):
    """The unit keys and powers of `dimensions`."""
    return [(d.unit.key, d.power) for d in dimensions]


def test_speed(corpus: _corpus.Corpus):
    """Length per time becomes the base unit of speed."""
    result, factor = simplify.simplify(build(corpus, ('m', 1), ('s', -1)), corpus)
    assert keys(result) == [('metrePerSecond', 1)]
    assert factor == pytest.approx(1.0)


def test_squared_speed(corpus: _corpus.Corpus):
    """The whole signature is consumed as often as it fits."""
    result, _ = simplify.simplify(build(corpus, ('m', 2), ('s', -2)), corpus)
    assert keys(result) == [('metrePerSecond', 2)]


def test_force(corpus: _corpus.Corpus):
    """Prefer the rewrite that leaves the fewest dimensions."""
    dimensions = build(corpus, ('kg', 1), ('m', 1), ('s', -2))
    result, factor = simplify.simplify(dimensions, corpus)
    assert keys(result) == [('newton', 1)]
    assert factor == pytest.approx(1.0)


def test_scaled_units(corpus: _corpus.Corpus):
    """The factor accounts for prefixes and non-base units."""
    dimensions = build(corpus, ('km', 1), ('hour', -1))
    result, factor = simplify.simplify(dimensions, corpus)
    assert keys(result) == [('metrePerSecond', 1)]
    assert 36 * factor == pytest.approx(10.0)


def test_no_reduction(corpus: _corpus.Corpus):
    """Dimensions stay as they are when no rewrite shortens them."""
    for pairs in ([('m', 2)], [('m', 1)], [('m', 1), ('kg', 1)], []):
        dimensions = build(corpus, *pairs)
        result, factor = simplify.simplify(dimensions, corpus)
        assert result == dimensions
        assert factor == 1.0


def test_idempotent(corpus: _corpus.Corpus):
    """Simplifying a simplified list changes nothing."""
    cases = (
        [('m', 1), ('s', -1)],
        [('m', 2), ('s', -2)],
        [('kg', 1), ('m', 2), ('s', -2)],
        [('kg', 1), ('m', 1), ('s', -3)],
    )
    for pairs in cases:
        once, _ = simplify.simplify(build(corpus, *pairs), corpus)
        twice, factor = simplify.simplify(once, corpus)
        assert twice == once
        assert factor == 1.0


def test_derived_disallowed(corpus: _corpus.Corpus):
    """Hidden derived dimensions are not used for rewrites."""
    corpus.options.allow_derived_dimensions = False
    assert simplify.derived_units(corpus) == []
    dimensions = build(corpus, ('m', 1), ('s', -1))
    result, _ = simplify.simplify(dimensions, corpus)
    assert keys(result) == [('metre', 1), ('second', -1)]


def test_derived_units(corpus: _corpus.Corpus):
    """Only visible base units of derived definitions are candidates."""
    units = {u.key for u in simplify.derived_units(corpus)}
    assert {'metrePerSecond', 'newton', 'joule', 'hertz'} <= units
    assert 'velocityMetrePerSecond' not in units
    assert 'metre' not in units


def test_merge_definitions(corpus: _corpus.Corpus):
    """Dimensions of one definition merge into the first unit."""
    dimensions = [
        dimension.Dimension(corpus.units['minute']),
        dimension.Dimension(corpus.units['second']),
    ]
    merged, factor = simplify.merge_definitions(dimensions)
    assert keys(merged) == [('minute', 2)]
    assert factor == pytest.approx(1 / 60)
    dimensions.append(dimension.Dimension(corpus.units['minute'], -2))
    merged, factor = simplify.merge_definitions(dimensions)
    assert merged == []
    assert factor == pytest.approx(1 / 60)


def test_overlapping_definitions(corpus: _corpus.Corpus):
    """Definitions with equal signatures follow the unit ordering."""
    corpus.options.allow_vector_dimensions = True
    units = [u.key for u in simplify.derived_units(corpus)]
    assert 'velocityMetrePerSecond' in units
    assert (
        units.index('velocityMetrePerSecond') < units.index('metrePerSecond')
    )
    result, factor = simplify.simplify(build(corpus, ('m', 1), ('s', -1)), corpus)
    assert keys(result) == [('velocityMetrePerSecond', 1)]
    assert factor == pytest.approx(1.0)
    corpus.options.allow_vector_dimensions = False
    result, _ = simplify.simplify(build(corpus, ('m', 1), ('s', -1)), corpus)
    assert keys(result) == [('metrePerSecond', 1)]
