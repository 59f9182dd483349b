import pytest

from measurement.core import corpus as _corpus


@pytest.fixture
def corpus() -> _corpus.Corpus:
    """A fresh corpus built from the default catalog.

    Each test gets an independent instance, so changing options in one test
    does not affect any other.
    """
    return _corpus.Corpus.default()


@pytest.fixture
def minimal():
    """A small catalog mapping for testing ingestion."""
    return {
        'systems': {
            'child': {'name': 'Child', 'inherits': 'root'},
            'root': {'name': 'Root'},
        },
        'dimensions': {
            'length': {
                'symbol': 'L',
                'baseUnit': 'metre',
                'units': {
                    'metre': {'symbol': 'm', 'systems': ['child']},
                    'foot': {'symbol': 'ft', 'multiplier': 0.3048},
                },
            },
            'time': {
                'baseUnit': 'second',
                'units': {'second': {'symbol': 's', 'systems': ['root']}},
            },
            'speed': {
                'derived': 'length/time',
                'units': {'metrePerSecond': {'symbol': 'm/s'}},
            },
        },
        'prefixes': {
            'kilo': {'symbol': 'k', 'base': 10, 'power': 3},
            'kibi': {'symbol': 'Ki', 'type': 'siBinary', 'base': 2, 'power': 10},
        },
    }

