"""
The built-in catalog and the loaders that ingest catalog mappings.

A catalog mapping has three sections::

    {
        'systems': {key: {name, historical, inherits}},
        'dimensions': {
            key: {
                name, symbol, derived, baseUnit, vector, dimensionless,
                otherNames, otherSymbols,
                units: {
                    key: {
                        name, plural, symbol, type, otherNames, otherSymbols,
                        systems, multiplier, offset, rare, estimation,
                        prefixName,
                    },
                },
            },
        },
        'prefixes': {key: {symbol, type, multiplier, power, base, rare}},
    }

Every field except the keys is optional. `load` reads the same layout from a
JSON file.
"""

import enum
import json
import logging
import typing

import numpy

from measurement.core import entities
from measurement.core import errors
from measurement.core import iotools


if typing.TYPE_CHECKING:
    from measurement.core.corpus import Corpus


logger = logging.getLogger(__name__)


_METRIC = ['si', 'cgs']
_ENGLISH = ['imperial', 'usCustomary']
_COMMON = _METRIC + _ENGLISH


_systems = {
    'metric': {'name': 'Metric'},
    'si': {'name': 'International System of Units', 'inherits': 'metric'},
    'cgs': {'name': 'Centimetre-gram-second', 'inherits': 'metric'},
    'english': {'name': 'English units', 'historical': True},
    'imperial': {'name': 'Imperial', 'inherits': 'english'},
    'usCustomary': {'name': 'United States customary', 'inherits': 'english'},
}


_dimensions = {
    'time': {
        'symbol': 'T',
        'otherNames': ['duration'],
        'baseUnit': 'second',
        'units': {
            'second': {
                'plural': 'seconds',
                'symbol': 's',
                'otherSymbols': ['sec'],
                'systems': _COMMON,
            },
            'minute': {
                'plural': 'minutes',
                'symbol': 'min',
                'multiplier': 60,
                'systems': _COMMON,
            },
            'hour': {
                'plural': 'hours',
                'symbol': 'h',
                'otherSymbols': ['hr'],
                'multiplier': 3600,
                'systems': _COMMON,
            },
            'day': {
                'plural': 'days',
                'symbol': 'd',
                'multiplier': 86400,
                'systems': _COMMON,
            },
            'week': {
                'plural': 'weeks',
                'symbol': 'wk',
                'multiplier': 604800,
                'systems': _COMMON,
            },
            'fortnight': {
                'plural': 'fortnights',
                'multiplier': 1209600,
                'systems': _ENGLISH,
                'rare': True,
            },
            'year': {
                'plural': 'years',
                'symbol': 'yr',
                'otherSymbols': ['a'],
                'multiplier': 31557600,
                'systems': _COMMON,
            },
        },
    },
    'length': {
        'symbol': 'L',
        'otherNames': ['distance', 'radius'],
        'baseUnit': 'metre',
        'units': {
            'metre': {
                'plural': 'metres',
                'symbol': 'm',
                'otherNames': ['meter', 'meters'],
                'systems': _METRIC,
            },
            'inch': {
                'plural': 'inches',
                'symbol': 'in',
                'type': 'customary',
                'multiplier': 0.0254,
                'systems': _ENGLISH,
            },
            'foot': {
                'plural': 'feet',
                'symbol': 'ft',
                'type': 'customary',
                'multiplier': 0.3048,
                'systems': _ENGLISH,
            },
            'yard': {
                'plural': 'yards',
                'symbol': 'yd',
                'type': 'customary',
                'multiplier': 0.9144,
                'systems': _ENGLISH,
            },
            'mile': {
                'plural': 'miles',
                'symbol': 'mi',
                'type': 'customary',
                'multiplier': 1609.344,
                'systems': _ENGLISH,
            },
            'nauticalMile': {
                'name': 'nautical mile',
                'plural': 'nautical miles',
                'symbol': 'nmi',
                'multiplier': 1852,
                'systems': _COMMON,
            },
            'astronomicalUnit': {
                'name': 'astronomical unit',
                'plural': 'astronomical units',
                'symbol': 'au',
                'multiplier': 1.495978707e11,
                'systems': _METRIC,
            },
            'lightYear': {
                'name': 'light year',
                'plural': 'light years',
                'symbol': 'ly',
                'multiplier': 9.4607304725808e15,
                'systems': _METRIC,
            },
            'angstrom': {
                'plural': 'angstroms',
                'symbol': 'Å',
                'multiplier': 1e-10,
                'systems': _METRIC,
                'rare': True,
            },
            'cubit': {
                'plural': 'cubits',
                'multiplier': 0.4572,
                'type': 'customary',
                'estimation': True,
                'rare': True,
            },
        },
    },
    'mass': {
        'symbol': 'M',
        'otherNames': ['weight'],
        'baseUnit': 'kilogram',
        'units': {
            'kilogram': {
                'plural': 'kilograms',
                'symbol': 'kg',
                'prefixName': 'kilo',
                'systems': ['si'],
            },
            'gram': {
                'plural': 'grams',
                'symbol': 'g',
                'multiplier': 1e-3,
                'systems': _METRIC,
            },
            'tonne': {
                'plural': 'tonnes',
                'symbol': 't',
                'otherNames': ['metric ton'],
                'multiplier': 1e3,
                'systems': _METRIC,
            },
            'pound': {
                'plural': 'pounds',
                'symbol': 'lb',
                'otherSymbols': ['lbs'],
                'type': 'customary',
                'multiplier': 0.45359237,
                'systems': _ENGLISH,
            },
            'ounce': {
                'plural': 'ounces',
                'symbol': 'oz',
                'type': 'customary',
                'multiplier': 0.028349523125,
                'systems': _ENGLISH,
            },
            'stone': {
                'plural': 'stone',
                'symbol': 'st',
                'type': 'customary',
                'multiplier': 6.35029318,
                'systems': ['imperial'],
                'rare': True,
            },
        },
    },
    'electricCurrent': {
        'name': 'electric current',
        'symbol': 'I',
        'otherNames': ['current'],
        'baseUnit': 'ampere',
        'units': {
            'ampere': {
                'plural': 'amperes',
                'symbol': 'A',
                'otherNames': ['amp', 'amps'],
                'systems': _METRIC,
            },
        },
    },
    'temperature': {
        'symbol': 'Θ',
        'baseUnit': 'kelvin',
        'units': {
            'kelvin': {
                'plural': 'kelvin',
                'symbol': 'K',
                'systems': _METRIC,
            },
            'celsius': {
                'name': 'degree Celsius',
                'plural': 'degrees Celsius',
                'symbol': '°C',
                'otherNames': ['celsius', 'centigrade'],
                'otherSymbols': ['degC'],
                'offset': 273.15,
                'systems': _METRIC,
            },
            'fahrenheit': {
                'name': 'degree Fahrenheit',
                'plural': 'degrees Fahrenheit',
                'symbol': '°F',
                'otherNames': ['fahrenheit'],
                'otherSymbols': ['degF'],
                'type': 'customary',
                'multiplier': 5 / 9,
                'offset': 459.67 * 5 / 9,
                'systems': _ENGLISH,
            },
        },
    },
    'amountOfSubstance': {
        'name': 'amount of substance',
        'symbol': 'N',
        'baseUnit': 'mole',
        'units': {
            'mole': {
                'plural': 'moles',
                'symbol': 'mol',
                'systems': _METRIC,
            },
        },
    },
    'luminousIntensity': {
        'name': 'luminous intensity',
        'symbol': 'J',
        'baseUnit': 'candela',
        'units': {
            'candela': {
                'plural': 'candelas',
                'symbol': 'cd',
                'systems': _METRIC,
            },
        },
    },
    'planeAngle': {
        'name': 'plane angle',
        'symbol': 'β',
        'otherNames': ['angle'],
        'dimensionless': True,
        'baseUnit': 'radian',
        'units': {
            'radian': {
                'plural': 'radians',
                'symbol': 'rad',
                'systems': _COMMON,
            },
            'degree': {
                'plural': 'degrees',
                'symbol': '°',
                'otherSymbols': ['deg'],
                'multiplier': numpy.pi / 180,
                'systems': _COMMON,
            },
            'gradian': {
                'plural': 'gradians',
                'symbol': 'grad',
                'otherNames': ['gon'],
                'multiplier': numpy.pi / 200,
                'systems': _METRIC,
                'rare': True,
            },
            'turn': {
                'plural': 'turns',
                'otherNames': ['revolution', 'revolutions'],
                'multiplier': 2 * numpy.pi,
                'systems': _COMMON,
            },
        },
    },
    'solidAngle': {
        'name': 'solid angle',
        'dimensionless': True,
        'baseUnit': 'steradian',
        'units': {
            'steradian': {
                'plural': 'steradians',
                'symbol': 'sr',
                'systems': _METRIC,
            },
        },
    },
    'area': {
        'symbol': 'A',
        'derived': 'length^2',
        'baseUnit': 'squareMetre',
        'units': {
            'squareMetre': {
                'name': 'square metre',
                'plural': 'square metres',
                'symbol': 'm²',
                'otherNames': ['square meter', 'square meters'],
                'systems': _METRIC,
            },
            'hectare': {
                'plural': 'hectares',
                'symbol': 'ha',
                'multiplier': 1e4,
                'systems': _METRIC,
            },
            'acre': {
                'plural': 'acres',
                'symbol': 'ac',
                'type': 'customary',
                'multiplier': 4046.8564224,
                'systems': _ENGLISH,
            },
        },
    },
    'volume': {
        'symbol': 'V',
        'derived': 'length^3',
        'baseUnit': 'cubicMetre',
        'units': {
            'cubicMetre': {
                'name': 'cubic metre',
                'plural': 'cubic metres',
                'symbol': 'm³',
                'otherNames': ['cubic meter', 'cubic meters'],
                'systems': _METRIC,
            },
            'litre': {
                'plural': 'litres',
                'symbol': 'L',
                'otherNames': ['liter', 'liters'],
                'otherSymbols': ['l'],
                'multiplier': 1e-3,
                'systems': _METRIC,
            },
            'gallon': {
                'name': 'US gallon',
                'plural': 'US gallons',
                'symbol': 'gal',
                'otherNames': ['gallon', 'gallons'],
                'type': 'customary',
                'multiplier': 3.785411784e-3,
                'systems': ['usCustomary'],
            },
            'imperialGallon': {
                'name': 'imperial gallon',
                'plural': 'imperial gallons',
                'type': 'customary',
                'multiplier': 4.54609e-3,
                'systems': ['imperial'],
            },
        },
    },
    'speed': {
        'derived': 'length/time',
        'baseUnit': 'metrePerSecond',
        'units': {
            'metrePerSecond': {
                'name': 'metre per second',
                'plural': 'metres per second',
                'symbol': 'm/s',
                'otherNames': ['meter per second', 'meters per second'],
                'systems': _METRIC,
            },
            'kilometrePerHour': {
                'name': 'kilometre per hour',
                'plural': 'kilometres per hour',
                'symbol': 'km/h',
                'otherSymbols': ['kph'],
                'multiplier': 1 / 3.6,
                'systems': _METRIC,
            },
            'milePerHour': {
                'name': 'mile per hour',
                'plural': 'miles per hour',
                'symbol': 'mph',
                'type': 'customary',
                'multiplier': 0.44704,
                'systems': _ENGLISH,
            },
            'knot': {
                'plural': 'knots',
                'symbol': 'kn',
                'otherSymbols': ['kt'],
                'multiplier': 1852 / 3600,
                'systems': _COMMON,
            },
        },
    },
    'velocity': {
        'derived': 'length/time',
        'vector': True,
        'baseUnit': 'velocityMetrePerSecond',
        'units': {
            'velocityMetrePerSecond': {
                'name': 'metre per second',
                'plural': 'metres per second',
                'symbol': 'm/s',
                'systems': _METRIC,
            },
        },
    },
    'acceleration': {
        'derived': 'length/time^2',
        'baseUnit': 'metrePerSquareSecond',
        'units': {
            'metrePerSquareSecond': {
                'name': 'metre per second squared',
                'plural': 'metres per second squared',
                'symbol': 'm/s²',
                'systems': _METRIC,
            },
            'standardGravity': {
                'name': 'standard gravity',
                'symbol': 'ɡ0',
                'multiplier': 9.80665,
                'systems': _METRIC,
                'rare': True,
            },
            'galileo': {
                'plural': 'galileos',
                'symbol': 'Gal',
                'multiplier': 1e-2,
                'systems': ['cgs'],
                'rare': True,
            },
        },
    },
    'frequency': {
        'symbol': 'ν',
        'derived': '1/time',
        'baseUnit': 'hertz',
        'units': {
            'hertz': {
                'plural': 'hertz',
                'symbol': 'Hz',
                'systems': _METRIC,
            },
            'revolutionsPerMinute': {
                'name': 'revolution per minute',
                'plural': 'revolutions per minute',
                'symbol': 'rpm',
                'multiplier': 1 / 60,
                'systems': _COMMON,
            },
        },
    },
    'force': {
        'symbol': 'F',
        'derived': 'mass*length/time^2',
        'baseUnit': 'newton',
        'units': {
            'newton': {
                'plural': 'newtons',
                'symbol': 'N',
                'systems': ['si'],
            },
            'dyne': {
                'plural': 'dynes',
                'symbol': 'dyn',
                'multiplier': 1e-5,
                'systems': ['cgs'],
            },
            'poundForce': {
                'name': 'pound-force',
                'symbol': 'lbf',
                'type': 'customary',
                'multiplier': 4.4482216152605,
                'systems': _ENGLISH,
            },
        },
    },
    'energy': {
        'symbol': 'E',
        'derived': 'force*length',
        'otherNames': ['work', 'heat'],
        'baseUnit': 'joule',
        'units': {
            'joule': {
                'plural': 'joules',
                'symbol': 'J',
                'systems': ['si'],
            },
            'erg': {
                'plural': 'ergs',
                'multiplier': 1e-7,
                'systems': ['cgs'],
            },
            'calorie': {
                'plural': 'calories',
                'symbol': 'cal',
                'multiplier': 4.184,
                'systems': _METRIC,
            },
            'electronvolt': {
                'plural': 'electronvolts',
                'symbol': 'eV',
                'otherNames': ['electron volt', 'electron volts'],
                'multiplier': 1.602176634e-19,
                'systems': _METRIC,
            },
            'kilowattHour': {
                'name': 'kilowatt hour',
                'plural': 'kilowatt hours',
                'symbol': 'kWh',
                'multiplier': 3.6e6,
                'systems': _METRIC,
            },
        },
    },
    'power': {
        'symbol': 'P',
        'derived': 'energy/time',
        'baseUnit': 'watt',
        'units': {
            'watt': {
                'plural': 'watts',
                'symbol': 'W',
                'systems': ['si'],
            },
            'horsepower': {
                'symbol': 'hp',
                'type': 'customary',
                'multiplier': 745.69987158227022,
                'systems': _ENGLISH,
            },
        },
    },
    'pressure': {
        'derived': 'force/area',
        'baseUnit': 'pascal',
        'units': {
            'pascal': {
                'plural': 'pascals',
                'symbol': 'Pa',
                'systems': ['si'],
            },
            'bar': {
                'plural': 'bars',
                'multiplier': 1e5,
                'systems': _METRIC,
            },
            'atmosphere': {
                'plural': 'atmospheres',
                'symbol': 'atm',
                'multiplier': 101325,
                'systems': _COMMON,
            },
            'poundPerSquareInch': {
                'name': 'pound per square inch',
                'plural': 'pounds per square inch',
                'symbol': 'psi',
                'type': 'customary',
                'multiplier': 6894.757293168,
                'systems': _ENGLISH,
            },
        },
    },
    'electricCharge': {
        'name': 'electric charge',
        'symbol': 'Q',
        'otherNames': ['charge'],
        'derived': 'electricCurrent*time',
        'baseUnit': 'coulomb',
        'units': {
            'coulomb': {
                'plural': 'coulombs',
                'symbol': 'C',
                'systems': _METRIC,
            },
            'ampereHour': {
                'name': 'ampere hour',
                'plural': 'ampere hours',
                'symbol': 'Ah',
                'multiplier': 3600,
                'systems': _METRIC,
            },
        },
    },
    'electricPotential': {
        'name': 'electric potential',
        'symbol': 'U',
        'otherNames': ['voltage'],
        'derived': 'power/electricCurrent',
        'baseUnit': 'volt',
        'units': {
            'volt': {
                'plural': 'volts',
                'symbol': 'V',
                'systems': _METRIC,
            },
        },
    },
    'electricResistance': {
        'name': 'electric resistance',
        'symbol': 'R',
        'otherNames': ['resistance'],
        'derived': 'electricPotential/electricCurrent',
        'baseUnit': 'ohm',
        'units': {
            'ohm': {
                'plural': 'ohms',
                'symbol': 'Ω',
                'systems': _METRIC,
            },
        },
    },
}


def _si(power: int, symbol: str, **kwargs) -> typing.Dict[str, typing.Any]:
    """Describe a decimal prefix."""
    return {'symbol': symbol, 'base': 10, 'power': power, **kwargs}


def _binary(power: int, symbol: str) -> typing.Dict[str, typing.Any]:
    """Describe a binary prefix."""
    return {'symbol': symbol, 'type': 'siBinary', 'base': 2, 'power': power}


_prefixes = {
    'yotta': _si(24, 'Y'),
    'zetta': _si(21, 'Z'),
    'exa': _si(18, 'E'),
    'peta': _si(15, 'P'),
    'tera': _si(12, 'T'),
    'giga': _si(9, 'G'),
    'mega': _si(6, 'M'),
    'myria': _si(4, 'my', type='siUnofficial'),
    'kilo': _si(3, 'k'),
    'hecto': _si(2, 'h', rare=True),
    'deca': _si(1, 'da', rare=True),
    'deci': _si(-1, 'd', rare=True),
    'centi': _si(-2, 'c'),
    'milli': _si(-3, 'm'),
    'micro': _si(-6, 'μ'),
    'nano': _si(-9, 'n'),
    'pico': _si(-12, 'p'),
    'femto': _si(-15, 'f'),
    'atto': _si(-18, 'a'),
    'zepto': _si(-21, 'z'),
    'yocto': _si(-24, 'y'),
    'kibi': _binary(10, 'Ki'),
    'mebi': _binary(20, 'Mi'),
    'gibi': _binary(30, 'Gi'),
    'tebi': _binary(40, 'Ti'),
    'pebi': _binary(50, 'Pi'),
    'exbi': _binary(60, 'Ei'),
    'zebi': _binary(70, 'Zi'),
    'yobi': _binary(80, 'Yi'),
}


DEFAULT = {
    'systems': _systems,
    'dimensions': _dimensions,
    'prefixes': _prefixes,
}
"""The built-in catalog mapping."""


def _enum(kind: typing.Type[enum.Enum], value: typing.Optional[str], default):
    """Look up an enumerated member by name or value, ignoring case."""
    if value is None:
        return default
    if isinstance(value, kind):
        return value
    text = str(value).replace('_', '').lower()
    for member in kind:
        names = {member.name.replace('_', '').lower(), str(member.value).lower()}
        if text in names:
            return member
    raise errors.InvalidArgumentError(
        f"Unknown {kind.__name__} {value!r}"
    ) from None


def _ordered_systems(
    systems: typing.Mapping[str, typing.Mapping[str, typing.Any]],
) -> typing.List[str]:
    """Order system keys so that every parent precedes its children."""
    ordered = []
    pending = dict(systems)
    while pending:
        ready = [
            key for key, spec in pending.items()
            if spec.get('inherits') is None or spec['inherits'] in ordered
        ]
        if not ready:
            unknown = {
                key: spec.get('inherits') for key, spec in pending.items()
                if spec.get('inherits') not in systems
            }
            if unknown:
                raise errors.InvalidArgumentError(
                    f"Unknown parent systems {unknown}"
                ) from None
            raise errors.InvalidArgumentError(
                f"Cyclic parent chain among systems {sorted(pending)}"
            ) from None
        for key in ready:
            ordered.append(key)
            del pending[key]
    return ordered


def _system(key: str, spec: typing.Mapping[str, typing.Any]):
    return entities.MeasurementSystem(
        key,
        name=spec.get('name'),
        parent_key=spec.get('inherits'),
        historical=spec.get('historical', False),
    )


def _definition(key: str, spec: typing.Mapping[str, typing.Any]):
    return entities.DimensionDefinition(
        key,
        name=spec.get('name'),
        symbol=spec.get('symbol'),
        other_names=spec.get('otherNames'),
        other_symbols=spec.get('otherSymbols'),
        base_unit_key=spec.get('baseUnit'),
        vector=spec.get('vector', False),
        dimensionless=spec.get('dimensionless', False),
        derived_string=spec.get('derived'),
    )


def _unit(key: str, spec: typing.Mapping[str, typing.Any]):
    return entities.Unit(
        key,
        name=spec.get('name'),
        plural=spec.get('plural'),
        symbol=spec.get('symbol'),
        other_names=spec.get('otherNames'),
        other_symbols=spec.get('otherSymbols'),
        unit_type=_enum(entities.UnitType, spec.get('type'), entities.UnitType.SI),
        systems=spec.get('systems'),
        factor=spec.get('multiplier', 1.0),
        offset=spec.get('offset', 0.0),
        rare=spec.get('rare', False),
        estimation=spec.get('estimation', False),
        prefix_name=spec.get('prefixName'),
    )


def _prefix(key: str, spec: typing.Mapping[str, typing.Any]):
    return entities.Prefix(
        key,
        symbol=spec.get('symbol'),
        prefix_type=_enum(entities.PrefixType, spec.get('type'), entities.PrefixType.SI),
        multiplier=spec.get('multiplier'),
        power=spec.get('power'),
        base=spec.get('base'),
        rare=spec.get('rare', False),
    )


def build(
    mapping: typing.Mapping[str, typing.Any],
    corpus: 'Corpus'=None,
) -> 'Corpus':
    """Populate a corpus from a catalog mapping.

    Parameters
    ----------
    mapping
        A catalog mapping in the layout described by this module.

    corpus : `~corpus.Corpus`, optional
        The corpus to populate. The default is a new corpus with default
        options.

    Returns
    -------
    `~corpus.Corpus`
        The populated corpus.

    Raises
    ------
    `~errors.InvalidArgumentError`
        An entry is invalid, a system has an unknown or cyclic parent chain, or
        a derived dimension refers to an unknown or cyclic component.
    """
    if corpus is None:
        from measurement.core.corpus import Corpus
        corpus = Corpus()
    systems = mapping.get('systems', {})
    for key in _ordered_systems(systems):
        corpus.add_system(_system(key, systems[key]))
    dimensions = mapping.get('dimensions', {})
    for key, spec in dimensions.items():
        units = spec.get('units', {})
        corpus.add_dimension(
            _definition(key, spec),
            *[_unit(k, v) for k, v in units.items()],
            strict=False,
        )
    corpus.resolve_all()
    for key, spec in mapping.get('prefixes', {}).items():
        corpus.add_prefix(_prefix(key, spec))
    logger.info(
        "Loaded %d systems, %d dimensions, %d units, and %d prefixes",
        len(corpus.systems),
        len(corpus.dimensions),
        len(corpus.units),
        len(corpus.prefixes),
    )
    return corpus


def load(path: iotools.PathLike, corpus: 'Corpus'=None) -> 'Corpus':
    """Populate a corpus from a JSON catalog file.

    See `build` for the meaning of `corpus`.
    """
    full = iotools.full_path(path)
    with full.open('r', encoding='utf-8') as fp:
        mapping = json.load(fp)
    logger.info("Reading catalog from %s", full)
    return build(mapping, corpus)
