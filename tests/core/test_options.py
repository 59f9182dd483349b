import pytest

from measurement.core import errors
from measurement.core import options


def test_defaults():
    """Only derived dimensions are allowed by default."""
    settings = options.Options()
    assert settings.allow_derived_dimensions
    assert not settings.allow_vector_dimensions
    assert not settings.use_rare_units
    assert not settings.use_estimated_units
    assert not settings.use_rare_prefixes
    assert not settings.use_unofficial_prefixes
    assert settings.ignored_dimensions == set()
    assert settings.ignored_systems_for_units == set()
    assert settings.allowed_systems_for_units == set()


def test_reset():
    """Resetting should restore every default."""
    settings = options.Options(use_rare_units=True, ignored_dimensions={'time'})
    assert settings != options.Options()
    settings.reset_to_defaults()
    assert settings == options.Options()


def test_update_from_strings():
    """String values from a configuration file should parse."""
    settings = options.Options()
    settings.update(
        {
            'use_rare_units': 'yes',
            'allow_derived_dimensions': 'off',
            'allowed_systems_for_units': 'si, cgs',
        }
    )
    assert settings.use_rare_units
    assert not settings.allow_derived_dimensions
    assert settings.allowed_systems_for_units == {'si', 'cgs'}


def test_update_invalid():
    """Unknown names and unreadable values are errors."""
    settings = options.Options()
    with pytest.raises(errors.InvalidArgumentError):
        settings.update({'use_imaginary_units': True})
    with pytest.raises(errors.InvalidArgumentError):
        settings.update({'use_rare_units': 'perhaps'})
    with pytest.raises(errors.InvalidArgumentError):
        options.Options(ignored_dimensions=3)


def test_copy():
    """A copy should be equal but independent."""
    settings = options.Options(ignored_dimensions={'time'})
    copied = settings.copy()
    assert copied == settings
    copied.ignored_dimensions.add('length')
    assert settings.ignored_dimensions == {'time'}


def test_keys_of():
    """Set members may be entries or keys."""
    class Keyed:
        key = 'length'
    assert options.keys_of([Keyed(), 'time']) == {'length', 'time'}
