import collections.abc
import logging
import typing

from measurement.core import errors


logger = logging.getLogger(__name__)


_FLAGS = {
    'allow_vector_dimensions': False,
    'allow_derived_dimensions': True,
    'use_rare_units': False,
    'use_estimated_units': False,
    'use_rare_prefixes': False,
    'use_unofficial_prefixes': False,
}

_SETS = (
    'ignored_dimensions',
    'ignored_systems_for_units',
    'allowed_systems_for_units',
)

_TRUE = {'1', 'yes', 'true', 'on'}
_FALSE = {'0', 'no', 'false', 'off'}


def keys_of(members: typing.Iterable[typing.Any]) -> typing.Set[str]:
    """The keys of catalog entries or plain strings in `members`."""
    return {getattr(member, 'key', member) for member in members}


class Options:
    """Visibility settings for catalog lookups.

    Each corpus holds one instance. The boolean flags enable classes of
    entries that lookups hide by default, and the sets name individual
    dimensions or measurement systems to hide or to allow. Set members may be
    catalog entries or their keys.

    Notes
    -----
    The default values allow derived dimensions and nothing else: vector
    dimensions, rare or estimated units, and rare or unofficial prefixes are
    hidden, and no dimension or system is explicitly ignored or allowed.
    """

    def __init__(self, **settings) -> None:
        self.allow_vector_dimensions: bool
        self.allow_derived_dimensions: bool
        self.use_rare_units: bool
        self.use_estimated_units: bool
        self.use_rare_prefixes: bool
        self.use_unofficial_prefixes: bool
        self.ignored_dimensions: typing.Set[typing.Any]
        self.ignored_systems_for_units: typing.Set[typing.Any]
        self.allowed_systems_for_units: typing.Set[typing.Any]
        self._set_defaults()
        self.update(settings)

    def _set_defaults(self) -> None:
        for name, value in _FLAGS.items():
            setattr(self, name, value)
        for name in _SETS:
            setattr(self, name, set())

    def reset_to_defaults(self) -> None:
        """Restore every option to its documented default value."""
        self._set_defaults()
        logger.info("Reset measurement options to defaults")

    def update(self, settings: typing.Mapping[str, typing.Any]) -> 'Options':
        """Update options from a mapping, such as a configuration section.

        String values are parsed: flags accept the usual boolean words and sets
        accept comma-separated keys.
        """
        for name, value in settings.items():
            if name in _FLAGS:
                setattr(self, name, self._parse_flag(name, value))
            elif name in _SETS:
                setattr(self, name, self._parse_set(value))
            else:
                raise errors.InvalidArgumentError(
                    f"Unknown option {name!r}"
                ) from None
        return self

    @staticmethod
    def _parse_flag(name: str, value: typing.Any) -> bool:
        if isinstance(value, str):
            word = value.strip().lower()
            if word in _TRUE:
                return True
            if word in _FALSE:
                return False
            raise errors.InvalidArgumentError(
                f"Can't interpret {value!r} as a value for {name!r}"
            ) from None
        return bool(value)

    @staticmethod
    def _parse_set(value: typing.Any) -> typing.Set[typing.Any]:
        if isinstance(value, str):
            return {part.strip() for part in value.split(',') if part.strip()}
        if isinstance(value, collections.abc.Iterable):
            return set(value)
        raise errors.InvalidArgumentError(
            f"Can't interpret {value!r} as a collection of keys"
        ) from None

    def copy(self) -> 'Options':
        """A copy of these options with independent sets."""
        settings = {name: getattr(self, name) for name in _FLAGS}
        settings.update({name: set(getattr(self, name)) for name in _SETS})
        return type(self)(**settings)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Options):
            return NotImplemented
        return all(
            getattr(self, name) == getattr(other, name)
            for name in _FLAGS
        ) and all(
            keys_of(getattr(self, name)) == keys_of(getattr(other, name))
            for name in _SETS
        )

    __hash__ = None

    def __repr__(self) -> str:
        settings = ', '.join(
            f"{name}={getattr(self, name)!r}"
            for name in (*_FLAGS, *_SETS)
        )
        return f"{self.__class__.__qualname__}({settings})"
