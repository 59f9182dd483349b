import collections.abc
import configparser
import json
import os
import pathlib
import typing

from measurement.core import iotools
from measurement.core import options as _options


# read version from installed package
from importlib.metadata import version
__version__ = version("measurement")


class Environment(collections.abc.Mapping):
    """Settings read from the first ``measurement.ini`` on the search path.

    The search path is the current working directory, the user's home
    directory, ``~/.config``, ``/etc/measurement``, the directory named by
    ``$MEASUREMENT_INI``, and the package directory. A missing file or section
    produces an empty mapping.
    """

    def __init__(self, section: str='options') -> None:
        self.section = section
        """The name of the configuration section to read."""
        home = pathlib.Path('~').expanduser()
        paths = [
            pathlib.Path.cwd(), # The current working directory
            home, # The user's home directory
            home / '.config', # Linux standard (local)
            '/etc/measurement', # Linux standard (global)
            os.environ.get('MEASUREMENT_INI'), # A known environment variable
            pathlib.Path(__file__).parent, # The package top
        ]
        config = configparser.ConfigParser()
        path = iotools.search(paths, 'measurement.ini')
        if path is not None:
            config.read(path)
        self._config: typing.Mapping[str, str] = (
            config[section] if config.has_section(section) else {}
        )
        self.path = path

    def __len__(self) -> int:
        """The number of available parameter values."""
        return len(self._config)

    def __iter__(self):
        """Iterate over available parameter values."""
        yield from self._config

    def __getitem__(self, key: str):
        """Access parameter values by mapping key."""
        if key in self._config:
            return self._config[key]
        raise KeyError(
            f"[{self.section}] has no value for {key!r}"
        ) from None

    def options(self) -> _options.Options:
        """Create visibility options from this section."""
        return _options.Options(**dict(self._config))

    def __str__(self) -> str:
        return json.dumps(
            dict(self._config),
            indent=4,
            sort_keys=True,
        )

    def __repr__(self) -> str:
        return f"{__package__}.{self.section}({self.path}):\n{self}"
