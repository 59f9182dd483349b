import collections
import collections.abc
import typing


T = typing.TypeVar('T')


def unique(*items: T) -> typing.List[T]:
    """Remove repeated items while preserving order."""
    collection = []
    for item in items:
        if item not in collection:
            collection.append(item)
    return collection


def merge_powers(
    pairs: typing.Iterable[typing.Tuple[T, int]],
) -> typing.Dict[T, int]:
    """Sum the powers of repeated keys, dropping any that cancel.

    Parameters
    ----------
    pairs : iterable of 2-tuples
        Each member is a key and an integral power.

    Returns
    -------
    dict
        The nonzero total power of each key, in order of first appearance.
    """
    totals = {}
    for key, power in pairs:
        totals[key] = totals.get(key, 0) + power
    return {k: v for k, v in totals.items() if v != 0}


class DisplayMap:
    """An attribute mapping for string formatting."""

    def __init__(self, instance: 'ReprStrMixin') -> None:
        self._instance = instance

    def __getitem__(self, name: str) -> str:
        """Get the named attribute and call it if necessary."""
        attr = getattr(self._instance, name)
        this = attr() if callable(attr) else attr
        return str(this)


class Display(collections.UserDict):
    """The format strings to use for `__str__` and `__repr__`."""

    def __init__(self, __str__: str='', __repr__: str='') -> None:
        super().__init__({'__str__': __str__, '__repr__': __repr__})

    def __setitem__(self, key: str, value: str) -> None:
        if key not in {'__str__', '__repr__'}:
            raise KeyError(f"Can't set value of {key!r}")
        self.data[key] = value


class ReprStrMixin:
    """A mixin class that provides support for `__repr__` and `__str__`.

    Subclasses set `_display` to an instance of `~iterables.Display` whose
    values are format strings naming attributes of the instance.
    """

    _display: Display = None

    @property
    def display(self) -> Display:
        """The format strings for each method."""
        if self._display is None:
            self._display = Display()
        return self._display

    def __str__(self) -> str:
        """A simplified representation of this object."""
        return self.display['__str__'].format_map(DisplayMap(self))

    def __repr__(self) -> str:
        """An unambiguous representation of this object."""
        string = self.display['__repr__'].format_map(DisplayMap(self))
        module = f"{self.__module__.replace('measurement.', '')}."
        name = self.__class__.__qualname__
        return f"{module}{name}({string or self})"


class ObjectRegistry(collections.abc.Mapping):
    """A mapping from names to registered objects and their metadata.

    Examples
    --------
    >>> registry = ObjectRegistry()
    >>> @registry.register(name='twice', arity=1)
    ... def double(x):
    ...     return 2 * x
    ...
    >>> registry['twice']['arity']
    1
    >>> registry['twice']['object'](3)
    6
    """

    def __init__(self, object_key: str='object') -> None:
        self._items = {}
        self._object_key = object_key

    def __iter__(self) -> typing.Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, key: str) -> typing.Dict[str, typing.Any]:
        return self._items[key]

    def register(self, _obj: T=None, name: str=None, **metadata) -> T:
        """Register an object under `name` or its defined name.

        This method may decorate an object with or without arguments.
        """
        def decorator(obj):
            key = name or obj.__name__
            if key in self._items:
                raise KeyError(f"An object named {key!r} already exists")
            self._items[key] = {self._object_key: obj, **metadata}
            return obj
        if _obj is None:
            return decorator
        return decorator(_obj)
