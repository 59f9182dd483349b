"""
The registry of known dimensions, units, prefixes, and measurement systems.

A `~corpus.Corpus` is an explicit context object. Every lookup, filter, and
quantity operation reads the corpus it was given, so independent sessions may
hold independent corpora with different options. Instances are not safe to
mutate from multiple threads at once.
"""

import logging
import re
import types
import typing

from measurement.core import comparers
from measurement.core import dimension as _dimension
from measurement.core import entities
from measurement.core import errors
from measurement.core import finder
from measurement.core import options as _options
from measurement.core import quantity as _quantity
from measurement.core import spelling


logger = logging.getLogger(__name__)


_IDENTIFIER = re.compile(
    r"^\s*(?P<name>.+?)\s*(?:\^\s*(?P<power>[-+]?\d+))?\s*$"
)


class Corpus:
    """A registry of catalog entries plus the options that filter them.

    Parameters
    ----------
    options : `~options.Options`, optional
        The visibility settings. The default is a new instance with documented
        default values.

    Examples
    --------
    Create a corpus from the built-in catalog and look up a unit:

    >>> corpus = Corpus.default()
    >>> corpus.find_unit('metres').key
    'metre'

    Create a quantity in terms of units from the corpus:

    >>> q = corpus.quantity(3.2, 'minute') + corpus.quantity(30, 'second')
    >>> q.value
    3.7
    """

    def __init__(self, options: _options.Options=None) -> None:
        self.options = options or _options.Options()
        self._systems: typing.Dict[str, entities.MeasurementSystem] = {}
        self._roots: typing.Dict[str, entities.MeasurementSystem] = {}
        self._dimensions: typing.Dict[str, entities.DimensionDefinition] = {}
        self._units: typing.Dict[str, entities.Unit] = {}
        self._prefixes: typing.Dict[str, entities.Prefix] = {}
        self._spelling = None
        self.dimension_finder = finder.Finder(
            lambda: self._dimensions.values(),
            self.dimension_filter,
            comparers.DIMENSIONS,
        )
        self.unit_finder = finder.Finder(
            lambda: self._units.values(),
            self.unit_filter,
            comparers.UNITS,
        )
        self.system_finder = finder.Finder(
            lambda: self._systems.values(),
            self.system_filter,
            comparers.SYSTEMS,
        )
        self.prefix_finder = finder.Finder(
            lambda: self._prefixes.values(),
            self.prefix_filter,
            comparers.PREFIXES,
        )

    @classmethod
    def default(cls, options: _options.Options=None) -> 'Corpus':
        """Create a corpus populated with the built-in catalog."""
        from measurement.core import catalog
        return catalog.build(catalog.DEFAULT, cls(options))

    @property
    def systems(self) -> typing.Mapping[str, entities.MeasurementSystem]:
        """All registered measurement systems, keyed by key."""
        return types.MappingProxyType(self._systems)

    @property
    def roots(self) -> typing.Mapping[str, entities.MeasurementSystem]:
        """The registered measurement systems that have no parent."""
        return types.MappingProxyType(self._roots)

    @property
    def dimensions(self) -> typing.Mapping[str, entities.DimensionDefinition]:
        """All registered dimension definitions, keyed by key."""
        return types.MappingProxyType(self._dimensions)

    @property
    def units(self) -> typing.Mapping[str, entities.Unit]:
        """All registered units, keyed by key."""
        return types.MappingProxyType(self._units)

    @property
    def prefixes(self) -> typing.Mapping[str, entities.Prefix]:
        """All registered prefixes, keyed by key."""
        return types.MappingProxyType(self._prefixes)

    # Registration

    def add_system(
        self,
        system: entities.MeasurementSystem,
    ) -> entities.MeasurementSystem:
        """Register a measurement system.

        The parent system, if any, must already be registered. This guarantees
        that every parent chain is acyclic and ends at a root.
        """
        if system.key in self._systems:
            raise errors.InvalidArgumentError(
                f"A system with key {system.key!r} already exists"
            ) from None
        if system.parent_key is None:
            system.depth = 0
            self._roots[system.key] = system
        else:
            parent = self._systems.get(system.parent_key)
            if parent is None:
                raise errors.InvalidArgumentError(
                    f"Unknown parent system {system.parent_key!r}"
                    f" for {system.key!r}"
                ) from None
            chain = [a.key for a in self.ancestors(parent)] + [parent.key]
            if system.key in chain:
                raise errors.InvalidArgumentError(
                    f"System {system.key!r} would be its own ancestor"
                ) from None
            system.depth = parent.depth + 1
        self._systems[system.key] = system
        logger.debug("Registered measurement system %r", system.key)
        return system

    def add_dimension(
        self,
        definition: entities.DimensionDefinition,
        *units: entities.Unit,
        strict: bool=True,
    ) -> entities.DimensionDefinition:
        """Register a dimension definition and, optionally, its units.

        Parameters
        ----------
        definition : `~entities.DimensionDefinition`
            The definition to register.

        *units : `~entities.Unit`
            Units to register as members of `definition`.

        strict : bool, default=True
            If true, resolve the components of a derived definition now, which
            requires that they already exist. Bulk loaders may pass false and
            call `resolve_all` after registering every definition.
        """
        if definition.key in self._dimensions:
            raise errors.InvalidArgumentError(
                f"A dimension with key {definition.key!r} already exists"
            ) from None
        if strict and definition.is_derived:
            self.resolve(definition)
        self._dimensions[definition.key] = definition
        logger.debug("Registered dimension %r", definition.key)
        for unit in units:
            self.add_unit(unit, definition)
        return definition

    def add_unit(
        self,
        unit: entities.Unit,
        definition: typing.Union[str, entities.DimensionDefinition],
    ) -> entities.Unit:
        """Register `unit` as a member of a registered dimension."""
        key = getattr(definition, 'key', definition)
        if key not in self._dimensions:
            raise errors.InvalidArgumentError(
                f"Unknown dimension {key!r} for unit {unit.key!r}"
            ) from None
        if unit.key in self._units:
            raise errors.InvalidArgumentError(
                f"A unit with key {unit.key!r} already exists"
            ) from None
        unknown = [s for s in unit.systems if s not in self._systems]
        if unknown:
            raise errors.InvalidArgumentError(
                f"Unit {unit.key!r} refers to unknown systems {unknown}"
            ) from None
        target = self._dimensions[key]
        unit.dimension = target
        target.units[unit.key] = unit
        self._units[unit.key] = unit
        self._spelling = None
        logger.debug("Registered unit %r in dimension %r", unit.key, key)
        return unit

    def add_prefix(self, prefix: entities.Prefix) -> entities.Prefix:
        """Register a prefix."""
        if prefix.key in self._prefixes:
            raise errors.InvalidArgumentError(
                f"A prefix with key {prefix.key!r} already exists"
            ) from None
        self._prefixes[prefix.key] = prefix
        logger.debug("Registered prefix %r", prefix.key)
        return prefix

    def resolve(
        self,
        definition: entities.DimensionDefinition,
    ) -> _dimension.Signature:
        """Compute and store the non-derived signature of `definition`.

        Raises
        ------
        `~errors.InvalidArgumentError`
            A component does not name a registered definition, or the
            derivation refers back to itself.
        """
        return self._resolve(definition, ())

    def _resolve(
        self,
        definition: entities.DimensionDefinition,
        stack: typing.Tuple[str, ...],
    ) -> _dimension.Signature:
        if not definition.is_derived:
            return {definition: 1}
        if definition.key in stack:
            path = ' -> '.join(stack + (definition.key,))
            raise errors.InvalidArgumentError(
                f"Cyclic derivation {path}"
            ) from None
        pairs = []
        for key, power in definition.derived:
            component = self._dimensions.get(key)
            if component is None:
                raise errors.InvalidArgumentError(
                    f"Derived dimension {definition.key!r} refers to"
                    f" unknown dimension {key!r}"
                ) from None
            nested = self._resolve(component, stack + (definition.key,))
            pairs.extend((base, p * power) for base, p in nested.items())
        result = {}
        for base, power in pairs:
            result[base] = result.get(base, 0) + power
        definition.resolved = {k: v for k, v in result.items() if v != 0}
        return dict(definition.resolved)

    def resolve_all(self) -> None:
        """Resolve every registered derived definition."""
        for definition in self._dimensions.values():
            if definition.is_derived:
                self.resolve(definition)

    # System relations

    def parent(
        self,
        system: entities.MeasurementSystem,
    ) -> typing.Optional[entities.MeasurementSystem]:
        """The parent of `system`, if any."""
        if system.parent_key is None:
            return None
        return self._systems.get(system.parent_key)

    def children(
        self,
        system: entities.MeasurementSystem,
    ) -> typing.List[entities.MeasurementSystem]:
        """The systems whose parent is `system`."""
        return [s for s in self._systems.values() if s.parent_key == system.key]

    def ancestors(
        self,
        system: entities.MeasurementSystem,
    ) -> typing.List[entities.MeasurementSystem]:
        """The ancestors of `system`, starting with its root."""
        chain = []
        seen = {system.key}
        current = self.parent(system)
        while current is not None:
            if current.key in seen:
                raise errors.InvalidArgumentError(
                    f"Cyclic parent chain at system {current.key!r}"
                ) from None
            seen.add(current.key)
            chain.append(current)
            current = self.parent(current)
        return list(reversed(chain))

    # Filters

    def dimension_filter(self, definition: entities.DimensionDefinition) -> bool:
        """True if lookups should include `definition`."""
        if definition.vector and not self.options.allow_vector_dimensions:
            return False
        if definition.is_derived and not self.options.allow_derived_dimensions:
            return False
        ignored = _options.keys_of(self.options.ignored_dimensions)
        return definition.key not in ignored

    def system_filter(self, system: entities.MeasurementSystem) -> bool:
        """True if units in `system` should be visible.

        Ignoring a system also hides its descendants, even when they are
        explicitly allowed. When any systems are explicitly allowed, a visible
        system must be one of them or descend from one of them.
        """
        chain = {s.key for s in self.ancestors(system)} | {system.key}
        ignored = _options.keys_of(self.options.ignored_systems_for_units)
        if chain & ignored:
            return False
        allowed = _options.keys_of(self.options.allowed_systems_for_units)
        return not allowed or bool(chain & allowed)

    def allowed_systems(self) -> typing.Set[str]:
        """The keys of all currently visible systems."""
        return {
            key for key, system in self._systems.items()
            if self.system_filter(system)
        }

    def unit_filter(self, unit: entities.Unit) -> bool:
        """True if lookups should include `unit`.

        A unit is visible if its dimension is visible and at least one of its
        systems is visible. A unit that belongs to no system is visible only
        when no systems are explicitly allowed.
        """
        if unit.dimension is not None and not self.dimension_filter(unit.dimension):
            return False
        if unit.is_rare and not self.options.use_rare_units:
            return False
        if unit.is_estimation and not self.options.use_estimated_units:
            return False
        if not unit.systems:
            return not self.options.allowed_systems_for_units
        return any(
            self.system_filter(self._systems[key])
            for key in unit.systems if key in self._systems
        )

    def prefix_filter(self, prefix: entities.Prefix) -> bool:
        """True if lookups should include `prefix`."""
        unofficial = prefix.prefix_type == entities.PrefixType.SI_UNOFFICIAL
        if unofficial and not self.options.use_unofficial_prefixes:
            return False
        if prefix.is_rare and not self.options.use_rare_prefixes:
            return False
        return True

    # Lookup

    def find_dimension(self, text: str) -> typing.Optional[entities.DimensionDefinition]:
        """The best visible dimension that exactly matches `text`."""
        return self.dimension_finder.find_exact(text)

    def find_dimension_partial(self, text: str) -> typing.Optional[entities.DimensionDefinition]:
        """The best visible dimension that contains `text`."""
        return self.dimension_finder.find_partial(text)

    def find_dimensions_partial(self, text: str) -> typing.List[entities.DimensionDefinition]:
        """All visible dimensions that contain `text`, best first."""
        return self.dimension_finder.find_all_partial(text)

    def _units_of(self, hint) -> typing.Optional[typing.List[entities.Unit]]:
        """The candidate units for a dimension hint."""
        if hint is None:
            return None
        if isinstance(hint, str):
            definition = self.find_dimension(hint)
            if definition is None:
                return []
            return list(definition.units.values())
        return list(hint.units.values())

    def find_unit(
        self,
        text: str,
        dimension: typing.Union[str, entities.DimensionDefinition]=None,
    ) -> typing.Optional[entities.Unit]:
        """The best visible unit that exactly matches `text`.

        A match that respects case wins over one that ignores it, so that, for
        example, 'Gal' and 'gal' may name different units. If `dimension` is
        given, only its units are candidates.
        """
        candidates = self._units_of(dimension)
        return (
            self.unit_finder.find_exact(text, candidates, ignore_case=False)
            or self.unit_finder.find_exact(text, candidates)
        )

    def find_unit_partial(
        self,
        text: str,
        dimension: typing.Union[str, entities.DimensionDefinition]=None,
    ) -> typing.Optional[entities.Unit]:
        """The best visible unit that contains `text`."""
        candidates = self._units_of(dimension)
        return self.unit_finder.find_partial(text, candidates)

    def find_units_partial(
        self,
        text: str,
        dimension: typing.Union[str, entities.DimensionDefinition]=None,
    ) -> typing.List[entities.Unit]:
        """All visible units that contain `text`, best first."""
        candidates = self._units_of(dimension)
        return self.unit_finder.find_all_partial(text, candidates)

    def find_system(self, text: str) -> typing.Optional[entities.MeasurementSystem]:
        """The best visible system that exactly matches `text`."""
        return self.system_finder.find_exact(text)

    def find_system_partial(self, text: str) -> typing.Optional[entities.MeasurementSystem]:
        """The best visible system that contains `text`."""
        return self.system_finder.find_partial(text)

    def find_systems_partial(self, text: str) -> typing.List[entities.MeasurementSystem]:
        """All visible systems that contain `text`, best first."""
        return self.system_finder.find_all_partial(text)

    def find_prefix(self, text: str) -> typing.Optional[entities.Prefix]:
        """The best visible prefix that exactly matches `text`."""
        return (
            self.prefix_finder.find_exact(text, ignore_case=False)
            or self.prefix_finder.find_exact(text)
        )

    def find_prefix_partial(self, text: str) -> typing.Optional[entities.Prefix]:
        """The best visible prefix that contains `text`."""
        return self.prefix_finder.find_partial(text)

    def find_prefixes_partial(self, text: str) -> typing.List[entities.Prefix]:
        """All visible prefixes that contain `text`, best first."""
        return self.prefix_finder.find_all_partial(text)

    def find_base_unit(self, text: str) -> typing.Optional[entities.Unit]:
        """The base unit of the dimension that exactly matches `text`."""
        definition = self.find_dimension(text)
        if definition is None:
            return None
        return definition.base_unit

    # Construction

    def dimension(
        self,
        unit: typing.Union[str, entities.Unit],
        power: int=1,
        prefix: typing.Union[str, entities.Prefix]=None,
    ) -> _dimension.Dimension:
        """Create a dimension from a unit and an optional prefix.

        String arguments must exactly match a visible unit or prefix.
        """
        if isinstance(unit, str):
            found = self.find_unit(unit)
            if found is None:
                raise self._unresolved(unit)
            unit = found
        if isinstance(prefix, str):
            found = self.find_prefix(prefix)
            if found is None:
                raise errors.InvalidArgumentError(
                    f"Could not find a prefix matching {prefix!r}"
                ) from None
            prefix = found
        return _dimension.Dimension(unit, power, prefix)

    def parse_dimension(self, identifier: str) -> _dimension.Dimension:
        """Resolve a unit identifier such as ``'km'`` or ``'second^-1'``.

        The unit part may be any exact name, symbol, or alternate spelling of
        a visible unit, optionally preceded by the name or symbol of a visible
        prefix. An optional ``'^n'`` suffix sets the power.

        Raises
        ------
        `~errors.UnresolvedUnitError`
            The identifier does not match any visible unit.
        """
        errors.require_text(identifier, name='unit identifier')
        match = _IDENTIFIER.match(identifier)
        name = match['name']
        power = int(match['power'] or 1)
        unit = self.find_unit(name)
        if unit is not None:
            return _dimension.Dimension(unit, power)
        for prefix, rest in self._prefix_splits(name):
            unit = self.find_unit(rest)
            if unit is not None:
                return _dimension.Dimension(unit, power, prefix)
        raise self._unresolved(name)

    def _prefix_splits(self, name: str):
        """Generate (prefix, remainder) pairs for visible prefixes of `name`.

        Prefix names match without regard to case; prefix symbols must match
        exactly so that, for example, 'M' (mega) and 'm' (milli) differ.
        """
        prefixes = [p for p in self._prefixes.values() if self.prefix_filter(p)]
        by_name = sorted(prefixes, key=lambda p: len(p.key), reverse=True)
        for prefix in by_name:
            if name.lower().startswith(prefix.key.lower()):
                rest = name[len(prefix.key):]
                if rest:
                    yield prefix, rest
        with_symbol = [p for p in prefixes if p.symbol]
        by_symbol = sorted(with_symbol, key=lambda p: len(p.symbol), reverse=True)
        for prefix in by_symbol:
            if name.startswith(prefix.symbol):
                rest = name[len(prefix.symbol):]
                if rest:
                    yield prefix, rest

    def _unresolved(self, name: str) -> errors.UnresolvedUnitError:
        """Build an error with spelling suggestions for `name`."""
        if self._spelling is None:
            words = [
                word
                for unit in self._units.values()
                for word in (unit.key, unit.name, unit.plural)
                if word
            ]
            self._spelling = spelling.SpellChecker(*words)
        return errors.UnresolvedUnitError(name, self._spelling.suggest(name))

    def quantity(self, value, *units) -> _quantity.Quantity:
        """Create a quantity whose units belong to this corpus.

        Each member of `units` may be a unit identifier (see
        `parse_dimension`), a `~entities.Unit`, or a `~dimension.Dimension`.
        """
        return _quantity.Quantity(value, *units, corpus=self)

    def __repr__(self) -> str:
        counts = (
            f"systems={len(self._systems)}, "
            f"dimensions={len(self._dimensions)}, "
            f"units={len(self._units)}, "
            f"prefixes={len(self._prefixes)}"
        )
        return f"{self.__class__.__qualname__}({counts})"
