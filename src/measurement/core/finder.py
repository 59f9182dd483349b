import typing

from measurement.core import comparers
from measurement.core import entities
from measurement.core import errors
from measurement.core import iterables


E = typing.TypeVar('E', bound=entities.Entity)


class Finder(typing.Generic[E]):
    """Exact and partial lookup over one kind of catalog entry.

    Parameters
    ----------
    entries : callable
        A function that returns the current entries to search. Lookups call it
        each time, so they always reflect the state of the owning registry.

    visible : callable
        A predicate that returns true if an entry passes the active filters.

    comparer : `~comparers.Comparer`
        The ordering that ranks matching entries.

    Notes
    -----
    An exact match compares the query to every searchable string of an entry
    (key, names, symbols, and declared alternate spellings). A partial match
    also accepts any searchable string that contains the query. Both forms
    discard entries that fail `visible` before ranking the rest.
    """

    def __init__(
        self,
        entries: typing.Callable[[], typing.Iterable[E]],
        visible: typing.Callable[[E], bool],
        comparer: comparers.Comparer,
    ) -> None:
        self._entries = entries
        self._visible = visible
        self.comparer = comparer

    def find_exact(
        self,
        text: str,
        candidates: typing.Iterable[E]=None,
        ignore_case: bool=True,
    ) -> typing.Optional[E]:
        """The best visible entry that exactly matches `text`, if any."""
        found = self.find_all_exact(text, candidates, ignore_case)
        return found[0] if found else None

    def find_all_exact(
        self,
        text: str,
        candidates: typing.Iterable[E]=None,
        ignore_case: bool=True,
    ) -> typing.List[E]:
        """All visible entries that exactly match `text`, best first."""
        errors.require_text(text)
        query = _normalize(text, ignore_case)
        pool = self._pool(candidates)
        matches = [
            entry for entry in pool
            if any(
                _normalize(field, ignore_case) == query
                for field in entry.searchable()
            )
        ]
        return self._rank(matches)

    def find_partial(
        self,
        text: str,
        candidates: typing.Iterable[E]=None,
        ignore_case: bool=True,
    ) -> typing.Optional[E]:
        """The best visible entry that contains `text`, if any."""
        found = self.find_all_partial(text, candidates, ignore_case)
        return found[0] if found else None

    def find_all_partial(
        self,
        text: str,
        candidates: typing.Iterable[E]=None,
        ignore_case: bool=True,
    ) -> typing.List[E]:
        """All visible entries that contain `text`, best first."""
        errors.require_text(text)
        query = _normalize(text, ignore_case)
        pool = self._pool(candidates)
        matches = [
            entry for entry in pool
            if any(
                query in _normalize(field, ignore_case)
                for field in entry.searchable()
            )
        ]
        return self._rank(matches)

    def _pool(self, candidates: typing.Optional[typing.Iterable[E]]):
        """The entries to search."""
        return list(self._entries() if candidates is None else candidates)

    def _rank(self, matches: typing.List[E]) -> typing.List[E]:
        """Filter and order matching entries."""
        visible = [m for m in iterables.unique(*matches) if self._visible(m)]
        return self.comparer.sort(visible)


def _normalize(text: str, ignore_case: bool) -> str:
    """Prepare `text` for comparison."""
    string = text.strip()
    return string.casefold() if ignore_case else string
