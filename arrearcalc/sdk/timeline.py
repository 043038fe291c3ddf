"""Effective-dated lookup shared by pay events and both DA tracks.

A Timeline holds entries that each take effect on a date and stay in
force until a later entry replaces them. The entry in force on a given
day is the one with the latest effective date on or before that day.
"""

from bisect import bisect_right
from datetime import date
from typing import Callable, Generic, Iterable, Iterator, List, Optional, TypeVar

T = TypeVar("T")


class Timeline(Generic[T]):
    """Sorted, immutable "latest effective entry as of" index.

    Entries sharing a date keep their input order, so the last one
    supplied for a date wins.
    """

    def __init__(self, entries: Iterable[T], key: Callable[[T], date]):
        self._entries: List[T] = sorted(entries, key=key)
        self._dates: List[date] = [key(e) for e in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[T]:
        return iter(self._entries)

    def index_as_of(self, target: date) -> int:
        """Index of the entry in force on target, or -1 if none has started."""
        return bisect_right(self._dates, target) - 1

    def active_as_of(self, target: date) -> Optional[T]:
        """Entry in force on target, or None if none has started yet."""
        idx = self.index_as_of(target)
        if idx < 0:
            return None
        return self._entries[idx]

    def change_dates_within(self, start: date, end: date) -> List[date]:
        """Distinct effective dates strictly after start and on or before end."""
        lo = bisect_right(self._dates, start)
        hi = bisect_right(self._dates, end)
        return sorted(set(self._dates[lo:hi]))
