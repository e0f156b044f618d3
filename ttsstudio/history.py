"""Bounded, newest-first history of completed syntheses."""

from __future__ import annotations

from .models.datatypes import HistoryEntry

HISTORY_CAPACITY = 6


def prepend_bounded(
    entries: tuple[HistoryEntry, ...],
    entry: HistoryEntry,
    capacity: int = HISTORY_CAPACITY,
) -> tuple[HistoryEntry, ...]:
    """Return `entries` with `entry` in front, truncated to `capacity` items."""

    return ((entry,) + entries)[:capacity]


class HistoryLedger:
    """Append-only ledger that evicts the oldest entry once `capacity` is exceeded.

    There is no removal operation besides the capacity bound and no
    deduplication; entries live for the process session only.
    """

    def __init__(self, capacity: int = HISTORY_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("History capacity must be a positive integer.")
        self.capacity = capacity
        self._entries: tuple[HistoryEntry, ...] = ()

    def push(self, entry: HistoryEntry) -> None:
        """Record `entry` as the most recent synthesis."""

        self._entries = prepend_bounded(self._entries, entry, self.capacity)

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        """Entries ordered newest-first."""

        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)
