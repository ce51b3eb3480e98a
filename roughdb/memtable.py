"""An in-memory, sorted, multi-version table of entries."""

from __future__ import annotations

import bisect
import itertools
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from roughdb.arena import Arena
from roughdb.entry import Entry

T = TypeVar("T")


class LookupStatus(Enum):
    """Outcome of a memtable lookup."""

    MISS = "miss"
    DELETED = "deleted"
    HIT = "hit"


@dataclass(frozen=True)
class LookupResult(Generic[T]):
    """The status of a lookup and, on a hit, the value found."""

    status: LookupStatus
    value: Optional[T] = None

    @classmethod
    def miss(cls) -> "LookupResult":
        return cls(LookupStatus.MISS)

    @classmethod
    def deleted(cls) -> "LookupResult":
        return cls(LookupStatus.DELETED)

    @classmethod
    def hit(cls, value: T) -> "LookupResult[T]":
        return cls(LookupStatus.HIT, value)

    def unwrap_value(self) -> T:
        """Return the value of a hit; raise LookupError otherwise."""
        if self.status is LookupStatus.HIT:
            return self.value  # type: ignore[return-value]
        if self.status is LookupStatus.DELETED:
            raise LookupError("unwrap_value() called on a deleted result")
        raise LookupError("unwrap_value() called on a missed result")


class Memtable:
    """Holds every version of every key, newest version first per key."""

    def __init__(self, arena: Optional[Arena] = None) -> None:
        self._arena = arena if arena is not None else Arena()
        self._entries: list[Entry] = []
        self._sort_keys: list[tuple[bytes, int]] = []
        self._sequence = itertools.count()
        self._lock = threading.Lock()

    def _insert(self, entry: Entry) -> None:
        sort_key = entry.sort_key()
        index = bisect.bisect_left(self._sort_keys, sort_key)
        if index < len(self._sort_keys) and self._sort_keys[index] == sort_key:
            return
        self._sort_keys.insert(index, sort_key)
        self._entries.insert(index, entry)

    def add(self, key: bytes, value: bytes) -> None:
        """Record ``value`` as the newest version of ``key``."""
        with self._lock:
            entry = Entry.new_value(self._arena, next(self._sequence), key, value)
            self._insert(entry)

    def get(self, key: bytes) -> LookupResult[bytes]:
        """Look up the newest version of ``key``."""
        key = bytes(key)
        probe = Entry.lookup_key(key).sort_key()
        with self._lock:
            index = bisect.bisect_left(self._sort_keys, probe)
            if index == len(self._entries):
                return LookupResult.miss()
            entry = self._entries[index]
        if entry.key() != key:
            return LookupResult.miss()
        value = entry.value()
        if value is None:
            return LookupResult.deleted()
        return LookupResult.hit(value)

    def delete(self, key: bytes) -> None:
        """Record a deletion marker as the newest version of ``key``."""
        with self._lock:
            entry = Entry.new_deletion(self._arena, next(self._sequence), key)
            self._insert(entry)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)