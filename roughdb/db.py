"""The database front end."""

from __future__ import annotations

from typing import Optional

from roughdb.memtable import LookupStatus, Memtable


class Db:
    """A key-value store backed by a mutable and an optional immutable memtable."""

    def __init__(self) -> None:
        self.mem = Memtable()
        self.imm: Optional[Memtable] = None

    def get(self, key: bytes) -> Optional[bytes]:
        """Return the current value of ``key``, or None if absent or deleted."""
        for table in (self.mem, self.imm):
            if table is None:
                continue
            result = table.get(key)
            if result.status is LookupStatus.HIT:
                return result.value
            if result.status is LookupStatus.DELETED:
                return None
        return None

    def put(self, key: bytes, value: bytes) -> None:
        """Store ``value`` under ``key``."""
        self.mem.add(key, value)

    def delete(self, key: bytes) -> None:
        """Remove ``key``."""
        self.mem.delete(key)