"""Encoded memtable entries and the variable-length integer codec."""

from __future__ import annotations

import functools
from enum import IntEnum

from roughdb.arena import Arena

U64_MAX = (1 << 64) - 1


class CorruptionError(ValueError):
    """Raised when encoded entry data cannot be decoded."""


class ValueType(IntEnum):
    """Kind of record stored in an entry."""

    DELETION = 0
    VALUE = 1


def write_varu64(n: int) -> bytes:
    """Encode an unsigned 64-bit integer as a little-endian base-128 varint."""
    if not 0 <= n <= U64_MAX:
        raise ValueError(f"{n} is not an unsigned 64-bit integer")
    out = bytearray()
    while n >= 0x80:
        out.append((n & 0x7F) | 0x80)
        n >>= 7
    out.append(n)
    return bytes(out)


def read_varu64(data) -> tuple[int, int]:
    """Decode a varint from the start of ``data``.

    Returns ``(value, bytes_consumed)``; raises CorruptionError when the
    varint is truncated or longer than a 64-bit value allows.
    """
    n = 0
    shift = 0
    for consumed, byte in enumerate(data, start=1):
        if shift >= 64:
            break
        if byte < 0x80:
            return (n | (byte << shift)) & U64_MAX, consumed
        n |= (byte & 0x7F) << shift
        shift += 7
    raise CorruptionError("malformed varint")


@functools.total_ordering
class Entry:
    """A key, sequence number, type tag and optional value packed in one buffer.

    Layout: varint(key length) key varint(seq) type [varint(value length) value].
    Entries order by key ascending, then by sequence number descending.
    """

    __slots__ = ("data",)

    def __init__(self, data) -> None:
        self.data = data

    @staticmethod
    def _header(key: bytes, seq: int) -> bytes:
        return write_varu64(len(key)) + bytes(key) + write_varu64(seq)

    @classmethod
    def _from_parts(cls, arena: Arena, parts: bytes) -> "Entry":
        buffer = arena.allocate(len(parts))
        buffer[:] = parts
        return cls(buffer)

    @classmethod
    def new_value(cls, arena: Arena, seq: int, key: bytes, value: bytes) -> "Entry":
        """Build a value entry in memory taken from ``arena``."""
        parts = (
            cls._header(key, seq)
            + bytes([ValueType.VALUE])
            + write_varu64(len(value))
            + bytes(value)
        )
        return cls._from_parts(arena, parts)

    @classmethod
    def new_deletion(cls, arena: Arena, seq: int, key: bytes) -> "Entry":
        """Build a deletion marker in memory taken from ``arena``."""
        parts = cls._header(key, seq) + bytes([ValueType.DELETION])
        return cls._from_parts(arena, parts)

    @classmethod
    def lookup_key(cls, key: bytes) -> "Entry":
        """Build a search key that sorts before every entry for ``key``."""
        return cls(cls._header(key, U64_MAX))

    def _key_bounds(self) -> tuple[int, int]:
        length, start = read_varu64(self.data)
        end = start + length
        if end > len(self.data):
            raise CorruptionError("key extends past end of entry")
        return start, end

    def _sequence_and_type_pos(self) -> tuple[int, int]:
        _, key_end = self._key_bounds()
        seq, seq_size = read_varu64(self.data[key_end:])
        return seq, key_end + seq_size

    def key(self) -> bytes:
        start, end = self._key_bounds()
        return bytes(self.data[start:end])

    def sequence_id(self) -> int:
        seq, _ = self._sequence_and_type_pos()
        return seq

    def value_type(self) -> ValueType:
        _, pos = self._sequence_and_type_pos()
        if pos >= len(self.data):
            raise CorruptionError("entry has no type tag")
        try:
            return ValueType(self.data[pos])
        except ValueError:
            raise CorruptionError(f"unknown value type {self.data[pos]}") from None

    def value(self) -> bytes | None:
        """Return the stored value, or None for a deletion."""
        if self.value_type() is ValueType.DELETION:
            return None
        _, pos = self._sequence_and_type_pos()
        pos += 1
        length, size = read_varu64(self.data[pos:])
        start = pos + size
        end = start + length
        if end != len(self.data):
            raise CorruptionError("value length does not match entry size")
        return bytes(self.data[start:end])

    def key_value(self) -> tuple[bytes, bytes | None]:
        return self.key(), self.value()

    def sort_key(self) -> tuple[bytes, int]:
        """A tuple that orders entries as the memtable does."""
        return self.key(), -self.sequence_id()

    def __len__(self) -> int:
        return len(self.data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entry):
            return NotImplemented
        return self.key() == other.key()

    def __lt__(self, other: "Entry") -> bool:
        if not isinstance(other, Entry):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __hash__(self) -> int:
        return hash(self.key())

    def __repr__(self) -> str:
        return f"Entry(key={self.key()!r})"