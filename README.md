# roughdb

A small embedded key-value store that lives in memory. Keys and values are
byte strings. Writes go into a table that keeps every version of a key,
ordered by key and then by newest sequence number first. A deletion is
recorded as a tombstone, so a deleted key reads back as absent.

## Installation

```
pip install roughdb
```

## Usage

```python
from roughdb.db import Db

db = Db()
assert db.get(b"42") is None

db.put(b"42", b"An answer to some question")
assert db.get(b"42") == b"An answer to some question"

db.delete(b"42")
assert db.get(b"42") is None
```

`Db.get` returns the stored value as `bytes`, or `None` if the key was never
written or has been deleted. `Db.put` and `Db.delete` write to the mutable
memtable, `Db.mem`. `Db.get` looks there first and then, if `Db.imm` has been
set to a `Memtable`, in that table; the first hit or tombstone found decides
the answer.

### The memtable

`roughdb.memtable.Memtable` is the structure underneath `Db`. Its `get`
returns a `LookupResult` whose `status` is a `LookupStatus` (`HIT`,
`DELETED` or `MISS`) and whose `value` holds the bytes on a hit.
`LookupResult.unwrap_value()` returns the value of a hit and raises
`LookupError` for a deletion or a miss.

```python
from roughdb.memtable import LookupStatus, Memtable

table = Memtable()
table.add(b"foo", b"bar")
assert table.get(b"foo").unwrap_value() == b"bar"

table.delete(b"foo")
assert table.get(b"foo").status is LookupStatus.DELETED
assert table.get(b"baz").status is LookupStatus.MISS
assert len(table) == 2  # one value, one tombstone
```

Writes to a memtable are serialised by a lock, so one table may be shared
between threads.

### The arena

Entries take their memory from a `roughdb.arena.Arena`, which hands out
zero-filled buffers up to a fixed byte budget (10 MiB by default).
`Memtable(arena)` accepts an arena of your own; otherwise it makes a default
one. When the budget is used up, writing raises
`roughdb.arena.ArenaExhaustedError` (a `MemoryError`). `Arena.remaining`
tells how many bytes are left.

```python
from roughdb.arena import Arena, ArenaExhaustedError
from roughdb.memtable import Memtable

table = Memtable(Arena(16))
try:
    table.add(b"key", b"a value that does not fit")
except ArenaExhaustedError:
    pass
```

### Entry encoding

Each record in `roughdb.entry.Entry` is laid out as

```
varint(key length) | key | varint(sequence) | type byte | [varint(value length) | value]
```

with a type byte of `0` (`ValueType.DELETION`) or `1` (`ValueType.VALUE`).
`Entry` exposes `key()`, `sequence_id()`, `value_type()`, `value()` and
`key_value()`; entries compare equal when their keys are equal and sort by
key ascending, then by sequence number descending. Malformed data raises
`roughdb.entry.CorruptionError`. The varint helpers `write_varu64(n)` and
`read_varu64(data)` (returning `(value, bytes_consumed)`) are available on
their own.

## What it does not do

Everything is held in memory. There is no on-disk storage, no write-ahead
log and no recovery: data is gone when the process ends. Nothing moves the
mutable memtable into `Db.imm`, and there are no range scans or iteration
over keys.

## Running the tests

```
pip install roughdb[test]
pytest
```