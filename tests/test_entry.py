import pytest

from roughdb.arena import Arena, ArenaExhaustedError
from roughdb.entry import (
    U64_MAX,
    CorruptionError,
    Entry,
    ValueType,
    read_varu64,
    write_varu64,
)


@pytest.fixture
def arena():
    return Arena()


def test_new_value_is_value(arena):
    entry = Entry.new_value(arena, U64_MAX, b"Foo", b"Bar")
    klen, ksize = read_varu64(entry.data)
    _, ssize = read_varu64(entry.data[ksize + klen:])
    assert entry.data[ksize + klen + ssize] == ValueType.VALUE
    assert entry.value_type() is ValueType.VALUE


def test_sequence_id(arena):
    assert Entry.new_value(arena, 0, b"Foo", b"Bar").sequence_id() == 0
    assert Entry.new_value(arena, U64_MAX, b"Foo", b"Bar").sequence_id() == U64_MAX


def test_saves_key(arena):
    assert Entry.new_value(arena, 0, b"Foo", b"Bar").key() == b"Foo"


def test_key_value(arena):
    entry = Entry.new_value(arena, U64_MAX, b"Foo", b"Bar")
    assert entry.key_value() == (b"Foo", b"Bar")


def test_saves_value(arena):
    assert Entry.new_value(arena, 2, b"Foo", b"Bar").value() == b"Bar"


def test_new_deletion_is_deletion(arena):
    assert Entry.new_deletion(arena, 3, b"Foo").value_type() is ValueType.DELETION


def test_deletion_value_is_none(arena):
    entry = Entry.new_deletion(arena, 4, b"Foo")
    assert entry.value() is None
    assert entry.key_value() == (b"Foo", None)


def test_entries_with_same_key_are_equal(arena):
    entry = Entry.new_value(arena, 5, b"fizz", b"Bar")
    other = Entry.new_value(arena, 5, b"fizz", b"Foo")
    assert entry == other
    assert hash(entry) == hash(other)


def test_entries_with_different_keys_are_not_equal(arena):
    entry = Entry.new_value(arena, 7, b"fizz", b"Bar")
    noway = Entry.new_value(arena, 8, b"buzz", b"Bar")
    assert not (noway == entry)


def test_value_len(arena):
    entry = Entry.new_value(arena, 42, b"bar", b"fizz")
    assert len(entry) == 1 + 3 + 1 + 1 + 1 + 4
    assert len(entry) == len(entry.data)


def test_long_key_value_len(arena):
    line = b"This is a very long key, that will be > 127 and klen will then be 2 bytes long"
    key = line + line
    assert len(key) > 127
    value = b"fizz"
    entry = Entry.new_value(arena, 42, key, value)
    assert entry.key() == key
    assert entry.value() == value
    assert entry.sequence_id() == 42
    assert len(entry) == 2 + len(key) + 1 + 1 + 1 + len(value)


def test_deletion_len(arena):
    key = b"Bar"
    assert len(Entry.new_deletion(arena, 42, key)) == 1 + 1 + 1 + len(key)


def test_u64var_encoding():
    assert len(write_varu64(0)) == 1
    assert read_varu64(write_varu64(0)) == (0, 1)
    assert len(write_varu64(127)) == 1
    assert read_varu64(write_varu64(127)) == (127, 1)
    assert len(write_varu64(128)) == 2
    assert read_varu64(write_varu64(128)) == (128, 2)
    assert len(write_varu64(U64_MAX)) == 10
    assert read_varu64(write_varu64(U64_MAX) + bytes(8)) == (U64_MAX, 10)


def test_varint_pinned_bytes():
    assert write_varu64(300) == b"\xac\x02"


def test_varint_out_of_range():
    with pytest.raises(ValueError):
        write_varu64(-1)
    with pytest.raises(ValueError):
        write_varu64(U64_MAX + 1)


def test_varint_truncated():
    with pytest.raises(CorruptionError):
        read_varu64(b"\x80\x80")
    with pytest.raises(CorruptionError):
        read_varu64(b"")


def test_varint_too_long():
    with pytest.raises(CorruptionError):
        read_varu64(b"\xff" * 11 + b"\x01")


def test_as_byte(arena):
    deletion = Entry.new_deletion(arena, 1, b"k")
    assert deletion.data[-1] == 0
    value = Entry.new_value(arena, 1, b"k", b"")
    # klen(1) + key(1) + seq(1) precede the type tag
    assert value.data[3] == 1


def test_from_byte():
    assert ValueType(0) is ValueType.DELETION
    assert ValueType(1) is ValueType.VALUE
    with pytest.raises(ValueError):
        ValueType(2)


def test_bad_type_tag_is_corruption(arena):
    entry = Entry.new_deletion(arena, 1, b"k")
    entry.data[-1] = 2
    with pytest.raises(CorruptionError):
        entry.value()


def test_ordering_by_key_then_newest_first(arena):
    old = Entry.new_value(arena, 1, b"a", b"x")
    new = Entry.new_value(arena, 2, b"a", b"y")
    other = Entry.new_value(arena, 0, b"b", b"z")
    assert sorted([other, old, new], key=Entry.sort_key) == [new, old, other]
    assert [e.sequence_id() for e in sorted([other, old, new])] == [2, 1, 0]
    assert new < old
    assert old < other


def test_lookup_key_sorts_before_entries_of_same_key(arena):
    entry = Entry.new_value(arena, U64_MAX - 1, b"foo", b"bar")
    probe = Entry.lookup_key(b"foo")
    assert probe.key() == b"foo"
    assert probe.sequence_id() == U64_MAX
    assert probe < entry


def test_allocation_uses_arena():
    small = Arena(8)
    Entry.new_value(small, 1, b"ab", b"cd")
    assert small.used == 1 + 2 + 1 + 1 + 1 + 2
    with pytest.raises(ArenaExhaustedError):
        Entry.new_value(small, 2, b"ab", b"cd")


def test_repr_shows_key(arena):
    assert repr(Entry.new_deletion(arena, 1, b"k")) == "Entry(key=b'k')"