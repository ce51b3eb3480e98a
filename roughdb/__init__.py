"""An in-memory key-value store built around a sorted, versioned memtable."""

__version__ = "0.1.0.dev0"
__all__ = ["arena", "db", "entry", "memtable"]