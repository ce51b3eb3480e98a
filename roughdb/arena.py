"""A bounded byte arena that hands out zero-filled buffers."""

from __future__ import annotations

DEFAULT_CAPACITY = 10 << 20  # 10 MB


class ArenaExhaustedError(MemoryError):
    """Raised when an allocation would exceed the arena's capacity."""


class Arena:
    """Hands out zero-initialised buffers until a byte budget is used up."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self.capacity = capacity
        self.used = 0

    def allocate(self, size: int) -> bytearray:
        """Return a zero-filled buffer of ``size`` bytes.

        Raises ArenaExhaustedError when the arena has no room left.
        """
        if size < 0:
            raise ValueError("size must not be negative")
        if self.used + size > self.capacity:
            raise ArenaExhaustedError(
                f"cannot allocate {size} bytes: {self.capacity - self.used} of "
                f"{self.capacity} remaining"
            )
        self.used += size
        return bytearray(size)

    @property
    def remaining(self) -> int:
        """Bytes still available for allocation."""
        return self.capacity - self.used

    def __repr__(self) -> str:
        return f"Arena(capacity={self.capacity}, used={self.used})"