"""A bump allocator that hands out slices of one fixed buffer."""

from __future__ import annotations

__all__ = ["ArenaExhaustedError", "Arena"]


class ArenaExhaustedError(MemoryError):
    """Raised when an allocation does not fit in the arena."""


class Arena:
    """A fixed-capacity region from which memory is carved sequentially.

    Allocations are writable ``memoryview`` slices of the arena's buffer.
    ``save`` returns a checkpoint (the current offset) and ``restore`` rolls
    the arena back to it, making later allocations reusable.
    """

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("arena size must not be negative")
        self._buffer: bytearray | None = bytearray(size)
        self._size = size
        self._offset = 0
        self._peak = 0

    def __repr__(self) -> str:
        return (
            f"Arena(size={self._size}, offset={self._offset}, peak={self._peak})"
        )

    @property
    def size(self) -> int:
        """Total capacity in bytes."""
        return self._size

    @property
    def offset(self) -> int:
        """Number of bytes currently allocated."""
        return self._offset

    @property
    def peak(self) -> int:
        """Highest offset ever reached."""
        return self._peak

    def alloc(self, nbytes: int) -> memoryview:
        """Reserve ``nbytes`` and return a writable view of them."""
        if nbytes < 0:
            raise ValueError("allocation size must not be negative")
        if self._buffer is None:
            raise ArenaExhaustedError("arena has been freed")
        if self._offset + nbytes > self._size:
            raise ArenaExhaustedError(
                f"cannot allocate {nbytes} bytes: "
                f"{self._size - self._offset} of {self._size} remain"
            )
        start = self._offset
        self._offset += nbytes
        self._peak = max(self._peak, self._offset)
        return memoryview(self._buffer)[start:self._offset]

    def alloc_zero(self, nbytes: int) -> memoryview:
        """Reserve ``nbytes``, zero them, and return a writable view."""
        view = self.alloc(nbytes)
        view[:] = bytes(nbytes)
        return view

    def save(self) -> int:
        """Return a checkpoint for the current allocation state."""
        return self._offset

    def restore(self, checkpoint: int) -> None:
        """Roll back to ``checkpoint``; it must not lie beyond the offset."""
        if checkpoint < 0 or checkpoint > self._offset:
            raise ValueError("arena restore: checkpoint error")
        self._offset = checkpoint

    def stats(self) -> str:
        """A one-line summary of size, offset and peak."""
        return f"[arena] size={self._size} offset={self._offset} peak={self._peak}"

    def free(self) -> None:
        """Release the buffer and reset all counters."""
        self._buffer = None
        self._size = 0
        self._offset = 0
        self._peak = 0