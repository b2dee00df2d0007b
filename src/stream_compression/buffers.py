"""
Source and destination views used by one stream run.


SOURCE VIEW
-----------
The caller's bytes are borrowed for the duration of a run. The engine wraps
them in a SourceView: a read-only cursor that the transform advances as it
consumes input. The engine itself never re-slices the source between steps.

    [ consumed ......... | remaining ..................... ]
                         ^-- position


SCRATCH BUFFER
--------------
Output flows through one fixed-capacity scratch buffer::

    [ written ......... | writable ........................ ]
                        ^-- cursor

The transform writes at the cursor until the buffer is full. The engine then
drains the written region into its accumulator and the cursor goes back to
zero. The underlying storage is allocated once and reused for the whole run.
"""

from __future__ import annotations


class SourceView:
    """
    Read-only cursor over a borrowed bytes-like object.

    Buffers with a multi-byte item format (e.g. array('I')) are viewed as
    raw unsigned bytes.
    """

    __slots__ = ("_base", "_view", "_position")

    def __init__(self, source: bytes | bytearray | memoryview) -> None:
        self._base = memoryview(source)
        if self._base.format == "B" and self._base.ndim == 1:
            self._view = self._base
        else:
            self._view = self._base.cast("B")
        self._position = 0

    def __len__(self) -> int:
        return self._view.nbytes

    @property
    def consumed(self) -> int:
        """Number of bytes already taken."""
        return self._position

    @property
    def remaining(self) -> int:
        """Number of bytes not taken yet."""
        return self._view.nbytes - self._position

    def take(self, limit: int) -> bytes:
        """
        Take up to `limit` bytes and advance the cursor past them.

        Returns:
            A copy of the bytes taken. Empty once the source is exhausted.
        """
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")
        start = self._position
        end = min(start + limit, self._view.nbytes)
        self._position = end
        return self._view[start:end].tobytes()

    def release(self) -> None:
        """Release the borrowed buffer. Safe to call more than once."""
        self._view.release()
        self._base.release()


class ScratchBuffer:
    """Fixed-capacity, reusable output buffer with a write cursor."""

    __slots__ = ("_buffer", "_capacity", "_cursor", "_released")

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError(f"Scratch buffer capacity must be positive, got {capacity}")
        self._buffer = bytearray(capacity)
        self._capacity = capacity
        self._cursor = 0
        self._released = False

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def cursor(self) -> int:
        """Number of bytes written since the last drain."""
        return self._cursor

    @property
    def writable(self) -> int:
        """Number of bytes that still fit before the buffer is full."""
        return self._capacity - self._cursor

    @property
    def is_full(self) -> bool:
        return self._cursor == self._capacity

    def write(self, data: bytes) -> int:
        """
        Copy as much of `data` as fits at the cursor.

        Returns:
            Number of bytes written. Less than len(data) when the buffer fills up.

        Raises:
            RuntimeError: If the buffer was already released.
        """
        self._check_live()
        count = min(len(data), self.writable)
        if count:
            # Same-length slice assignment: the storage is never resized.
            self._buffer[self._cursor : self._cursor + count] = data[:count]
            self._cursor += count
        return count

    def drain(self) -> bytes:
        """
        Return the written region and reset the cursor to zero.

        Raises:
            RuntimeError: If the buffer was already released.
        """
        self._check_live()
        written = bytes(self._buffer[: self._cursor])
        self._cursor = 0
        return written

    def release(self) -> None:
        """Drop the storage. Safe to call more than once."""
        self._buffer = bytearray()
        self._cursor = 0
        self._released = True

    @property
    def released(self) -> bool:
        return self._released

    def _check_live(self) -> None:
        if self._released:
            raise RuntimeError("Scratch buffer used after release")
