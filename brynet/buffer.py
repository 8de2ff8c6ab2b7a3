"""Fixed-capacity byte buffer with separate read and write positions."""

from __future__ import annotations


class BufferFullError(Exception):
    """Raised when data does not fit into the free space of a buffer."""


class Buffer:
    """A fixed-size byte buffer that is filled at the write position and drained at the read position.

    When the tail of the buffer is too small for a write but the total free
    space is large enough, the unread bytes are moved to the front first.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("buffer capacity must not be negative")
        self._data = bytearray(capacity)
        self._read = 0
        self._write = 0

    def __repr__(self) -> str:
        return (
            f"Buffer(capacity={self.capacity}, read_pos={self._read}, "
            f"write_pos={self._write})"
        )

    @property
    def capacity(self) -> int:
        """Total size of the buffer in bytes."""
        return len(self._data)

    @property
    def read_pos(self) -> int:
        """Offset of the first unread byte."""
        return self._read

    @property
    def write_pos(self) -> int:
        """Offset at which the next byte is written."""
        return self._write

    @property
    def readable_count(self) -> int:
        """Number of bytes written but not yet consumed."""
        return self._write - self._read

    @property
    def writable_count(self) -> int:
        """Number of bytes free after the write position."""
        return len(self._data) - self._write

    def write(self, data: bytes | bytearray | memoryview) -> None:
        """Append ``data``, compacting first if needed; raise BufferFullError if it cannot fit."""
        view = memoryview(data).cast("B")
        size = len(view)
        if self.writable_count < size:
            if self.capacity - self.readable_count < size:
                raise BufferFullError(
                    f"cannot write {size} bytes: only "
                    f"{self.capacity - self.readable_count} bytes free"
                )
            self.compact()
        self._data[self._write:self._write + size] = view
        self._write += size

    def peek(self) -> bytes:
        """Return the unread bytes without consuming them."""
        return bytes(self._data[self._read:self._write])

    def consume(self, count: int) -> None:
        """Mark ``count`` unread bytes as read."""
        if count < 0 or count > self.readable_count:
            raise ValueError(
                f"cannot consume {count} bytes; {self.readable_count} readable"
            )
        self._read += count

    def commit(self, count: int) -> None:
        """Advance the write position by ``count`` bytes."""
        if count < 0 or self._write + count > self.capacity:
            raise ValueError(
                f"cannot commit {count} bytes; {self.writable_count} writable"
            )
        self._write += count

    def compact(self) -> None:
        """Move the unread bytes to the start of the buffer."""
        if self._read == 0:
            return
        length = self.readable_count
        if length > 0:
            self._data[:length] = self._data[self._read:self._write]
        self._read = 0
        self._write = length

    def clear(self) -> None:
        """Discard all content by resetting both positions."""
        self._read = 0
        self._write = 0