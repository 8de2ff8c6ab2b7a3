"""Messages that a connection can send."""

from __future__ import annotations

from abc import ABC, abstractmethod


class SendableMsg(ABC):
    """A block of bytes ready to be sent."""

    @abstractmethod
    def data(self) -> bytes:
        """Return the bytes to send."""

    @abstractmethod
    def size(self) -> int:
        """Return the number of bytes to send."""


class StringSendMsg(SendableMsg):
    """A message holding an immutable copy of the given bytes or text."""

    def __init__(self, buffer: bytes | bytearray | memoryview | str) -> None:
        if isinstance(buffer, str):
            buffer = buffer.encode("utf-8")
        self._msg = bytes(buffer)

    def __repr__(self) -> str:
        return f"StringSendMsg({self._msg!r})"

    def data(self) -> bytes:
        return self._msg

    def size(self) -> int:
        return len(self._msg)


def make_string_msg(
    buffer: bytes | bytearray | memoryview | str, length: int | None = None
) -> SendableMsg:
    """Wrap ``buffer`` (or its first ``length`` bytes) in a sendable message."""
    if isinstance(buffer, str):
        buffer = buffer.encode("utf-8")
    data = bytes(buffer)
    if length is not None:
        if length < 0 or length > len(data):
            raise ValueError(f"length {length} out of range for {len(data)} bytes")
        data = data[:length]
    return StringSendMsg(data)