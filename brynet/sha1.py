"""Incremental SHA-1 message digest with textual reports."""

from __future__ import annotations

import os
from enum import Enum

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF
_BLOCK_SIZE = 64
_FILE_CHUNK_SIZE = 32 * 20 * 820
_INITIAL_STATE = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476, 0xC3D2E1F0)


def _rol(value: int, bits: int) -> int:
    return ((value << bits) | (value >> (32 - bits))) & _MASK32


class ReportType(Enum):
    """Formats for :meth:`SHA1.report_hash`."""

    HEX = 0
    DIGIT = 1
    HEX_SHORT = 2


class SHA1:
    """SHA-1 hasher fed with :meth:`update` and closed with :meth:`final`.

    After :meth:`final` the working state is wiped; call :meth:`reset`
    before hashing a new message.
    """

    def __init__(self) -> None:
        self._state: list[int] = list(_INITIAL_STATE)
        self._bit_count = 0
        self._buffer = bytearray()
        self._digest: bytes | None = None

    def reset(self) -> None:
        """Restore the initial state so a new message can be hashed."""
        self._state = list(_INITIAL_STATE)
        self._bit_count = 0
        self._buffer = bytearray()

    def update(self, data: bytes | bytearray | memoryview | str) -> None:
        """Feed more message bytes; text is hashed as UTF-8."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        view = memoryview(data).cast("B")
        self._bit_count = (self._bit_count + len(view) * 8) & _MASK64
        self._buffer += view
        full = len(self._buffer) - len(self._buffer) % _BLOCK_SIZE
        for offset in range(0, full, _BLOCK_SIZE):
            self._transform(self._buffer[offset:offset + _BLOCK_SIZE])
        del self._buffer[:full]

    def hash_file(self, path: str | os.PathLike[str]) -> None:
        """Feed the whole content of the file at ``path``; OSError if it cannot be read."""
        with open(path, "rb") as stream:
            while chunk := stream.read(_FILE_CHUNK_SIZE):
                self.update(chunk)

    def final(self) -> bytes:
        """Pad the message, compute the digest, wipe the state and return the digest."""
        length = self._bit_count.to_bytes(8, "big")
        self.update(b"\x80")
        padding = (56 - len(self._buffer)) % _BLOCK_SIZE
        self.update(bytes(padding))
        self.update(length)
        self._digest = b"".join(word.to_bytes(4, "big") for word in self._state)

        self._state = [0] * 5
        self._bit_count = 0
        self._buffer = bytearray()
        return self._digest

    def digest(self) -> bytes:
        """Return the 20-byte digest computed by the last :meth:`final`."""
        if self._digest is None:
            raise RuntimeError("final() has not been called")
        return self._digest

    def report_hash(self, report_type: ReportType | int = ReportType.HEX) -> str:
        """Format the digest as spaced hex, compact hex or spaced decimal bytes."""
        kind = ReportType(report_type)
        digest = self.digest()
        if kind is ReportType.HEX:
            return " ".join(f"{byte:02X}" for byte in digest)
        if kind is ReportType.HEX_SHORT:
            return "".join(f"{byte:02X}" for byte in digest)
        return " ".join(str(byte) for byte in digest)

    def _transform(self, block: bytes | bytearray) -> None:
        words = [int.from_bytes(block[i:i + 4], "big") for i in range(0, 64, 4)]
        for i in range(16, 80):
            words.append(_rol(words[i - 3] ^ words[i - 8] ^ words[i - 14] ^ words[i - 16], 1))

        a, b, c, d, e = self._state
        for i, word in enumerate(words):
            if i < 20:
                f = (b & (c ^ d)) ^ d
                k = 0x5A827999
            elif i < 40:
                f = b ^ c ^ d
                k = 0x6ED9EBA1
            elif i < 60:
                f = ((b | c) & d) | (b & c)
                k = 0x8F1BBCDC
            else:
                f = b ^ c ^ d
                k = 0xCA62C1D6
            temp = (_rol(a, 5) + f + e + k + word) & _MASK32
            a, b, c, d, e = temp, a, _rol(b, 30), c, d

        self._state = [
            (value + delta) & _MASK32
            for value, delta in zip(self._state, (a, b, c, d, e))
        ]