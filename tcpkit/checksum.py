"""The Internet checksum (ones' complement sum of 16-bit words)."""

from __future__ import annotations

from typing import Iterable, Union

BytesLike = Union[bytes, bytearray, memoryview]

_MASK32 = 0xFFFFFFFF


class InternetChecksum:
    """Accumulates data and yields its Internet checksum."""

    def __init__(self, initial_sum: int = 0) -> None:
        self._sum = initial_sum & _MASK32
        self._odd = False

    def add(self, data: Union[BytesLike, Iterable[BytesLike]]) -> None:
        """Add a bytes-like object, or an iterable of them, to the sum."""
        if isinstance(data, str):
            raise TypeError("checksum data must be bytes, not str")
        if isinstance(data, (bytes, bytearray, memoryview)):
            self._add_bytes(bytes(data))
            return
        for chunk in data:
            self.add(chunk)

    def _add_bytes(self, data: bytes) -> None:
        if not data:
            return
        if self._odd:
            low, high = data[0::2], data[1::2]
        else:
            high, low = data[0::2], data[1::2]
        self._sum = (self._sum + (sum(high) << 8) + sum(low)) & _MASK32
        if len(data) % 2:
            self._odd = not self._odd

    def value(self) -> int:
        """Return the 16-bit checksum of everything added so far."""
        total = self._sum
        while total > 0xFFFF:
            total = (total >> 16) + (total & 0xFFFF)
        return ~total & 0xFFFF