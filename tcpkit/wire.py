"""Big-endian parsing and serialization over lists of byte buffers."""

from __future__ import annotations

from collections import deque
from typing import Any, Iterable, List, Type, TypeVar, Union

BytesLike = Union[bytes, bytearray, memoryview]

T = TypeVar("T")


class ParseError(ValueError):
    """Raised when a buffer does not hold a valid object."""


class Parser:
    """Reads big-endian integers and byte strings from a list of buffers.

    Running short of data, or a call to ``set_error``, marks the parser as
    failed; reads after that return zero values and consume nothing.
    """

    def __init__(self, buffers: Union[BytesLike, Iterable[BytesLike]]) -> None:
        if isinstance(buffers, (bytes, bytearray, memoryview)):
            buffers = [buffers]
        self._chunks = deque(bytes(chunk) for chunk in buffers if len(chunk))
        self._skip = 0
        self._size = sum(len(chunk) for chunk in self._chunks)
        self._error = False

    def __len__(self) -> int:
        return self._size

    @property
    def has_error(self) -> bool:
        return self._error

    def set_error(self) -> None:
        self._error = True

    def remove_prefix(self, n: int) -> None:
        """Discard up to ``n`` bytes from the front of the input."""
        while n > 0 and self._chunks:
            front = self._chunks[0]
            take = min(n, len(front) - self._skip)
            self._skip += take
            self._size -= take
            n -= take
            if self._skip == len(front):
                self._chunks.popleft()
                self._skip = 0

    def _has_room_for(self, size: int) -> bool:
        if size > self._size:
            self._error = True
        return not self._error

    def _take(self, size: int) -> bytes:
        pieces = []
        needed = size
        while needed:
            front = self._chunks[0]
            piece = front[self._skip:self._skip + needed]
            pieces.append(piece)
            needed -= len(piece)
            self.remove_prefix(len(piece))
        return b"".join(pieces)

    def integer(self, size: int) -> int:
        """Read an unsigned big-endian integer of ``size`` bytes."""
        if not self._has_room_for(size):
            return 0
        return int.from_bytes(self._take(size), "big")

    def string(self, size: int) -> bytes:
        """Read exactly ``size`` bytes."""
        if not self._has_room_for(size):
            return bytes(size)
        return self._take(size)

    def all_remaining(self) -> List[bytes]:
        """Consume and return everything left, as a list of buffers."""
        remaining = self.buffer()
        self._chunks.clear()
        self._skip = 0
        self._size = 0
        return remaining

    def buffer(self) -> List[bytes]:
        """Return what is left, without consuming it."""
        if not self._chunks:
            return []
        chunks = list(self._chunks)
        chunks[0] = chunks[0][self._skip:]
        return chunks


class Serializer:
    """Writes big-endian integers and byte buffers into a list of buffers."""

    def __init__(self, initial: BytesLike = b"") -> None:
        self._output: List[bytes] = []
        self._pending = bytearray(initial)

    def integer(self, value: int, size: int) -> None:
        """Append ``value`` as ``size`` big-endian bytes, keeping the low bytes."""
        mask = (1 << (8 * size)) - 1
        self._pending += (value & mask).to_bytes(size, "big")

    def buffer(self, data: Union[BytesLike, Iterable[BytesLike]]) -> None:
        """Append a buffer, or each of an iterable of buffers, as its own chunk."""
        if isinstance(data, str):
            raise TypeError("serializer buffers must be bytes, not str")
        if isinstance(data, (bytes, bytearray, memoryview)):
            self.flush()
            if len(data):
                self._output.append(bytes(data))
            return
        for chunk in data:
            self.buffer(chunk)

    def flush(self) -> None:
        if self._pending:
            self._output.append(bytes(self._pending))
            self._pending.clear()

    def output(self) -> List[bytes]:
        self.flush()
        return list(self._output)


def serialize(obj: Any) -> List[bytes]:
    """Serialize any object that has a ``serialize(serializer)`` method."""
    serializer = Serializer()
    obj.serialize(serializer)
    return serializer.output()


def parse(cls: Type[T], buffers: Union[BytesLike, Iterable[BytesLike]], *args: Any) -> T:
    """Build ``cls`` from buffers via ``cls.parse(parser, *args)``; raise ParseError on failure."""
    parser = Parser(buffers)
    obj = cls.parse(parser, *args)
    if parser.has_error:
        raise ParseError(f"could not parse {cls.__name__}")
    return obj