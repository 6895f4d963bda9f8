"""Reference-counted handles on kernel file descriptors."""

from __future__ import annotations

import errno
import os
import sys
from typing import Any, Callable, Iterable, List, Optional, Sequence, TypeVar, Union

from .errors import UnixError

BytesLike = Union[bytes, bytearray, memoryview]

T = TypeVar("T")

_WOULD_BLOCK = (errno.EAGAIN, errno.EWOULDBLOCK, errno.EINPROGRESS)


class _FDWrapper:
    """The kernel descriptor itself, shared by every handle that refers to it."""

    __slots__ = ("fd", "eof", "closed", "non_blocking", "read_count", "write_count")

    def __init__(self, fd: int) -> None:
        if fd < 0:
            raise ValueError(f"invalid fd number:{fd}")
        self.fd = fd
        self.eof = False
        self.closed = False
        self.non_blocking = False
        self.read_count = 0
        self.write_count = 0
        self.non_blocking = not self.call("fcntl", os.get_blocking, fd)

    def call(self, attempt: str, func: Callable[..., T], *args: Any) -> Optional[T]:
        """Run a system call; on a non-blocking descriptor, "would block" yields None."""
        try:
            return func(*args)
        except OSError as err:
            if self.non_blocking and err.errno in _WOULD_BLOCK:
                return None
            raise UnixError(attempt, err.errno or 0) from err

    def close(self) -> None:
        self.call("close", os.close, self.fd)
        self.eof = self.closed = True

    def __del__(self) -> None:
        try:
            if not getattr(self, "closed", True):
                self.close()
        except Exception as err:  # never raise out of a finalizer
            print(f"Exception destructing FDWrapper: {err}", file=sys.stderr)


class FileDescriptor:
    """A handle on a file descriptor; duplicates share it, and it closes with the last one."""

    READ_BUFFER_SIZE = 16384

    def __init__(self, fd: int) -> None:
        self._wrapper = _FDWrapper(fd)

    def _adopt(self, other: "FileDescriptor") -> None:
        """Take over the descriptor that ``other`` refers to."""
        self._wrapper = other._wrapper

    def _call(self, attempt: str, func: Callable[..., T], *args: Any) -> Optional[T]:
        return self._wrapper.call(attempt, func, *args)

    def _set_eof(self) -> None:
        self._wrapper.eof = True

    def _register_read(self) -> None:
        self._wrapper.read_count += 1

    def _register_write(self) -> None:
        self._wrapper.write_count += 1

    def read(self, size: Optional[int] = None) -> bytes:
        """Read up to ``size`` bytes (a full read buffer if unspecified or zero).

        An empty result means end of file, or nothing available on a
        non-blocking descriptor; ``eof`` tells the two apart.
        """
        if size is None or size == 0:
            size = self.READ_BUFFER_SIZE
        if size < 0:
            raise ValueError(f"read size must not be negative: {size}")
        try:
            data = os.read(self.fileno(), size)
        except OSError as err:
            if self._wrapper.non_blocking and err.errno in _WOULD_BLOCK:
                return b""
            raise UnixError("read", err.errno or 0) from err

        self._register_read()
        if not data:
            self._set_eof()
        if len(data) > size:
            raise RuntimeError("read() read more than requested")
        return data

    def read_buffers(self, sizes: Sequence[int]) -> List[bytes]:
        """Scatter one read across buffers of the given sizes.

        The last buffer always gets room for a full read buffer. Returns the
        filled parts, one per buffer; the ones the data did not reach are empty.
        """
        if not sizes:
            return []
        buffers = [bytearray(size) for size in sizes[:-1]]
        buffers.append(bytearray(self.READ_BUFFER_SIZE))
        total_size = sum(len(buf) for buf in buffers)

        try:
            bytes_read = os.readv(self.fileno(), buffers)
        except OSError as err:
            if self._wrapper.non_blocking and err.errno in _WOULD_BLOCK:
                return []
            raise UnixError("read", err.errno or 0) from err

        self._register_read()
        if bytes_read > total_size:
            raise RuntimeError("read() read more than requested")

        filled = []
        remaining = bytes_read
        for buf in buffers:
            take = min(len(buf), remaining)
            filled.append(bytes(buf[:take]))
            remaining -= take
        return filled

    def write(self, data: Union[BytesLike, Iterable[BytesLike]]) -> int:
        """Write a buffer, or a sequence of buffers in one call; return bytes written."""
        if isinstance(data, str):
            raise TypeError("write() takes bytes, not str")
        if isinstance(data, (bytes, bytearray, memoryview)):
            views = [memoryview(data)]
        else:
            views = [memoryview(chunk) for chunk in data]
        total_size = sum(view.nbytes for view in views)

        written = self._call("writev", os.writev, self.fileno(), views) or 0
        self._register_write()

        if written == 0 and total_size != 0:
            raise RuntimeError("write returned 0 given non-empty input buffer")
        if written > total_size:
            raise RuntimeError("write wrote more than length of input buffer")
        return written

    def close(self) -> None:
        """Close the underlying descriptor."""
        self._wrapper.close()

    def duplicate(self) -> "FileDescriptor":
        """Return another handle on the same descriptor."""
        handle = FileDescriptor.__new__(FileDescriptor)
        handle._adopt(self)
        return handle

    def set_blocking(self, blocking: bool) -> None:
        """Make the descriptor blocking (True) or non-blocking (False)."""
        self._call("fcntl", os.set_blocking, self.fileno(), blocking)
        self._wrapper.non_blocking = not blocking

    def fileno(self) -> int:
        return self._wrapper.fd

    @property
    def eof(self) -> bool:
        return self._wrapper.eof

    @property
    def closed(self) -> bool:
        return self._wrapper.closed

    @property
    def read_count(self) -> int:
        return self._wrapper.read_count

    @property
    def write_count(self) -> int:
        return self._wrapper.write_count

    def __enter__(self) -> "FileDescriptor":
        return self

    def __exit__(self, *args: Any) -> None:
        if not self.closed:
            self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"{type(self).__name__}(fd={self.fileno()}, {state})"