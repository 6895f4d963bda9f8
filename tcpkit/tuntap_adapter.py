"""A TCP adapter that exchanges IPv4 datagrams over a TUN device."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from .file_descriptor import FileDescriptor
from .ipv4 import InternetDatagram, IPv4Header
from .tcp_over_ip import TCPOverIPv4Adapter
from .tcp_segment import TCPMessage
from .wire import ParseError, parse, serialize


@runtime_checkable
class TCPDatagramAdapter(Protocol):
    """Anything that reads and writes TCP messages as datagrams."""

    def read(self) -> Optional[TCPMessage]: ...

    def write(self, message: TCPMessage) -> None: ...


class TCPOverIPv4OverTunFdAdapter(TCPOverIPv4Adapter):
    """Reads and writes TCP-in-IPv4 datagrams on a TUN device (or any descriptor)."""

    def __init__(self, tun: FileDescriptor) -> None:
        super().__init__()
        self._tun = tun

    @property
    def tun(self) -> FileDescriptor:
        return self._tun

    def read(self) -> Optional[TCPMessage]:
        """Read one datagram; return its TCP message if it is valid and for this connection."""
        buffers = self._tun.read_buffers([IPv4Header.LENGTH, 0])
        try:
            ip_dgram = parse(InternetDatagram, buffers)
        except ParseError:
            return None
        return self.unwrap_tcp_in_ip(ip_dgram)

    def write(self, message: TCPMessage) -> None:
        """Wrap ``message`` in an IPv4 datagram and write it to the device."""
        self._tun.write(serialize(self.wrap_tcp_in_ip(message)))

    def fd(self) -> FileDescriptor:
        """The underlying descriptor."""
        return self._tun