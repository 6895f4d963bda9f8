"""Network sockets built on FileDescriptor."""

from __future__ import annotations

import socket
import struct
from typing import Any, Callable, Optional, Tuple, TypeVar, Union

from .address import Address
from .errors import UnixError
from .file_descriptor import FileDescriptor

T = TypeVar("T")

BytesLike = Union[bytes, bytearray, memoryview]

_SO_DOMAIN = getattr(socket, "SO_DOMAIN", 39)
_SO_PROTOCOL = getattr(socket, "SO_PROTOCOL", 38)
_SO_BINDTODEVICE = getattr(socket, "SO_BINDTODEVICE", 25)
_AF_PACKET = getattr(socket, "AF_PACKET", 17)
_SOL_PACKET = getattr(socket, "SOL_PACKET", 263)
_PACKET_ADD_MEMBERSHIP = 1
_PACKET_MR_PROMISC = 1


class Socket(FileDescriptor):
    """Base class for network sockets; normally used through a subclass."""

    def __init__(
        self,
        domain: int,
        type_: int,
        protocol: int = 0,
        fd: Optional[FileDescriptor] = None,
    ) -> None:
        """Open a new socket, or take over ``fd`` after checking that it matches."""
        if fd is None:
            try:
                sock = socket.socket(domain, type_, protocol)
            except OSError as err:
                raise UnixError("socket", err.errno or 0) from err
            super().__init__(sock.detach())
            return

        self._adopt(fd)
        checks = (
            (_SO_DOMAIN, domain, "domain"),
            (socket.SO_TYPE, type_, "type"),
            (_SO_PROTOCOL, protocol, "protocol"),
        )
        for option, expected, what in checks:
            if self._getsockopt(socket.SOL_SOCKET, option) != expected:
                raise RuntimeError(f"socket {what} mismatch")

    def _sock_call(
        self,
        attempt: str,
        action: Callable[[socket.socket], T],
        *,
        tolerate_would_block: bool = True,
    ) -> Optional[T]:
        """Run ``action`` on a socket object that borrows this descriptor."""

        def run() -> T:
            sock = socket.socket(fileno=self.fileno())
            try:
                return action(sock)
            finally:
                sock.detach()

        if tolerate_would_block:
            return self._call(attempt, run)
        try:
            return run()
        except OSError as err:
            raise UnixError(attempt, err.errno or 0) from err

    def _getsockopt(self, level: int, option: int) -> int:
        return self._sock_call("getsockopt", lambda s: s.getsockopt(level, option))

    def _setsockopt(self, level: int, option: int, value: Union[int, BytesLike]) -> None:
        self._sock_call("setsockopt", lambda s: s.setsockopt(level, option, value))

    def _get_address(self, attempt: str, getter: Callable[[socket.socket], Any]) -> Address:
        family, sockaddr = self._sock_call(attempt, lambda s: (int(s.family), getter(s)))
        return Address.from_sockaddr(family, sockaddr)

    def bind(self, address: Address) -> None:
        """Bind to a local address, usually before listening."""
        self._sock_call("bind", lambda s: s.bind(address.sockaddr))

    def bind_to_device(self, device_name: str) -> None:
        """Restrict the socket to one network device."""
        self._setsockopt(socket.SOL_SOCKET, _SO_BINDTODEVICE, device_name.encode())

    def connect(self, address: Address) -> None:
        """Connect to a peer; on a non-blocking socket this may still be in progress."""
        self._sock_call("connect", lambda s: s.connect(address.sockaddr))

    def shutdown(self, how: int) -> None:
        """Shut down reading (SHUT_RD), writing (SHUT_WR) or both (SHUT_RDWR)."""
        self._sock_call("shutdown", lambda s: s.shutdown(how))
        if how == socket.SHUT_RD:
            self._register_read()
        elif how == socket.SHUT_WR:
            self._register_write()
        elif how == socket.SHUT_RDWR:
            self._register_read()
            self._register_write()
        else:
            raise ValueError("shutdown() called with invalid `how`")

    def local_address(self) -> Address:
        return self._get_address("getsockname", lambda s: s.getsockname())

    def peer_address(self) -> Address:
        return self._get_address("getpeername", lambda s: s.getpeername())

    def set_reuseaddr(self) -> None:
        """Allow the local address to be reused sooner (SO_REUSEADDR)."""
        self._setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

    def throw_if_error(self) -> None:
        """Raise the socket's pending error, if it has one."""
        socket_error = self._getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
        if socket_error:
            raise UnixError("socket error", socket_error)


class DatagramSocket(Socket):
    """A socket that sends and receives whole datagrams."""

    def recv(self) -> Tuple[Optional[Address], bytes]:
        """Receive one datagram and its sender's address.

        On a non-blocking socket with nothing waiting, the address is None and
        the payload empty.
        """
        buf = bytearray(self.READ_BUFFER_SIZE)

        def receive(sock: socket.socket) -> Tuple[int, Any, int]:
            received, sockaddr = sock.recvfrom_into(buf, len(buf), socket.MSG_TRUNC)
            return received, sockaddr, int(sock.family)

        result = self._sock_call("recvfrom", receive)
        if result is None:
            self._register_read()
            return None, b""

        received, sockaddr, family = result
        if received > len(buf):
            raise RuntimeError("recvfrom (oversized datagram)")
        self._register_read()
        return Address.from_sockaddr(family, sockaddr), bytes(buf[:received])

    def sendto(self, destination: Address, payload: BytesLike) -> None:
        """Send a datagram to ``destination``."""
        self._sock_call("sendto", lambda s: s.sendto(payload, destination.sockaddr))
        self._register_write()

    def send(self, payload: BytesLike) -> None:
        """Send a datagram to the connected peer."""
        self._sock_call("send", lambda s: s.send(payload))
        self._register_write()


class UDPSocket(DatagramSocket):
    """A UDP socket over IPv4."""

    def __init__(self) -> None:
        super().__init__(socket.AF_INET, socket.SOCK_DGRAM)


class TCPSocket(Socket):
    """A TCP socket over IPv4."""

    def __init__(self) -> None:
        super().__init__(socket.AF_INET, socket.SOCK_STREAM)

    @classmethod
    def _from_fd(cls, fd: FileDescriptor) -> "TCPSocket":
        tcp = cls.__new__(cls)
        Socket.__init__(tcp, socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP, fd=fd)
        return tcp

    def listen(self, backlog: int = 16) -> None:
        """Mark the socket as accepting incoming connections."""
        self._sock_call("listen", lambda s: s.listen(backlog))

    def accept(self) -> "TCPSocket":
        """Wait for and return a new connection."""
        self._register_read()

        def accept_one(sock: socket.socket) -> int:
            connection, _peer = sock.accept()
            return connection.detach()

        fd_num = self._sock_call("accept", accept_one, tolerate_would_block=False)
        return TCPSocket._from_fd(FileDescriptor(fd_num))


class PacketSocket(DatagramSocket):
    """A link-layer packet socket."""

    def __init__(self, type_: int, protocol: int) -> None:
        super().__init__(_AF_PACKET, type_, protocol)

    def set_promiscuous(self) -> None:
        """Receive every packet on the bound interface."""
        address = self.local_address()
        if address.family != _AF_PACKET:
            raise RuntimeError("local address is not a packet-socket address")
        ifname = address.sockaddr[0]
        ifindex = socket.if_nametoindex(ifname) if ifname else 0
        mreq = struct.pack("@iHH8s", ifindex, _PACKET_MR_PROMISC, 0, b"")
        self._setsockopt(_SOL_PACKET, _PACKET_ADD_MEMBERSHIP, mreq)


class LocalStreamSocket(Socket):
    """A Unix-domain stream socket, taken over from an existing descriptor."""

    def __init__(self, fd: FileDescriptor) -> None:
        super().__init__(socket.AF_UNIX, socket.SOCK_STREAM, fd=fd)


class LocalDatagramSocket(DatagramSocket):
    """A Unix-domain datagram socket."""

    def __init__(self) -> None:
        super().__init__(socket.AF_UNIX, socket.SOCK_DGRAM)