"""Socket addresses and name resolution."""

from __future__ import annotations

import socket
from typing import Any, Tuple

from .errors import TaggedError

_INTERNET_FAMILIES = (socket.AF_INET, socket.AF_INET6)


def _gai_error(attempt: str, err: socket.gaierror) -> TaggedError:
    text = err.strerror
    return TaggedError(lambda _code: text, attempt, err.errno)


def _lookup(node: str, service: str, flags: int) -> Tuple[int, Any]:
    try:
        results = socket.getaddrinfo(node, service, socket.AF_INET, 0, 0, flags)
    except socket.gaierror as err:
        raise _gai_error(f"getaddrinfo({node}, {service})", err) from err
    if not results:
        raise RuntimeError("getaddrinfo returned successfully but with no results")
    family, _type, _proto, _canonname, sockaddr = results[0]
    return family, sockaddr


class Address:
    """An IPv4 socket address, or any other socket address held opaquely."""

    __slots__ = ("family", "sockaddr")

    def __init__(self, ip: str, port: int = 0) -> None:
        """Build from a dotted-quad string and a numeric port, without name lookup."""
        if not 0 <= port <= 0xFFFF:
            raise ValueError(f"port out of range: {port}")
        self.family, self.sockaddr = _lookup(
            ip, str(port), socket.AI_NUMERICHOST | socket.AI_NUMERICSERV
        )

    @classmethod
    def resolve(cls, hostname: str, service: str) -> "Address":
        """Resolve a hostname and a service name (e.g. "http") to an IPv4 address."""
        family, sockaddr = _lookup(hostname, service, getattr(socket, "AI_ALL", 0))
        return cls.from_sockaddr(family, sockaddr)

    @classmethod
    def from_sockaddr(cls, family: int, sockaddr: Any) -> "Address":
        """Wrap an address as the socket module presents it."""
        address = cls.__new__(cls)
        address.family = family
        address.sockaddr = sockaddr
        return address

    @classmethod
    def from_ipv4_numeric(cls, ip_address: int) -> "Address":
        """Build an address (port 0) from a 32-bit IPv4 address in host order."""
        if not 0 <= ip_address <= 0xFFFFFFFF:
            raise ValueError(f"IPv4 address out of range: {ip_address}")
        host = socket.inet_ntoa(ip_address.to_bytes(4, "big"))
        return cls.from_sockaddr(socket.AF_INET, (host, 0))

    def ip_port(self) -> Tuple[str, int]:
        """Return the numeric IP address string and port."""
        if self.family not in _INTERNET_FAMILIES:
            raise RuntimeError("ip_port() called on non-Internet address")
        try:
            host, service = socket.getnameinfo(
                self.sockaddr, socket.NI_NUMERICHOST | socket.NI_NUMERICSERV
            )
        except socket.gaierror as err:
            raise _gai_error("getnameinfo", err) from err
        return host, int(service)

    def ipv4_numeric(self) -> int:
        """Return the IPv4 address as an integer in host order."""
        if self.family != socket.AF_INET:
            raise RuntimeError("ipv4_numeric called on non-IPV4 address")
        return int.from_bytes(socket.inet_aton(self.sockaddr[0]), "big")

    def to_string(self) -> str:
        """Human-readable form, e.g. "8.8.8.8:53"."""
        if self.family in _INTERNET_FAMILIES:
            ip, port = self.ip_port()
            return f"{ip}:{port}"
        return "(non-Internet address)"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Address({self.to_string()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Address):
            return NotImplemented
        return (self.family, self.sockaddr) == (other.family, other.sockaddr)

    def __hash__(self) -> int:
        return hash((self.family, self.sockaddr))