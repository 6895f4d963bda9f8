"""Conversion between TCP messages and IPv4 datagrams."""

from __future__ import annotations

import ipaddress
from typing import Optional

from .address import Address
from .fd_adapter import FdAdapterBase
from .ipv4 import InternetDatagram, IPv4Header
from .tcp_segment import TCPMessage, TCPSegment
from .wire import ParseError, parse, serialize

_TCP_HEADER_LENGTH = 20


def _dotted_quad(numeric: int) -> str:
    return str(ipaddress.IPv4Address(numeric & 0xFFFFFFFF))


def _port(address: Address) -> int:
    return address.ip_port()[1]


class TCPOverIPv4Adapter(FdAdapterBase):
    """Wraps TCP messages in IPv4 datagrams and unwraps the ones for this connection."""

    def unwrap_tcp_in_ip(self, ip_dgram: InternetDatagram) -> Optional[TCPMessage]:
        """Return the TCP message carried by ``ip_dgram``, or None if it is invalid or unrelated.

        While listening, a SYN (without RST) fixes the connection's addresses
        and ports, and listening stops.
        """
        header = ip_dgram.header
        config = self.config

        # binding to 0.0.0.0 is allowed; replies then come from the address contacted
        if not self.listening and header.dst != config.source.ipv4_numeric():
            return None
        if not self.listening and header.src != config.destination.ipv4_numeric():
            return None
        if header.proto != IPv4Header.PROTO_TCP:
            return None

        try:
            segment = parse(TCPSegment, ip_dgram.payload, header.pseudo_checksum())
        except ParseError:
            return None

        if segment.udinfo.dst_port != _port(config.source):
            return None

        if self.listening:
            sender = segment.message.sender
            if not (sender.syn and not sender.rst):
                return None
            config.source = Address(_dotted_quad(header.dst), _port(config.source))
            config.destination = Address(_dotted_quad(header.src), segment.udinfo.src_port)
            self.set_listening(False)

        if segment.udinfo.src_port != _port(config.destination):
            return None

        return segment.message

    def wrap_tcp_in_ip(self, msg: TCPMessage) -> InternetDatagram:
        """Wrap ``msg`` in an IPv4 datagram with this connection's addresses and ports."""
        config = self.config
        segment = TCPSegment(message=msg)
        segment.udinfo.src_port = _port(config.source)
        segment.udinfo.dst_port = _port(config.destination)

        ip_dgram = InternetDatagram()
        ip_dgram.header.src = config.source.ipv4_numeric()
        ip_dgram.header.dst = config.destination.ipv4_numeric()
        ip_dgram.header.length = (
            ip_dgram.header.hlen * 4 + _TCP_HEADER_LENGTH + len(msg.sender.payload)
        )

        segment.compute_checksum(ip_dgram.header.pseudo_checksum())
        ip_dgram.header.compute_checksum()
        ip_dgram.payload = serialize(segment)
        return ip_dgram