"""IPv4 headers (without options support) and datagrams."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from typing import ClassVar, List

from .checksum import InternetChecksum
from .wire import Parser, Serializer, serialize


@dataclass
class IPv4Header:
    """An IPv4 datagram header. IP options are skipped on parse and never written."""

    LENGTH: ClassVar[int] = 20
    DEFAULT_TTL: ClassVar[int] = 128
    PROTO_TCP: ClassVar[int] = 6

    ver: int = 4
    hlen: int = 5
    tos: int = 0
    length: int = 0
    ident: int = 0
    df: bool = True
    mf: bool = False
    offset: int = 0
    ttl: int = 128
    proto: int = 6
    cksum: int = 0
    src: int = 0
    dst: int = 0

    def payload_length(self) -> int:
        """Total length minus the header length."""
        return (self.length - 4 * self.hlen) & 0xFFFF

    def pseudo_checksum(self) -> int:
        """The pseudo-header's contribution to an encapsulated TCP checksum."""
        total = (self.src >> 16) + (self.src & 0xFFFF)
        total += (self.dst >> 16) + (self.dst & 0xFFFF)
        total += self.proto
        total += self.payload_length()
        return total & 0xFFFFFFFF

    def _checksum_of_header(self) -> int:
        saved = self.cksum
        self.cksum = 0
        try:
            check = InternetChecksum()
            check.add(serialize(self))
        finally:
            self.cksum = saved
        return check.value()

    def compute_checksum(self) -> None:
        """Set the checksum field to the correct value."""
        self.cksum = self._checksum_of_header()

    def to_string(self) -> str:
        """Human-readable summary of the header."""
        src = ipaddress.IPv4Address(self.src & 0xFFFFFFFF)
        dst = ipaddress.IPv4Address(self.dst & 0xFFFFFFFF)
        return (
            f"IPv{self.ver:x} len={self.length} protocol={self.proto} ttl={self.ttl} "
            f"src={src} dst={dst}"
        )

    def __str__(self) -> str:
        return self.to_string()

    @classmethod
    def parse(cls, parser: Parser) -> "IPv4Header":
        first_byte = parser.integer(1)
        header = cls(ver=first_byte >> 4, hlen=first_byte & 0x0F)
        header.tos = parser.integer(1)
        header.length = parser.integer(2)
        header.ident = parser.integer(2)

        fo_val = parser.integer(2)
        header.df = bool(fo_val & 0x4000)
        header.mf = bool(fo_val & 0x2000)
        header.offset = fo_val & 0x1FFF

        header.ttl = parser.integer(1)
        header.proto = parser.integer(1)
        header.cksum = parser.integer(2)
        header.src = parser.integer(4)
        header.dst = parser.integer(4)

        if header.ver != 4 or header.hlen < 5:
            parser.set_error()
        if parser.has_error:
            return header

        parser.remove_prefix(header.hlen * 4 - cls.LENGTH)

        if header._checksum_of_header() != header.cksum:
            parser.set_error()
        return header

    def serialize(self, serializer: Serializer) -> None:
        """Write the header; the checksum is written as it stands."""
        if self.ver != 4:
            raise ValueError("wrong IP version")
        serializer.integer(((self.ver & 0xF) << 4) | (self.hlen & 0xF), 1)
        serializer.integer(self.tos, 1)
        serializer.integer(self.length, 2)
        serializer.integer(self.ident, 2)
        fo_val = (0x4000 if self.df else 0) | (0x2000 if self.mf else 0) | (self.offset & 0x1FFF)
        serializer.integer(fo_val, 2)
        serializer.integer(self.ttl, 1)
        serializer.integer(self.proto, 1)
        serializer.integer(self.cksum, 2)
        serializer.integer(self.src, 4)
        serializer.integer(self.dst, 4)


@dataclass
class IPv4Datagram:
    """An IPv4 header followed by its payload buffers."""

    header: IPv4Header = field(default_factory=IPv4Header)
    payload: List[bytes] = field(default_factory=list)

    @classmethod
    def parse(cls, parser: Parser) -> "IPv4Datagram":
        header = IPv4Header.parse(parser)
        return cls(header=header, payload=parser.all_remaining())

    def serialize(self, serializer: Serializer) -> None:
        self.header.serialize(serializer)
        serializer.buffer(self.payload)


InternetDatagram = IPv4Datagram