"""Ethernet addresses, headers and frames."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, List

from .wire import Parser, Serializer

ETHERNET_ADDRESS_LENGTH = 6

ETHERNET_BROADCAST = b"\xff" * ETHERNET_ADDRESS_LENGTH


def format_ethernet_address(address: bytes) -> str:
    """Return the colon-separated hex form of an Ethernet address."""
    return ":".join(f"{octet:02x}" for octet in address)


def _write_address(serializer: Serializer, address: bytes) -> None:
    if len(address) != ETHERNET_ADDRESS_LENGTH:
        raise ValueError(f"Ethernet address must be {ETHERNET_ADDRESS_LENGTH} bytes, got {len(address)}")
    serializer.integer(int.from_bytes(address, "big"), ETHERNET_ADDRESS_LENGTH)


@dataclass
class EthernetHeader:
    """An Ethernet frame header: destination, source and frame type."""

    LENGTH: ClassVar[int] = 14
    TYPE_IPv4: ClassVar[int] = 0x800
    TYPE_ARP: ClassVar[int] = 0x806

    dst: bytes = bytes(ETHERNET_ADDRESS_LENGTH)
    src: bytes = bytes(ETHERNET_ADDRESS_LENGTH)
    type: int = 0

    def to_string(self) -> str:
        """Human-readable summary of the header."""
        if self.type == self.TYPE_IPv4:
            kind = "IPv4"
        elif self.type == self.TYPE_ARP:
            kind = "ARP"
        else:
            kind = f"[unknown type {self.type:x}!]"
        return f"dst={format_ethernet_address(self.dst)} src={format_ethernet_address(self.src)} type={kind}"

    def __str__(self) -> str:
        return self.to_string()

    @classmethod
    def parse(cls, parser: Parser) -> "EthernetHeader":
        dst = parser.string(ETHERNET_ADDRESS_LENGTH)
        src = parser.string(ETHERNET_ADDRESS_LENGTH)
        frame_type = parser.integer(2)
        return cls(dst=dst, src=src, type=frame_type)

    def serialize(self, serializer: Serializer) -> None:
        _write_address(serializer, self.dst)
        _write_address(serializer, self.src)
        serializer.integer(self.type, 2)


@dataclass
class EthernetFrame:
    """An Ethernet header followed by its payload buffers."""

    header: EthernetHeader = field(default_factory=EthernetHeader)
    payload: List[bytes] = field(default_factory=list)

    @classmethod
    def parse(cls, parser: Parser) -> "EthernetFrame":
        header = EthernetHeader.parse(parser)
        return cls(header=header, payload=parser.all_remaining())

    def serialize(self, serializer: Serializer) -> None:
        self.header.serialize(serializer)
        serializer.buffer(self.payload)