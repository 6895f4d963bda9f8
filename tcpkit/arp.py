"""ARP messages for Ethernet and IPv4."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import ClassVar

from .ethernet import ETHERNET_ADDRESS_LENGTH, EthernetHeader, format_ethernet_address
from .wire import Parser, Serializer

_IPV4_ADDRESS_LENGTH = 4


def _write_address(serializer: Serializer, address: bytes) -> None:
    if len(address) != ETHERNET_ADDRESS_LENGTH:
        raise ValueError(f"Ethernet address must be {ETHERNET_ADDRESS_LENGTH} bytes, got {len(address)}")
    serializer.integer(int.from_bytes(address, "big"), ETHERNET_ADDRESS_LENGTH)


@dataclass
class ARPMessage:
    """An ARP request or reply."""

    LENGTH: ClassVar[int] = 28
    TYPE_ETHERNET: ClassVar[int] = 1
    OPCODE_REQUEST: ClassVar[int] = 1
    OPCODE_REPLY: ClassVar[int] = 2

    hardware_type: int = 1
    protocol_type: int = EthernetHeader.TYPE_IPv4
    hardware_address_size: int = ETHERNET_ADDRESS_LENGTH
    protocol_address_size: int = _IPV4_ADDRESS_LENGTH
    opcode: int = 0

    sender_ethernet_address: bytes = bytes(ETHERNET_ADDRESS_LENGTH)
    sender_ip_address: int = 0

    target_ethernet_address: bytes = bytes(ETHERNET_ADDRESS_LENGTH)
    target_ip_address: int = 0

    def supported(self) -> bool:
        """Is this an Ethernet/IPv4 request or reply?"""
        return (
            self.hardware_type == self.TYPE_ETHERNET
            and self.protocol_type == EthernetHeader.TYPE_IPv4
            and self.hardware_address_size == ETHERNET_ADDRESS_LENGTH
            and self.protocol_address_size == _IPV4_ADDRESS_LENGTH
            and self.opcode in (self.OPCODE_REQUEST, self.OPCODE_REPLY)
        )

    def to_string(self) -> str:
        """Human-readable summary of the message."""
        if self.opcode == self.OPCODE_REQUEST:
            opcode_str = "REQUEST"
        elif self.opcode == self.OPCODE_REPLY:
            opcode_str = "REPLY"
        else:
            opcode_str = "(unknown type)"
        sender_ip = ipaddress.IPv4Address(self.sender_ip_address & 0xFFFFFFFF)
        target_ip = ipaddress.IPv4Address(self.target_ip_address & 0xFFFFFFFF)
        return (
            f"opcode={opcode_str}, "
            f"sender={format_ethernet_address(self.sender_ethernet_address)}/{sender_ip}, "
            f"target={format_ethernet_address(self.target_ethernet_address)}/{target_ip}"
        )

    def __str__(self) -> str:
        return self.to_string()

    @classmethod
    def parse(cls, parser: Parser) -> "ARPMessage":
        message = cls(
            hardware_type=parser.integer(2),
            protocol_type=parser.integer(2),
            hardware_address_size=parser.integer(1),
            protocol_address_size=parser.integer(1),
            opcode=parser.integer(2),
        )
        if not message.supported():
            parser.set_error()
            return message

        message.sender_ethernet_address = parser.string(ETHERNET_ADDRESS_LENGTH)
        message.sender_ip_address = parser.integer(_IPV4_ADDRESS_LENGTH)
        message.target_ethernet_address = parser.string(ETHERNET_ADDRESS_LENGTH)
        message.target_ip_address = parser.integer(_IPV4_ADDRESS_LENGTH)
        return message

    def serialize(self, serializer: Serializer) -> None:
        if not self.supported():
            raise ValueError(
                "ARPMessage: unsupported field combination (must be Ethernet/IP, and request or reply)"
            )
        serializer.integer(self.hardware_type, 2)
        serializer.integer(self.protocol_type, 2)
        serializer.integer(self.hardware_address_size, 1)
        serializer.integer(self.protocol_address_size, 1)
        serializer.integer(self.opcode, 2)
        _write_address(serializer, self.sender_ethernet_address)
        serializer.integer(self.sender_ip_address, _IPV4_ADDRESS_LENGTH)
        _write_address(serializer, self.target_ethernet_address)
        serializer.integer(self.target_ip_address, _IPV4_ADDRESS_LENGTH)