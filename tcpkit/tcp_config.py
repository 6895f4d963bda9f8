"""Configuration for TCP peers and for the adapters that carry their segments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from .address import Address


def _any_address() -> Address:
    return Address("0", 0)


@dataclass
class TCPConfig:
    """Settings for a TCP sender and receiver."""

    DEFAULT_CAPACITY: ClassVar[int] = 64000
    MAX_PAYLOAD_SIZE: ClassVar[int] = 1000
    TIMEOUT_DFLT: ClassVar[int] = 1000
    MAX_RETX_ATTEMPTS: ClassVar[int] = 8

    rt_timeout: int = 1000
    """Initial retransmission timeout, in milliseconds."""
    recv_capacity: int = 64000
    """Receive capacity, in bytes."""
    send_capacity: int = 64000
    """Send capacity, in bytes."""
    isn: int = 137
    """Initial sequence number (32-bit wrapping)."""


@dataclass
class FdAdapterConfig:
    """Addresses and loss rates for a datagram adapter."""

    source: Address = field(default_factory=_any_address)
    destination: Address = field(default_factory=_any_address)
    loss_rate_dn: int = 0
    """Downlink loss rate, out of 65536."""
    loss_rate_up: int = 0
    """Uplink loss rate, out of 65536."""