import pytest

from tcpkit.ethernet import (
    ETHERNET_BROADCAST,
    EthernetFrame,
    EthernetHeader,
    format_ethernet_address,
)
from tcpkit.wire import ParseError, parse, serialize

SRC = bytes([0x02, 0, 0, 0, 0, 0x01])


def test_format_broadcast():
    assert format_ethernet_address(ETHERNET_BROADCAST) == "ff:ff:ff:ff:ff:ff"


def test_format_pads_with_zeros():
    assert format_ethernet_address(bytes([0, 0x0A, 1, 2, 3, 4])) == "00:0a:01:02:03:04"


def test_header_to_string_ipv4():
    header = EthernetHeader(dst=ETHERNET_BROADCAST, src=SRC, type=EthernetHeader.TYPE_IPv4)
    assert header.to_string() == "dst=ff:ff:ff:ff:ff:ff src=02:00:00:00:00:01 type=IPv4"


def test_header_to_string_arp_and_unknown():
    arp = EthernetHeader(dst=SRC, src=SRC, type=EthernetHeader.TYPE_ARP)
    assert arp.to_string().endswith("type=ARP")
    unknown = EthernetHeader(dst=SRC, src=SRC, type=0x1234)
    assert unknown.to_string().endswith("type=[unknown type 1234!]")


def test_header_serialized_layout():
    header = EthernetHeader(dst=ETHERNET_BROADCAST, src=SRC, type=EthernetHeader.TYPE_ARP)
    data = b"".join(serialize(header))
    assert len(data) == EthernetHeader.LENGTH
    assert data[:6] == ETHERNET_BROADCAST
    assert data[6:12] == SRC
    assert int.from_bytes(data[12:], "big") == EthernetHeader.TYPE_ARP


def test_header_round_trip():
    header = EthernetHeader(dst=ETHERNET_BROADCAST, src=SRC, type=EthernetHeader.TYPE_IPv4)
    assert parse(EthernetHeader, serialize(header)) == header


def test_header_short_input_raises():
    with pytest.raises(ParseError):
        parse(EthernetHeader, [b"\x00" * 13])


def test_header_bad_address_length_raises():
    with pytest.raises(ValueError):
        serialize(EthernetHeader(dst=b"\x01\x02", src=SRC, type=1))


def test_frame_round_trip_keeps_payload():
    frame = EthernetFrame(
        header=EthernetHeader(dst=SRC, src=ETHERNET_BROADCAST, type=EthernetHeader.TYPE_IPv4),
        payload=[b"hello", b" world"],
    )
    parsed = parse(EthernetFrame, serialize(frame))
    assert parsed.header == frame.header
    assert b"".join(parsed.payload) == b"hello world"


def test_frame_payload_split_across_buffers():
    frame = EthernetFrame(
        header=EthernetHeader(dst=SRC, src=SRC, type=EthernetHeader.TYPE_ARP),
        payload=[b"abc"],
    )
    data = b"".join(serialize(frame))
    parsed = parse(EthernetFrame, [data[:5], data[5:16], data[16:]])
    assert parsed.header == frame.header
    assert b"".join(parsed.payload) == b"abc"


def test_frame_without_payload():
    frame = EthernetFrame(header=EthernetHeader(dst=SRC, src=SRC, type=EthernetHeader.TYPE_ARP))
    parsed = parse(EthernetFrame, serialize(frame))
    assert parsed.payload == []