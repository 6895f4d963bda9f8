import ipaddress

import pytest

from tcpkit.arp import ARPMessage
from tcpkit.wire import ParseError, parse, serialize

SENDER_MAC = bytes([0x02, 0, 0, 0, 0, 0x01])
TARGET_MAC = bytes([0x02, 0, 0, 0, 0, 0x02])
SENDER_IP = int(ipaddress.IPv4Address("10.0.0.1"))
TARGET_IP = int(ipaddress.IPv4Address("10.0.0.2"))


def _request() -> ARPMessage:
    return ARPMessage(
        opcode=ARPMessage.OPCODE_REQUEST,
        sender_ethernet_address=SENDER_MAC,
        sender_ip_address=SENDER_IP,
        target_ip_address=TARGET_IP,
    )


def test_default_message_is_unsupported():
    assert ARPMessage().supported() is False


def test_request_and_reply_are_supported():
    assert _request().supported() is True
    reply = _request()
    reply.opcode = ARPMessage.OPCODE_REPLY
    assert reply.supported() is True


def test_serialize_unsupported_raises():
    with pytest.raises(ValueError):
        serialize(ARPMessage())


def test_serialized_length():
    assert len(b"".join(serialize(_request()))) == ARPMessage.LENGTH


def test_round_trip():
    message = _request()
    message.target_ethernet_address = TARGET_MAC
    assert parse(ARPMessage, serialize(message)) == message


def test_to_string_request():
    assert _request().to_string() == (
        "opcode=REQUEST, sender=02:00:00:00:00:01/10.0.0.1, target=00:00:00:00:00:00/10.0.0.2"
    )


def test_to_string_reply_and_unknown():
    reply = _request()
    reply.opcode = ARPMessage.OPCODE_REPLY
    assert reply.to_string().startswith("opcode=REPLY, ")
    unknown = _request()
    unknown.opcode = 7
    assert unknown.to_string().startswith("opcode=(unknown type), ")


def test_parse_unsupported_opcode_raises():
    raw = bytearray(b"".join(serialize(_request())))
    raw[7] = 3
    with pytest.raises(ParseError):
        parse(ARPMessage, [bytes(raw)])


def test_parse_wrong_hardware_type_raises():
    raw = bytearray(b"".join(serialize(_request())))
    raw[1] = 6
    with pytest.raises(ParseError):
        parse(ARPMessage, [bytes(raw)])


def test_parse_truncated_raises():
    raw = b"".join(serialize(_request()))
    with pytest.raises(ParseError):
        parse(ARPMessage, [raw[:-1]])


def test_bad_ethernet_address_length_raises():
    message = _request()
    message.sender_ethernet_address = b"\x01"
    with pytest.raises(ValueError):
        serialize(message)