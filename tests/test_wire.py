from dataclasses import dataclass
import random

import pytest

from tcpkit.wire import ParseError, Parser, Serializer, parse, serialize


@dataclass
class Pair:
    tag: int
    value: int

    @classmethod
    def parse(cls, parser, expected_tag=None):
        tag = parser.integer(1)
        value = parser.integer(2)
        if expected_tag is not None and tag != expected_tag:
            parser.set_error()
        return cls(tag, value)

    def serialize(self, serializer):
        serializer.integer(self.tag, 1)
        serializer.integer(self.value, 2)


def test_serializer_writes_big_endian():
    s = Serializer()
    s.integer(0x0102, 2)
    s.integer(0xAB, 1)
    assert s.output() == [b"\x01\x02\xab"]


def test_serializer_keeps_low_bytes():
    s = Serializer()
    s.integer(0x1FF, 1)
    assert s.output() == [b"\xff"]


def test_serializer_buffer_flushes_and_skips_empty():
    s = Serializer()
    s.integer(1, 1)
    s.buffer(b"xy")
    s.buffer(b"")
    s.integer(2, 2)
    assert s.output() == [b"\x01", b"xy", b"\x00\x02"]


def test_serializer_buffer_list():
    s = Serializer()
    s.buffer([b"a", b"", b"bc"])
    assert s.output() == [b"a", b"bc"]


def test_serializer_initial_contents():
    s = Serializer(b"ab")
    s.integer(1, 1)
    assert s.output() == [b"ab\x01"]


def test_parser_integer_across_buffers_round_trip():
    s = Serializer()
    s.integer(0xDEADBEEF, 4)
    raw = s.output()[0]
    parser = Parser([raw[:1], raw[1:3], raw[3:]])
    assert parser.integer(4) == 0xDEADBEEF
    assert not parser.has_error
    assert len(parser) == 0


def test_parser_short_input_sets_error():
    parser = Parser([b"\x01\x02"])
    assert parser.integer(4) == 0
    assert parser.has_error
    assert parser.integer(1) == 0
    assert len(parser) == 2


def test_parser_remove_prefix_and_all_remaining():
    parser = Parser([b"abc", b"def"])
    parser.remove_prefix(2)
    assert parser.all_remaining() == [b"c", b"def"]
    assert len(parser) == 0
    assert parser.all_remaining() == []


def test_parser_buffer_does_not_consume():
    parser = Parser([b"abc", b"def"])
    parser.remove_prefix(4)
    assert parser.buffer() == [b"ef"]
    assert parser.buffer() == [b"ef"]
    assert len(parser) == 2


def test_parser_string():
    parser = Parser([b"he", b"llo"])
    assert parser.string(4) == b"hell"
    assert parser.string(1) == b"o"
    assert not parser.has_error


def test_parser_accepts_single_bytes():
    parser = Parser(b"\x00\x05")
    assert parser.integer(2) == 5


def test_set_error():
    parser = Parser([b"x"])
    parser.set_error()
    assert parser.has_error


def test_serialize_and_parse_helpers():
    pair = Pair(7, 0x1234)
    wire = serialize(pair)
    assert wire == [b"\x07\x12\x34"]
    assert parse(Pair, wire) == pair


def test_parse_raises_on_short_input():
    with pytest.raises(ParseError):
        parse(Pair, [b"\x07\x12"])


def test_parse_passes_extra_arguments():
    wire = serialize(Pair(7, 1))
    assert parse(Pair, wire, 7) == Pair(7, 1)
    with pytest.raises(ParseError):
        parse(Pair, wire, 8)


def test_random_integers_round_trip():
    rng = random.Random(1)
    for size in (1, 2, 4, 8):
        values = [rng.getrandbits(8 * size) for _ in range(20)]
        s = Serializer()
        for v in values:
            s.integer(v, size)
        parser = Parser(s.output())
        assert [parser.integer(size) for _ in values] == values
        assert not parser.has_error