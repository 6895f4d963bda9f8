import pytest

from tcpkit.checksum import InternetChecksum

IPV4_HEADER = bytes.fromhex("450000730000400040110000c0a80001c0a800c7")
RFC1071_DATA = bytes.fromhex("0001f203f4f5f6f7")


def checksum_of(*chunks, initial=0):
    check = InternetChecksum(initial)
    for chunk in chunks:
        check.add(chunk)
    return check.value()


def test_ipv4_header_example():
    assert checksum_of(IPV4_HEADER) == 0xB861


def test_rfc1071_example():
    assert checksum_of(RFC1071_DATA) == 0x220D


def test_data_with_its_checksum_verifies_to_zero():
    value = checksum_of(IPV4_HEADER)
    filled = IPV4_HEADER[:10] + value.to_bytes(2, "big") + IPV4_HEADER[12:]
    assert checksum_of(filled) == 0


@pytest.mark.parametrize("split", [1, 3, 7, 10, 19])
def test_split_at_any_point_gives_same_result(split):
    assert checksum_of(IPV4_HEADER[:split], IPV4_HEADER[split:]) == checksum_of(IPV4_HEADER)


def test_list_of_chunks_equals_concatenation():
    check = InternetChecksum()
    check.add([b"abc", b"de", b"", b"fgh"])
    assert check.value() == checksum_of(b"abcdefgh")


def test_odd_length_is_padded_with_zero():
    assert checksum_of(b"\x12\x34\x56") == checksum_of(b"\x12\x34\x56\x00")


def test_initial_sum_acts_like_prepended_words():
    data = b"payload bytes"
    assert checksum_of(data, initial=0x1234 + 0x5678) == checksum_of(b"\x12\x34\x56\x78" + data)


def test_str_is_rejected():
    with pytest.raises(TypeError):
        InternetChecksum().add("text")