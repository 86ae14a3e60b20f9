"""Array and map forms, thresholds and decode-side map building."""

from __future__ import annotations

import pytest

from picopack import DecodeError, EncodeError, decode, encode


def test_empty_array_and_map_stay_distinct() -> None:
    assert encode([]) == b"\x90"
    assert encode({}) == b"\x80"
    assert decode(b"\x90") == ([], 1)
    assert decode(b"\x80") == ({}, 1)


def test_fixarray_elements_in_order() -> None:
    assert encode([1, "a", None]) == b"\x93\x01\xa1a\xc0"
    assert decode(b"\x93\x01\xa1a\xc0") == ([1, "a", None], 5)


def test_tuple_encodes_as_array() -> None:
    assert encode((1, 2)) == encode([1, 2])
    assert decode(encode((1, 2)))[0] == [1, 2]


@pytest.mark.parametrize(
    "n, header",
    [
        (15, b"\x9f"),
        (16, b"\xdc\x00\x10"),
        (65535, b"\xdc\xff\xff"),
        (65536, b"\xdd\x00\x01\x00\x00"),
    ],
)
def test_array_thresholds(n: int, header: bytes) -> None:
    items = [0] * n
    wire = encode(items)
    assert wire == header + b"\x00" * n
    assert decode(wire) == (items, len(wire))


@pytest.mark.parametrize(
    "n, header",
    [
        (15, b"\x8f"),
        (16, b"\xde\x00\x10"),
        (65536, b"\xdf\x00\x01\x00\x00"),
    ],
)
def test_map_thresholds(n: int, header: bytes) -> None:
    mapping = {i: None for i in range(n)}
    wire = encode(mapping)
    assert wire[: len(header)] == header
    assert decode(wire)[0] == mapping


def test_map_pairs_key_then_value() -> None:
    assert encode({"a": 1}) == b"\x81\xa1a\x01"
    assert decode(b"\x81\xa1a\x01") == ({"a": 1}, 4)


def test_nested_containers() -> None:
    value = {"list": [1, [2, [3]]], "map": {"k": {"n": None}}, "e": []}
    assert decode(encode(value))[0] == value


def test_duplicate_key_last_wins() -> None:
    assert decode(b"\x82\x01\x02\x01\x03") == ({1: 3}, 5)


def test_array_key_becomes_tuple() -> None:
    assert decode(b"\x81\x92\x01\x02\xc3")[0] == {(1, 2): True}


def test_map_key_rejected() -> None:
    with pytest.raises(DecodeError):
        decode(b"\x81\x80\x01")


def test_declared_count_larger_than_buffer() -> None:
    with pytest.raises(DecodeError):
        decode(b"\xdd\xff\xff\xff\xff")
    with pytest.raises(DecodeError):
        decode(b"\xdf\xff\xff\xff\xff\x01")
    with pytest.raises(DecodeError):
        decode(b"\x93\x01\x02")


def test_unsupported_container_types() -> None:
    with pytest.raises(EncodeError):
        encode({1, 2})
    with pytest.raises(EncodeError):
        encode([1, object()])


def test_self_reference_fails_cleanly() -> None:
    loop: list = []
    loop.append(loop)
    with pytest.raises(EncodeError):
        encode(loop)


def test_max_depth() -> None:
    nested: list = []
    for _ in range(10):
        nested = [nested]
    assert decode(encode(nested))[0] == nested
    with pytest.raises(EncodeError):
        encode(nested, max_depth=5)
    with pytest.raises(DecodeError):
        decode(b"\x91" * 10 + b"\x90", max_depth=5)
