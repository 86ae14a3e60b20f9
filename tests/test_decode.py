"""Decoder entry points: positions, tag table, bounds checks, decode_many."""

from __future__ import annotations

import logging
from collections.abc import Mapping

import pytest

from picopack import (
    DecodeError,
    EncodeError,
    ExtensionRegistry,
    ExtType,
    decode,
    decode_many,
    encode,
    encode_many,
    passthrough,
)
from picopack.codec import Cursor

SAMPLES = [
    None,
    2**40,
    -(2**40),
    300,
    1.5,
    0.1,
    "x" * 40,
    "y" * 300,
    b"z" * 300,
    [1, 2, 3],
    {"a": 1, "b": [True, False]},
]


def test_fixint_tags() -> None:
    for tag in range(0x00, 0x80):
        assert decode(bytes([tag])) == (tag, 1)
    for tag in range(0xE0, 0x100):
        assert decode(bytes([tag])) == (tag - 0x100, 1)


def test_unknown_tag() -> None:
    with pytest.raises(DecodeError) as info:
        decode(b"\xc1")
    assert info.value.pos == 0


@pytest.mark.parametrize("value", SAMPLES)
def test_every_truncation_fails(value: object) -> None:
    wire = encode(value)
    for cut in range(len(wire)):
        with pytest.raises(DecodeError):
            decode(wire[:cut])


def test_truncated_extension_fails() -> None:
    registry = ExtensionRegistry([passthrough(1)])
    wire = encode(ExtType(1, b"q" * 20), registry=registry)
    for cut in range(len(wire)):
        with pytest.raises(DecodeError):
            decode(wire[:cut], registry=registry)


def test_truncated_length_field_and_payload() -> None:
    for wire in (
        b"\xd9",
        b"\xda\x00",
        b"\xdb\x00\x00\x00\x10abc",
        b"\xc6\xff\xff\xff\xff",
        b"\xcf\x00\x00",
        b"\xcb\x3f",
    ):
        with pytest.raises(DecodeError):
            decode(wire)


def test_decode_at_position() -> None:
    data = encode_many(1, "a")
    assert data == b"\x01\xa1a"
    assert decode(data) == (1, 1)
    assert decode(data, 1) == ("a", 3)


@pytest.mark.parametrize("pos", [-1, 4, 100])
def test_position_out_of_range(pos: int) -> None:
    with pytest.raises(DecodeError):
        decode(b"\x01\x02\x03", pos)


def test_position_at_end_has_no_value() -> None:
    with pytest.raises(DecodeError):
        decode(b"\x01", 1)


def test_accepts_bytearray_and_memoryview() -> None:
    wire = encode({"k": [1, 2]})
    assert decode(bytearray(wire))[0] == {"k": [1, 2]}
    assert decode(memoryview(wire))[0] == {"k": [1, 2]}


def test_rejects_non_bytes_input() -> None:
    with pytest.raises(DecodeError):
        decode("not bytes")


def test_decode_many_in_order() -> None:
    assert decode_many(encode_many(1, 2)) == [1, 2]
    assert decode_many(encode(1) + encode(2)) == [1, 2]
    assert decode_many(b"") == []


def test_decode_many_from_position() -> None:
    data = encode_many(1, "a", [None])
    assert decode_many(data, 1) == ["a", [None]]
    assert decode_many(data, len(data)) == []


def test_decode_many_all_or_nothing() -> None:
    with pytest.raises(DecodeError):
        decode_many(b"\x01\x02\xc1")
    with pytest.raises(DecodeError):
        decode_many(b"\x01\xa5abc")


def test_encode_many_all_or_nothing() -> None:
    assert encode_many() == b""
    assert encode_many(None, True, 1) == b"\xc0\xc3\x01"
    with pytest.raises(EncodeError):
        encode_many(1, object(), 2)


def test_cursor_bounds() -> None:
    cur = Cursor(b"\x01\x02\x03")
    assert cur.byte() == 1
    assert cur.remaining == 2
    with pytest.raises(DecodeError):
        cur.take(3)
    # a failed read does not move the cursor
    assert cur.pos == 1
    assert cur.read_u16() == 0x0203
    with pytest.raises(DecodeError):
        cur.byte()


class _BrokenMapping(Mapping):
    def __getitem__(self, key: object) -> object:
        raise KeyError(key)

    def __iter__(self):
        raise RuntimeError("cannot iterate")

    def __len__(self) -> int:
        return 1


def test_wrapped_failures_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="picopack.codec.dispatch")
    with pytest.raises(DecodeError) as info:
        decode("not bytes")
    assert isinstance(info.value.__cause__, TypeError)
    assert "decode failed at byte 0" in caplog.text
    with pytest.raises(EncodeError) as einfo:
        encode(_BrokenMapping())
    assert isinstance(einfo.value.__cause__, RuntimeError)
    assert "encode failed: RuntimeError" in caplog.text
