"""
Scalar forms: nil, bool, int, float, str, bin. Packers append to a bytearray
and always pick the narrowest form; unpackers read the payload that follows
an already-consumed tag byte.
"""

from __future__ import annotations

import struct

from ..errors import EncodeError
from . import _tags as T
from .cursor import Cursor

_F32 = struct.Struct(">f")


def pack_nil(buf: bytearray) -> None:
    buf.append(T.NIL)


def pack_bool(obj: bool, buf: bytearray) -> None:
    buf.append(T.TRUE if obj else T.FALSE)


def pack_int(obj: int, buf: bytearray) -> None:
    if obj >= 0:
        if obj <= T.POSITIVE_FIXINT_MAX:
            buf.append(obj)
        elif obj <= 0xFF:
            buf.extend((T.UINT8, obj))
        elif obj <= 0xFFFF:
            buf.append(T.UINT16)
            buf.extend(obj.to_bytes(2, "big"))
        elif obj <= T.UINT32_MAX:
            buf.append(T.UINT32)
            buf.extend(obj.to_bytes(4, "big"))
        elif obj <= T.UINT64_MAX:
            buf.append(T.UINT64)
            buf.extend(obj.to_bytes(8, "big"))
        else:
            raise EncodeError(f"integer {obj} exceeds uint64")
    elif obj >= -32:
        buf.append(obj & 0xFF)
    elif obj >= -0x80:
        buf.extend((T.INT8, obj & 0xFF))
    elif obj >= -0x8000:
        buf.append(T.INT16)
        buf.extend(obj.to_bytes(2, "big", signed=True))
    elif obj >= -0x80000000:
        buf.append(T.INT32)
        buf.extend(obj.to_bytes(4, "big", signed=True))
    elif obj >= T.INT64_MIN:
        buf.append(T.INT64)
        buf.extend(obj.to_bytes(8, "big", signed=True))
    else:
        raise EncodeError(f"integer {obj} below int64")


def pack_float(obj: float, buf: bytearray) -> None:
    """float32 when the value survives the round trip exactly, else float64."""
    try:
        single = _F32.pack(obj)
    except OverflowError:
        single = None
    if single is not None and _F32.unpack(single)[0] == obj:
        buf.append(T.FLOAT32)
        buf.extend(single)
    else:
        buf.append(T.FLOAT64)
        buf.extend(struct.pack(">d", obj))


def _pack_len(
    n: int,
    buf: bytearray,
    tag8: int,
    tag16: int,
    tag32: int,
    what: str,
) -> None:
    if n <= 0xFF:
        buf.extend((tag8, n))
    elif n <= 0xFFFF:
        buf.append(tag16)
        buf.extend(n.to_bytes(2, "big"))
    elif n <= T.UINT32_MAX:
        buf.append(tag32)
        buf.extend(n.to_bytes(4, "big"))
    else:
        raise EncodeError(f"{what} of {n} bytes exceeds 32-bit length")


def _opaque_utf8(obj: str) -> bytes:
    """Bytes behind a str that is not valid UTF-8 (lone surrogates)."""
    try:
        # os.fsdecode-style strings map back to their original bytes
        return obj.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        return obj.encode("utf-8", "surrogatepass")


def pack_str(obj: str, buf: bytearray) -> None:
    """Valid UTF-8 takes a str form; anything else is written as bin."""
    try:
        raw = obj.encode("utf-8")
    except UnicodeEncodeError:
        raw = _opaque_utf8(obj)
        _pack_len(len(raw), buf, T.BIN8, T.BIN16, T.BIN32, "bin")
        buf.extend(raw)
        return
    n = len(raw)
    if n < 32:
        buf.append(T.FIXSTR | n)
    else:
        _pack_len(n, buf, T.STR8, T.STR16, T.STR32, "str")
    buf.extend(raw)


def pack_bin(obj, buf: bytearray) -> None:
    """bytes / bytearray / memoryview; opaque bytes never take a str form."""
    raw = memoryview(obj).cast("B") if isinstance(obj, memoryview) else obj
    _pack_len(len(raw), buf, T.BIN8, T.BIN16, T.BIN32, "bin")
    buf.extend(raw)


def unpack_str(cur: Cursor, n: int):
    """Text, or the raw payload bytes when the producer sent invalid UTF-8."""
    raw = cur.take(n)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw


def unpack_bin(cur: Cursor, n: int) -> bytes:
    return cur.take(n)


def read_length(cur: Cursor, width: int) -> int:
    """Read an unsigned length field of 1, 2 or 4 bytes."""
    if width == 1:
        return cur.read_u8()
    if width == 2:
        return cur.read_u16()
    return cur.read_u32()
