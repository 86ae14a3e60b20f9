"""
Extension forms: fixext1/2/4/8/16 when the payload width matches exactly,
else ext8/16/32 with an explicit length. Payloads are produced and consumed
by the Extension looked up in the caller's ExtensionTable.
"""

from __future__ import annotations

from typing import Any

from ..errors import DecodeError, EncodeError
from ..ext.registry import ExtensionTable
from ..ext.types import Extension
from . import _tags as T
from .cursor import Cursor
from .scalars import read_length

# tag -> width of the explicit length field
_LENGTH_WIDTH = {T.EXT8: 1, T.EXT16: 2, T.EXT32: 4}


def pack_ext_frame(code: int, payload: bytes, buf: bytearray) -> None:
    n = len(payload)
    fixed = T.FIXEXT_BY_WIDTH.get(n)
    if fixed is not None:
        buf.append(fixed)
    elif n <= 0xFF:
        buf.extend((T.EXT8, n))
    elif n <= 0xFFFF:
        buf.append(T.EXT16)
        buf.extend(n.to_bytes(2, "big"))
    elif n <= T.UINT32_MAX:
        buf.append(T.EXT32)
        buf.extend(n.to_bytes(4, "big"))
    else:
        raise EncodeError(f"extension {code} payload of {n} bytes is too large")
    buf.append(code & 0xFF)
    buf.extend(payload)


def pack_ext(obj: Any, ext: Extension, buf: bytearray) -> None:
    try:
        payload = ext.serialize(obj, ext.id)
    except Exception as exc:
        raise EncodeError(f"extension {ext.id} serialize failed: {exc!r}") from exc
    if not isinstance(payload, (bytes, bytearray, memoryview)):
        raise EncodeError(
            f"extension {ext.id} serialize returned {type(payload).__name__}, not bytes"
        )
    pack_ext_frame(ext.id, bytes(payload), buf)


def unpack_ext_frame(cur: Cursor, tag: int) -> tuple[int, bytes]:
    """Read (code, payload) following an ext/fixext tag."""
    width = T.WIDTH_BY_FIXEXT.get(tag)
    if width is None:
        width = read_length(cur, _LENGTH_WIDTH[tag])
    code = cur.read_i8()
    return code, cur.take(width)


def unpack_ext(cur: Cursor, tag: int, table: ExtensionTable) -> Any:
    start = cur.pos - 1  # tag byte
    code, payload = unpack_ext_frame(cur, tag)
    ext = table.get(code)
    if ext is None:
        raise DecodeError(f"no extension registered for id {code}", start)
    try:
        return ext.deserialize(payload, code)
    except Exception as exc:
        raise DecodeError(
            f"extension {code} deserialize failed: {exc!r}", start
        ) from exc
