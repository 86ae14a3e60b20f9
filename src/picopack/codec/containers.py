"""
Array and map forms. Elements are handed back to the dispatcher through the
``pack_item`` / ``unpack_item`` callables, so nesting recurses through it.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence

from ..errors import DecodeError, EncodeError
from . import _tags as T
from .cursor import Cursor


def _pack_header(n: int, buf: bytearray, fix: int, tag16: int, tag32: int) -> None:
    if n < 16:
        buf.append(fix | n)
    elif n <= 0xFFFF:
        buf.append(tag16)
        buf.extend(n.to_bytes(2, "big"))
    elif n <= T.UINT32_MAX:
        buf.append(tag32)
        buf.extend(n.to_bytes(4, "big"))
    else:
        raise EncodeError(f"container of {n} entries exceeds 32-bit count")


def pack_array_header(n: int, buf: bytearray) -> None:
    _pack_header(n, buf, T.FIXARRAY, T.ARRAY16, T.ARRAY32)


def pack_map_header(n: int, buf: bytearray) -> None:
    _pack_header(n, buf, T.FIXMAP, T.MAP16, T.MAP32)


def pack_array(
    seq: Sequence[Any], buf: bytearray, pack_item: Callable[[Any], None]
) -> None:
    pack_array_header(len(seq), buf)
    for item in seq:
        pack_item(item)


def pack_map(
    mapping: Mapping[Any, Any], buf: bytearray, pack_item: Callable[[Any], None]
) -> None:
    pack_map_header(len(mapping), buf)
    for key, value in mapping.items():
        pack_item(key)
        pack_item(value)


def unpack_array(cur: Cursor, n: int, unpack_item: Callable[[], Any]) -> list:
    # each element needs at least one byte
    if n > cur.remaining:
        raise DecodeError(
            f"array of {n} elements cannot fit in {cur.remaining} bytes", cur.pos
        )
    return [unpack_item() for _ in range(n)]


def unpack_map(cur: Cursor, n: int, unpack_item: Callable[[], Any]) -> dict:
    # each pair needs at least two bytes
    if n > cur.remaining // 2:
        raise DecodeError(
            f"map of {n} pairs cannot fit in {cur.remaining} bytes", cur.pos
        )
    out: dict = {}
    for _ in range(n):
        key_pos = cur.pos
        key = _hashable(unpack_item(), key_pos)
        # later duplicates overwrite earlier ones
        out[key] = unpack_item()
    return out


def _hashable(key: Any, pos: int) -> Any:
    """Arrays used as map keys become tuples; map keys cannot be keys."""
    if isinstance(key, list):
        return tuple(_hashable(k, pos) for k in key)
    if isinstance(key, dict):
        raise DecodeError("map used as a map key", pos)
    try:
        hash(key)
    except TypeError as exc:
        raise DecodeError(
            f"unhashable map key of type {type(key).__name__}", pos
        ) from exc
    return key
