"""
Top-level dispatch. Encoding picks a codec from the value's Python type;
decoding picks one from the tag byte. Both take one registry snapshot per
call and convert any internal failure into a single EncodeError/DecodeError.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import partial
from typing import Any, Optional

from ..errors import DecodeError, EncodeError, PicopackError
from ..ext.registry import ExtensionRegistry, ExtensionTable, default_registry
from ..ext.types import ExtType
from . import _tags as T
from .containers import pack_array, pack_map, unpack_array, unpack_map
from .cursor import Cursor
from .extensions import pack_ext, unpack_ext
from .scalars import (
    pack_bin,
    pack_bool,
    pack_float,
    pack_int,
    pack_nil,
    pack_str,
    read_length,
    unpack_bin,
    unpack_str,
)

logger = logging.getLogger(__name__)

_BYTES_LIKE = (bytes, bytearray, memoryview)


class _Packer:
    __slots__ = ("buf", "table", "max_depth")

    def __init__(self, table: ExtensionTable, max_depth: int) -> None:
        self.buf = bytearray()
        self.table = table
        self.max_depth = max_depth

    def pack(self, obj: Any, depth: int = 0) -> None:
        buf = self.buf
        if obj is None:
            pack_nil(buf)
            return
        if isinstance(obj, ExtType):
            ext = self.table.get(obj.code)
            if ext is None:
                raise EncodeError(f"no extension registered for id {obj.code}")
            pack_ext(obj, ext, buf)
            return
        ext = self.table.for_type(type(obj))
        if ext is not None:
            pack_ext(obj, ext, buf)
            return
        # bool is a subclass of int
        if isinstance(obj, bool):
            pack_bool(obj, buf)
        elif isinstance(obj, int):
            pack_int(obj, buf)
        elif isinstance(obj, float):
            pack_float(obj, buf)
        elif isinstance(obj, str):
            pack_str(obj, buf)
        elif isinstance(obj, _BYTES_LIKE):
            pack_bin(obj, buf)
        elif isinstance(obj, (list, tuple)):
            self._enter(depth)
            pack_array(obj, buf, partial(self.pack, depth=depth + 1))
        elif isinstance(obj, Mapping):
            self._enter(depth)
            pack_map(obj, buf, partial(self.pack, depth=depth + 1))
        else:
            raise EncodeError(f"cannot encode value of type {type(obj).__name__}")

    def _enter(self, depth: int) -> None:
        if depth >= self.max_depth:
            raise EncodeError(f"nesting deeper than max_depth={self.max_depth}")


class _Unpacker:
    __slots__ = ("cur", "table", "max_depth")

    def __init__(self, cur: Cursor, table: ExtensionTable, max_depth: int) -> None:
        self.cur = cur
        self.table = table
        self.max_depth = max_depth

    def value(self, depth: int = 0) -> Any:
        cur = self.cur
        tag = cur.byte()
        if tag <= T.POSITIVE_FIXINT_MAX:
            return tag
        if tag >= T.NEGATIVE_FIXINT:
            return tag - 0x100
        if tag <= T.FIXMAP_MAX:
            return self.map(tag - T.FIXMAP, depth)
        if tag <= T.FIXARRAY_MAX:
            return self.array(tag - T.FIXARRAY, depth)
        if tag <= T.FIXSTR_MAX:
            return unpack_str(cur, tag - T.FIXSTR)
        handler = _HANDLERS.get(tag)
        if handler is None:
            raise DecodeError(f"unknown tag byte 0x{tag:02x}", cur.pos - 1)
        return handler(self, tag, depth)

    def _enter(self, depth: int) -> None:
        if depth >= self.max_depth:
            raise DecodeError(
                f"nesting deeper than max_depth={self.max_depth}", self.cur.pos
            )

    def array(self, n: int, depth: int) -> list:
        self._enter(depth)
        return unpack_array(self.cur, n, partial(self.value, depth + 1))

    def map(self, n: int, depth: int) -> dict:
        self._enter(depth)
        return unpack_map(self.cur, n, partial(self.value, depth + 1))

    def ext(self, tag: int, depth: int) -> Any:
        return unpack_ext(self.cur, tag, self.table)


def _const(value: Any):
    return lambda unpacker, tag, depth: value


def _reader(name: str):
    return lambda unpacker, tag, depth: getattr(unpacker.cur, name)()


def _sized(read, width: int):
    def handler(unpacker, tag, depth):
        return read(unpacker.cur, read_length(unpacker.cur, width))

    return handler


def _container(kind: str, width: int):
    def handler(unpacker, tag, depth):
        n = read_length(unpacker.cur, width)
        return getattr(unpacker, kind)(n, depth)

    return handler


def _ext(unpacker, tag, depth):
    return unpacker.ext(tag, depth)


_HANDLERS = {
    T.NIL: _const(None),
    T.FALSE: _const(False),
    T.TRUE: _const(True),
    T.BIN8: _sized(unpack_bin, 1),
    T.BIN16: _sized(unpack_bin, 2),
    T.BIN32: _sized(unpack_bin, 4),
    T.EXT8: _ext,
    T.EXT16: _ext,
    T.EXT32: _ext,
    T.FLOAT32: _reader("read_f32"),
    T.FLOAT64: _reader("read_f64"),
    T.UINT8: _reader("read_u8"),
    T.UINT16: _reader("read_u16"),
    T.UINT32: _reader("read_u32"),
    T.UINT64: _reader("read_u64"),
    T.INT8: _reader("read_i8"),
    T.INT16: _reader("read_i16"),
    T.INT32: _reader("read_i32"),
    T.INT64: _reader("read_i64"),
    T.FIXEXT1: _ext,
    T.FIXEXT2: _ext,
    T.FIXEXT4: _ext,
    T.FIXEXT8: _ext,
    T.FIXEXT16: _ext,
    T.STR8: _sized(unpack_str, 1),
    T.STR16: _sized(unpack_str, 2),
    T.STR32: _sized(unpack_str, 4),
    T.ARRAY16: _container("array", 2),
    T.ARRAY32: _container("array", 4),
    T.MAP16: _container("map", 2),
    T.MAP32: _container("map", 4),
}


def _table(registry: Optional[ExtensionRegistry]) -> ExtensionTable:
    if registry is None:
        registry = default_registry
    return registry.snapshot()


class Encoder:
    """Encodes Python values; one registry snapshot per call."""

    def __init__(
        self,
        registry: Optional[ExtensionRegistry] = None,
        *,
        max_depth: int = T.DEFAULT_MAX_DEPTH,
    ) -> None:
        self.registry = registry
        self.max_depth = max_depth

    def encode(self, obj: Any) -> bytes:
        return self.encode_many(obj)

    def encode_many(self, *objs: Any) -> bytes:
        """Concatenated encodings of objs; nothing is returned on failure."""
        packer = _Packer(_table(self.registry), self.max_depth)
        try:
            for obj in objs:
                packer.pack(obj)
        except PicopackError as exc:
            logger.debug("encode failed: %s", exc)
            raise
        except RecursionError as exc:
            logger.debug("encode failed: nesting too deep")
            raise EncodeError("cannot encode MessagePack: nesting too deep") from exc
        except Exception as exc:
            logger.debug("encode failed: %r", exc)
            raise EncodeError(f"cannot encode MessagePack: {exc!r}") from exc
        return bytes(packer.buf)


class Decoder:
    """Decodes MessagePack bytes; one registry snapshot per call."""

    def __init__(
        self,
        registry: Optional[ExtensionRegistry] = None,
        *,
        max_depth: int = T.DEFAULT_MAX_DEPTH,
    ) -> None:
        self.registry = registry
        self.max_depth = max_depth

    def decode(self, data, pos: int = 0) -> tuple[Any, int]:
        """Decode one value at byte offset pos; returns (value, next_pos)."""
        return self._run(data, pos, many=False)

    def decode_many(self, data, pos: int = 0) -> list:
        """Decode values from pos to the end of data, in order."""
        return self._run(data, pos, many=True)

    def _run(self, data, pos: int, many: bool):
        try:
            cur = Cursor(data, pos)
            unpacker = _Unpacker(cur, _table(self.registry), self.max_depth)
            if not many:
                return unpacker.value(), cur.pos
            values = []
            while cur.pos < cur.end:
                values.append(unpacker.value())
            return values
        except PicopackError as exc:
            logger.debug("decode failed: %s", exc)
            raise
        except RecursionError as exc:
            logger.debug("decode failed at byte %s: nesting too deep", pos)
            raise DecodeError(
                "cannot decode MessagePack: nesting too deep", pos
            ) from exc
        except Exception as exc:
            logger.debug("decode failed at byte %s: %r", pos, exc)
            raise DecodeError(f"cannot decode MessagePack: {exc!r}", pos) from exc


def encode(
    obj: Any,
    *,
    registry: Optional[ExtensionRegistry] = None,
    max_depth: int = T.DEFAULT_MAX_DEPTH,
) -> bytes:
    return Encoder(registry, max_depth=max_depth).encode(obj)


def encode_many(
    *objs: Any,
    registry: Optional[ExtensionRegistry] = None,
    max_depth: int = T.DEFAULT_MAX_DEPTH,
) -> bytes:
    return Encoder(registry, max_depth=max_depth).encode_many(*objs)


def decode(
    data,
    pos: int = 0,
    *,
    registry: Optional[ExtensionRegistry] = None,
    max_depth: int = T.DEFAULT_MAX_DEPTH,
) -> tuple[Any, int]:
    return Decoder(registry, max_depth=max_depth).decode(data, pos)


def decode_many(
    data,
    pos: int = 0,
    *,
    registry: Optional[ExtensionRegistry] = None,
    max_depth: int = T.DEFAULT_MAX_DEPTH,
) -> list:
    return Decoder(registry, max_depth=max_depth).decode_many(data, pos)
