"""
Bounds-checked read cursor over an immutable input buffer. Every read checks
the remaining length first, so a corrupt or adversarial length field fails
with DecodeError instead of reading past the end.
"""

from __future__ import annotations

import struct

from ..errors import DecodeError

_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")
_U64 = struct.Struct(">Q")
_I8 = struct.Struct(">b")
_I16 = struct.Struct(">h")
_I32 = struct.Struct(">i")
_I64 = struct.Struct(">q")
_F32 = struct.Struct(">f")
_F64 = struct.Struct(">d")


class Cursor:
    """Read position into ``data``; ``pos`` only moves forward."""

    __slots__ = ("data", "pos", "end")

    def __init__(self, data, pos: int = 0) -> None:
        if isinstance(data, memoryview):
            data = data.cast("B") if data.format != "B" else data
        else:
            data = memoryview(data)
        self.data = data
        self.end = len(data)
        if not isinstance(pos, int) or isinstance(pos, bool):
            raise DecodeError(f"position must be an int, got {type(pos).__name__}")
        if pos < 0 or pos > self.end:
            raise DecodeError(f"position out of range 0..{self.end}", pos)
        self.pos = pos

    @property
    def remaining(self) -> int:
        return self.end - self.pos

    def take(self, n: int) -> bytes:
        """Consume exactly n bytes."""
        pos = self.pos
        if n > self.end - pos:
            raise DecodeError(
                f"truncated input: need {n} bytes, {self.end - pos} left", pos
            )
        self.pos = pos + n
        return bytes(self.data[pos : pos + n])

    def byte(self) -> int:
        pos = self.pos
        if pos >= self.end:
            raise DecodeError("truncated input: need 1 byte, 0 left", pos)
        self.pos = pos + 1
        return self.data[pos]

    def _unpack(self, fmt: struct.Struct):
        return fmt.unpack(self.take(fmt.size))[0]

    def read_u8(self) -> int:
        return self.byte()

    def read_u16(self) -> int:
        return self._unpack(_U16)

    def read_u32(self) -> int:
        return self._unpack(_U32)

    def read_u64(self) -> int:
        return self._unpack(_U64)

    def read_i8(self) -> int:
        return self._unpack(_I8)

    def read_i16(self) -> int:
        return self._unpack(_I16)

    def read_i32(self) -> int:
        return self._unpack(_I32)

    def read_i64(self) -> int:
        return self._unpack(_I64)

    def read_f32(self) -> float:
        return self._unpack(_F32)

    def read_f64(self) -> float:
        return self._unpack(_F64)
