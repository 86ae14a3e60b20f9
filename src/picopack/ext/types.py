"""Extension value and descriptor types."""

from __future__ import annotations

from typing import Any, Callable, NamedTuple, Optional


class _ExtType(NamedTuple):
    code: int
    data: bytes


class ExtType(_ExtType):
    """Raw extension value: signed type byte ``code`` plus opaque ``data``.

    Encoding an ExtType goes through the descriptor registered for ``code``.
    """

    __slots__ = ()

    def __new__(cls, code: int, data: bytes) -> "ExtType":
        if not isinstance(code, int) or isinstance(code, bool):
            raise ValueError(f"ext code must be an int, got {type(code).__name__}")
        if not -128 <= code <= 127:
            raise ValueError(f"ext code {code} outside -128..127")
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise ValueError(f"ext data must be bytes, got {type(data).__name__}")
        return super().__new__(cls, code, bytes(data))


class Extension(NamedTuple):
    """Registry entry for one extension id.

    serialize(value, id) -> bytes builds the payload; deserialize(payload, id)
    rebuilds the value. When ``type`` is set, instances of that class (or a
    subclass) are encoded through this entry without wrapping them in ExtType.
    """

    id: Optional[int]
    serialize: Optional[Callable[[Any, int], bytes]]
    deserialize: Optional[Callable[[bytes, int], Any]]
    type: Optional[type] = None


def passthrough(ext_id: int) -> Extension:
    """Extension that carries ExtType values through unchanged."""
    return Extension(
        ext_id,
        lambda value, _id: value.data,
        lambda payload, code: ExtType(code, payload),
    )
