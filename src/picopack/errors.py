"""Exceptions raised at the public encode / decode / registry boundary."""

from __future__ import annotations


class PicopackError(ValueError):
    """Base class for every error raised by picopack."""


class EncodeError(PicopackError):
    """Value cannot be represented in MessagePack (type, range, extension)."""


class DecodeError(PicopackError):
    """Input is not a valid MessagePack stream.

    ``pos`` is the byte offset of the value whose decoding failed, or None
    when the failure is not tied to a position.
    """

    def __init__(self, msg: str, pos: int | None = None) -> None:
        if pos is not None:
            msg = f"{msg} (at byte {pos})"
        super().__init__(msg)
        self.pos = pos


class RegistryError(PicopackError):
    """Invalid extension registration or removal."""
