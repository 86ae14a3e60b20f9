"""MessagePack codec: cursor, tag table, scalar / container / extension forms."""

from .cursor import Cursor
from .dispatch import Decoder, Encoder, decode, decode_many, encode, encode_many

__all__: tuple[str, ...] = (
    "Cursor",
    "Decoder",
    "Encoder",
    "decode",
    "decode_many",
    "encode",
    "encode_many",
)
