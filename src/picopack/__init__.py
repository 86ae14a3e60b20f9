"""
MessagePack encoder / decoder in pure Python, with a registry of
application-defined extension types. Hot-path codec modules can be
compiled with Cython (see setup.py).
"""

from .__about__ import __version__
from .codec import Decoder, Encoder, decode, decode_many, encode, encode_many
from .errors import DecodeError, EncodeError, PicopackError, RegistryError
from .ext import (
    Extension,
    ExtensionRegistry,
    ExtType,
    default_registry,
    get_extension,
    passthrough,
    register_extension,
    unregister_extension,
)

__all__: tuple[str, ...] = (
    # About
    "__version__",
    # Codec
    "encode",
    "encode_many",
    "decode",
    "decode_many",
    "Encoder",
    "Decoder",
    # Extensions
    "ExtType",
    "Extension",
    "ExtensionRegistry",
    "default_registry",
    "register_extension",
    "unregister_extension",
    "get_extension",
    "passthrough",
    # Errors
    "PicopackError",
    "EncodeError",
    "DecodeError",
    "RegistryError",
)
