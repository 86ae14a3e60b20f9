"""Extension types: ExtType values, Extension descriptors and their registry."""

from .registry import (
    ExtensionRegistry,
    ExtensionTable,
    default_registry,
    get_extension,
    register_extension,
    unregister_extension,
)
from .types import Extension, ExtType, passthrough

__all__: tuple[str, ...] = (
    "ExtType",
    "Extension",
    "ExtensionRegistry",
    "ExtensionTable",
    "default_registry",
    "get_extension",
    "passthrough",
    "register_extension",
    "unregister_extension",
)
