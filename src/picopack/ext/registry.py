"""
Extension registry. Writers (register / unregister) take a lock and swap in a
new immutable ExtensionTable; readers grab the current table once per encode
or decode call and use that snapshot throughout.
"""

from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from ..errors import RegistryError
from .types import Extension

logger = logging.getLogger(__name__)


class ExtensionTable:
    """Immutable id -> Extension and class -> Extension lookup."""

    __slots__ = ("by_id", "by_type")

    def __init__(
        self,
        by_id: Mapping[int, Extension],
        by_type: Mapping[type, Extension],
    ) -> None:
        self.by_id = MappingProxyType(dict(by_id))
        self.by_type = MappingProxyType(dict(by_type))

    def get(self, ext_id: int) -> Optional[Extension]:
        return self.by_id.get(ext_id)

    def for_type(self, cls: type) -> Optional[Extension]:
        """Entry bound to cls, falling back along its MRO."""
        by_type = self.by_type
        if not by_type:
            return None
        ext = by_type.get(cls)
        if ext is not None:
            return ext
        for base in cls.__mro__[1:]:
            ext = by_type.get(base)
            if ext is not None:
                return ext
        return None

    def __len__(self) -> int:
        return len(self.by_id)


_EMPTY = ExtensionTable({}, {})


def _validate(ext: Extension) -> None:
    ext_id = getattr(ext, "id", None)
    if ext_id is None:
        raise RegistryError("extension has no id")
    if not isinstance(ext_id, int) or isinstance(ext_id, bool):
        raise RegistryError(f"extension id must be an int, got {type(ext_id).__name__}")
    if not -128 <= ext_id <= 127:
        raise RegistryError(f"extension id {ext_id} outside -128..127")
    for hook in ("serialize", "deserialize"):
        if not callable(getattr(ext, hook, None)):
            raise RegistryError(f"extension {ext_id} has no callable {hook}")
    cls = getattr(ext, "type", None)
    if cls is not None and not isinstance(cls, type):
        raise RegistryError(f"extension {ext_id} type must be a class, got {cls!r}")


class ExtensionRegistry:
    """Mutable set of extensions, safe to share between threads."""

    def __init__(self, extensions: Iterable[Extension] = ()) -> None:
        self._lock = threading.Lock()
        self._table = _EMPTY
        for ext in extensions:
            self.register(ext)

    def snapshot(self) -> ExtensionTable:
        return self._table

    def register(self, ext: Extension) -> None:
        _validate(ext)
        cls = getattr(ext, "type", None)
        with self._lock:
            table = self._table
            if ext.id in table.by_id:
                raise RegistryError(f"extension id {ext.id} already registered")
            if cls is not None and cls in table.by_type:
                bound = table.by_type[cls].id
                raise RegistryError(
                    f"{cls.__name__} already bound to extension id {bound}"
                )
            by_id = dict(table.by_id)
            by_id[ext.id] = ext
            by_type = dict(table.by_type)
            if cls is not None:
                by_type[cls] = ext
            self._table = ExtensionTable(by_id, by_type)
        logger.debug("registered extension id=%d type=%s", ext.id, cls)

    def unregister(self, ext_id: int) -> Extension:
        with self._lock:
            table = self._table
            ext = table.by_id.get(ext_id)
            if ext is None:
                raise RegistryError(f"no extension registered with id {ext_id!r}")
            by_id = dict(table.by_id)
            del by_id[ext_id]
            by_type = {cls: e for cls, e in table.by_type.items() if e is not ext}
            self._table = ExtensionTable(by_id, by_type)
        logger.debug("unregistered extension id=%d", ext_id)
        return ext

    def get(self, ext_id: int) -> Optional[Extension]:
        return self._table.get(ext_id)

    def find_type(self, cls: type) -> Optional[Extension]:
        return self._table.for_type(cls)

    def ids(self) -> tuple[int, ...]:
        return tuple(sorted(self._table.by_id))

    def clear(self) -> None:
        with self._lock:
            self._table = _EMPTY
        logger.debug("cleared extension registry")

    def __contains__(self, ext_id: object) -> bool:
        return ext_id in self._table.by_id

    def __len__(self) -> int:
        return len(self._table)


default_registry = ExtensionRegistry()


def register_extension(ext: Extension) -> None:
    """Add ext to the process-wide default registry."""
    default_registry.register(ext)


def unregister_extension(ext_id: int) -> Extension:
    """Remove and return the default-registry entry for ext_id."""
    return default_registry.unregister(ext_id)


def get_extension(ext_id: int) -> Optional[Extension]:
    """Default-registry entry for ext_id, or None."""
    return default_registry.get(ext_id)
