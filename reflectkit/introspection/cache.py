"""
Introspection cache - per-class declared members and ancestor chains.

Entries are computed lazily, keyed by class identity, and live for the whole
process: nothing is ever evicted or invalidated. Concurrent callers may both
compute the same entry; the content is deterministic, so the later write just
replaces an identical value.
"""

from __future__ import annotations

import math
from typing import Callable, TypeVar

from cachetools import Cache

from ..errors import IntrospectionError
from ..observability.logging import get_logger
from ..shared.preconditions import require_non_null
from .hierarchy import extended_interfaces, superclass_chain
from .members import (
    FieldHandle,
    MethodHandle,
    scan_declared_fields,
    scan_declared_methods,
    scan_interface_methods,
)

log = get_logger("introspection_cache")

T = TypeVar("T")

EMPTY_METHODS: tuple[MethodHandle, ...] = ()
EMPTY_FIELDS: tuple[FieldHandle, ...] = ()


def introspect(cls: type, scan: Callable[[type], T]) -> T:
    """Run a raw scan of ``cls``, turning any failure into ``IntrospectionError``."""
    try:
        return scan(cls)
    except Exception as e:
        name = getattr(cls, "__qualname__", repr(cls))
        module = getattr(cls, "__module__", None)
        log.error("introspection_failed", cls=name, module=module, error=str(e))
        raise IntrospectionError(
            f"Failed to introspect class [{name}] from module [{module}]",
            owner=name,
            cause=e,
        ) from e


def _methods_with_defaults(cls: type) -> tuple[MethodHandle, ...]:
    declared = scan_declared_methods(cls)
    defaults = [
        method
        for interface in extended_interfaces(cls)
        for method in scan_interface_methods(interface)
        if method.is_default
    ]
    return tuple(declared + defaults)


class IntrospectionCache:
    """
    Process-wide store of declared members per class.

    Backed by unbounded ``cachetools.Cache`` instances; handles stored here
    are shared with every caller.
    """

    def __init__(self):
        # cachetools.Cache is not thread-safe, but with maxsize=inf nothing is ever
        # evicted: a racing write can only skew currsize, never drop or tear an entry.
        self._methods: Cache[type, tuple[MethodHandle, ...]] = Cache(maxsize=math.inf)
        self._fields: Cache[type, tuple[FieldHandle, ...]] = Cache(maxsize=math.inf)
        self._chains: Cache[type, tuple[type, ...]] = Cache(maxsize=math.inf)

    def get_declared_methods(self, cls: type) -> tuple[MethodHandle, ...]:
        """Declared methods of ``cls`` plus default methods of its direct interfaces."""
        require_non_null(cls, "Class must not be null")
        result = self._methods.get(cls)
        if result is None:
            result = introspect(cls, _methods_with_defaults) or EMPTY_METHODS
            self._methods[cls] = result
            log.debug("declared_methods_scanned", cls=cls.__qualname__, count=len(result))
        return result

    def get_declared_fields(self, cls: type) -> tuple[FieldHandle, ...]:
        require_non_null(cls, "Class must not be null")
        result = self._fields.get(cls)
        if result is None:
            result = tuple(introspect(cls, scan_declared_fields)) or EMPTY_FIELDS
            self._fields[cls] = result
            log.debug("declared_fields_scanned", cls=cls.__qualname__, count=len(result))
        return result

    def get_superclass_chain(self, cls: type) -> tuple[type, ...]:
        require_non_null(cls, "Class must not be null")
        result = self._chains.get(cls)
        if result is None:
            result = introspect(cls, superclass_chain)
            self._chains[cls] = result
        return result

    def __contains__(self, cls: object) -> bool:
        return cls in self._methods or cls in self._fields

    def __len__(self) -> int:
        return len(set(self._methods.keys()) | set(self._fields.keys()))


# Global cache instance
_cache: IntrospectionCache | None = None


def get_cache() -> IntrospectionCache:
    """Get the global introspection cache."""
    global _cache
    if _cache is None:
        _cache = IntrospectionCache()
    return _cache


def get_declared_methods(cls: type) -> tuple[MethodHandle, ...]:
    return get_cache().get_declared_methods(cls)


def get_declared_fields(cls: type) -> tuple[FieldHandle, ...]:
    return get_cache().get_declared_fields(cls)
