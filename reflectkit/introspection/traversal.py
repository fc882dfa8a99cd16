"""
Bulk traversal of methods and fields across a hierarchy.

A callback raising ``IllegalAccessError`` aborts the whole traversal with
``InaccessibleMemberError``; members visited before the failure stay visited.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, TypeVar

from ..errors import IllegalAccessError, InaccessibleMemberError
from ..observability.logging import get_logger
from ..shared.preconditions import require_non_null
from .cache import get_cache
from .hierarchy import extended_interfaces, is_interface
from .members import FieldHandle, MethodHandle

log = get_logger("traversal")

M = TypeVar("M", MethodHandle, FieldHandle)

MethodCallback = Callable[[MethodHandle], Any]
FieldCallback = Callable[[FieldHandle], Any]


class _MemberFilter(Generic[M]):
    def __init__(self, predicate: Callable[[M], bool], name: str | None = None):
        self._predicate = predicate
        self.name = name or getattr(predicate, "__name__", "filter")

    def matches(self, member: M) -> bool:
        return bool(self._predicate(member))

    __call__ = matches

    def and_(self, next_filter: Callable[[M], bool]):
        require_non_null(next_filter, f"Next {type(self).__name__} must not be null")
        return type(self)(
            lambda member: self.matches(member) and bool(next_filter(member)),
            name=f"{self.name}&{getattr(next_filter, 'name', getattr(next_filter, '__name__', 'filter'))}",
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name})"


class MethodFilter(_MemberFilter[MethodHandle]):
    pass


class FieldFilter(_MemberFilter[FieldHandle]):
    pass


# Methods written by the application: no aliases, no runtime-generated code,
# nothing inherited from `object`.
USER_DECLARED_METHODS = MethodFilter(
    lambda m: not m.is_bridge and not m.is_synthetic and m.owner is not object,
    name="user_declared_methods",
)

# Fields that hold per-instance, reassignable state.
COPYABLE_FIELDS = FieldFilter(
    lambda f: not f.is_static and not f.is_final,
    name="copyable_fields",
)


def _apply(callback: Callable[[Any], Any], member: MethodHandle | FieldHandle, kind: str) -> None:
    try:
        callback(member)
    except IllegalAccessError as ex:
        log.warning("traversal_aborted", member=str(member), kind=kind, error=str(ex))
        raise InaccessibleMemberError(
            f"Not allowed to access {kind} '{member.name}': {ex}",
            member=str(member),
            owner=member.owner.__qualname__,
            cause=ex,
        ) from ex


def do_with_methods(
    cls: type,
    callback: MethodCallback,
    method_filter: Callable[[MethodHandle], bool] | None = None,
) -> None:
    """
    Apply ``callback`` to every declared method of ``cls`` and its ancestors.

    With ``USER_DECLARED_METHODS`` the ascent stops before ``object``. For an
    interface, each extended interface is traversed in turn; an interface
    reachable along two paths is visited once per path.
    """
    require_non_null(cls, "Class must not be null")
    require_non_null(callback, "Method callback must not be null")

    user_only = method_filter is USER_DECLARED_METHODS
    if user_only and cls is object:
        return

    cache = get_cache()
    for level in cache.get_superclass_chain(cls):
        if user_only and level is object:
            break
        for method in cache.get_declared_methods(level):
            if method_filter is None or method_filter(method):
                _apply(callback, method, "method")

    if is_interface(cls):
        for interface in extended_interfaces(cls):
            do_with_methods(interface, callback, method_filter)


def get_all_declared_methods(leaf_class: type) -> tuple[MethodHandle, ...]:
    methods: list[MethodHandle] = []
    do_with_methods(leaf_class, methods.append)
    return tuple(methods)


def do_with_local_fields(cls: type, callback: FieldCallback) -> None:
    require_non_null(cls, "Class must not be null")
    require_non_null(callback, "Field callback must not be null")

    for f in get_cache().get_declared_fields(cls):
        _apply(callback, f, "field")


def do_with_fields(
    cls: type,
    callback: FieldCallback,
    field_filter: Callable[[FieldHandle], bool] | None = None,
) -> None:
    """Apply ``callback`` to matching fields of ``cls`` and every ancestor below ``object``."""
    require_non_null(cls, "Class must not be null")
    require_non_null(callback, "Field callback must not be null")

    cache = get_cache()
    for level in cache.get_superclass_chain(cls):
        if level is object and level is not cls:
            break
        for f in cache.get_declared_fields(level):
            if field_filter is None or field_filter(f):
                _apply(callback, f, "field")
