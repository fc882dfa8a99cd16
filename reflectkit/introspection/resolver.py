"""
Member resolution along a class's ancestor chain.

Lookups return ``None`` when nothing matches; absence is not an error.
"""

from __future__ import annotations

from typing import Any, Sequence

from ..shared.preconditions import require_non_null, require_true
from .cache import get_cache, introspect
from .hierarchy import is_interface
from .invoker import make_accessible
from .members import ConstructorHandle, FieldHandle, MethodHandle, scan_interface_methods


def _has_same_params(method: MethodHandle, param_types: Sequence[Any]) -> bool:
    if method.param_types is None:
        return False
    return len(param_types) == len(method.param_types) and tuple(param_types) == method.param_types


def find_method(
    cls: type,
    name: str,
    param_types: Sequence[Any] | None = None,
) -> MethodHandle | None:
    """
    Find the most-derived method called ``name`` on ``cls`` or its ancestors.

    Args:
        cls: Class to start from
        name: Method name (private methods are found by their bare name)
        param_types: Exact parameter types after ``self``/``cls``; ``None``
            accepts any signature, ``()`` only a parameterless method

    Returns:
        The first matching handle along the ascent, or None
    """
    require_non_null(cls, "Class must not be null")
    require_non_null(name, "Method name must not be null")

    cache = get_cache()
    for search_type in cache.get_superclass_chain(cls):
        if is_interface(search_type):
            methods: Sequence[MethodHandle] = introspect(search_type, scan_interface_methods)
        else:
            methods = cache.get_declared_methods(search_type)
        for method in methods:
            if method.name == name and (param_types is None or _has_same_params(method, param_types)):
                return method
    return None


def find_field(cls: type, name: str | None = None, type_: Any = None) -> FieldHandle | None:
    """
    Find the most-derived field matching ``name`` and/or ``type_``.

    Fields declared on ``object`` are never considered. At least one of the
    criteria must be given.
    """
    require_non_null(cls, "Class must not be null")
    require_true(
        name is not None or type_ is not None,
        "Either name or type of the field must be specified",
    )

    cache = get_cache()
    for search_type in cache.get_superclass_chain(cls):
        if search_type is object:
            break
        for f in cache.get_declared_fields(search_type):
            if (name is None or name == f.name) and (type_ is None or type_ == f.declared_type):
                return f
    return None


def find_field_ignore_case(cls: type, name: str) -> FieldHandle | None:
    require_non_null(cls, "Class must not be null")
    require_non_null(name, "Name must not be null")

    wanted = name.casefold()
    cache = get_cache()
    for search_type in cache.get_superclass_chain(cls):
        if search_type is object:
            break
        for f in cache.get_declared_fields(search_type):
            if f.name.casefold() == wanted:
                return f
    return None


def accessible_constructor(cls: type, *param_types: Any) -> ConstructorHandle | None:
    """Constructor of ``cls`` with exactly ``param_types``, already made accessible."""
    require_non_null(cls, "Class must not be null")

    ctor = introspect(cls, ConstructorHandle.of)
    if ctor.param_types is None or ctor.param_types != tuple(param_types):
        return None

    make_accessible(ctor)
    return ctor
