"""
Reflective introspection over Python class hierarchies.

Provides:
- Per-class cache of declared methods and fields
- Method/field/constructor lookup along the ancestor chain
- Bulk traversal with filters and callbacks
- Access toggling and guarded invoke/get/set
"""

from .cache import (
    EMPTY_FIELDS,
    EMPTY_METHODS,
    IntrospectionCache,
    get_cache,
    get_declared_fields,
    get_declared_methods,
)
from .hierarchy import extended_interfaces, is_interface, superclass_chain
from .invoker import (
    get_field,
    handle_invocation_target_exception,
    handle_reflection_exception,
    instantiate,
    invoke_method,
    make_accessible,
    rethrow_runtime_exception,
    set_field,
)
from .members import ConstructorHandle, FieldHandle, MethodHandle, MethodKind, Visibility
from .resolver import accessible_constructor, find_field, find_field_ignore_case, find_method
from .traversal import (
    COPYABLE_FIELDS,
    USER_DECLARED_METHODS,
    FieldFilter,
    MethodFilter,
    do_with_fields,
    do_with_local_fields,
    do_with_methods,
    get_all_declared_methods,
)

__all__ = [
    "COPYABLE_FIELDS",
    "EMPTY_FIELDS",
    "EMPTY_METHODS",
    "USER_DECLARED_METHODS",
    "ConstructorHandle",
    "FieldFilter",
    "FieldHandle",
    "IntrospectionCache",
    "MethodFilter",
    "MethodHandle",
    "MethodKind",
    "Visibility",
    "accessible_constructor",
    "do_with_fields",
    "do_with_local_fields",
    "do_with_methods",
    "extended_interfaces",
    "find_field",
    "find_field_ignore_case",
    "find_method",
    "get_all_declared_methods",
    "get_cache",
    "get_declared_fields",
    "get_declared_methods",
    "get_field",
    "handle_invocation_target_exception",
    "handle_reflection_exception",
    "instantiate",
    "invoke_method",
    "is_interface",
    "make_accessible",
    "rethrow_runtime_exception",
    "set_field",
    "superclass_chain",
]
