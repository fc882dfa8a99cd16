from .errors import (
    InaccessibleMemberError,
    IntrospectionError,
    InvalidArgumentError,
    ReflectionError,
    UndeclaredThrowableError,
)
from .introspection import *  # noqa: F401,F403
from .introspection import __all__ as _introspection_all

__version__ = "0.1.0"

__all__ = [
    "InaccessibleMemberError",
    "IntrospectionError",
    "InvalidArgumentError",
    "ReflectionError",
    "UndeclaredThrowableError",
    *_introspection_all,
]
