"""
Class hierarchy shape: interfaces, extended interfaces and ancestor chains.

Interfaces are ``typing.Protocol`` classes. ``Protocol`` and ``Generic``
themselves are typing machinery and never show up in an ancestor chain.
"""

from __future__ import annotations

from typing import Generic, Protocol

_RUNTIME_MACHINERY: tuple[type, ...] = (Protocol, Generic)  # type: ignore[assignment]


def is_runtime_machinery(cls: type) -> bool:
    return any(cls is m for m in _RUNTIME_MACHINERY)


def is_interface(cls: type) -> bool:
    # `_is_protocol` lands in the class's own namespace for every Protocol subclass;
    # it is only true for classes that list Protocol among their bases.
    if not isinstance(cls, type) or is_runtime_machinery(cls):
        return False
    return bool(cls.__dict__.get("_is_protocol", False))


def is_public_class(cls: type) -> bool:
    return not cls.__name__.startswith("_")


def extended_interfaces(cls: type) -> tuple[type, ...]:
    """Interfaces listed directly in ``cls.__bases__``."""
    return tuple(base for base in cls.__bases__ if is_interface(base))


def superclass_chain(cls: type) -> tuple[type, ...]:
    """
    Explicit ancestor list of ``cls``, most-derived first.

    For a class: every non-interface entry of its MRO, ending with ``object``.
    For an interface: only the interface itself; super-interfaces are reached
    through ``extended_interfaces``.
    """
    if is_interface(cls):
        return (cls,)
    return tuple(
        level
        for level in cls.__mro__
        if level is cls or not (is_interface(level) or is_runtime_machinery(level))
    )
