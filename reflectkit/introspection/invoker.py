"""
Access toggling and guarded invoke/get/set.

This is the single boundary where raw runtime failures are translated:

- ``IllegalAccessError``     -> ``InaccessibleMemberError``
- ``InvocationTargetError``  -> the original failure, re-raised as-is when it
  is an ordinary ``Exception`` or an interpreter-level exit/interrupt;
  otherwise ``UndeclaredThrowableError`` carrying it as the cause
- other ``Exception``        -> re-raised unchanged
- other ``BaseException``    -> ``UndeclaredThrowableError``

Access is never relaxed implicitly: call ``make_accessible`` first.
"""

from __future__ import annotations

from typing import Any, NoReturn

from ..errors import (
    IllegalAccessError,
    InaccessibleMemberError,
    InvocationTargetError,
    UndeclaredThrowableError,
)
from ..observability.logging import get_logger
from ..shared.preconditions import require_non_null
from .hierarchy import is_public_class
from .members import ConstructorHandle, FieldHandle, MethodHandle

log = get_logger("invoker")

_INTERPRETER_FAILURES = (KeyboardInterrupt, SystemExit, GeneratorExit)

Member = MethodHandle | FieldHandle | ConstructorHandle


def make_accessible(member: Member) -> None:
    """
    Mark ``member`` accessible when its visibility (or, for fields, finality)
    would otherwise refuse raw access. Idempotent.
    """
    require_non_null(member, "Member must not be null")
    if member.accessible:
        return
    if isinstance(member, ConstructorHandle):
        needs = not member.is_public
    else:
        needs = not member.is_public or not is_public_class(member.owner)
        if isinstance(member, FieldHandle):
            needs = needs or member.is_final
    if needs:
        member.accessible = True
        log.debug("member_made_accessible", member=str(member))


def rethrow_runtime_exception(ex: BaseException) -> NoReturn:
    if isinstance(ex, Exception) or isinstance(ex, _INTERPRETER_FAILURES):
        raise ex
    raise UndeclaredThrowableError(
        f"Undeclared failure {type(ex).__name__}: {ex}",
        cause=ex,
    ) from ex


def handle_invocation_target_exception(ex: InvocationTargetError) -> NoReturn:
    rethrow_runtime_exception(ex.target_exception)


def handle_reflection_exception(ex: BaseException) -> NoReturn:
    """Translate a raw reflective failure; always raises."""
    if isinstance(ex, IllegalAccessError):
        raise InaccessibleMemberError(
            f"Cannot access method or field: {ex}",
            member=ex.member,
            cause=ex,
        ) from ex
    if isinstance(ex, InvocationTargetError):
        log.debug("invocation_failed", member=ex.member, error=repr(ex.target_exception))
        handle_invocation_target_exception(ex)
    if isinstance(ex, Exception):
        raise ex
    raise UndeclaredThrowableError(
        f"Undeclared failure {type(ex).__name__}: {ex}",
        cause=ex,
    ) from ex


def invoke_method(method: MethodHandle, target: Any, *args: Any) -> Any:
    require_non_null(method, "Method must not be null")
    try:
        return method.invoke(target, *args)
    except (IllegalAccessError, InvocationTargetError) as ex:
        handle_reflection_exception(ex)


def get_field(field: FieldHandle, target: Any) -> Any:
    require_non_null(field, "Field must not be null")
    try:
        return field.get(target)
    except IllegalAccessError as ex:
        handle_reflection_exception(ex)


def set_field(field: FieldHandle, target: Any, value: Any) -> None:
    require_non_null(field, "Field must not be null")
    try:
        field.set(target, value)
    except IllegalAccessError as ex:
        handle_reflection_exception(ex)


def instantiate(ctor: ConstructorHandle, *args: Any) -> Any:
    require_non_null(ctor, "Constructor must not be null")
    try:
        return ctor.new_instance(*args)
    except (IllegalAccessError, InvocationTargetError) as ex:
        handle_reflection_exception(ex)
