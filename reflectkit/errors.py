from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, eq=False)
class ReflectionError(Exception):
    """Base error for lookups, access and invocation through member handles.

    Callers only ever see this small family; raw runtime failures are
    translated at the invoker and traversal boundaries.
    """

    message: str
    member: str | None = None
    owner: str | None = None
    cause: BaseException | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True, eq=False)
class InvalidArgumentError(ReflectionError, ValueError):
    """A required input was missing or a precondition was violated."""


@dataclass(slots=True, eq=False)
class InaccessibleMemberError(ReflectionError):
    """The runtime refused access to a member that was not made accessible."""


@dataclass(slots=True, eq=False)
class IntrospectionError(ReflectionError):
    """A class's members could not be enumerated at all. Not retryable."""


@dataclass(slots=True, eq=False)
class UndeclaredThrowableError(ReflectionError):
    """Wraps a failure that is not an ordinary application-level exception."""


# Runtime-level failures raised by the raw handle operations.


class IllegalAccessError(PermissionError):
    """Raw access refusal: non-public member, final field write, or foreign target."""

    def __init__(self, message: str, *, member: str | None = None):
        super().__init__(message)
        self.member = member

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class InvocationTargetError(Exception):
    """The invoked method or constructor body raised; carries the original."""

    def __init__(self, member: str, target_exception: BaseException):
        super().__init__(f"{member} raised {type(target_exception).__name__}: {target_exception}")
        self.member = member
        self.target_exception = target_exception
