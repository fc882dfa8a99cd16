"""
Member handles over Python's own introspection facilities.

A handle describes one member stored directly in a class's ``__dict__``
(methods) or declared in its body (annotated names and ``__slots__``). Handles
compare by identity attributes only; the ``accessible`` flag is the single
mutable part and never participates in equality.

Python enforces no access control, so the raw operations here do: a non-public
member refuses ``invoke``/``get``/``set`` until it has been made accessible,
and a final field refuses writes likewise. Reading a declared field that was
never assigned yields ``None``. Raw failures surface as the
runtime-level ``IllegalAccessError`` / ``InvocationTargetError``; translating
them is the invoker's job.
"""

from __future__ import annotations

import enum
import inspect
import sys
import types
import typing
from dataclasses import dataclass, field
from typing import Any, ClassVar, Final

from ..errors import IllegalAccessError, InvocationTargetError
from .hierarchy import is_interface, is_public_class, is_runtime_machinery


class Visibility(str, enum.Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


class MethodKind(str, enum.Enum):
    INSTANCE = "instance"
    CLASS = "class"
    STATIC = "static"


_BUILTIN_STATIC = (types.BuiltinFunctionType,)
_BUILTIN_CLASS = (types.ClassMethodDescriptorType,)
_BUILTIN_INSTANCE = (types.WrapperDescriptorType, types.MethodDescriptorType)

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)

# Compiler-generated annotation functions live in the class namespace but are not methods.
_ANNOTATION_HOOKS = frozenset({"__annotate__", "__annotate_func__"})


def _mangle_prefix(owner: type) -> str:
    return "_" + owner.__name__.lstrip("_") + "__"


def split_attribute(owner: type, attribute: str) -> tuple[str, Visibility]:
    """Map a namespace key to its logical member name and visibility."""
    prefix = _mangle_prefix(owner)
    if attribute.startswith(prefix) and len(attribute) > len(prefix) and not attribute.endswith("__"):
        return attribute[len(prefix):], Visibility.PRIVATE
    if attribute.startswith("__") and attribute.endswith("__"):
        return attribute, Visibility.PUBLIC
    if attribute.startswith("_"):
        return attribute, Visibility.PROTECTED
    return attribute, Visibility.PUBLIC


def mangle(owner: type, name: str) -> str:
    """Storage key for a name written as ``__name`` inside ``owner``'s body."""
    if name.startswith("__") and not name.endswith("__"):
        return _mangle_prefix(owner) + name[2:]
    return name


def _is_instance(target: Any, owner: type) -> bool:
    if is_interface(owner):
        # Protocols that are not runtime-checkable refuse isinstance(); require nominal inheritance.
        return owner in type(target).__mro__
    return isinstance(target, owner)


def _type_name(tp: Any) -> str:
    if isinstance(tp, type):
        return tp.__qualname__
    return str(tp).replace("typing.", "")


def _class_namespace(owner: type) -> dict[str, Any]:
    namespace = dict(vars(owner))
    namespace.setdefault(owner.__name__, owner)
    return namespace


def _evaluate(annotations: dict[str, Any], globalns: dict[str, Any], localns: dict[str, Any]) -> dict[str, Any]:
    """
    Evaluate string annotations one by one.

    An annotation naming something neither namespace can see is kept as
    written, so one unresolvable name never hides the rest of the class.
    """
    hints = {}
    for name, value in annotations.items():
        if isinstance(value, str):
            try:
                value = eval(value, globalns, localns)  # noqa: S307
            except (NameError, AttributeError, SyntaxError, TypeError):
                pass
        hints[name] = value
    return hints


def _resolved_hints(func: Any, owner: type) -> dict[str, Any]:
    if isinstance(func, types.FunctionType):
        return _evaluate(inspect.get_annotations(func), func.__globals__, _class_namespace(owner))
    return {}


def _class_hints(cls: type) -> dict[str, Any]:
    module = sys.modules.get(cls.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    return _evaluate(inspect.get_annotations(cls), globalns, _class_namespace(cls))


def _signature_types(func: Any, owner: type, *, drop_first: bool) -> tuple[tuple[Any, ...] | None, Any]:
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        # Some builtins carry no text signature.
        return None, Any
    hints = _resolved_hints(func, owner)
    params = list(sig.parameters.values())
    if drop_first and params and params[0].kind in _POSITIONAL:
        params = params[1:]
    types_ = tuple(hints.get(p.name, Any) for p in params if p.kind not in _VARIADIC)
    return types_, hints.get("return", Any)


@dataclass(unsafe_hash=True)
class MethodHandle:
    owner: type
    attribute: str
    name: str
    kind: MethodKind
    param_types: tuple[Any, ...] | None
    return_type: Any = field(compare=False)
    visibility: Visibility = field(compare=False)
    is_synthetic: bool = field(compare=False)
    is_bridge: bool = field(compare=False)
    is_abstract: bool = field(compare=False)
    raw: Any = field(compare=False, repr=False)
    accessible: bool = field(default=False, compare=False)

    @classmethod
    def from_namespace(cls, owner: type, attribute: str, raw: Any) -> "MethodHandle":
        name, visibility = split_attribute(owner, attribute)
        if isinstance(raw, staticmethod):
            kind, func = MethodKind.STATIC, raw.__func__
        elif isinstance(raw, classmethod):
            kind, func = MethodKind.CLASS, raw.__func__
        elif isinstance(raw, _BUILTIN_STATIC):
            kind, func = MethodKind.STATIC, raw
        elif isinstance(raw, _BUILTIN_CLASS):
            kind, func = MethodKind.CLASS, raw
        else:
            kind, func = MethodKind.INSTANCE, raw

        param_types, return_type = _signature_types(func, owner, drop_first=kind is not MethodKind.STATIC)

        code = getattr(func, "__code__", None)
        is_synthetic = code is not None and code.co_filename.startswith("<")
        source_name = "__" + name if visibility is Visibility.PRIVATE else attribute
        is_bridge = (
            isinstance(func, types.FunctionType)
            and func.__name__ != "<lambda>"
            and func.__name__ != source_name
        )

        return cls(
            owner=owner,
            attribute=attribute,
            name=name,
            kind=kind,
            param_types=param_types,
            return_type=return_type,
            visibility=visibility,
            is_synthetic=is_synthetic,
            is_bridge=is_bridge,
            is_abstract=bool(getattr(raw, "__isabstractmethod__", False)),
            raw=raw,
        )

    @property
    def is_public(self) -> bool:
        return self.visibility is Visibility.PUBLIC

    @property
    def is_static(self) -> bool:
        return self.kind is not MethodKind.INSTANCE

    @property
    def is_default(self) -> bool:
        """A concrete instance method carried by an interface."""
        return (
            is_interface(self.owner)
            and self.kind is MethodKind.INSTANCE
            and not self.is_abstract
            and not self.is_bridge
            and not self.is_synthetic
        )

    def __str__(self) -> str:
        if self.param_types is None:
            params = "..."
        else:
            params = ", ".join(_type_name(t) for t in self.param_types)
        return f"{self.owner.__qualname__}.{self.name}({params})"

    def _bind(self, target: Any) -> Any:
        if self.kind is MethodKind.INSTANCE:
            if not _is_instance(target, self.owner):
                raise IllegalAccessError(
                    f"{type(target).__qualname__} is not an instance of {self.owner.__qualname__}, "
                    f"which declares {self}",
                    member=str(self),
                )
            return self.raw.__get__(target, type(target))
        getter = getattr(self.raw, "__get__", None)
        if getter is None:
            return self.raw
        return getter(target, self.owner if target is None else type(target))

    def invoke(self, target: Any, *args: Any) -> Any:
        """Raw invocation; no translation of failures."""
        if not (self.accessible or (self.is_public and is_public_class(self.owner))):
            raise IllegalAccessError(
                f"{self} is not publicly visible and has not been made accessible",
                member=str(self),
            )
        bound = self._bind(target)
        try:
            return bound(*args)
        except BaseException as exc:
            raise InvocationTargetError(str(self), exc) from exc


@dataclass(unsafe_hash=True)
class FieldHandle:
    owner: type
    attribute: str
    name: str
    declared_type: Any
    is_static: bool = field(compare=False)
    is_final: bool = field(compare=False)
    visibility: Visibility = field(compare=False)
    accessible: bool = field(default=False, compare=False)

    @classmethod
    def from_annotation(cls, owner: type, attribute: str, hint: Any) -> "FieldHandle":
        name, visibility = split_attribute(owner, attribute)
        is_static = is_final = False
        # ClassVar[Final[T]] and Final[T] both unwrap to T.
        for _ in range(2):
            origin = typing.get_origin(hint)
            if hint is ClassVar or origin is ClassVar:
                is_static = True
            elif hint is Final or origin is Final:
                is_final = True
            else:
                break
            args = typing.get_args(hint)
            hint = args[0] if args else Any
        # Instance fields of a frozen dataclass are immutable like Final ones.
        params = vars(owner).get("__dataclass_params__")
        if params is not None and params.frozen and not is_static:
            is_final = True
        return cls(
            owner=owner,
            attribute=attribute,
            name=name,
            declared_type=hint,
            is_static=is_static,
            is_final=is_final,
            visibility=visibility,
        )

    @property
    def is_public(self) -> bool:
        return self.visibility is Visibility.PUBLIC

    def __str__(self) -> str:
        return f"{_type_name(self.declared_type)} {self.owner.__qualname__}.{self.name}"

    def _check(self, target: Any, *, writing: bool) -> Any:
        if not self.accessible:
            if not (self.is_public and is_public_class(self.owner)):
                raise IllegalAccessError(
                    f"{self} is not publicly visible and has not been made accessible",
                    member=str(self),
                )
            if writing and self.is_final:
                raise IllegalAccessError(f"cannot assign final field {self}", member=str(self))
        if self.is_static:
            return self.owner
        if not _is_instance(target, self.owner):
            raise IllegalAccessError(
                f"{type(target).__qualname__} is not an instance of {self.owner.__qualname__}, "
                f"which declares {self}",
                member=str(self),
            )
        return target

    def get(self, target: Any) -> Any:
        """Current value, or ``None`` for a declared field never assigned on ``target``."""
        return getattr(self._check(target, writing=False), self.attribute, None)

    def set(self, target: Any, value: Any) -> None:
        holder = self._check(target, writing=True)
        if self.is_final and not self.is_static:
            # Reaching here means the handle is accessible; skip any frozen __setattr__.
            object.__setattr__(holder, self.attribute, value)
        else:
            setattr(holder, self.attribute, value)


@dataclass(unsafe_hash=True)
class ConstructorHandle:
    owner: type
    param_types: tuple[Any, ...] | None
    accessible: bool = field(default=False, compare=False)

    @classmethod
    def of(cls, owner: type) -> "ConstructorHandle":
        try:
            sig = inspect.signature(owner)
        except (TypeError, ValueError):
            return cls(owner=owner, param_types=None)
        init = owner.__init__
        hints = _resolved_hints(init, owner)
        params = [p for p in sig.parameters.values() if p.kind not in _VARIADIC]
        return cls(owner=owner, param_types=tuple(hints.get(p.name, Any) for p in params))

    @property
    def is_public(self) -> bool:
        return is_public_class(self.owner)

    def __str__(self) -> str:
        params = "..." if self.param_types is None else ", ".join(_type_name(t) for t in self.param_types)
        return f"{self.owner.__qualname__}({params})"

    def new_instance(self, *args: Any) -> Any:
        if not (self.accessible or self.is_public):
            raise IllegalAccessError(
                f"constructor {self} of a non-public class has not been made accessible",
                member=str(self),
            )
        try:
            return self.owner(*args)
        except BaseException as exc:
            raise InvocationTargetError(str(self), exc) from exc


# --- raw enumeration -------------------------------------------------------


def _is_routine(value: Any) -> bool:
    return isinstance(
        value,
        (types.FunctionType, staticmethod, classmethod)
        + _BUILTIN_STATIC
        + _BUILTIN_CLASS
        + _BUILTIN_INSTANCE,
    )


def scan_declared_methods(cls: type) -> list[MethodHandle]:
    """Methods stored directly in ``cls.__dict__``, in definition order."""
    return [
        MethodHandle.from_namespace(cls, attribute, value)
        for attribute, value in list(vars(cls).items())
        if attribute not in _ANNOTATION_HOOKS and _is_routine(value)
    ]


def _declared_slots(cls: type) -> list[str]:
    slots = cls.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    return [mangle(cls, s) for s in slots if s not in ("__dict__", "__weakref__")]


def scan_declared_fields(cls: type) -> list[FieldHandle]:
    """Annotated names of ``cls``'s own body, then unannotated ``__slots__`` entries."""
    annotations = _class_hints(cls)
    fields = [FieldHandle.from_annotation(cls, attribute, hint) for attribute, hint in annotations.items()]
    for attribute in _declared_slots(cls):
        if attribute not in annotations:
            fields.append(FieldHandle.from_annotation(cls, attribute, Any))
    return fields


def scan_interface_methods(interface: type) -> list[MethodHandle]:
    """
    Every method visible on an interface, inherited ones included.

    Walks the interface's own MRO; a name declared on a more-derived
    interface hides the same name further up.
    """
    seen: set[str] = set()
    out: list[MethodHandle] = []
    for level in interface.__mro__:
        if level is object or is_runtime_machinery(level):
            continue
        for method in scan_declared_methods(level):
            if method.attribute in seen:
                continue
            seen.add(method.attribute)
            out.append(method)
    return out
