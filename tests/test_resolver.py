from __future__ import annotations

from abc import abstractmethod
from typing import ClassVar, Protocol

import pytest

from reflectkit.errors import InvalidArgumentError
from reflectkit.introspection.invoker import instantiate, invoke_method
from reflectkit.introspection.resolver import (
    accessible_constructor,
    find_field,
    find_field_ignore_case,
    find_method,
)


class Animal:
    legs: int
    sound: str

    def speak(self) -> str:
        return "..."

    def eat(self, food: str) -> str:
        return f"eats {food}"

    def feed(self, food: str, grams: int) -> str:
        return f"{grams}g of {food}"


class Dog(Animal):
    TAG: ClassVar[str] = "dog"
    nickName: str
    sound: str

    def speak(self) -> str:
        return "woof"


class Greeter(Protocol):
    def greet(self) -> str:
        return f"hello {self.name()}"

    @abstractmethod
    def name(self) -> str: ...


class LoudGreeter(Greeter, Protocol):
    def shout(self) -> str:
        return self.greet().upper()


class English(Greeter):
    def name(self) -> str:
        return "world"


class _Hidden:
    def __init__(self, value: int) -> None:
        self.value = value


def test_find_method_prefers_most_derived_declaration():
    speak = find_method(Dog, "speak")
    assert speak is not None
    assert speak.owner is Dog
    assert invoke_method(speak, Dog()) == "woof"

    eat = find_method(Dog, "eat", (str,))
    assert eat is not None and eat.owner is Animal


def test_find_method_matches_exact_signature():
    assert find_method(Dog, "eat", (int,)) is None
    assert find_method(Dog, "feed", (str,)) is None
    assert find_method(Dog, "feed", (str, int)) is not None
    assert find_method(Dog, "speak", ()) is not None
    # None accepts any signature.
    assert find_method(Dog, "feed") is not None


def test_find_method_returns_none_when_absent():
    assert find_method(Dog, "fly") is None


def test_find_method_reaches_object():
    method = find_method(Dog, "__eq__")
    assert method is not None
    assert method.owner is object


def test_find_method_sees_interface_default_methods():
    greet = find_method(English, "greet")
    assert greet is not None
    assert greet.owner is Greeter
    assert greet.is_default
    assert invoke_method(greet, English()) == "hello world"


def test_find_method_on_interface_walks_extended_interfaces():
    greet = find_method(LoudGreeter, "greet")
    assert greet is not None and greet.owner is Greeter
    shout = find_method(LoudGreeter, "shout")
    assert shout is not None and shout.owner is LoudGreeter


def test_find_method_requires_class_and_name():
    with pytest.raises(InvalidArgumentError, match="Class must not be null"):
        find_method(None, "x")  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError, match="Method name must not be null"):
        find_method(Dog, None)  # type: ignore[arg-type]


def test_find_field_by_name_and_type():
    assert find_field(Dog, "legs").owner is Animal
    # `sound` is redeclared on Dog; the most-derived one wins.
    assert find_field(Dog, "sound").owner is Dog
    assert find_field(Dog, type_=int).name == "legs"
    assert find_field(Dog, "sound", str).owner is Dog
    assert find_field(Dog, "legs", str) is None
    assert find_field(Dog, "wings") is None


def test_find_field_type_lookup_returns_first_declared_match():
    # TAG is declared first on Dog and unwraps to str.
    assert find_field(Dog, type_=str).name == "TAG"


def test_find_field_requires_a_criterion():
    with pytest.raises(InvalidArgumentError, match="Either name or type"):
        find_field(Dog)


def test_find_field_never_searches_object():
    assert find_field(object, "__doc__") is None
    assert find_field(Dog, "__class__") is None


def test_find_field_ignore_case_agrees_with_exact_lookup():
    assert find_field_ignore_case(Dog, "NICKNAME") == find_field(Dog, "nickName")
    assert find_field_ignore_case(Dog, "nickName") == find_field(Dog, "nickName")
    assert find_field_ignore_case(Dog, "Legs").owner is Animal
    assert find_field_ignore_case(Dog, "tail") is None


def test_accessible_constructor_matches_signature():
    ctor = accessible_constructor(_Hidden, int)
    assert ctor is not None
    assert ctor.accessible is True
    assert instantiate(ctor, 3).value == 3

    assert accessible_constructor(_Hidden, str) is None
    assert accessible_constructor(_Hidden) is None


def test_find_method_on_locally_defined_self_referencing_class():
    class Tree:
        def grow(self) -> Tree:
            return Tree()

        def ping(self) -> str:
            return "pong"

    ping = find_method(Tree, "ping")
    assert ping is not None
    assert invoke_method(ping, Tree()) == "pong"
    assert find_method(Tree, "grow").return_type is Tree
