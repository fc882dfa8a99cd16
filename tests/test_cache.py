from __future__ import annotations

from abc import abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

import pytest

import reflectkit.introspection.cache as cache_module
from reflectkit.errors import IntrospectionError
from reflectkit.introspection.cache import (
    EMPTY_FIELDS,
    EMPTY_METHODS,
    IntrospectionCache,
    get_cache,
    get_declared_fields,
    get_declared_methods,
)
from reflectkit.introspection.hierarchy import extended_interfaces, is_interface, superclass_chain


class Empty:
    pass


class Shape:
    sides: int

    def area(self) -> float:
        return 0.0


class Square(Shape):
    length: float

    def area(self) -> float:
        return self.length**2


class Describable(Protocol):
    def describe(self) -> str:
        return f"<{type(self).__name__}>"

    @abstractmethod
    def title(self) -> str: ...


class Tile(Describable):
    def title(self) -> str:
        return "tile"


class Left:
    pass


class Right:
    pass


class Both(Left, Right):
    pass


class Dangling:
    value: DoesNotExist  # noqa: F821

    def run(self, arg: AlsoMissing) -> int:  # noqa: F821
        return 1


class Unscannable:
    pass


def test_declared_methods_are_cached_per_class():
    first = get_declared_methods(Square)
    second = get_declared_methods(Square)
    assert first is second
    assert [m.name for m in first] == ["area"]
    assert Square in get_cache()


def test_empty_results_share_the_empty_sequence():
    assert get_declared_fields(Empty) is EMPTY_FIELDS
    assert get_declared_methods(Empty) is EMPTY_METHODS


def test_declared_fields_exclude_inherited():
    assert [f.name for f in get_declared_fields(Square)] == ["length"]
    assert [f.name for f in get_declared_fields(Shape)] == ["sides"]


def test_default_methods_are_unioned_into_implementers():
    names = [m.name for m in get_declared_methods(Tile)]
    assert "title" in names
    assert "describe" in names
    describe = next(m for m in get_declared_methods(Tile) if m.name == "describe")
    assert describe.owner is Describable
    assert describe.is_default
    # The abstract interface method is not a default method.
    assert [m.owner for m in get_declared_methods(Tile) if m.name == "title"] == [Tile]


def test_interface_detection_and_chains():
    assert is_interface(Describable)
    assert not is_interface(Tile)
    assert not is_interface(Protocol)
    assert extended_interfaces(Tile) == (Describable,)
    assert superclass_chain(Tile) == (Tile, object)
    assert superclass_chain(Describable) == (Describable,)
    assert superclass_chain(Both) == (Both, Left, Right, object)
    assert get_cache().get_superclass_chain(Square) == (Square, Shape, object)


def test_unresolvable_annotations_keep_their_source_text():
    [value] = get_declared_fields(Dangling)
    assert value.declared_type == "DoesNotExist"
    [run] = get_declared_methods(Dangling)
    assert run.param_types == ("AlsoMissing",)
    assert run.return_type is int


def test_enumeration_failures_fail_loudly(monkeypatch):
    def explode(cls):
        raise RuntimeError("namespace unavailable")

    monkeypatch.setattr(cache_module, "scan_declared_fields", explode)
    monkeypatch.setattr(cache_module, "scan_declared_methods", explode)
    cache = IntrospectionCache()

    with pytest.raises(IntrospectionError, match=r"Unscannable"):
        cache.get_declared_fields(Unscannable)
    with pytest.raises(IntrospectionError, match=r"Unscannable") as ei:
        cache.get_declared_methods(Unscannable)
    assert isinstance(ei.value.__cause__, RuntimeError)
    assert Unscannable not in cache


def test_concurrent_callers_see_identical_contents():
    cache = IntrospectionCache()

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: cache.get_declared_methods(Square), range(64)))

    assert all(r == results[0] for r in results)
    assert [m.name for m in results[0]] == ["area"]
    assert len(cache) == 1


def test_global_cache_is_a_singleton():
    assert get_cache() is get_cache()
