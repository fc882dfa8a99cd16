from __future__ import annotations

"""
Demo: drive a trivial data class through lookup, invocation and field access.

Usage:
    python -m reflectkit.demo --name james --age 10 --new-age 18
"""

import argparse
from typing import Any

from .introspection import (
    find_field,
    find_method,
    get_declared_fields,
    get_field,
    invoke_method,
    make_accessible,
)
from .observability.logging import configure_logging, get_logger
from .settings import settings

log = get_logger("demo")


class Person:
    name: str
    __age: int

    def __init__(self, name: str, age: int) -> None:
        self.name = name
        self.__age = age

    def get_age(self) -> int:
        return self.__age

    def set_age(self, age: int) -> None:
        self.__age = age

    def __repr__(self) -> str:
        return f"Person(name={self.name!r}, age={self.__age})"


def run_demo(*, name: str = "james", age: int = 10, new_age: int = 18) -> dict[str, Any]:
    person = Person(name, age)

    set_age = find_method(Person, "set_age", (int,))
    get_age = find_method(Person, "get_age", ())

    before = invoke_method(get_age, person)
    invoke_method(set_age, person, new_age)
    after = invoke_method(get_age, person)

    # `age` is name-mangled; reading it directly needs access relaxed first.
    age_field = find_field(Person, "age", int)
    make_accessible(age_field)
    field_age = get_field(age_field, person)

    fields: dict[str, Any] = {}
    for f in get_declared_fields(Person):
        make_accessible(f)
        fields[f.name] = get_field(f, person)

    log.info("demo_complete", before=before, after=after, fields=fields)
    return {
        "before": before,
        "after": after,
        "age_field": field_age,
        "fields": fields,
        "person": repr(person),
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Exercise reflectkit against a Person data class")
    parser.add_argument("--name", default="james")
    parser.add_argument("--age", type=int, default=10)
    parser.add_argument("--new-age", type=int, default=18)
    parser.add_argument("--log-format", choices=("json", "console"), default=None)
    args = parser.parse_args(argv)

    configure_logging(fmt=args.log_format)
    log.info("demo_starting", settings=settings.to_log_safe_dict())

    out = run_demo(name=args.name, age=args.age, new_age=args.new_age)
    print(f"{args.name} age: {out['before']}")
    print(out["age_field"])
    for field_name, value in out["fields"].items():
        print(f"field name = {field_name}, field value = {value}")
    print(out["person"])
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
