from __future__ import annotations

from typing import Any

from ..errors import InvalidArgumentError


def require_non_null(value: Any, message: str) -> None:
    if value is None:
        raise InvalidArgumentError(message)


def require_true(condition: bool, message: str) -> None:
    if not condition:
        raise InvalidArgumentError(message)
