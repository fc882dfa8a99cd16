from __future__ import annotations

import pytest

from reflectkit.errors import InvalidArgumentError, ReflectionError
from reflectkit.shared.preconditions import require_non_null, require_true


def test_require_non_null():
    require_non_null(0, "zero is a value")
    require_non_null("", "empty string is a value")
    with pytest.raises(InvalidArgumentError, match="must not be null"):
        require_non_null(None, "thing must not be null")


def test_require_true():
    require_true(True, "fine")
    with pytest.raises(InvalidArgumentError, match="precondition"):
        require_true(False, "precondition violated")


def test_invalid_argument_is_a_value_error():
    err = InvalidArgumentError("bad")
    assert isinstance(err, ValueError)
    assert isinstance(err, ReflectionError)
    assert str(err) == "bad"
