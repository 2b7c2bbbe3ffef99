import functools

import pytest

from linepipe.types import ANONYMOUS, Failure, Success, step_name


def named_step(x: int) -> int:
    return x


def test_step_name_uses_function_name() -> None:
    assert step_name(named_step) == "named_step"
    assert step_name(len) == "len"


def test_step_name_anonymous_for_lambda_and_partial() -> None:
    assert step_name(lambda x: x) == ANONYMOUS
    assert step_name(functools.partial(named_step)) == ANONYMOUS


def test_step_name_for_bound_method() -> None:
    assert step_name("abc".upper) == "upper"


def test_states_are_frozen() -> None:
    ok = Success(1)
    bad = Failure(ValueError("x"))
    with pytest.raises(Exception):
        ok.value = 2  # type: ignore[misc]
    with pytest.raises(Exception):
        bad.error = ValueError("y")  # type: ignore[misc]
