from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Tuple, TypeVar, Union

T = TypeVar("T")

ANONYMOUS = "anonymous"
INITIAL = "INITIAL"

History = Tuple[str, ...]


@dataclass(frozen=True)
class Success(Generic[T]):
    """Pipeline state holding a computed value."""
    value: T


@dataclass(frozen=True)
class Failure:
    """Pipeline state holding the error that stopped the chain."""
    error: BaseException


State = Union[Success[Any], Failure]


def step_name(fn: Callable[..., Any]) -> str:
    """
    Return the label recorded in history for a step function.

    Lambdas and callables without a ``__name__`` (e.g. ``functools.partial``)
    are recorded as ``"anonymous"``.

    Usage example
    -------------
        step_name(len)            # "len"
        step_name(lambda x: x)    # "anonymous"
    """
    name = getattr(fn, "__name__", None)
    if not isinstance(name, str) or not name or name == "<lambda>":
        return ANONYMOUS
    return name
