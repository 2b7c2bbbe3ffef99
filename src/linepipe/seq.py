"""
List helpers shaped as pipeline steps.

Every helper takes the sequence as its first argument, so it can be passed
straight to ``next``. Inputs are never mutated; a new object is returned.

Usage example
-------------
    from linepipe import pipe_sync, seq

    pipe_sync([1, 2, 3]).next(seq.map, lambda x: x * 2).result()  # [2, 4, 6]
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Iterable, List, Optional, Sequence, TypeVar

T = TypeVar("T")
U = TypeVar("U")

_MISSING = object()


def map(items: Iterable[T], fn: Callable[[T], U]) -> List[U]:  # noqa: A001
    return [fn(item) for item in items]


def filter(items: Iterable[T], predicate: Callable[[T], Any]) -> List[T]:  # noqa: A001
    return [item for item in items if predicate(item)]


def concat(items: Iterable[T], *others: Any) -> List[Any]:
    """Append ``others``; lists and tuples are spread one level, other values appended."""
    out: List[Any] = list(items)
    for other in others:
        if isinstance(other, (list, tuple)):
            out.extend(other)
        else:
            out.append(other)
    return out


def every(items: Iterable[T], predicate: Callable[[T], Any]) -> bool:
    return all(predicate(item) for item in items)


def find(items: Iterable[T], predicate: Callable[[T], Any]) -> Optional[T]:
    return next((item for item in items if predicate(item)), None)


def flat(items: Iterable[Any], depth: int = 1) -> List[Any]:
    """Flatten nested lists/tuples up to ``depth`` levels."""
    out: List[Any] = []
    for item in items:
        if depth > 0 and isinstance(item, (list, tuple)):
            out.extend(flat(item, depth - 1))
        else:
            out.append(item)
    return out


def includes(items: Sequence[T], value: T, start: int = 0) -> bool:
    return value in items[start:]


def join(items: Iterable[Any], sep: str = ",") -> str:
    return sep.join(str(item) for item in items)


def reduce(items: Iterable[T], fn: Callable[[Any, T], Any], initial: Any = _MISSING) -> Any:
    if initial is _MISSING:
        return functools.reduce(fn, items)
    return functools.reduce(fn, items, initial)


def reduce_right(items: Sequence[T], fn: Callable[[Any, T], Any], initial: Any = _MISSING) -> Any:
    return reduce(list(reversed(items)), fn, initial)
