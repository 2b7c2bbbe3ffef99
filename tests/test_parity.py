"""Sync and async pipelines agree on failure-free chains."""

from __future__ import annotations

import asyncio

import pytest

from linepipe import pipe, pipe_sync, seq


def add_three(x: int) -> int:
    return x + 3


def double(x: int) -> int:
    return x * 2


def square(x: int) -> int:
    return x * x


CHAINS = [
    [],
    [add_three],
    [add_three, double],
    [double, square, add_three, double],
]


@pytest.mark.parametrize("steps", CHAINS)
@pytest.mark.parametrize("initial", [0, 5, -2])
def test_sync_and_async_results_match(initial: int, steps: list) -> None:
    sync_pipe = pipe_sync(initial)
    async_pipe = pipe(initial)
    for fn in steps:
        sync_pipe = sync_pipe.next(fn).log()
        async_pipe = async_pipe.next(fn).log()

    assert asyncio.run(async_pipe.result()) == sync_pipe.result()
    assert async_pipe.history == sync_pipe.history


def test_list_helpers_match() -> None:
    sync_out = pipe_sync([1, 2, 3]).next(seq.map, double).next(seq.join, "+").result()
    async_out = asyncio.run(pipe([1, 2, 3]).next(seq.map, double).next(seq.join, "+").result())
    assert sync_out == async_out == "2+4+6"
