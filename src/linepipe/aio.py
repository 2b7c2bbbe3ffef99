from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Generator, Generic, Optional, TypeVar

from . import logging as _log
from .config import ConfigArg, PipeConfig, resolve_config
from .errors import HistoryAwareError
from .types import History, step_name

T = TypeVar("T")
U = TypeVar("U")

KIND = "PipeAsync"


async def _settle(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


class _Deferred(Generic[T]):
    """
    Awaitable that runs its coroutine factory at most once.

    The first ``await`` schedules the coroutine as a task on the running loop;
    every later ``await`` (from this pipeline or from branches derived from it)
    shares that task's outcome. Each awaiter is shielded, so cancelling one of
    them (a timeout, say) leaves the task running for the others.
    """

    def __init__(self, factory: Callable[[], Awaitable[T]]) -> None:
        self._factory = factory
        self._future: Optional["asyncio.Future[T]"] = None

    def _ensure(self) -> "asyncio.Future[T]":
        if self._future is None:
            self._future = asyncio.ensure_future(self._factory())
        return self._future

    def __await__(self) -> Generator[Any, None, T]:
        return asyncio.shield(self._ensure()).__await__()


def pipe(value: Any, config: ConfigArg = None) -> "AsyncPipeline[Any]":
    """
    Start an asynchronous pipeline from ``value`` (a plain value or an awaitable).

    Evaluation is lazy: nothing runs, and an awaitable ``value`` is not awaited,
    until ``result()`` of this pipeline or of one derived from it is awaited.
    A coroutine passed as ``value`` to a pipeline that is never awaited triggers
    Python's "coroutine ... was never awaited" warning.

    Usage example
    -------------
        async def fetch_user(user_id):
            ...

        async def main():
            name = await pipe(42).next(fetch_user).next(lambda u: u.name).result()

        asyncio.run(main())
    """
    return AsyncPipeline.create(value, config)


class AsyncPipeline(Generic[T]):
    """
    Immutable chain of steps that may return awaitables.

    Rules
    -----
    - Steps run strictly in chain order once ``result()`` is awaited.
    - Sync and async step functions can be mixed freely.
    - A failure skips later ``next``/``log`` steps until a ``catch`` recovers it.
    - Nothing runs until the result is awaited; building the chain needs no event loop.

    Usage example
    -------------
        result = await (
            pipe(5)
            .next(add_async, 3)
            .log("after add:")
            .next(lambda x: x * 2)
            .catch(lambda err: 0)
            .result()
        )
    """

    def __init__(self, deferred: _Deferred[T], config: PipeConfig, history: History = ()) -> None:
        self._deferred = deferred
        self._config = config
        self._history = history

    @classmethod
    def create(cls, value: Any, config: ConfigArg = None) -> "AsyncPipeline[Any]":
        """Return a pipeline resolving to ``value`` (awaited first if awaitable)."""
        return cls(_Deferred(lambda: _settle(value)), resolve_config(config))

    @property
    def history(self) -> History:
        return self._history

    @property
    def config(self) -> PipeConfig:
        return self._config

    def next(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> "AsyncPipeline[Any]":
        """Schedule ``fn(value, *args, **kwargs)``; its result is awaited when awaitable."""
        name = step_name(fn)
        history = self._history + (name,)
        parent = self._deferred
        config = self._config

        async def run() -> Any:
            try:
                value = await parent
            except Exception:
                _log.step_skipped(KIND, name)
                raise
            try:
                return await _settle(fn(value, *args, **kwargs))
            except Exception as exc:
                _log.step_failed(KIND, name, exc)
                if config.use_decorated_error:
                    raise HistoryAwareError(exc, history) from exc
                raise

        return AsyncPipeline(_Deferred(run), config, history)

    def log(self, message: Optional[str] = None) -> "AsyncPipeline[T]":
        """Emit ``<label> -> <value>`` once the value is available; failures pass silently."""
        history = self._history
        parent = self._deferred
        config = self._config

        async def run() -> T:
            value = await parent
            _log.emit_value(KIND, history, value, level=config.log_level, message=message)
            return value

        return AsyncPipeline(_Deferred(run), config, history)

    def catch(self, handler: Callable[[BaseException], Any]) -> "AsyncPipeline[Any]":
        """
        Recover from a failure with ``handler(error)``.

        The handler may be sync or async. Its result becomes the new value; if it
        raises, that exception becomes the new failure.
        """
        parent = self._deferred

        async def run() -> Any:
            try:
                return await parent
            except Exception as exc:
                return await _settle(handler(exc))

        return AsyncPipeline(_Deferred(run), self._config, self._history)

    async def result(self) -> T:
        """Resolve to the final value or raise the final error."""
        return await self._deferred

    def __repr__(self) -> str:
        return f"AsyncPipeline(history={self._history!r})"
