from __future__ import annotations

from typing import Any, Callable, Generic, Optional, TypeVar

from . import logging as _log
from .config import ConfigArg, PipeConfig, resolve_config
from .errors import HistoryAwareError
from .types import Failure, History, State, Success, step_name

T = TypeVar("T")
U = TypeVar("U")

KIND = "PipeSync"


def pipe_sync(value: T, config: ConfigArg = None) -> "SyncPipeline[T]":
    """
    Start a synchronous pipeline from ``value``.

    Usage example
    -------------
        def add(x, y):
            return x + y

        pipe_sync(5).next(add, 3).next(lambda x: x * 2).result()  # 16
    """
    return SyncPipeline.create(value, config)


class SyncPipeline(Generic[T]):
    """
    Immutable chain of synchronous steps.

    Rules
    -----
    - Each ``next`` runs its function immediately and returns a new pipeline.
    - An exception raised by a step is stored, not raised; later steps are skipped
      (their names are still appended to the history).
    - ``catch`` can recover a failed pipeline with a replacement value.
    - ``result`` returns the value or raises the stored error.

    Usage example
    -------------
        out = (
            pipe_sync("10")
            .next(int)
            .next(divide, 0)        # raises ZeroDivisionError, captured
            .next(str)              # skipped
            .catch(lambda err: 0)
            .result()
        )
    """

    def __init__(self, state: State, config: PipeConfig, history: History = ()) -> None:
        self._state = state
        self._config = config
        self._history = history

    @classmethod
    def create(cls, value: T, config: ConfigArg = None) -> "SyncPipeline[T]":
        """Return a pipeline in the success state with an empty history."""
        return cls(Success(value), resolve_config(config))

    @property
    def history(self) -> History:
        return self._history

    @property
    def config(self) -> PipeConfig:
        return self._config

    @property
    def failed(self) -> bool:
        return isinstance(self._state, Failure)

    def next(self, fn: Callable[..., U], *args: Any, **kwargs: Any) -> "SyncPipeline[U]":
        """Apply ``fn(value, *args, **kwargs)`` unless the pipeline already failed."""
        name = step_name(fn)
        history = self._history + (name,)

        if isinstance(self._state, Failure):
            _log.step_skipped(KIND, name)
            return SyncPipeline(self._state, self._config, history)

        try:
            out = fn(self._state.value, *args, **kwargs)
        except Exception as exc:
            _log.step_failed(KIND, name, exc)
            error: Exception = HistoryAwareError(exc, history) if self._config.use_decorated_error else exc
            return SyncPipeline(Failure(error), self._config, history)
        return SyncPipeline(Success(out), self._config, history)

    def log(self, message: Optional[str] = None) -> "SyncPipeline[T]":
        """Emit ``<label> -> <value>`` and return this same pipeline. Silent after a failure."""
        if isinstance(self._state, Success):
            _log.emit_value(KIND, self._history, self._state.value, level=self._config.log_level, message=message)
        return self

    def catch(self, handler: Callable[[BaseException], U]) -> "SyncPipeline[Any]":
        """
        Recover from a failure with ``handler(error)``.

        The handler's return value becomes the new value; if the handler raises,
        its exception becomes the new failure. History is kept across recovery.
        """
        if isinstance(self._state, Success):
            return self

        try:
            recovered = handler(self._state.error)
        except Exception as exc:
            return SyncPipeline(Failure(exc), self._config, self._history)
        return SyncPipeline(Success(recovered), self._config, self._history)

    def result(self) -> T:
        if isinstance(self._state, Failure):
            raise self._state.error
        return self._state.value

    def __repr__(self) -> str:
        return f"SyncPipeline(state={self._state!r}, history={self._history!r})"
