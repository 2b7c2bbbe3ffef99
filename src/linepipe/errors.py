from __future__ import annotations

from typing import Iterable, Optional
import traceback as _traceback

from .types import History

CHAIN_HEADER = "🔗 Execution Chain:"
ORIGINAL_SEPARATOR = "↓↓↓  ORIGINAL ERROR  ↓↓↓"

# Entries shown in full before older ones are folded into "...(n)".
_VISIBLE_STEPS = 3


def format_execution_chain(history: Iterable[str]) -> str:
    """
    Render the step history as a numbered execution chain.

    The last entry is marked as the failing step. Histories longer than three
    entries are compressed to an omitted-count marker plus the last three
    steps, which keep their original positions.

    Usage example
    -------------
        format_execution_chain(["A", "B", "C", "D", "E"])
        # 🔗 Execution Chain:
        #   ...(2)
        #   3. C
        #   4. D
        #   5. ❌ ERROR in "E"
    """
    steps = list(history)
    n = len(steps)
    if n == 0:
        return f"{CHAIN_HEADER}\n"

    if n > _VISIBLE_STEPS:
        first = n - _VISIBLE_STEPS
        lines = [f"  ...({first})"]
        lines.extend(f"  {first + i + 1}. {name}" for i, name in enumerate(steps[first:]))
    else:
        lines = [f"  {i + 1}. {name}" for i, name in enumerate(steps)]

    lines[-1] = f'  {n}. ❌ ERROR in "{steps[-1]}"'
    return CHAIN_HEADER + "\n" + "\n".join(lines)


class HistoryAwareError(Exception):
    """
    Wraps an error raised by a pipeline step together with the step history.

    Attributes of the original exception are copied onto the wrapper, so code
    that inspects custom fields (``err.status_code``) keeps working. When the
    original has a traceback, ``str(err)`` shows the execution chain followed
    by the original traceback; otherwise the original message is kept as-is.

    Usage example
    -------------
        try:
            pipe_sync(5).next(parse).next(validate).result()
        except HistoryAwareError as err:
            print(err.history)   # ("parse", "validate")
            print(err.original)  # the ValueError raised in validate
    """

    def __init__(self, original: BaseException, history: Iterable[str]) -> None:
        self.original = original
        self.history: History = tuple(history)
        self.trace: Optional[str] = None

        if original.__traceback__ is not None:
            original_tb = "".join(
                _traceback.format_exception(type(original), original, original.__traceback__)
            ).rstrip("\n")
            self.trace = (
                f"{type(self).__name__}:\n"
                f"{format_execution_chain(self.history)}\n"
                f"{ORIGINAL_SEPARATOR}\n"
                f"{original_tb}"
            )

        super().__init__(self.trace if self.trace is not None else str(original))
        self.__cause__ = original

        for key, value in vars(original).items():
            if not hasattr(self, key):
                setattr(self, key, value)

    def __reduce__(self):
        # args only holds the rendered text; rebuild from the original error instead
        return (type(self), (self.original, self.history), {"trace": self.trace})

    @property
    def failed_step(self) -> Optional[str]:
        """Name of the step that raised, or None for an empty history."""
        return self.history[-1] if self.history else None
