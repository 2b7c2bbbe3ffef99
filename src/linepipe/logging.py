from __future__ import annotations

import logging
from typing import Any, Optional

from rich.logging import RichHandler

from .types import INITIAL, History

LOGGER_NAME = "linepipe"

logger = logging.getLogger(LOGGER_NAME)


class _StepContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        # Ensure `step` and `pipeline` exist for formatters
        if not hasattr(record, "step"):
            setattr(record, "step", "-")
        if not hasattr(record, "pipeline"):
            setattr(record, "pipeline", "-")
        return True


def configure_logging(*, level: int = logging.DEBUG, rich_tracebacks: bool = False) -> logging.Logger:
    """
    Attach a Rich console handler to the ``linepipe`` logger.

    Returns
    -------
    logger
        The configured ``linepipe`` logger.

    Usage example
    -------------
        configure_logging(level=logging.DEBUG)
        pipe_sync(5).next(double).log().result()
    """
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(level)
    log.handlers.clear()
    log.filters.clear()
    log.propagate = False

    log.addFilter(_StepContextFilter())

    handler = RichHandler(rich_tracebacks=rich_tracebacks, show_path=False)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    log.addHandler(handler)

    log.debug("Logging configured (level=%s)", logging.getLevelName(level))
    return log


def diagnostic_label(kind: str, history: History, message: Optional[str] = None) -> str:
    """Label for a ``log()`` line: the message, or ``[kind] <last step>``."""
    if message:
        return message
    last = history[-1] if history else INITIAL
    return f"[{kind}] {last}"


def emit_value(kind: str, history: History, value: Any, *, level: int, message: Optional[str] = None) -> None:
    """Emit the single ``<label> -> <value>`` line for a ``log()`` step."""
    logger.log(
        level,
        "%s -> %r",
        diagnostic_label(kind, history, message),
        value,
        extra={"step": history[-1] if history else INITIAL, "pipeline": kind},
    )


def step_failed(kind: str, name: str, exc: BaseException) -> None:
    logger.debug(
        "Step '%s' failed: %s (%s)",
        name,
        str(exc),
        type(exc).__name__,
        extra={"step": name, "pipeline": kind},
    )


def step_skipped(kind: str, name: str) -> None:
    logger.debug("Skipping step '%s' (pipeline already failed)", name, extra={"step": name, "pipeline": kind})
