from __future__ import annotations

import logging

from rich.logging import RichHandler

from linepipe.logging import LOGGER_NAME, configure_logging, diagnostic_label


def test_configure_logging_installs_rich_handler() -> None:
    log = configure_logging(level=logging.WARNING)

    assert log.name == LOGGER_NAME
    assert log.level == logging.WARNING
    assert log.propagate is False
    assert len(log.handlers) == 1
    assert isinstance(log.handlers[0], RichHandler)


def test_configure_logging_is_idempotent() -> None:
    configure_logging()
    log = configure_logging()
    assert len(log.handlers) == 1
    assert len(log.filters) == 1


def test_filter_injects_step_defaults() -> None:
    log = configure_logging(level=logging.CRITICAL)
    record = log.makeRecord(LOGGER_NAME, logging.INFO, __file__, 1, "hello", (), None)

    assert log.filter(record)
    assert record.step == "-"  # type: ignore[attr-defined]
    assert record.pipeline == "-"  # type: ignore[attr-defined]


def test_diagnostic_label() -> None:
    assert diagnostic_label("PipeSync", ()) == "[PipeSync] INITIAL"
    assert diagnostic_label("PipeAsync", ("a", "b")) == "[PipeAsync] b"
    assert diagnostic_label("PipeSync", ("a",), "Custom:") == "Custom:"
