from __future__ import annotations

import logging
from typing import Iterator

import pytest


@pytest.fixture(autouse=True)
def _reset_linepipe_logger() -> Iterator[None]:
    yield
    # configure_logging() disables propagation, which would hide records from caplog
    log = logging.getLogger("linepipe")
    log.handlers.clear()
    log.filters.clear()
    log.setLevel(logging.NOTSET)
    log.propagate = True
