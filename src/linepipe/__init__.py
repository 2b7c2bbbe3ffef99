"""
linepipe: compose sync and async step functions into linear pipelines.

Key primitives
--------------
- pipe_sync() / SyncPipeline: steps run immediately; failures are captured and skip later steps
- pipe() / AsyncPipeline: steps may return awaitables; run in order when the result is awaited
- HistoryAwareError: step failure annotated with the executed step chain
- PipeConfig: options fixed at pipeline creation
- configure_logging(): Rich console output for ``log()`` lines and step diagnostics
- seq: list helpers shaped as steps
"""

from . import seq
from .aio import AsyncPipeline, pipe
from .config import ConfigError, PipeConfig, load_config, resolve_config
from .errors import HistoryAwareError, format_execution_chain
from .logging import configure_logging
from .sync import SyncPipeline, pipe_sync
from .version import __version__

__all__ = [
    "AsyncPipeline",
    "ConfigError",
    "HistoryAwareError",
    "PipeConfig",
    "SyncPipeline",
    "configure_logging",
    "format_execution_chain",
    "load_config",
    "pipe",
    "pipe_sync",
    "resolve_config",
    "seq",
    "__version__",
]
