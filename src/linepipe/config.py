from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping, Optional, Union
import logging
import os

import yaml


class ConfigError(ValueError):
    """Raised when pipeline configuration is missing or invalid."""


@dataclass(frozen=True)
class PipeConfig:
    """
    Options fixed at pipeline creation and shared by every derived pipeline.

    Parameters
    ----------
    use_decorated_error
        If True, errors raised by a step are wrapped in ``HistoryAwareError``
        carrying the step history. If False, the raw error propagates.
    log_level
        Logging level used for the ``log()`` diagnostic line.
    env_prefix
        Prefix for environment-variable overrides read by ``from_env``.

    Usage example
    -------------
        cfg = PipeConfig(use_decorated_error=False)
        result = pipe_sync(5, cfg).next(double).result()
    """

    use_decorated_error: bool = True
    log_level: int = logging.INFO

    env_prefix: str = field(default="LINEPIPE_", repr=False)

    @classmethod
    def from_env(cls, *, default: Optional["PipeConfig"] = None) -> "PipeConfig":
        """
        Create config from environment variables.

        Supported variables (prefix controlled by env_prefix on `default`):
        - <PFX>USE_DECORATED_ERROR: "1"/"0"
        - <PFX>LOG_LEVEL: level name ("DEBUG") or integer

        Invalid values fall back to the value on `default`.

        Usage example
        -------------
            cfg = PipeConfig.from_env()
        """
        base = default if default is not None else cls()
        pfx = base.env_prefix

        use_raw = os.getenv(f"{pfx}USE_DECORATED_ERROR", "1" if base.use_decorated_error else "0").strip()
        use_decorated_error = use_raw not in ("0", "false", "False", "")

        log_level = base.log_level
        level_raw = os.getenv(f"{pfx}LOG_LEVEL", "").strip()
        if level_raw:
            try:
                log_level = _parse_level(level_raw)
            except ConfigError:
                log_level = base.log_level

        return cls(
            use_decorated_error=use_decorated_error,
            log_level=log_level,
            env_prefix=pfx,
        )


ConfigArg = Union[None, PipeConfig, Mapping[str, Any]]


def _parse_level(raw: Any) -> int:
    if isinstance(raw, bool):
        raise ConfigError(f"Invalid log level: {raw!r}")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if text.isdigit():
            return int(text)
        level = logging.getLevelName(text.upper())
        if isinstance(level, int):
            return level
    raise ConfigError(f"Invalid log level: {raw!r}")


def resolve_config(config: ConfigArg = None) -> PipeConfig:
    """
    Normalize the optional ``config`` argument accepted by pipeline factories.

    ``None`` yields the defaults, a ``PipeConfig`` is returned as-is and a
    mapping is merged over the defaults. Unknown keys raise ``ConfigError``.
    """
    if config is None:
        return PipeConfig()
    if isinstance(config, PipeConfig):
        return config
    if not isinstance(config, Mapping):
        raise ConfigError(f"Config must be a PipeConfig or a mapping, got {type(config).__name__}.")

    known = {f.name for f in fields(PipeConfig)}
    unknown = sorted(set(config) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(map(str, unknown))}")

    kwargs: dict[str, Any] = {}
    if "use_decorated_error" in config:
        value = config["use_decorated_error"]
        if not isinstance(value, bool):
            raise ConfigError(f"use_decorated_error must be a bool, got {value!r}")
        kwargs["use_decorated_error"] = value
    if "log_level" in config:
        kwargs["log_level"] = _parse_level(config["log_level"])
    if "env_prefix" in config:
        kwargs["env_prefix"] = str(config["env_prefix"])
    return PipeConfig(**kwargs)


def load_config(path: Path) -> PipeConfig:
    """
    Load a ``PipeConfig`` from a YAML file.

    The options may sit at the top level or under a ``linepipe:`` section.

    Usage example
    -------------
        cfg = load_config(Path("linepipe.yaml"))
    """
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw is None:
        return PipeConfig()
    if not isinstance(raw, dict):
        raise ConfigError("Config must be a YAML mapping at top level.")
    section = raw.get("linepipe", raw)
    if not isinstance(section, dict):
        raise ConfigError("The 'linepipe' section must be a YAML mapping.")
    return resolve_config(section)
