from __future__ import annotations

import logging
from pathlib import Path

import pytest

from linepipe.config import ConfigError, PipeConfig, load_config, resolve_config


def test_defaults() -> None:
    cfg = resolve_config(None)
    assert cfg.use_decorated_error is True
    assert cfg.log_level == logging.INFO


def test_resolve_returns_same_instance() -> None:
    cfg = PipeConfig(use_decorated_error=False)
    assert resolve_config(cfg) is cfg


def test_resolve_mapping_merges_over_defaults() -> None:
    cfg = resolve_config({"use_decorated_error": False})
    assert cfg.use_decorated_error is False
    assert cfg.log_level == logging.INFO

    cfg = resolve_config({"log_level": "debug"})
    assert cfg.use_decorated_error is True
    assert cfg.log_level == logging.DEBUG


def test_resolve_rejects_unknown_keys_and_bad_types() -> None:
    with pytest.raises(ConfigError, match="Unknown config keys: useDecoratedError"):
        resolve_config({"useDecoratedError": False})
    with pytest.raises(ConfigError, match="must be a bool"):
        resolve_config({"use_decorated_error": "no"})
    with pytest.raises(ConfigError, match="Invalid log level"):
        resolve_config({"log_level": "LOUD"})
    with pytest.raises(ConfigError):
        resolve_config(["use_decorated_error"])  # type: ignore[arg-type]


def test_config_is_frozen() -> None:
    cfg = PipeConfig()
    with pytest.raises(Exception):
        cfg.use_decorated_error = False  # type: ignore[misc]


def test_from_env_reads_overrides(monkeypatch) -> None:
    monkeypatch.setenv("LINEPIPE_USE_DECORATED_ERROR", "0")
    monkeypatch.setenv("LINEPIPE_LOG_LEVEL", "WARNING")

    cfg = PipeConfig.from_env()

    assert cfg.use_decorated_error is False
    assert cfg.log_level == logging.WARNING


def test_from_env_invalid_values_fall_back(monkeypatch) -> None:
    base = PipeConfig(log_level=logging.DEBUG)

    monkeypatch.setenv("LINEPIPE_USE_DECORATED_ERROR", "maybe")  # treated as truthy
    monkeypatch.setenv("LINEPIPE_LOG_LEVEL", "abc")

    cfg = PipeConfig.from_env(default=base)

    assert cfg.use_decorated_error is True
    assert cfg.log_level == logging.DEBUG


def test_from_env_respects_prefix(monkeypatch) -> None:
    base = PipeConfig(env_prefix="APP_")
    monkeypatch.setenv("APP_LOG_LEVEL", "10")

    cfg = PipeConfig.from_env(default=base)

    assert cfg.log_level == 10
    assert cfg.env_prefix == "APP_"


def test_load_config_section_and_top_level(tmp_path: Path) -> None:
    p = tmp_path / "linepipe.yaml"
    p.write_text("linepipe:\n  use_decorated_error: false\n  log_level: DEBUG\n", encoding="utf-8")
    cfg = load_config(p)
    assert cfg.use_decorated_error is False
    assert cfg.log_level == logging.DEBUG

    q = tmp_path / "flat.yaml"
    q.write_text("use_decorated_error: true\n", encoding="utf-8")
    assert load_config(q).use_decorated_error is True


def test_load_config_empty_file_gives_defaults(tmp_path: Path) -> None:
    p = tmp_path / "empty.yaml"
    p.write_text("", encoding="utf-8")
    assert load_config(p) == PipeConfig()


def test_load_config_requires_mapping(tmp_path: Path) -> None:
    p = tmp_path / "cfg.yaml"
    p.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="YAML mapping"):
        load_config(p)
