from __future__ import annotations

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from shellutils.config import (
    ENV_CONFIG,
    ENV_DRY_RUN,
    ENV_LOG_LEVEL,
    Settings,
    configure_logging,
    get_settings,
    load_settings,
    reset_settings,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for name in (ENV_CONFIG, ENV_DRY_RUN, ENV_LOG_LEVEL):
        monkeypatch.delenv(name, raising=False)
    reset_settings()


def test_defaults_when_no_config_file(tmp_path: Path) -> None:
    settings = load_settings(tmp_path / "missing.yaml")
    assert settings == Settings()
    assert settings.dry_run is False


def test_load_from_yaml(tmp_path: Path) -> None:
    cfg = tmp_path / "shellutils.yaml"
    cfg.write_text("dry_run: true\nlog_level: DEBUG\n", encoding="utf-8")
    settings = load_settings(cfg)
    assert settings.dry_run is True
    assert settings.log_level == "DEBUG"


def test_config_path_from_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    cfg = tmp_path / "custom.yaml"
    cfg.write_text("dry_run: true\n", encoding="utf-8")
    monkeypatch.setenv(ENV_CONFIG, str(cfg))
    assert load_settings().dry_run is True


def test_env_overrides_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    cfg = tmp_path / "shellutils.yaml"
    cfg.write_text("dry_run: true\nlog_level: INFO\n", encoding="utf-8")
    monkeypatch.setenv(ENV_DRY_RUN, "no")
    monkeypatch.setenv(ENV_LOG_LEVEL, "ERROR")
    settings = load_settings(cfg)
    assert settings.dry_run is False
    assert settings.log_level == "ERROR"


def test_non_mapping_yaml_is_rejected(tmp_path: Path) -> None:
    cfg = tmp_path / "shellutils.yaml"
    cfg.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_settings(cfg)


def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    cfg = tmp_path / "shellutils.yaml"
    cfg.write_text("dry-run: true\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        load_settings(cfg)


def test_get_settings_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(ENV_DRY_RUN, "1")
    first = get_settings()
    monkeypatch.setenv(ENV_DRY_RUN, "0")
    assert get_settings() is first
    reset_settings()
    assert get_settings().dry_run is False


def test_configure_logging_sets_level() -> None:
    logger = configure_logging(Settings(log_level="debug"))
    try:
        assert logger.name == "shellutils"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        configure_logging(Settings(log_level="info"))
        assert len(logger.handlers) == 1
        assert logger.level == logging.INFO
    finally:
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
