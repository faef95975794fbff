from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict

ENV_CONFIG = "SHELLUTILS_CONFIG"
ENV_DRY_RUN = "SHELLUTILS_DRY_RUN"
ENV_LOG_LEVEL = "SHELLUTILS_LOG_LEVEL"

DEFAULT_CONFIG_PATH = Path("~/.config/shellutils.yaml")
TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    dry_run: bool = False
    log_level: str = "WARNING"
    log_format: str = "%(levelname)s: %(message)s"


def config_path(path: str | Path | None = None) -> Path:
    if path is not None:
        return Path(path)
    env = os.environ.get(ENV_CONFIG, "").strip()
    if env:
        return Path(env).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValueError(f"Config {path} must be a YAML mapping")
    return payload


def load_settings(path: str | Path | None = None) -> Settings:
    """
    Load settings from YAML, then apply environment overrides.
    - explicit path, else $SHELLUTILS_CONFIG, else ~/.config/shellutils.yaml
    - missing file -> defaults
    """
    raw = _read_yaml(config_path(path))

    dry_run = os.environ.get(ENV_DRY_RUN)
    if dry_run is not None and dry_run.strip():
        raw["dry_run"] = dry_run.strip().lower() in TRUTHY
    log_level = os.environ.get(ENV_LOG_LEVEL, "").strip()
    if log_level:
        raw["log_level"] = log_level

    return Settings.model_validate(raw)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


def reset_settings() -> None:
    get_settings.cache_clear()


def configure_logging(settings: Settings | None = None) -> logging.Logger:
    settings = settings if settings is not None else get_settings()
    logger = logging.getLogger("shellutils")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(settings.log_format))
        logger.addHandler(handler)
    logger.setLevel(settings.log_level.upper())
    return logger
