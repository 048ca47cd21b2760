"""Library configuration.

Loads from environment first (a local .env is honoured), then the optional
YAML file at config/antigenics.yml (or the path in ANTIGENICS_CONFIG) for
anything the environment leaves unset.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

load_dotenv()

_DEFAULT = {
    "self_catalog_size": 32,
    "log_level": "INFO",
    "metrics_enabled": True,
}

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class AntigenicsConfig:
    self_catalog_size: int = _DEFAULT["self_catalog_size"]
    log_level: str = _DEFAULT["log_level"]
    metrics_enabled: bool = _DEFAULT["metrics_enabled"]

    def __post_init__(self):
        if not 1 <= self.self_catalog_size <= 65536:
            raise ValueError("self_catalog_size must be within 1..65536")
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"unknown log_level: {self.log_level}")


_ENV_MAP = {
    "self_catalog_size": ("ANTIGENICS_SELF_CATALOG_SIZE", int),
    "log_level": ("ANTIGENICS_LOG_LEVEL", lambda v: v.strip().upper()),
    "metrics_enabled": ("ANTIGENICS_METRICS_ENABLED", _as_bool),
}

_CONFIG: AntigenicsConfig | None = None
_ENV_SNAPSHOT: Dict[str, str | None] = {}


def _config_path() -> str:
    return os.getenv("ANTIGENICS_CONFIG", os.path.join(os.getcwd(), "config", "antigenics.yml"))


def _watched_env() -> Dict[str, str | None]:
    watched = {env: os.environ.get(env) for env, _ in _ENV_MAP.values()}
    watched["ANTIGENICS_CONFIG"] = os.environ.get("ANTIGENICS_CONFIG")
    return watched


def _read_file(path: str) -> Dict[str, Any]:
    if not os.path.exists(path):
        return {}
    with open(path, "r", encoding="utf-8") as f:
        file_cfg = yaml.safe_load(f) or {}
    if not isinstance(file_cfg, dict):
        raise ValueError(f"{path}: top level must be a mapping")
    return {k: v for k, v in file_cfg.items() if k in _DEFAULT}


def load_config() -> AntigenicsConfig:
    global _CONFIG, _ENV_SNAPSHOT
    # Rebuild when any watched environment variable changed since last load.
    if _CONFIG is not None and _watched_env() == _ENV_SNAPSHOT:
        return _CONFIG
    data: Dict[str, Any] = dict(_DEFAULT)
    data.update(_read_file(_config_path()))
    for k, (env, cast) in _ENV_MAP.items():
        if env in os.environ:
            try:
                data[k] = cast(os.environ[env])
            except ValueError as e:
                raise ValueError(f"invalid value for {env}: {os.environ[env]!r}") from e
    cfg = AntigenicsConfig(
        self_catalog_size=int(data["self_catalog_size"]),
        log_level=str(data["log_level"]).upper(),
        metrics_enabled=_as_bool(data["metrics_enabled"]),
    )
    _CONFIG = cfg
    _ENV_SNAPSHOT = _watched_env()
    return cfg


def reset_config() -> None:
    global _CONFIG, _ENV_SNAPSHOT
    _CONFIG = None
    _ENV_SNAPSHOT = {}


__all__ = ["AntigenicsConfig", "load_config", "reset_config"]
