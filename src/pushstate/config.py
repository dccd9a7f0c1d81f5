"""Configuration loader.

Settings come from a YAML file, then environment variables, then CLI flags
(highest wins). Example:

    store:
      path: state/pushstate.json
      checksum: sha256
      file_mode: "0644"
      fsync: true
    logging:
      level: INFO
      log_dir: null

Environment overrides:
- PUSHSTATE_STATE_FILE -> store.path
- PUSHSTATE_CHECKSUM   -> store.checksum
- PUSHSTATE_LOG_LEVEL  -> logging.level
"""

from __future__ import annotations
import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional
import yaml

DEFAULT_STATE_FILE = "state/pushstate.json"

ENV_STATE_FILE = "PUSHSTATE_STATE_FILE"
ENV_CHECKSUM = "PUSHSTATE_CHECKSUM"
ENV_LOG_LEVEL = "PUSHSTATE_LOG_LEVEL"


@dataclass(frozen=True)
class StoreConfig:
    path: str = DEFAULT_STATE_FILE
    checksum: str = "sha256"
    file_mode: Optional[int] = 0o644
    fsync: bool = True


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    log_dir: Optional[str] = None


@dataclass(frozen=True)
class Settings:
    store: StoreConfig = field(default_factory=StoreConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _parse_mode(value: Any) -> Optional[int]:
    """Accept 420, "0644", "644" or null."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    return int(str(value), 8)


def settings_from_dict(cfg: Mapping[str, Any]) -> Settings:
    store = cfg.get("store") or {}
    logging_cfg = cfg.get("logging") or {}
    defaults = StoreConfig()
    return Settings(
        store=StoreConfig(
            path=str(store.get("path") or defaults.path),
            checksum=str(store.get("checksum") or defaults.checksum),
            file_mode=_parse_mode(store.get("file_mode", defaults.file_mode)),
            fsync=bool(store.get("fsync", defaults.fsync)),
        ),
        logging=LoggingConfig(
            level=str(logging_cfg.get("level") or "INFO").upper(),
            log_dir=logging_cfg.get("log_dir"),
        ),
    )


def apply_env(settings: Settings, environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    store = settings.store
    log_cfg = settings.logging
    if env.get(ENV_STATE_FILE):
        store = replace(store, path=env[ENV_STATE_FILE])
    if env.get(ENV_CHECKSUM):
        store = replace(store, checksum=env[ENV_CHECKSUM])
    if env.get(ENV_LOG_LEVEL):
        log_cfg = replace(log_cfg, level=env[ENV_LOG_LEVEL].upper())
    return Settings(store=store, logging=log_cfg)


def load_settings(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Resolve settings from an optional YAML file plus the environment."""
    cfg = load_yaml(path) if path else {}
    return apply_env(settings_from_dict(cfg), environ)
