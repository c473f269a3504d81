"""設定読み込みとグローバル設定ストア。"""

from __future__ import annotations

import logging
import pathlib
from dataclasses import dataclass
from typing import Any, Optional

import tomli

from tasklens.paths import get_default_config_file_path, get_default_database_url, resolve_path_under_app_root


DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FILE_PATH = "logs/tasklens.log"
DEFAULT_QUICK_MEMO_LIMIT = 50

_ALLOWED_KEYS = {"log_level", "database_url", "log_file_enabled", "log_file_path", "quick_memo_limit"}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class Config:
    """TOML起動設定（起動時のみ使用、変更不可）。"""

    log_level: str
    database_url: str
    log_file_enabled: bool = False
    log_file_path: str = DEFAULT_LOG_FILE_PATH
    quick_memo_limit: int = DEFAULT_QUICK_MEMO_LIMIT


def default_config() -> Config:
    """設定ファイルが無い場合に使う既定値。"""
    return Config(
        log_level=DEFAULT_LOG_LEVEL,
        database_url=get_default_database_url(),
    )


def _str_value(data: dict, key: str, default: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"config key '{key}' must be a non-empty string")
    return value.strip()


def _parse_log_level(data: dict) -> str:
    level = _str_value(data, "log_level", DEFAULT_LOG_LEVEL).upper()
    if level not in _LOG_LEVELS:
        raise ValueError(f"config key 'log_level' must be one of {sorted(_LOG_LEVELS)}")
    return level


def _parse_quick_memo_limit(data: dict) -> int:
    value: Any = data.get("quick_memo_limit", DEFAULT_QUICK_MEMO_LIMIT)
    # bool は int のサブクラスなので明示的に弾く
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError("config key 'quick_memo_limit' must be a positive integer")
    return value


def load_config(path: Optional[str | pathlib.Path] = None) -> Config:
    """TOML設定を読み込む。ファイルが無ければ既定値を返す。"""
    config_path = pathlib.Path(path) if path is not None else get_default_config_file_path()
    if not config_path.exists():
        logging.getLogger(__name__).debug("config file not found, using defaults: %s", config_path)
        return default_config()

    with config_path.open("rb") as f:
        data = tomli.load(f)

    unknown_keys = sorted(set(data.keys()) - _ALLOWED_KEYS)
    if unknown_keys:
        keys = ", ".join(repr(k) for k in unknown_keys)
        allowed = ", ".join(repr(k) for k in sorted(_ALLOWED_KEYS))
        raise ValueError(f"unknown config key(s): {keys} (allowed: {allowed})")

    log_file_enabled = data.get("log_file_enabled", False)
    if not isinstance(log_file_enabled, bool):
        raise ValueError("config key 'log_file_enabled' must be a boolean")

    database_url = data.get("database_url")
    if database_url is None:
        database_url = get_default_database_url()
    else:
        database_url = _str_value(data, "database_url", "")

    return Config(
        log_level=_parse_log_level(data),
        database_url=database_url,
        log_file_enabled=log_file_enabled,
        log_file_path=str(resolve_path_under_app_root(_str_value(data, "log_file_path", DEFAULT_LOG_FILE_PATH))),
        quick_memo_limit=_parse_quick_memo_limit(data),
    )


_config: Config | None = None


def set_global_config(config: Config) -> None:
    """グローバル設定を設定。"""
    global _config
    _config = config


def get_config() -> Config:
    """グローバル設定を取得。"""
    global _config
    if _config is None:
        raise RuntimeError("Config not initialized")
    return _config
