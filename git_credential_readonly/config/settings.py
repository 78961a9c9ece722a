"""Helper configuration loader.

The config file is optional; every key has a default matching git's own
credential store location.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from git_credential_readonly.core.matcher import PATH_POLICIES

CONFIG_ENV_VAR = "GIT_CREDENTIAL_READONLY_CONFIG"
DEFAULT_CONFIG_FILE = "~/.config/git-credential-readonly/config.yaml"
DEFAULT_STORE_FILE = "~/.git-credentials"
DEFAULT_LOG_FILE = "~/.cache/git-credential-readonly.log"
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}


@dataclass(frozen=True)
class StoreConfig:
    file: str = DEFAULT_STORE_FILE
    decode_fields: bool = True
    require_path: bool = False


@dataclass(frozen=True)
class MatchConfig:
    path_policy: str = "owner"


@dataclass(frozen=True)
class LoggingConfig:
    debug: bool = False
    file: str = DEFAULT_LOG_FILE
    level: str = "DEBUG"


@dataclass(frozen=True)
class HelperConfig:
    store: StoreConfig = field(default_factory=StoreConfig)
    match: MatchConfig = field(default_factory=MatchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoadError(RuntimeError):
    """Raised when the helper config cannot be loaded."""


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key, {})
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigLoadError(f"{key} must be an object")
    return value


def _bool(section: dict[str, Any], key: str, default: bool, prefix: str) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ConfigLoadError(f"{prefix}.{key} must be true or false")
    return value


def _path(section: dict[str, Any], key: str, default: str, prefix: str) -> str:
    value = str(section.get(key, default)).strip()
    if not value:
        raise ConfigLoadError(f"{prefix}.{key} must not be empty")
    return value


def default_config_path(env: Mapping[str, str]) -> str:
    return env.get(CONFIG_ENV_VAR, "").strip() or DEFAULT_CONFIG_FILE


def load_config(path: Optional[Path], required: bool = False) -> HelperConfig:
    if path is None:
        return HelperConfig()
    if not path.exists():
        if required:
            raise ConfigLoadError(f"config file not found: {path}")
        return HelperConfig()

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigLoadError(f"cannot read config {path}: {exc}") from exc
    if raw is None:
        return HelperConfig()
    if not isinstance(raw, dict):
        raise ConfigLoadError("config root must be an object")

    store_raw = _section(raw, "store")
    match_raw = _section(raw, "match")
    logging_raw = _section(raw, "logging")

    path_policy = str(match_raw.get("path_policy", "owner")).strip().lower()
    if path_policy not in PATH_POLICIES:
        raise ConfigLoadError(f"invalid match.path_policy: {path_policy}")

    level = str(logging_raw.get("level", "DEBUG")).strip().upper()
    if level not in LOG_LEVELS:
        raise ConfigLoadError(f"invalid logging.level: {level}")

    return HelperConfig(
        store=StoreConfig(
            file=_path(store_raw, "file", DEFAULT_STORE_FILE, "store"),
            decode_fields=_bool(store_raw, "decode_fields", True, "store"),
            require_path=_bool(store_raw, "require_path", False, "store"),
        ),
        match=MatchConfig(path_policy=path_policy),
        logging=LoggingConfig(
            debug=_bool(logging_raw, "debug", False, "logging"),
            file=_path(logging_raw, "file", DEFAULT_LOG_FILE, "logging"),
            level=level,
        ),
    )
