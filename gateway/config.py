"""Configuration loading for the gateway."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_TASKNOTES_API_URL = "http://obsidian:8087/api"
DEFAULT_GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GEMINI_MODEL = "gemini-3-flash-preview"


class ConfigError(RuntimeError):
    """Raised when configuration is missing or invalid."""


@dataclass(frozen=True)
class AppConfig:
    tasknotes_api_url: str
    tasknotes_timeout: float
    gemini_api_key: str | None
    gemini_model: str
    gemini_api_url: str
    gemini_timeout: float
    project_cache_ttl: float
    service_token: str | None
    log_level: str
    log_json: bool


def _read_dotenv_value(dotenv_path: Path, key: str) -> str | None:
    """Read a single key from a .env file without mutating the environment."""
    if not dotenv_path.is_file():
        return None
    try:
        content = dotenv_path.read_text(encoding="utf-8")
    except OSError:
        return None

    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if stripped.startswith("export "):
            stripped = stripped[len("export ") :].strip()
        if "=" not in stripped:
            continue
        name, value = stripped.split("=", 1)
        name = name.strip()
        if name != key:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        return value or None
    return None


def _read_setting(dotenv_path: Path, key: str) -> str | None:
    raw_value = os.environ.get(key)
    if raw_value is None:
        raw_value = _read_dotenv_value(dotenv_path, key)
    if raw_value is None:
        return None
    raw_value = raw_value.strip()
    return raw_value or None


def _read_bool(raw_value: str | None, *, default: bool, key: str) -> bool:
    if raw_value is None:
        return default
    normalized = raw_value.strip().lower()
    if not normalized:
        return default
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ConfigError(f"{key} must be a boolean value.")


def _read_seconds(raw_value: str | None, *, default: float, key: str) -> float:
    if raw_value is None:
        return default
    try:
        seconds = float(raw_value)
    except ValueError:
        raise ConfigError(f"{key} must be a number of seconds.") from None
    if seconds < 0:
        raise ConfigError(f"{key} must not be negative.")
    return seconds


def load_config() -> AppConfig:
    """Load gateway configuration from the environment and an optional .env."""
    dotenv_path = Path.cwd() / ".env"

    api_url = _read_setting(dotenv_path, "TASKNOTES_API_URL")
    api_url = (api_url or DEFAULT_TASKNOTES_API_URL).rstrip("/")

    tasknotes_timeout_key = "TASKNOTES_REQUEST_TIMEOUT"
    tasknotes_timeout = _read_seconds(
        _read_setting(dotenv_path, tasknotes_timeout_key),
        default=10.0,
        key=tasknotes_timeout_key,
    )

    gemini_timeout_key = "GEMINI_REQUEST_TIMEOUT"
    gemini_timeout = _read_seconds(
        _read_setting(dotenv_path, gemini_timeout_key),
        default=30.0,
        key=gemini_timeout_key,
    )

    cache_ttl_key = "TASKNOTES_GATEWAY_PROJECT_CACHE_TTL"
    project_cache_ttl = _read_seconds(
        _read_setting(dotenv_path, cache_ttl_key), default=0.0, key=cache_ttl_key
    )

    log_json_key = "TASKNOTES_GATEWAY_LOG_JSON"
    log_json = _read_bool(
        _read_setting(dotenv_path, log_json_key), default=False, key=log_json_key
    )

    log_level = _read_setting(dotenv_path, "TASKNOTES_GATEWAY_LOG_LEVEL") or "INFO"

    gemini_api_url = _read_setting(dotenv_path, "GEMINI_API_URL")
    return AppConfig(
        tasknotes_api_url=api_url,
        tasknotes_timeout=tasknotes_timeout,
        gemini_api_key=_read_setting(dotenv_path, "GEMINI_API_KEY"),
        gemini_model=_read_setting(dotenv_path, "GEMINI_MODEL")
        or DEFAULT_GEMINI_MODEL,
        gemini_api_url=(gemini_api_url or DEFAULT_GEMINI_API_URL).rstrip("/"),
        gemini_timeout=gemini_timeout,
        project_cache_ttl=project_cache_ttl,
        service_token=_read_setting(
            dotenv_path, "TASKNOTES_GATEWAY_SERVICE_TOKEN"
        ),
        log_level=log_level.upper(),
        log_json=log_json,
    )
