# file: e164lookup/config.py
"""
Configuration loader.

- No API keys committed to the repo (the public API does not need one).
- `.env` supported for local development.
- YAML supported for non-secret defaults.
- Validated with pydantic.

Precedence (highest to lowest):
1. OS environment variables
2. `.env` values
3. YAML config file values
4. Code defaults
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, Field
from pydantic import ConfigDict as PydanticConfigDict

from e164lookup.net.http import (
    DEFAULT_BASE_URL,
    DEFAULT_REFERER,
    DEFAULT_USER_AGENT,
    HttpClientConfig,
)


class E164Settings(BaseModel):
    model_config = PydanticConfigDict(extra="ignore")

    # General
    log_level: str = "INFO"
    json_logging: bool = False

    # API
    base_url: str = DEFAULT_BASE_URL
    api_key: str | None = Field(default=None, repr=False)

    # HTTP
    http_timeout_seconds: float = Field(default=10.0, gt=0)
    http_user_agent: str = DEFAULT_USER_AGENT
    http_referer: str = DEFAULT_REFERER

    def http_config(self) -> HttpClientConfig:
        return HttpClientConfig(
            base_url=self.base_url,
            timeout_seconds=self.http_timeout_seconds,
            user_agent=self.http_user_agent,
            referer=self.http_referer,
            api_key=self.api_key or None,
        )


_ENV_MAP: dict[str, str] = {
    "E164_API_KEY": "api_key",
    "E164_BASE_URL": "base_url",
    "E164_LOG_LEVEL": "log_level",
    "E164_JSON_LOGGING": "json_logging",
    "E164_HTTP_TIMEOUT_SECONDS": "http_timeout_seconds",
    "E164_HTTP_USER_AGENT": "http_user_agent",
    "E164_HTTP_REFERER": "http_referer",
}


def _read_yaml(path: Path) -> dict[str, Any]:
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    return raw if isinstance(raw, dict) else {}


def _read_dotenv(path: Path) -> dict[str, str]:
    values = dotenv_values(path)
    return {k: v for k, v in values.items() if isinstance(k, str) and isinstance(v, str)}


def _overlay_env(target: dict[str, Any], env: dict[str, str]) -> None:
    for env_key, field_name in _ENV_MAP.items():
        if env_key in env:
            target[field_name] = env[env_key]


def load_settings(
    *, yaml_path: Path | None = None, env_path: Path | None = None
) -> E164Settings:
    """
    Load settings from YAML and .env, with OS env overrides.

    Args:
        yaml_path: Optional YAML config path (else `E164_CONFIG`).
        env_path: Optional .env path (default: `.env` if present).

    Raises:
        pydantic.ValidationError: if a value does not validate.
    """

    data: dict[str, Any] = {}

    if env_path is None:
        maybe = Path(".env")
        env_path = maybe if maybe.exists() else None

    dotenv = _read_dotenv(env_path) if env_path is not None and env_path.exists() else {}

    if yaml_path is None:
        cfg = os.environ.get("E164_CONFIG") or dotenv.get("E164_CONFIG")
        if cfg:
            yaml_path = Path(cfg)

    if yaml_path is not None and yaml_path.exists():
        data.update(_read_yaml(yaml_path))

    if dotenv:
        _overlay_env(data, dotenv)

    os_env: dict[str, str] = {k: v for k, v in os.environ.items() if k in _ENV_MAP}
    _overlay_env(data, os_env)

    return E164Settings.model_validate(data)
