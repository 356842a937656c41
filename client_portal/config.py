"""Configuration for the client portal.

Loads from YAML config file with environment variable overrides.
Pattern: CONFIG__{SECTION}__{KEY} overrides nested YAML keys.
Example: CONFIG__DISPLAY__RECENT_LIMIT=10
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


class ApiConfig(BaseModel):
    base_url: str = "http://localhost:5000"
    timeout_s: float = 10.0
    session_cookie_name: str = "connect.sid"
    session_cookie: str = ""  # from env: PORTAL_SESSION_COOKIE


class DisplayConfig(BaseModel):
    currency_symbol: str = "$"
    date_format: str = "%m/%d/%Y"
    recent_limit: int = Field(default=5, ge=1, description="Rows per dashboard list")
    copy_feedback_s: float = 2.0


class PortalConfig(BaseModel):
    api: ApiConfig = ApiConfig()
    display: DisplayConfig = DisplayConfig()


def _apply_env_overrides(config_dict: dict, prefix: str = "CONFIG") -> dict:
    """Apply environment variable overrides to config dict.

    Pattern: CONFIG__SECTION__KEY=value maps to config[section][key] = value
    """
    for key, value in os.environ.items():
        if not key.startswith(f"{prefix}__"):
            continue
        parts = key[len(prefix) + 2 :].lower().split("__")
        target = config_dict
        for part in parts[:-1]:
            target = target.setdefault(part, {})
        if value.lower() in ("true", "false"):
            value = value.lower() == "true"
        elif value.isdigit():
            value = int(value)
        target[parts[-1]] = value
    return config_dict


def load_config(config_path: Optional[str] = None) -> PortalConfig:
    """Load configuration from YAML file with env overrides.

    Priority: env vars > YAML file > defaults
    """
    config_dict = {}

    if config_path is None:
        config_path = os.getenv("CONFIG_PATH", "config/portal.yml")
    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            config_dict = yaml.safe_load(f) or {}

    config_dict = _apply_env_overrides(config_dict)

    # Session cookie from dedicated env var
    config_dict.setdefault("api", {})
    if not config_dict["api"].get("session_cookie"):
        config_dict["api"]["session_cookie"] = os.getenv("PORTAL_SESSION_COOKIE", "")

    return PortalConfig(**config_dict)


_config: Optional[PortalConfig] = None


def get_config() -> PortalConfig:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(config_path: Optional[str] = None) -> PortalConfig:
    global _config
    _config = load_config(config_path)
    return _config
