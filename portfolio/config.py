"""Configuration management."""

import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel

CONFIG_ENV_VAR = "PORTFOLIO_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "config.yaml"


class Config(BaseModel):
    """Site backend configuration."""

    contact_recipient: str
    sender_address: Optional[str] = None
    email_backend: Literal["log", "gmail"] = "log"
    email_delay_seconds: float = 1.0
    log_level: str = "INFO"
    log_dir: Optional[Path] = None
    host: str = "127.0.0.1"
    port: int = 8000
    api_base_url: str = "http://127.0.0.1:8000"
    success_display_seconds: float = 3.0
    request_timeout: float = 10.0


_config: Optional[Config] = None


def resolve_config_path(config_path: Optional[Path] = None) -> Path:
    """Explicit path first, then $PORTFOLIO_CONFIG, then config/config.yaml."""
    if config_path is not None:
        return Path(config_path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load site configuration from YAML, caching the result."""
    global _config

    if _config is not None:
        return _config

    path = resolve_config_path(config_path)
    if not path.exists():
        raise FileNotFoundError(
            f"Site config not found at {path}. "
            f"Copy config/config.yaml.example there or point {CONFIG_ENV_VAR} at your file."
        )

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    _config = Config(**data)
    return _config


def get_config() -> Config:
    """Get the loaded configuration, loading it on first use."""
    return _config if _config is not None else load_config()


def reset_config() -> None:
    """Forget the cached configuration so the next load reads the file again."""
    global _config
    _config = None
