"""Application configuration.

Loaded from ``KITSTOCK_*`` environment variables and an optional ``.env``
file. Use ``get_config()`` everywhere; tests override values with
``set_config_for_test()``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

# Repo root when installed in editable mode.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"


class AppConfig(BaseSettings):
    """Typed settings for the inventory engine."""

    # Application
    app_env: str = "local"
    log_level: str = "INFO"

    # Storage
    storage_backend: Literal["json", "sql"] = "json"
    data_dir: Path = _DEFAULT_DATA_DIR
    database_url: str = "sqlite:///kitstock.db"
    stock_update_retries: int = 3

    # Stock policy
    fee_set_id: int = -1
    clamp_over_deduction: bool = True

    model_config = SettingsConfigDict(
        env_prefix="KITSTOCK_", env_file=".env", env_file_encoding="utf-8"
    )


_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Return the AppConfig instance (singleton)."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config


def set_config_for_test(**kwargs) -> AppConfig:
    """For testing only: replace the AppConfig instance with new values."""
    global _config
    _config = AppConfig(**kwargs)
    return _config


def reset_config() -> None:
    global _config
    _config = None
