"""Configuration namespace for folio."""

from __future__ import annotations

from .app import DEFAULT_CONFIG_TOML, AppConfig
from .base import BaseConfig, load_config, load_or_create_config, write_default_config
from .storage import StorageConfig
from .web import AuthConfig, CorsConfig, ServerConfig

__all__ = [
    "BaseConfig",
    "AppConfig",
    "DEFAULT_CONFIG_TOML",
    "AuthConfig",
    "CorsConfig",
    "ServerConfig",
    "StorageConfig",
    "load_config",
    "load_or_create_config",
    "write_default_config",
]
