"""Application-level configuration models."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator

from folio.config.base import BaseConfig
from folio.config.storage import StorageConfig
from folio.config.web import AuthConfig, CorsConfig, ServerConfig

_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class AppConfig(BaseConfig):
    """Top-level runtime configuration for the folio service."""

    logging_level: str = Field("INFO", description="Log level: DEBUG, INFO, WARNING, ERROR")
    log_file: Path | None = Field(None, description="Optional file sink for logs")
    server: ServerConfig = Field(default_factory=ServerConfig, description="API server binding")
    storage: StorageConfig = Field(default_factory=StorageConfig, description="Storage locations")
    auth: AuthConfig = Field(default_factory=AuthConfig, description="Mutating endpoint authentication")
    cors: CorsConfig = Field(default_factory=CorsConfig, description="Cross-origin policy")

    @field_validator("logging_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown logging level '{value}'")
        return level


DEFAULT_CONFIG_TOML = """\
logging_level = "INFO"

[server]
host = "127.0.0.1"
port = 1234

[storage]
remote_url = "http://cdn.mikeangelo.art"
local_path = "data"
backup_path = "backup"
file_name = "projects"
remote_timeout = 10.0
max_retries = 1
retry_delay = 1.0

[auth]
passkey_path = "key/pass.key"

[cors]
allow_origins = ["*"]
"""


__all__ = ["AppConfig", "DEFAULT_CONFIG_TOML"]
