"""HTTP server, CORS and authentication configuration models."""

from __future__ import annotations

from ipaddress import IPv4Address
from pathlib import Path

from pydantic import Field

from folio.config.base import BaseConfig


class ServerConfig(BaseConfig):
    """Address the API server binds to."""

    host: IPv4Address = Field(IPv4Address("127.0.0.1"), description="IPv4 address to bind")
    port: int = Field(1234, ge=1, le=65535, description="TCP port to bind")

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


class AuthConfig(BaseConfig):
    """Settings for the shared-secret gate on mutating endpoints."""

    passkey_path: Path = Field(
        Path("key/pass.key"),
        description="File holding the shared secret, compared verbatim",
    )


class CorsConfig(BaseConfig):
    """Cross-origin policy applied to every route."""

    allow_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the API",
    )


__all__ = ["AuthConfig", "CorsConfig", "ServerConfig"]
