"""Storage location configuration models."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator

from folio.config.base import BaseConfig
from folio.config.utils import resolve_env_reference


class StorageConfig(BaseConfig):
    """Where the working copy, the backup copy and the remote origin live."""

    remote_url: str = Field(
        "http://cdn.mikeangelo.art",
        description="Base URL of the remote origin, or 'env:VAR_NAME'",
        min_length=1,
    )
    local_path: Path = Field(Path("data"), description="Directory holding the working file")
    backup_path: Path = Field(Path("backup"), description="Directory holding the backup file")
    file_name: str = Field(
        "projects",
        description="Base name of the data file ('.json' is appended)",
        min_length=1,
    )
    remote_timeout: float = Field(10.0, gt=0, description="Timeout in seconds for the remote fetch")
    max_retries: int = Field(1, ge=1, description="Attempts made against the remote origin")
    retry_delay: float = Field(1.0, ge=0, description="Seconds to wait between remote attempts")

    @field_validator("file_name")
    @classmethod
    def _strip_extension(cls, value: str) -> str:
        if value.endswith(".json"):
            value = value[: -len(".json")]
        if not value or "/" in value or "\\" in value:
            raise ValueError("file_name must be a bare file name without directories")
        return value

    @property
    def working_file(self) -> Path:
        return self.local_path / f"{self.file_name}.json"

    @property
    def backup_file(self) -> Path:
        return self.backup_path / f"{self.file_name}.json"

    @property
    def remote_file_url(self) -> str:
        base = resolve_env_reference(self.remote_url, field="remote_url")
        return f"{base.rstrip('/')}/{self.file_name}.json"


__all__ = ["StorageConfig"]
