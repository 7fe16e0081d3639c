"""Base configuration model and TOML loaders."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import TypeVar

from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError

ConfigT = TypeVar("ConfigT", bound="BaseConfig")


class BaseConfig(BaseModel):
    """Common base for every configuration model."""

    model_config = ConfigDict(extra="forbid", frozen=True)


def load_config(model: type[ConfigT], path: Path) -> ConfigT:
    """Load ``path`` as TOML and validate it against ``model``.

    Raises :class:`FileNotFoundError` when the file is missing,
    :class:`ValueError` (``tomllib.TOMLDecodeError``) for invalid TOML and
    :class:`pydantic.ValidationError` when the content does not match.
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with path.open("rb") as handle:
        data = tomllib.load(handle)
    return model.model_validate(data)


def load_or_create_config(model: type[ConfigT], path: Path, default_text: str) -> ConfigT:
    """Load ``path``, synthesizing a default file when it is absent or broken.

    A malformed file is moved aside to ``<name>.bak`` before the default is
    written, then the default is loaded.
    """

    path = Path(path)
    try:
        return load_config(model, path)
    except FileNotFoundError:
        logger.info("Configuration file {} not found; creating defaults", path)
    except (ValueError, ValidationError) as exc:
        backup = path.with_name(path.name + ".bak")
        logger.error("Failed to parse configuration file {}: {}", path, exc)
        logger.warning("Moving broken configuration to {} and writing defaults", backup)
        path.replace(backup)

    write_default_config(path, default_text)
    return load_config(model, path)


def write_default_config(path: Path, default_text: str) -> Path:
    """Write ``default_text`` to ``path``, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(default_text, encoding="utf-8")
    logger.info("Configuration file written to {}", path)
    return path


__all__ = ["BaseConfig", "load_config", "load_or_create_config", "write_default_config"]
