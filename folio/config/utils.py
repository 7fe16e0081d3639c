"""Helpers shared by the configuration models."""

from __future__ import annotations

import os

_ENV_PREFIX = "env:"


def resolve_env_reference(value: str, *, field: str = "value") -> str:
    """Return ``value``, or the variable it names when written as ``env:VAR``.

    Raises :class:`EnvironmentError` when the referenced variable is unset or
    empty. ``field`` names the setting in that error message.
    """

    if not value.startswith(_ENV_PREFIX):
        return value

    var_name = value[len(_ENV_PREFIX) :]
    resolved = os.getenv(var_name)
    if not resolved:
        raise EnvironmentError(f"Environment variable '{var_name}' for {field} is not set")
    return resolved


__all__ = ["resolve_env_reference"]
