"""Utilities for inspecting and validating configuration files."""

from __future__ import annotations

from ipaddress import IPv4Address
from pathlib import Path
from types import UnionType
from typing import Any, Iterable, Union, get_args, get_origin

from pydantic import BaseModel, ValidationError
from pydantic.fields import FieldInfo

from .app import AppConfig
from .base import load_config

# exit codes shared with the CLI
EXIT_OK = 0
EXIT_INVALID_FORMAT = 1
EXIT_MISSING = 2
EXIT_VALIDATION = 3


class ConfigInspectionError(RuntimeError):
    """Raised when configuration inspection fails unexpectedly."""


def check_config(path: Path, *, config_cls: type[AppConfig] = AppConfig) -> tuple[dict[str, Any], int, AppConfig | None]:
    """Validate the configuration file and collect warnings.

    Returns a tuple of ``(result_dict, exit_code, config_instance_or_None)``.
    Nothing is written to disk, unlike ``load_or_create_config``.
    """

    try:
        config = load_config(config_cls, path)
    except FileNotFoundError as exc:
        return _error(path, "missing_file", str(exc)), EXIT_MISSING, None
    except ValidationError as exc:
        details = [
            {
                "loc": ".".join(str(part) for part in err["loc"]),
                "message": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        return (
            _error(path, "validation_error", "Configuration validation failed", details=details),
            EXIT_VALIDATION,
            None,
        )
    except PermissionError as exc:
        return _error(path, "permission_error", str(exc)), EXIT_MISSING, None
    except ValueError as exc:
        return _error(path, "invalid_format", str(exc)), EXIT_INVALID_FORMAT, None
    except Exception as exc:  # pragma: no cover - unexpected failures
        raise ConfigInspectionError("Unexpected configuration inspection error") from exc

    result = {
        "status": "ok",
        "config_path": str(path),
        "warnings": _collect_warnings(config),
    }
    return result, EXIT_OK, config


def explain_config(*, config_cls: type[AppConfig] = AppConfig) -> list[dict[str, Any]]:
    """Describe configuration fields, nested sections flattened with dots."""

    documentation: list[dict[str, Any]] = []

    def _walk(model_cls: type[BaseModel], prefix: str) -> None:
        for field_name, field in model_cls.model_fields.items():
            name = f"{prefix}{field_name}"
            documentation.append(
                {
                    "name": name,
                    "type": _format_annotation(field.annotation),
                    "required": field.is_required(),
                    "default": _format_default(field),
                    "description": field.description or "",
                }
            )
            nested = _nested_model(field.annotation)
            if nested is not None:
                _walk(nested, f"{name}.")

    _walk(config_cls, "")
    return documentation


def _error(path: Path, kind: str, message: str, *, details: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    error: dict[str, Any] = {"type": kind, "message": message}
    if details is not None:
        error["details"] = details
    return {"status": "error", "config_path": str(path), "error": error}


def _collect_warnings(config: AppConfig) -> list[str]:
    warnings: list[str] = []
    storage = config.storage

    if storage.working_file.resolve() == storage.backup_file.resolve():
        warnings.append("'storage.local_path' and 'storage.backup_path' point at the same file")
    if not storage.remote_url.startswith(("http://", "https://", "env:")):
        warnings.append("'storage.remote_url' is not an http(s) URL; remote fallback will fail")
    if not config.auth.passkey_path.exists():
        warnings.append(
            f"Passkey file {config.auth.passkey_path} does not exist; mutating requests will be rejected"
        )
    if config.server.host != IPv4Address("127.0.0.1") and "*" in config.cors.allow_origins:
        warnings.append("Server binds a non-loopback address while allowing any CORS origin")

    return warnings


def _format_annotation(annotation: Any) -> str:
    origin = get_origin(annotation)
    if origin is None:
        return annotation.__name__ if isinstance(annotation, type) else repr(annotation).replace("typing.", "")

    args = get_args(annotation)
    if origin in {Union, UnionType}:
        non_none = [arg for arg in args if arg is not type(None)]  # noqa: E721
        if len(non_none) == 1:
            return f"Optional[{_format_annotation(non_none[0])}]"
        return f"Union[{', '.join(_format_annotation(arg) for arg in args)}]"

    origin_name = getattr(origin, "__name__", repr(origin))
    if args:
        return f"{origin_name}[{', '.join(_format_annotation(arg) for arg in args)}]"
    return origin_name


def _format_default(field: FieldInfo) -> Any:
    if field.default_factory is not None:
        value = field.default_factory()
    elif field.is_required():
        return None
    else:
        value = field.default
    return _jsonable(value)


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, (Path, IPv4Address)):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


def _nested_model(annotation: Any) -> type[BaseModel] | None:
    candidates: Iterable[Any] = get_args(annotation) if get_origin(annotation) in {Union, UnionType} else (annotation,)
    for candidate in candidates:
        if isinstance(candidate, type) and issubclass(candidate, BaseModel):
            return candidate
    return None


__all__ = [
    "ConfigInspectionError",
    "EXIT_INVALID_FORMAT",
    "EXIT_MISSING",
    "EXIT_OK",
    "EXIT_VALIDATION",
    "check_config",
    "explain_config",
]
