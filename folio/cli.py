"""Command line interface for the folio service."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import typer
import uvicorn
from loguru import logger

from .auth import AuthGate, PasskeyStore
from .config import DEFAULT_CONFIG_TOML, AppConfig, load_or_create_config, write_default_config
from .config.inspector import check_config, explain_config
from .storage import CollectionStore, StoreError
from .web import create_app


@dataclass(slots=True)
class CLIState:
    """Holds shared state between Typer commands."""

    config_path: Path
    _config: AppConfig | None = None

    def ensure_config(self) -> AppConfig:
        if self._config is None:
            logger.info("Loading configuration from {}", self.config_path)
            self._config = load_or_create_config(AppConfig, self.config_path, DEFAULT_CONFIG_TOML)
        return self._config


app = typer.Typer(help="folio collection storage service")
config_app = typer.Typer(help="Validate, document and create configuration files")
app.add_typer(config_app, name="config")


# uvicorn has no SUCCESS level
_UVICORN_LOG_LEVELS = {
    "TRACE": "trace",
    "DEBUG": "debug",
    "INFO": "info",
    "SUCCESS": "info",
    "WARNING": "warning",
    "ERROR": "error",
    "CRITICAL": "critical",
}


def _default_config_path() -> Path:
    return Path("config") / "folio.toml"


def _normalize_format(value: str) -> str:
    return value.lower()


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):  # pragma: no cover - defensive guard
        raise RuntimeError("CLI context is not initialised")
    return state


def _exit(code: int) -> None:
    raise typer.Exit(code)


def build_store(config: AppConfig) -> CollectionStore:
    return CollectionStore.from_config(config.storage)


def build_gate(config: AppConfig) -> AuthGate:
    return AuthGate(PasskeyStore(config.auth.passkey_path))


def _setup_logging_sink(config: AppConfig) -> int | None:
    """Add the optional rotating file sink; returns its handler id."""
    if config.log_file is None:
        return None
    config.log_file.parent.mkdir(parents=True, exist_ok=True)
    return logger.add(
        config.log_file,
        rotation="5 MB",
        retention=5,
        enqueue=True,
        level=config.logging_level,
    )


def _initialize_storage(store: CollectionStore) -> None:
    try:
        result = store.initialize()
    except StoreError as exc:
        logger.error("Could not initialize projects data: {}", exc)
        _exit(1)
    else:
        if result.ok:
            logger.info("Storage synced from {} source ({} records)", result.source, len(result.records))
        else:
            logger.warning("Storage initialized with a placeholder record: {}", result.error)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    config: Path = typer.Option(
        _default_config_path(),
        help="Path to the TOML configuration file",
    ),
) -> None:
    """Initialise CLI state."""

    ctx.obj = CLIState(config_path=config.resolve())
    if ctx.invoked_subcommand is None:
        logger.warning("No command provided. Try 'serve' or 'status'.")
        _exit(0)


@app.command(help="Sync local files and run the API server")
def serve(
    ctx: typer.Context,
    host: str | None = typer.Option(None, help="Host to bind (defaults to server.host)"),
    port: int | None = typer.Option(None, help="Port to bind (defaults to server.port)"),
    dry_run: bool = typer.Option(
        False,
        help="Initialize storage and report the address without running the server",
    ),
) -> None:
    state = _get_state(ctx)
    config = state.ensure_config()
    sink_id = _setup_logging_sink(config)
    try:
        store = build_store(config)
        _initialize_storage(store)

        bind_host = host or str(config.server.host)
        bind_port = port or config.server.port
        if dry_run:
            logger.info("[Dry Run] Server would listen at {}:{}", bind_host, bind_port)
            logger.info("[Dry Run] Server will not be started.")
            return

        app_instance = create_app(store, build_gate(config), config)
        logger.info("Server listening at {}:{}", bind_host, bind_port)
        uvicorn.run(
            app_instance,
            host=bind_host,
            port=bind_port,
            log_level=_UVICORN_LOG_LEVELS.get(config.logging_level, "info"),
        )
    finally:
        if sink_id is not None:
            logger.remove(sink_id)


@app.command(help="Sync working and backup files from the local or remote source")
def sync(ctx: typer.Context) -> None:
    config = _get_state(ctx).ensure_config()
    _initialize_storage(build_store(config))


@app.command("list", help="Print the collections held in the working file")
def list_collections(
    ctx: typer.Context,
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text",
        "--format",
        case_sensitive=False,
        help="Output format for the collection list",
        callback=_normalize_format,
    ),
) -> None:
    config = _get_state(ctx).ensure_config()
    store = build_store(config)
    try:
        records = store.list()
    except StoreError as exc:
        logger.error("Failed to load projects data: {}", exc)
        logger.error("Run 'folio sync' to re-initialize local files.")
        _exit(1)
        return

    if format == "json":
        print(json.dumps([record.model_dump(mode="json") for record in records], indent=2, ensure_ascii=False))
        return

    logger.info("{} collections in {}", len(records), store.working_path)
    for record in records:
        logger.info("  [{}] {} ({}) tags={}", record.id, record.title, record.client, ", ".join(record.tags))


@app.command(help="Show configuration and storage status")
def status(ctx: typer.Context) -> None:
    config = _get_state(ctx).ensure_config()
    _report_system_status(config)


@config_app.command(help="Validate the configuration file")
def check(
    ctx: typer.Context,
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text",
        "--format",
        case_sensitive=False,
        help="Output format for validation results",
        callback=_normalize_format,
    ),
) -> None:
    state = _get_state(ctx)
    result, exit_code, _ = check_config(state.config_path)

    if format == "json":
        print(json.dumps(result, indent=2, ensure_ascii=False, default=str))
        _exit(exit_code)

    if result["status"] == "ok":
        logger.info("Configuration OK: {}", result["config_path"])
        for warning in result["warnings"]:
            logger.warning(warning)
    else:
        error: dict[str, Any] = result["error"]
        logger.error(
            "Configuration error ({}) for {}: {}",
            error["type"],
            result["config_path"],
            error["message"],
        )
        for detail in error.get("details", []):
            location = detail["loc"] or "<root>"
            logger.error("  - {}: {} ({})", location, detail["message"], detail["type"])

    _exit(exit_code)


@config_app.command(help="Describe available configuration fields")
def explain(
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text",
        "--format",
        case_sensitive=False,
        help="Output format for configuration schema",
        callback=_normalize_format,
    ),
) -> None:
    fields = explain_config()

    if format == "json":
        print(json.dumps({"fields": fields}, indent=2, ensure_ascii=False, default=str))
        return

    logger.info("Configuration schema ({} fields):", len(fields))
    for field in fields:
        default_value = field["default"]
        if isinstance(default_value, (dict, list)):
            default_repr = json.dumps(default_value, ensure_ascii=False, default=str)
        else:
            default_repr = str(default_value)
        logger.info(
            "  - {name}: type={type}, required={required}, default={default}, description={description}",
            name=field["name"],
            type=field["type"],
            required="yes" if field["required"] else "no",
            default=default_repr,
            description=field["description"] or "(no description)",
        )


@config_app.command("init", help="Write the default configuration file")
def init_config(
    ctx: typer.Context,
    force: bool = typer.Option(False, help="Overwrite an existing configuration file"),
) -> None:
    path = _get_state(ctx).config_path
    if path.exists() and not force:
        logger.error("Configuration file {} already exists; pass --force to overwrite", path)
        _exit(1)
    write_default_config(path, DEFAULT_CONFIG_TOML)


def _report_system_status(config: AppConfig) -> None:
    """Print settings, derived paths and file presence."""
    storage = config.storage
    logger.info("=== General Configuration ===")
    logger.info("Logging level: {}", config.logging_level)
    logger.info("Log file: {}", config.log_file or "disabled")
    logger.info("Server address: {}", config.server.address)
    logger.info("CORS origins: {}", ", ".join(config.cors.allow_origins))

    logger.info("\n=== Storage ===")
    logger.info("Working file: {} (exists={})", storage.working_file, storage.working_file.exists())
    logger.info("Backup file: {} (exists={})", storage.backup_file, storage.backup_file.exists())
    try:
        logger.info("Remote origin: {}", storage.remote_file_url)
    except EnvironmentError as exc:
        logger.warning("Remote origin unavailable: {}", exc)
    logger.info(
        "Remote timeout: {}s, attempts: {}, retry delay: {}s",
        storage.remote_timeout,
        storage.max_retries,
        storage.retry_delay,
    )

    logger.info("\n=== Authentication ===")
    logger.info("Passkey file: {} (exists={})", config.auth.passkey_path, config.auth.passkey_path.exists())


def main(argv: list[str] | None = None) -> int:
    """Entry point compatible with setuptools console scripts."""

    try:
        result = app(args=argv, standalone_mode=False)
    except typer.Exit as exc:  # pragma: no cover - Typer translates exit codes
        return exc.exit_code
    if isinstance(result, int):
        return result
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
