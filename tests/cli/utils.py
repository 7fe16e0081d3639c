"""Shared helpers for CLI tests."""

from __future__ import annotations

from pathlib import Path


def write_config(
    base_dir: Path,
    *,
    passkey: str | None = "secret",
    logging_level: str = "DEBUG",
    remote_url: str = "http://origin.test",
    log_file: Path | None = None,
) -> Path:
    """Write a configuration file whose paths all live under ``base_dir``."""

    passkey_path = base_dir / "key" / "pass.key"
    if passkey is not None:
        passkey_path.parent.mkdir(parents=True, exist_ok=True)
        passkey_path.write_text(passkey, encoding="utf-8")

    log_line = f'log_file = "{log_file.as_posix()}"\n' if log_file is not None else ""
    config_file = base_dir / "folio.toml"
    config_file.write_text(
        f"""
logging_level = "{logging_level}"
{log_line}
[server]
host = "127.0.0.1"
port = 8123

[storage]
remote_url = "{remote_url}"
local_path = "{(base_dir / 'data').as_posix()}"
backup_path = "{(base_dir / 'backup').as_posix()}"
file_name = "projects"
max_retries = 1
retry_delay = 0

[auth]
passkey_path = "{passkey_path.as_posix()}"
""",
        encoding="utf-8",
    )
    return config_file
