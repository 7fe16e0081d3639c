from __future__ import annotations

from ipaddress import IPv4Address
from pathlib import Path

import pytest
from pydantic import ValidationError

from folio.config import (
    DEFAULT_CONFIG_TOML,
    AppConfig,
    BaseConfig,
    StorageConfig,
    load_config,
    load_or_create_config,
)
from folio.config.inspector import check_config, explain_config
from folio.config.utils import resolve_env_reference


class ExampleConfig(BaseConfig):
    data_root: Path
    feature_enabled: bool


def test_load_config_success(tmp_path: Path) -> None:
    sample = tmp_path / "config.toml"
    sample.write_text('data_root = "./cache"\nfeature_enabled = true\n', encoding="utf-8")

    cfg = load_config(ExampleConfig, sample)

    assert cfg.data_root == Path("./cache")
    assert cfg.feature_enabled is True


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(ExampleConfig, tmp_path / "missing.toml")


def test_load_config_rejects_unknown_fields(tmp_path: Path) -> None:
    sample = tmp_path / "config.toml"
    sample.write_text("unknown_field = 42\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        load_config(AppConfig, sample)


def test_example_config_file() -> None:
    config_path = Path(__file__).resolve().parents[2] / "config" / "example.toml"
    cfg = load_config(AppConfig, config_path)

    assert cfg.server.host == IPv4Address("127.0.0.1")
    assert cfg.server.port == 1234
    assert cfg.log_file == Path("logs/folio.log")
    assert cfg.storage.working_file == Path("data/projects.json")
    assert cfg.storage.backup_file == Path("backup/projects.json")
    assert cfg.storage.remote_file_url == "http://cdn.mikeangelo.art/projects.json"
    assert cfg.storage.max_retries == 3
    assert cfg.auth.passkey_path == Path("key/pass.key")


def test_missing_config_is_created_with_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config" / "folio.toml"

    cfg = load_or_create_config(AppConfig, path, DEFAULT_CONFIG_TOML)

    assert path.read_text(encoding="utf-8") == DEFAULT_CONFIG_TOML
    assert cfg == AppConfig()


@pytest.mark.parametrize("broken", ["[server\nport = 1", "[server]\nport = 'not a port'\n"])
def test_malformed_config_is_replaced(tmp_path: Path, broken: str) -> None:
    path = tmp_path / "folio.toml"
    path.write_text(broken, encoding="utf-8")

    cfg = load_or_create_config(AppConfig, path, DEFAULT_CONFIG_TOML)

    assert cfg.server.port == 1234
    assert (tmp_path / "folio.toml.bak").read_text(encoding="utf-8") == broken


def test_storage_paths_and_remote_url(monkeypatch: pytest.MonkeyPatch) -> None:
    storage = StorageConfig(remote_url="env:FOLIO_REMOTE", local_path=Path("/srv/data"), file_name="work.json")
    monkeypatch.setenv("FOLIO_REMOTE", "https://cdn.example.com/")

    assert storage.file_name == "work"
    assert storage.working_file == Path("/srv/data/work.json")
    assert storage.remote_file_url == "https://cdn.example.com/work.json"


def test_resolve_env_reference(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FOLIO_REMOTE", "https://cdn.example.com")
    monkeypatch.delenv("FOLIO_MISSING", raising=False)

    assert resolve_env_reference("http://plain.test") == "http://plain.test"
    assert resolve_env_reference("env:FOLIO_REMOTE") == "https://cdn.example.com"
    with pytest.raises(EnvironmentError, match="FOLIO_MISSING.*remote_url"):
        StorageConfig(remote_url="env:FOLIO_MISSING").remote_file_url


def test_storage_rejects_nested_file_name() -> None:
    with pytest.raises(ValidationError):
        StorageConfig(file_name="nested/projects")


def test_check_config_reports_validation_errors(tmp_path: Path) -> None:
    path = tmp_path / "folio.toml"
    path.write_text("[storage]\nmax_retries = 0\n", encoding="utf-8")

    result, exit_code, cfg = check_config(path)

    assert exit_code == 3
    assert cfg is None
    assert result["error"]["details"][0]["loc"] == "storage.max_retries"


def test_check_config_warns_about_missing_passkey(tmp_path: Path) -> None:
    path = tmp_path / "folio.toml"
    path.write_text(f'[auth]\npasskey_path = "{(tmp_path / "none.key").as_posix()}"\n', encoding="utf-8")

    result, exit_code, _ = check_config(path)

    assert exit_code == 0
    assert any("Passkey file" in warning for warning in result["warnings"])


def test_explain_config_flattens_sections() -> None:
    names = {field["name"] for field in explain_config()}

    assert {"logging_level", "server.port", "storage.remote_url", "auth.passkey_path"} <= names
