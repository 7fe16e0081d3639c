import json
from pathlib import Path

from folio.cli import main
from folio.config import DEFAULT_CONFIG_TOML
from tests.utils import logger_to_stderr

from .utils import write_config


def test_config_check_json_success(capsys, tmp_path):
    config_file = write_config(tmp_path)

    with logger_to_stderr():
        exit_code = main(["--config", str(config_file), "config", "check", "--format", "json"])

    assert exit_code == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "ok"
    assert payload["warnings"] == []
    assert payload["config_path"].endswith("folio.toml")


def test_config_check_missing_file(capsys, tmp_path):
    missing_path = tmp_path / "absent.toml"

    with logger_to_stderr():
        exit_code = main(["--config", str(missing_path), "config", "check"])

    assert exit_code == 2
    assert not missing_path.exists()

    captured = capsys.readouterr()
    assert "Configuration error (missing_file" in captured.err
    assert str(missing_path) in captured.err


def test_config_check_invalid_toml(capsys, tmp_path):
    config_file = tmp_path / "folio.toml"
    config_file.write_text("[server\n")

    with logger_to_stderr():
        exit_code = main(["--config", str(config_file), "config", "check"])

    assert exit_code == 1
    assert "invalid_format" in capsys.readouterr().err


def test_config_check_validation_error(capsys, tmp_path):
    config_file = tmp_path / "folio.toml"
    config_file.write_text("unknown_field = 42\n")

    with logger_to_stderr():
        exit_code = main(["--config", str(config_file), "config", "check"])

    assert exit_code == 3

    captured = capsys.readouterr()
    assert "validation_error" in captured.err
    assert "Extra inputs are not permitted" in captured.err


def test_config_explain_text_output(capsys):
    with logger_to_stderr():
        exit_code = main(["config", "explain"])

    assert exit_code == 0

    captured = capsys.readouterr()
    assert "Configuration schema" in captured.err
    assert "storage.remote_timeout" in captured.err
    assert "cors.allow_origins" in captured.err


def test_config_init_refuses_to_overwrite(capsys, tmp_path: Path):
    config_file = tmp_path / "folio.toml"
    config_file.write_text("logging_level = 'DEBUG'\n")

    with logger_to_stderr():
        exit_code = main(["--config", str(config_file), "config", "init"])

    assert exit_code == 1
    assert "already exists" in capsys.readouterr().err

    assert main(["--config", str(config_file), "config", "init", "--force"]) == 0
    assert config_file.read_text(encoding="utf-8") == DEFAULT_CONFIG_TOML
