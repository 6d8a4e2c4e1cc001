from __future__ import annotations

from pathlib import Path

import pytest

from saas_setup.config import (
    DEFAULT_BASE_URL,
    SetupConfig,
    dump_config,
    load_setup_config,
)
from saas_setup.util.errors import ConfigError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "SAAS_SETUP_ENV_FILE",
        "SAAS_SETUP_BASE_URL",
        "SAAS_SETUP_STRIPE_BIN",
        "SAAS_SETUP_TURSO_BIN",
        "SAAS_SETUP_ANSWERS",
        "SAAS_SETUP_LOG_LEVEL",
        "SAAS_SETUP_JSON_LOGS",
        "SAAS_SETUP_LOCAL_DATABASE_URL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_flags(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    cfg = load_setup_config([])
    assert isinstance(cfg, SetupConfig)
    assert cfg.env_file == tmp_path / ".env"
    assert cfg.base_url == DEFAULT_BASE_URL
    assert cfg.local_database_url == "file:dev.db"
    assert cfg.stripe_bin == "stripe"
    assert cfg.turso_bin == "turso"
    assert cfg.answers is None
    assert cfg.log_level == "INFO"
    assert cfg.json_logs is False


def test_config_file_used_when_env_and_cli_missing(tmp_path: Path) -> None:
    cfg_path = tmp_path / "setup.yaml"
    cfg_path.write_text("base_url: https://staging.example.com\njson_logs: 'yes'\n", encoding="utf-8")

    cfg = load_setup_config(["--config", str(cfg_path)])
    assert cfg.base_url == "https://staging.example.com"
    assert cfg.json_logs is True


def test_env_overrides_config_file(tmp_path: Path, monkeypatch) -> None:
    cfg_path = tmp_path / "setup.yaml"
    cfg_path.write_text("stripe_bin: from-config\n", encoding="utf-8")
    monkeypatch.setenv("SAAS_SETUP_STRIPE_BIN", "from-env")

    cfg = load_setup_config(["--config", str(cfg_path)])
    assert cfg.stripe_bin == "from-env"


def test_cli_overrides_env_and_config(tmp_path: Path, monkeypatch) -> None:
    cfg_path = tmp_path / "setup.json"
    cfg_path.write_text('{"turso_bin": "from-config", "log_level": "warning"}', encoding="utf-8")
    monkeypatch.setenv("SAAS_SETUP_TURSO_BIN", "from-env")
    monkeypatch.setenv("SAAS_SETUP_JSON_LOGS", "1")

    cfg = load_setup_config(
        ["--config", str(cfg_path), "--turso-bin", "from-cli", "--no-json-logs", "--env-file", "out/.env"]
    )
    assert cfg.turso_bin == "from-cli"
    assert cfg.json_logs is False
    assert cfg.log_level == "WARNING"
    assert cfg.env_file == Path("out/.env")


def test_unknown_config_keys_warn(tmp_path: Path) -> None:
    cfg_path = tmp_path / "setup.yaml"
    cfg_path.write_text("base_url: http://x\nregion: eu\n", encoding="utf-8")

    with pytest.warns(UserWarning, match="region"):
        cfg = load_setup_config(["--config", str(cfg_path)])
    assert cfg.base_url == "http://x"


@pytest.mark.parametrize(
    "body",
    ["json_logs: maybe\n", "stripe_bin: [a, b]\n", "- just\n- a list\n", "base_url: ''\n"],
)
def test_invalid_config_file_raises(tmp_path: Path, body: str) -> None:
    cfg_path = tmp_path / "setup.yaml"
    cfg_path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_setup_config(["--config", str(cfg_path)])


def test_missing_config_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_setup_config(["--config", str(tmp_path / "nope.yaml")])


def test_unknown_flag_exits_with_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        load_setup_config(["--bogus"])
    assert excinfo.value.code == 2


def test_dump_config_is_plain_data(tmp_path: Path) -> None:
    cfg = SetupConfig(env_file=tmp_path / ".env", answers=tmp_path / "a.yaml")
    data = dump_config(cfg)
    assert data["env_file"] == str(tmp_path / ".env")
    assert data["answers"] == str(tmp_path / "a.yaml")
    assert data["base_url"] == DEFAULT_BASE_URL
