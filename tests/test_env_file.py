from __future__ import annotations

from pathlib import Path

import pytest

from saas_setup.env_file import REQUIRED_KEYS, build_env_mapping, render_env, write_env_file
from saas_setup.util.errors import ConfigWriteError


def _mapping(is_remote: bool, token=None):
    return build_env_mapping(
        database_url="libsql://example.turso.io" if is_remote else "file:dev.db",
        stripe_secret_key="sk_test_1",
        stripe_webhook_secret="whsec_1",
        base_url="http://localhost:3000",
        auth_secret="a" * 64,
        is_remote=is_remote,
        turso_auth_token=token,
    )


def test_mapping_order_and_token_only_when_remote() -> None:
    local = _mapping(False, token="ignored")
    assert list(local) == list(REQUIRED_KEYS)

    remote = _mapping(True, token="tok")
    assert list(remote) == [*REQUIRED_KEYS, "TURSO_AUTH_TOKEN"]
    assert remote["TURSO_AUTH_TOKEN"] == "tok"


def test_render_env_has_no_trailing_newline() -> None:
    text = render_env({"A": "1", "B": "two"})
    assert text == "A=1\nB=two"


def test_render_env_rejects_multiline_values() -> None:
    with pytest.raises(ConfigWriteError):
        render_env({"A": "line1\nline2"})


def test_write_env_file_overwrites_existing(tmp_path: Path) -> None:
    path = tmp_path / ".env"
    write_env_file(_mapping(True, token="tok"), path)
    assert "TURSO_AUTH_TOKEN=tok" in path.read_text(encoding="utf-8")

    write_env_file(_mapping(False), path)
    content = path.read_text(encoding="utf-8")
    assert "TURSO_AUTH_TOKEN" not in content
    assert content.splitlines()[0] == "TURSO_DATABASE_URL=file:dev.db"
    assert len(content.splitlines()) == 5


def test_write_env_file_wraps_filesystem_errors(tmp_path: Path) -> None:
    target = tmp_path / "missing-dir" / ".env"
    with pytest.raises(ConfigWriteError):
        write_env_file({"A": "1"}, target)
