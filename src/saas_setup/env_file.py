from __future__ import annotations

from pathlib import Path
from typing import Dict, Mapping, Optional

from .logging import get_logger
from .util.errors import ConfigWriteError

LOG = get_logger(__name__)

TURSO_DATABASE_URL = "TURSO_DATABASE_URL"
STRIPE_SECRET_KEY = "STRIPE_SECRET_KEY"
STRIPE_WEBHOOK_SECRET = "STRIPE_WEBHOOK_SECRET"
BASE_URL = "BASE_URL"
AUTH_SECRET = "AUTH_SECRET"
TURSO_AUTH_TOKEN = "TURSO_AUTH_TOKEN"

REQUIRED_KEYS = (TURSO_DATABASE_URL, STRIPE_SECRET_KEY, STRIPE_WEBHOOK_SECRET, BASE_URL, AUTH_SECRET)


def build_env_mapping(
    *,
    database_url: str,
    stripe_secret_key: str,
    stripe_webhook_secret: str,
    base_url: str,
    auth_secret: str,
    is_remote: bool,
    turso_auth_token: Optional[str] = None,
) -> Dict[str, str]:
    env: Dict[str, str] = {
        TURSO_DATABASE_URL: database_url,
        STRIPE_SECRET_KEY: stripe_secret_key,
        STRIPE_WEBHOOK_SECRET: stripe_webhook_secret,
        BASE_URL: base_url,
        AUTH_SECRET: auth_secret,
    }
    # Present if and only if the remote data store was chosen.
    if is_remote:
        env[TURSO_AUTH_TOKEN] = turso_auth_token or ""
    return env


def render_env(env: Mapping[str, str]) -> str:
    """Serialize as KEY=value lines in insertion order, without a trailing newline."""
    lines = []
    for key, value in env.items():
        value = str(value)
        if "\n" in value or "\r" in value:
            raise ConfigWriteError(f"Value for {key} spans multiple lines")
        lines.append(f"{key}={value}")
    return "\n".join(lines)


def write_env_file(env: Mapping[str, str], path: Path) -> Path:
    """Overwrite `path` with the rendered mapping. No backup, no merge."""
    content = render_env(env)
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ConfigWriteError(f"Failed to write {path}: {e}") from e
    LOG.info("Wrote environment file", extra={"path": str(path), "keys": list(env.keys())})
    return path
