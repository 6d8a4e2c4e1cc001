from __future__ import annotations

import argparse
import json
import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import yaml

from .util.errors import ConfigError

# --------
# Defaults
# --------
DEFAULT_ENV_FILENAME = ".env"
DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_LOCAL_DATABASE_URL = "file:dev.db"
DEFAULT_STRIPE_BIN = "stripe"
DEFAULT_TURSO_BIN = "turso"
ENV_PREFIX = "SAAS_SETUP_"

ALLOWED_CONFIG_KEYS = {
    "env_file",
    "base_url",
    "local_database_url",
    "stripe_bin",
    "turso_bin",
    "answers",
    "log_level",
    "json_logs",
}
BOOL_CONFIG_KEYS = {"json_logs"}
PATH_CONFIG_KEYS = {"env_file", "answers"}
STR_CONFIG_KEYS = {"base_url", "local_database_url", "stripe_bin", "turso_bin", "log_level"}


@dataclass(frozen=True)
class SetupConfig:
    env_file: Path = field(default_factory=lambda: Path.cwd() / DEFAULT_ENV_FILENAME)
    base_url: str = DEFAULT_BASE_URL
    local_database_url: str = DEFAULT_LOCAL_DATABASE_URL
    stripe_bin: str = DEFAULT_STRIPE_BIN
    turso_bin: str = DEFAULT_TURSO_BIN

    # Non-interactive answers file (YAML/JSON mapping of prompt key -> answer)
    answers: Optional[Path] = None

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False


def _parse_config_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text) or {}
    except (yaml.YAMLError, ValueError) as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("Top-level config must be an object")
    return data


def _env_str(name: str) -> Optional[str]:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None:
        return None
    raw = raw.strip()
    if not raw:
        return None
    return raw


def _env_bool(name: str) -> Optional[bool]:
    raw = _env_str(name)
    if raw is None:
        return None
    return raw.lower() in {"1", "true", "yes", "on"}


def _coerce_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        raw = value.strip().lower()
        if raw in {"1", "true", "yes", "on"}:
            return True
        if raw in {"0", "false", "no", "off"}:
            return False
    raise ConfigError(f"Config field '{key}' must be a boolean")


def _normalize_config_file(data: Dict[str, Any]) -> Dict[str, Any]:
    unknown = sorted(set(data.keys()) - ALLOWED_CONFIG_KEYS)
    if unknown:
        warnings.warn(f"Unknown config keys ignored: {', '.join(unknown)}")
    normalized: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in ALLOWED_CONFIG_KEYS or value is None:
            continue
        if key in BOOL_CONFIG_KEYS:
            normalized[key] = _coerce_bool(key, value)
        elif key in PATH_CONFIG_KEYS:
            if not isinstance(value, (str, Path)):
                raise ConfigError(f"Config field '{key}' must be a string path")
            normalized[key] = value
        elif key in STR_CONFIG_KEYS:
            if not isinstance(value, str):
                raise ConfigError(f"Config field '{key}' must be a string")
            normalized[key] = value
    return normalized


def _compact_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Drop keys with None values so they don't override lower-precedence config.
    """
    return {k: v for k, v in data.items() if v is not None}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="saas-setup",
        description="Provision Stripe and Turso resources and write a .env file for the SaaS starter.",
    )
    parser.add_argument("--config", type=Path, default=None, help="Optional YAML/JSON config file")
    parser.add_argument("--env-file", type=Path, default=None, help="Output file (default: ./.env)")
    parser.add_argument("--base-url", default=None, help=f"BASE_URL value (default: {DEFAULT_BASE_URL})")
    parser.add_argument("--stripe-bin", default=None, help="Stripe CLI executable (default: stripe)")
    parser.add_argument("--turso-bin", default=None, help="Turso CLI executable (default: turso)")
    parser.add_argument(
        "--answers",
        type=Path,
        default=None,
        help="YAML/JSON file with prompt answers for an unattended run",
    )
    parser.add_argument(
        "--json-logs",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Enable JSON logs",
    )
    parser.add_argument("--log-level", default=None, help="Log level (INFO, DEBUG, ...)")
    return parser


def load_setup_config(argv: Optional[Sequence[str]] = None) -> SetupConfig:
    """
    Build SetupConfig by merging defaults, optional config file, env vars, and CLI args.
    Precedence (low -> high): defaults < config file < env < CLI.
    """
    parser = build_parser()
    ns = parser.parse_args(list(argv) if argv is not None else None)

    base: Dict[str, Any] = {
        "env_file": Path.cwd() / DEFAULT_ENV_FILENAME,
        "base_url": DEFAULT_BASE_URL,
        "local_database_url": DEFAULT_LOCAL_DATABASE_URL,
        "stripe_bin": DEFAULT_STRIPE_BIN,
        "turso_bin": DEFAULT_TURSO_BIN,
        "answers": None,
        "log_level": "INFO",
        "json_logs": False,
    }

    file_cfg: Dict[str, Any] = {}
    if ns.config:
        file_cfg = _normalize_config_file(_parse_config_file(Path(ns.config)))

    env_cfg: Dict[str, Any] = _compact_dict(
        {
            "env_file": _env_str("ENV_FILE"),
            "base_url": _env_str("BASE_URL"),
            "local_database_url": _env_str("LOCAL_DATABASE_URL"),
            "stripe_bin": _env_str("STRIPE_BIN"),
            "turso_bin": _env_str("TURSO_BIN"),
            "answers": _env_str("ANSWERS"),
            "log_level": _env_str("LOG_LEVEL"),
            "json_logs": _env_bool("JSON_LOGS"),
        }
    )

    cli_cfg: Dict[str, Any] = _compact_dict(
        {
            "env_file": ns.env_file,
            "base_url": ns.base_url,
            "stripe_bin": ns.stripe_bin,
            "turso_bin": ns.turso_bin,
            "answers": ns.answers,
            "log_level": ns.log_level,
            "json_logs": ns.json_logs,
        }
    )

    merged = dict(base)
    for layer in (file_cfg, env_cfg, cli_cfg):
        merged.update(layer)

    base_url = str(merged["base_url"]).strip()
    if not base_url:
        raise ConfigError("base_url must not be empty")

    return SetupConfig(
        env_file=Path(merged["env_file"]),
        base_url=base_url,
        local_database_url=str(merged["local_database_url"]),
        stripe_bin=str(merged["stripe_bin"]),
        turso_bin=str(merged["turso_bin"]),
        answers=Path(merged["answers"]) if merged.get("answers") else None,
        log_level=str(merged.get("log_level") or "INFO").upper(),
        json_logs=bool(merged["json_logs"]),
    )


def dump_config(cfg: SetupConfig) -> Dict[str, Any]:
    return {
        "env_file": str(cfg.env_file),
        "base_url": cfg.base_url,
        "local_database_url": cfg.local_database_url,
        "stripe_bin": cfg.stripe_bin,
        "turso_bin": cfg.turso_bin,
        "answers": str(cfg.answers) if cfg.answers else None,
        "log_level": cfg.log_level,
        "json_logs": cfg.json_logs,
    }
