from __future__ import annotations

import json
import warnings
from pathlib import Path
from typing import Any, Dict

import yaml

from .prompts import PROMPT_KEYS, ScriptedPrompter
from .util.errors import ConfigError


def _load_data(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Answers file not found: {path}")
    raw = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            obj = json.loads(raw)
        elif suffix in {".yml", ".yaml"}:
            obj = yaml.safe_load(raw)
        else:
            raise ConfigError("Unsupported answers file type; use .yaml/.yml or .json")
    except (yaml.YAMLError, ValueError) as e:
        raise ConfigError(f"Failed to parse answers file {path}: {e}") from e
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise ConfigError("Answers file must be a mapping/object")
    return dict(obj)


def load_answers_file(path: Path) -> ScriptedPrompter:
    """Load prompt answers for a non-interactive run from a YAML/JSON file.

    Schema:
      db_choice: L|R
      db_name: required when db_choice is R
      turso_auth_token: required when db_choice is R
      stripe_secret_key: required
      stripe_login_done: optional bool, only asked if `stripe config --list` fails

    Values are passed through as strings; a prompt without an answer fails
    the run when it is reached.
    """
    data = _load_data(path)
    unknown = sorted(set(data.keys()) - set(PROMPT_KEYS))
    if unknown:
        warnings.warn(f"Unknown answer keys ignored: {', '.join(unknown)}")
    answers = {k: v for k, v in data.items() if k in PROMPT_KEYS}
    return ScriptedPrompter(answers)
