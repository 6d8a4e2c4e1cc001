from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol

from rich.console import Console
from rich.prompt import Confirm

from .util.errors import ConfigError

# Prompt keys, shared by the interactive prompter and answers files.
DB_CHOICE = "db_choice"
DB_NAME = "db_name"
TURSO_AUTH_TOKEN = "turso_auth_token"
STRIPE_SECRET_KEY = "stripe_secret_key"
STRIPE_LOGIN_DONE = "stripe_login_done"

PROMPT_KEYS = (DB_CHOICE, DB_NAME, TURSO_AUTH_TOKEN, STRIPE_SECRET_KEY, STRIPE_LOGIN_DONE)


class Prompter(Protocol):
    def ask(self, key: str, text: str) -> str:
        ...

    def confirm(self, key: str, text: str) -> bool:
        ...


class RichPrompter:
    """Ask the operator on the terminal."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console()

    def ask(self, key: str, text: str) -> str:
        # Console.input keeps surrounding whitespace; rich.prompt.Prompt strips it.
        return self._console.input(f"{text}: ")

    def confirm(self, key: str, text: str) -> bool:
        return bool(Confirm.ask(text, console=self._console))


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s in {"1", "true", "yes", "y"}:
        return True
    if s in {"0", "false", "no", "n"}:
        return False
    raise ConfigError(f"Answer '{key}' must be yes or no, got: {value!r}")


class ScriptedPrompter:
    """Answer prompts from a mapping keyed by prompt key.

    Used for unattended runs (answers files) and tests. Every prompt that
    was asked is recorded in `asked`, in order.
    """

    def __init__(self, answers: Mapping[str, Any]) -> None:
        self._answers: Dict[str, Any] = dict(answers)
        self.asked: List[str] = []

    def _lookup(self, key: str) -> Any:
        self.asked.append(key)
        if key not in self._answers or self._answers[key] is None:
            raise ConfigError(f"No answer provided for prompt '{key}'")
        return self._answers[key]

    def ask(self, key: str, text: str) -> str:
        return str(self._lookup(key))

    def confirm(self, key: str, text: str) -> bool:
        return _as_bool(key, self._lookup(key))
