from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from rich.console import Console
from rich.markup import escape

from .config import DEFAULT_LOCAL_DATABASE_URL
from .logging import get_logger
from .preflight import ensure_tool_ready, turso_check
from .prompts import DB_CHOICE, DB_NAME, TURSO_AUTH_TOKEN, Prompter
from .util.errors import CommandError, ProvisioningError
from .util.proc import CommandRunner

LOG = get_logger(__name__)


@dataclass(frozen=True)
class DataStoreInfo:
    url: str
    is_remote: bool
    auth_token: Optional[str] = None


def _is_local_choice(answer: str) -> bool:
    return answer.strip().lower() == "l"


def provision_data_store(
    *,
    runner: CommandRunner,
    prompter: Prompter,
    console: Console,
    turso_bin: str = "turso",
    local_url: str = DEFAULT_LOCAL_DATABASE_URL,
) -> DataStoreInfo:
    """Pick a local SQLite file or create a remote Turso database.

    Any answer other than L/l takes the remote path.
    """
    console.print("[bold]Step 2: Setting up Database[/bold]")
    choice = prompter.ask(
        DB_CHOICE,
        "Do you want to use a local SQLite file (L) or a remote Turso database (R)? (L/R)",
    )
    if _is_local_choice(choice):
        return DataStoreInfo(url=local_url, is_remote=False)

    ensure_tool_ready(turso_check(turso_bin), runner=runner, prompter=prompter, console=console)

    name = prompter.ask(DB_NAME, "Enter a name for your Turso database")

    console.print(f"Creating Turso database: {name}", markup=False)
    try:
        runner((turso_bin, "db", "create", name))
        console.print(f"Turso database '{name}' created successfully.", markup=False)
        result = runner((turso_bin, "db", "show", name, "--url"))
    except CommandError as e:
        LOG.error("Failed to create Turso database", extra={"database": name, "error": e.detail})
        console.print(f"[red]Failed to create Turso database:[/red] {escape(e.detail)}")
        raise ProvisioningError(f"Failed to create Turso database '{name}': {e.detail}") from e

    url = result.stdout.strip()
    if not url:
        console.print(f"[red]Turso returned an empty URL for database '{name}'.[/red]")
        raise ProvisioningError(f"Empty URL returned for Turso database '{name}'")

    auth_token = prompter.ask(TURSO_AUTH_TOKEN, "Enter your Turso authentication token")
    return DataStoreInfo(url=url, is_remote=True, auth_token=auth_token)
