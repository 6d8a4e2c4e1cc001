from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Optional

from rich.console import Console

from .config import SetupConfig
from .credentials import collect_stripe_secret_key, generate_secret
from .env_file import build_env_mapping, write_env_file
from .logging import get_logger
from .preflight import ensure_tool_ready, stripe_check
from .prompts import Prompter
from .provision import DataStoreInfo, provision_data_store
from .util.proc import CommandRunner, run_command
from .webhook import register_webhook

LOG = get_logger(__name__)


@dataclass
class SetupContext:
    """Everything the workflow needs from the outside world."""

    config: SetupConfig
    prompter: Prompter
    console: Console
    runner: CommandRunner = run_command
    secret_factory: Callable[[], str] = generate_secret
    platform_name: Optional[str] = None


@dataclass(frozen=True)
class SetupResult:
    env_file: Path
    env: Dict[str, str] = field(default_factory=dict)
    data_store: Optional[DataStoreInfo] = None


def run_setup(ctx: SetupContext) -> SetupResult:
    """Run every step in order; the first exception aborts the rest.

    Resources already created in Turso or Stripe are left in place when a
    later step fails.
    """
    cfg = ctx.config
    console = ctx.console

    console.print("[bold]Step 1: Checking if Stripe CLI is installed and authenticated...[/bold]")
    LOG.debug("Preflight", extra={"step": "preflight"})
    ensure_tool_ready(stripe_check(cfg.stripe_bin), runner=ctx.runner, prompter=ctx.prompter, console=console)

    LOG.debug("Provisioning data store", extra={"step": "provision"})
    data_store = provision_data_store(
        runner=ctx.runner,
        prompter=ctx.prompter,
        console=console,
        turso_bin=cfg.turso_bin,
        local_url=cfg.local_database_url,
    )

    LOG.debug("Collecting Stripe secret key", extra={"step": "secrets"})
    stripe_secret_key = collect_stripe_secret_key(ctx.prompter, console)

    LOG.debug("Registering webhook", extra={"step": "webhook"})
    webhook_secret = register_webhook(
        runner=ctx.runner,
        console=console,
        stripe_bin=cfg.stripe_bin,
        platform_name=ctx.platform_name,
    )

    console.print("[bold]Step 5: Generating AUTH_SECRET...[/bold]")
    auth_secret = ctx.secret_factory()

    env = build_env_mapping(
        database_url=data_store.url,
        stripe_secret_key=stripe_secret_key,
        stripe_webhook_secret=webhook_secret,
        base_url=cfg.base_url,
        auth_secret=auth_secret,
        is_remote=data_store.is_remote,
        turso_auth_token=data_store.auth_token,
    )

    console.print(f"[bold]Step 6: Writing environment variables to {cfg.env_file.name}[/bold]")
    LOG.debug("Writing environment file", extra={"step": "write"})
    path = write_env_file(env, cfg.env_file)
    console.print(f"{path.name} file created with the necessary variables.", markup=False)

    console.print("[green]Setup completed successfully![/green]")
    return SetupResult(env_file=path, env=env, data_store=data_store)
