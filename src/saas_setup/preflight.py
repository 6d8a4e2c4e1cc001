from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from rich.console import Console

from .logging import get_logger
from .prompts import STRIPE_LOGIN_DONE, Prompter
from .util.errors import CommandError, MissingToolError, ToolAuthError
from .util.proc import CommandRunner, format_command

LOG = get_logger(__name__)


@dataclass(frozen=True)
class ToolCheck:
    """How to verify one external CLI.

    `auth_argv` is optional; when set, a failing auth probe triggers one
    remediation prompt and exactly one re-check.
    `confirm_key` names that prompt for answers files.
    """

    name: str
    version_argv: Tuple[str, ...]
    install_instructions: Tuple[str, ...]
    auth_argv: Optional[Tuple[str, ...]] = None
    login_argv: Optional[Tuple[str, ...]] = None
    confirm_key: Optional[str] = None


def stripe_check(executable: str = "stripe") -> ToolCheck:
    return ToolCheck(
        name="Stripe CLI",
        version_argv=(executable, "--version"),
        auth_argv=(executable, "config", "--list"),
        login_argv=(executable, "login"),
        confirm_key=STRIPE_LOGIN_DONE,
        install_instructions=(
            "1. Visit: https://docs.stripe.com/stripe-cli",
            "2. Download and install the Stripe CLI for your operating system",
            f"3. After installation, run: {executable} login",
            "After installation and authentication, please run this setup script again.",
        ),
    )


def turso_check(executable: str = "turso") -> ToolCheck:
    return ToolCheck(
        name="Turso CLI",
        version_argv=(executable, "--version"),
        install_instructions=(
            "1. Visit: https://docs.turso.tech/reference/turso-cli",
            "2. Follow the installation instructions for your operating system",
            "After installation, please run this setup script again.",
        ),
    )


def _probe(runner: CommandRunner, argv: Tuple[str, ...]) -> bool:
    try:
        runner(argv)
    except CommandError as e:
        LOG.debug("Probe failed", extra={"command": format_command(argv), "error": e.detail})
        return False
    return True


def ensure_tool_ready(
    check: ToolCheck,
    *,
    runner: CommandRunner,
    prompter: Prompter,
    console: Console,
) -> None:
    """Verify that `check.name` is installed and, if configured, authenticated.

    Raises MissingToolError when the version probe fails; the operator has
    to install the tool, so nothing is retried. Raises ToolAuthError when the
    auth probe fails and the operator either declines the remediation prompt
    or the single re-check fails as well.
    """
    console.print(f"Checking if {check.name} is installed...")
    if not _probe(runner, check.version_argv):
        console.print(f"[red]{check.name} is not installed. Please install it and try again.[/red]")
        console.print(f"To install {check.name}, follow these steps:")
        for line in check.install_instructions:
            console.print(line, markup=False)
        raise MissingToolError(f"{check.name} is not installed")
    console.print(f"{check.name} is installed.")

    if check.auth_argv is None:
        return

    if _probe(runner, check.auth_argv):
        console.print(f"{check.name} is authenticated.")
        return

    console.print(f"{check.name} is not authenticated or the authentication has expired.")
    if check.login_argv:
        console.print(f"Please run: {format_command(check.login_argv)}", markup=False)
    confirm_key = check.confirm_key or f"{check.name.lower().replace(' ', '_')}_login_done"
    if not prompter.confirm(confirm_key, "Have you completed the authentication?"):
        console.print(f"Please authenticate with {check.name} and run this script again.")
        raise ToolAuthError(f"{check.name} is not authenticated")

    # Exactly one re-check after the operator confirms.
    if not _probe(runner, check.auth_argv):
        console.print(f"[red]Failed to verify {check.name} authentication. Please try again.[/red]")
        raise ToolAuthError(f"{check.name} authentication could not be verified")
    console.print(f"{check.name} authentication confirmed.")
