from __future__ import annotations

import platform
import re
from typing import Optional

from rich.console import Console
from rich.markup import escape

from .logging import get_logger
from .util.errors import CommandError, ExtractionError, WebhookError
from .util.proc import CommandRunner

LOG = get_logger(__name__)

WEBHOOK_SECRET_PATTERN = re.compile(r"whsec_[a-zA-Z0-9]+")
MASKED_SECRET = "whsec_***"


def extract_webhook_secret(text: str) -> str:
    """Pull the webhook signing secret out of `stripe listen` output.

    The CLI only prints it as human-readable text, so this is a plain
    pattern match; the first match wins.
    """
    match = WEBHOOK_SECRET_PATTERN.search(text or "")
    if not match:
        raise ExtractionError("Failed to extract webhook secret")
    return match.group(0)


def mask_webhook_secrets(text: str) -> str:
    return WEBHOOK_SECRET_PATTERN.sub(MASKED_SECRET, text or "")


def _report_failure(console: Console, platform_name: Optional[str]) -> None:
    console.print(
        "[red]Failed to create Stripe webhook. Check your Stripe CLI installation and permissions.[/red]"
    )
    system = platform_name if platform_name is not None else platform.system()
    if system.lower() in {"windows", "win32"}:
        console.print("Note: On Windows, you may need to run this script as an administrator.")


def register_webhook(
    *,
    runner: CommandRunner,
    console: Console,
    stripe_bin: str = "stripe",
    platform_name: Optional[str] = None,
) -> str:
    console.print("[bold]Step 4: Creating Stripe webhook...[/bold]")
    try:
        result = runner((stripe_bin, "listen", "--print-secret"))
    except CommandError as e:
        # The tool may have printed the secret before failing.
        detail = mask_webhook_secrets(e.detail)
        LOG.error("Stripe webhook command failed", extra={"error": detail})
        _report_failure(console, platform_name)
        raise WebhookError(f"Failed to create Stripe webhook: {detail}") from e

    try:
        secret = extract_webhook_secret(result.stdout)
    except ExtractionError as e:
        LOG.error("Stripe webhook secret not found in output", extra={"error": str(e)})
        console.print(f"[red]{escape(str(e))}.[/red]")
        _report_failure(console, platform_name)
        raise
    console.print("Stripe webhook created.")
    return secret
