from __future__ import annotations

import secrets

from rich.console import Console

from .prompts import STRIPE_SECRET_KEY, Prompter

AUTH_SECRET_BYTES = 32
STRIPE_API_KEYS_URL = "https://dashboard.stripe.com/test/apikeys"


def collect_secret(prompter: Prompter, key: str, prompt_text: str) -> str:
    # Returned verbatim, empty included; format is not checked.
    return prompter.ask(key, prompt_text)


def collect_stripe_secret_key(prompter: Prompter, console: Console) -> str:
    console.print("[bold]Step 3: Getting Stripe Secret Key[/bold]")
    console.print(f"You can find your Stripe Secret Key at: {STRIPE_API_KEYS_URL}")
    return collect_secret(prompter, STRIPE_SECRET_KEY, "Enter your Stripe Secret Key")


def generate_secret() -> str:
    """Return 32 bytes from the OS CSPRNG as 64 lowercase hex characters."""
    return secrets.token_hex(AUTH_SECRET_BYTES)
