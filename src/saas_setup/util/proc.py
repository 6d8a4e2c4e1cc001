from __future__ import annotations

import subprocess
from dataclasses import dataclass
from shlex import quote
from typing import Callable, Iterable, List, Sequence

from ..logging import get_logger
from .errors import CommandError

LOG = get_logger(__name__)


@dataclass(frozen=True)
class CommandResult:
    argv: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""


# Anything that takes an argv and returns a CommandResult, raising CommandError on failure.
CommandRunner = Callable[[Sequence[str]], CommandResult]


def format_command(args: Iterable[str]) -> str:
    return " ".join(quote(str(a)) for a in args)


def run_command(argv: Sequence[str]) -> CommandResult:
    """Run an external command to completion and capture its output.

    There is no timeout: a hung tool stalls the run until the operator
    interrupts it.
    """
    args = [str(a) for a in argv]
    cmdline = format_command(args)
    LOG.debug("Running command", extra={"command": cmdline})
    try:
        proc = subprocess.run(args, text=True, capture_output=True)
    except FileNotFoundError as e:
        raise CommandError(f"Command not found: {args[0]}", argv=args, returncode=127, stderr=str(e)) from e
    except OSError as e:
        raise CommandError(f"Failed to start {cmdline}: {e}", argv=args, stderr=str(e)) from e

    result = CommandResult(argv=args, returncode=proc.returncode, stdout=proc.stdout or "", stderr=proc.stderr or "")
    if proc.returncode != 0:
        detail = result.stderr.strip() or result.stdout.strip() or f"exited with code {proc.returncode}"
        raise CommandError(
            f"{cmdline} failed: {detail}",
            argv=args,
            returncode=proc.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )
    return result
