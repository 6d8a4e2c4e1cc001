from __future__ import annotations

import sys
from typing import Optional, Sequence

from rich.console import Console

from .answers import load_answers_file
from .config import dump_config, load_setup_config
from .logging import LogConfig, get_logger, setup_logging
from .orchestrator import SetupContext, run_setup
from .prompts import Prompter, RichPrompter
from .util.errors import ExitCode, as_exit_code

LOG = get_logger(__name__)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for `saas-setup`. The only place that exits the process."""
    console = Console()
    try:
        cfg = load_setup_config(argv)
        setup_logging(LogConfig(level=cfg.log_level, json_logs=cfg.json_logs))
        LOG.debug("Resolved configuration", extra={"config": dump_config(cfg)})

        prompter: Prompter
        if cfg.answers is not None:
            prompter = load_answers_file(cfg.answers)
        else:
            prompter = RichPrompter(console)

        run_setup(SetupContext(config=cfg, prompter=prompter, console=console))
        sys.exit(int(ExitCode.OK))
    except SystemExit:
        raise
    except KeyboardInterrupt as e:
        console.print("\nAborted.")
        sys.exit(as_exit_code(e))
    except Exception as e:
        # Map to consistent exit code and log
        setup_logging(LogConfig())
        LOG.error("Setup failed", extra={"error": str(e)})
        sys.exit(as_exit_code(e))


if __name__ == "__main__":
    main()
