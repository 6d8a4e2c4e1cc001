from __future__ import annotations

from enum import IntEnum
from typing import Optional, Sequence


class ExitCode(IntEnum):
    OK = 0
    SETUP_ERROR = 1
    CONFIG_ERROR = 2
    RUNTIME_ERROR = 5
    INTERRUPTED = 130


class SetupError(Exception):
    """Base error for the environment setup workflow."""


class ConfigError(SetupError):
    """Raised for configuration, argument or answers-file issues."""


class MissingToolError(SetupError):
    """Raised when a required CLI is not installed (version probe failed)."""


class ToolAuthError(SetupError):
    """Raised when a CLI is installed but not authenticated."""


class CommandError(SetupError):
    """Raised when an external command exits non-zero or cannot be started."""

    def __init__(
        self,
        message: str,
        *,
        argv: Sequence[str] = (),
        returncode: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.argv = list(argv)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

    @property
    def detail(self) -> str:
        return (self.stderr or "").strip() or (self.stdout or "").strip() or str(self)


class ProvisioningError(SetupError):
    """Raised when the remote data store cannot be created or resolved."""


class WebhookError(SetupError):
    """Raised when the webhook listener command fails."""


class ExtractionError(SetupError):
    """Raised when an expected token is absent from captured tool output."""


class ConfigWriteError(SetupError):
    """Raised when the environment file cannot be serialized or written."""


def as_exit_code(exc: BaseException) -> int:
    if isinstance(exc, KeyboardInterrupt):
        return int(ExitCode.INTERRUPTED)
    if isinstance(exc, ConfigError):
        return int(ExitCode.CONFIG_ERROR)
    if isinstance(exc, (MissingToolError, ToolAuthError, CommandError, ProvisioningError, WebhookError)):
        return int(ExitCode.SETUP_ERROR)
    if isinstance(exc, (ExtractionError, ConfigWriteError, SetupError)):
        return int(ExitCode.RUNTIME_ERROR)
    return 1
