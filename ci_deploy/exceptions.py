"""Exceptions raised by the change detection and deployment helpers."""

from typing import Sequence


class CIDeployError(Exception):
    """Base class for all ci-deploy errors."""


class ConfigurationError(CIDeployError):
    """Raised when required configuration is missing or invalid."""


class FetchError(CIDeployError):
    """Raised when the changed-file list or the latest code cannot be retrieved."""


class SecretNotFoundError(CIDeployError):
    """Raised when a credential id cannot be resolved."""


class CommandExecutionError(CIDeployError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = ""):
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr.strip() else ""
        super().__init__(
            f"Command '{' '.join(self.command)}' failed with exit code {returncode}{detail}"
        )
