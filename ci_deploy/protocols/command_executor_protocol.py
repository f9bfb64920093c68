"""Command executor protocol interface."""

from pathlib import Path
from typing import Dict, Optional, Protocol, Sequence, Union, runtime_checkable


@runtime_checkable
class CommandExecutorProtocol(Protocol):
    """Runs external commands given as argument lists."""

    def run(
        self,
        args: Sequence[str],
        cwd: Optional[Union[str, Path]] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> str:
        """Run the command and return its stdout. Raises CommandExecutionError."""
        ...
