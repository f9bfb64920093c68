"""Runs external commands from argument lists."""

import os
import subprocess
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from ..exceptions import CommandExecutionError


class SubprocessCommandExecutor:
    """Executes commands with subprocess, never through a shell."""

    def run(
        self,
        args: Sequence[str],
        cwd: Optional[Union[str, Path]] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> str:
        command = [str(arg) for arg in args]
        print(f"Running: {' '.join(command)}", file=sys.stderr)

        merged_env = {**os.environ, **env} if env else None
        try:
            result = subprocess.run(
                command,
                cwd=str(cwd) if cwd is not None else None,
                env=merged_env,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise CommandExecutionError(command, 127, str(e)) from e

        if result.returncode != 0:
            raise CommandExecutionError(command, result.returncode, result.stderr or "")
        return result.stdout


class DryRunCommandExecutor:
    """Records commands and prints them instead of running them."""

    def __init__(self):
        self.commands: List[List[str]] = []

    def run(
        self,
        args: Sequence[str],
        cwd: Optional[Union[str, Path]] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> str:
        command = [str(arg) for arg in args]
        self.commands.append(command)
        location = f" (in {cwd})" if cwd is not None else ""
        print(f"🔧 DRY RUN: {' '.join(command)}{location}", file=sys.stderr)
        return ""
