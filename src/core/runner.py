"""
External command execution.

Every call takes the working directory and environment explicitly; the
process-wide os.environ and current directory are never changed.
"""

import logging
import os
import shlex
import shutil
import subprocess
import time
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, Field


NOT_FOUND_EXIT_CODE = 127


class CommandResult(BaseModel):
    """Outcome of one external command."""
    command: str
    returncode: int
    stdout: str = ""
    stderr: str = ""
    duration_seconds: float = Field(default=0.0)

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def first_line(self) -> Optional[str]:
        for line in self.stdout.splitlines():
            if line.strip():
                return line.strip()
        return None

    def summary(self, limit: int = 500) -> str:
        """Short diagnostic text, stderr preferred."""
        text = (self.stderr or self.stdout or f"exit status {self.returncode}").strip()
        return text[-limit:]


def split_command(command: str) -> List[str]:
    return shlex.split(command, posix=os.name != "nt")


class CommandRunner:
    """Runs command lines and discovers executables against an explicit PATH."""

    def __init__(self, timeout: Optional[float] = None):
        """
        Args:
            timeout: Seconds before a command is killed; None waits forever
        """
        self.logger = logging.getLogger(__name__)
        self.timeout = timeout

    def which(self, executable: str, env: Optional[Mapping[str, str]] = None) -> Optional[str]:
        """Locate an executable on the PATH of the given environment."""
        path = (env if env is not None else os.environ).get("PATH", os.defpath)
        return shutil.which(executable, path=path)

    def run(self, command: str, cwd: Optional[Path] = None,
            env: Optional[Mapping[str, str]] = None) -> CommandResult:
        """
        Run a command line to completion.

        A missing executable is reported as exit status 127 rather than raised,
        so detection commands can treat it like any other failure.
        """
        argv = split_command(command)
        if not argv:
            raise ValueError("Empty command")

        run_env: Dict[str, str] = dict(env) if env is not None else dict(os.environ)
        resolved = self.which(argv[0], run_env)
        if not resolved:
            self.logger.debug(f"Executable not found for command: {command}")
            return CommandResult(
                command=command,
                returncode=NOT_FOUND_EXIT_CODE,
                stderr=f"{argv[0]}: command not found"
            )

        self.logger.debug(f"Running: {command} (cwd={cwd or '.'})")
        start = time.monotonic()
        try:
            completed = subprocess.run(
                [resolved] + argv[1:],
                cwd=str(cwd) if cwd else None,
                env=run_env,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired as e:
            return CommandResult(
                command=command,
                returncode=-1,
                stdout=e.stdout if isinstance(e.stdout, str) else "",
                stderr=f"Timed out after {self.timeout} seconds",
                duration_seconds=time.monotonic() - start
            )
        except OSError as e:
            return CommandResult(
                command=command,
                returncode=NOT_FOUND_EXIT_CODE,
                stderr=str(e),
                duration_seconds=time.monotonic() - start
            )

        result = CommandResult(
            command=command,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            duration_seconds=time.monotonic() - start
        )
        if result.stdout:
            self.logger.debug(result.stdout.rstrip())
        if result.stderr:
            self.logger.debug(result.stderr.rstrip())
        return result

    def run_interactive(self, command: str, cwd: Optional[Path] = None,
                        env: Optional[Mapping[str, str]] = None) -> CommandResult:
        """Run a long-lived command (dev server) attached to the terminal."""
        argv = split_command(command)
        if not argv:
            raise ValueError("Empty command")

        run_env: Dict[str, str] = dict(env) if env is not None else dict(os.environ)
        resolved = self.which(argv[0], run_env)
        if not resolved:
            return CommandResult(
                command=command,
                returncode=NOT_FOUND_EXIT_CODE,
                stderr=f"{argv[0]}: command not found"
            )

        self.logger.debug(f"Running attached: {command} (cwd={cwd or '.'})")
        start = time.monotonic()
        try:
            completed = subprocess.run([resolved] + argv[1:], cwd=str(cwd) if cwd else None, env=run_env)
        except OSError as e:
            return CommandResult(
                command=command,
                returncode=NOT_FOUND_EXIT_CODE,
                stderr=str(e),
                duration_seconds=time.monotonic() - start
            )
        return CommandResult(
            command=command,
            returncode=completed.returncode,
            duration_seconds=time.monotonic() - start
        )
