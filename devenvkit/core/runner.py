"""
Subprocess execution and command discovery.

CommandRunner is the single seam through which DevEnvKit probes for tools and
runs external commands. It owns the environment passed to child processes, so
loading the Nix profile (prepending its bin directories to PATH) makes freshly
installed tools visible to every later step of the same run.
"""

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from devenvkit.core.exceptions import CommandError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of a finished subprocess."""

    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def first_line(self) -> str:
        """First non-empty line of stdout (or stderr), handy for version output."""
        for line in (self.stdout or self.stderr or "").splitlines():
            if line.strip():
                return line.strip()
        return ""


class CommandRunner:
    """Run commands and locate executables against a private environment."""

    def __init__(self, env: Optional[Dict[str, str]] = None):
        """
        Initialize runner.

        Args:
            env: Environment for child processes (copy of os.environ if None)
        """
        self.env = dict(os.environ if env is None else env)

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def which(self, name: str) -> Optional[str]:
        """Return the full path of an executable on this runner's PATH."""
        return shutil.which(name, path=self.env.get("PATH", ""))

    def has(self, name: str) -> bool:
        return self.which(name) is not None

    def prepend_path(self, *directories: Union[str, Path]) -> None:
        """Put directories in front of PATH, skipping ones already present."""
        current = [p for p in self.env.get("PATH", "").split(os.pathsep) if p]
        for directory in reversed(directories):
            directory = str(directory)
            if directory in current:
                continue
            current.insert(0, directory)
            logger.debug(f"Prepended {directory} to PATH")
        self.env["PATH"] = os.pathsep.join(current)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run(
        self,
        args: Sequence[str],
        check: bool = False,
        capture: bool = True,
        input: Optional[str] = None,
        cwd: Optional[Path] = None,
    ) -> CommandResult:
        """
        Run a command to completion.

        Args:
            args: Command and arguments
            check: Raise CommandError on non-zero exit
            capture: Capture stdout/stderr; when False the child inherits the
                terminal (needed for installers and password prompts)
            input: Text fed to the child's stdin
            cwd: Working directory

        Returns:
            CommandResult; a missing executable yields returncode 127

        Raises:
            CommandError: If check is True and the command failed
        """
        args = [str(a) for a in args]
        logger.debug(f"Running: {' '.join(args)}" + (f" (cwd={cwd})" if cwd else ""))

        try:
            completed = subprocess.run(
                args,
                capture_output=capture,
                text=True,
                input=input,
                cwd=str(cwd) if cwd else None,
                env=self.env,
            )
        except FileNotFoundError:
            result = CommandResult(args, 127, "", f"{args[0]}: command not found")
        else:
            result = CommandResult(
                args,
                completed.returncode,
                completed.stdout or "",
                completed.stderr or "",
            )

        logger.debug(f"Exit code {result.returncode}: {args[0]}")
        if check and not result.ok:
            raise CommandError(result)
        return result

    def version(self, name: str, flag: str = "--version") -> Optional[str]:
        """
        Get the first line of a tool's version output.

        Returns:
            Version line, or None if the tool is not installed
        """
        if not self.has(name):
            return None
        result = self.run([name, flag])
        return result.first_line() or name
