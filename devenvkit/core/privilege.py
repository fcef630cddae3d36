"""
Elevated-privilege detection.

The bootstrap decides once, up front, whether it may run commands as root.
The answer is stored on the context; later privileged commands run through
plain ``sudo`` so an expired credential re-prompts for the password instead of
flipping the decision half-way through a run.
"""

import logging
import os
from dataclasses import dataclass
from typing import List

from devenvkit.core.runner import CommandRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Privilege:
    """Result of privilege detection."""

    available: bool
    is_root: bool = False
    method: str = "none"  # 'root', 'sudo', 'none'

    @property
    def prefix(self) -> List[str]:
        """Command prefix for privileged commands."""
        if self.is_root or not self.available:
            return []
        return ["sudo"]

    def wrap(self, args: List[str]) -> List[str]:
        return self.prefix + list(args)


NO_PRIVILEGE = Privilege(available=False)


def _effective_uid() -> int:
    geteuid = getattr(os, "geteuid", None)
    return geteuid() if geteuid else -1


def probe_sudo(runner: CommandRunner) -> bool:
    """Check for passwordless (or already cached) sudo."""
    if not runner.has("sudo"):
        return False
    return runner.run(["sudo", "-n", "true"]).ok


def detect_privilege(runner: CommandRunner, interactive: bool = False) -> Privilege:
    """
    Detect elevated-privilege availability.

    Args:
        runner: Command runner used for the sudo probes
        interactive: Allow a password prompt (``sudo true``) when the
            non-interactive probe fails

    Returns:
        Privilege describing how privileged commands are run
    """
    if _effective_uid() == 0:
        logger.debug("Running as root")
        return Privilege(available=True, is_root=True, method="root")

    if not runner.has("sudo"):
        logger.debug("sudo not found on PATH")
        return NO_PRIVILEGE

    if probe_sudo(runner):
        return Privilege(available=True, method="sudo")

    if interactive:
        # sudo reads the password from the controlling terminal itself
        if runner.run(["sudo", "true"], capture=False).ok:
            return Privilege(available=True, method="sudo")

    return NO_PRIVILEGE


PRIVILEGE_REASONS = [
    "Installing Zsh (if not present)",
    "Installing system packages (curl, xz)",
    "Installing direnv via package manager",
    "Configuring system-wide Nix settings",
]

PRIVILEGE_FALLBACKS = [
    "Nix will be installed in single-user mode",
    "direnv will be installed via Nix",
    "You can continue with Bash instead of Zsh",
]
