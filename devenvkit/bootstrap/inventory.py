"""Probe the tools the bootstrap manages and report what is already installed."""

import logging
from dataclasses import dataclass
from typing import List, Optional

from devenvkit.core.runner import CommandRunner

logger = logging.getLogger(__name__)

# (label, executable, version flag)
MANAGED_TOOLS = [
    ("Zsh", "zsh", "--version"),
    ("Nix", "nix", "--version"),
    ("direnv", "direnv", "version"),
]


@dataclass
class ToolStatus:
    """Installed state of one managed tool."""

    label: str
    executable: str
    version: Optional[str] = None

    @property
    def installed(self) -> bool:
        return self.version is not None

    def describe(self) -> str:
        return self.version if self.installed else "not installed"


def probe_tools(runner: CommandRunner) -> List[ToolStatus]:
    """Look up Zsh, Nix and direnv on the runner's PATH."""
    statuses = []
    for label, executable, flag in MANAGED_TOOLS:
        version = runner.version(executable, flag)
        logger.debug(f"{label}: {version or 'not installed'}")
        statuses.append(ToolStatus(label, executable, version))
    return statuses
