"""
System package manager detection and installs.

Linux and WSL machines get their OS-level packages (Zsh, curl, xz, direnv)
from whichever of a fixed priority list of package managers is present.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from devenvkit.core.privilege import Privilege
from devenvkit.core.runner import CommandResult, CommandRunner

logger = logging.getLogger(__name__)


@dataclass
class SystemPackageManager:
    """
    A system package manager and the commands it needs.

    Attributes:
        name: Executable name ('apt', 'dnf', 'yum', 'pacman')
        description: Human readable family ('Debian/Ubuntu', ...)
        install_args: Arguments after the executable for a non-interactive install
        refresh_args: Arguments that refresh the package index (run once per session)
        aliases: Package names that differ from the generic name on this manager
        unavailable: Generic package names this manager does not ship
    """

    name: str
    description: str
    install_args: List[str]
    refresh_args: Optional[List[str]] = None
    aliases: Dict[str, str] = field(default_factory=dict)
    unavailable: List[str] = field(default_factory=list)
    _refreshed: bool = field(default=False, repr=False, compare=False)

    def package_name(self, package: str) -> str:
        return self.aliases.get(package, package)

    def provides(self, package: str) -> bool:
        return package not in self.unavailable

    def install(
        self,
        runner: CommandRunner,
        privilege: Privilege,
        packages: Sequence[str],
    ) -> CommandResult:
        """
        Install packages, refreshing the index first if this manager needs it.

        Output is not captured so the user sees the package manager's progress.

        Returns:
            Result of the install command (or of a failed refresh)
        """
        if self.refresh_args and not self._refreshed:
            refresh = runner.run(
                privilege.wrap([self.name] + self.refresh_args), capture=False
            )
            if not refresh.ok:
                return refresh
            self._refreshed = True

        names = [self.package_name(p) for p in packages]
        logger.debug(f"Installing {', '.join(names)} with {self.name}")
        return runner.run(
            privilege.wrap([self.name] + self.install_args + names), capture=False
        )

    def __str__(self) -> str:
        return f"{self.name} ({self.description})"


def _known_managers() -> List[SystemPackageManager]:
    """Package managers in detection priority order."""
    return [
        SystemPackageManager(
            name="apt",
            description="Debian/Ubuntu",
            install_args=["install", "-y"],
            refresh_args=["update"],
            aliases={"xz": "xz-utils"},
        ),
        SystemPackageManager(
            name="dnf",
            description="Fedora",
            install_args=["install", "-y"],
        ),
        SystemPackageManager(
            name="yum",
            description="RHEL/CentOS",
            install_args=["install", "-y"],
            unavailable=["direnv"],
        ),
        SystemPackageManager(
            name="pacman",
            description="Arch",
            install_args=["-S", "--noconfirm"],
        ),
    ]


PRIORITY = [m.name for m in _known_managers()]


def get_package_manager(name: str) -> SystemPackageManager:
    """
    Get a fresh package manager definition by name.

    Raises:
        KeyError: If the name is not a known package manager
    """
    for manager in _known_managers():
        if manager.name == name:
            return manager
    raise KeyError(f"Unknown package manager: {name}. Available: {', '.join(PRIORITY)}")


def detect_package_manager(runner: CommandRunner) -> Optional[SystemPackageManager]:
    """
    Detect the system package manager; the first one in PRIORITY on PATH wins.

    Returns:
        SystemPackageManager or None when none is found
    """
    for name in PRIORITY:
        if runner.has(name):
            manager = get_package_manager(name)
            logger.debug(f"Detected package manager: {manager}")
            return manager
    logger.debug("No standard package manager detected")
    return None
