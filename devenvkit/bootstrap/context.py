"""
Shared state for a bootstrap run.

BootstrapContext carries the facts detected up front (platform, privilege,
package manager) plus the handles every step needs (command runner, prompt
provider, reporter) and the values earlier steps hand to later ones.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from devenvkit.config.settings import BootstrapConfig
from devenvkit.core.console import Reporter
from devenvkit.core.exceptions import DevEnvKitError
from devenvkit.core.package_manager import SystemPackageManager
from devenvkit.core.platform import PlatformInfo
from devenvkit.core.privilege import NO_PRIVILEGE, Privilege
from devenvkit.core.prompts import PromptProvider
from devenvkit.core.runner import CommandRunner

logger = logging.getLogger(__name__)


@dataclass
class BootstrapContext:
    """
    Everything a step may read or update.

    Attributes:
        config: Run configuration
        platform: Detected platform
        runner: Command runner (owns PATH for child processes)
        prompts: Source of interactive answers
        reporter: User-facing output
        home: Home directory used for dotfiles and project locations
        system_root: Root for system files (/etc/shells, /etc/nix, /nix);
            tests point it at a temporary directory
        privilege: Privilege decision made once at the start of the run
        package_manager: Detected system package manager, if any
        project_dir: Target directory, set by the project directory step
        changed_default_shell: True once the user switched to Zsh this run
    """

    config: BootstrapConfig
    platform: PlatformInfo
    runner: CommandRunner
    prompts: PromptProvider
    reporter: Reporter
    home: Path = field(default_factory=Path.home)
    system_root: Path = Path("/")
    privilege: Privilege = NO_PRIVILEGE
    package_manager: Optional[SystemPackageManager] = None
    project_dir: Optional[Path] = None
    changed_default_shell: bool = False

    @property
    def has_privilege(self) -> bool:
        return self.privilege.available

    @property
    def current_shell(self) -> str:
        """Basename of the login shell from $SHELL (e.g., 'bash')."""
        return os.path.basename(self.runner.env.get("SHELL", "")) or "sh"

    def system_path(self, *parts: str) -> Path:
        """Resolve an absolute system path (e.g., 'etc', 'shells') under system_root."""
        return self.system_root.joinpath(*parts)

    def sudo(self, args: List[str]) -> List[str]:
        """Prefix a command for privileged execution."""
        return self.privilege.wrap(args)

    def require_project_dir(self) -> Path:
        """Return the selected project directory.

        Raises:
            DevEnvKitError: If no project directory was selected yet
        """
        if self.project_dir is None:
            raise DevEnvKitError("Project directory has not been selected")
        return self.project_dir

    # Well-known files

    @property
    def user_nix_conf(self) -> Path:
        return self.home / ".config" / "nix" / "nix.conf"

    @property
    def system_nix_conf(self) -> Path:
        return self.system_path("etc", "nix", "nix.conf")

    @property
    def etc_shells(self) -> Path:
        return self.system_path("etc", "shells")
