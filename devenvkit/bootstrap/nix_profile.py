"""
Nix profile activation for the running process.

A shell would ``source`` Nix's profile script to put Nix on PATH. A Python
process cannot source shell code, so this module finds the profile the
installer created and prepends its bin directories to the runner's PATH,
which is the part of the profile later steps rely on.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from devenvkit.bootstrap.context import BootstrapContext

logger = logging.getLogger(__name__)

DAEMON_PROFILE = ("nix", "var", "nix", "profiles", "default")
PROFILE_SCRIPT = ("etc", "profile.d")


def _daemon_profile(ctx: BootstrapContext) -> Path:
    return ctx.system_path(*DAEMON_PROFILE)


def _user_profile(ctx: BootstrapContext) -> Path:
    return ctx.home / ".nix-profile"


def profile_candidates(ctx: BootstrapContext) -> List[Tuple[Path, List[Path]]]:
    """
    Profile scripts to look for, in order, with the bin directories each implies.

    macOS installs are always multi-user, so only the daemon profile is
    considered there. Elsewhere the single-user profile wins over the daemon
    one.
    """
    daemon = _daemon_profile(ctx)
    user = _user_profile(ctx)
    daemon_entry = (
        daemon.joinpath(*PROFILE_SCRIPT, "nix-daemon.sh"),
        [user / "bin", daemon / "bin"],
    )
    if ctx.platform.os == "macos":
        return [daemon_entry]
    return [
        (user.joinpath(*PROFILE_SCRIPT, "nix.sh"), [user / "bin"]),
        daemon_entry,
    ]


def load_nix_profile(ctx: BootstrapContext) -> Optional[Path]:
    """
    Put the Nix profile's bin directories on the runner's PATH.

    Returns:
        The profile script that was found, or None if there is none
    """
    for script, bin_dirs in profile_candidates(ctx):
        if script.exists():
            ctx.runner.prepend_path(*bin_dirs)
            logger.debug(f"Loaded Nix profile {script}")
            return script
    logger.debug("No Nix profile script found")
    return None


SINGLE_USER_SCRIPT = "~/.nix-profile/etc/profile.d/nix.sh"
MULTI_USER_SCRIPT = "/nix/var/nix/profiles/default/etc/profile.d/nix-daemon.sh"
