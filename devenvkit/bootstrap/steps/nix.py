"""
Nix steps: install Nix and enable the flakes feature flag.

Nix is the one tool the rest of the setup cannot do without, so failures to
obtain it (missing prerequisites without sudo, a failing installer) abort
the run.
"""

import logging
import re
import tempfile
from pathlib import Path
from typing import Pattern

from devenvkit.bootstrap.context import BootstrapContext
from devenvkit.bootstrap.nix_profile import load_nix_profile
from devenvkit.bootstrap.steps.base import (
    Step,
    StepResult,
    append_system_line,
    display_path,
)
from devenvkit.core.download import download_file
from devenvkit.core.exceptions import CommandError, InstallError, PrerequisiteError
from devenvkit.core.filesystem import ensure_line, file_has_line

logger = logging.getLogger(__name__)

INSTALL_PREREQUISITES = ("curl", "xz")


def feature_flag_pattern(flag: str) -> Pattern:
    """
    Regex recognising an existing line that already enables the flag.

    For ``experimental-features = nix-command flakes`` this matches any line
    with ``experimental-features`` followed later by ``flakes``, so an
    existing setting with extra features is left alone.

    Example:
        >>> bool(feature_flag_pattern("experimental-features = nix-command flakes")
        ...      .search("experimental-features = flakes nix-command ca-derivations"))
        True
    """
    key, _, value = flag.partition("=")
    words = value.split()
    if not words:
        return re.compile(rf"^\s*{re.escape(key.strip())}\s*$")
    return re.compile(rf"{re.escape(key.strip())}.*{re.escape(words[-1])}")


class EnsureNixStep(Step):
    """Install Nix with the official installer if it is missing."""

    name = "nix"
    title = "Checking Nix installation..."

    def run(self, ctx: BootstrapContext) -> StepResult:
        version = ctx.runner.version("nix")
        if not version and load_nix_profile(ctx):
            # Installed by an earlier run, just not on this shell's PATH yet
            version = ctx.runner.version("nix")
        if version:
            load_nix_profile(ctx)
            return StepResult.satisfied(f"Nix is already installed ({version})")

        ctx.reporter.warning("Nix not found. Installing...")

        if ctx.platform.is_linux_like:
            self._install_prerequisites(ctx)

        self._run_installer(ctx)
        load_nix_profile(ctx)

        warnings = ["You may need to restart your terminal or run: source ~/.zshrc"]
        if not ctx.runner.has("nix"):
            warnings.append("nix is not on PATH yet; open a new terminal after setup")
        return StepResult.applied("Nix installed successfully", warnings)

    def _install_prerequisites(self, ctx: BootstrapContext) -> None:
        """
        Make sure curl and xz are present for the Nix installer.

        Raises:
            CommandError: If the package manager install fails
            PrerequisiteError: If the tools are missing and cannot be installed
        """
        ctx.reporter.step("Installing required dependencies...")
        needed = ", ".join(INSTALL_PREREQUISITES)

        if ctx.has_privilege:
            if ctx.package_manager is None:
                ctx.reporter.warning(f"Please ensure {needed} are installed")
                return
            result = ctx.package_manager.install(
                ctx.runner, ctx.privilege, list(INSTALL_PREREQUISITES)
            )
            if not result.ok:
                raise CommandError(result)
            return

        ctx.reporter.warning(f"No sudo access. Please ensure {needed} are installed.")
        missing = [tool for tool in INSTALL_PREREQUISITES if not ctx.runner.has(tool)]
        if missing:
            raise PrerequisiteError(
                missing,
                "These are required for Nix installation. "
                "Please install them manually and run this script again.",
            )

    def _run_installer(self, ctx: BootstrapContext) -> None:
        """
        Download the official installer and run it.

        Multi-user (daemon) mode needs root; without it Nix goes into the
        user's home directory in single-user mode.

        Raises:
            DownloadError: If the installer cannot be downloaded
            InstallError: If the installer exits with an error
        """
        ctx.reporter.step("Downloading and installing Nix...")

        with tempfile.TemporaryDirectory(prefix="devenvkit_") as tmp:
            with ctx.reporter.progress("Downloading Nix installer...") as on_progress:
                script = download_file(
                    ctx.config.installer_url,
                    Path(tmp) / "install-nix.sh",
                    progress_callback=on_progress,
                    timeout=ctx.config.download_timeout,
                )

            if ctx.has_privilege:
                mode_args = ["--daemon", "--yes"]
            else:
                ctx.reporter.warning(
                    "Installing Nix in single-user mode (no sudo access for daemon mode)"
                )
                mode_args = ["--no-daemon"]

            result = ctx.runner.run(["sh", str(script)] + mode_args, capture=False)

        if not result.ok:
            raise InstallError(
                f"Nix installer failed with exit code {result.returncode}. "
                "Check the installer output above."
            )


class EnableFlakesStep(Step):
    """Enable the flakes feature flag in the user (and system) nix.conf."""

    name = "flakes"
    title = "Enabling Nix Flakes..."

    def run(self, ctx: BootstrapContext) -> StepResult:
        flag = ctx.config.feature_flag
        pattern = feature_flag_pattern(flag)
        user_conf = display_path(ctx, ctx.user_nix_conf)

        user_changed = ensure_line(ctx.user_nix_conf, flag, pattern)

        warnings = []
        system_changed = False
        system_conf = ctx.system_nix_conf

        if (
            ctx.platform.is_supported
            and system_conf.is_file()
            and not file_has_line(system_conf, flag, pattern)
        ):
            if ctx.has_privilege:
                ctx.reporter.warning("Adding flakes to system-wide Nix configuration...")
                system_changed = append_system_line(ctx, system_conf, flag)
                if not system_changed:
                    warnings.append(f"Failed to update {system_conf}")
            else:
                warnings.append(f"No sudo access to modify {system_conf}")
                warnings.append(f"Flakes enabled in user config only ({user_conf})")

        if user_changed:
            where = f"{user_conf} and system-wide" if system_changed else user_conf
            return StepResult.applied(f"Flakes enabled in {where}", warnings)
        if system_changed:
            return StepResult.applied("Flakes enabled system-wide", warnings)
        return StepResult.satisfied("Flakes are already enabled", warnings)
