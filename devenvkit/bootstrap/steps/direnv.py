"""Install direnv, preferring the platform's native package manager over Nix."""

import logging

from devenvkit.bootstrap.context import BootstrapContext
from devenvkit.bootstrap.nix_profile import load_nix_profile
from devenvkit.bootstrap.steps.base import Step, StepResult

logger = logging.getLogger(__name__)

NIX_ENV_INSTALL = ["nix-env", "-iA", "nixpkgs.direnv"]


class EnsureDirenvStep(Step):
    """Install direnv if it is missing."""

    name = "direnv"
    title = "Installing direnv..."

    def run(self, ctx: BootstrapContext) -> StepResult:
        version = ctx.runner.version("direnv", "version")
        if version:
            return StepResult.satisfied(f"direnv is already installed ({version})")

        ctx.reporter.warning("direnv not found. Installing...")
        method = self._install(ctx)

        # nix-env puts direnv into the user profile
        load_nix_profile(ctx)

        if ctx.runner.has("direnv"):
            return StepResult.applied(f"direnv installed with {method}")
        return StepResult.failed(
            "direnv installation failed",
            ["Install it manually: https://direnv.net/docs/installation.html"],
        )

    def _install(self, ctx: BootstrapContext) -> str:
        """Try the native installer for the platform, then Nix. Returns the method used."""
        if ctx.platform.os == "macos":
            if ctx.runner.has("brew"):
                if ctx.runner.run(["brew", "install", "direnv"], capture=False).ok:
                    return "Homebrew"
                ctx.reporter.warning("Homebrew install failed, installing with Nix...")
            else:
                ctx.reporter.warning("Homebrew not found. Installing direnv with Nix...")

        elif ctx.platform.is_linux_like:
            manager = ctx.package_manager
            if not ctx.has_privilege:
                ctx.reporter.warning("No sudo access. Will install direnv with Nix.")
            elif manager is not None and manager.provides("direnv"):
                ctx.reporter.step(f"Attempting to install direnv with {manager.name}...")
                if manager.install(ctx.runner, ctx.privilege, ["direnv"]).ok:
                    return manager.name
                ctx.reporter.warning("Package manager install failed, installing with Nix...")

        return self._install_with_nix(ctx)

    def _install_with_nix(self, ctx: BootstrapContext) -> str:
        result = ctx.runner.run(NIX_ENV_INSTALL, capture=False)
        if not result.ok:
            logger.warning(f"nix-env exited with code {result.returncode}")
        return "Nix"
