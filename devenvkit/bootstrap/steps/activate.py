"""Activation steps: allow the project's .envrc and try entering the dev shell."""

import logging

from devenvkit.bootstrap.context import BootstrapContext
from devenvkit.bootstrap.steps.base import Step, StepResult

logger = logging.getLogger(__name__)

SMOKE_TEST_MESSAGE = "Development environment is working!"


class ActivateStep(Step):
    """Mark the project's .envrc as trusted with ``direnv allow``."""

    name = "direnv-allow"
    title = "Allowing direnv for this directory..."

    def run(self, ctx: BootstrapContext) -> StepResult:
        project_dir = ctx.require_project_dir()

        if not ctx.runner.has("direnv"):
            return StepResult.failed(
                "direnv is not available, skipping direnv allow",
                [f"After installing direnv, run: cd {project_dir} && direnv allow"],
            )

        result = ctx.runner.run(["direnv", "allow", str(project_dir)], cwd=project_dir)
        if not result.ok:
            logger.debug(f"direnv allow stderr: {result.stderr.strip()}")
            return StepResult.failed(
                "direnv allow failed",
                [f"Run it yourself: cd {project_dir} && direnv allow"],
            )
        return StepResult.applied("direnv allowed for this directory")


class SmokeTestStep(Step):
    """Enter the flake's dev shell once to prove it evaluates and builds."""

    name = "smoke-test"
    title = "Testing Nix development environment..."

    def run(self, ctx: BootstrapContext) -> StepResult:
        project_dir = ctx.require_project_dir()

        if not ctx.runner.has("nix"):
            return StepResult.failed(
                "nix is not on PATH yet, skipping the environment test",
                [f"Open a new terminal and run: cd {project_dir} && nix develop"],
            )

        ctx.reporter.warning("This may take a while on first run (downloading packages)...")

        # Inherit the terminal so the user sees download progress
        result = ctx.runner.run(
            ["nix", "develop", "--command", "echo", SMOKE_TEST_MESSAGE],
            capture=False,
            cwd=project_dir,
        )
        if result.ok:
            return StepResult.satisfied("Successfully entered Nix development shell!")
        return StepResult.failed(
            "Could not enter the Nix development shell",
            ["You may need to restart your terminal and try manually with: nix develop"],
        )
