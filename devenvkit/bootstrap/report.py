"""
Run summary and the closing "next steps" instructions.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from devenvkit.bootstrap.context import BootstrapContext
from devenvkit.bootstrap.nix_profile import MULTI_USER_SCRIPT, SINGLE_USER_SCRIPT
from devenvkit.bootstrap.steps.base import StepResult, StepStatus
from devenvkit.bootstrap.steps.shell import TARGET_SHELL

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    StepStatus.SATISFIED: "[devenv.ok]ok[/]",
    StepStatus.CHANGED: "[devenv.ok]changed[/]",
    StepStatus.FAILED: "[devenv.error]failed[/]",
}


@dataclass
class BootstrapReport:
    """Ordered results of a pipeline run."""

    results: List[Tuple[str, StepResult]] = field(default_factory=list)

    def add(self, name: str, result: StepResult) -> None:
        self.results.append((name, result))

    def get(self, name: str) -> StepResult:
        for step_name, result in self.results:
            if step_name == name:
                return result
        raise KeyError(name)

    @property
    def changed(self) -> List[str]:
        return [name for name, result in self.results if result.changed]

    @property
    def failed(self) -> List[str]:
        return [name for name, result in self.results if not result.ok]

    @property
    def ok(self) -> bool:
        return not self.failed


def print_summary(ctx: BootstrapContext, report: BootstrapReport) -> None:
    """Print one table row per step."""
    rows = {name: STATUS_LABELS[result.status] for name, result in report.results}
    ctx.reporter.table("Summary", rows)


def print_next_steps(ctx: BootstrapContext) -> None:
    """Tell the user how to start using the environment."""
    reporter = ctx.reporter
    shell = ctx.current_shell

    reporter.info()
    reporter.banner("Setup Complete!")
    reporter.info()

    if ctx.project_dir is not None:
        reporter.highlight("Your project is located at: ", str(ctx.project_dir))
        reporter.info()

    reporter.heading("Next steps:")
    reporter.info("1. Restart your terminal or run:")
    if shell in ("zsh", "bash"):
        reporter.info(f"   source ~/.{shell}rc")
    else:
        reporter.info(f"   source ~/.{TARGET_SHELL}rc  (or ~/.bashrc)")
    if ctx.changed_default_shell:
        reporter.info(
            f"   (Your default shell is now {TARGET_SHELL}; log out and back in to use it)"
        )
    reporter.info()

    if ctx.project_dir is not None:
        reporter.info("2. Navigate to your project:")
        reporter.info(f"   cd {ctx.project_dir}")
        reporter.info()
        reporter.info("3. The development environment will load automatically!")
        reporter.info("   (direnv will activate the Nix environment)")
        reporter.info()

    reporter.heading("Troubleshooting:")
    reporter.bullets(
        [
            "If direnv doesn't activate, run: direnv allow",
            "If nix commands aren't found, run:",
            f"    source {SINGLE_USER_SCRIPT}",
            "  or (for multi-user install):",
            f"    source {MULTI_USER_SCRIPT}",
        ]
    )
    if ctx.platform.os == "wsl":
        reporter.bullets(
            ["For graphics on WSL, make sure WSLg or an X server is available"]
        )
    reporter.info()
