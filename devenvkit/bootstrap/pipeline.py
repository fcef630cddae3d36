"""
Bootstrap pipeline.

This module wires the detection phase and the ordered list of steps together:

- prepare_context(): detect platform, privilege and package manager once,
  and report what is already installed
- Bootstrapper: run the steps in order, printing progress and collecting a
  BootstrapReport

Usage:
    reporter = Reporter()
    ctx = prepare_context(load_config(), TerminalPrompt(), reporter)
    report = Bootstrapper(ctx).run()
"""

import logging
from pathlib import Path
from typing import List, Optional

from devenvkit.bootstrap.context import BootstrapContext
from devenvkit.bootstrap.inventory import probe_tools
from devenvkit.bootstrap.report import BootstrapReport
from devenvkit.bootstrap.steps import (
    ActivateStep,
    DefaultShellStep,
    EnableFlakesStep,
    EnsureDirenvStep,
    EnsureNixStep,
    EnsureShellStep,
    FetchConfigStep,
    ProjectDirectoryStep,
    ShellHooksStep,
    SmokeTestStep,
    Step,
    StepResult,
    TriggerFileStep,
)
from devenvkit.config.settings import BootstrapConfig
from devenvkit.core.console import Reporter
from devenvkit.core.package_manager import detect_package_manager
from devenvkit.core.platform import PlatformInfo, detect_platform
from devenvkit.core.privilege import (
    PRIVILEGE_FALLBACKS,
    PRIVILEGE_REASONS,
    detect_privilege,
)
from devenvkit.core.prompts import PromptProvider
from devenvkit.core.runner import CommandRunner

logger = logging.getLogger(__name__)


def default_steps() -> List[Step]:
    """The full setup, in execution order."""
    return [
        EnsureShellStep(),
        DefaultShellStep(),
        EnsureNixStep(),
        EnableFlakesStep(),
        EnsureDirenvStep(),
        ShellHooksStep(),
        ProjectDirectoryStep(),
        FetchConfigStep(),
        TriggerFileStep(),
        ActivateStep(),
        SmokeTestStep(),
    ]


def prepare_context(
    config: BootstrapConfig,
    prompts: PromptProvider,
    reporter: Reporter,
    runner: Optional[CommandRunner] = None,
    home: Optional[Path] = None,
    system_root: Path = Path("/"),
    platform: Optional[PlatformInfo] = None,
) -> BootstrapContext:
    """
    Run the detection phase and build the context for the steps.

    Args:
        config: Run configuration
        prompts: Source of interactive answers
        reporter: User-facing output
        runner: Command runner (a fresh one over os.environ if None)
        home: Home directory (Path.home() if None)
        system_root: Root for system files
        platform: Platform override (detected if None)

    Returns:
        Context with platform, privilege and package manager filled in
    """
    runner = runner or CommandRunner()
    platform = platform or detect_platform()

    ctx = BootstrapContext(
        config=config,
        platform=platform,
        runner=runner,
        prompts=prompts,
        reporter=reporter,
        home=home or Path.home(),
        system_root=system_root,
    )

    reporter.banner(
        f"{config.project_name} Development Environment",
        "Setup Script",
    )
    reporter.info()
    reporter.highlight("Detected OS: ", platform.os)
    logger.debug(f"Platform: {platform}")

    if not platform.is_supported:
        reporter.warning(
            f"Unsupported operating system '{platform.os}'. "
            "Continuing without system package installs."
        )

    _detect_privilege(ctx)
    _detect_package_manager(ctx)
    _report_existing(ctx)
    return ctx


def _detect_privilege(ctx: BootstrapContext) -> None:
    reporter = ctx.reporter

    if not ctx.platform.is_linux_like:
        ctx.privilege = detect_privilege(ctx.runner, interactive=False)
        logger.debug(f"Privilege: {ctx.privilege.method}")
        return

    reporter.step("Checking for sudo access...")
    reporter.info("This script needs sudo access for:")
    reporter.bullets(PRIVILEGE_REASONS)
    reporter.info()

    ctx.privilege = detect_privilege(ctx.runner, interactive=True)
    logger.debug(f"Privilege: {ctx.privilege.method}")

    if ctx.privilege.is_root:
        reporter.success("Running as root")
    elif ctx.has_privilege:
        reporter.success("Sudo access confirmed")
    else:
        reporter.warning("No sudo access. Some features will be limited:")
        reporter.bullets(PRIVILEGE_FALLBACKS)


def _detect_package_manager(ctx: BootstrapContext) -> None:
    if not ctx.platform.is_linux_like:
        return
    ctx.package_manager = detect_package_manager(ctx.runner)
    if ctx.package_manager is None:
        ctx.reporter.warning("Could not detect package manager")
    else:
        ctx.reporter.success(f"Package manager: {ctx.package_manager.name}")


def _report_existing(ctx: BootstrapContext) -> None:
    ctx.reporter.step("Checking existing installations...")
    for status in probe_tools(ctx.runner):
        ctx.reporter.info(f"  {status.label}: {status.describe()}")


class Bootstrapper:
    """Run bootstrap steps in order against one context."""

    def __init__(self, ctx: BootstrapContext, steps: Optional[List[Step]] = None):
        self.ctx = ctx
        self.steps = default_steps() if steps is None else list(steps)

    def run(self) -> BootstrapReport:
        """
        Run every step.

        A FAILED result is reported and the run continues. Exceptions
        (DevEnvKitError and subclasses) abort the run and propagate.

        Returns:
            BootstrapReport with one entry per step
        """
        report = BootstrapReport()
        for number, step in enumerate(self.steps, start=1):
            self.ctx.reporter.step(f"Step {number}: {step.title}")
            logger.debug(f"Running step {step.name}")
            result = step.run(self.ctx)
            self._show(result)
            report.add(step.name, result)
            logger.debug(f"Step {step.name}: {result.status.value}")
        return report

    def _show(self, result: StepResult) -> None:
        reporter = self.ctx.reporter
        if result.ok:
            reporter.success(result.message)
        else:
            reporter.warning(result.message)
        for warning in result.warnings:
            reporter.warning(warning)
