"""
Doctor command for diagnosing environment issues.

This module provides read-only health checks for a DevEnvKit setup: the
managed tools, the flakes feature flag, the direnv shell hooks and,
optionally, a project directory.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from devenvkit.bootstrap.inventory import MANAGED_TOOLS
from devenvkit.bootstrap.steps.nix import feature_flag_pattern
from devenvkit.bootstrap.steps.project import ENVRC_NAME
from devenvkit.bootstrap.steps.shell import HOOK_SHELLS, hook_line, hook_pattern, rc_file
from devenvkit.cli.utils import make_reporter, print_error
from devenvkit.config import BootstrapConfig, load_config
from devenvkit.core.exceptions import ConfigError
from devenvkit.core.filesystem import file_has_line
from devenvkit.core.runner import CommandRunner

logger = logging.getLogger(__name__)


@dataclass
class CheckResult:
    """Result of a health check."""

    name: str
    passed: bool
    message: str
    fix_command: Optional[str] = None


class EnvironmentChecker:
    """Check development environment health."""

    def __init__(
        self,
        config: BootstrapConfig,
        runner: Optional[CommandRunner] = None,
        home: Optional[Path] = None,
    ):
        self.config = config
        self.runner = runner or CommandRunner()
        self.home = home or Path.home()

    def check_tool(self, label: str, executable: str, flag: str) -> CheckResult:
        """
        Check that a tool is on PATH.

        Returns:
            CheckResult with the tool's version line
        """
        version = self.runner.version(executable, flag)
        if version:
            return CheckResult(name=label, passed=True, message=version)
        return CheckResult(
            name=label,
            passed=False,
            message=f"{executable} not found in PATH",
            fix_command="devenvkit setup",
        )

    def check_flakes(self) -> CheckResult:
        """Check the user nix.conf enables flakes."""
        flag = self.config.feature_flag
        conf = self.home / ".config" / "nix" / "nix.conf"
        if file_has_line(conf, flag, feature_flag_pattern(flag)):
            return CheckResult(name="Flakes", passed=True, message=f"Enabled in {conf}")
        return CheckResult(
            name="Flakes",
            passed=False,
            message=f"Not enabled in {conf}",
            fix_command=f"echo '{flag}' >> {conf}",
        )

    def check_hook(self, shell: str) -> CheckResult:
        """Check one shell startup file for the direnv hook."""
        path = rc_file(self.home, shell)
        line = hook_line(shell)
        name = f"direnv hook ({shell})"
        if file_has_line(path, line, hook_pattern(shell)):
            return CheckResult(name=name, passed=True, message=f"Configured in {path}")
        return CheckResult(
            name=name,
            passed=False,
            message=f"Missing from {path}",
            fix_command=f"echo '{line}' >> {path}",
        )

    def check_project(self, project_dir: Path) -> List[CheckResult]:
        """Check a project directory for the flake and the .envrc."""
        results = []
        for filename in (self.config.config_filename, ENVRC_NAME):
            path = Path(project_dir) / filename
            if path.is_file():
                results.append(CheckResult(name=filename, passed=True, message=str(path)))
            else:
                results.append(
                    CheckResult(
                        name=filename,
                        passed=False,
                        message=f"{path} not found",
                        fix_command="devenvkit setup",
                    )
                )
        return results

    def run_all_checks(self, project_dir: Optional[Path] = None) -> List[CheckResult]:
        results = [self.check_tool(*tool) for tool in MANAGED_TOOLS]
        results.append(self.check_flakes())
        results.extend(self.check_hook(shell) for shell in HOOK_SHELLS)
        if project_dir is not None:
            results.extend(self.check_project(project_dir))
        return results


def run(args) -> int:
    """
    Run doctor command.

    Args:
        args: Parsed arguments from argparse

    Returns:
        Exit code (0 when every check passes, 1 otherwise)
    """
    reporter = make_reporter(args)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print_error(str(e))
        return 1

    reporter.step("Checking development environment...")
    checker = EnvironmentChecker(config)
    checks = checker.run_all_checks(getattr(args, "project_dir", None))

    failed = 0
    for result in checks:
        if result.passed:
            reporter.success(f"{result.name}: {result.message}")
            logger.debug(f"Check passed: {result.name}")
        else:
            failed += 1
            reporter.error(f"{result.name}: {result.message}")
            if result.fix_command:
                reporter.info(f"   Fix: {result.fix_command}")

    reporter.info()
    if failed == 0:
        reporter.success("Your environment is healthy!")
        return 0

    reporter.error(f"Found {failed} issue(s) that need attention")
    return 1
