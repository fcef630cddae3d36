"""
Shell steps: install Zsh, offer it as the login shell, wire direnv hooks.

Zsh is recommended but never required. Every failure here leaves the user
with a working Bash setup, so nothing in this module aborts the run.
"""

import logging
import re
from pathlib import Path

from devenvkit.bootstrap.context import BootstrapContext
from devenvkit.bootstrap.steps.base import (
    Step,
    StepResult,
    append_system_line,
    display_path,
    is_registered_shell,
)
from devenvkit.core.filesystem import ensure_line

logger = logging.getLogger(__name__)

TARGET_SHELL = "zsh"
SHELL_LABEL = "Zsh"

# Startup files get the hook whichever shell is the login shell
HOOK_SHELLS = ("zsh", "bash")

BASH_FALLBACK = "You can continue with Bash, or install Zsh manually later."


def hook_line(shell: str) -> str:
    return f'eval "$(direnv hook {shell})"'


def hook_pattern(shell: str) -> str:
    """Match the hook anywhere in a line, including guarded forms."""
    return re.escape(hook_line(shell))


def rc_file(home: Path, shell: str) -> Path:
    return Path(home) / f".{shell}rc"


class EnsureShellStep(Step):
    """Install Zsh through the system package manager if it is missing."""

    name = "zsh"
    title = "Checking Zsh installation..."

    def run(self, ctx: BootstrapContext) -> StepResult:
        version = ctx.runner.version(TARGET_SHELL)
        if version:
            return StepResult.satisfied(f"{SHELL_LABEL} is already installed ({version})")

        if ctx.platform.os == "macos":
            return StepResult.failed(
                f"{SHELL_LABEL} not found, but it should be pre-installed on macOS",
                [f"Check that {TARGET_SHELL} is on your PATH"],
            )

        if not ctx.platform.is_linux_like:
            return StepResult.failed(
                f"Cannot install {SHELL_LABEL} automatically on this platform",
                [BASH_FALLBACK],
            )

        ctx.reporter.warning(f"{SHELL_LABEL} not found. Installing...")

        if not ctx.has_privilege:
            return StepResult.failed(
                f"No sudo access. Cannot install {SHELL_LABEL} automatically.",
                [BASH_FALLBACK],
            )

        manager = ctx.package_manager
        if manager is None:
            return StepResult.failed(
                f"Cannot install {SHELL_LABEL} automatically. Please install it manually.",
                ["You can continue with Bash, but Zsh is recommended."],
            )

        result = manager.install(ctx.runner, ctx.privilege, [TARGET_SHELL])
        if result.ok and ctx.runner.has(TARGET_SHELL):
            return StepResult.applied(f"{SHELL_LABEL} installed successfully")

        return StepResult.failed(
            f"Failed to install {SHELL_LABEL} with {manager.name} "
            f"(exit code {result.returncode})",
            [BASH_FALLBACK],
        )


class DefaultShellStep(Step):
    """Offer to make Zsh the login shell."""

    name = "default-shell"
    title = "Checking default shell..."

    def run(self, ctx: BootstrapContext) -> StepResult:
        shell_path = ctx.runner.which(TARGET_SHELL)
        if not shell_path:
            return StepResult.satisfied(
                f"{SHELL_LABEL} is not installed; keeping {ctx.current_shell}"
            )

        current = ctx.current_shell
        if current == TARGET_SHELL:
            return StepResult.satisfied(f"{SHELL_LABEL} is already your default shell")

        ctx.reporter.warning(f"Your current default shell is: {current}")
        if not ctx.prompts.confirm(
            f"Would you like to set {SHELL_LABEL} as your default shell?"
        ):
            return StepResult.satisfied(f"Keeping {current} as default shell")

        manual = f"You can manually change it later with: chsh -s {shell_path}"

        if not ctx.runner.has("chsh"):
            return StepResult.failed(
                "chsh command not found. Cannot change default shell automatically.",
                ["You can manually change it later if needed."],
            )

        if not is_registered_shell(ctx, shell_path):
            if not ctx.has_privilege:
                return StepResult.failed(
                    f"Cannot change default shell. {SHELL_LABEL} path not in "
                    f"{ctx.etc_shells} and no sudo access.",
                    [manual],
                )
            if not append_system_line(ctx, ctx.etc_shells, shell_path):
                return StepResult.failed(
                    f"Failed to register {shell_path} in {ctx.etc_shells}", [manual]
                )

        # chsh asks for the user's password on the terminal
        result = ctx.runner.run(["chsh", "-s", shell_path], capture=False)
        if not result.ok:
            return StepResult.failed("chsh failed to change the default shell", [manual])

        ctx.changed_default_shell = True
        return StepResult.applied(
            f"Default shell changed to {SHELL_LABEL}. "
            "This will take effect on your next login."
        )


class ShellHooksStep(Step):
    """Add the direnv hook to both the Zsh and Bash startup files."""

    name = "shell-hooks"
    title = "Configuring direnv shell hooks..."

    def run(self, ctx: BootstrapContext) -> StepResult:
        ctx.reporter.info(f"Detected shell: {ctx.current_shell}")

        updated = []
        for shell in HOOK_SHELLS:
            path = rc_file(ctx.home, shell)
            shown = display_path(ctx, path)
            existed = path.exists()
            if ensure_line(path, hook_line(shell), hook_pattern(shell)):
                updated.append(shown)
                if existed:
                    ctx.reporter.success(f"Added direnv hook to {shown}")
                else:
                    ctx.reporter.success(f"Created {shown} with direnv hook")
            else:
                ctx.reporter.success(f"direnv hook already configured in {shown}")

        if updated:
            return StepResult.applied(f"direnv hooks added to {', '.join(updated)}")
        return StepResult.satisfied("direnv hooks already configured")
