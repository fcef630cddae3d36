"""
Project steps: pick the target directory, fetch flake.nix, write .envrc.

Declining to reuse an existing project directory is the one user answer the
setup cannot work around; it aborts the run before anything is written.
"""

import logging
from pathlib import Path

from devenvkit.bootstrap.context import BootstrapContext
from devenvkit.bootstrap.steps.base import Step, StepResult
from devenvkit.core.download import download_file
from devenvkit.core.exceptions import DevEnvKitError, SetupCancelledError
from devenvkit.core.filesystem import ensure_directory, expand_home, write_if_changed

logger = logging.getLogger(__name__)

# (choice, label, folder under home; None means ask for a custom path)
LOCATIONS = [
    ("1", "Home directory (~)", ""),
    ("2", "Documents folder (~/Documents)", "Documents"),
    ("3", "Desktop (~/Desktop)", "Desktop"),
    ("4", "Custom location", None),
]

ENVRC_NAME = ".envrc"

ENVRC_CONTENT = """use flake

# Optional: Add any project-specific environment variables here
# export MY_VAR="value"

# Optional: Load additional scripts
# source_env_if_exists .envrc.local
"""


def resolve_location(ctx: BootstrapContext, choice: str) -> Path:
    """
    Turn a menu answer into the folder the project directory goes into.

    Unknown answers (and an empty custom path) fall back to the home directory.
    """
    for key, _, folder in LOCATIONS:
        if choice != key:
            continue
        if folder is None:
            raw = ctx.prompts.ask(
                "Enter the full path where you want to create the folder:"
            )
            if not raw:
                break
            return expand_home(raw, ctx.home).absolute()
        if folder:
            return ensure_directory(ctx.home / folder)
        return ctx.home

    ctx.reporter.error("Invalid choice. Using home directory.")
    return ctx.home


class ProjectDirectoryStep(Step):
    """Ask where the project lives and create the directory."""

    name = "project-dir"
    title = "Setting up project directory..."

    def run(self, ctx: BootstrapContext) -> StepResult:
        project_name = ctx.config.project_name

        ctx.reporter.info()
        ctx.reporter.warning(f"Where would you like to create the '{project_name}' folder?")
        ctx.reporter.info("Options:")
        for key, label, _ in LOCATIONS:
            ctx.reporter.info(f"  {key}) {label}")
        ctx.reporter.info()

        choice = ctx.prompts.ask(f"Enter your choice (1-{len(LOCATIONS)}):")
        project_dir = resolve_location(ctx, choice) / project_name

        if project_dir.exists():
            if not project_dir.is_dir():
                raise DevEnvKitError(
                    f"{project_dir} exists and is not a directory. "
                    "Please remove or rename it and run again."
                )
            ctx.reporter.warning(f"Directory {project_dir} already exists.")
            if not ctx.prompts.confirm("Do you want to use this existing directory?"):
                raise SetupCancelledError(
                    "Setup cancelled. Please remove or rename the existing "
                    "directory and run again."
                )
            ctx.project_dir = project_dir
            return StepResult.satisfied(f"Using existing directory: {project_dir}")

        ensure_directory(project_dir)
        ctx.project_dir = project_dir
        return StepResult.applied(f"Created directory: {project_dir}")


class FetchConfigStep(Step):
    """Download the declarative environment file into the project."""

    name = "fetch-config"
    title = "Downloading flake.nix..."

    def run(self, ctx: BootstrapContext) -> StepResult:
        project_dir = ctx.require_project_dir()
        filename = ctx.config.config_filename
        destination = project_dir / filename

        if destination.exists():
            ctx.reporter.warning(f"{filename} already exists in {project_dir}")
            if not ctx.prompts.confirm("Do you want to overwrite it?"):
                return StepResult.satisfied(f"Keeping existing {filename}")

        with ctx.reporter.progress(f"Downloading {filename}...") as on_progress:
            download_file(
                ctx.config.config_url,
                destination,
                progress_callback=on_progress,
                timeout=ctx.config.download_timeout,
            )
        return StepResult.applied(f"Downloaded {filename}")


class TriggerFileStep(Step):
    """Write the .envrc that tells direnv to load the flake."""

    name = "envrc"
    title = "Creating .envrc for direnv..."

    def run(self, ctx: BootstrapContext) -> StepResult:
        project_dir = ctx.require_project_dir()
        if write_if_changed(project_dir / ENVRC_NAME, ENVRC_CONTENT):
            return StepResult.applied(f"Created {ENVRC_NAME} file")
        return StepResult.satisfied(f"{ENVRC_NAME} is up to date")
