"""
Base types for bootstrap steps.

Each step is an idempotent "ensure" operation: it inspects the machine,
changes it only if needed, and reports one of three outcomes. Recoverable
problems come back as FAILED results; only conditions the run cannot
continue past are raised as exceptions.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from devenvkit.bootstrap.context import BootstrapContext
from devenvkit.core.filesystem import file_has_line

logger = logging.getLogger(__name__)


class StepStatus(Enum):
    """Outcome of a step."""

    SATISFIED = "satisfied"  # nothing to do
    CHANGED = "changed"  # newly satisfied
    FAILED = "failed"  # failed with reason, run continues


@dataclass
class StepResult:
    """Result of running a step."""

    status: StepStatus
    message: str
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is not StepStatus.FAILED

    @property
    def changed(self) -> bool:
        return self.status is StepStatus.CHANGED

    @classmethod
    def satisfied(cls, message: str, warnings: Optional[List[str]] = None):
        return cls(StepStatus.SATISFIED, message, list(warnings or []))

    @classmethod
    def applied(cls, message: str, warnings: Optional[List[str]] = None):
        return cls(StepStatus.CHANGED, message, list(warnings or []))

    @classmethod
    def failed(cls, message: str, warnings: Optional[List[str]] = None):
        return cls(StepStatus.FAILED, message, list(warnings or []))


class Step(ABC):
    """A single bootstrap step."""

    #: Short identifier used in reports
    name: str = ""
    #: Header printed before the step runs
    title: str = ""

    @abstractmethod
    def run(self, ctx: BootstrapContext) -> StepResult:
        """Run the step against the context."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def append_system_line(ctx: BootstrapContext, path: Path, line: str) -> bool:
    """
    Append a line to a root-owned file through ``sudo tee -a``.

    Returns:
        True if the command succeeded
    """
    result = ctx.runner.run(
        ctx.sudo(["tee", "-a", str(path)]), input=line.rstrip("\n") + "\n"
    )
    if not result.ok:
        logger.warning(f"Failed to append to {path}: {result.stderr.strip()}")
    return result.ok


def is_registered_shell(ctx: BootstrapContext, shell_path: str) -> bool:
    """Check whether a shell binary is listed in /etc/shells."""
    return file_has_line(ctx.etc_shells, shell_path)


def display_path(ctx: BootstrapContext, path: Path) -> str:
    """Show paths under the home directory with a leading ~."""
    try:
        return "~/" + Path(path).relative_to(ctx.home).as_posix()
    except ValueError:
        return str(path)
