"""
Bootstrap steps.

Each step is an idempotent check-then-change operation returning a
StepResult. They run in the order given by default_steps() in the pipeline.
"""

from .base import Step, StepResult, StepStatus
from .shell import EnsureShellStep, DefaultShellStep, ShellHooksStep
from .nix import EnsureNixStep, EnableFlakesStep
from .direnv import EnsureDirenvStep
from .project import ProjectDirectoryStep, FetchConfigStep, TriggerFileStep
from .activate import ActivateStep, SmokeTestStep

__all__ = [
    "Step",
    "StepResult",
    "StepStatus",
    "EnsureShellStep",
    "DefaultShellStep",
    "ShellHooksStep",
    "EnsureNixStep",
    "EnableFlakesStep",
    "EnsureDirenvStep",
    "ProjectDirectoryStep",
    "FetchConfigStep",
    "TriggerFileStep",
    "ActivateStep",
    "SmokeTestStep",
]
