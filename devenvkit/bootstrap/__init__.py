"""
Bootstrap pipeline for DevEnvKit.

Installs Zsh, Nix and direnv, enables flakes and sets up a project
directory with flake.nix and .envrc.
"""

from .context import BootstrapContext
from .pipeline import Bootstrapper, default_steps, prepare_context
from .report import BootstrapReport, print_next_steps, print_summary

__all__ = [
    "BootstrapContext",
    "Bootstrapper",
    "BootstrapReport",
    "default_steps",
    "prepare_context",
    "print_next_steps",
    "print_summary",
]
