"""
Core functionality for DevEnvKit.

This package contains the foundational modules the bootstrap steps depend on.
"""

from .platform import (
    PlatformInfo,
    detect_platform,
    clear_platform_cache,
)

from .runner import (
    CommandResult,
    CommandRunner,
)

from .exceptions import (
    DevEnvKitError,
    SetupCancelledError,
    PromptError,
    PrerequisiteError,
    InstallError,
    CommandError,
    ConfigError,
)

__all__ = [
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
    "CommandResult",
    "CommandRunner",
    "DevEnvKitError",
    "SetupCancelledError",
    "PromptError",
    "PrerequisiteError",
    "InstallError",
    "CommandError",
    "ConfigError",
]
