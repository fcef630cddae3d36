"""
Centralized exception hierarchy for DevEnvKit.

Every error that should stop the bootstrap pipeline derives from
DevEnvKitError. Recoverable problems are not exceptions: steps report
them as FAILED results or warnings and the pipeline keeps going.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class DevEnvKitError(Exception):
    """Base exception for all DevEnvKit errors."""

    pass


# ============================================================================
# User Interaction Exceptions
# ============================================================================


class SetupCancelledError(DevEnvKitError):
    """Raised when the user declines a choice the setup cannot continue without."""

    pass


class PromptError(DevEnvKitError):
    """Raised when an interactive prompt cannot reach a terminal."""

    pass


# ============================================================================
# Tool Installation Exceptions
# ============================================================================


class PrerequisiteError(DevEnvKitError):
    """Raised when a required tool is missing and cannot be installed."""

    def __init__(self, missing: list, hint: str = ""):
        self.missing = list(missing)
        msg = f"Required tools not found: {', '.join(self.missing)}"
        if hint:
            msg += f". {hint}"
        super().__init__(msg)


class InstallError(DevEnvKitError):
    """Raised when an installer run fails."""

    pass


class CommandError(DevEnvKitError):
    """Raised when a checked subprocess exits with a non-zero status."""

    def __init__(self, result):
        self.result = result
        cmd = " ".join(result.args)
        msg = f"Command failed with exit code {result.returncode}: {cmd}"
        stderr = (result.stderr or "").strip()
        if stderr:
            msg += f"\n  {stderr.splitlines()[-1]}"
        super().__init__(msg)


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(DevEnvKitError):
    """Configuration parsing or validation error."""

    pass
