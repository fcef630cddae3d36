"""
Shared utilities for CLI commands.

Provides common functionality used across multiple CLI commands to
eliminate duplication and ensure consistent behavior.
"""

import logging
import sys
from typing import Optional

from devenvkit.core.console import Reporter, create_console

logger = logging.getLogger(__name__)


# ============================================================================
# Output Formatting
# ============================================================================


def make_reporter(args) -> Reporter:
    """Build the reporter for a command from the global --quiet flag."""
    return Reporter(create_console(), quiet=getattr(args, "quiet", False))


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def print_warning(message: str):
    """Print warning message to stderr."""
    print(f"WARNING: {message}", file=sys.stderr)
