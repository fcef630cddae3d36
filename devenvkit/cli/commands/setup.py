"""
Setup command: run the full bootstrap.

Loads the configuration, runs the detection phase and every bootstrap step,
then prints a summary and the next steps.
"""

import logging

from devenvkit.bootstrap import (
    Bootstrapper,
    prepare_context,
    print_next_steps,
    print_summary,
)
from devenvkit.cli.utils import make_reporter, print_error, print_warning
from devenvkit.config import load_config
from devenvkit.core.exceptions import DevEnvKitError, SetupCancelledError
from devenvkit.core.prompts import TerminalPrompt

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run setup command.

    Args:
        args: Parsed arguments from argparse

    Returns:
        Exit code (0 for success, 1 for a fatal error)
    """
    reporter = make_reporter(args)

    try:
        config = load_config(args.config)
        prompts = TerminalPrompt(console=reporter.console)
        ctx = prepare_context(config, prompts, reporter)
        report = Bootstrapper(ctx).run()
    except SetupCancelledError as e:
        print_error(str(e))
        logger.info("Setup cancelled by user")
        return 1
    except DevEnvKitError as e:
        print_error(str(e))
        logger.debug("Setup aborted", exc_info=True)
        return 1

    if report.failed:
        print_warning(f"Some steps did not complete: {', '.join(report.failed)}")

    print_summary(ctx, report)
    print_next_steps(ctx)
    return 0
