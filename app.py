"""
app.py

Responsibility: Command-line entry point. Parses flags, configures logging,
applies the process sandbox and runs one refresh.
Does NOT: contain DNS business logic.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from config import parse_args
from exceptions import SandboxError
from logger import setup_logging
from sandbox import Sandbox, default_sandbox
from updater import EXIT_FAILURE, run_update

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None, sandbox: Sandbox | None = None) -> int:
    """
    Runs the updater once and returns the process exit code.

    Args:
        argv: Command-line arguments without the program name.
        sandbox: Sandbox to apply; defaults to the platform's strongest one.

    Returns:
        0 on success, 1 on any fatal error.
    """
    settings = parse_args(argv)
    setup_logging(settings.verbose)

    try:
        (sandbox or default_sandbox()).restrict()
    except SandboxError as exc:
        logger.error("%s", exc)
        return EXIT_FAILURE

    return asyncio.run(run_update(settings))


if __name__ == "__main__":
    sys.exit(main())
