"""Diagnostic logging setup.

Modules log through `logging.getLogger(__name__)`; this installs a single
Rich handler on the root logger writing to stderr so diagnostics never mix
with the table on stdout.
"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["LOG_LEVEL_ENV", "resolve_log_level", "setup_logging"]

LOG_LEVEL_ENV = "MR_LOG_LEVEL"


def resolve_log_level(verbose: bool = False) -> int:
    """Pick the log level.

    Priority: --verbose, then MR_LOG_LEVEL, then WARNING.
    """
    if verbose:
        return logging.DEBUG

    env_level = os.environ.get(LOG_LEVEL_ENV)
    if env_level:
        level = logging.getLevelName(env_level.strip().upper())
        if isinstance(level, int):
            return level

    return logging.WARNING


def setup_logging(level: int) -> None:
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
