"""
Shared constants, logger and console for weeksort.
"""

import logging

from rich.console import Console

PROGRAM = "weeksort"

# Full English month names, indexed by month number - 1. Kept as a table so
# folder names do not depend on the process locale.
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June", "July",
    "August", "September", "October", "November", "December",
)

WEEK_FOLDER_PREFIX = "week of "
WEEK_DATE_FORMAT = "%Y-%m-%d"

COMPLETION_MESSAGE = "Operation complete!"

_console = None


def get_logger() -> logging.Logger:
    """Return the package logger."""
    return logging.getLogger(PROGRAM)


def get_console() -> Console:
    """Return the shared rich console, creating it on first use."""
    global _console
    if _console is None:
        _console = Console()
    return _console
