"""
Unified CLI Error Handling
==========================

Provides consistent error handling and exit codes for the simread CLI.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from simread.errors import SimError


class ExitCode(IntEnum):
    """Standard exit codes for the CLI."""
    SUCCESS = 0
    DECODE_ERROR = 1        # Size check, header, record or checksum failure
    INVALID_ARGS = 2        # Invalid arguments or unreadable input file
    INTERNAL_ERROR = 3      # Unexpected internal error
    CHECKSUM_MISMATCH = 4   # Stored checksum differs (--strict only)


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Unified exception handler for the CLI.

    Formats the error message, optionally prints a traceback in verbose
    mode, and exits with the matching exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors
        error_type: Optional prefix for the error message (e.g., "Decode")

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    if isinstance(error, SimError):
        # Format errors already name the failing stage and offset
        prefix = f"{error_type} error: " if error_type else "Error: "
        click.echo(f"{prefix}{error}", err=True)
        sys.exit(ExitCode.DECODE_ERROR)

    elif isinstance(error, click.BadParameter):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, (FileNotFoundError, PermissionError, IsADirectoryError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
