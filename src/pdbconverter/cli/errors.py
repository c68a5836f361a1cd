"""
pdbdump Exit Codes
==================

Maps the exceptions a pdbdump command can raise to an error message and
an exit code. Database problems exit with FORMAT_ERROR; anything the user
can correct on the command line (a missing file, an unknown category, a
reversed date range) exits with INVALID_ARGS.

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from pdbconverter.errors import FilterError, PdbError


class ExitCode(IntEnum):
    """Exit codes of pdbdump."""
    SUCCESS = 0
    FORMAT_ERROR = 1     # Corrupt, truncated or unsupported database
    INVALID_ARGS = 2     # Bad option value, unknown category or missing file
    INTERNAL_ERROR = 3   # Bug


# Checked in order; FilterError must come before its base PdbError
_EXIT_CODES: tuple[tuple[type[BaseException], ExitCode], ...] = (
    (FilterError, ExitCode.INVALID_ARGS),
    (PdbError, ExitCode.FORMAT_ERROR),
    (click.BadParameter, ExitCode.INVALID_ARGS),
    (OSError, ExitCode.INVALID_ARGS),
)


def exit_code_for(error: BaseException) -> ExitCode:
    """Exit code for an exception, INTERNAL_ERROR if it is not expected."""
    for error_type, code in _EXIT_CODES:
        if isinstance(error, error_type):
            return code
    return ExitCode.INTERNAL_ERROR


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception raised by a command and exit.

    Expected errors print a one-line message. Unexpected ones are
    reported as internal errors, with the traceback when verbose.

    Raises:
        SystemExit: Always
    """
    code = exit_code_for(error)
    if code == ExitCode.INTERNAL_ERROR:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
    else:
        click.echo(f"Error: {error}", err=True)
    sys.exit(code)
