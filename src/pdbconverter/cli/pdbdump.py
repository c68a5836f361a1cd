"""
pdbdump - PalmOS Database Inspector
===================================

This module implements the command-line interface for inspecting PalmOS
databases. It reads PDB containers (and Palm Desktop calendar files) and
prints their contents.

Commands
--------
- **info**: Show the database header
- **categories**: List the category table
- **list**: List records, optionally filtered by category and date
- **rrule**: Print the recurrences of a calendar as iCalendar rules

Usage Examples
--------------
Show database information:
    $ pdbdump info MemoDB.pdb

List the to-do items of one category:
    $ pdbdump list -c todo -t Business ToDoDB.pdb

List the events of 2010:
    $ pdbdump list -c schedule --from 2010-01-01 --until 2011-01-01 CalendarDB-PDat.pdb

Print calendar recurrences:
    $ pdbdump rrule CalendarDB-PDat.pdb
    $ pdbdump rrule DateBook.mdb

Environment
-----------
PDBCONV_LOG_LEVEL, PDBCONV_TIMEZONE and PDBCONV_CONVERTER set the
defaults, see pdbconverter.config.

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

from datetime import datetime
from pathlib import Path
from typing import Optional
import logging

import click

from pdbconverter import __version__
from pdbconverter.cli.errors import handle_cli_exception
from pdbconverter.config import ConverterConfig
from pdbconverter.filters import build_filter
from pdbconverter.mdb import AccessTableSource, ScheduleMdbReader
from pdbconverter.pdb import (
    CONVERTERS,
    Converter,
    PdbDatabase,
    ScheduleConverter,
    get_converter,
    read_database,
)
from pdbconverter.recurrence import encode_recurrence

logger = logging.getLogger(__name__)


# =============================================================================
# Converter Parameter Type
# =============================================================================

class ConverterChoice(click.ParamType):
    """
    Click parameter type for converter selection.

    Accepts: address, memo, todo, notepad, schedule, raw (case-insensitive)
    """
    name = "converter"

    def convert(self, value: str, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> Converter:
        """Convert a converter name to a Converter instance."""
        if isinstance(value, Converter):
            return value

        key = value.lower()
        if key not in CONVERTERS:
            self.fail(
                f"Invalid converter '{value}'. "
                f"Choose from: {', '.join(CONVERTERS)}",
                param, ctx
            )
        return get_converter(key)


CONVERTER = ConverterChoice()

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M"]


# =============================================================================
# CLI Context and Utilities
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores the configuration and verbosity.
    """

    def __init__(self) -> None:
        self.config = ConverterConfig.from_env()
        self.verbose: bool = False

    def setup_logging(self) -> None:
        """Configure logging based on verbosity and configuration."""
        level = logging.DEBUG if self.verbose else getattr(logging, self.config.log_level)
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(name)s: %(message)s" if self.verbose else "%(levelname)s: %(message)s",
        )

    def converter(self, converter: Optional[Converter]) -> Converter:
        """The given converter, or the configured default."""
        if converter is not None:
            return converter
        return CONVERTER.convert(self.config.default_converter, None, None)


pass_context = click.make_pass_decorator(Context, ensure=True)


def _format_time(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else "never"


def _read_calendar(path: Path, config: ConverterConfig) -> PdbDatabase:
    """Read a calendar from a PDB container or a Palm Desktop file."""
    if path.suffix.lower() == ".mdb":
        with AccessTableSource(path) as source:
            return ScheduleMdbReader(source, config).read()
    return read_database(path, ScheduleConverter())


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable debug output",
)
@click.version_option(__version__, "--version", "-V", prog_name="pdbdump")
@pass_context
def main(ctx: Context, verbose: bool) -> None:
    """
    Inspect PalmOS databases.

    Reads PDB containers synced from a PalmOS device and Palm Desktop
    calendar files (.mdb).

    \b
    Commands:
      info        Show the database header
      categories  List the category table
      list        List records
      rrule       Print calendar recurrences as iCalendar rules

    \b
    Examples:
      pdbdump info MemoDB.pdb
      pdbdump list -c todo -t Business ToDoDB.pdb
      pdbdump rrule DateBook.mdb
    """
    ctx.verbose = verbose
    ctx.setup_logging()


converter_option = click.option(
    "-c", "--converter",
    type=CONVERTER,
    default=None,
    help=f"Record schema: {', '.join(CONVERTERS)} (default: $PDBCONV_CONVERTER or raw)",
)


# =============================================================================
# Info Command
# =============================================================================

@main.command("info")
@click.argument(
    "pdb_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@converter_option
@pass_context
def cmd_info(ctx: Context, pdb_file: Path, converter: Optional[Converter]) -> None:
    """
    Show the header of a PDB file.

    \b
    Example:
      pdbdump info MemoDB.pdb
    """
    try:
        database = read_database(pdb_file, ctx.converter(converter))
        info = database.get_info()

        click.echo(f"Database Information: {pdb_file}")
        click.echo("=" * 40)
        click.echo(f"Name:        {info['name']}")
        click.echo(f"Type:        {info['type']}")
        click.echo(f"Creator:     {info['creator']}")
        click.echo(f"Version:     {info['version']}")
        click.echo(f"Attributes:  {info['attributes']}")
        click.echo(f"Created:     {_format_time(database.creation_time)}")
        click.echo(f"Modified:    {_format_time(database.modification_time)}")
        click.echo(f"Backed up:   {_format_time(database.backup_time)}")
        click.echo(f"Mod number:  {info['modification_number']}")
        click.echo()
        click.echo(f"Categories:  {info['category_count']}")
        click.echo(f"Records:     {info['record_count']}")

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


# =============================================================================
# Categories Command
# =============================================================================

@main.command("categories")
@click.argument(
    "pdb_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@converter_option
@pass_context
def cmd_categories(ctx: Context, pdb_file: Path, converter: Optional[Converter]) -> None:
    """
    List the categories of a PDB file.

    \b
    Output format:
      Slot  Key  Name
         0    0  Unfiled
         1    1  Business
    """
    try:
        database = read_database(pdb_file, ctx.converter(converter))
        categories = database.categories
        if categories is None:
            click.echo(f"No categories (converter: {ctx.converter(converter).name})")
            return

        click.echo(f"{'Slot':>4} {'Key':>4}  Name")
        click.echo("-" * 30)
        for index, category in categories:
            marker = " *" if category.renamed else ""
            click.echo(f"{index:>4} {category.key:>4}  {category.name}{marker}")

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


# =============================================================================
# List Command
# =============================================================================

@main.command("list")
@click.argument(
    "pdb_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@converter_option
@click.option(
    "-t", "--category",
    help="Only records of this category (name or key)",
)
@click.option(
    "--from", "date_from",
    type=click.DateTime(DATE_FORMATS),
    help="Only records dated on or after this date",
)
@click.option(
    "--until", "date_until",
    type=click.DateTime(DATE_FORMATS),
    help="Only records dated before this date",
)
@pass_context
def cmd_list(
    ctx: Context,
    pdb_file: Path,
    converter: Optional[Converter],
    category: Optional[str],
    date_from: Optional[datetime],
    date_until: Optional[datetime],
) -> None:
    """
    List the records of a PDB file.

    \b
    Examples:
      pdbdump list -c memo MemoDB.pdb
      pdbdump list -c todo -t Business --until 2011-01-01 ToDoDB.pdb
    """
    try:
        database = read_database(pdb_file, ctx.converter(converter))
        record_filter = build_filter(database, category, date_from, date_until)
        records = database.filter(record_filter)

        for record in records:
            name = database.category_name(record) or "-"
            flags = "S" if record.secret else " "
            flags += "D" if record.deleted else " "
            click.echo(f"{flags} {name:<16} {record}")

        if ctx.verbose:
            click.echo(f"{len(records)} of {len(database)} records")

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


# =============================================================================
# RRule Command
# =============================================================================

@main.command("rrule")
@click.argument(
    "calendar_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@pass_context
def cmd_rrule(ctx: Context, calendar_file: Path) -> None:
    """
    Print the recurrences of a calendar as iCalendar rules.

    CALENDAR_FILE is a CalendarDB-PDat.pdb container or a Palm Desktop
    DateBook.mdb file.

    \b
    Example:
      pdbdump rrule CalendarDB-PDat.pdb
    """
    try:
        database = _read_calendar(calendar_file, ctx.config)
        for record in database:
            if record.repeat is None:
                continue
            click.echo(f"{record.schedule_date} {record.description or ''}".rstrip())
            for line in encode_recurrence(record.repeat, record.exceptions):
                click.echo(f"  {line}")

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


if __name__ == "__main__":
    main()
