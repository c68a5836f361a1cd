"""
Palm Desktop Database Reader
============================

Palm Desktop keeps its data in Microsoft Access (MDB) files instead of
PDB containers. This module provides the table access shared by all MDB
readers; the schema specific readers build PdbDatabase values from the
rows, so the rest of the package does not need to know where the data
came from.

Table Sources
-------------
Rows are read through a TableSource. AccessTableSource reads a real
.mdb file with access-parser; tests supply an in-memory source.

Column Values
-------------
Timestamps are stored as text holding seconds since 1970-01-01 UTC.

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Iterator, Optional, Union
import logging

from access_parser import AccessParser

from pdbconverter.errors import MdbError
from pdbconverter.pdb.database import PdbDatabase

logger = logging.getLogger(__name__)

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

Row = dict[str, Any]


# =============================================================================
# Table Sources
# =============================================================================

class TableSource(ABC):
    """A set of named tables, each a sequence of rows."""

    @abstractmethod
    def table_names(self) -> list[str]:
        """Names of all tables."""

    @abstractmethod
    def rows(self, table: str) -> Iterator[Row]:
        """
        Iterate over the rows of a table.

        Raises:
            MdbError: If there is no such table
        """

    def close(self) -> None:
        pass

    def __enter__(self) -> "TableSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class AccessTableSource(TableSource):
    """
    Table source reading a Microsoft Access file.

    access-parser returns a table as a mapping of column name to the list
    of column values; this class turns it into rows.
    """

    def __init__(self, filepath: Union[str, Path]):
        self.filepath = Path(filepath)
        if not self.filepath.exists():
            raise FileNotFoundError(f"MDB file not found: {self.filepath}")
        logger.debug(f"Opening {self.filepath}")
        try:
            self._parser = AccessParser(str(self.filepath))
        except Exception as e:
            raise MdbError(f"cannot open {self.filepath}: {e}") from e

    def table_names(self) -> list[str]:
        return list(self._parser.catalog)

    def rows(self, table: str) -> Iterator[Row]:
        if table not in self._parser.catalog:
            raise MdbError(f"table '{table}' not found in {self.filepath}")
        columns = self._parser.parse_table(table)
        names = list(columns)
        count = max((len(values) for values in columns.values()), default=0)
        for index in range(count):
            yield {
                name: columns[name][index] if index < len(columns[name]) else None
                for name in names
            }


# =============================================================================
# Reader Base Class
# =============================================================================

class MdbReader(ABC):
    """
    Base class of table-based database readers.

    Example:
        >>> with AccessTableSource("DateBook.mdb") as source:
        ...     database = ScheduleMdbReader(source).read()
    """

    def __init__(self, source: TableSource):
        self.source = source

    @abstractmethod
    def read(self) -> PdbDatabase:
        """Read the database."""

    def get_table(self, table: str) -> Iterator[Row]:
        """
        Iterate over the rows of a table.

        Raises:
            MdbError: If there is no such table
        """
        return self.source.rows(table)

    @staticmethod
    def get_column(row: Row, column: str, expected: Optional[type] = None) -> Any:
        """
        Get a column value of a row.

        Args:
            row: The row
            column: Column name
            expected: Type the value must have, unless it is None

        Raises:
            MdbError: If the column is missing or has an unexpected type
        """
        if column not in row:
            raise MdbError(f"column '{column}': undefined")
        value = row[column]
        if expected is not None and value is not None and not isinstance(value, expected):
            raise MdbError(
                f"column '{column}': unexpected type {type(value).__name__}, "
                f"expected {expected.__name__}"
            )
        return value

    @classmethod
    def get_date_column(cls, row: Row, column: str) -> Optional[datetime]:
        """
        Get a column holding seconds since 1970 as text.

        Returns:
            Timezone-aware UTC datetime, or None if the column is empty

        Raises:
            MdbError: If the column is missing or not a number
        """
        value = cls.get_column(row, column)
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        try:
            seconds = int(value)
        except (TypeError, ValueError):
            raise MdbError(f"column '{column}': not a timestamp: {value!r}") from None
        return UNIX_EPOCH + timedelta(seconds=seconds)
