"""
Palm Desktop (MDB) database support.

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

from pdbconverter.mdb.reader import AccessTableSource, MdbReader, TableSource
from pdbconverter.mdb.schedule import ScheduleMdbReader

__all__ = [
    "AccessTableSource",
    "MdbReader",
    "TableSource",
    "ScheduleMdbReader",
]
