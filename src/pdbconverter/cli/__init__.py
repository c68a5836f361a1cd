"""
pdbconverter Command-Line Interface
===================================

This package provides the command-line tools of pdbconverter:

- **pdbdump**: Inspect PDB containers and Palm Desktop calendars

The tools are Click-based applications with built-in help.

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

__all__ = ["pdbdump"]
