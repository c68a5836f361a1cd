"""
Shared Test Fixtures
====================

Fixtures providing synthetic PDB containers, built with the helpers in
pdbfiles.py.
"""

from datetime import date

import pytest

from pdbfiles import PdbBuilder, categories_block, cstr, packed


@pytest.fixture
def pdb_builder():
    """Factory for PdbBuilder instances."""
    return PdbBuilder


@pytest.fixture
def memo_pdb() -> bytes:
    """Memo database with two categories and three memos."""
    builder = PdbBuilder("MemoDB", "memo")
    builder.app_info = categories_block(["Unfiled", "Business", "Personal"])
    builder.add(cstr("Shopping list"), attribute=0x02)
    builder.add(cstr("Meeting notes"), attribute=0x01)
    builder.add(cstr("Secret plan"), attribute=0x11)
    return builder.build()


@pytest.fixture
def todo_pdb() -> bytes:
    """To-do database with a dated, an undated and a deleted item."""
    builder = PdbBuilder("ToDoDB", "todo")
    builder.app_info = categories_block(["Unfiled", "Business"])
    builder.add(packed(date(2010, 3, 15)) + bytes([0x81]) + cstr("File taxes") + cstr(""), 0x01)
    builder.add(packed(None) + bytes([0x03]) + cstr("Call Bob") + cstr("about the car"), 0x00)
    builder.add(packed(date(2011, 1, 2)) + bytes([0x02]) + cstr("Gone") + cstr(""), 0x80)
    return builder.build()
