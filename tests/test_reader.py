"""
PDB Reader Unit Tests
=====================

Test Categories
---------------
1. Helpers: packed dates and string decoding
2. Primitives: field readers of PdbReader
3. Header: database header decoding
4. Record table: spans, deleted and truncated entries
5. Errors: structural errors and error wrapping
6. Sources: paths, bytes and streams
"""

from datetime import date, datetime
from io import BytesIO
import struct

import pytest

from pdbconverter.errors import PdbFormatError, WrongFormatError
from pdbconverter.pdb import (
    Converter,
    DatabaseAttribute,
    MemoConverter,
    PdbReader,
    RawConverter,
    TodoConverter,
    decode_string,
    pack_date,
    read_database,
    unpack_date,
)
from pdbconverter.dates import EPOCH, NO_DATE, palm_timestamp

from pdbfiles import PdbBuilder, categories_block, cstr, date_time_words


# =============================================================================
# Helper Tests
# =============================================================================

class TestPackedDate:
    """Tests for pack_date and unpack_date."""

    @pytest.mark.parametrize("value", [
        date(1904, 1, 1),
        date(1999, 12, 31),
        date(2010, 2, 28),
        date(2031, 12, 31),
    ])
    def test_round_trip(self, value):
        assert unpack_date(pack_date(value)) == value

    def test_layout(self):
        # 2010-03-15: year offset 106, month 3, day 15
        assert pack_date(date(2010, 3, 15)) == (106 << 9) | (3 << 5) | 15

    def test_invalid_month(self):
        with pytest.raises(PdbFormatError):
            unpack_date((100 << 9) | (13 << 5) | 1)

    def test_invalid_day(self):
        with pytest.raises(PdbFormatError):
            unpack_date((100 << 9) | (2 << 5) | 0)

    def test_year_out_of_range(self):
        with pytest.raises(ValueError):
            pack_date(date(2040, 1, 1))

    def test_no_date_is_not_packed(self):
        assert NO_DATE == 0xFFFF
        assert NO_DATE not in (pack_date(date(1904, 1, 1)), pack_date(date(2031, 12, 31)))

    def test_palm_timestamp(self):
        assert palm_timestamp(0) == EPOCH
        assert palm_timestamp(86400 + 3600) == datetime(1904, 1, 2, 1, 0)


class TestDecodeString:
    """Tests for the PalmOS character mapping."""

    def test_plain_latin1(self):
        assert decode_string(b"Caf\xe9") == "Caf\N{LATIN SMALL LETTER E WITH ACUTE}"

    def test_right_single_quote(self):
        assert decode_string(b"it\x92s") == "it\N{RIGHT SINGLE QUOTATION MARK}s"

    def test_palm_glyphs(self):
        assert decode_string(b"\x18") == "\N{HORIZONTAL ELLIPSIS}"
        assert decode_string(b"\x19") == "\N{FIGURE SPACE}"
        assert decode_string(b"\x80") == "\N{EURO SIGN}"
        assert decode_string(b"\x8d\x8e\x8f\x90") == (
            "\N{WHITE DIAMOND SUIT}\N{BLACK CLUB SUIT}"
            "\N{WHITE HEART SUIT}\N{BLACK SPADE SUIT}"
        )
        assert decode_string(b"\x9f") == "\N{LATIN CAPITAL LETTER Y WITH DIAERESIS}"

    def test_unmapped_control_range(self):
        # 0x81 has no PalmOS glyph and stays as it is
        assert decode_string(b"\x81") == "\x81"


# =============================================================================
# Primitive Tests
# =============================================================================

class TestPrimitives:
    """Tests for the PdbReader field readers."""

    def test_integers(self):
        reader = PdbReader.from_bytes(b"\xff\xff\x12\x34\x80\x00\xde\xad\xbe\xef")
        assert reader.read_u8() == 0xFF
        assert reader.read_i8() == -1
        assert reader.read_u16() == 0x1234
        assert reader.read_i16() == -0x8000
        assert reader.read_u32() == 0xDEADBEEF
        assert reader.remaining() == 0

    def test_short_read_names_field(self):
        reader = PdbReader.from_bytes(b"\x01")
        with pytest.raises(PdbFormatError) as exc_info:
            reader.read_u16("flags")
        assert exc_info.value.field == "flags"
        assert "flags" in str(exc_info.value)

    def test_fixed_string(self):
        reader = PdbReader.from_bytes(b"DATAmemo")
        assert reader.read_fixed_string(4) == "DATA"
        assert reader.read_fixed_string(4) == "memo"

    def test_terminated_fixed_string_consumes_all_bytes(self):
        reader = PdbReader.from_bytes(b"abc\x00xyz\x00\x00\x00!")
        assert reader.read_terminated_fixed_string(10) == "abc"
        assert reader.read_bytes(1) == b"!"

    def test_terminated_fixed_string_applies_glyphs(self):
        reader = PdbReader.from_bytes(b"Bob\x92s\x00\x00\x00")
        assert reader.read_terminated_fixed_string(8) == "Bob\N{RIGHT SINGLE QUOTATION MARK}s"

    def test_terminated_string(self):
        reader = PdbReader.from_bytes(cstr("first") + cstr("") + cstr("third"))
        assert reader.read_terminated_string() == "first"
        assert reader.read_terminated_string() == ""
        assert reader.read_terminated_string() == "third"

    def test_terminated_string_ends_at_eof(self):
        reader = PdbReader.from_bytes(b"no terminator")
        assert reader.read_terminated_string() == "no terminator"
        assert reader.read_terminated_string() == ""

    def test_date(self):
        reader = PdbReader.from_bytes(struct.pack(">I", 86400 * 366))
        assert reader.read_date() == datetime(1905, 1, 1)

    def test_date_is_unsigned(self):
        reader = PdbReader.from_bytes(struct.pack(">I", 0xF0000000))
        assert reader.read_date() > datetime(2030, 1, 1)

    def test_packed_date_none(self):
        reader = PdbReader.from_bytes(b"\xff\xff")
        assert reader.read_packed_date() is None

    def test_packed_date(self):
        reader = PdbReader.from_bytes(struct.pack(">H", pack_date(date(2005, 12, 8))))
        assert reader.read_packed_date() == date(2005, 12, 8)

    def test_date_time_words(self):
        value = datetime(2009, 7, 30, 14, 5, 9)
        reader = PdbReader.from_bytes(date_time_words(value) + date_time_words(None))
        assert reader.read_date_time_words() == value
        assert reader.read_date_time_words() is None
        assert reader.remaining() == 0


# =============================================================================
# Header Tests
# =============================================================================

class TestHeader:
    """Tests for header decoding."""

    def test_header_fields(self, memo_pdb):
        database = read_database(memo_pdb, MemoConverter())
        assert database.name == "MemoDB"
        assert database.type == "DATA"
        assert database.creator == "memo"
        assert database.attributes == DatabaseAttribute.BACKUP
        assert database.creation_time == datetime(2010, 5, 1, 12, 0, 0)
        assert database.modification_time == datetime(2010, 6, 1, 8, 30, 0)
        assert database.backup_time is None
        assert database.modification_number == 7

    def test_backup_time(self):
        builder = PdbBuilder("MemoDB", "memo")
        builder.backup = 3600
        database = read_database(builder.build(), RawConverter())
        assert database.backup_time == datetime(1904, 1, 1, 1, 0, 0)

    def test_epoch(self):
        assert EPOCH == datetime(1904, 1, 1)

    def test_no_records(self):
        database = read_database(PdbBuilder("Empty", "test").build(), RawConverter())
        assert len(database) == 0
        assert database.app_info is None

    def test_get_info(self, memo_pdb):
        info = read_database(memo_pdb, MemoConverter()).get_info()
        assert info["name"] == "MemoDB"
        assert info["record_count"] == 3
        assert info["category_count"] == 3
        assert info["attributes"] == "0x0008"

    def test_header_too_short(self):
        with pytest.raises(PdbFormatError):
            read_database(b"MemoDB\x00", RawConverter())


# =============================================================================
# Record Table Tests
# =============================================================================

class TestRecordTable:
    """Tests for record table handling."""

    def test_order_preserved(self, memo_pdb):
        database = read_database(memo_pdb, MemoConverter())
        assert [r.memo for r in database] == ["Shopping list", "Meeting notes", "Secret plan"]

    def test_attributes(self, memo_pdb):
        database = read_database(memo_pdb, MemoConverter())
        assert [r.category_index for r in database] == [2, 1, 1]
        assert [r.secret for r in database] == [False, False, True]

    def test_raw_spans(self):
        builder = PdbBuilder("Anything", "test")
        builder.add(b"\x01\x02\x03").add(b"").add(b"\x04\x05")
        database = read_database(builder.build(), RawConverter())
        assert [r.data for r in database] == [b"\x01\x02\x03", b"", b"\x04\x05"]

    def test_deleted_truncated_entry_skipped(self):
        builder = PdbBuilder("MemoDB", "memo")
        builder.add(b"abc")
        builder.add_entry(0x10000, 0x80)
        database = read_database(builder.build(), RawConverter())
        assert len(database) == 1

    def test_span_clamped_before_truncated_entry(self):
        builder = PdbBuilder("MemoDB", "memo")
        builder.add(b"payload")
        builder.add_entry(0x10000, 0x80)
        database = read_database(builder.build(), RawConverter())
        assert database.records[0].data == b"payload"

    def test_raw_keeps_deleted_records(self, todo_pdb):
        database = read_database(todo_pdb, RawConverter())
        assert len(database) == 3
        assert database.records[2].deleted

    def test_record_count_never_exceeds_entries(self, todo_pdb):
        database = read_database(todo_pdb, TodoConverter())
        assert len(database) == 2


# =============================================================================
# Error Tests
# =============================================================================

class TestErrors:
    """Tests for structural errors."""

    def test_record_count_exceeds_file(self):
        data = bytearray(PdbBuilder("MemoDB", "memo").add(b"x").build())
        data[76:78] = struct.pack(">H", 500)
        with pytest.raises(PdbFormatError):
            read_database(bytes(data), RawConverter())

    def test_entry_beyond_eof(self):
        builder = PdbBuilder("MemoDB", "memo")
        builder.add(b"abc")
        builder.add_entry(0x10000, 0x00)
        with pytest.raises(PdbFormatError) as exc_info:
            read_database(builder.build(), RawConverter())
        assert exc_info.value.record_index == 1

    def test_offsets_going_backwards(self):
        builder = PdbBuilder("MemoDB", "memo")
        builder.add(b"abcdef")
        builder.add_entry(78, 0x00)
        with pytest.raises(PdbFormatError) as exc_info:
            read_database(builder.build(), RawConverter())
        assert exc_info.value.record_index == 0

    def test_wrong_format(self, todo_pdb):
        with pytest.raises(WrongFormatError) as exc_info:
            read_database(todo_pdb, MemoConverter())
        assert exc_info.value.name == "ToDoDB"
        assert exc_info.value.creator == "todo"

    def test_converter_exception_wrapped(self, memo_pdb):
        class BrokenConverter(Converter):
            name = "broken"

            def decode_record(self, reader, index, size, attribute, database):
                raise RuntimeError("boom")

        with pytest.raises(PdbFormatError) as exc_info:
            read_database(memo_pdb, BrokenConverter())
        assert exc_info.value.record_index == 0
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_truncated_record_reports_index(self):
        builder = PdbBuilder("ToDoDB", "todo")
        builder.app_info = categories_block(["Unfiled"])
        builder.add(b"\x00")
        with pytest.raises(PdbFormatError) as exc_info:
            read_database(builder.build(), TodoConverter())
        assert exc_info.value.record_index == 0
        assert exc_info.value.field == "due date"


# =============================================================================
# Source Tests
# =============================================================================

class TestSources:
    """Tests for the accepted input sources."""

    def test_path(self, tmp_path, memo_pdb):
        path = tmp_path / "MemoDB.pdb"
        path.write_bytes(memo_pdb)
        assert len(read_database(path, MemoConverter())) == 3
        assert len(read_database(str(path), MemoConverter())) == 3

    def test_stream_closed_after_read(self, memo_pdb):
        stream = BytesIO(memo_pdb)
        read_database(stream, MemoConverter())
        assert stream.closed

    def test_stream_closed_after_error(self, todo_pdb):
        stream = BytesIO(todo_pdb)
        with pytest.raises(WrongFormatError):
            read_database(stream, MemoConverter())
        assert stream.closed

    def test_context_manager(self, memo_pdb):
        with PdbReader.from_bytes(memo_pdb) as reader:
            database = reader.read_database(MemoConverter())
            assert reader.length == len(memo_pdb)
        assert reader.stream.closed
        assert len(database) == 3

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_database(tmp_path / "missing.pdb", RawConverter())
