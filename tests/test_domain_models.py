"""test suite for domain models."""
import pytest
import sys
from pathlib import Path
from pydantic import ValidationError

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rangesync.domain.errors import DecodeError, LexError, RangeSyncError
from rangesync.domain.models import DialogRangeRow, Highlight, RangeDescriptor, RangeType, SelectionEvent


class TestRangeDescriptor:
    def test_defaults(self):
        d = RangeDescriptor()
        assert d.unit_id == ""
        assert d.sheet_name == ""
        assert (d.start_row, d.start_col, d.end_row, d.end_col) == (0, 0, 0, 0)
        assert d.range_type == RangeType.NORMAL

    def test_cell(self):
        d = RangeDescriptor.cell(4, 2, sheet_name="Data")
        assert d.is_single_cell
        assert d.sheet_name == "Data"
        assert (d.start_row, d.start_col) == (4, 2)

    def test_empty_is_degenerate(self):
        assert RangeDescriptor.empty().is_degenerate
        assert not RangeDescriptor().is_degenerate

    def test_negative_index_rejected(self):
        with pytest.raises(ValidationError):
            RangeDescriptor(start_row=-1)

    def test_frozen(self):
        d = RangeDescriptor()
        with pytest.raises(ValidationError):
            d.start_row = 3

    def test_full_rows_are_not_single_cells(self):
        d = RangeDescriptor(range_type=RangeType.ROW)
        assert not d.is_single_cell

    def test_same_area_ignores_qualifiers(self):
        a = RangeDescriptor.cell(1, 1, sheet_name="A", unit_id="wb")
        b = RangeDescriptor.cell(1, 1)
        assert a.same_area(b)
        assert a != b

    def test_same_area_compares_flags(self):
        a = RangeDescriptor.cell(1, 1)
        b = a.model_copy(update={"start_abs_row": True})
        assert not a.same_area(b)


class TestDialogRangeRow:
    def test_defaults(self):
        row = DialogRangeRow()
        assert row.text == ""
        assert row.color_index == 0


class TestSelectionEvent:
    def test_defaults(self):
        event = SelectionEvent(text="A1")
        assert event.caret_offset == -1
        assert event.is_end is False

    def test_text_required(self):
        with pytest.raises(ValidationError):
            SelectionEvent()


class TestHighlight:
    def test_highlight(self):
        h = Highlight(descriptor=RangeDescriptor.cell(0, 0), color="#ff0000")
        assert h.color == "#ff0000"
        assert h.descriptor.is_single_cell


class TestErrors:
    def test_lex_error(self):
        e = LexError('"abc', 0, "unterminated string")
        assert isinstance(e, RangeSyncError)
        assert e.position == 0
        assert str(e) == "unterminated string at offset 0"

    def test_decode_error(self):
        e = DecodeError("foo")
        assert e.token == "foo"
        assert "foo" in str(e)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
