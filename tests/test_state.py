"""test suite for RangeSelectorState."""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rangesync.selector.state import RangeSelectorState


class TestRangeSelectorState:
    def test_descriptors_are_normalized(self):
        state = RangeSelectorState("B2:A1")
        d = state.descriptors[0]
        assert (d.start_row, d.start_col, d.end_row, d.end_col) == (0, 0, 1, 1)

    def test_unit_dropped_without_across_sheet(self):
        d = RangeSelectorState("[wb]A1", across_sheet=False).descriptors[0]
        assert d.unit_id == ""
        assert d.sheet_name == ""

    def test_sheet_dropped_without_across_sheet(self):
        d = RangeSelectorState("[wb]Sheet2!A1", across_sheet=False).descriptors[0]
        assert (d.unit_id, d.sheet_name) == ("", "")

    def test_qualifiers_kept_with_across_sheet(self):
        d = RangeSelectorState("[wb]Sheet2!A1", across_sheet=True).descriptors[0]
        assert (d.unit_id, d.sheet_name) == ("wb", "Sheet2")

    def test_unit_without_sheet_dropped_with_across_sheet(self):
        d = RangeSelectorState("[wb]A1", across_sheet=True).descriptors[0]
        assert d.unit_id == ""

    def test_text_is_kept_verbatim(self):
        state = RangeSelectorState("Sheet2!C3", across_sheet=False)
        assert state.text == "Sheet2!C3"

    def test_unlexable_text_clears_state(self):
        state = RangeSelectorState("A1")
        assert state.set_text('"A1') is False
        assert state.text == ""
        assert state.descriptors == []

    def test_non_references_are_skipped(self):
        state = RangeSelectorState("=SUM(A1)+A0")
        assert len(state.descriptors) == 1

    def test_needs_sync(self):
        state = RangeSelectorState()
        assert not state.needs_sync
        state.focused = True
        assert state.needs_sync
        state.dialog_visible = True
        assert not state.needs_sync


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
