from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class RangeType(str, Enum):
    NORMAL = "normal"
    ROW = "row"  # full rows, column fields unused
    COLUMN = "column"  # full columns, row fields unused
    NONE = "none"  # decode failure sentinel

class RangeDescriptor(BaseModel):
    """a rectangular cell range, optionally qualified by sheet and workbook unit.

    rows and columns are zero-based. an empty sheet_name means the current sheet,
    an empty unit_id the current workbook.
    """
    model_config = ConfigDict(frozen=True)

    unit_id: str = ""
    sheet_name: str = ""
    start_row: int = Field(default=0, ge=0)
    start_col: int = Field(default=0, ge=0)
    end_row: int = Field(default=0, ge=0)
    end_col: int = Field(default=0, ge=0)
    start_abs_row: bool = False
    start_abs_col: bool = False
    end_abs_row: bool = False
    end_abs_col: bool = False
    range_type: RangeType = RangeType.NORMAL

    @classmethod
    def empty(cls) -> "RangeDescriptor":
        """the sentinel produced for unrecognized token syntax."""
        return cls(range_type=RangeType.NONE)

    @classmethod
    def cell(cls, row: int, col: int, sheet_name: str = "", unit_id: str = "") -> "RangeDescriptor":
        return cls(
            unit_id=unit_id,
            sheet_name=sheet_name,
            start_row=row,
            start_col=col,
            end_row=row,
            end_col=col,
        )

    @property
    def is_degenerate(self) -> bool:
        return self.range_type == RangeType.NONE

    @property
    def is_single_cell(self) -> bool:
        return (
            self.range_type == RangeType.NORMAL
            and self.start_row == self.end_row
            and self.start_col == self.end_col
        )

    def same_area(self, other: "RangeDescriptor") -> bool:
        """compare rows, columns, absolute flags and type, ignoring sheet/unit qualifiers."""
        keys = (
            "start_row", "start_col", "end_row", "end_col",
            "start_abs_row", "start_abs_col", "end_abs_row", "end_abs_col",
            "range_type",
        )
        return all(getattr(self, k) == getattr(other, k) for k in keys)

class DialogRangeRow(BaseModel):
    """one editable row of the multi-range dialog."""
    text: str = ""
    color_index: int = 0

class SelectionEvent(BaseModel):
    """a grid selection update: the composed range text, where the caret goes, and whether the gesture ended."""
    model_config = ConfigDict(frozen=True)

    text: str
    caret_offset: int = -1  # -1 = leave the caret alone
    is_end: bool = False

class Highlight(BaseModel):
    """a descriptor drawn on the grid overlay in the given color."""
    model_config = ConfigDict(frozen=True)

    descriptor: RangeDescriptor
    color: str

class TextRun(BaseModel):
    """a colored span of the editor text, [start, end)."""
    model_config = ConfigDict(frozen=True)

    start: int
    end: int
    color: Optional[str] = None
