import logging
import re
from typing import List, Sequence

from .tokenizer import ReferenceNode, tokenize
from ..domain.errors import DecodeError
from ..domain.models import RangeDescriptor, RangeType

logger = logging.getLogger(__name__)

RANGE_DELIMITER = ","

_QUALIFIED_RE = re.compile(
    r"(?:\[(?P<unit>[^\[\]]*)\])?"
    r"(?:(?:'(?P<quoted>(?:''|[^'])+)'|(?P<sheet>[^\W\d][\w.]*))!)?"
    r"(?P<address>.*)"
)
_CELL_RANGE_RE = re.compile(
    r"(\$?)([A-Za-z]{1,3})(\$?)(\d+)(?::(\$?)([A-Za-z]{1,3})(\$?)(\d+))?"
)
_COLUMN_RANGE_RE = re.compile(r"(\$?)([A-Za-z]{1,3}):(\$?)([A-Za-z]{1,3})")
_ROW_RANGE_RE = re.compile(r"(\$?)(\d+):(\$?)(\d+)")
_PLAIN_SHEET_RE = re.compile(r"[^\W\d][\w.]*")


def column_label_to_index(label: str) -> int:
    """convert a column label (A, AA) to a zero-based index."""
    index = 0
    for char in label.upper():
        index = index * 26 + (ord(char) - ord("A") + 1)
    return index - 1


def column_index_to_label(index: int) -> str:
    """convert a zero-based column index to its label."""
    if index < 0:
        raise ValueError("column index must not be negative")
    chunks: List[str] = []
    current = index + 1
    while current > 0:
        current -= 1
        chunks.append(chr(ord("A") + (current % 26)))
        current //= 26
    return "".join(reversed(chunks))


def _row_index(digits: str, token: str) -> int:
    row = int(digits)
    if row < 1:
        raise DecodeError(token)
    return row - 1


def _parse_address(address: str, token: str) -> dict:
    match = _CELL_RANGE_RE.fullmatch(address)
    if match:
        sc_abs, sc, sr_abs, sr, ec_abs, ec, er_abs, er = match.groups()
        if ec is None:
            # single cell: the end corner mirrors the start
            ec_abs, ec, er_abs, er = sc_abs, sc, sr_abs, sr
        return dict(
            start_row=_row_index(sr, token),
            start_col=column_label_to_index(sc),
            end_row=_row_index(er, token),
            end_col=column_label_to_index(ec),
            start_abs_row=bool(sr_abs),
            start_abs_col=bool(sc_abs),
            end_abs_row=bool(er_abs),
            end_abs_col=bool(ec_abs),
            range_type=RangeType.NORMAL,
        )

    match = _COLUMN_RANGE_RE.fullmatch(address)
    if match:
        sc_abs, sc, ec_abs, ec = match.groups()
        return dict(
            start_col=column_label_to_index(sc),
            end_col=column_label_to_index(ec),
            start_abs_col=bool(sc_abs),
            end_abs_col=bool(ec_abs),
            range_type=RangeType.COLUMN,
        )

    match = _ROW_RANGE_RE.fullmatch(address)
    if match:
        sr_abs, sr, er_abs, er = match.groups()
        return dict(
            start_row=_row_index(sr, token),
            end_row=_row_index(er, token),
            start_abs_row=bool(sr_abs),
            end_abs_row=bool(er_abs),
            range_type=RangeType.ROW,
        )

    raise DecodeError(token)


class RangeTokenCodec:
    """maps reference token text to RangeDescriptor and back."""

    def decode(self, token: str) -> RangeDescriptor:
        """
        parse one reference token.

        unrecognized syntax yields RangeDescriptor.empty(); this never raises.
        """
        match = _QUALIFIED_RE.fullmatch(token.strip())
        try:
            if not match:
                raise DecodeError(token)
            fields = _parse_address(match.group("address"), token)
        except DecodeError as e:
            logger.debug(str(e))
            return RangeDescriptor.empty()

        quoted = match.group("quoted")
        sheet_name = quoted.replace("''", "'") if quoted is not None else (match.group("sheet") or "")
        return RangeDescriptor(unit_id=match.group("unit") or "", sheet_name=sheet_name, **fields)

    def encode(self, descriptors: Sequence[RangeDescriptor], include_unit_and_sheet: bool) -> List[str]:
        """
        one token per descriptor.

        with include_unit_and_sheet False the unit and sheet qualifiers are dropped
        even when the descriptor carries them.
        """
        return [self._encode_one(d, include_unit_and_sheet) for d in descriptors]

    def join(self, descriptors: Sequence[RangeDescriptor], include_unit_and_sheet: bool) -> str:
        return RANGE_DELIMITER.join(t for t in self.encode(descriptors, include_unit_and_sheet) if t)

    def split(self, text: str) -> List[RangeDescriptor]:
        """decode every reference in a delimited list. unlexable text gives []."""
        nodes = tokenize(text)
        if nodes is None:
            return []
        return [self.decode(n.token) for n in nodes if isinstance(n, ReferenceNode)]

    def _encode_one(self, d: RangeDescriptor, include_unit_and_sheet: bool) -> str:
        if d.is_degenerate:
            return ""
        address = self._encode_address(d)
        if not include_unit_and_sheet:
            return address

        prefix = ""
        if d.unit_id:
            prefix += f"[{d.unit_id}]"
        if d.sheet_name:
            prefix += self._encode_sheet(d.sheet_name) + "!"
        return prefix + address

    def _encode_sheet(self, name: str) -> str:
        if _PLAIN_SHEET_RE.fullmatch(name):
            return name
        escaped = name.replace("'", "''")
        return f"'{escaped}'"

    def _encode_address(self, d: RangeDescriptor) -> str:
        if d.range_type == RangeType.ROW:
            return f"{self._abs(d.start_abs_row)}{d.start_row + 1}:{self._abs(d.end_abs_row)}{d.end_row + 1}"
        if d.range_type == RangeType.COLUMN:
            start = self._abs(d.start_abs_col) + column_index_to_label(d.start_col)
            end = self._abs(d.end_abs_col) + column_index_to_label(d.end_col)
            return f"{start}:{end}"

        start = self._cell(d.start_row, d.start_col, d.start_abs_row, d.start_abs_col)
        end = self._cell(d.end_row, d.end_col, d.end_abs_row, d.end_abs_col)
        if start == end:
            return start
        return f"{start}:{end}"

    def _cell(self, row: int, col: int, abs_row: bool, abs_col: bool) -> str:
        return f"{self._abs(abs_col)}{column_index_to_label(col)}{self._abs(abs_row)}{row + 1}"

    @staticmethod
    def _abs(flag: bool) -> str:
        return "$" if flag else ""
