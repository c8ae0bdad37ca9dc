"""colors for referenced ranges, on the grid and in the editor text."""

from typing import List, Optional, Sequence

from ..domain.models import Highlight, RangeDescriptor, TextRun
from ..refs.codec import RangeTokenCodec
from ..refs.normalizer import normalize
from ..refs.tokenizer import ReferenceNode, SequenceNode


class ColorPalette:
    """assigns colors by position, recycling when positions outrun the palette."""

    def __init__(self, colors: Sequence[str]):
        if not colors:
            raise ValueError("palette needs at least one color")
        self.colors = list(colors)

    def index_for(self, position: int) -> int:
        return position % len(self.colors)

    def color_for(self, position: int) -> str:
        return self.colors[self.index_for(position)]


def on_sheet(d: RangeDescriptor, active_sheet: str, home_sheet: str) -> bool:
    """whether d is drawn while active_sheet is shown. unqualified ranges live on the home sheet."""
    sheet = d.sheet_name or home_sheet
    return sheet == active_sheet


def build_highlights(
    nodes: Optional[Sequence[SequenceNode]],
    palette: ColorPalette,
    codec: RangeTokenCodec,
    active_sheet: str,
    home_sheet: str,
) -> tuple:
    """
    color every reference in nodes.

    returns (grid highlights, editor text runs). the n-th reference gets the n-th
    palette color in both; references that do not decode or that live on another
    sheet get a text run but no grid highlight.
    """
    highlights: List[Highlight] = []
    runs: List[TextRun] = []
    position = 0
    for node in nodes or ():
        if not isinstance(node, ReferenceNode):
            continue
        color = palette.color_for(position)
        position += 1
        runs.append(TextRun(start=node.start, end=node.end, color=color))

        d = codec.decode(node.token)
        if d.is_degenerate or not on_sheet(d, active_sheet, home_sheet):
            continue
        highlights.append(Highlight(descriptor=normalize(d), color=color))
    return highlights, runs
