from typing import Optional

from .codec import RangeTokenCodec
from .tokenizer import ReferenceNode, sequence_to_text, tokenize
from ..domain.models import RangeDescriptor, RangeType


def normalize(d: RangeDescriptor) -> RangeDescriptor:
    """
    order both corners so start <= end on each axis.

    each axis is handled on its own and a corner's absolute flag moves with it.
    full-row ranges keep their column fields, full-column ranges their row
    fields, and the decode sentinel is returned as is.
    """
    if d.is_degenerate:
        return d

    update = {}
    if d.range_type != RangeType.COLUMN and d.start_row > d.end_row:
        update.update(
            start_row=d.end_row,
            end_row=d.start_row,
            start_abs_row=d.end_abs_row,
            end_abs_row=d.start_abs_row,
        )
    if d.range_type != RangeType.ROW and d.start_col > d.end_col:
        update.update(
            start_col=d.end_col,
            end_col=d.start_col,
            start_abs_col=d.end_abs_col,
            end_abs_col=d.start_abs_col,
        )
    if not update:
        return d
    return d.model_copy(update=update)


def apply_sheet_policy(d: RangeDescriptor, across_sheet: bool) -> RangeDescriptor:
    """drop cross-sheet identity entirely, never partially."""
    if not across_sheet or not d.sheet_name:
        if d.sheet_name or d.unit_id:
            return d.model_copy(update={"sheet_name": "", "unit_id": ""})
    return d


def canonicalize(text: str, across_sheet: bool, codec: Optional[RangeTokenCodec] = None) -> Optional[str]:
    """
    rewrite every reference in text to its normalized, policy-applied encoding.

    literal text is kept untouched. returns None when text is not lexable.
    """
    nodes = tokenize(text)
    if nodes is None:
        return None
    codec = codec or RangeTokenCodec()

    rewritten = []
    for node in nodes:
        if isinstance(node, ReferenceNode):
            d = codec.decode(node.token)
            if not d.is_degenerate:
                d = apply_sheet_policy(normalize(d), across_sheet)
                # tokenize() results are shared, so rewrite a copy
                node = node._replace(token=codec.encode([d], across_sheet)[0])
        rewritten.append(node)
    return sequence_to_text(rewritten)
