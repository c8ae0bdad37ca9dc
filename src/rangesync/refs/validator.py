from typing import List, Optional, Sequence

from .codec import RANGE_DELIMITER, RangeTokenCodec
from .tokenizer import LiteralNode, ReferenceNode, SequenceNode


class SequenceValidator:
    """decides whether a node sequence is a pure range, or a list of them."""

    def __init__(self, codec: Optional[RangeTokenCodec] = None):
        self.codec = codec or RangeTokenCodec()

    def is_pure_range(self, nodes: Optional[Sequence[SequenceNode]]) -> bool:
        """true iff there is exactly one node, it is a reference, and it decodes."""
        if not nodes or len(nodes) != 1:
            return False
        node = nodes[0]
        if not isinstance(node, ReferenceNode):
            return False
        return not self.codec.decode(node.token).is_degenerate

    def split_ranges(self, nodes: Sequence[SequenceNode]) -> List[List[SequenceNode]]:
        """
        split a sequence at comma delimiters.

        literal runs are cut at each comma; whitespace around a delimiter is kept
        with its segment, so "A1, B2" yields a segment that is not pure.
        """
        segments: List[List[SequenceNode]] = [[]]
        for node in nodes:
            if isinstance(node, ReferenceNode):
                segments[-1].append(node)
                continue

            pieces = node.text.split(RANGE_DELIMITER)
            offset = node.start
            for i, piece in enumerate(pieces):
                if i:
                    segments.append([])
                    offset += len(RANGE_DELIMITER)
                if piece:
                    segments[-1].append(LiteralNode(piece, offset, offset + len(piece)))
                offset += len(piece)
        return segments

    def is_range_list(self, nodes: Optional[Sequence[SequenceNode]], only_one_range: bool = False) -> bool:
        """every comma separated segment is a pure range, and there is at least one."""
        if not nodes:
            return False
        segments = [s for s in self.split_ranges(nodes) if s]
        if not segments:
            return False
        if only_one_range and len(segments) > 1:
            return False
        return all(self.is_pure_range(s) for s in segments)


_default = SequenceValidator()


def is_pure_range(nodes: Optional[Sequence[SequenceNode]]) -> bool:
    return _default.is_pure_range(nodes)
