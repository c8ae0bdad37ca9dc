"""range reference lexing, encoding and validation."""
from .tokenizer import LiteralNode, ReferenceNode, SequenceNode, SequenceTokenizer, tokenize, sequence_to_text
from .codec import RangeTokenCodec, RANGE_DELIMITER
from .normalizer import normalize, apply_sheet_policy, canonicalize
from .validator import SequenceValidator, is_pure_range

__all__ = [
    "LiteralNode",
    "ReferenceNode",
    "SequenceNode",
    "SequenceTokenizer",
    "tokenize",
    "sequence_to_text",
    "RangeTokenCodec",
    "RANGE_DELIMITER",
    "normalize",
    "apply_sheet_policy",
    "canonicalize",
    "SequenceValidator",
    "is_pure_range",
]
