import logging
from functools import lru_cache
from typing import List, NamedTuple, Optional, Sequence, Tuple, Union

from .lexer import RangeLexer, Token, TokenType
from ..domain.errors import LexError

logger = logging.getLogger(__name__)

class LiteralNode(NamedTuple):
    text: str
    start: int
    end: int

class ReferenceNode(NamedTuple):
    token: str
    start: int
    end: int

# nodes are immutable tuples, so memoized results can be shared.
# a per-use change goes through node._replace(...), which returns a copy.
SequenceNode = Union[LiteralNode, ReferenceNode]
NodeSequence = Tuple[SequenceNode, ...]

def node_text(node: SequenceNode) -> str:
    if isinstance(node, ReferenceNode):
        return node.token
    return node.text

def sequence_to_text(nodes: Sequence[SequenceNode]) -> str:
    return "".join(node_text(n) for n in nodes)

class SequenceBuilder:
    """groups lexer tokens into literal runs and reference nodes."""

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def build(self) -> List[SequenceNode]:
        nodes: List[SequenceNode] = []
        while self.pos < len(self.tokens):
            reference = self._parse_reference()
            if reference:
                nodes.append(reference)
                continue

            token = self.tokens[self.pos]
            self.pos += 1
            # merge into the previous literal run
            if nodes and isinstance(nodes[-1], LiteralNode):
                prev = nodes[-1]
                nodes[-1] = LiteralNode(prev.text + token.value, prev.start, token.end)
            else:
                nodes.append(LiteralNode(token.value, token.start, token.end))
        return nodes

    def _peek(self, offset: int = 0) -> Optional[Token]:
        index = self.pos + offset
        if index < len(self.tokens):
            return self.tokens[index]
        return None

    def _parse_reference(self) -> Optional[ReferenceNode]:
        # [unit]? sheet!? address, with no whitespace in between
        offset = 0
        token = self._peek(offset)
        if token and token.type == TokenType.UNIT:
            offset += 1
            token = self._peek(offset)
        if token and token.type == TokenType.SHEET:
            offset += 1
            token = self._peek(offset)
        if not token or token.type != TokenType.ADDRESS:
            return None

        # an address followed by "(" is a function name such as LOG10(
        following = self._peek(offset + 1)
        if following and following.type == TokenType.LPAREN:
            return None

        first = self.tokens[self.pos]
        parts = self.tokens[self.pos:self.pos + offset + 1]
        self.pos += offset + 1
        return ReferenceNode("".join(t.value for t in parts), first.start, token.end)

@lru_cache(maxsize=512)
def _build_sequence(text: str) -> Optional[NodeSequence]:
    try:
        tokens = RangeLexer().tokenize(text)
    except LexError as e:
        logger.debug(f"not lexable: {text!r} ({e})")
        return None
    return tuple(SequenceBuilder(tokens).build())

def tokenize(text: str) -> Optional[NodeSequence]:
    """
    split text into literal runs and reference nodes.

    returns None when the text is not lexically well-formed; callers treat
    that as "discard to empty" rather than an error.
    """
    return _build_sequence(text)

class SequenceTokenizer:
    """object form of tokenize() for constructor injection."""

    def tokenize(self, text: str) -> Optional[NodeSequence]:
        return tokenize(text)

    def reconstruct(self, nodes: Sequence[SequenceNode]) -> str:
        return sequence_to_text(nodes)
