from enum import Enum, auto
from typing import List, NamedTuple
import re

from ..domain.errors import LexError

class TokenType(Enum):
    STRING = auto()
    UNIT = auto()
    SHEET = auto()
    ADDRESS = auto()
    QUOTED = auto()
    NUMBER = auto()
    IDENTIFIER = auto()
    OPERATOR = auto()
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    LBRACE = auto()
    RBRACE = auto()
    COMMA = auto()
    SEMICOLON = auto()
    WHITESPACE = auto()
    UNKNOWN = auto()

class Token(NamedTuple):
    type: TokenType
    value: str
    start: int
    end: int

_CELL = r"\$?[A-Za-z]{1,3}\$?\d+"
_NOT_WORD = r"(?![\w.])"

class RangeLexer:
    """
    a lossless lexer for range-selector input.
    every character lands in exactly one token so the text can be rebuilt.
    """

    # order matters!
    PATTERNS = [
        (TokenType.STRING, r'"(?:""|[^"])*"'),  # escaping with double quotes
        (TokenType.UNIT, r"\[[^\[\]]*\]"),
        (TokenType.SHEET, r"'(?:''|[^'])+'!|[^\W\d][\w.]*!"),
        (TokenType.ADDRESS, rf"{_CELL}(?::{_CELL})?{_NOT_WORD}"),
        (TokenType.ADDRESS, rf"\$?[A-Za-z]{{1,3}}:\$?[A-Za-z]{{1,3}}{_NOT_WORD}"),  # full columns
        (TokenType.ADDRESS, rf"\$?\d+:\$?\d+{_NOT_WORD}"),  # full rows
        (TokenType.QUOTED, r"'(?:''|[^'])*'"),
        (TokenType.NUMBER, r"\d+(?:\.\d+)?(?:[eE][+-]?\d+)?"),
        (TokenType.IDENTIFIER, r"[^\W\d][\w.]*"),
        (TokenType.LPAREN, r"\("),
        (TokenType.RPAREN, r"\)"),
        (TokenType.LBRACKET, r"\["),
        (TokenType.RBRACKET, r"\]"),
        (TokenType.LBRACE, r"\{"),
        (TokenType.RBRACE, r"\}"),
        (TokenType.COMMA, r","),
        (TokenType.SEMICOLON, r";"),
        (TokenType.OPERATOR, r"[+\-*/^&=<>!:%$#@]+"),
        (TokenType.WHITESPACE, r"\s+"),
    ]

    _COMPILED = [(token_type, re.compile(pattern)) for token_type, pattern in PATTERNS]

    def tokenize(self, text: str) -> List[Token]:
        tokens = []
        pos = 0
        length = len(text)

        while pos < length:
            match = None
            for token_type, regex in self._COMPILED:
                match = regex.match(text, pos)
                if match:
                    value = match.group(0)
                    tokens.append(Token(token_type, value, pos, pos + len(value)))
                    pos += len(value)
                    break

            if not match:
                char = text[pos]
                if char == '"':
                    raise LexError(text, pos, "unterminated string")
                if char == "'":
                    raise LexError(text, pos, "unterminated quoted sheet name")
                tokens.append(Token(TokenType.UNKNOWN, char, pos, pos + 1))
                pos += 1

        self._check_brackets(text, tokens)
        return tokens

    def _check_brackets(self, text: str, tokens: List[Token]):
        depth = 0
        for t in tokens:
            if t.type == TokenType.LBRACKET:
                depth += 1
            elif t.type == TokenType.RBRACKET:
                depth -= 1
                if depth < 0:
                    raise LexError(text, t.start, "unbalanced ']'")
        if depth:
            raise LexError(text, len(text), "unbalanced '['")

    def reconstruct(self, tokens: List[Token]) -> str:
        return "".join(t.value for t in tokens)
