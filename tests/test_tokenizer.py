"""test suite for the lexer and sequence tokenizer."""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rangesync.domain.errors import LexError
from rangesync.refs.lexer import RangeLexer, TokenType
from rangesync.refs.tokenizer import (
    LiteralNode,
    ReferenceNode,
    SequenceTokenizer,
    node_text,
    sequence_to_text,
    tokenize,
)


class TestRangeLexer:
    def test_lossless_reconstruction(self):
        lexer = RangeLexer()
        text = "=SUM('My Sheet'!A1:B2, [wb]Data!$C$3) & \"x\""
        assert lexer.reconstruct(lexer.tokenize(text)) == text

    def test_address_forms(self):
        lexer = RangeLexer()
        for text in ["A1", "$A$1", "A1:B2", "A:C", "$1:$3"]:
            tokens = lexer.tokenize(text)
            assert [t.type for t in tokens] == [TokenType.ADDRESS], text

    def test_sheet_and_unit_prefix(self):
        tokens = RangeLexer().tokenize("[wb]'Q1 Data'!A1")
        assert [t.type for t in tokens] == [TokenType.UNIT, TokenType.SHEET, TokenType.ADDRESS]

    def test_long_identifier_is_not_an_address(self):
        tokens = RangeLexer().tokenize("ABCD1")
        assert [t.type for t in tokens] == [TokenType.IDENTIFIER]

    def test_unterminated_string_raises(self):
        with pytest.raises(LexError, match="unterminated string"):
            RangeLexer().tokenize('"abc')

    def test_unterminated_quote_raises(self):
        with pytest.raises(LexError, match="unterminated quoted sheet name"):
            RangeLexer().tokenize("'Sheet1!A1")

    def test_unbalanced_brackets_raise(self):
        with pytest.raises(LexError):
            RangeLexer().tokenize("[wb1Sheet1!A1")
        with pytest.raises(LexError):
            RangeLexer().tokenize("A1]")


class TestTokenize:
    def test_two_ranges(self):
        nodes = tokenize("A1:B2,Sheet2!C3")
        assert nodes == (
            ReferenceNode("A1:B2", 0, 5),
            LiteralNode(",", 5, 6),
            ReferenceNode("Sheet2!C3", 6, 15),
        )

    def test_formula_text_is_literal(self):
        nodes = tokenize("=SUM(A1)")
        assert nodes == (
            LiteralNode("=SUM(", 0, 5),
            ReferenceNode("A1", 5, 7),
            LiteralNode(")", 7, 8),
        )

    def test_function_name_shaped_like_a_cell(self):
        nodes = tokenize("LOG10(A1)")
        assert nodes[0] == LiteralNode("LOG10(", 0, 6)
        assert nodes[1] == ReferenceNode("A1", 6, 8)

    def test_qualified_reference_is_one_node(self):
        nodes = tokenize("[wb1]'My Sheet'!$A$1:B2")
        assert len(nodes) == 1
        assert isinstance(nodes[0], ReferenceNode)
        assert nodes[0].token == "[wb1]'My Sheet'!$A$1:B2"

    def test_full_row_and_column(self):
        assert tokenize("1:1") == (ReferenceNode("1:1", 0, 3),)
        assert tokenize("A:A") == (ReferenceNode("A:A", 0, 3),)

    def test_plain_text(self):
        assert tokenize("hello world") == (LiteralNode("hello world", 0, 11),)

    def test_empty_text(self):
        assert tokenize("") == ()

    @pytest.mark.parametrize("text", ['"abc', "'Sheet1!A1", "[wb1Sheet1!A1", "A1]"])
    def test_malformed_text_returns_none(self, text):
        assert tokenize(text) is None

    @pytest.mark.parametrize("text", [
        "A1:B2,Sheet2!C3",
        "=IF(A1>0, 'Sheet 2'!B:B, \"none\")",
        "  A1 ,, B2  ",
        "[wb]Data!1:4;C3",
        "x",
    ])
    def test_nodes_reconstruct_text(self, text):
        nodes = tokenize(text)
        assert sequence_to_text(nodes) == text
        # contiguous, no gaps or overlaps
        offset = 0
        for node in nodes:
            assert node.start == offset
            assert node.end - node.start == len(node_text(node))
            offset = node.end
        assert offset == len(text)

    def test_results_are_memoized_and_immutable(self):
        first = tokenize("B2:A1")
        second = tokenize("B2:A1")
        assert first is second

        with pytest.raises(AttributeError):
            first[0].token = "A1:B2"

        clone = first[0]._replace(token="A1:B2")
        assert clone.token == "A1:B2"
        assert tokenize("B2:A1")[0].token == "B2:A1"


class TestSequenceTokenizer:
    def test_object_form(self):
        tokenizer = SequenceTokenizer()
        nodes = tokenizer.tokenize("A1,B2")
        assert tokenizer.reconstruct(nodes) == "A1,B2"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
