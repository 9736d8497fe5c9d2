"""Tests for the tally tokenizer."""

from __future__ import annotations

import pytest

from tally.core.errors import LexError, NumberFormatError, UnterminatedStringError
from tally.core.expression_lang.tokenizer import tokenize
from tally.core.ir.tokens import Token, TokenKind


def kinds(source: str) -> list[TokenKind]:
    return [t.kind for t in tokenize(source)]


class TestLiterals:
    """Numbers, strings, and identifiers."""

    def test_integer(self) -> None:
        tokens = tokenize("42")
        assert tokens[0].kind == TokenKind.INTEGER
        assert tokens[0].value == 42
        assert type(tokens[0].value) is int

    def test_decimal(self) -> None:
        tokens = tokenize("3.14")
        assert tokens[0].kind == TokenKind.DECIMAL
        assert tokens[0].value == 3.14

    def test_decimal_with_trailing_point(self) -> None:
        tokens = tokenize("5.")
        assert tokens[0].kind == TokenKind.DECIMAL
        assert tokens[0].value == 5.0

    def test_largest_integer(self) -> None:
        tokens = tokenize("9223372036854775807")
        assert tokens[0].value == 2**63 - 1

    def test_string(self) -> None:
        tokens = tokenize('"hello world"')
        assert tokens[0].kind == TokenKind.STRING
        assert tokens[0].value == "hello world"

    def test_string_escape(self) -> None:
        tokens = tokenize('"he\\"llo"')
        assert tokens[0].value == 'he"llo'

    def test_identifier(self) -> None:
        tokens = tokenize("my_var _x x1")
        assert [t.kind for t in tokens[:3]] == [TokenKind.IDENTIFIER] * 3
        assert [t.value for t in tokens[:3]] == ["my_var", "_x", "x1"]

    def test_unicode_identifier(self) -> None:
        tokens = tokenize("café")
        assert tokens[0] == Token(TokenKind.IDENTIFIER, "café")

    def test_keywords(self) -> None:
        tokens = tokenize("if while true false")
        assert [t.kind for t in tokens] == [
            TokenKind.IF,
            TokenKind.WHILE,
            TokenKind.BOOLEAN,
            TokenKind.BOOLEAN,
            TokenKind.EOF,
        ]
        assert tokens[2].value is True
        assert tokens[3].value is False

    def test_keyword_prefix_is_identifier(self) -> None:
        tokens = tokenize("iffy truest")
        assert [t.kind for t in tokens[:2]] == [TokenKind.IDENTIFIER, TokenKind.IDENTIFIER]


class TestOperators:
    """Operators, punctuation, and lookahead."""

    def test_single_character_tokens(self) -> None:
        assert kinds(". + - * / ( ) < >") == [
            TokenKind.DOT,
            TokenKind.PLUS,
            TokenKind.MINUS,
            TokenKind.STAR,
            TokenKind.SLASH,
            TokenKind.LPAREN,
            TokenKind.RPAREN,
            TokenKind.LT,
            TokenKind.GT,
            TokenKind.EOF,
        ]

    def test_equals_lookahead(self) -> None:
        assert kinds("a = b == c") == [
            TokenKind.IDENTIFIER,
            TokenKind.ASSIGN,
            TokenKind.IDENTIFIER,
            TokenKind.EQ,
            TokenKind.IDENTIFIER,
            TokenKind.EOF,
        ]

    def test_not_lookahead(self) -> None:
        assert kinds("!a != b") == [
            TokenKind.NOT,
            TokenKind.IDENTIFIER,
            TokenKind.NE,
            TokenKind.IDENTIFIER,
            TokenKind.EOF,
        ]

    def test_lookahead_at_end_of_input(self) -> None:
        assert kinds("=") == [TokenKind.ASSIGN, TokenKind.EOF]
        assert kinds("!") == [TokenKind.NOT, TokenKind.EOF]

    def test_no_whitespace_needed(self) -> None:
        assert kinds("x=(1+2)*3") == [
            TokenKind.IDENTIFIER,
            TokenKind.ASSIGN,
            TokenKind.LPAREN,
            TokenKind.INTEGER,
            TokenKind.PLUS,
            TokenKind.INTEGER,
            TokenKind.RPAREN,
            TokenKind.STAR,
            TokenKind.INTEGER,
            TokenKind.EOF,
        ]

    def test_positions(self) -> None:
        tokens = tokenize("a + 10")
        assert [t.pos for t in tokens] == [0, 2, 4, 6]


class TestSkipping:
    """Whitespace, comments, and newlines."""

    def test_newline_is_a_token(self) -> None:
        assert kinds("a\nb") == [
            TokenKind.IDENTIFIER,
            TokenKind.NEWLINE,
            TokenKind.IDENTIFIER,
            TokenKind.EOF,
        ]

    def test_whitespace_only(self) -> None:
        assert kinds("  \t  ") == [TokenKind.EOF]

    def test_line_comment_keeps_newline(self) -> None:
        assert kinds("1 // one\n2") == [
            TokenKind.INTEGER,
            TokenKind.NEWLINE,
            TokenKind.INTEGER,
            TokenKind.EOF,
        ]

    def test_line_comment_at_end_of_input(self) -> None:
        assert kinds("// nothing here") == [TokenKind.EOF]

    def test_block_comments(self) -> None:
        assert kinds("1 /* a */ + /* b */ 2") == [
            TokenKind.INTEGER,
            TokenKind.PLUS,
            TokenKind.INTEGER,
            TokenKind.EOF,
        ]

    def test_adjacent_comments(self) -> None:
        assert kinds("/* a *//* b */ // c\n  /* d */ 1") == [
            TokenKind.NEWLINE,
            TokenKind.INTEGER,
            TokenKind.EOF,
        ]

    def test_block_comment_spans_lines(self) -> None:
        assert kinds("/* one\ntwo */ 1") == [TokenKind.INTEGER, TokenKind.EOF]

    def test_slash_is_division_outside_comments(self) -> None:
        assert kinds("6 / 3") == [
            TokenKind.INTEGER,
            TokenKind.SLASH,
            TokenKind.INTEGER,
            TokenKind.EOF,
        ]


class TestErrors:
    """Malformed input raises LexError subclasses."""

    def test_unterminated_string(self) -> None:
        with pytest.raises(UnterminatedStringError, match="Unterminated string"):
            tokenize('"hello')

    def test_unterminated_string_after_escape(self) -> None:
        with pytest.raises(UnterminatedStringError):
            tokenize('"hello\\')

    def test_unterminated_string_is_lex_error(self) -> None:
        with pytest.raises(LexError):
            tokenize('x = "abc')

    def test_unexpected_character(self) -> None:
        with pytest.raises(LexError, match="Unexpected character"):
            tokenize("1 @ 2")

    def test_single_quote_is_not_a_string(self) -> None:
        with pytest.raises(LexError, match="Unexpected character"):
            tokenize("'x'")

    def test_identifier_starting_with_digit(self) -> None:
        with pytest.raises(LexError, match="can't start with a number"):
            tokenize("123abc")

    def test_second_decimal_point(self) -> None:
        with pytest.raises(NumberFormatError, match="1.2.3"):
            tokenize("1.2.3")

    def test_double_point(self) -> None:
        with pytest.raises(NumberFormatError):
            tokenize("1..2")

    def test_integer_out_of_range(self) -> None:
        with pytest.raises(NumberFormatError, match="out of range"):
            tokenize("9223372036854775808")

    def test_unterminated_block_comment(self) -> None:
        with pytest.raises(LexError, match="Unterminated block comment"):
            tokenize("1 /* never closed")

    def test_error_position_and_context(self) -> None:
        with pytest.raises(LexError) as exc_info:
            tokenize("x = 1\ny = 2 $ 3")
        err = exc_info.value
        assert err.pos == 12
        assert err.context is not None
        assert (err.context.line, err.context.column) == (2, 7)
        assert "<input>:2:7" in str(err)
        assert "y = 2 $ 3" in str(err)

    def test_error_uses_input_name(self) -> None:
        with pytest.raises(LexError, match="prog.tly:1:1"):
            tokenize("#", name="prog.tly")
