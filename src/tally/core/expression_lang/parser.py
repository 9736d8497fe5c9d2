"""
Recursive descent parser for the tally expression language.

Grammar (precedence low to high):
    expr    → summand (("+" | "-" | "=") expr)?
    summand → term (("*" | "/") summand)?
    term    → INTEGER | DECIMAL | STRING | IDENTIFIER
            | "(" expr ")"
            | "+" expr          (0 + expr)
            | "-" summand       (0 - summand)

Both binary levels recurse on the right, so every operator is
right-associative: ``10 - 3 - 2`` is ``10 - (3 - 2)`` and ``a = b = 3`` is
``a = (b = 3)``. Assignment shares the additive level.
"""

from __future__ import annotations

import logging

from tally.core.errors import ParseError, make_context
from tally.core.expression_lang.tokenizer import tokenize
from tally.core.ir.expressions import ExpressionNode, make_node
from tally.core.ir.tokens import KEYWORD_KINDS, LEAF_KINDS, Token, TokenKind

logger = logging.getLogger(__name__)


class _Parser:
    """Recursive descent parser over one line of tokens."""

    def __init__(
        self,
        tokens: list[Token],
        source: str | None = None,
        name: str = "<input>",
    ) -> None:
        if not tokens or tokens[-1].kind != TokenKind.EOF:
            end = tokens[-1].pos if tokens else 0
            tokens = [*tokens, Token(TokenKind.EOF, pos=end)]
        self.tokens = tokens
        self.pos = 0
        self.source = source
        self.name = name

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def error(self, message: str) -> ParseError:
        tok = self.current
        context = None
        if self.source is not None:
            context = make_context(self.source, tok.pos, self.name)
        return ParseError(message, found=tok, position=self.pos, context=context)

    # -- Grammar rules --

    def parse_expr(self) -> ExpressionNode:
        """summand (('+' | '-' | '=') expr)?"""
        left = self.parse_summand()
        if self.current.kind in (TokenKind.PLUS, TokenKind.MINUS, TokenKind.ASSIGN):
            op = self.advance()
            right = self.parse_expr()
            return make_node(op, left, right)
        return left

    def parse_summand(self) -> ExpressionNode:
        """term (('*' | '/') summand)?"""
        left = self.parse_term()
        if self.current.kind in (TokenKind.STAR, TokenKind.SLASH):
            op = self.advance()
            right = self.parse_summand()
            return make_node(op, left, right)
        return left

    def parse_term(self) -> ExpressionNode:
        """literal | identifier | '(' expr ')' | '+' expr | '-' summand"""
        tok = self.current

        if tok.kind in LEAF_KINDS and tok.kind != TokenKind.BOOLEAN:
            self.advance()
            return make_node(tok)

        if tok.kind == TokenKind.LPAREN:
            self.advance()
            expr = self.parse_expr()
            if self.current.kind != TokenKind.RPAREN:
                raise self.error(f"Expected ) but found {self.current.text}")
            self.advance()
            return expr

        if tok.kind == TokenKind.PLUS:
            self.advance()
            operand = self.parse_expr()
            return make_node(tok, make_node(Token(TokenKind.INTEGER, 0, tok.pos)), operand)

        if tok.kind == TokenKind.MINUS:
            self.advance()
            operand = self.parse_summand()
            return make_node(tok, make_node(Token(TokenKind.INTEGER, 0, tok.pos)), operand)

        if tok.kind == TokenKind.EOF:
            raise self.error("Unexpected end of input, expected parenthesis or number")

        if tok.kind in KEYWORD_KINDS:
            raise self.error(f"Keyword '{tok.text}' is not supported in expressions")

        raise self.error(f"Unexpected token {tok.text}")


def parse_tokens(
    tokens: list[Token],
    source: str | None = None,
    name: str = "<input>",
) -> ExpressionNode:
    """Parse one line of already-tokenized input.

    Args:
        tokens: Tokens for a single line; an EOF token is appended if missing
        source: Original text, used for error locations
        name: Input name used in error locations

    Returns:
        Root of the expression tree.

    Raises:
        ParseError: If the tokens do not form exactly one expression, or
            the expression is nested deeper than the interpreter stack allows.
    """
    parser = _Parser(tokens, source, name)
    try:
        expr = parser.parse_expr()
    except RecursionError:
        raise parser.error("Expression nested too deeply") from None

    # Ensure all tokens consumed
    if parser.current.kind != TokenKind.EOF:
        raise parser.error(f"Expected end of input, found {parser.current.text}")

    logger.debug("Parsed %s", expr)
    return expr


def parse(source: str, name: str = "<input>") -> ExpressionNode:
    """Parse a single expression into a tree.

    Args:
        source: Expression text (e.g., "a = 2 * (b + 1)")
        name: Input name used in error locations

    Returns:
        Root of the expression tree.

    Raises:
        LexError: If tokenization fails.
        ParseError: If the expression is invalid.
    """
    return parse_tokens(tokenize(source, name), source, name)
