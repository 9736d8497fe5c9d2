"""
Token types for the tally expression language.
"""

from __future__ import annotations

from enum import StrEnum, auto


class TokenKind(StrEnum):
    """Token types produced by the tokenizer."""

    # Literals
    INTEGER = auto()
    DECIMAL = auto()
    STRING = auto()
    BOOLEAN = auto()

    # Identifiers and keywords
    IDENTIFIER = auto()
    IF = auto()
    WHILE = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    ASSIGN = auto()
    EQ = auto()
    NE = auto()
    LT = auto()
    GT = auto()
    NOT = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    DOT = auto()

    # Line boundary
    NEWLINE = auto()

    # End of input
    EOF = auto()


# Kinds that may label a childless node
LEAF_KINDS = frozenset(
    {
        TokenKind.INTEGER,
        TokenKind.DECIMAL,
        TokenKind.STRING,
        TokenKind.IDENTIFIER,
        TokenKind.BOOLEAN,
    }
)

# Kinds that may label a node with one or two children
OPERATOR_KINDS = frozenset(
    {
        TokenKind.PLUS,
        TokenKind.MINUS,
        TokenKind.STAR,
        TokenKind.SLASH,
        TokenKind.ASSIGN,
        TokenKind.EQ,
        TokenKind.NE,
        TokenKind.LT,
        TokenKind.GT,
        TokenKind.NOT,
    }
)

KEYWORD_KINDS = frozenset({TokenKind.IF, TokenKind.WHILE, TokenKind.BOOLEAN})

# Source spelling of the fixed tags
SYMBOLS: dict[TokenKind, str] = {
    TokenKind.PLUS: "+",
    TokenKind.MINUS: "-",
    TokenKind.STAR: "*",
    TokenKind.SLASH: "/",
    TokenKind.ASSIGN: "=",
    TokenKind.EQ: "==",
    TokenKind.NE: "!=",
    TokenKind.LT: "<",
    TokenKind.GT: ">",
    TokenKind.NOT: "!",
    TokenKind.LPAREN: "(",
    TokenKind.RPAREN: ")",
    TokenKind.DOT: ".",
    TokenKind.NEWLINE: "\n",
    TokenKind.IF: "if",
    TokenKind.WHILE: "while",
    TokenKind.EOF: "",
}


class Token:
    """
    A single token from the tokenizer.

    ``value`` holds the typed payload for literal kinds (int, float, str,
    bool) and the source spelling for everything else. Two tokens are equal
    when kind and value match; ``pos`` is informational.
    """

    __slots__ = ("kind", "value", "pos")

    def __init__(
        self,
        kind: TokenKind,
        value: int | float | str | bool | None = None,
        pos: int = 0,
    ) -> None:
        if value is None:
            value = SYMBOLS.get(kind, "")
        self.kind = kind
        self.value = value
        self.pos = pos

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return (
            self.kind == other.kind
            and type(self.value) is type(other.value)
            and self.value == other.value
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.value))

    @property
    def text(self) -> str:
        """Render the token the way it would be written in source."""
        if self.kind == TokenKind.STRING:
            escaped = str(self.value).replace("\\", "\\\\").replace('"', '\\"')
            return f'"{escaped}"'
        if self.kind == TokenKind.BOOLEAN:
            return "true" if self.value else "false"
        if self.kind == TokenKind.EOF:
            return "end of input"
        if self.kind == TokenKind.NEWLINE:
            return "newline"
        return str(self.value)
