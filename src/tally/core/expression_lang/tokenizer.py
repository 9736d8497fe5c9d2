"""
Tokenizer for the tally expression language.

Converts source text into a sequence of typed tokens. Whitespace and
comments (``// ...`` to end of line, ``/* ... */``) are skipped; newlines are
kept as NEWLINE tokens so callers can split a buffer into lines.
"""

from __future__ import annotations

import logging
import re

from tally.core.errors import (
    LexError,
    NumberFormatError,
    UnterminatedStringError,
    make_context,
)
from tally.core.ir.tokens import Token, TokenKind
from tally.core.ir.values import fits_int64

logger = logging.getLogger(__name__)

_KEYWORDS: dict[str, Token] = {
    "if": Token(TokenKind.IF),
    "while": Token(TokenKind.WHILE),
    "true": Token(TokenKind.BOOLEAN, True),
    "false": Token(TokenKind.BOOLEAN, False),
}

_SINGLE: dict[str, TokenKind] = {
    ".": TokenKind.DOT,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "<": TokenKind.LT,
    ">": TokenKind.GT,
    "\n": TokenKind.NEWLINE,
}

# Digits with at most one decimal point
_NUMBER_RE = re.compile(r"[0-9]+(\.[0-9]*)?")
# Letter or underscore followed by alphanumerics/underscores
_IDENT_RE = re.compile(r"[^\W\d]\w*")
# Whitespace other than newline
_SPACE_RE = re.compile(r"[^\S\n]+")


class _Tokenizer:
    """Single left-to-right scan over one source buffer."""

    def __init__(self, source: str, name: str) -> None:
        self.source = source
        self.name = name
        self.i = 0

    def error(self, cls: type[LexError], message: str, pos: int) -> LexError:
        return cls(message, pos, make_context(self.source, pos, self.name))

    def run(self) -> list[Token]:
        tokens: list[Token] = []
        n = len(self.source)

        while True:
            self.skip()
            if self.i >= n:
                break
            tokens.append(self.next_token())

        tokens.append(Token(TokenKind.EOF, pos=n))
        return tokens

    # -- Skipping --

    def skip(self) -> None:
        """Skip whitespace and comments until neither makes progress."""
        while True:
            start = self.i
            m = _SPACE_RE.match(self.source, self.i)
            if m:
                self.i = m.end()
            self.skip_comment()
            if self.i == start:
                return

    def skip_comment(self) -> None:
        source = self.source
        if source.startswith("//", self.i):
            end = source.find("\n", self.i)
            # The newline itself stays in the stream as a NEWLINE token
            self.i = len(source) if end == -1 else end
        elif source.startswith("/*", self.i):
            end = source.find("*/", self.i + 2)
            if end == -1:
                raise self.error(LexError, "Unterminated block comment", self.i)
            self.i = end + 2

    # -- Tokens --

    def next_token(self) -> Token:
        source = self.source
        c = source[self.i]

        if c == '"':
            return self.read_string()

        m = _NUMBER_RE.match(source, self.i)
        if m:
            return self.read_number(m)

        m = _IDENT_RE.match(source, self.i)
        if m:
            return self.read_identifier(m)

        if c == "=":
            return self.read_pair(TokenKind.ASSIGN, TokenKind.EQ)

        if c == "!":
            return self.read_pair(TokenKind.NOT, TokenKind.NE)

        if c in _SINGLE:
            tok = Token(_SINGLE[c], pos=self.i)
            self.i += 1
            return tok

        raise self.error(LexError, f"Unexpected character: {c!r}", self.i)

    def read_pair(self, single: TokenKind, double: TokenKind) -> Token:
        """Disambiguate ``=``/``==`` and ``!``/``!=``."""
        start = self.i
        if self.source.startswith("=", start + 1):
            self.i += 2
            return Token(double, pos=start)
        self.i += 1
        return Token(single, pos=start)

    def read_number(self, m: re.Match[str]) -> Token:
        start = self.i
        text = m.group(0)
        end = m.end()

        follow = self.source[end : end + 1]
        if follow == "." and "." in text:
            bad = _NUMBER_RE.match(self.source, end + 1)
            stop = bad.end() if bad else end + 1
            raise self.error(
                NumberFormatError,
                f"Malformed number literal: {self.source[start:stop]!r}",
                start,
            )
        if follow and (follow == "_" or follow.isalpha()):
            raise self.error(LexError, "Identifiers can't start with a number", start)

        self.i = end
        if "." in text:
            return Token(TokenKind.DECIMAL, float(text), start)

        value = int(text)
        if not fits_int64(value):
            raise self.error(
                NumberFormatError,
                f"Integer literal out of range: {text}",
                start,
            )
        return Token(TokenKind.INTEGER, value, start)

    def read_identifier(self, m: re.Match[str]) -> Token:
        start = self.i
        word = m.group(0)
        self.i = m.end()

        keyword = _KEYWORDS.get(word)
        if keyword is not None:
            return Token(keyword.kind, keyword.value, start)
        return Token(TokenKind.IDENTIFIER, word, start)

    def read_string(self) -> Token:
        """Read a double-quoted string; a backslash escapes the next character."""
        source = self.source
        start = self.i
        i = start + 1
        n = len(source)
        chars: list[str] = []

        while i < n:
            c = source[i]
            if c == "\\":
                if i + 1 < n:
                    chars.append(source[i + 1])
                    i += 2
                    continue
                break
            if c == '"':
                self.i = i + 1
                return Token(TokenKind.STRING, "".join(chars), start)
            chars.append(c)
            i += 1

        raise self.error(UnterminatedStringError, "Unterminated string literal", start)


def tokenize(source: str, name: str = "<input>") -> list[Token]:
    """Tokenize source text into a list of tokens ending with EOF.

    Args:
        source: Source text, one line or a whole buffer
        name: Input name used in error locations

    Returns:
        Tokens in source order, closed by an EOF token.

    Raises:
        UnterminatedStringError: A string literal has no closing quote.
        NumberFormatError: A numeric literal is malformed or out of range.
        LexError: Unexpected character, identifier starting with a digit,
            or unterminated block comment.
    """
    tokens = _Tokenizer(source, name).run()
    logger.debug("Tokenized %s into %d tokens", name, len(tokens))
    return tokens
