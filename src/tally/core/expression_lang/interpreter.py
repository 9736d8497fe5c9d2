"""
Buffer-level entry point: lex once, split at newlines, evaluate line by line.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from tally.core.expression_lang.environment import Environment
from tally.core.expression_lang.evaluator import evaluate
from tally.core.expression_lang.parser import parse_tokens
from tally.core.expression_lang.tokenizer import tokenize
from tally.core.ir.tokens import Token, TokenKind
from tally.core.ir.values import Value, format_value

logger = logging.getLogger(__name__)


def iter_lines(source: str, name: str = "<input>") -> Iterator[tuple[int, list[Token]]]:
    """Yield ``(line_number, tokens)`` for each non-blank line of ``source``.

    Each line's tokens end with an EOF token. The whole buffer is
    tokenized up front, so a lexing error anywhere is raised before the
    first line is yielded.
    """
    tokens = tokenize(source, name)
    line: list[Token] = []

    for tok in tokens:
        if tok.kind in (TokenKind.NEWLINE, TokenKind.EOF):
            if line:
                line.append(Token(TokenKind.EOF, pos=tok.pos))
                yield source.count("\n", 0, line[0].pos) + 1, line
            line = []
            continue
        line.append(tok)


def interpret(source: str, env: Environment, name: str = "<input>") -> Value:
    """Evaluate every line of ``source`` against ``env``.

    Args:
        source: One line or a whole buffer.
        env: Session environment shared by all lines.
        name: Input name used in error locations.

    Returns:
        The value of the last line, or None if the buffer has no lines.

    Raises:
        LexError, ParseError, EvalError: The first failure aborts the call.
    """
    result: Value = None
    for line_number, tokens in iter_lines(source, name):
        node = parse_tokens(tokens, source, name)
        result = evaluate(node, env)
        logger.debug("%s:%d -> %s", name, line_number, format_value(result))
    return result
