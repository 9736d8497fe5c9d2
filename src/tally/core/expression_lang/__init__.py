"""
tally expression language.

Tokenizer, parser, and evaluator for a small arithmetic language with
variables.

Usage:
    from tally.core.expression_lang import Environment, evaluate, parse

    env = Environment()
    evaluate(parse("a = b = 5"), env)   # 5
    evaluate(parse("a * 2 / 4"), env)   # 2.5
"""

from tally.core.expression_lang.environment import Environment
from tally.core.expression_lang.evaluator import evaluate
from tally.core.expression_lang.interpreter import interpret, iter_lines
from tally.core.expression_lang.parser import parse, parse_tokens
from tally.core.expression_lang.tokenizer import tokenize

__all__ = [
    "Environment",
    "evaluate",
    "interpret",
    "iter_lines",
    "parse",
    "parse_tokens",
    "tokenize",
]
