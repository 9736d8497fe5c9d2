"""
Intermediate representation for tally: tokens, expression trees, values.
"""

from tally.core.ir.expressions import ExpressionNode, make_node
from tally.core.ir.tokens import Token, TokenKind
from tally.core.ir.values import Identifier, Value, ValueKind, format_value, value_kind

__all__ = [
    "ExpressionNode",
    "Identifier",
    "Token",
    "TokenKind",
    "Value",
    "ValueKind",
    "format_value",
    "make_node",
    "value_kind",
]
