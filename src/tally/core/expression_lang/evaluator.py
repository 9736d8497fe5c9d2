"""
Expression evaluator for the tally expression language.

Walks an expression tree and computes a single value, reading and writing
variables in the caller's Environment. Does NOT use Python's eval().

Numeric rules:
- integer (+ - *) integer stays integer
- integer / integer is an integer when the division is exact, else a decimal
- any decimal operand makes the result a decimal
- a zero divisor is an error
- integer results must fit in a signed 64-bit integer
"""

from __future__ import annotations

import logging
from typing import cast

from tally.core.errors import (
    AssignmentTargetError,
    DivisionByZeroError,
    EvalError,
    IntegerOverflowError,
    TypeMismatchError,
    UnsupportedOperationError,
)
from tally.core.expression_lang.environment import Environment
from tally.core.ir.expressions import ExpressionNode
from tally.core.ir.tokens import SYMBOLS, TokenKind
from tally.core.ir.values import (
    Identifier,
    Value,
    fits_int64,
    format_value,
    is_numeric,
    value_kind,
)

logger = logging.getLogger(__name__)

_NUMERIC_OPS = (
    TokenKind.PLUS,
    TokenKind.MINUS,
    TokenKind.STAR,
    TokenKind.SLASH,
    TokenKind.EQ,
)


def evaluate(node: ExpressionNode, env: Environment) -> Value:
    """Evaluate an expression tree against an environment.

    Args:
        node: Root of a parsed (or hand-built) expression tree.
        env: Session environment; assignments are written into it.

    Returns:
        The computed value. A bare identifier at the root is looked up, so
        the result is never an unresolved Identifier.

    Raises:
        EvalError: On type mismatch, division by zero, undefined variable,
            bad assignment target, an unsupported operator, or a tree nested
            deeper than the interpreter stack allows.
    """
    try:
        result = _resolve(_interpret(node, env), env, node)
    except RecursionError:
        raise EvalError("Expression nested too deeply", node) from None
    logger.debug("Evaluated %s -> %s", node, format_value(result))
    return result


def _interpret(node: ExpressionNode, env: Environment) -> Value:
    """Dispatch on arity: leaf, unary, or binary."""
    if node.is_leaf:
        return _interpret_leaf(node)
    if node.is_unary:
        return _interpret_unary(node, env)
    return _interpret_binary(node, env)


def _interpret_leaf(node: ExpressionNode) -> Value:
    """Literal value; identifiers are left unresolved."""
    tok = node.token
    if tok.kind == TokenKind.IDENTIFIER:
        return Identifier(name=str(tok.value))
    if tok.kind in (
        TokenKind.INTEGER,
        TokenKind.DECIMAL,
        TokenKind.STRING,
        TokenKind.BOOLEAN,
    ):
        return tok.value
    raise EvalError(f"Unexpected leaf node: {tok.kind}", node)


def _resolve(value: Value, env: Environment, node: ExpressionNode) -> Value:
    """Replace an Identifier with its bound value."""
    if isinstance(value, Identifier):
        try:
            return env.lookup(value.name)
        except EvalError as e:
            e.node = node
            raise
    return value


def _interpret_unary(node: ExpressionNode, env: Environment) -> Value:
    """Negate for MINUS; every other unary tag passes its operand through."""
    operand = _interpret(node.children[0], env)
    if node.kind == TokenKind.MINUS:
        return _arithmetic(TokenKind.STAR, _resolve(operand, env, node), -1, node)
    return operand


def _interpret_binary(node: ExpressionNode, env: Environment) -> Value:
    """Evaluate both sides, resolve identifiers, then apply the operator."""
    left_node, right_node = node.children
    left = _interpret(left_node, env)
    right = _interpret(right_node, env)

    if node.kind == TokenKind.ASSIGN:
        return _assign(left, _resolve(right, env, node), env, node)

    left = _resolve(left, env, node)
    right = _resolve(right, env, node)
    return _arithmetic(node.kind, left, right, node)


def _assign(target: Value, value: Value, env: Environment, node: ExpressionNode) -> Value:
    if not isinstance(target, Identifier):
        raise AssignmentTargetError(
            f"Expected identifier on left side of assignment, got {format_value(target)}",
            node,
        )
    env.bind(target.name, value)
    return value


def _arithmetic(op: TokenKind, left: Value, right: Value, node: ExpressionNode) -> Value:
    """Apply a numeric operator with integer/decimal promotion."""
    if not is_numeric(left):
        raise TypeMismatchError(
            f"Left value should be integer or decimal, got {value_kind(left)}",
            node,
        )
    if not is_numeric(right):
        raise TypeMismatchError(
            f"Right value should be integer or decimal, got {value_kind(right)}",
            node,
        )
    if op not in _NUMERIC_OPS:
        raise UnsupportedOperationError(f"Unexpected operation: {op}", node)

    # Booleans were rejected above, so int here means integer
    if isinstance(left, int) and isinstance(right, int):
        return _integer_op(op, left, right, node)
    return _decimal_op(op, float(cast(float, left)), float(cast(float, right)), node)


def _integer_op(op: TokenKind, left: int, right: int, node: ExpressionNode) -> Value:
    result: int
    if op == TokenKind.EQ:
        return left == right
    if op == TokenKind.PLUS:
        result = left + right
    elif op == TokenKind.MINUS:
        result = left - right
    elif op == TokenKind.STAR:
        result = left * right
    else:
        if right == 0:
            raise DivisionByZeroError(f"Can't divide by zero: {left} / {right}", node)
        if left % right != 0:
            return float(left) / float(right)
        result = left // right

    if not fits_int64(result):
        raise IntegerOverflowError(
            f"Integer overflow: {left} {SYMBOLS[op]} {right}",
            node,
        )
    return result


def _decimal_op(op: TokenKind, left: float, right: float, node: ExpressionNode) -> Value:
    if op == TokenKind.EQ:
        return left == right
    if op == TokenKind.PLUS:
        return left + right
    if op == TokenKind.MINUS:
        return left - right
    if op == TokenKind.STAR:
        return left * right
    if right == 0.0:
        raise DivisionByZeroError(f"Can't divide by zero: {left} / {right}", node)
    return left / right
