"""
Error types for tally lexing, parsing, and evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tally.core.ir.tokens import Token


class TallyError(Exception):
    """Base exception for all tally errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


# =============================================================================
# Lexing
# =============================================================================


class LexError(TallyError):
    """
    Raised when source text cannot be split into tokens.

    Examples:
    - Unrecognized character
    - Identifier starting with a digit
    - Unterminated block comment
    """

    def __init__(self, message: str, pos: int, context: ErrorContext | None = None):
        self.pos = pos
        super().__init__(message, context)


class UnterminatedStringError(LexError):
    """A quoted string has no closing quote."""


class NumberFormatError(LexError):
    """A numeric literal is malformed or out of range."""


# =============================================================================
# Parsing
# =============================================================================


class ParseError(TallyError):
    """
    Raised when a token sequence does not form a valid expression.

    Examples:
    - Unexpected token
    - Missing closing parenthesis
    - Trailing tokens after a complete expression
    - Empty input

    Attributes:
        found: The offending token (the EOF token at end of input)
        position: Index of the offending token in the token list
    """

    def __init__(
        self,
        message: str,
        found: Token | None = None,
        position: int = 0,
        context: ErrorContext | None = None,
    ):
        self.found = found
        self.position = position
        super().__init__(message, context)


class NodeConstructionError(TallyError):
    """An expression node violates the leaf/operator child-count invariant."""


# =============================================================================
# Evaluation
# =============================================================================


class EvalError(TallyError):
    """
    Raised when an expression tree cannot be evaluated.

    Evaluation errors are fatal to the current call; there is no partial
    result.
    """

    def __init__(self, message: str, node: Any = None, context: ErrorContext | None = None):
        self.node = node
        super().__init__(message, context)


class TypeMismatchError(EvalError):
    """An arithmetic operand is not an integer or decimal."""


class DivisionByZeroError(EvalError):
    """The divisor of a division is zero."""


class UndefinedVariableError(EvalError):
    """An identifier was read before anything was assigned to it."""

    def __init__(self, name: str, node: Any = None):
        self.name = name
        super().__init__(f"Undefined variable: {name}", node)


class AssignmentTargetError(EvalError):
    """The left side of an assignment is not an identifier."""


class UnsupportedOperationError(EvalError):
    """An operator reached a dispatch path that does not handle it."""


class IntegerOverflowError(EvalError):
    """An integer result does not fit in a signed 64-bit integer."""


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        source: Name of the input (file path or "<input>")
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source line showing the error location
    """

    source: str
    line: int
    column: int
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "prog.tly:3:5" followed by the marked snippet
        """
        location = f"{self.source}:{self.line}:{self.column}"
        if self.snippet is not None:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format the snippet line with its line number and an error marker."""
        prefix = f"{self.line:4d} | "
        marker = " " * (len(prefix) + self.column - 1) + "^^^"
        return f"{prefix}{self.snippet}\n{marker}"


def make_context(text: str, offset: int, source: str = "<input>") -> ErrorContext:
    """
    Build an ErrorContext for a character offset into ``text``.

    Args:
        text: The full source text
        offset: 0-based character offset of the error
        source: Name of the input

    Returns:
        ErrorContext with line, column, and the offending line as snippet
    """
    offset = max(0, min(offset, len(text)))
    line_start = text.rfind("\n", 0, offset) + 1
    line_end = text.find("\n", offset)
    if line_end == -1:
        line_end = len(text)
    line = text.count("\n", 0, offset) + 1
    column = offset - line_start + 1
    return ErrorContext(
        source=source,
        line=line,
        column=column,
        snippet=text[line_start:line_end],
    )
