"""
Expression tree for tally.

Every node carries the token it was built from and an ordered list of
children it owns exclusively:

- Leaf: INTEGER, DECIMAL, STRING, IDENTIFIER or BOOLEAN token, no children
- Unary: operator token, one child
- Binary: operator token, two children (left, right)

Unary ``+``/``-`` in source are desugared by the parser to binary nodes with
a literal ``0`` on the left, so parsed trees only contain leaves and binary
nodes. Unary nodes can still be built directly.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from tally.core.errors import NodeConstructionError
from tally.core.ir.tokens import LEAF_KINDS, OPERATOR_KINDS, Token, TokenKind


class ExpressionNode(BaseModel):
    """A node in the expression tree."""

    token: Token = Field(description="Leaf value or operator tag")
    children: list[ExpressionNode] = Field(default_factory=list, description="Owned operands")

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @model_validator(mode="after")
    def _check_arity(self) -> ExpressionNode:
        kind = self.token.kind
        count = len(self.children)
        if kind in LEAF_KINDS:
            if count != 0:
                raise ValueError(f"{kind} node cannot have children, got {count}")
        elif kind in OPERATOR_KINDS:
            if count not in (1, 2):
                raise ValueError(f"{kind} node needs one or two children, got {count}")
        else:
            raise ValueError(f"{kind} cannot label an expression node")
        return self

    def __str__(self) -> str:
        if self.is_leaf:
            return self.token.text
        if self.is_unary:
            return f"{self.token.text}{self.children[0]}"
        left, right = self.children
        return f"({left} {self.token.text} {right})"

    @property
    def kind(self) -> TokenKind:
        return self.token.kind

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def is_unary(self) -> bool:
        return len(self.children) == 1

    @property
    def is_binary(self) -> bool:
        return len(self.children) == 2


ExpressionNode.model_rebuild()


def make_node(token: Token, *children: ExpressionNode) -> ExpressionNode:
    """Build a node, reporting arity violations as NodeConstructionError."""
    try:
        return ExpressionNode(token=token, children=list(children))
    except ValidationError as e:
        raise NodeConstructionError(f"Invalid {token.kind} node: {e.errors()[0]['msg']}") from e
