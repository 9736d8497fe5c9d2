"""
Variable environment for tally sessions.

One Environment lives for a whole session and is threaded through every
evaluation. Bindings are created or overwritten by assignment and never
removed. Access is not synchronized; callers sharing one instance across
threads must serialize evaluations themselves.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping

from tally.core.errors import UndefinedVariableError
from tally.core.ir.values import Value, format_value

logger = logging.getLogger(__name__)

NULL_NAME = "null"


class Environment(Mapping[str, Value]):
    """Mapping from variable name to its last-assigned value.

    A ``null`` binding is seeded at construction. Supports the read-only
    mapping protocol (iteration, ``len``, ``in``, ``items()``) for display.

    Example:
        >>> env = Environment()
        >>> env.bind("x", 3)
        >>> env.lookup("x")
        3
    """

    def __init__(self, initial: Mapping[str, Value] | None = None) -> None:
        self._variables: dict[str, Value] = {NULL_NAME: None}
        if initial:
            self._variables.update(initial)

    def __getitem__(self, name: str) -> Value:
        return self._variables[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{k}={format_value(v)}" for k, v in self._variables.items())
        return f"Environment({pairs})"

    def lookup(self, name: str) -> Value:
        """Return the value bound to ``name``.

        Raises:
            UndefinedVariableError: If nothing was ever assigned to ``name``.
        """
        try:
            return self._variables[name]
        except KeyError:
            raise UndefinedVariableError(name) from None

    def bind(self, name: str, value: Value) -> None:
        """Create or overwrite the binding for ``name``."""
        logger.debug("Bind %s = %s", name, format_value(value))
        self._variables[name] = value

    def user_bindings(self) -> dict[str, Value]:
        """Bindings other than the seeded ``null`` entry."""
        return {k: v for k, v in self._variables.items() if k != NULL_NAME}
