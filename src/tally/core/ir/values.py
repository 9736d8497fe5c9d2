"""
Runtime value types for tally.

Values are plain Python objects drawn from a closed set:

- Integer: ``int`` within the signed 64-bit range
- Decimal: ``float``
- Str: ``str``
- Boolean: ``bool``
- null: ``None``
- Identifier: an unresolved variable name, only seen before lookup
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class ValueKind(StrEnum):
    """Tags for runtime values."""

    INTEGER = "integer"
    DECIMAL = "decimal"
    STR = "str"
    IDENTIFIER = "identifier"
    BOOLEAN = "boolean"
    NULL = "null"


class Identifier(BaseModel):
    """An identifier that has not been looked up yet."""

    name: str = Field(description="Variable name")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


Value = int | float | str | bool | Identifier | None


def value_kind(value: Value) -> ValueKind:
    """Return the tag of a runtime value.

    ``bool`` is checked before ``int`` since it is an ``int`` subclass.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.DECIMAL
    if isinstance(value, str):
        return ValueKind.STR
    if isinstance(value, Identifier):
        return ValueKind.IDENTIFIER
    raise TypeError(f"Not a tally value: {type(value).__name__}")


def is_numeric(value: Value) -> bool:
    return value_kind(value) in (ValueKind.INTEGER, ValueKind.DECIMAL)


def fits_int64(value: int) -> bool:
    return INT64_MIN <= value <= INT64_MAX


def format_value(value: Value) -> str:
    """Render a value the way it would be written in source."""
    kind = value_kind(value)
    if kind == ValueKind.NULL:
        return "null"
    if kind == ValueKind.BOOLEAN:
        return "true" if value else "false"
    if kind == ValueKind.STR:
        escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return str(value)
