"""
tally - a small arithmetic expression language with variables.

Lexer, right-recursive descent parser, and tree-walking evaluator sharing
one variable environment across lines.
"""

from __future__ import annotations

import re
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

from .core.errors import EvalError, LexError, ParseError, TallyError
from .core.expression_lang import Environment, evaluate, interpret, parse, tokenize


def _get_version() -> str:
    """Get version from pyproject.toml (editable) or importlib.metadata (installed)."""
    # In editable mode, read directly from pyproject.toml for live updates
    pyproject = _Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        content = pyproject.read_text()
        if match := re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE):
            return match.group(1)

    # Fall back to installed metadata
    try:
        return _metadata_version("tally-lang")
    except Exception:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "Environment",
    "EvalError",
    "LexError",
    "ParseError",
    "TallyError",
    "evaluate",
    "interpret",
    "parse",
    "tokenize",
]
