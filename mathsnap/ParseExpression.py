"""Plain-text formula parsing with the grammar recognizers actually emit.

Recognition output and manual entry use calculator notation rather than
Python: ``2x + 3``, ``x^2 - 4``, ``e^x``, ``ln(x)``. This module wraps SymPy's
``parse_expr`` with the transformations that accept that notation and maps the
few calculator names SymPy spells differently.
"""

from __future__ import annotations

import re
from typing import Any

import sympy as sp
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication_application,
    parse_expr,
    standard_transformations,
)

__all__ = ["ExpressionParseError", "parse_formula", "normalize_expression"]


class ExpressionParseError(ValueError):
    """Raised when a formula cannot be parsed into a SymPy expression."""


_TRANSFORMATIONS = standard_transformations + (
    implicit_multiplication_application,
    convert_xor,
)

# Calculator names -> SymPy objects. ``log`` is the natural logarithm, as in
# the calculators the formulas come from.
_LOCAL_NAMES: dict[str, Any] = {
    "e": sp.E,
    "pi": sp.pi,
    "ln": sp.log,
    "log": sp.log,
    "abs": sp.Abs,
    "sqrt": sp.sqrt,
}

_WHITESPACE = re.compile(r"\s+")


def normalize_expression(text: str) -> str:
    """Return ``text`` with all whitespace removed.

    This is the canonical spelling used for cache keys and prefix detection,
    so ``"y = 2x + 3"`` and ``"y=2x+3"`` are the same expression.
    """
    return _WHITESPACE.sub("", text or "")


def parse_formula(text: str) -> sp.Expr:
    """Parse calculator-style ``text`` into a SymPy expression.

    Parameters
    ----------
    text : str
        Formula without a relation sign, e.g. ``"2x^2 + sin(x)"``.

    Returns
    -------
    sympy.Expr
        Parsed expression.

    Raises
    ------
    ExpressionParseError
        If ``text`` is empty, contains a relation sign, or SymPy rejects it.

    Notes
    -----
    ``parse_expr`` evaluates Python code. Do not feed it untrusted input
    outside of a sandboxed session.

    Examples
    --------
    >>> parse_formula("2x^2")
    2*x**2
    >>> parse_formula("e^x")
    exp(x)
    """
    source = (text or "").strip()
    if not source:
        raise ExpressionParseError("Cannot parse an empty formula.")
    if "=" in source:
        raise ExpressionParseError(
            f"Formula must not contain a relation sign: {text!r}"
        )

    try:
        result = parse_expr(
            source,
            local_dict=dict(_LOCAL_NAMES),
            transformations=_TRANSFORMATIONS,
            evaluate=True,
        )
    except Exception as e:
        raise ExpressionParseError(
            f"Failed to parse formula {text!r}: {type(e).__name__}: {e}"
        ) from e

    if not isinstance(result, sp.Expr):
        raise ExpressionParseError(
            f"Formula {text!r} parsed to {type(result).__name__}, not an expression."
        )
    return result
