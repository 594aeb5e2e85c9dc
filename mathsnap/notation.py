"""Rewrite calculator-style expressions into LaTeX-like display notation.

This is an ordered rewrite pipeline, not a parser. Each step assumes the
previous ones already ran:

1. ``**`` -> ``^``
2. lowercase
3. drop ``*`` (juxtaposition means multiplication when typeset)
4. ``sqrt(E)`` -> ``\\sqrt{E}``
5. fractions, in two passes: a free-standing ``/`` opens ``\\frac{``, then
   ``A/B`` with numeric or parenthesized operands becomes ``\\frac{A}{B}``
6. ``base^exp`` -> ``base^{exp}``
7. ``sin( cos( tan( log( ln(`` and ``lim`` gain their backslash

Malformed input gives malformed output; nothing here raises.
"""

from __future__ import annotations

import re

__all__ = ["to_display_notation", "TYPESET_FUNCTIONS"]

TYPESET_FUNCTIONS: tuple[str, ...] = ("sin", "cos", "tan", "log", "ln")

_SQRT = re.compile(r"sqrt\(([^)]+)\)")
_FREE_SLASH = re.compile(r"(?<![a-zA-Z0-9)])/(?![a-zA-Z0-9(])")
_FRACTION = re.compile(r"(\d+|\(.+?\))/(\d+|\(.+?\))")
_POWER = re.compile(r"(\w+)\^(\w+)")
_FUNCTION = re.compile(r"(?<![\\a-z])(" + "|".join(TYPESET_FUNCTIONS) + r")\(")
_LIMIT = re.compile(r"(?<![\\a-z])lim")


def to_display_notation(expression: str) -> str:
    """Return typeset notation for ``expression``.

    Examples
    --------
    >>> to_display_notation("2*x**2")
    '2x^{2}'
    >>> to_display_notation("sqrt(x)+1/2")
    '\\\\sqrt{x}+\\\\frac{1}{2}'
    """
    if not expression:
        return ""
    text = str(expression)

    text = text.replace("**", "^")
    text = text.lower()
    text = text.replace("*", "")
    text = _SQRT.sub(r"\\sqrt{\1}", text)
    text = _FREE_SLASH.sub(r"\\frac{", text)
    text = _FRACTION.sub(r"\\frac{\1}{\2}", text)
    text = _POWER.sub(r"\1^{\2}", text)
    text = _FUNCTION.sub(r"\\\1(", text)
    text = _LIMIT.sub(r"\\lim", text)
    return text
