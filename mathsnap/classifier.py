"""Label a raw expression with a problem type and the variable to solve for.

Rules are checked in order and the first match wins; the order is the
precedence. Limit syntax can contain operators and equals signs, and a
degree-marked equation is also an equation, so those rules come first.

>>> classify("x^2-4=0")
ClassificationResult(problem_type='solve the 2nd-degree equation', solve_variable='x')
"""

from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = [
    "ClassificationResult",
    "DEGREE_ORDINALS",
    "OPERATION_NAMES",
    "classify",
]

LIMIT_PROBLEM = "limit problem"
SOLVE_EQUATION = "solve the equation"
TWO_VARIABLE_EQUATION = "two-variable equation"
UNRECOGNIZED = "unrecognized expression"

DEGREE_ORDINALS: dict[str, str] = {
    "1": "1st",
    "2": "2nd",
    "3": "3rd",
    "4": "4th",
    "5": "5th",
}

# Fixed reporting order for arithmetic-only expressions.
OPERATION_NAMES: tuple[tuple[str, str], ...] = (
    ("+", "addition"),
    ("-", "subtraction"),
    ("*", "multiplication"),
    ("/", "division"),
)

_LIMIT_VARIABLE = re.compile(r"lim.*?([a-z])\s*\\?to")
# A lone letter (not part of a word such as ``sin``) raised to an integer power.
_DEGREE = re.compile(r"(?<![a-z])([a-z])(?:\^|\*\*)(\d+)\b")
_STANDALONE_LETTER = re.compile(r"(?<![a-z])([a-z])(?![a-z])")
_OPERATOR = re.compile(r"[+\-*/]")
_LETTER = re.compile(r"[a-z]")


@dataclass(frozen=True)
class ClassificationResult:
    """Problem label plus the variable to solve for (``""`` when none)."""

    problem_type: str
    solve_variable: str = ""


def _degree_label(digits: str) -> str:
    return f"solve the {DEGREE_ORDINALS.get(digits, digits)}-degree equation"


def classify(expression: str) -> ClassificationResult:
    """Classify ``expression`` (case-insensitive). Never raises.

    Examples
    --------
    >>> classify("x+y=5")
    ClassificationResult(problem_type='two-variable equation', solve_variable='')
    >>> classify("12/4+1").problem_type
    'calculate addition, division'
    """
    text = str(expression if expression is not None else "").lower()
    has_equals = "=" in text
    has_operator = _OPERATOR.search(text) is not None
    letters = _LETTER.findall(text)

    if "lim" in text:
        match = _LIMIT_VARIABLE.search(text)
        return ClassificationResult(LIMIT_PROBLEM, match.group(1) if match else "")

    match = _DEGREE.search(text)
    if match:
        return ClassificationResult(_degree_label(match.group(2)), match.group(1))

    if has_operator and has_equals:
        if not letters:
            return ClassificationResult(SOLVE_EQUATION, "")
        if "x" in letters and "y" in letters:
            return ClassificationResult(TWO_VARIABLE_EQUATION, "")
        standalone = _STANDALONE_LETTER.search(text)
        return ClassificationResult(SOLVE_EQUATION, standalone.group(1) if standalone else "")

    if letters:
        distinct = list(dict.fromkeys(letters))
        if "x" in distinct and "y" in distinct:
            return ClassificationResult(TWO_VARIABLE_EQUATION, "")
        return ClassificationResult(f"solve for {', '.join(distinct)}", distinct[0])

    if has_operator:
        names = [name for symbol, name in OPERATION_NAMES if symbol in text]
        return ClassificationResult(f"calculate {', '.join(names)}", "")

    return ClassificationResult(UNRECOGNIZED, "")
