"""Recognition-service payloads and how their solutions are displayed.

The recognizer (an external HTTP service) returns JSON of the form::

    {"formatted_equation": "x^2-4=0",
     "solution": ["2", "-2"],
     "isolated_solition": "y=x^2-4"}

(``isolated_solition`` is the service's own spelling; ``isolated_solution``
is accepted too.) This module normalizes that payload, formats solutions for
display, and decides when the client should retry against the limit
endpoint. The retry decision is a service policy and deliberately lives here,
not in :func:`mathsnap.classifier.classify`.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional

from .InputConvert import InputConvert
from .curve_sampler import split_graphable
from .notation import to_display_notation

__all__ = [
    "INVALID_SOLUTION",
    "NO_SOLUTION",
    "RecognitionPayloadError",
    "RecognitionResult",
    "format_solution",
    "graphable_expression",
    "is_two_variable",
    "needs_limit_fallback",
    "solution_lines",
]

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

INVALID_SOLUTION = "Error: Invalid equation"
NO_SOLUTION = "No solution"


class RecognitionPayloadError(ValueError):
    """Raised when a recognition payload lacks the fields the client needs."""


@dataclass(frozen=True)
class RecognitionResult:
    """Normalized recognition response.

    Parameters
    ----------
    formatted_equation : str
        Recognized expression text.
    solution : tuple[str or None, ...]
        Solutions as the service sent them, always a tuple.
    isolated_solution : str
        Expression solved for one variable, for graphing; may be empty.
    solution_is_list : bool
        Whether the service sent ``solution`` as a list. A missing, null or
        scalar solution is kept as a tuple too, but only a list can signal
        a failed solve.
    """

    formatted_equation: str
    solution: tuple[Optional[str], ...] = ()
    isolated_solution: str = ""
    solution_is_list: bool = True

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RecognitionResult":
        """Build a result from decoded service JSON.

        Raises
        ------
        RecognitionPayloadError
            If ``payload`` is not a mapping or has no ``formatted_equation``.
        """
        if not isinstance(payload, Mapping):
            raise RecognitionPayloadError(
                f"Recognition payload must be a mapping, got {type(payload).__name__}"
            )
        equation = payload.get("formatted_equation")
        if not isinstance(equation, str):
            raise RecognitionPayloadError(
                f"Recognition payload has no formatted_equation: {dict(payload)!r}"
            )

        raw = payload.get("solution")
        is_list = not isinstance(raw, (str, bytes)) and isinstance(raw, Sequence)
        if raw is None:
            solution: tuple[Optional[str], ...] = ()
        elif not is_list:
            solution = (_solution_text(raw),)
        else:
            solution = tuple(_solution_text(item) for item in raw)

        isolated = payload.get("isolated_solution") or payload.get("isolated_solition") or ""
        return cls(
            formatted_equation=equation,
            solution=solution,
            isolated_solution=str(isolated),
            solution_is_list=is_list,
        )

    @classmethod
    def from_manual_input(cls, text: str) -> "RecognitionResult":
        """Build a result for an equation typed by the user.

        No solutions are attached. Relations mentioning ``y`` and bare
        expressions are kept as the graphing candidate.
        """
        equation = (text or "").strip()
        if not equation:
            raise RecognitionPayloadError("Manual input is empty")
        isolated = equation if ("=" not in equation or "y" in equation.lower()) else ""
        return cls(formatted_equation=equation, solution=(), isolated_solution=isolated)


def _solution_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def format_solution(value: Any) -> str:
    """Format one solution for display.

    ``None`` becomes ``"No solution"``; numbers print as integers when
    integral and with three decimals otherwise; anything else (symbolic
    text such as ``"sqrt(2)"``) is returned unchanged.

    Examples
    --------
    >>> format_solution("2.0")
    '2'
    >>> format_solution(1 / 3)
    '0.333'
    """
    if value is None:
        return NO_SOLUTION
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return value
    else:
        try:
            number = InputConvert(value, float, name="solution")
        except ValueError:
            return str(value)
    if not math.isfinite(number):
        return str(value)
    if number.is_integer():
        return str(int(number))
    return f"{number:.3f}"


def solution_lines(result: RecognitionResult, variable: str) -> list[str]:
    """Return typeset display lines for the solutions of ``result``.

    One solution is shown as ``x = ...``; several as ``x_{1} = ...``,
    ``x_{2} = ...``. Without a variable the values are shown bare.
    """
    values = [format_solution(sol) for sol in result.solution]
    lines = []
    for index, value in enumerate(values, start=1):
        if not variable:
            prefix = ""
        elif len(values) > 1:
            prefix = f"{variable}_{{{index}}} ="
        else:
            prefix = f"{variable} ="
        shown = value if value == NO_SOLUTION else to_display_notation(value)
        lines.append(f"{prefix} {shown}".strip())
    return lines


def is_two_variable(equation: str) -> bool:
    lowered = equation.lower()
    return "x" in lowered and "y" in lowered


def needs_limit_fallback(result: RecognitionResult) -> bool:
    """Return True when the client should retry with the limit endpoint.

    The primary endpoint is not trusted when the equation has more than one
    ``=``, or when the solution list starts with ``None`` or the invalid
    marker for an equation that is not a two-variable relation (those are
    graphed instead of solved). An empty list or a solution that is not a
    list at all is accepted as is.
    """
    if result.formatted_equation.count("=") > 1:
        logger.debug("limit fallback: multiple '=' in %r", result.formatted_equation)
        return True
    if not (result.solution_is_list and result.solution):
        return False
    first = result.solution[0]
    if first is None or first == INVALID_SOLUTION:
        if is_two_variable(result.formatted_equation):
            return False
        logger.debug("limit fallback: no usable solution for %r", result.formatted_equation)
        return True
    return False


def graphable_expression(result: RecognitionResult) -> str:
    """Return the expression to hand to the curve sampler, or ``""``.

    Prefers the isolated solution; falls back to the formatted equation when
    it is already a ``y=...``/``x=...`` relation.
    """
    for candidate in (result.isolated_solution, result.formatted_equation):
        if candidate and split_graphable(candidate.replace("**", "^")) is not None:
            return candidate.replace("**", "^")
    return ""
