"""Numeric evaluation of one-variable formulas.

The curve sampler and the fixed-point inverter only need one capability:
"give me the value of this formula at this binding, or tell me it has none".
That capability is the :class:`ExpressionEvaluator` protocol, so the sampler
does not depend on any particular formula grammar. :class:`SympyEvaluator` is
the default implementation: it parses with :func:`parse_formula` and compiles
with :func:`numpify_cached`.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Protocol, runtime_checkable

import numpy as np

from .ParseExpression import parse_formula
from .numpify import NumpifiedFunction, numpify_cached

__all__ = ["EvaluationError", "ExpressionEvaluator", "SympyEvaluator"]

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class EvaluationError(ArithmeticError):
    """Raised when a formula has no real, finite value at the given binding.

    Covers parse failures, unbound variables and domain errors such as
    division by zero or the logarithm of a negative number.
    """


@runtime_checkable
class ExpressionEvaluator(Protocol):
    """Capability that evaluates a formula for one bound variable."""

    def evaluate(self, expression: str, bindings: Mapping[str, float]) -> float:
        ...


class SympyEvaluator:
    """Evaluate calculator-style formulas through SymPy and NumPy.

    Compiled callables are kept per instance, keyed by formula text. Formulas
    that fail to parse are remembered too, so a sweep over an unparseable
    formula fails fast on every sample instead of re-parsing each time.
    """

    def __init__(self) -> None:
        self._compiled: dict[str, NumpifiedFunction] = {}
        self._failures: dict[str, str] = {}

    def compile(self, expression: str) -> NumpifiedFunction:
        """Return the compiled callable for ``expression``.

        Raises
        ------
        EvaluationError
            If the formula cannot be parsed or compiled.
        """
        if expression in self._failures:
            raise EvaluationError(self._failures[expression])
        compiled = self._compiled.get(expression)
        if compiled is not None:
            return compiled

        try:
            compiled = numpify_cached(parse_formula(expression))
        except Exception as e:
            # SymPy printers raise NotImplementedError subclasses for
            # functions without a NumPy equivalent.
            logger.debug("evaluator: cannot compile %r: %s", expression, e)
            message = f"Cannot evaluate {expression!r}: {e}"
            self._failures[expression] = message
            raise EvaluationError(message) from e
        self._compiled[expression] = compiled
        return compiled

    def evaluate(self, expression: str, bindings: Mapping[str, float]) -> float:
        """Evaluate ``expression`` with the variables in ``bindings``.

        Parameters
        ----------
        expression : str
            Formula text without a relation sign, e.g. ``"1/x"``.
        bindings : Mapping[str, float]
            Variable values by name, e.g. ``{"x": 2.0}``. Unused bindings are
            ignored.

        Returns
        -------
        float
            The real, finite value.

        Raises
        ------
        EvaluationError
            On parse failure, unbound variables, or a non-real/non-finite
            result.

        Examples
        --------
        >>> SympyEvaluator().evaluate("x^2", {"x": 3})
        9.0
        """
        compiled = self.compile(expression)

        args = []
        for name in compiled.var_names:
            if name not in bindings or bindings[name] is None:
                raise EvaluationError(f"Unbound variable {name!r} in {expression!r}")
            args.append(bindings[name])

        with np.errstate(all="ignore"):
            try:
                raw = compiled(*args)
                value = complex(np.asarray(raw).item())
            except Exception as e:
                raise EvaluationError(f"Cannot evaluate {expression!r}: {e}") from e

        if value.imag != 0:
            raise EvaluationError(f"{expression!r} is not real at {dict(bindings)!r}")
        if not math.isfinite(value.real):
            raise EvaluationError(f"{expression!r} is undefined at {dict(bindings)!r}")
        return float(value.real)
