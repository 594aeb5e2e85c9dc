"""
numpify: Compile SymPy expressions to NumPy-callable Python functions
====================================================================

Purpose
-------
Turn a parsed formula into a small generated Python function that evaluates
with NumPy. The curve sampler calls the compiled function hundreds of times
per trace, so compilation happens once per (expression, variables) pair and
is memoized.

Public API
----------
- :func:`numpify`
- :func:`numpify_cached`
- :class:`NumpifiedFunction`

Examples
--------
>>> import sympy as sp
>>> x = sp.Symbol("x")
>>> f = numpify(x**2 + 1, vars=x)
>>> float(f(3.0))
10.0

Logging
-------
This module uses Python's standard :mod:`logging` library and is silent by
default. Enable ``logging.getLogger("mathsnap.numpify")`` at DEBUG level to
see compile timings and cache misses.
"""

from __future__ import annotations

import builtins
import keyword
import logging
import math
import textwrap
import time
from functools import lru_cache
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Union, cast

import numpy as np
import sympy as sp
from sympy.printing.numpy import NumPyPrinter

__all__ = ["numpify", "numpify_cached", "NumpifiedFunction"]


logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class NumpifiedFunction:
    """Compiled SymPy->NumPy callable together with its source metadata."""

    __slots__ = ("_fn", "symbolic", "vars", "source")

    def __init__(
        self,
        fn: Callable[..., Any],
        symbolic: sp.Basic,
        vars: tuple[sp.Symbol, ...],
        source: str,
    ) -> None:
        self._fn = fn
        self.symbolic = symbolic
        self.vars = vars
        self.source = source

    def __call__(self, *args: Any) -> Any:
        if len(args) != len(self.vars):
            raise TypeError(
                f"Expected {len(self.vars)} positional argument(s) "
                f"({', '.join(self.var_names)}), got {len(args)}"
            )
        return self._fn(*args)

    @property
    def var_names(self) -> tuple[str, ...]:
        return tuple(sym.name for sym in self.vars)

    def __repr__(self) -> str:
        return f"NumpifiedFunction({self.symbolic!r}, vars=({', '.join(self.var_names)}))"


def numpify(
    expr: Any,
    *,
    vars: Optional[Union[sp.Symbol, Iterable[sp.Symbol]]] = None,
    cache: bool = True,
) -> NumpifiedFunction:
    """Compile a SymPy expression into a NumPy-evaluable function.

    By default this uses the same LRU-backed cache as :func:`numpify_cached`.
    Pass ``cache=False`` to force a fresh compile.
    """
    if cache:
        return numpify_cached(expr, vars=vars)
    return _numpify_uncached(expr, vars=vars)


def _normalize_vars(expr: sp.Basic, vars: Optional[Union[sp.Symbol, Iterable[sp.Symbol]]]) -> Tuple[sp.Symbol, ...]:
    """Normalize vars into a tuple of SymPy Symbols."""
    if vars is None:
        return tuple(sorted(expr.free_symbols, key=sp.default_sort_key))

    if isinstance(vars, sp.Symbol):
        return (vars,)

    try:
        vars_tuple = tuple(vars)
    except TypeError as e:
        raise TypeError("vars must be a SymPy Symbol or an iterable of SymPy Symbols") from e

    for a in vars_tuple:
        if not isinstance(a, sp.Symbol):
            raise TypeError(f"vars must contain only SymPy Symbols, got {type(a)}")
    return cast(Tuple[sp.Symbol, ...], vars_tuple)


def _argument_names(vars_tuple: tuple[sp.Symbol, ...]) -> list[str]:
    reserved = set(keyword.kwlist) | set(dir(builtins)) | {"numpy", "math"}
    names: list[str] = []
    for idx, sym in enumerate(vars_tuple):
        base = sym.name if sym.name.isidentifier() else f"_arg{idx}"
        candidate = base
        while candidate in reserved or candidate in names:
            candidate = f"{candidate}_"
        names.append(candidate)
    return names


def _numpify_uncached(
    expr: Any,
    *,
    vars: Optional[Union[sp.Symbol, Iterable[sp.Symbol]]] = None,
) -> NumpifiedFunction:
    """Compile ``expr`` (uncached).

    Raises
    ------
    TypeError
        If ``expr`` is not SymPy-compatible or ``vars`` is malformed.
    ValueError
        If ``expr`` contains symbols that are not listed in ``vars``.

    Notes
    -----
    This function uses ``exec`` to define the generated function. Avoid calling
    it on untrusted expressions.
    """
    try:
        expr_sym = sp.sympify(expr)
    except Exception as e:
        raise TypeError(f"numpify expects a SymPy-compatible expression, got {type(expr)}") from e
    if not isinstance(expr_sym, sp.Basic):
        raise TypeError(f"numpify expects a SymPy expression, got {type(expr_sym)}")

    vars_tuple = _normalize_vars(expr_sym, vars)

    missing = {s.name for s in expr_sym.free_symbols} - {a.name for a in vars_tuple}
    if missing:
        raise ValueError(
            "Expression contains unbound symbols: "
            + ", ".join(sorted(missing))
        )

    log_debug = logger.isEnabledFor(logging.DEBUG)
    t0 = time.perf_counter() if log_debug else None

    arg_names = _argument_names(vars_tuple)
    replacement = {sym: sp.Symbol(name) for sym, name in zip(vars_tuple, arg_names)}
    printer = NumPyPrinter(settings={"user_functions": {}})
    expr_code = printer.doprint(expr_sym.xreplace(replacement))

    lines = ["def _generated(" + ", ".join(arg_names) + "):"]
    for nm in arg_names:
        lines.append(f"    {nm} = numpy.asarray({nm}, dtype=float)")
    if not expr_sym.free_symbols and arg_names:
        lines.append(f"    _shape = numpy.broadcast({', '.join(arg_names)}).shape")
        lines.append(f"    return ({expr_code}) + numpy.zeros(_shape)")
    else:
        lines.append(f"    return {expr_code}")
    src = "\n".join(lines)

    loc: Dict[str, Any] = {}
    # The printer falls back to ``math`` for functions NumPy lacks (factorial).
    glb: Dict[str, Any] = {"numpy": np, "math": math}
    exec(src, glb, loc)
    fn = cast(Callable[..., Any], loc["_generated"])
    fn.__doc__ = textwrap.dedent(
        f"""
        Auto-generated NumPy function from SymPy expression.

        expr: {expr_sym!r}
        vars: {arg_names}
        """
    ).strip()

    if t0 is not None:
        logger.debug(
            "numpify: compiled %r vars=%s in %.2f ms",
            expr_sym,
            arg_names,
            1000.0 * (time.perf_counter() - t0),
        )

    return NumpifiedFunction(fn=fn, symbolic=expr_sym, vars=vars_tuple, source=src)


# ---------------------------------------------------------------------------
# Cached compilation
# ---------------------------------------------------------------------------

_NUMPIFY_CACHE_MAXSIZE = 256


@lru_cache(maxsize=_NUMPIFY_CACHE_MAXSIZE)
def _numpify_cached_impl(expr: sp.Basic, vars_tuple: Tuple[sp.Symbol, ...]) -> NumpifiedFunction:
    """Compile an expression on cache misses for :func:`numpify_cached`."""
    logger.debug("numpify_cached: cache MISS (vars=%s)", [a.name for a in vars_tuple])
    return _numpify_uncached(expr, vars=vars_tuple)


def numpify_cached(
    expr: Any,
    *,
    vars: Optional[Union[sp.Symbol, Iterable[sp.Symbol]]] = None,
) -> NumpifiedFunction:
    """Cached version of :func:`numpify`.

    The cache key is the sympified expression plus the normalized ``vars``
    tuple. Clear it with ``numpify_cached.cache_clear()``.
    """
    expr_sym = sp.sympify(expr)
    if not isinstance(expr_sym, sp.Basic):
        raise TypeError(f"numpify_cached expects a SymPy expression, got {type(expr_sym)}")
    return _numpify_cached_impl(expr_sym, _normalize_vars(expr_sym, vars))


# Expose cache controls on the public wrapper.
numpify_cached.cache_info = _numpify_cached_impl.cache_info  # type: ignore[attr-defined]
numpify_cached.cache_clear = _numpify_cached_impl.cache_clear  # type: ignore[attr-defined]
