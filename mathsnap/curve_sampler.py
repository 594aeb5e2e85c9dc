"""Trace ``y=f(x)`` / ``x=f(y)`` relations into drawable curve data.

Purpose
-------
Defines ``CurveSampler``, the unit that turns one expression string into one
``PlotResult``: path segments in canvas coordinates for drawing and a flat
list of points (canvas and domain coordinates) for tap hit-testing.

Concepts and structure
----------------------
- The *orientation* decides which axis is swept. ``y=...`` sweeps ``x``;
  ``x=...`` sweeps ``y``. Sweeping the right axis is what lets a sideways
  parabola such as ``x=y^2`` render as one curve.
- Samples come from a fixed grid (``SampleConfig``), one evaluator call each.
  A sample that fails to evaluate, or evaluates non-finite, ends the current
  segment. A jump larger than ``max_jump`` between consecutive valid samples
  also ends it, which catches asymptotes the evaluator reports as large
  finite values.
- Results are memoized in a ``PlotCache`` owned by the sampler instance.

Important gotchas
-----------------
- ``sample`` never raises for bad input. Unparseable, empty, or non-graphable
  expressions produce an empty ``PlotResult``.
- Cached results are shared objects; treat them as read-only.

Examples
--------
>>> sampler = CurveSampler()
>>> result = sampler.sample("y=x^2", 1156, 1156, 34)
>>> result.is_empty
False
>>> sampler.sample("y = x^2", 1156, 1156, 34) is result
True
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Literal, Optional, Sequence, Tuple

import numpy as np

from .InputConvert import InputConvert
from .ParseExpression import normalize_expression
from .evaluator import EvaluationError, ExpressionEvaluator, SympyEvaluator

__all__ = [
    "CurveSampler",
    "Orientation",
    "PathSegment",
    "PlotCache",
    "PlotPoint",
    "PlotResult",
    "SampleConfig",
    "solve_for_y",
    "split_graphable",
]

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

Orientation = Literal["y_of_x", "x_of_y"]


@dataclass(frozen=True)
class SampleConfig:
    """Trace density and discontinuity settings for one sampling run.

    Parameters
    ----------
    domain_start, domain_end : float
        Sweep interval for the independent variable (inclusive).
    step : float
        Distance between consecutive samples.
    max_jump : float
        Largest allowed change of the dependent value between consecutive
        valid samples, in domain units, before a new segment is started.

    Values may be given as numbers or as strings SymPy can evaluate
    (``"-10*pi"``, ``"1/20"``).
    """

    domain_start: float = -30.0
    domain_end: float = 30.0
    step: float = 0.1
    max_jump: float = 100.0

    def __post_init__(self) -> None:
        """Coerce numeric-like fields and validate the sweep."""
        for name in ("domain_start", "domain_end", "step", "max_jump"):
            object.__setattr__(self, name, InputConvert(getattr(self, name), float, name=name))
        if self.domain_start >= self.domain_end:
            raise ValueError(
                f"domain_start must be < domain_end, got {self.domain_start} >= {self.domain_end}"
            )
        if self.step <= 0:
            raise ValueError(f"step must be > 0, got {self.step}")
        if self.max_jump <= 0:
            raise ValueError(f"max_jump must be > 0, got {self.max_jump}")

    @property
    def sample_count(self) -> int:
        """Number of samples in the sweep, both endpoints included."""
        return int(math.floor((self.domain_end - self.domain_start) / self.step + 1e-9)) + 1

    def sample_values(self) -> np.ndarray:
        """Return the sweep grid.

        Values are computed from the sample index (not by repeated addition)
        and rounded, so ``0`` is hit exactly when it lies on the grid.
        """
        idx = np.arange(self.sample_count, dtype=float)
        return np.round(self.domain_start + idx * self.step, 10) + 0.0


@dataclass(frozen=True)
class PlotPoint:
    """One valid sample.

    ``domain_value`` and ``range_value`` are the mathematical x and y of the
    point (horizontal and vertical axis), whichever of them was swept.
    """

    canvas_x: float
    canvas_y: float
    domain_value: float
    range_value: float

    @property
    def x(self) -> float:
        return self.domain_value

    @property
    def y(self) -> float:
        return self.range_value


@dataclass(frozen=True)
class PathSegment:
    """Contiguous run of canvas points drawn as one unbroken line.

    ``domain_points`` holds the same samples in domain coordinates, for
    renderers that draw in axis units rather than canvas units.
    """

    points: Tuple[Tuple[float, float], ...]
    domain_points: Tuple[Tuple[float, float], ...] = ()

    @classmethod
    def from_points(cls, run: Sequence[PlotPoint]) -> "PathSegment":
        return cls(
            points=tuple((p.canvas_x, p.canvas_y) for p in run),
            domain_points=tuple((p.x, p.y) for p in run),
        )

    def commands(self) -> list[tuple[str, float, float]]:
        """Return move/line drawing instructions: ``("M", x, y)``, ``("L", x, y)``..."""
        return [
            ("M" if i == 0 else "L", cx, cy)
            for i, (cx, cy) in enumerate(self.points)
        ]

    def to_svg_path(self, precision: int = 2) -> str:
        return " ".join(
            f"{op} {cx:.{precision}f} {cy:.{precision}f}" for op, cx, cy in self.commands()
        )

    def __len__(self) -> int:
        return len(self.points)


@dataclass(frozen=True)
class PlotResult:
    """Drawable output for one expression.

    Parameters
    ----------
    expression : str
        Normalized expression the result was computed for.
    orientation : {"y_of_x", "x_of_y"} or None
        Swept axis, ``None`` when the expression is not graphable.
    segments : tuple[PathSegment, ...]
        Drawing segments in order of the sweep.
    points : tuple[PlotPoint, ...]
        Every valid sample, independent of segment boundaries.
    """

    expression: str
    orientation: Optional[Orientation] = None
    segments: Tuple[PathSegment, ...] = ()
    points: Tuple[PlotPoint, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.points

    def to_svg_path(self, precision: int = 2) -> str:
        return " ".join(seg.to_svg_path(precision) for seg in self.segments)


@dataclass
class PlotCache:
    """Unbounded per-session memo of sampling results.

    Entries are never invalidated: a key fully determines its result.
    """

    _entries: dict[tuple, PlotResult] = field(default_factory=dict)
    hits: int = 0
    misses: int = 0

    def get(self, key: tuple) -> Optional[PlotResult]:
        found = self._entries.get(key)
        if found is None:
            self.misses += 1
        else:
            self.hits += 1
        return found

    def put(self, key: tuple, result: PlotResult) -> None:
        self._entries[key] = result

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def split_graphable(expression: str) -> Optional[tuple[Orientation, str]]:
    """Split ``"y=f(x)"``/``"x=f(y)"`` into orientation and formula body.

    Returns ``None`` when the expression has neither prefix or an empty body.

    Examples
    --------
    >>> split_graphable("y = 2x + 3")
    ('y_of_x', '2x+3')
    >>> split_graphable("x^2 - 4 = 0") is None
    True
    """
    text = normalize_expression(expression)
    if text.lower().startswith("y="):
        orientation: Orientation = "y_of_x"
    elif text.lower().startswith("x="):
        orientation = "x_of_y"
    else:
        return None
    body = text[2:]
    if not body:
        return None
    return orientation, body


class CurveSampler:
    """Sample expressions into ``PlotResult`` objects, memoizing per key.

    Parameters
    ----------
    config : SampleConfig or None
        Sweep settings; defaults to ``SampleConfig()``.
    evaluator : ExpressionEvaluator or None
        Numeric capability; defaults to a fresh ``SympyEvaluator``.
    cache : PlotCache or None
        Result memo; a new one is created per sampler when omitted.
    """

    def __init__(
        self,
        config: Optional[SampleConfig] = None,
        evaluator: Optional[ExpressionEvaluator] = None,
        cache: Optional[PlotCache] = None,
    ) -> None:
        self.config = config if config is not None else SampleConfig()
        self.evaluator: ExpressionEvaluator = evaluator if evaluator is not None else SympyEvaluator()
        self.cache = cache if cache is not None else PlotCache()

    def sample(
        self,
        expression: str,
        canvas_width: float,
        canvas_height: float,
        unit_size: float,
    ) -> PlotResult:
        """Trace ``expression`` into canvas segments and hit-test points.

        Parameters
        ----------
        expression : str
            ``"y=<f(x)>"`` or ``"x=<f(y)>"``; whitespace is ignored.
        canvas_width, canvas_height : float
            Canvas size; the origin is drawn at its center.
        unit_size : float
            Canvas length of one domain unit.

        Returns
        -------
        PlotResult
            Possibly empty; never raises for malformed expressions.
        """
        normalized = normalize_expression(expression)
        key = (normalized, float(canvas_width), float(canvas_height), float(unit_size))
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("sample: cache hit for %r", normalized)
            return cached

        t0 = time.perf_counter()
        result = self._sample_uncached(normalized, float(canvas_width), float(canvas_height), float(unit_size))
        self.cache.put(key, result)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "sample: %r -> %d points in %d segments (%.2f ms)",
                normalized,
                len(result.points),
                len(result.segments),
                1000.0 * (time.perf_counter() - t0),
            )
        return result

    def _sample_uncached(
        self,
        normalized: str,
        width: float,
        height: float,
        unit: float,
    ) -> PlotResult:
        split = split_graphable(normalized)
        if split is None:
            logger.debug("sample: %r is not a y=f(x) or x=f(y) relation", normalized)
            return PlotResult(expression=normalized)
        orientation, body = split
        swept = "x" if orientation == "y_of_x" else "y"

        segments: list[PathSegment] = []
        points: list[PlotPoint] = []
        current: list[PlotPoint] = []
        last_dependent: Optional[float] = None
        failures = 0

        for value in self.config.sample_values():
            independent = float(value)
            try:
                dependent = float(self.evaluator.evaluate(body, {swept: independent}))
            except EvaluationError:
                dependent = math.nan
            if not math.isfinite(dependent):
                failures += 1
                if current:
                    segments.append(PathSegment.from_points(current))
                    current = []
                continue

            if orientation == "y_of_x":
                x, y = independent, dependent
            else:
                x, y = dependent, independent
            canvas_x = width / 2 + x * unit
            canvas_y = height / 2 - y * unit

            if last_dependent is not None and abs(dependent - last_dependent) > self.config.max_jump:
                if current:
                    segments.append(PathSegment.from_points(current))
                    current = []

            point = PlotPoint(canvas_x, canvas_y, x, y)
            current.append(point)
            points.append(point)
            last_dependent = dependent

        if current:
            segments.append(PathSegment.from_points(current))

        if failures and not points:
            logger.debug("sample: %r produced no valid samples", normalized)
        return PlotResult(
            expression=normalized,
            orientation=orientation,
            segments=tuple(segments),
            points=tuple(points),
        )


def solve_for_y(
    expression: str,
    x_target: float,
    evaluator: Optional[ExpressionEvaluator] = None,
    *,
    tolerance: float = 0.01,
    max_iterations: int = 50,
) -> Optional[float]:
    """Approximate ``y`` with ``f(y) == x_target`` for ``x=f(y)``.

    Fixed-point relaxation from ``y=0``: ``y += 0.1 * (x_target - f(y))``.
    Returns ``None`` if evaluation fails or the iteration does not reach
    ``tolerance`` within ``max_iterations`` steps.

    Examples
    --------
    >>> round(solve_for_y("x=2*y", 4.0), 1)
    2.0
    """
    evaluator = evaluator if evaluator is not None else SympyEvaluator()
    normalized = normalize_expression(expression)
    body = normalized[2:] if normalized.lower().startswith("x=") else normalized

    y_guess = 0.0
    for _ in range(max_iterations):
        try:
            x_calc = evaluator.evaluate(body, {"y": y_guess})
        except EvaluationError:
            return None
        error = x_target - x_calc
        if abs(error) < tolerance:
            return y_guess
        y_guess += error * 0.1
    return None
